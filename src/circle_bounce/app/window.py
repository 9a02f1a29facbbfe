"""Main window for the interactive simulation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from PySide6 import QtCore, QtGui, QtWidgets

from ..core.collision import CollisionResult
from ..core.recording import MediaArtifact
from ..core.simulation import CircleSimulation
from ..core.state import SimulationMode
from ..io.settings import Settings
from .audio import AudioDestination, tone
from .encoder import FfmpegEncoder
from .recording_utils import RecordingOutputs, build_metadata, write_metadata
from .scheduler import QtDispatcher, QtFrameScheduler
from .surface import ImageSurface


logger = logging.getLogger(__name__)

BASE_TONE_HZ = 440.0


class CanvasWidget(QtWidgets.QWidget):
    """Shows the surface image and forwards mouse input in surface coordinates."""

    def __init__(self, surface: ImageSurface, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self._surface = surface
        self.simulation: CircleSimulation | None = None
        self.on_pointer_change: Callable[[], None] | None = None
        self.setMinimumSize(surface.width // 2, surface.height // 2)
        self.setMouseTracking(False)

    def sizeHint(self) -> QtCore.QSize:
        return QtCore.QSize(self._surface.width, self._surface.height)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        painter.fillRect(self.rect(), QtCore.Qt.GlobalColor.black)
        target = self._target_rect()
        painter.drawImage(target, self._surface.image())
        painter.end()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:
        if self.simulation is not None and event.button() == QtCore.Qt.MouseButton.LeftButton:
            x, y = self._to_surface(event.position())
            self.simulation.handle_pointer_down(x, y)
            self._notify_pointer()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:
        if self.simulation is not None:
            x, y = self._to_surface(event.position())
            self.simulation.handle_pointer_move(x, y)

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:
        if self.simulation is not None and event.button() == QtCore.Qt.MouseButton.LeftButton:
            self.simulation.handle_pointer_up()
            self._notify_pointer()

    def _notify_pointer(self) -> None:
        if self.on_pointer_change is not None:
            self.on_pointer_change()

    def _target_rect(self) -> QtCore.QRectF:
        scale = min(self.width() / self._surface.width, self.height() / self._surface.height)
        w = self._surface.width * scale
        h = self._surface.height * scale
        return QtCore.QRectF((self.width() - w) / 2, (self.height() - h) / 2, w, h)

    def _to_surface(self, pos: QtCore.QPointF) -> tuple[float, float]:
        target = self._target_rect()
        if target.width() <= 0 or target.height() <= 0:
            return 0.0, 0.0
        x = (pos.x() - target.x()) * self._surface.width / target.width()
        y = (pos.y() - target.y()) * self._surface.height / target.height()
        return x, y


class MainWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        width: int = 720,
        height: int = 1280,
        settings: Settings | None = None,
        record_dir: Path = Path("recordings"),
    ) -> None:
        super().__init__()
        self.setWindowTitle("Circle Bounce")
        settings = settings or Settings()

        self._surface = ImageSurface(width, height)
        self._audio = AudioDestination()
        self._dispatcher = QtDispatcher(self)
        self._scheduler = QtFrameScheduler(parent=self)
        self._encoder = FfmpegEncoder(dispatch=self._dispatcher)
        self._outputs = RecordingOutputs(record_dir)

        self._canvas = CanvasWidget(self._surface, self)
        self.setCentralWidget(self._canvas)

        self._simulation = CircleSimulation(
            self._surface,
            self._audio,
            self._scheduler,
            texts=settings.texts,
            on_collision=self._on_collision,
            on_render=self._on_render,
            config=settings.physics,
            encoder=self._encoder,
            options_factory=self._outputs,
        )
        self._canvas.simulation = self._simulation
        self._canvas.on_pointer_change = self._update_action_state

        self._status_timer = QtCore.QTimer(self)
        self._status_timer.setInterval(250)
        self._status_timer.timeout.connect(self._update_status)
        self._status_timer.start()

        self._build_toolbar()
        self._simulation.render()
        self._update_action_state()
        self.statusBar().showMessage("Ready")

    @property
    def simulation(self) -> CircleSimulation:
        return self._simulation

    def _build_toolbar(self) -> None:
        self._toolbar = QtWidgets.QToolBar("Main", self)
        self._toolbar.setMovable(False)
        self.addToolBar(QtCore.Qt.ToolBarArea.TopToolBarArea, self._toolbar)

        self._action_start = QtGui.QAction("Start", self)
        self._action_start.triggered.connect(self._on_start)
        self._toolbar.addAction(self._action_start)

        self._action_stop = QtGui.QAction("Stop", self)
        self._action_stop.triggered.connect(self._on_stop)
        self._toolbar.addAction(self._action_stop)

        self._action_reset = QtGui.QAction("Reset", self)
        self._action_reset.triggered.connect(self._on_reset)
        self._toolbar.addAction(self._action_reset)

        self._toolbar.addSeparator()

        self._record_toggle = QtWidgets.QToolButton(self)
        self._record_toggle.setText("Record")
        self._record_toggle.setCheckable(True)
        self._record_toggle.toggled.connect(self._on_record_toggled)
        self._toolbar.addWidget(self._record_toggle)

        self._record_output = QtWidgets.QToolButton(self)
        self._record_output.setText("Output Folder")
        self._record_output.clicked.connect(self._on_record_output)
        self._toolbar.addWidget(self._record_output)

        self._toolbar.addSeparator()

        cfg = self._simulation.config
        self._add_spin("Gravity", cfg.gravity, 0.0, 5.0, 0.05, 3, self._simulation.set_gravity)
        self._add_spin(
            "Speed-up",
            cfg.velocity_increase_factor - 1.0,
            -0.5,
            0.5,
            0.005,
            3,
            self._simulation.set_velocity_increase,
        )
        self._add_spin(
            "Decay", cfg.velocity_decay, 0.0, 1.5, 0.0005, 4, self._simulation.set_velocity_decay
        )
        self._add_spin(
            "Growth",
            cfg.ball_growth_rate - 1.0,
            -0.5,
            0.5,
            0.005,
            3,
            self._simulation.set_ball_growth_rate,
        )

    def _add_spin(
        self,
        label: str,
        value: float,
        minimum: float,
        maximum: float,
        step: float,
        decimals: int,
        setter: Callable[[float], None],
    ) -> QtWidgets.QDoubleSpinBox:
        text = QtWidgets.QLabel(label)
        text.setContentsMargins(6, 0, 6, 0)
        self._toolbar.addWidget(text)
        spin = QtWidgets.QDoubleSpinBox(self)
        spin.setDecimals(decimals)
        spin.setRange(minimum, maximum)
        spin.setSingleStep(step)
        spin.setValue(value)
        spin.valueChanged.connect(setter)
        self._toolbar.addWidget(spin)
        return spin

    def _on_start(self) -> None:
        self._simulation.start()
        self._update_action_state()

    def _on_stop(self) -> None:
        self._simulation.stop()
        self._update_action_state()

    def _on_reset(self) -> None:
        self._simulation.reset()
        self._simulation.render()
        self._update_action_state()

    def _on_record_toggled(self, enabled: bool) -> None:
        if enabled:
            if not self._encoder.available:
                self.statusBar().showMessage("Recording requires ffmpeg on PATH.")
                self._record_toggle.setChecked(False)
                return
            if not self._simulation.start_recording(self._on_recording_complete, self._audio):
                self._record_toggle.setChecked(False)
        else:
            self._simulation.stop_recording()
        self._update_action_state()

    def _on_record_output(self) -> None:
        path = QtWidgets.QFileDialog.getExistingDirectory(
            self, "Select Recording Output Folder"
        )
        if not path:
            return
        self._outputs.base_dir = Path(path)

    def _on_recording_complete(self, artifact: MediaArtifact) -> None:
        if artifact.frames_written == 0:
            self.statusBar().showMessage("Recording failed; nothing was saved.")
            self._update_action_state()
            return
        paths = self._outputs.current
        if paths is not None:
            data = build_metadata(
                artifact=artifact,
                fps=self._outputs.fps,
                width=self._surface.width,
                height=self._surface.height,
                physics=self._simulation.config,
                start_wall_time=self._outputs.started_wall_time,
            )
            write_metadata(paths.meta_path, data)
            logger.info("recording metadata written to %s", paths.meta_path)
        self.statusBar().showMessage(f"Saved {artifact.path}")
        self._update_action_state()

    def _on_collision(self, result: CollisionResult) -> None:
        if not self._simulation.recorder.is_capturing:
            self._audio.prune(self._audio.now() - 1.0)
        self._audio.play(tone(BASE_TONE_HZ + 4.0 * result.radius))

    def _on_render(self) -> None:
        self._canvas.update()

    def _update_action_state(self) -> None:
        running = self._simulation.is_running()
        self._action_start.setEnabled(self._simulation.can_start())
        self._action_stop.setEnabled(running)
        capturing = self._simulation.recorder.is_capturing
        if self._record_toggle.isChecked() != capturing:
            self._record_toggle.blockSignals(True)
            self._record_toggle.setChecked(capturing)
            self._record_toggle.blockSignals(False)

    def _update_status(self) -> None:
        sim = self._simulation
        ball = sim.engine.ball
        text = (
            f"{sim.mode.value}  t={sim.clock.elapsed:.1f}s  "
            f"r={ball.radius:.1f}  |v|={ball.speed():.2f}  "
            f"hits={sim.engine.collision_count}"
        )
        if sim.recorder.is_capturing:
            text += f"  REC {self._encoder.frames_written}"
        if sim.mode is SimulationMode.DRAGGING:
            text += "  (dragging)"
        self.statusBar().showMessage(text)
        self._update_action_state()

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self._simulation.stop()
        self._simulation.stop_recording()
        self._encoder.join(timeout=10.0)
        super().closeEvent(event)
