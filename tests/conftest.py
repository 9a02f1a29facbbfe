from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import numpy as np
import pytest

from circle_bounce.core.recording import EncoderOptions, MediaArtifact
from circle_bounce.core.scheduling import ManualScheduler
from circle_bounce.core.simulation import CircleSimulation


class FakeTime:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSurface:
    """Records every paint call as (name, args)."""

    def __init__(self, width: int = 650, height: int = 650) -> None:
        self.width = width
        self.height = height
        self.ops: list[tuple[str, tuple[Any, ...]]] = []
        self.captures = 0

    def clear(self, color: Any) -> None:
        self.ops.append(("clear", (color,)))

    def stroke_arc(self, cx: float, cy: float, radius: float, color: Any, width: float) -> None:
        self.ops.append(("stroke_arc", (cx, cy, radius, color, width)))

    def fill_arc(self, cx: float, cy: float, radius: float, color: Any) -> None:
        self.ops.append(("fill_arc", (cx, cy, radius, color)))

    def line(self, x0: float, y0: float, x1: float, y1: float, color: Any, width: float) -> None:
        self.ops.append(("line", (x0, y0, x1, y1, color, width)))

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Any,
        font: str,
        size: int,
        bold: bool = False,
    ) -> None:
        self.ops.append(("draw_text", (text, x, y, color, font, size, bold)))

    def capture_frame_rgba(self) -> np.ndarray:
        self.captures += 1
        return np.zeros((self.height, self.width, 4), dtype=np.uint8)

    def count(self, name: str) -> int:
        return sum(1 for op, _ in self.ops if op == name)


class FakeAudio:
    sample_rate = 8000

    def mixdown(self, start: float, end: float) -> np.ndarray:
        return np.zeros(max(0, int((end - start) * self.sample_rate)), dtype=np.float32)


class FakeEncoder:
    """Encoder double whose completion is triggered by the test."""

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.state = "inactive"
        self.begun = 0
        self.frames = 0
        self.tracks: list[Any] = []
        self.options: EncoderOptions | None = None
        self._source: Callable[[], np.ndarray] | None = None
        self._callback: Callable[[MediaArtifact | None], None] | None = None

    def begin(self, frame_source: Any, audio_tracks: Any, options: EncoderOptions) -> None:
        if self.state not in ("inactive", "error"):
            return
        self.begun += 1
        self._source = frame_source
        self.tracks = list(audio_tracks)
        self.options = options
        self.frames = 0
        self.state = "recording"

    def push_frame(self) -> None:
        if self.state != "recording" or self._source is None:
            return
        self._source()
        self.frames += 1

    def finish(self, callback: Callable[[MediaArtifact | None], None]) -> None:
        if self.state != "recording":
            return
        self.state = "stopping"
        self._callback = callback

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def complete(self, ok: bool = True) -> None:
        callback = self._callback
        assert callback is not None
        self._callback = None
        self.state = "inactive"
        path = self.options.output_path if self.options is not None else Path("out.mp4")
        callback(MediaArtifact(path=path, frames_written=self.frames, duration=1.0) if ok else None)


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def simulation(
    surface: FakeSurface,
    scheduler: ManualScheduler,
    fake_time: FakeTime,
    encoder: FakeEncoder,
    tmp_path: Path,
) -> CircleSimulation:
    return CircleSimulation(
        surface,
        FakeAudio(),
        scheduler,
        encoder=encoder,
        options_factory=lambda: EncoderOptions(output_path=tmp_path / "capture.mp4"),
        time_source=fake_time,
    )
