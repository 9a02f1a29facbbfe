"""Simulation lifecycle bound to an external frame scheduler."""

from __future__ import annotations

import logging
import random
import time
from pathlib import Path
from typing import Callable, Sequence

from .clock import SimulationClock
from .collision import CollisionResult
from .config import PhysicsConfig
from .engine import PhysicsEngine
from .interaction import InteractionController
from .recording import (
    AudioTrack,
    EncoderOptions,
    MediaArtifact,
    MediaEncoder,
    RecordingController,
)
from .render import FrameView, Surface, paint_frame, random_display_color
from .scheduling import FrameScheduler
from .state import Boundary, Color, SimulationMode, TextElement, initial_ball


logger = logging.getLogger(__name__)


class SimulationInitError(RuntimeError):
    """Raised when a required collaborator is missing at construction."""


class CircleSimulation:
    """A ball bouncing inside a circle, ticked by a cooperative scheduler.

    Each tick runs one physics step and one render, then asks the scheduler
    for the next tick. ``stop`` simply stops re-arming, so no tick can run
    after it returns.
    """

    def __init__(
        self,
        surface: Surface | None,
        audio_destination: AudioTrack | None,
        scheduler: FrameScheduler,
        *,
        texts: Sequence[TextElement] = (),
        on_collision: Callable[[CollisionResult], None] | None = None,
        on_render: Callable[[], None] | None = None,
        config: PhysicsConfig | None = None,
        encoder: MediaEncoder | None = None,
        options_factory: Callable[[], EncoderOptions] | None = None,
        time_source: Callable[[], float] = time.perf_counter,
        rng: random.Random | None = None,
    ) -> None:
        if surface is None:
            raise SimulationInitError("drawing surface is unavailable")
        if audio_destination is None:
            raise SimulationInitError("audio mixing destination is unavailable")

        self.surface = surface
        self._audio_destination = audio_destination
        self._scheduler = scheduler
        self._rng = rng
        self._on_collision = on_collision
        self._on_render = on_render
        self._texts: list[TextElement] = list(texts)
        self._running = False
        self._tick_handle: object | None = None
        self.mode = SimulationMode.IDLE

        self.clock = SimulationClock(time_source)
        self.boundary = Boundary.from_surface(surface.width, surface.height)
        self.engine = PhysicsEngine(
            self.boundary,
            initial_ball(surface.width, surface.height),
            config,
            self.clock,
        )
        self.engine.set_collision_listener(self._handle_collision)
        self.interaction = InteractionController(
            self.engine,
            on_grab=self._grab,
            on_release=self._release,
            on_render=self.render,
        )
        self.recorder = RecordingController(
            encoder,
            surface.capture_frame_rgba,
            options_factory or _default_options,
        )
        self.color: Color = random_display_color(self._rng)
        self.reset()

    @property
    def config(self) -> PhysicsConfig:
        return self.engine.config

    @property
    def audio_destination(self) -> AudioTrack:
        return self._audio_destination

    @property
    def texts(self) -> tuple[TextElement, ...]:
        return tuple(self._texts)

    def is_running(self) -> bool:
        return self._running

    def can_start(self) -> bool:
        return not self._running and not self.interaction.is_dragging

    def set_collision_listener(
        self, listener: Callable[[CollisionResult], None] | None
    ) -> None:
        self._on_collision = listener

    def set_render_listener(self, listener: Callable[[], None] | None) -> None:
        self._on_render = listener

    def update_text_elements(self, texts: Sequence[TextElement]) -> None:
        self._texts = list(texts)

    def set_gravity(self, value: float) -> None:
        self.engine.config.set_gravity(value)

    def set_velocity_increase(self, value: float) -> None:
        self.engine.config.set_velocity_increase(value)

    def set_velocity_decay(self, value: float) -> None:
        self.engine.config.set_velocity_decay(value)

    def set_ball_growth_rate(self, value: float) -> None:
        self.engine.config.set_ball_growth_rate(value)

    def start(self) -> None:
        if self._running:
            return
        if not self.can_start():
            logger.debug("start ignored while dragging")
            return
        self.clock.resume()
        self._running = True
        self.mode = SimulationMode.RUNNING
        logger.debug("simulation started at t=%.3f", self.clock.elapsed)
        self._animate()

    def stop(self) -> None:
        if self._tick_handle is not None:
            self._scheduler.cancel(self._tick_handle)
            self._tick_handle = None
        if not self._running:
            return
        self._running = False
        self.clock.pause()
        if self.mode is SimulationMode.RUNNING:
            self.mode = SimulationMode.IDLE
        logger.debug("simulation stopped at t=%.3f", self.clock.elapsed)

    def reset(self) -> None:
        self.engine.reset()
        self.clock.reset()
        self.color = random_display_color(self._rng)

    def step(self) -> CollisionResult:
        """Run one physics step and one render outside the scheduler.

        While the ball is being dragged physics stays suspended and the
        ball is returned unchanged.
        """
        if self.interaction.is_dragging:
            return CollisionResult.unchanged(self.engine.ball)
        result = self.engine.step()
        self.render()
        return result

    def render(self) -> None:
        paint_frame(self.surface, self.frame_view())
        self.recorder.capture_frame()
        if self._on_render is not None:
            self._on_render()

    def frame_view(self) -> FrameView:
        return FrameView(
            ball=self.engine.ball,
            boundary=self.boundary,
            motion_trail=self.engine.motion_trail,
            collision_points=self.engine.collision_points,
            elapsed=self.clock.elapsed,
            color=self.color,
            texts=self.texts,
        )

    def handle_pointer_down(self, x: float, y: float) -> bool:
        return self.interaction.pointer_down(x, y)

    def handle_pointer_move(self, x: float, y: float) -> None:
        self.interaction.pointer_move(x, y)

    def handle_pointer_up(self) -> None:
        self.interaction.pointer_up()

    def start_recording(
        self,
        on_complete: Callable[[MediaArtifact], None] | None = None,
        audio_stream: AudioTrack | None = None,
    ) -> bool:
        return self.recorder.start_capture(on_complete, audio_stream)

    def stop_recording(self) -> bool:
        return self.recorder.stop_capture()

    def _animate(self) -> None:
        self._tick_handle = None
        if not self._running:
            return
        self.engine.step()
        self.render()
        if self._running and self._tick_handle is None:
            self._tick_handle = self._scheduler.request_tick(self._animate)

    def _grab(self) -> None:
        self.stop()
        self.mode = SimulationMode.DRAGGING

    def _release(self) -> None:
        self.mode = SimulationMode.IDLE
        self.start()

    def _handle_collision(self, result: CollisionResult) -> None:
        if self._on_collision is not None:
            self._on_collision(result)


def _default_options() -> EncoderOptions:
    return EncoderOptions(output_path=Path("recording.mp4"))
