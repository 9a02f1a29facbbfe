"""Pointer dragging of the ball."""

from __future__ import annotations

from typing import Callable

from .engine import PhysicsEngine


class InteractionController:
    """Maps pointer events to drag state.

    ``on_grab`` runs when a drag starts and must stop the tick loop,
    ``on_release`` runs when it ends and restarts it, ``on_render`` repaints
    while the loop is paused.
    """

    def __init__(
        self,
        engine: PhysicsEngine,
        on_grab: Callable[[], None],
        on_release: Callable[[], None],
        on_render: Callable[[], None],
    ) -> None:
        self._engine = engine
        self._on_grab = on_grab
        self._on_release = on_release
        self._on_render = on_render
        self.is_dragging = False

    def pointer_down(self, x: float, y: float) -> bool:
        if self.is_dragging or not self._engine.ball.contains(x, y):
            return False
        self.is_dragging = True
        self._on_grab()
        return True

    def pointer_move(self, x: float, y: float) -> None:
        if not self.is_dragging:
            return
        ball = self._engine.ball
        ball.center[0] = x
        ball.center[1] = y
        ball.velocity[:] = 0.0
        self._on_render()

    def pointer_up(self) -> None:
        if not self.is_dragging:
            return
        self.is_dragging = False
        self._engine.ball.velocity[:] = 0.0
        self._on_release()
