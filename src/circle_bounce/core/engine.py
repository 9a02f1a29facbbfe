"""Per-tick ball integration."""

from __future__ import annotations

from typing import Callable

from .clock import SimulationClock
from .collision import CollisionResult, resolve_collision
from .config import MAX_COLLISION_POINTS, MOTION_BLUR_STEPS, PhysicsConfig
from .state import Ball, Boundary
from .trails import TrailBuffer


CollisionListener = Callable[[CollisionResult], None]


class PhysicsEngine:
    """Owns the ball and its trails and advances them one tick at a time."""

    def __init__(
        self,
        boundary: Boundary,
        initial_ball: Ball,
        config: PhysicsConfig | None = None,
        clock: SimulationClock | None = None,
    ) -> None:
        self.boundary = boundary
        self.config = config if config is not None else PhysicsConfig()
        self.clock = clock
        self._initial_ball = initial_ball.clone()
        self.ball = initial_ball.clone()
        self.motion_trail = TrailBuffer(MOTION_BLUR_STEPS)
        self.collision_points = TrailBuffer(MAX_COLLISION_POINTS)
        self._on_collision: CollisionListener | None = None
        self.collision_count = 0

    def set_collision_listener(self, listener: CollisionListener | None) -> None:
        self._on_collision = listener

    def reset(self) -> None:
        self.ball = self._initial_ball.clone()
        self.motion_trail.clear()
        self.collision_points.clear()
        self.collision_count = 0

    def step(self) -> CollisionResult:
        if self.clock is not None:
            self.clock.update()

        ball = self.ball
        cfg = self.config
        self.motion_trail.push(ball.center)

        ball.velocity[1] += cfg.gravity
        ball.velocity *= cfg.velocity_decay
        ball.center += ball.velocity

        result = resolve_collision(ball, self.boundary, cfg)
        if result.collided:
            ball.velocity = result.velocity
            ball.radius = result.radius
            ball.center = result.center
            self.collision_points.push(result.point)
            self.collision_count += 1
            if self._on_collision is not None:
                self._on_collision(result)
        return result
