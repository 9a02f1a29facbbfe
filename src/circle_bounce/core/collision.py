"""Ball versus circular boundary collision resolution."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .config import MIN_VELOCITY, RESTITUTION, PhysicsConfig
from .state import ArrayF, Ball, Boundary


_FALLBACK_NORMAL = np.array([0.0, 1.0], dtype=np.float64)


@dataclass(frozen=True, slots=True)
class CollisionResult:
    collided: bool
    velocity: ArrayF
    radius: float
    center: ArrayF
    point: tuple[float, float] | None = None

    @classmethod
    def unchanged(cls, ball: Ball) -> CollisionResult:
        return cls(
            collided=False,
            velocity=ball.velocity.copy(),
            radius=ball.radius,
            center=ball.center.copy(),
        )


def resolve_collision(
    ball: Ball, boundary: Boundary, config: PhysicsConfig
) -> CollisionResult:
    """Check the ball against the inner wall and compute the bounce.

    The ball is not modified. When the ball touches or crosses the wall the
    result carries the reflected and boosted velocity, the grown radius, the
    contact point on the wall and a center pulled back onto the wall.
    """
    origin = np.asarray(boundary.center, dtype=np.float64)
    offset = ball.center - origin
    distance = float(np.linalg.norm(offset))
    if distance < boundary.radius - ball.radius:
        return CollisionResult.unchanged(ball)

    normal = contact_normal(offset, distance, ball.velocity)

    dot = float(np.dot(ball.velocity, normal))
    velocity = (ball.velocity - 2.0 * dot * normal) * RESTITUTION

    radius = ball.radius
    max_radius = boundary.max_ball_radius
    if radius < max_radius:
        radius = min(radius * config.ball_growth_rate, max_radius)

    velocity = velocity * config.velocity_increase_factor

    speed = float(np.linalg.norm(velocity))
    if speed < MIN_VELOCITY:
        if speed > 0.0:
            velocity = velocity * (MIN_VELOCITY / speed)
        else:
            velocity = -normal * MIN_VELOCITY

    point = origin + boundary.radius * normal
    center = origin + (boundary.radius - radius) * normal
    return CollisionResult(
        collided=True,
        velocity=velocity,
        radius=radius,
        center=center,
        point=(float(point[0]), float(point[1])),
    )


def contact_normal(offset: ArrayF, distance: float, velocity: ArrayF) -> ArrayF:
    """Return the outward wall normal for a ball at ``offset`` from the center.

    A ball sitting exactly on the boundary center has no direction of its
    own; the direction of travel is used instead, then straight down.
    """
    if distance > 0.0:
        return offset / distance
    speed = float(np.linalg.norm(velocity))
    if speed > 0.0:
        return velocity / speed
    return _FALLBACK_NORMAL.copy()
