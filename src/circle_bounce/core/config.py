"""Physics constants and runtime tuning."""

from __future__ import annotations

from dataclasses import dataclass


INITIAL_BALL_RADIUS = 5.0
RESTITUTION = 0.95
MIN_VELOCITY = 1.0
MOTION_BLUR_STEPS = 5
MAX_COLLISION_POINTS = 50
BOUNDARY_MARGIN = 125.0
MAX_RADIUS_SCALE = 1.5
INITIAL_VELOCITY = (0.8, 0.8)
INITIAL_HEIGHT_DIVISOR = 2.7


@dataclass(slots=True)
class PhysicsConfig:
    """Tuning knobs read by the engine on every tick.

    Values are stored as the multiplicative factors the engine applies.
    Nothing is validated; odd values give odd motion, not errors.
    """

    gravity: float = 0.4
    velocity_increase_factor: float = 1.02
    velocity_decay: float = 0.9995
    ball_growth_rate: float = 1.015

    def set_gravity(self, value: float) -> None:
        self.gravity = value

    def set_velocity_increase(self, value: float) -> None:
        """Set the per-bounce speed-up as an increment (0.02 means x1.02)."""
        self.velocity_increase_factor = 1.0 + value

    def set_velocity_decay(self, value: float) -> None:
        self.velocity_decay = value

    def set_ball_growth_rate(self, value: float) -> None:
        """Set the per-bounce growth as an increment (0.015 means x1.015)."""
        self.ball_growth_rate = 1.0 + value

    def as_dict(self) -> dict[str, float]:
        return {
            "gravity": self.gravity,
            "velocity_increase_factor": self.velocity_increase_factor,
            "velocity_decay": self.velocity_decay,
            "ball_growth_rate": self.ball_growth_rate,
        }
