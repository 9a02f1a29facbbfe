"""Simulation state containers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from .config import (
    BOUNDARY_MARGIN,
    INITIAL_BALL_RADIUS,
    INITIAL_HEIGHT_DIVISOR,
    INITIAL_VELOCITY,
    MAX_RADIUS_SCALE,
)


ArrayF = NDArray[np.float64]
Color = tuple[float, float, float, float]


class SimulationMode(Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAGGING = "dragging"


@dataclass(slots=True)
class Ball:
    center: ArrayF
    velocity: ArrayF
    radius: float = INITIAL_BALL_RADIUS

    def __post_init__(self) -> None:
        self.center = np.array(self.center, dtype=np.float64)
        self.velocity = np.array(self.velocity, dtype=np.float64)
        self.radius = float(self.radius)
        if self.center.shape != (2,):
            raise ValueError("center must have shape (2,)")
        if self.velocity.shape != (2,):
            raise ValueError("velocity must have shape (2,)")

    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    def contains(self, x: float, y: float) -> bool:
        """Return True if the point lies on or inside the ball."""
        return float(np.hypot(x - self.center[0], y - self.center[1])) <= self.radius

    def clone(self) -> "Ball":
        return Ball(center=self.center.copy(), velocity=self.velocity.copy(), radius=self.radius)


@dataclass(frozen=True, slots=True)
class Boundary:
    center: tuple[float, float]
    radius: float

    @classmethod
    def from_surface(
        cls, width: float, height: float, margin: float = BOUNDARY_MARGIN
    ) -> "Boundary":
        return cls(center=(width / 2, height / 2), radius=min(width, height) / 2 - margin)

    @property
    def max_ball_radius(self) -> float:
        return self.radius * MAX_RADIUS_SCALE

    def distance_to(self, point: ArrayF) -> float:
        return float(np.hypot(point[0] - self.center[0], point[1] - self.center[1]))


@dataclass(frozen=True, slots=True)
class TextElement:
    """Overlay text painted as-is on every frame."""

    text: str
    x: float
    y: float
    color: str = "white"
    font: str = "Arial"
    size: int = 24
    is_bold: bool = False


def initial_ball(width: float, height: float) -> Ball:
    return Ball(
        center=np.array([width / 2, height / INITIAL_HEIGHT_DIVISOR]),
        velocity=np.array(INITIAL_VELOCITY),
        radius=INITIAL_BALL_RADIUS,
    )
