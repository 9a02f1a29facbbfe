"""Scene painting through primitive surface operations."""

from __future__ import annotations

import colorsys
import math
import random
from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np

from .config import MOTION_BLUR_STEPS
from .state import Ball, Boundary, Color, TextElement
from .trails import TrailBuffer


Paint = Color | str

BACKGROUND: Color = (0.0, 0.0, 0.0, 1.0)
RING_WIDTH = 25.0
COLLISION_LINE_WIDTH = 2.0
TIMER_OFFSET = 60.0
TIMER_FONT = "Arial"
TIMER_SIZE = 24


class Surface(Protocol):
    width: int
    height: int

    def clear(self, color: Paint) -> None: ...

    def stroke_arc(
        self, cx: float, cy: float, radius: float, color: Paint, width: float
    ) -> None: ...

    def fill_arc(self, cx: float, cy: float, radius: float, color: Paint) -> None: ...

    def line(
        self, x0: float, y0: float, x1: float, y1: float, color: Paint, width: float
    ) -> None: ...

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Paint,
        font: str,
        size: int,
        bold: bool = False,
    ) -> None: ...

    def capture_frame_rgba(self) -> np.ndarray:
        """Return the current pixels as an (H, W, 4) uint8 array."""


@dataclass(frozen=True, slots=True)
class FrameView:
    """Read-only snapshot of everything a frame needs."""

    ball: Ball
    boundary: Boundary
    motion_trail: TrailBuffer
    collision_points: TrailBuffer
    elapsed: float
    color: Color
    texts: Sequence[TextElement] = ()


def random_display_color(rng: random.Random | None = None) -> Color:
    hue = (rng or random).random()
    r, g, b = colorsys.hls_to_rgb(hue, 0.5, 1.0)
    return (r, g, b, 1.0)


def trail_alpha(index: int, steps: int = MOTION_BLUR_STEPS) -> float:
    return math.floor((index + 1) / steps * 33) / 255.0


def with_alpha(color: Color, alpha: float) -> Color:
    return (color[0], color[1], color[2], alpha)


def paint_frame(surface: Surface, view: FrameView) -> None:
    cx, cy = view.boundary.center
    radius = view.boundary.radius
    ball = view.ball
    bx, by = float(ball.center[0]), float(ball.center[1])

    surface.clear(BACKGROUND)
    surface.stroke_arc(cx, cy, radius + RING_WIDTH / 2, view.color, RING_WIDTH)

    for px, py in view.collision_points:
        surface.line(px, py, bx, by, view.color, COLLISION_LINE_WIDTH)

    for text in view.texts:
        surface.draw_text(
            text.text, text.x, text.y, text.color, text.font, text.size, text.is_bold
        )

    surface.draw_text(
        f"Time: {view.elapsed:.1f}s",
        cx,
        cy + radius + TIMER_OFFSET,
        "white",
        TIMER_FONT,
        TIMER_SIZE,
    )

    for index, (px, py) in enumerate(view.motion_trail):
        surface.fill_arc(px, py, ball.radius, with_alpha(view.color, trail_alpha(index)))

    surface.fill_arc(bx, by, ball.radius, view.color)
