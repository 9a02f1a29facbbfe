from __future__ import annotations

import os

import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtGui = pytest.importorskip("PySide6.QtGui")

from circle_bounce.app.surface import ImageSurface, to_qcolor  # noqa: E402
from circle_bounce.core.render import FrameView, paint_frame  # noqa: E402
from circle_bounce.core.state import Ball, Boundary  # noqa: E402
from circle_bounce.core.trails import TrailBuffer  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def qt_app():
    app = QtGui.QGuiApplication.instance() or QtGui.QGuiApplication([])
    yield app


def test_to_qcolor() -> None:
    assert to_qcolor("white").name() == "#ffffff"
    assert to_qcolor((0.0, 1.0, 0.0, 1.0)).name() == "#00ff00"


def test_capture_after_fill() -> None:
    surface = ImageSurface(64, 48)
    surface.clear((0.0, 0.0, 0.0, 1.0))
    surface.fill_arc(32.0, 24.0, 10.0, (1.0, 0.0, 0.0, 1.0))
    frame = surface.capture_frame_rgba()
    assert frame.shape == (48, 64, 4)
    assert frame.dtype == np.uint8
    assert frame[24, 32].tolist() == [255, 0, 0, 255]
    assert frame[0, 0].tolist() == [0, 0, 0, 255]


def test_paint_full_frame() -> None:
    surface = ImageSurface(650, 650)
    view = FrameView(
        ball=Ball(center=np.array([325.0, 240.0]), velocity=np.zeros(2)),
        boundary=Boundary.from_surface(650, 650),
        motion_trail=TrailBuffer(5),
        collision_points=TrailBuffer(50),
        elapsed=1.0,
        color=(0.2, 0.4, 1.0, 1.0),
    )
    paint_frame(surface, view)
    frame = surface.capture_frame_rgba()
    assert frame.shape == (650, 650, 4)
    assert frame[240, 325, 2] > 200
