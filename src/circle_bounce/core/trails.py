"""Bounded position histories used for trail rendering."""

from __future__ import annotations

from collections import deque
from typing import Iterator

import numpy as np


Point = tuple[float, float]


class TrailBuffer:
    """Fixed-capacity FIFO of 2D points; the oldest entry is evicted first."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        self._points: deque[Point] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen or 0

    def push(self, point: Point | np.ndarray) -> None:
        self._points.append((float(point[0]), float(point[1])))

    def clear(self) -> None:
        self._points.clear()

    def points(self) -> np.ndarray:
        if not self._points:
            return np.zeros((0, 2), dtype=np.float64)
        return np.asarray(self._points, dtype=np.float64)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(tuple(self._points))
