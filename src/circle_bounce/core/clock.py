"""Wall-clock elapsed time that survives pause and resume."""

from __future__ import annotations

import time
from typing import Callable


class SimulationClock:
    def __init__(self, time_source: Callable[[], float] = time.perf_counter) -> None:
        self._now = time_source
        self.started_at = self._now()
        self.elapsed = 0.0
        self._paused = True

    @property
    def paused(self) -> bool:
        return self._paused

    def resume(self) -> None:
        """Re-anchor the start instant so elapsed continues where it stopped."""
        if not self._paused:
            return
        self.started_at = self._now() - self.elapsed
        self._paused = False

    def pause(self) -> None:
        if self._paused:
            return
        self.elapsed = self._now() - self.started_at
        self._paused = True

    def update(self) -> float:
        if not self._paused:
            self.elapsed = self._now() - self.started_at
        return self.elapsed

    def reset(self) -> None:
        self.started_at = self._now()
        self.elapsed = 0.0
