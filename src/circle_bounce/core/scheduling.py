"""Frame scheduler contract."""

from __future__ import annotations

from typing import Callable, Protocol


TickCallback = Callable[[], None]


class FrameScheduler(Protocol):
    def request_tick(self, callback: TickCallback) -> object:
        """Arrange for ``callback`` to run once on the next frame; return a handle."""

    def cancel(self, handle: object) -> None:
        """Drop a pending request. Unknown or already fired handles are ignored."""


class ManualScheduler:
    """Scheduler driven by explicit ``advance`` calls, for headless runs."""

    def __init__(self) -> None:
        self._pending: dict[int, TickCallback] = {}
        self._next_handle = 0
        self.frames = 0

    def request_tick(self, callback: TickCallback) -> int:
        self._next_handle += 1
        self._pending[self._next_handle] = callback
        return self._next_handle

    def cancel(self, handle: object) -> None:
        self._pending.pop(handle, None)  # type: ignore[arg-type]

    @property
    def pending(self) -> int:
        return len(self._pending)

    def advance(self, frames: int = 1) -> int:
        """Fire pending callbacks for ``frames`` refreshes; return how many ran."""
        ran = 0
        for _ in range(frames):
            if not self._pending:
                break
            due = list(self._pending.values())
            self._pending.clear()
            self.frames += 1
            for callback in due:
                callback()
                ran += 1
        return ran
