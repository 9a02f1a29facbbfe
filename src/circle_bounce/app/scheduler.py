"""Qt timer scheduling and cross-thread dispatch."""

from __future__ import annotations

from typing import Callable

from PySide6 import QtCore

from ..core.scheduling import TickCallback


class QtFrameScheduler(QtCore.QObject):
    """Single-shot QTimer per requested tick, roughly one per display refresh."""

    def __init__(self, interval_ms: int = 16, parent: QtCore.QObject | None = None) -> None:
        super().__init__(parent)
        self._timer = QtCore.QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(interval_ms)
        self._timer.setTimerType(QtCore.Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._fire)
        self._callback: TickCallback | None = None
        self._handle = 0

    def request_tick(self, callback: TickCallback) -> int:
        self._handle += 1
        self._callback = callback
        self._timer.start()
        return self._handle

    def cancel(self, handle: object) -> None:
        if handle != self._handle:
            return
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        callback = self._callback
        self._callback = None
        if callback is not None:
            callback()


class QtDispatcher(QtCore.QObject):
    """Runs callables posted from worker threads on this object's thread."""

    posted = QtCore.Signal(object)

    def __init__(self, parent: QtCore.QObject | None = None) -> None:
        super().__init__(parent)
        self.posted.connect(self._run, QtCore.Qt.ConnectionType.QueuedConnection)

    def __call__(self, fn: Callable[[], None]) -> None:
        self.posted.emit(fn)

    @QtCore.Slot(object)
    def _run(self, fn: Callable[[], None]) -> None:
        fn()
