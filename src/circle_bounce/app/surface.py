"""QImage-backed drawing surface."""

from __future__ import annotations

import numpy as np
from PySide6 import QtCore, QtGui

from ..core.render import Paint


def to_qcolor(paint: Paint) -> QtGui.QColor:
    if isinstance(paint, str):
        return QtGui.QColor(paint)
    r, g, b, a = paint
    return QtGui.QColor.fromRgbF(r, g, b, a)


class ImageSurface:
    """Paints primitives into an offscreen RGBA image.

    The painter stays open across primitives and is closed whenever the
    pixels are read.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self._image = QtGui.QImage(self.width, self.height, QtGui.QImage.Format.Format_RGBA8888)
        self._image.fill(QtCore.Qt.GlobalColor.black)
        self._painter: QtGui.QPainter | None = None

    def image(self) -> QtGui.QImage:
        self.flush()
        return self._image

    def flush(self) -> None:
        if self._painter is not None:
            self._painter.end()
            self._painter = None

    def capture_frame_rgba(self) -> np.ndarray:
        image = self.image()
        view = np.frombuffer(image.constBits(), dtype=np.uint8)
        rows = view[: image.bytesPerLine() * self.height].reshape(self.height, image.bytesPerLine())
        return rows[:, : self.width * 4].reshape(self.height, self.width, 4).copy()

    def save(self, path: str) -> bool:
        return self.image().save(path)

    def clear(self, color: Paint) -> None:
        painter = self._active_painter()
        painter.setCompositionMode(QtGui.QPainter.CompositionMode.CompositionMode_Source)
        painter.fillRect(self._image.rect(), to_qcolor(color))
        painter.setCompositionMode(QtGui.QPainter.CompositionMode.CompositionMode_SourceOver)

    def stroke_arc(self, cx: float, cy: float, radius: float, color: Paint, width: float) -> None:
        painter = self._active_painter()
        painter.setPen(QtGui.QPen(to_qcolor(color), width))
        painter.setBrush(QtCore.Qt.BrushStyle.NoBrush)
        painter.drawEllipse(QtCore.QPointF(cx, cy), radius, radius)

    def fill_arc(self, cx: float, cy: float, radius: float, color: Paint) -> None:
        painter = self._active_painter()
        painter.setPen(QtCore.Qt.PenStyle.NoPen)
        painter.setBrush(to_qcolor(color))
        painter.drawEllipse(QtCore.QPointF(cx, cy), radius, radius)

    def line(
        self, x0: float, y0: float, x1: float, y1: float, color: Paint, width: float
    ) -> None:
        painter = self._active_painter()
        pen = QtGui.QPen(to_qcolor(color), width)
        pen.setCapStyle(QtCore.Qt.PenCapStyle.RoundCap)
        painter.setPen(pen)
        painter.drawLine(QtCore.QPointF(x0, y0), QtCore.QPointF(x1, y1))

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Paint,
        font: str,
        size: int,
        bold: bool = False,
    ) -> None:
        painter = self._active_painter()
        qfont = QtGui.QFont(font)
        qfont.setPixelSize(max(1, int(size)))
        qfont.setBold(bold)
        painter.setFont(qfont)
        painter.setPen(to_qcolor(color))
        metrics = QtGui.QFontMetricsF(qfont)
        width = metrics.horizontalAdvance(text)
        baseline = y + (metrics.ascent() - metrics.descent()) / 2
        painter.drawText(QtCore.QPointF(x - width / 2, baseline), text)

    def _active_painter(self) -> QtGui.QPainter:
        if self._painter is None:
            self._painter = QtGui.QPainter(self._image)
            self._painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing)
            self._painter.setRenderHint(QtGui.QPainter.RenderHint.TextAntialiasing)
        return self._painter
