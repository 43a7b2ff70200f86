"""Gutter painted beside the transcript: one start timecode per block."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from PySide6.QtCore import QRect, QSize, Qt
from PySide6.QtGui import QMouseEvent, QPainter, QPalette
from PySide6.QtWidgets import QWidget

from textcut.utils.config import GUTTER_MARGIN

if TYPE_CHECKING:
    from textcut.ui.video_text_edit import VideoTextEdit

# Pen roles of a block timecode
ROLE_CARET = "caret"
ROLE_SELECTED = "selected"
ROLE_NORMAL = "normal"


def block_at_y(rects: Sequence[tuple[float, float]], y: float, scroll: float) -> int:
    """Block under viewport *y*, given ``(top, height)`` rects in document coordinates."""
    doc_y = y + scroll
    for index, (top, height) in enumerate(rects):
        if top <= doc_y < top + height:
            return index
    return -1


def first_visible_block(rects: Sequence[tuple[float, float]], scroll: float) -> int:
    """First block whose bottom edge lies below the scroll offset."""
    for index, (top, height) in enumerate(rects):
        if top + height > scroll:
            return index
    return -1


def timecode_role(index: int, caret_block: int, selected: bool) -> str:
    if index == caret_block:
        return ROLE_CARET
    if selected:
        return ROLE_SELECTED
    return ROLE_NORMAL


class LineNumberArea(QWidget):
    """Block gutter of a ``VideoTextEdit``.

    Click selects a block (Ctrl toggles, Shift extends), double click selects
    and plays its zone.
    """

    def __init__(self, editor: VideoTextEdit):
        super().__init__(editor)
        self._editor = editor
        self._hovered = -1
        self.setMouseTracking(True)

    def sizeHint(self) -> QSize:
        return QSize(self._editor.line_number_area_width(), 0)

    def _block_under(self, y: float) -> int:
        return block_at_y(
            self._editor.block_rects(),
            y,
            self._editor.verticalScrollBar().value(),
        )

    # ---- paint ----

    def paintEvent(self, event):
        painter = QPainter(self)
        palette = self.palette()
        painter.fillRect(event.rect(), palette.color(QPalette.ColorRole.Window))

        rects = self._editor.block_rects()
        scroll = self._editor.verticalScrollBar().value()
        first = first_visible_block(rects, scroll)
        if first < 0:
            painter.end()
            return

        # Viewport and gutter share the same top edge
        offset = self._editor.viewport().y() - self.y()
        caret = self._editor.textCursor().blockNumber()
        selection = self._editor.selection_model
        width = self.width() - GUTTER_MARGIN
        line_height = self.fontMetrics().height()

        for index in range(first, len(rects)):
            top, height = rects[index]
            y = int(top - scroll) + offset
            if y > event.rect().bottom():
                break
            selected = selection is not None and selection.is_block_selected(index)
            if selected:
                painter.fillRect(
                    QRect(0, y, self.width(), int(height)),
                    palette.color(QPalette.ColorRole.Highlight),
                )
            role = timecode_role(index, caret, selected)
            if role == ROLE_CARET:
                painter.setPen(palette.color(QPalette.ColorRole.Link))
            elif role == ROLE_SELECTED:
                painter.setPen(palette.color(QPalette.ColorRole.HighlightedText))
            else:
                painter.setPen(palette.color(QPalette.ColorRole.Text))
            painter.drawText(
                0, y, width, line_height,
                Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter,
                self._editor.block_timecode(index),
            )
        painter.end()

    # ---- mouse ----

    def mouseMoveEvent(self, event: QMouseEvent):
        index = self._block_under(event.position().y())
        if index != self._hovered:
            self._hovered = index
            if index >= 0:
                self.setCursor(Qt.CursorShape.PointingHandCursor)
            else:
                self.setCursor(Qt.CursorShape.ArrowCursor)
        super().mouseMoveEvent(event)

    def leaveEvent(self, event):
        self._hovered = -1
        self.setCursor(Qt.CursorShape.ArrowCursor)
        super().leaveEvent(event)

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        index = self._block_under(event.position().y())
        if index >= 0:
            mods = event.modifiers()
            self._editor.block_clicked.emit(
                index,
                bool(mods & Qt.KeyboardModifier.ControlModifier),
                bool(mods & Qt.KeyboardModifier.ShiftModifier),
                False,
            )
            self.update()
        event.accept()

    def mouseDoubleClickEvent(self, event: QMouseEvent):
        index = self._block_under(event.position().y())
        if index >= 0 and event.button() == Qt.MouseButton.LeftButton:
            self._editor.block_clicked.emit(index, False, False, True)
            self.update()
        event.accept()
