"""Read-only transcript view with a timecode gutter and word-snapped selection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from PySide6.QtCore import QRect, Qt, Signal
from PySide6.QtGui import QKeyEvent, QMouseEvent, QTextCursor
from PySide6.QtWidgets import QTextEdit

from textcut.models.transcript import EVENT_APPENDED
from textcut.ui.line_number_area import LineNumberArea
from textcut.utils.config import GUTTER_DIGITS, GUTTER_MARGIN

if TYPE_CHECKING:
    from textcut.models.selection import SelectionModel
    from textcut.models.transcript import TranscriptDocument

logger = logging.getLogger(__name__)


class VideoTextEdit(QTextEdit):
    """Renders a ``TranscriptDocument`` as linked words, one paragraph per block.

    Signals:
        block_clicked(int, bool, bool, bool): Gutter click as (block, ctrl, shift, play).
        word_clicked(str): Href of the word under a plain left click.
        selection_changed(int, int): Cursor anchor and position.
        delete_requested(): Delete/Backspace pressed.
    """

    block_clicked = Signal(int, bool, bool, bool)
    word_clicked = Signal(str)
    selection_changed = Signal(int, int)
    delete_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextSelectableByMouse
            | Qt.TextInteractionFlag.TextSelectableByKeyboard
        )
        self.setUndoRedoEnabled(False)

        self._model: TranscriptDocument | None = None
        self.selection_model: SelectionModel | None = None
        # block index → gutter label
        self._timecode: Callable[[int], str] = lambda index: ""
        # (anchor, head) → word-snapped (anchor, head) or None
        self._snapper: Callable[[int, int], tuple[int, int] | None] = lambda a, b: None

        self._gutter = LineNumberArea(self)
        self.document().blockCountChanged.connect(self._update_gutter_width)
        self.verticalScrollBar().valueChanged.connect(self._gutter.update)
        # 캐럿 이동도 선택 모델에 반영
        self.cursorPositionChanged.connect(self._emit_selection)
        self.selectionChanged.connect(self._emit_selection)
        self._update_gutter_width()

    def attach(
        self,
        model: TranscriptDocument,
        selection: SelectionModel,
        timecode: Callable[[int], str],
        snapper: Callable[[int, int], tuple[int, int] | None],
    ) -> None:
        if self._model is not None:
            self._model.remove_listener(self._on_model_event)
        self._model = model
        self.selection_model = selection
        self._timecode = timecode
        self._snapper = snapper
        model.add_listener(self._on_model_event)
        self.render_all()

    # ---- rendering ----

    def _on_model_event(self, event: str) -> None:
        if event == EVENT_APPENDED:
            self._render_last_block()
        else:
            self.render_all()

    def render_all(self) -> None:
        if self._model is None:
            return
        self.blockSignals(True)
        if self._model.block_count:
            self.setHtml(self._model.to_html())
        else:
            self.clear()
        self.blockSignals(False)
        self._update_gutter_width()
        self._emit_selection()

    def _render_last_block(self) -> None:
        model = self._model
        if model is None:
            return
        rendered = self.document().blockCount()
        empty = not self.document().toPlainText()
        # Fall back to a full render when the views got out of step
        if model.block_count == 1 and empty:
            self.render_all()
            return
        if rendered != model.block_count - 1:
            logger.debug(f"View has {rendered} blocks, model {model.block_count}; full render")
            self.render_all()
            return
        cursor = QTextCursor(self.document())
        cursor.movePosition(QTextCursor.MoveOperation.End)
        cursor.insertBlock()
        cursor.insertHtml(model[-1].to_html())
        self._gutter.update()

    # ---- caret and selection ----

    def move_caret_to_start(self) -> None:
        cursor = self.textCursor()
        cursor.movePosition(QTextCursor.MoveOperation.Start)
        self.setTextCursor(cursor)

    def move_caret_to_block_end(self, index: int) -> None:
        block = self.document().findBlockByNumber(index)
        if not block.isValid():
            return
        cursor = self.textCursor()
        cursor.setPosition(block.position() + block.length() - 1)
        self.setTextCursor(cursor)
        self.ensureCursorVisible()
        self._gutter.update()

    def select_range(self, start: int, end: int) -> None:
        cursor = self.textCursor()
        cursor.setPosition(start)
        cursor.setPosition(end, QTextCursor.MoveMode.KeepAnchor)
        self.setTextCursor(cursor)
        self.ensureCursorVisible()

    def _emit_selection(self) -> None:
        cursor = self.textCursor()
        self.selection_changed.emit(cursor.anchor(), cursor.position())
        self._gutter.update()

    # ---- mouse / keyboard ----

    def mousePressEvent(self, event: QMouseEvent):
        if (
            event.button() == Qt.MouseButton.LeftButton
            and event.modifiers() == Qt.KeyboardModifier.NoModifier
        ):
            href = self.anchorAt(event.position().toPoint())
            if href:
                self.word_clicked.emit(href)
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        super().mouseReleaseEvent(event)
        cursor = self.textCursor()
        if not cursor.hasSelection():
            return
        snapped = self._snapper(cursor.anchor(), cursor.position())
        if snapped is not None and snapped != (cursor.anchor(), cursor.position()):
            self.select_range(*snapped)

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.delete_requested.emit()
            event.accept()
            return
        super().keyPressEvent(event)

    # ---- gutter ----

    def line_number_area_width(self) -> int:
        return self.fontMetrics().horizontalAdvance("9") * GUTTER_DIGITS + GUTTER_MARGIN * 2

    def block_timecode(self, index: int) -> str:
        return self._timecode(index)

    def block_rects(self) -> list[tuple[float, float]]:
        """``(top, height)`` of every block in document coordinates."""
        layout = self.document().documentLayout()
        rects = []
        block = self.document().begin()
        while block.isValid():
            rect = layout.blockBoundingRect(block)
            rects.append((rect.top(), rect.height()))
            block = block.next()
        return rects

    def _update_gutter_width(self, *_args) -> None:
        self.setViewportMargins(self.line_number_area_width(), 0, 0, 0)
        self._gutter.update()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        rect = self.contentsRect()
        self._gutter.setGeometry(
            QRect(rect.left(), rect.top(), self.line_number_area_width(), rect.height())
        )
