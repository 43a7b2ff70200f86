"""Text-based editing panel: recognition controls, transcript view and edit actions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from textcut.ui.controllers.text_edit_controller import TextEditController
from textcut.ui.message_banner import MessageBanner
from textcut.ui.search_bar import SearchBar
from textcut.ui.video_text_edit import VideoTextEdit
from textcut.utils.i18n import tr

if TYPE_CHECKING:
    from textcut.ui.controllers.app_context import AppContext

logger = logging.getLogger(__name__)


class TextBasedEdit(QWidget):
    """Dockable panel hosting the transcript editor.

    Registers itself, its banner and its editor in *ctx* and owns the
    ``TextEditController``.
    """

    def __init__(self, ctx: AppContext, parent=None):
        super().__init__(parent)
        self.ctx = ctx
        self._build_ui()

        ctx.panel = self
        ctx.banner = self.banner
        ctx.editor = self.editor
        self.controller = TextEditController(ctx)

        self.editor.attach(
            self.controller.document,
            self.controller.selection,
            self._block_timecode,
            self.controller.snap_selection,
        )
        self._connect_signals()
        self._zone_checkbox.setChecked(ctx.settings.get_zone_only())
        self.refresh_models()
        self._update_actions()

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        # ---- 인식 컨트롤 ----
        top = QHBoxLayout()
        self._start_button = QPushButton(tr("Start Recognition"))
        top.addWidget(self._start_button)
        self._abort_button = QPushButton(tr("Abort"))
        self._abort_button.setVisible(False)
        top.addWidget(self._abort_button)

        top.addWidget(QLabel(tr("Language model:")))
        self._language_combo = QComboBox()
        self._language_combo.setMinimumWidth(120)
        top.addWidget(self._language_combo, 1)

        self._zone_checkbox = QCheckBox(tr("Analyse clip zone only"))
        top.addWidget(self._zone_checkbox)

        self._configure_button = QToolButton()
        self._configure_button.setText("⚙")
        self._configure_button.setToolTip(tr("Configure speech recognition"))
        top.addWidget(self._configure_button)
        layout.addLayout(top)

        self._progress = QProgressBar()
        self._progress.setRange(0, 100)
        self._progress.setVisible(False)
        layout.addWidget(self._progress)

        self.banner = MessageBanner()
        layout.addWidget(self.banner)

        self.editor = VideoTextEdit()
        layout.addWidget(self.editor, 1)

        # ---- 편집 액션 ----
        bottom = QHBoxLayout()
        self._delete_button = QToolButton()
        self._delete_button.setText("✂")
        self._delete_button.setToolTip(tr("Delete selected text"))
        bottom.addWidget(self._delete_button)

        self._insert_button = QToolButton()
        self._insert_button.setText("⤓")
        self._insert_button.setToolTip(tr("Insert selected blocks in timeline"))
        bottom.addWidget(self._insert_button)

        self._preview_button = QToolButton()
        self._preview_button.setText("▶")
        self._preview_button.setToolTip(tr("Play edited text"))
        bottom.addWidget(self._preview_button)

        self.search_bar = SearchBar()
        bottom.addWidget(self.search_bar, 1)
        layout.addLayout(bottom)

    def _connect_signals(self):
        c = self.controller
        self._start_button.clicked.connect(self._on_start)
        self._abort_button.clicked.connect(lambda: c.abort())
        self._language_combo.currentTextChanged.connect(c.set_language_model)
        self._zone_checkbox.toggled.connect(c.set_zone_only)
        self._configure_button.clicked.connect(self._on_configure)

        self.editor.block_clicked.connect(self._on_block_clicked)
        self.editor.word_clicked.connect(c.on_word_clicked)
        self.editor.selection_changed.connect(self._on_selection_changed)
        self.editor.delete_requested.connect(self._on_delete)

        self._delete_button.clicked.connect(self._on_delete)
        self._insert_button.clicked.connect(self._on_insert)
        self._preview_button.clicked.connect(lambda: c.preview_playlist())
        self.search_bar.search_requested.connect(self._on_search)

        QShortcut(QKeySequence.StandardKey.Find, self, self.search_bar.set_focus)
        QShortcut(QKeySequence("F3"), self, self.search_bar.search_next)
        QShortcut(QKeySequence("Shift+F3"), self, self.search_bar.search_previous)

        c.document.add_listener(lambda event: self._update_actions())

    # ---- controller callbacks (AppContext.panel) ----

    def set_recognizing(self, running: bool) -> None:
        self._start_button.setVisible(not running)
        self._abort_button.setVisible(running)
        self._progress.setVisible(running)
        self._language_combo.setEnabled(not running)
        self._update_actions()

    def set_progress(self, percent: int) -> None:
        self._progress.setValue(percent)

    # ---- slots ----

    def refresh_models(self) -> None:
        models = self.controller.refresh_language_models()
        self._language_combo.blockSignals(True)
        self._language_combo.clear()
        self._language_combo.addItems(models)
        preferred = self.controller.preferred_language_model(models)
        if preferred:
            self._language_combo.setCurrentText(preferred)
        self._language_combo.blockSignals(False)
        self._configure_button.setVisible(True)
        self._start_button.setEnabled(bool(models))

    def _on_start(self):
        self.controller.start_recognition(
            self._language_combo.currentText(),
            self._zone_checkbox.isChecked(),
        )

    def _on_configure(self):
        current = str(self.ctx.settings.effective_model_dir())
        path = QFileDialog.getExistingDirectory(self, tr("Configure speech recognition"), current)
        if path:
            self.ctx.settings.set_model_dir(path)
            self.refresh_models()

    def _on_block_clicked(self, index: int, ctrl: bool, shift: bool, play: bool):
        self.controller.on_block_clicked(index, ctrl, shift, play)
        self._update_actions()

    def _on_selection_changed(self, anchor: int, head: int):
        self.controller.on_char_selection_changed(anchor, head)
        self._update_actions()

    def _on_delete(self):
        self.controller.delete_selection()
        self._update_actions()

    def _on_insert(self):
        self.controller.insert_to_timeline()

    def _on_search(self, text: str, backward: bool):
        found = self.controller.search(text, backward)
        if found is None:
            self.search_bar.reset_tint()
        else:
            self.search_bar.show_result(found)

    def _block_timecode(self, index: int) -> str:
        return self.controller.block_timecode(index)

    def _update_actions(self):
        has_text = not self.controller.document.is_empty()
        can_export = self.controller.can_export()
        self._delete_button.setEnabled(has_text)
        self._insert_button.setEnabled(can_export)
        self._preview_button.setEnabled(can_export)
        self.search_bar.setEnabled(has_text)

    def closeEvent(self, event):
        self.controller.shutdown()
        super().closeEvent(event)
