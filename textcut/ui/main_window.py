"""Standalone host window around the text-based editing panel."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QFileDialog,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from textcut.models.clip import Interval
from textcut.services.media_index import MediaIndex
from textcut.services.playlist_writer import MltPlaylistWriter
from textcut.services.settings_manager import SettingsManager
from textcut.ui.clip_monitor import ClipMonitor
from textcut.ui.controllers.app_context import AppContext
from textcut.ui.text_based_edit import TextBasedEdit
from textcut.utils.config import APP_NAME, APP_VERSION, MEDIA_FILTER
from textcut.utils.i18n import tr
from textcut.utils.time_utils import frames_to_timecode

logger = logging.getLogger(__name__)


class ListTimeline:
    """``TimelineInserter`` that appends inserted zones to a list widget."""

    def __init__(self, clip_index: MediaIndex, view: QListWidget) -> None:
        self._clip_index = clip_index
        self._view = view
        self.zones: list[tuple[str, Interval]] = []

    def insert_zone(self, clip_id: str, start: int, end: int) -> None:
        clip = self._clip_index.get_clip(clip_id)
        self.zones.append((clip_id, Interval(start, end)))
        if clip is None:
            label = f"{clip_id}  {start} - {end}"
        else:
            label = (
                f"{clip.name}  {frames_to_timecode(start, clip.fps)}"
                f" - {frames_to_timecode(end, clip.fps)}"
            )
        self._view.addItem(label)


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.resize(1280, 800)

        self._media_index = MediaIndex()
        self._settings = SettingsManager()

        # ---- 위젯 ----
        self._media_list = QListWidget()
        self._monitor = ClipMonitor()
        self._timeline_view = QListWidget()
        self._timeline = ListTimeline(self._media_index, self._timeline_view)

        # ---- AppContext ----
        ctx = AppContext()
        ctx.window = self
        ctx.monitor = self._monitor
        ctx.timeline = self._timeline
        ctx.clip_index = self._media_index
        ctx.playlist_writer = MltPlaylistWriter(self._media_index)
        ctx.settings = self._settings
        ctx.preview_clip = self._on_preview_ready
        ctx.confirm = self._confirm
        self._ctx = ctx

        self._panel = TextBasedEdit(ctx)
        self._build_layout()
        self._build_menu()

        self._media_list.currentItemChanged.connect(self._on_media_selected)
        self._monitor.zone_marked.connect(self._on_zone_marked)

    def _build_layout(self):
        left = QWidget()
        left_layout = QVBoxLayout(left)
        left_layout.setContentsMargins(4, 4, 4, 4)
        left_layout.addWidget(QLabel(tr("Open Media")))
        left_layout.addWidget(self._media_list, 1)
        left_layout.addWidget(QLabel(tr("Inserted Zones")))
        left_layout.addWidget(self._timeline_view, 1)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(left)
        splitter.addWidget(self._monitor)
        splitter.addWidget(self._panel)
        splitter.setStretchFactor(1, 2)
        splitter.setStretchFactor(2, 2)
        self.setCentralWidget(splitter)

    def _build_menu(self):
        file_menu = self.menuBar().addMenu("&File")
        open_action = QAction(tr("Open Media"), self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self._on_open_media)
        file_menu.addAction(open_action)
        file_menu.addSeparator()
        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    # ---- media ----

    def _on_open_media(self):
        path, _ = QFileDialog.getOpenFileName(self, tr("Open Media"), "", MEDIA_FILTER)
        if path:
            self.open_media(Path(path))

    def open_media(self, path: Path) -> None:
        clip = self._media_index.add_media(path)
        for row in range(self._media_list.count()):
            if self._media_list.item(row).data(Qt.ItemDataRole.UserRole) == clip.clip_id:
                self._media_list.setCurrentRow(row)
                return
        item = QListWidgetItem(clip.name)
        item.setData(Qt.ItemDataRole.UserRole, clip.clip_id)
        self._media_list.addItem(item)
        self._media_list.setCurrentItem(item)

    def _on_media_selected(self, current: QListWidgetItem | None, _previous=None):
        if current is None:
            return
        clip = self._media_index.get_clip(current.data(Qt.ItemDataRole.UserRole))
        if clip is not None:
            self._monitor.load_clip(clip)

    def _on_zone_marked(self, clip_id: str, zone):
        self._media_index.set_zone(clip_id, zone)
        if zone is not None:
            self.statusBar().showMessage(f"Zone {zone.start} - {zone.end}", 3000)

    # ---- AppContext callbacks ----

    def _on_preview_ready(self, path: Path, name: str) -> None:
        logger.info(f"Preview playlist {name}: {path}")
        self.statusBar().showMessage(f"{tr('Playlist ready')}: {path}", 10000)

    def _confirm(self, question: str) -> bool:
        answer = QMessageBox.question(self, APP_NAME, question)
        return answer == QMessageBox.StandardButton.Yes

    def closeEvent(self, event):
        self._panel.controller.shutdown()
        self._monitor.stop()
        self._settings.sync()
        super().closeEvent(event)
