"""QMediaPlayer-backed clip monitor for the standalone host."""

from __future__ import annotations

import logging

from PySide6.QtCore import QUrl, Signal
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer
from PySide6.QtMultimediaWidgets import QVideoWidget
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from textcut.models.clip import ClipInfo, Interval
from textcut.utils.time_utils import frame_to_ms, frames_to_timecode, ms_to_frame

logger = logging.getLogger(__name__)


class ClipMonitor(QWidget):
    """Shows one clip, seeks by frame and plays an in/out zone.

    Signals:
        zone_marked(str, object): Clip id and the new ``Interval`` (or None)
            after the user set in/out points.
    """

    zone_marked = Signal(str, object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._clip: ClipInfo | None = None
        # 재생 구간 (ms), None이면 끝까지 재생
        self._zone_ms: tuple[int, int] | None = None
        self._mark_in: int | None = None

        self._audio_output = QAudioOutput()
        self._player = QMediaPlayer()
        self._player.setAudioOutput(self._audio_output)
        self._player.positionChanged.connect(self._on_position_changed)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        video = QVideoWidget()
        video.setMinimumSize(320, 180)
        self._player.setVideoOutput(video)
        layout.addWidget(video, 1)

        controls = QHBoxLayout()
        self._play_button = QPushButton("▶")
        self._play_button.clicked.connect(self._toggle_play)
        controls.addWidget(self._play_button)
        in_button = QPushButton("[")
        in_button.setToolTip("Set zone in")
        in_button.clicked.connect(self._mark_zone_in)
        controls.addWidget(in_button)
        out_button = QPushButton("]")
        out_button.setToolTip("Set zone out")
        out_button.clicked.connect(self._mark_zone_out)
        controls.addWidget(out_button)
        self._timecode = QLabel("00:00:00:00")
        controls.addWidget(self._timecode, 1)
        layout.addLayout(controls)

    # ---- ClipMonitor protocol ----

    def active_clip_id(self) -> str | None:
        return self._clip.clip_id if self._clip is not None else None

    def request_seek(self, frame: int) -> None:
        if self._clip is None:
            return
        self._player.setPosition(frame_to_ms(frame, self._clip.fps))

    def load_clip_zone(self, start: int, end: int) -> None:
        if self._clip is None:
            return
        self._zone_ms = (frame_to_ms(start, self._clip.fps), frame_to_ms(end, self._clip.fps))

    def play_zone(self) -> None:
        if self._zone_ms is not None:
            self._player.setPosition(self._zone_ms[0])
        self._player.play()

    # ---- host ----

    def load_clip(self, clip: ClipInfo) -> None:
        self._clip = clip
        self._zone_ms = None
        self._mark_in = None
        self._player.setSource(QUrl.fromLocalFile(clip.url))
        logger.info(f"Monitor loaded clip {clip.clip_id}: {clip.url}")

    def stop(self) -> None:
        self._player.stop()

    def _toggle_play(self):
        if self._player.playbackState() == QMediaPlayer.PlaybackState.PlayingState:
            self._player.pause()
        else:
            self._zone_ms = None
            self._player.play()

    def _current_frame(self) -> int:
        if self._clip is None:
            return 0
        return ms_to_frame(self._player.position(), self._clip.fps)

    def _mark_zone_in(self):
        self._mark_in = self._current_frame()

    def _mark_zone_out(self):
        if self._clip is None:
            return
        start = self._mark_in if self._mark_in is not None else 0
        end = self._current_frame()
        zone = Interval(start, end) if end > start else None
        self.zone_marked.emit(self._clip.clip_id, zone)

    def _on_position_changed(self, position: int):
        if self._clip is not None:
            self._timecode.setText(frames_to_timecode(ms_to_frame(position, self._clip.fps), self._clip.fps))
        if self._zone_ms is not None and position >= self._zone_ms[1]:
            if self._player.playbackState() == QMediaPlayer.PlaybackState.PlayingState:
                self._player.pause()
