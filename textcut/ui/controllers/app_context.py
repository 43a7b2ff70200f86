"""AppContext: 에디터 Controller가 사용하는 외부 협력자 묶음.

호스트(MainWindow 또는 상위 애플리케이션)가 이 객체를 만들어 Controller에 주입한다.
전역 싱글톤 대신 모니터, 타임라인, 클립 인덱스 등을 명시적으로 전달한다.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Protocol

from textcut.utils.config import DEFAULT_FPS
from textcut.utils.time_utils import seconds_to_timecode

if TYPE_CHECKING:
    from PySide6.QtWidgets import QWidget

    from textcut.errors import Severity
    from textcut.models.clip import ClipInfo, Interval
    from textcut.services.settings_manager import SettingsManager
    from textcut.workers.recognition_process import RecognitionProcess


class ClipMonitor(Protocol):
    def active_clip_id(self) -> str | None:
        """Id of the clip shown in the monitor, None if nothing is loaded."""

    def request_seek(self, frame: int) -> None:
        """Move the playhead to *frame*."""

    def load_clip_zone(self, start: int, end: int) -> None:
        """Set the monitor in/out zone in frames."""

    def play_zone(self) -> None:
        """Play the current zone."""


class TimelineInserter(Protocol):
    def insert_zone(self, clip_id: str, start: int, end: int) -> None:
        """Insert frames ``[start, end)`` of *clip_id* at the timeline cursor."""


class ClipIndex(Protocol):
    def get_clip(self, clip_id: str) -> ClipInfo | None:
        """Resolve a clip id."""


class PlaylistWriter(Protocol):
    def save_playlist(
        self,
        clip_id: str,
        path: Path,
        intervals: list[Interval],
        properties: dict[str, str],
    ) -> None:
        """Write a playlist of *intervals* of *clip_id* to *path*."""


class MessageSink(Protocol):
    def show_message(self, text: str, severity: Severity, log: str = "") -> None:
        """Show a transient banner; a non-empty *log* adds a "Show log" action."""

    def hide_message(self) -> None:
        """Hide the banner."""


class AppContext:
    """Controller가 공유하는 외부 협력자 및 위젯 참조 컨테이너.

    모든 필드는 호스트가 Controller 생성 전에 설정한다.
    """

    def __init__(self) -> None:
        # ---- 외부 협력자 ----
        self.monitor: ClipMonitor = None  # type: ignore[assignment]
        self.timeline: TimelineInserter = None  # type: ignore[assignment]
        self.clip_index: ClipIndex = None  # type: ignore[assignment]
        self.playlist_writer: PlaylistWriter = None  # type: ignore[assignment]
        self.settings: SettingsManager = None  # type: ignore[assignment]

        # ---- UI ----
        self.window: QWidget | None = None
        self.banner: MessageSink = None  # type: ignore[assignment]
        self.editor: Any = None  # VideoTextEdit
        self.panel: Any = None  # TextBasedEdit

        # ---- 프로젝트 기본값 ----
        self.fps: float = DEFAULT_FPS
        self.playlist_dir: Path | None = None

        # ---- 콜백 ----
        # 미리보기 재생목록 경로와 표시 이름을 받는 sink
        self.preview_clip: Callable[[Path, str], None] = lambda path, name: None
        # 사용자 확인 (예/아니오)
        self.confirm: Callable[[str], bool] = lambda question: False
        # (seconds, fps) → 표시용 타임코드
        self.timecode: Callable[[float, float], str] = seconds_to_timecode
        # 실행 파일 탐색 (테스트에서 교체)
        self.which: Callable[[str], str | None] = shutil.which
        self.process_factory: Callable[[], RecognitionProcess] = _default_process_factory


def _default_process_factory() -> RecognitionProcess:
    from textcut.workers.recognition_process import RecognitionProcess
    return RecognitionProcess()
