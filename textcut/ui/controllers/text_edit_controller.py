"""TextEditController: 음성 인식, 블록 선택, 삭제, 타임라인 삽입/미리보기 로직."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from textcut.errors import (
    ExportEmpty,
    MalformedHref,
    NoClipSelected,
    NoLanguageModel,
    NoSpeechDetected,
    RecognizerCrashed,
    RecognizerNotInstalled,
    RecognizerScriptMissing,
    Severity,
    TextCutError,
)
from textcut.models.clip import ClipInfo, Interval
from textcut.models.selection import SelectionModel
from textcut.models.transcript import TranscriptDocument
from textcut.services.export_service import PlaylistExporter, insert_intervals
from textcut.services.model_catalog import list_language_models
from textcut.services.recognition_driver import RecognitionRequest, RecognitionSession
from textcut.services.recognizer_logger import log_recognizer_stderr
from textcut.utils.config import RECOGNIZER_INTERPRETER, SEARCH_MIN_LENGTH
from textcut.utils.i18n import tr
from textcut.utils.time_utils import decode_href, seconds_to_frames

if TYPE_CHECKING:
    from textcut.ui.controllers.app_context import AppContext
    from textcut.workers.recognition_process import RecognitionProcess

logger = logging.getLogger(__name__)


class RecognitionState(Enum):
    IDLE = "idle"
    RECOGNIZING = "recognizing"


class TextEditController:
    """텍스트 기반 편집 패널의 상태와 동작을 담당하는 Controller.

    문서 모델(TranscriptDocument)과 선택 모델(SelectionModel)을 소유하며,
    위젯은 이 Controller를 통해서만 모델을 변경한다.
    """

    def __init__(self, ctx: AppContext) -> None:
        self.ctx = ctx
        self.document = TranscriptDocument()
        self.selection = SelectionModel()
        self.state = RecognitionState.IDLE
        self.clip: ClipInfo | None = None
        # 인식기 stderr 누적 (배너의 "로그 보기"에 사용)
        self.error_log: str = ""
        self._process: RecognitionProcess | None = None
        # finished 전까지 유지되는 인식기 핸들 (중단된 것 포함)
        self._running: list[RecognitionProcess] = []
        self._session: RecognitionSession | None = None
        self._exporter = PlaylistExporter(ctx.playlist_writer, ctx.playlist_dir)

    # ---- 상태 ----

    def is_recognizing(self) -> bool:
        return self.state is RecognitionState.RECOGNIZING

    @property
    def fps(self) -> float:
        if self.clip is not None and self.clip.fps > 0:
            return self.clip.fps
        return self.ctx.fps

    def can_export(self) -> bool:
        """Insert/preview need an idle controller and some text."""
        return not self.is_recognizing() and not self.document.is_empty()

    def show_error(self, error: TextCutError, log: str = "") -> None:
        logger.info(f"{type(error).__name__}: {error.message}")
        if self.ctx.banner is not None:
            self.ctx.banner.show_message(error.message, error.severity, log)

    # ---- 언어 모델 ----

    def refresh_language_models(self) -> list[str]:
        """설치된 언어 모델 목록을 다시 읽는다. 비어 있으면 설치 안내 배너를 띄운다."""
        models = list_language_models(self.ctx.settings.effective_model_dir())
        if not models and self.ctx.banner is not None:
            self.ctx.banner.show_message(
                tr("Please install speech recognition models"), Severity.INFO
            )
        return models

    def preferred_language_model(self, models: list[str]) -> str:
        saved = self.ctx.settings.get_language_model()
        if saved in models:
            return saved
        return models[0] if models else ""

    def set_language_model(self, name: str) -> None:
        if name:
            self.ctx.settings.set_language_model(name)

    def set_zone_only(self, enabled: bool) -> None:
        self.ctx.settings.set_zone_only(enabled)

    # ---- 음성 인식 ----

    def start_recognition(self, language: str, zone_only: bool | None = None) -> bool:
        """현재 모니터 클립에 대해 인식을 시작한다. 시작했으면 True."""
        if zone_only is None:
            zone_only = self.ctx.settings.get_zone_only()

        if self.is_recognizing():
            if not self.ctx.confirm(tr("Another recognition job is running. Abort it?")):
                return False
            self.abort(notify=False)

        if self.ctx.banner is not None:
            self.ctx.banner.hide_message()
        self.error_log = ""

        try:
            request, clip = self._prepare_request(language, zone_only)
        except TextCutError as e:
            self.show_error(e)
            return False

        self.clip = clip
        self.selection.reset()
        self.document.clear(clip_offset=request.offset_sec)
        self._session = RecognitionSession(
            self.document,
            clip.clip_id,
            self.fps,
            clip.span_duration(zone_only),
            silence_label=tr("No speech"),
            on_progress=self._on_progress,
        )

        process = self.ctx.process_factory()
        process.stdout_ready.connect(self.on_stdout)
        process.stderr_ready.connect(self.on_stderr)
        process.finished.connect(self.on_finished)
        self._running.append(process)
        process.finished.connect(process.deleteLater)
        process.finished.connect(lambda *_args: self._release(process))
        self._process = process
        self.state = RecognitionState.RECOGNIZING
        process.start(request.interpreter, request.arguments())

        logger.info(f"Recognition started on clip {clip.clip_id} ({clip.name})")
        if self.ctx.banner is not None:
            self.ctx.banner.show_message(
                tr("Starting speech recognition on {name}.", name=clip.name),
                Severity.INFO,
            )
        if self.ctx.panel is not None:
            self.ctx.panel.set_recognizing(True)
            self.ctx.panel.set_progress(0)
        return True

    def _prepare_request(self, language: str, zone_only: bool) -> tuple[RecognitionRequest, ClipInfo]:
        interpreter = self.ctx.which(RECOGNIZER_INTERPRETER)
        if not interpreter:
            raise RecognizerNotInstalled()

        if not language:
            raise NoLanguageModel()

        settings = self.ctx.settings
        script = settings.effective_script_path()
        if not Path(script).is_file():
            raise RecognizerScriptMissing()

        clip_id = self.ctx.monitor.active_clip_id() if self.ctx.monitor is not None else None
        clip = self.ctx.clip_index.get_clip(clip_id) if clip_id else None
        if clip is None or not clip.url:
            raise NoClipSelected()

        offset, duration = clip.analysis_span(zone_only)
        request = RecognitionRequest(
            interpreter=interpreter,
            script=Path(script),
            model_dir=settings.effective_model_dir(),
            language=language,
            media_url=clip.url,
            offset_sec=offset,
            duration_sec=duration,
        )
        return request, clip

    def abort(self, notify: bool = True) -> None:
        """실행 중인 인식기를 종료한다. 이후 도착하는 stdout은 버린다."""
        process = self._process
        if process is None:
            return
        self._detach_process()
        process.kill()
        self._finish_run()
        logger.info("Recognition aborted by user")
        if notify:
            self.show_error(RecognizerCrashed(), self.error_log)

    def on_stdout(self, data: bytes) -> None:
        if self._session is None:
            return
        self._session.feed(data)

    def on_stderr(self, text: str) -> None:
        self.error_log += text
        log_recognizer_stderr(text)

    def on_finished(self, exit_code: int, crashed: bool) -> None:
        self._detach_process()
        self._finish_run()

        if crashed or exit_code != 0:
            logger.warning(f"Recognizer exited with code {exit_code} (crashed={crashed})")
            self.show_error(RecognizerCrashed(), self.error_log)
        elif not self.document.has_speech():
            self.show_error(NoSpeechDetected(), self.error_log)
        elif self.ctx.banner is not None:
            self.ctx.banner.show_message(tr("Speech recognition finished."), Severity.POSITIVE)
        if self.ctx.editor is not None:
            self.ctx.editor.move_caret_to_start()

    def _on_progress(self, percent: int) -> None:
        if self.ctx.panel is not None:
            self.ctx.panel.set_progress(percent)

    def _detach_process(self) -> None:
        process = self._process
        self._process = None
        if process is None:
            return
        for signal, slot in (
            (process.stdout_ready, self.on_stdout),
            (process.stderr_ready, self.on_stderr),
            (process.finished, self.on_finished),
        ):
            try:
                signal.disconnect(slot)
            except (RuntimeError, TypeError):
                logger.debug("Recognizer signal already disconnected")

    def _release(self, process: RecognitionProcess) -> None:
        if process in self._running:
            self._running.remove(process)

    def _finish_run(self) -> None:
        self._session = None
        self.state = RecognitionState.IDLE
        if self.ctx.panel is not None:
            self.ctx.panel.set_recognizing(False)

    # ---- 선택 ----

    def on_block_clicked(self, index: int, ctrl: bool = False, shift: bool = False, play: bool = False) -> None:
        """거터 클릭: 블록 선택을 갱신하고 모니터를 해당 구간으로 이동한다."""
        if not 0 <= index < self.document.block_count:
            return
        self.selection.block_clicked(index, ctrl, shift)
        start_sec, end_sec = self.document.speech_zones[index]
        start = seconds_to_frames(start_sec, self.fps)
        end = seconds_to_frames(end_sec, self.fps)
        monitor = self.ctx.monitor
        if monitor is not None:
            monitor.request_seek(start)
            monitor.load_clip_zone(start, end)
        if self.ctx.editor is not None:
            self.ctx.editor.move_caret_to_block_end(index)
        if play and monitor is not None:
            monitor.play_zone()

    def block_timecode(self, index: int) -> str:
        """거터에 표시할 블록 시작 타임코드 (클립 좌표)."""
        if not 0 <= index < self.document.block_count:
            return ""
        start_sec = self.document.speech_zones[index][0]
        return self.ctx.timecode(start_sec, self.fps)

    def on_word_clicked(self, href: str) -> None:
        """단어 클릭: 해당 단어 시작 프레임으로 모니터를 이동한다."""
        try:
            start_sec, _ = decode_href(href)
        except MalformedHref as e:
            logger.warning(f"Ignoring word click: {e}")
            return
        frame = seconds_to_frames(start_sec + self.document.clip_offset, self.fps)
        if self.ctx.monitor is not None:
            self.ctx.monitor.request_seek(frame)

    def on_char_selection_changed(self, anchor: int, head: int) -> None:
        self.selection.set_char_selection(anchor, head)

    def snap_selection(self, anchor: int, head: int) -> tuple[int, int] | None:
        """마우스 드래그 선택을 단어 경계로 확장한 (anchor, head)."""
        snapped = self.document.snap_range(anchor, head)
        if snapped is None:
            return None
        start, end = snapped
        return (start, end) if anchor <= head else (end, start)

    # ---- 삭제 ----

    def delete_selection(self) -> list[Interval]:
        """선택 영역(문자 또는 블록)을 삭제하고 추가된 컷 구간을 반환한다.

        선택이 없으면 해석 가능한 단어가 없는 빈 블록만 정리한다.
        """
        if self.document.is_empty():
            return []
        cuts: list[Interval] = []
        if self.selection.has_block_selection():
            for index in sorted(self.selection.sorted_blocks(), reverse=True):
                if index < self.document.block_count:
                    cuts.extend(self._delete_range(*self.document.block_range(index)))
        elif self.selection.has_char_selection():
            cuts.extend(self._delete_range(*self.selection.char_range))
        else:
            dropped = self.document.remove_empty_blocks()
            logger.debug(f"Removed {dropped} empty block(s)")
        self.selection.reset()
        return cuts

    def _delete_range(self, start: int, end: int) -> list[Interval]:
        interval = self.document.delete_selection(start, end)
        if interval is None:
            return []
        cut = Interval(
            seconds_to_frames(interval[0], self.fps),
            seconds_to_frames(interval[1], self.fps),
        )
        self.document.add_cut(cut)
        logger.info(f"Cut frames {cut.start}-{cut.end}")
        return [cut]

    # ---- 내보내기 ----

    def export_intervals(self) -> list[Interval]:
        return insert_intervals(self.document, self.selection, self.fps)

    def insert_to_timeline(self) -> list[Interval]:
        """남은 구간을 타임라인에 순서대로 삽입한다."""
        if not self.can_export() or self.clip is None:
            return []
        intervals = self.export_intervals()
        if not intervals:
            self.show_error(ExportEmpty())
            return []
        for interval in intervals:
            self.ctx.timeline.insert_zone(self.clip.clip_id, interval.start, interval.end)
        logger.info(f"Inserted {len(intervals)} zone(s) of clip {self.clip.clip_id}")
        return intervals

    def preview_playlist(self) -> Path | None:
        """남은 구간으로 임시 재생목록을 만들어 미리보기로 넘긴다."""
        if not self.can_export() or self.clip is None:
            return None
        intervals = self.export_intervals()
        if not intervals:
            self.show_error(ExportEmpty())
            return None
        try:
            path = self._exporter.export(self.clip.clip_id, intervals, self.document.to_html())
        except OSError as e:
            logger.error(f"Cannot write preview playlist: {e}")
            if self.ctx.banner is not None:
                self.ctx.banner.show_message(tr("Cannot open temporary playlist"), Severity.INFO)
            return None
        self.ctx.preview_clip(path, tr("Speech cut"))
        return path

    # ---- 검색 ----

    def search(self, text: str, backward: bool = False) -> bool | None:
        """현재 커서 위치부터 *text*를 찾아 선택한다. 검색어가 너무 짧으면 None."""
        if len(text) < SEARCH_MIN_LENGTH or self.document.is_empty():
            return None
        start, end = self.selection.char_range
        found = self.document.find(text, start if backward else end, backward)
        if found is None:
            return False
        if self.ctx.editor is not None:
            self.ctx.editor.select_range(*found)
        else:
            self.selection.set_char_selection(*found)
        return True

    def shutdown(self, timeout_ms: int = 3000) -> None:
        """인식기를 중단하고 자식 프로세스가 실제로 종료될 때까지 기다린다."""
        self.abort(notify=False)
        for process in list(self._running):
            if not process.wait_for_finished(timeout_ms):
                logger.warning("Recognizer did not exit before shutdown")
        self._exporter.cleanup()
