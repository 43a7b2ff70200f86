"""TextEditController 단위 테스트. AppContext에 mock 협력자를 채워 Qt 부담 최소화."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from textcut.errors import Severity
from textcut.models.clip import ClipInfo, Interval
from textcut.models.transcript import Token
from textcut.ui.controllers.app_context import AppContext
from textcut.ui.controllers.text_edit_controller import RecognitionState, TextEditController

HELLO_WORLD = (
    b'{"result":[{"word":"hello","start":0.2,"end":0.6},'
    b'{"word":"world","start":0.7,"end":1.1}]}'
)


class _Signal:
    """connect/disconnect/emit만 흉내내는 시그널."""

    def __init__(self):
        self._slots = []

    def connect(self, slot):
        self._slots.append(slot)

    def disconnect(self, slot):
        self._slots.remove(slot)

    def emit(self, *args):
        for slot in list(self._slots):
            slot(*args)


class _FakeProcess:
    def __init__(self):
        self.stdout_ready = _Signal()
        self.stderr_ready = _Signal()
        self.finished = _Signal()
        self.started_with = None
        self.killed = False
        self.deleted = False

    def start(self, program, arguments):
        self.started_with = (program, arguments)

    def kill(self):
        self.killed = True

    def deleteLater(self, *_args):
        self.deleted = True

    def wait_for_finished(self, msecs=3000):
        if self.killed and not self.deleted:
            self.finished.emit(9, True)
        return True


def _make_ctx(tmp_path: Path, clip: ClipInfo | None = None) -> tuple[AppContext, list[_FakeProcess]]:
    script = tmp_path / "speechtotext.py"
    script.write_text("# recognizer\n")
    clip = clip or ClipInfo("1", "a.mp4", "/media/a.mp4", 25.0, 10.0)

    ctx = AppContext()
    ctx.monitor = MagicMock()
    ctx.monitor.active_clip_id.return_value = clip.clip_id
    ctx.timeline = MagicMock()
    ctx.clip_index = MagicMock()
    ctx.clip_index.get_clip.side_effect = lambda cid: clip if cid == clip.clip_id else None
    ctx.playlist_writer = MagicMock()
    ctx.playlist_dir = tmp_path
    ctx.settings = MagicMock()
    ctx.settings.effective_script_path.return_value = script
    ctx.settings.effective_model_dir.return_value = tmp_path / "models"
    ctx.settings.get_zone_only.return_value = False
    ctx.settings.get_language_model.return_value = ""
    ctx.banner = MagicMock()
    ctx.editor = MagicMock()
    ctx.panel = MagicMock()
    ctx.preview_clip = MagicMock()
    ctx.confirm = MagicMock(return_value=True)
    ctx.which = MagicMock(return_value="/usr/bin/python3")

    processes: list[_FakeProcess] = []

    def factory():
        processes.append(_FakeProcess())
        return processes[-1]

    ctx.process_factory = factory
    return ctx, processes


def _last_banner(ctx: AppContext) -> tuple:
    return ctx.banner.show_message.call_args[0]


def _fill(ctrl: TextEditController) -> None:
    """블록 3개: (0.0-1.0), (1.0-2.0), (4.0-5.0) 초, 단어 2개씩."""
    doc = ctrl.document
    doc.append_block_from_recognition([Token("one", 0.0, 0.4, "1"), Token("two", 0.5, 1.0, "1")])
    doc.append_block_from_recognition([Token("three", 1.0, 1.5, "1"), Token("four", 1.6, 2.0, "1")])
    doc.append_block_from_recognition([Token("five", 4.0, 4.5, "1"), Token("six", 4.6, 5.0, "1")])


class TestStartRecognition:
    def test_missing_python(self, tmp_path: Path) -> None:
        ctx, processes = _make_ctx(tmp_path)
        ctx.which.return_value = None
        ctrl = TextEditController(ctx)
        assert ctrl.start_recognition("en") is False
        text, severity, _ = _last_banner(ctx)
        assert "python3" in text
        assert severity is Severity.WARNING
        assert processes == []

    def test_no_language_model(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        assert ctrl.start_recognition("") is False
        assert _last_banner(ctx)[1] is Severity.WARNING
        assert ctrl.state is RecognitionState.IDLE

    def test_missing_script(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctx.settings.effective_script_path.return_value = tmp_path / "nope.py"
        ctrl = TextEditController(ctx)
        assert ctrl.start_recognition("en") is False
        assert _last_banner(ctx)[1] is Severity.WARNING

    def test_no_clip(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctx.monitor.active_clip_id.return_value = None
        ctrl = TextEditController(ctx)
        assert ctrl.start_recognition("en") is False
        text, severity, _ = _last_banner(ctx)
        assert severity is Severity.INFO
        assert "Select a clip" in text

    def test_starts_process_for_whole_clip(self, tmp_path: Path) -> None:
        ctx, processes = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        assert ctrl.start_recognition("en-us") is True

        program, args = processes[0].started_with
        assert program == "/usr/bin/python3"
        assert args == [
            str(tmp_path / "speechtotext.py"),
            str(tmp_path / "models"),
            "en-us",
            "/media/a.mp4",
            "0",
            "0",
        ]
        assert ctrl.is_recognizing()
        assert _last_banner(ctx) == ("Starting speech recognition on a.mp4.", Severity.INFO)
        ctx.panel.set_recognizing.assert_called_with(True)

    def test_zone_only_uses_clip_zone(self, tmp_path: Path) -> None:
        clip = ClipInfo("1", "a.mp4", "/media/a.mp4", 25.0, 10.0, zone=Interval(50, 100))
        ctx, processes = _make_ctx(tmp_path, clip)
        ctrl = TextEditController(ctx)
        ctrl.start_recognition("en", zone_only=True)
        assert processes[0].started_with[1][-2:] == ["2", "2"]
        assert ctrl.document.clip_offset == 2.0

    def test_zone_only_read_from_settings(self, tmp_path: Path) -> None:
        clip = ClipInfo("1", "a.mp4", "/media/a.mp4", 25.0, 10.0, zone=Interval(50, 100))
        ctx, processes = _make_ctx(tmp_path, clip)
        ctx.settings.get_zone_only.return_value = True
        TextEditController(ctx).start_recognition("en")
        assert processes[0].started_with[1][-2:] == ["2", "2"]

    def test_restart_clears_previous_transcript(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        _fill(ctrl)
        ctrl.document.add_cut(Interval(0, 5))
        ctrl.start_recognition("en")
        assert ctrl.document.is_empty()
        assert ctrl.document.cut_intervals == []


class TestRecognitionRun:
    def test_stdout_builds_document_and_finishes(self, tmp_path: Path) -> None:
        ctx, processes = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.start_recognition("en")
        proc = processes[0]

        proc.stdout_ready.emit(HELLO_WORLD)
        assert ctrl.document[0].text == "hello world"
        ctx.panel.set_progress.assert_called_with(11)

        proc.stdout_ready.emit(b'{"text": ""}')
        proc.finished.emit(0, False)

        assert ctrl.state is RecognitionState.IDLE
        assert _last_banner(ctx) == ("Speech recognition finished.", Severity.POSITIVE)
        ctx.editor.move_caret_to_start.assert_called_once()
        ctx.panel.set_recognizing.assert_called_with(False)
        # 마지막 무음 블록
        assert ctrl.document.block_count == 2

    def test_crash_shows_log(self, tmp_path: Path) -> None:
        ctx, processes = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.start_recognition("en")
        proc = processes[0]
        proc.stderr_ready.emit("Traceback\n")
        proc.stderr_ready.emit("ImportError: vosk\n")
        proc.finished.emit(1, False)

        text, severity, log = _last_banner(ctx)
        assert text == "Speech recognition aborted."
        assert severity is Severity.WARNING
        assert log == "Traceback\nImportError: vosk\n"

    def test_no_speech(self, tmp_path: Path) -> None:
        ctx, processes = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.start_recognition("en")
        processes[0].stdout_ready.emit(b'{"text": ""}')
        processes[0].finished.emit(0, False)
        text, severity, _ = _last_banner(ctx)
        assert text == "No speech detected."
        assert severity is Severity.INFO

    def test_abort_discards_output(self, tmp_path: Path) -> None:
        ctx, processes = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.start_recognition("en")
        proc = processes[0]
        ctrl.abort()

        assert proc.killed
        assert ctrl.state is RecognitionState.IDLE
        proc.stdout_ready.emit(HELLO_WORLD)
        assert ctrl.document.is_empty()
        assert _last_banner(ctx)[:2] == ("Speech recognition aborted.", Severity.WARNING)

    def test_restart_asks_before_aborting(self, tmp_path: Path) -> None:
        ctx, processes = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.start_recognition("en")

        ctx.confirm.return_value = False
        assert ctrl.start_recognition("en") is False
        assert not processes[0].killed
        assert len(processes) == 1

        ctx.confirm.return_value = True
        assert ctrl.start_recognition("en") is True
        assert processes[0].killed
        assert len(processes) == 2
        assert ctrl.is_recognizing()

    def test_aborted_handle_kept_until_exit(self, tmp_path: Path) -> None:
        ctx, processes = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.start_recognition("en")
        proc = processes[0]
        ctrl.abort()

        assert ctrl._running == [proc]
        assert not proc.deleted
        banners = ctx.banner.show_message.call_count
        proc.finished.emit(9, True)
        assert ctrl._running == []
        assert proc.deleted
        # 중단 경고는 abort 시점에 한 번만
        assert ctx.banner.show_message.call_count == banners

    def test_normal_exit_releases_handle(self, tmp_path: Path) -> None:
        ctx, processes = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.start_recognition("en")
        processes[0].stdout_ready.emit(HELLO_WORLD)
        processes[0].finished.emit(0, False)
        assert ctrl._running == []
        assert processes[0].deleted

    def test_shutdown_waits_for_child(self, tmp_path: Path) -> None:
        ctx, processes = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.start_recognition("en")
        ctrl.shutdown()
        assert processes[0].killed
        assert processes[0].deleted
        assert ctrl._running == []


class TestBlockAndWordClicks:
    def test_block_click_seeks_and_loads_zone(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        _fill(ctrl)
        ctrl.on_block_clicked(1)

        ctx.monitor.request_seek.assert_called_once_with(25)
        ctx.monitor.load_clip_zone.assert_called_once_with(25, 50)
        ctx.editor.move_caret_to_block_end.assert_called_once_with(1)
        ctx.monitor.play_zone.assert_not_called()
        assert ctrl.selection.selected_blocks == [1]

    def test_double_click_plays(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        _fill(ctrl)
        ctrl.on_block_clicked(2, play=True)
        ctx.monitor.play_zone.assert_called_once()

    def test_out_of_range_block_ignored(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.on_block_clicked(0)
        ctx.monitor.request_seek.assert_not_called()

    def test_word_click_seeks(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.document.clip_offset = 2.0
        ctrl.on_word_clicked("1#0.4:0.8")
        ctx.monitor.request_seek.assert_called_once_with(60)

    def test_malformed_word_click_ignored(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        TextEditController(ctx).on_word_clicked("broken")
        ctx.monitor.request_seek.assert_not_called()

    def test_block_timecode(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        _fill(ctrl)
        assert ctrl.block_timecode(2) == "00:00:04:00"
        assert ctrl.block_timecode(7) == ""


class TestDelete:
    def test_delete_char_selection_adds_cut(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        _fill(ctrl)
        # "one two\nthree four\n..." → "two\nthr" → two, three
        ctrl.on_char_selection_changed(5, 10)
        cuts = ctrl.delete_selection()

        assert cuts == [Interval(12, 38)]
        assert ctrl.document.cut_intervals == [Interval(12, 38)]
        assert ctrl.document.to_plain_text() == "one\nfour\nfive six"
        assert not ctrl.selection.has_char_selection()

    def test_delete_selected_blocks(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        _fill(ctrl)
        ctrl.on_block_clicked(0)
        ctrl.on_block_clicked(2, ctrl=True)
        cuts = ctrl.delete_selection()

        assert sorted(cuts) == [Interval(0, 25), Interval(100, 125)]
        assert ctrl.document.to_plain_text() == "three four"
        assert not ctrl.selection.has_block_selection()

    def test_delete_without_selection_removes_empty_blocks(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        _fill(ctrl)
        ctrl.document[1].tokens[0].clip_id = "x#y"
        ctrl.document[1].tokens[1].clip_id = "x#y"
        assert ctrl.delete_selection() == []
        assert ctrl.document.block_count == 2

    def test_delete_on_empty_document(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        assert TextEditController(ctx).delete_selection() == []


class TestExport:
    def _ready(self, tmp_path: Path) -> tuple[AppContext, TextEditController]:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.clip = ctx.clip_index.get_clip("1")
        _fill(ctrl)
        return ctx, ctrl

    def test_insert_whole_document(self, tmp_path: Path) -> None:
        ctx, ctrl = self._ready(tmp_path)
        assert ctrl.insert_to_timeline() == [Interval(0, 125)]
        ctx.timeline.insert_zone.assert_called_once_with("1", 0, 125)

    def test_insert_selected_blocks_with_cut(self, tmp_path: Path) -> None:
        ctx, ctrl = self._ready(tmp_path)
        ctrl.document.add_cut(Interval(30, 40))
        ctrl.on_block_clicked(0)
        ctrl.on_block_clicked(1, ctrl=True)
        ctrl.on_block_clicked(2, ctrl=True)
        ctrl.insert_to_timeline()
        calls = [c.args for c in ctx.timeline.insert_zone.call_args_list]
        assert calls == [("1", 0, 30), ("1", 40, 50), ("1", 100, 125)]

    def test_insert_blocked_while_recognizing(self, tmp_path: Path) -> None:
        ctx, ctrl = self._ready(tmp_path)
        ctrl.state = RecognitionState.RECOGNIZING
        assert ctrl.insert_to_timeline() == []
        assert ctrl.preview_playlist() is None
        ctx.timeline.insert_zone.assert_not_called()

    def test_everything_cut_reports_empty_export(self, tmp_path: Path) -> None:
        ctx, ctrl = self._ready(tmp_path)
        ctrl.document.add_cut(Interval(0, 200))
        assert ctrl.insert_to_timeline() == []
        assert _last_banner(ctx)[:2] == ("No text to export", Severity.INFO)

    def test_preview_writes_playlist(self, tmp_path: Path) -> None:
        ctx, ctrl = self._ready(tmp_path)
        path = ctrl.preview_playlist()

        assert path is not None and path.parent == tmp_path
        args = ctx.playlist_writer.save_playlist.call_args[0]
        assert args[0] == "1"
        assert args[2] == [Interval(0, 125)]
        assert "speech" in args[3]
        ctx.preview_clip.assert_called_once_with(path, "Speech cut")
        ctrl.shutdown()
        assert not path.exists()


class TestSearch:
    def test_short_text_ignored(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        _fill(ctrl)
        assert ctrl.search("on") is None
        ctx.editor.select_range.assert_not_called()

    def test_forward_and_backward(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        _fill(ctrl)
        assert ctrl.search("four") is True
        ctx.editor.select_range.assert_called_with(14, 18)

        ctrl.on_char_selection_changed(14, 18)
        assert ctrl.search("one", backward=True) is True
        ctx.editor.select_range.assert_called_with(0, 3)

    def test_not_found(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        _fill(ctrl)
        assert ctrl.search("seven") is False


class TestLanguageModels:
    def test_empty_catalog_shows_hint(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        assert TextEditController(ctx).refresh_language_models() == []
        assert _last_banner(ctx) == ("Please install speech recognition models", Severity.INFO)

    def test_catalog_and_saved_choice(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        for name in ("en", "fr"):
            (tmp_path / "models" / name).mkdir(parents=True)
            (tmp_path / "models" / name / "mfcc.conf").write_text("")
        ctx.settings.get_language_model.return_value = "fr"
        ctrl = TextEditController(ctx)
        models = ctrl.refresh_language_models()
        assert models == ["en", "fr"]
        assert ctrl.preferred_language_model(models) == "fr"

        ctx.settings.get_language_model.return_value = "de"
        assert ctrl.preferred_language_model(models) == "en"
        assert ctrl.preferred_language_model([]) == ""

    def test_setters_persist(self, tmp_path: Path) -> None:
        ctx, _ = _make_ctx(tmp_path)
        ctrl = TextEditController(ctx)
        ctrl.set_language_model("en")
        ctrl.set_zone_only(True)
        ctx.settings.set_language_model.assert_called_once_with("en")
        ctx.settings.set_zone_only.assert_called_once_with(True)
