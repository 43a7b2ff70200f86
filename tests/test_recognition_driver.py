"""인식기 출력 프로토콜 처리 테스트 (Qt/프로세스 불필요)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from textcut.models.transcript import BlockKind, TranscriptDocument
from textcut.services.recognition_driver import (
    RecognitionRequest,
    RecognitionSession,
    iter_json_objects,
)
from textcut.utils.time_utils import seconds_to_frames

HELLO_WORLD = (
    '{"result":[{"word":"hello","start":0.2,"end":0.6},'
    '{"word":"world","start":0.7,"end":1.1}]}'
)
AGAIN = '{"result":[{"word":"again","start":3.0,"end":3.4}]}'


def _session(duration: float = 10.0, offset: float = 0.0, progress=None):
    doc = TranscriptDocument(clip_offset=offset)
    session = RecognitionSession(doc, "1", 25.0, duration, "No speech", on_progress=progress)
    return doc, session


class TestRequest:
    def test_arguments(self):
        req = RecognitionRequest(
            interpreter="/usr/bin/python3",
            script=Path("/data/speechtotext.py"),
            model_dir=Path("/data/models"),
            language="en-us",
            media_url="/media/clip.mp4",
            offset_sec=2.5,
            duration_sec=10.0,
        )
        assert req.arguments() == [
            str(Path("/data/speechtotext.py")),
            str(Path("/data/models")),
            "en-us",
            "/media/clip.mp4",
            "2.5",
            "10",
        ]

    def test_whole_clip_is_zero_zero(self):
        req = RecognitionRequest("python3", Path("s.py"), Path("m"), "fr", "a.wav")
        assert req.arguments()[-2:] == ["0", "0"]


class TestIterJsonObjects:
    def test_single(self):
        assert list(iter_json_objects('{"a": 1}')) == [{"a": 1}]

    def test_multiple_in_one_chunk(self):
        assert list(iter_json_objects('{"a": 1}\n{"b": 2} {"c": 3}\n')) == [
            {"a": 1}, {"b": 2}, {"c": 3},
        ]

    def test_non_objects_skipped(self):
        assert list(iter_json_objects('[1, 2] {"a": 1} 3')) == [{"a": 1}]

    def test_garbage_stops_parsing(self):
        assert list(iter_json_objects('{"a": 1} {"b": ')) == [{"a": 1}]

    def test_whitespace_only(self):
        assert list(iter_json_objects("  \n ")) == []


class TestSentences:
    def test_first_sentence(self):
        doc, session = _session()
        assert session.feed(HELLO_WORLD.encode()) == 1
        assert doc.block_count == 1
        assert doc[0].text == "hello world"
        assert doc.speech_zones == [(0.2, 1.1)]
        assert abs(session.last_position - 28) <= 1

    def test_gap_inserts_silence_before_sentence(self):
        doc, session = _session()
        session.feed(HELLO_WORLD)
        assert session.feed(AGAIN) == 2
        assert doc.block_count == 3
        assert len(doc.speech_zones) == 3
        assert doc[1].kind is BlockKind.SILENCE
        assert doc[1].text == "No speech"
        assert doc.speech_zones[1] == pytest.approx((28 / 25, 74 / 25))
        assert doc.speech_zones[2] == (3.0, 3.4)

    def test_adjacent_sentence_has_no_silence(self):
        doc, session = _session()
        session.feed(HELLO_WORLD)
        session.feed('{"result":[{"word":"next","start":1.14,"end":1.5}]}')
        assert [b.kind for b in doc] == [BlockKind.SPEECH, BlockKind.SPEECH]

    def test_no_leading_silence(self):
        doc, session = _session()
        session.feed(AGAIN)
        assert doc.block_count == 1
        assert doc[0].kind is BlockKind.SPEECH

    def test_tokens_carry_clip_id(self):
        doc, session = _session()
        session.feed(HELLO_WORLD)
        assert doc[0].tokens[0].href == "1#0.2:0.6"

    def test_words_without_timing_skipped(self):
        doc, session = _session()
        session.feed('{"result":[{"word":"a"},{"word":"b","start":0.1,"end":0.2},{"word":"","start":0.3,"end":0.4}]}')
        assert doc[0].text == "b"

    def test_empty_result_appends_nothing(self):
        doc, session = _session()
        assert session.feed('{"result": []}') == 0
        assert not session.finished

    def test_last_position_monotonic(self):
        doc, session = _session()
        positions = []
        for chunk in (
            HELLO_WORLD,
            AGAIN,
            '{"result":[{"word":"early","start":2.0,"end":2.2}]}',
            '{"result":[{"word":"late","start":5.0,"end":5.5}]}',
        ):
            session.feed(chunk)
            positions.append(session.last_position)
        assert positions == sorted(positions)
        assert positions[-1] == seconds_to_frames(5.5, 25)

    def test_progress(self):
        reported: list[int] = []
        doc, session = _session(duration=4.0, progress=reported.append)
        session.feed(HELLO_WORLD)
        session.feed(AGAIN)
        assert reported == [27, 85]

    def test_offset_applied_to_silence(self):
        doc, session = _session(offset=10.0)
        assert session.last_position == 250
        session.feed('{"result":[{"word":"hi","start":0.2,"end":1.0}]}')
        session.feed(AGAIN)
        # 토큰은 인식기 좌표, 존은 클립 좌표
        assert doc[2].tokens[0].start_sec == 3.0
        assert doc.speech_zones[2] == pytest.approx((13.0, 13.4))
        assert doc.speech_zones[1] == pytest.approx((275 / 25, 324 / 25))


class TestEndOfStream:
    def test_final_silence(self):
        doc, session = _session(duration=5.0)
        session.feed(HELLO_WORLD)
        session.feed(json.dumps({"text": ""}))
        assert session.finished
        assert doc[-1].kind is BlockKind.SILENCE
        assert doc.speech_zones[-1] == pytest.approx((29 / 25, 5.0))

    def test_final_silence_only_once(self):
        doc, session = _session(duration=5.0)
        session.feed(HELLO_WORLD)
        session.feed('{"text": ""} {"partial": ""}')
        session.feed('{"text": ""}')
        assert doc.block_count == 2

    def test_no_final_silence_without_duration(self):
        reported: list[int] = []
        doc, session = _session(duration=0.0, progress=reported.append)
        session.feed('{"text": ""}')
        assert doc.block_count == 0
        assert reported == [100]

    def test_final_silence_with_offset(self):
        doc, session = _session(duration=5.0, offset=2.0)
        session.feed('{"text": ""}')
        assert doc.speech_zones == [pytest.approx((51 / 25, 7.0))]
