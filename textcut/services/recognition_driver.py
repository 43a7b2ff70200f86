"""Speech recognizer output protocol (no Qt dependency).

The recognizer child writes JSON objects to stdout. A sentence looks like::

    {"result": [{"word": "hello", "start": 0.2, "end": 0.6}, ...], "text": "hello ..."}

Any object without a ``result`` array marks the end of the analysed span.
``RecognitionSession`` turns those objects into transcript blocks, inserting
silence blocks wherever the recognizer skipped more than one frame.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from textcut.models.transcript import Token, TranscriptDocument
from textcut.utils.time_utils import format_seconds, frames_to_seconds, seconds_to_frames

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


@dataclass
class RecognitionRequest:
    """Everything needed to launch one recognizer run."""

    interpreter: str
    script: Path
    model_dir: Path
    language: str
    media_url: str
    offset_sec: float = 0.0
    duration_sec: float = 0.0

    def arguments(self) -> list[str]:
        """Arguments for the interpreter; ``0 0`` means the whole clip."""
        return [
            str(self.script),
            str(self.model_dir),
            self.language,
            self.media_url,
            format_seconds(self.offset_sec),
            format_seconds(self.duration_sec),
        ]


def iter_json_objects(text: str) -> Iterator[dict]:
    """Yield the top-level JSON objects found in one stdout chunk.

    Non-object values are ignored. Parsing stops at the first undecodable
    fragment; nothing is carried over to the next chunk.
    """
    pos = 0
    length = len(text)
    while pos < length:
        while pos < length and text[pos].isspace():
            pos += 1
        if pos >= length:
            break
        try:
            value, pos = _decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding undecodable recognizer output at {pos}: {e.msg}")
            return
        if isinstance(value, dict):
            yield value


class RecognitionSession:
    """Weaves recognizer output into a ``TranscriptDocument``.

    Args:
        document: Document to append to. It is not cleared here.
        clip_id: Clip id written into speech token hrefs.
        fps: Frame rate used for silence detection.
        clip_duration: Length in seconds of the analysed span.
        silence_label: Visible text of silence blocks.
        on_progress: Called with a 0-100 percentage after each sentence.
    """

    def __init__(
        self,
        document: TranscriptDocument,
        clip_id: str,
        fps: float,
        clip_duration: float,
        silence_label: str = "No speech",
        on_progress: Callable[[int], None] | None = None,
    ) -> None:
        self.document = document
        self.clip_id = clip_id
        self.fps = fps
        self.clip_duration = clip_duration
        self.silence_label = silence_label
        self._on_progress = on_progress
        # Clip-frame position of the end of the last recognized word
        self.last_position = seconds_to_frames(document.clip_offset, fps)
        self.finished = False
        self._seen_speech = False

    def feed(self, data: bytes | str) -> int:
        """Process one stdout chunk. Returns the number of blocks appended."""
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")
        before = self.document.block_count
        for obj in iter_json_objects(data):
            self.handle_object(obj)
        return self.document.block_count - before

    def handle_object(self, obj: dict) -> None:
        result = obj.get("result")
        if isinstance(result, list):
            self._handle_sentence(result)
        else:
            self._handle_end()

    def _handle_sentence(self, result: list) -> None:
        tokens = []
        for entry in result:
            if not isinstance(entry, dict):
                continue
            word = str(entry.get("word", "")).strip()
            try:
                start = float(entry["start"])
                end = float(entry["end"])
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping recognizer word without timing: {entry!r}")
                continue
            if not word:
                continue
            tokens.append(Token(word=word, start_sec=start, end_sec=end, clip_id=self.clip_id))
        if not tokens:
            return

        offset = self.document.clip_offset
        first_start = tokens[0].start_sec + offset
        start_frame = seconds_to_frames(first_start, self.fps)
        # Only gaps between sentences are bridged, not the lead-in before the first one
        if self._seen_speech and start_frame > self.last_position + 1:
            self.document.append_silence_block(
                frames_to_seconds(self.last_position, self.fps),
                frames_to_seconds(start_frame - 1, self.fps),
                self.silence_label,
            )

        self._seen_speech = True
        last_end = tokens[-1].end_sec
        self.document.append_block_from_recognition(tokens, (first_start, last_end + offset))
        self.last_position = max(self.last_position, seconds_to_frames(last_end + offset, self.fps))
        if self.clip_duration > 0 and self._on_progress is not None:
            self._on_progress(min(100, int(100 * last_end / self.clip_duration)))

    def _handle_end(self) -> None:
        if self.finished:
            return
        self.finished = True
        start = frames_to_seconds(self.last_position + 1, self.fps)
        end = self.document.clip_offset + self.clip_duration
        if self.clip_duration > 0 and start < end:
            self.document.append_silence_block(start, end, self.silence_label)
        if self._on_progress is not None:
            self._on_progress(100)
