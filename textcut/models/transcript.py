"""Transcript document model (pure Python, no Qt dependency).

The document is an ordered list of blocks (paragraphs). Every block holds
word tokens whose times are stored in recognizer coordinates, i.e. relative
to the start of the analysed span. ``clip_offset`` converts them to clip
coordinates.

Character positions follow the plain-text projection of the document: tokens
of a block joined by single spaces, blocks separated by one paragraph
separator. This matches the positions of the ``QTextDocument`` the view
renders, so a view selection can be handed to the model unchanged.
"""

from __future__ import annotations

import bisect
import html
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator

from textcut.errors import MalformedHref
from textcut.models.clip import Interval
from textcut.utils.time_utils import decode_href, encode_href

logger = logging.getLogger(__name__)

# Listener events
EVENT_APPENDED = "appended"
EVENT_CHANGED = "changed"
EVENT_RESET = "reset"


class BlockKind(Enum):
    SPEECH = "speech"
    SILENCE = "silence"


@dataclass(slots=True)
class Token:
    """A recognized word and its time span (recognizer coordinates)."""

    word: str
    start_sec: float
    end_sec: float
    clip_id: str = ""

    def __post_init__(self) -> None:
        if self.end_sec < self.start_sec:
            logger.warning(f"Token {self.word!r} ends before it starts ({self.start_sec} > {self.end_sec})")
            self.end_sec = self.start_sec

    @property
    def href(self) -> str:
        return encode_href(self.clip_id, self.start_sec, self.end_sec)


@dataclass(slots=True)
class Block:
    """One paragraph of the transcript: a sentence or a silence gap."""

    tokens: list[Token] = field(default_factory=list)
    kind: BlockKind = BlockKind.SPEECH

    @property
    def text(self) -> str:
        return " ".join(t.word for t in self.tokens)

    @property
    def is_silence(self) -> bool:
        return self.kind is BlockKind.SILENCE

    @property
    def zone(self) -> tuple[float, float] | None:
        """``(start, end)`` of the block in recognizer coordinates."""
        if not self.tokens:
            return None
        return self.tokens[0].start_sec, self.tokens[-1].end_sec

    def to_html(self) -> str:
        links = (
            f'<a href="{html.escape(t.href)}">{html.escape(t.word)}</a>'
            for t in self.tokens
        )
        return " ".join(links)


@dataclass(frozen=True, slots=True)
class _TokenSpan:
    """Character span of a token inside the plain-text projection."""

    start: int
    end: int
    block: int
    index: int


class TranscriptDocument:
    """Ordered transcript blocks plus the cut intervals deleted from them."""

    def __init__(self, clip_offset: float = 0.0) -> None:
        self.clip_offset = clip_offset
        self.blocks: list[Block] = []
        # Frame intervals removed by deletions, kept sorted and merged
        self.cut_intervals: list[Interval] = []
        self._listeners: list[Callable[[str], None]] = []
        self._spans: list[_TokenSpan] | None = None
        self._block_starts: list[int] | None = None

    # ---- observers ----

    def add_listener(self, callback: Callable[[str], None]) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[str], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, event: str) -> None:
        self._spans = None
        self._block_starts = None
        for callback in list(self._listeners):
            callback(event)

    # ---- queries ----

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __getitem__(self, index: int) -> Block:
        return self.blocks[index]

    def is_empty(self) -> bool:
        return not any(b.tokens for b in self.blocks)

    def has_speech(self) -> bool:
        return any(b.tokens and not b.is_silence for b in self.blocks)

    @property
    def speech_zones(self) -> list[tuple[float, float]]:
        """Per-block ``(start, end)`` in clip coordinates, aligned with ``blocks``."""
        zones = []
        for block in self.blocks:
            start, end = block.zone or (0.0, 0.0)
            zones.append((start + self.clip_offset, end + self.clip_offset))
        return zones

    def to_plain_text(self) -> str:
        return "\n".join(b.text for b in self.blocks)

    def to_html(self) -> str:
        body = "".join(f"<p>{b.to_html()}</p>" for b in self.blocks)
        return f"<html><body>{body}</body></html>"

    @property
    def character_count(self) -> int:
        if not self.blocks:
            return 0
        return sum(len(b.text) for b in self.blocks) + len(self.blocks) - 1

    def block_range(self, index: int) -> tuple[int, int]:
        """Character range ``[start, end)`` of block *index* (separator excluded)."""
        starts = self._layout_block_starts()
        start = starts[index]
        return start, start + len(self.blocks[index].text)

    def block_at(self, pos: int) -> int:
        """Index of the block containing character position *pos*, -1 when empty."""
        if not self.blocks:
            return -1
        starts = self._layout_block_starts()
        return max(0, bisect.bisect_right(starts, pos) - 1)

    def word_at(self, pos: int) -> Token | None:
        """Token whose visible text covers character *pos*."""
        span = self._span_at(pos)
        if span is None:
            return None
        return self.blocks[span.block].tokens[span.index]

    def anchor_at(self, pos: int) -> str:
        """Href of the token covering *pos*, or an empty string."""
        token = self.word_at(pos)
        return token.href if token is not None else ""

    def find(self, text: str, pos: int = 0, backward: bool = False) -> tuple[int, int] | None:
        """Case-insensitive search in the plain-text projection.

        Forward search starts at *pos*; backward search returns the last match
        ending at or before *pos*. No wrap-around.
        """
        if not text:
            return None
        haystack = self.to_plain_text().lower()
        needle = text.lower()
        if backward:
            index = haystack.rfind(needle, 0, max(0, pos))
        else:
            index = haystack.find(needle, max(0, pos))
        if index < 0:
            return None
        return index, index + len(needle)

    # ---- word snapping ----

    def snap_range(self, start: int, end: int) -> tuple[int, int] | None:
        """Expand ``[start, end)`` outward to whole-word boundaries.

        Leading and trailing whitespace or paragraph breaks are skipped, so the
        result starts at the first word and stops at the last word touched by
        the range. Returns ``None`` when the range holds no word.
        """
        first, last = self._bracket(start, end)
        if first is None or last is None:
            return None
        return first.start, last.end

    def interval_for_range(self, start: int, end: int) -> tuple[float, float] | None:
        """Clip-coordinate seconds covered by the words of ``[start, end)``.

        The start comes from the href of the first word touched by the range,
        the end from the href of the last one.
        """
        first, last = self._bracket(start, end, resolvable=True)
        if first is None or last is None:
            return None
        start_sec = decode_href(self._href(first))[0] + self.clip_offset
        end_sec = decode_href(self._href(last))[1] + self.clip_offset
        return start_sec, end_sec

    def full_interval(self) -> tuple[float, float] | None:
        """Clip-coordinate seconds from the first to the last resolvable word."""
        return self.interval_for_range(0, self.character_count)

    def _bracket(
        self, start: int, end: int, resolvable: bool = False
    ) -> tuple[_TokenSpan | None, _TokenSpan | None]:
        if end < start:
            start, end = end, start
        spans = [s for s in self._layout_spans() if s.end > start and s.start < end]
        if resolvable:
            spans = [s for s in spans if self._resolves(s)]
        if not spans:
            return None, None
        return spans[0], spans[-1]

    def _href(self, span: _TokenSpan) -> str:
        return self.blocks[span.block].tokens[span.index].href

    def _resolves(self, span: _TokenSpan) -> bool:
        try:
            decode_href(self._href(span))
        except MalformedHref as e:
            logger.warning(f"Skipping token: {e}")
            return False
        return True

    # ---- mutation ----

    def append_block_from_recognition(
        self,
        tokens: list[Token],
        sentence_zone: tuple[float, float] | None = None,
    ) -> int:
        """Append a speech block and return its index.

        *sentence_zone*, when given, is the clip-coordinate span the recognizer
        reported; the stored zone is always derived from the tokens.
        """
        if not tokens:
            raise ValueError("A block needs at least one token")
        block = Block(tokens=list(tokens), kind=BlockKind.SPEECH)
        if sentence_zone is not None:
            start, end = block.zone
            if abs(start + self.clip_offset - sentence_zone[0]) > 1e-6 or abs(end + self.clip_offset - sentence_zone[1]) > 1e-6:
                logger.debug(f"Sentence zone {sentence_zone} differs from token span ({start}, {end})")
        self.blocks.append(block)
        self._notify(EVENT_APPENDED)
        return len(self.blocks) - 1

    def append_silence_block(self, start_sec: float, end_sec: float, label: str) -> int:
        """Append a one-token silence block spanning clip-coordinate seconds."""
        token = Token(
            word=label,
            start_sec=start_sec - self.clip_offset,
            end_sec=end_sec - self.clip_offset,
            clip_id="",
        )
        self.blocks.append(Block(tokens=[token], kind=BlockKind.SILENCE))
        self._notify(EVENT_APPENDED)
        return len(self.blocks) - 1

    def delete_selection(self, start: int, end: int) -> tuple[float, float] | None:
        """Remove the words touched by ``[start, end)``.

        Both ends are snapped outward to whole words before anything is
        removed. Returns the clip-coordinate seconds that were deleted, or
        ``None`` if the range resolved to no interval (nothing is removed).
        Blocks emptied by the deletion are dropped; partially emptied blocks
        keep their own zones.
        """
        interval = self.interval_for_range(start, end)
        if interval is None or interval[0] >= interval[1]:
            return None
        first, last = self._bracket(start, end)
        spans = self._layout_spans()
        doomed: dict[int, set[int]] = {}
        for span in spans[spans.index(first):spans.index(last) + 1]:
            doomed.setdefault(span.block, set()).add(span.index)
        for block_index, token_indices in doomed.items():
            block = self.blocks[block_index]
            block.tokens = [t for i, t in enumerate(block.tokens) if i not in token_indices]
        self.blocks = [b for b in self.blocks if b.tokens]
        self._notify(EVENT_CHANGED)
        return interval

    def add_cut(self, cut: Interval) -> None:
        """Record a deleted frame interval, merging it with overlapping ones."""
        if cut.end <= cut.start:
            return
        merged: list[Interval] = []
        for existing in sorted(self.cut_intervals + [cut]):
            if merged and existing.start <= merged[-1].end:
                last = merged[-1]
                merged[-1] = Interval(last.start, max(last.end, existing.end))
            else:
                merged.append(Interval(*existing))
        self.cut_intervals = merged

    def rebuild_zones(self) -> int:
        """Drop blocks without a resolvable token. Returns how many were dropped."""
        kept = []
        for index, block in enumerate(self.blocks):
            resolvable = []
            for token in block.tokens:
                try:
                    decode_href(token.href)
                except MalformedHref as e:
                    logger.warning(f"Block {index}: {e}")
                    continue
                resolvable.append(token)
            if resolvable:
                kept.append(block)
        dropped = len(self.blocks) - len(kept)
        self.blocks = kept
        self._notify(EVENT_CHANGED)
        return dropped

    def remove_empty_blocks(self) -> int:
        return self.rebuild_zones()

    def clear(self, clip_offset: float | None = None) -> None:
        self.blocks.clear()
        self.cut_intervals.clear()
        if clip_offset is not None:
            self.clip_offset = clip_offset
        self._notify(EVENT_RESET)

    # ---- layout ----

    def _layout_block_starts(self) -> list[int]:
        if self._block_starts is None:
            self._build_layout()
        return self._block_starts  # type: ignore[return-value]

    def _layout_spans(self) -> list[_TokenSpan]:
        if self._spans is None:
            self._build_layout()
        return self._spans  # type: ignore[return-value]

    def _build_layout(self) -> None:
        spans: list[_TokenSpan] = []
        starts: list[int] = []
        pos = 0
        for block_index, block in enumerate(self.blocks):
            starts.append(pos)
            for token_index, token in enumerate(block.tokens):
                spans.append(_TokenSpan(pos, pos + len(token.word), block_index, token_index))
                pos += len(token.word) + 1
            if not block.tokens:
                pos += 1
        self._spans = spans
        self._block_starts = starts

    def _span_at(self, pos: int) -> _TokenSpan | None:
        spans = self._layout_spans()
        i = bisect.bisect_right(spans, pos, key=lambda s: s.start) - 1
        if i >= 0 and spans[i].start <= pos < spans[i].end:
            return spans[i]
        return None
