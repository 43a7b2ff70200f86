"""Clip and interval value types (pure Python, no Qt dependency)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class Interval(NamedTuple):
    """A frame range ``[start, end)`` on the clip timeline."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.end <= self.start


@dataclass
class ClipInfo:
    """What the clip index knows about a clip.

    *zone* is the clip's in/out zone in frames, ``None`` when no zone is set.
    A sub-clip always carries a zone and is always analysed zone-only.
    """

    clip_id: str
    name: str
    url: str
    fps: float
    duration_sec: float
    zone: Interval | None = None
    is_subclip: bool = False

    def analysis_span(self, zone_only: bool) -> tuple[float, float]:
        """Return ``(offset_sec, duration_sec)`` of the range to recognize.

        A duration of 0 tells the recognizer to run to the end of the media.
        """
        if self.zone is not None and (zone_only or self.is_subclip):
            offset = self.zone.start / self.fps
            return offset, (self.zone.end - self.zone.start) / self.fps
        return 0.0, 0.0

    def span_duration(self, zone_only: bool) -> float:
        """Length in seconds of the analysed range."""
        offset, duration = self.analysis_span(zone_only)
        if duration > 0:
            return duration
        return self.duration_sec
