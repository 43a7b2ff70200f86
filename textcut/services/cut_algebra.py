"""Cut algebra: remove deleted intervals from proposed export intervals."""

from __future__ import annotations

import logging
from typing import Iterable

from textcut.models.clip import Interval

logger = logging.getLogger(__name__)


def subtract_cut(fragment: Interval, cut: Interval) -> list[Interval]:
    """Return what survives of *fragment* once *cut* is removed.

    Frame intervals are half-open, so a cut that only touches an edge of the
    fragment leaves it whole. Zero-length survivors are dropped.
    """
    if cut.end <= fragment.start or cut.start >= fragment.end:
        return [fragment]
    survivors = []
    if cut.start > fragment.start:
        survivors.append(Interval(fragment.start, cut.start))
    if cut.end < fragment.end:
        survivors.append(Interval(cut.end, fragment.end))
    return survivors


def processed_zones(
    source_intervals: Iterable[tuple[int, int]],
    cut_intervals: Iterable[tuple[int, int]],
) -> list[Interval]:
    """Remove every cut from every source interval.

    Output keeps the order of *source_intervals*, and within one source the
    surviving fragments run left to right. Touching fragments of the same
    source are merged back together.

    Example:
        >>> processed_zones([(0, 100)], [(20, 40), (60, 80)])
        [Interval(start=0, end=20), Interval(start=40, end=60), Interval(start=80, end=100)]
    """
    cuts = sorted(Interval(*c) for c in cut_intervals if c[1] > c[0])
    result: list[Interval] = []
    for source in source_intervals:
        zone = Interval(*source)
        if zone.is_empty():
            continue
        fragments = [zone]
        for cut in cuts:
            next_fragments: list[Interval] = []
            for fragment in fragments:
                next_fragments.extend(subtract_cut(fragment, cut))
            fragments = next_fragments
            if not fragments:
                break
        fragments.sort()
        merged: list[Interval] = []
        for fragment in fragments:
            if merged and fragment.start <= merged[-1].end:
                merged[-1] = Interval(merged[-1].start, max(merged[-1].end, fragment.end))
            else:
                merged.append(fragment)
        result.extend(merged)
    logger.debug(f"Processed zones: sources={source_intervals!r} cuts={cuts} -> {result}")
    return result
