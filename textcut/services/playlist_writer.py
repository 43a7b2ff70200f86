"""MLT XML playlist writer used for speech-cut previews."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import TYPE_CHECKING

from textcut.models.clip import Interval

if TYPE_CHECKING:
    from textcut.ui.controllers.app_context import ClipIndex

logger = logging.getLogger(__name__)

PROPERTY_NAMESPACE = "textcut"


def build_mlt_playlist(
    resource: str,
    fps: float,
    intervals: list[Interval],
    properties: dict[str, str],
) -> ET.Element:
    """Build an MLT document playing *intervals* of *resource* back to back.

    MLT ``out`` points are inclusive, so each half-open interval ends one
    frame earlier than its ``end``.
    """
    root = ET.Element("mlt", LC_NUMERIC="C", producer="playlist0")
    num, den = _frame_rate_fraction(fps)
    ET.SubElement(root, "profile", frame_rate_num=str(num), frame_rate_den=str(den))

    producer = ET.SubElement(root, "producer", id="producer0")
    ET.SubElement(producer, "property", name="resource").text = resource

    playlist = ET.SubElement(root, "playlist", id="playlist0")
    for key, value in properties.items():
        ET.SubElement(playlist, "property", name=f"{PROPERTY_NAMESPACE}:{key}").text = value
    for interval in intervals:
        if interval.is_empty():
            continue
        ET.SubElement(
            playlist,
            "entry",
            producer="producer0",
            **{"in": str(interval.start), "out": str(interval.end - 1)},
        )
    return root


def _frame_rate_fraction(fps: float) -> tuple[int, int]:
    """NTSC-style rates (29.97, 23.976...) map to N*1000/1001."""
    if abs(fps - round(fps)) < 1e-6:
        return int(round(fps)), 1
    ntsc = round(fps * 1001 / 1000)
    if abs(ntsc * 1000 / 1001 - fps) < 1e-3:
        return ntsc * 1000, 1001
    return int(round(fps * 1000)), 1000


class MltPlaylistWriter:
    """``PlaylistWriter`` that resolves the clip media through a clip index."""

    def __init__(self, clip_index: ClipIndex) -> None:
        self._clip_index = clip_index

    def save_playlist(
        self,
        clip_id: str,
        path: Path,
        intervals: list[Interval],
        properties: dict[str, str],
    ) -> None:
        clip = self._clip_index.get_clip(clip_id)
        if clip is None:
            raise FileNotFoundError(f"Unknown clip id: {clip_id}")
        root = build_mlt_playlist(clip.url, clip.fps, intervals, properties)
        tree = ET.ElementTree(root)
        ET.indent(tree)
        tree.write(path, encoding="utf-8", xml_declaration=True)
        logger.debug(f"MLT playlist for clip {clip_id} written to {path}")
