"""In-memory clip index used by the standalone host."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from textcut.models.clip import ClipInfo, Interval
from textcut.services.video_probe import MediaInfo, probe_media

logger = logging.getLogger(__name__)


class MediaIndex:
    """Maps clip ids to ``ClipInfo`` for media files opened in the host.

    Clip ids are assigned sequentially as strings ("1", "2", ...).
    """

    def __init__(self, prober: Callable[[Path], MediaInfo] = probe_media) -> None:
        self._prober = prober
        self._clips: dict[str, ClipInfo] = {}
        self._next_id = 1

    def add_media(self, path: Path | str) -> ClipInfo:
        path = Path(path)
        for clip in self._clips.values():
            if Path(clip.url) == path:
                return clip
        info = self._prober(path)
        clip = ClipInfo(
            clip_id=str(self._next_id),
            name=path.name,
            url=str(path),
            fps=info.fps,
            duration_sec=info.duration_sec,
        )
        self._next_id += 1
        self._clips[clip.clip_id] = clip
        logger.info(f"Indexed clip {clip.clip_id}: {path} ({info.fps:.3f} fps, {info.duration_sec:.2f}s)")
        return clip

    def get_clip(self, clip_id: str) -> ClipInfo | None:
        return self._clips.get(clip_id)

    def set_zone(self, clip_id: str, zone: Interval | None) -> None:
        clip = self._clips.get(clip_id)
        if clip is not None:
            clip.zone = zone

    def clips(self) -> list[ClipInfo]:
        return list(self._clips.values())

    def __len__(self) -> int:
        return len(self._clips)
