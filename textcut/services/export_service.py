"""Turn the transcript selection into media frame intervals."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from textcut.models.clip import Interval
from textcut.services.cut_algebra import processed_zones
from textcut.utils.config import (
    BLOCK_COALESCE_GAP_FRAMES,
    PLAYLIST_PREFIX,
    PLAYLIST_SPEECH_PROPERTY,
    PLAYLIST_SUFFIX,
)
from textcut.utils.time_utils import seconds_to_frames

if TYPE_CHECKING:
    from textcut.models.selection import SelectionModel
    from textcut.models.transcript import TranscriptDocument
    from textcut.ui.controllers.app_context import PlaylistWriter

logger = logging.getLogger(__name__)


def block_intervals(document: TranscriptDocument, blocks: list[int], fps: float) -> list[Interval]:
    """Frame intervals of the given blocks, neighbours coalesced.

    Blocks are walked in ascending order; a block starting at most
    ``BLOCK_COALESCE_GAP_FRAMES`` after the previous one ends extends it.
    """
    zones = document.speech_zones
    intervals: list[Interval] = []
    for index in sorted(set(blocks)):
        if not 0 <= index < len(zones):
            continue
        start_sec, end_sec = zones[index]
        start = seconds_to_frames(start_sec, fps)
        end = seconds_to_frames(end_sec, fps)
        if intervals and start - intervals[-1].end <= BLOCK_COALESCE_GAP_FRAMES:
            intervals[-1] = Interval(intervals[-1].start, max(intervals[-1].end, end))
        else:
            intervals.append(Interval(start, end))
    return intervals


def seconds_interval_to_frames(interval: tuple[float, float], fps: float) -> Interval:
    return Interval(seconds_to_frames(interval[0], fps), seconds_to_frames(interval[1], fps))


def insert_intervals(
    document: TranscriptDocument,
    selection: SelectionModel,
    fps: float,
) -> list[Interval]:
    """Intervals to export for the current selection, with deletions removed.

    Priority: selected blocks, then the text selection, then the whole
    transcript.
    """
    if selection.has_block_selection():
        sources = block_intervals(document, selection.sorted_blocks(), fps)
    else:
        if selection.has_char_selection():
            interval = document.interval_for_range(*selection.char_range)
        else:
            interval = document.full_interval()
        if interval is None:
            return []
        sources = [seconds_interval_to_frames(interval, fps)]
    logger.debug(f"Export sources: {sources}, cuts: {document.cut_intervals}")
    return processed_zones(sources, document.cut_intervals)


class PlaylistExporter:
    """Writes the surviving intervals to a reserved temporary playlist file.

    The file name is reserved once, on first use, and reused for the life of
    the exporter so repeated previews overwrite the same playlist.
    """

    def __init__(self, writer: PlaylistWriter, directory: Path | None = None) -> None:
        self._writer = writer
        self._directory = directory
        self._path: Path | None = None

    @property
    def path(self) -> Path:
        if self._path is None:
            with tempfile.NamedTemporaryFile(
                prefix=PLAYLIST_PREFIX,
                suffix=PLAYLIST_SUFFIX,
                dir=self._directory,
                delete=False,
            ) as tmp:
                self._path = Path(tmp.name)
        return self._path

    def export(self, clip_id: str, intervals: list[Interval], transcript_html: str) -> Path:
        """Write the playlist and return its path.

        Raises:
            OSError: If the reserved file cannot be opened for writing.
        """
        path = self.path
        # Make sure the reserved file is still writable before handing it over
        with open(path, "a", encoding="utf-8"):
            pass
        properties = {PLAYLIST_SPEECH_PROPERTY: transcript_html}
        self._writer.save_playlist(clip_id, path, intervals, properties)
        logger.info(f"Wrote speech playlist {path} with {len(intervals)} zone(s)")
        return path

    def cleanup(self) -> None:
        if self._path is not None:
            try:
                self._path.unlink(missing_ok=True)
            except OSError:
                pass
            self._path = None
