"""Probe media metadata using ffprobe."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from textcut.infrastructure.ffprobe_runner import FFprobeRunner, get_ffprobe_runner
from textcut.utils.config import DEFAULT_FPS

logger = logging.getLogger(__name__)


@dataclass
class MediaInfo:
    """Metadata extracted from a media file."""

    fps: float = DEFAULT_FPS
    duration_sec: float = 0.0
    has_video: bool = False
    has_audio: bool = False


def parse_frame_rate(text: str) -> float:
    """Parse an ffprobe rate such as ``30000/1001`` or ``25``. Returns 0 on failure."""
    try:
        if "/" in text:
            num, den = text.split("/", 1)
            den_value = float(den)
            return float(num) / den_value if den_value else 0.0
        return float(text)
    except ValueError:
        return 0.0


def probe_media(media_path: Path | str, runner: FFprobeRunner | None = None) -> MediaInfo:
    """Probe a media file for frame rate, duration and stream types.

    Returns *MediaInfo* with defaults on any failure; audio-only media keeps
    the default frame rate.
    """
    runner = runner or get_ffprobe_runner()
    try:
        result = runner.run(
            [
                "-v", "error",
                "-show_entries", "stream=codec_type,r_frame_rate",
                "-show_entries", "format=duration",
                "-of", "json",
                str(media_path),
            ],
            timeout=15,
        )
        data = json.loads(result.stdout or "{}")
    except (OSError, subprocess.SubprocessError, json.JSONDecodeError) as e:
        logger.warning(f"ffprobe failed for {media_path}: {e}")
        return MediaInfo()

    info = MediaInfo()
    for stream in data.get("streams", []):
        codec_type = stream.get("codec_type", "")
        if codec_type == "video" and not info.has_video:
            info.has_video = True
            fps = parse_frame_rate(stream.get("r_frame_rate", ""))
            if fps > 0:
                info.fps = fps
        elif codec_type == "audio":
            info.has_audio = True

    dur_str = data.get("format", {}).get("duration")
    if dur_str:
        try:
            info.duration_sec = float(dur_str)
        except ValueError:
            pass
    return info
