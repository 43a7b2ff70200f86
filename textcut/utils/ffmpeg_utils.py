"""Helpers for locating the ffprobe executable."""

from __future__ import annotations

import shutil
from pathlib import Path


def find_ffprobe() -> str | None:
    """
    Find ffprobe executable.

    Search order:
    1. User-configured path (config.FFPROBE_PATH)
    2. System PATH (ffprobe command)

    Returns:
        Path to ffprobe or None if not found
    """
    from .config import FFPROBE_PATH
    if Path(FFPROBE_PATH).is_file():
        return FFPROBE_PATH

    return shutil.which("ffprobe")
