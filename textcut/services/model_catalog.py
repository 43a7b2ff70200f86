"""Discovery of installed speech recognition language models."""

from __future__ import annotations

import logging
from pathlib import Path

from textcut.utils.config import MODEL_MARKER_FILES

logger = logging.getLogger(__name__)


def is_language_model(path: Path) -> bool:
    """A model directory holds an ``mfcc.conf`` either at its root or in ``conf/``."""
    return path.is_dir() and any((path / marker).is_file() for marker in MODEL_MARKER_FILES)


def list_language_models(model_dir: Path | str | None) -> list[str]:
    """Names of the language models installed in *model_dir*, sorted.

    A missing or unreadable directory yields an empty list.
    """
    if not model_dir:
        return []
    root = Path(model_dir)
    if not root.is_dir():
        logger.info(f"Speech model directory not found: {root}")
        return []
    try:
        entries = sorted(p for p in root.iterdir() if is_language_model(p))
    except OSError as e:
        logger.warning(f"Cannot read speech model directory {root}: {e}")
        return []
    return [p.name for p in entries]
