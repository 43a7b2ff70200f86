"""Utility for logging speech recognizer output to a file."""

import logging
from pathlib import Path

from textcut.utils.config import DATA_DIR


def get_recognizer_log_path() -> Path:
    """Return the path to the recognizer log file."""
    log_dir = DATA_DIR / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "recognizer.log"


# Setup a specific logger for the recognizer child process
_logger = logging.getLogger("recognizer_output")
_logger.setLevel(logging.DEBUG)
_logger.propagate = False


def _ensure_handler() -> None:
    """Attach the file handler on first use."""
    if _logger.handlers:
        return
    try:
        fh = logging.FileHandler(get_recognizer_log_path(), encoding="utf-8")
    except OSError:
        _logger.addHandler(logging.NullHandler())
        return
    fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    _logger.addHandler(fh)


def log_recognizer_command(args: list[str]) -> None:
    """Log the recognizer command being executed."""
    _ensure_handler()
    _logger.info(f"Executing: {' '.join(args)}")


def log_recognizer_stderr(text: str) -> None:
    """Log a chunk of recognizer standard error."""
    _ensure_handler()
    for line in text.splitlines():
        if line.strip():
            _logger.debug(line.rstrip())


def log_recognizer_exit(exit_code: int, crashed: bool) -> None:
    _ensure_handler()
    _logger.info(f"Recognizer exited with code {exit_code}{' (crashed)' if crashed else ''}")
