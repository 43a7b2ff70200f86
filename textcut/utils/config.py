"""Application configuration constants."""

from __future__ import annotations

import sys
from pathlib import Path

APP_NAME = "TextCut"
APP_VERSION = "0.1.0"
ORG_NAME = "TextCut"

# Per-user data directory (logs, speech models, recognizer script)
DATA_DIR = Path.home() / ".textcut"

# FFprobe (used by the standalone host to read clip fps / duration)
if sys.platform == "darwin":
    FFPROBE_PATH = "/opt/homebrew/bin/ffprobe"
elif sys.platform == "win32":
    FFPROBE_PATH = r"C:\ffmpeg\bin\ffprobe.exe"
else:
    FFPROBE_PATH = "ffprobe"

# Speech recognition
RECOGNIZER_INTERPRETER = "python3"
RECOGNIZER_SCRIPT = Path("scripts") / "speechtotext.py"
SPEECH_MODELS_DIRNAME = "speechmodels"
# A directory is a usable language model when one of these exists inside it
MODEL_MARKER_FILES = ("mfcc.conf", "conf/mfcc.conf")

# Timeline
DEFAULT_FPS = 25.0
# Neighbouring blocks closer than this many frames are exported as one zone
BLOCK_COALESCE_GAP_FRAMES = 1

# Playlist preview
PLAYLIST_PREFIX = "textcut-speech-"
PLAYLIST_SUFFIX = ".mlt"
PLAYLIST_SPEECH_PROPERTY = "speech"

# Message banner
MESSAGE_HIDE_TIMEOUT_MS = 5000

# Search
SEARCH_MIN_LENGTH = 3
SEARCH_TINT_FACTOR = 1.5

# Gutter: width in digits of the widest timecode ("00:00:00:00" + margin)
GUTTER_DIGITS = 11
GUTTER_MARGIN = 3

# Supported media formats (standalone host)
MEDIA_EXTENSIONS = [".mp4", ".mkv", ".avi", ".mov", ".webm", ".mp3", ".wav", ".m4a", ".flac", ".ogg"]
MEDIA_FILTER = "Media Files ({});;All Files (*)".format(
    " ".join(f"*{ext}" for ext in MEDIA_EXTENSIONS)
)
