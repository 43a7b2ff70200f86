"""Time conversion utilities and token href encoding."""

from __future__ import annotations

from functools import lru_cache

from textcut.errors import MalformedHref


def seconds_to_frames(seconds: float, fps: float) -> int:
    """Convert seconds to a whole frame number, rounding to the nearest frame.

    Example:
        >>> seconds_to_frames(1.1, 25)
        28
    """
    return int(round(seconds * fps))


def frames_to_seconds(frame: int, fps: float) -> float:
    """Convert a frame number to seconds.

    Example:
        >>> frames_to_seconds(28, 25)
        1.12
    """
    return frame / fps


@lru_cache(maxsize=2048)
def ms_to_frame(ms: int, fps: float) -> int:
    """Convert milliseconds to frame number.

    Example:
        >>> ms_to_frame(1000, 30)
        30  # 1 second = 30 frames at 30fps
    """
    return int(round(ms * fps / 1000))


@lru_cache(maxsize=2048)
def frame_to_ms(frame: int, fps: float) -> int:
    """Convert frame number to milliseconds.

    Example:
        >>> frame_to_ms(30, 30)
        1000  # 30 frames = 1 second at 30fps
    """
    return int(round(frame * 1000 / fps))


def frames_to_timecode(frame: int, fps: float) -> str:
    """Convert a frame number to HH:MM:SS:FF timecode.

    Fractional rates (23.976, 29.97) count frames against the rounded
    nominal rate, without drop-frame compensation.

    Example:
        >>> frames_to_timecode(2090, 25)
        '00:01:23:15'
    """
    if frame < 0:
        frame = 0
    base = max(1, int(round(fps)))
    frames = frame % base
    total_seconds = frame // base
    seconds = total_seconds % 60
    total_minutes = total_seconds // 60
    minutes = total_minutes % 60
    hours = total_minutes // 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}:{frames:02d}"


def seconds_to_timecode(seconds: float, fps: float) -> str:
    """Timecode of the frame nearest to *seconds*."""
    return frames_to_timecode(seconds_to_frames(seconds, fps), fps)


# ---------------------------------------------------------------- hrefs


def format_seconds(value: float) -> str:
    """Shortest decimal text for *value*; integral values drop the '.0'."""
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def encode_href(clip_id: str, start_sec: float, end_sec: float) -> str:
    """Build the hyperlink target of a transcript token.

    Format is ``<clip_id>#<start>:<end>``; silence tokens use an empty clip id.

    Example:
        >>> encode_href("42", 0.2, 0.6)
        '42#0.2:0.6'
    """
    return f"{clip_id}#{format_seconds(start_sec)}:{format_seconds(end_sec)}"


def decode_href(href: str) -> tuple[float, float]:
    """Parse a token href back into ``(start_sec, end_sec)``.

    Raises:
        MalformedHref: If there is no '#', a field is missing or not numeric.
    """
    if "#" not in href:
        raise MalformedHref(href)
    fields = href.split("#", 1)[1].split(":")
    if len(fields) < 2:
        raise MalformedHref(href)
    try:
        return float(fields[0]), float(fields[1])
    except ValueError:
        raise MalformedHref(href) from None
