"""
Clock duration parsing and formatting.

Durations are plain seconds. Text forms are ``M:SS`` / ``MM:SS`` for
anything under an hour and ``H:MM:SS`` above it; paces (per km) always
use the short form.

Parsing is deliberately lenient: malformed text resolves to 0 seconds
rather than raising. Use ``try_parse_time`` where a malformed value has
to be told apart from a genuine zero.
"""

from typing import Optional
import math


TIME_MODE = 'time'
PACE_MODE = 'pace'


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def try_parse_time(text: Optional[str]) -> Optional[float]:
    """
    Parse clock text into seconds.

    Args:
        text: ``MM:SS`` or ``H:MM:SS``

    Returns:
        Seconds, or None if the text is not a clock duration
    """
    if not text or ':' not in text:
        return None

    parts = []
    for token in text.split(':'):
        try:
            value = float(token)
        except ValueError:
            return None
        if not math.isfinite(value) or value < 0:
            return None
        parts.append(value)

    if len(parts) == 2:
        minutes, seconds = parts
        return minutes * 60 + seconds
    if len(parts) == 3:
        hours, minutes, seconds = parts
        return hours * 3600 + minutes * 60 + seconds
    return None


def parse_time_to_seconds(text: Optional[str]) -> float:
    """
    Parse clock text into seconds, falling back to 0.

    Args:
        text: ``MM:SS`` or ``H:MM:SS``

    Returns:
        Seconds (0 for empty or malformed text)
    """
    seconds = try_parse_time(text)
    return 0 if seconds is None else seconds


def format_seconds(seconds: float, mode: str = TIME_MODE) -> str:
    """
    Format seconds as clock text.

    Args:
        seconds: Duration in seconds
        mode: 'time' for ``H:MM:SS`` above an hour, 'pace' to always
            use ``M:SS``

    Returns:
        Clock text ("0:00" for zero, negative or non-finite input)
    """
    if seconds is None or not math.isfinite(seconds) or seconds <= 0:
        return '0:00'

    total = round_half_up(seconds)
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60

    if mode == PACE_MODE or h == 0:
        return f"{m}:{s:02d}"
    return f"{h}:{m:02d}:{s:02d}"


def adjust_pace(pace: str, factor: float) -> str:
    """Scale a per-km pace by a multiplier."""
    return format_seconds(parse_time_to_seconds(pace) * factor, PACE_MODE)
