"""
Time Utilities Module
=====================
Timestamp formatting and parsing shared by the timeline segmenter,
the video service, and the response models.
"""

import re
import logging

logger = logging.getLogger(__name__)

ISO8601_DURATION_PATTERN = re.compile(r'PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?')


def format_clock(seconds: int) -> str:
    """
    Convert whole seconds to a zero-padded clock string (HH:MM:SS).

    Hours are not wrapped at 24; a 25 hour offset prints as "25:00:00".

    Args:
        seconds: Non-negative offset in seconds

    Returns:
        Formatted timestamp string like "00:10:00"
    """
    seconds = int(seconds)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def parse_iso8601_duration(duration: str) -> int:
    """
    Parse an ISO 8601 video duration (e.g. "PT4M13S") to seconds.

    Only the hour/minute/second designators YouTube emits are supported.
    Anything unparseable yields 0, which callers treat as "unknown".
    """
    if not duration:
        return 0

    match = ISO8601_DURATION_PATTERN.search(duration)
    if not match:
        logger.debug(f"Unparseable ISO 8601 duration: {duration!r}")
        return 0

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    seconds = int(match.group(3) or 0)

    return hours * 3600 + minutes * 60 + seconds


def duration_label(seconds: int) -> str:
    """Short human label for a duration: "10 min", "4 min 30 s", "45 s"."""
    seconds = int(seconds)
    minutes, secs = divmod(seconds, 60)
    if minutes and secs:
        return f"{minutes} min {secs} s"
    if minutes:
        return f"{minutes} min"
    return f"{secs} s"
