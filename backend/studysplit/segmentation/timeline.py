"""
Timeline Segmenter Module
=========================
Fixed-window segmentation of a duration.

Windows abut exactly: segment i ends where segment i + 1 starts, the first
starts at 0 and the last ends at the total, truncated when the total is not
a multiple of the window. There is always at least one segment, so a zero
duration yields a single {0, 0, 0} window.
"""

import math
from typing import List

from ..models import TimeSegment


def count_windows(total_seconds: int, window_seconds: int) -> int:
    """Number of windows needed to cover the total: max(1, ceil(total / window))."""
    return max(1, math.ceil(total_seconds / window_seconds))


def segment_timeline(total_seconds: int, window_seconds: int) -> List[TimeSegment]:
    """
    Cut [0, total) into consecutive windows of `window_seconds`.

    Args:
        total_seconds: Non-negative total duration
        window_seconds: Positive window size

    Returns:
        List of TimeSegment covering the whole duration
    """
    segments = []
    for index in range(count_windows(total_seconds, window_seconds)):
        start = index * window_seconds
        end = min(total_seconds, start + window_seconds)
        segments.append(TimeSegment(start_seconds=start, end_seconds=end, duration_seconds=end - start))
    return segments
