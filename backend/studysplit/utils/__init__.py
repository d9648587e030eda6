"""
Utilities Package
=================
Shared helpers that are not part of the segmentation engine itself.
"""

from .time_utils import (
    format_clock,
    parse_iso8601_duration,
    duration_label,
)

__all__ = [
    'format_clock',
    'parse_iso8601_duration',
    'duration_label',
]
