"""
Word Counting Module
====================
The single size metric shared by the text and markup segmenters.

Both segmenters must agree on what a word is, otherwise the same content
would be cut at different places depending on which tier handled it.
A word is a maximal run of non-whitespace characters, as `str.split()`
defines whitespace.
"""

from typing import Optional


def count_words(text: Optional[str]) -> int:
    """Count maximal non-whitespace runs. Empty or None -> 0."""
    if not text:
        return 0
    return len(text.split())


def collapse_whitespace(text: Optional[str]) -> str:
    """Replace every whitespace run with one space and trim the ends."""
    if not text:
        return ""
    return " ".join(text.split())
