"""
Text Segmenter Module
=====================
Word-budgeted segmentation of plain text.

Three tiers, tried in order:
1. Paragraphs (split on blank lines)
2. Sentences (split after . ! or ? followed by whitespace), used when the
   text has no paragraph boundary and does not fit the budget as is
3. The whole text as one segment (guard for an unproductive packer)

Units are packed greedily: the open segment closes when the next unit
would push it past the budget. A unit bigger than the budget on its own
still becomes a segment rather than being truncated.
"""

import re
import logging
from typing import List, Optional

from .accumulator import Accumulator
from .words import count_words
from ..models import TextSegment

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = re.compile(r'\n{2,}')
SENTENCE_BREAK = re.compile(r'(?<=[.!?])\s+')

UNIT_SEPARATOR = "\n\n"


def split_paragraphs(text: Optional[str]) -> List[str]:
    """Split on runs of two or more newlines; trim and drop empty parts."""
    if not text:
        return []
    return [part.strip() for part in PARAGRAPH_BREAK.split(text) if part.strip()]


def split_sentences(text: Optional[str]) -> List[str]:
    """Split after sentence-terminal punctuation followed by whitespace."""
    if not text:
        return []
    return [part.strip() for part in SENTENCE_BREAK.split(text) if part.strip()]


def _close(accumulator: Accumulator) -> TextSegment:
    closed = accumulator.drain()
    return TextSegment(text=UNIT_SEPARATOR.join(closed.units), word_count=closed.word_sum)


def pack_units(units: List[str], word_budget: int) -> List[TextSegment]:
    """
    Greedily pack text units into segments of at most `word_budget` words.

    Args:
        units: Paragraphs or sentences, in source order
        word_budget: Maximum words per segment (positive)

    Returns:
        Segments in source order; every unit appears in exactly one
    """
    segments: List[TextSegment] = []
    accumulator = Accumulator()

    for unit in units:
        unit_words = count_words(unit)
        if accumulator.would_exceed(unit_words, word_budget):
            segments.append(_close(accumulator))
        accumulator.add(unit, unit_words)

    if not accumulator.is_empty():
        segments.append(_close(accumulator))

    if not segments and units:
        joined = " ".join(units)
        segments.append(TextSegment(text=joined, word_count=count_words(joined)))

    return segments


def segment_text(text: Optional[str], word_budget: int) -> List[TextSegment]:
    """
    Split plain text into word-budgeted segments.

    Args:
        text: Raw text; paragraphs separated by blank lines
        word_budget: Maximum words per segment (positive)

    Returns:
        List of TextSegment; empty for empty or whitespace-only text
    """
    units = split_paragraphs(text)

    if len(units) <= 1 and count_words(text) > word_budget:
        sentences = split_sentences(text)
        if len(sentences) > 1:
            logger.debug(f"No paragraph breaks, packing {len(sentences)} sentences")
            units = sentences

    return pack_units(units, word_budget)
