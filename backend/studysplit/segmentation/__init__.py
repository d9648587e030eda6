"""
Content Segmentation Module
===========================
Splits long-form content into bounded study segments.

This module implements three segmenters:
- Text: word-budgeted packing of paragraphs, falling back to sentences
- Markup: word-budgeted packing of HTML nodes, keeping original markup
- Timeline: fixed windows over a video duration

The segmenters are pure functions of (content, budget) -> segments and do
no I/O. ContentSegmenter wires them to configuration and logging.

Usage:
    from studysplit.segmentation import segment_text, segment_markup, segment_timeline

    segments = segment_markup(article_html, 600) or segment_text(article_text, 600)
    windows = segment_timeline(1500, 600)
"""

from .words import count_words, collapse_whitespace
from .text import segment_text, split_paragraphs, split_sentences, pack_units
from .markup import (
    segment_markup,
    parse_fragment,
    resolve_content_root,
    extract_plain_text,
    ElementNode,
    TextNode,
    CommentNode,
)
from .timeline import segment_timeline, count_windows
from .segmenter import ContentSegmenter

__all__ = [
    'ContentSegmenter',
    'segment_text',
    'segment_markup',
    'segment_timeline',
    'count_words',
    'collapse_whitespace',
    'split_paragraphs',
    'split_sentences',
    'pack_units',
    'parse_fragment',
    'resolve_content_root',
    'extract_plain_text',
    'count_windows',
    'ElementNode',
    'TextNode',
    'CommentNode',
]
