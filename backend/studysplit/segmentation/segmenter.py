"""
Content Segmenter Module
========================
Main interface for segmenting articles and videos.

The ContentSegmenter derives budgets from configuration, validates them,
runs the right engine and logs what it decided:
- Articles: markup segmenter first, plain-text segmenter when the markup
  yields nothing
- Videos: fixed-window timeline segmenter
"""

from typing import List, Optional, Tuple, Union

from .markup import segment_markup, extract_plain_text
from .text import segment_text
from .timeline import segment_timeline
from ..models import SegmentationTier, StructuredSegment, TextSegment, TimeSegment
from ..config import SegmentationConfig, get_config
from ..logging_config import get_app_logger, log_segmentation_decision

logger = get_app_logger("segmentation", log_to_file=False)

ArticleSegment = Union[StructuredSegment, TextSegment]


def _require_positive(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


class ContentSegmenter:
    """
    Unified interface for content segmentation.

    Usage:
        segmenter = ContentSegmenter()
        segments, tier = segmenter.segment_article(html=article_html, text=article_text)
        windows = segmenter.segment_video(total_seconds=1500)
    """

    def __init__(self, config: Optional[SegmentationConfig] = None):
        """
        Initialize the segmenter.

        Args:
            config: Segmentation configuration (default: from global config)

        Raises:
            ValueError: If the configured budgets are not positive
        """
        self.config = config or get_config().segmentation
        self.word_budget = _require_positive("word budget", self.config.max_words_per_segment)
        self.window_seconds = _require_positive("window size", self.config.video_segment_seconds)

        logger.debug(
            "Initialized ContentSegmenter",
            extra={'word_budget': self.word_budget, 'window_seconds': self.window_seconds}
        )

    def segment_article(
        self,
        html: Optional[str] = None,
        text: Optional[str] = None,
        share_id: Optional[str] = None
    ) -> Tuple[List[ArticleSegment], SegmentationTier]:
        """
        Segment article content, preferring markup over plain text.

        Args:
            html: Article markup, if the extractor produced any
            text: Article plain text; derived from the markup's paragraphs
                  when missing
            share_id: Optional id for decision logging

        Returns:
            (segments, tier) where tier names the segmenter that produced them
        """
        segments: List[ArticleSegment] = segment_markup(
            html,
            self.word_budget,
            wrapper_tags=self.config.wrapper_tags,
            forbidden_tags=self.config.forbidden_tags,
        )
        tier = SegmentationTier.MARKUP

        if not segments:
            if html and html.strip():
                logger.info("Markup produced no segments, falling back to plain text")
            fallback_text = text if text and text.strip() else extract_plain_text(html)
            segments = segment_text(fallback_text, self.word_budget)
            tier = SegmentationTier.TEXT

        word_counts = [s.word_count for s in segments]
        log_segmentation_decision(
            "article_segmented",
            {
                'tier': tier.value,
                'word_budget': self.word_budget,
                'segment_count': len(segments),
                'total_words': sum(word_counts),
                'oversized_segments': sum(1 for count in word_counts if count > self.word_budget),
            },
            share_id=share_id
        )

        return segments, tier

    def segment_video(self, total_seconds: int, share_id: Optional[str] = None) -> List[TimeSegment]:
        """
        Cut a video timeline into fixed windows.

        Args:
            total_seconds: Video duration in seconds
            share_id: Optional id for decision logging

        Returns:
            List of TimeSegment covering the full duration
        """
        if total_seconds < 0:
            raise ValueError(f"total duration must not be negative, got {total_seconds!r}")

        segments = segment_timeline(int(total_seconds), self.window_seconds)

        log_segmentation_decision(
            "video_segmented",
            {
                'window_seconds': self.window_seconds,
                'total_seconds': total_seconds,
                'segment_count': len(segments),
            },
            share_id=share_id
        )

        return segments

    def get_budget_info(self) -> dict:
        """Get the budgets currently in effect."""
        return {
            'words_per_minute': self.config.words_per_minute,
            'article_segment_minutes': self.config.article_segment_minutes,
            'word_budget': self.word_budget,
            'video_segment_minutes': self.config.video_segment_minutes,
            'window_seconds': self.window_seconds,
        }
