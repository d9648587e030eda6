"""
Article Service Module
======================
Turns an article URL into a segmented training:
- Download the page with requests
- Extract the readable article (markup, text, title) with trafilatura
- Segment it (markup first, plain text as fallback)
- Attach ids, labels and reading-time estimates
"""

from typing import Optional, Dict, Any, List

import requests
import trafilatura
from bs4 import BeautifulSoup

from .errors import ContentFetchError, ContentExtractionError
from ..config import get_config, AppConfig
from ..models import ContentType, StructuredSegment, Training, TrainingSegment
from ..segmentation import ContentSegmenter
from ..logging_config import get_app_logger

logger = get_app_logger("services.article", log_to_file=False)


def estimate_minutes(word_count: int, words_per_minute: int) -> int:
    """Reading time rounded half up, never below one minute."""
    return max(1, int(word_count / words_per_minute + 0.5))


class ArticleService:
    """
    Service class for article trainings.

    Provides methods for:
    - Fetching article HTML
    - Extracting readable content
    - Building a segmented Training
    """

    def __init__(self, config: Optional[AppConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize the article service.

        Args:
            config: Application configuration (default: global config)
            session: Optional requests session, shared for connection reuse
        """
        self.config = config or get_config()
        self.session = session or requests.Session()
        self.segmenter = ContentSegmenter(self.config.segmentation)

    def fetch_html(self, url: str) -> str:
        """
        Download a page.

        Raises:
            ContentFetchError: On network failure or a non-2xx response
        """
        fetch = self.config.fetch
        headers = {
            "User-Agent": fetch.user_agent,
            "Accept": fetch.accept,
            "Accept-Language": fetch.accept_language,
        }

        try:
            response = self.session.get(url, headers=headers, timeout=fetch.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to fetch article: {e}", extra={'url': url})
            raise ContentFetchError(f"Unable to fetch article: {e}") from e

        logger.info(f"Fetched article HTML ({len(response.text)} chars)", extra={'url': url})
        return response.text

    def extract_article(self, html: str, url: str) -> Dict[str, Any]:
        """
        Extract the readable article from a page.

        Returns:
            Dictionary with "title", "html" (may be None) and "text"

        Raises:
            ContentExtractionError: If nothing readable was found
        """
        extract_options = dict(
            url=url,
            include_comments=False,
            include_tables=False,
            include_images=False,
            include_formatting=True,
        )
        content_html = trafilatura.extract(html, output_format="html", **extract_options)
        content_text = trafilatura.extract(html, output_format="txt", **extract_options)

        if not content_html and not content_text:
            logger.warning("Content extraction failed", extra={'url': url})
            raise ContentExtractionError("Unable to parse article content")

        metadata = trafilatura.extract_metadata(html)
        title = metadata.title if metadata and metadata.title else self._page_title(html)

        return {
            "title": title or "Article",
            "html": content_html,
            "text": content_text or "",
        }

    @staticmethod
    def _page_title(html: str) -> Optional[str]:
        soup = BeautifulSoup(html, "html.parser")
        if soup.title and soup.title.string:
            return soup.title.string.strip()
        return None

    def build_training(self, article: Dict[str, Any], url: str) -> Training:
        """Segment extracted article content and assemble the Training."""
        segments, tier = self.segmenter.segment_article(html=article.get("html"), text=article.get("text"))
        words_per_minute = self.config.segmentation.words_per_minute

        training_segments: List[TrainingSegment] = []
        for index, segment in enumerate(segments):
            training_segments.append(TrainingSegment(
                id=f"segment-{index + 1}",
                label=f"Section {index + 1}",
                word_count=segment.word_count,
                estimated_minutes=estimate_minutes(segment.word_count, words_per_minute),
                text=segment.text,
                html=segment.html if isinstance(segment, StructuredSegment) else None,
            ))

        return Training(
            type=ContentType.ARTICLE,
            title=article.get("title") or "Article",
            source_url=url,
            segment_minutes=self.config.segmentation.article_segment_minutes,
            segments=training_segments,
            total_words=sum(s.word_count for s in segments),
            tier=tier,
        )

    def process_article(self, url: str) -> Training:
        """
        Fetch, extract and segment an article.

        Args:
            url: Article URL

        Returns:
            Segmented Training
        """
        html = self.fetch_html(url)
        article = self.extract_article(html, url)
        training = self.build_training(article, url)

        logger.info(
            f"Processed article into {training.total_segments} segments",
            extra={'url': url, 'total_words': training.total_words, 'tier': training.tier.value}
        )
        return training
