"""
Content Service Module
======================
Routes a source URL to the article or video service.
"""

import re
from typing import Optional

from .article_service import ArticleService
from .video_service import VideoService
from .errors import InvalidSourceError
from ..config import get_config, AppConfig
from ..models import Training

YOUTUBE_LINK_PATTERN = re.compile(r'(youtube\.com|youtu\.be)', re.IGNORECASE)


def is_youtube_link(url: str) -> bool:
    return bool(YOUTUBE_LINK_PATTERN.search(url or ""))


class ContentService:
    """Dispatches URLs: YouTube links to VideoService, everything else to ArticleService."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        article_service: Optional[ArticleService] = None,
        video_service: Optional[VideoService] = None
    ):
        self.config = config or get_config()
        self.article_service = article_service or ArticleService(self.config)
        self.video_service = video_service or VideoService(self.config)

    def process_url(self, url: str) -> Training:
        """
        Build a Training for any supported URL.

        Raises:
            InvalidSourceError: Empty URL
            ProcessingError: Whatever the chosen service raises
        """
        url = (url or "").strip()
        if not url:
            raise InvalidSourceError("A url is required")

        if is_youtube_link(url):
            return self.video_service.process_video(url)
        return self.article_service.process_article(url)
