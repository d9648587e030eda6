"""
Services Package
================
Retrieval and assembly around the segmentation engine.
"""

from .errors import (
    ProcessingError,
    InvalidSourceError,
    ConfigurationError,
    ContentFetchError,
    ContentExtractionError,
    VideoMetadataError,
    VideoNotFoundError,
)
from .article_service import ArticleService, estimate_minutes
from .video_service import VideoService, extract_video_id
from .content_service import ContentService, is_youtube_link
from .response import build_response_payload, build_share_api_url, training_response

__all__ = [
    'ProcessingError',
    'InvalidSourceError',
    'ConfigurationError',
    'ContentFetchError',
    'ContentExtractionError',
    'VideoMetadataError',
    'VideoNotFoundError',
    'ArticleService',
    'VideoService',
    'ContentService',
    'estimate_minutes',
    'extract_video_id',
    'is_youtube_link',
    'build_response_payload',
    'build_share_api_url',
    'training_response',
]
