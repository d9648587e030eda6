"""
Video Service Module
====================
Turns a YouTube URL into a segmented training:
- Extract the video id from the URL
- Look up title and duration with the YouTube Data API v3
- Cut the duration into fixed windows with display cues
"""

from typing import Optional, Dict, Any
from urllib.parse import urlparse, parse_qs
import re

import requests

from .errors import (
    ConfigurationError,
    InvalidSourceError,
    VideoMetadataError,
    VideoNotFoundError,
)
from ..config import get_config, AppConfig
from ..models import ContentType, Training, TrainingSegment
from ..segmentation import ContentSegmenter
from ..utils.time_utils import parse_iso8601_duration
from ..logging_config import get_app_logger

logger = get_app_logger("services.video", log_to_file=False)

PATH_ID_PATTERN = re.compile(r'/(shorts|embed)/([^/?]+)')


def extract_video_id(url: str) -> Optional[str]:
    """
    Extract a YouTube video id.

    Supports youtu.be/<id>, youtube.com/watch?v=<id>,
    youtube.com/shorts/<id> and youtube.com/embed/<id>.

    Returns:
        The id, or None when the URL carries none
    """
    try:
        parsed = urlparse(url)
    except ValueError as e:
        logger.error(f"Failed to parse URL: {e}", extra={'url': url})
        return None

    if not parsed.scheme or not parsed.netloc:
        return None

    if parsed.hostname == "youtu.be":
        video_id = parsed.path.lstrip('/').split('/')[0]
        return video_id or None

    query_ids = parse_qs(parsed.query).get('v')
    if query_ids and query_ids[0]:
        return query_ids[0]

    match = PATH_ID_PATTERN.search(parsed.path)
    if match:
        return match.group(2)

    return None


class VideoService:
    """
    Service class for video trainings.

    Provides methods for:
    - Fetching video metadata from the YouTube Data API
    - Building a segmented Training from the duration
    """

    def __init__(self, config: Optional[AppConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize the video service.

        Args:
            config: Application configuration (default: global config)
            session: Optional requests session
        """
        self.config = config or get_config()
        self.session = session or requests.Session()
        self.segmenter = ContentSegmenter(self.config.segmentation)

    def fetch_video_metadata(self, video_id: str) -> Dict[str, Any]:
        """
        Fetch snippet and contentDetails for one video.

        Raises:
            ConfigurationError: No API key configured
            VideoNotFoundError: Unknown, private or unavailable video
            VideoMetadataError: Any other API failure
        """
        youtube = self.config.youtube
        if not youtube.api_key:
            raise ConfigurationError("YOUTUBE_API_KEY environment variable is not configured")

        params = {
            "part": "snippet,contentDetails",
            "id": video_id,
            "key": youtube.api_key,
        }

        logger.info("Calling YouTube Data API", extra={'video_id': video_id, 'api_url': youtube.api_url})

        try:
            response = self.session.get(youtube.api_url, params=params, timeout=youtube.timeout_seconds)
        except requests.RequestException as e:
            logger.error(f"YouTube Data API request failed: {e}", extra={'video_id': video_id})
            raise VideoMetadataError(f"YouTube API request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "YouTube Data API error response",
                extra={'video_id': video_id, 'status': response.status_code, 'reason': response.reason}
            )
            if response.status_code == 403:
                raise VideoMetadataError("YouTube API quota exceeded or invalid API key")
            if response.status_code == 404:
                raise VideoNotFoundError("Video not found")
            raise VideoMetadataError(f"YouTube API error: {response.status_code} {response.reason}")

        items = response.json().get("items") or []
        logger.info("YouTube Data API response", extra={'video_id': video_id, 'item_count': len(items)})

        if not items:
            raise VideoNotFoundError("Video not found or is private/unavailable")

        return items[0]

    def build_training(self, url: str, video_id: str, title: str, duration_seconds: int) -> Training:
        """Cut the duration into windows and assemble the Training."""
        windows = self.segmenter.segment_video(duration_seconds)

        segments = []
        for index, window in enumerate(windows):
            segments.append(TrainingSegment(
                id=f"segment-{index + 1}",
                label=f"Segment {index + 1}",
                start_seconds=window.start_seconds,
                end_seconds=window.end_seconds,
                duration_seconds=window.duration_seconds,
                cue=window.cue,
            ))

        return Training(
            type=ContentType.VIDEO,
            title=title,
            source_url=url,
            segment_minutes=self.config.segmentation.video_segment_minutes,
            segments=segments,
            duration_seconds=duration_seconds,
            video_id=video_id,
        )

    def process_video(self, url: str) -> Training:
        """
        Resolve a YouTube URL to a segmented Training.

        Raises:
            InvalidSourceError: No video id in the URL
            VideoMetadataError: Metadata missing or duration unknown
        """
        logger.info("Starting video processing", extra={'url': url})

        video_id = extract_video_id(url)
        if not video_id:
            logger.error("Failed to extract video ID", extra={'url': url})
            raise InvalidSourceError("Invalid YouTube URL format")

        video_data = self.fetch_video_metadata(video_id)

        title = video_data.get("snippet", {}).get("title") or "Video"
        duration_iso = video_data.get("contentDetails", {}).get("duration", "")
        duration_seconds = parse_iso8601_duration(duration_iso)

        logger.info(
            "Video metadata retrieved",
            extra={'video_id': video_id, 'duration_iso': duration_iso, 'duration_seconds': duration_seconds}
        )

        if duration_seconds == 0:
            raise VideoMetadataError("Unable to determine video duration")

        return self.build_training(url, video_id, title, duration_seconds)
