"""
Service Errors
==============
Exceptions raised while turning a URL into a training.

Routes catch ProcessingError and report its message; anything else is an
unexpected failure.
"""


class ProcessingError(Exception):
    """Base class for failures while processing a source URL."""


class InvalidSourceError(ProcessingError):
    """The URL cannot be handled (malformed, or no video id in it)."""


class ConfigurationError(ProcessingError):
    """A required setting (such as an API key) is missing."""


class ContentFetchError(ProcessingError):
    """The article could not be downloaded."""


class ContentExtractionError(ProcessingError):
    """The downloaded page held no readable article."""


class VideoMetadataError(ProcessingError):
    """Video metadata was unavailable or unusable."""


class VideoNotFoundError(VideoMetadataError):
    """The video does not exist or is private."""
