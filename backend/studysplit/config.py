"""
Configuration Management Module
===============================
Centralized configuration system for the StudySplit service.

This module provides:
- Type-safe configuration via dataclasses
- Environment variable overrides
- Default values with documentation

Usage:
    from studysplit.config import get_config
    config = get_config()

    # Access configuration
    words = config.segmentation.max_words_per_segment
    window = config.segmentation.video_segment_seconds
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import os
import json
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================

@dataclass
class PathConfig:
    """Configuration for file system paths."""

    # Base directory (defaults to package directory)
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent)

    # Runtime directories
    data_dir: str = "data"
    trainings_dir: str = "data/trainings"
    logs_dir: str = "logs"

    @property
    def data(self) -> Path:
        return self.base_dir / self.data_dir

    @property
    def trainings(self) -> Path:
        return self.base_dir / self.trainings_dir

    @property
    def logs(self) -> Path:
        return self.base_dir / self.logs_dir

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        for dir_path in [self.data, self.trainings, self.logs]:
            dir_path.mkdir(parents=True, exist_ok=True)


@dataclass
class SegmentationConfig:
    """
    Configuration for content segmentation.

    Articles are budgeted in words: a study session of
    `article_segment_minutes` at `words_per_minute` reading speed.
    Videos are cut into fixed windows of `video_segment_minutes`.
    """

    # Reading speed used for word budgets and minute estimates
    words_per_minute: int = 200
    article_segment_minutes: int = 3

    # Fixed window for time-based sources
    video_segment_minutes: int = 10

    # Container tags unwrapped when they are the only child of the root
    wrapper_tags: list = field(default_factory=lambda: [
        "div", "section", "article", "main", "body", "span"
    ])

    # Tags whose content never reaches a segment
    forbidden_tags: list = field(default_factory=lambda: [
        "script", "style", "noscript", "template"
    ])

    @property
    def max_words_per_segment(self) -> int:
        return self.words_per_minute * self.article_segment_minutes

    @property
    def video_segment_seconds(self) -> int:
        return self.video_segment_minutes * 60


@dataclass
class FetchConfig:
    """Configuration for retrieving article HTML."""

    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    )
    accept: str = "text/html,application/xhtml+xml,application/xml"
    accept_language: str = "en-US,en;q=0.9"
    timeout_seconds: int = 15


@dataclass
class YouTubeConfig:
    """Configuration for the YouTube Data API."""

    # API configuration (loaded from environment)
    api_key: Optional[str] = field(default_factory=lambda: os.getenv("YOUTUBE_API_KEY"))
    api_url: str = "https://www.googleapis.com/youtube/v3/videos"

    # Request settings
    timeout_seconds: int = 10


@dataclass
class StorageConfig:
    """Configuration for persisted trainings."""

    # Keep records in process memory instead of JSON files
    # (serverless deployments have no writable disk)
    in_memory: bool = False


@dataclass
class FlaskConfig:
    """Configuration for Flask web server."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 4000
    debug: bool = True

    # Security
    secret_key: str = field(default_factory=lambda: os.getenv("FLASK_SECRET_KEY", "dev-secret-key"))

    # CORS
    cors_origins: list = field(default_factory=lambda: ["*"])

    # Request body limit
    max_content_length: int = 1024 * 1024  # 1MB


@dataclass
class LoggingConfig:
    """Configuration for logging and decision tracking."""

    log_level: str = "INFO"
    log_decisions: bool = True
    log_requests: bool = True

    # Name used for log file organization
    log_name: str = "studysplit"


@dataclass
class AppConfig:
    """
    Master configuration class that aggregates all configuration sections.

    This is the main configuration object used throughout the application.
    """

    paths: PathConfig = field(default_factory=PathConfig)
    segmentation: SegmentationConfig = field(default_factory=SegmentationConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    youtube: YouTubeConfig = field(default_factory=YouTubeConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    flask: FlaskConfig = field(default_factory=FlaskConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Ensure all directories exist after initialization."""
        self.paths.ensure_directories()

    def to_dict(self) -> dict:
        """Convert configuration to dictionary for serialization."""
        def convert(obj):
            if hasattr(obj, '__dataclass_fields__'):
                return {k: convert(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, set):
                return list(obj)
            return obj
        return convert(self)

    def save(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Configuration saved to {filepath}")

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        """Create configuration from dictionary."""
        # base_dir is serialized as a string
        paths_data = dict(data.get('paths', {}))
        if 'base_dir' in paths_data and isinstance(paths_data['base_dir'], str):
            paths_data['base_dir'] = Path(paths_data['base_dir'])

        return cls(
            paths=PathConfig(**paths_data),
            segmentation=SegmentationConfig(**data.get('segmentation', {})),
            fetch=FetchConfig(**data.get('fetch', {})),
            youtube=YouTubeConfig(**data.get('youtube', {})),
            storage=StorageConfig(**data.get('storage', {})),
            flask=FlaskConfig(**data.get('flask', {})),
            logging=LoggingConfig(**data.get('logging', {})),
        )

    @classmethod
    def load(cls, filepath: str) -> "AppConfig":
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        logger.info(f"Configuration loaded from {filepath}")
        return cls.from_dict(data)


# =============================================================================
# GLOBAL CONFIGURATION SINGLETON
# =============================================================================

_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global application configuration.

    Creates a default configuration on first access.

    Returns:
        The global AppConfig instance
    """
    global _config
    if _config is None:
        _config = AppConfig()
        logger.info("Initialized default application configuration")
    return _config


def set_config(config: AppConfig) -> None:
    """
    Set the global application configuration.

    Args:
        config: The AppConfig instance to use globally
    """
    global _config
    _config = config
    logger.info("Set global configuration")


def reset_config() -> None:
    """Reset the global configuration to None (forces reload on next get_config)."""
    global _config
    _config = None
    logger.info("Reset global configuration")


# =============================================================================
# ENVIRONMENT VARIABLE OVERRIDES
# =============================================================================

SECTION_NAMES = ('segmentation', 'fetch', 'youtube', 'storage', 'flask', 'logging')


def apply_environment_overrides(config: AppConfig) -> AppConfig:
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern:
    STUDYSPLIT_{SECTION}_{KEY}

    Examples:
        STUDYSPLIT_SEGMENTATION_WORDS_PER_MINUTE=250
        STUDYSPLIT_FLASK_PORT=8080
        STUDYSPLIT_LOGGING_LOG_LEVEL=DEBUG

    Also supports common simplified environment variables:
        YOUTUBE_API_KEY=... (maps to youtube.api_key)
        PORT=8080 (maps to flask.port)
        VERCEL=1 (maps to storage.in_memory)

    Args:
        config: Base configuration to override

    Returns:
        Configuration with environment overrides applied
    """
    if os.getenv("YOUTUBE_API_KEY"):
        config.youtube.api_key = os.getenv("YOUTUBE_API_KEY")
        logger.info("Environment override: youtube.api_key = <set>")

    if os.getenv("PORT"):
        try:
            config.flask.port = int(os.getenv("PORT"))
            logger.info(f"Environment override: flask.port = {config.flask.port}")
        except ValueError:
            logger.warning(f"Ignoring non-integer PORT value: {os.getenv('PORT')}")

    if os.getenv("VERCEL"):
        config.storage.in_memory = True
        logger.info("Environment override: storage.in_memory = True")

    prefix = "STUDYSPLIT_"

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        parts = key[len(prefix):].lower().split('_', 1)
        if len(parts) != 2:
            continue

        section, attr = parts
        if section not in SECTION_NAMES:
            continue

        section_config = getattr(config, section, None)
        if section_config is None or not hasattr(section_config, attr):
            continue

        # Convert value to appropriate type
        current_value = getattr(section_config, attr)
        try:
            if isinstance(current_value, bool):
                typed_value = value.lower() in ('true', '1', 'yes')
            elif isinstance(current_value, int):
                typed_value = int(value)
            elif isinstance(current_value, float):
                typed_value = float(value)
            elif isinstance(current_value, list):
                typed_value = [item.strip() for item in value.split(',') if item.strip()]
            else:
                typed_value = value

            setattr(section_config, attr, typed_value)
            logger.info(f"Environment override: {section}.{attr} = {typed_value}")

        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to apply environment override {key}: {e}")

    return config


# =============================================================================
# PRESET CONFIGURATIONS FOR COMMON SCENARIOS
# =============================================================================

def get_development_config() -> AppConfig:
    """Get configuration optimized for development."""
    config = AppConfig()
    config.flask.debug = True
    config.logging.log_level = "DEBUG"
    return config


def get_production_config() -> AppConfig:
    """Get configuration optimized for production."""
    config = AppConfig()
    config.flask.debug = False
    config.logging.log_level = "INFO"
    return config
