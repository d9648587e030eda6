"""
Logging System
==============
Structured logging for the StudySplit service.

This module provides:
- Structured JSON logging for machine-parseable outputs
- Named loggers for segmentation, services, and routes
- Decision logging for segmentation outcomes
- Per-request event logging for the web layer

Usage:
    from studysplit.logging_config import get_app_logger, log_segmentation_decision

    logger = get_app_logger("services.article")
    logger.info("Fetched article", extra={"url": "..."})

    log_segmentation_decision("article_segmented", {"tier": "markup", ...})
"""

import sys
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, Union

from .config import get_config


# Attributes present on every LogRecord; anything else came in via extra={}
_RESERVED_ATTRS = (
    'name', 'msg', 'args', 'created', 'filename',
    'funcName', 'levelname', 'levelno', 'lineno',
    'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info',
    'exc_info', 'exc_text', 'thread', 'threadName',
    'taskName', 'message', 'context',
)


# =============================================================================
# CUSTOM FORMATTERS
# =============================================================================

class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON objects with consistent structure:
    {
        "timestamp": "2024-01-15T10:30:00.123456",
        "level": "INFO",
        "logger": "studysplit.segmentation",
        "message": "Segmented article",
        "context": {...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, 'context') and record.context:
            log_data['context'] = record.context

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            try:
                json.dumps(value)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.

    Format: [LEVEL] logger: message (key=value, ...)
    """

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level = f"{self.COLORS[level]}{level}{self.RESET}"

        msg = f"[{level}] {record.name}: {record.getMessage()}"

        extras = []
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            if isinstance(value, (str, int, float, bool)):
                extras.append(f"{key}={value}")
            elif isinstance(value, dict) and len(value) < 3:
                extras.append(f"{key}={value}")

        if extras:
            msg += f" ({', '.join(extras)})"

        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)

        return msg


# =============================================================================
# LOGGER FACTORY
# =============================================================================

_loggers: Dict[str, logging.Logger] = {}
_initialized: bool = False


def _setup_root_logger():
    """Configure the root logger with console handler."""
    global _initialized
    if _initialized:
        return

    config = get_config()
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.logging.log_level, logging.INFO))

    root_logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(ConsoleFormatter())
    root_logger.addHandler(console_handler)

    _initialized = True


def get_app_logger(name: str, log_to_file: bool = True) -> logging.Logger:
    """
    Get or create an application logger.

    Args:
        name: Logger name (e.g., "segmentation", "services.video", "routes")
        log_to_file: Whether to also write JSON lines to logs/<name>/

    Returns:
        Configured logger instance
    """
    _setup_root_logger()

    full_name = f"studysplit.{name}"

    if full_name in _loggers:
        return _loggers[full_name]

    config = get_config()
    logger = logging.getLogger(full_name)
    logger.setLevel(getattr(logging, config.logging.log_level, logging.INFO))
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(ConsoleFormatter())
    logger.addHandler(console_handler)

    if log_to_file:
        log_dir = config.paths.logs / name
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d")
        log_file = log_dir / f"{config.logging.log_name}_{timestamp}.jsonl"

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    _loggers[full_name] = logger
    return logger


def get_decision_logger() -> logging.Logger:
    """Get a logger for segmentation decisions."""
    return get_app_logger("decisions")


def get_request_logger(share_id: Optional[str] = None) -> logging.Logger:
    """Get a logger for web requests, optionally bound to a share id."""
    logger = get_app_logger("requests")
    if share_id:
        logger = logging.LoggerAdapter(logger, {'share_id': share_id})
    return logger


# =============================================================================
# CONVENIENCE LOGGING FUNCTIONS
# =============================================================================

def log_segmentation_decision(
    decision_type: str,
    details: Dict[str, Any],
    share_id: Optional[str] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log a segmentation outcome.

    Args:
        decision_type: Type of decision (e.g., "article_segmented", "markup_fallback")
        details: Decision details
        share_id: Training share id, when known
        logger: Optional logger override
    """
    config = get_config()
    if not config.logging.log_decisions:
        return

    log = logger or get_decision_logger()
    extra = {
        'decision_type': decision_type,
        'details': details
    }
    if share_id:
        extra['share_id'] = share_id

    log.info(f"Decision: {decision_type}", extra=extra)


def log_request_event(
    event: str,
    source_url: str,
    share_id: Optional[str] = None,
    details: Dict[str, Any] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Log a web-layer event for a training request."""
    config = get_config()
    if not config.logging.log_requests:
        return

    log = logger or get_request_logger()
    log.info(
        f"Request event: {event}",
        extra={
            'event': event,
            'source_url': source_url,
            'share_id': share_id or '',
            'details': details or {}
        }
    )


# =============================================================================
# LOG FILE UTILITIES
# =============================================================================

def get_log_path(log_type: str = "decisions") -> Path:
    """Get today's log file path for a log type."""
    config = get_config()
    log_dir = config.paths.logs / log_type
    timestamp = datetime.now().strftime("%Y%m%d")
    return log_dir / f"{config.logging.log_name}_{timestamp}.jsonl"


def read_log_file(log_path: Union[str, Path]) -> list:
    """
    Read a JSONL log file and return list of log entries.

    Args:
        log_path: Path to the log file

    Returns:
        List of parsed log entry dictionaries
    """
    entries = []
    with open(log_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line:
                try:
                    entries.append(json.loads(line))
                except json.JSONDecodeError:
                    continue
    return entries
