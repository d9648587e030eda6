"""
Data Models and Schemas Module
==============================
Defines structured data representations for segmentation and trainings.

This module provides:
- Immutable value types produced by the segmentation engine
- Assembled training payloads served by the web layer
- Progress and persisted-record models
- Serialization/deserialization methods

Engine values (TextSegment, StructuredSegment, TimeSegment) carry no
identifiers or labels. Those are attached when a Training is assembled.

Wire format: Training, TrainingSegment and TrainingProgress serialize to
camelCase keys because that is what the web client consumes.

Usage:
    from studysplit.models import TextSegment, Training, TrainingProgress

    progress = TrainingProgress(completed=[True], active_index=7)
    progress = progress.normalize(segment_count=3)   # active_index -> 2
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any
import json
import uuid

from ..utils.time_utils import format_clock


# =============================================================================
# ENUMS
# =============================================================================

class ContentType(str, Enum):
    """Kinds of source content."""
    ARTICLE = "article"
    VIDEO = "video"


class SegmentationTier(str, Enum):
    """Which segmenter produced an article's segments."""
    MARKUP = "markup"
    TEXT = "text"


# =============================================================================
# BASE CLASSES
# =============================================================================

class BaseModel:
    """Base class for all data models with common serialization methods."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary, handling nested objects."""
        def convert(obj):
            if isinstance(obj, BaseModel):
                return obj.to_dict()
            elif isinstance(obj, Enum):
                return obj.value
            elif isinstance(obj, datetime):
                return obj.isoformat()
            elif isinstance(obj, (list, tuple)):
                return [convert(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            return obj

        return {k: convert(v) for k, v in asdict(self).items()}

    def to_json(self, indent: int = 2) -> str:
        """Convert model to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseModel":
        """Create model from dictionary. Override in subclasses for nested objects."""
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "BaseModel":
        """Create model from JSON string."""
        return cls.from_dict(json.loads(json_str))


# =============================================================================
# ENGINE VALUES
# =============================================================================

@dataclass(frozen=True)
class TextSegment(BaseModel):
    """A plain-text segment: units joined by blank lines."""
    text: str
    word_count: int


@dataclass(frozen=True)
class StructuredSegment(BaseModel):
    """
    A segment cut from an HTML document.

    Attributes:
        html: Original markup of every unit, concatenated unmodified
        text: Whitespace-collapsed plain text of the same units
        word_count: Sum of the units' word counts
    """
    html: Optional[str]
    text: str
    word_count: int


@dataclass(frozen=True)
class TimeCue(BaseModel):
    """Display cue for a time segment (HH:MM:SS strings)."""
    start: str
    end: str


@dataclass(frozen=True)
class TimeSegment(BaseModel):
    """One fixed window of a timeline, in whole seconds."""
    start_seconds: int
    end_seconds: int
    duration_seconds: int

    @property
    def cue(self) -> TimeCue:
        return TimeCue(start=format_clock(self.start_seconds), end=format_clock(self.end_seconds))


# =============================================================================
# TRAINING PAYLOAD
# =============================================================================

@dataclass
class TrainingSegment(BaseModel):
    """
    A segment as served to the client, with identifier and label.

    Article segments carry word_count/estimated_minutes/text (and html when
    the markup segmenter produced them). Video segments carry the time
    fields and a cue.
    """
    id: str
    label: str
    word_count: Optional[int] = None
    estimated_minutes: Optional[int] = None
    text: Optional[str] = None
    html: Optional[str] = None
    start_seconds: Optional[int] = None
    end_seconds: Optional[int] = None
    duration_seconds: Optional[int] = None
    cue: Optional[TimeCue] = None

    _WIRE_KEYS = (
        ('id', 'id'),
        ('label', 'label'),
        ('word_count', 'wordCount'),
        ('estimated_minutes', 'estimatedMinutes'),
        ('text', 'text'),
        ('html', 'html'),
        ('start_seconds', 'startSeconds'),
        ('end_seconds', 'endSeconds'),
        ('duration_seconds', 'durationSeconds'),
    )

    def to_dict(self) -> Dict[str, Any]:
        """camelCase dict, omitting fields that do not apply to this kind."""
        data = {}
        for attr, key in self._WIRE_KEYS:
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        if self.cue is not None:
            data['cue'] = self.cue.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrainingSegment":
        kwargs = {attr: data.get(key) for attr, key in cls._WIRE_KEYS}
        if data.get('cue'):
            kwargs['cue'] = TimeCue(**data['cue'])
        return cls(**kwargs)


@dataclass
class Training(BaseModel):
    """
    A segmented piece of content ready for study.

    Attributes:
        type: Article or video
        title: Display title
        source_url: URL the content was retrieved from
        segment_minutes: Intended length of one study session
        segments: Assembled segments in source order
        total_words: Sum of segment word counts (articles)
        duration_seconds: Full video duration (videos)
        video_id: YouTube video id (videos)
        tier: Segmenter that produced article segments
    """
    type: ContentType
    title: str
    source_url: str
    segment_minutes: int
    segments: List[TrainingSegment] = field(default_factory=list)
    total_words: Optional[int] = None
    duration_seconds: Optional[int] = None
    video_id: Optional[str] = None
    tier: Optional[SegmentationTier] = None

    @property
    def total_segments(self) -> int:
        return len(self.segments)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'type': self.type.value,
            'title': self.title,
            'sourceUrl': self.source_url,
            'segmentMinutes': self.segment_minutes,
            'totalSegments': self.total_segments,
            'segments': [s.to_dict() for s in self.segments],
        }
        if self.total_words is not None:
            data['totalWords'] = self.total_words
        if self.duration_seconds is not None:
            data['durationSeconds'] = self.duration_seconds
        if self.video_id is not None:
            data['videoId'] = self.video_id
        if self.tier is not None:
            data['tier'] = self.tier.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Training":
        return cls(
            type=ContentType(data['type']),
            title=data.get('title', ''),
            source_url=data.get('sourceUrl', ''),
            segment_minutes=data.get('segmentMinutes', 0),
            segments=[TrainingSegment.from_dict(s) for s in data.get('segments', [])],
            total_words=data.get('totalWords'),
            duration_seconds=data.get('durationSeconds'),
            video_id=data.get('videoId'),
            tier=SegmentationTier(data['tier']) if data.get('tier') else None,
        )


# =============================================================================
# PROGRESS AND PERSISTENCE
# =============================================================================

def clamp_active_index(active_index: Any, segment_count: int) -> int:
    """Clamp an active index into [0, max(segment_count - 1, 0)]; non-ints become 0."""
    if not isinstance(active_index, int) or isinstance(active_index, bool):
        active_index = 0
    max_index = max(segment_count - 1, 0)
    return min(max(active_index, 0), max_index)


def normalize_completed(completed: Optional[List[Any]], segment_count: int) -> List[bool]:
    """One bool per segment; missing entries are False, extras are dropped."""
    completed = completed if isinstance(completed, list) else []
    return [bool(completed[i]) if i < len(completed) else False for i in range(segment_count)]


@dataclass
class TrainingProgress(BaseModel):
    """Viewing progress for one training."""
    completed: List[bool] = field(default_factory=list)
    active_index: int = 0
    updated_at: Optional[str] = None

    def normalize(self, segment_count: int) -> "TrainingProgress":
        """Return a copy sized to `segment_count` with a clamped active index."""
        return TrainingProgress(
            completed=normalize_completed(self.completed, segment_count),
            active_index=clamp_active_index(self.active_index, segment_count),
            updated_at=self.updated_at,
        )

    @classmethod
    def fresh(cls, segment_count: int) -> "TrainingProgress":
        """Nothing completed, first segment active."""
        return cls(completed=[False] * segment_count, active_index=0)

    def to_dict(self) -> Dict[str, Any]:
        data = {'completed': list(self.completed), 'activeIndex': self.active_index}
        if self.updated_at:
            data['updatedAt'] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrainingProgress":
        data = data or {}
        return cls(
            completed=data.get('completed') or [],
            active_index=data.get('activeIndex', 0),
            updated_at=data.get('updatedAt'),
        )


@dataclass
class TrainingRecord(BaseModel):
    """A persisted training keyed by its share id."""
    id: str
    source_url: str
    payload: Dict[str, Any]
    progress: TrainingProgress
    created_at: str = field(default_factory=lambda: utc_timestamp())

    @property
    def segment_count(self) -> int:
        segments = self.payload.get('segments') if isinstance(self.payload, dict) else None
        return len(segments) if isinstance(segments, list) else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'sourceUrl': self.source_url,
            'payload': self.payload,
            'progress': self.progress.to_dict(),
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrainingRecord":
        return cls(
            id=data['id'],
            source_url=data.get('sourceUrl', ''),
            payload=data.get('payload') or {},
            progress=TrainingProgress.from_dict(data.get('progress')),
            created_at=data.get('createdAt') or utc_timestamp(),
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def utc_timestamp() -> str:
    """Current time as an ISO 8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


def generate_share_id() -> str:
    """Generate a random share identifier for a training."""
    return str(uuid.uuid4())
