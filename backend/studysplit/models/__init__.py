"""
Data Models Package
===================
Exports all data model classes for StudySplit.

Usage:
    from studysplit.models import TextSegment, StructuredSegment, TimeSegment
    from studysplit.models import Training, TrainingSegment, TrainingProgress
"""

from .schemas import (
    # Enums
    ContentType,
    SegmentationTier,

    # Base
    BaseModel,

    # Engine values
    TextSegment,
    StructuredSegment,
    TimeCue,
    TimeSegment,

    # Training payload
    TrainingSegment,
    Training,

    # Progress and persistence
    TrainingProgress,
    TrainingRecord,

    # Utilities
    clamp_active_index,
    normalize_completed,
    generate_share_id,
    utc_timestamp,
)

__all__ = [
    # Enums
    'ContentType',
    'SegmentationTier',

    # Base
    'BaseModel',

    # Engine values
    'TextSegment',
    'StructuredSegment',
    'TimeCue',
    'TimeSegment',

    # Training payload
    'TrainingSegment',
    'Training',

    # Progress and persistence
    'TrainingProgress',
    'TrainingRecord',

    # Utilities
    'clamp_active_index',
    'normalize_completed',
    'generate_share_id',
    'utc_timestamp',
]
