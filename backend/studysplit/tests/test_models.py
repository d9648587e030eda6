"""
Data Models Tests
=================
Tests for segment values, training payloads, progress and records.
"""

import os
import sys
import json
from dataclasses import FrozenInstanceError

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from studysplit.models import (
    ContentType,
    SegmentationTier,
    TextSegment,
    StructuredSegment,
    TimeCue,
    TimeSegment,
    TrainingSegment,
    Training,
    TrainingProgress,
    TrainingRecord,
    clamp_active_index,
    normalize_completed,
    generate_share_id,
)


# =============================================================================
# TEST FIXTURES
# =============================================================================

def create_article_training() -> Training:
    segments = [
        TrainingSegment(
            id=f"segment-{i}",
            label=f"Section {i}",
            word_count=100 * i,
            estimated_minutes=1,
            text=f"Text {i}",
            html=f"<p>Text {i}</p>",
        )
        for i in (1, 2)
    ]
    return Training(
        type=ContentType.ARTICLE,
        title="An Article",
        source_url="https://example.com/post",
        segment_minutes=3,
        segments=segments,
        total_words=300,
        tier=SegmentationTier.MARKUP,
    )


def create_video_training() -> Training:
    window = TimeSegment(start_seconds=0, end_seconds=600, duration_seconds=600)
    segment = TrainingSegment(
        id="segment-1",
        label="Segment 1",
        start_seconds=window.start_seconds,
        end_seconds=window.end_seconds,
        duration_seconds=window.duration_seconds,
        cue=window.cue,
    )
    return Training(
        type=ContentType.VIDEO,
        title="A Video",
        source_url="https://youtu.be/abc123",
        segment_minutes=10,
        segments=[segment],
        duration_seconds=600,
        video_id="abc123",
    )


# =============================================================================
# ENGINE VALUE TESTS
# =============================================================================

def test_engine_values_serialize():
    assert TextSegment(text="a b", word_count=2).to_dict() == {"text": "a b", "word_count": 2}
    assert StructuredSegment(html="<p>a</p>", text="a", word_count=1).to_dict()["html"] == "<p>a</p>"
    assert TimeSegment(0, 59, 59).to_dict() == {"start_seconds": 0, "end_seconds": 59, "duration_seconds": 59}
    print("[PASS] Engine value serialization test passed")


def test_engine_values_frozen():
    segment = StructuredSegment(html="<p>a</p>", text="a", word_count=1)
    try:
        segment.word_count = 5
        assert False, "StructuredSegment should be frozen"
    except FrozenInstanceError:
        pass
    print("[PASS] Engine value immutability test passed")


def test_time_segment_cue():
    cue = TimeSegment(start_seconds=600, end_seconds=1200, duration_seconds=600).cue

    assert cue == TimeCue(start="00:10:00", end="00:20:00")
    print("[PASS] TimeSegment cue test passed")


# =============================================================================
# TRAINING PAYLOAD TESTS
# =============================================================================

def test_article_training_wire_format():
    """Article payloads use camelCase keys and omit video fields."""
    data = create_article_training().to_dict()

    assert data["type"] == "article"
    assert data["sourceUrl"] == "https://example.com/post"
    assert data["segmentMinutes"] == 3
    assert data["totalSegments"] == 2
    assert data["totalWords"] == 300
    assert data["tier"] == "markup"
    assert "videoId" not in data
    assert data["segments"][0] == {
        "id": "segment-1",
        "label": "Section 1",
        "wordCount": 100,
        "estimatedMinutes": 1,
        "text": "Text 1",
        "html": "<p>Text 1</p>",
    }
    print("[PASS] Article wire format test passed")


def test_video_training_wire_format():
    """Video payloads carry time fields and cues, no word counts."""
    data = create_video_training().to_dict()

    assert data["type"] == "video"
    assert data["videoId"] == "abc123"
    assert data["durationSeconds"] == 600
    assert "totalWords" not in data
    assert data["segments"][0] == {
        "id": "segment-1",
        "label": "Segment 1",
        "startSeconds": 0,
        "endSeconds": 600,
        "durationSeconds": 600,
        "cue": {"start": "00:00:00", "end": "00:10:00"},
    }
    print("[PASS] Video wire format test passed")


def test_training_from_dict():
    """Payloads read back into equivalent trainings."""
    for training in (create_article_training(), create_video_training()):
        restored = Training.from_dict(json.loads(json.dumps(training.to_dict())))

        assert restored.type == training.type
        assert restored.segments == training.segments
        assert restored.tier == training.tier
        assert restored.total_segments == training.total_segments
    print("[PASS] Training from_dict test passed")


# =============================================================================
# PROGRESS TESTS
# =============================================================================

def test_clamp_active_index():
    assert clamp_active_index(7, 3) == 2
    assert clamp_active_index(-4, 3) == 0
    assert clamp_active_index(1, 3) == 1
    assert clamp_active_index(5, 0) == 0
    assert clamp_active_index("2", 3) == 0
    assert clamp_active_index(None, 3) == 0
    assert clamp_active_index(True, 3) == 0
    print("[PASS] clamp_active_index test passed")


def test_normalize_completed():
    assert normalize_completed([True], 3) == [True, False, False]
    assert normalize_completed([True, 1, 0, True], 2) == [True, True]
    assert normalize_completed(None, 2) == [False, False]
    assert normalize_completed("yes", 1) == [False]
    print("[PASS] normalize_completed test passed")


def test_progress_normalize():
    """Normalization returns a sized copy and leaves the original alone."""
    progress = TrainingProgress(completed=[True], active_index=7, updated_at="t")
    normalized = progress.normalize(3)

    assert normalized.completed == [True, False, False]
    assert normalized.active_index == 2
    assert normalized.updated_at == "t"
    assert progress.completed == [True]

    fresh = TrainingProgress.fresh(2)
    assert fresh.to_dict() == {"completed": [False, False], "activeIndex": 0}
    print("[PASS] Progress normalize test passed")


def test_progress_wire_format():
    progress = TrainingProgress.from_dict({"completed": [True], "activeIndex": 1, "updatedAt": "t"})

    assert progress.active_index == 1
    assert progress.to_dict() == {"completed": [True], "activeIndex": 1, "updatedAt": "t"}
    assert TrainingProgress.from_dict(None).to_dict() == {"completed": [], "activeIndex": 0}
    print("[PASS] Progress wire format test passed")


# =============================================================================
# RECORD TESTS
# =============================================================================

def test_training_record_round_trip():
    payload = create_article_training().to_dict()
    record = TrainingRecord(
        id="share-1",
        source_url="https://example.com/post",
        payload=payload,
        progress=TrainingProgress.fresh(2),
    )

    data = record.to_dict()
    assert data["sourceUrl"] == "https://example.com/post"
    assert "createdAt" in data

    restored = TrainingRecord.from_dict(json.loads(json.dumps(data)))
    assert restored.id == "share-1"
    assert restored.segment_count == 2
    assert restored.progress.completed == [False, False]
    assert restored.created_at == record.created_at
    print("[PASS] TrainingRecord round trip test passed")


def test_record_without_segments():
    record = TrainingRecord(id="x", source_url="u", payload={}, progress=TrainingProgress())
    assert record.segment_count == 0
    print("[PASS] Record without segments test passed")


def test_generate_share_id():
    first = generate_share_id()
    second = generate_share_id()

    assert first != second
    assert len(first) == 36
    print("[PASS] generate_share_id test passed")


def run_all_tests():
    """Run all model tests."""
    print("\n" + "="*60)
    print("DATA MODEL TESTS")
    print("="*60 + "\n")

    print("\n--- Engine Value Tests ---")
    test_engine_values_serialize()
    test_engine_values_frozen()
    test_time_segment_cue()

    print("\n--- Training Payload Tests ---")
    test_article_training_wire_format()
    test_video_training_wire_format()
    test_training_from_dict()

    print("\n--- Progress Tests ---")
    test_clamp_active_index()
    test_normalize_completed()
    test_progress_normalize()
    test_progress_wire_format()

    print("\n--- Record Tests ---")
    test_training_record_round_trip()
    test_record_without_segments()
    test_generate_share_id()

    print("\n" + "="*60)
    print("ALL MODEL TESTS PASSED")
    print("="*60 + "\n")


if __name__ == "__main__":
    run_all_tests()
