"""
Training Store Module
=====================
Persists trainings and their viewing progress, keyed by share id.

Records are JSON files (<trainings_dir>/<id>.json) or, in memory mode,
entries in a process-local dict. Writes to the same id are serialized
with a per-id lock so concurrent progress updates cannot interleave a
read-modify-write.
"""

import json
import logging
import re
import threading
import weakref
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..models import TrainingProgress, TrainingRecord, utc_timestamp

logger = logging.getLogger(__name__)

SHARE_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')


class SourceMismatchError(Exception):
    """A progress update named a different source URL than the stored record."""


class TrainingStore:
    """
    Store for TrainingRecord objects.

    Usage:
        store = TrainingStore(config.paths.trainings)
        store.save(share_id, url, payload, TrainingProgress.fresh(n))
        record = store.update_progress(share_id, url, completed=[True], active_index=1)
    """

    def __init__(self, directory: Union[str, Path], in_memory: bool = False):
        """
        Initialize the store.

        Args:
            directory: Where JSON records live (ignored in memory mode)
            in_memory: Keep records in a dict instead of on disk
        """
        self.directory = Path(directory)
        self.in_memory = in_memory
        self._memory: Dict[str, Dict[str, Any]] = {}
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

        if not in_memory:
            self.directory.mkdir(parents=True, exist_ok=True)

    def _lock_for(self, share_id: str) -> threading.Lock:
        # Entries live only while some caller holds the lock
        with self._locks_guard:
            lock = self._locks.get(share_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[share_id] = lock
            return lock

    @staticmethod
    def _validate(share_id: str) -> str:
        if not SHARE_ID_PATTERN.fullmatch(share_id or ""):
            raise ValueError(f"Invalid share id: {share_id!r}")
        return share_id

    def _path(self, share_id: str) -> Path:
        return self.directory / f"{self._validate(share_id)}.json"

    def _write(self, record: TrainingRecord) -> None:
        data = record.to_dict()
        if self.in_memory:
            self._memory[self._validate(record.id)] = data
            return

        with open(self._path(record.id), 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

    def _read(self, share_id: str) -> Optional[TrainingRecord]:
        if self.in_memory:
            data = self._memory.get(self._validate(share_id))
            return TrainingRecord.from_dict(data) if data else None

        try:
            with open(self._path(share_id), 'r', encoding='utf-8') as f:
                return TrainingRecord.from_dict(json.load(f))
        except FileNotFoundError:
            return None

    def save(
        self,
        share_id: str,
        source_url: str,
        payload: Dict[str, Any],
        progress: Optional[TrainingProgress] = None
    ) -> TrainingRecord:
        """
        Store a training and its initial progress.

        Returns:
            The stored record
        """
        segment_count = len(payload.get('segments') or [])
        progress = (progress or TrainingProgress.fresh(segment_count)).normalize(segment_count)
        progress.updated_at = utc_timestamp()

        record = TrainingRecord(id=share_id, source_url=source_url, payload=payload, progress=progress)

        with self._lock_for(share_id):
            self._write(record)

        logger.info(f"Saved training {share_id} ({segment_count} segments)")
        return record

    def load(self, share_id: str) -> Optional[TrainingRecord]:
        """Load a record, or None if there is none under this id."""
        return self._read(share_id)

    def update_progress(
        self,
        share_id: str,
        source_url: str,
        completed: Optional[List[Any]] = None,
        active_index: Optional[Any] = None
    ) -> Optional[TrainingRecord]:
        """
        Merge a progress update into a stored record.

        Fields that are missing or malformed in the update keep their stored
        values; the result is normalized against the payload's segment count.

        Returns:
            The updated record, or None if the id is unknown

        Raises:
            SourceMismatchError: `source_url` differs from the stored one
        """
        with self._lock_for(share_id):
            record = self._read(share_id)
            if record is None:
                return None

            if record.source_url != source_url:
                raise SourceMismatchError("Source URL mismatch")

            stored = record.progress
            merged = TrainingProgress(
                completed=completed if isinstance(completed, list) else stored.completed,
                active_index=active_index if _is_int(active_index) else stored.active_index,
            )
            record.progress = merged.normalize(record.segment_count)
            record.progress.updated_at = utc_timestamp()

            self._write(record)

        logger.info(
            f"Updated progress for {share_id}: "
            f"{sum(record.progress.completed)}/{record.segment_count} completed"
        )
        return record


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
