"""
Storage Package
===============
Persistence for trainings and their progress.
"""

from .training_store import TrainingStore, SourceMismatchError

__all__ = [
    'TrainingStore',
    'SourceMismatchError',
]
