"""
Accumulator Module
==================
Per-pass state for the greedy word-budget packers.

An Accumulator holds the units collected for the segment under
construction and their running word sum. Each segmentation call creates
its own and hands it along explicitly, so nothing leaks between calls.
"""

from dataclasses import dataclass, field
from typing import Any, List


@dataclass
class Accumulator:
    """Units of the open segment and their summed word count."""
    units: List[Any] = field(default_factory=list)
    word_sum: int = 0

    def is_empty(self) -> bool:
        return not self.units

    def would_exceed(self, word_count: int, budget: int) -> bool:
        """
        True when adding `word_count` must close the open segment first.

        An empty accumulator never reports overflow, so a segment always
        holds at least one unit. A unit that exactly fills the budget fits.
        """
        return bool(self.units) and self.word_sum + word_count > budget

    def add(self, unit: Any, word_count: int) -> None:
        self.units.append(unit)
        self.word_sum += word_count

    def drain(self) -> "Accumulator":
        """Hand back the collected state and reset to empty."""
        closed = Accumulator(units=self.units, word_sum=self.word_sum)
        self.units = []
        self.word_sum = 0
        return closed
