"""
Grouping rules that decide when a practice task is spawned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class EveryNLessons:
    """One practice task per consecutive chunk of n lessons."""
    n: int


@dataclass(frozen=True)
class FinalAfter:
    """A single final practice once the course has at least `total` lessons."""
    total: int


Rule = Union[EveryNLessons, FinalAfter]
