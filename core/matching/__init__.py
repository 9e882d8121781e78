"""Matching-pairs mini-game engine."""

from core.matching.deferred import DeferredActions, ScheduledAction, VirtualClock
from core.matching.engine import (
    Card,
    CardSide,
    CardState,
    MatchingGame,
    MatchingRound,
    RoundSummary,
)

__all__ = [
    "DeferredActions",
    "ScheduledAction",
    "VirtualClock",
    "Card",
    "CardSide",
    "CardState",
    "MatchingGame",
    "MatchingRound",
    "RoundSummary",
]
