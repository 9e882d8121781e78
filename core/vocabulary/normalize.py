"""
Vocabulary normalization and game-mode feasibility.

Every pool the planner or the matching game samples from passes through
normalize_triples first.
"""

from __future__ import annotations

from typing import Iterable

from core.config import (
    MATCHING_MIN_TRIPLES,
    QUIZ_MIN_DISTINCT,
    TRANSCRIPTION_MIN_PHONETIC,
)
from core.schemas import GameMode, VocabularyTriple


def normalize_triples(raw: Iterable[VocabularyTriple]) -> list[VocabularyTriple]:
    """
    Clean learned triples for practice.

    Rules:
    - Trim whitespace on every field
    - Drop entries with an empty native field
    - Empty phonetic falls back to the trimmed native
    - Deduplicate by case-insensitive native, first occurrence wins

    Args:
        raw: Triples in source order

    Returns:
        Normalized triples, source order preserved
    """
    seen: set[str] = set()
    result: list[VocabularyTriple] = []
    for triple in raw:
        native = triple.native.strip()
        if not native:
            continue
        key = native.lower()
        if key in seen:
            continue
        seen.add(key)
        phonetic = triple.phonetic.strip()
        result.append(VocabularyTriple(
            native=native,
            script=triple.script.strip(),
            phonetic=phonetic or native,
        ))
    return result


def available_modes(triples: list[VocabularyTriple]) -> list[GameMode]:
    """
    Determine which game modes a normalized pool can support.

    Audio stays excluded until lessons ship audio sources.
    """
    modes: list[GameMode] = []
    distinct_native = len({t.native for t in triples})
    with_phonetic = sum(1 for t in triples if t.phonetic)

    if distinct_native >= QUIZ_MIN_DISTINCT:
        modes.append(GameMode.QUIZ)
    if len(triples) >= MATCHING_MIN_TRIPLES:
        modes.append(GameMode.MATCHING)
    if with_phonetic >= TRANSCRIPTION_MIN_PHONETIC:
        modes.append(GameMode.TRANSCRIPTION)
    return modes
