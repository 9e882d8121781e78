"""Vocabulary sources, normalization and content loading."""

from core.vocabulary.loader import build_catalog, load_catalog, parse_courses
from core.vocabulary.normalize import available_modes, normalize_triples
from core.vocabulary.sources import (
    LessonCatalog,
    MasteredVocabularySource,
    MasteryQuery,
    MasteryStore,
    StaticVocabularySource,
    VocabularySource,
)

__all__ = [
    "build_catalog",
    "load_catalog",
    "parse_courses",
    "available_modes",
    "normalize_triples",
    "LessonCatalog",
    "MasteredVocabularySource",
    "MasteryQuery",
    "MasteryStore",
    "StaticVocabularySource",
    "VocabularySource",
]
