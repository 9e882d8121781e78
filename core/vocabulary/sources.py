"""
Vocabulary sources and mastery tracking.

The engine reads vocabulary through two narrow interfaces:
- VocabularySource: learned triples for a (course, lesson)
- MasteryQuery: indices of the lesson steps the learner has mastered

Identifiers are opaque strings here; callers canonicalize them.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Protocol

from core.schemas import Lesson, LessonItem, VocabularyTriple

logger = logging.getLogger(__name__)


LessonKey = tuple[str, str]


class VocabularySource(Protocol):
    def triples_for_lesson(self, course_id: str, lesson_id: str) -> list[VocabularyTriple]:
        ...


class MasteryQuery(Protocol):
    def mastered_indices(self, course_id: str, lesson_id: str) -> set[int]:
        ...


# ---- Lesson content ----

class LessonCatalog:
    """
    Read-only lookup of lesson content, keyed by (course_id, lesson_id).
    """

    def __init__(self, lessons: Iterable[Lesson] = ()):
        self._lessons: dict[LessonKey, Lesson] = {}
        self._order: dict[str, list[str]] = {}
        for lesson in lessons:
            self.add_lesson(lesson)

    def add_lesson(self, lesson: Lesson) -> None:
        key = (lesson.course_id, lesson.lesson_id)
        if key not in self._lessons:
            self._order.setdefault(lesson.course_id, []).append(lesson.lesson_id)
        self._lessons[key] = lesson

    def items_for(self, course_id: str, lesson_id: str) -> list[LessonItem]:
        lesson = self._lessons.get((course_id, lesson_id))
        return list(lesson.items) if lesson else []

    def lesson_title(self, course_id: str, lesson_id: str) -> Optional[str]:
        lesson = self._lessons.get((course_id, lesson_id))
        if lesson is None or not lesson.title:
            return None
        return lesson.title

    def lesson_ids(self, course_id: str) -> list[str]:
        return list(self._order.get(course_id, []))

    def course_ids(self) -> list[str]:
        return list(self._order.keys())


# ---- Mastery ----

class MasteryStore:
    """
    In-memory record of mastered step indices per lesson.
    """

    def __init__(self):
        self._learned: dict[LessonKey, set[int]] = {}

    def mastered_indices(self, course_id: str, lesson_id: str) -> set[int]:
        return set(self._learned.get((course_id, lesson_id), set()))

    def is_learned(self, course_id: str, lesson_id: str, index: int) -> bool:
        return index in self._learned.get((course_id, lesson_id), set())

    def mark_learned(self, course_id: str, lesson_id: str, index: int) -> None:
        self._learned.setdefault((course_id, lesson_id), set()).add(index)

    def mark_unlearned(self, course_id: str, lesson_id: str, index: int) -> None:
        learned = self._learned.get((course_id, lesson_id))
        if learned is not None:
            learned.discard(index)

    def reset_lesson(self, course_id: str, lesson_id: str) -> None:
        self._learned.pop((course_id, lesson_id), None)

    def reset_course(self, course_id: str) -> None:
        for key in [k for k in self._learned if k[0] == course_id]:
            del self._learned[key]


# ---- Sources ----

class MasteredVocabularySource:
    """
    Vocabulary source over lesson content filtered by mastery.

    Only vocabulary steps (word, phrase, casual) whose index the learner
    has mastered are returned, in lesson order. No normalization here.
    """

    def __init__(self, catalog: LessonCatalog, mastery: MasteryQuery):
        self.catalog = catalog
        self.mastery = mastery

    def triples_for_lesson(self, course_id: str, lesson_id: str) -> list[VocabularyTriple]:
        items = self.catalog.items_for(course_id, lesson_id)
        learned = self.mastery.mastered_indices(course_id, lesson_id)
        out = [
            item.to_triple()
            for index, item in enumerate(items)
            if index in learned and item.is_vocabulary
        ]
        logger.debug(
            "Lesson %s/%s: %d learned of %d steps -> %d triples",
            course_id, lesson_id, len(learned), len(items), len(out)
        )
        return out


class StaticVocabularySource:
    """
    Vocabulary source over a fixed mapping of lesson id to triples.
    """

    def __init__(self, triples_by_lesson: Mapping[str, list[VocabularyTriple]]):
        self._triples = {lesson_id: list(triples) for lesson_id, triples in triples_by_lesson.items()}

    def triples_for_lesson(self, course_id: str, lesson_id: str) -> list[VocabularyTriple]:
        return list(self._triples.get(lesson_id, []))
