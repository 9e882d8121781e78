"""
Task Planner - Practice Tasks From Learned Vocabulary

Turns an ordered list of lesson ids and a grouping rule into plan
descriptors, each carrying a sampled pool of learned triples.

Planning Logic:
- EveryNLessons(n): one task per chunk of n lessons; chunks with no learned
  vocabulary are skipped without consuming a task index
- FinalAfter(total): one final task over all lessons, once enough lessons exist

Descriptors are recomputed on demand; nothing here is stored.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, TypeVar

from core.config import FINAL_MIN_SAMPLE, MIN_TRIPLES, SAMPLE_PER_TASK
from core.planning.rules import EveryNLessons, FinalAfter, Rule
from core.schemas import (
    CYCLED_GAME_KINDS,
    FINAL_TASK_SUFFIX,
    Availability,
    GameKind,
    PlanDescriptor,
    Task,
    TaskStatus,
    VocabularyTriple,
)
from core.vocabulary.normalize import normalize_triples
from core.vocabulary.sources import VocabularySource

logger = logging.getLogger(__name__)

T = TypeVar("T")

PRACTICE_TITLE = "Practice #{index}"
FINAL_TITLE = "Final Practice"


@dataclass(frozen=True)
class PlannedTask:
    """A plan descriptor annotated with availability and game kind."""
    descriptor: PlanDescriptor
    status: Availability
    game_kind: GameKind


def task_id(course_id: str, index: int) -> str:
    return f"{course_id}-ht-{index}"


def final_task_id(course_id: str) -> str:
    return f"{course_id}{FINAL_TASK_SUFFIX}"


def game_kind_for(index: int, is_final: bool = False) -> GameKind:
    """
    Pick a game kind by plan position (cyclic); final practice is always mixed.
    """
    if is_final:
        return GameKind.MIXED
    if index < 0:
        return CYCLED_GAME_KINDS[0]
    return CYCLED_GAME_KINDS[index % len(CYCLED_GAME_KINDS)]


def sample_pool(pool: Sequence[T], count: int, rng: random.Random) -> list[T]:
    """
    Sample without replacement; the whole pool when it is not larger than count.
    """
    if count >= len(pool):
        return list(pool)
    return rng.sample(list(pool), count)


class TaskPlanner:
    """
    Plans practice tasks from learned vocabulary.

    Args:
        source: Vocabulary source returning learned triples per lesson
        rng: Random source for sampling (defaults to a fresh Random)
    """

    def __init__(self, source: VocabularySource, rng: Optional[random.Random] = None):
        self.source = source
        self.rng = rng or random.Random()

    def lesson_pool(self, course_id: str, lesson_ids: Iterable[str]) -> list[VocabularyTriple]:
        """
        Union of learned triples over the given lessons, normalized.
        """
        raw: list[VocabularyTriple] = []
        for lesson_id in lesson_ids:
            raw.extend(self.source.triples_for_lesson(course_id, lesson_id))
        return normalize_triples(raw)

    def plan(
        self,
        course_id: str,
        lesson_ids: Sequence[str],
        rule: Rule = EveryNLessons(2),
        sample_per_task: int = SAMPLE_PER_TASK
    ) -> list[PlanDescriptor]:
        """
        Compute practice task descriptors for a course.

        Args:
            course_id: Course identifier (opaque)
            lesson_ids: Ordered lesson identifiers
            rule: Grouping rule
            sample_per_task: Max triples sampled into each task

        Returns:
            Descriptors in task order; empty when nothing has been learned
        """
        sample_per_task = max(1, sample_per_task)
        if isinstance(rule, EveryNLessons):
            output = self._plan_chunked(course_id, list(lesson_ids), rule.n, sample_per_task)
        elif isinstance(rule, FinalAfter):
            output = self._plan_final(course_id, list(lesson_ids), rule.total, sample_per_task)
        else:
            output = []

        logger.debug(
            "Planned %d task(s) for course %s from %d lesson(s) with %s",
            len(output), course_id, len(lesson_ids), rule
        )
        return output

    def _plan_chunked(
        self,
        course_id: str,
        lesson_ids: list[str],
        n: int,
        sample_per_task: int
    ) -> list[PlanDescriptor]:
        if n <= 0:
            return []

        output: list[PlanDescriptor] = []
        task_index = 1
        for start in range(0, len(lesson_ids), n):
            pool = self.lesson_pool(course_id, lesson_ids[start:start + n])
            if not pool:
                continue
            picked = sample_pool(pool, sample_per_task, self.rng)
            output.append(PlanDescriptor(
                id=task_id(course_id, task_index),
                title=PRACTICE_TITLE.format(index=task_index),
                index=task_index,
                triples=tuple(picked),
            ))
            task_index += 1
        return output

    def _plan_final(
        self,
        course_id: str,
        lesson_ids: list[str],
        total: int,
        sample_per_task: int
    ) -> list[PlanDescriptor]:
        if len(lesson_ids) < total:
            return []
        pool = self.lesson_pool(course_id, lesson_ids)
        if not pool:
            return []
        picked = sample_pool(pool, max(sample_per_task, FINAL_MIN_SAMPLE), self.rng)
        return [PlanDescriptor(
            id=final_task_id(course_id),
            title=FINAL_TITLE,
            index=1,
            triples=tuple(picked),
        )]

    def status_for(
        self,
        descriptor: PlanDescriptor,
        existing: Sequence[Task] = (),
        min_triples: int = MIN_TRIPLES
    ) -> Availability:
        """
        Availability of one descriptor given the course's materialized tasks.

        A materialized task is available regardless of its pool size.
        """
        for task in existing:
            if task.id == descriptor.id:
                if task.status == TaskStatus.DONE:
                    return Availability.DONE
                return Availability.AVAILABLE
        if len(descriptor.triples) >= min_triples:
            return Availability.AVAILABLE
        return Availability.LOCKED

    def availability(
        self,
        course_id: str,
        lesson_ids: Sequence[str],
        rule: Rule = EveryNLessons(3),
        sample_per_task: int = SAMPLE_PER_TASK,
        min_triples: int = MIN_TRIPLES,
        existing: Sequence[Task] = ()
    ) -> list[PlannedTask]:
        """
        Build a plan annotated with availability and game kind.

        Args:
            existing: Materialized tasks of the course, if any

        Returns:
            One PlannedTask per descriptor, in plan order
        """
        descriptors = self.plan(course_id, lesson_ids, rule, sample_per_task)
        return [
            PlannedTask(
                descriptor=descriptor,
                status=self.status_for(descriptor, existing, min_triples),
                game_kind=game_kind_for(position, descriptor.is_final),
            )
            for position, descriptor in enumerate(descriptors)
        ]
