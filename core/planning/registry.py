"""
Task Registry - Materialized Practice Tasks

Holds the practice tasks of each course together with the vocabulary pool
bound to each task id. Tasks are created only from a plan (regenerate_tasks
or add_planned_tasks); afterwards they change only through mark_done, and
their pools only through sync_from_progress.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Collection, Optional, Sequence, TypeVar

from core.config import MIN_TASK_MINUTES, MIN_TRIPLES, MINUTES_PER_TRIPLE, SAMPLE_PER_TASK
from core.planning.planner import (
    FINAL_TITLE,
    PlannedTask,
    TaskPlanner,
    final_task_id,
    task_id,
)
from core.planning.rules import EveryNLessons, Rule
from core.schemas import Task, TaskProgress, TaskStatus, VocabularyTriple

logger = logging.getLogger(__name__)

V = TypeVar("V")

TaskFactory = Callable[[str, list[VocabularyTriple], int], Task]


def make_task_factory(
    course_id: str,
    status: TaskStatus = TaskStatus.AVAILABLE
) -> TaskFactory:
    """
    Default task constructor following the planner's id convention.

    The final practice is recognized by its title.
    """
    def _make(title: str, triples: list[VocabularyTriple], index: int) -> Task:
        if title == FINAL_TITLE:
            ident = final_task_id(course_id)
        else:
            ident = task_id(course_id, index)
        return Task(
            id=ident,
            course_id=course_id,
            lesson_index=index,
            title=title,
            details=f"{len(triples)} words",
            status=status,
        )
    return _make


class TaskRegistry:
    """
    Practice tasks per course plus their bound vocabulary pools.
    """

    def __init__(self, planner: TaskPlanner):
        self.planner = planner
        self._tasks_by_course: dict[str, list[Task]] = {}
        self._triples_by_task: dict[str, list[VocabularyTriple]] = {}

    # ---- Read access ----

    def tasks(self, course_id: str) -> list[Task]:
        return list(self._tasks_by_course.get(course_id, []))

    def triples(self, task_id: str) -> list[VocabularyTriple]:
        return list(self._triples_by_task.get(task_id, []))

    def progress(self, course_id: str) -> TaskProgress:
        tasks = self._tasks_by_course.get(course_id, [])
        done = sum(1 for t in tasks if t.status == TaskStatus.DONE)
        return TaskProgress(done=done, total=len(tasks))

    def first_available_task(self, course_id: str) -> Optional[Task]:
        """
        First task not yet done; otherwise the first task; None when empty.
        """
        tasks = self._tasks_by_course.get(course_id, [])
        for task in tasks:
            if task.status != TaskStatus.DONE:
                return task
        return tasks[0] if tasks else None

    def estimated_minutes(self, task_id: str) -> Optional[int]:
        """
        Estimated practice time for a task, from its pool size.
        """
        count = len(self._triples_by_task.get(task_id, []))
        if count == 0:
            return None
        return max(MIN_TASK_MINUTES, int(round(count * MINUTES_PER_TRIPLE)))

    def task_views(
        self,
        course_id: str,
        make: Callable[[Task, bool, Optional[int], list[VocabularyTriple]], V]
    ) -> list[V]:
        """
        Map each task of a course into a caller-defined view model.

        Args:
            make: Callable(task, is_locked, estimated_minutes, triples); a task
                is locked when its bound pool is empty
        """
        views = []
        for task in self.tasks(course_id):
            pool = self.triples(task.id)
            views.append(make(task, not pool, self.estimated_minutes(task.id), pool))
        return views

    # ---- Mutations ----

    def set_tasks(self, tasks: Sequence[Task], course_id: str) -> None:
        self._tasks_by_course[course_id] = list(tasks)

    def mark_done(self, task_id: str, course_id: str) -> None:
        """
        Mark a task done. Unknown course or task ids are ignored.
        """
        for task in self._tasks_by_course.get(course_id, []):
            if task.id == task_id:
                task.status = TaskStatus.DONE
                task.updated_at = datetime.now(timezone.utc)
                logger.info("Task %s in course %s marked done", task_id, course_id)
                return
        logger.debug("mark_done: task %s not found in course %s", task_id, course_id)

    def regenerate_tasks(
        self,
        course_id: str,
        lesson_ids: Sequence[str],
        rule: Rule = EveryNLessons(2),
        sample_per_task: int = SAMPLE_PER_TASK,
        make_task: Optional[TaskFactory] = None
    ) -> list[Task]:
        """
        Rebuild the course's task list from a fresh plan.

        Previous tasks of the course are discarded, not merged.

        Args:
            course_id: Course to plan for
            lesson_ids: Ordered lesson ids of the course
            rule: Grouping rule
            sample_per_task: Max learned triples per task
            make_task: Callable(title, triples, index) -> Task

        Returns:
            The new task list
        """
        for task in self._tasks_by_course.get(course_id, []):
            self._triples_by_task.pop(task.id, None)

        produced = self._materialize(course_id, lesson_ids, rule, sample_per_task, make_task)
        self.set_tasks(produced, course_id)
        logger.info("Regenerated %d task(s) for course %s", len(produced), course_id)
        return self.tasks(course_id)

    def add_planned_tasks(
        self,
        course_id: str,
        lesson_ids: Sequence[str],
        rule: Rule,
        sample_per_task: int = SAMPLE_PER_TASK,
        make_task: Optional[TaskFactory] = None
    ) -> list[Task]:
        """
        Append tasks for a second rule (e.g. the final practice) without
        discarding the course's current tasks. Already registered ids are skipped.

        Returns:
            The tasks that were added
        """
        known = {t.id for t in self._tasks_by_course.get(course_id, [])}
        added = self._materialize(course_id, lesson_ids, rule, sample_per_task, make_task, skip=known)
        self._tasks_by_course.setdefault(course_id, []).extend(added)
        logger.info("Added %d task(s) to course %s", len(added), course_id)
        return added

    def has_task(self, task_id: str, course_id: str) -> bool:
        return any(t.id == task_id for t in self._tasks_by_course.get(course_id, []))

    def _materialize(
        self,
        course_id: str,
        lesson_ids: Sequence[str],
        rule: Rule,
        sample_per_task: int,
        make_task: Optional[TaskFactory],
        skip: Collection[str] = ()
    ) -> list[Task]:
        make_task = make_task or make_task_factory(course_id)
        produced: list[Task] = []
        for descriptor in self.planner.plan(course_id, lesson_ids, rule, sample_per_task):
            if descriptor.id in skip:
                continue
            picked = list(descriptor.triples)
            task = make_task(descriptor.title, picked, descriptor.index)
            produced.append(task)
            self._triples_by_task[task.id] = picked
        return produced

    def sync_from_progress(
        self,
        course_id: str,
        lesson_ids: Sequence[str],
        rule: Rule = EveryNLessons(2),
        sample_per_task: int = SAMPLE_PER_TASK
    ) -> None:
        """
        Rebind pools of registered tasks from the learner's current mastery.

        Does not create or delete tasks. Registered tasks whose id is missing
        from the fresh plan keep their pool.
        """
        fresh = {
            d.id: list(d.triples)
            for d in self.planner.plan(course_id, lesson_ids, rule, sample_per_task)
        }
        rebound = 0
        for task in self._tasks_by_course.get(course_id, []):
            if task.id in fresh:
                self._triples_by_task[task.id] = fresh[task.id]
                rebound += 1
        logger.debug("Synced %d pool(s) for course %s", rebound, course_id)

    def availability(
        self,
        course_id: str,
        lesson_ids: Sequence[str],
        rule: Rule = EveryNLessons(3),
        sample_per_task: int = SAMPLE_PER_TASK,
        min_triples: int = MIN_TRIPLES
    ) -> list[PlannedTask]:
        """
        Plan availability against this registry's tasks for the course.
        """
        return self.planner.availability(
            course_id,
            lesson_ids,
            rule=rule,
            sample_per_task=sample_per_task,
            min_triples=min_triples,
            existing=self._tasks_by_course.get(course_id, []),
        )
