"""
Practice session helpers for the Streamlit app.

The engine treats course and lesson ids as opaque strings; this module is
where ids coming from the UI are canonicalized before use.
"""

from __future__ import annotations

import logging

import streamlit as st

from core.config import EngineSettings
from core.planning import EveryNLessons, FinalAfter, PlannedTask, Rule

logger = logging.getLogger(__name__)


def canonical_id(raw: str) -> str:
    """Lesson and course ids use hyphens; some callers send underscores."""
    return raw.strip().replace("_", "-")


def course_lessons(course_id: str) -> list[str]:
    return st.session_state.catalog.lesson_ids(canonical_id(course_id))


def planning_rule(settings: EngineSettings, final: bool = False) -> Rule:
    if final:
        return FinalAfter(len(course_lessons(st.session_state.course_id)))
    return EveryNLessons(settings.lessons_per_task)


def regenerate_tasks(settings: EngineSettings) -> None:
    """
    Rebuild the course's practice tasks from current mastery, final practice included.
    """
    course_id = canonical_id(st.session_state.course_id)
    lessons = course_lessons(course_id)
    registry = st.session_state.registry
    registry.regenerate_tasks(
        course_id,
        lessons,
        rule=planning_rule(settings),
        sample_per_task=settings.sample_per_task,
    )
    registry.add_planned_tasks(
        course_id,
        lessons,
        rule=planning_rule(settings, final=True),
        sample_per_task=settings.sample_per_task,
    )


def sync_tasks(settings: EngineSettings) -> None:
    """
    Refresh task pools after mastery changed.
    """
    course_id = canonical_id(st.session_state.course_id)
    lessons = course_lessons(course_id)
    for final in (False, True):
        st.session_state.registry.sync_from_progress(
            course_id,
            lessons,
            rule=planning_rule(settings, final=final),
            sample_per_task=settings.sample_per_task,
        )


def planned_tasks(settings: EngineSettings) -> list[PlannedTask]:
    course_id = canonical_id(st.session_state.course_id)
    lessons = course_lessons(course_id)
    planned = st.session_state.registry.availability(
        course_id,
        lessons,
        rule=planning_rule(settings),
        sample_per_task=settings.sample_per_task,
        min_triples=settings.min_triples,
    )
    planned += st.session_state.registry.availability(
        course_id,
        lessons,
        rule=planning_rule(settings, final=True),
        sample_per_task=settings.sample_per_task,
        min_triples=settings.min_triples,
    )
    return planned


def start_task_game(task_id: str) -> None:
    """
    Start a matching round over a task's bound pool.
    """
    triples = st.session_state.registry.triples(task_id)
    st.session_state.round_summary = None
    st.session_state.game.build_round_from_pool(triples)
    st.session_state.active_task_id = task_id
    st.session_state.active_lesson_id = None
    logger.info("Started task %s with %d triples", task_id, len(triples))


def start_lesson_game(lesson_id: str, force: bool = False) -> None:
    """
    Start (or resume) a matching round over one lesson's mastered vocabulary.
    """
    st.session_state.round_summary = None
    st.session_state.game.build_round(
        canonical_id(st.session_state.course_id),
        canonical_id(lesson_id),
        force=force,
    )
    st.session_state.active_lesson_id = lesson_id
    st.session_state.active_task_id = None


def finish_active_task() -> None:
    task_id = st.session_state.active_task_id
    if task_id:
        st.session_state.registry.mark_done(task_id, canonical_id(st.session_state.course_id))


def end_game() -> None:
    game = st.session_state.game
    if game.round is not None:
        game.round.cancel_pending()
    game.round = None
    st.session_state.active_task_id = None
    st.session_state.active_lesson_id = None
    st.session_state.round_summary = None


def tick() -> int:
    """
    Run delayed game transitions that are due.
    """
    return st.session_state.scheduler.run_due()
