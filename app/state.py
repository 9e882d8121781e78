"""
Streamlit session state and content initialization helpers.
"""

from __future__ import annotations

import logging
import random

import streamlit as st

from core.config import EngineSettings
from core.matching import DeferredActions, MatchingGame
from core.planning import TaskPlanner, TaskRegistry
from core.vocabulary import LessonCatalog, MasteredVocabularySource, MasteryStore, load_catalog

logger = logging.getLogger(__name__)


@st.cache_resource
def load_content(content_path: str) -> LessonCatalog:
    """
    Load course content once per server process.
    """
    try:
        return load_catalog(content_path)
    except FileNotFoundError:
        logger.warning("Content file not found: %s", content_path)
        return LessonCatalog()


def ensure_session_state(settings: EngineSettings) -> None:
    """
    Populate Streamlit session_state with the engine objects for this learner.
    """
    if "catalog" not in st.session_state:
        st.session_state.catalog = load_content(settings.content_path)
    if "mastery" not in st.session_state:
        st.session_state.mastery = MasteryStore()
    if "rng" not in st.session_state:
        st.session_state.rng = random.Random(settings.seed)
    if "source" not in st.session_state:
        st.session_state.source = MasteredVocabularySource(
            st.session_state.catalog,
            st.session_state.mastery,
        )
    if "registry" not in st.session_state:
        planner = TaskPlanner(st.session_state.source, rng=st.session_state.rng)
        st.session_state.registry = TaskRegistry(planner)
    if "scheduler" not in st.session_state:
        st.session_state.scheduler = DeferredActions()
    if "round_summary" not in st.session_state:
        st.session_state.round_summary = None
    if "game" not in st.session_state:
        st.session_state.game = MatchingGame(
            st.session_state.source,
            scheduler=st.session_state.scheduler,
            rng=st.session_state.rng,
            visible_pairs_target=settings.visible_pairs_target,
            wrong_revert_delay=settings.wrong_revert_delay,
            completion_delay=settings.completion_delay,
            on_complete=_store_summary,
        )
    if "course_id" not in st.session_state:
        course_ids = st.session_state.catalog.course_ids()
        st.session_state.course_id = course_ids[0] if course_ids else None
    if "active_task_id" not in st.session_state:
        st.session_state.active_task_id = None
    if "active_lesson_id" not in st.session_state:
        st.session_state.active_lesson_id = None


def _store_summary(summary) -> None:
    st.session_state.round_summary = summary
