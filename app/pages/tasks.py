"""
Practice tasks page rendering.
"""

from __future__ import annotations

import streamlit as st

from app.session_controller import (
    canonical_id,
    planned_tasks,
    regenerate_tasks,
    start_task_game,
    sync_tasks,
)
from app.ui import render_task_progress, render_task_row
from core.config import EngineSettings


def render_tasks_page(settings: EngineSettings) -> None:
    if st.session_state.course_id is None:
        st.warning("No course content loaded.")
        return

    course_id = canonical_id(st.session_state.course_id)
    registry = st.session_state.registry

    st.title("📝 Practice")
    render_task_progress(registry.progress(course_id))

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Rebuild tasks", type="primary", use_container_width=True,
                     help="Plan practice tasks again from learned words"):
            regenerate_tasks(settings)
            st.rerun()
    with col2:
        if st.button("Refresh words", use_container_width=True,
                     help="Update task word pools after learning more"):
            sync_tasks(settings)
            st.rerun()

    next_task = registry.first_available_task(course_id)
    if next_task is not None:
        st.caption(f"Up next: {next_task.title}")

    for planned in planned_tasks(settings):
        descriptor = planned.descriptor
        materialized = registry.has_task(descriptor.id, course_id)
        minutes = registry.estimated_minutes(descriptor.id)
        if render_task_row(planned, minutes):
            if materialized:
                start_task_game(descriptor.id)
            else:
                st.session_state.round_summary = None
                st.session_state.game.build_round_from_pool(list(descriptor.triples))
                st.session_state.active_task_id = None
            st.session_state.next_page = "Play"
            st.rerun()
