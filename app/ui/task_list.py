"""
Practice task list UI.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from core.planning import PlannedTask
from core.schemas import Availability, TaskProgress


STATUS_ICONS = {
    Availability.LOCKED: "🔒",
    Availability.AVAILABLE: "▶️",
    Availability.DONE: "✅",
}


def render_task_progress(progress: TaskProgress) -> None:
    if progress.total == 0:
        st.caption("No practice tasks yet. Mark some words as learned first.")
        return
    st.progress(progress.done / progress.total, text=f"{progress.done}/{progress.total} tasks done")


def render_task_row(planned: PlannedTask, minutes: Optional[int]) -> bool:
    """
    Render one planned task.

    Returns:
        True if the start button was clicked
    """
    descriptor = planned.descriptor
    col1, col2 = st.columns([4, 1])
    with col1:
        st.markdown(f"{STATUS_ICONS[planned.status]} **{descriptor.title}** · {planned.game_kind.value}")
        details = f"{len(descriptor.triples)} words"
        if minutes is not None:
            details += f" · ~{minutes} min"
        st.caption(details)
    with col2:
        return st.button(
            "Start",
            key=f"start_{descriptor.id}",
            disabled=planned.status == Availability.LOCKED,
            use_container_width=True,
        )
