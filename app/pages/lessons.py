"""
Lessons page rendering: mark vocabulary as learned, practice a single lesson.
"""

from __future__ import annotations

import streamlit as st

from app.session_controller import canonical_id, course_lessons, start_lesson_game, sync_tasks
from core.config import EngineSettings
from core.vocabulary import available_modes, normalize_triples


def render_lessons_page(settings: EngineSettings) -> None:
    if st.session_state.course_id is None:
        st.warning("No course content loaded.")
        return

    course_id = canonical_id(st.session_state.course_id)
    catalog = st.session_state.catalog
    mastery = st.session_state.mastery

    st.title("📚 Lessons")

    for lesson_id in course_lessons(course_id):
        title = catalog.lesson_title(course_id, lesson_id) or lesson_id
        with st.expander(title):
            changed = False
            for index, item in enumerate(catalog.items_for(course_id, lesson_id)):
                if not item.is_vocabulary:
                    continue
                learned = mastery.is_learned(course_id, lesson_id, index)
                label = f"{item.native} · {item.script or ''} · {item.phonetic or ''}"
                checked = st.checkbox(label, value=learned, key=f"learned_{lesson_id}_{index}")
                if checked != learned:
                    if checked:
                        mastery.mark_learned(course_id, lesson_id, index)
                    else:
                        mastery.mark_unlearned(course_id, lesson_id, index)
                    changed = True

            pool = normalize_triples(st.session_state.source.triples_for_lesson(course_id, lesson_id))
            modes = available_modes(pool)
            st.caption("Games: " + (", ".join(m.value for m in modes) if modes else "none yet"))

            if st.button("Play matching", key=f"play_{lesson_id}", disabled=not pool):
                start_lesson_game(lesson_id, force=True)
                st.session_state.next_page = "Play"
                st.rerun()

            if changed:
                sync_tasks(settings)
                st.rerun()
