"""
Matching game page rendering.
"""

from __future__ import annotations

import time

import streamlit as st

from app.session_controller import end_game, finish_active_task, tick
from app.ui import render_card_grid, render_round_complete, render_round_stats
from core.config import EngineSettings
from core.matching import CardSide

TICK_SECONDS = 0.1


def render_play_page(settings: EngineSettings) -> None:
    tick()
    game = st.session_state.game
    round_ = game.round

    if round_ is None:
        st.info("Pick a practice task or a lesson to play.")
        return

    if round_.is_empty:
        st.info("Nothing to practice yet. Mark some words in this lesson as learned.")
        return

    if render_round_stats(round_):
        end_game()
        st.rerun()

    if st.session_state.round_summary is not None:
        render_round_complete(st.session_state.round_summary)
        if st.button("Done", type="primary", use_container_width=True):
            finish_active_task()
            end_game()
            st.session_state.next_page = "Practice"
            st.rerun()
        return

    tapped = render_card_grid(round_)
    if tapped is not None:
        side, index = tapped
        if side == CardSide.LEFT:
            game.tap_left(index)
        else:
            game.tap_right(index)
        st.rerun()

    if round_.pending_reveal:
        time.sleep(TICK_SECONDS)
        round_.reveal_pending()
        st.rerun()

    if st.session_state.scheduler.pending:
        time.sleep(TICK_SECONDS)
        st.rerun()
