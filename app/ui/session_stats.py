"""
Round Statistics UI

Renders matching-round metrics and the completion summary.
"""

import streamlit as st

from core.matching import MatchingRound, RoundSummary


def render_round_stats(round_: MatchingRound) -> bool:
    """
    Render round progress metrics and exit button.

    Returns:
        True if quit button was clicked, False otherwise
    """
    col1, col2, col3 = st.columns([2, 2, 1])

    with col1:
        st.metric("Matched", f"{len(round_.matched_pair_ids)}/{round_.total_pairs}")

    with col2:
        st.metric("Attempts", round_.attempts)

    with col3:
        st.markdown("<br>", unsafe_allow_html=True)  # Align with metrics
        if st.button("❌", help="Quit game", use_container_width=True):
            return True

    st.divider()
    return False


def render_round_complete(summary: RoundSummary) -> None:
    """Render round completion message."""
    st.success(f"🎉 All {summary.total_pairs} pairs matched!")
    if summary.mistakes == 0:
        st.info("Perfect round, no mistakes.")
    else:
        st.info(f"{summary.attempts} attempts, {summary.mistakes} mistakes.")
