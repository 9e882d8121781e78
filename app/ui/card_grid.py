"""
Matching Board UI

Renders the two card columns of a matching round as buttons.
"""

from __future__ import annotations

import streamlit as st

from core.matching import Card, CardSide, MatchingRound


HINT_LABELS = {
    "back": "🂠",
    "pulse": "👉 {text}",
    "shake": "❌ {text}",
    "dim": "✅ {text}",
}


def card_label(round_: MatchingRound, card: Card) -> str:
    hint = round_.display_hint(card)
    if hint is None:
        return card.text
    return HINT_LABELS[hint].format(text=card.text)


def render_card_grid(round_: MatchingRound) -> tuple[CardSide, int] | None:
    """
    Render both columns.

    Returns:
        (side, index) of the tapped card, or None if nothing was tapped
    """
    tapped = None
    col_left, col_right = st.columns(2)

    with col_left:
        for index, card in enumerate(round_.left):
            if st.button(
                card_label(round_, card),
                key=f"left_{index}_{card.pair_id}",
                use_container_width=True,
                type="primary" if round_.selected_left == index else "secondary",
                disabled=round_.display_hint(card) in ("dim", "back"),
            ):
                tapped = (CardSide.LEFT, index)

    with col_right:
        for index, card in enumerate(round_.right):
            if st.button(
                card_label(round_, card),
                key=f"right_{index}_{card.pair_id}",
                use_container_width=True,
                type="primary" if round_.selected_right == index else "secondary",
                disabled=round_.display_hint(card) in ("dim", "back"),
            ):
                tapped = (CardSide.RIGHT, index)

    return tapped
