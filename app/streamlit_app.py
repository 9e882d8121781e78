"""
Vocabulary Practice - Main App

Streamlit host for the practice engine: lessons, practice tasks and the
matching game.
"""

import logging

import streamlit as st

from app.router import PAGES, get_page
from app.state import ensure_session_state
from core.config import load_settings


# ---- Settings & Logging ----

SETTINGS = load_settings()

logging.basicConfig(
    level=getattr(logging, SETTINGS.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


# ---- Page Setup ----

st.set_page_config(
    page_title="Vocabulary Practice",
    page_icon="🃏",
    layout="centered"
)


def main():
    """Main app entry point."""
    ensure_session_state(SETTINGS)

    if "next_page" in st.session_state:
        st.session_state.page = st.session_state.pop("next_page")
    if "page" not in st.session_state:
        st.session_state.page = PAGES[0].title

    with st.sidebar:
        st.radio("Page", [page.title for page in PAGES], key="page")

    get_page(st.session_state.page).render(SETTINGS)


if __name__ == "__main__":
    main()
