"""
Simple page router for the sidebar navigation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from app.pages.lessons import render_lessons_page
from app.pages.play import render_play_page
from app.pages.tasks import render_tasks_page
from core.config import EngineSettings


@dataclass(frozen=True)
class AppPage:
    title: str
    render: Callable[[EngineSettings], None]


PAGES = [
    AppPage(title="Lessons", render=render_lessons_page),
    AppPage(title="Practice", render=render_tasks_page),
    AppPage(title="Play", render=render_play_page),
]


def get_page(title: str) -> AppPage:
    return next((page for page in PAGES if page.title == title), PAGES[0])
