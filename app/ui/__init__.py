"""UI Components for the practice app"""

from app.ui.card_grid import render_card_grid
from app.ui.session_stats import render_round_stats, render_round_complete
from app.ui.task_list import render_task_progress, render_task_row

__all__ = [
    "render_card_grid",
    "render_round_stats",
    "render_round_complete",
    "render_task_progress",
    "render_task_row",
]
