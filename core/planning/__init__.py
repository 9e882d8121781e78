"""Practice task planning and the task registry."""

from core.planning.planner import (
    FINAL_TITLE,
    PlannedTask,
    TaskPlanner,
    final_task_id,
    game_kind_for,
    sample_pool,
    task_id,
)
from core.planning.registry import TaskRegistry, make_task_factory
from core.planning.rules import EveryNLessons, FinalAfter, Rule

__all__ = [
    "FINAL_TITLE",
    "PlannedTask",
    "TaskPlanner",
    "final_task_id",
    "game_kind_for",
    "sample_pool",
    "task_id",
    "TaskRegistry",
    "make_task_factory",
    "EveryNLessons",
    "FinalAfter",
    "Rule",
]
