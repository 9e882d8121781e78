"""
Practice Engine Configuration

All tunable parameters for task planning and the matching game in one place.
Defaults can be overridden through environment variables (or a .env file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment
load_dotenv()


# ---- Matching Game ----

VISIBLE_PAIRS_TARGET = 5     # Pairs shown on the board at once
WRONG_REVERT_DELAY = 0.28    # Seconds a mismatched pair stays in the wrong state
COMPLETION_DELAY = 1.2       # Seconds between the last match and the completion signal


# ---- Task Planning ----

SAMPLE_PER_TASK = 6          # Triples sampled into each practice task
FINAL_MIN_SAMPLE = 12        # Final practice always samples at least this many
MIN_TRIPLES = 6              # Pool size needed before an unmaterialized task unlocks
LESSONS_PER_TASK = 2         # Default chunk size for EveryNLessons

MINUTES_PER_TRIPLE = 0.7     # Estimated practice time per card
MIN_TASK_MINUTES = 3


# ---- Mode Feasibility ----

QUIZ_MIN_DISTINCT = 4
MATCHING_MIN_TRIPLES = 3
TRANSCRIPTION_MIN_PHONETIC = 3


DEFAULT_CONTENT_PATH = "data/demo_course.json"


@dataclass(frozen=True)
class EngineSettings:
    visible_pairs_target: int = VISIBLE_PAIRS_TARGET
    wrong_revert_delay: float = WRONG_REVERT_DELAY
    completion_delay: float = COMPLETION_DELAY
    sample_per_task: int = SAMPLE_PER_TASK
    min_triples: int = MIN_TRIPLES
    lessons_per_task: int = LESSONS_PER_TASK
    seed: Optional[int] = None
    content_path: str = DEFAULT_CONTENT_PATH
    log_level: str = "INFO"


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def load_settings() -> EngineSettings:
    """
    Build settings from environment variables, falling back to module defaults.

    Raises:
        ValueError: If a numeric variable cannot be parsed or is out of range
    """
    seed_raw = os.getenv("PRACTICE_SEED")
    seed = None
    if seed_raw is not None and seed_raw.strip() != "":
        seed = _env_int("PRACTICE_SEED", 0)

    return EngineSettings(
        visible_pairs_target=_env_int("PRACTICE_VISIBLE_PAIRS", VISIBLE_PAIRS_TARGET, minimum=1),
        wrong_revert_delay=_env_float("PRACTICE_WRONG_DELAY", WRONG_REVERT_DELAY),
        completion_delay=_env_float("PRACTICE_COMPLETION_DELAY", COMPLETION_DELAY),
        sample_per_task=_env_int("PRACTICE_SAMPLE_PER_TASK", SAMPLE_PER_TASK, minimum=1),
        min_triples=_env_int("PRACTICE_MIN_TRIPLES", MIN_TRIPLES),
        lessons_per_task=_env_int("PRACTICE_LESSONS_PER_TASK", LESSONS_PER_TASK, minimum=1),
        seed=seed,
        content_path=os.getenv("PRACTICE_CONTENT_PATH") or DEFAULT_CONTENT_PATH,
        log_level=(os.getenv("PRACTICE_LOG_LEVEL") or "INFO").upper(),
    )
