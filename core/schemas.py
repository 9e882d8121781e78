"""
Pydantic models for practice tasks and lesson vocabulary.

These models define the values passed between the vocabulary source,
the task planner, the task registry and the matching game.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


FINAL_TASK_SUFFIX = "-ht-final"


class ItemKind(str, Enum):
    """Kind of a lesson step."""
    WORD = "word"
    PHRASE = "phrase"
    CASUAL = "casual"
    TIP = "tip"        # Grammar/culture hint, no vocabulary
    DIALOG = "dialog"  # Scripted conversation, no vocabulary


VOCABULARY_KINDS = frozenset({ItemKind.WORD, ItemKind.PHRASE, ItemKind.CASUAL})


class TaskStatus(str, Enum):
    """Lifecycle of a materialized practice task."""
    LOCKED = "locked"
    AVAILABLE = "available"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class Availability(str, Enum):
    """Availability of a planned practice task."""
    LOCKED = "locked"
    AVAILABLE = "available"
    DONE = "done"


class GameKind(str, Enum):
    """Label for the game a practice task opens with."""
    PAIRS = "pairs"
    QUIZ = "quiz"
    AUDIO = "audio"
    MIXED = "mixed"  # Final practice only


CYCLED_GAME_KINDS = (GameKind.PAIRS, GameKind.QUIZ, GameKind.AUDIO)


class GameMode(str, Enum):
    """Game modes a vocabulary pool can support."""
    QUIZ = "quiz"
    MATCHING = "matching"
    AUDIO = "audio"
    TRANSCRIPTION = "transcription"


# ---- Vocabulary ----

class VocabularyTriple(BaseModel):
    """One learned vocabulary entry."""
    model_config = ConfigDict(frozen=True)

    native: str = Field(..., description="Text in the learner's language")
    script: str = Field(default="", description="Target-language script form")
    phonetic: str = Field(default="", description="Phonetic transcription")

    @property
    def pair_id(self) -> str:
        return f"{self.native}|{self.phonetic}"


class LessonItem(BaseModel):
    """A single step of a lesson as stored in course content."""
    order: int = 0
    kind: ItemKind = ItemKind.WORD
    native: Optional[str] = Field(default=None, validation_alias=AliasChoices("native", "ru"))
    script: Optional[str] = Field(default=None, validation_alias=AliasChoices("script", "thai", "th"))
    phonetic: Optional[str] = Field(default=None, validation_alias=AliasChoices("phonetic", "ph"))
    audio: Optional[str] = None
    text: Optional[str] = None  # Body of a tip

    @property
    def is_vocabulary(self) -> bool:
        return self.kind in VOCABULARY_KINDS and self.native is not None

    def to_triple(self) -> VocabularyTriple:
        return VocabularyTriple(
            native=self.native or "",
            script=self.script or "",
            phonetic=self.phonetic or "",
        )


class Lesson(BaseModel):
    """One lesson of a course with its ordered steps."""
    lesson_id: str
    course_id: str = ""  # Inherited from the enclosing course file when empty
    title: str = ""
    items: list[LessonItem] = Field(default_factory=list)


class Course(BaseModel):
    """Course content file: an ordered list of lessons."""
    course_id: str
    title: str = ""
    lessons: list[Lesson] = Field(default_factory=list)


# ---- Planning ----

class PlanDescriptor(BaseModel):
    """
    A planned practice task, not yet materialized.

    Recomputed on demand; identity is the id, which is derived from the
    course id and the task index.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    index: int
    triples: tuple[VocabularyTriple, ...] = ()

    @property
    def is_final(self) -> bool:
        return self.id.endswith(FINAL_TASK_SUFFIX)


class Task(BaseModel):
    """A materialized practice task owned by the task registry."""
    id: str
    course_id: str
    lesson_index: int
    title: str
    details: str = ""
    status: TaskStatus = TaskStatus.AVAILABLE
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TaskProgress(BaseModel):
    """Done vs. total tasks for a course."""
    model_config = ConfigDict(frozen=True)

    done: int = 0
    total: int = 0

    @property
    def remaining(self) -> int:
        return max(0, self.total - self.done)
