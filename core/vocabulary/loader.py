"""
Course content loading.

Reads a course JSON file into a LessonCatalog. The file holds either a
single course object or a list of courses:

    {"course_id": "thai-basics", "title": "...", "lessons": [
        {"lesson_id": "lesson-1", "title": "...", "items": [
            {"order": 0, "kind": "word", "native": "hello", "script": "...", "phonetic": "..."}
        ]}
    ]}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from core.schemas import Course
from core.vocabulary.sources import LessonCatalog

logger = logging.getLogger(__name__)

_COURSES = TypeAdapter(list[Course])


def parse_courses(data: object) -> list[Course]:
    """
    Validate decoded JSON into courses.

    Raises:
        pydantic.ValidationError: If the content does not match the schema
    """
    if isinstance(data, dict):
        data = [data]
    return _COURSES.validate_python(data)


def build_catalog(courses: list[Course]) -> LessonCatalog:
    catalog = LessonCatalog()
    for course in courses:
        for lesson in course.lessons:
            if not lesson.course_id:
                lesson = lesson.model_copy(update={"course_id": course.course_id})
            catalog.add_lesson(lesson)
    return catalog


def load_catalog(path: str | Path) -> LessonCatalog:
    """
    Load a course content file.

    Args:
        path: Path to the JSON file

    Returns:
        Catalog with every lesson of every course in the file

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the content does not match the schema
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    courses = parse_courses(data)
    catalog = build_catalog(courses)
    logger.info(
        "Loaded %d course(s) from %s: %s",
        len(courses), path, ", ".join(c.course_id for c in courses)
    )
    return catalog
