import random

import pytest

from core.matching import DeferredActions, VirtualClock
from core.schemas import Lesson, LessonItem, VocabularyTriple
from core.vocabulary import LessonCatalog, MasteredVocabularySource, MasteryStore


def _make_triples(count, prefix="word"):
    return [
        VocabularyTriple(native=f"{prefix}-{i}", script=f"script-{prefix}-{i}", phonetic=f"ph-{prefix}-{i}")
        for i in range(count)
    ]


@pytest.fixture
def make_triples():
    return _make_triples


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def scheduler(clock):
    return DeferredActions(clock=clock)


@pytest.fixture
def catalog():
    """Course 'thai' with four lessons of five vocabulary steps plus one tip each."""
    lessons = []
    for n in range(1, 5):
        items = [
            LessonItem(order=i, kind="word", native=f"l{n}-word-{i}", script=f"s{n}{i}", phonetic=f"p{n}{i}")
            for i in range(5)
        ]
        items.append(LessonItem(order=5, kind="tip", text="a tip"))
        lessons.append(Lesson(course_id="thai", lesson_id=f"lesson-{n}", title=f"Lesson {n}", items=items))
    return LessonCatalog(lessons)


@pytest.fixture
def mastery():
    return MasteryStore()


@pytest.fixture
def mastered_source(catalog, mastery):
    return MasteredVocabularySource(catalog, mastery)


def learn_all(mastery, catalog, course_id, lesson_id):
    for index, _ in enumerate(catalog.items_for(course_id, lesson_id)):
        mastery.mark_learned(course_id, lesson_id, index)


@pytest.fixture
def learn():
    return learn_all
