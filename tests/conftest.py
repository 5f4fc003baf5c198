"""
Shared fixtures.

Stores run against an in-memory SQLite blob store and a notification
queue driven by a manual clock.
"""

import pytest

from src.curriculum.store import CurriculumStore
from src.schemas.curriculum import Topic
from src.schemas.session import EditorSession
from src.storage.blob_store import BlobStore
from src.utils.notifications import NotificationQueue
from tests.factories import make_lesson


class ManualClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def notifications(clock):
    return NotificationQueue(timeout=5, clock=clock)


@pytest.fixture
def blob_store():
    return BlobStore("sqlite:///:memory:")


@pytest.fixture
def store(blob_store, notifications):
    return CurriculumStore(blob_store, notifications)


@pytest.fixture
def session():
    return EditorSession()


@pytest.fixture
def sample_topics():
    """Two semester-1 topics and one semester-2 topic."""
    return [
        Topic(topic="Chủ đề A", semester=1, lessons=[
            make_lesson("a1", "A1", periods=2, codes=["1.1.TC1a"]),
            make_lesson("a2", "A2", periods=1),
            make_lesson("a3", "A3", periods=2),
        ]),
        Topic(topic="Chủ đề B", semester=1, lessons=[
            make_lesson("b1", "B1", periods=1, codes=["2.1.TC1a"]),
        ]),
        Topic(topic="Chủ đề C", semester=2, lessons=[
            make_lesson("c1", "C1", periods=3),
        ]),
    ]
