"""
Lesson Context Resolver

Addressing scheme for every targeted edit: locate a lesson inside a grade
and report the owning topic plus both positions.
"""

from dataclasses import dataclass
from typing import Any

from src.schemas.curriculum import Lesson, Topic


@dataclass(frozen=True)
class LessonContext:
    topic: Topic
    lesson: Lesson
    topic_index: int
    lesson_index: int


def same_id(a: Any, b: Any) -> bool:
    """Compare lesson ids by string form; storage round-trips may change their type."""
    if a is None or b is None:
        return False
    return str(a) == str(b)


def resolve_lesson_context(topics: list[Topic], lesson_id: Any) -> LessonContext | None:
    """First topic/lesson whose id matches ``lesson_id``, or None."""
    if lesson_id is None:
        return None
    for topic_index, topic in enumerate(topics):
        for lesson_index, lesson in enumerate(topic.lessons):
            if same_id(lesson.id, lesson_id):
                return LessonContext(topic, lesson, topic_index, lesson_index)
    return None


def all_lessons(topics: list[Topic]) -> list[Lesson]:
    """Every lesson of a grade in document order."""
    return [lesson for topic in topics for lesson in topic.lessons]
