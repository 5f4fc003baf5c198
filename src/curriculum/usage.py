"""
Usage Index

For the current subject, maps every competency code to each lesson (across
all four grades) whose mapping set contains it, flagging the lesson that is
currently open. It is a pure derived view; the cache only avoids recomputing
it while the subject data object stays the same.
"""

from dataclasses import dataclass
from typing import Any

from src.curriculum.context import same_id
from src.schemas.base import ALL_GRADES
from src.schemas.curriculum import CurriculumData


@dataclass(frozen=True)
class UsageEntry:
    grade: str
    lesson_title: str
    is_current: bool


UsageIndex = dict[str, list[UsageEntry]]


def build_usage_index(
    subject_data: CurriculumData,
    active_grade: str,
    active_lesson_id: Any,
) -> UsageIndex:
    """Code → entries in grade order, then topic and lesson order."""
    index: UsageIndex = {}
    for grade in ALL_GRADES:
        for topic in subject_data.get(grade, []):
            for lesson in topic.lessons:
                is_current = grade == str(active_grade) and same_id(lesson.id, active_lesson_id)
                for code in lesson.mappings:
                    index.setdefault(code, []).append(
                        UsageEntry(grade=grade, lesson_title=lesson.title, is_current=is_current)
                    )
    return index


def other_usages(index: UsageIndex, code: str) -> list[UsageEntry]:
    """Entries for ``code`` outside the open lesson."""
    return [entry for entry in index.get(code, []) if not entry.is_current]


class UsageIndexCache:
    """
    Memoizes the last computed index.

    Subject data is replaced, never mutated, so identity of the object is a
    sufficient change signal.
    """

    def __init__(self) -> None:
        self._key: tuple[int, str, str | None] | None = None
        self._source: CurriculumData | None = None
        self._value: UsageIndex = {}
        self.computations = 0

    def get(self, subject_data: CurriculumData, active_grade: str, active_lesson_id: Any) -> UsageIndex:
        lesson_key = None if active_lesson_id is None else str(active_lesson_id)
        key = (id(subject_data), str(active_grade), lesson_key)
        if key != self._key or self._source is not subject_data:
            self._value = build_usage_index(subject_data, active_grade, active_lesson_id)
            self._key = key
            self._source = subject_data
            self.computations += 1
        return self._value
