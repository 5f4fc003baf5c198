"""
Curriculum Data Model

This module defines the nested curriculum tree:
subject → grade → [topic {lessons[]}].

All models are frozen. Updates are expressed with ``model_copy(update=...)``
and whole-list replacement so a caller holding an old reference never
observes a change.
"""

import logging
import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from src.schemas.base import EXAM_KEYWORD, MappingType, PeriodCount, Semester

logger = logging.getLogger(__name__)


class Competency(BaseModel):
    """A digital competency (NLS) code with its description."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=1, description="Registry code, e.g. 1.1.TC1a")
    text: str = Field(description="Human-readable description")


class MappingDetail(BaseModel):
    """One lesson's claim to integrate one competency code."""
    model_config = ConfigDict(frozen=True)

    selected: bool = True
    reason: str | None = None
    type: MappingType | None = None


class PlanStep(BaseModel):
    """A step of the 'Tổ chức thực hiện' part of an activity."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = ""
    content: str = ""
    nls_codes: list[str] | None = Field(default=None, alias="nlsCodes")


class PlanSection(BaseModel):
    """A structured teaching activity of a detailed lesson plan."""
    model_config = ConfigDict(frozen=True)

    label: str = ""
    title: str = ""
    duration: str | int | None = None
    objective: str = ""
    content: str = ""
    product: str = ""
    steps: list[PlanStep] = Field(default_factory=list)


class Lesson(BaseModel):
    """
    A single lesson of a topic.

    ``id`` is stored as a string. Legacy numeric ids are coerced on ingest;
    comparisons elsewhere still go through ``str()`` so mixed data stays
    addressable.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Unique across the full dataset")
    title: str = ""
    yccd: list[str] = Field(default_factory=list, description="Ordered requirements")
    mappings: dict[str, MappingDetail] = Field(default_factory=dict)
    periods: PeriodCount | None = None
    equipment: str | None = None
    location: str | None = None
    objectives: str | None = None
    plan_data: list[PlanSection] | None = Field(default=None, alias="planData")
    activities: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("lesson id must be a number or a string")
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        if isinstance(v, (int, float)):
            return str(v)
        return v

    def effective_periods(self) -> int:
        """Declared periods, else 1 for an exam lesson, else 2."""
        if self.periods:
            return self.periods
        return 1 if EXAM_KEYWORD in self.title.lower() else 2

    def selected_codes(self) -> list[str]:
        """Codes whose mapping is selected, in mapping order."""
        return [code for code, detail in self.mappings.items() if detail.selected]


class Topic(BaseModel):
    """An ordered group of lessons inside one grade."""
    model_config = ConfigDict(frozen=True)

    topic: str
    semester: Semester | None = None
    lessons: list[Lesson] = Field(default_factory=list)

    def effective_semester(self) -> int:
        return self.semester or 1


# grade → ordered topics
CurriculumData = dict[str, list[Topic]]

# subject → CurriculumData (root persisted entity)
Dataset = dict[str, CurriculumData]

DATASET_ADAPTER: TypeAdapter[Dataset] = TypeAdapter(Dataset)
CURRICULUM_DATA_ADAPTER: TypeAdapter[CurriculumData] = TypeAdapter(CurriculumData)


def dump_dataset(data: Dataset) -> dict[str, Any]:
    """JSON-ready representation using the original storage field names."""
    return DATASET_ADAPTER.dump_python(data, mode="json", by_alias=True, exclude_none=True)


def dump_curriculum_data(data: CurriculumData) -> dict[str, Any]:
    return CURRICULUM_DATA_ADAPTER.dump_python(
        data, mode="json", by_alias=True, exclude_none=True
    )


def noncanonical_lesson_ids(raw: Any) -> list[Any]:
    """
    Collect lesson ids that are not strings in a raw (pre-validation) dataset.

    Such datasets come from older storage formats and are migrated to
    string ids on load.
    """
    found: list[Any] = []
    if not isinstance(raw, dict):
        return found
    for subject_data in raw.values():
        if not isinstance(subject_data, dict):
            continue
        for topics in subject_data.values():
            if not isinstance(topics, list):
                continue
            for topic in topics:
                if not isinstance(topic, dict) or not isinstance(topic.get("lessons"), list):
                    continue
                for lesson in topic["lessons"]:
                    if not isinstance(lesson, dict):
                        continue
                    lesson_id = lesson.get("id")
                    if lesson_id is not None and not isinstance(lesson_id, str):
                        found.append(lesson_id)
    return found


_last_lesson_id = 0


def new_lesson_id() -> str:
    """
    Generate a lesson id from the millisecond clock.

    Ids are strictly increasing within the process: if the clock has not
    advanced since the previous call, the previous id + 1 is used.
    """
    global _last_lesson_id
    candidate = time.time_ns() // 1_000_000
    if candidate <= _last_lesson_id:
        candidate = _last_lesson_id + 1
    _last_lesson_id = candidate
    return str(candidate)


def reserve_lesson_ids(data: Dataset) -> None:
    """Make sure freshly generated ids never collide with numeric ids in ``data``."""
    global _last_lesson_id
    for subject_data in data.values():
        for topics in subject_data.values():
            for topic in topics:
                for lesson in topic.lessons:
                    if lesson.id.isdigit():
                        _last_lesson_id = max(_last_lesson_id, int(lesson.id))
