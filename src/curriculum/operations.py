"""
Structural operations on one grade's topic list.

Every function here is pure: it takes the current ``list[Topic]`` and
returns a new one, copying only the topics and lessons on the edited path.
When nothing applies (unknown id, index out of range, boundary move) the
input list itself is returned, so callers can detect a no-op by identity.
"""

import math
from typing import Any, Iterable

from src.curriculum.context import resolve_lesson_context, same_id
from src.schemas.base import MappingType
from src.schemas.curriculum import Lesson, MappingDetail, Topic

DEFAULT_TOPIC_TITLE = "Chủ đề mới"
DEFAULT_LESSON_TITLE = "Bài học mới"
DEFAULT_EQUIPMENT = "Máy tính, máy chiếu"
DEFAULT_LOCATION = "Phòng Tin học"
CONTINUATION_SUFFIX = " (tiếp)"
MERGE_SEPARATOR = " + "

# Fields that may be set on every lesson of a grade at once
BULK_FIELDS = ("equipment", "location", "periods")


def _updated(model: Any, **updates: Any) -> Any:
    """Validated copy of a frozen model with some fields replaced."""
    data = model.model_dump()
    data.update(updates)
    return type(model).model_validate(data)


def _with_lessons(topic: Topic, lessons: list[Lesson]) -> Topic:
    return topic.model_copy(update={"lessons": lessons})


def _replace_topic(topics: list[Topic], index: int, topic: Topic) -> list[Topic]:
    new_topics = list(topics)
    new_topics[index] = topic
    return new_topics


def new_blank_lesson(lesson_id: str) -> Lesson:
    return Lesson(
        id=lesson_id,
        title=DEFAULT_LESSON_TITLE,
        yccd=[""],
        mappings={},
        periods=2,
        equipment=DEFAULT_EQUIPMENT,
        location=DEFAULT_LOCATION,
    )


# =============================================================================
# LESSONS
# =============================================================================

def add_lesson(topics: list[Topic], lesson: Lesson) -> list[Topic]:
    """Append ``lesson`` to the first topic, creating one if the grade is empty."""
    if not topics:
        return [Topic(topic=DEFAULT_TOPIC_TITLE, semester=1, lessons=[lesson])]
    first = topics[0]
    return _replace_topic(topics, 0, _with_lessons(first, [*first.lessons, lesson]))


def update_lesson(topics: list[Topic], lesson_id: Any, **updates: Any) -> list[Topic]:
    ctx = resolve_lesson_context(topics, lesson_id)
    if ctx is None or not updates:
        return topics
    lessons = list(ctx.topic.lessons)
    lessons[ctx.lesson_index] = _updated(ctx.lesson, **updates)
    return _replace_topic(topics, ctx.topic_index, _with_lessons(ctx.topic, lessons))


def delete_lesson(topics: list[Topic], lesson_id: Any) -> list[Topic]:
    if resolve_lesson_context(topics, lesson_id) is None:
        return topics
    return [
        _with_lessons(t, [l for l in t.lessons if not same_id(l.id, lesson_id)])
        if any(same_id(l.id, lesson_id) for l in t.lessons) else t
        for t in topics
    ]


def move_lesson(topics: list[Topic], lesson_id: Any, direction: int) -> list[Topic]:
    """Swap a lesson with its neighbour inside the same topic (direction ±1)."""
    if direction not in (-1, 1):
        return topics
    ctx = resolve_lesson_context(topics, lesson_id)
    if ctx is None:
        return topics
    target = ctx.lesson_index + direction
    if target < 0 or target >= len(ctx.topic.lessons):
        return topics
    lessons = list(ctx.topic.lessons)
    lessons[ctx.lesson_index], lessons[target] = lessons[target], lessons[ctx.lesson_index]
    return _replace_topic(topics, ctx.topic_index, _with_lessons(ctx.topic, lessons))


def reorder_lesson(
    topics: list[Topic],
    source_id: Any,
    target_topic_index: int,
    target_lesson_index: int,
) -> list[Topic]:
    """
    Move a lesson to (topic, position) by removing then inserting.

    The target position is read against the target topic after removal and
    clamped to its bounds.
    """
    ctx = resolve_lesson_context(topics, source_id)
    if ctx is None or not 0 <= target_topic_index < len(topics):
        return topics

    new_topics = list(topics)
    source_lessons = list(ctx.topic.lessons)
    moved = source_lessons.pop(ctx.lesson_index)
    new_topics[ctx.topic_index] = _with_lessons(ctx.topic, source_lessons)

    target_topic = new_topics[target_topic_index]
    target_lessons = list(target_topic.lessons)
    position = max(0, min(target_lesson_index, len(target_lessons)))
    target_lessons.insert(position, moved)
    new_topics[target_topic_index] = _with_lessons(target_topic, target_lessons)
    return new_topics


def bulk_update_field(topics: list[Topic], field: str, value: Any) -> list[Topic]:
    """Set one field on every lesson of the grade."""
    if field not in BULK_FIELDS:
        return topics
    return [
        _with_lessons(t, [_updated(l, **{field: value}) for l in t.lessons])
        for t in topics
    ]


# =============================================================================
# TOPICS
# =============================================================================

def add_topic(topics: list[Topic], title: str = DEFAULT_TOPIC_TITLE, semester: int = 1) -> list[Topic]:
    return [*topics, Topic(topic=title, semester=semester, lessons=[])]


def delete_topic(topics: list[Topic], topic_index: int) -> list[Topic]:
    if not 0 <= topic_index < len(topics):
        return topics
    return [t for i, t in enumerate(topics) if i != topic_index]


def rename_topic(topics: list[Topic], topic_index: int, title: str) -> list[Topic]:
    if not 0 <= topic_index < len(topics):
        return topics
    return _replace_topic(topics, topic_index, topics[topic_index].model_copy(update={"topic": title}))


def set_topic_semester(topics: list[Topic], topic_index: int, semester: int) -> list[Topic]:
    if not 0 <= topic_index < len(topics) or semester not in (1, 2):
        return topics
    return _replace_topic(topics, topic_index, topics[topic_index].model_copy(update={"semester": semester}))


def move_topic(topics: list[Topic], topic_index: int, direction: int) -> list[Topic]:
    """
    Swap a topic with its neighbour (direction ±1).

    When the neighbour belongs to the other semester the moved topic crosses
    the boundary and takes the neighbour's semester.
    """
    if direction not in (-1, 1) or not 0 <= topic_index < len(topics):
        return topics
    target = topic_index + direction
    if target < 0 or target >= len(topics):
        return topics

    moved = topics[topic_index]
    neighbour = topics[target]
    if moved.effective_semester() != neighbour.effective_semester():
        moved = moved.model_copy(update={"semester": neighbour.effective_semester()})

    new_topics = list(topics)
    new_topics[target] = moved
    new_topics[topic_index] = neighbour
    return new_topics


# =============================================================================
# REQUIREMENTS (YCCĐ)
# =============================================================================

def set_yccd(topics: list[Topic], lesson_id: Any, yccd: list[str]) -> list[Topic]:
    return update_lesson(topics, lesson_id, yccd=list(yccd))


def update_yccd(topics: list[Topic], lesson_id: Any, index: int, value: str) -> list[Topic]:
    ctx = resolve_lesson_context(topics, lesson_id)
    if ctx is None or not 0 <= index < len(ctx.lesson.yccd):
        return topics
    yccd = list(ctx.lesson.yccd)
    yccd[index] = value
    return set_yccd(topics, lesson_id, yccd)


def add_yccd(topics: list[Topic], lesson_id: Any, value: str = "") -> list[Topic]:
    ctx = resolve_lesson_context(topics, lesson_id)
    if ctx is None:
        return topics
    return set_yccd(topics, lesson_id, [*ctx.lesson.yccd, value])


def delete_yccd(topics: list[Topic], lesson_id: Any, index: int) -> list[Topic]:
    ctx = resolve_lesson_context(topics, lesson_id)
    if ctx is None or not 0 <= index < len(ctx.lesson.yccd):
        return topics
    return set_yccd(topics, lesson_id, [y for i, y in enumerate(ctx.lesson.yccd) if i != index])


# =============================================================================
# MAPPINGS
# =============================================================================

def set_mapping(topics: list[Topic], lesson_id: Any, code: str, selected: bool) -> list[Topic]:
    """Select (manual, empty reason) or remove one competency code."""
    ctx = resolve_lesson_context(topics, lesson_id)
    if ctx is None:
        return topics
    mappings = dict(ctx.lesson.mappings)
    if selected:
        mappings[code] = MappingDetail(selected=True, reason="", type=MappingType.MANUAL)
    elif code in mappings:
        del mappings[code]
    else:
        return topics
    return update_lesson(topics, lesson_id, mappings=mappings)


def set_mapping_reason(topics: list[Topic], lesson_id: Any, code: str, reason: str) -> list[Topic]:
    ctx = resolve_lesson_context(topics, lesson_id)
    if ctx is None or code not in ctx.lesson.mappings:
        return topics
    mappings = dict(ctx.lesson.mappings)
    mappings[code] = mappings[code].model_copy(update={"reason": reason})
    return update_lesson(topics, lesson_id, mappings=mappings)


def apply_suggestions(
    topics: list[Topic],
    lesson_id: Any,
    suggestions: Iterable[tuple[str, str]],
) -> list[Topic]:
    """Write (code, reason) pairs into a lesson as selected, type 'suggested'."""
    ctx = resolve_lesson_context(topics, lesson_id)
    if ctx is None:
        return topics
    mappings = dict(ctx.lesson.mappings)
    changed = False
    for code, reason in suggestions:
        mappings[code] = MappingDetail(selected=True, reason=reason, type=MappingType.SUGGESTED)
        changed = True
    if not changed:
        return topics
    return update_lesson(topics, lesson_id, mappings=mappings)


# =============================================================================
# SPLIT / MERGE
# =============================================================================

def split_lesson(topics: list[Topic], lesson_id: Any, new_id: str) -> list[Topic]:
    """
    Split a lesson into two adjacent lessons.

    The first keeps the id, the first half of the requirements and all
    mappings. The second gets ``new_id``, the remaining requirements and a
    continuation title. Periods are shared out, at least 1 each.
    """
    ctx = resolve_lesson_context(topics, lesson_id)
    if ctx is None:
        return topics
    lesson = ctx.lesson
    half = math.ceil(len(lesson.yccd) / 2)
    total = lesson.effective_periods()
    first_periods = max(1, math.ceil(total / 2))

    first = _updated(lesson, yccd=lesson.yccd[:half], periods=first_periods)
    second = Lesson(
        id=new_id,
        title=f"{lesson.title}{CONTINUATION_SUFFIX}",
        yccd=lesson.yccd[half:] or [""],
        mappings={},
        periods=max(1, total - first_periods),
        equipment=lesson.equipment,
        location=lesson.location,
    )
    lessons = list(ctx.topic.lessons)
    lessons[ctx.lesson_index:ctx.lesson_index + 1] = [first, second]
    return _replace_topic(topics, ctx.topic_index, _with_lessons(ctx.topic, lessons))


def _merge_pair(earlier: Lesson, later: Lesson) -> Lesson:
    mappings = dict(earlier.mappings)
    for code, detail in later.mappings.items():
        mappings.setdefault(code, detail)
    plan_data = [*(earlier.plan_data or []), *(later.plan_data or [])] or None
    activities = "".join(a for a in (earlier.activities, later.activities) if a) or None
    return _updated(
        earlier,
        title=f"{earlier.title}{MERGE_SEPARATOR}{later.title}",
        yccd=[*earlier.yccd, *later.yccd],
        mappings=mappings,
        periods=earlier.effective_periods() + later.effective_periods(),
        plan_data=plan_data,
        activities=activities,
    )


def can_merge(topics: list[Topic], lesson_id: Any, direction: int) -> bool:
    ctx = resolve_lesson_context(topics, lesson_id)
    if ctx is None or direction not in (-1, 1):
        return False
    return 0 <= ctx.lesson_index + direction < len(ctx.topic.lessons)


def merge_lesson(topics: list[Topic], lesson_id: Any, direction: int) -> list[Topic]:
    """
    Merge a lesson with its next (+1) or previous (-1) neighbour in the same topic.

    The earlier lesson of the pair survives with its id.
    """
    if not can_merge(topics, lesson_id, direction):
        return topics
    ctx = resolve_lesson_context(topics, lesson_id)
    start = min(ctx.lesson_index, ctx.lesson_index + direction)
    lessons = list(ctx.topic.lessons)
    merged = _merge_pair(lessons[start], lessons[start + 1])
    lessons[start:start + 2] = [merged]
    return _replace_topic(topics, ctx.topic_index, _with_lessons(ctx.topic, lessons))
