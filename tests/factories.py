"""Builders for curriculum models used across tests."""

from src.schemas.curriculum import Lesson, MappingDetail


def make_lesson(lesson_id, title="Bài", periods=None, codes=(), yccd=None, **extra) -> Lesson:
    return Lesson(
        id=lesson_id,
        title=title,
        periods=periods,
        yccd=yccd if yccd is not None else [f"YCCĐ {title}"],
        mappings={c: MappingDetail(selected=True, reason=f"Lý do {c}") for c in codes},
        **extra,
    )
