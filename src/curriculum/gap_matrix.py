"""
Gap-Analysis Matrix

Cross-references the competency registries against the lessons of a
subject (plus, optionally, the anchor subject "Tin học") to find
competencies with no or too little coverage in each grade, and synthesizes
supplementary lessons to close those gaps.
"""

import logging
from dataclasses import dataclass, field

from config.settings import GAP_COVERAGE_THRESHOLD
from src.registry.competencies import competencies_for_grade
from src.schemas.base import ALL_GRADES, CoverageStatus, MappingType
from src.schemas.curriculum import Competency, CurriculumData, Lesson, MappingDetail, Topic

logger = logging.getLogger(__name__)

SUPPLEMENTARY_KEYWORDS = ("Hoạt động bổ trợ", "STEM", "CLB")
SUPPLEMENTARY_TOPIC_TITLE = "Hoạt động bổ trợ / STEM / CLB"
SUPPLEMENTARY_REASON = "Hoạt động tăng cường lấp lỗ hổng năng lực."
SUPPLEMENTARY_EQUIPMENT = "Phòng máy tính / Phòng STEM"
SUPPLEMENTARY_LOCATION = "Trường học"


@dataclass(frozen=True)
class CoverageCell:
    competency: Competency
    grade: str
    count: int
    lesson_titles: tuple[str, ...]
    status: CoverageStatus


@dataclass
class GradeCoverage:
    grade: str
    cells: list[CoverageCell] = field(default_factory=list)

    @property
    def gaps(self) -> list[CoverageCell]:
        return [c for c in self.cells if c.status != CoverageStatus.COVERED]

    @property
    def coverage_ratio(self) -> float:
        if not self.cells:
            return 0.0
        covered = sum(1 for c in self.cells if c.status == CoverageStatus.COVERED)
        return covered / len(self.cells)


def _lessons_claiming(topics: list[Topic], code: str) -> list[str]:
    return [
        lesson.title
        for topic in topics
        for lesson in topic.lessons
        if code in lesson.selected_codes()
    ]


def _status(count: int, threshold: int) -> CoverageStatus:
    if count == 0:
        return CoverageStatus.MISSING
    if count < threshold:
        return CoverageStatus.WEAK
    return CoverageStatus.COVERED


def build_coverage_matrix(
    subject_data: CurriculumData,
    anchor_data: CurriculumData | None = None,
    threshold: int = GAP_COVERAGE_THRESHOLD,
) -> list[GradeCoverage]:
    """
    Coverage of every registry competency, per grade.

    Lessons of ``anchor_data`` count too when it is a different dataset from
    ``subject_data``.
    """
    sources = [subject_data]
    if anchor_data is not None and anchor_data is not subject_data:
        sources.append(anchor_data)

    matrix = []
    for grade in ALL_GRADES:
        row = GradeCoverage(grade=grade)
        for competency in competencies_for_grade(grade):
            titles: list[str] = []
            for source in sources:
                titles.extend(_lessons_claiming(source.get(grade, []), competency.code))
            row.cells.append(CoverageCell(
                competency=competency,
                grade=grade,
                count=len(titles),
                lesson_titles=tuple(titles),
                status=_status(len(titles), threshold),
            ))
        matrix.append(row)
    return matrix


def find_gaps(
    subject_data: CurriculumData,
    anchor_data: CurriculumData | None = None,
    threshold: int = GAP_COVERAGE_THRESHOLD,
) -> dict[str, list[CoverageCell]]:
    """Grade → uncovered or under-covered cells."""
    return {
        row.grade: row.gaps
        for row in build_coverage_matrix(subject_data, anchor_data, threshold)
    }


def find_supplementary_topic(topics: list[Topic]) -> int | None:
    for index, topic in enumerate(topics):
        if any(keyword in topic.topic for keyword in SUPPLEMENTARY_KEYWORDS):
            return index
    return None


def supplementary_lesson(lesson_id: str, title: str, competency_code: str) -> Lesson:
    return Lesson(
        id=lesson_id,
        title=title,
        yccd=[f"Phát triển năng lực số: {competency_code}"],
        mappings={
            competency_code: MappingDetail(
                selected=True, type=MappingType.MANUAL, reason=SUPPLEMENTARY_REASON
            )
        },
        periods=2,
        equipment=SUPPLEMENTARY_EQUIPMENT,
        location=SUPPLEMENTARY_LOCATION,
    )


def with_supplementary_lesson(
    topics: list[Topic],
    lesson_id: str,
    title: str,
    competency_code: str,
) -> list[Topic]:
    """
    Append a gap-closing lesson to the supplementary topic.

    The topic is found by keyword, or created at the end of the grade in
    semester 2.
    """
    new_topics = list(topics)
    index = find_supplementary_topic(new_topics)
    if index is None:
        new_topics.append(Topic(topic=SUPPLEMENTARY_TOPIC_TITLE, semester=2, lessons=[]))
        index = len(new_topics) - 1
        logger.info("Created supplementary topic '%s'", SUPPLEMENTARY_TOPIC_TITLE)

    target = new_topics[index]
    lesson = supplementary_lesson(lesson_id, title, competency_code)
    new_topics[index] = target.model_copy(update={"lessons": [*target.lessons, lesson]})
    return new_topics
