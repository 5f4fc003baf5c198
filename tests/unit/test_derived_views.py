"""
Unit tests for derived views: lesson context resolution, the cross-grade
usage index and the gap-analysis matrix.
"""

from src.curriculum.context import all_lessons, resolve_lesson_context, same_id
from src.curriculum.gap_matrix import (
    SUPPLEMENTARY_TOPIC_TITLE,
    build_coverage_matrix,
    find_gaps,
    find_supplementary_topic,
    with_supplementary_lesson,
)
from src.curriculum.usage import UsageIndexCache, build_usage_index, other_usages
from src.registry.competencies import COMPETENCIES_TC1, COMPETENCIES_TC2
from src.schemas.base import CoverageStatus, MappingType
from src.schemas.curriculum import MappingDetail, Topic
from tests.factories import make_lesson


# =============================================================================
# CONTEXT RESOLVER
# =============================================================================

class TestResolveLessonContext:

    def test_finds_position(self, sample_topics) -> None:
        ctx = resolve_lesson_context(sample_topics, "b1")
        assert ctx.topic_index == 1
        assert ctx.lesson_index == 0
        assert ctx.lesson.title == "B1"
        assert ctx.topic is sample_topics[1]

    def test_no_match(self, sample_topics) -> None:
        assert resolve_lesson_context(sample_topics, "zz") is None
        assert resolve_lesson_context(sample_topics, None) is None
        assert resolve_lesson_context([], "a1") is None

    def test_first_match_wins(self) -> None:
        topics = [
            Topic(topic="T1", lessons=[make_lesson("dup", "first")]),
            Topic(topic="T2", lessons=[make_lesson("dup", "second")]),
        ]
        assert resolve_lesson_context(topics, "dup").lesson.title == "first"

    def test_same_id_coerces(self) -> None:
        assert same_id(6101, "6101")
        assert not same_id(None, "None")
        assert [l.id for l in all_lessons([])] == []


# =============================================================================
# USAGE INDEX
# =============================================================================

def usage_subject():
    return {
        "6": [Topic(topic="T6", lessons=[
            make_lesson("x", "Bài 6A", codes=["1.1.TC1a"]),
            make_lesson("y", "Bài 6B", codes=["1.1.TC1a", "2.1.TC1a"]),
        ])],
        "7": [Topic(topic="T7", lessons=[make_lesson("z", "Bài 7A", codes=["1.1.TC1a"])])],
    }


class TestUsageIndex:

    def test_entries_in_grade_and_document_order(self) -> None:
        index = build_usage_index(usage_subject(), "6", "y")
        entries = index["1.1.TC1a"]
        assert [(e.grade, e.lesson_title) for e in entries] == [
            ("6", "Bài 6A"), ("6", "Bài 6B"), ("7", "Bài 7A"),
        ]
        assert [e.is_current for e in entries] == [False, True, False]

    def test_current_requires_matching_grade(self) -> None:
        index = build_usage_index(usage_subject(), "7", "y")
        assert not any(e.is_current for e in index["2.1.TC1a"])

    def test_every_mapping_key_counts(self) -> None:
        data = {"8": [Topic(topic="T", lessons=[make_lesson("k", "K").model_copy(update={
            "mappings": {"4.1.TC2a": MappingDetail(selected=False)},
        })])]}
        assert len(build_usage_index(data, "8", None)["4.1.TC2a"]) == 1

    def test_other_usages(self) -> None:
        index = build_usage_index(usage_subject(), "6", "x")
        assert [e.lesson_title for e in other_usages(index, "1.1.TC1a")] == ["Bài 6B", "Bài 7A"]
        assert other_usages(index, "missing") == []

    def test_cache_recomputes_only_on_change(self) -> None:
        cache = UsageIndexCache()
        data = usage_subject()
        first = cache.get(data, "6", "x")
        assert cache.get(data, "6", "x") is first
        assert cache.computations == 1
        cache.get(data, "6", "y")
        assert cache.computations == 2
        cache.get(dict(data), "6", "y")
        assert cache.computations == 3


# =============================================================================
# GAP MATRIX
# =============================================================================

class TestCoverageMatrix:

    def test_registry_per_grade(self) -> None:
        matrix = build_coverage_matrix({})
        assert [row.grade for row in matrix] == ["6", "7", "8", "9"]
        assert len(matrix[0].cells) == len(COMPETENCIES_TC1)
        assert len(matrix[3].cells) == len(COMPETENCIES_TC2)
        assert all(c.status == CoverageStatus.MISSING for row in matrix for c in row.cells)
        assert matrix[0].coverage_ratio == 0.0

    def test_counts_selected_mappings(self) -> None:
        matrix = build_coverage_matrix(usage_subject())
        cell = next(c for c in matrix[0].cells if c.competency.code == "1.1.TC1a")
        assert cell.count == 2
        assert cell.lesson_titles == ("Bài 6A", "Bài 6B")
        assert cell.status == CoverageStatus.COVERED

    def test_weak_below_threshold(self) -> None:
        matrix = build_coverage_matrix(usage_subject(), threshold=2)
        grade7 = {c.competency.code: c for c in matrix[1].cells}
        assert grade7["1.1.TC1a"].status == CoverageStatus.WEAK

    def test_anchor_subject_counts(self) -> None:
        anchor = {"6": [Topic(topic="Tin", lessons=[make_lesson("t", "Tin 6", codes=["5.1.TC1a"])])]}
        matrix = build_coverage_matrix(usage_subject(), anchor)
        cell = next(c for c in matrix[0].cells if c.competency.code == "5.1.TC1a")
        assert cell.count == 1

    def test_anchor_same_object_not_double_counted(self) -> None:
        data = usage_subject()
        matrix = build_coverage_matrix(data, data)
        cell = next(c for c in matrix[1].cells if c.competency.code == "1.1.TC1a")
        assert cell.count == 1

    def test_find_gaps(self) -> None:
        gaps = find_gaps(usage_subject())
        assert "1.1.TC1a" not in {c.competency.code for c in gaps["6"]}
        assert len(gaps["8"]) == len(COMPETENCIES_TC2)


class TestSupplementaryLesson:

    def test_creates_semester_two_topic(self, sample_topics) -> None:
        result = with_supplementary_lesson(sample_topics, "s1", "Bổ trợ", "6.1.TC1a")
        topic = result[-1]
        assert topic.topic == SUPPLEMENTARY_TOPIC_TITLE
        assert topic.semester == 2
        lesson = topic.lessons[0]
        assert lesson.yccd == ["Phát triển năng lực số: 6.1.TC1a"]
        assert lesson.periods == 2
        assert lesson.equipment == "Phòng máy tính / Phòng STEM"
        assert lesson.location == "Trường học"
        detail = lesson.mappings["6.1.TC1a"]
        assert detail.type == MappingType.MANUAL
        assert detail.reason == "Hoạt động tăng cường lấp lỗ hổng năng lực."
        assert len(sample_topics) == 3

    def test_reuses_keyword_topic(self) -> None:
        topics = [
            Topic(topic="Chủ đề 1", lessons=[]),
            Topic(topic="CLB Tin học", semester=1, lessons=[make_lesson("k")]),
        ]
        assert find_supplementary_topic(topics) == 1
        result = with_supplementary_lesson(topics, "s1", "Bổ trợ", "1.1.TC1a")
        assert len(result) == 2
        assert [l.id for l in result[1].lessons] == ["k", "s1"]
