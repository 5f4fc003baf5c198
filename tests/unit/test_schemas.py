"""
Unit tests for EduPlan schemas.

Tests verify:
1. Valid data is accepted; invalid data raises ValidationError
2. Lesson ids are normalized to strings
3. Serialization keeps the storage field names
"""

import pytest
from pydantic import ValidationError

from src.schemas.base import Grade, ViewMode
from src.schemas.curriculum import (
    DATASET_ADAPTER,
    Lesson,
    MappingDetail,
    Topic,
    dump_dataset,
    new_lesson_id,
    noncanonical_lesson_ids,
    reserve_lesson_ids,
)
from src.schemas.session import EditorSession
from src.registry.competencies import competencies_for_grade, competency_text, find_competency
from src.registry.default_curriculum import default_curriculum, has_bundled_default


# =============================================================================
# LESSON
# =============================================================================

class TestLesson:

    def test_numeric_id_coerced(self) -> None:
        assert Lesson(id=6101).id == "6101"
        assert Lesson(id=12.0).id == "12"

    def test_bool_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Lesson(id=True)

    def test_negative_periods_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Lesson(id="1", periods=-1)

    def test_frozen(self) -> None:
        lesson = Lesson(id="1", title="A")
        with pytest.raises(ValidationError):
            lesson.title = "B"

    def test_effective_periods(self) -> None:
        assert Lesson(id="1", periods=4).effective_periods() == 4
        assert Lesson(id="1", title="Bài thường").effective_periods() == 2
        assert Lesson(id="1", title="Kiểm tra cuối học kì I").effective_periods() == 1

    def test_selected_codes_in_mapping_order(self) -> None:
        lesson = Lesson(id="1", mappings={
            "2.1.TC1a": MappingDetail(selected=True),
            "1.1.TC1a": MappingDetail(selected=False),
            "5.1.TC1a": MappingDetail(),
        })
        assert lesson.selected_codes() == ["2.1.TC1a", "5.1.TC1a"]

    def test_plan_data_alias(self) -> None:
        lesson = Lesson.model_validate({
            "id": "1",
            "planData": [{"label": "1", "steps": [{"title": "B1", "nlsCodes": ["1.1.TC1a"]}]}],
        })
        assert lesson.plan_data[0].steps[0].nls_codes == ["1.1.TC1a"]


class TestTopic:

    def test_semester_defaults_to_one(self) -> None:
        assert Topic(topic="T").effective_semester() == 1

    def test_semester_range(self) -> None:
        with pytest.raises(ValidationError):
            Topic(topic="T", semester=3)


# =============================================================================
# DATASET SERIALIZATION
# =============================================================================

class TestDataset:

    def test_dump_uses_storage_names(self) -> None:
        data = DATASET_ADAPTER.validate_python({"Tin học": {"6": [{
            "topic": "T",
            "lessons": [{"id": "1", "planData": [{"label": "1"}]}],
        }]}})
        dumped = dump_dataset(data)
        lesson = dumped["Tin học"]["6"][0]["lessons"][0]
        assert "planData" in lesson
        assert "semester" not in dumped["Tin học"]["6"][0]

    def test_noncanonical_ids(self) -> None:
        raw = {"S": {"6": [{"topic": "T", "lessons": [{"id": 1}, {"id": "2"}, {"id": 3.0}]}]}}
        assert noncanonical_lesson_ids(raw) == [1, 3.0]
        assert noncanonical_lesson_ids("garbage") == []
        assert noncanonical_lesson_ids({"S": {"6": ["oops", {"lessons": "x"}, {"lessons": [7, {"id": 5}]}]}}) == [5]
        assert noncanonical_lesson_ids({"S": {"6": "oops"}}) == []

    def test_new_ids_increase_past_reserved(self) -> None:
        big = 10 ** 15
        data = {"S": {"6": [Topic(topic="T", lessons=[Lesson(id=str(big))])]}}
        reserve_lesson_ids(data)
        first = new_lesson_id()
        second = new_lesson_id()
        assert int(first) > big
        assert int(second) > int(first)


# =============================================================================
# SESSION
# =============================================================================

class TestEditorSession:

    def test_defaults(self) -> None:
        session = EditorSession()
        assert session.subject == "Tin học"
        assert session.grade == Grade.SIX
        assert session.view_mode == ViewMode.PL1
        assert session.filter_mode is True
        assert session.ai_loading is False

    def test_switch_grade_clears_lesson(self) -> None:
        session = EditorSession(lesson_id="1")
        session.switch_grade("8")
        assert session.grade_key == "8"
        assert session.lesson_id is None

    def test_select_lesson_stringifies(self) -> None:
        session = EditorSession()
        session.select_lesson(42)
        assert session.lesson_id == "42"


# =============================================================================
# REGISTRY
# =============================================================================

class TestRegistry:

    def test_grade_bands(self) -> None:
        assert competencies_for_grade("6") is competencies_for_grade("7")
        assert competencies_for_grade("8") is competencies_for_grade("9")
        assert all("TC1" in c.code for c in competencies_for_grade("6"))
        assert all("TC2" in c.code for c in competencies_for_grade("9"))

    def test_lookup(self) -> None:
        assert find_competency("1.1.TC1a", "6").code == "1.1.TC1a"
        assert find_competency("1.1.TC1a", "8") is None
        assert competency_text("nope", "6") == ""

    def test_bundled_default(self) -> None:
        assert has_bundled_default("Tin học")
        assert not has_bundled_default("Toán")
        data = default_curriculum("Tin học")
        assert set(data) == {"6", "7", "8", "9"}
        assert default_curriculum("Tin học") is not data
        with pytest.raises(KeyError):
            default_curriculum("Toán")

    def test_default_codes_exist_in_registry(self) -> None:
        data = default_curriculum("Tin học")
        for grade, topics in data.items():
            known = {c.code for c in competencies_for_grade(grade)}
            for topic in topics:
                for lesson in topic.lessons:
                    assert set(lesson.mappings) <= known, lesson.title
