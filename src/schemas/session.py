"""
Editor Session

The explicit selection state every store operation is addressed with:
current subject, grade, lesson and document view.
"""

from pydantic import BaseModel, Field

from config.settings import ANCHOR_SUBJECT
from src.schemas.base import Grade, ViewMode


class EditorSession(BaseModel):
    """
    Mutable per-user selection.

    The curriculum itself never lives here; only the coordinates used to
    address it.
    """
    subject: str = Field(default=ANCHOR_SUBJECT, description="Active subject")
    grade: Grade = Field(default=Grade.SIX, description="Active grade")
    lesson_id: str | None = Field(default=None, description="Open lesson id")
    view_mode: ViewMode = Field(default=ViewMode.PL1)
    filter_mode: bool = Field(default=True, description="Show only relevant competencies")
    ai_loading: bool = Field(default=False, description="An AI call is in flight")

    @property
    def grade_key(self) -> str:
        return self.grade.value

    def select_lesson(self, lesson_id: str | int | None) -> None:
        self.lesson_id = None if lesson_id is None else str(lesson_id)

    def switch_grade(self, grade: Grade | str) -> None:
        """Change grade; the open lesson belongs to the old grade."""
        self.grade = Grade(grade)
        self.lesson_id = None

    def switch_subject(self, subject: str) -> None:
        self.subject = subject
        self.lesson_id = None
