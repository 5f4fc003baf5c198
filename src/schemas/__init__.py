"""
EduPlan Schemas Package

Pydantic models for the curriculum tree, the editor session and the
AI suggestion exchange.
"""

from src.schemas.base import CoverageStatus, Grade, MappingType, NotificationLevel, ViewMode
from src.schemas.curriculum import (
    Competency,
    CurriculumData,
    Dataset,
    Lesson,
    MappingDetail,
    PlanSection,
    PlanStep,
    Topic,
)
from src.schemas.session import EditorSession
from src.schemas.suggestion import (
    CompetencySuggestion,
    RewriteRequest,
    RewriteResponse,
    SuggestionRequest,
    SuggestionResponse,
)

__all__ = [
    "CoverageStatus",
    "Grade",
    "MappingType",
    "NotificationLevel",
    "ViewMode",
    "Competency",
    "CurriculumData",
    "Dataset",
    "Lesson",
    "MappingDetail",
    "PlanSection",
    "PlanStep",
    "Topic",
    "EditorSession",
    "CompetencySuggestion",
    "RewriteRequest",
    "RewriteResponse",
    "SuggestionRequest",
    "SuggestionResponse",
]
