"""
AI Suggestion Schemas

Data exchanged with the generative model. The response models double as
the JSON response schema sent with each structured request.
"""

from pydantic import BaseModel, Field

from src.schemas.curriculum import Competency


class SuggestionRequest(BaseModel):
    """Context for proposing competency codes for one lesson."""
    lesson_title: str
    subject: str
    grade: str
    yccd: list[str] = Field(default_factory=list)
    competencies: list[Competency] = Field(default_factory=list)


class CompetencySuggestion(BaseModel):
    """One proposed {code, reason} pair."""
    code: str = Field(description="Competency code from the provided list")
    reason: str = Field(default="", description="How the lesson develops this competency")


class SuggestionResponse(BaseModel):
    suggestions: list[CompetencySuggestion] = Field(default_factory=list)


class RewriteRequest(BaseModel):
    """Context for rewriting the rationale of a single mapping."""
    lesson_title: str
    subject: str
    grade: str
    yccd: list[str] = Field(default_factory=list)
    code: str
    competency_text: str = ""
    current_reason: str = ""


class RewriteResponse(BaseModel):
    reason: str = Field(description="Rewritten rationale text")
