"""
Static reference data: competency registries and the bundled default curriculum.
"""

from src.registry.competencies import (
    COMPETENCIES_TC1,
    COMPETENCIES_TC2,
    competencies_for_grade,
    competency_text,
    find_competency,
)
from src.registry.default_curriculum import default_curriculum, has_bundled_default

__all__ = [
    "COMPETENCIES_TC1",
    "COMPETENCIES_TC2",
    "competencies_for_grade",
    "competency_text",
    "find_competency",
    "default_curriculum",
    "has_bundled_default",
]
