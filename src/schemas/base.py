"""
Base types and constants used across all schemas.

This module defines shared enums, types, and configuration
that keep the editor, the exporters and the AI channel consistent.
"""

from enum import Enum
from typing import Annotated

from pydantic import Field


# =============================================================================
# ENUMS
# =============================================================================

class Grade(str, Enum):
    """Lower-secondary grades handled by the editor."""
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"


class ViewMode(str, Enum):
    """
    Document view selected by the user.

    pl1 = integrated-competency plan (Phụ lục 1)
    pl3 = schedule plan (Phụ lục 3)
    pl4 = detailed lesson plan, CV5512 (Phụ lục 4)
    """
    PL1 = "pl1"
    PL3 = "pl3"
    PL4 = "pl4"


class MappingType(str, Enum):
    """Provenance of a lesson ↔ competency mapping."""
    SUGGESTED = "suggested"
    MANUAL = "manual"


class NotificationLevel(str, Enum):
    """Severity of a transient notification."""
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class CoverageStatus(str, Enum):
    """Coverage of one competency in one grade."""
    COVERED = "covered"
    WEAK = "weak"
    MISSING = "missing"


# =============================================================================
# CONSTANTS
# =============================================================================

ALL_GRADES: tuple[str, ...] = tuple(g.value for g in Grade)

# A lesson whose title contains this keyword is an exam (1 period by default)
EXAM_KEYWORD = "kiểm tra"


# =============================================================================
# ANNOTATED TYPES
# =============================================================================

# Number of class periods a lesson consumes
PeriodCount = Annotated[int, Field(ge=0)]

# Semester number (HK1 / HK2)
Semester = Annotated[int, Field(ge=1, le=2)]
