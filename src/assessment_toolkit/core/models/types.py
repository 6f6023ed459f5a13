"""
Module: types

Purpose:
    Closed vocabularies of the canonical question schema: the question type
    tag plus the enumerations used by metadata and style fields.

Key Classes:
    - QuestionType: Discriminator selecting the shape of Question.data

Key Constants:
    - QUESTION_TYPES: All six tags, in schema order
    - DIFFICULTY_LEVELS, POOL_TYPES, SUBPOOL_TYPES, GRADE_LEVELS
    - LAYOUT_VALUES, SUB_LAYOUT_VALUES, TABLE_GRID_VALUES

Dependencies:
    - enum (std)

Used By:
    - core.models.data / core.models.style
    - normalize.defaults / normalize.legacy
    - core.schemas.validator
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


SCHEMA_VERSION = "5.1"


class QuestionType(str, Enum):
    """Discriminator tag of the polymorphic ``data`` payload."""
    MCQ = "MCQ"
    FIB = "FIB"
    MATCH = "MATCH"
    SUBJECTIVE = "SUBJECTIVE"
    TABLE = "TABLE"
    COMPOSITE = "COMPOSITE"

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        """Human-readable label used by authoring and selection tools."""
        return _DISPLAY_NAMES[self]

    @classmethod
    def coerce(cls, value: object) -> Optional[QuestionType]:
        """
        Return the matching tag for an exact canonical value, else None.

        Canonical tags are case-sensitive; free-form legacy type strings
        go through ``normalize.legacy.map_legacy_type`` instead.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return None
        return None


_DISPLAY_NAMES = {
    QuestionType.MCQ: "Multiple Choice",
    QuestionType.FIB: "Fill in the Blank",
    QuestionType.MATCH: "Match the Following",
    QuestionType.SUBJECTIVE: "Subjective",
    QuestionType.TABLE: "Table/Grid",
    QuestionType.COMPOSITE: "Composite",
}


QUESTION_TYPES: tuple[str, ...] = tuple(t.value for t in QuestionType)

DIFFICULTY_LEVELS: tuple[str, ...] = ("Easy", "Medium", "Hard")
POOL_TYPES: tuple[str, ...] = ("Practice", "Exam")
SUBPOOL_TYPES: tuple[str, ...] = ("NA", "Written", "Oral")
GRADE_LEVELS: tuple[str, ...] = (
    "Nursery", "LKG", "UKG",
    *(f"Grade {n}" for n in range(1, 13)),
)

LAYOUT_VALUES: tuple[str, ...] = ("vertical", "horizontal")
SUB_LAYOUT_VALUES: tuple[str, ...] = ("vertical", "horizontal", "matrix")
TABLE_GRID_VALUES: tuple[str, ...] = ("all", "none", "horizontal", "vertical")


def type_display_name(value: object) -> str:
    """Display name for a type tag; unknown values are returned as given."""
    tag = QuestionType.coerce(value)
    return tag.display_name if tag else str(value)
