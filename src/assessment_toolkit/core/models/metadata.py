"""
Module: metadata

Purpose:
    Provides the Metadata dataclass - the fixed classification block every
    canonical question carries (grade, subject, chapter, section,
    difficulty, marks, pool, subpool).

Dependencies:
    - dataclasses (std)
    - ._records: extras handling

Used By:
    - core.models.questions.Question
    - normalize.defaults: metadata defaulting
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping

from ._records import compact, split_extras


@dataclass
class Metadata:
    """
    Classification block of a question.

    Values are kept exactly as supplied; enumeration membership is a
    validation concern (strict schema check), not a modelling one.

    Attributes:
        grade: Grade label like "Nursery" or "Grade 3"
        subject: Subject label like "Maths"
        chapter: Chapter number, 0 allowed
        section: Section letter like "A"
        difficulty: "Easy", "Medium" or "Hard"
        marks: Marks awarded, >= 1
        pool: "Practice" or "Exam"
        subpool: "NA", "Written" or "Oral" (NA only for Practice)
        extras: Unmodelled keys, preserved on serialization
    """

    grade: str = "Nursery"
    subject: str = "Maths"
    chapter: int = 0
    section: str = "A"
    difficulty: str = "Medium"
    marks: int = 1
    pool: str = "Practice"
    subpool: str = "NA"
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = (
        "grade", "subject", "chapter", "section",
        "difficulty", "marks", "pool", "subpool",
    )

    def to_dict(self) -> dict:
        return compact({name: getattr(self, name) for name in self.FIELDS}, self.extras)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Metadata:
        values = {name: data[name] for name in cls.FIELDS if name in data}
        return cls(**values, extras=split_extras(data, cls.FIELDS))
