"""
Module: questions

Purpose:
    Provides the Question dataclass - the canonical (schema v5.1) question
    passed between the normalizer, the traversal engine, the validator and
    the renderers. Its JSON serialization is the canonical wire shape.

Key Functions:
    - Question.to_dict() / Question.from_dict(): Serialization
    - generate_question_id(): Timestamp-plus-suffix identifier

Dependencies:
    - dataclasses (std)
    - .data: tagged-union payload
    - .metadata.Metadata

Used By:
    - normalize.normalizer: builds Questions from raw objects
    - core.richtext.traversal: walks and rewrites RichText fields
    - core.utils.serialization / loading.parser

Design:
    Questions are mutable. They are built once by the normalizer and then
    rewritten in place by defaulting passes or by traversal rewrite mode.
    Rewrites that must not leak to the caller (image resolution) work on a
    deep copy.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping

from ._records import compact, split_extras
from .data import QuestionData, check_variant, data_from_dict
from .metadata import Metadata
from .types import QuestionType


def generate_question_id(prefix: str = "Q") -> str:
    """
    Generate a question id like ``Q1718000000000_42``.

    Monotonic-ish (epoch milliseconds) with a small random suffix;
    collisions are possible but rare and are not guarded against.
    """
    return f"{prefix}{int(time.time() * 1000)}_{random.randint(0, 999)}"


@dataclass
class Solution:
    """Worked solution attached to a top-level question."""

    text: str = ""
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("text",)

    def to_dict(self) -> dict:
        return compact({"text": self.text}, self.extras)

    @classmethod
    def from_dict(cls, data: Any) -> Solution:
        if isinstance(data, str):
            return cls(text=data)
        if not isinstance(data, Mapping):
            return cls()
        return cls(text=data.get("text", ""), extras=split_extras(data, cls.FIELDS))


@dataclass
class Question:
    """
    Canonical question.

    Attributes:
        id: Opaque stable identifier like "Q1718000000000_42"
        metadata: Classification block
        type: Tag selecting the ``data`` variant
        data: Variant payload (McqData, FibData, ...) with mandatory style
        solution: Worked solution text
        extras: Unmodelled top-level keys, preserved on serialization

    Invariants:
        - ``data`` is the variant selected by ``type``

    Example:
        >>> q = Question.from_dict({
        ...     "id": "q1", "metadata": {}, "type": "SUBJECTIVE",
        ...     "data": {"content": "Explain.", "style": {"image_layout": "vertical"}},
        ...     "solution": {"text": ""},
        ... })
        >>> q.type
        <QuestionType.SUBJECTIVE: 'SUBJECTIVE'>
    """

    id: str
    type: QuestionType
    data: QuestionData
    metadata: Metadata = field(default_factory=Metadata)
    solution: Solution = field(default_factory=Solution)
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("id", "metadata", "type", "data", "solution")

    def __post_init__(self) -> None:
        """Validate that the payload matches the type tag."""
        check_variant(self.type, self.data)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to the canonical JSON shape.

        Returns:
            Dict with id, metadata, type, data, solution plus preserved extras
        """
        return compact(
            {
                "id": self.id,
                "metadata": self.metadata.to_dict(),
                "type": self.type.value,
                "data": self.data.to_dict(),
                "solution": self.solution.to_dict(),
            },
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Question:
        """
        Build a Question from an already-canonical mapping.

        No defaulting happens here; raw or legacy input must go through
        ``normalize.normalize_question`` first.

        Raises:
            ValueError: If ``type`` is not one of the six canonical tags
        """
        qtype = QuestionType.coerce(data.get("type"))
        if qtype is None:
            raise ValueError(f"Invalid question type: {data.get('type')!r}")
        metadata = data.get("metadata")
        return cls(
            id=str(data.get("id") or ""),
            type=qtype,
            data=data_from_dict(qtype, data.get("data")),
            metadata=Metadata.from_dict(metadata) if isinstance(metadata, Mapping) else Metadata(),
            solution=Solution.from_dict(data.get("solution")),
            extras=split_extras(data, cls.FIELDS),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Question({self.id!r}, type={self.type.value}, marks={self.metadata.marks})"
