"""
Module: data

Purpose:
    The polymorphic ``data`` payload of a question, modelled as a tagged
    union: one record per question type, selected by the type tag held on
    the owning Question or SubQuestion. Records do not inherit from each
    other; each enumerates its own RichText-bearing fields.

Key Classes:
    - McqData, FibData, MatchData, SubjectiveData, TableData, CompositeData
    - McqOption, MatchPair, TableGrid: nested value records
    - SubQuestion: a typed, solution-less question owned by CompositeData

Key Functions:
    - data_class_for(): Variant record class for a type tag
    - data_from_dict(): Build the variant for a tag from a mapping

Dependencies:
    - dataclasses (std)
    - .style: per-type style records
    - .types.QuestionType

Used By:
    - core.models.questions.Question
    - core.richtext.traversal: one branch per variant
    - rendering.html: per-type renderers

Invariants:
    - Absent optional fields are None and are omitted from to_dict()
    - Unmodelled keys survive a from_dict()/to_dict() round trip
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Type, Union

from ._records import compact, split_extras
from .style import BaseStyle, CompositeStyle, OptionsStyle, TableStyle
from .types import QuestionType

RichText = str


# ─────────────────────────────────────────────────────────────────────────────
# Nested value records
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class McqOption:
    """One answer option; ``id`` is the printed label ("a", "b", ...)."""

    text: Optional[RichText] = None
    id: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("id", "text")

    def to_dict(self) -> dict:
        return compact({"id": self.id, "text": self.text}, self.extras)

    @classmethod
    def from_dict(cls, data: Any) -> McqOption:
        if not isinstance(data, Mapping):
            return cls(text=data)
        return cls(
            text=data.get("text"),
            id=data.get("id"),
            extras=split_extras(data, cls.FIELDS),
        )


@dataclass
class MatchPair:
    """A left/right pair to be matched."""

    left: Optional[RichText] = None
    right: Optional[RichText] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("left", "right")

    def to_dict(self) -> dict:
        return compact({"left": self.left, "right": self.right}, self.extras)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MatchPair:
        return cls(
            left=data.get("left"),
            right=data.get("right"),
            extras=split_extras(data, cls.FIELDS),
        )


@dataclass
class TableGrid:
    """
    Header cells plus a row-major 2D list of RichText cells.

    Rows are "rectangular-ish": ragged rows are kept as authored.
    """

    rows: List[Any] = field(default_factory=list)
    header: Optional[List[Any]] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("header", "rows")

    @property
    def column_count(self) -> int:
        """Widest of the header and the first row."""
        first = self.rows[0] if self.rows and isinstance(self.rows[0], list) else []
        return max(len(self.header or []), len(first))

    def to_dict(self) -> dict:
        return compact(
            {
                "header": list(self.header) if self.header is not None else None,
                "rows": [list(row) if isinstance(row, list) else row for row in self.rows],
            },
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TableGrid:
        header = data.get("header")
        rows = data.get("rows")
        return cls(
            rows=list(rows) if isinstance(rows, list) else [],
            header=list(header) if isinstance(header, list) else None,
            extras=split_extras(data, cls.FIELDS),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Data variants (one per QuestionType)
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class McqData:
    style: OptionsStyle = field(default_factory=OptionsStyle)
    content: Optional[RichText] = None
    options: List[McqOption] = field(default_factory=list)
    allow_multiple: Optional[bool] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("content", "style", "options", "allow_multiple")

    def to_dict(self) -> dict:
        return compact(
            {
                "content": self.content,
                "style": self.style.to_dict(),
                "options": [option.to_dict() for option in self.options],
                "allow_multiple": self.allow_multiple,
            },
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> McqData:
        options = data.get("options")
        return cls(
            style=OptionsStyle.from_dict(data.get("style") or {}),
            content=data.get("content"),
            options=[McqOption.from_dict(o) for o in options] if isinstance(options, list) else [],
            allow_multiple=data.get("allow_multiple"),
            extras=split_extras(data, cls.FIELDS),
        )


@dataclass
class FibData:
    style: OptionsStyle = field(default_factory=OptionsStyle)
    content: Optional[RichText] = None
    options_pool: Optional[List[RichText]] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("content", "style", "options_pool")

    def to_dict(self) -> dict:
        return compact(
            {
                "content": self.content,
                "style": self.style.to_dict(),
                "options_pool": list(self.options_pool) if self.options_pool is not None else None,
            },
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FibData:
        pool = data.get("options_pool")
        return cls(
            style=OptionsStyle.from_dict(data.get("style") or {}),
            content=data.get("content"),
            options_pool=list(pool) if isinstance(pool, list) else None,
            extras=split_extras(data, cls.FIELDS),
        )


@dataclass
class MatchData:
    style: BaseStyle = field(default_factory=BaseStyle)
    content: Optional[RichText] = None
    pairs: List[MatchPair] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("content", "style", "pairs")

    def to_dict(self) -> dict:
        return compact(
            {
                "content": self.content,
                "style": self.style.to_dict(),
                "pairs": [pair.to_dict() for pair in self.pairs],
            },
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MatchData:
        pairs = data.get("pairs")
        return cls(
            style=BaseStyle.from_dict(data.get("style") or {}),
            content=data.get("content"),
            pairs=[MatchPair.from_dict(p) for p in pairs if isinstance(p, Mapping)]
            if isinstance(pairs, list) else [],
            extras=split_extras(data, cls.FIELDS),
        )


@dataclass
class SubjectiveData:
    style: BaseStyle = field(default_factory=BaseStyle)
    content: Optional[RichText] = None
    expected_length: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("content", "style", "expected_length")

    def to_dict(self) -> dict:
        return compact(
            {
                "content": self.content,
                "style": self.style.to_dict(),
                "expected_length": self.expected_length,
            },
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SubjectiveData:
        return cls(
            style=BaseStyle.from_dict(data.get("style") or {}),
            content=data.get("content"),
            expected_length=data.get("expected_length"),
            extras=split_extras(data, cls.FIELDS),
        )


@dataclass
class TableData:
    style: TableStyle = field(default_factory=TableStyle)
    content: Optional[RichText] = None
    table: Optional[TableGrid] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("content", "style", "table")

    def to_dict(self) -> dict:
        return compact(
            {
                "content": self.content,
                "style": self.style.to_dict(),
                "table": self.table.to_dict() if self.table is not None else None,
            },
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TableData:
        table = data.get("table")
        return cls(
            style=TableStyle.from_dict(data.get("style") or {}),
            content=data.get("content"),
            table=TableGrid.from_dict(table) if isinstance(table, Mapping) else None,
            extras=split_extras(data, cls.FIELDS),
        )


@dataclass
class CompositeData:
    """
    A shared stem (``common_content``) followed by typed sub-questions.

    ``options_pool`` is an optional word bank shared by FIB sub-questions.
    ``content`` is an optional prompt some authoring tools write alongside
    the stem.
    """

    style: CompositeStyle = field(default_factory=CompositeStyle)
    content: Optional[RichText] = None
    common_content: Optional[RichText] = None
    sub_questions: List[SubQuestion] = field(default_factory=list)
    options_pool: Optional[List[RichText]] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = (
        "content", "common_content", "style", "options_pool", "sub_questions",
    )

    def to_dict(self) -> dict:
        return compact(
            {
                "content": self.content,
                "common_content": self.common_content,
                "style": self.style.to_dict(),
                "options_pool": list(self.options_pool) if self.options_pool is not None else None,
                "sub_questions": [sub.to_dict() for sub in self.sub_questions],
            },
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CompositeData:
        subs = data.get("sub_questions")
        pool = data.get("options_pool")
        return cls(
            style=CompositeStyle.from_dict(data.get("style") or {}),
            content=data.get("content"),
            common_content=data.get("common_content"),
            sub_questions=[SubQuestion.from_dict(s) for s in subs if isinstance(s, Mapping)]
            if isinstance(subs, list) else [],
            options_pool=list(pool) if isinstance(pool, list) else None,
            extras=split_extras(data, cls.FIELDS),
        )


QuestionData = Union[McqData, FibData, MatchData, SubjectiveData, TableData, CompositeData]

_DATA_CLASSES: Dict[QuestionType, Type[Any]] = {
    QuestionType.MCQ: McqData,
    QuestionType.FIB: FibData,
    QuestionType.MATCH: MatchData,
    QuestionType.SUBJECTIVE: SubjectiveData,
    QuestionType.TABLE: TableData,
    QuestionType.COMPOSITE: CompositeData,
}


def data_class_for(qtype: QuestionType) -> Type[Any]:
    """Return the data variant class selected by ``qtype``."""
    return _DATA_CLASSES[qtype]


def data_from_dict(qtype: QuestionType, data: Optional[Mapping[str, Any]]) -> QuestionData:
    """Build the data variant for ``qtype`` from a mapping."""
    return data_class_for(qtype).from_dict(data or {})


def check_variant(qtype: QuestionType, data: object) -> None:
    """Raise TypeError when ``data`` is not the variant ``qtype`` selects."""
    expected = data_class_for(qtype)
    if not isinstance(data, expected):
        raise TypeError(
            f"{qtype.value} question requires {expected.__name__}, got {type(data).__name__}"
        )


# ─────────────────────────────────────────────────────────────────────────────
# Sub-questions
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class SubQuestion:
    """
    Question-like value owned by a COMPOSITE question.

    Shares the type/data shape of a Question but has no metadata and no
    solution text of its own.
    """

    type: QuestionType
    data: QuestionData
    id: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("id", "type", "data")

    def __post_init__(self) -> None:
        check_variant(self.type, self.data)

    def to_dict(self) -> dict:
        return compact(
            {"id": self.id, "type": self.type.value, "data": self.data.to_dict()},
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SubQuestion:
        qtype = QuestionType.coerce(data.get("type")) or QuestionType.SUBJECTIVE
        return cls(
            type=qtype,
            data=data_from_dict(qtype, data.get("data")),
            id=data.get("id"),
            extras=split_extras(data, cls.FIELDS),
        )
