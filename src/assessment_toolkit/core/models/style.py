"""
Module: style

Purpose:
    Per-type presentation settings attached to ``data.style``. One record
    per style family; the question type selects which family applies.

Key Classes:
    - BaseStyle: MATCH and SUBJECTIVE (image_layout only)
    - OptionsStyle: MCQ and FIB (adds options_layout)
    - CompositeStyle: COMPOSITE (adds sub_questions_layout)
    - TableStyle: TABLE (adds table_grid_lines, hide_header, column_widths)

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.data: every data variant carries one style
    - rendering.renderer: layout decisions
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional

from ._records import compact, split_extras


@dataclass
class BaseStyle:
    """Style shared by every type: where images sit relative to text."""

    image_layout: str = "vertical"
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("image_layout",)

    def to_dict(self) -> dict:
        return compact({"image_layout": self.image_layout}, self.extras)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BaseStyle:
        return cls(
            image_layout=data.get("image_layout", "vertical"),
            extras=split_extras(data, cls.FIELDS),
        )


@dataclass
class OptionsStyle:
    """Style for MCQ and FIB: image layout plus option/word-bank layout."""

    image_layout: str = "vertical"
    options_layout: str = "vertical"
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("image_layout", "options_layout")

    def to_dict(self) -> dict:
        return compact(
            {"image_layout": self.image_layout, "options_layout": self.options_layout},
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OptionsStyle:
        return cls(
            image_layout=data.get("image_layout", "vertical"),
            options_layout=data.get("options_layout", "vertical"),
            extras=split_extras(data, cls.FIELDS),
        )


@dataclass
class CompositeStyle:
    """Style for COMPOSITE: sub-questions stack, sit side by side, or form a matrix."""

    image_layout: str = "vertical"
    sub_questions_layout: str = "vertical"
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = ("image_layout", "sub_questions_layout")

    def to_dict(self) -> dict:
        return compact(
            {
                "image_layout": self.image_layout,
                "sub_questions_layout": self.sub_questions_layout,
            },
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CompositeStyle:
        return cls(
            image_layout=data.get("image_layout", "vertical"),
            sub_questions_layout=data.get("sub_questions_layout", "vertical"),
            extras=split_extras(data, cls.FIELDS),
        )


@dataclass
class TableStyle:
    """
    Style for TABLE.

    Attributes:
        table_grid_lines: "all", "none", "horizontal" or "vertical"
        hide_header: Suppress the header row when rendering
        column_widths: Optional CSS widths, one per column
    """

    image_layout: str = "vertical"
    table_grid_lines: str = "all"
    hide_header: bool = False
    column_widths: Optional[List[Any]] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    FIELDS: ClassVar[tuple[str, ...]] = (
        "image_layout", "table_grid_lines", "hide_header", "column_widths",
    )

    def to_dict(self) -> dict:
        return compact(
            {
                "image_layout": self.image_layout,
                "table_grid_lines": self.table_grid_lines,
                "hide_header": self.hide_header,
                "column_widths": self.column_widths,
            },
            self.extras,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TableStyle:
        return cls(
            image_layout=data.get("image_layout", "vertical"),
            table_grid_lines=data.get("table_grid_lines", "all"),
            hide_header=data.get("hide_header", False),
            column_widths=data.get("column_widths"),
            extras=split_extras(data, cls.FIELDS),
        )
