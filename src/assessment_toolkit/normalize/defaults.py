"""
Module: normalize.defaults

Purpose:
    The defaulting pass applied to every question after any conversion and
    to already-canonical input. Works on the canonical dict form, in place.

    Each defaultable substructure has an explicit two-branch function:
    absent -> build a fresh default, present -> normalize what is there.
    Default values are always built by functions returning new objects so
    no two questions share a style, table or data dict.

Key Functions:
    - default_style_for_type() / default_data_for_type() / default_table()
    - create_empty_question(): Factory for a blank question of a type
    - ensure_style() / normalize_style()
    - normalize_table_data()
    - ensure_metadata() / ensure_solution()
    - ensure_defaults(): Whole-question pass (recursive into sub-questions)

Dependencies:
    - core.models: vocabularies and Question
    - .config: NormalizerConfig

Used By:
    - normalize.normalizer
    - normalize.legacy: table synthesis for old shapes
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, MutableMapping, Optional

from assessment_toolkit.core.models import (
    LAYOUT_VALUES,
    QUESTION_TYPES,
    SUB_LAYOUT_VALUES,
    TABLE_GRID_VALUES,
    Question,
    QuestionType,
    generate_question_id,
)

from .config import DEFAULT_CONFIG, NormalizerConfig

logger = logging.getLogger(__name__)

DEFAULT_TABLE_HEADER = ("Column 1", "Column 2")
_TRUE_STRINGS = {"true", "1", "yes", "on"}


# ─────────────────────────────────────────────────────────────────────────────
# Fresh defaults
# ─────────────────────────────────────────────────────────────────────────────

def default_style_for_type(qtype: QuestionType | str) -> dict:
    """
    Fresh default style for a question type.

    | type | fields |
    |------|--------|
    | MCQ, FIB | image_layout, options_layout |
    | COMPOSITE | image_layout, sub_questions_layout |
    | TABLE | image_layout, table_grid_lines, hide_header |
    | MATCH, SUBJECTIVE | image_layout |
    """
    tag = QuestionType.coerce(qtype)
    if tag in (QuestionType.MCQ, QuestionType.FIB):
        return {"image_layout": "vertical", "options_layout": "vertical"}
    if tag is QuestionType.COMPOSITE:
        return {"image_layout": "vertical", "sub_questions_layout": "vertical"}
    if tag is QuestionType.TABLE:
        return {"image_layout": "vertical", "table_grid_lines": "all", "hide_header": False}
    return {"image_layout": "vertical"}


def default_table() -> dict:
    """Fresh 2x2 placeholder grid."""
    return {
        "header": list(DEFAULT_TABLE_HEADER),
        "rows": [["Row 1", ""], ["Row 2", ""]],
    }


def default_data_for_type(qtype: QuestionType | str) -> dict:
    """Fresh default ``data`` payload (with style) for a question type."""
    style = default_style_for_type(qtype)
    tag = QuestionType.coerce(qtype)
    if tag is QuestionType.MCQ:
        return {"content": "", "style": style, "options": []}
    if tag is QuestionType.FIB:
        return {"content": "", "style": style}
    if tag is QuestionType.MATCH:
        return {"content": "", "style": style, "pairs": []}
    if tag is QuestionType.TABLE:
        return {"content": "", "style": style, "table": default_table()}
    if tag is QuestionType.COMPOSITE:
        return {"common_content": "", "style": style, "sub_questions": []}
    return {"content": "", "style": style, "expected_length": "short"}


def create_empty_question(
    qtype: QuestionType | str = QuestionType.SUBJECTIVE,
    *,
    config: Optional[NormalizerConfig] = None,
) -> Question:
    """
    Build a blank, fully-defaulted question of ``qtype``.

    Example:
        >>> q = create_empty_question("TABLE")
        >>> q.data.table.header
        ['Column 1', 'Column 2']
    """
    config = config or DEFAULT_CONFIG
    tag = QuestionType.coerce(qtype) or QuestionType.SUBJECTIVE
    raw = {
        "id": generate_question_id(config.id_prefix),
        "metadata": config.metadata_defaults.as_dict(),
        "type": tag.value,
        "data": default_data_for_type(tag),
        "solution": {"text": ""},
    }
    return Question.from_dict(raw)


# ─────────────────────────────────────────────────────────────────────────────
# Style
# ─────────────────────────────────────────────────────────────────────────────

def coerce_bool(value: Any) -> bool:
    """Booleans pass through; strings count as true only for true/1/yes/on."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _layout(value: Any, allowed: tuple[str, ...]) -> str:
    return value if value in allowed else "vertical"


def normalize_style(style: MutableMapping[str, Any], qtype: QuestionType | str) -> dict:
    """
    Normalize an existing style object for ``qtype``.

    Each type-relevant field defaults independently; layout values outside
    their vocabulary fall back to "vertical", grid lines to "all";
    ``hide_header`` becomes a bool; a non-list ``column_widths`` is dropped.
    Unrecognized keys are kept.

    Returns:
        New normalized dict
    """
    normalized = dict(style)
    tag = QuestionType.coerce(qtype)

    normalized["image_layout"] = _layout(normalized.get("image_layout"), LAYOUT_VALUES)

    if tag in (QuestionType.MCQ, QuestionType.FIB):
        normalized["options_layout"] = _layout(normalized.get("options_layout"), LAYOUT_VALUES)

    if tag is QuestionType.COMPOSITE:
        normalized["sub_questions_layout"] = _layout(
            normalized.get("sub_questions_layout"), SUB_LAYOUT_VALUES
        )

    if tag is QuestionType.TABLE:
        if normalized.get("table_grid_lines") not in TABLE_GRID_VALUES:
            normalized["table_grid_lines"] = "all"
        normalized["hide_header"] = coerce_bool(normalized.get("hide_header", False))
        if "column_widths" in normalized and not isinstance(normalized["column_widths"], list):
            logger.debug(f"Dropping non-list column_widths: {normalized['column_widths']!r}")
            del normalized["column_widths"]

    return normalized


def ensure_style(data: MutableMapping[str, Any], qtype: QuestionType | str) -> None:
    """Give ``data`` a style: a fresh default if absent, else normalize the existing one."""
    style = data.get("style")
    if not isinstance(style, MutableMapping) or not style:
        data["style"] = default_style_for_type(qtype)
    else:
        data["style"] = normalize_style(style, qtype)


# ─────────────────────────────────────────────────────────────────────────────
# Table
# ─────────────────────────────────────────────────────────────────────────────

def cell_text(cell: Any) -> Any:
    """Flatten a cell object to its text, label or id; other values pass through."""
    if isinstance(cell, MutableMapping):
        for key in ("text", "label", "id"):
            value = cell.get(key)
            if value is not None:
                return value
        return ""
    return cell


def _label(cell: Any) -> str:
    value = cell_text(cell)
    return "" if value is None else str(value)


def _label_row(cell: Any, width: int) -> List[Any]:
    return [_label(cell)] + [""] * (max(width, 1) - 1)


def build_table(columns: Any, rows: Any) -> dict:
    """
    Synthesize a table from legacy parallel ``columns``/``rows`` descriptors.

    Column labels become the header; each row label fills column 0 and the
    remaining cells are empty strings.

    Example:
        >>> build_table(["A", "B"], [{"text": "r1"}, {"text": "r2"}])
        {'header': ['A', 'B'], 'rows': [['r1', ''], ['r2', '']]}
    """
    header = [_label(c) for c in columns] if isinstance(columns, list) else []
    rows = rows if isinstance(rows, list) else []
    table: Dict[str, Any] = {"header": header, "rows": [_label_row(r, len(header)) for r in rows]}
    if not table["rows"]:
        table["rows"] = _placeholder_rows(len(header))
    return table


def _placeholder_rows(width: int) -> List[List[str]]:
    return [_label_row(f"Row {n}", width) for n in (1, 2)]


def normalize_table_data(data: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """
    Bring TABLE data to ``{table: {header, rows}}`` with 2D rows. Idempotent.

    Cases, in order:
        1. ``table.rows`` is a non-empty list of lists: kept, with cell
           objects flattened to their text/label/id
        2. ``table.rows`` is a non-empty list of cell objects: each becomes a
           label row padded to the header width
        3. Legacy ``rows``/``columns`` on the data object: converted into
           ``table`` and the legacy keys removed
        4. ``table`` with a header but no rows: placeholder rows
        5. Nothing derivable: default 2x2 grid

    Returns:
        ``data`` (modified in place)
    """
    table = data.get("table")
    if not isinstance(table, MutableMapping):
        table = None

    if table is not None and isinstance(table.get("header"), list):
        table["header"] = [cell_text(c) for c in table["header"]]

    rows = table.get("rows") if table is not None else None
    if isinstance(rows, list) and rows:
        width = len(table.get("header") or [])
        if not isinstance(rows[0], list):
            logger.debug(f"Converting {len(rows)} row object(s) to label rows")
        table["rows"] = [
            [cell_text(c) for c in row] if isinstance(row, list) else _label_row(row, width)
            for row in rows
        ]
        return data

    if "rows" in data or "columns" in data:
        logger.debug("Converting legacy rows/columns to table")
        data["table"] = build_table(data.pop("columns", None), data.pop("rows", None))
        return data

    if table is not None and table.get("header"):
        table["rows"] = _placeholder_rows(len(table["header"]))
        return data

    data["table"] = default_table()
    return data


# ─────────────────────────────────────────────────────────────────────────────
# Metadata and solution
# ─────────────────────────────────────────────────────────────────────────────

def as_int(value: Any) -> Any:
    """Integral numbers and digit strings become int; anything else is returned unchanged."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def ensure_metadata(metadata: Any, config: NormalizerConfig = DEFAULT_CONFIG) -> dict:
    """
    Default each metadata field independently.

    ``chapter`` uses None-coalescing (0 is a valid chapter); every other
    field is replaced when falsy. Unknown keys are kept.
    """
    result = dict(metadata) if isinstance(metadata, MutableMapping) else {}
    defaults = config.metadata_defaults

    chapter = result.get("chapter")
    result["chapter"] = as_int(chapter) if chapter is not None else defaults.chapter
    marks = as_int(result.get("marks"))
    result["marks"] = marks or defaults.marks

    for name in ("grade", "subject", "section", "difficulty", "pool", "subpool"):
        result[name] = result.get(name) or getattr(defaults, name)
    return result


def ensure_solution(solution: Any) -> dict:
    """``{text}`` from a dict, a bare string, or nothing."""
    if isinstance(solution, str):
        return {"text": solution}
    if isinstance(solution, MutableMapping) and solution:
        result = dict(solution)
        if result.get("text") is None:
            result["text"] = ""
        return result
    return {"text": ""}


# ─────────────────────────────────────────────────────────────────────────────
# Whole question
# ─────────────────────────────────────────────────────────────────────────────

def coerce_type(value: Any) -> str:
    """Canonical tag for ``value``; anything outside the six tags becomes SUBJECTIVE."""
    if value in QUESTION_TYPES:
        return str(value)
    if value:
        logger.debug(f"Coercing unknown type {value!r} to SUBJECTIVE")
    return QuestionType.SUBJECTIVE.value


def ensure_data(data: Any, qtype: str) -> dict:
    """
    Default one ``data`` payload for ``qtype``, recursing into sub-questions.

    Returns:
        The (possibly new) data dict
    """
    if not isinstance(data, MutableMapping) or not data:
        return default_data_for_type(qtype)

    ensure_style(data, qtype)

    if qtype == QuestionType.MCQ.value and isinstance(data.get("options"), list):
        data["options"] = [
            option if isinstance(option, MutableMapping) else {"text": option}
            for option in data["options"]
        ]
        for option in data["options"]:
            _stringify_id(option)

    if qtype == QuestionType.TABLE.value:
        normalize_table_data(data)

    subs = data.get("sub_questions")
    if isinstance(subs, list):
        data["sub_questions"] = [_ensure_sub_question(sub, i) for i, sub in enumerate(subs, start=1)]
        data["sub_questions"] = [sub for sub in data["sub_questions"] if sub is not None]

    return data


def _stringify_id(entry: MutableMapping[str, Any]) -> None:
    if entry.get("id") is not None and not isinstance(entry["id"], str):
        entry["id"] = str(entry["id"])


def _ensure_sub_question(sub: Any, number: int) -> Optional[dict]:
    if not isinstance(sub, MutableMapping):
        logger.warning(f"Dropping sub-question {number}: expected an object, got {type(sub).__name__}")
        return None
    _stringify_id(sub)
    sub["type"] = coerce_type(sub.get("type"))
    sub["data"] = ensure_data(sub.get("data"), sub["type"])
    return sub


def ensure_defaults(
    obj: MutableMapping[str, Any],
    *,
    config: Optional[NormalizerConfig] = None,
) -> MutableMapping[str, Any]:
    """
    Fill every mandatory field of a canonical question dict, in place.

    Applied after any legacy conversion and to already-canonical input;
    a no-op on fully-defaulted input.

    Args:
        obj: Canonical-shaped question dict
        config: Normalizer configuration (id prefix, metadata defaults)

    Returns:
        ``obj``
    """
    config = config or DEFAULT_CONFIG

    if not obj.get("id"):
        obj["id"] = generate_question_id(config.id_prefix)
    elif not isinstance(obj["id"], str):
        obj["id"] = str(obj["id"])

    obj["metadata"] = ensure_metadata(obj.get("metadata"), config)
    obj["type"] = coerce_type(obj.get("type"))
    obj["data"] = ensure_data(obj.get("data"), obj["type"])
    obj["solution"] = ensure_solution(obj.get("solution"))
    return obj
