"""
Module: rendering.layout

Purpose:
    Print layout descriptor for a question: page theme, the regions the
    question fills and how each is displayed, and print settings.

Key Functions:
    - generate_layout_json(): Question -> layout dict
"""

from __future__ import annotations

from typing import Any, Dict

from assessment_toolkit.core.models import (
    CompositeData,
    FibData,
    McqData,
    Question,
    TableData,
)

from .config import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE, DEFAULT_LINE_HEIGHT

PAGE_LAYOUT = "A4"

# Style layout value -> region display
_DISPLAY = {"vertical": "stack", "horizontal": "row", "matrix": "grid"}


def _display(layout: str, default: str = "stack") -> str:
    return _DISPLAY.get(layout, default)


def layout_regions(question: Question) -> Dict[str, Dict[str, str]]:
    """
    Regions present in ``question``.

    - prompt: ``content`` is non-empty (image layout)
    - stimulus: COMPOSITE ``common_content``, a word bank or a table
    - options: MCQ options (options layout)
    - subquestions: COMPOSITE sub-questions (sub-question layout, grid by default)
    """
    data = question.data
    image_display = _display(data.style.image_layout)
    regions: Dict[str, Dict[str, str]] = {}

    if isinstance(data, CompositeData):
        if data.common_content or data.options_pool:
            regions["stimulus"] = {"display": image_display}
        if data.sub_questions:
            layout = data.style.sub_questions_layout
            regions["subquestions"] = {"display": _display(layout) if layout != "vertical" else "grid"}
        return regions

    if data.content:
        regions["prompt"] = {"display": image_display}
    if (isinstance(data, FibData) and data.options_pool) or (
        isinstance(data, TableData) and data.table is not None
    ):
        regions["stimulus"] = {"display": "stack"}
    if isinstance(data, McqData) and data.options:
        regions["options"] = {"display": _display(data.style.options_layout)}
    return regions


def generate_layout_json(question: Question) -> Dict[str, Any]:
    """
    Build the print layout JSON for a question.

    Example:
        >>> generate_layout_json(question)["layout_id"]
        'lyt_Q1_print'
    """
    question_id = question.id or "q_xxx"
    return {
        "layout_id": f"lyt_{question_id}_print",
        "question_id": question_id,
        "page_layout": PAGE_LAYOUT,
        "theme": {
            "font_family": DEFAULT_FONT_FAMILY,
            "base_font_size": DEFAULT_FONT_SIZE,
            "line_height": DEFAULT_LINE_HEIGHT,
        },
        "regions": layout_regions(question),
        "print_settings": {
            "page_break_inside": "avoid",
            "keep_with_next": False,
        },
    }
