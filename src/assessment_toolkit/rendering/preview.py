"""
Module: rendering.preview

Purpose:
    Preview rendering: the question block wrapped in a styled container.
    Container font settings resolve as options > question style > defaults.

Key Functions:
    - render_preview_html(): Question -> wrapped HTML
    - preview_styles(): Resolved container style
"""

from __future__ import annotations

import html
import logging
from typing import Dict, Optional

from assessment_toolkit.core.models import Question

from .config import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_LINE_HEIGHT,
    RenderOptions,
)
from .renderer import render_question_html

logger = logging.getLogger(__name__)


def preview_styles(question: Optional[Question], options: Optional[RenderOptions] = None) -> Dict[str, str]:
    """
    Resolve the container style for a preview.

    Font family and size come from the options first, then from the
    question's ``data.style``, then the defaults. Line height comes from the
    style or the default.

    Returns:
        Dict with ``font-family``, ``font-size`` and ``line-height`` keys
    """
    options = options or RenderOptions()
    style = question.data.style.extras if question is not None else {}
    return {
        "font-family": options.font_family or style.get("font_family") or DEFAULT_FONT_FAMILY,
        "font-size": options.font_size or style.get("font_size") or DEFAULT_FONT_SIZE,
        "line-height": str(style.get("line_height") or DEFAULT_LINE_HEIGHT),
    }


def _style_attr(styles: Dict[str, str]) -> str:
    return html.escape("; ".join(f"{key}: {value}" for key, value in styles.items()) + ";")


def render_preview_html(question: Optional[Question], options: Optional[RenderOptions] = None) -> str:
    """
    Render a question preview.

    A question that fails to render produces an error block naming the
    question instead of raising; the failure is logged.

    Args:
        question: Canonical question; None renders nothing
        options: Render options

    Returns:
        HTML string, wrapped in ``<div class="{wrapper_class}">`` unless the
        wrapper class is empty

    Example:
        >>> render_preview_html(question, RenderOptions(question_number=1, show_marks=False))
        '<div class="q-preview" style="font-family: Noto Sans, sans-serif; ...">...</div>'
    """
    if question is None:
        return ""
    options = options or RenderOptions()
    number = options.number_for(question.id)

    try:
        body = render_question_html(question, options)
    except Exception as e:
        logger.error(f"Error rendering question {question.id}: {e}")
        return (
            '<div class="p-error" style="color: red; padding: 1rem;">'
            f"<strong>Error rendering question {html.escape(number)}:</strong><br>"
            f"{html.escape(str(e))}</div>"
        )

    if not options.wrapper_class:
        return body
    styles = _style_attr(preview_styles(question, options))
    return f'<div class="{html.escape(options.wrapper_class)}" style="{styles}">{body}</div>'
