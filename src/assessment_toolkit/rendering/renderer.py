"""
Module: rendering.renderer

Purpose:
    Render a canonical Question to an HTML fragment. One renderer per data
    variant; COMPOSITE renders its sub-questions with the same renderers.

Key Functions:
    - render_question_html(): Question -> HTML
    - shared_options_pool(): Word bank common to every FIB sub-question
    - composite_word_bank(): Word bank shown above a COMPOSITE's sub-questions
    - cell_border_style(): Table cell borders for a grid-lines setting

Dependencies:
    - rendering.rich_text: RichText formatting

Used By:
    - rendering.preview: wrapped previews
"""

from __future__ import annotations

import html
import logging
from typing import Callable, List, Optional

from assessment_toolkit.core.models import (
    CompositeData,
    FibData,
    MatchData,
    McqData,
    Question,
    QuestionData,
    QuestionType,
    SubjectiveData,
    TableData,
)

from .config import BORDER_COLOR, RenderOptions
from .rich_text import format_rich_text

logger = logging.getLogger(__name__)

Formatter = Callable[[object], str]

_EDGE = f"1px solid {BORDER_COLOR}"


def _letter(index: int, base: str) -> str:
    return chr(ord(base) + index)


def main_content(data: QuestionData) -> Optional[str]:
    """Prompt of a variant: ``common_content`` (or ``content``) for COMPOSITE, else ``content``."""
    if isinstance(data, CompositeData):
        return data.common_content or data.content
    return data.content


# ─────────────────────────────────────────────────────────────────────────────
# Type-specific renderers
# ─────────────────────────────────────────────────────────────────────────────

def render_mcq_options(data: McqData, fmt: Formatter) -> str:
    """Options as ``(id) text`` items, stacked or in a wrapping row."""
    if not data.options:
        return ""

    horizontal = data.style.options_layout == "horizontal"
    if horizontal:
        item_style = "display:flex; align-items:flex-start; flex-shrink:0; min-width:min-content;"
        container_style = "display:flex; flex-wrap:wrap; gap:1rem; align-items:flex-start; margin:0; padding:0;"
    else:
        item_style = "display:flex; align-items:flex-start; margin-bottom:4px;"
        container_style = "display:flex; flex-direction:column; margin:0; padding:0;"

    items = []
    for k, option in enumerate(data.options):
        label = html.escape(str(option.id or _letter(k, "A")))
        items.append(
            f'<div class="p-option-item" style="{item_style}">'
            f'<span class="p-option-id">({label})</span>'
            f'<div class="p-option-text">{fmt(option.text)}</div>'
            f"</div>"
        )
    return f'<div class="p-options" style="{container_style}">{"".join(items)}</div>'


def render_word_bank(pool: Optional[List[str]], fmt: Formatter) -> str:
    """FIB word bank, centred."""
    if not pool:
        return ""
    words = "".join(f'<span class="p-word-bank-item">{fmt(word)}</span>' for word in pool)
    return (
        '<div style="display:flex; justify-content:center;">'
        f'<div class="p-word-bank" style="width:90%;">{words}</div></div>'
    )


def render_match_pairs(data: MatchData, fmt: Formatter) -> str:
    """Two columns: numbered left items, lettered right items."""
    if not data.pairs:
        return ""
    left = "".join(
        f'<div class="p-pairs-item"><span class="p-pairs-item-id">{i + 1}.</span>{fmt(pair.left)}</div>'
        for i, pair in enumerate(data.pairs)
    )
    right = "".join(
        f'<div class="p-pairs-item"><span class="p-pairs-item-id">{_letter(i, "A")}.</span>{fmt(pair.right)}</div>'
        for i, pair in enumerate(data.pairs)
    )
    return (
        '<div class="p-pairs-wrapper"><div class="p-pairs-container">'
        f'<div class="p-pairs-column"><div class="p-pairs-header">Column A</div>{left}</div>'
        f'<div class="p-pairs-column"><div class="p-pairs-header">Column B</div>{right}</div>'
        "</div></div>"
    )


def cell_border_style(
    grid_lines: str,
    first_col: bool,
    last_col: bool,
    first_row: bool,
    last_row: bool,
) -> str:
    """
    Inline border CSS for one table cell.

    ``all`` leaves borders to the stylesheet. The other settings draw their
    internal lines and keep the outer frame.
    """
    if grid_lines == "none":
        parts = ["border: none;"]
        if first_col:
            parts.append(f"border-left: {_EDGE};")
        if last_col:
            parts.append(f"border-right: {_EDGE};")
        if first_row:
            parts.append(f"border-top: {_EDGE};")
        if last_row:
            parts.append(f"border-bottom: {_EDGE};")
        return " ".join(parts)

    if grid_lines == "horizontal":
        return (
            f"border-top: {_EDGE}; border-bottom: {_EDGE}; "
            f"border-left: {_EDGE if first_col else 'none'}; "
            f"border-right: {_EDGE if last_col else 'none'};"
        )

    if grid_lines == "vertical":
        return (
            f"border-left: {_EDGE}; border-right: {_EDGE}; "
            f"border-top: {_EDGE if first_row else 'none'}; "
            f"border-bottom: {_EDGE if last_row else 'none'};"
        )

    return ""


def _width_css(width: object) -> str:
    if isinstance(width, (int, float)) and not isinstance(width, bool):
        return f"{width}px"
    return str(width) if width else ""


def render_table(data: TableData, fmt: Formatter) -> str:
    """Table grid honoring grid lines, hidden header and column widths."""
    if data.table is None:
        return ""

    style = data.style
    header = data.table.header or []
    rows = data.table.rows
    column_count = data.table.column_count
    show_header = bool(header) and not style.hide_header

    colgroup = ""
    if style.column_widths:
        cols = []
        for c in range(column_count):
            width = _width_css(style.column_widths[c] if c < len(style.column_widths) else None)
            cols.append(f'<col style="width:{width}">' if width else "<col>")
        colgroup = f"<colgroup>{''.join(cols)}</colgroup>"

    thead = ""
    if show_header:
        cells = "".join(
            f'<th style="{cell_border_style(style.table_grid_lines, c == 0, c == column_count - 1, True, False)}">'
            f"{fmt(cell)}</th>"
            for c, cell in enumerate(header)
        )
        thead = f"<thead><tr>{cells}</tr></thead>"

    body_rows = []
    for r, row in enumerate(rows):
        row = row if isinstance(row, list) else []
        first_row = not show_header and r == 0
        last_row = r == len(rows) - 1
        cells = "".join(
            f'<td style="{cell_border_style(style.table_grid_lines, c == 0, c == len(row) - 1, first_row, last_row)}">'
            f"{fmt(cell)}</td>"
            for c, cell in enumerate(row)
        )
        body_rows.append(f"<tr>{cells}</tr>")

    return (
        '<div class="p-table-container" style="width: 100%;">'
        '<table class="p-table-grid" style="border-collapse: collapse; width: 90%;">'
        f"{colgroup}{thead}<tbody>{''.join(body_rows)}</tbody></table></div>"
    )


def shared_options_pool(data: CompositeData) -> Optional[List[str]]:
    """
    Word bank shared by every FIB sub-question.

    Returns the first pool when more than one FIB sub-question has a
    non-empty pool and all of them hold the same words (order ignored).
    Otherwise None.
    """
    pools = [
        sub.data.options_pool
        for sub in data.sub_questions
        if isinstance(sub.data, FibData) and sub.data.options_pool
    ]
    if len(pools) > 1:
        first = sorted(map(str, pools[0]))
        if all(sorted(map(str, pool)) == first for pool in pools[1:]):
            return pools[0]
    return None


def composite_word_bank(data: CompositeData) -> Optional[List[str]]:
    """
    Word bank shown once above the sub-questions of a COMPOSITE.

    The composite's own ``options_pool`` when it is non-empty, else the
    pool shared by its FIB sub-questions (see ``shared_options_pool``).
    """
    if data.options_pool:
        return data.options_pool
    return shared_options_pool(data)


def render_sub_questions(data: CompositeData, fmt: Formatter) -> str:
    """Labelled sub-questions, stacked, or in a grid for horizontal/matrix layouts."""
    if not data.sub_questions:
        return ""

    hide_fib_pools = composite_word_bank(data) is not None
    items = []
    for i, sub in enumerate(data.sub_questions):
        label = html.escape(str(sub.id or _letter(i, "a")))
        content = main_content(sub.data)
        extra = render_type_content(sub.type, sub.data, fmt, hide_word_bank=hide_fib_pools)

        rendered = fmt(content)
        if not rendered and not extra and "[[" not in (content or ""):
            rendered = '<em style="color:#999;">No text</em>'
        body = f"<div>{rendered}</div>" if rendered else ""
        if extra and sub.type is QuestionType.MCQ:
            extra = f'<div style="margin-top:8px; margin-left:0; padding-left:0;">{extra}</div>'

        items.append(
            '<div class="p-sub-item" style="display:flex; align-items:flex-start; margin-bottom:8px;">'
            f'<span class="p-sub-label" style="flex-shrink:0; font-weight:500;">{label}.</span>'
            f'<div class="p-sub-content" style="flex:1; min-width:0;">{body}{extra}</div>'
            "</div>"
        )

    subs = "".join(items)
    layout = data.style.sub_questions_layout
    if layout == "horizontal":
        subs = f'<div class="p-sub-grid">{subs}</div>'
    elif layout == "matrix":
        subs = f'<div class="p-sub-grid p-sub-matrix">{subs}</div>'
    return f'<div class="p-composite-subs">{subs}</div>'


def render_type_content(
    qtype: QuestionType,
    data: QuestionData,
    fmt: Formatter,
    *,
    hide_word_bank: bool = False,
) -> str:
    """Markup that follows the prompt for ``qtype`` (empty for SUBJECTIVE)."""
    if isinstance(data, McqData):
        return render_mcq_options(data, fmt)
    if isinstance(data, FibData):
        return "" if hide_word_bank else render_word_bank(data.options_pool, fmt)
    if isinstance(data, MatchData):
        return render_match_pairs(data, fmt)
    if isinstance(data, TableData):
        return render_table(data, fmt)
    if isinstance(data, CompositeData):
        return render_sub_questions(data, fmt)
    if isinstance(data, SubjectiveData):
        return ""
    raise TypeError(f"Cannot render {qtype} data of type {type(data).__name__}")


# ─────────────────────────────────────────────────────────────────────────────
# Question
# ─────────────────────────────────────────────────────────────────────────────

def render_question_html(question: Question, options: Optional[RenderOptions] = None) -> str:
    """
    Render a complete question block.

    Layout: numbered prompt, the word bank of a COMPOSITE question (its own
    pool, or the one its FIB sub-questions share), the marks badge, then the
    type-specific content.

    Args:
        question: Canonical question
        options: Render options (defaults shown in RenderOptions)

    Returns:
        HTML fragment rooted at ``<div class="p-q-block">``

    Raises:
        TypeError: If ``question.data`` is not a known variant
    """
    options = options or RenderOptions()
    resolver = options.resolver

    def fmt(text: object) -> str:
        return format_rich_text(text, resolver)

    data = question.data
    number = html.escape(options.number_for(question.id))

    prompt = (
        '<div class="p-section-stack"><div class="p-section-text">'
        f'<span class="p-q-num">{number}.</span>'
        f"<div>{fmt(main_content(data))}</div>"
        "</div></div>"
    )

    shared_bank = ""
    if isinstance(data, CompositeData):
        pool = composite_word_bank(data)
        if pool:
            shared_bank = (
                '<div class="p-word-bank-wrapper" style="padding-left:2.5rem; margin:8px 0;">'
                f"{render_word_bank(pool, fmt)}</div>"
            )

    type_html = render_type_content(question.type, data, fmt)
    if type_html and not isinstance(data, CompositeData):
        type_html = f'<div class="p-type-content">{type_html}</div>'

    marks = ""
    if options.show_marks:
        marks = f'<div class="p-q-marks">[{question.metadata.marks or 1}]</div>'

    logger.debug(f"Rendered {question.type} question {question.id}")
    return (
        '<div class="p-q-block">'
        f'<div class="p-q-header"><div class="p-q-content">{prompt}{shared_bank}</div>{marks}</div>'
        f"{type_html}"
        "</div>"
    )
