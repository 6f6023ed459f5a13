"""
Module: core.richtext.traversal

Purpose:
    Single generic walker over every RichText-bearing field of a question.
    One branch per data variant enumerates that variant's fields; the
    same walk serves read-only collection (tag extraction) and in-place
    rewriting (image resolution).

Visitation order and paths (sub-questions reuse the same un-prefixed paths):
    1. data.content
    2. data.common_content
    3. data.options[i].text
    4. data.options_pool[i]
    5. data.pairs[i].left, data.pairs[i].right
    6. data.table.header[i], then data.table.rows[i][j] row-major
    7. data.sub_questions[i] (full recursion, no solution)
    8. solution.text (top level only)

Key Functions:
    - traverse_rich_text(): Rewrite every RichText field in place
    - collect_rich_text(): Read-only walk
    - rich_text_fields(): (path, text) pairs in visitation order
    - extract_image_tags(): Distinct image ids referenced by a question
    - has_images(): True if any field holds an image token

Dependencies:
    - core.models: data variants
    - .tokens: image token grammar

Used By:
    - core.richtext.resolution: preview/publish rewrite modes
    - cli: ``tags`` command
"""

from __future__ import annotations

import logging
from typing import Callable, List, Set, Tuple, Union

from assessment_toolkit.core.models import (
    CompositeData,
    FibData,
    MatchData,
    McqData,
    Question,
    QuestionData,
    SubjectiveData,
    SubQuestion,
    TableData,
)

from .tokens import find_image_tokens

logger = logging.getLogger(__name__)

Visitor = Callable[[object, str], object]
Collector = Callable[[object, str], None]


def traverse_rich_text(question: Union[Question, SubQuestion], visit: Visitor) -> None:
    """
    Apply ``visit`` to every RichText field of ``question``, in place.

    Args:
        question: Question (solution visited last) or SubQuestion
        visit: ``visit(text, path)`` returning the replacement text

    Example:
        >>> traverse_rich_text(q, lambda text, path: text.upper())
    """
    _walk_data(question.data, visit)
    if isinstance(question, Question) and question.solution.text is not None:
        question.solution.text = visit(question.solution.text, "solution.text")


def collect_rich_text(question: Union[Question, SubQuestion], visit: Collector) -> None:
    """
    Call ``visit(text, path)`` for every RichText field without modifying it.
    """

    def _keep(text: object, path: str) -> object:
        visit(text, path)
        return text

    traverse_rich_text(question, _keep)


def rich_text_fields(question: Union[Question, SubQuestion]) -> List[Tuple[str, object]]:
    """``(path, text)`` pairs in visitation order."""
    found: List[Tuple[str, object]] = []
    collect_rich_text(question, lambda text, path: found.append((path, text)))
    return found


def extract_image_tags(question: Union[Question, SubQuestion]) -> Set[str]:
    """
    Distinct image ids referenced anywhere in ``question``.

    Returns:
        Unordered set of ids (the part of each token before any ``|``)

    Example:
        >>> extract_image_tags(q)
        {'fig1', 'fig2'}
    """
    tags: Set[str] = set()

    def _collect(text: object, path: str) -> None:
        for token in find_image_tokens(text):
            tags.add(token.id)

    collect_rich_text(question, _collect)
    logger.debug(f"Found {len(tags)} image tag(s) in {getattr(question, 'id', None)}")
    return tags


def has_images(question: Union[Question, SubQuestion]) -> bool:
    """True when at least one RichText field holds an image token."""
    return bool(extract_image_tags(question))


# ─────────────────────────────────────────────────────────────────────────────
# Per-variant field walkers
# ─────────────────────────────────────────────────────────────────────────────

def _walk_data(data: QuestionData, visit: Visitor) -> None:
    """Visit the RichText fields of one data variant, then recurse."""
    if not isinstance(data, (McqData, FibData, MatchData, SubjectiveData, TableData, CompositeData)):
        raise TypeError(f"Unknown question data variant: {type(data).__name__}")

    if data.content is not None:
        data.content = visit(data.content, "data.content")

    if isinstance(data, CompositeData):
        if data.common_content is not None:
            data.common_content = visit(data.common_content, "data.common_content")
        if data.options_pool is not None:
            data.options_pool = _walk_pool(data.options_pool, visit)
        for sub in data.sub_questions:
            _walk_data(sub.data, visit)
    elif isinstance(data, McqData):
        for i, option in enumerate(data.options):
            if option.text is not None:
                option.text = visit(option.text, f"data.options[{i}].text")
    elif isinstance(data, FibData):
        if data.options_pool is not None:
            data.options_pool = _walk_pool(data.options_pool, visit)
    elif isinstance(data, MatchData):
        for i, pair in enumerate(data.pairs):
            if pair.left is not None:
                pair.left = visit(pair.left, f"data.pairs[{i}].left")
            if pair.right is not None:
                pair.right = visit(pair.right, f"data.pairs[{i}].right")
    elif isinstance(data, TableData) and data.table is not None:
        table = data.table
        if table.header is not None:
            table.header = [
                visit(cell, f"data.table.header[{i}]")
                for i, cell in enumerate(table.header)
            ]
        table.rows = [
            [visit(cell, f"data.table.rows[{i}][{j}]") for j, cell in enumerate(row)]
            if isinstance(row, list) else row
            for i, row in enumerate(table.rows)
        ]


def _walk_pool(pool: List[object], visit: Visitor) -> List[object]:
    return [visit(item, f"data.options_pool[{i}]") for i, item in enumerate(pool)]
