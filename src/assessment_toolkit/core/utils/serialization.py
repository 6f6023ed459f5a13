"""
Serialization Utilities

To/from JSON for canonical questions, plus export helpers.

The canonical Question JSON shape is both the in-memory model's
``to_dict()`` output and the wire format; there is no separate encoding
step. Export is the one place that blocks on validation: a batch with any
invalid question is never written.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..models.questions import Question
from ..schemas.validator import ValidationError, validate_question

logger = logging.getLogger(__name__)

# Keys used by authoring/selection UIs that never belong in exported data
UI_ONLY_KEYS = ("_ui", "_selected", "_expanded")


class ExportError(Exception):
    """
    Raised when an export is blocked by invalid questions.

    Attributes:
        errors: Every validation message, prefixed with the question id
    """

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


# ─────────────────────────────────────────────────────────────────────────────
# Question Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_question(question: Question) -> dict[str, Any]:
    """
    Serialize a Question to its canonical dictionary.

    Args:
        question: Question instance to serialize

    Returns:
        Dictionary suitable for JSON serialization
    """
    return question.to_dict()


def deserialize_question(data: Mapping[str, Any], *, validate: bool = True) -> Question:
    """
    Deserialize a Question from an already-canonical dictionary.

    Raw or legacy records go through ``normalize.normalize_question``
    instead; this function performs no defaulting.

    Args:
        data: Dictionary from JSON
        validate: Whether to run the basic validator first

    Returns:
        Question instance

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If the type tag is not canonical
    """
    if validate:
        path = str(data.get("id", "")) if isinstance(data, Mapping) else ""
        validate_question(data).raise_for_errors(path=path)
    return Question.from_dict(data)


def prepare_for_export(question: Question | Mapping[str, Any]) -> dict[str, Any]:
    """
    Canonical dict with UI-only keys removed.

    Works on a copy; the input is not modified.
    """
    exported = question.to_dict() if isinstance(question, Question) else json.loads(json.dumps(question))
    for key in UI_ONLY_KEYS:
        exported.pop(key, None)
    return exported


# ─────────────────────────────────────────────────────────────────────────────
# JSONL Utilities
# ─────────────────────────────────────────────────────────────────────────────

def check_exportable(questions: Iterable[Question], *, strict: bool = False) -> list[str]:
    """
    Validate every question and collect the failures.

    Returns:
        Messages like ``"Q1: MCQ requires at least one option"``; empty if
        every question is valid
    """
    errors: list[str] = []
    for index, question in enumerate(questions, start=1):
        result = validate_question(question, strict=strict)
        label = question.id or f"#{index}"
        errors.extend(f"{label}: {message}" for message in result.errors)
    return errors


def dumps_questions_jsonl(questions: Iterable[Question]) -> str:
    """One exported JSON object per line, newline-terminated."""
    return "".join(
        json.dumps(prepare_for_export(question), ensure_ascii=False) + "\n"
        for question in questions
    )


def save_questions_jsonl(questions: list[Question], path: Path, *, strict: bool = False) -> None:
    """
    Save questions to a JSONL file, blocking on validation failures.

    Args:
        questions: Question instances to save
        path: Output path
        strict: Also apply the JSON Schema checks

    Raises:
        ExportError: If any question is invalid; nothing is written
    """
    errors = check_exportable(questions, strict=strict)
    if errors:
        logger.error(f"Export to {path} blocked: {len(errors)} validation error(s)")
        raise ExportError(f"Cannot export {path.name}: {len(errors)} validation error(s)", errors)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps_questions_jsonl(questions))
    logger.info(f"Exported {len(questions)} question(s) to {path}")


def load_questions_jsonl(path: Path, *, validate: bool = True) -> list[Question]:
    """
    Load canonical questions from a strict JSONL file (one object per line).

    For tolerant loading of mixed or legacy content use
    ``loading.load_questions_file`` instead.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If any line is not a valid canonical question
    """
    if not path.exists():
        raise FileNotFoundError(f"Questions file not found: {path}")

    questions = []
    with open(path, "r", encoding="utf-8-sig") as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue

            try:
                data = json.loads(line)
                questions.append(deserialize_question(data, validate=validate))
            except ValidationError as e:
                raise ValidationError(f"Error parsing line {line_no}: {e}", path=str(path), errors=e.errors)
            except (json.JSONDecodeError, ValueError, AttributeError) as e:
                raise ValidationError(
                    f"Error parsing line {line_no}: {e}",
                    path=str(path),
                    errors=[str(e)]
                )

    return questions
