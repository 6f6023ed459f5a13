"""
Question Validation

Post-normalization structural checks. ``validate_question()`` reports every
problem it finds as a list of independent messages and never raises; callers
decide whether a non-empty list blocks their flow (export does).

Basic checks (always run, no short-circuiting):
- presence of id, metadata, type, data, solution
- type is one of the six canonical tags
- data.style is present
- per-type minimums: MCQ options, MATCH pairs, TABLE table.rows,
  COMPOSITE sub_questions (each of which needs its own data.style)

Strict checks (``strict=True``) additionally run the packaged
``question.schema.json`` through jsonschema: metadata enumerations,
marks >= 1, the subpool rule and style vocabularies.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import jsonschema

from assessment_toolkit.core.models import QUESTION_TYPES, Question, SCHEMA_VERSION


# Loaded once per process
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when a caller chooses to fail on validation errors."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of ``validate_question()``.

    Attributes:
        valid: True when ``errors`` is empty
        errors: Human-readable messages, in check order
    """
    valid: bool
    errors: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid

    def raise_for_errors(self, path: str = "") -> None:
        """
        Raise ValidationError carrying every message if invalid.

        Raises:
            ValidationError: If ``valid`` is False
        """
        if not self.valid:
            raise ValidationError(
                f"Question failed validation: {'; '.join(self.errors)}",
                path=path,
                errors=list(self.errors),
            )


def validate_question(question: Question | Mapping[str, Any], *, strict: bool = False) -> ValidationResult:
    """
    Validate a canonical question.

    Args:
        question: Question model or its canonical dict form
        strict: Also run the JSON Schema checks

    Returns:
        ValidationResult with all failures; never raises

    Example:
        >>> result = validate_question(q)
        >>> result.valid, result.errors
        (True, [])
    """
    if isinstance(question, Question):
        data = question.to_dict()
    elif isinstance(question, Mapping):
        data = question
    else:
        return ValidationResult(False, ["Question must be an object"])

    errors = _basic_errors(data)
    if strict:
        errors.extend(schema_errors(data))
    return ValidationResult(not errors, errors)


def _basic_errors(q: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []

    if not q.get("id"):
        errors.append("Missing id")
    if not q.get("metadata"):
        errors.append("Missing metadata")
    qtype = q.get("type")
    if not qtype:
        errors.append("Missing type")
    if qtype not in QUESTION_TYPES:
        errors.append(f"Invalid type: {qtype}")
    data = q.get("data")
    if not data:
        errors.append("Missing data")
    if not q.get("solution"):
        errors.append("Missing solution")

    data = data if isinstance(data, Mapping) else {}
    if q.get("data") and not data.get("style"):
        errors.append(f"Missing data.style (mandatory in v{SCHEMA_VERSION})")

    if qtype == "MCQ":
        if not data.get("options"):
            errors.append("MCQ requires at least one option")
    elif qtype == "MATCH":
        if not data.get("pairs"):
            errors.append("MATCH requires at least one pair")
    elif qtype == "TABLE":
        table = data.get("table")
        if not table:
            errors.append("TABLE requires a table object")
        elif not isinstance(table, Mapping) or not table.get("rows"):
            errors.append("TABLE requires at least one row in table.rows")
    elif qtype == "COMPOSITE":
        subs = data.get("sub_questions")
        if not subs:
            errors.append("COMPOSITE requires at least one sub-question")
        for i, sub in enumerate(subs if isinstance(subs, list) else [], start=1):
            sub_data = sub.get("data") if isinstance(sub, Mapping) else None
            if not isinstance(sub_data, Mapping) or not sub_data.get("style"):
                errors.append(f"Sub-question {i} missing data.style (mandatory in v{SCHEMA_VERSION})")

    return errors


def schema_errors(data: Mapping[str, Any]) -> list[str]:
    """
    Run the question JSON Schema and return one message per violation.

    Messages are prefixed with the dotted path of the offending value.
    """
    validator = jsonschema.Draft7Validator(_load_schema("question"))
    messages = []
    for error in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.absolute_path))):
        path = ".".join(str(p) for p in error.absolute_path)
        messages.append(f"{path}: {error.message}" if path else error.message)
    return messages
