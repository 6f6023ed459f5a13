"""
Module: normalize.normalizer

Purpose:
    Entry point of the schema normalizer. Detects which generation a raw
    record belongs to, converts older generations to the canonical shape
    (lenient mode) or rejects them (strict mode), then applies the
    defaulting pass and builds the Question model.

Generation detection (first match wins):
    1. canonical: ``data`` object and one of the six type tags
    2. nested: ``taxonomy`` and ``content`` objects
    3. flat: everything else

Key Functions:
    - detect_generation(): Classify a raw record
    - normalize_to_dict(): Raw record -> canonical dict
    - normalize_question(): Raw record -> Question

Key Classes:
    - Generation: Detected input generation
    - SchemaError: Strict-mode rejection

Dependencies:
    - copy (std)
    - .defaults, .legacy, .config

Used By:
    - loading.parser: every parsed record
    - core.utils.serialization: deserialize_question()
"""

from __future__ import annotations

import copy
import logging
from enum import Enum
from typing import Any, List, Mapping, Optional

from assessment_toolkit.core.models import QUESTION_TYPES, Question

from .config import DEFAULT_CONFIG, NormalizerConfig
from .defaults import ensure_defaults
from .legacy import convert_flat, convert_nested

logger = logging.getLogger(__name__)

# Top-level keys that identify a pre-canonical record
OLD_SHAPE_MARKERS = ("taxonomy", "content", "stimulus", "prompt")


class Generation(str, Enum):
    """Schema generation of a raw record."""
    CANONICAL = "canonical"
    NESTED = "nested"
    FLAT = "flat"

    def __str__(self) -> str:
        return self.value


class SchemaError(ValueError):
    """
    Raised in strict mode for input that is not canonical.

    Attributes:
        markers: Old-shape keys found on the record (may be empty)
    """

    def __init__(self, message: str, markers: Optional[List[str]] = None):
        super().__init__(message)
        self.markers = markers or []


def detect_generation(raw: Mapping[str, Any]) -> Generation:
    """
    Classify ``raw`` by generation.

    Example:
        >>> detect_generation({"type": "MCQ", "data": {}})
        <Generation.CANONICAL: 'canonical'>
        >>> detect_generation({"type": "mcq", "prompt": "2+2?"})
        <Generation.FLAT: 'flat'>
    """
    if isinstance(raw.get("data"), Mapping) and raw.get("type") in QUESTION_TYPES:
        return Generation.CANONICAL
    if isinstance(raw.get("taxonomy"), Mapping) and isinstance(raw.get("content"), Mapping):
        return Generation.NESTED
    return Generation.FLAT


def old_shape_markers(raw: Mapping[str, Any]) -> List[str]:
    """Old-shape keys present (and non-empty) on ``raw``, in a fixed order."""
    return [key for key in OLD_SHAPE_MARKERS if raw.get(key)]


def _reject(raw: Mapping[str, Any]) -> SchemaError:
    markers = old_shape_markers(raw)
    if markers:
        return SchemaError(
            f"Old schema format detected (found: {', '.join(markers)}). "
            "Please convert to v5.1 schema format.",
            markers,
        )
    return SchemaError('Invalid question format. Expected v5.1 schema with "type" and "data" fields.')


def normalize_to_dict(raw: Mapping[str, Any], *, config: Optional[NormalizerConfig] = None) -> dict:
    """
    Normalize a raw record to the canonical dict form.

    The caller's object is never modified.

    Args:
        raw: Decoded JSON object of any supported generation
        config: Normalizer configuration (defaults to lenient)

    Returns:
        Canonical, fully-defaulted dict

    Raises:
        TypeError: If ``raw`` is not a mapping
        SchemaError: In strict mode, if ``raw`` is not canonical
    """
    if not isinstance(raw, Mapping):
        raise TypeError(f"Question must be a JSON object, got {type(raw).__name__}")
    config = config or DEFAULT_CONFIG

    generation = detect_generation(raw)
    if generation is not Generation.CANONICAL and config.strict:
        raise _reject(raw)

    if generation is Generation.CANONICAL:
        obj = copy.deepcopy(dict(raw))
    elif generation is Generation.NESTED:
        obj = convert_nested(raw)
    else:
        obj = convert_flat(raw)

    return ensure_defaults(obj, config=config)


def normalize_question(raw: Mapping[str, Any], *, config: Optional[NormalizerConfig] = None) -> Question:
    """
    Normalize a raw record of any supported generation to a Question.

    In lenient mode (the default) this is total over object-shaped input:
    missing or wrong-typed fields degrade to defaults and old generations
    are converted.

    Args:
        raw: Decoded JSON object
        config: Normalizer configuration

    Returns:
        Canonical Question

    Raises:
        TypeError: If ``raw`` is not a mapping
        SchemaError: In strict mode, if ``raw`` is not canonical

    Example:
        >>> q = normalize_question({"question_id": "q1", "type": "mcq",
        ...                         "prompt": "2+2?", "options": ["3", "4"], "points": 2})
        >>> q.type, q.metadata.marks
        (<QuestionType.MCQ: 'MCQ'>, 2)
    """
    return Question.from_dict(normalize_to_dict(raw, config=config))
