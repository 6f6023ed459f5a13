"""
Assessment Toolkit Core Package

Canonical (schema v5.1) question models, the RichText token grammar and
traversal engine, structural validation, and serialization. Everything here
is pure and in-memory apart from the JSONL file helpers.

Layering:
    models      tagged-union dataclasses; no dependencies
    richtext    tokens, traversal, image resolution; depends on models
    schemas     validator and JSON Schema; depends on models
    utils       serialization/export; depends on models and schemas
"""

from .models import Question, QuestionType, SubQuestion, SCHEMA_VERSION
from .schemas import ValidationError, ValidationResult, validate_question

__all__ = [
    "Question",
    "QuestionType",
    "SubQuestion",
    "SCHEMA_VERSION",
    "ValidationError",
    "ValidationResult",
    "validate_question",
]
