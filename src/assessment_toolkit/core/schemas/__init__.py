"""
Schemas Package

Structural validation of canonical questions, plus the packaged JSON Schema
used for strict checks.
"""

from .validator import (
    validate_question,
    schema_errors,
    ValidationError,
    ValidationResult,
)

__all__ = [
    "validate_question",
    "schema_errors",
    "ValidationError",
    "ValidationResult",
]
