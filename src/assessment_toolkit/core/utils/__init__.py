"""
Utils Package

Serialization and export helpers for canonical questions.
"""

from .serialization import (
    ExportError,
    UI_ONLY_KEYS,
    check_exportable,
    serialize_question,
    deserialize_question,
    prepare_for_export,
    dumps_questions_jsonl,
    save_questions_jsonl,
    load_questions_jsonl,
)

__all__ = [
    "ExportError",
    "UI_ONLY_KEYS",
    "check_exportable",
    "serialize_question",
    "deserialize_question",
    "prepare_for_export",
    "dumps_questions_jsonl",
    "save_questions_jsonl",
    "load_questions_jsonl",
]
