"""
Module: loading

Purpose:
    Bulk question parsing and file loading. Raw JSON, JSON-array and JSONL
    content in; normalized Question objects out.

Key Functions:
    - parse_questions(): Parse raw content
    - parse_questions_report(): Parse with failure details
    - load_questions_file(): Load a file from disk

Dependencies:
    - assessment_toolkit.normalize: schema normalization

Used By:
    - assessment_toolkit.cli
"""

from .parser import (
    Fragment,
    FragmentFailure,
    ParseError,
    ParseMode,
    ParseResult,
    parse_questions,
    parse_questions_report,
    scan_objects,
)
from .loader import LoaderError, load_questions_file, load_questions_report

__all__ = [
    "Fragment",
    "FragmentFailure",
    "ParseError",
    "ParseMode",
    "ParseResult",
    "parse_questions",
    "parse_questions_report",
    "scan_objects",
    "LoaderError",
    "load_questions_file",
    "load_questions_report",
]
