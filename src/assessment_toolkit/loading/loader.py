"""
Module: loading.loader

Purpose:
    Load question files from disk through the bulk parser.

Key Functions:
    - load_questions_file(): Read one .json/.jsonl file
    - load_questions_report(): Same, with parse failures

Key Classes:
    - LoaderError: Exception for loading failures

Dependencies:
    - pathlib (std)
    - loading.parser: bulk parsing

Used By:
    - cli: convert/tags commands
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from assessment_toolkit.core.models import Question
from assessment_toolkit.normalize import NormalizerConfig

from .parser import ParseError, ParseResult, parse_questions_report

logger = logging.getLogger(__name__)


class LoaderError(Exception):
    """Error loading questions from a file."""
    pass


def load_questions_report(
    path: Union[str, Path],
    *,
    config: Optional[NormalizerConfig] = None,
) -> ParseResult:
    """
    Load and parse a question file.

    Args:
        path: JSON array, single-object JSON or JSONL file (UTF-8, BOM allowed)
        config: Normalizer configuration

    Returns:
        ParseResult for the file contents

    Raises:
        LoaderError: If the file is missing, unreadable or not UTF-8
    """
    path = Path(path)
    if not path.is_file():
        raise LoaderError(f"Question file does not exist: {path}")

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise LoaderError(f"Cannot read {path}: {e}") from e

    logger.debug(f"Loading questions from {path} ({len(raw)} bytes)")
    try:
        result = parse_questions_report(raw, config=config)
    except ParseError as e:
        raise LoaderError(f"Cannot parse {path}: {e}") from e

    if result.discarded_count:
        logger.warning(f"{path.name}: {result.summary()}")
    return result


def load_questions_file(
    path: Union[str, Path],
    *,
    config: Optional[NormalizerConfig] = None,
) -> List[Question]:
    """
    Load normalized questions from a file.

    Example:
        >>> questions = load_questions_file(Path("bank/maths.jsonl"))
        >>> len(questions)
        12
    """
    return load_questions_report(path, config=config).questions
