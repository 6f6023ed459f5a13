"""
Module: loading.parser

Purpose:
    Bulk parser: split raw text that may be a JSON array, a single JSON
    object, or a stream of concatenated / line-delimited JSON objects, and
    feed each object to the schema normalizer.

    Array and single-object parsing are all-or-nothing attempts that fall
    back to the stream scanner. In the stream scanner a broken record never
    aborts the batch: it is logged, recorded as a FragmentFailure and
    discarded.

Key Functions:
    - parse_questions(): Raw content -> list of Questions
    - parse_questions_report(): Same, with failures and counts
    - scan_objects(): Brace-depth scanner over the character stream

Key Classes:
    - ParseResult: Questions plus discarded fragments
    - FragmentFailure: One discarded record
    - ParseError: Content that cannot be decoded at all

Dependencies:
    - json (std)
    - normalize: normalize_question()

Used By:
    - loading.loader: file loading
    - cli: convert/tags commands
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union

from assessment_toolkit.core.models import Question
from assessment_toolkit.normalize import NormalizerConfig, normalize_question

logger = logging.getLogger(__name__)

BOM = "\ufeff"
SNIPPET_LENGTH = 80


class ParseError(Exception):
    """Raw content could not be decoded."""
    pass


class ParseMode(str, Enum):
    """Which input handling path produced the result."""
    ARRAY = "array"
    OBJECT = "object"
    STREAM = "stream"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FragmentFailure:
    """
    A record that was discarded.

    Attributes:
        index: Position of the record in the input (array index or
            fragment ordinal), 0-based
        snippet: Start of the record text, whitespace collapsed
        reason: Why it was discarded
    """
    index: int
    snippet: str
    reason: str


@dataclass
class ParseResult:
    """
    Outcome of a bulk parse.

    Attributes:
        questions: Successfully normalized questions, in input order
        failures: Discarded records
        mode: Input handling path used
    """
    questions: List[Question] = field(default_factory=list)
    failures: List[FragmentFailure] = field(default_factory=list)
    mode: ParseMode = ParseMode.STREAM

    @property
    def parsed_count(self) -> int:
        return len(self.questions)

    @property
    def discarded_count(self) -> int:
        return len(self.failures)

    def summary(self) -> str:
        """One-line count of parsed vs. discarded records."""
        return (
            f"Parsed {self.parsed_count} question(s), "
            f"discarded {self.discarded_count} fragment(s) ({self.mode} mode)"
        )


def _snippet(text: str) -> str:
    collapsed = " ".join(text.split())
    if len(collapsed) > SNIPPET_LENGTH:
        return collapsed[:SNIPPET_LENGTH] + "..."
    return collapsed


# ─────────────────────────────────────────────────────────────────────────────
# Stream scanner
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Fragment:
    """
    One top-level object located by ``scan_objects()``.

    Attributes:
        text: Raw text from the opening to the closing brace (or to where
            the object was cut off)
        complete: False when the object never closed
    """
    text: str
    complete: bool = True


def scan_objects(text: str) -> List[Fragment]:
    """
    Split a character stream into top-level JSON object fragments.

    Tracks string state, escapes inside strings and brace depth, so braces
    inside strings are ignored. Text between objects (commas, brackets,
    whitespace) is skipped. A raw newline directly followed by ``{`` inside an
    open string cuts that object off as incomplete and starts a new one.
    JSON strings cannot contain raw newlines, so this only triggers on
    broken input. An object still open at end of input is incomplete.

    Example:
        >>> [f.text for f in scan_objects('{"a": 1}\\n{"b": "}"}')]
        ['{"a": 1}', '{"b": "}"}']
    """
    fragments: List[Fragment] = []
    start = -1
    depth = 0
    in_string = False
    escape = False

    for i, char in enumerate(text):
        if depth == 0:
            if char == "{":
                start, depth, in_string, escape = i, 1, False, False
            continue

        if in_string and char == "\n" and text.startswith("{", i + 1):
            fragments.append(Fragment(text[start:i], complete=False))
            depth = 0
            continue

        if in_string:
            if escape:
                escape = False
            elif char == "\\":
                escape = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                fragments.append(Fragment(text[start:i + 1]))

    if depth > 0:
        fragments.append(Fragment(text[start:], complete=False))
    return fragments


# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────

def _decode(content: Union[str, bytes]) -> str:
    if isinstance(content, (bytes, bytearray)):
        try:
            content = bytes(content).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Content is not valid UTF-8: {e}") from e
    if content.startswith(BOM):
        content = content[len(BOM):]
    return content.strip()


class _Collector:
    """Normalizes records into a ParseResult, recording failures."""

    def __init__(self, mode: ParseMode, config: Optional[NormalizerConfig]):
        self.result = ParseResult(mode=mode)
        self.config = config

    def fail(self, index: int, text: str, reason: str) -> None:
        failure = FragmentFailure(index=index, snippet=_snippet(text), reason=reason)
        self.result.failures.append(failure)
        logger.warning(f"Discarding record {index}: {reason} [{failure.snippet}]")

    def add(self, index: int, obj: Any, text: str) -> None:
        if not isinstance(obj, dict):
            self.fail(index, text, f"expected a JSON object, got {type(obj).__name__}")
            return
        try:
            self.result.questions.append(normalize_question(obj, config=self.config))
        except (ValueError, TypeError) as e:
            self.fail(index, text, str(e))


def parse_questions_report(
    content: Union[str, bytes],
    *,
    config: Optional[NormalizerConfig] = None,
) -> ParseResult:
    """
    Parse raw question content and report what was kept and discarded.

    Handling order (first match wins):
        1. Strip a leading BOM and surrounding whitespace
        2. Starts with ``[``: whole-document array parse
        3. Starts with ``{`` and has no ``\\n{``: single-object parse
        4. Otherwise: stream scan, one object at a time

    Args:
        content: UTF-8 text or bytes
        config: Normalizer configuration applied to every record

    Returns:
        ParseResult

    Raises:
        ParseError: If bytes are not valid UTF-8
    """
    text = _decode(content)

    if text.startswith("["):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug(f"Not a valid JSON array ({e}); trying stream parsing")
        else:
            collector = _Collector(ParseMode.ARRAY, config)
            for index, obj in enumerate(parsed):
                collector.add(index, obj, json.dumps(obj, ensure_ascii=False))
            return _finish(collector.result)

    if text.startswith("{") and "\n{" not in text:
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug(f"Not a single JSON object ({e}); trying stream parsing")
        else:
            collector = _Collector(ParseMode.OBJECT, config)
            collector.add(0, parsed, text)
            return _finish(collector.result)

    collector = _Collector(ParseMode.STREAM, config)
    for index, fragment in enumerate(scan_objects(text)):
        if not fragment.complete:
            collector.fail(index, fragment.text, "unterminated JSON object")
            continue
        try:
            obj = json.loads(fragment.text)
        except json.JSONDecodeError as e:
            collector.fail(index, fragment.text, f"invalid JSON: {e}")
            continue
        collector.add(index, obj, fragment.text)
    return _finish(collector.result)


def _finish(result: ParseResult) -> ParseResult:
    logger.info(result.summary())
    return result


def parse_questions(
    content: Union[str, bytes],
    *,
    config: Optional[NormalizerConfig] = None,
) -> List[Question]:
    """
    Parse raw question content into normalized Questions.

    Broken records are logged and skipped; see ``parse_questions_report``
    for the failure details.

    Example:
        >>> qs = parse_questions('{"type": "mcq", "prompt": "2+2?"}\\n{"type": "fib"}')
        >>> [q.type.value for q in qs]
        ['MCQ', 'FIB']
    """
    return parse_questions_report(content, config=config).questions
