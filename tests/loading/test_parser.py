"""
Unit Tests for the Bulk Parser

Tests for array, single-object and stream handling, and for the rule that
one broken record never aborts a batch.
"""

import json
import logging

import pytest

from assessment_toolkit.core.models import QuestionType
from assessment_toolkit.loading import (
    ParseError,
    ParseMode,
    parse_questions,
    parse_questions_report,
    scan_objects,
)
from assessment_toolkit.normalize import NormalizationMode, NormalizerConfig


class TestScanObjects:
    """Tests for the brace-depth scanner."""

    def test_scan_when_braces_inside_strings_then_ignored(self):
        fragments = scan_objects('{"a": "}{"} , {"b": "\\"}"}')

        assert [f.text for f in fragments] == ['{"a": "}{"}', '{"b": "\\"}"}']
        assert all(f.complete for f in fragments)

    def test_scan_when_nested_objects_then_one_fragment(self):
        fragments = scan_objects('{"a": {"b": {"c": 1}}}')

        assert len(fragments) == 1

    def test_scan_when_newline_brace_inside_open_string_then_cut_off(self):
        fragments = scan_objects('{"a": "x\n{"b": 2}')

        assert [(f.text, f.complete) for f in fragments] == [('{"a": "x', False), ('{"b": 2}', True)]

    def test_scan_when_nested_object_starts_a_line_then_not_cut(self):
        fragments = scan_objects('{"a": [\n{"b": 1},\n{"c": 2}\n]}')

        assert len(fragments) == 1
        assert fragments[0].complete is True

    def test_scan_when_open_at_end_then_incomplete(self):
        fragments = scan_objects('{"a": 1} {"b": ')

        assert fragments[-1].complete is False

    def test_scan_when_no_objects_then_empty(self):
        assert scan_objects("[ , ]") == []


class TestParseModes:
    """Tests for the three input handling paths."""

    def test_parse_when_array_then_array_mode(self, mcq_dict, fib_dict):
        result = parse_questions_report(json.dumps([mcq_dict, fib_dict]))

        assert result.mode is ParseMode.ARRAY
        assert [q.id for q in result.questions] == ["Q1", "Q2"]

    def test_parse_when_single_object_then_object_mode(self, table_dict):
        result = parse_questions_report(json.dumps(table_dict, indent=2))

        assert result.mode is ParseMode.OBJECT
        assert result.questions[0].type is QuestionType.TABLE

    def test_parse_when_jsonl_then_stream_mode(self, mcq_dict, fib_dict, composite_dict):
        content = "\n".join(json.dumps(d) for d in (mcq_dict, fib_dict, composite_dict))

        result = parse_questions_report(content)

        assert result.mode is ParseMode.STREAM
        assert [q.id for q in result.questions] == ["Q1", "Q2", "Q4"]

    def test_parse_when_single_object_indent_zero_then_one_question(self, mcq_dict):
        result = parse_questions_report(json.dumps(mcq_dict, indent=0))

        assert [(q.id, q.type) for q in result.questions] == [("Q1", QuestionType.MCQ)]
        assert result.failures == []

    def test_parse_when_stream_indent_zero_then_records_intact(self, mcq_dict, fib_dict):
        content = "\n".join(json.dumps(d, indent=0) for d in (mcq_dict, fib_dict))

        result = parse_questions_report(content)

        assert result.mode is ParseMode.STREAM
        assert [(q.id, q.type) for q in result.questions] == [
            ("Q1", QuestionType.MCQ),
            ("Q2", QuestionType.FIB),
        ]
        assert len(result.questions[0].data.options) == len(mcq_dict["data"]["options"])
        assert result.discarded_count == 0

    def test_parse_when_concatenated_objects_then_all_found(self):
        questions = parse_questions('{"type": "mcq", "prompt": "a"}{"type": "fib", "prompt": "b"}')

        assert [q.type for q in questions] == [QuestionType.MCQ, QuestionType.FIB]

    def test_parse_when_bom_bytes_then_stripped(self, fib_dict):
        content = ("\ufeff" + json.dumps([fib_dict])).encode("utf-8")

        assert parse_questions(content)[0].id == "Q2"

    def test_parse_when_invalid_utf8_then_raises(self):
        with pytest.raises(ParseError, match="UTF-8"):
            parse_questions(b'\xff\xfe{"type": "mcq"}')

    def test_parse_when_empty_then_nothing(self):
        result = parse_questions_report("   ")

        assert result.questions == []
        assert result.failures == []


class TestBatchResilience:
    """A broken record is discarded; the rest of the batch survives."""

    def test_parse_when_middle_record_truncated_then_others_kept(self, caplog):
        content = (
            '{"type": "mcq", "prompt": "first"}\n'
            '{"type": "fib", "prompt": "second\n'
            '{"type": "mcq", "prompt": "third"}'
        )

        with caplog.at_level(logging.WARNING):
            result = parse_questions_report(content)

        assert [q.data.content for q in result.questions] == ["first", "third"]
        assert result.discarded_count == 1
        assert result.failures[0].index == 1
        assert result.failures[0].reason == "unterminated JSON object"
        assert "Discarding record 1" in caplog.text

    def test_parse_when_broken_array_then_stream_fallback(self):
        result = parse_questions_report('[{"type": "mcq", "prompt": "ok"}, {"type": ')

        assert result.mode is ParseMode.STREAM
        assert result.parsed_count == 1
        assert result.discarded_count == 1

    def test_parse_when_fragment_not_json_then_failure(self):
        result = parse_questions_report('{"type": "mcq",}\n{"type": "fib"}')

        assert result.parsed_count == 1
        assert result.failures[0].reason.startswith("invalid JSON")

    def test_parse_when_array_element_not_object_then_failure(self, fib_dict):
        result = parse_questions_report(json.dumps([fib_dict, 5, "text"]))

        assert result.parsed_count == 1
        assert [f.index for f in result.failures] == [1, 2]
        assert result.failures[0].reason == "expected a JSON object, got int"

    def test_parse_when_strict_then_legacy_records_discarded(self, fib_dict):
        config = NormalizerConfig(mode=NormalizationMode.STRICT)
        content = json.dumps(fib_dict) + '\n{"taxonomy": {"type": "mcq"}, "content": {"prompt": "?"}}'

        result = parse_questions_report(content, config=config)

        assert [q.id for q in result.questions] == ["Q2"]
        assert "Old schema format detected" in result.failures[0].reason

    def test_failure_snippet_when_long_record_then_truncated(self):
        content = '{"type": "mcq", "prompt": "' + "x" * 200 + '"\n{"type": "fib"}'

        snippet = parse_questions_report(content).failures[0].snippet

        assert snippet.endswith("...")
        assert len(snippet) == 83

    def test_summary_when_mixed_then_counts(self):
        result = parse_questions_report('{"type": "mcq"}\n{"type": "fib"}\n{"broken": ')

        assert result.summary() == "Parsed 2 question(s), discarded 1 fragment(s) (stream mode)"
