"""
Unit Tests for Serialization Utilities

Tests for canonical (de)serialization and blocking JSONL export.
"""

import json
import logging

import pytest

from assessment_toolkit.core.models import Question
from assessment_toolkit.core.schemas import ValidationError
from assessment_toolkit.core.utils import (
    ExportError,
    check_exportable,
    deserialize_question,
    dumps_questions_jsonl,
    load_questions_jsonl,
    prepare_for_export,
    save_questions_jsonl,
    serialize_question,
)


class TestQuestionSerialization:
    """Tests for question serialization/deserialization."""

    def test_serialize_when_question_given_then_returns_canonical_dict(self, mcq_dict):
        result = serialize_question(Question.from_dict(mcq_dict))

        assert result == mcq_dict

    def test_deserialize_when_valid_data_then_returns_question(self, table_dict):
        question = deserialize_question(table_dict)

        assert question.id == "Q3"
        assert question.data.table.header == ["Animal", "Legs"]

    def test_deserialize_when_invalid_then_raises_with_path(self, mcq_dict):
        mcq_dict["data"]["options"] = []

        with pytest.raises(ValidationError) as exc_info:
            deserialize_question(mcq_dict)

        assert exc_info.value.path == "Q1"
        assert exc_info.value.errors == ["MCQ requires at least one option"]

    def test_deserialize_when_validation_disabled_then_accepts(self, mcq_dict):
        mcq_dict["data"]["options"] = []

        assert deserialize_question(mcq_dict, validate=False).data.options == []

    def test_prepare_for_export_when_ui_keys_then_removed(self, fib_dict):
        fib_dict["_ui"] = {"collapsed": True}
        fib_dict["_selected"] = True

        exported = prepare_for_export(fib_dict)

        assert "_ui" not in exported
        assert "_selected" not in exported
        assert "_ui" in fib_dict


class TestJsonl:
    """Tests for JSONL export and import."""

    def test_dumps_when_questions_then_one_line_each(self, mcq_dict, fib_dict):
        text = dumps_questions_jsonl([Question.from_dict(mcq_dict), Question.from_dict(fib_dict)])

        lines = text.splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["id"] == "Q2"

    def test_save_when_valid_then_file_written(self, tmp_path, mcq_dict, composite_dict, caplog):
        path = tmp_path / "out" / "bank.jsonl"
        questions = [Question.from_dict(mcq_dict), Question.from_dict(composite_dict)]

        with caplog.at_level(logging.INFO):
            save_questions_jsonl(questions, path)

        assert [q.id for q in load_questions_jsonl(path)] == ["Q1", "Q4"]
        assert "Exported 2 question(s)" in caplog.text

    def test_save_when_any_invalid_then_blocked_and_nothing_written(self, tmp_path, mcq_dict, fib_dict):
        mcq_dict["data"]["options"] = []
        path = tmp_path / "bank.jsonl"
        questions = [Question.from_dict(fib_dict), Question.from_dict(mcq_dict)]

        with pytest.raises(ExportError) as exc_info:
            save_questions_jsonl(questions, path)

        assert exc_info.value.errors == ["Q1: MCQ requires at least one option"]
        assert not path.exists()

    def test_check_exportable_when_strict_then_schema_errors_included(self, fib_dict):
        fib_dict["metadata"]["difficulty"] = "Impossible"

        assert check_exportable([Question.from_dict(fib_dict)]) == []
        assert check_exportable([Question.from_dict(fib_dict)], strict=True)[0].startswith("Q2: metadata.difficulty")

    def test_load_when_bad_line_then_raises_with_line_number(self, tmp_path, fib_dict):
        path = tmp_path / "bank.jsonl"
        path.write_text(json.dumps(fib_dict) + "\n{not json\n", encoding="utf-8")

        with pytest.raises(ValidationError, match="line 2"):
            load_questions_jsonl(path)

    def test_load_when_missing_file_then_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_questions_jsonl(tmp_path / "missing.jsonl")
