"""
Unit Tests for Question Validation

Tests for the structural checks and the optional JSON Schema pass.
"""

import pytest

from assessment_toolkit.core.models import Question
from assessment_toolkit.core.schemas import ValidationError, ValidationResult, validate_question
from assessment_toolkit.normalize import create_empty_question


class TestValidateQuestion:
    """Tests for validate_question function."""

    def test_validate_when_valid_data_then_no_errors(self, mcq_dict):
        result = validate_question(mcq_dict)

        assert result == ValidationResult(True, [])
        assert bool(result)

    def test_validate_when_question_model_then_same_result(self, composite_dict):
        assert validate_question(Question.from_dict(composite_dict)).valid

    def test_validate_when_empty_object_then_every_check_reported(self):
        result = validate_question({})

        assert not result.valid
        assert result.errors == [
            "Missing id",
            "Missing metadata",
            "Missing type",
            "Invalid type: None",
            "Missing data",
            "Missing solution",
        ]

    def test_validate_when_not_object_then_error(self):
        assert validate_question(["not", "a", "question"]).errors == ["Question must be an object"]

    def test_validate_when_style_missing_then_reported(self, fib_dict):
        del fib_dict["data"]["style"]

        assert validate_question(fib_dict).errors == ["Missing data.style (mandatory in v5.1)"]

    def test_validate_when_mcq_without_options_then_error(self, mcq_dict):
        mcq_dict["data"]["options"] = []

        assert "MCQ requires at least one option" in validate_question(mcq_dict).errors

    def test_validate_when_match_without_pairs_then_error(self, mcq_dict):
        mcq_dict["type"] = "MATCH"
        mcq_dict["data"] = {"style": {"image_layout": "vertical"}, "pairs": []}

        assert validate_question(mcq_dict).errors == ["MATCH requires at least one pair"]

    def test_validate_when_table_missing_then_error(self, table_dict):
        del table_dict["data"]["table"]

        assert validate_question(table_dict).errors == ["TABLE requires a table object"]

    def test_validate_when_table_rows_empty_then_error(self, table_dict):
        table_dict["data"]["table"]["rows"] = []

        assert validate_question(table_dict).errors == ["TABLE requires at least one row in table.rows"]

    def test_validate_when_second_sub_question_lacks_style_then_names_it(self, composite_dict):
        del composite_dict["data"]["sub_questions"][1]["data"]["style"]

        result = validate_question(composite_dict)

        assert not result.valid
        assert result.errors == ["Sub-question 2 missing data.style (mandatory in v5.1)"]

    def test_validate_when_composite_empty_then_error(self, composite_dict):
        composite_dict["data"]["sub_questions"] = []

        assert validate_question(composite_dict).errors == ["COMPOSITE requires at least one sub-question"]

    def test_validate_when_called_then_input_not_modified(self, composite_dict):
        snapshot = repr(composite_dict)

        validate_question(composite_dict, strict=True)

        assert repr(composite_dict) == snapshot


class TestStrictValidation:
    """Tests for the JSON Schema pass."""

    @pytest.mark.parametrize("qtype", ["MCQ", "FIB", "MATCH", "SUBJECTIVE", "TABLE", "COMPOSITE"])
    def test_strict_when_default_question_then_no_schema_errors(self, qtype):
        question = create_empty_question(qtype)

        assert validate_question(question, strict=True).errors == validate_question(question).errors

    def test_strict_when_fixtures_then_valid(self, mcq_dict, fib_dict, table_dict, composite_dict):
        for raw in (mcq_dict, fib_dict, table_dict, composite_dict):
            assert validate_question(raw, strict=True).valid

    def test_strict_when_bad_metadata_then_schema_errors(self, mcq_dict):
        mcq_dict["metadata"]["section"] = "ab"
        mcq_dict["metadata"]["marks"] = 0

        errors = validate_question(mcq_dict, strict=True).errors

        assert any(e.startswith("metadata.marks:") for e in errors)
        assert any(e.startswith("metadata.section:") for e in errors)

    def test_strict_when_exam_pool_with_na_subpool_then_error(self, mcq_dict):
        mcq_dict["metadata"]["pool"] = "Exam"

        errors = validate_question(mcq_dict, strict=True).errors

        assert any(e.startswith("metadata.subpool:") for e in errors)

    def test_basic_when_schema_violation_then_not_reported(self, mcq_dict):
        mcq_dict["data"]["style"]["options_layout"] = "diagonal"

        assert validate_question(mcq_dict).valid
        assert not validate_question(mcq_dict, strict=True).valid


class TestRaiseForErrors:
    """Tests for ValidationResult.raise_for_errors."""

    def test_raise_when_invalid_then_carries_all_errors(self):
        result = validate_question({"id": "Q1"})

        with pytest.raises(ValidationError) as exc_info:
            result.raise_for_errors(path="Q1")

        assert exc_info.value.path == "Q1"
        assert exc_info.value.errors == result.errors

    def test_raise_when_valid_then_silent(self, fib_dict):
        validate_question(fib_dict).raise_for_errors()
