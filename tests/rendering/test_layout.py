"""
Unit Tests for Print Layout Generation
"""

from assessment_toolkit.core.models import Question
from assessment_toolkit.rendering import generate_layout_json


class TestGenerateLayoutJson:
    """Tests for generate_layout_json."""

    def test_layout_when_mcq_then_prompt_and_options(self, mcq_dict):
        layout = generate_layout_json(Question.from_dict(mcq_dict))

        assert layout["layout_id"] == "lyt_Q1_print"
        assert layout["question_id"] == "Q1"
        assert layout["page_layout"] == "A4"
        assert layout["regions"] == {"prompt": {"display": "stack"}, "options": {"display": "row"}}

    def test_layout_when_called_then_theme_and_print_settings(self, fib_dict):
        layout = generate_layout_json(Question.from_dict(fib_dict))

        assert layout["theme"] == {
            "font_family": "Noto Sans, sans-serif",
            "base_font_size": "11pt",
            "line_height": "1.5",
        }
        assert layout["print_settings"] == {"page_break_inside": "avoid", "keep_with_next": False}

    def test_layout_when_fib_with_pool_then_stimulus(self, fib_dict):
        regions = generate_layout_json(Question.from_dict(fib_dict))["regions"]

        assert regions == {"prompt": {"display": "stack"}, "stimulus": {"display": "stack"}}

    def test_layout_when_table_then_stimulus(self, table_dict):
        assert "stimulus" in generate_layout_json(Question.from_dict(table_dict))["regions"]

    def test_layout_when_composite_vertical_then_grid_subquestions(self, composite_dict):
        regions = generate_layout_json(Question.from_dict(composite_dict))["regions"]

        assert regions == {"stimulus": {"display": "stack"}, "subquestions": {"display": "grid"}}

    def test_layout_when_composite_horizontal_then_row(self, composite_dict):
        composite_dict["data"]["style"]["sub_questions_layout"] = "horizontal"

        regions = generate_layout_json(Question.from_dict(composite_dict))["regions"]

        assert regions["subquestions"] == {"display": "row"}

    def test_layout_when_no_content_then_no_regions(self, mcq_dict):
        mcq_dict["type"] = "SUBJECTIVE"
        mcq_dict["data"] = {"content": "", "style": {"image_layout": "horizontal"}}

        assert generate_layout_json(Question.from_dict(mcq_dict))["regions"] == {}
