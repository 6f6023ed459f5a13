"""
Unit Tests for RichText Traversal

Tests for the type-aware walk over every RichText field and the
preview/publish image rewrite modes built on it.
"""

import copy
import logging

import pytest

from assessment_toolkit.core.models import Question
from assessment_toolkit.core.richtext import (
    extract_image_tags,
    has_images,
    resolve_images_for_preview,
    resolve_images_for_publish,
    rich_text_fields,
    traverse_rich_text,
)


class TestTraverse:
    """Tests for traverse_rich_text / rich_text_fields."""

    def test_fields_when_mcq_then_content_options_and_solution(self, mcq_dict):
        paths = [path for path, _ in rich_text_fields(Question.from_dict(mcq_dict))]

        assert paths == [
            "data.content",
            "data.options[0].text",
            "data.options[1].text",
            "solution.text",
        ]

    def test_fields_when_table_then_header_before_cells_row_major(self, table_dict):
        paths = [path for path, _ in rich_text_fields(Question.from_dict(table_dict))]

        assert paths == [
            "data.content",
            "data.table.header[0]",
            "data.table.header[1]",
            "data.table.rows[0][0]",
            "data.table.rows[0][1]",
            "data.table.rows[1][0]",
            "data.table.rows[1][1]",
            "solution.text",
        ]

    def test_fields_when_fib_then_content_then_pool(self, fib_dict):
        paths = [path for path, _ in rich_text_fields(Question.from_dict(fib_dict))]

        assert paths == [
            "data.content",
            "data.options_pool[0]",
            "data.options_pool[1]",
            "data.options_pool[2]",
            "solution.text",
        ]

    def test_fields_when_match_then_left_before_right_per_pair(self, mcq_dict):
        mcq_dict["type"] = "MATCH"
        mcq_dict["data"] = {
            "content": "Match them.",
            "style": {"image_layout": "vertical"},
            "pairs": [{"left": "1", "right": "one"}, {"left": "2", "right": "two"}],
        }

        fields = rich_text_fields(Question.from_dict(mcq_dict))

        assert fields == [
            ("data.content", "Match them."),
            ("data.pairs[0].left", "1"),
            ("data.pairs[0].right", "one"),
            ("data.pairs[1].left", "2"),
            ("data.pairs[1].right", "two"),
            ("solution.text", "It has four equal sides. [[image:sol1]]"),
        ]

    def test_fields_when_composite_then_subs_unprefixed_and_solution_last(self, composite_dict):
        composite_dict["data"]["options_pool"] = ["sat", "ran"]
        composite_dict["data"]["sub_questions"][0]["solution"] = {"text": "[[image:hidden]]"}

        fields = rich_text_fields(Question.from_dict(composite_dict))

        assert [path for path, _ in fields] == [
            "data.common_content",
            "data.options_pool[0]",
            "data.options_pool[1]",
            "data.content",
            "data.options_pool[0]",
            "data.options_pool[1]",
            "data.content",
            "data.options_pool[0]",
            "data.options_pool[1]",
            "solution.text",
        ]
        assert fields[3] == ("data.content", "The cat ____ on the mat.")
        assert all(text != "[[image:hidden]]" for _, text in fields)

    def test_fields_when_composite_content_then_visited_first(self, composite_dict):
        composite_dict["data"]["content"] = "Intro [[image:intro]]"
        question = Question.from_dict(composite_dict)

        paths = [path for path, _ in rich_text_fields(question)]

        assert paths[:2] == ["data.content", "data.common_content"]
        assert "intro" in extract_image_tags(question)

    def test_traverse_when_visitor_rewrites_then_applied_in_place(self, fib_dict):
        question = Question.from_dict(fib_dict)

        traverse_rich_text(question, lambda text, path: text.upper())

        assert question.data.content == "2 + 2 = [[GAP|WIDTH:80]]"
        assert question.data.options_pool == ["3", "4", "5"]

    def test_traverse_when_field_absent_then_not_visited(self, fib_dict):
        del fib_dict["data"]["options_pool"]
        question = Question.from_dict(fib_dict)

        paths = [path for path, _ in rich_text_fields(question)]

        assert not any(p.startswith("data.options_pool") for p in paths)


class TestExtractImageTags:
    """Tests for extract_image_tags."""

    def test_extract_when_tokens_everywhere_then_all_ids(self, mcq_dict):
        tags = extract_image_tags(Question.from_dict(mcq_dict))

        assert tags == {"shape1", "square", "sol1"}

    def test_extract_when_composite_then_includes_sub_questions(self, composite_dict):
        assert extract_image_tags(Question.from_dict(composite_dict)) == {"passage", "dog"}

    def test_extract_when_table_cells_then_found(self, table_dict):
        assert extract_image_tags(Question.from_dict(table_dict)) == {"bird"}

    def test_extract_when_no_tokens_then_empty(self, fib_dict):
        question = Question.from_dict(fib_dict)

        assert extract_image_tags(question) == set()
        assert not has_images(question)

    @pytest.mark.parametrize("count", [1, 3, 7])
    def test_extract_when_n_distinct_tokens_then_n_ids(self, fib_dict, count):
        fib_dict["data"]["content"] = " ".join(f"[[image:img{i}|width:{i + 1}]]" for i in range(count))

        assert extract_image_tags(Question.from_dict(fib_dict)) == {f"img{i}" for i in range(count)}


class TestImageResolution:
    """Tests for preview and publish rewriting."""

    def test_preview_when_resolved_then_markdown_image(self, mcq_dict):
        question = Question.from_dict(mcq_dict)

        preview = resolve_images_for_preview(question, {"shape1": "data:image/png;base64,AAA"})

        assert preview.data.content == "Which shape is shown? ![shape1](data:image/png;base64,AAA)"
        assert preview.data.options[1].text == "Square [Missing: square]"

    def test_preview_when_called_then_original_untouched(self, mcq_dict):
        question = Question.from_dict(mcq_dict)
        before = copy.deepcopy(question.to_dict())

        resolve_images_for_preview(question, lambda image_id: "x.png")

        assert question.to_dict() == before

    def test_publish_when_unresolved_then_token_kept_and_warned(self, mcq_dict, caplog):
        question = Question.from_dict(mcq_dict)

        with caplog.at_level(logging.WARNING):
            published = resolve_images_for_publish(question, {"square": "https://cdn/square.png"})

        assert published.data.options[1].text == "Square ![square](https://cdn/square.png)"
        assert extract_image_tags(published) == {"shape1", "sol1"}
        assert "unresolved image tokens" in caplog.text

    def test_resolver_when_wrong_type_then_raises(self, mcq_dict):
        with pytest.raises(TypeError):
            resolve_images_for_preview(Question.from_dict(mcq_dict), 42)
