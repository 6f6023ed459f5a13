"""
Tests for the command-line interface.
"""

import json

import pytest
from PIL import Image

from assessment_toolkit.cli import EXIT_INVALID, EXIT_LOAD_ERROR, EXIT_OK, build_parser, main


@pytest.fixture
def bank_file(tmp_path, mcq_dict, fib_dict):
    path = tmp_path / "bank.jsonl"
    path.write_text(json.dumps(mcq_dict) + "\n" + json.dumps(fib_dict) + "\n", encoding="utf-8")
    return path


class TestConvert:
    """Tests for the convert command."""

    def test_convert_when_output_file_then_written(self, tmp_path, bank_file, capsys):
        output = tmp_path / "out" / "canonical.jsonl"

        code = main(["convert", str(bank_file), "-o", str(output)])

        assert code == EXIT_OK
        assert "Wrote 2 question(s)" in capsys.readouterr().out
        lines = output.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["id"] for line in lines] == ["Q1", "Q2"]

    def test_convert_when_no_output_then_jsonl_on_stdout(self, tmp_path, capsys):
        path = tmp_path / "legacy.json"
        path.write_text(json.dumps([{"question_id": "L1", "type": "long_answer", "prompt": "Why?"}]),
                        encoding="utf-8")

        code = main(["convert", str(path)])

        out = capsys.readouterr().out.splitlines()
        assert code == EXIT_OK
        assert out[0] == "Parsed 1 question(s), discarded 0 fragment(s) (array mode)"
        record = json.loads(out[1])
        assert record["type"] == "SUBJECTIVE"
        assert record["data"]["expected_length"] == "long"

    def test_convert_when_question_invalid_then_blocked(self, tmp_path, capsys):
        path = tmp_path / "legacy.jsonl"
        path.write_text('{"question_id": "L2", "type": "mcq", "prompt": "No options?"}\n', encoding="utf-8")
        output = tmp_path / "out.jsonl"

        code = main(["convert", str(path), "-o", str(output)])

        assert code == EXIT_INVALID
        assert "L2: MCQ requires at least one option" in capsys.readouterr().err
        assert not output.exists()

    def test_convert_when_strict_and_legacy_then_discarded(self, tmp_path, capsys):
        path = tmp_path / "legacy.jsonl"
        path.write_text('{"taxonomy": {"type": "mcq"}, "content": {"prompt": "?"}}\n', encoding="utf-8")

        code = main(["convert", str(path), "--strict"])

        captured = capsys.readouterr()
        assert code == EXIT_OK
        assert "discarded 1 fragment(s)" in captured.out
        assert "Old schema format detected" in captured.err

    def test_convert_when_input_missing_then_load_error(self, tmp_path):
        assert main(["convert", str(tmp_path / "missing.jsonl")]) == EXIT_LOAD_ERROR


class TestTags:
    """Tests for the tags command."""

    def test_tags_when_listed_then_sorted_ids(self, bank_file, capsys):
        code = main(["tags", str(bank_file)])

        out = capsys.readouterr().out.splitlines()
        assert code == EXIT_OK
        assert out == ["Q1: shape1, sol1, square", "Q2: -"]

    def test_tags_when_images_missing_then_reported(self, tmp_path, bank_file, capsys):
        images = tmp_path / "images"
        images.mkdir()
        Image.new("RGB", (4, 4)).save(images / "shape1.png")
        (images / "notes.txt").write_text("ignored", encoding="utf-8")

        code = main(["tags", str(bank_file), "--images", str(images)])

        assert code == EXIT_INVALID
        assert "  missing: sol1, square" in capsys.readouterr().out

    def test_tags_when_image_dir_missing_then_load_error(self, tmp_path, bank_file):
        assert main(["tags", str(bank_file), "--images", str(tmp_path / "nope")]) == EXIT_LOAD_ERROR


class TestPreview:
    """Tests for the preview command."""

    def test_preview_when_rendered_then_html_page(self, tmp_path, bank_file, capsys):
        output = tmp_path / "preview.html"

        code = main(["preview", str(bank_file), "-o", str(output), "--hide-marks"])

        page = output.read_text(encoding="utf-8")
        assert code == EXIT_OK
        assert "Rendered 2 question(s)" in capsys.readouterr().out
        assert "<title>bank</title>" in page
        assert '<span class="p-q-num">2.</span>' in page
        assert "p-q-marks" not in page

    def test_preview_when_images_dir_then_inlined(self, tmp_path, bank_file):
        images = tmp_path / "images"
        images.mkdir()
        Image.new("RGB", (4, 4)).save(images / "shape1.png")
        output = tmp_path / "preview.html"

        main(["preview", str(bank_file), "-o", str(output), "--images", str(images)])

        page = output.read_text(encoding="utf-8")
        assert 'alt="shape1"' in page
        assert "[Image: square]" in page


class TestParser:
    """Tests for argument parsing."""

    def test_parser_when_no_command_then_exits(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "assessment-toolkit" in capsys.readouterr().out
