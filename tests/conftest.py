import copy
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import assessment_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


METADATA = {
    "grade": "Grade 3",
    "subject": "Maths",
    "chapter": 2,
    "section": "B",
    "difficulty": "Easy",
    "marks": 2,
    "pool": "Practice",
    "subpool": "NA",
}


def _question(qid: str, qtype: str, data: dict, solution: str = "") -> dict:
    return {
        "id": qid,
        "metadata": copy.deepcopy(METADATA),
        "type": qtype,
        "data": data,
        "solution": {"text": solution},
    }


# Common test fixtures
@pytest.fixture
def mcq_dict() -> dict:
    """Canonical, fully-defaulted MCQ."""
    return _question(
        "Q1",
        "MCQ",
        {
            "content": "Which shape is shown? [[image:shape1|height:80|width:120]]",
            "style": {"image_layout": "vertical", "options_layout": "horizontal"},
            "options": [
                {"id": "a", "text": "Circle"},
                {"id": "b", "text": "Square [[image:square]]"},
            ],
        },
        solution="It has four equal sides. [[image:sol1]]",
    )


@pytest.fixture
def fib_dict() -> dict:
    return _question(
        "Q2",
        "FIB",
        {
            "content": "2 + 2 = [[gap|width:80]]",
            "style": {"image_layout": "vertical", "options_layout": "vertical"},
            "options_pool": ["3", "4", "5"],
        },
    )


@pytest.fixture
def table_dict() -> dict:
    return _question(
        "Q3",
        "TABLE",
        {
            "content": "Complete the table.",
            "style": {"image_layout": "vertical", "table_grid_lines": "all", "hide_header": False},
            "table": {"header": ["Animal", "Legs"], "rows": [["Dog", ""], ["[[image:bird]]", ""]]},
        },
    )


@pytest.fixture
def composite_dict() -> dict:
    """COMPOSITE with two FIB sub-questions sharing one word bank."""
    return _question(
        "Q4",
        "COMPOSITE",
        {
            "common_content": "Read the passage. [[image:passage]]",
            "style": {"image_layout": "vertical", "sub_questions_layout": "vertical"},
            "sub_questions": [
                {
                    "id": "a",
                    "type": "FIB",
                    "data": {
                        "content": "The cat ____ on the mat.",
                        "style": {"image_layout": "vertical", "options_layout": "vertical"},
                        "options_pool": ["sat", "ran"],
                    },
                },
                {
                    "id": "b",
                    "type": "FIB",
                    "data": {
                        "content": "The dog [[gap]] away. [[image:dog]]",
                        "style": {"image_layout": "vertical", "options_layout": "vertical"},
                        "options_pool": ["ran", "sat"],
                    },
                },
            ],
        },
    )


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path
