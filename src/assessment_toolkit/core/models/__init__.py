"""
Core Models Package

Canonical (schema v5.1) question records. ``Question.data`` is a tagged
union: the ``type`` tag selects exactly one variant record.

| type | data variant | style record |
|------|--------------|--------------|
| MCQ | McqData | OptionsStyle |
| FIB | FibData | OptionsStyle |
| MATCH | MatchData | BaseStyle |
| SUBJECTIVE | SubjectiveData | BaseStyle |
| TABLE | TableData | TableStyle |
| COMPOSITE | CompositeData | CompositeStyle |
"""

from .types import (
    QuestionType,
    QUESTION_TYPES,
    SCHEMA_VERSION,
    DIFFICULTY_LEVELS,
    POOL_TYPES,
    SUBPOOL_TYPES,
    GRADE_LEVELS,
    LAYOUT_VALUES,
    SUB_LAYOUT_VALUES,
    TABLE_GRID_VALUES,
    type_display_name,
)
from .metadata import Metadata
from .style import (
    BaseStyle,
    OptionsStyle,
    CompositeStyle,
    TableStyle,
)
from .data import (
    RichText,
    McqOption,
    MatchPair,
    TableGrid,
    McqData,
    FibData,
    MatchData,
    SubjectiveData,
    TableData,
    CompositeData,
    SubQuestion,
    QuestionData,
    data_class_for,
    data_from_dict,
)
from .questions import Question, Solution, generate_question_id

__all__ = [
    "QuestionType",
    "QUESTION_TYPES",
    "SCHEMA_VERSION",
    "DIFFICULTY_LEVELS",
    "POOL_TYPES",
    "SUBPOOL_TYPES",
    "GRADE_LEVELS",
    "LAYOUT_VALUES",
    "SUB_LAYOUT_VALUES",
    "TABLE_GRID_VALUES",
    "type_display_name",
    "Metadata",
    "BaseStyle",
    "OptionsStyle",
    "CompositeStyle",
    "TableStyle",
    "RichText",
    "McqOption",
    "MatchPair",
    "TableGrid",
    "McqData",
    "FibData",
    "MatchData",
    "SubjectiveData",
    "TableData",
    "CompositeData",
    "SubQuestion",
    "QuestionData",
    "data_class_for",
    "data_from_dict",
    "Question",
    "Solution",
    "generate_question_id",
]
