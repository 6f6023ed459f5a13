"""
Module: normalize.legacy

Purpose:
    Converters from the older question generations to the canonical
    ``type`` + ``data`` dict form. Output still goes through
    ``ensure_defaults`` afterwards.

    Nested generation: ``{question_id, taxonomy: {...}, content: {prompt,
    stimulus, options, subquestions, ...}}``.
    Flat generation: the same fields (``prompt``, ``stimulus``, ``options``,
    ``points``, ...) directly on the record.

    Both funnel into one LegacySource view, so per-type construction is
    written once.

Key Functions:
    - map_legacy_type(): Free-form type string -> QuestionType
    - asset_token(): Legacy asset object -> image token
    - fuse_content(): stimulus + prompt -> one RichText string
    - convert_nested() / convert_flat(): Whole-record converters

Dependencies:
    - core.models: vocabularies
    - core.richtext.tokens: token formatting
    - .defaults: table synthesis

Used By:
    - normalize.normalizer
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from string import ascii_lowercase
from typing import Any, Dict, List, Mapping, Optional

from assessment_toolkit.core.models import (
    DIFFICULTY_LEVELS,
    GRADE_LEVELS,
    POOL_TYPES,
    SUBPOOL_TYPES,
    QuestionType,
)
from assessment_toolkit.core.richtext.tokens import format_image_token

from .defaults import as_int, build_table, cell_text

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Type mapping
# ─────────────────────────────────────────────────────────────────────────────

LEGACY_TYPE_MAP: Dict[str, QuestionType] = {
    "mcq": QuestionType.MCQ,
    "multiple_choice": QuestionType.MCQ,
    "short_answer": QuestionType.SUBJECTIVE,
    "long_answer": QuestionType.SUBJECTIVE,
    "labelling": QuestionType.SUBJECTIVE,
    "subjective": QuestionType.SUBJECTIVE,
    "fill_blank": QuestionType.FIB,
    "fill_in_blank": QuestionType.FIB,
    "fib": QuestionType.FIB,
    "match_columns": QuestionType.MATCH,
    "matching": QuestionType.MATCH,
    "match": QuestionType.MATCH,
    "composite": QuestionType.COMPOSITE,
    "table": QuestionType.TABLE,
    "sequencing": QuestionType.MCQ,
    "sorting": QuestionType.MCQ,
}

# Not modelled separately; carried as MCQ
SPECIAL_CASE_TYPES = frozenset({"sequencing", "sorting"})

MULTI_SELECT_TYPES = frozenset({"mcq_multi", "multi_select", "multiple_select", "msq"})


def _type_key(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower().replace("-", "_").replace(" ", "_")


def is_multi_select(value: Any) -> bool:
    """True for multi-select MCQ spellings like "mcq_multi"."""
    return _type_key(value) in MULTI_SELECT_TYPES


def map_legacy_type(value: Any) -> QuestionType:
    """
    Map a free-form legacy type string to a canonical tag (case-insensitive).

    Unrecognized values fall back to SUBJECTIVE.

    Example:
        >>> map_legacy_type("Multiple_Choice")
        <QuestionType.MCQ: 'MCQ'>
        >>> map_legacy_type("sorting")
        <QuestionType.MCQ: 'MCQ'>
    """
    key = _type_key(value)
    if key in MULTI_SELECT_TYPES:
        return QuestionType.MCQ
    if key in SPECIAL_CASE_TYPES:
        logger.debug(f"Legacy type {value!r} has no canonical model; converting as MCQ")
    mapped = LEGACY_TYPE_MAP.get(key)
    if mapped is None:
        if value:
            logger.debug(f"Unrecognized legacy type {value!r}; falling back to SUBJECTIVE")
        return QuestionType.SUBJECTIVE
    return mapped


# ─────────────────────────────────────────────────────────────────────────────
# Assets and content fusion
# ─────────────────────────────────────────────────────────────────────────────

def _positive(value: Any) -> Optional[int]:
    value = as_int(value)
    return value if isinstance(value, int) and not isinstance(value, bool) and value > 0 else None


def asset_id(asset: Any) -> Optional[str]:
    """
    Image id of a legacy asset.

    Priority: ``asset_id``, filename without extension, ``tag``, ``id``.
    The placeholder ``asset_id`` "#" yields None (no token).
    """
    if isinstance(asset, str):
        return PurePosixPath(asset).stem or None
    if not isinstance(asset, Mapping):
        return None
    explicit = asset.get("asset_id")
    if explicit == "#":
        return None
    if explicit:
        return str(explicit)
    filename = asset.get("filename")
    if filename:
        return PurePosixPath(str(filename)).stem
    for key in ("tag", "id"):
        if asset.get(key):
            return str(asset[key])
    return None


def asset_token(asset: Any) -> Optional[str]:
    """Image token for a legacy asset, sized when the asset carries height/width."""
    image_id = asset_id(asset)
    if image_id is None:
        return None
    if isinstance(asset, Mapping):
        return format_image_token(image_id, _positive(asset.get("height")), _positive(asset.get("width")))
    return format_image_token(image_id)


def _assets_of(block: Any) -> List[Any]:
    if not isinstance(block, Mapping):
        return []
    assets: List[Any] = []
    for key in ("assets", "media"):
        value = block.get(key)
        if isinstance(value, list):
            assets.extend(value)
    if block.get("asset"):
        assets.append(block["asset"])
    return assets


def asset_tokens(block: Any) -> List[str]:
    return [token for token in map(asset_token, _assets_of(block)) if token]


def block_text(block: Any) -> str:
    """Text of a legacy prompt/stimulus/option: a string or ``{text}``."""
    if isinstance(block, str):
        return block
    if isinstance(block, Mapping) and isinstance(block.get("text"), str):
        return block["text"]
    return ""


def fuse_content(stimulus: Any, prompt: Any) -> str:
    """
    One RichText string from an old stimulus and prompt.

    Parts, in order: stimulus text, stimulus asset tokens, prompt text,
    prompt asset tokens. Empty parts are skipped; the rest are joined by a
    blank line.

    Example:
        >>> fuse_content({"text": "Look.", "assets": [{"asset_id": "fig1"}]}, "What is it?")
        'Look.\\n\\n[[image:fig1]]\\n\\nWhat is it?'
    """
    parts = [
        block_text(stimulus).strip(),
        "\n".join(asset_tokens(stimulus)),
        block_text(prompt).strip(),
        "\n".join(asset_tokens(prompt)),
    ]
    return "\n\n".join(part for part in parts if part)


# ─────────────────────────────────────────────────────────────────────────────
# Metadata, layout and solution carry-over
# ─────────────────────────────────────────────────────────────────────────────

def _canonical_choice(value: Any, choices: tuple[str, ...]) -> Any:
    if isinstance(value, str):
        for choice in choices:
            if choice.lower() == value.strip().lower():
                return choice
    return value


def canonical_grade(value: Any) -> Any:
    """``3``, ``"3"`` and ``"grade 3"`` become ``"Grade 3"``; known labels are case-folded."""
    number = as_int(value)
    if isinstance(number, int) and not isinstance(number, bool) and 1 <= number <= 12:
        return f"Grade {number}"
    return _canonical_choice(value, GRADE_LEVELS)


def convert_metadata(*sources: Any) -> dict:
    """
    Collect metadata fields from legacy blocks; later sources win.

    ``points`` is accepted as an alias of ``marks``. Enumerated fields are
    case-folded onto their vocabularies; unknown values are kept as given.
    """
    metadata: Dict[str, Any] = {}
    for source in sources:
        if not isinstance(source, Mapping):
            continue
        for name in ("grade", "subject", "chapter", "section", "difficulty", "pool", "subpool"):
            if source.get(name) not in (None, ""):
                metadata[name] = source[name]
        for name in ("points", "marks"):
            if source.get(name) not in (None, ""):
                metadata["marks"] = source[name]

    if "grade" in metadata:
        metadata["grade"] = canonical_grade(metadata["grade"])
    if "difficulty" in metadata:
        metadata["difficulty"] = _canonical_choice(metadata["difficulty"], DIFFICULTY_LEVELS)
    if "pool" in metadata:
        metadata["pool"] = _canonical_choice(metadata["pool"], POOL_TYPES)
    if "subpool" in metadata:
        metadata["subpool"] = _canonical_choice(metadata["subpool"], SUBPOOL_TYPES)
    if isinstance(metadata.get("section"), str):
        metadata["section"] = metadata["section"].strip().upper()
    for name in ("chapter", "marks"):
        if name in metadata:
            metadata[name] = as_int(metadata[name])
    return metadata


_LAYOUT_HINTS = {
    "stack": "vertical",
    "vertical": "vertical",
    "column": "vertical",
    "row": "horizontal",
    "inline": "horizontal",
    "horizontal": "horizontal",
    "grid": "horizontal",
}


def map_layout_hint(value: Any, *, allow_matrix: bool = False) -> Optional[str]:
    """
    Map an old display hint to a canonical layout.

    stack -> vertical; row/inline -> horizontal; grid -> horizontal, or
    matrix where sub-question matrices are allowed. Unknown -> None.
    """
    key = _type_key(value)
    if allow_matrix and key in ("grid", "matrix"):
        return "matrix"
    return _LAYOUT_HINTS.get(key)


def convert_solution(*sources: Any) -> dict:
    """Solution text from ``solution``, ``explanation`` or ``answer_explanation``."""
    for source in sources:
        if not isinstance(source, Mapping):
            continue
        for key in ("solution", "explanation", "answer_explanation"):
            text = block_text(source.get(key))
            if text:
                return {"text": text}
    return {"text": ""}


# ─────────────────────────────────────────────────────────────────────────────
# Unified view over the two old generations
# ─────────────────────────────────────────────────────────────────────────────

def _first(*values: Any) -> Any:
    for value in values:
        if value not in (None, "", [], {}):
            return value
    return None


@dataclass
class LegacySource:
    """
    Content fields of one old record, located regardless of generation.

    Attributes:
        legacy_type: Original free-form type string
        prompt: Old prompt (string or ``{text, assets|media}``)
        stimulus: Old stimulus (string or ``{text, assets, word_bank, ...}``)
        options: Old MCQ options
        pairs: Old MATCH pairs (``{left_column, right_column}`` or a list)
        word_bank: Old FIB word bank
        table: Old table object, if any
        rows / columns: Old parallel table descriptors
        sub_questions: Old sub-question records
        layouts: Old layout hints keyed by canonical style field
        allow_multiple: Old multi-select flag
    """
    legacy_type: Any = None
    prompt: Any = None
    stimulus: Any = None
    options: Any = None
    pairs: Any = None
    word_bank: Any = None
    table: Any = None
    rows: Any = None
    columns: Any = None
    sub_questions: Any = None
    layouts: Dict[str, Any] = field(default_factory=dict)
    allow_multiple: bool = False

    @classmethod
    def from_block(cls, block: Mapping[str, Any], *, legacy_type: Any = None) -> LegacySource:
        """Read content fields from one mapping (nested ``content`` or a flat record)."""
        stimulus = block.get("stimulus")
        stim = stimulus if isinstance(stimulus, Mapping) else {}
        tables = stim.get("tables")
        prompt = block.get("prompt")
        if prompt is None and isinstance(block.get("question"), str):
            prompt = block["question"]
        return cls(
            legacy_type=_first(legacy_type, block.get("type"), block.get("question_type")),
            prompt=prompt,
            stimulus=stimulus,
            options=_first(block.get("options"), stim.get("options")),
            pairs=_first(stim.get("pairs"), block.get("pairs")),
            word_bank=_first(stim.get("word_bank"), block.get("word_bank")),
            table=_first(
                stim.get("table"),
                tables[0] if isinstance(tables, list) and tables else None,
                block.get("table"),
            ),
            rows=_first(stim.get("rows"), block.get("rows")),
            columns=_first(stim.get("columns"), block.get("columns")),
            sub_questions=_first(block.get("subquestions"), block.get("sub_questions")),
            layouts={
                "image_layout": _first(
                    block.get("image_layout"),
                    stim.get("layout"),
                    prompt.get("layout") if isinstance(prompt, Mapping) else None,
                ),
                "options_layout": block.get("options_layout"),
                "sub_questions_layout": _first(
                    block.get("subquestions_layout"), block.get("sub_questions_layout")
                ),
            },
            allow_multiple=bool(
                block.get("allow_multiple") or block.get("multiple_correct") or block.get("multi_select")
            ),
        )


def _style_hints(source: LegacySource) -> dict:
    style: Dict[str, Any] = {}
    image_layout = map_layout_hint(source.layouts.get("image_layout"))
    if image_layout:
        style["image_layout"] = image_layout
    options_layout = map_layout_hint(source.layouts.get("options_layout"))
    if options_layout:
        style["options_layout"] = options_layout
    sub_layout = map_layout_hint(source.layouts.get("sub_questions_layout"), allow_matrix=True)
    if sub_layout:
        style["sub_questions_layout"] = sub_layout
    return style


# ─────────────────────────────────────────────────────────────────────────────
# Per-type data construction
# ─────────────────────────────────────────────────────────────────────────────

def option_label(index: int) -> str:
    """a, b, ..., z, then aa, ab, ..."""
    if index < len(ascii_lowercase):
        return ascii_lowercase[index]
    return option_label(index // len(ascii_lowercase) - 1) + ascii_lowercase[index % len(ascii_lowercase)]


def convert_options(options: Any) -> List[dict]:
    """
    Canonical MCQ options from old options.

    Strings become ``{id, text}``; objects contribute their text with asset
    tokens prepended. Ids are kept when present, else a, b, c, ...
    """
    if not isinstance(options, list):
        return []
    converted = []
    for index, option in enumerate(options):
        tokens = asset_tokens(option)
        text = block_text(option) if isinstance(option, (str, Mapping)) else ("" if option is None else str(option))
        entry: Dict[str, Any] = {
            "id": option_label(index),
            "text": " ".join(tokens + [text]) if text else " ".join(tokens),
        }
        if isinstance(option, Mapping):
            if option.get("id"):
                entry["id"] = str(option["id"])
            correct = option.get("is_correct", option.get("correct"))
            if correct is not None:
                entry["is_correct"] = bool(correct)
        converted.append(entry)
    return converted


def convert_word_bank(word_bank: Any) -> Optional[List[str]]:
    """Old word bank as a list of strings; null entries are dropped."""
    if not isinstance(word_bank, list):
        return None
    words = [str(cell_text(word)) for word in word_bank if word is not None]
    return words or None


def convert_pairs(pairs: Any) -> List[dict]:
    """
    Zip old ``left_column``/``right_column`` index-wise into ``{left, right}``.

    The shorter column is padded with empty strings. A list of pair objects
    is passed through with missing sides set to "".
    """
    if isinstance(pairs, list):
        return [
            {"left": block_text(p.get("left")), "right": block_text(p.get("right"))}
            for p in pairs if isinstance(p, Mapping)
        ]
    if not isinstance(pairs, Mapping):
        return []
    left = pairs.get("left_column") or []
    right = pairs.get("right_column") or []
    left = left if isinstance(left, list) else []
    right = right if isinstance(right, list) else []
    return [
        {
            "left": block_text(left[i]) if i < len(left) else "",
            "right": block_text(right[i]) if i < len(right) else "",
        }
        for i in range(max(len(left), len(right)))
    ]


def _table_data(source: LegacySource) -> dict:
    if isinstance(source.table, Mapping):
        table = dict(source.table)
        if "header" not in table and isinstance(table.get("columns"), list):
            table["header"] = table.pop("columns")
        return {"table": table}
    if source.rows is not None or source.columns is not None:
        return {"table": build_table(source.columns, source.rows)}
    return {}


def build_data(qtype: QuestionType, source: LegacySource) -> dict:
    """
    Canonical ``data`` for ``qtype`` from an old record's content.

    Style is seeded from old layout hints only; ``ensure_defaults`` fills
    the rest.
    """
    content = fuse_content(source.stimulus, source.prompt)
    style = _style_hints(source)
    legacy_key = _type_key(source.legacy_type)

    data: Dict[str, Any]
    if qtype is QuestionType.MCQ:
        data = {"content": content, "options": convert_options(source.options)}
        if source.allow_multiple or is_multi_select(source.legacy_type):
            data["allow_multiple"] = True
    elif qtype is QuestionType.FIB:
        data = {"content": content}
        pool = convert_word_bank(source.word_bank)
        if pool is not None:
            data["options_pool"] = pool
    elif qtype is QuestionType.MATCH:
        data = {"content": content, "pairs": convert_pairs(source.pairs)}
    elif qtype is QuestionType.TABLE:
        data = {"content": content, **_table_data(source)}
    elif qtype is QuestionType.COMPOSITE:
        subs = source.sub_questions if isinstance(source.sub_questions, list) else []
        data = {
            "common_content": content,
            "sub_questions": [convert_sub_question(sub) for sub in subs if isinstance(sub, Mapping)],
        }
        pool = convert_word_bank(source.word_bank)
        if pool is not None:
            data["options_pool"] = pool
    else:
        data = {
            "content": content,
            "expected_length": "long" if legacy_key == "long_answer" else "short",
        }

    if style:
        data["style"] = style
    return data


def convert_sub_question(sub: Mapping[str, Any]) -> dict:
    """
    Convert one old sub-question to ``{id?, type, data}``.

    Already-canonical sub-questions are passed through; nested ones read
    their ``content`` block; anything else is treated as flat.
    """
    if isinstance(sub.get("data"), Mapping) and QuestionType.coerce(sub.get("type")):
        return dict(sub)
    if isinstance(sub.get("content"), Mapping):
        source = LegacySource.from_block(sub["content"], legacy_type=sub.get("type"))
    else:
        source = LegacySource.from_block(sub)
    qtype = map_legacy_type(source.legacy_type)
    converted: Dict[str, Any] = {"type": qtype.value, "data": build_data(qtype, source)}
    sub_id = _first(sub.get("id"), sub.get("question_id"), sub.get("label"))
    if sub_id is not None:
        converted["id"] = str(sub_id)
    return converted


# ─────────────────────────────────────────────────────────────────────────────
# Whole-record converters
# ─────────────────────────────────────────────────────────────────────────────

def _record_id(raw: Mapping[str, Any]) -> Optional[str]:
    value = _first(raw.get("id"), raw.get("question_id"))
    return str(value) if value is not None else None


def _assemble(raw: Mapping[str, Any], source: LegacySource, metadata: dict, solution: dict) -> dict:
    qtype = map_legacy_type(source.legacy_type)
    converted: Dict[str, Any] = {
        "id": _record_id(raw),
        "metadata": metadata,
        "type": qtype.value,
        "data": build_data(qtype, source),
        "solution": solution,
    }
    logger.debug(
        f"Converted legacy {source.legacy_type!r} record {converted['id']} to {qtype.value}"
    )
    return converted


def convert_nested(raw: Mapping[str, Any]) -> dict:
    """
    Convert a nested-generation record (``taxonomy`` + ``content``).

    The type comes from the record, its taxonomy, or its content block.
    """
    taxonomy = raw["taxonomy"]
    content = raw["content"]
    legacy_type = _first(
        raw.get("type"),
        taxonomy.get("question_type"),
        taxonomy.get("type"),
        content.get("type"),
    )
    source = LegacySource.from_block(content, legacy_type=legacy_type)
    metadata = convert_metadata(raw, raw.get("metadata"), taxonomy)
    return _assemble(raw, source, metadata, convert_solution(content, raw))


def convert_flat(raw: Mapping[str, Any]) -> dict:
    """
    Convert an oldest-generation flat record.

    Example:
        >>> convert_flat({"question_id": "q1", "type": "mcq", "prompt": "2+2?",
        ...               "options": ["3", "4"], "points": 2})["data"]["options"]
        [{'id': 'a', 'text': '3'}, {'id': 'b', 'text': '4'}]
    """
    source = LegacySource.from_block(raw)
    metadata = convert_metadata(raw.get("metadata"), raw)
    return _assemble(raw, source, metadata, convert_solution(raw))
