"""
Module: normalize.config

Purpose:
    Configuration dataclasses for the schema normalizer. Immutable
    configuration with validation on construction.

Key Classes:
    - NormalizationMode: LENIENT (auto-convert) or STRICT (reject old shapes)
    - MetadataDefaults: Values used when metadata fields are absent
    - NormalizerConfig: Main normalizer configuration

Dependencies:
    - dataclasses (std)

Used By:
    - normalize.normalizer: normalize_question()
    - normalize.defaults: ensure_defaults()
    - loading.parser: forwarded per batch
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum


class NormalizationMode(str, Enum):
    """
    How non-canonical input is handled.

    A deployment picks one; the modes are never combined for a batch.
    """
    LENIENT = "lenient"
    STRICT = "strict"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MetadataDefaults:
    """
    Default metadata values (immutable).

    Attributes:
        grade: Grade label
        subject: Subject label
        chapter: Chapter number, >= 0
        section: Section letter
        difficulty: "Easy", "Medium" or "Hard"
        marks: Marks, >= 1
        pool: "Practice" or "Exam"
        subpool: "NA", "Written" or "Oral"
    """
    grade: str = "Nursery"
    subject: str = "Maths"
    chapter: int = 0
    section: str = "A"
    difficulty: str = "Medium"
    marks: int = 1
    pool: str = "Practice"
    subpool: str = "NA"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.chapter < 0:
            raise ValueError(f"chapter must be non-negative: {self.chapter}")
        if self.marks < 1:
            raise ValueError(f"marks must be at least 1: {self.marks}")

    def as_dict(self) -> dict:
        """Fresh dict of the default values."""
        return asdict(self)


@dataclass(frozen=True)
class NormalizerConfig:
    """
    Configuration for normalizing questions (immutable).

    Attributes:
        mode: LENIENT converts older generations; STRICT raises SchemaError
        metadata_defaults: Values for absent metadata fields
        id_prefix: Prefix of generated question ids

    Example:
        >>> config = NormalizerConfig(mode=NormalizationMode.STRICT)
    """
    mode: NormalizationMode = NormalizationMode.LENIENT
    metadata_defaults: MetadataDefaults = field(default_factory=MetadataDefaults)
    id_prefix: str = "Q"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not isinstance(self.mode, NormalizationMode):
            try:
                object.__setattr__(self, "mode", NormalizationMode(self.mode))
            except ValueError:
                raise ValueError(f"Unknown normalization mode: {self.mode!r}") from None
        if not self.id_prefix:
            raise ValueError("id_prefix must be non-empty")

    @property
    def strict(self) -> bool:
        return self.mode is NormalizationMode.STRICT


DEFAULT_CONFIG = NormalizerConfig()
