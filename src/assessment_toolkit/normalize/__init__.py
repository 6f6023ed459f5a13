"""
Normalize Package

Schema normalization and migration: generation detection, conversion of
the nested and flat legacy shapes, and the defaulting pass that makes every
question satisfy the canonical (v5.1) invariants.
"""

from .config import (
    DEFAULT_CONFIG,
    MetadataDefaults,
    NormalizationMode,
    NormalizerConfig,
)
from .defaults import (
    create_empty_question,
    default_data_for_type,
    default_style_for_type,
    default_table,
    ensure_defaults,
    ensure_style,
    normalize_style,
    normalize_table_data,
)
from .legacy import (
    asset_token,
    convert_flat,
    convert_nested,
    fuse_content,
    map_legacy_type,
)
from .normalizer import (
    Generation,
    SchemaError,
    detect_generation,
    normalize_question,
    normalize_to_dict,
)

__all__ = [
    "DEFAULT_CONFIG",
    "MetadataDefaults",
    "NormalizationMode",
    "NormalizerConfig",
    "create_empty_question",
    "default_data_for_type",
    "default_style_for_type",
    "default_table",
    "ensure_defaults",
    "ensure_style",
    "normalize_style",
    "normalize_table_data",
    "asset_token",
    "convert_flat",
    "convert_nested",
    "fuse_content",
    "map_legacy_type",
    "Generation",
    "SchemaError",
    "detect_generation",
    "normalize_question",
    "normalize_to_dict",
]
