"""
RichText Package

Token grammar for image and gap placeholders embedded in RichText strings,
the generic traversal over every RichText field of a question, and the
preview/publish image rewrite modes built on it.
"""

from .tokens import (
    DEFAULT_GAP_WIDTH,
    GAP_TOKEN_RE,
    IMAGE_TOKEN_RE,
    LEGACY_BLANK_RE,
    GapToken,
    ImageToken,
    find_gaps,
    find_image_tokens,
    format_gap_token,
    format_image_token,
    has_explicit_gaps,
    image_ids,
    legacy_blank_width,
    legacy_blanks_to_gap_tokens,
    replace_gaps,
    replace_image_tokens,
)
from .traversal import (
    collect_rich_text,
    extract_image_tags,
    has_images,
    rich_text_fields,
    traverse_rich_text,
)
from .resolution import (
    ImageResolver,
    as_resolver,
    resolve_images_for_preview,
    resolve_images_for_publish,
)

__all__ = [
    "DEFAULT_GAP_WIDTH",
    "GAP_TOKEN_RE",
    "IMAGE_TOKEN_RE",
    "LEGACY_BLANK_RE",
    "GapToken",
    "ImageToken",
    "find_gaps",
    "find_image_tokens",
    "format_gap_token",
    "format_image_token",
    "has_explicit_gaps",
    "image_ids",
    "legacy_blank_width",
    "legacy_blanks_to_gap_tokens",
    "replace_gaps",
    "replace_image_tokens",
    "collect_rich_text",
    "extract_image_tags",
    "has_images",
    "rich_text_fields",
    "traverse_rich_text",
    "ImageResolver",
    "as_resolver",
    "resolve_images_for_preview",
    "resolve_images_for_publish",
]
