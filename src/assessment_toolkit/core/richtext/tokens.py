"""
Module: core.richtext.tokens

Purpose:
    Grammar of the placeholder tokens embedded in RichText strings.
    RichText is never parsed into a tree; tokens are located and
    substituted by pattern matching over the plain string.

    Image token:   [[image:<id>]]  or  [[image:<id>|height:<H>|width:<W>]]
    Gap token:     [[gap]]         or  [[gap|width:<N>]]
    Legacy blank:  two or more underscores, an implicit gap whose width
                   scales with the run length. Only honored when the string
                   holds no explicit gap token.

Key Classes:
    - ImageToken: Parsed image reference (id plus optional pixel size)
    - GapToken: Parsed fill-in-the-blank slot

Key Functions:
    - find_image_tokens() / image_ids(): Read image references
    - replace_image_tokens(): Substitute image tokens
    - find_gaps() / replace_gaps(): Read or substitute gaps (legacy aware)
    - legacy_blanks_to_gap_tokens(): Upgrade underscore runs to gap tokens

Dependencies:
    - re (std)

Used By:
    - core.richtext.traversal: tag extraction
    - core.richtext.resolution: preview/publish rewriting
    - normalize.legacy: building tokens from legacy assets
    - rendering.rich_text: HTML substitution
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Set

IMAGE_TOKEN_RE = re.compile(r"\[\[image:([^\]]+)\]\]")
GAP_TOKEN_RE = re.compile(r"\[\[gap(?:\|width:(\d+))?\]\]")
LEGACY_BLANK_RE = re.compile(r"_{2,}")

# Marker whose presence disables legacy underscore blanks for a string.
GAP_MARKER = "[[gap"

DEFAULT_GAP_WIDTH = 60  # px, for [[gap]] without explicit width
LEGACY_BLANK_PX_PER_CHAR = 10

_LEADING_INT_RE = re.compile(r"\s*(\d+)")


def _positive_int(value: str) -> Optional[int]:
    match = _LEADING_INT_RE.match(value)
    if not match:
        return None
    number = int(match.group(1))
    return number if number > 0 else None


@dataclass(frozen=True)
class ImageToken:
    """
    Image reference parsed from ``[[image:...]]``.

    Attributes:
        id: Free-form key into an external image store
        height: Optional height in pixels
        width: Optional width in pixels
    """

    id: str
    height: Optional[int] = None
    width: Optional[int] = None

    @classmethod
    def parse(cls, content: str) -> ImageToken:
        """
        Parse token content (the part after ``[[image:``).

        Accepts ``id`` or ``id|height:H|width:W`` with attributes in any
        order. A repeated ``image:`` prefix is tolerated.

        Example:
            >>> ImageToken.parse("fig1|height:120|width:300")
            ImageToken(id='fig1', height=120, width=300)
        """
        if content.startswith("image:"):
            content = content[len("image:"):]
        parts = content.split("|")
        height = width = None
        for part in parts[1:]:
            part = part.strip()
            if part.startswith("width:"):
                width = _positive_int(part[len("width:"):])
            elif part.startswith("height:"):
                height = _positive_int(part[len("height:"):])
        return cls(id=parts[0], height=height, width=width)

    def to_token(self) -> str:
        attrs = ""
        if self.height is not None:
            attrs += f"|height:{self.height}"
        if self.width is not None:
            attrs += f"|width:{self.width}"
        return f"[[image:{self.id}{attrs}]]"

    def __str__(self) -> str:
        return self.to_token()


@dataclass(frozen=True)
class GapToken:
    """
    Fill-in-the-blank slot.

    Attributes:
        width: Explicit width in pixels, None for the default
        legacy: True when derived from an underscore run
    """

    width: Optional[int] = None
    legacy: bool = False

    @property
    def pixel_width(self) -> int:
        return self.width if self.width is not None else DEFAULT_GAP_WIDTH

    def to_token(self) -> str:
        if self.width is None:
            return "[[gap]]"
        return f"[[gap|width:{self.width}]]"

    def __str__(self) -> str:
        return self.to_token()


def format_image_token(image_id: str, height: Optional[int] = None, width: Optional[int] = None) -> str:
    """Build an image token string."""
    return ImageToken(image_id, height, width).to_token()


def format_gap_token(width: Optional[int] = None) -> str:
    """Build a gap token string."""
    return GapToken(width).to_token()


# ─────────────────────────────────────────────────────────────────────────────
# Image tokens
# ─────────────────────────────────────────────────────────────────────────────

def find_image_tokens(text: object) -> List[ImageToken]:
    """All non-overlapping image tokens in ``text``, in order."""
    if not text or not isinstance(text, str):
        return []
    return [ImageToken.parse(m.group(1)) for m in IMAGE_TOKEN_RE.finditer(text)]


def image_ids(text: object) -> Set[str]:
    """Distinct image ids referenced by ``text``."""
    return {token.id for token in find_image_tokens(text)}


def replace_image_tokens(
    text: object,
    replace: Callable[[ImageToken, str], Optional[str]],
) -> object:
    """
    Substitute every image token in ``text``.

    Args:
        text: RichText; non-string or empty values are returned unchanged
        replace: Called with the parsed token and the matched token text.
            Returning None keeps the original token.

    Returns:
        Rewritten text
    """
    if not text or not isinstance(text, str):
        return text

    def _sub(match: re.Match) -> str:
        result = replace(ImageToken.parse(match.group(1)), match.group(0))
        return match.group(0) if result is None else result

    return IMAGE_TOKEN_RE.sub(_sub, text)


# ─────────────────────────────────────────────────────────────────────────────
# Gap tokens and legacy blanks
# ─────────────────────────────────────────────────────────────────────────────

def has_explicit_gaps(text: object) -> bool:
    """True when ``text`` contains a gap token marker."""
    return isinstance(text, str) and GAP_MARKER in text


def legacy_blank_width(run_length: int) -> int:
    """Pixel width of an underscore run: 10px per underscore, at least the default."""
    return max(DEFAULT_GAP_WIDTH, run_length * LEGACY_BLANK_PX_PER_CHAR)


def _gap_from_match(match: re.Match) -> GapToken:
    width = match.group(1)
    return GapToken(width=int(width) if width else None)


def _legacy_from_match(match: re.Match) -> GapToken:
    return GapToken(width=legacy_blank_width(len(match.group(0))), legacy=True)


def find_gaps(text: object) -> List[GapToken]:
    """
    Gaps in ``text``, in order.

    Explicit tokens take precedence: underscore runs only count as gaps
    when the string holds no gap token at all.
    """
    if not text or not isinstance(text, str):
        return []
    if has_explicit_gaps(text):
        return [_gap_from_match(m) for m in GAP_TOKEN_RE.finditer(text)]
    return [_legacy_from_match(m) for m in LEGACY_BLANK_RE.finditer(text)]


def replace_gaps(text: object, replace: Callable[[GapToken], str]) -> object:
    """
    Substitute every gap in ``text``.

    When explicit gap tokens are present, underscore runs are left as
    literal text; otherwise each run is replaced as a legacy gap.
    """
    if not text or not isinstance(text, str):
        return text
    if has_explicit_gaps(text):
        return GAP_TOKEN_RE.sub(lambda m: replace(_gap_from_match(m)), text)
    return LEGACY_BLANK_RE.sub(lambda m: replace(_legacy_from_match(m)), text)


def legacy_blanks_to_gap_tokens(text: object) -> object:
    """
    Rewrite underscore runs as explicit ``[[gap|width:N]]`` tokens.

    Strings that already use gap tokens are returned unchanged.

    Example:
        >>> legacy_blanks_to_gap_tokens("2 + 2 = ____")
        '2 + 2 = [[gap|width:60]]'
    """
    if not text or not isinstance(text, str) or has_explicit_gaps(text):
        return text
    return LEGACY_BLANK_RE.sub(lambda m: _legacy_from_match(m).to_token(), text)
