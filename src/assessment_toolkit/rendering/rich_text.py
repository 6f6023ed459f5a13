"""
Module: rendering.rich_text

Purpose:
    Convert one RichText string to an HTML fragment.

    Custom tokens are swapped for private-use placeholders first so that
    neither Markdown nor the math protection can touch them, then restored
    as HTML once Markdown has run. LaTeX (``$$...$$`` display, ``$...$``
    inline) is emitted verbatim for a client-side math renderer.

Key Functions:
    - format_rich_text(): RichText -> HTML fragment
    - render_markdown(): Inline Markdown with line breaks

Dependencies:
    - markdown: Markdown to HTML
    - core.richtext.tokens: token grammar

Used By:
    - rendering.renderer: per-type question renderers
"""

from __future__ import annotations

import html
import re
from typing import List, Optional, Tuple

import markdown

from assessment_toolkit.core.richtext import (
    GapToken,
    ImageToken,
    as_resolver,
    replace_gaps,
    replace_image_tokens,
)
from assessment_toolkit.core.richtext.resolution import ResolverLike

# Private-use delimiters; never produced by Markdown
PLACEHOLDER_OPEN = "\ue000"
PLACEHOLDER_CLOSE = "\ue001"

DISPLAY_MATH_RE = re.compile(r"\$\$([^$]+)\$\$")
INLINE_MATH_RE = re.compile(r"\$([^$]+)\$")

DEFAULT_IMAGE_STYLE = "max-width:100%; max-height:200px;"

_MARKDOWN_EXTENSIONS = ["nl2br", "sane_lists"]
_SINGLE_PARAGRAPH_RE = re.compile(r"\A<p>(.*)</p>\Z", re.DOTALL)


class _Placeholders:
    """Holds HTML fragments keyed by placeholder text."""

    def __init__(self) -> None:
        self._fragments: List[Tuple[str, str]] = []

    def hold(self, kind: str, fragment: str) -> str:
        key = f"{PLACEHOLDER_OPEN}{kind}{len(self._fragments)}{PLACEHOLDER_CLOSE}"
        self._fragments.append((key, fragment))
        return key

    def restore(self, text: str) -> str:
        for key, fragment in self._fragments:
            text = text.replace(key, fragment, 1)
        return text


# ─────────────────────────────────────────────────────────────────────────────
# Token markup
# ─────────────────────────────────────────────────────────────────────────────

def image_html(token: ImageToken, locator: Optional[str]) -> str:
    """
    Markup for one image token.

    Explicit width/height become pixel sizes; with neither the image is
    capped to the container. An unresolved image renders a visible
    placeholder naming the id.
    """
    alt = html.escape(token.id)
    if not locator:
        return f'<div class="p-asset-placeholder">[Image: {alt}]</div>'

    style = ""
    if token.width:
        style += f"width:{token.width}px;"
    if token.height:
        style += f"height:{token.height}px;"
    if not style:
        style = DEFAULT_IMAGE_STYLE
    return (
        f'<div class="p-asset"><img src="{html.escape(locator)}" '
        f'alt="{alt}" style="{style}"></div>'
    )


def gap_html(gap: GapToken) -> str:
    """Markup for one gap; legacy blanks and gap tokens look the same."""
    return f'<span class="p-gap" style="width:{gap.pixel_width}px;">&nbsp;</span>'


def render_markdown(text: str) -> str:
    """
    Render Markdown inline: newlines become ``<br />`` and a lone
    paragraph is unwrapped.
    """
    if not text:
        return ""
    rendered = markdown.markdown(text, extensions=_MARKDOWN_EXTENSIONS)
    match = _SINGLE_PARAGRAPH_RE.match(rendered)
    if match and "<p>" not in match.group(1):
        return match.group(1)
    return rendered


def format_rich_text(text: object, image_resolver: Optional[ResolverLike] = None) -> str:
    """
    Format a RichText string as HTML.

    Steps:
        1. Image tokens -> placeholders (resolved ``<img>`` or a marker)
        2. Gap tokens, or legacy underscore blanks when the string has no
           gap token -> placeholders for gap spans
        3. LaTeX math -> placeholders holding the source, HTML-escaped only
        4. Markdown rendered inline
        5. Placeholders restored

    Args:
        text: RichText; None or empty yields ""
        image_resolver: ``id -> URL`` callable or mapping

    Returns:
        HTML fragment

    Example:
        >>> format_rich_text("Solve $x^2 = 4$: [[gap]]")
        'Solve $x^2 = 4$: <span class="p-gap" style="width:60px;">&nbsp;</span>'
    """
    if not text or not isinstance(text, str):
        return ""

    lookup = as_resolver(image_resolver)
    held = _Placeholders()

    result = replace_image_tokens(
        text, lambda token, original: held.hold("IMG", image_html(token, lookup(token.id)))
    )
    result = replace_gaps(result, lambda gap: held.hold("GAP", gap_html(gap)))
    hold_math = lambda m: held.hold("MATH", html.escape(m.group(0), quote=False))
    result = DISPLAY_MATH_RE.sub(hold_math, result)
    result = INLINE_MATH_RE.sub(hold_math, result)

    return held.restore(render_markdown(result))
