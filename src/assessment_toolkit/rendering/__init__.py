"""
Module: rendering

Purpose:
    HTML rendering of canonical questions: RichText formatting, per-type
    question markup, wrapped previews, print layout descriptors and an
    image store usable as a resolver.

Key Functions:
    - format_rich_text(): RichText -> HTML fragment
    - render_question_html(): Question -> HTML block
    - render_preview_html(): Question -> styled preview
    - generate_layout_json(): Question -> print layout

Key Classes:
    - RenderOptions: Render configuration
    - ImageStore: Images by token id (Pillow)

Dependencies:
    - markdown: Markdown rendering
    - PIL: Image decoding

Used By:
    - cli
"""

from .config import RenderOptions
from .rich_text import format_rich_text, render_markdown
from .renderer import (
    cell_border_style,
    composite_word_bank,
    render_question_html,
    shared_options_pool,
)
from .preview import preview_styles, render_preview_html
from .layout import generate_layout_json
from .images import ImageStore, ImageStoreError, StoredImage

__all__ = [
    "RenderOptions",
    "format_rich_text",
    "render_markdown",
    "cell_border_style",
    "render_question_html",
    "composite_word_bank",
    "shared_options_pool",
    "preview_styles",
    "render_preview_html",
    "generate_layout_json",
    "ImageStore",
    "ImageStoreError",
    "StoredImage",
]
