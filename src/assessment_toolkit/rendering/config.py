"""
Module: rendering.config

Purpose:
    Options for HTML rendering and the container style defaults.

Key Classes:
    - RenderOptions: Immutable render options

Dependencies:
    - dataclasses (std)

Used By:
    - rendering.renderer: question HTML
    - rendering.preview: wrapped preview HTML
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from assessment_toolkit.core.richtext import ImageResolver, as_resolver
from assessment_toolkit.core.richtext.resolution import ResolverLike


DEFAULT_FONT_FAMILY = "Noto Sans, sans-serif"
DEFAULT_FONT_SIZE = "11pt"
DEFAULT_LINE_HEIGHT = "1.5"

BORDER_COLOR = "#d1d5db"


@dataclass(frozen=True)
class RenderOptions:
    """
    Configuration for question rendering (immutable).

    Attributes:
        image_resolver: ``id -> URL`` callable or mapping; None resolves nothing
        question_number: Number shown before the prompt; defaults to the question id
        show_marks: Whether to show the ``[marks]`` badge
        wrapper_class: CSS class of the preview wrapper div; empty for no wrapper
        font_family: Preview font, overriding the question style
        font_size: Preview font size, overriding the question style

    Example:
        >>> options = RenderOptions(image_resolver={"fig1": "img/fig1.png"}, question_number=3)
        >>> options.resolver("fig1")
        'img/fig1.png'
    """

    image_resolver: Optional[ResolverLike] = None
    question_number: Optional[Union[int, str]] = None
    show_marks: bool = True
    wrapper_class: str = "q-preview"
    font_family: Optional[str] = None
    font_size: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.image_resolver is not None and not (
            callable(self.image_resolver) or hasattr(self.image_resolver, "get")
        ):
            raise ValueError(
                f"image_resolver must be callable or a mapping: {self.image_resolver!r}"
            )
        if self.wrapper_class is None:
            raise ValueError("wrapper_class must be a string (use '' for no wrapper)")

    @property
    def resolver(self) -> ImageResolver:
        return as_resolver(self.image_resolver)

    def number_for(self, question_id: str) -> str:
        """Display number: explicit number, else the question id, else "1"."""
        if self.question_number not in (None, ""):
            return str(self.question_number)
        return question_id or "1"
