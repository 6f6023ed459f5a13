"""
Module: core.richtext.resolution

Purpose:
    The two image rewrite modes built on the traversal engine. Both work on
    a deep copy and return it; the caller's question is never modified.

    Preview: each image token becomes ``![id](locator)``; an id the resolver
    cannot answer becomes ``[Missing: id]`` so broken references stay visible.

    Publish: each image token becomes ``![id](locator)``; an id the resolver
    cannot answer keeps its original token text, so leftovers can be found
    afterwards with ``extract_image_tags``.

Key Functions:
    - resolve_images_for_preview()
    - resolve_images_for_publish()
    - as_resolver(): Adapt a mapping or callable to ``id -> locator | None``

Dependencies:
    - copy (std)
    - .traversal, .tokens

Used By:
    - rendering.preview
    - cli
"""

from __future__ import annotations

import copy
import logging
from typing import Callable, Mapping, Optional, TypeVar, Union

from assessment_toolkit.core.models import Question, SubQuestion

from .tokens import ImageToken, replace_image_tokens
from .traversal import traverse_rich_text

logger = logging.getLogger(__name__)

ImageResolver = Callable[[str], Optional[str]]
ResolverLike = Union[ImageResolver, Mapping[str, Optional[str]]]

Q = TypeVar("Q", Question, SubQuestion)


def as_resolver(resolver: Optional[ResolverLike]) -> ImageResolver:
    """
    Normalize ``resolver`` to a callable.

    Args:
        resolver: Callable, mapping of id to locator, or None (resolves nothing)

    Returns:
        Callable returning a locator string or None; empty strings count as None
    """
    if resolver is None:
        return lambda image_id: None
    if isinstance(resolver, Mapping):
        return lambda image_id: resolver.get(image_id) or None
    if callable(resolver):
        return lambda image_id: resolver(image_id) or None
    raise TypeError(f"Image resolver must be callable or a mapping, got {type(resolver).__name__}")


def markdown_image(image_id: str, locator: str) -> str:
    return f"![{image_id}]({locator})"


def missing_image_marker(image_id: str) -> str:
    return f"[Missing: {image_id}]"


def _rewrite(question: Q, rewrite_token: Callable[[ImageToken, str], Optional[str]]) -> Q:
    resolved = copy.deepcopy(question)
    traverse_rich_text(resolved, lambda text, path: replace_image_tokens(text, rewrite_token))
    return resolved


def resolve_images_for_preview(question: Q, resolver: Optional[ResolverLike]) -> Q:
    """
    Rewrite image tokens for on-screen preview.

    Args:
        question: Question to resolve (left untouched)
        resolver: ``id -> locator`` (typically a data URL) or mapping

    Returns:
        Deep copy with every image token replaced

    Example:
        >>> preview = resolve_images_for_preview(q, {"fig1": "data:image/png;base64,..."})
    """
    lookup = as_resolver(resolver)
    missing = []

    def _token(token: ImageToken, original: str) -> str:
        locator = lookup(token.id)
        if locator:
            return markdown_image(token.id, locator)
        missing.append(token.id)
        return missing_image_marker(token.id)

    resolved = _rewrite(question, _token)
    if missing:
        logger.debug(f"Preview of {question.id} has unresolved images: {sorted(set(missing))}")
    return resolved


def resolve_images_for_publish(question: Q, resolver: Optional[ResolverLike]) -> Q:
    """
    Rewrite image tokens to permanent locations for publishing.

    Unresolved tokens are kept verbatim.

    Args:
        question: Question to resolve (left untouched)
        resolver: ``id -> permanent URL`` or mapping

    Returns:
        Deep copy with every resolvable image token replaced
    """
    lookup = as_resolver(resolver)
    kept = []

    def _token(token: ImageToken, original: str) -> Optional[str]:
        locator = lookup(token.id)
        if locator:
            return markdown_image(token.id, locator)
        kept.append(token.id)
        return None

    resolved = _rewrite(question, _token)
    if kept:
        logger.warning(f"Publish of {question.id} left unresolved image tokens: {sorted(set(kept))}")
    return resolved
