"""
Module: rendering.images

Purpose:
    In-memory image store keyed by the ids used in image tokens. Keeps the
    encoded bytes and pixel size of each image so previews can resolve
    tokens to data URLs and authoring code can build sized tokens.

Key Classes:
    - ImageStore: Image registry and resolver
    - StoredImage: One registered image
    - ImageStoreError: Unreadable or unknown image

Dependencies:
    - PIL: Decoding, size detection, re-encoding

Used By:
    - rendering.preview (as an image resolver)
    - cli: tags command
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from PIL import Image, UnidentifiedImageError

from assessment_toolkit.core.models import Question
from assessment_toolkit.core.richtext import extract_image_tags, format_image_token

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path, Image.Image]


class ImageStoreError(Exception):
    """Image could not be read, or is not in the store."""
    pass


@dataclass(frozen=True)
class StoredImage:
    """
    One registered image.

    Attributes:
        id: Token id
        data: Encoded image bytes
        mime_type: MIME type of ``data``
        width: Pixel width
        height: Pixel height
    """
    id: str
    data: bytes
    mime_type: str
    width: int
    height: int

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def _encode_png(image: Image.Image) -> bytes:
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


class ImageStore:
    """
    Registry of images by token id.

    Example:
        >>> store = ImageStore()
        >>> store.add("fig1", Path("figures/fig1.png"))
        StoredImage(id='fig1', ..., width=640, height=480)
        >>> store.token("fig1", max_width=320)
        '[[image:fig1|height:240|width:320]]'
        >>> html = render_preview_html(question, RenderOptions(image_resolver=store.resolve))
    """

    def __init__(self) -> None:
        self._images: Dict[str, StoredImage] = {}

    def __contains__(self, image_id: object) -> bool:
        return image_id in self._images

    def __len__(self) -> int:
        return len(self._images)

    @property
    def ids(self) -> List[str]:
        """Registered ids in insertion order."""
        return list(self._images)

    def add(self, image_id: str, source: ImageSource) -> StoredImage:
        """
        Register an image, replacing any image with the same id.

        Args:
            image_id: Token id
            source: Encoded bytes, a file path, or a PIL image (stored as PNG)

        Returns:
            The stored image

        Raises:
            ImageStoreError: If the id is empty or the source is not a readable image
        """
        if not image_id:
            raise ImageStoreError("Image id must not be empty")

        if isinstance(source, Image.Image):
            data = _encode_png(source)
            stored = StoredImage(image_id, data, "image/png", source.width, source.height)
        else:
            if isinstance(source, (str, Path)):
                try:
                    data = Path(source).read_bytes()
                except OSError as e:
                    raise ImageStoreError(f"Cannot read image {image_id!r} from {source}: {e}") from e
            else:
                data = bytes(source)
            stored = self._from_bytes(image_id, data)

        if image_id in self._images:
            logger.debug(f"Replacing image {image_id}")
        self._images[image_id] = stored
        return stored

    @staticmethod
    def _from_bytes(image_id: str, data: bytes) -> StoredImage:
        try:
            with Image.open(BytesIO(data)) as img:
                width, height = img.size
                image_format = img.format
        except (UnidentifiedImageError, OSError) as e:
            raise ImageStoreError(f"Image {image_id!r} is not a readable image: {e}") from e

        mime_type = Image.MIME.get(image_format or "")
        if mime_type is None:
            # Re-encode formats without a browser-friendly MIME type
            with Image.open(BytesIO(data)) as img:
                data = _encode_png(img)
            mime_type = "image/png"
        return StoredImage(image_id, data, mime_type, width, height)

    def get(self, image_id: str) -> StoredImage:
        """
        Raises:
            ImageStoreError: If the id is not registered
        """
        try:
            return self._images[image_id]
        except KeyError:
            raise ImageStoreError(f"No image registered for id {image_id!r}") from None

    def remove(self, image_id: str) -> None:
        self._images.pop(image_id, None)

    def resolve(self, image_id: str) -> Optional[str]:
        """Image resolver: data URL for a registered id, else None."""
        stored = self._images.get(image_id)
        return stored.data_url() if stored else None

    def token(self, image_id: str, *, max_width: Optional[int] = None) -> str:
        """
        Image token carrying the stored pixel size.

        Args:
            image_id: Registered id
            max_width: Scale down proportionally to this width

        Raises:
            ImageStoreError: If the id is not registered
        """
        stored = self.get(image_id)
        width, height = stored.size
        if max_width and width > max_width:
            height = max(1, round(height * max_width / width))
            width = max_width
        return format_image_token(image_id, height=height, width=width)

    def missing(self, question: Question) -> Set[str]:
        """Ids referenced by ``question`` that are not registered."""
        return {tag for tag in extract_image_tags(question) if tag not in self._images}
