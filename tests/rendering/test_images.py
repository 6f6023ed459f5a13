"""
Unit Tests for the Image Store
"""

import base64
import logging
from io import BytesIO

import pytest
from PIL import Image

from assessment_toolkit.core.models import Question
from assessment_toolkit.rendering import ImageStore, ImageStoreError, RenderOptions, render_preview_html


def _jpeg_bytes(size=(40, 30)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color="red").save(buf, format="JPEG")
    return buf.getvalue()


class TestImageStore:
    """Tests for ImageStore registration and lookup."""

    def test_add_when_path_then_size_and_mime(self, sample_image):
        store = ImageStore()

        stored = store.add("sample", sample_image)

        assert stored.size == (200, 100)
        assert stored.mime_type == "image/png"
        assert "sample" in store
        assert len(store) == 1

    def test_add_when_bytes_then_kept_as_given(self):
        data = _jpeg_bytes()
        store = ImageStore()

        stored = store.add("photo", data)

        assert stored.data == data
        assert stored.mime_type == "image/jpeg"

    def test_add_when_pil_image_then_png(self):
        stored = ImageStore().add("drawn", Image.new("L", (10, 20)))

        assert stored.mime_type == "image/png"
        assert stored.data.startswith(b"\x89PNG")
        assert stored.size == (10, 20)

    def test_add_when_not_an_image_then_raises(self):
        with pytest.raises(ImageStoreError, match="not a readable image"):
            ImageStore().add("broken", b"definitely not an image")

    def test_add_when_path_missing_then_raises(self, tmp_path):
        with pytest.raises(ImageStoreError, match="Cannot read image"):
            ImageStore().add("gone", tmp_path / "gone.png")

    def test_add_when_empty_id_then_raises(self, sample_image):
        with pytest.raises(ImageStoreError):
            ImageStore().add("", sample_image)

    def test_add_when_id_exists_then_replaced(self, sample_image, caplog):
        store = ImageStore()
        store.add("fig", sample_image)

        with caplog.at_level(logging.DEBUG, logger="assessment_toolkit.rendering.images"):
            store.add("fig", Image.new("RGB", (5, 5)))

        assert store.get("fig").size == (5, 5)
        assert store.ids == ["fig"]
        assert "Replacing image fig" in caplog.text

    def test_get_when_unknown_then_raises(self):
        with pytest.raises(ImageStoreError, match="No image registered"):
            ImageStore().get("nope")

    def test_remove_when_present_then_gone(self, sample_image):
        store = ImageStore()
        store.add("fig", sample_image)

        store.remove("fig")
        store.remove("fig")

        assert "fig" not in store


class TestImageResolution:
    """Tests for data URLs, tokens and missing-image checks."""

    def test_resolve_when_registered_then_data_url(self, sample_image):
        store = ImageStore()
        stored = store.add("fig", sample_image)

        url = store.resolve("fig")

        assert url.startswith("data:image/png;base64,")
        assert base64.b64decode(url.split(",", 1)[1]) == stored.data
        assert store.resolve("other") is None

    def test_token_when_no_limit_then_pixel_size(self, sample_image):
        store = ImageStore()
        store.add("fig", sample_image)

        assert store.token("fig") == "[[image:fig|height:100|width:200]]"

    def test_token_when_max_width_then_scaled(self, sample_image):
        store = ImageStore()
        store.add("fig", sample_image)

        assert store.token("fig", max_width=50) == "[[image:fig|height:25|width:50]]"
        assert store.token("fig", max_width=400) == "[[image:fig|height:100|width:200]]"

    def test_missing_when_some_registered_then_rest(self, mcq_dict, sample_image):
        store = ImageStore()
        store.add("shape1", sample_image)

        assert store.missing(Question.from_dict(mcq_dict)) == {"square", "sol1"}

    def test_store_as_preview_resolver(self, mcq_dict, sample_image):
        store = ImageStore()
        store.add("shape1", sample_image)

        result = render_preview_html(Question.from_dict(mcq_dict), RenderOptions(image_resolver=store.resolve))

        assert 'src="data:image/png;base64,' in result
        assert "[Image: square]" in result
