"""
Tests for image sources.
"""
import pytest
from io import BytesIO
from pathlib import Path
from unittest.mock import MagicMock, patch
from PIL import Image
import numpy as np
import requests

from thumbkit.core.exceptions import (
    DecodeError,
    IllegalArgumentError,
    IllegalStateError,
    SourceReadError,
)
from thumbkit.tasks.sources import (
    BitmapImageSource,
    FileImageSource,
    StreamImageSource,
    UrlImageSource,
    make_source,
)


def _png_bytes(size=(64, 32)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, "green").save(buffer, "PNG")
    return buffer.getvalue()


class TestFileImageSource:
    """Tests for FileImageSource."""

    def test_read(self, sample_image):
        item = FileImageSource(sample_image).read()
        assert item.size == (800, 600)
        assert item.origin_format == "JPEG"
        assert item.origin_name == "test_image.jpg"

    def test_is_file_backed(self, sample_image):
        assert FileImageSource(sample_image).is_file_backed is True

    def test_format_from_content_not_name(self, temp_dir):
        misnamed = temp_dir / "actually_png.jpg"
        misnamed.write_bytes(_png_bytes())
        assert FileImageSource(misnamed).read().origin_format == "PNG"

    def test_reads_orientation(self, exif_rotated_image):
        assert FileImageSource(exif_rotated_image).read().orientation == 6

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError, match="Could not find file"):
            FileImageSource(temp_dir / "nope.jpg").read()

    def test_not_an_image(self, temp_dir):
        text = temp_dir / "notes.jpg"
        text.write_text("not an image")
        with pytest.raises(DecodeError, match="No suitable image reader"):
            FileImageSource(text).read()

    def test_readable_repeatedly(self, sample_image):
        source = FileImageSource(sample_image)
        assert source.read().size == source.read().size

    def test_none(self):
        with pytest.raises(IllegalArgumentError):
            FileImageSource(None)


class TestUrlImageSource:
    """Tests for UrlImageSource with the network mocked out."""

    def test_read(self):
        response = MagicMock(content=_png_bytes())
        with patch("thumbkit.tasks.sources.requests.get", return_value=response) as get:
            item = UrlImageSource("https://example.com/img/cat.png", timeout=3).read()

        get.assert_called_once_with("https://example.com/img/cat.png", headers={}, timeout=3)
        response.raise_for_status.assert_called_once()
        assert item.size == (64, 32)
        assert item.origin_format == "PNG"

    def test_origin_name(self):
        assert UrlImageSource("https://example.com/a/b.jpg?x=1").origin_name == "b.jpg"
        assert UrlImageSource("https://example.com/").origin_name is None

    def test_not_file_backed(self):
        assert UrlImageSource("https://example.com/a.jpg").is_file_backed is False

    def test_connection_error(self):
        with patch(
            "thumbkit.tasks.sources.requests.get",
            side_effect=requests.ConnectionError("down"),
        ):
            with pytest.raises(SourceReadError, match="Could not open connection"):
                UrlImageSource("https://example.com/a.jpg").read()

    def test_http_error(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("404")
        with patch("thumbkit.tasks.sources.requests.get", return_value=response):
            with pytest.raises(SourceReadError):
                UrlImageSource("https://example.com/a.jpg").read()

    def test_not_an_image(self):
        response = MagicMock(content=b"<html></html>")
        with patch("thumbkit.tasks.sources.requests.get", return_value=response):
            with pytest.raises(DecodeError, match="Could not obtain image from URL"):
                UrlImageSource("https://example.com/a.jpg").read()


class TestStreamImageSource:
    """Tests for StreamImageSource."""

    def test_read(self):
        stream = BytesIO(_png_bytes())
        item = StreamImageSource(stream).read()
        assert item.size == (64, 32)
        assert item.origin_name is None
        assert not stream.closed

    def test_single_use(self):
        source = StreamImageSource(BytesIO(_png_bytes()))
        source.read()
        with pytest.raises(IllegalStateError, match="already been consumed"):
            source.read()

    def test_origin_name_from_file(self, sample_image):
        with open(sample_image, "rb") as f:
            source = StreamImageSource(f)
            assert source.origin_name == "test_image.jpg"
            assert source.is_file_backed is False


class TestBitmapImageSource:
    """Tests for BitmapImageSource."""

    def test_pil_image(self, bitmap):
        item = BitmapImageSource(bitmap).read()
        assert item.image is bitmap
        assert item.origin_format is None
        assert item.orientation is None

    def test_numpy_array(self, array_image):
        item = BitmapImageSource(array_image).read()
        assert item.size == (300, 200)


class TestMakeSource:
    """Tests for make_source() dispatch."""

    def test_dispatch(self, sample_image, bitmap, array_image):
        assert isinstance(make_source(sample_image), FileImageSource)
        assert isinstance(make_source(str(sample_image)), FileImageSource)
        assert isinstance(make_source("http://example.com/a.jpg"), UrlImageSource)
        assert isinstance(make_source(BytesIO(b"")), StreamImageSource)
        assert isinstance(make_source(bitmap), BitmapImageSource)
        assert isinstance(make_source(array_image), BitmapImageSource)

    def test_passes_sources_through(self, bitmap):
        source = BitmapImageSource(bitmap)
        assert make_source(source) is source

    def test_unsupported(self):
        with pytest.raises(IllegalArgumentError, match="Unsupported image source"):
            make_source(42)
