"""
Image sources: files, URLs, byte streams and in-memory bitmaps.

Every source produces a SourceItem holding a decoded bitmap plus whatever is
known about where it came from. Sources never modify their originals.
"""
from abc import abstractmethod
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urlparse
import logging

import numpy as np
import requests
from PIL import Image

from ..core.exceptions import (
    DecodeError,
    IllegalArgumentError,
    IllegalStateError,
    SourceReadError,
)
from ..core.interfaces import IImageSource, SourceItem, ThumbnailParameter
from ..image.codec import ImageCodec

logger = logging.getLogger(__name__)


class AbstractImageSource(IImageSource):
    """Source whose content arrives as encoded bytes."""

    def __init__(self, codec: Optional[ImageCodec] = None):
        self.codec = codec or ImageCodec()

    @abstractmethod
    def _read_bytes(self) -> bytes:
        pass

    def read(self, param: Optional[ThumbnailParameter] = None) -> SourceItem:
        data = self._read_bytes()
        decoded = self.codec.decode(data)
        return SourceItem(
            image=decoded.image,
            origin_name=self.origin_name,
            origin_format=decoded.format,
            orientation=decoded.orientation,
        )


class FileImageSource(AbstractImageSource):
    """Image stored in a local file. May be read any number of times."""

    def __init__(self, path: Union[str, Path], codec: Optional[ImageCodec] = None):
        super().__init__(codec)
        if path is None:
            raise IllegalArgumentError("File cannot be None.")
        self.path = Path(path)

    @property
    def origin_name(self) -> Optional[str]:
        return self.path.name

    @property
    def is_file_backed(self) -> bool:
        return True

    def _read_bytes(self) -> bytes:
        if not self.path.is_file():
            raise FileNotFoundError(f"Could not find file: {self.path.absolute()}")
        with open(self.path, "rb") as f:
            return f.read()

    def read(self, param: Optional[ThumbnailParameter] = None) -> SourceItem:
        try:
            return super().read(param)
        except DecodeError as e:
            raise DecodeError(f"No suitable image reader found for {self.path.absolute()}.") from e

    def __repr__(self) -> str:
        return f"FileImageSource({str(self.path)!r})"


class UrlImageSource(AbstractImageSource):
    """Image fetched over HTTP(S)."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        headers: Optional[dict] = None,
        codec: Optional[ImageCodec] = None
    ):
        super().__init__(codec)
        if not url:
            raise IllegalArgumentError("URL cannot be empty.")
        self.url = url
        self.timeout = timeout
        self.headers = headers or {}

    @property
    def origin_name(self) -> Optional[str]:
        name = Path(urlparse(self.url).path).name
        return name or None

    def _read_bytes(self) -> bytes:
        try:
            response = requests.get(self.url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SourceReadError(f"Could not open connection to URL: {self.url}") from e
        return response.content

    def read(self, param: Optional[ThumbnailParameter] = None) -> SourceItem:
        try:
            return super().read(param)
        except DecodeError as e:
            raise DecodeError(f"Could not obtain image from URL: {self.url}") from e

    def __repr__(self) -> str:
        return f"UrlImageSource({self.url!r})"


class StreamImageSource(AbstractImageSource):
    """
    Image read from a binary file-like object.

    The stream is read to its end exactly once and is not closed; reading
    the same source again is an error.
    """

    def __init__(self, stream, codec: Optional[ImageCodec] = None):
        super().__init__(codec)
        if stream is None:
            raise IllegalArgumentError("Stream cannot be None.")
        self.stream = stream
        self._consumed = False

    @property
    def origin_name(self) -> Optional[str]:
        name = getattr(self.stream, "name", None)
        if isinstance(name, (str, Path)):
            return Path(name).name
        return None

    def _read_bytes(self) -> bytes:
        if self._consumed:
            raise IllegalStateError("The stream has already been consumed.")
        self._consumed = True
        return self.stream.read()


class BitmapImageSource(IImageSource):
    """In-memory bitmap (PIL image or numpy array). No decoding involved."""

    def __init__(self, image: Union[Image.Image, np.ndarray]):
        if image is None:
            raise IllegalArgumentError("Image cannot be None.")
        if isinstance(image, np.ndarray):
            image = Image.fromarray(image)
        self.image = image

    @property
    def origin_name(self) -> Optional[str]:
        return None

    def read(self, param: Optional[ThumbnailParameter] = None) -> SourceItem:
        return SourceItem(image=self.image)


def make_source(obj: Any, codec: Optional[ImageCodec] = None) -> IImageSource:
    """Wrap a path, URL, stream or bitmap in the matching source type."""
    if isinstance(obj, IImageSource):
        return obj
    if isinstance(obj, (Image.Image, np.ndarray)):
        return BitmapImageSource(obj)
    if isinstance(obj, Path):
        return FileImageSource(obj, codec=codec)
    if isinstance(obj, str):
        if urlparse(obj).scheme in ("http", "https"):
            return UrlImageSource(obj, codec=codec)
        return FileImageSource(obj, codec=codec)
    if hasattr(obj, "read"):
        return StreamImageSource(obj, codec=codec)
    raise IllegalArgumentError(f"Unsupported image source: {type(obj).__name__}")
