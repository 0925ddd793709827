"""
Thumbnail destinations: files, streams and in-memory bitmaps.
"""
from pathlib import Path
from typing import Any, Optional, Union
import logging

from PIL import Image

from ..core.exceptions import (
    IllegalArgumentError,
    IllegalStateError,
    OverwriteDisallowedError,
    UnsupportedFormatError,
)
from ..core.extensions import (
    extension_matches_format,
    format_from_path,
    preferred_extension,
)
from ..core.interfaces import IImageSink, ThumbnailParameter, WriteResult
from ..image.codec import ImageCodec

logger = logging.getLogger(__name__)


class FileImageSink(IImageSink):
    """
    Writes an encoded thumbnail to a file.

    If the file name's extension does not belong to the output format, the
    format's extension is appended (``a.png`` written as JPEG becomes
    ``a.png.jpg``). The final path is available as ``destination`` after
    writing.
    """

    requires_format = True

    def __init__(
        self,
        path: Union[str, Path],
        allow_overwrite: Optional[bool] = None,
        codec: Optional[ImageCodec] = None
    ):
        if path is None:
            raise IllegalArgumentError("File cannot be None.")
        self.path = Path(path)
        self.allow_overwrite = allow_overwrite
        self.codec = codec or ImageCodec()
        self.destination: Optional[Path] = None

    def preferred_format(self) -> Optional[str]:
        return format_from_path(self.path)

    def resolve_path(self, format_name: str) -> Path:
        """Destination path after extension reconciliation."""
        if extension_matches_format(self.path, format_name):
            return self.path
        extension = preferred_extension(format_name)
        if extension is None:
            raise UnsupportedFormatError(format_name)
        return self.path.with_name(self.path.name + extension)

    def write(
        self,
        image: Image.Image,
        format_name: Optional[str],
        param: ThumbnailParameter
    ) -> WriteResult:
        if format_name is None:
            raise IllegalStateError("Output format not specified.")

        target = self.resolve_path(format_name)
        allow = param.allow_overwrite if self.allow_overwrite is None else self.allow_overwrite
        if not allow and target.exists():
            raise OverwriteDisallowedError(target)

        # Encode before touching the file so a failed encode leaves it intact.
        data = self.codec.encode(image, format_name, param.output_quality)
        with open(target, "wb") as f:
            f.write(data)

        self.destination = target
        logger.debug(f"Wrote {target} ({format_name}, {len(data)} bytes)")
        return WriteResult(target=target, format_name=format_name)

    def __repr__(self) -> str:
        return f"FileImageSink({str(self.path)!r})"


class StreamImageSink(IImageSink):
    """Writes an encoded thumbnail to a binary file-like object (left open)."""

    requires_format = True

    def __init__(self, stream, codec: Optional[ImageCodec] = None):
        if stream is None:
            raise IllegalArgumentError("Stream cannot be None.")
        self.stream = stream
        self.codec = codec or ImageCodec()

    def preferred_format(self) -> Optional[str]:
        return None

    def write(
        self,
        image: Image.Image,
        format_name: Optional[str],
        param: ThumbnailParameter
    ) -> WriteResult:
        if format_name is None:
            raise IllegalStateError("Output format not specified.")

        data = self.codec.encode(image, format_name, param.output_quality)
        self.stream.write(data)
        return WriteResult(target=self.stream, format_name=format_name)


class BitmapImageSink(IImageSink):
    """Keeps the thumbnail in memory; nothing is encoded."""

    requires_format = False

    def __init__(self):
        self.image: Optional[Image.Image] = None

    def preferred_format(self) -> Optional[str]:
        return None

    def write(
        self,
        image: Image.Image,
        format_name: Optional[str],
        param: ThumbnailParameter
    ) -> WriteResult:
        self.image = image
        return WriteResult(target=image, format_name=format_name)


def make_sink(obj: Any, allow_overwrite: Optional[bool] = None) -> IImageSink:
    """Wrap a path or writable stream in the matching sink type."""
    if isinstance(obj, IImageSink):
        return obj
    if isinstance(obj, (str, Path)):
        return FileImageSink(obj, allow_overwrite)
    if hasattr(obj, "write"):
        return StreamImageSink(obj)
    raise IllegalArgumentError(f"Unsupported destination: {type(obj).__name__}")
