"""
ThumbnailProcessor - Convenience facade over ThumbnailBuilder.
Covers the common one-call cases: one image, one file, one stream, many files.
"""
from pathlib import Path
from typing import Iterable, List, Optional, Union
from dataclasses import dataclass
from PIL import Image
import logging

from .builder import ThumbnailBuilder
from .core.interfaces import ResamplingAlgorithm
from .image.codec import CodecConfig, ImageCodec
from .naming import NamingStrategy, PREFIX_DOT_THUMBNAIL

logger = logging.getLogger(__name__)


@dataclass
class ProcessorConfig:
    """Configuration for the convenience facade."""
    default_rename: NamingStrategy = PREFIX_DOT_THUMBNAIL
    algorithm: ResamplingAlgorithm = ResamplingAlgorithm.BILINEAR
    allow_overwrite: bool = True
    codec: Optional[CodecConfig] = None


class ThumbnailProcessor:
    """
    One-call thumbnail creation with a shared configuration.

    Example:
        processor = ThumbnailProcessor()

        thumb = processor.create_thumbnail(img, 160, 160)
        processor.create_thumbnail_file("photo.jpg", "thumb.png", 160, 160)
        written = processor.create_thumbnails(paths, width=320, height=240)
    """

    def __init__(self, config: Optional[ProcessorConfig] = None):
        self.config = config or ProcessorConfig()
        self.codec = ImageCodec(self.config.codec)

    def builder(self, *sources) -> ThumbnailBuilder:
        """Builder for sources, preconfigured with this processor's settings."""
        return (
            ThumbnailBuilder(sources, codec=self.codec)
            .resampling(self.config.algorithm)
            .allow_overwrite(self.config.allow_overwrite)
        )

    def create_thumbnail(self, image: Image.Image, width: int, height: int) -> Image.Image:
        """Thumbnail of an in-memory image, fit within width x height."""
        return self.builder(image).size(width, height).as_image()

    def create_thumbnail_file(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path],
        width: int,
        height: int
    ) -> Path:
        """
        Thumbnail of an image file written to another file.

        The output format follows output_path's extension, else the input's
        format.

        Returns:
            The path actually written
        """
        logger.info(f"Creating thumbnail: {input_path} -> {output_path}")
        return self.builder(Path(input_path)).size(width, height).as_file(output_path)

    def create_thumbnail_stream(
        self,
        input_stream,
        output_stream,
        width: int,
        height: int,
        format_name: Optional[str] = None
    ) -> None:
        """Thumbnail of an image read from a stream, written to another stream."""
        builder = ThumbnailBuilder.from_streams([input_stream], codec=self.codec)
        builder.resampling(self.config.algorithm).size(width, height)
        if format_name is not None:
            builder.output_format(format_name)
        builder.to_stream(output_stream)

    def create_thumbnails(
        self,
        files: Iterable[Union[str, Path]],
        rename: Optional[NamingStrategy] = None,
        width: int = 160,
        height: int = 160,
        directory: Optional[Union[str, Path]] = None
    ) -> List[Path]:
        """
        Thumbnails of many image files, named by a naming strategy.

        Args:
            files: Source image files
            rename: Naming strategy, the configured default if None
            width: Maximum thumbnail width
            height: Maximum thumbnail height
            directory: Output folder, each source's own folder if None

        Returns:
            Paths written; destinations refused by the overwrite policy are
            left out
        """
        rename = rename or self.config.default_rename
        builder = ThumbnailBuilder.from_files(files, codec=self.codec)
        builder.resampling(self.config.algorithm).allow_overwrite(self.config.allow_overwrite)
        return builder.size(width, height).as_files(rename, directory)
