"""
thumbkit - Thumbnail generation toolkit.

Turns image files, URLs, byte streams and in-memory bitmaps into
thumbnails:
- Fit-within, exact and scale-factor sizing
- Multi-pass bilinear downscaling for good quality at small sizes
- EXIF orientation correction
- Output to files (with naming strategies), streams or bitmaps
- Eager batches or lazy, one-at-a-time iteration

Built on Pillow.

Example usage:
    from thumbkit import ThumbnailBuilder, PREFIX_DOT_THUMBNAIL

    # Fit a single file within 200x200
    ThumbnailBuilder.of("photo.jpg").size(200, 200).to_file("thumb.jpg")

    # Scale a folder of images to 25%, writing thumbnail.<name> beside each
    ThumbnailBuilder.from_directory("photos").scale(0.25).to_files(PREFIX_DOT_THUMBNAIL)

    # Facade for one-call use
    from thumbkit import ThumbnailProcessor

    processor = ThumbnailProcessor()
    thumb = processor.create_thumbnail(img, 160, 160)
"""

from .builder import ThumbnailBuilder, ThumbnailIterator, PipelineRun
from .processor import ThumbnailProcessor, ProcessorConfig
from .core.interfaces import (
    ORIGINAL_FORMAT,
    DETERMINE_FORMAT,
    FitMode,
    ResamplingAlgorithm,
    PipelineState,
    SizeSpec,
    ThumbnailParameter,
    ThumbnailConfig,
    IImageSource,
    IImageSink,
    IResampler,
)
from .core.exceptions import (
    ThumbnailError,
    ValidationError,
    IllegalArgumentError,
    IllegalStateError,
    OverwriteDisallowedError,
    InvalidSourceError,
    SourceReadError,
    DecodeError,
    EncodeError,
    UnsupportedFormatError,
    NoSuchElementError,
)
from .image import (
    OrientationFixer,
    SizeResolver,
    Resampler,
    ImageCodec,
    CodecConfig,
)
from .tasks import (
    FileImageSource,
    UrlImageSource,
    StreamImageSource,
    BitmapImageSource,
    FileImageSink,
    StreamImageSink,
    BitmapImageSink,
    ThumbnailTask,
)
from .naming import (
    NamingStrategy,
    ConsecutivelyNumberedFilenames,
    NO_CHANGE,
    PREFIX_DOT_THUMBNAIL,
    PREFIX_HYPHEN_THUMBNAIL,
    SUFFIX_DOT_THUMBNAIL,
    SUFFIX_HYPHEN_THUMBNAIL,
)
from .core.extensions import (
    IMAGE_EXTENSIONS,
    is_image,
    supported_output_formats,
)

__version__ = "1.0.0"

__all__ = [
    # Builder
    "ThumbnailBuilder",
    "ThumbnailIterator",
    "PipelineRun",

    # Facade
    "ThumbnailProcessor",
    "ProcessorConfig",

    # Core types
    "ORIGINAL_FORMAT",
    "DETERMINE_FORMAT",
    "FitMode",
    "ResamplingAlgorithm",
    "PipelineState",
    "SizeSpec",
    "ThumbnailParameter",
    "ThumbnailConfig",
    "IImageSource",
    "IImageSink",
    "IResampler",

    # Errors
    "ThumbnailError",
    "ValidationError",
    "IllegalArgumentError",
    "IllegalStateError",
    "OverwriteDisallowedError",
    "InvalidSourceError",
    "SourceReadError",
    "DecodeError",
    "EncodeError",
    "UnsupportedFormatError",
    "NoSuchElementError",

    # Image processing
    "OrientationFixer",
    "SizeResolver",
    "Resampler",
    "ImageCodec",
    "CodecConfig",

    # Sources and sinks
    "FileImageSource",
    "UrlImageSource",
    "StreamImageSource",
    "BitmapImageSource",
    "FileImageSink",
    "StreamImageSink",
    "BitmapImageSink",
    "ThumbnailTask",

    # Naming
    "NamingStrategy",
    "ConsecutivelyNumberedFilenames",
    "NO_CHANGE",
    "PREFIX_DOT_THUMBNAIL",
    "PREFIX_HYPHEN_THUMBNAIL",
    "SUFFIX_DOT_THUMBNAIL",
    "SUFFIX_HYPHEN_THUMBNAIL",

    # Extensions
    "IMAGE_EXTENSIONS",
    "is_image",
    "supported_output_formats",
]
