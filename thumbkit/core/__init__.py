"""
Core module - Interfaces, data types, and errors for thumbkit.
"""
from .interfaces import (
    # Sentinels
    ORIGINAL_FORMAT,
    DETERMINE_FORMAT,

    # Enums
    FitMode,
    ResamplingAlgorithm,
    PipelineState,

    # Data classes
    SizeSpec,
    ThumbnailParameter,
    ThumbnailConfig,
    SourceItem,
    WriteResult,

    # Abstract interfaces
    IImageSource,
    IImageSink,
    IResampler,
)
from .exceptions import (
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

__all__ = [
    # Sentinels
    "ORIGINAL_FORMAT",
    "DETERMINE_FORMAT",

    # Enums
    "FitMode",
    "ResamplingAlgorithm",
    "PipelineState",

    # Data classes
    "SizeSpec",
    "ThumbnailParameter",
    "ThumbnailConfig",
    "SourceItem",
    "WriteResult",

    # Abstract interfaces
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
]
