"""
Custom exceptions for thumbkit.

Every error raised by the pipeline derives from ThumbnailError. Validation
problems are detected before any source is read; read/decode/encode
problems are raised per item.
"""


class ThumbnailError(Exception):
    """Base exception for all thumbkit errors."""

    pass


class ValidationError(ThumbnailError):
    """Configuration or source/destination combination is not usable."""

    pass


class IllegalArgumentError(ValidationError, ValueError):
    """An argument given to the pipeline is not acceptable."""

    pass


class IllegalStateError(ValidationError, RuntimeError):
    """The pipeline is not in a state where the requested call can proceed."""

    pass


class OverwriteDisallowedError(IllegalArgumentError):
    """Destination file exists and overwriting was disabled."""

    def __init__(self, path=None, message: str = "The destination file exists."):
        super().__init__(message)
        self.path = path


class InvalidSourceError(IllegalArgumentError):
    """Source image has dimensions a thumbnail cannot be computed from."""

    pass


class SourceReadError(ThumbnailError, OSError):
    """Source bytes could not be obtained (e.g. unreachable URL)."""

    pass


class DecodeError(ThumbnailError, OSError):
    """Source bytes are not a decodable image."""

    pass


class EncodeError(ThumbnailError, OSError):
    """Thumbnail could not be encoded to the requested format."""

    pass


class UnsupportedFormatError(EncodeError):
    """No encoder is available for the requested format."""

    def __init__(self, format_name, message: str = None):
        super().__init__(message or f"No suitable image writer found for {format_name}.")
        self.format_name = format_name


class NoSuchElementError(ThumbnailError, StopIteration):
    """A lazy thumbnail sequence was pulled past its last item."""

    pass
