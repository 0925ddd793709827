"""
Naming strategies for thumbnail files.

A naming strategy is any callable ``(original_name, param) -> new_name``.
The stock strategies below cover the usual prefix/suffix conventions.
"""
from pathlib import Path
from typing import Iterator, Optional, Protocol, Union

from .core.exceptions import IllegalArgumentError
from .core.interfaces import ThumbnailParameter


class NamingStrategy(Protocol):
    """Protocol for thumbnail naming strategies."""
    def __call__(self, name: str, param: Optional[ThumbnailParameter] = None) -> str: ...


def append_prefix(name: str, prefix: str) -> str:
    return prefix + name


def append_suffix(name: str, suffix: str) -> str:
    """Insert suffix before the extension (``a.jpg`` -> ``a-thumbnail.jpg``)."""
    stem, dot, extension = name.rpartition('.')
    if not dot:
        return name + suffix
    return f"{stem}{suffix}.{extension}"


def prefix(text: str) -> NamingStrategy:
    """Strategy that puts text in front of the original name."""
    def strategy(name: str, param: Optional[ThumbnailParameter] = None) -> str:
        return append_prefix(name, text)
    return strategy


def suffix(text: str) -> NamingStrategy:
    """Strategy that puts text between the original stem and extension."""
    def strategy(name: str, param: Optional[ThumbnailParameter] = None) -> str:
        return append_suffix(name, text)
    return strategy


def no_change(name: str, param: Optional[ThumbnailParameter] = None) -> str:
    return name


NO_CHANGE = no_change
PREFIX_DOT_THUMBNAIL = prefix("thumbnail.")
PREFIX_HYPHEN_THUMBNAIL = prefix("thumbnail-")
SUFFIX_DOT_THUMBNAIL = suffix(".thumbnail")
SUFFIX_HYPHEN_THUMBNAIL = suffix("-thumbnail")


class ConsecutivelyNumberedFilenames:
    """
    Endless sequence of numbered file paths, independent of source names.

    Example:
        names = ConsecutivelyNumberedFilenames(out_dir, "thumb-%d.jpg", start=1)
        next(names)  # out_dir / "thumb-1.jpg"
    """

    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        pattern: str = "%d",
        start: int = 0
    ):
        if directory is not None:
            directory = Path(directory)
            if not directory.is_dir():
                raise IllegalArgumentError(
                    "Specified path is not a directory or does not exist."
                )
        self.directory = directory
        self.pattern = pattern
        self._count = start

    def __iter__(self) -> Iterator[Path]:
        return self

    def __next__(self) -> Path:
        name = self.pattern % self._count
        self._count += 1
        return self.directory / name if self.directory is not None else Path(name)
