"""
ThumbnailBuilder - fluent configuration and orchestration of thumbnail runs.

Example:
    from thumbkit import ThumbnailBuilder, PREFIX_DOT_THUMBNAIL

    # One file to another
    ThumbnailBuilder.of("photo.jpg").size(200, 200).to_file("thumb.jpg")

    # Many files, renamed next to their originals
    ThumbnailBuilder.from_files(paths).scale(0.25).to_files(PREFIX_DOT_THUMBNAIL)

    # In memory, pulled one at a time
    for thumb in ThumbnailBuilder.from_images(images).width(64).iterable_images():
        ...

Every terminal call starts a PipelineRun: the configuration is frozen, all
checks that need no image bytes are made, and only then are sources read,
one item at a time.
"""
from collections.abc import Sized
from contextlib import contextmanager
from itertools import islice
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union
import logging

from natsort import natsorted
from PIL import Image

from .core.exceptions import (
    IllegalArgumentError,
    IllegalStateError,
    NoSuchElementError,
    OverwriteDisallowedError,
)
from .core.extensions import canonical_format, is_image, is_supported_output_format
from .core.interfaces import (
    DETERMINE_FORMAT,
    ORIGINAL_FORMAT,
    IImageSink,
    IImageSource,
    IResampler,
    PipelineState,
    ResamplingAlgorithm,
    SizeSpec,
    ThumbnailConfig,
    ThumbnailParameter,
    WriteResult,
)
from .image.codec import ImageCodec
from .image.resizer import Resampler
from .naming import NamingStrategy
from .tasks.sinks import BitmapImageSink, FileImageSink, StreamImageSink
from .tasks.sources import (
    BitmapImageSource,
    FileImageSource,
    StreamImageSource,
    UrlImageSource,
    make_source,
)
from .tasks.task import ThumbnailTask

logger = logging.getLogger(__name__)

_ALREADY_SET = "already set"
_CANNOT_SET = "cannot set"


class PipelineRun:
    """
    State of one terminal call.

    CONFIGURING -> VALIDATED -> RUNNING -> COMPLETED | FAILED
    """

    def __init__(
        self,
        sources: List[IImageSource],
        config: ThumbnailConfig,
        resampler: IResampler
    ):
        self.sources = list(sources)
        self.config = config
        self.resampler = resampler
        self.param: Optional[ThumbnailParameter] = None
        self.state = PipelineState.CONFIGURING
        self.skipped: List[Path] = []

    @property
    def source_count(self) -> int:
        return len(self.sources)

    @contextmanager
    def validating(self):
        """Freeze the configuration and run checks; any failure fails the run."""
        try:
            self.param = self.config.freeze()
            yield self
        except Exception:
            self.state = PipelineState.FAILED
            raise
        self.state = PipelineState.VALIDATED
        logger.debug(f"Run validated for {self.source_count} source(s): {self.param}")

    @contextmanager
    def running(self):
        if self.state is not PipelineState.VALIDATED:
            raise IllegalStateError(f"Cannot start a run that is {self.state.value}.")
        self.state = PipelineState.RUNNING
        logger.info(f"Creating {self.source_count} thumbnail(s)")
        try:
            yield self
        except Exception:
            self.state = PipelineState.FAILED
            raise
        self.state = PipelineState.COMPLETED

    def process(self, source: IImageSource, sink: IImageSink) -> WriteResult:
        """Run the whole per-item pipeline for one source."""
        try:
            return ThumbnailTask(self.param, source, sink, self.resampler).run()
        except OverwriteDisallowedError:
            raise
        except Exception as e:
            logger.error(f"Error creating thumbnail from {source!r}: {e}")
            raise


class ThumbnailIterator:
    """
    Lazy thumbnail sequence.

    Each next() reads, orients, sizes and resamples exactly one source. An
    error raised by one pull does not affect items already returned, and the
    cursor has moved past the failed source. Pulling after the last item
    raises NoSuchElementError.
    """

    def __init__(self, run: PipelineRun):
        self.run = run
        self._sources = iter(run.sources)
        self._index = 0
        self._failures = 0

    @property
    def index(self) -> int:
        """Number of sources pulled so far."""
        return self._index

    def has_next(self) -> bool:
        return self._index < self.run.source_count

    def __iter__(self) -> Iterator[Image.Image]:
        return self

    def __next__(self) -> Image.Image:
        if not self.has_next():
            if self.run.state is PipelineState.RUNNING or self.run.state is PipelineState.VALIDATED:
                self.run.state = (
                    PipelineState.FAILED if self._failures else PipelineState.COMPLETED
                )
            raise NoSuchElementError("No more thumbnails to create.")

        source = next(self._sources)
        self._index += 1
        if self.run.state is not PipelineState.FAILED:
            self.run.state = PipelineState.RUNNING

        sink = BitmapImageSink()
        try:
            self.run.process(source, sink)
        except Exception:
            self._failures += 1
            self.run.state = PipelineState.FAILED
            raise
        return sink.image


class ThumbnailBuilder:
    """
    Collects sources and thumbnail settings, then creates thumbnails through
    one of the terminal methods (as_*/to_*/iterable_images).
    """

    def __init__(
        self,
        sources: Iterable[Any],
        codec: Optional[ImageCodec] = None,
        resampler: Optional[IResampler] = None
    ):
        if sources is None:
            raise IllegalArgumentError("Cannot specify None for sources.")
        self.codec = codec or ImageCodec()
        self._sources = [make_source(s, self.codec) for s in sources]
        if not self._sources:
            raise IllegalArgumentError("Cannot specify an empty collection of sources.")

        self._config = ThumbnailConfig()
        self._status: Dict[str, str] = {}
        self.resampler = resampler or Resampler()
        self.last_run: Optional[PipelineRun] = None

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, *sources, **kwargs) -> 'ThumbnailBuilder':
        """Sources of any supported kind: paths, URLs, streams, bitmaps."""
        return cls(sources, **kwargs)

    @classmethod
    def from_files(cls, files: Iterable[Union[str, Path]], **kwargs) -> 'ThumbnailBuilder':
        return cls(cls._typed(files, FileImageSource, kwargs.get("codec")), **kwargs)

    from_filenames = from_files

    @classmethod
    def from_urls(cls, urls: Iterable[str], **kwargs) -> 'ThumbnailBuilder':
        return cls(cls._typed(urls, UrlImageSource, kwargs.get("codec")), **kwargs)

    @classmethod
    def from_streams(cls, streams: Iterable[Any], **kwargs) -> 'ThumbnailBuilder':
        return cls(cls._typed(streams, StreamImageSource, kwargs.get("codec")), **kwargs)

    @classmethod
    def from_images(cls, images: Iterable[Any], **kwargs) -> 'ThumbnailBuilder':
        return cls(cls._typed(images, BitmapImageSource), **kwargs)

    @classmethod
    def from_directory(
        cls,
        folder: Union[str, Path],
        recursive: bool = False,
        **kwargs
    ) -> 'ThumbnailBuilder':
        """All image files of a folder, in natural sort order."""
        folder = Path(folder)
        if not folder.is_dir():
            raise IllegalArgumentError(f"Not a directory: {folder}")

        candidates = folder.rglob('*') if recursive else folder.iterdir()
        images = natsorted(p for p in candidates if p.is_file() and is_image(p))
        if not images:
            raise IllegalArgumentError(f"No images found in {folder}")
        return cls.from_files(images, **kwargs)

    @staticmethod
    def _typed(
        items: Iterable[Any],
        source_type: Callable[..., IImageSource],
        codec: Optional[ImageCodec] = None
    ) -> List[IImageSource]:
        if items is None:
            raise IllegalArgumentError("Cannot specify None for sources.")
        if codec is None:
            return [source_type(item) for item in items]
        return [source_type(item, codec=codec) for item in items]

    @property
    def sources(self) -> List[IImageSource]:
        return list(self._sources)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _update_status(self, prop: str, status: str) -> None:
        current = self._status.get(prop)
        if current == _ALREADY_SET:
            raise IllegalStateError(f"{prop} is already set.")
        if status != _CANNOT_SET and current == _CANNOT_SET:
            raise IllegalStateError(f"{prop} cannot be set.")
        self._status[prop] = status

    @staticmethod
    def _validate_dimensions(width: int, height: int) -> None:
        if width <= 0 and height <= 0:
            raise IllegalArgumentError("Width and height must be greater than zero.")
        if width <= 0:
            raise IllegalArgumentError("Width must be greater than zero.")
        if height <= 0:
            raise IllegalArgumentError("Height must be greater than zero.")

    def size(self, width: int, height: int) -> 'ThumbnailBuilder':
        """Fit the thumbnail within width x height, keeping the aspect ratio."""
        self._update_status("Size", _ALREADY_SET)
        self._update_status("Scale", _CANNOT_SET)
        self._validate_dimensions(width, height)
        self._config.width = width
        self._config.height = height
        return self

    def width(self, width: int) -> 'ThumbnailBuilder':
        """Bound only the width; the height follows the aspect ratio."""
        if self._status.get("Size") != _CANNOT_SET:
            self._update_status("Size", _CANNOT_SET)
        if self._status.get("Scale") != _CANNOT_SET:
            self._update_status("Scale", _CANNOT_SET)
        self._update_status("Width", _ALREADY_SET)
        if width <= 0:
            raise IllegalArgumentError("Width must be greater than zero.")
        self._config.width = width
        return self

    def height(self, height: int) -> 'ThumbnailBuilder':
        """Bound only the height; the width follows the aspect ratio."""
        if self._status.get("Size") != _CANNOT_SET:
            self._update_status("Size", _CANNOT_SET)
        if self._status.get("Scale") != _CANNOT_SET:
            self._update_status("Scale", _CANNOT_SET)
        self._update_status("Height", _ALREADY_SET)
        if height <= 0:
            raise IllegalArgumentError("Height must be greater than zero.")
        self._config.height = height
        return self

    def force_size(self, width: int, height: int) -> 'ThumbnailBuilder':
        """Resize to exactly width x height, ignoring the aspect ratio."""
        self._update_status("Size", _ALREADY_SET)
        self._update_status("Keep aspect ratio", _ALREADY_SET)
        self._update_status("Scale", _CANNOT_SET)
        self._validate_dimensions(width, height)
        self._config.width = width
        self._config.height = height
        self._config.keep_aspect_ratio = False
        return self

    def scale(self, factor: float, height_factor: Optional[float] = None) -> 'ThumbnailBuilder':
        """Scale by a factor (or separate width/height factors)."""
        self._update_status("Scale", _ALREADY_SET)
        self._update_status("Size", _CANNOT_SET)
        self._update_status("Keep aspect ratio", _CANNOT_SET)
        spec = SizeSpec.scaled(factor, height_factor)
        self._config.scale_width = spec.scale_width
        self._config.scale_height = spec.scale_height
        return self

    def scale_percent(self, percent: float) -> 'ThumbnailBuilder':
        return self.scale(percent / 100.0)

    def keep_aspect_ratio(self, keep: bool) -> 'ThumbnailBuilder':
        if self._status.get("Scale") == _ALREADY_SET:
            raise IllegalStateError(
                "Cannot specify whether to keep the aspect ratio if the "
                "scaling factor has already been specified."
            )
        if self._status.get("Size") is None:
            raise IllegalStateError(
                "Cannot specify whether to keep the aspect ratio unless the "
                "size parameter has already been specified."
            )
        if (self._status.get("Width") == _ALREADY_SET
                or self._status.get("Height") == _ALREADY_SET) and not keep:
            raise IllegalStateError(
                "The aspect ratio must be preserved when the width and/or "
                "height parameter has already been specified."
            )
        self._update_status("Keep aspect ratio", _ALREADY_SET)
        self._config.keep_aspect_ratio = keep
        return self

    def output_format(self, format_name: str) -> 'ThumbnailBuilder':
        """Encode thumbnails in this format ("png", "jpg", "JPEG", ...)."""
        if not is_supported_output_format(format_name):
            raise IllegalArgumentError(f"Specified format is not supported: {format_name}")
        self._update_status("Output format", _ALREADY_SET)
        self._config.output_format = canonical_format(format_name)
        return self

    def use_original_format(self) -> 'ThumbnailBuilder':
        """Encode each thumbnail in the format of its source."""
        self._update_status("Output format", _ALREADY_SET)
        self._config.output_format = ORIGINAL_FORMAT
        return self

    def determine_output_format(self) -> 'ThumbnailBuilder':
        """Use the destination file extension, else the source format (default)."""
        self._update_status("Output format", _ALREADY_SET)
        self._config.output_format = DETERMINE_FORMAT
        return self

    def output_quality(self, quality: float) -> 'ThumbnailBuilder':
        if not 0.0 <= quality <= 1.0:
            raise IllegalArgumentError(
                "The quality setting must be in the range 0.0 and 1.0, inclusive."
            )
        self._update_status("Output quality", _ALREADY_SET)
        self._config.output_quality = float(quality)
        return self

    def resampling(self, algorithm: Union[ResamplingAlgorithm, str]) -> 'ThumbnailBuilder':
        if isinstance(algorithm, str):
            try:
                algorithm = ResamplingAlgorithm[algorithm.upper()]
            except KeyError:
                raise IllegalArgumentError(f"Unknown resampling algorithm: {algorithm}") from None
        if not isinstance(algorithm, ResamplingAlgorithm):
            raise IllegalArgumentError(f"Unknown resampling algorithm: {algorithm!r}")
        self._update_status("Resampling", _ALREADY_SET)
        self._config.algorithm = algorithm
        return self

    def use_exif_orientation(self, enabled: bool) -> 'ThumbnailBuilder':
        self._update_status("Use EXIF orientation", _ALREADY_SET)
        self._config.use_exif_orientation = enabled
        return self

    def allow_overwrite(self, allow: bool) -> 'ThumbnailBuilder':
        self._update_status("Allow overwrite", _ALREADY_SET)
        self._config.allow_overwrite = allow
        return self

    # ------------------------------------------------------------------
    # Run helpers
    # ------------------------------------------------------------------

    def _new_run(self) -> PipelineRun:
        run = PipelineRun(self._sources, self._config, self.resampler)
        self.last_run = run
        return run

    @staticmethod
    def _require_single(run: PipelineRun, message: str) -> None:
        if run.source_count > 1:
            raise IllegalArgumentError(message)

    @staticmethod
    def _require_format_for_streams(run: PipelineRun) -> None:
        if run.param.is_format_specified:
            return
        if any(isinstance(s, BitmapImageSource) for s in run.sources):
            raise IllegalStateError("Output format not specified.")

    @staticmethod
    def _draw_destinations(destinations: Iterable[Any], count: int, message: str) -> List[Any]:
        """Take exactly one destination per source, before anything is processed."""
        if isinstance(destinations, Sized) and len(destinations) > count:
            raise IllegalArgumentError("Number of destinations does not match number of sources.")
        drawn = list(islice(iter(destinations), count))
        if len(drawn) < count:
            raise IllegalArgumentError(message)
        return drawn

    def _write_files(
        self,
        run: PipelineRun,
        sinks: Iterable[FileImageSink]
    ) -> List[Path]:
        """
        Write one file per source. A destination refused by the overwrite
        policy is skipped; any other error aborts the call.
        """
        written = []
        with run.running():
            for source, sink in zip(run.sources, sinks):
                try:
                    run.process(source, sink)
                except OverwriteDisallowedError as e:
                    logger.warning(f"Skipping {source!r}: {e} ({e.path})")
                    run.skipped.append(e.path)
                    continue
                written.append(sink.destination)

        logger.info(f"Created {len(written)} of {run.source_count} thumbnail file(s)")
        return written

    def _renamed_sink(
        self,
        source: IImageSource,
        rename: NamingStrategy,
        directory: Optional[Path],
        param: ThumbnailParameter
    ) -> FileImageSink:
        folder = directory if directory is not None else source.path.parent
        return FileImageSink(folder / rename(source.origin_name, param), codec=self.codec)

    # ------------------------------------------------------------------
    # Terminal operations: in memory
    # ------------------------------------------------------------------

    def iterable_images(self) -> ThumbnailIterator:
        """Thumbnails created one by one as the returned iterator is advanced."""
        run = self._new_run()
        with run.validating():
            pass
        return ThumbnailIterator(run)

    def as_images(self) -> List[Image.Image]:
        """Thumbnails of all sources, in source order."""
        run = self._new_run()
        with run.validating():
            pass

        thumbnails = []
        with run.running():
            for source in run.sources:
                sink = BitmapImageSink()
                run.process(source, sink)
                thumbnails.append(sink.image)
        return thumbnails

    def as_image(self) -> Image.Image:
        """Thumbnail of the only source."""
        run = self._new_run()
        with run.validating():
            self._require_single(run, "Cannot create one thumbnail from multiple original images.")

        sink = BitmapImageSink()
        with run.running():
            run.process(run.sources[0], sink)
        return sink.image

    # ------------------------------------------------------------------
    # Terminal operations: files
    # ------------------------------------------------------------------

    def as_files(
        self,
        destinations: Union[NamingStrategy, Iterable[Union[str, Path]], str, Path],
        directory: Optional[Union[str, Path]] = None
    ) -> List[Path]:
        """
        Write thumbnails to files and return the paths actually written.

        Args:
            destinations: A naming strategy applied to each source file name,
                or one destination path per source
            directory: With a naming strategy, folder to write into instead
                of each source's own folder

        Sources whose destination exists while overwriting is disabled are
        left out of the result.
        """
        if destinations is None:
            raise IllegalArgumentError("Destinations cannot be None.")
        if callable(destinations):
            return self._as_renamed_files(destinations, directory)
        if directory is not None:
            raise IllegalArgumentError("A directory can only be used with a naming strategy.")
        return self._as_listed_files(destinations)

    def to_files(
        self,
        destinations: Union[NamingStrategy, Iterable[Union[str, Path]], str, Path],
        directory: Optional[Union[str, Path]] = None
    ) -> None:
        self.as_files(destinations, directory)

    def _as_listed_files(self, destinations) -> List[Path]:
        run = self._new_run()
        with run.validating():
            if isinstance(destinations, (str, Path)):
                self._require_single(run, "Cannot output multiple thumbnails to one file.")
                destinations = [destinations]
            paths = self._draw_destinations(
                destinations, run.source_count, "Not enough file names provided by iterator."
            )

        sinks = [FileImageSink(p, codec=self.codec) for p in paths]
        return self._write_files(run, sinks)

    def _as_renamed_files(self, rename: NamingStrategy, directory) -> List[Path]:
        run = self._new_run()
        with run.validating():
            if directory is not None:
                directory = Path(directory)
                if not directory.is_dir():
                    raise IllegalArgumentError("Given destination is not a directory.")
            if not all(source.is_file_backed for source in run.sources):
                raise IllegalStateError(
                    "Cannot create thumbnails to files if original images are not from files."
                )

        # Paths are computed as each item comes up.
        sinks = (
            self._renamed_sink(source, rename, directory, run.param)
            for source in run.sources
        )
        return self._write_files(run, sinks)

    def as_file(self, path: Union[str, Path]) -> Path:
        """
        Write the thumbnail of the only source to path.

        Returns:
            The path written, including any extension appended to match
            the output format
        """
        run = self._new_run()
        with run.validating():
            self._require_single(run, "Cannot output multiple thumbnails to one file.")

        sink = FileImageSink(path, codec=self.codec)
        with run.running():
            run.process(run.sources[0], sink)
        logger.info(f"Created thumbnail file {sink.destination}")
        return sink.destination

    def to_file(self, path: Union[str, Path]) -> None:
        self.as_file(path)

    # ------------------------------------------------------------------
    # Terminal operations: streams
    # ------------------------------------------------------------------

    def to_stream(self, stream) -> None:
        """Write the thumbnail of the only source to a binary stream."""
        run = self._new_run()
        with run.validating():
            self._require_single(run, "Cannot output multiple thumbnails to a single stream.")
            self._require_format_for_streams(run)

        with run.running():
            run.process(run.sources[0], StreamImageSink(stream, codec=self.codec))

    def to_streams(self, streams: Iterable[Any]) -> None:
        """Write one thumbnail per source, each to its own stream."""
        if streams is None:
            raise IllegalArgumentError("Streams cannot be None.")

        run = self._new_run()
        with run.validating():
            if hasattr(streams, "write"):
                self._require_single(run, "Cannot output multiple thumbnails to a single stream.")
                streams = [streams]
            targets = self._draw_destinations(
                streams, run.source_count, "Not enough output streams provided by iterator."
            )
            self._require_format_for_streams(run)

        with run.running():
            for source, stream in zip(run.sources, targets):
                run.process(source, StreamImageSink(stream, codec=self.codec))
