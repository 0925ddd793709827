"""
Abstract interfaces and data types shared by all thumbkit components.
"""
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from PIL import Image

from .exceptions import IllegalArgumentError, IllegalStateError

# Output format sentinels. Anything else is an explicit format name.
ORIGINAL_FORMAT = "original"
DETERMINE_FORMAT = "determine"


class FitMode(Enum):
    """How a bounding box is applied to the original image."""
    EXACT = "exact"
    FIT_WITHIN = "fit-within"


class ResamplingAlgorithm(Enum):
    """Interpolation kernels available to the resampler."""
    NEAREST = Image.Resampling.NEAREST
    BILINEAR = Image.Resampling.BILINEAR
    BICUBIC = Image.Resampling.BICUBIC


class PipelineState(Enum):
    """Lifecycle of a single pipeline run."""
    CONFIGURING = "configuring"
    VALIDATED = "validated"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def _check_factor(factor: float) -> None:
    if factor <= 0.0:
        raise IllegalArgumentError("The scaling factor is equal to or less than 0.")
    if math.isnan(factor):
        raise IllegalArgumentError("The scaling factor is not a number.")
    if math.isinf(factor):
        raise IllegalArgumentError("The scaling factor cannot be infinity.")


@dataclass(frozen=True)
class SizeSpec:
    """
    Target size of a thumbnail.

    Either a bounding box (width and/or height, None meaning unbounded) or a
    pair of scaling factors. Invalid combinations are rejected on creation.
    """
    width: Optional[int] = None
    height: Optional[int] = None
    scale_width: Optional[float] = None
    scale_height: Optional[float] = None
    fit: FitMode = FitMode.FIT_WITHIN

    def __post_init__(self):
        has_box = self.width is not None or self.height is not None
        has_scale = self.scale_width is not None or self.scale_height is not None

        if has_box and has_scale:
            raise IllegalArgumentError("Cannot specify both a size and a scaling factor.")
        if not has_box and not has_scale:
            raise IllegalArgumentError("The width or height must be specified.")

        if has_scale:
            if self.scale_width is None or self.scale_height is None:
                raise IllegalArgumentError("Both scaling factors must be specified.")
            _check_factor(self.scale_width)
            _check_factor(self.scale_height)
            return

        if self.width is not None and self.width <= 0:
            raise IllegalArgumentError("Width must be greater than zero.")
        if self.height is not None and self.height <= 0:
            raise IllegalArgumentError("Height must be greater than zero.")
        if self.fit is FitMode.EXACT and (self.width is None or self.height is None):
            raise IllegalArgumentError(
                "Both width and height must be specified to force a size."
            )

    @classmethod
    def box(cls, width: Optional[int], height: Optional[int]) -> 'SizeSpec':
        return cls(width=width, height=height, fit=FitMode.FIT_WITHIN)

    @classmethod
    def exact(cls, width: int, height: int) -> 'SizeSpec':
        return cls(width=width, height=height, fit=FitMode.EXACT)

    @classmethod
    def scaled(cls, factor: float, height_factor: Optional[float] = None) -> 'SizeSpec':
        height_factor = factor if height_factor is None else height_factor
        return cls(scale_width=factor, scale_height=height_factor)

    @classmethod
    def percentage(cls, percent: float) -> 'SizeSpec':
        return cls.scaled(percent / 100.0)

    @property
    def is_scaled(self) -> bool:
        return self.scale_width is not None


@dataclass(frozen=True)
class ThumbnailParameter:
    """Immutable parameters of one pipeline run."""
    size: SizeSpec
    output_format: str = DETERMINE_FORMAT
    output_quality: Optional[float] = None
    algorithm: ResamplingAlgorithm = ResamplingAlgorithm.BILINEAR
    use_exif_orientation: bool = True
    allow_overwrite: bool = True

    def __post_init__(self):
        if self.output_quality is not None and not 0.0 <= self.output_quality <= 1.0:
            raise IllegalArgumentError(
                "The quality setting must be in the range 0.0 and 1.0, inclusive."
            )

    @property
    def is_format_specified(self) -> bool:
        return self.output_format not in (DETERMINE_FORMAT, ORIGINAL_FORMAT)


@dataclass
class ThumbnailConfig:
    """Mutable configuration accumulated field by field before a run."""
    width: Optional[int] = None
    height: Optional[int] = None
    scale_width: Optional[float] = None
    scale_height: Optional[float] = None
    keep_aspect_ratio: bool = True
    output_format: str = DETERMINE_FORMAT
    output_quality: Optional[float] = None
    algorithm: ResamplingAlgorithm = ResamplingAlgorithm.BILINEAR
    use_exif_orientation: bool = True
    allow_overwrite: bool = True

    def freeze(self) -> ThumbnailParameter:
        """Copy the current configuration into an immutable ThumbnailParameter."""
        if self.scale_width is not None:
            size = SizeSpec.scaled(self.scale_width, self.scale_height)
        elif self.width is not None or self.height is not None:
            fit = FitMode.FIT_WITHIN if self.keep_aspect_ratio else FitMode.EXACT
            size = SizeSpec(width=self.width, height=self.height, fit=fit)
        else:
            raise IllegalStateError("Thumbnail size or scaling factor is not set.")

        return ThumbnailParameter(
            size=size,
            output_format=self.output_format,
            output_quality=self.output_quality,
            algorithm=self.algorithm,
            use_exif_orientation=self.use_exif_orientation,
            allow_overwrite=self.allow_overwrite,
        )


@dataclass
class SourceItem:
    """One decoded source image plus what is known about its origin."""
    image: Image.Image
    origin_name: Optional[str] = None
    origin_format: Optional[str] = None
    orientation: Optional[int] = None

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size


@dataclass
class WriteResult:
    """What a sink produced for one item."""
    target: Any
    format_name: Optional[str] = None


class IImageSource(ABC):
    """Interface for a single image source."""

    @property
    @abstractmethod
    def origin_name(self) -> Optional[str]:
        """File name the image came from, if any."""
        pass

    @property
    def is_file_backed(self) -> bool:
        return False

    @abstractmethod
    def read(self, param: Optional[ThumbnailParameter] = None) -> SourceItem:
        """Read and decode the source."""
        pass


class IImageSink(ABC):
    """Interface for a single thumbnail destination."""

    @abstractmethod
    def preferred_format(self) -> Optional[str]:
        """Format implied by the destination itself, if any."""
        pass

    @abstractmethod
    def write(
        self,
        image: Image.Image,
        format_name: Optional[str],
        param: ThumbnailParameter
    ) -> WriteResult:
        """Deliver the thumbnail."""
        pass


class IResampler(ABC):
    """Interface for resizing bitmaps."""

    @abstractmethod
    def resample(
        self,
        image: Image.Image,
        width: int,
        height: int,
        algorithm: ResamplingAlgorithm = ResamplingAlgorithm.BILINEAR
    ) -> Image.Image:
        """Return a new image of exactly width x height."""
        pass
