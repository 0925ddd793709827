"""
One source -> one destination thumbnail pass.
"""
from typing import Optional
from PIL import Image
import logging

from ..core.exceptions import IllegalStateError
from ..core.extensions import canonical_format
from ..core.interfaces import (
    ORIGINAL_FORMAT,
    IImageSink,
    IImageSource,
    IResampler,
    SourceItem,
    ThumbnailParameter,
    WriteResult,
)
from ..image.orientation import OrientationFixer
from ..image.resizer import Resampler
from ..image.sizing import SizeResolver

logger = logging.getLogger(__name__)


def make_thumbnail(
    item: SourceItem,
    param: ThumbnailParameter,
    resampler: Optional[IResampler] = None
) -> Image.Image:
    """Orient, size and resample a decoded source image."""
    resampler = resampler or Resampler()
    image = OrientationFixer.correct(item.image, item.orientation, param.use_exif_orientation)
    width, height = SizeResolver.resolve(image.width, image.height, param.size)
    return resampler.resample(image, width, height, param.algorithm)


def resolve_output_format(
    param: ThumbnailParameter,
    origin_format: Optional[str],
    sink: IImageSink
) -> Optional[str]:
    """
    Pick the output format for one item.

    Precedence: explicit format, then the source's own format when
    ORIGINAL_FORMAT is requested, otherwise the destination's extension
    falling back to the source's format.
    """
    if param.is_format_specified:
        return canonical_format(param.output_format)

    if param.output_format == ORIGINAL_FORMAT:
        format_name = origin_format
    else:
        format_name = sink.preferred_format() or origin_format

    if format_name is None and getattr(sink, "requires_format", True):
        raise IllegalStateError("Output format not specified.")
    return format_name


class ThumbnailTask:
    """Reads one source, makes its thumbnail and hands it to one sink."""

    def __init__(
        self,
        param: ThumbnailParameter,
        source: IImageSource,
        sink: IImageSink,
        resampler: Optional[IResampler] = None
    ):
        self.param = param
        self.source = source
        self.sink = sink
        self.resampler = resampler or Resampler()

    def run(self) -> WriteResult:
        item = self.source.read(self.param)
        thumbnail = make_thumbnail(item, self.param, self.resampler)
        format_name = resolve_output_format(self.param, item.origin_format, self.sink)
        result = self.sink.write(thumbnail, format_name, self.param)
        logger.debug(f"Thumbnail {thumbnail.width}x{thumbnail.height} from {self.source!r}")
        return result
