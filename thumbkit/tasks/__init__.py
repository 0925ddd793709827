"""
Sources, sinks and the per-item thumbnail task.
"""
from .sources import (
    FileImageSource,
    UrlImageSource,
    StreamImageSource,
    BitmapImageSource,
    make_source,
)
from .sinks import (
    FileImageSink,
    StreamImageSink,
    BitmapImageSink,
    make_sink,
)
from .task import ThumbnailTask, make_thumbnail, resolve_output_format

__all__ = [
    'FileImageSource',
    'UrlImageSource',
    'StreamImageSource',
    'BitmapImageSource',
    'make_source',
    'FileImageSink',
    'StreamImageSink',
    'BitmapImageSink',
    'make_sink',
    'ThumbnailTask',
    'make_thumbnail',
    'resolve_output_format',
]
