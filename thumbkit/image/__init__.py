"""
Image processing module for thumbkit.
"""
from .orientation import OrientationFixer
from .sizing import SizeResolver
from .resizer import Resampler
from .codec import ImageCodec, CodecConfig, DecodedImage

__all__ = [
    'OrientationFixer',
    'SizeResolver',
    'Resampler',
    'ImageCodec',
    'CodecConfig',
    'DecodedImage',
]
