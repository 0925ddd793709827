"""
Image decoding and encoding.
Wraps Pillow so the rest of the pipeline deals in bytes and Image objects.
"""
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError
import logging

from ..core.exceptions import DecodeError, EncodeError, UnsupportedFormatError
from ..core.extensions import canonical_format, supported_output_formats
from .orientation import OrientationFixer

logger = logging.getLogger(__name__)


@dataclass
class CodecConfig:
    """Encoder settings used when a run gives no explicit quality."""
    default_quality: int = 90
    progressive: bool = True
    optimize: bool = True
    background: Tuple[int, int, int] = (255, 255, 255)


@dataclass
class DecodedImage:
    """Decoded bitmap with the format sniffed from its content."""
    image: Image.Image
    format: Optional[str]
    orientation: Optional[int] = None


class ImageCodec:
    """Decodes bytes to bitmaps and encodes bitmaps to bytes."""

    # Formats that cannot store alpha; transparent pixels are flattened.
    ALPHALESS_FORMATS = {"JPEG", "BMP"}

    def __init__(self, config: Optional[CodecConfig] = None):
        self.config = config or CodecConfig()

    def decode(self, data: bytes) -> DecodedImage:
        """
        Decode an image from raw bytes.

        The format is sniffed from the content, never from a file name.

        Raises:
            DecodeError: If the bytes are not a readable image
        """
        try:
            with Image.open(BytesIO(data)) as img:
                img.load()
                format_name = img.format
                orientation = OrientationFixer.read_orientation(img)
                image = img.copy()
        except UnidentifiedImageError as e:
            raise DecodeError("No suitable image reader found for source data.") from e
        except Image.DecompressionBombError as e:
            raise DecodeError(f"Image is too large to decode: {e}") from e
        except (OSError, SyntaxError, ValueError) as e:
            raise DecodeError(f"Could not decode image data: {e}") from e

        return DecodedImage(image=image, format=format_name, orientation=orientation)

    def read_orientation(self, data: bytes) -> Optional[int]:
        """EXIF orientation (1-8) of encoded image bytes, or None."""
        try:
            with Image.open(BytesIO(data)) as img:
                return OrientationFixer.read_orientation(img)
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            logger.debug(f"No orientation available: {e}")
            return None

    def encode(
        self,
        image: Image.Image,
        format_name: str,
        quality: Optional[float] = None
    ) -> bytes:
        """
        Encode image in the given format.

        Args:
            image: Bitmap to encode
            format_name: Format name or extension, case-insensitive
            quality: 0.0-1.0, None for the configured default

        Raises:
            UnsupportedFormatError: If Pillow has no writer for the format
            EncodeError: If the writer fails
        """
        fmt = canonical_format(format_name)
        if fmt is None or fmt not in supported_output_formats():
            raise UnsupportedFormatError(format_name)

        prepared = self._prepare_for_format(image, fmt)
        buffer = BytesIO()
        try:
            prepared.save(buffer, format=fmt, **self._save_options(fmt, quality))
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(f"Could not encode image as {fmt}: {e}") from e

        return buffer.getvalue()

    def _prepare_for_format(self, img: Image.Image, fmt: str) -> Image.Image:
        """Flatten alpha against the background for formats without alpha."""
        if fmt not in self.ALPHALESS_FORMATS:
            return img

        if img.mode == "PA" or (img.mode == "P" and "transparency" in img.info):
            img = img.convert("RGBA")

        if img.mode in ("RGBA", "LA"):
            background = Image.new("RGB", img.size, self.config.background)
            alpha = img.split()[-1]
            background.paste(img.convert("RGB"), mask=alpha)
            return background
        if img.mode not in ("RGB", "L"):
            return img.convert("RGB")
        return img

    def _save_options(self, fmt: str, quality: Optional[float]) -> dict:
        if fmt == "JPEG":
            return {
                "quality": self._percent(quality),
                "optimize": self.config.optimize,
                "progressive": self.config.progressive,
            }
        if fmt == "WEBP":
            return {"quality": self._percent(quality)}
        if fmt == "PNG" and quality is not None:
            # Higher quality means less compression effort.
            return {"compress_level": int(round((1.0 - quality) * 9))}
        return {}

    def _percent(self, quality: Optional[float]) -> int:
        if quality is None:
            return self.config.default_quality
        return int(round(quality * 100))
