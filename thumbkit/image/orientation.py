"""
Image orientation correction using EXIF data.
Follows Single Responsibility Principle - only handles orientation.
"""
from typing import Optional
from PIL import Image
import logging

logger = logging.getLogger(__name__)

ORIENTATION_TAG = 0x0112


class OrientationFixer:
    """Rotates/flips bitmaps so they display upright for an EXIF orientation code."""

    # Flip is applied after the rotation for codes 5 and 7.
    _TRANSFORMS = {
        2: lambda img: img.transpose(Image.Transpose.FLIP_LEFT_RIGHT),
        3: lambda img: img.transpose(Image.Transpose.ROTATE_180),
        4: lambda img: img.transpose(Image.Transpose.FLIP_TOP_BOTTOM),
        5: lambda img: img.transpose(Image.Transpose.ROTATE_270).transpose(Image.Transpose.FLIP_LEFT_RIGHT),
        6: lambda img: img.transpose(Image.Transpose.ROTATE_270),
        7: lambda img: img.transpose(Image.Transpose.ROTATE_90).transpose(Image.Transpose.FLIP_LEFT_RIGHT),
        8: lambda img: img.transpose(Image.Transpose.ROTATE_90),
    }

    _INVERSES = {
        2: lambda img: img.transpose(Image.Transpose.FLIP_LEFT_RIGHT),
        3: lambda img: img.transpose(Image.Transpose.ROTATE_180),
        4: lambda img: img.transpose(Image.Transpose.FLIP_TOP_BOTTOM),
        5: lambda img: img.transpose(Image.Transpose.FLIP_LEFT_RIGHT).transpose(Image.Transpose.ROTATE_90),
        6: lambda img: img.transpose(Image.Transpose.ROTATE_90),
        7: lambda img: img.transpose(Image.Transpose.FLIP_LEFT_RIGHT).transpose(Image.Transpose.ROTATE_270),
        8: lambda img: img.transpose(Image.Transpose.ROTATE_270),
    }

    @staticmethod
    def swaps_dimensions(orientation: Optional[int]) -> bool:
        return orientation in (5, 6, 7, 8)

    @classmethod
    def correct(
        cls,
        img: Image.Image,
        orientation: Optional[int],
        enabled: bool = True
    ) -> Image.Image:
        """
        Return an upright version of img.

        Missing, unknown or disabled orientation returns img unchanged.
        """
        if not enabled or orientation is None:
            return img

        transform = cls._TRANSFORMS.get(orientation)
        if transform is None:
            if orientation != 1:
                logger.warning(f"Ignoring unknown EXIF orientation: {orientation}")
            return img

        logger.debug(f"Applying EXIF orientation {orientation}")
        return transform(img)

    @classmethod
    def invert(cls, img: Image.Image, orientation: Optional[int]) -> Image.Image:
        """Undo correct(): turn an upright image back into stored orientation."""
        transform = cls._INVERSES.get(orientation)
        return transform(img) if transform else img

    @classmethod
    def read_orientation(cls, img: Image.Image) -> Optional[int]:
        """Orientation code from an opened image's EXIF, or None."""
        try:
            value = img.getexif().get(ORIENTATION_TAG)
        except Exception as e:
            logger.warning(f"Error reading EXIF orientation: {e}")
            return None

        if isinstance(value, int) and 1 <= value <= 8:
            return value
        return None
