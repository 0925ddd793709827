"""
Target size computation.
Follows Single Responsibility Principle - only turns a SizeSpec into pixels.
"""
import math
from typing import Optional, Tuple

from ..core.exceptions import InvalidSourceError
from ..core.interfaces import FitMode, SizeSpec


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up."""
    return int(math.floor(value + 0.5))


class SizeResolver:
    """Resolves the concrete thumbnail dimensions for an original image."""

    @classmethod
    def resolve(cls, width: int, height: int, spec: SizeSpec) -> Tuple[int, int]:
        """
        Compute the thumbnail size.

        Args:
            width: Original (orientation-corrected) width
            height: Original (orientation-corrected) height
            spec: Requested size

        Returns:
            (target_width, target_height), both at least 1
        """
        if width <= 0 or height <= 0:
            raise InvalidSourceError(
                f"Cannot make a thumbnail of an image with dimensions {width}x{height}."
            )

        if spec.is_scaled:
            return cls._scaled(width, height, spec.scale_width, spec.scale_height)

        if spec.fit is FitMode.EXACT:
            return spec.width, spec.height

        return cls._fit_within(width, height, spec.width, spec.height)

    @staticmethod
    def _scaled(width: int, height: int, fx: float, fy: float) -> Tuple[int, int]:
        return (
            max(1, round_half_up(width * fx)),
            max(1, round_half_up(height * fy)),
        )

    @staticmethod
    def _fit_within(
        width: int,
        height: int,
        max_width: Optional[int],
        max_height: Optional[int]
    ) -> Tuple[int, int]:
        # A missing bound never limits.
        ratio_w = max_width / width if max_width is not None else math.inf
        ratio_h = max_height / height if max_height is not None else math.inf

        if ratio_w <= ratio_h:
            new_w = max_width
            new_h = round_half_up(height * ratio_w)
            if max_height is not None:
                new_h = min(new_h, max_height)
        else:
            new_h = max_height
            new_w = round_half_up(width * ratio_h)
            if max_width is not None:
                new_w = min(new_w, max_width)

        return max(1, new_w), max(1, new_h)
