"""
Bitmap resampling.

Large reductions are done in several halving passes before the final resize,
which keeps thin lines and fine texture from aliasing the way a single
large-ratio pass does.
"""
from typing import List, Tuple
from PIL import Image
import logging

from ..core.interfaces import IResampler, ResamplingAlgorithm

logger = logging.getLogger(__name__)


class Resampler(IResampler):
    """Resizes images to exact dimensions with a configurable kernel."""

    HALVING_FILTER = Image.Resampling.BILINEAR

    def resample(
        self,
        image: Image.Image,
        width: int,
        height: int,
        algorithm: ResamplingAlgorithm = ResamplingAlgorithm.BILINEAR
    ) -> Image.Image:
        """
        Resize image to exactly width x height.

        Args:
            image: Source bitmap (left untouched)
            width: Target width, > 0
            height: Target height, > 0
            algorithm: Interpolation kernel

        Returns:
            New image with the source's mode
        """
        if width <= 0:
            raise ValueError("Width must be greater than zero.")
        if height <= 0:
            raise ValueError("Height must be greater than zero.")

        if image.size == (width, height):
            return image.copy()

        steps = self.plan_steps(image.size, (width, height))
        current = image
        # Halving passes are always bilinear; the chosen kernel only makes the last pass.
        for step in steps[:-1]:
            current = current.resize(step, self.HALVING_FILTER)
        current = current.resize(steps[-1], algorithm.value)

        logger.debug(
            f"Resampled {image.size[0]}x{image.size[1]} -> {width}x{height} "
            f"in {len(steps)} pass(es) ({algorithm.name})"
        )
        return current

    @staticmethod
    def needs_multi_pass(source: Tuple[int, int], target: Tuple[int, int]) -> bool:
        """True when either dimension shrinks by more than half."""
        return target[0] * 2 < source[0] or target[1] * 2 < source[1]

    @classmethod
    def plan_steps(
        cls,
        source: Tuple[int, int],
        target: Tuple[int, int]
    ) -> List[Tuple[int, int]]:
        """
        Intermediate sizes followed by the target size.

        Each dimension is halved on its own while the halved value is still
        at least its target; the last entry is always the target.
        """
        if not cls.needs_multi_pass(source, target):
            return [target]

        steps = []
        current_w, current_h = source
        target_w, target_h = target

        while True:
            next_w = current_w // 2 if current_w // 2 >= target_w else current_w
            next_h = current_h // 2 if current_h // 2 >= target_h else current_h
            if (next_w, next_h) == (current_w, current_h):
                break
            steps.append((next_w, next_h))
            current_w, current_h = next_w, next_h

        if not steps or steps[-1] != target:
            steps.append(target)
        return steps
