"""
Contrast Enhancer Module

Linear contrast/brightness adjustment around mid-gray.

Follows SRP: Only handles contrast adjustment operations.
"""

import logging
import numpy as np


logger = logging.getLogger(__name__)


class ContrastEnhancer:
    """
    Applies new = clamp((old - 128) * contrast + 128 + brightness, 0, 255)
    to the R, G and B channels. Alpha is preserved.

    Follows SRP: Only responsible for contrast adjustment.
    """

    def __init__(
        self,
        contrast: float = 1.2,
        brightness: float = 10.0
    ):
        """
        Initialize ContrastEnhancer.

        Args:
            contrast: Gain around mid-gray (1.0 = unchanged).
            brightness: Offset added after the gain.
        """
        self._contrast = contrast
        self._brightness = brightness

        logger.info(
            f"ContrastEnhancer initialized: contrast={contrast}, brightness={brightness}"
        )

    @property
    def contrast(self) -> float:
        """Get contrast gain."""
        return self._contrast

    @property
    def brightness(self) -> float:
        """Get brightness offset."""
        return self._brightness

    def adjustContrast(self, image: np.ndarray) -> np.ndarray:
        """Adjust with the configured contrast and brightness."""
        return self.apply(image, self._contrast, self._brightness)

    @staticmethod
    def apply(image: np.ndarray, contrast: float, brightness: float) -> np.ndarray:
        """
        Adjust contrast and brightness of an RGBA image.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            contrast: Gain around mid-gray.
            brightness: Offset added after the gain.

        Returns:
            New (H, W, 4) uint8 image.
        """
        rgb = image[..., :3].astype(np.float32)
        adjusted = np.trunc((rgb - 128.0) * contrast + 128.0 + brightness)

        result = np.empty_like(image)
        result[..., :3] = np.clip(adjusted, 0, 255).astype(np.uint8)
        result[..., 3:] = image[..., 3:]
        return result
