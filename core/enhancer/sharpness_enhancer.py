"""
Sharpness Enhancer Module

Enhances image sharpness with a 4-neighbour Laplacian kernel.

Follows SRP: Only handles sharpness enhancement operations.
"""

import logging
import numpy as np


logger = logging.getLogger(__name__)


class SharpnessEnhancer:
    """
    Enhances image sharpness using a discrete Laplacian sharpen.

    Kernel:
         0 -1  0
        -1  5 -1
         0 -1  0

    Applied per color channel on interior pixels. Border pixels and alpha
    are copied unchanged.

    Follows SRP: Only responsible for sharpness enhancement.
    """

    def enhanceSharpness(self, image: np.ndarray) -> np.ndarray:
        """
        Sharpen an RGBA image.

        Args:
            image: Input image (H, W, 4) RGBA uint8.

        Returns:
            New (H, W, 4) uint8 image.
        """
        result = image.copy()
        h, w = image.shape[:2]
        if h < 3 or w < 3:
            return result

        rgb = image[..., :3].astype(np.int32)
        center = rgb[1:-1, 1:-1]
        sharpened = (
            5 * center
            - rgb[1:-1, :-2]
            - rgb[1:-1, 2:]
            - rgb[:-2, 1:-1]
            - rgb[2:, 1:-1]
        )

        result[1:-1, 1:-1, :3] = np.clip(sharpened, 0, 255).astype(np.uint8)
        return result
