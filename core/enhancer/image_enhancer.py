"""
Image Enhancer Module

Orchestrates contrast and sharpness enhancement operations.
Implements IImageEnhancer interface.

Follows OCP: Open for extension (new enhancers), closed for modification.
Follows DIP: Depends on injected enhancer components.
"""

import logging
from typing import Optional
import numpy as np

from core.interfaces.enhancer_interface import IImageEnhancer, EnhancementResult
from core.interfaces.classifier_interface import SceneTag
from core.enhancer.contrast_enhancer import ContrastEnhancer
from core.enhancer.sharpness_enhancer import SharpnessEnhancer


logger = logging.getLogger(__name__)


DEFAULT_SHARPEN_MAX_PIXELS = 2_000_000


class ImageEnhancer(IImageEnhancer):
    """
    Orchestrates image enhancement pipeline for documents.

    Pipeline order:
    1. Contrast/brightness adjustment
    2. Laplacian sharpen, only when width * height <= sharpenMaxPixels

    Non-document scenes are returned untouched.

    Follows DIP: Receives enhancers via dependency injection.
    Follows SRP: Only orchestrates, doesn't implement enhancement logic.
    """

    def __init__(
        self,
        contrastEnhancer: Optional[ContrastEnhancer] = None,
        sharpnessEnhancer: Optional[SharpnessEnhancer] = None,
        sharpenMaxPixels: int = DEFAULT_SHARPEN_MAX_PIXELS
    ):
        """
        Initialize ImageEnhancer with component enhancers.

        Args:
            contrastEnhancer: Component for contrast adjustment.
            sharpnessEnhancer: Component for sharpening.
            sharpenMaxPixels: Largest pixel count that is still sharpened.
        """
        self._contrastEnhancer = contrastEnhancer or ContrastEnhancer()
        self._sharpnessEnhancer = sharpnessEnhancer or SharpnessEnhancer()
        self._sharpenMaxPixels = sharpenMaxPixels

        logger.info(f"ImageEnhancer initialized (sharpenMaxPixels={sharpenMaxPixels})")

    @property
    def contrastEnhancer(self) -> ContrastEnhancer:
        """Get contrast enhancer component."""
        return self._contrastEnhancer

    @property
    def sharpnessEnhancer(self) -> SharpnessEnhancer:
        """Get sharpness enhancer component."""
        return self._sharpnessEnhancer

    def adjustContrast(
        self,
        image: np.ndarray,
        contrast: float,
        brightness: float
    ) -> np.ndarray:
        """Adjust contrast and brightness with explicit parameters."""
        return ContrastEnhancer.apply(image, contrast, brightness)

    def sharpen(self, image: np.ndarray) -> np.ndarray:
        """Apply the Laplacian sharpen."""
        return self._sharpnessEnhancer.enhanceSharpness(image)

    def enhance(self, image: np.ndarray, scene: SceneTag) -> EnhancementResult:
        """
        Enhance document legibility.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            scene: Scene tag; anything but DOCUMENT is returned as is.

        Returns:
            EnhancementResult containing:
            - image: Enhanced image, or the input itself for non-documents
            - contrastApplied: Whether contrast was applied
            - sharpnessApplied: Whether sharpening was applied
        """
        if scene != SceneTag.DOCUMENT:
            return EnhancementResult(image=image)

        contrasted = self._contrastEnhancer.adjustContrast(image)

        h, w = image.shape[:2]
        if w * h > self._sharpenMaxPixels:
            logger.debug(f"Skipping sharpen for {w}x{h} image")
            return EnhancementResult(image=contrasted, contrastApplied=True)

        sharpened = self._sharpnessEnhancer.enhanceSharpness(contrasted)
        return EnhancementResult(
            image=sharpened,
            contrastApplied=True,
            sharpnessApplied=True
        )
