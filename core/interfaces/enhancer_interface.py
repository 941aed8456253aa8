"""
Image Enhancer Interface Module

Defines the abstract interface for image enhancement operations.
Follows ISP: Focused interface for enhancement only.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import numpy as np

from core.interfaces.classifier_interface import SceneTag


@dataclass
class EnhancementResult:
    """
    Result of image enhancement operation.

    Attributes:
        image: Enhanced image (RGBA format, numpy array). The input object
               itself when no enhancement was applied.
        contrastApplied: Whether contrast/brightness adjustment was applied.
        sharpnessApplied: Whether Laplacian sharpening was applied.
    """
    image: np.ndarray
    contrastApplied: bool = False
    sharpnessApplied: bool = False


class IImageEnhancer(ABC):
    """
    Abstract interface for image enhancement.

    Defines contract for improving legibility of document images
    through contrast and sharpness adjustments.
    """

    @abstractmethod
    def enhance(self, image: np.ndarray, scene: SceneTag) -> EnhancementResult:
        """
        Enhance image legibility according to its scene.

        Args:
            image: Input image (RGBA format, numpy array).
            scene: Scene tag; only documents are enhanced.

        Returns:
            EnhancementResult containing enhanced image and flags.
        """
        pass
