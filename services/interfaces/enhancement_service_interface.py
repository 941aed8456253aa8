"""
Enhancement Service Interface Module.

Defines the interface for image enhancement operations (Step 2 of the pipeline).
Responsible for contrast and sharpness enhancement of documents.

Follows:
- SRP: Only handles enhancement operations
- DIP: Depends on IImageEnhancer abstraction from core layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import numpy as np

from core.interfaces.classifier_interface import SceneTag


@dataclass
class EnhancementServiceResult:
    """
    Result of the enhancement service.

    Attributes:
        enhancedImage: Image after enhancement, or the input itself.
        contrastApplied: True if contrast adjustment was applied.
        sharpnessApplied: True if sharpening was applied.
        frameId: Frame identifier for debug output.
        success: Whether enhancement ran without falling back.
        processingTimeMs: Time taken for enhancement.
    """
    enhancedImage: np.ndarray
    contrastApplied: bool
    sharpnessApplied: bool
    frameId: str
    success: bool
    processingTimeMs: float = 0.0


class IEnhancementService(ABC):
    """
    Interface for image enhancement operations (Step 2).

    Applies contrast adjustment and a size-gated Laplacian sharpen
    to document scenes.
    """

    @abstractmethod
    def enhance(
        self,
        image: np.ndarray,
        scene: SceneTag,
        frameId: str
    ) -> EnhancementServiceResult:
        """
        Enhance an image.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            scene: Scene tag from preprocessing.
            frameId: Frame identifier for debug output.

        Returns:
            EnhancementServiceResult: Enhanced image with metadata.
        """
        pass

    @abstractmethod
    def setEnabled(self, enabled: bool) -> None:
        """Enable or disable enhancement."""
        pass

    @abstractmethod
    def isEnabled(self) -> bool:
        """Check if enhancement is enabled."""
        pass
