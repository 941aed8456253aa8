"""
Preprocessing Service Interface Module.

Defines the interface for document preprocessing (Step 1 of the pipeline):
orientation fix, scene/layout classification and perspective rectification.

Follows:
- SRP: Only handles preprocessing operations
- DIP: Depends on IImagePreprocessor abstraction from core layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import numpy as np

from core.interfaces.classifier_interface import SceneTag, LayoutTag


@dataclass
class PreprocessingServiceResult:
    """
    Result of the preprocessing service.

    Attributes:
        image: Corrected image, or the input itself when nothing changed.
        scene: Scene classification.
        layout: Layout classification.
        quad: Ordered document quad used for rectification, if any.
        warped: True if a perspective warp was applied.
        rotationApplied: Clockwise rotation applied by orientation fix.
        frameId: Frame identifier for debug output.
        success: Whether preprocessing ran without falling back.
        message: Stage summary.
        processingTimeMs: Time taken for preprocessing.
    """
    image: np.ndarray
    scene: SceneTag
    layout: LayoutTag
    quad: Optional[np.ndarray]
    warped: bool
    rotationApplied: int
    frameId: str
    success: bool
    message: str = ""
    processingTimeMs: float = 0.0


class IPreprocessingService(ABC):
    """Interface for document preprocessing operations (Step 1)."""

    @abstractmethod
    def preprocess(
        self,
        image: np.ndarray,
        frameId: str
    ) -> PreprocessingServiceResult:
        """
        Preprocess an image.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            frameId: Frame identifier for debug output.

        Returns:
            PreprocessingServiceResult: Corrected image with tags.
        """
        pass

    @abstractmethod
    def setEnabled(self, enabled: bool) -> None:
        """Enable or disable preprocessing."""
        pass

    @abstractmethod
    def isEnabled(self) -> bool:
        """Check if preprocessing is enabled."""
        pass
