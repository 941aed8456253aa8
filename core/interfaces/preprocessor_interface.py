"""
Preprocessor Interface Module

Defines the abstract interface for document preprocessing operations.
Follows ISP (Interface Segregation Principle): Only contains preprocessing-related methods.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np

from core.interfaces.classifier_interface import SceneTag, LayoutTag
from core.interfaces.geometry_interface import QuadDetectionResult


@dataclass
class PreprocessingResult:
    """
    Data class representing the result of document preprocessing.

    Attributes:
        image: The corrected image (RGBA). The input object itself when no
               stage changed it.
        scene: Scene classification of the oriented image.
        layout: Layout classification of the oriented image.
        quad: Ordered document quad (4, 2), or None when not rectified.
        rotationApplied: Total clockwise rotation applied by orientation fix.
        warped: Whether perspective correction was applied.
        steps: Human readable log of each stage outcome.
    """
    image: np.ndarray
    scene: SceneTag
    layout: LayoutTag
    quad: Optional[np.ndarray] = None
    rotationApplied: int = 0
    warped: bool = False
    steps: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return " | ".join(self.steps)

    def __repr__(self) -> str:
        return (
            f"PreprocessingResult(scene={self.scene.value}, layout={self.layout.value}, "
            f"warped={self.warped}, shape={self.image.shape})"
        )


class IImagePreprocessor(ABC):
    """
    Abstract interface for document preprocessing.

    Implementations fix orientation, classify the scene and layout, and
    rectify skewed documents onto an upright rectangle.
    """

    @abstractmethod
    def process(
        self,
        image: np.ndarray,
        useOrientationFix: bool = True
    ) -> PreprocessingResult:
        """
        Preprocess a captured image.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            useOrientationFix: If True, consult orientation backends first.

        Returns:
            PreprocessingResult: Corrected image plus classification tags.
        """
        pass

    @abstractmethod
    def detectQuad(self, image: np.ndarray) -> QuadDetectionResult:
        """
        Detect and order the document quad of an image without warping.

        Args:
            image: Input image (H, W, 4) RGBA uint8.

        Returns:
            QuadDetectionResult with an ordered quad, or not found.
        """
        pass
