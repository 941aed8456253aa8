"""
Normalization Service Interface Module.

Defines the interface for tensor encoding (Step 3 of the pipeline).

Follows:
- SRP: Only handles tensor encoding
- DIP: Depends on IPixelNormalizer abstraction from core layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional
import numpy as np

from core.interfaces.normalizer_interface import DetectorTensor


@dataclass
class NormalizationServiceResult:
    """
    Result of the normalization service.

    Attributes:
        tensor: Planar float32 tensor (R plane, G plane, B plane), or None on failure.
        width: Tensor width.
        height: Tensor height.
        frameId: Frame identifier for debug output.
        success: Whether encoding succeeded.
        processingTimeMs: Time taken for encoding.
    """
    tensor: Optional[np.ndarray] = field(repr=False)
    width: int
    height: int
    frameId: str
    success: bool
    processingTimeMs: float = 0.0


class INormalizationService(ABC):
    """Interface for tensor encoding (Step 3)."""

    @abstractmethod
    def normalize(
        self,
        image: np.ndarray,
        frameId: str
    ) -> NormalizationServiceResult:
        """
        Encode an image for the recognition model.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            frameId: Frame identifier for debug output.

        Returns:
            NormalizationServiceResult with the model input tensor.
        """
        pass

    @abstractmethod
    def normalizeForDetector(
        self,
        image: np.ndarray,
        frameId: str
    ) -> Optional[DetectorTensor]:
        """
        Encode an image for the text detector.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            frameId: Frame identifier for debug output.

        Returns:
            DetectorTensor, or None on failure.
        """
        pass
