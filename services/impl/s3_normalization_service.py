"""
S3 Normalization Service Implementation.

Step 3 of the pipeline: encode the enhanced image into the planar float
tensor expected by the recognition model.

Follows:
- SRP: Only handles tensor encoding
- DIP: Depends on IPixelNormalizer abstraction (interface)
"""

import time
from typing import Optional

import numpy as np

from core.interfaces.normalizer_interface import (
    IPixelNormalizer,
    NormalizationSpec,
    DetectorTensor,
)
from core.normalizer.pixel_normalizer import PixelNormalizer
from services.interfaces.normalization_service_interface import (
    INormalizationService,
    NormalizationServiceResult
)
from services.interfaces.base_service_interface import BaseService


class S3NormalizationService(INormalizationService, BaseService):
    """
    Step 3: Normalization Service Implementation.

    Target size and normalization scheme are fixed at construction.
    """

    SERVICE_NAME = "s3_normalization"

    def __init__(
        self,
        targetWidth: int = 320,
        targetHeight: int = 48,
        spec: Optional[NormalizationSpec] = None,
        detMaxSideLen: int = 960,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S3NormalizationService.

        Args:
            targetWidth: Recognition model input width.
            targetHeight: Recognition model input height.
            spec: Normalization scheme (fixed scheme when None).
            detMaxSideLen: Longest side for detector tensors.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.

        Raises:
            ValueError: If the target size is not positive.
        """
        if targetWidth <= 0 or targetHeight <= 0:
            raise ValueError(f"Invalid target size {targetWidth}x{targetHeight}")

        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._normalizer: IPixelNormalizer = PixelNormalizer()
        self._targetWidth = targetWidth
        self._targetHeight = targetHeight
        self._spec = spec or NormalizationSpec.fixed()
        self._detMaxSideLen = detMaxSideLen

        self._logger.info(
            f"S3NormalizationService initialized "
            f"(target={targetWidth}x{targetHeight}, fixed={self._spec.isFixed})"
        )

    @property
    def targetWidth(self) -> int:
        return self._targetWidth

    @property
    def targetHeight(self) -> int:
        return self._targetHeight

    def normalize(
        self,
        image: np.ndarray,
        frameId: str
    ) -> NormalizationServiceResult:
        """Encode an image at the configured target size."""
        startTime = time.time()

        try:
            tensor = self._normalizer.normalize(
                image, self._targetWidth, self._targetHeight, self._spec
            )
        except MemoryError:
            raise
        except Exception as e:
            self._logger.error(f"[{frameId}] Normalization failed: {e}")
            return NormalizationServiceResult(
                tensor=None,
                width=self._targetWidth,
                height=self._targetHeight,
                frameId=frameId,
                success=False,
                processingTimeMs=self._measureTime(startTime)
            )

        processingTimeMs = self._measureTime(startTime)
        self._logTiming(frameId, processingTimeMs)
        self._saveDebugJson(frameId, {
            "frameId": frameId,
            "width": self._targetWidth,
            "height": self._targetHeight,
            "min": float(tensor.min()),
            "max": float(tensor.max()),
            "mean": float(tensor.mean())
        }, "normalization")

        return NormalizationServiceResult(
            tensor=tensor,
            width=self._targetWidth,
            height=self._targetHeight,
            frameId=frameId,
            success=True,
            processingTimeMs=processingTimeMs
        )

    def normalizeForDetector(
        self,
        image: np.ndarray,
        frameId: str
    ) -> Optional[DetectorTensor]:
        """Encode an image for the text detector (ImageNet mean/std)."""
        try:
            return self._normalizer.normalizeForDetector(image, self._detMaxSideLen)
        except MemoryError:
            raise
        except Exception as e:
            self._logger.error(f"[{frameId}] Detector normalization failed: {e}")
            return None
