"""
S2 Enhancement Service Implementation.

Step 2 of the pipeline: contrast and sharpness enhancement of documents.
Creates and manages ImageEnhancer from core layer.

Follows:
- SRP: Only handles enhancement operations
- DIP: Depends on IImageEnhancer abstraction (interface)
- OCP: Extends without modifying existing code
"""

import time

import numpy as np

from core.interfaces.enhancer_interface import IImageEnhancer
from core.interfaces.classifier_interface import SceneTag
from core.enhancer.image_enhancer import ImageEnhancer
from core.enhancer.contrast_enhancer import ContrastEnhancer
from core.enhancer.sharpness_enhancer import SharpnessEnhancer
from services.interfaces.enhancement_service_interface import (
    IEnhancementService,
    EnhancementServiceResult
)
from services.interfaces.base_service_interface import BaseService


class S2EnhancementService(IEnhancementService, BaseService):
    """
    Step 2: Enhancement Service Implementation.

    Applies linear contrast/brightness adjustment and a Laplacian sharpen
    (skipped above sharpenMaxPixels) to document scenes only.

    Creates ImageEnhancer internally with provided parameters.
    """

    SERVICE_NAME = "s2_enhancement"

    def __init__(
        self,
        enabled: bool = True,
        contrast: float = 1.2,
        brightness: float = 10.0,
        sharpenMaxPixels: int = 2000000,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S2EnhancementService.

        Args:
            enabled: Whether enhancement is enabled overall.
            contrast: Contrast gain around mid-gray.
            brightness: Brightness offset.
            sharpenMaxPixels: Largest width * height that is sharpened.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._enhancer: IImageEnhancer = ImageEnhancer(
            contrastEnhancer=ContrastEnhancer(contrast=contrast, brightness=brightness),
            sharpnessEnhancer=SharpnessEnhancer(),
            sharpenMaxPixels=sharpenMaxPixels
        )
        self._enabled = enabled

        self._logger.info(
            f"S2EnhancementService initialized "
            f"(contrast={contrast}, brightness={brightness}, sharpenMaxPixels={sharpenMaxPixels})"
        )

    def enhance(
        self,
        image: np.ndarray,
        scene: SceneTag,
        frameId: str
    ) -> EnhancementServiceResult:
        """Enhance a document image; other scenes pass through."""
        startTime = time.time()

        if not self._enabled:
            return EnhancementServiceResult(
                enhancedImage=image,
                contrastApplied=False,
                sharpnessApplied=False,
                frameId=frameId,
                success=True,
                processingTimeMs=self._measureTime(startTime)
            )

        try:
            enhanceResult = self._enhancer.enhance(image, scene)

            processingTimeMs = self._measureTime(startTime)

            if enhanceResult.image is not image:
                self._saveDebugImage(frameId, enhanceResult.image, "enhancement")

            self._logTiming(frameId, processingTimeMs)
            self._logger.debug(
                f"[{frameId}] Enhanced: contrast={enhanceResult.contrastApplied}, "
                f"sharpness={enhanceResult.sharpnessApplied}"
            )

            return EnhancementServiceResult(
                enhancedImage=enhanceResult.image,
                contrastApplied=enhanceResult.contrastApplied,
                sharpnessApplied=enhanceResult.sharpnessApplied,
                frameId=frameId,
                success=True,
                processingTimeMs=processingTimeMs
            )

        except MemoryError:
            raise
        except Exception as e:
            self._logger.error(f"[{frameId}] Enhancement failed: {e}")
            return EnhancementServiceResult(
                enhancedImage=image,
                contrastApplied=False,
                sharpnessApplied=False,
                frameId=frameId,
                success=False,
                processingTimeMs=self._measureTime(startTime)
            )

    def setEnabled(self, enabled: bool) -> None:
        """Enable or disable enhancement."""
        self._enabled = enabled
        self._logger.info(f"Enhancement {'enabled' if enabled else 'disabled'}")

    def isEnabled(self) -> bool:
        """Check if enhancement is enabled."""
        return self._enabled
