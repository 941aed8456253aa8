"""
S1 Preprocessing Service Implementation.

Step 1 of the pipeline: orientation fix, scene/layout classification and
perspective rectification of documents.
Creates and manages DocumentPreprocessor from core layer.

Follows:
- SRP: Only handles preprocessing operations
- DIP: Depends on IImagePreprocessor abstraction (interface)
"""

import time
from typing import Optional

import numpy as np

from core.interfaces.preprocessor_interface import IImagePreprocessor
from core.interfaces.classifier_interface import ILayoutBackend, SceneTag, LayoutTag
from core.interfaces.geometry_interface import IOrientationBackend, IRectifyBackend
from core.classifier.layout_classifier import LayoutClassifier
from core.preprocessor.document_preprocessor import DocumentPreprocessor
from core.preprocessor.orientation_corrector import OrientationCorrector
from core.preprocessor.quad_detector import DocumentQuadDetector
from services.interfaces.preprocessing_service_interface import (
    IPreprocessingService,
    PreprocessingServiceResult
)
from services.interfaces.base_service_interface import BaseService


class S1PreprocessingService(IPreprocessingService, BaseService):
    """
    Step 1: Preprocessing Service Implementation.

    Wires the optional capability backends into a DocumentPreprocessor.
    Any failure falls back to the input image with success=False.
    """

    SERVICE_NAME = "s1_preprocessing"

    def __init__(
        self,
        enabled: bool = True,
        orientationFix: bool = True,
        layoutBackend: Optional[ILayoutBackend] = None,
        rectifyBackend: Optional[IRectifyBackend] = None,
        orientationBackend: Optional[IOrientationBackend] = None,
        textlineOrientationBackend: Optional[IOrientationBackend] = None,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize S1PreprocessingService.

        Args:
            enabled: Whether preprocessing is enabled.
            orientationFix: Whether orientation backends are consulted.
            layoutBackend: Optional layout classification backend.
            rectifyBackend: Optional document corner backend.
            orientationBackend: Optional page orientation backend.
            textlineOrientationBackend: Optional text-line orientation backend.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether to save debug output.
        """
        BaseService.__init__(
            self,
            serviceName=self.SERVICE_NAME,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        self._preprocessor: IImagePreprocessor = DocumentPreprocessor(
            layoutClassifier=LayoutClassifier(backend=layoutBackend),
            quadDetector=DocumentQuadDetector(backend=rectifyBackend),
            orientationCorrector=OrientationCorrector(
                documentBackend=orientationBackend,
                textlineBackend=textlineOrientationBackend
            )
        )

        self._enabled = enabled
        self._orientationFix = orientationFix

        self._logger.info(
            f"S1PreprocessingService initialized "
            f"(orientationFix={orientationFix}, rectifyBackend={rectifyBackend is not None}, "
            f"layoutBackend={layoutBackend is not None})"
        )

    def preprocess(
        self,
        image: np.ndarray,
        frameId: str
    ) -> PreprocessingServiceResult:
        """Orient, classify and rectify an image."""
        startTime = time.time()

        if not self._enabled:
            return self._passThrough(image, frameId, startTime, "Preprocessing disabled")

        try:
            result = self._preprocessor.process(image, useOrientationFix=self._orientationFix)
        except MemoryError:
            raise
        except Exception as e:
            self._logger.error(f"[{frameId}] Preprocessing failed: {e}")
            return self._passThrough(image, frameId, startTime, f"Error: {str(e)}")

        processingTimeMs = self._measureTime(startTime)
        self._saveDebugOutput(frameId, result.image, result.scene, result.layout, result.quad, result.message)
        self._logTiming(frameId, processingTimeMs)
        self._logger.debug(f"[{frameId}] {result.message}")

        return PreprocessingServiceResult(
            image=result.image,
            scene=result.scene,
            layout=result.layout,
            quad=result.quad,
            warped=result.warped,
            rotationApplied=result.rotationApplied,
            frameId=frameId,
            success=True,
            message=result.message,
            processingTimeMs=processingTimeMs
        )

    def setEnabled(self, enabled: bool) -> None:
        """Enable or disable preprocessing."""
        self._enabled = enabled
        self._logger.info(f"Preprocessing {'enabled' if enabled else 'disabled'}")

    def isEnabled(self) -> bool:
        """Check if preprocessing is enabled."""
        return self._enabled

    def _passThrough(
        self,
        image: np.ndarray,
        frameId: str,
        startTime: float,
        message: str
    ) -> PreprocessingServiceResult:
        return PreprocessingServiceResult(
            image=image,
            scene=SceneTag.ITEM_PHOTO,
            layout=LayoutTag.TEXT_LABEL,
            quad=None,
            warped=False,
            rotationApplied=0,
            frameId=frameId,
            success=False,
            message=message,
            processingTimeMs=self._measureTime(startTime)
        )

    def _saveDebugOutput(
        self,
        frameId: str,
        image: np.ndarray,
        scene: SceneTag,
        layout: LayoutTag,
        quad: Optional[np.ndarray],
        message: str
    ) -> None:
        """Save debug output for preprocessing step."""
        if not self._debugEnabled:
            return

        self._saveDebugImage(frameId, image, "preprocessed")

        info = {
            "frameId": frameId,
            "scene": scene.value,
            "layout": layout.value,
            "quad": quad.tolist() if quad is not None else None,
            "message": message,
            "imageShape": list(image.shape)
        }
        self._saveDebugJson(frameId, info, "preprocessing")
