"""
Document Preprocessor Module

Main preprocessor implementation that orchestrates the preprocessing pipeline.
Implements IImagePreprocessor interface.

Follows:
- SRP: Orchestrates preprocessing pipeline
- OCP: New preprocessing steps can be added without modifying existing code
- DIP: Depends on abstractions (classifiers, quad detector, backends)
"""

import logging
from typing import Optional
import numpy as np

from core.interfaces.preprocessor_interface import IImagePreprocessor, PreprocessingResult
from core.interfaces.classifier_interface import (
    ISceneClassifier,
    ILayoutClassifier,
    SceneTag,
    LayoutTag,
)
from core.interfaces.geometry_interface import (
    IQuadDetector,
    QuadDetectionResult,
    FailureKind,
)
from core.classifier.scene_classifier import SceneClassifier
from core.classifier.layout_classifier import LayoutClassifier
from core.preprocessor.geometric_transformer import GeometricTransformer
from core.preprocessor.orientation_corrector import OrientationCorrector
from core.preprocessor.quad_detector import DocumentQuadDetector
from core.preprocessor.quad_geometry import QuadOrderer, WarpSizeEstimator


logger = logging.getLogger(__name__)


class DocumentPreprocessor(IImagePreprocessor):
    """
    Main preprocessor for captured document/item images.

    Orchestrates the preprocessing pipeline:
    1. Orientation fix (document, then text-line backend)
    2. Scene classification
    3. Layout classification
    4. For documents: detect quad -> order -> size -> perspective warp

    Every stage degrades to its input on failure.

    Implements IImagePreprocessor interface.
    """

    def __init__(
        self,
        sceneClassifier: Optional[ISceneClassifier] = None,
        layoutClassifier: Optional[ILayoutClassifier] = None,
        quadDetector: Optional[IQuadDetector] = None,
        orientationCorrector: Optional[OrientationCorrector] = None,
        warpSizeEstimator: Optional[WarpSizeEstimator] = None
    ):
        """
        Initialize DocumentPreprocessor.

        Args:
            sceneClassifier: Scene classifier (created if None).
            layoutClassifier: Layout classifier (created if None).
            quadDetector: Document quad detector (created if None).
            orientationCorrector: Orientation corrector (created if None).
            warpSizeEstimator: Warp size estimator (created if None).
        """
        self._sceneClassifier = sceneClassifier or SceneClassifier()
        self._layoutClassifier = layoutClassifier or LayoutClassifier()
        self._quadDetector = quadDetector or DocumentQuadDetector()
        self._orientationCorrector = orientationCorrector or OrientationCorrector()
        self._warpSizeEstimator = warpSizeEstimator or WarpSizeEstimator()

    def process(
        self,
        image: np.ndarray,
        useOrientationFix: bool = True
    ) -> PreprocessingResult:
        """
        Preprocess a captured image.

        Pipeline:
        1. Orientation fix if requested and a backend is available
        2. Scene and layout classification on the oriented image
        3. Perspective rectification for documents

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            useOrientationFix: If True, consult orientation backends.

        Returns:
            PreprocessingResult: Contains the corrected image and tags.
        """
        if image is None:
            raise ValueError("Input image is None")

        steps = []

        # Step 1: Orientation
        oriented = image
        rotation = 0
        if useOrientationFix and self._orientationCorrector.isAvailable:
            try:
                oriented, rotation, orientMsg = self._orientationCorrector.correct(image)
                steps.append(f"Step1: {orientMsg}")
            except MemoryError:
                raise
            except Exception as e:
                logger.error(f"Orientation correction failed: {e}")
                steps.append("Step1: Orientation error, kept input")
        else:
            steps.append("Step1: Skipped (no orientation fix)")

        # Step 2: Scene and layout
        scene = self._classifyScene(oriented)
        layout = self._classifyLayout(oriented)
        steps.append(f"Step2: scene={scene.value}, layout={layout.value}")

        if scene != SceneTag.DOCUMENT:
            steps.append("Step3: Skipped (not a document)")
            return PreprocessingResult(
                image=oriented,
                scene=scene,
                layout=layout,
                rotationApplied=rotation,
                steps=steps
            )

        # Step 3: Rectification
        detection = self.detectQuad(oriented)
        if not detection.found:
            steps.append(f"Step3: No quad ({detection.message})")
            return PreprocessingResult(
                image=oriented,
                scene=scene,
                layout=layout,
                rotationApplied=rotation,
                steps=steps
            )

        dstWidth, dstHeight = self._warpSizeEstimator.estimateWarpSize(detection.quad)
        warped, warpMsg = GeometricTransformer.warpPerspective(
            oriented, detection.quad, dstWidth, dstHeight
        )

        if warped is None:
            logger.warning(f"Perspective warp failed: {warpMsg}")
            steps.append(f"Step3: Warp failed ({warpMsg})")
            return PreprocessingResult(
                image=oriented,
                scene=scene,
                layout=layout,
                quad=detection.quad,
                rotationApplied=rotation,
                steps=steps
            )

        steps.append(f"Step3: {detection.source} quad, {warpMsg}")
        return PreprocessingResult(
            image=warped,
            scene=scene,
            layout=layout,
            quad=detection.quad,
            rotationApplied=rotation,
            warped=True,
            steps=steps
        )

    def detectQuad(self, image: np.ndarray) -> QuadDetectionResult:
        """
        Detect the document quad and put its corners in canonical order.

        Args:
            image: Input image (H, W, 4) RGBA uint8.

        Returns:
            QuadDetectionResult with a (TL, TR, BR, BL) quad, or not found.
        """
        detection = self._quadDetector.detect(image)
        if not detection.found:
            return detection

        try:
            ordered = QuadOrderer.orderPoints(detection.quad)
        except MemoryError:
            raise
        except Exception as e:
            logger.warning(f"Quad ordering failed: {e}")
            return QuadDetectionResult.notFound(str(e), FailureKind.INVALID_GEOMETRY)

        return QuadDetectionResult(
            quad=ordered,
            source=detection.source,
            message=detection.message
        )

    def _classifyScene(self, image: np.ndarray) -> SceneTag:
        try:
            return self._sceneClassifier.classify(image)
        except MemoryError:
            raise
        except Exception as e:
            logger.error(f"Scene classification failed: {e}")
            return SceneTag.ITEM_PHOTO

    def _classifyLayout(self, image: np.ndarray) -> LayoutTag:
        try:
            return self._layoutClassifier.classify(image)
        except MemoryError:
            raise
        except Exception as e:
            logger.error(f"Layout classification failed: {e}")
            return LayoutTag.TEXT_LABEL
