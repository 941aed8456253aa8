"""
Pipeline Orchestrator Module.

Orchestrates the OCR preprocessing pipeline.
Creates ConfigService and initializes all services with proper parameters.

Pipeline Steps:
1. S1 Preprocessing: Orientation fix, scene/layout classification, rectification
2. S2 Enhancement: Contrast and sharpness for documents
3. S3 Normalization: Planar float tensor for the recognition model
4. Recognition (optional, external): consumes the tensor

Each step falls back to its input on failure; only MemoryError propagates.

Follows:
- SRP: Only handles pipeline orchestration
- DIP: Services receive parameters, not dependencies
- OCP: Easy to add new services
"""

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import numpy as np

from core.interfaces.classifier_interface import ILayoutBackend, SceneTag, LayoutTag
from core.interfaces.geometry_interface import IOrientationBackend, IRectifyBackend
from core.interfaces.normalizer_interface import NormalizationSpec
from core.interfaces.recognition_interface import IRecognitionBackend, TextResult
from core.backends.onnx_backends import OnnxSessionCache
from core.backends.backend_factory import createBackends
from services.impl.config_service import ConfigService
from services.impl.s1_preprocessing_service import S1PreprocessingService
from services.impl.s2_enhancement_service import S2EnhancementService
from services.impl.s3_normalization_service import S3NormalizationService


@dataclass
class PipelineResult:
    """
    Result of one pipeline run.

    Attributes:
        frameId: Frame identifier used for logs and debug output.
        scene: Scene classification.
        layout: Layout classification.
        quad: Ordered document quad, if one was used.
        tensor: Recognition model input, or None if encoding failed.
        tensorWidth: Tensor width.
        tensorHeight: Tensor height.
        enhancedImage: Image that was encoded.
        recognition: Recognition collaborator output, if any.
        timings: Per-step processing time in milliseconds.
        success: True when a tensor was produced.
    """
    frameId: str
    scene: SceneTag = SceneTag.ITEM_PHOTO
    layout: LayoutTag = LayoutTag.TEXT_LABEL
    quad: Optional[np.ndarray] = None
    tensor: Optional[np.ndarray] = field(default=None, repr=False)
    tensorWidth: int = 0
    tensorHeight: int = 0
    enhancedImage: Optional[np.ndarray] = field(default=None, repr=False)
    recognition: Optional[TextResult] = None
    timings: Dict[str, float] = field(default_factory=dict)
    success: bool = False


class PipelineOrchestrator:
    """
    Orchestrates the complete OCR preprocessing pipeline.

    Responsibilities:
    - Initialize ConfigService
    - Build configured ONNX backends (explicit backends take precedence)
    - Create all pipeline services with parameters from config
    - Run scene -> rectify -> enhance -> normalize -> recognize
    - Release cached inference sessions on request
    """

    def __init__(
        self,
        configPath: str = "config/application_config.json",
        layoutBackend: Optional[ILayoutBackend] = None,
        rectifyBackend: Optional[IRectifyBackend] = None,
        orientationBackend: Optional[IOrientationBackend] = None,
        textlineOrientationBackend: Optional[IOrientationBackend] = None,
        recognitionBackend: Optional[IRecognitionBackend] = None,
        sessionFactory: Optional[Callable[[str], Any]] = None
    ):
        """
        Initialize the pipeline orchestrator.

        Args:
            configPath: Path to the application configuration file.
            layoutBackend: Layout backend overriding the configured one.
            rectifyBackend: Rectify backend overriding the configured one.
            orientationBackend: Page orientation backend overriding the configured one.
            textlineOrientationBackend: Text-line orientation backend overriding the configured one.
            recognitionBackend: Optional recognition collaborator.
            sessionFactory: ONNX session factory for configured backends.

        Raises:
            RuntimeError: If the configuration cannot be loaded.
            ValueError: If the normalization settings are invalid.
        """
        self._logger = logging.getLogger(__name__)

        self._configService = ConfigService(configPath)
        self._logger.info("ConfigService initialized")

        self._sessionCache = OnnxSessionCache(sessionFactory)
        configured = createBackends(self._configService.getBackendsConfig(), self._sessionCache)

        self._layoutBackend = layoutBackend or configured.layout
        self._rectifyBackend = rectifyBackend or configured.rectify
        self._orientationBackend = orientationBackend or configured.orientation
        self._textlineOrientationBackend = textlineOrientationBackend or configured.textlineOrientation
        self._recognitionBackend = recognitionBackend

        debugBasePath = self._configService.getDebugBasePath()
        debugEnabled = self._configService.isDebugEnabled()

        self._initializeServices(debugBasePath, debugEnabled)

        self._logger.info("PipelineOrchestrator initialized successfully")

    def _initializeServices(self, debugBasePath: str, debugEnabled: bool) -> None:
        """
        Initialize all pipeline services with parameters from config.

        Following DIP: Services receive parameters, not IConfigService.
        Each service creates its core components internally.
        """
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S1 Preprocessing Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s1PreprocessingService = S1PreprocessingService(
            enabled=self._configService.isPreprocessingEnabled(),
            orientationFix=self._configService.isOrientationFixEnabled(),
            layoutBackend=self._layoutBackend,
            rectifyBackend=self._rectifyBackend,
            orientationBackend=self._orientationBackend,
            textlineOrientationBackend=self._textlineOrientationBackend,
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S2 Enhancement Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s2EnhancementService = S2EnhancementService(
            enabled=self._configService.isEnhancementEnabled(),
            contrast=self._configService.getContrast(),
            brightness=self._configService.getBrightness(),
            sharpenMaxPixels=self._configService.getSharpenMaxPixels(),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        # S3 Normalization Service
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        self._s3NormalizationService = S3NormalizationService(
            targetWidth=self._configService.getTargetWidth(),
            targetHeight=self._configService.getTargetHeight(),
            spec=self._buildNormalizationSpec(),
            detMaxSideLen=self._configService.getDetMaxSideLen(),
            debugBasePath=debugBasePath,
            debugEnabled=debugEnabled
        )

    def _buildNormalizationSpec(self) -> NormalizationSpec:
        scheme = self._configService.getNormalizationScheme()
        if scheme == "meanStd":
            return NormalizationSpec.meanStd(
                self._configService.getNormalizationMean(),
                self._configService.getNormalizationStd()
            )
        if scheme != "fixed":
            raise ValueError(f"Unknown normalization scheme: '{scheme}'")
        return NormalizationSpec.fixed()

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Pipeline Execution
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def process(self, image: np.ndarray, frameId: Optional[str] = None) -> PipelineResult:
        """
        Run the full pipeline on one RGBA image.

        Args:
            image: Input image (H, W, 4) RGBA uint8. Never modified.
            frameId: Identifier for logs and debug output (timestamp if None).

        Returns:
            PipelineResult. success is False only when no tensor was produced.
        """
        frameId = frameId or datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        startTime = time.time()
        result = PipelineResult(frameId=frameId)

        if not self._isValidImage(image):
            self._logger.warning(f"[{frameId}] Invalid input image, expected (H, W, 4) uint8")
            return result

        # Step 1: Preprocessing
        s1Result = self._s1PreprocessingService.preprocess(image, frameId)
        result.timings["s1_preprocessing"] = s1Result.processingTimeMs
        result.scene = s1Result.scene
        result.layout = s1Result.layout
        result.quad = s1Result.quad

        # Step 2: Enhancement
        s2Result = self._s2EnhancementService.enhance(s1Result.image, s1Result.scene, frameId)
        result.timings["s2_enhancement"] = s2Result.processingTimeMs
        result.enhancedImage = s2Result.enhancedImage

        # Step 3: Normalization
        s3Result = self._s3NormalizationService.normalize(s2Result.enhancedImage, frameId)
        result.timings["s3_normalization"] = s3Result.processingTimeMs
        result.tensor = s3Result.tensor
        result.tensorWidth = s3Result.width
        result.tensorHeight = s3Result.height
        result.success = s3Result.success

        # Step 4: Recognition (optional)
        if result.success and self._recognitionBackend is not None:
            recognitionStart = time.time()
            result.recognition = self._recognize(result.tensor, result.tensorWidth, result.tensorHeight, frameId)
            result.timings["recognition"] = (time.time() - recognitionStart) * 1000

        result.timings["total_pipeline"] = (time.time() - startTime) * 1000
        self.savePipelineTiming(frameId, result.timings)

        self._logger.info(
            f"[{frameId}] scene={result.scene.value}, layout={result.layout.value}, "
            f"rectified={s1Result.warped}, total={result.timings['total_pipeline']:.2f}ms"
        )
        return result

    def _recognize(
        self,
        tensor: np.ndarray,
        width: int,
        height: int,
        frameId: str
    ) -> Optional[TextResult]:
        try:
            return self._recognitionBackend.recognize(tensor, width, height)
        except MemoryError:
            raise
        except Exception as e:
            self._logger.error(f"[{frameId}] Recognition failed: {e}")
            return None

    @staticmethod
    def _isValidImage(image: Optional[np.ndarray]) -> bool:
        return (
            isinstance(image, np.ndarray)
            and image.ndim == 3
            and image.shape[2] == 4
            and image.dtype == np.uint8
            and image.shape[0] > 0
            and image.shape[1] > 0
        )

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Service Getters
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    @property
    def configService(self) -> ConfigService:
        """Get the configuration service."""
        return self._configService

    @property
    def preprocessingService(self) -> S1PreprocessingService:
        """Get Step 1: Preprocessing service."""
        return self._s1PreprocessingService

    @property
    def enhancementService(self) -> S2EnhancementService:
        """Get Step 2: Enhancement service."""
        return self._s2EnhancementService

    @property
    def normalizationService(self) -> S3NormalizationService:
        """Get Step 3: Normalization service."""
        return self._s3NormalizationService

    @property
    def sessionCache(self) -> OnnxSessionCache:
        """Get the shared ONNX session cache."""
        return self._sessionCache

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Debug Control
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def setDebugEnabled(self, enabled: bool) -> None:
        """
        Enable or disable debug mode for all services.

        Args:
            enabled: True to enable debug output for all services.
        """
        self._configService.setDebugEnabled(enabled)

        self._s1PreprocessingService.setDebugEnabled(enabled)
        self._s2EnhancementService.setDebugEnabled(enabled)
        self._s3NormalizationService.setDebugEnabled(enabled)

        self._logger.info(f"Debug mode {'enabled' if enabled else 'disabled'} for all services")

    def isDebugEnabled(self) -> bool:
        """Check if debug mode is enabled."""
        return self._configService.isDebugEnabled()

    def savePipelineTiming(self, frameId: str, timing: Dict[str, float]) -> Optional[str]:
        """
        Save pipeline timing to <debugBasePath>/timing/timing_{frameId}.json.

        Only saves when debug is enabled.

        Returns:
            Saved file path, or None if debug disabled or failed.
        """
        if not self.isDebugEnabled():
            return None

        try:
            timingPath = Path(self._configService.getDebugBasePath()) / "timing"
            timingPath.mkdir(parents=True, exist_ok=True)

            timingData = {
                "frameId": frameId,
                "timestamp": datetime.now().isoformat(),
                "timing_ms": timing,
            }

            filepath = timingPath / f"timing_{frameId}.json"
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(timingData, f, indent=2, ensure_ascii=False)

            self._logger.debug(f"Pipeline timing saved: {filepath}")
            return str(filepath)

        except Exception as e:
            self._logger.error(f"Failed to save pipeline timing: {e}")
            return None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Lifecycle Management
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def releaseResources(self) -> None:
        """
        Drop cached inference sessions.

        Hosts call this on low-memory or background transitions. Sessions
        are recreated on next use.
        """
        self._sessionCache.clear()

    def shutdown(self) -> None:
        """
        Shutdown all services and release resources.

        Call this when the application is closing.
        """
        self._logger.info("Shutting down PipelineOrchestrator...")
        self.releaseResources()
        self._logger.info("PipelineOrchestrator shutdown complete")
