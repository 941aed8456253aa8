"""
Base Service Interface Module.

Defines the base interface and shared debug/timing helpers for the
pipeline stage services (s1_preprocessing, s2_enhancement, s3_normalization).

Follows:
- ISP (Interface Segregation Principle): Minimal base interface
- DIP (Dependency Inversion Principle): The orchestrator depends on abstractions
"""

from abc import ABC, abstractmethod
from typing import Optional, Any, Dict
from pathlib import Path
import logging
import json
import time

import numpy as np


class IBaseService(ABC):
    """Identity and debug switch shared by every stage service."""

    @abstractmethod
    def getServiceName(self) -> str:
        """Stage name used as logger name and debug sub-directory."""
        pass

    @abstractmethod
    def setDebugEnabled(self, enabled: bool) -> None:
        """Turn per-frame debug artifacts on or off."""
        pass

    @abstractmethod
    def isDebugEnabled(self) -> bool:
        pass


class BaseService(IBaseService):
    """
    Helper base class for stage services.

    Debug artifacts land in <debugBasePath>/<serviceName>/<prefix>_<frameId>.<ext>.
    Writing them is best effort: failures are logged, never raised, so a
    full disk cannot break a pipeline run.
    """

    def __init__(
        self,
        serviceName: str,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize BaseService.

        Args:
            serviceName: Stage name, e.g. "s2_enhancement".
            debugBasePath: Root directory for debug artifacts.
            debugEnabled: Whether artifacts are written.
        """
        self._serviceName = serviceName
        self._debugBasePath = Path(debugBasePath) / serviceName
        self._debugEnabled = debugEnabled
        self._logger = logging.getLogger(serviceName)

        if debugEnabled:
            self._ensureDebugDirectory()

    def getServiceName(self) -> str:
        return self._serviceName

    def setDebugEnabled(self, enabled: bool) -> None:
        self._debugEnabled = enabled
        if enabled:
            self._ensureDebugDirectory()
        self._logger.info(f"Debug {'enabled' if enabled else 'disabled'}")

    def isDebugEnabled(self) -> bool:
        return self._debugEnabled

    def _ensureDebugDirectory(self) -> None:
        try:
            self._debugBasePath.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._logger.warning(f"Cannot create debug directory {self._debugBasePath}: {e}")

    def _debugFile(self, frameId: str, prefix: str, extension: str) -> Path:
        name = f"{prefix}_{frameId}" if prefix else frameId
        return self._debugBasePath / f"{name}.{extension}"

    def _saveDebugImage(self, frameId: str, image: Optional[np.ndarray], prefix: str = "") -> Optional[str]:
        """
        Write an RGBA stage output as PNG.

        Returns:
            Path written, or None when debug is off, the image is missing
            or the write failed.
        """
        if not self._debugEnabled or image is None:
            return None

        try:
            import cv2
            from core.imaging.pixel_buffer import toBgr

            filepath = self._debugFile(frameId, prefix, "png")
            if not cv2.imwrite(str(filepath), toBgr(image)):
                self._logger.warning(f"OpenCV could not write {filepath}")
                return None
            self._logger.debug(f"Saved debug image: {filepath}")
            return str(filepath)
        except Exception as e:
            self._logger.warning(f"Failed to save debug image: {e}")
            return None

    def _saveDebugJson(self, frameId: str, data: Dict[str, Any], prefix: str = "") -> Optional[str]:
        """Write stage metadata as JSON; same contract as _saveDebugImage."""
        if not self._debugEnabled:
            return None

        try:
            filepath = self._debugFile(frameId, prefix, "json")
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            self._logger.debug(f"Saved debug JSON: {filepath}")
            return str(filepath)
        except Exception as e:
            self._logger.warning(f"Failed to save debug JSON: {e}")
            return None

    def _logTiming(self, frameId: str, processingTimeMs: float) -> None:
        self._logger.info(f"[{frameId}] Processing time: {processingTimeMs:.2f}ms")

    @staticmethod
    def _measureTime(startTime: float) -> float:
        """Milliseconds elapsed since startTime (a time.time() value)."""
        return (time.time() - startTime) * 1000
