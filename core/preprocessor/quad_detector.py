"""
Document Quad Detector Module

Finds the four corners of a document with a Sobel edge map, a histogram
threshold keeping the strongest 15% of gradients, and extremal-corner
scoring. An optional rectify backend takes precedence.

Follows DIP: The backend is injected as an IRectifyBackend capability.
"""

import logging
import math
from typing import Optional
import numpy as np

from core.imaging.pixel_buffer import resizeImage, grayscale
from core.interfaces.geometry_interface import (
    IQuadDetector,
    IRectifyBackend,
    QuadDetectionResult,
    FailureKind,
)


logger = logging.getLogger(__name__)


class DocumentQuadDetector(IQuadDetector):
    """
    Gradient-based document corner detector.

    Pipeline:
    1. Downsample so the longer side is at most maxSide
    2. Grayscale + 3x3 Sobel on interior pixels, magnitude (|gx| + |gy|) / 4
    3. Threshold at the highest magnitude covering edgeFraction of pixels
    4. Corners are the strong-edge pixels minimising x+y, (w-1-x)+y,
       (w-1-x)+(h-1-y) and x+(h-1-y)
    """

    def __init__(
        self,
        backend: Optional[IRectifyBackend] = None,
        maxSide: int = 512,
        edgeFraction: float = 0.15
    ):
        """
        Initialize DocumentQuadDetector.

        Args:
            backend: Optional rectify backend, queried first.
            maxSide: Longest side of the analysis image.
            edgeFraction: Fraction of interior pixels kept as strong edges.
        """
        self._backend = backend
        self._maxSide = maxSide
        self._edgeFraction = edgeFraction

    @property
    def backend(self) -> Optional[IRectifyBackend]:
        return self._backend

    def detect(self, image: np.ndarray) -> QuadDetectionResult:
        backendResult = self._queryBackend(image)
        if backendResult is not None:
            return backendResult

        try:
            return self._detectHeuristic(image)
        except MemoryError:
            raise
        except Exception as e:
            logger.error(f"Quad detection failed: {e}")
            return QuadDetectionResult.notFound(f"Error: {str(e)}", FailureKind.INVALID_GEOMETRY)

    def _queryBackend(self, image: np.ndarray) -> Optional[QuadDetectionResult]:
        if self._backend is None:
            return None

        try:
            points = self._backend.detectQuad(image)
        except MemoryError:
            raise
        except Exception as e:
            logger.warning(f"Rectify backend failed, using heuristic: {e}")
            return None

        if points is None or len(points) < 4:
            return None

        quad = np.array([[float(p[0]), float(p[1])] for p in list(points)[:4]], dtype=np.float32)
        return QuadDetectionResult(quad=quad, source="backend", message="Backend quad")

    def _detectHeuristic(self, image: np.ndarray) -> QuadDetectionResult:
        h, w = image.shape[:2]
        if w <= 0 or h <= 0:
            return QuadDetectionResult.notFound("Empty image", FailureKind.DEGENERATE_INPUT)

        scale = min(1.0, float(self._maxSide) / max(w, h))
        scaledW = max(1, int(w * scale))
        scaledH = max(1, int(h * scale))
        if scaledW < 3 or scaledH < 3:
            return QuadDetectionResult.notFound(
                f"Image too small for Sobel: {scaledW}x{scaledH}",
                FailureKind.DEGENERATE_INPUT
            )

        gray = grayscale(resizeImage(image, scaledW, scaledH))
        magnitude = self._sobelMagnitude(gray)
        threshold = self._selectThreshold(magnitude)

        strong = magnitude >= threshold
        if not np.any(strong):
            return QuadDetectionResult.notFound(f"No edge pixels at threshold {threshold}")

        # Interior pixel (i, j) sits at image coordinate (j + 1, i + 1)
        ys, xs = np.mgrid[1:scaledH - 1, 1:scaledW - 1]
        right = scaledW - 1 - xs
        bottom = scaledH - 1 - ys

        corners = []
        for score in (xs + ys, right + ys, right + bottom, xs + bottom):
            masked = np.where(strong, score, np.iinfo(np.int64).max)
            idx = int(np.argmin(masked))
            corners.append((xs.flat[idx], ys.flat[idx]))

        inv = 1.0 / scale
        quad = np.array([[x * inv, y * inv] for x, y in corners], dtype=np.float32)

        logger.debug(f"Quad heuristic: threshold={threshold}, corners={corners}, scale={scale:.3f}")
        return QuadDetectionResult(quad=quad, source="heuristic", message=f"Threshold {threshold}")

    @staticmethod
    def _sobelMagnitude(gray: np.ndarray) -> np.ndarray:
        """Integer (|gx| + |gy|) / 4 over interior pixels, clamped to [0, 255]."""
        tl, tc, tr = gray[:-2, :-2], gray[:-2, 1:-1], gray[:-2, 2:]
        ml, mr = gray[1:-1, :-2], gray[1:-1, 2:]
        bl, bc, br = gray[2:, :-2], gray[2:, 1:-1], gray[2:, 2:]

        gx = (tr + 2 * mr + br) - (tl + 2 * ml + bl)
        gy = (bl + 2 * bc + br) - (tl + 2 * tc + tr)

        return np.clip((np.abs(gx) + np.abs(gy)) // 4, 0, 255)

    def _selectThreshold(self, magnitude: np.ndarray) -> int:
        """Highest t whose count of magnitudes >= t reaches edgeFraction of pixels (at least one)."""
        histogram = np.bincount(magnitude.ravel(), minlength=256)
        target = max(1, math.ceil(round(magnitude.size * self._edgeFraction, 6)))

        cumulative = 0
        for t in range(255, -1, -1):
            cumulative += int(histogram[t])
            if cumulative >= target:
                return t
        return 0
