"""
Quad Geometry Module

Canonical corner ordering for document quads and the warp target size
derived from their edge lengths.

Follows SRP: Only handles quad bookkeeping, no pixel access.
"""

import logging
from typing import Sequence, Tuple
import numpy as np


logger = logging.getLogger(__name__)


MAX_WARP_SIDE = 4096


class QuadOrderer:
    """
    Orders 4 points as Top-Left, Top-Right, Bottom-Right, Bottom-Left.

    The result is independent of the input order for any simple quadrilateral.
    """

    @staticmethod
    def orderPoints(pts: Sequence[Sequence[float]]) -> np.ndarray:
        """
        Orders a set of 4 points in a consistent order: Top-Left, Top-Right, Bottom-Right, Bottom-Left.

        Args:
            pts: 4 (x, y) points in any order.

        Returns:
            np.ndarray: A (4, 2) float32 array ordered as [TL, TR, BR, BL].

        Logic:
            1. Calculates the centroid (mean) of the points.
            2. Sorts the points by their arctan2 angle around the centroid.
            3. Picks the point with the minimum x + y as the start.
            4. Rolls the sorted array so that this point is first.
        """
        points = np.asarray(pts, dtype=np.float64).reshape(-1, 2)
        if len(points) != 4:
            raise ValueError(f"Expected 4 points, got {len(points)}")

        center = np.mean(points, axis=0)
        angles = np.arctan2(points[:, 1] - center[1], points[:, 0] - center[0])
        sortedPts = points[np.argsort(angles, kind="stable")]

        sums = sortedPts.sum(axis=1)
        topLeftIdx = int(np.argmin(sums))
        ordered = np.roll(sortedPts, -topLeftIdx, axis=0)

        return ordered.astype(np.float32)


class WarpSizeEstimator:
    """Derives the upright rectangle size for a perspective warp."""

    def __init__(self, maxSide: int = MAX_WARP_SIDE):
        """
        Initialize WarpSizeEstimator.

        Args:
            maxSide: Upper bound for either output dimension.
        """
        self._maxSide = maxSide

    @property
    def maxSide(self) -> int:
        return self._maxSide

    def estimateWarpSize(self, orderedQuad: np.ndarray) -> Tuple[int, int]:
        """
        Estimate (width, height) of the rectified document.

        Width is the longer of the top and bottom edges, height the longer of
        the left and right edges. Each is truncated, floored at 1 and capped
        at maxSide.

        Args:
            orderedQuad: (4, 2) corners in TL, TR, BR, BL order.

        Returns:
            Tuple[int, int]: (width, height), each in [1, maxSide].
        """
        (tl, tr, br, bl) = np.asarray(orderedQuad, dtype=np.float64).reshape(4, 2)

        widthTop = np.linalg.norm(tr - tl)
        widthBottom = np.linalg.norm(br - bl)
        heightLeft = np.linalg.norm(tl - bl)
        heightRight = np.linalg.norm(tr - br)

        width = self._clampSide(max(widthTop, widthBottom))
        height = self._clampSide(max(heightLeft, heightRight))

        logger.debug(f"Warp size: {width}x{height}")
        return width, height

    def _clampSide(self, length: float) -> int:
        if np.isnan(length):
            return 1
        if np.isinf(length):
            return self._maxSide
        return min(max(int(length), 1), self._maxSide)
