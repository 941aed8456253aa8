"""
Layout Classifier Module

Separates tables from plain text labels using directional edge densities,
with an optional external backend that takes precedence.

Follows DIP: The backend is injected as an ILayoutBackend capability.
"""

import logging
from typing import Optional
import numpy as np

from core.interfaces.classifier_interface import (
    ILayoutClassifier,
    ILayoutBackend,
    LayoutTag,
)
from core.classifier.edge_statistics import measureEdges


logger = logging.getLogger(__name__)


class LayoutClassifier(ILayoutClassifier):
    """
    Directional edge density layout heuristic.

    Tables have both horizontal and vertical rules, so both directional
    densities must be significant.
    """

    def __init__(
        self,
        backend: Optional[ILayoutBackend] = None,
        sampleSize: int = 96,
        edgeDensityThreshold: float = 0.18,
        directionalThreshold: float = 0.08
    ):
        """
        Initialize LayoutClassifier.

        Args:
            backend: Optional external layout backend, queried first.
            sampleSize: Side of the downsampled grid.
            edgeDensityThreshold: Mean directional density required for a table.
            directionalThreshold: Minimum density in each direction for a table.
        """
        self._backend = backend
        self._sampleSize = sampleSize
        self._edgeDensityThreshold = edgeDensityThreshold
        self._directionalThreshold = directionalThreshold

    @property
    def backend(self) -> Optional[ILayoutBackend]:
        return self._backend

    def classify(self, image: np.ndarray) -> LayoutTag:
        backendTag = self._queryBackend(image)
        if backendTag is not None:
            logger.debug(f"Layout from backend: {backendTag.value}")
            return backendTag

        stats = measureEdges(image, self._sampleSize)
        if stats.totalSamples == 0:
            return LayoutTag.TEXT_LABEL

        horizontal = stats.horizontalDensity
        vertical = stats.verticalDensity
        density = (horizontal + vertical) / 2.0

        isTable = (
            density > self._edgeDensityThreshold
            and horizontal > self._directionalThreshold
            and vertical > self._directionalThreshold
        )
        layout = LayoutTag.TABLE if isTable else LayoutTag.TEXT_LABEL

        logger.debug(
            f"Layout: h={horizontal:.3f}, v={vertical:.3f}, density={density:.3f} -> {layout.value}"
        )
        return layout

    def _queryBackend(self, image: np.ndarray) -> Optional[LayoutTag]:
        if self._backend is None:
            return None
        try:
            return self._backend.classify(image)
        except MemoryError:
            raise
        except Exception as e:
            logger.warning(f"Layout backend failed, using heuristic: {e}")
            return None
