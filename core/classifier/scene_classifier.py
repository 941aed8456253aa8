"""
Scene Classifier Module

Decides whether a captured image is a document or an item photo from its
downsampled edge density and its aspect ratio.

Follows SRP: Only handles scene classification.
"""

import logging
import numpy as np

from core.interfaces.classifier_interface import ISceneClassifier, SceneTag
from core.classifier.edge_statistics import measureEdges


logger = logging.getLogger(__name__)


class SceneClassifier(ISceneClassifier):
    """
    Edge density + aspect ratio scene heuristic.

    Documents are dense in sharp luminance transitions (printed text, ruled
    lines) and have roughly page-like proportions.
    """

    def __init__(
        self,
        sampleSize: int = 64,
        edgeDensityThreshold: float = 0.12,
        minAspect: float = 0.6,
        maxAspect: float = 1.7
    ):
        """
        Initialize SceneClassifier.

        Args:
            sampleSize: Side of the downsampled grid.
            edgeDensityThreshold: Edge density above which text is assumed.
            minAspect: Minimum width/height ratio of a document.
            maxAspect: Maximum width/height ratio of a document.
        """
        self._sampleSize = sampleSize
        self._edgeDensityThreshold = edgeDensityThreshold
        self._minAspect = minAspect
        self._maxAspect = maxAspect

    def classify(self, image: np.ndarray) -> SceneTag:
        h, w = image.shape[:2]
        stats = measureEdges(image, self._sampleSize)
        aspect = w / float(h) if h > 0 else 0.0

        isDocument = (
            stats.edgeDensity > self._edgeDensityThreshold
            and self._minAspect <= aspect <= self._maxAspect
        )
        scene = SceneTag.DOCUMENT if isDocument else SceneTag.ITEM_PHOTO

        logger.debug(
            f"Scene: edgeDensity={stats.edgeDensity:.3f}, aspect={aspect:.2f} -> {scene.value}"
        )
        return scene
