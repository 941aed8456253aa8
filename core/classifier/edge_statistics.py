"""
Edge Statistics Module

Luminance-jump counting on a downsampled grid, shared by the scene and
layout classifiers.
"""

from dataclasses import dataclass
import numpy as np

from core.imaging.pixel_buffer import resizeImage, relativeLuminance


LUMINANCE_JUMP = 0.2


@dataclass
class EdgeStatistics:
    """
    Edge counts over the interior sampling grid (all but last row/column).

    Attributes:
        horizontalEdges: Positions whose right neighbor jumps in luminance.
        verticalEdges: Positions whose bottom neighbor jumps in luminance.
        anyEdges: Positions with either jump.
        totalSamples: Number of sampled positions.
    """
    horizontalEdges: int = 0
    verticalEdges: int = 0
    anyEdges: int = 0
    totalSamples: int = 0

    def _density(self, count: int) -> float:
        if self.totalSamples == 0:
            return 0.0
        return count / float(self.totalSamples)

    @property
    def edgeDensity(self) -> float:
        return self._density(self.anyEdges)

    @property
    def horizontalDensity(self) -> float:
        return self._density(self.horizontalEdges)

    @property
    def verticalDensity(self) -> float:
        return self._density(self.verticalEdges)


def measureEdges(
    image: np.ndarray,
    sampleSize: int,
    jumpThreshold: float = LUMINANCE_JUMP
) -> EdgeStatistics:
    """
    Downsample to sampleSize x sampleSize and count luminance jumps.

    Args:
        image: Input image (H, W, 4) RGBA uint8.
        sampleSize: Side length of the sampling grid.
        jumpThreshold: Minimum absolute luminance difference for an edge.

    Returns:
        EdgeStatistics for the sampled grid.
    """
    sample = resizeImage(image, sampleSize, sampleSize)
    lum = relativeLuminance(sample)
    h, w = lum.shape

    if h < 2 or w < 2:
        return EdgeStatistics()

    center = lum[:-1, :-1]
    rightJump = np.abs(center - lum[:-1, 1:]) > jumpThreshold
    downJump = np.abs(center - lum[1:, :-1]) > jumpThreshold

    return EdgeStatistics(
        horizontalEdges=int(np.count_nonzero(rightJump)),
        verticalEdges=int(np.count_nonzero(downJump)),
        anyEdges=int(np.count_nonzero(rightJump | downJump)),
        totalSamples=(h - 1) * (w - 1)
    )
