"""
Geometry Interface Module

Defines quad detection results and the capability interfaces that can
override the built-in document rectification heuristics.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple
import numpy as np


Point = Tuple[float, float]


class FailureKind(Enum):
    """Recoverable failure categories reported by pipeline stages."""
    NOT_FOUND = "not_found"
    INVALID_GEOMETRY = "invalid_geometry"
    DEGENERATE_INPUT = "degenerate_input"


@dataclass
class QuadDetectionResult:
    """
    Result of document quad detection.

    Attributes:
        quad: Four corner points as a (4, 2) float32 array, or None if not found.
        source: Which detector produced the quad ("backend" or "heuristic").
        failure: Failure category when no quad was found.
        message: Status message describing the result.
    """
    quad: Optional[np.ndarray] = field(default=None, repr=False)
    source: str = "heuristic"
    failure: Optional[FailureKind] = None
    message: str = ""

    @property
    def found(self) -> bool:
        return self.quad is not None

    @classmethod
    def notFound(
        cls,
        message: str,
        failure: FailureKind = FailureKind.NOT_FOUND
    ) -> "QuadDetectionResult":
        return cls(quad=None, failure=failure, message=message)

    def __repr__(self) -> str:
        if self.quad is not None:
            corners = [(round(float(x), 1), round(float(y), 1)) for x, y in self.quad]
            return f"QuadDetectionResult({self.source}: {corners})"
        return f"QuadDetectionResult(not found: {self.message})"


class IRectifyBackend(ABC):
    """
    External capability for document corner detection.

    When it returns at least 4 points, the first 4 preempt the built-in
    Sobel heuristic for that call.
    """

    @abstractmethod
    def detectQuad(self, image: np.ndarray) -> Optional[Sequence[Point]]:
        """
        Detect document corners.

        Args:
            image: Input image (H, W, 4) RGBA uint8.

        Returns:
            Sequence of (x, y) points in source image coordinates, or None.
        """
        pass


class IOrientationBackend(ABC):
    """External capability for page / text-line orientation classification."""

    @abstractmethod
    def classifyAngle(self, image: np.ndarray) -> Optional[int]:
        """
        Classify how far the image must be rotated clockwise to be upright.

        Args:
            image: Input image (H, W, 4) RGBA uint8.

        Returns:
            Rotation angle in degrees, or None if undecided.
        """
        pass


class IQuadDetector(ABC):
    """Abstract interface for document quad detection."""

    @abstractmethod
    def detect(self, image: np.ndarray) -> QuadDetectionResult:
        """
        Detect the four corners of a document.

        Args:
            image: Input image (H, W, 4) RGBA uint8.

        Returns:
            QuadDetectionResult with corners in (TL, TR, BR, BL) order or not found.
        """
        pass
