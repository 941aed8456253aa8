"""
Recognition Interface Module

Defines text detection/recognition value types and the abstract
recognition collaborator that consumes the pipeline tensor.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np


@dataclass(frozen=True)
class TextBox:
    """
    Axis-aligned text box in image pixel coordinates.

    Attributes:
        left: Left edge (inclusive), pixels.
        top: Top edge (inclusive).
        right: Right edge (exclusive).
        bottom: Bottom edge (exclusive).
        score: Detector confidence.
    """
    left: float
    top: float
    right: float
    bottom: float
    score: float = 1.0

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def asList(self) -> List[float]:
        return [self.left, self.top, self.right, self.bottom]

    def offset(self, dx: float, dy: float) -> "TextBox":
        """Translate the box by (dx, dy)."""
        return TextBox(
            left=self.left + dx,
            top=self.top + dy,
            right=self.right + dx,
            bottom=self.bottom + dy,
            score=self.score
        )


@dataclass
class TextResult:
    """
    Recognized text line.

    Attributes:
        text: Decoded text.
        confidence: Mean probability of emitted characters (0.0 - 1.0).
    """
    text: str
    confidence: float


@dataclass
class TextRegion:
    """
    Cropped text region.

    Attributes:
        box: Source box in parent image coordinates.
        image: Cropped RGBA image.
    """
    box: TextBox
    image: np.ndarray = field(repr=False)


class IRecognitionBackend(ABC):
    """
    External recognition collaborator.

    Consumes the normalized tensor produced by the pipeline.
    """

    @abstractmethod
    def recognize(
        self,
        tensor: np.ndarray,
        width: int,
        height: int
    ) -> Optional[TextResult]:
        """
        Recognize text from a planar tensor.

        Args:
            tensor: Flat float32 tensor of length 3 * width * height.
            width: Tensor width.
            height: Tensor height.

        Returns:
            TextResult, or None when nothing was recognized.
        """
        pass
