"""
Normalizer Interface Module

Defines the normalization scheme value type, the detector tensor result
and the abstract pixel normalizer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple
import numpy as np


IMAGENET_MEAN = (0.485, 0.456, 0.406)
IMAGENET_STD = (0.229, 0.224, 0.225)


@dataclass(frozen=True)
class NormalizationSpec:
    """
    Channel normalization scheme applied after scaling pixels to [0, 1].

    The fixed scheme is mean 0.5 / std 0.5 on every channel, which maps
    [0, 1] onto [-1, 1]. Use fixed() or meanStd() to construct.

    Attributes:
        mean: Per-channel (R, G, B) mean.
        std: Per-channel (R, G, B) standard deviation.
        isFixed: Whether this is the fixed [-1, 1] scheme.
    """
    mean: Tuple[float, float, float] = (0.5, 0.5, 0.5)
    std: Tuple[float, float, float] = (0.5, 0.5, 0.5)
    isFixed: bool = True

    def __post_init__(self):
        if len(self.mean) != 3 or len(self.std) != 3:
            raise ValueError(
                f"NormalizationSpec needs 3 means and 3 stds, got {len(self.mean)}/{len(self.std)}"
            )
        if any(float(s) == 0.0 for s in self.std):
            raise ValueError(f"NormalizationSpec std must be non-zero, got {self.std}")

    @classmethod
    def fixed(cls) -> "NormalizationSpec":
        return cls()

    @classmethod
    def meanStd(cls, mean: Sequence[float], std: Sequence[float]) -> "NormalizationSpec":
        return cls(
            mean=tuple(float(m) for m in mean),
            std=tuple(float(s) for s in std),
            isFixed=False
        )

    @classmethod
    def imageNet(cls) -> "NormalizationSpec":
        return cls.meanStd(IMAGENET_MEAN, IMAGENET_STD)


@dataclass
class DetectorTensor:
    """
    Tensor prepared for a text detector, plus the resize geometry used.

    Attributes:
        data: Planar float32 tensor of length 3 * resizeWidth * resizeHeight.
        resizeWidth: Width the image was resized to (multiple of 32).
        resizeHeight: Height the image was resized to (multiple of 32).
        scaleX: sourceWidth / resizeWidth, maps detector x back to source.
        scaleY: sourceHeight / resizeHeight, maps detector y back to source.
    """
    data: np.ndarray = field(repr=False)
    resizeWidth: int
    resizeHeight: int
    scaleX: float
    scaleY: float


class IPixelNormalizer(ABC):
    """Abstract interface for pixel buffer to tensor conversion."""

    @abstractmethod
    def normalize(
        self,
        image: np.ndarray,
        targetWidth: int,
        targetHeight: int,
        spec: Optional[NormalizationSpec] = None
    ) -> np.ndarray:
        """
        Convert an image into a planar (R plane, G plane, B plane) float tensor.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            targetWidth: Model input width.
            targetHeight: Model input height.
            spec: Normalization scheme (fixed scheme when None).

        Returns:
            Flat float32 array of length 3 * targetWidth * targetHeight.
        """
        pass

    @abstractmethod
    def normalizeForDetector(
        self,
        image: np.ndarray,
        maxSideLen: int,
        spec: Optional[NormalizationSpec] = None
    ) -> DetectorTensor:
        """
        Convert an image into a detector tensor sized to multiples of 32.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            maxSideLen: Upper bound for the longer resized side.
            spec: Normalization scheme (ImageNet mean/std when None).

        Returns:
            DetectorTensor with the tensor and resize geometry.
        """
        pass
