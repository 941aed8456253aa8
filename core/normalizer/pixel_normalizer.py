"""
Pixel Normalizer Module

Encodes RGBA pixel buffers into the planar float tensors expected by
recognition and detection models.

Follows SRP: Only handles tensor encoding.
"""

import logging
from typing import Optional
import numpy as np

from core.imaging.pixel_buffer import resizeImage
from core.interfaces.normalizer_interface import (
    IPixelNormalizer,
    NormalizationSpec,
    DetectorTensor,
)


logger = logging.getLogger(__name__)


DET_ALIGNMENT = 32


class PixelNormalizer(IPixelNormalizer):
    """
    Converts RGBA buffers into planar R/G/B float32 tensors.

    Pixels are scaled to [0, 1] and then normalized per channel as
    (v - mean[c]) / std[c]. The fixed scheme (mean = std = 0.5) yields
    values in [-1, 1]. Alpha is ignored.
    """

    def normalize(
        self,
        image: np.ndarray,
        targetWidth: int,
        targetHeight: int,
        spec: Optional[NormalizationSpec] = None
    ) -> np.ndarray:
        """
        Encode an image into a flat planar tensor.

        The image is resized bilinearly when its size differs from the target.
        The caller's buffer is never modified.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            targetWidth: Model input width.
            targetHeight: Model input height.
            spec: Normalization scheme, fixed when None.

        Returns:
            Flat float32 array of length 3 * targetWidth * targetHeight.

        Raises:
            ValueError: If target dimensions are not positive.
        """
        if targetWidth <= 0 or targetHeight <= 0:
            raise ValueError(f"Invalid target size {targetWidth}x{targetHeight}")

        spec = spec or NormalizationSpec.fixed()
        resized = resizeImage(image, targetWidth, targetHeight)
        return self._encodePlanar(resized, spec)

    def normalizeForDetector(
        self,
        image: np.ndarray,
        maxSideLen: int,
        spec: Optional[NormalizationSpec] = None
    ) -> DetectorTensor:
        """
        Encode an image for a text detector.

        Scale is min(1, maxSideLen / max(w, h)). Each resized dimension is
        rounded down to a multiple of 32 and floored at 32.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            maxSideLen: Upper bound for the longer resized side.
            spec: Normalization scheme, ImageNet mean/std when None.

        Returns:
            DetectorTensor with the resize geometry and scale-back factors.
        """
        spec = spec or NormalizationSpec.imageNet()
        h, w = image.shape[:2]

        ratio = min(1.0, float(maxSideLen) / max(w, h))
        resizeW = max(DET_ALIGNMENT, int(w * ratio) // DET_ALIGNMENT * DET_ALIGNMENT)
        resizeH = max(DET_ALIGNMENT, int(h * ratio) // DET_ALIGNMENT * DET_ALIGNMENT)

        resized = resizeImage(image, resizeW, resizeH)
        data = self._encodePlanar(resized, spec)

        logger.debug(f"Detector tensor: {w}x{h} -> {resizeW}x{resizeH}")

        return DetectorTensor(
            data=data,
            resizeWidth=resizeW,
            resizeHeight=resizeH,
            scaleX=w / float(resizeW),
            scaleY=h / float(resizeH)
        )

    @staticmethod
    def _encodePlanar(image: np.ndarray, spec: NormalizationSpec) -> np.ndarray:
        rgb = image[..., :3].astype(np.float32) / 255.0
        mean = np.asarray(spec.mean, dtype=np.float32)
        std = np.asarray(spec.std, dtype=np.float32)
        normalized = (rgb - mean) / std

        # HWC -> CHW, flattened plane by plane
        return np.ascontiguousarray(np.transpose(normalized, (2, 0, 1))).ravel()
