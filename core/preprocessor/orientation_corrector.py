"""
Orientation Corrector Module

Handles orientation correction for document images using optional page
and text-line orientation backends.

Follows SRP: Only handles orientation correction operations.
"""

import logging
from typing import Optional, Tuple
import numpy as np

from core.interfaces.geometry_interface import IOrientationBackend
from core.preprocessor.geometric_transformer import GeometricTransformer


logger = logging.getLogger(__name__)


class OrientationCorrector:
    """
    Handles orientation correction for document images.

    Two passes, each optional:
    1. Document orientation: whole-page angle (0/90/180/270)
    2. Text-line orientation: run on the page-corrected image

    A backend answers how far to rotate clockwise. None, 0 or a backend
    error leaves the image untouched.

    Follows SRP: Only responsible for orientation correction.
    """

    def __init__(
        self,
        documentBackend: Optional[IOrientationBackend] = None,
        textlineBackend: Optional[IOrientationBackend] = None
    ):
        """
        Initialize OrientationCorrector.

        Args:
            documentBackend: Page orientation classifier.
            textlineBackend: Text-line orientation classifier.
        """
        self._documentBackend = documentBackend
        self._textlineBackend = textlineBackend

        logger.info(
            f"OrientationCorrector initialized: document={documentBackend is not None}, "
            f"textline={textlineBackend is not None}"
        )

    @property
    def isAvailable(self) -> bool:
        """Check if any orientation backend is configured."""
        return self._documentBackend is not None or self._textlineBackend is not None

    def correct(self, image: np.ndarray) -> Tuple[np.ndarray, int, str]:
        """
        Apply document then text-line orientation correction.

        Args:
            image: Input image (H, W, 4) RGBA uint8.

        Returns:
            Tuple[np.ndarray, int, str]:
                - The corrected image (the input itself when nothing rotated).
                - Total clockwise rotation applied, modulo 360.
                - Status message.
        """
        result, docAngle, docMsg = self._applyBackend(image, self._documentBackend, "document")
        result, lineAngle, lineMsg = self._applyBackend(result, self._textlineBackend, "textline")
        return result, (docAngle + lineAngle) % 360, f"{docMsg}; {lineMsg}"

    def _applyBackend(
        self,
        image: np.ndarray,
        backend: Optional[IOrientationBackend],
        label: str
    ) -> Tuple[np.ndarray, int, str]:
        if backend is None:
            return image, 0, f"{label}: no backend"

        try:
            angle = backend.classifyAngle(image)
        except MemoryError:
            raise
        except Exception as e:
            logger.warning(f"Orientation backend ({label}) failed: {e}")
            return image, 0, f"{label}: error"

        if angle is None or int(angle) % 360 == 0:
            return image, 0, f"{label}: upright"

        rotated, msg = GeometricTransformer.rotate(image, int(angle))
        logger.debug(f"Orientation ({label}): {msg}")
        return rotated, int(angle) % 360, f"{label}: rotated {int(angle) % 360}"
