"""
Region Extractor Implementation.

Crops detected text boxes out of a processed image in reading order and
maps boxes found inside a cell crop back to parent image coordinates.

Follows the Single Responsibility Principle (SRP) from SOLID.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from core.interfaces.recognition_interface import TextBox, TextRegion
from core.preprocessor.geometric_transformer import GeometricTransformer


class RegionExtractor:
    """
    Extracts text regions from an image.

    Boxes are visited top-to-bottom, then left-to-right. Boxes whose crop
    fails are skipped.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize RegionExtractor.

        Args:
            logger: Logger instance for debug output
        """
        self._logger = logger or logging.getLogger(__name__)

    @staticmethod
    def sortBoxes(boxes: Sequence[TextBox]) -> List[TextBox]:
        """Sort boxes in reading order (top, then left)."""
        return sorted(boxes, key=lambda b: (b.top, b.left))

    def extractRegions(
        self,
        image: np.ndarray,
        boxes: Sequence[TextBox]
    ) -> List[TextRegion]:
        """
        Crop every box out of the image.

        Args:
            image: Source image (H, W, 4) RGBA uint8.
            boxes: Detected text boxes in image coordinates.

        Returns:
            TextRegion list in reading order.
        """
        regions = []
        for box in self.sortBoxes(boxes):
            crop, msg = GeometricTransformer.crop(image, box.asList())
            if crop is None:
                self._logger.debug(f"Skipping box {box}: {msg}")
                continue
            regions.append(TextRegion(box=box, image=crop))

        self._logger.debug(f"Extracted {len(regions)}/{len(boxes)} regions")
        return regions

    @staticmethod
    def mapToParent(innerBox: TextBox, cellBox: TextBox) -> TextBox:
        """
        Map a box detected inside a cell crop back to parent coordinates.

        Args:
            innerBox: Box relative to the cell crop.
            cellBox: The cell's box in the parent image.

        Returns:
            innerBox offset by the cell's top-left corner.
        """
        return innerBox.offset(cellBox.left, cellBox.top)
