"""
Classifier Interface Module

Defines scene/layout tags and the abstract classifiers used to route an
image through the preprocessing pipeline.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional
import numpy as np


class SceneTag(Enum):
    """Scene category of a captured image."""
    DOCUMENT = "document"
    ITEM_PHOTO = "item_photo"


class LayoutTag(Enum):
    """Layout category of a captured image."""
    TABLE = "table"
    TEXT_LABEL = "text_label"


class ISceneClassifier(ABC):
    """Abstract interface for scene classification."""

    @abstractmethod
    def classify(self, image: np.ndarray) -> SceneTag:
        """
        Classify the scene of an image.

        Args:
            image: Input image (H, W, 4) RGBA uint8.

        Returns:
            SceneTag: DOCUMENT or ITEM_PHOTO.
        """
        pass


class ILayoutBackend(ABC):
    """
    External capability for layout classification.

    A non-None result short-circuits the built-in heuristic.
    """

    @abstractmethod
    def classify(self, image: np.ndarray) -> Optional[LayoutTag]:
        """
        Classify the layout of an image.

        Args:
            image: Input image (H, W, 4) RGBA uint8.

        Returns:
            LayoutTag, or None when the backend cannot decide.
        """
        pass


class ILayoutClassifier(ABC):
    """Abstract interface for layout classification."""

    @abstractmethod
    def classify(self, image: np.ndarray) -> LayoutTag:
        """
        Classify the layout of an image.

        Args:
            image: Input image (H, W, 4) RGBA uint8.

        Returns:
            LayoutTag: TABLE or TEXT_LABEL.
        """
        pass
