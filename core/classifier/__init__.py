"""
Classifier Package

Contains scene and layout heuristics used to route images through the pipeline.
"""

from core.classifier.scene_classifier import SceneClassifier
from core.classifier.layout_classifier import LayoutClassifier


__all__ = [
    'SceneClassifier',
    'LayoutClassifier',
]
