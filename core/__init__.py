# Core module for the OCR preprocessing pipeline
# Contains interfaces and implementations for classification, rectification,
# enhancement and normalization

from core.interfaces.classifier_interface import SceneTag, LayoutTag
from core.interfaces.geometry_interface import QuadDetectionResult
from core.interfaces.normalizer_interface import NormalizationSpec, DetectorTensor
from core.interfaces.recognition_interface import TextBox, TextResult
from core.preprocessor.document_preprocessor import DocumentPreprocessor
from core.enhancer.image_enhancer import ImageEnhancer
from core.normalizer.pixel_normalizer import PixelNormalizer

__all__ = [
    "SceneTag",
    "LayoutTag",
    "QuadDetectionResult",
    "NormalizationSpec",
    "DetectorTensor",
    "TextBox",
    "TextResult",
    "DocumentPreprocessor",
    "ImageEnhancer",
    "PixelNormalizer",
]
