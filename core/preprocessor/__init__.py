"""
Preprocessor Package

Contains orientation, rectification and sampling components for document images.
"""

from core.preprocessor.sampling_planner import SamplingPlanner
from core.preprocessor.geometric_transformer import GeometricTransformer
from core.preprocessor.quad_geometry import QuadOrderer, WarpSizeEstimator
from core.preprocessor.quad_detector import DocumentQuadDetector
from core.preprocessor.orientation_corrector import OrientationCorrector
from core.preprocessor.document_preprocessor import DocumentPreprocessor


__all__ = [
    'SamplingPlanner',
    'GeometricTransformer',
    'QuadOrderer',
    'WarpSizeEstimator',
    'DocumentQuadDetector',
    'OrientationCorrector',
    'DocumentPreprocessor',
]
