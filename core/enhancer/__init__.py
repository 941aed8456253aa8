"""
Image Enhancement Module

Contains implementations for document legibility enhancement:
- ContrastEnhancer: Linear contrast/brightness adjustment
- SharpnessEnhancer: Laplacian sharpen
- ImageEnhancer: Orchestrator combining both enhancers
"""

from core.enhancer.contrast_enhancer import ContrastEnhancer
from core.enhancer.sharpness_enhancer import SharpnessEnhancer
from core.enhancer.image_enhancer import ImageEnhancer


__all__ = [
    "ContrastEnhancer",
    "SharpnessEnhancer",
    "ImageEnhancer"
]
