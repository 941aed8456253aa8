"""
Normalizer Package

Contains the pixel buffer to model tensor encoder.
"""

from core.normalizer.pixel_normalizer import PixelNormalizer


__all__ = [
    'PixelNormalizer',
]
