"""
Imaging Package

Pixel buffer conversions shared by every pipeline stage.
"""

from core.imaging.pixel_buffer import (
    fromPackedArgb,
    toPackedArgb,
    fromBgr,
    toBgr,
    resizeImage,
    relativeLuminance,
    grayscale,
)


__all__ = [
    'fromPackedArgb',
    'toPackedArgb',
    'fromBgr',
    'toBgr',
    'resizeImage',
    'relativeLuminance',
    'grayscale',
]
