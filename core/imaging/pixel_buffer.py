"""
Pixel Buffer Module

Conversions between packed 32-bit ARGB pixels, OpenCV BGR images and the
(H, W, 4) RGBA uint8 buffers used throughout the pipeline, plus the shared
luminance/resize helpers the classifiers and detectors sample with.

Follows SRP: Only handles pixel representation concerns.
"""

import numpy as np
import cv2


RED, GREEN, BLUE, ALPHA = 0, 1, 2, 3


def fromPackedArgb(packed: np.ndarray) -> np.ndarray:
    """
    Unpack a (H, W) array of 0xAARRGGBB integers into an RGBA buffer.

    Args:
        packed: 2D integer array of packed ARGB pixels.

    Returns:
        (H, W, 4) uint8 RGBA buffer.
    """
    packed = np.asarray(packed).astype(np.uint32)
    if packed.ndim != 2:
        raise ValueError(f"Packed ARGB buffer must be 2D, got shape {packed.shape}")

    rgba = np.empty(packed.shape + (4,), dtype=np.uint8)
    rgba[..., RED] = (packed >> 16) & 0xFF
    rgba[..., GREEN] = (packed >> 8) & 0xFF
    rgba[..., BLUE] = packed & 0xFF
    rgba[..., ALPHA] = (packed >> 24) & 0xFF
    return rgba


def toPackedArgb(image: np.ndarray) -> np.ndarray:
    """Pack an RGBA buffer into a (H, W) uint32 array of 0xAARRGGBB values."""
    channels = image.astype(np.uint32)
    return (
        (channels[..., ALPHA] << 24)
        | (channels[..., RED] << 16)
        | (channels[..., GREEN] << 8)
        | channels[..., BLUE]
    )


def fromBgr(image: np.ndarray) -> np.ndarray:
    """
    Convert an OpenCV-decoded image into an RGBA buffer.

    Accepts grayscale (H, W), BGR (H, W, 3) and BGRA (H, W, 4) uint8 images.
    """
    if image is None or image.size == 0:
        raise ValueError("Cannot convert an empty image")

    if image.dtype != np.uint8:
        image = cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    if len(image.shape) == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    if image.shape[2] == 1:
        return cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2RGBA)
    if image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)

    raise ValueError(f"Unsupported channel count: {image.shape[2]}")


def toBgr(image: np.ndarray) -> np.ndarray:
    """Convert an RGBA buffer into a BGR image for OpenCV writing."""
    return cv2.cvtColor(image, cv2.COLOR_RGBA2BGR)


def resizeImage(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Resize with bilinear filtering.

    Returns the input object unchanged when it already has the requested size.
    """
    h, w = image.shape[:2]
    if w == width and h == height:
        return image
    return cv2.resize(image, (width, height), interpolation=cv2.INTER_LINEAR)


def relativeLuminance(image: np.ndarray) -> np.ndarray:
    """
    Rec. 709 relative luminance in [0, 1] per pixel.

    Args:
        image: (H, W, 4) RGBA uint8 buffer.

    Returns:
        (H, W) float32 luminance map.
    """
    rgb = image[..., :3].astype(np.float32) / 255.0
    return (
        0.2126 * rgb[..., RED]
        + 0.7152 * rgb[..., GREEN]
        + 0.0722 * rgb[..., BLUE]
    )


def grayscale(image: np.ndarray) -> np.ndarray:
    """
    Integer Rec. 601 grayscale (truncated) per pixel.

    Args:
        image: (H, W, 4) RGBA uint8 buffer.

    Returns:
        (H, W) int32 gray map in [0, 255].
    """
    rgb = image[..., :3].astype(np.float64)
    gray = 0.299 * rgb[..., RED] + 0.587 * rgb[..., GREEN] + 0.114 * rgb[..., BLUE]
    return gray.astype(np.int32)
