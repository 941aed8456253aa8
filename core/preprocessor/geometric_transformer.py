"""
Geometric Transformer Module

Handles geometric transformations for document image preprocessing:
rotation with bounding-box growth, clamped rectangular crops and
perspective warping of a quadrilateral onto an upright rectangle.

Follows SRP: Only handles geometric transformation operations.
"""

import logging
import math
from itertools import combinations
from typing import Optional, Sequence, Tuple
import numpy as np
import cv2


logger = logging.getLogger(__name__)


TRANSPARENT = (0, 0, 0, 0)


class GeometricTransformer:
    """
    Pixel-buffer geometry primitives.

    Every method returns a (result, message) pair. The result is None when
    the operation could not produce an image. Inputs are never modified.

    Follows SRP: Only responsible for geometric transformations.
    """

    @staticmethod
    def rotate(image: np.ndarray, angle: float) -> Tuple[np.ndarray, str]:
        """
        Rotate an image clockwise about its center.

        The output grows to the bounding box of the rotated source so that no
        content is cropped. Quarter turns are lossless; other angles are
        resampled bilinearly with a transparent fill.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            angle: Clockwise rotation in degrees.

        Returns:
            Tuple[np.ndarray, str]: Rotated image (the input itself when the
            angle is a multiple of 360) and a status message.
        """
        if not math.isfinite(angle):
            return image, f"Invalid angle {angle}, no rotation"

        normalized = angle % 360
        if normalized == 0:
            return image, "No rotation"

        quarterTurns = {
            90: cv2.ROTATE_90_CLOCKWISE,
            180: cv2.ROTATE_180,
            270: cv2.ROTATE_90_COUNTERCLOCKWISE,
        }
        if normalized in quarterTurns:
            return cv2.rotate(image, quarterTurns[normalized]), f"Rotated {int(normalized)}"

        h, w = image.shape[:2]
        radians = math.radians(normalized)
        cosA = abs(math.cos(radians))
        sinA = abs(math.sin(radians))
        newW = max(1, int(round(w * cosA + h * sinA)))
        newH = max(1, int(round(w * sinA + h * cosA)))

        # OpenCV angles are counter-clockwise
        center = ((w - 1) / 2.0, (h - 1) / 2.0)
        M = cv2.getRotationMatrix2D(center, -normalized, 1.0)
        M[0, 2] += (newW - 1) / 2.0 - center[0]
        M[1, 2] += (newH - 1) / 2.0 - center[1]

        rotated = cv2.warpAffine(
            image,
            M,
            (newW, newH),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=TRANSPARENT
        )
        return rotated, f"Rotated {normalized:.1f} -> {newW}x{newH}"

    @staticmethod
    def crop(
        image: np.ndarray,
        box: Optional[Sequence[float]]
    ) -> Tuple[Optional[np.ndarray], str]:
        """
        Extract a clamped sub-rectangle.

        left/top are clamped into [0, dim - 1]; right/bottom into
        [left + 1, width] / [top + 1, height].

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            box: [left, top, right, bottom]; extra values are ignored.

        Returns:
            Tuple[Optional[np.ndarray], str]: Cropped copy or None, and a message.
        """
        if box is None or len(box) < 4:
            return None, "Insufficient box values (need 4)"

        try:
            h, w = image.shape[:2]
            if w <= 0 or h <= 0:
                return None, "Cannot crop an empty image"

            left = min(max(int(box[0]), 0), w - 1)
            top = min(max(int(box[1]), 0), h - 1)
            right = min(max(int(box[2]), left + 1), w)
            bottom = min(max(int(box[3]), top + 1), h)

            cropped = image[top:bottom, left:right].copy()
            return cropped, f"Cropped [{left}, {top}, {right}, {bottom}]"

        except MemoryError:
            raise
        except Exception as e:
            logger.error(f"Error in crop: {e}")
            return None, f"Error: {str(e)}"

    @staticmethod
    def computePerspectiveTransform(
        srcPoints: np.ndarray,
        dstPoints: np.ndarray
    ) -> Optional[np.ndarray]:
        """
        Solve the 8-coefficient projective mapping src -> dst.

        x' = (a*x + b*y + c) / (g*x + h*y + 1)
        y' = (d*x + e*y + f) / (g*x + h*y + 1)

        Args:
            srcPoints: (4, 2) source points.
            dstPoints: (4, 2) destination points.

        Returns:
            3x3 float64 matrix, or None when any three source points are
            collinear, the system is singular or the result is non-finite.
        """
        src = np.asarray(srcPoints, dtype=np.float64).reshape(4, 2)
        dst = np.asarray(dstPoints, dtype=np.float64).reshape(4, 2)

        if not (np.all(np.isfinite(src)) and np.all(np.isfinite(dst))):
            return None

        span = max(1.0, float(np.ptp(src[:, 0])), float(np.ptp(src[:, 1])))
        tolerance = 1e-9 * span * span
        for p, q, r in combinations(src, 3):
            cross = (q[0] - p[0]) * (r[1] - p[1]) - (q[1] - p[1]) * (r[0] - p[0])
            if abs(cross) <= tolerance:
                return None

        A = np.zeros((8, 8), dtype=np.float64)
        b = np.zeros(8, dtype=np.float64)
        for i, ((x, y), (u, v)) in enumerate(zip(src, dst)):
            A[2 * i] = [x, y, 1, 0, 0, 0, -x * u, -y * u]
            A[2 * i + 1] = [0, 0, 0, x, y, 1, -x * v, -y * v]
            b[2 * i] = u
            b[2 * i + 1] = v

        try:
            coefficients = np.linalg.solve(A, b)
        except np.linalg.LinAlgError:
            return None

        if not np.all(np.isfinite(coefficients)):
            return None

        return np.append(coefficients, 1.0).reshape(3, 3)

    @staticmethod
    def warpPerspective(
        image: np.ndarray,
        orderedQuad: np.ndarray,
        dstWidth: int,
        dstHeight: int
    ) -> Tuple[Optional[np.ndarray], str]:
        """
        Warp an ordered quad onto a dstWidth x dstHeight rectangle.

        The quad corners (TL, TR, BR, BL) map to (0,0), (W,0), (W,H), (0,H).
        Resampling is bilinear through the inverse mapping.

        Args:
            image: Input image (H, W, 4) RGBA uint8.
            orderedQuad: (4, 2) corners in TL, TR, BR, BL order.
            dstWidth: Output width.
            dstHeight: Output height.

        Returns:
            Tuple[Optional[np.ndarray], str]: Warped image or None, and a message.
        """
        if dstWidth <= 1 or dstHeight <= 1:
            return None, f"Invalid destination size {dstWidth}x{dstHeight}"

        if orderedQuad is None or len(orderedQuad) < 4:
            return None, "Insufficient quad points (need 4)"

        try:
            srcPts = np.asarray(orderedQuad, dtype=np.float64)[:4]
            dstPts = np.array([
                [0, 0],
                [dstWidth, 0],
                [dstWidth, dstHeight],
                [0, dstHeight],
            ], dtype=np.float64)

            M = GeometricTransformer.computePerspectiveTransform(srcPts, dstPts)
            if M is None:
                return None, "Degenerate quad: perspective transform undefined"

            warped = cv2.warpPerspective(
                image,
                M,
                (int(dstWidth), int(dstHeight)),
                flags=cv2.INTER_LINEAR,
                borderMode=cv2.BORDER_CONSTANT,
                borderValue=TRANSPARENT
            )
            return warped, f"Success: {dstWidth}x{dstHeight}"

        except MemoryError:
            raise
        except Exception as e:
            logger.error(f"Error in perspective warp: {e}")
            return None, f"Error: {str(e)}"
