"""
Output Decoder Module

Decodes raw model outputs: greedy CTC decoding for text recognition and
connected-component box extraction for text detection probability maps.

Follows SRP: Only handles model output decoding.
"""

import logging
from typing import List, Optional, Sequence
import numpy as np
import cv2

from core.interfaces.normalizer_interface import DetectorTensor
from core.interfaces.recognition_interface import TextBox, TextResult


logger = logging.getLogger(__name__)


DET_THRESHOLD = 0.3
DET_MIN_AREA = 24


def decodeCtc(
    data: Sequence[float],
    shape: Sequence[int],
    dictionary: Sequence[str]
) -> Optional[TextResult]:
    """
    Greedy CTC decoding of a (1, T, C) score tensor.

    The blank index is C - 1. Consecutive repeats collapse and blanks are
    dropped. Class indices outside the dictionary still count towards the
    confidence but add no text.

    Args:
        data: Flat scores of length T * C.
        shape: Output shape, at least 3 dims (batch, timeSteps, classes).
        dictionary: Characters indexed by class id.

    Returns:
        TextResult with the mean max-score of emitted tokens as confidence,
        or None when the shape has fewer than 3 dims.
    """
    if len(shape) < 3:
        return None

    timeSteps, numClasses = int(shape[1]), int(shape[2])
    if timeSteps == 0 or numClasses == 0:
        return TextResult(text="", confidence=0.0)

    scores = np.asarray(data, dtype=np.float32)[:timeSteps * numClasses].reshape(timeSteps, numClasses)
    indices = np.argmax(scores, axis=1)
    maxima = scores[np.arange(timeSteps), indices]
    blankIndex = numClasses - 1

    chars = []
    emitted = []
    prevIndex = -1
    for index, value in zip(indices.tolist(), maxima.tolist()):
        if index != blankIndex and index != prevIndex:
            if index < len(dictionary):
                chars.append(dictionary[index])
            emitted.append(value)
        prevIndex = index

    confidence = float(np.mean(emitted)) if emitted else 0.0
    return TextResult(text="".join(chars), confidence=confidence)


def extractProbabilityMap(data: Sequence[float], shape: Sequence[int]) -> Optional[np.ndarray]:
    """
    Pull the (H, W) text probability map out of a detector output.

    Supports (1, 1, H, W), (1, H, W, C) using channel 0, and (1, H, W).
    """
    values = np.asarray(data, dtype=np.float32).ravel()

    if len(shape) == 4:
        if shape[1] == 1:
            height, width = int(shape[2]), int(shape[3])
            return values[:height * width].reshape(height, width)
        if shape[3] == 1:
            height, width = int(shape[1]), int(shape[2])
            return values[:height * width * int(shape[3])].reshape(height, width, int(shape[3]))[..., 0]
        return None

    if len(shape) == 3:
        height, width = int(shape[1]), int(shape[2])
        return values[:height * width].reshape(height, width)

    return None


def decodeProbabilityMap(
    data: Sequence[float],
    shape: Sequence[int],
    detTensor: DetectorTensor,
    originalWidth: int,
    originalHeight: int,
    threshold: float = DET_THRESHOLD,
    minArea: int = DET_MIN_AREA
) -> List[TextBox]:
    """
    Turn a detector probability map into text boxes in source coordinates.

    Pixels with probability >= threshold are grouped into 8-connected
    components. Components smaller than minArea are dropped. Each bounding
    box is scaled map -> detector input -> source image and clamped to the
    source size. The score is the probability at the component's first
    pixel in row-major order.

    Args:
        data: Flat detector output.
        shape: Detector output shape.
        detTensor: Geometry of the detector input.
        originalWidth: Source image width.
        originalHeight: Source image height.
        threshold: Probability threshold.
        minArea: Minimum component area in map pixels.

    Returns:
        Boxes sorted by descending score.
    """
    probMap = extractProbabilityMap(data, shape)
    if probMap is None or probMap.size == 0:
        return []

    mapHeight, mapWidth = probMap.shape
    scaleToInputX = detTensor.resizeWidth / float(mapWidth)
    scaleToInputY = detTensor.resizeHeight / float(mapHeight)
    factorX = scaleToInputX * detTensor.scaleX
    factorY = scaleToInputY * detTensor.scaleY

    mask = (probMap >= threshold).astype(np.uint8)
    count, labels, stats, _ = cv2.connectedComponentsWithStats(mask, connectivity=8)

    # First row-major pixel of each label
    labelIds, seeds = np.unique(labels.ravel(), return_index=True)
    seedOf = dict(zip(labelIds.tolist(), seeds.tolist()))

    boxes = []
    for label in range(1, count):
        x, y, w, h, area = stats[label]
        if area < minArea:
            continue

        left = min(max(x * factorX, 0.0), float(originalWidth))
        top = min(max(y * factorY, 0.0), float(originalHeight))
        right = min(max((x + w) * factorX, 0.0), float(originalWidth))
        bottom = min(max((y + h) * factorY, 0.0), float(originalHeight))
        if right <= left or bottom <= top:
            continue

        score = float(probMap.flat[seedOf[label]])
        boxes.append(TextBox(left=float(left), top=float(top), right=float(right), bottom=float(bottom), score=score))

    logger.debug(f"Decoded {len(boxes)} boxes from {count - 1} components")
    return sorted(boxes, key=lambda b: b.score, reverse=True)
