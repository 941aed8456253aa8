"""
ONNX Runtime Backends

Implements the layout, orientation and rectify capability interfaces with
ONNX Runtime classification/regression models. Sessions are created lazily
and shared through an OnnxSessionCache that the host can clear when it
needs memory back.

Follows SRP: Each backend only maps one model output onto one capability.
"""

import logging
import os
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence
import numpy as np

from core.interfaces.classifier_interface import ILayoutBackend, LayoutTag
from core.interfaces.geometry_interface import IOrientationBackend, IRectifyBackend, Point
from core.interfaces.normalizer_interface import NormalizationSpec
from core.normalizer.pixel_normalizer import PixelNormalizer


logger = logging.getLogger(__name__)


LAYOUT_INPUT_SIZE = 640
ORIENTATION_INPUT_SIZE = 224
RECTIFY_INPUT_SIZE = 512
NORMALIZED_COORD_LIMIT = 1.5


def createOnnxSession(modelPath: str) -> Any:
    """Create a CPU ONNX Runtime session with full graph optimization."""
    import onnxruntime as ort

    sessionOptions = ort.SessionOptions()
    sessionOptions.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
    return ort.InferenceSession(
        modelPath,
        sess_options=sessionOptions,
        providers=['CPUExecutionProvider']
    )


class OnnxSessionCache:
    """
    Thread-safe cache of inference sessions keyed by model path.

    clear() drops every session; the next request recreates it.
    """

    def __init__(self, sessionFactory: Optional[Callable[[str], Any]] = None):
        """
        Initialize OnnxSessionCache.

        Args:
            sessionFactory: Creates a session from a model path
                            (ONNX Runtime CPU session when None).
        """
        self._sessionFactory = sessionFactory or createOnnxSession
        self._sessions: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, modelPath: str) -> Any:
        """Return the cached session for modelPath, creating it on first use."""
        key = os.path.abspath(modelPath)
        with self._lock:
            session = self._sessions.get(key)
            if session is None:
                session = self._sessionFactory(key)
                self._sessions[key] = session
                logger.info(f"ONNX session created: {key}")
            return session

    def clear(self) -> None:
        """Release every cached session."""
        with self._lock:
            count = len(self._sessions)
            self._sessions.clear()
        if count:
            logger.info(f"Released {count} ONNX session(s)")


class OnnxModelBackend:
    """
    Shared plumbing for square-input ImageNet-normalized models.

    Subclasses turn the flat first output into a capability result.
    """

    def __init__(
        self,
        modelPath: str,
        inputSize: int,
        sessionCache: OnnxSessionCache
    ):
        self._modelPath = modelPath
        self._inputSize = inputSize
        self._sessionCache = sessionCache
        self._normalizer = PixelNormalizer()
        self._spec = NormalizationSpec.imageNet()

    @property
    def modelPath(self) -> str:
        return self._modelPath

    @property
    def inputSize(self) -> int:
        return self._inputSize

    def isAvailable(self) -> bool:
        """Check if the model file exists."""
        return bool(self._modelPath) and os.path.isfile(self._modelPath)

    def _runModel(self, image: np.ndarray) -> Optional[np.ndarray]:
        """Run the model on an RGBA image and return its flat first output."""
        if not self.isAvailable():
            logger.debug(f"Model not found: {self._modelPath}")
            return None

        try:
            session = self._sessionCache.get(self._modelPath)
            tensor = self._normalizer.normalize(
                image, self._inputSize, self._inputSize, self._spec
            ).reshape(1, 3, self._inputSize, self._inputSize)

            inputName = session.get_inputs()[0].name
            outputs = session.run(None, {inputName: tensor})
            if not outputs:
                return None
            return np.asarray(outputs[0], dtype=np.float32).ravel()

        except MemoryError:
            raise
        except Exception as e:
            logger.warning(f"ONNX inference failed ({self._modelPath}): {e}")
            return None


class OnnxLayoutBackend(OnnxModelBackend, ILayoutBackend):
    """Layout classifier: argmax class in tableClassIds means TABLE."""

    def __init__(
        self,
        modelPath: str,
        sessionCache: OnnxSessionCache,
        inputSize: int = LAYOUT_INPUT_SIZE,
        tableClassIds: Sequence[int] = (3,)
    ):
        super().__init__(modelPath, inputSize, sessionCache)
        self._tableClassIds = set(int(i) for i in tableClassIds)

    def classify(self, image: np.ndarray) -> Optional[LayoutTag]:
        scores = self._runModel(image)
        if scores is None or scores.size == 0:
            return None
        classId = int(np.argmax(scores))
        return LayoutTag.TABLE if classId in self._tableClassIds else LayoutTag.TEXT_LABEL


class OnnxOrientationBackend(OnnxModelBackend, IOrientationBackend):
    """Orientation classifier: argmax class indexes into angles."""

    def __init__(
        self,
        modelPath: str,
        sessionCache: OnnxSessionCache,
        inputSize: int = ORIENTATION_INPUT_SIZE,
        angles: Sequence[int] = (0, 90, 180, 270)
    ):
        super().__init__(modelPath, inputSize, sessionCache)
        self._angles: List[int] = [int(a) for a in angles]

    def classifyAngle(self, image: np.ndarray) -> Optional[int]:
        scores = self._runModel(image)
        if scores is None or scores.size == 0:
            return None
        classId = int(np.argmax(scores))
        if classId >= len(self._angles):
            return None
        return self._angles[classId]


class OnnxRectifyBackend(OnnxModelBackend, IRectifyBackend):
    """
    Corner regressor: the first 8 outputs are x0, y0, ..., x3, y3.

    Values whose maximum is <= 1.5 are treated as normalized coordinates and
    scaled by the image size; otherwise they are model-input pixels.
    """

    def __init__(
        self,
        modelPath: str,
        sessionCache: OnnxSessionCache,
        inputSize: int = RECTIFY_INPUT_SIZE
    ):
        super().__init__(modelPath, inputSize, sessionCache)

    def detectQuad(self, image: np.ndarray) -> Optional[List[Point]]:
        values = self._runModel(image)
        if values is None or values.size < 8:
            return None

        coords = values[:8].astype(np.float64)
        h, w = image.shape[:2]
        if coords.max() <= NORMALIZED_COORD_LIMIT:
            scaleX, scaleY = float(w), float(h)
        else:
            scaleX, scaleY = w / float(self._inputSize), h / float(self._inputSize)

        return [
            (coords[i] * scaleX, coords[i + 1] * scaleY)
            for i in range(0, 8, 2)
        ]
