"""
Backends Package

ONNX Runtime implementations of the optional capability interfaces.
"""

from core.backends.onnx_backends import (
    OnnxSessionCache,
    OnnxLayoutBackend,
    OnnxOrientationBackend,
    OnnxRectifyBackend,
)
from core.backends.backend_factory import BackendSet, createBackends


__all__ = [
    'OnnxSessionCache',
    'OnnxLayoutBackend',
    'OnnxOrientationBackend',
    'OnnxRectifyBackend',
    'BackendSet',
    'createBackends',
]
