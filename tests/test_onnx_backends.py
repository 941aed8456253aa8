"""Tests for the ONNX capability backends, using fake sessions."""

import numpy as np
import pytest

from core.interfaces.classifier_interface import LayoutTag
from core.backends.onnx_backends import (
    OnnxSessionCache,
    OnnxLayoutBackend,
    OnnxOrientationBackend,
    OnnxRectifyBackend,
)
from core.backends.backend_factory import createBackends
from conftest import solidImage


class FakeInput:
    name = "x"


class FakeSession:
    """Mimics the parts of onnxruntime.InferenceSession the backends use."""

    def __init__(self, output=None, error=None):
        self._output = output
        self._error = error
        self.feeds = []

    def get_inputs(self):
        return [FakeInput()]

    def run(self, outputNames, feeds):
        self.feeds.append(feeds)
        if self._error is not None:
            raise self._error
        return [np.asarray(self._output, dtype=np.float32)]


@pytest.fixture
def modelFile(tmp_path):
    path = tmp_path / "model.onnx"
    path.write_bytes(b"onnx")
    return str(path)


def cacheFor(session):
    created = []

    def factory(path):
        created.append(path)
        return session

    cache = OnnxSessionCache(factory)
    cache.created = created
    return cache


class TestSessionCache:

    def test_sessions_are_reused_until_cleared(self, modelFile):
        cache = cacheFor(FakeSession([0]))
        first = cache.get(modelFile)
        assert cache.get(modelFile) is first
        assert len(cache) == 1
        assert len(cache.created) == 1

        cache.clear()
        assert len(cache) == 0
        cache.get(modelFile)
        assert len(cache.created) == 2


class TestLayoutBackend:

    def test_table_class(self, modelFile):
        session = FakeSession([0.1, 0.0, 0.2, 0.9])
        backend = OnnxLayoutBackend(modelFile, cacheFor(session), inputSize=32)
        assert backend.classify(solidImage(50, 40)) == LayoutTag.TABLE
        assert session.feeds[0]["x"].shape == (1, 3, 32, 32)

    def test_other_class_is_text_label(self, modelFile):
        backend = OnnxLayoutBackend(modelFile, cacheFor(FakeSession([0.9, 0.1])), inputSize=16)
        assert backend.classify(solidImage(50, 40)) == LayoutTag.TEXT_LABEL

    def test_missing_model_is_undecided(self, tmp_path):
        backend = OnnxLayoutBackend(str(tmp_path / "missing.onnx"), cacheFor(FakeSession([1])))
        assert not backend.isAvailable()
        assert backend.classify(solidImage(10, 10)) is None

    def test_inference_error_is_undecided(self, modelFile):
        session = FakeSession(error=RuntimeError("bad input"))
        backend = OnnxLayoutBackend(modelFile, cacheFor(session), inputSize=16)
        assert backend.classify(solidImage(10, 10)) is None


class TestOrientationBackend:

    def test_argmax_indexes_angles(self, modelFile):
        backend = OnnxOrientationBackend(modelFile, cacheFor(FakeSession([0.1, 0.2, 0.6, 0.1])), inputSize=16)
        assert backend.classifyAngle(solidImage(10, 10)) == 180

    def test_class_beyond_angles(self, modelFile):
        backend = OnnxOrientationBackend(
            modelFile, cacheFor(FakeSession([0.1, 0.2, 0.9])), inputSize=16, angles=[0, 180]
        )
        assert backend.classifyAngle(solidImage(10, 10)) is None


class TestRectifyBackend:

    def test_normalized_coordinates(self, modelFile):
        output = [0.1, 0.1, 0.9, 0.1, 0.9, 0.8, 0.1, 0.8]
        backend = OnnxRectifyBackend(modelFile, cacheFor(FakeSession(output)), inputSize=16)
        points = backend.detectQuad(solidImage(200, 100))
        np.testing.assert_allclose(points, [(20, 10), (180, 10), (180, 80), (20, 80)], atol=1e-4)

    def test_pixel_coordinates(self, modelFile):
        output = [10, 10, 500, 10, 500, 500, 10, 500]
        backend = OnnxRectifyBackend(modelFile, cacheFor(FakeSession(output)), inputSize=512)
        points = backend.detectQuad(solidImage(1024, 256))
        assert points[2] == pytest.approx((1000, 250))

    def test_short_output(self, modelFile):
        backend = OnnxRectifyBackend(modelFile, cacheFor(FakeSession([0.5] * 6)), inputSize=16)
        assert backend.detectQuad(solidImage(10, 10)) is None


class TestBackendFactory:

    def test_only_existing_models_are_created(self, modelFile, tmp_path):
        config = {
            "layout": {"modelPath": modelFile, "inputSize": 64, "tableClassIds": [1, 2]},
            "orientation": {"modelPath": str(tmp_path / "missing.onnx")},
            "textlineOrientation": {"modelPath": ""},
            "rectify": {"modelPath": modelFile},
        }
        backends = createBackends(config, cacheFor(FakeSession([0])))
        assert backends.layout is not None
        assert backends.layout.inputSize == 64
        assert backends.orientation is None
        assert backends.textlineOrientation is None
        assert backends.rectify is not None
        assert backends.rectify.inputSize == 512

    def test_empty_config(self):
        backends = createBackends(None, OnnxSessionCache())
        assert backends.layout is None
        assert backends.rectify is None
