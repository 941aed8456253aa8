"""End-to-end tests for the pipeline orchestrator."""

import json

import numpy as np
import pytest

from core.interfaces.classifier_interface import ILayoutBackend, SceneTag, LayoutTag
from core.interfaces.geometry_interface import IOrientationBackend
from core.interfaces.recognition_interface import IRecognitionBackend, TextResult
from services.pipeline_orchestrator import PipelineOrchestrator
from conftest import solidImage


class TableBackend(ILayoutBackend):

    def classify(self, image):
        return LayoutTag.TABLE


class QuarterTurnBackend(IOrientationBackend):

    def classifyAngle(self, image):
        return 90


class EchoRecognizer(IRecognitionBackend):

    def __init__(self, error=None):
        self._error = error
        self.calls = []

    def recognize(self, tensor, width, height):
        self.calls.append((tensor.shape, width, height))
        if self._error is not None:
            raise self._error
        return TextResult(text="ok", confidence=0.5)


class FakeSession:

    def get_inputs(self):
        return [type("Input", (), {"name": "x"})()]

    def run(self, outputNames, feeds):
        return [np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float32)]


class TestPipelineOrchestrator:

    def test_document_end_to_end(self, configFile, documentImage):
        orchestrator = PipelineOrchestrator(configFile())
        result = orchestrator.process(documentImage, "doc")

        assert result.success
        assert result.scene == SceneTag.DOCUMENT
        assert result.quad is not None
        assert result.tensor.shape == (3 * 32 * 16,)
        assert (result.tensorWidth, result.tensorHeight) == (32, 16)
        assert result.tensor.min() >= -1.0 and result.tensor.max() <= 1.0
        for key in ("s1_preprocessing", "s2_enhancement", "s3_normalization", "total_pipeline"):
            assert key in result.timings
        assert "recognition" not in result.timings

    def test_item_photo_skips_rectification(self, configFile, grayImage):
        result = PipelineOrchestrator(configFile()).process(grayImage, "item")
        assert result.success
        assert result.scene == SceneTag.ITEM_PHOTO
        assert result.quad is None
        assert result.enhancedImage is grayImage

    def test_input_never_modified(self, configFile, documentImage):
        before = documentImage.copy()
        PipelineOrchestrator(configFile()).process(documentImage, "doc")
        np.testing.assert_array_equal(documentImage, before)

    @pytest.mark.parametrize("image", [
        None,
        np.zeros((10, 10, 3), dtype=np.uint8),
        np.zeros((10, 10, 4), dtype=np.float32),
        np.zeros((0, 10, 4), dtype=np.uint8),
    ])
    def test_invalid_input(self, configFile, image):
        result = PipelineOrchestrator(configFile()).process(image, "bad")
        assert not result.success
        assert result.tensor is None

    def test_generated_frame_id(self, configFile, grayImage):
        result = PipelineOrchestrator(configFile()).process(grayImage)
        assert result.frameId

    def test_explicit_backends(self, configFile):
        orchestrator = PipelineOrchestrator(
            configFile(),
            layoutBackend=TableBackend(),
            orientationBackend=QuarterTurnBackend()
        )
        result = orchestrator.process(solidImage(60, 30), "f")
        assert result.layout == LayoutTag.TABLE
        assert result.enhancedImage.shape == (60, 30, 4)

    def test_orientation_fix_disabled_in_config(self, configFile):
        orchestrator = PipelineOrchestrator(
            configFile(s1_preprocessing={"orientationFix": False}),
            orientationBackend=QuarterTurnBackend()
        )
        result = orchestrator.process(solidImage(60, 30), "f")
        assert result.enhancedImage.shape == (30, 60, 4)

    def test_recognition_collaborator(self, configFile, grayImage):
        recognizer = EchoRecognizer()
        result = PipelineOrchestrator(configFile(), recognitionBackend=recognizer).process(grayImage, "r")
        assert result.recognition == TextResult(text="ok", confidence=0.5)
        assert recognizer.calls == [((3 * 32 * 16,), 32, 16)]
        assert "recognition" in result.timings

    def test_recognition_failure_keeps_tensor(self, configFile, grayImage):
        recognizer = EchoRecognizer(error=RuntimeError("offline"))
        result = PipelineOrchestrator(configFile(), recognitionBackend=recognizer).process(grayImage, "r")
        assert result.success
        assert result.recognition is None

    def test_mean_std_normalization(self, configFile):
        path = configFile(s3_normalization={"scheme": "meanStd", "mean": [0, 0, 0], "std": [1, 1, 1]})
        result = PipelineOrchestrator(path).process(solidImage(10, 10, 255), "m")
        np.testing.assert_allclose(result.tensor, 1.0)

    def test_unknown_scheme_rejected(self, configFile):
        with pytest.raises(ValueError):
            PipelineOrchestrator(configFile(s3_normalization={"scheme": "zscore"}))

    def test_missing_config_rejected(self, tmp_path):
        with pytest.raises(RuntimeError):
            PipelineOrchestrator(str(tmp_path / "missing.json"))

    def test_configured_backend_and_release(self, configFile, tmp_path):
        modelPath = tmp_path / "layout.onnx"
        modelPath.write_bytes(b"onnx")
        path = configFile(backends={"layout": {"modelPath": str(modelPath), "inputSize": 32}})

        orchestrator = PipelineOrchestrator(path, sessionFactory=lambda p: FakeSession())
        result = orchestrator.process(solidImage(20, 20), "b")
        assert result.layout == LayoutTag.TABLE
        assert len(orchestrator.sessionCache) == 1

        orchestrator.releaseResources()
        assert len(orchestrator.sessionCache) == 0

        # Sessions come back on demand
        assert orchestrator.process(solidImage(20, 20), "b2").layout == LayoutTag.TABLE
        orchestrator.shutdown()
        assert len(orchestrator.sessionCache) == 0

    def test_debug_timing_saved(self, configFile, grayImage, tmp_path):
        orchestrator = PipelineOrchestrator(configFile())
        orchestrator.setDebugEnabled(True)
        assert orchestrator.isDebugEnabled()
        orchestrator.process(grayImage, "t1")

        timingFile = tmp_path / "debug" / "timing" / "timing_t1.json"
        data = json.loads(timingFile.read_text(encoding="utf-8"))
        assert data["frameId"] == "t1"
        assert "total_pipeline" in data["timing_ms"]

    def test_timing_not_saved_without_debug(self, configFile):
        orchestrator = PipelineOrchestrator(configFile())
        assert orchestrator.savePipelineTiming("x", {"total_pipeline": 1.0}) is None
