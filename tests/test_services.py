"""Tests for the three pipeline stage services."""

import json

import numpy as np
import pytest

from core.interfaces.classifier_interface import SceneTag, LayoutTag
from core.interfaces.normalizer_interface import NormalizationSpec
from services.impl.s1_preprocessing_service import S1PreprocessingService
from services.impl.s2_enhancement_service import S2EnhancementService
from services.impl.s3_normalization_service import S3NormalizationService
from conftest import solidImage


class TestS1PreprocessingService:

    def test_document_is_rectified(self, documentImage):
        result = S1PreprocessingService().preprocess(documentImage, "f1")
        assert result.success
        assert result.scene == SceneTag.DOCUMENT
        assert result.warped
        assert result.frameId == "f1"
        assert result.processingTimeMs >= 0

    def test_disabled_passes_through(self, documentImage):
        service = S1PreprocessingService(enabled=False)
        assert not service.isEnabled()
        result = service.preprocess(documentImage, "f2")
        assert result.image is documentImage
        assert result.scene == SceneTag.ITEM_PHOTO
        assert result.layout == LayoutTag.TEXT_LABEL
        assert not result.success

    def test_error_falls_back(self):
        result = S1PreprocessingService().preprocess(None, "f3")
        assert not result.success
        assert result.image is None
        assert "Error" in result.message

    def test_debug_output(self, documentImage, tmp_path):
        service = S1PreprocessingService(debugBasePath=str(tmp_path), debugEnabled=True)
        service.preprocess(documentImage, "dbg")
        debugDir = tmp_path / "s1_preprocessing"
        assert (debugDir / "preprocessed_dbg.png").exists()
        info = json.loads((debugDir / "preprocessing_dbg.json").read_text(encoding="utf-8"))
        assert info["scene"] == "document"
        assert len(info["quad"]) == 4


class TestS2EnhancementService:

    def test_document_enhanced(self, grayImage):
        result = S2EnhancementService(contrast=1.0, brightness=10).enhance(grayImage, SceneTag.DOCUMENT, "f")
        assert result.success
        assert result.contrastApplied
        assert result.enhancedImage[5, 5, 0] == 138

    def test_item_photo_untouched(self, grayImage):
        result = S2EnhancementService().enhance(grayImage, SceneTag.ITEM_PHOTO, "f")
        assert result.enhancedImage is grayImage
        assert not result.contrastApplied

    def test_disabled(self, grayImage):
        service = S2EnhancementService()
        service.setEnabled(False)
        result = service.enhance(grayImage, SceneTag.DOCUMENT, "f")
        assert result.enhancedImage is grayImage
        assert result.success

    def test_error_returns_input(self):
        broken = np.zeros((4, 4), dtype=np.uint8)
        result = S2EnhancementService().enhance(broken, SceneTag.DOCUMENT, "f")
        assert not result.success
        assert result.enhancedImage is broken


class TestS3NormalizationService:

    def test_tensor_size(self, grayImage):
        service = S3NormalizationService(targetWidth=40, targetHeight=12)
        result = service.normalize(grayImage, "f")
        assert result.success
        assert result.tensor.shape == (3 * 40 * 12,)
        assert (result.width, result.height) == (40, 12)

    def test_mean_std_scheme(self):
        spec = NormalizationSpec.meanStd([0, 0, 0], [1, 1, 1])
        result = S3NormalizationService(4, 4, spec=spec).normalize(solidImage(4, 4, 255), "f")
        np.testing.assert_allclose(result.tensor, 1.0)

    @pytest.mark.parametrize("width,height", [(0, 48), (320, -1)])
    def test_invalid_size_rejected(self, width, height):
        with pytest.raises(ValueError):
            S3NormalizationService(targetWidth=width, targetHeight=height)

    def test_failure_has_no_tensor(self):
        result = S3NormalizationService(8, 8).normalize(np.zeros((0,), dtype=np.uint8), "f")
        assert not result.success
        assert result.tensor is None

    def test_detector_tensor(self, grayImage):
        det = S3NormalizationService(detMaxSideLen=960).normalizeForDetector(grayImage, "f")
        assert det.resizeWidth == 64
        assert det.resizeHeight == 32
