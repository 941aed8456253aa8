"""Tests for the orientation / classification / rectification stage."""

import numpy as np
import pytest

from core.interfaces.classifier_interface import ISceneClassifier, SceneTag, LayoutTag
from core.interfaces.geometry_interface import IOrientationBackend, IRectifyBackend
from core.preprocessor.document_preprocessor import DocumentPreprocessor
from core.preprocessor.orientation_corrector import OrientationCorrector
from core.preprocessor.quad_detector import DocumentQuadDetector
from core.preprocessor.quad_geometry import WarpSizeEstimator
from core.preprocessor.geometric_transformer import GeometricTransformer
from conftest import TRAPEZOID, solidImage


class StubOrientationBackend(IOrientationBackend):

    def __init__(self, angle=None, error=None):
        self._angle = angle
        self._error = error
        self.seenShapes = []

    def classifyAngle(self, image):
        self.seenShapes.append(image.shape)
        if self._error is not None:
            raise self._error
        return self._angle


class StubRectifyBackend(IRectifyBackend):

    def __init__(self, points):
        self._points = points

    def detectQuad(self, image):
        return self._points


class FixedScene(ISceneClassifier):

    def __init__(self, scene=None, error=None):
        self._scene = scene
        self._error = error

    def classify(self, image):
        if self._error is not None:
            raise self._error
        return self._scene


class TestOrientationCorrector:

    def test_no_backends(self, grayImage):
        corrector = OrientationCorrector()
        assert not corrector.isAvailable
        image, angle, _ = corrector.correct(grayImage)
        assert image is grayImage
        assert angle == 0

    def test_document_then_textline(self):
        document = StubOrientationBackend(90)
        textline = StubOrientationBackend(180)
        image = solidImage(40, 20)
        corrected, angle, _ = OrientationCorrector(document, textline).correct(image)
        assert angle == 270
        assert corrected.shape == (40, 20, 4)
        # Text-line pass sees the page-corrected image
        assert textline.seenShapes == [(40, 20, 4)]

    @pytest.mark.parametrize("backend", [
        StubOrientationBackend(None),
        StubOrientationBackend(0),
        StubOrientationBackend(360),
        StubOrientationBackend(error=RuntimeError("bad model")),
    ])
    def test_upright_or_failing_backend_keeps_image(self, grayImage, backend):
        corrected, angle, _ = OrientationCorrector(documentBackend=backend).correct(grayImage)
        assert corrected is grayImage
        assert angle == 0


class TestDocumentPreprocessor:

    def test_none_input_rejected(self):
        with pytest.raises(ValueError):
            DocumentPreprocessor().process(None)

    def test_item_photo_passes_through(self, grayImage):
        result = DocumentPreprocessor().process(grayImage)
        assert result.scene == SceneTag.ITEM_PHOTO
        assert result.layout == LayoutTag.TEXT_LABEL
        assert result.image is grayImage
        assert not result.warped
        assert result.quad is None

    def test_document_is_rectified(self, documentImage):
        result = DocumentPreprocessor().process(documentImage)
        assert result.scene == SceneTag.DOCUMENT
        assert result.warped
        width, height = WarpSizeEstimator().estimateWarpSize(result.quad)
        assert result.image.shape == (height, width, 4)
        # Exact size depends on which edge pixel each corner lands on
        assert abs(width - 301) <= 3 and abs(height - 340) <= 3
        for corner, target in zip(result.quad.tolist(), TRAPEZOID):
            assert abs(corner[0] - target[0]) <= 8
            assert abs(corner[1] - target[1]) <= 8

    def test_input_is_never_modified(self, documentImage):
        before = documentImage.copy()
        DocumentPreprocessor().process(documentImage)
        np.testing.assert_array_equal(documentImage, before)

    def test_backend_quad_is_ordered(self, documentImage):
        shuffled = [(370, 350), (60, 50), (30, 350), (340, 50)]
        preprocessor = DocumentPreprocessor(
            quadDetector=DocumentQuadDetector(backend=StubRectifyBackend(shuffled))
        )
        detection = preprocessor.detectQuad(documentImage)
        assert detection.source == "backend"
        assert detection.quad.tolist() == [list(map(float, p)) for p in TRAPEZOID]

    def test_degenerate_quad_keeps_oriented_image(self, documentImage):
        collinear = [(0, 0), (100, 100), (200, 200), (300, 300)]
        preprocessor = DocumentPreprocessor(
            quadDetector=DocumentQuadDetector(backend=StubRectifyBackend(collinear))
        )
        result = preprocessor.process(documentImage)
        assert result.scene == SceneTag.DOCUMENT
        assert not result.warped
        assert result.image is documentImage

    def test_scene_failure_falls_back_to_item_photo(self, documentImage):
        preprocessor = DocumentPreprocessor(sceneClassifier=FixedScene(error=RuntimeError("x")))
        result = preprocessor.process(documentImage)
        assert result.scene == SceneTag.ITEM_PHOTO
        assert result.image is documentImage

    def test_orientation_fix_can_be_disabled(self, grayImage):
        backend = StubOrientationBackend(90)
        preprocessor = DocumentPreprocessor(
            orientationCorrector=OrientationCorrector(documentBackend=backend)
        )
        result = preprocessor.process(grayImage, useOrientationFix=False)
        assert result.rotationApplied == 0
        assert backend.seenShapes == []

    def test_orientation_applied_before_classification(self):
        backend = StubOrientationBackend(90)
        preprocessor = DocumentPreprocessor(
            sceneClassifier=FixedScene(SceneTag.ITEM_PHOTO),
            orientationCorrector=OrientationCorrector(documentBackend=backend)
        )
        result = preprocessor.process(solidImage(60, 30))
        assert result.rotationApplied == 90
        assert result.image.shape == (60, 30, 4)
        assert "Step1" in result.message


def projectPoints(matrix, points):
    homogeneous = np.hstack([np.asarray(points, dtype=np.float64), np.ones((len(points), 1))])
    projected = homogeneous @ matrix.T
    return projected[:, :2] / projected[:, 2:3]


class TestRectificationAlignment:

    @pytest.fixture
    def rectified(self, documentImage):
        result = DocumentPreprocessor().process(documentImage)
        assert result.warped
        return result

    def test_output_corners_show_the_page(self, rectified):
        # Background is flat 128; the page is a 0/255 checkerboard
        image = rectified.image
        h, w = image.shape[:2]
        inset, patch = 4, 8
        for y, x in [(inset, inset), (inset, w - inset - patch),
                     (h - inset - patch, w - inset - patch), (h - inset - patch, inset)]:
            window = image[y:y + patch, x:x + patch, :3].astype(np.float64)
            assert np.mean(np.abs(window - 128)) > 40, (y, x)
            assert np.all(image[y:y + patch, x:x + patch, 3] == 255)

    def test_transform_maps_corners_to_rectangle(self, rectified):
        h, w = rectified.image.shape[:2]
        rectangle = np.array([[0, 0], [w, 0], [w, h], [0, h]], dtype=np.float64)
        matrix = GeometricTransformer.computePerspectiveTransform(rectified.quad, rectangle)
        assert matrix is not None

        np.testing.assert_allclose(projectPoints(matrix, rectified.quad), rectangle, atol=1e-3)
        # The drawn page corners land near the same rectangle corners
        np.testing.assert_allclose(projectPoints(matrix, TRAPEZOID), rectangle, atol=4)
