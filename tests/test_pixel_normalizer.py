"""Tests for the planar tensor encoder."""

import numpy as np
import pytest

from core.interfaces.normalizer_interface import NormalizationSpec
from core.normalizer.pixel_normalizer import PixelNormalizer
from conftest import solidImage


@pytest.fixture
def normalizer():
    return PixelNormalizer()


class TestNormalizationSpec:

    def test_fixed_defaults(self):
        spec = NormalizationSpec.fixed()
        assert spec.isFixed
        assert spec.mean == (0.5, 0.5, 0.5)

    def test_mean_std_is_not_fixed(self):
        spec = NormalizationSpec.meanStd([0.1, 0.2, 0.3], [1, 1, 1])
        assert not spec.isFixed
        assert spec.std == (1.0, 1.0, 1.0)

    def test_zero_std_rejected(self):
        with pytest.raises(ValueError):
            NormalizationSpec.meanStd([0, 0, 0], [1, 0, 1])

    def test_wrong_arity_rejected(self):
        with pytest.raises(ValueError):
            NormalizationSpec.meanStd([0, 0], [1, 1])


class TestNormalize:

    def test_length_and_range(self, normalizer):
        image = solidImage(50, 30, 0)
        image[:, 25:, :3] = 255
        tensor = normalizer.normalize(image, 320, 48)
        assert tensor.shape == (3 * 320 * 48,)
        assert tensor.dtype == np.float32
        assert tensor.min() >= -1.0 and tensor.max() <= 1.0

    def test_fixed_scheme_endpoints(self, normalizer):
        black = normalizer.normalize(solidImage(4, 4, 0), 4, 4)
        white = normalizer.normalize(solidImage(4, 4, 255), 4, 4)
        np.testing.assert_allclose(black, -1.0)
        np.testing.assert_allclose(white, 1.0)

    def test_layout_is_planar(self, normalizer):
        image = solidImage(2, 2, 0)
        image[..., 0] = 255
        tensor = normalizer.normalize(image, 2, 2)
        np.testing.assert_allclose(tensor[:4], 1.0)
        np.testing.assert_allclose(tensor[4:], -1.0)

    def test_alpha_is_ignored(self, normalizer):
        opaque = normalizer.normalize(solidImage(3, 3, 100, alpha=255), 3, 3)
        clear = normalizer.normalize(solidImage(3, 3, 100, alpha=0), 3, 3)
        np.testing.assert_array_equal(opaque, clear)

    def test_mean_std_scheme(self, normalizer):
        spec = NormalizationSpec.meanStd([0.5, 0.0, 1.0], [0.5, 1.0, 0.5])
        tensor = normalizer.normalize(solidImage(1, 1, 255), 1, 1, spec)
        np.testing.assert_allclose(tensor, [1.0, 1.0, 0.0], atol=1e-6)

    def test_input_not_modified(self, normalizer, grayImage):
        before = grayImage.copy()
        normalizer.normalize(grayImage, 16, 16)
        np.testing.assert_array_equal(grayImage, before)

    @pytest.mark.parametrize("width,height", [(0, 48), (320, 0), (-1, 5)])
    def test_invalid_target(self, normalizer, grayImage, width, height):
        with pytest.raises(ValueError):
            normalizer.normalize(grayImage, width, height)

    def test_mid_gray_is_near_zero(self, normalizer):
        tensor = normalizer.normalize(solidImage(8, 8, 128), 8, 8)
        np.testing.assert_allclose(tensor, 0.0, atol=0.01)


class TestNormalizeForDetector:

    def test_dimensions_are_multiples_of_32(self, normalizer):
        det = normalizer.normalizeForDetector(solidImage(1000, 500), 960)
        assert det.resizeWidth == 960
        assert det.resizeHeight == 480
        assert det.data.shape == (3 * 960 * 480,)
        assert det.scaleX == pytest.approx(1000 / 960)

    def test_small_images_are_not_upscaled_beyond_alignment(self, normalizer):
        det = normalizer.normalizeForDetector(solidImage(100, 20), 960)
        assert det.resizeWidth == 96
        assert det.resizeHeight == 32

    def test_imagenet_default(self, normalizer):
        det = normalizer.normalizeForDetector(solidImage(32, 32, 0), 960)
        assert det.data[0] == pytest.approx(-0.485 / 0.229, rel=1e-5)
