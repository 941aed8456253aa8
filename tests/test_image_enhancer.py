"""Tests for contrast, sharpness and the document enhancer."""

import numpy as np
import pytest

from core.interfaces.classifier_interface import SceneTag
from core.enhancer.contrast_enhancer import ContrastEnhancer
from core.enhancer.sharpness_enhancer import SharpnessEnhancer
from core.enhancer.image_enhancer import ImageEnhancer
from conftest import solidImage


class TestContrastEnhancer:

    def test_brightness_offset(self):
        result = ContrastEnhancer.apply(solidImage(4, 4, 128), 1.0, 10)
        assert result[0, 0].tolist() == [138, 138, 138, 255]

    def test_result_is_clamped(self):
        result = ContrastEnhancer.apply(solidImage(4, 4, 250), 1.0, 10)
        assert result[0, 0, :3].tolist() == [255, 255, 255]

    def test_gain_around_mid_gray(self):
        result = ContrastEnhancer(contrast=2.0, brightness=0).adjustContrast(solidImage(2, 2, 100))
        # (100 - 128) * 2 + 128
        assert result[0, 0, 0] == 72

    def test_alpha_preserved(self):
        result = ContrastEnhancer.apply(solidImage(2, 2, 128, alpha=40), 1.5, 20)
        assert np.all(result[..., 3] == 40)


class TestSharpnessEnhancer:

    def test_uniform_image_unchanged(self):
        image = solidImage(10, 10, 90)
        np.testing.assert_array_equal(SharpnessEnhancer().enhanceSharpness(image), image)

    def test_isolated_bright_pixel_is_boosted(self):
        image = solidImage(5, 5, 40)
        image[2, 2, :3] = 100
        result = SharpnessEnhancer().enhanceSharpness(image)
        # 5 * 100 - 4 * 40
        assert result[2, 2, 0] == 255
        # 5 * 40 - 100 - 3 * 40
        assert result[1, 2, 0] == 0
        assert result[0, 0, 0] == 40

    def test_borders_copied(self):
        image = solidImage(6, 6, 10)
        image[1:-1, 1:-1, :3] = 200
        result = SharpnessEnhancer().enhanceSharpness(image)
        np.testing.assert_array_equal(result[0], image[0])
        np.testing.assert_array_equal(result[:, -1], image[:, -1])

    def test_small_image_is_copied(self):
        image = solidImage(2, 8, 30)
        result = SharpnessEnhancer().enhanceSharpness(image)
        assert result is not image
        np.testing.assert_array_equal(result, image)


class TestImageEnhancer:

    def test_item_photo_is_untouched(self, grayImage):
        result = ImageEnhancer().enhance(grayImage, SceneTag.ITEM_PHOTO)
        assert result.image is grayImage
        assert not result.contrastApplied
        assert not result.sharpnessApplied

    def test_document_gets_both_steps(self, grayImage):
        result = ImageEnhancer().enhance(grayImage, SceneTag.DOCUMENT)
        assert result.contrastApplied
        assert result.sharpnessApplied
        assert result.image is not grayImage

    def test_large_document_skips_sharpen(self):
        image = solidImage(20, 10, 128)
        enhancer = ImageEnhancer(
            contrastEnhancer=ContrastEnhancer(1.0, 10),
            sharpenMaxPixels=199
        )
        result = enhancer.enhance(image, SceneTag.DOCUMENT)
        assert result.contrastApplied
        assert not result.sharpnessApplied
        assert result.image[5, 5, 0] == 138

    def test_size_limit_is_inclusive(self):
        enhancer = ImageEnhancer(sharpenMaxPixels=200)
        assert enhancer.enhance(solidImage(20, 10), SceneTag.DOCUMENT).sharpnessApplied

    def test_input_not_modified(self, grayImage):
        before = grayImage.copy()
        ImageEnhancer().enhance(grayImage, SceneTag.DOCUMENT)
        np.testing.assert_array_equal(grayImage, before)

    def test_explicit_contrast(self):
        result = ImageEnhancer().adjustContrast(solidImage(2, 2, 128), 1.0, -28)
        assert result[0, 0, 0] == 100
