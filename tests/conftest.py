"""Shared fixtures for the pipeline test suite. All images are synthetic RGBA buffers."""

import json

import cv2
import numpy as np
import pytest


TRAPEZOID = [(60, 50), (340, 50), (370, 350), (30, 350)]


def solidImage(width, height, value=128, alpha=255):
    image = np.full((height, width, 4), value, dtype=np.uint8)
    image[..., 3] = alpha
    return image


def checkerboard(width, height, cell=1):
    ys, xs = np.mgrid[0:height, 0:width]
    pattern = (((xs // cell) + (ys // cell)) % 2 * 255).astype(np.uint8)
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[..., :3] = pattern[..., None]
    image[..., 3] = 255
    return image


def documentPhoto(corners=TRAPEZOID, size=400, background=128, cell=2):
    """A fine checkerboard 'page' filling a quadrilateral on a flat background."""
    image = solidImage(size, size, background)
    mask = np.zeros((size, size), dtype=np.uint8)
    cv2.fillConvexPoly(mask, np.array(corners, dtype=np.int32), 1)
    page = checkerboard(size, size, cell)
    image[mask == 1] = page[mask == 1]
    return image


@pytest.fixture
def grayImage():
    return solidImage(64, 48, 128)


@pytest.fixture
def documentImage():
    return documentPhoto()


@pytest.fixture
def configFile(tmp_path):
    """Write a config file and return its path; overrides are merged per section."""
    def _write(**sections):
        config = {
            "debug": {"enabled": False, "basePath": str(tmp_path / "debug")},
            "s1_preprocessing": {"enabled": True, "orientationFix": True},
            "s2_enhancement": {
                "enabled": True,
                "contrast": 1.2,
                "brightness": 10,
                "sharpenMaxPixels": 2000000
            },
            "s3_normalization": {
                "targetWidth": 32,
                "targetHeight": 16,
                "scheme": "fixed",
                "detMaxSideLen": 960
            },
            "backends": {}
        }
        for name, values in sections.items():
            config.setdefault(name, {}).update(values)

        path = tmp_path / "application_config.json"
        path.write_text(json.dumps(config), encoding="utf-8")
        return str(path)

    return _write
