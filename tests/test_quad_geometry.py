"""Tests for corner ordering and warp size estimation."""

from itertools import permutations

import numpy as np
import pytest

from core.preprocessor.quad_geometry import QuadOrderer, WarpSizeEstimator, MAX_WARP_SIDE
from conftest import TRAPEZOID


class TestQuadOrderer:

    def test_any_input_order_gives_same_result(self):
        expected = np.array(TRAPEZOID, dtype=np.float32)
        for perm in permutations(TRAPEZOID):
            np.testing.assert_array_equal(QuadOrderer.orderPoints(list(perm)), expected)

    def test_rotated_square(self):
        diamond = [(50, 0), (100, 50), (50, 100), (0, 50)]
        ordered = QuadOrderer.orderPoints(diamond)
        # Ties on x + y resolve to the first point in angular order
        assert ordered.shape == (4, 2)
        assert ordered.dtype == np.float32
        assert {tuple(p) for p in ordered.tolist()} == {tuple(map(float, p)) for p in diamond}

    @pytest.mark.parametrize("count", [3, 5])
    def test_wrong_point_count(self, count):
        with pytest.raises(ValueError):
            QuadOrderer.orderPoints([(i, i * i) for i in range(count)])


class TestWarpSizeEstimator:

    def test_longest_edges(self):
        ordered = QuadOrderer.orderPoints(TRAPEZOID)
        assert WarpSizeEstimator().estimateWarpSize(ordered) == (340, 301)

    def test_collapsed_quad_is_floored_at_one(self):
        quad = np.zeros((4, 2), dtype=np.float32)
        assert WarpSizeEstimator().estimateWarpSize(quad) == (1, 1)

    def test_huge_quad_is_capped(self):
        quad = np.array([[0, 0], [1e7, 0], [1e7, 1e7], [0, 1e7]], dtype=np.float64)
        assert WarpSizeEstimator().estimateWarpSize(quad) == (MAX_WARP_SIDE, MAX_WARP_SIDE)

    def test_non_finite_quad_stays_in_range(self):
        quad = np.array([[0, 0], [np.inf, 0], [np.nan, 5], [0, 5]], dtype=np.float64)
        width, height = WarpSizeEstimator().estimateWarpSize(quad)
        assert 1 <= width <= MAX_WARP_SIDE
        assert 1 <= height <= MAX_WARP_SIDE

    def test_custom_max_side(self):
        quad = np.array([[0, 0], [500, 0], [500, 500], [0, 500]], dtype=np.float64)
        assert WarpSizeEstimator(maxSide=256).estimateWarpSize(quad) == (256, 256)
