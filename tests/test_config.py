"""Tests for detection parameter validation."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from hocr_table_renderer.config import DetectionParams


class TestDetectionParams:

    def test_defaults(self):
        params = DetectionParams()
        assert (params.block_size, params.offset, params.scale) == (15, -2, 30)
        assert (params.min_area, params.min_joints, params.tolerance) == (50.0, 5, 3)
        assert params.grid_method == "reverse_scan"

    @pytest.mark.parametrize("kwargs", [
        {"tolerance": 0},
        {"tolerance": -3},
        {"min_joints": 0},
        {"block_size": 14},
        {"block_size": 1},
        {"scale": 0},
        {"grid_method": "hough"},
    ])
    def test_rejects_values_that_break_the_grid(self, kwargs):
        with pytest.raises(ValueError):
            DetectionParams(**kwargs)

    def test_smallest_accepted_values(self):
        params = DetectionParams(tolerance=1, min_joints=1, block_size=3, scale=1)
        assert params.tolerance == 1 and params.min_joints == 1
