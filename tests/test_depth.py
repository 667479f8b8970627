"""Tests for the central-patch depth-variance analyzer."""

import numpy as np
import pytest

from screen_forensics.config import AnalysisConfig
from screen_forensics.depth import depth_variance
from screen_forensics.loader import PixelBuffer


def _buf(arr) -> PixelBuffer:
    return PixelBuffer.from_array(arr)


def test_flat_image_has_zero_variance():
    assert depth_variance(_buf(np.full((100, 100, 3), 128, dtype=np.uint8))) == 0.0


@pytest.mark.parametrize("side", [40, 50, 100, 120, 200, 400])
@pytest.mark.parametrize("colour", [(128, 128, 128), (10, 20, 30), (255, 254, 1)])
def test_flat_image_is_exactly_zero_for_any_sample_count(side, colour):
    # 50 gives 3x3 samples, 120 gives 6x6, 200 gives 10x10.
    arr = np.empty((side, side, 3), dtype=np.uint8)
    arr[:] = colour
    assert depth_variance(_buf(arr)) == 0.0


def test_two_level_centre_variance_is_normalised():
    # 40x40: centre (20, 20), radius 10, samples at x, y in {10, 20}.
    arr = np.full((40, 40, 3), 100, dtype=np.uint8)
    arr[:, 20:] = 200
    # Luma 100 / 200 split evenly -> population variance 50**2.
    assert depth_variance(_buf(arr)) == pytest.approx(2500.0 / 10000.0)


def test_only_the_central_patch_is_sampled():
    rng = np.random.default_rng(0)
    arr = rng.integers(0, 256, size=(100, 100, 3), dtype=np.uint8)
    arr[25:75, 25:75] = 90
    assert depth_variance(_buf(arr)) == 0.0


def test_high_contrast_centre_is_clamped_to_one():
    arr = np.zeros((40, 40, 3), dtype=np.uint8)
    arr[:, 20:] = 255
    assert depth_variance(_buf(arr)) == 1.0


@pytest.mark.parametrize("shape", [(1, 1, 3), (3, 3, 3), (2, 50, 3)])
def test_no_samples_returns_zero(shape):
    # min(W, H) // 4 == 0 leaves an empty sampling window.
    arr = np.random.default_rng(1).integers(0, 256, size=shape, dtype=np.uint8)
    assert depth_variance(_buf(arr)) == 0.0


def test_sample_step_comes_from_config():
    arr = np.full((40, 40, 3), 100, dtype=np.uint8)
    arr[:, 25:] = 200
    # Default step 10 samples x in {10, 20}: all 100.
    assert depth_variance(_buf(arr)) == 0.0
    # Step 5 also samples x in {15, 25}: one column of 200 out of four.
    cfg = AnalysisConfig(depth_sample_step=5)
    assert depth_variance(_buf(arr), cfg) == pytest.approx(1875.0 / 10000.0)
