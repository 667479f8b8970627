"""Tests for the two-stage glare detector."""

import numpy as np
import pytest

from screen_forensics.config import AnalysisConfig
from screen_forensics.loader import PixelBuffer
from screen_forensics.reflection import detect_screen_reflection, reflection_stats

GRAY = 128


def _gray(size: int) -> np.ndarray:
    return np.full((size, size, 3), GRAY, dtype=np.uint8)


def _with_squares(size: int, corners, side: int = 10) -> PixelBuffer:
    arr = _gray(size)
    for x0, y0 in corners:
        arr[y0:y0 + side, x0:x0 + side] = 255
    return PixelBuffer.from_array(arr)


def test_mid_gray_flat_image_has_no_reflection():
    buf = PixelBuffer.from_array(_gray(100))
    assert detect_screen_reflection(buf) is False


def test_near_white_flat_image_is_all_reflection():
    buf = PixelBuffer.from_array(np.full((100, 100, 3), 250, dtype=np.uint8))
    stats = reflection_stats(buf)
    assert stats["bright_spots"] == stats["visited"] == 400
    assert detect_screen_reflection(buf) is True


def test_brightness_threshold_is_strict():
    at_threshold = PixelBuffer.from_array(np.full((50, 50, 3), 240, dtype=np.uint8))
    above = PixelBuffer.from_array(np.full((50, 50, 3), 241, dtype=np.uint8))
    assert reflection_stats(at_threshold)["candidates"] == 0
    assert detect_screen_reflection(at_threshold) is False
    assert detect_screen_reflection(above) is True


def test_white_square_above_three_percent_is_detected():
    # 25x25 -> 25 sampled points; only (20, 20) has a fully white 7x7
    # neighbourhood, so 1/25 = 4% of points are bright spots.
    buf = _with_squares(25, [(15, 15)])
    stats = reflection_stats(buf)
    assert stats["visited"] == 25
    assert stats["candidates"] == 4
    assert stats["bright_spots"] == 1
    assert detect_screen_reflection(buf) is True


def test_same_square_in_larger_frame_falls_below_threshold():
    # 40x40 -> 64 sampled points; 1/64 < 3%.
    buf = _with_squares(40, [(15, 15)])
    assert reflection_stats(buf)["bright_spots"] == 1
    assert detect_screen_reflection(buf) is False


def test_small_square_is_not_sustained_brightness():
    buf = _with_squares(25, [(18, 18)], side=5)
    stats = reflection_stats(buf)
    assert stats["candidates"] == 1
    assert stats["bright_spots"] == 0
    assert detect_screen_reflection(buf) is False


def test_isolated_highlight_is_rejected():
    arr = _gray(25)
    arr[10, 10] = 255
    stats = reflection_stats(PixelBuffer.from_array(arr))
    assert stats["candidates"] == 1
    assert stats["bright_spots"] == 0


def test_ratio_must_strictly_exceed_threshold():
    # 50x50 -> 100 sampled points, one bright spot per square.
    three = _with_squares(50, [(15, 15), (35, 15), (15, 35)])
    four = _with_squares(50, [(15, 15), (35, 15), (15, 35), (35, 35)])
    assert reflection_stats(three)["bright_spot_ratio"] == pytest.approx(0.03)
    assert detect_screen_reflection(three) is False
    assert detect_screen_reflection(four) is True


def test_neighbourhood_is_clipped_at_the_border():
    # Corner sample (0, 0) only sees a 4x4 window, all white.
    arr = _gray(25)
    arr[:4, :4] = 255
    stats = reflection_stats(PixelBuffer.from_array(arr))
    assert stats["bright_spots"] == 1
    assert stats["detected"] is True


def test_spot_ratio_comes_from_config():
    buf = _with_squares(25, [(15, 15)])
    assert detect_screen_reflection(buf, AnalysisConfig(reflection_spot_ratio=0.05)) is False
