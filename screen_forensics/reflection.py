"""
screen_forensics.reflection: Glare clusters on a photographed display.

A screen's glossy surface throws back compact patches of near-white
glare.  Ordinary photographs have bright regions too (sky, lamps,
specular highlights), so detection is a two-stage confirm:

1. A sampled pixel is a *candidate* only if its channel-mean brightness
   is above a strict threshold.
2. A candidate is a *bright spot* only if the mean brightness of its
   clipped ``(2r+1) x (2r+1)`` neighbourhood also stays high, which
   rejects isolated highlights.

Reflection is reported when bright spots make up more than a small
fraction of all sampled pixels.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import cv2
import numpy as np

from .config import AnalysisConfig
from .loader import PixelBuffer


def _window_sums(values: np.ndarray, radius: int) -> np.ndarray:
    """Sum of *values* over each clipped square window of the given radius."""
    k = 2 * radius + 1
    return cv2.boxFilter(
        values, cv2.CV_64F, (k, k), normalize=False, borderType=cv2.BORDER_CONSTANT,
    )


def reflection_stats(buffer: PixelBuffer, config: Optional[AnalysisConfig] = None) -> Dict[str, Any]:
    """Count sampled, candidate and confirmed bright-spot pixels.

    Returns
    -------
    dict
        * ``"visited"``: number of sampled pixels.
        * ``"candidates"``: sampled pixels above the point threshold.
        * ``"bright_spots"``: candidates whose neighbourhood mean is also
          above the neighbourhood threshold.
        * ``"bright_spot_ratio"``: ``bright_spots / visited`` (0.0 when
          nothing was sampled).
        * ``"detected"``: ``bright_spot_ratio`` above the configured
          ratio.
    """
    cfg = config or AnalysisConfig()
    step = cfg.reflection_sample_step
    radius = cfg.reflection_neighborhood_radius

    # Integer channel sums keep the window arithmetic exact.
    channel_sum = buffer.rgb.astype(np.float64).sum(axis=2)

    ys = np.arange(0, buffer.height, step)
    xs = np.arange(0, buffer.width, step)
    visited = int(ys.size * xs.size)

    bright_spots = 0
    candidates = 0
    if visited:
        sampled = channel_sum[np.ix_(ys, xs)] / 3.0
        cand_mask = sampled > cfg.reflection_brightness_threshold
        candidates = int(cand_mask.sum())
        if candidates:
            sums = _window_sums(channel_sum, radius)
            counts = _window_sums(np.ones_like(channel_sum), radius)
            neighborhood = sums[np.ix_(ys, xs)] / (3.0 * counts[np.ix_(ys, xs)])
            bright_spots = int((cand_mask & (neighborhood > cfg.reflection_neighborhood_threshold)).sum())

    ratio = bright_spots / visited if visited else 0.0
    return {
        "visited": visited,
        "candidates": candidates,
        "bright_spots": bright_spots,
        "bright_spot_ratio": ratio,
        "detected": bool(visited > 0 and ratio > cfg.reflection_spot_ratio),
    }


def detect_screen_reflection(buffer: PixelBuffer, config: Optional[AnalysisConfig] = None) -> bool:
    """``True`` when localized glare covers enough of the sampled pixels."""
    return reflection_stats(buffer, config)["detected"]
