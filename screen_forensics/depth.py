"""
screen_forensics.depth: Luminance variance over the central patch.

A photographed display is a flat, evenly lit surface, so the centre of
the frame tends to show little luminance variation.  Real 3-D scenes
mix near and far objects, shadows and texture, which raises it.

The patch is a square of half-width ``min(W, H) // 4`` around the
buffer centre, sampled on a sparse grid.  The population variance of
the sampled luminance is divided by an empirical ceiling for natural
photographs and clipped to ``[0, 1]``.  Lower values mean a flatter,
more screen-like centre.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .config import AnalysisConfig
from .loader import PixelBuffer
from .utils import clamp01, luma_map


def _axis_samples(center: int, radius: int, step: int, limit: int) -> np.ndarray:
    coords = np.arange(center - radius, center + radius, step)
    return coords[(coords >= 0) & (coords < limit)]


def depth_variance(buffer: PixelBuffer, config: Optional[AnalysisConfig] = None) -> float:
    """Normalised luminance variance of the central patch, in ``[0, 1]``.

    Returns ``0.0`` when no sample falls inside the buffer.
    """
    cfg = config or AnalysisConfig()
    width, height = buffer.size
    radius = min(width, height) // 4

    xs = _axis_samples(width // 2, radius, cfg.depth_sample_step, width)
    ys = _axis_samples(height // 2, radius, cfg.depth_sample_step, height)
    if xs.size == 0 or ys.size == 0:
        return 0.0

    samples = luma_map(buffer.rgb[np.ix_(ys, xs)])
    # Shifted by the first sample so a constant patch sums to exactly zero.
    shifted = samples - samples.flat[0]
    variance = float(np.mean((shifted - shifted.mean()) ** 2))
    return clamp01(variance / cfg.depth_variance_scale)
