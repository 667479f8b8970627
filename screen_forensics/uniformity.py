"""
screen_forensics.uniformity: Spread of local gradient magnitudes.

Natural photographs mix flat regions with fine texture, so their local
gradient magnitudes vary a lot across the frame.  A photographed screen
shows a more regular gradient field.

Gradients are central differences of luminance, taken on a sparse grid
that skips the one-pixel border.  The score is
``1 - var(magnitudes) / scale`` clipped to ``[0, 1]``; higher values mean
more uniform, more screen-like gradients.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .config import AnalysisConfig
from .loader import PixelBuffer
from .utils import clamp01, luma_map


def gradient_magnitudes(buffer: PixelBuffer, step: int) -> np.ndarray:
    """Central-difference luminance gradient magnitudes on a ``step`` grid.

    Returns
    -------
    np.ndarray
        ``float64`` array of shape ``(n_rows, n_cols)``; empty when the
        buffer is narrower or shorter than three pixels.
    """
    width, height = buffer.size
    xs = np.arange(1, width - 1, step)
    ys = np.arange(1, height - 1, step)
    if xs.size == 0 or ys.size == 0:
        return np.zeros((0, 0), dtype=np.float64)

    lum = luma_map(buffer.rgb)
    dx = lum[np.ix_(ys, xs + 1)] - lum[np.ix_(ys, xs - 1)]
    dy = lum[np.ix_(ys + 1, xs)] - lum[np.ix_(ys - 1, xs)]
    return np.sqrt(dx ** 2 + dy ** 2)


def pixel_uniformity(buffer: PixelBuffer, config: Optional[AnalysisConfig] = None) -> float:
    """Gradient-uniformity score in ``[0, 1]``.

    Returns the neutral ``config.uniformity_default`` (0.5) when the
    sampling grid is empty.
    """
    cfg = config or AnalysisConfig()
    mags = gradient_magnitudes(buffer, cfg.uniformity_sample_step)
    if mags.size == 0:
        return clamp01(cfg.uniformity_default)

    mean = mags.mean()
    variance = float(np.mean((mags - mean) ** 2))
    return clamp01(1.0 - variance / cfg.uniformity_variance_scale)
