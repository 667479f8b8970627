"""
screen_forensics.sharpness: Mean Sobel gradient on the red channel.

Re-photographing a screen captures one pixel grid with another, which
softens edges (moire, defocus on the glass).  The mean Sobel gradient
magnitude is therefore lower than for a real scene with crisp edges.

Every interior column is visited; rows are subsampled for speed only.
The kernels read the red channel alone, unlike the other analyzers
which use luminance.  Neighbours outside the buffer count as 0.
"""

from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

from .config import AnalysisConfig
from .loader import PixelBuffer
from .utils import clamp01


def sobel_magnitudes(buffer: PixelBuffer, row_step: int) -> np.ndarray:
    """Sobel magnitudes of the red channel at interior columns and every
    *row_step*-th interior row.

    Returns
    -------
    np.ndarray
        ``float64`` array of shape ``(n_rows, W - 2)``; empty when the
        buffer has no interior pixels.
    """
    width, height = buffer.size
    ys = np.arange(1, height - 1, row_step)
    if width < 3 or ys.size == 0:
        return np.zeros((0, 0), dtype=np.float64)

    red = buffer.rgb[..., 0].astype(np.float64)
    gx = cv2.Sobel(red, cv2.CV_64F, 1, 0, ksize=3, borderType=cv2.BORDER_CONSTANT)
    gy = cv2.Sobel(red, cv2.CV_64F, 0, 1, ksize=3, borderType=cv2.BORDER_CONSTANT)
    gx = gx[ys, 1:width - 1]
    gy = gy[ys, 1:width - 1]
    return np.sqrt(gx ** 2 + gy ** 2)


def edge_sharpness(buffer: PixelBuffer, config: Optional[AnalysisConfig] = None) -> float:
    """Mean red-channel Sobel magnitude scaled into ``[0, 1]``.

    Returns ``0.0`` when no interior pixel is sampled.
    """
    cfg = config or AnalysisConfig()
    mags = sobel_magnitudes(buffer, cfg.sharpness_row_step)
    if mags.size == 0:
        return 0.0
    return clamp01(float(mags.mean()) / cfg.sharpness_scale)
