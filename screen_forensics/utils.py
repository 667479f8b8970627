"""
screen_forensics.utils: Shared helpers for the feature analyzers.

Provides:

* **Luminance**: ``luma`` (single pixel) and ``luma_map`` (whole image),
  both using the ITU-R BT.601 weights ``0.299 R + 0.587 G + 0.114 B``.
* **Clamping**: ``clamp01`` for scalar feature values.
* **Serialisation**: ``json_sanitize``, ``save_json``.
"""

from __future__ import annotations

import json
import math
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np

# BT.601 weights in thousandths; integer sums keep gray pixels exact.
LUMA_WEIGHTS = (299, 587, 114)


# ---------------------------------------------------------------------------
# Intensity conversions
# ---------------------------------------------------------------------------

def luma(r: float, g: float, b: float) -> float:
    """Grayscale intensity of one 8-bit RGB pixel, in ``[0, 255]``."""
    wr, wg, wb = LUMA_WEIGHTS
    return (wr * r + wg * g + wb * b) / 1000.0


def luma_map(rgb: np.ndarray) -> np.ndarray:
    """Apply :func:`luma` to every pixel of an ``(H, W, 3)`` array.

    Returns
    -------
    np.ndarray
        ``float64`` array of shape ``(H, W)``.
    """
    wr, wg, wb = LUMA_WEIGHTS
    rgb = rgb.astype(np.int64, copy=False)
    return (wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]) / 1000.0


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def clamp01(x: float) -> float:
    """Clip a scalar to ``[0.0, 1.0]``; NaN becomes ``0.0``."""
    x = float(x)
    if math.isnan(x):
        return 0.0
    return min(max(x, 0.0), 1.0)


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------

def json_sanitize(obj: Any) -> Any:
    """Convert numpy types + Path + dataclasses to JSON-safe Python types."""
    if obj is None:
        return None
    if isinstance(obj, Path):
        return str(obj)
    if hasattr(obj, "to_dict"):
        return json_sanitize(obj.to_dict())
    if hasattr(obj, "__dataclass_fields__"):
        return {k: json_sanitize(v) for k, v in asdict(obj).items()}
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return json_sanitize(float(obj))
    if isinstance(obj, np.ndarray):
        return json_sanitize(obj.tolist())
    if isinstance(obj, (list, tuple)):
        return [json_sanitize(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): json_sanitize(v) for k, v in obj.items()}
    if isinstance(obj, (int, float, str, bool)):
        # normalize NaN/inf
        if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
            return None
        return obj
    return str(obj)


def save_json(data: Dict[str, Any], out_path: Union[str, Path]) -> str:
    """Write *data* as indented UTF-8 JSON, creating parent directories."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    safe = json_sanitize(data)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(safe, f, ensure_ascii=False, indent=2)
    return str(out_path)
