"""
screen_forensics.config: Tuning constants for the feature analyzers.

All thresholds, step sizes and normalisation divisors are empirical
values taken from the reference heuristic.  They are exposed as named
constants and collected into :class:`AnalysisConfig` so a recalibration
only touches one place.  The defaults reproduce the reference output
exactly; changing them changes every feature value.

An optional YAML file can override individual values::

    analysis:
      reflection_spot_ratio: 0.05

The core never requires a configuration file.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import InvalidArgumentError

# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

SUBSAMPLE_FACTOR = 4

# ---------------------------------------------------------------------------
# Depth variance
# ---------------------------------------------------------------------------

DEPTH_SAMPLE_STEP = 10
DEPTH_VARIANCE_SCALE = 10000.0

# ---------------------------------------------------------------------------
# Pixel uniformity
# ---------------------------------------------------------------------------

UNIFORMITY_SAMPLE_STEP = 8
UNIFORMITY_VARIANCE_SCALE = 2000.0
UNIFORMITY_DEFAULT = 0.5

# ---------------------------------------------------------------------------
# Reflection
# ---------------------------------------------------------------------------

REFLECTION_SAMPLE_STEP = 5
REFLECTION_BRIGHTNESS_THRESHOLD = 240.0
REFLECTION_NEIGHBORHOOD_RADIUS = 3
REFLECTION_NEIGHBORHOOD_THRESHOLD = 220.0
REFLECTION_SPOT_RATIO = 0.03

# ---------------------------------------------------------------------------
# Edge sharpness
# ---------------------------------------------------------------------------

SHARPNESS_ROW_STEP = 5
SHARPNESS_SCALE = 255.0

_STEP_FIELDS = (
    "subsample_factor",
    "depth_sample_step",
    "uniformity_sample_step",
    "reflection_sample_step",
    "sharpness_row_step",
)

_REAL_FIELDS = (
    "depth_variance_scale",
    "uniformity_variance_scale",
    "uniformity_default",
    "reflection_brightness_threshold",
    "reflection_neighborhood_threshold",
    "reflection_spot_ratio",
    "sharpness_scale",
)


@dataclass(frozen=True)
class AnalysisConfig:
    """Tuning parameters shared by the loader and the four analyzers."""

    subsample_factor: int = SUBSAMPLE_FACTOR

    depth_sample_step: int = DEPTH_SAMPLE_STEP
    depth_variance_scale: float = DEPTH_VARIANCE_SCALE

    uniformity_sample_step: int = UNIFORMITY_SAMPLE_STEP
    uniformity_variance_scale: float = UNIFORMITY_VARIANCE_SCALE
    uniformity_default: float = UNIFORMITY_DEFAULT

    reflection_sample_step: int = REFLECTION_SAMPLE_STEP
    reflection_brightness_threshold: float = REFLECTION_BRIGHTNESS_THRESHOLD
    reflection_neighborhood_radius: int = REFLECTION_NEIGHBORHOOD_RADIUS
    reflection_neighborhood_threshold: float = REFLECTION_NEIGHBORHOOD_THRESHOLD
    reflection_spot_ratio: float = REFLECTION_SPOT_RATIO

    sharpness_row_step: int = SHARPNESS_ROW_STEP
    sharpness_scale: float = SHARPNESS_SCALE

    def __post_init__(self) -> None:
        for name in _STEP_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}")
        radius = self.reflection_neighborhood_radius
        if isinstance(radius, bool) or not isinstance(radius, int) or radius < 0:
            raise InvalidArgumentError(
                f"reflection_neighborhood_radius must be an integer >= 0, got {radius!r}"
            )
        for name in _REAL_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidArgumentError(f"{name} must be a finite number, got {value!r}")
        for name in ("depth_variance_scale", "uniformity_variance_scale", "sharpness_scale"):
            if not getattr(self, name) > 0:
                raise InvalidArgumentError(f"{name} must be > 0")

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def with_overrides(self, overrides: Dict[str, Any]) -> "AnalysisConfig":
        """Return a copy with *overrides* applied; unknown keys are rejected."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidArgumentError(f"Unknown analysis config keys: {', '.join(unknown)}")
        return replace(self, **overrides)


def load_config(config_path: Optional[Union[str, Path]] = None) -> AnalysisConfig:
    """Load an :class:`AnalysisConfig` from a YAML file.

    Values may sit under an ``analysis:`` key or at the top level.  A
    missing *config_path* (``None``) yields the defaults.
    """
    if config_path is None:
        return AnalysisConfig()

    cfg_path = Path(config_path)
    if not cfg_path.is_file():
        raise InvalidArgumentError(f"Config file not found: {cfg_path}")

    with open(cfg_path, encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    if not isinstance(cfg, dict):
        raise InvalidArgumentError(f"Config file must contain a mapping: {cfg_path}")

    section = cfg.get("analysis", cfg)
    if not isinstance(section, dict):
        raise InvalidArgumentError(f"'analysis' section must be a mapping: {cfg_path}")
    return AnalysisConfig().with_overrides(section)
