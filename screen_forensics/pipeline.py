"""
screen_forensics.pipeline: Orchestration of the four feature analyzers.

Runs every analysis on a single photograph:

1. **Load**: decode at reduced resolution and rotate upright
   (:func:`screen_forensics.loader.load_pixel_buffer`).
2. **Analyze**: depth variance, pixel uniformity, reflection detection
   and edge sharpness, in that order, on the same read-only buffer.
3. **Collect**: the four raw features are returned as one
   :class:`AnalysisResult`.

No decision is made here; combining the features into a verdict is up
to the caller.  Everything runs on the calling thread and nothing is
cached between calls, so concurrent calls on different images are
independent.

Usage
-----
    from screen_forensics.pipeline import analyze

    result = analyze("photo.jpg")
    result.to_dict()

CLI
---
    python -m screen_forensics.pipeline --image photo.jpg
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import AnalysisConfig, load_config
from .depth import depth_variance
from .errors import InvalidArgumentError, ScreenForensicsError
from .loader import PixelBuffer, load_pixel_buffer
from .reflection import detect_screen_reflection
from .sharpness import edge_sharpness
from .uniformity import pixel_uniformity
from .utils import clamp01, save_json

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result record
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalysisResult:
    """Raw screen-capture features for one photograph.

    Numeric fields are clamped into ``[0, 1]`` on construction and NaN
    becomes ``0.0``, so no out-of-range value can leave the pipeline.
    """

    depth_variance: float
    pixel_uniformity: float
    screen_reflection_detected: bool
    edge_sharpness: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "depth_variance", clamp01(self.depth_variance))
        object.__setattr__(self, "pixel_uniformity", clamp01(self.pixel_uniformity))
        object.__setattr__(self, "edge_sharpness", clamp01(self.edge_sharpness))
        object.__setattr__(self, "screen_reflection_detected", bool(self.screen_reflection_detected))

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation with the host's camelCase keys."""
        return {
            "depthVariance": self.depth_variance,
            "pixelUniformity": self.pixel_uniformity,
            "screenReflectionDetected": self.screen_reflection_detected,
            "edgeSharpness": self.edge_sharpness,
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def analyze_buffer(buffer: PixelBuffer, config: Optional[AnalysisConfig] = None) -> AnalysisResult:
    """Run the four analyzers on an already loaded buffer."""
    cfg = config or AnalysisConfig()

    dv = depth_variance(buffer, cfg)
    logger.debug("depthVariance = %s", dv)

    pu = pixel_uniformity(buffer, cfg)
    logger.debug("pixelUniformity = %s", pu)

    refl = detect_screen_reflection(buffer, cfg)
    logger.debug("screenReflectionDetected = %s", refl)

    es = edge_sharpness(buffer, cfg)
    logger.debug("edgeSharpness = %s", es)

    return AnalysisResult(
        depth_variance=dv,
        pixel_uniformity=pu,
        screen_reflection_detected=refl,
        edge_sharpness=es,
    )


def analyze(image_path: Union[str, Path], config: Optional[AnalysisConfig] = None) -> AnalysisResult:
    """Load *image_path* and extract its screen-capture features.

    Raises
    ------
    InvalidArgumentError
        If *image_path* is ``None`` or empty.
    ImageNotFoundError
        If the path does not reference an existing readable file.
    ImageDecodeError
        If the file cannot be decoded as a raster image.
    """
    if image_path is None or not str(image_path).strip():
        raise InvalidArgumentError("Image path is required")

    cfg = config or AnalysisConfig()
    t0 = time.time()
    logger.info("Starting analysis for path: %s", image_path)

    buffer = load_pixel_buffer(image_path, subsample=cfg.subsample_factor)
    logger.info("Buffer loaded: %dx%d", buffer.width, buffer.height)

    result = analyze_buffer(buffer, cfg)
    logger.info(
        "Analysis complete in %d ms - depthVariance=%.4f, pixelUniformity=%.4f, "
        "screenReflection=%s, edgeSharpness=%.4f",
        int((time.time() - t0) * 1000),
        result.depth_variance,
        result.pixel_uniformity,
        result.screen_reflection_detected,
        result.edge_sharpness,
    )
    return result


# ---------------------------------------------------------------------------
# CLI entry-point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for analysing a single photograph."""
    ap = argparse.ArgumentParser(
        description="Extract re-photographed screen features from an image.",
    )
    ap.add_argument(
        "--image", required=True,
        help="Path to the photograph (JPEG/PNG/...).",
    )
    ap.add_argument(
        "--config", default=None,
        help="Optional YAML file overriding the analysis constants.",
    )
    ap.add_argument(
        "--out", default=None,
        help="Write the result JSON here instead of printing it.",
    )
    ap.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every feature value.",
    )
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = load_config(args.config)
        result = analyze(args.image, cfg)
    except ScreenForensicsError as exc:
        print(f"{exc.code}: {exc}", file=sys.stderr)
        return 1

    if args.out:
        print(save_json(result.to_dict(), args.out))
    else:
        print(json.dumps(result.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
