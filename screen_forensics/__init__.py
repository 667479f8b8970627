"""
screen_forensics: Heuristic features for spotting re-photographed screens.

Extracts four raw features from a single still photograph that help a
caller decide whether it shows a physical electronic display rather
than a real scene.  No verdict is produced; thresholds and the final
decision belong to the caller.

Modules
-------
pipeline            Orchestration entry-point: ``analyze()``.
loader              Subsampled, orientation-corrected ``PixelBuffer``
                    loading.
depth               Luminance variance over the central patch.
uniformity          Variance of local luminance gradient magnitudes.
reflection          Two-stage bright-spot (glare) detection.
sharpness           Mean red-channel Sobel gradient magnitude.
metadata            Header metadata and EXIF orientation.
bridge              Host method-call adapter returning explicit
                    success/error records.
config              Named tuning constants and YAML overrides.
errors              Error kinds with stable codes.
utils               Luminance helpers, clamping, JSON serialisation.

Usage
-----
    from screen_forensics import analyze

    result = analyze("photo.jpg")
    print(result.to_dict())
"""

from .config import AnalysisConfig, load_config
from .errors import (
    ImageDecodeError,
    ImageNotFoundError,
    InvalidArgumentError,
    ScreenForensicsError,
)
from .loader import PixelBuffer, load_pixel_buffer
from .metadata import Orientation, extract_metadata
from .pipeline import AnalysisResult, analyze, analyze_buffer

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "ImageDecodeError",
    "ImageNotFoundError",
    "InvalidArgumentError",
    "Orientation",
    "PixelBuffer",
    "ScreenForensicsError",
    "analyze",
    "analyze_buffer",
    "extract_metadata",
    "load_config",
    "load_pixel_buffer",
]
