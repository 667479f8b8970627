"""
screen_forensics.bridge: Method-call adapter for a host application.

A mobile or desktop host sends ``analyzeImageDepth`` calls over the
``arcore_depth_analysis`` channel with an ``imagePath`` argument.  This
module turns such a call into a :class:`MethodResult`, an explicit
success-or-error record, so the host never has to catch exceptions
from the analysis core.

Error codes
-----------
INVALID_ARGUMENT   ``imagePath`` missing or empty.
FILE_NOT_FOUND     Path does not reference an existing readable file.
DECODE_ERROR       File exists but is not a decodable raster image.
ANALYSIS_ERROR     Anything else raised while analysing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .config import AnalysisConfig
from .errors import InvalidArgumentError, ScreenForensicsError
from .pipeline import analyze

logger = logging.getLogger(__name__)

CHANNEL = "arcore_depth_analysis"
METHOD_ANALYZE = "analyzeImageDepth"
ARG_IMAGE_PATH = "imagePath"

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
STATUS_NOT_IMPLEMENTED = "not_implemented"


@dataclass(frozen=True)
class MethodResult:
    """Outcome of one method call: a value, an error, or not implemented."""

    status: str
    value: Optional[Dict[str, Any]] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS

    @classmethod
    def success(cls, value: Dict[str, Any]) -> "MethodResult":
        return cls(status=STATUS_SUCCESS, value=value)

    @classmethod
    def error(cls, code: str, message: str) -> "MethodResult":
        return cls(status=STATUS_ERROR, error_code=code, error_message=message)

    @classmethod
    def not_implemented(cls) -> "MethodResult":
        return cls(status=STATUS_NOT_IMPLEMENTED)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"status": self.status}
        if self.value is not None:
            out["value"] = self.value
        if self.error_code is not None:
            out["error"] = {"code": self.error_code, "message": self.error_message}
        return out


def handle_method_call(
    method: str,
    arguments: Optional[Mapping[str, Any]] = None,
    config: Optional[AnalysisConfig] = None,
    channel: str = CHANNEL,
) -> MethodResult:
    """Dispatch a host method call to the analysis core.

    Only *method* ``analyzeImageDepth`` on *channel*
    ``arcore_depth_analysis`` is served; anything else is reported as
    not implemented.
    """
    logger.debug("Call received on %s: %s", channel, method)
    if channel != CHANNEL or method != METHOD_ANALYZE:
        logger.warning("Unknown method %s on channel %s", method, channel)
        return MethodResult.not_implemented()

    image_path = (arguments or {}).get(ARG_IMAGE_PATH)
    if not isinstance(image_path, str) or not image_path.strip():
        logger.warning("No image path provided")
        return MethodResult.error(InvalidArgumentError.code, "Image path is required")

    try:
        result = analyze(image_path, config)
    except ScreenForensicsError as exc:
        logger.warning("Analysis failed for %s: %s", image_path, exc)
        return MethodResult.error(exc.code, str(exc))
    except Exception as exc:
        logger.exception("Unexpected failure analysing %s", image_path)
        return MethodResult.error(
            ScreenForensicsError.code, f"Failed to analyze image: {exc}",
        )

    return MethodResult.success(result.to_dict())
