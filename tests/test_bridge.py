"""Tests for the host method-call bridge."""

import numpy as np

from screen_forensics import bridge
from screen_forensics.bridge import METHOD_ANALYZE, MethodResult, handle_method_call


def test_unknown_method_is_not_implemented():
    result = handle_method_call("getBatteryLevel", {})
    assert result.status == "not_implemented"
    assert not result.ok
    assert result.to_dict() == {"status": "not_implemented"}


def test_known_method_on_other_channel_is_not_implemented(write_image):
    path = write_image(np.full((60, 60, 3), 128, dtype=np.uint8))
    args = {"imagePath": str(path)}
    assert handle_method_call(METHOD_ANALYZE, args, channel="camera_controls").status == "not_implemented"
    assert handle_method_call(METHOD_ANALYZE, args, channel=bridge.CHANNEL).ok


def test_missing_image_path_is_invalid_argument():
    for args in (None, {}, {"imagePath": ""}, {"imagePath": "   "}, {"imagePath": 42}):
        result = handle_method_call(METHOD_ANALYZE, args)
        assert result.status == "error"
        assert result.error_code == "INVALID_ARGUMENT"
        assert result.error_message == "Image path is required"


def test_missing_file_maps_to_file_not_found(tmp_path):
    missing = str(tmp_path / "missing.jpg")
    result = handle_method_call(METHOD_ANALYZE, {"imagePath": missing})
    assert result.error_code == "FILE_NOT_FOUND"
    assert missing in result.error_message


def test_garbage_maps_to_decode_error(garbage_file):
    result = handle_method_call(METHOD_ANALYZE, {"imagePath": str(garbage_file)})
    assert result.error_code == "DECODE_ERROR"
    assert str(garbage_file) in result.error_message


def test_success_returns_feature_map(write_image):
    path = write_image(np.full((60, 60, 3), 128, dtype=np.uint8))
    result = handle_method_call(METHOD_ANALYZE, {"imagePath": str(path)})
    assert result.ok
    assert result.value == {
        "depthVariance": 0.0,
        "pixelUniformity": 1.0,
        "screenReflectionDetected": False,
        "edgeSharpness": 0.0,
    }
    assert result.to_dict()["value"] == result.value


def test_unexpected_failure_maps_to_analysis_error(monkeypatch, write_image):
    path = write_image(np.full((20, 20, 3), 128, dtype=np.uint8))

    def boom(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(bridge, "analyze", boom)
    result = handle_method_call(METHOD_ANALYZE, {"imagePath": str(path)})
    assert result.error_code == "ANALYSIS_ERROR"
    assert result.error_message == "Failed to analyze image: boom"


def test_error_envelope_shape():
    env = MethodResult.error("DECODE_ERROR", "bad bytes").to_dict()
    assert env == {"status": "error", "error": {"code": "DECODE_ERROR", "message": "bad bytes"}}
