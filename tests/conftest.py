from pathlib import Path

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def write_image(tmp_path):
    """Save an ``(H, W, 3)`` uint8 or ``(H, W)`` uint16 array to ``tmp_path``."""

    def _write(arr: np.ndarray, name: str = "img.png", orientation: int = None, **save_kwargs) -> Path:
        path = tmp_path / name
        arr = np.asarray(arr)
        if arr.dtype != np.uint16:
            arr = arr.astype(np.uint8)
        img = Image.fromarray(arr)
        if orientation is not None:
            exif = Image.Exif()
            exif[274] = orientation
            save_kwargs["exif"] = exif.tobytes()
        img.save(path, **save_kwargs)
        return path

    return _write


@pytest.fixture
def garbage_file(tmp_path):
    path = tmp_path / "garbage.jpg"
    rng = np.random.default_rng(7)
    path.write_bytes(rng.integers(0, 256, size=4096, dtype=np.uint8).tobytes())
    return path
