"""
screen_forensics.loader: Orientation-normalised, subsampled image loading.

The analyzers only need coarse statistics, so images are decoded at
roughly a quarter of their linear resolution.  For JPEG sources Pillow's
``draft`` mode lets libjpeg do the reduction during the DCT; every other
format is decoded in full and box-resampled down to the same target.

The EXIF orientation tag is applied before the buffer is returned, so
"up" in every :class:`PixelBuffer` matches the photograph's intended up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .config import SUBSAMPLE_FACTOR
from .errors import ImageDecodeError, ImageNotFoundError, InvalidArgumentError
from .metadata import Orientation, read_orientation

logger = logging.getLogger(__name__)

# Pillow rotates counter-clockwise; Orientation values are clockwise.
_TRANSPOSE = {
    Orientation.ROTATE_90: Image.Transpose.ROTATE_270,
    Orientation.ROTATE_180: Image.Transpose.ROTATE_180,
    Orientation.ROTATE_270: Image.Transpose.ROTATE_90,
}


def _is_wide_mode(mode: str) -> bool:
    """True for single-channel modes with more than 8 bits per sample."""
    return mode in ("I", "F") or mode.startswith("I;16")


def _to_rgb(im: Image.Image) -> Image.Image:
    """Convert to 8-bit RGB, scaling 16-bit samples down instead of clipping them."""
    if _is_wide_mode(im.mode):
        wide = np.asarray(im, dtype=np.float64) / 256.0
        im = Image.fromarray(np.clip(wide, 0, 255).astype(np.uint8))
    return im.convert("RGB")


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Immutable ``width x height`` grid of 8-bit RGB pixels.

    Attributes
    ----------
    rgb : np.ndarray
        Read-only array of shape ``(height, width, 3)``, dtype ``uint8``.
        Row index is ``y``, column index is ``x``.
    """

    rgb: np.ndarray

    def __post_init__(self) -> None:
        if self.rgb.ndim != 3 or self.rgb.shape[2] != 3:
            raise InvalidArgumentError(f"Expected an (H, W, 3) array, got shape {self.rgb.shape}")
        if self.rgb.dtype != np.uint8:
            raise InvalidArgumentError(f"Expected dtype uint8, got {self.rgb.dtype}")
        self.rgb.setflags(write=False)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelBuffer":
        """Build a buffer from a private copy of an ``(H, W, 3)`` array."""
        arr = np.asarray(arr)
        if arr.dtype != np.uint8:
            if arr.size and (arr.min() < 0 or arr.max() > 255):
                raise InvalidArgumentError("Channel values must lie in [0, 255]")
            arr = arr.astype(np.uint8)
        return cls(np.array(arr, dtype=np.uint8, copy=True, order="C"))

    @classmethod
    def from_image(cls, im: Image.Image) -> "PixelBuffer":
        return cls(np.array(_to_rgb(im), dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self.rgb.shape[1])

    @property
    def height(self) -> int:
        return int(self.rgb.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """``(width, height)``, the same convention as ``PIL.Image.size``."""
        return self.width, self.height

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        """Return the ``(r, g, b)`` triple at column *x*, row *y*."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        r, g, b = self.rgb[y, x]
        return int(r), int(g), int(b)


def _target_size(size: Tuple[int, int], subsample: int) -> Tuple[int, int]:
    w, h = size
    return max(1, -(-w // subsample)), max(1, -(-h // subsample))


def _decode(fh, subsample: int) -> Tuple[Image.Image, Orientation]:
    with Image.open(fh) as im:
        orientation = read_orientation(im)
        target = _target_size(im.size, subsample)
        if subsample > 1:
            # No-op for anything but JPEG.
            im.draft("RGB", target)
        decoded = _to_rgb(im)

    if decoded.width > target[0] or decoded.height > target[1]:
        decoded = decoded.resize(target, Image.Resampling.BOX)
    return decoded, orientation


def load_pixel_buffer(
    image_path: Union[str, Path],
    subsample: int = SUBSAMPLE_FACTOR,
) -> PixelBuffer:
    """Decode an image file into an upright, subsampled :class:`PixelBuffer`.

    Parameters
    ----------
    image_path : str or Path
        Path to a raster image readable by Pillow.
    subsample : int
        Linear reduction factor; the buffer is ``ceil(W / subsample)`` by
        ``ceil(H / subsample)`` before rotation.

    Raises
    ------
    ImageNotFoundError
        If *image_path* is not an existing, readable file.
    ImageDecodeError
        If the bytes cannot be decoded as a supported raster image.
    """
    p = Path(image_path)
    if not p.is_file():
        raise ImageNotFoundError(f"Image file does not exist at path: {p}")

    try:
        fh = open(p, "rb")
    except OSError as exc:
        raise ImageNotFoundError(f"Image file is not readable at path: {p} ({exc})") from exc

    with fh:
        try:
            im, orientation = _decode(fh, subsample)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            EOFError,
            SyntaxError,
            ValueError,
        ) as exc:
            raise ImageDecodeError(f"Failed to decode image at path: {p}: {exc}") from exc

    logger.debug("Decoded %s at %dx%d, orientation %d", p.name, im.width, im.height, int(orientation))

    if orientation in _TRANSPOSE:
        im = im.transpose(_TRANSPOSE[orientation])
        logger.debug("Rotated %s by %d degrees to %dx%d", p.name, int(orientation), im.width, im.height)

    return PixelBuffer.from_image(im)
