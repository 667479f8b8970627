"""
screen_forensics.metadata: Image header metadata and orientation.

Reads structural metadata from the file header with Pillow without
decoding the pixel data:

* File size, name and format (PNG / JPEG / etc.).
* Stored (pre-rotation) dimensions and colour mode.
* EXIF orientation tag (tag 274), mapped to an :class:`Orientation`.

Only the four pure rotations are honoured.  Mirrored orientation values
(2, 4, 5, 7) are treated as upright, as are missing or unknown values.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from PIL import Image

EXIF_ORIENTATION_TAG = 274


class Orientation(enum.IntEnum):
    """Clockwise rotation, in degrees, needed to display an image upright."""

    ROTATE_0 = 0
    ROTATE_90 = 90
    ROTATE_180 = 180
    ROTATE_270 = 270

    @classmethod
    def from_exif(cls, value: Optional[int]) -> "Orientation":
        return _EXIF_TO_ORIENTATION.get(value, cls.ROTATE_0)

    @property
    def swaps_axes(self) -> bool:
        return self in (Orientation.ROTATE_90, Orientation.ROTATE_270)


_EXIF_TO_ORIENTATION = {
    1: Orientation.ROTATE_0,
    3: Orientation.ROTATE_180,
    6: Orientation.ROTATE_90,
    8: Orientation.ROTATE_270,
}


def read_orientation(im: Image.Image) -> Orientation:
    """Return the orientation stored in an opened image's EXIF block."""
    exif = im.getexif()
    raw = exif.get(EXIF_ORIENTATION_TAG) if exif else None
    try:
        return Orientation.from_exif(int(raw)) if raw is not None else Orientation.ROTATE_0
    except (TypeError, ValueError):
        return Orientation.ROTATE_0


def extract_metadata(image_path: Union[str, Path]) -> Dict[str, Any]:
    """Extract header metadata from an image file.

    Parameters
    ----------
    image_path : str or Path
        Path to the image file.

    Returns
    -------
    dict
        Metadata fields.  An ``"error"`` key is non-``None`` only when the
        image cannot be opened.

        * ``"format"``: image codec (e.g. ``"PNG"``, ``"JPEG"``).
        * ``"width"`` / ``"height"``: stored pixel dimensions, before
          any orientation correction.
        * ``"exif_orientation"``: raw tag value or ``None``.
        * ``"rotation_deg"``: clockwise correction applied on load.
        * ``"upright_width"`` / ``"upright_height"``: dimensions after
          that correction.
    """
    p = Path(image_path)
    meta: Dict[str, Any] = {
        "path": str(p),
        "filename": p.name,
        "bytes": p.stat().st_size if p.is_file() else None,
        "error": None,
    }
    try:
        with Image.open(p) as im:
            meta["format"] = im.format
            meta["mode"] = im.mode
            meta["width"], meta["height"] = im.size
            exif = im.getexif()
            meta["exif_orientation"] = exif.get(EXIF_ORIENTATION_TAG) if exif else None
            orientation = read_orientation(im)
            meta["rotation_deg"] = int(orientation)
            if orientation.swaps_axes:
                meta["upright_width"], meta["upright_height"] = meta["height"], meta["width"]
            else:
                meta["upright_width"], meta["upright_height"] = meta["width"], meta["height"]
    except Exception as e:
        meta["error"] = f"{type(e).__name__}: {e}"
    return meta
