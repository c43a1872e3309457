"""
Image output.

Writes the display bytes of a canvas as a binary PPM (P6) or, for any other
file suffix, through Pillow.
"""

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

DEFAULT_COMMENT = "buddhascope multi-Julia density plot"

PPM_SUFFIXES = {".ppm", ".pnm"}


class ImageWriteError(OSError):
    """The image file could not be written."""


def _check_rgb(rgb: np.ndarray) -> np.ndarray:
    rgb = np.asarray(rgb)
    if rgb.ndim != 3 or rgb.shape[2] != 3:
        raise ValueError(f"expected an (H, W, 3) array, got shape {rgb.shape}")
    return np.ascontiguousarray(rgb, dtype=np.uint8)


def ppm_header(width: int, height: int, comment: str = DEFAULT_COMMENT) -> bytes:
    """``P6``, a ``#`` comment line, the size and the 255 max value."""
    comment = comment.replace("\n", " ")
    return f"P6\n# {comment}\n{width} {height}\n255\n".encode("ascii", errors="replace")


def write_ppm(
    path: Union[str, Path],
    rgb: np.ndarray,
    comment: str = DEFAULT_COMMENT,
) -> Path:
    """
    Write a binary PPM.

    Args:
        path: Output file.
        rgb: (H, W, 3) uint8 array, row-major.
        comment: Text for the header comment line.

    Returns:
        Path to the written file.

    Raises:
        ImageWriteError: If the file cannot be created or written.
    """
    rgb = _check_rgb(rgb)
    height, width = rgb.shape[:2]
    path = Path(path)

    try:
        with open(path, "wb") as f:
            f.write(ppm_header(width, height, comment))
            f.write(rgb.tobytes())
    except OSError as exc:
        raise ImageWriteError(f"cannot write {path}: {exc}") from exc

    return path


def save_image(
    path: Union[str, Path],
    rgb: np.ndarray,
    comment: str = DEFAULT_COMMENT,
) -> Path:
    """Save as PPM for .ppm/.pnm paths, otherwise let Pillow pick the format."""
    path = Path(path)
    if path.suffix.lower() in PPM_SUFFIXES:
        return write_ppm(path, rgb, comment)

    rgb = _check_rgb(rgb)
    try:
        Image.fromarray(rgb).save(path)
    except (OSError, ValueError) as exc:
        raise ImageWriteError(f"cannot write {path}: {exc}") from exc

    return path
