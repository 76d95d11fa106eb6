"""Image export for rendered frames.

Supported formats (picked from the file extension by Pillow):
    - PNG (lossless)
    - JPEG (default quality 75)

Example:
    >>> from raykernel.core.integrator import render
    >>> from raykernel.preview.export import save_image
    >>>
    >>> pixels = render(world, camera, 256, 256, samples_per_pixel=100)
    >>> save_image(pixels, "out.jpg")
"""

from __future__ import annotations

import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".png", ".jpg", ".jpeg")


def _check_pixels(pixels: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Validate an 8-bit RGB image buffer."""
    array = np.asarray(pixels)
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {array.shape}")
    if array.shape[0] == 0 or array.shape[1] == 0:
        raise ValueError(f"Image must not be empty, got {array.shape}")
    if array.dtype != np.uint8:
        raise ValueError(f"Expected dtype uint8, got {array.dtype}")
    return array


def save_image(
    pixels: npt.NDArray[np.uint8],
    filepath: str | os.PathLike[str],
    *,
    quality: int = 75,
) -> None:
    """Save an 8-bit RGB image as PNG or JPEG.

    Args:
        pixels: Image array of shape (H, W, 3), dtype uint8, row 0 at the top.
        filepath: Output file path ending in .png, .jpg or .jpeg.
        quality: JPEG quality (ignored for PNG).

    Raises:
        ValueError: If the array has the wrong shape or dtype, or the file
            extension is not supported.
    """
    array = _check_pixels(pixels)

    extension = os.path.splitext(os.fspath(filepath))[1].lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"Unsupported image format '{extension}', expected one of {SUPPORTED_EXTENSIONS}"
        )

    pil_image = PILImage.fromarray(np.ascontiguousarray(array))
    if extension == ".png":
        pil_image.save(filepath)
    else:
        pil_image.save(filepath, quality=quality)

    logger.debug("Saved %dx%d image to %s", array.shape[1], array.shape[0], filepath)


def load_image(filepath: str | os.PathLike[str]) -> npt.NDArray[np.uint8]:
    """Load an image file as an (H, W, 3) uint8 array."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGB"), dtype=np.uint8)


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute Root Mean Square Error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array of the same shape.

    Returns:
        The RMSE value (0 means identical images).

    Raises:
        ValueError: If the images have different shapes.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes don't match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
