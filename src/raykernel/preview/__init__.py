"""Preview module: writing rendered images to disk.

Components:
    export: PNG/JPEG export via Pillow and image comparison helpers
"""

from raykernel.preview.export import compute_rmse, load_image, save_image

__all__ = [
    "save_image",
    "load_image",
    "compute_rmse",
]
