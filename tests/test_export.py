"""Unit tests for image export.

Tests cover:
- Lossless PNG round trip
- JPEG output
- Shape, dtype and extension validation
- RMSE comparison
"""

import numpy as np
import pytest


@pytest.fixture
def gradient_image():
    """A small 8-bit test image with distinct rows and columns."""
    height, width = 6, 9
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :, 0] = np.arange(width, dtype=np.uint8)[None, :] * 25
    image[:, :, 1] = np.arange(height, dtype=np.uint8)[:, None] * 40
    image[:, :, 2] = 200
    return image


class TestSaveImage:
    """Tests for save_image."""

    def test_png_round_trip(self, tmp_path, gradient_image):
        from raykernel.preview.export import load_image, save_image

        path = tmp_path / "out.png"
        save_image(gradient_image, path)
        loaded = load_image(path)
        assert np.array_equal(loaded, gradient_image)

    def test_jpeg(self, tmp_path, gradient_image):
        from raykernel.preview.export import compute_rmse, load_image, save_image

        path = tmp_path / "out.jpg"
        save_image(gradient_image, str(path), quality=95)
        loaded = load_image(path)
        assert loaded.shape == gradient_image.shape
        # Lossy, but close
        assert compute_rmse(loaded, gradient_image) < 20.0

    def test_wrong_shape(self, tmp_path):
        from raykernel.preview.export import save_image

        with pytest.raises(ValueError, match="shape"):
            save_image(np.zeros((4, 4), dtype=np.uint8), tmp_path / "out.png")

    def test_empty_image(self, tmp_path):
        from raykernel.preview.export import save_image

        with pytest.raises(ValueError, match="empty"):
            save_image(np.zeros((0, 4, 3), dtype=np.uint8), tmp_path / "out.png")

    def test_wrong_dtype(self, tmp_path):
        from raykernel.preview.export import save_image

        with pytest.raises(ValueError, match="uint8"):
            save_image(np.zeros((4, 4, 3), dtype=np.float64), tmp_path / "out.png")

    def test_unsupported_extension(self, tmp_path, gradient_image):
        from raykernel.preview.export import save_image

        with pytest.raises(ValueError, match="Unsupported"):
            save_image(gradient_image, tmp_path / "out.exr")


class TestComputeRmse:
    """Tests for compute_rmse."""

    def test_identical(self, gradient_image):
        from raykernel.preview.export import compute_rmse

        assert compute_rmse(gradient_image, gradient_image.copy()) == 0.0

    def test_constant_offset(self):
        from raykernel.preview.export import compute_rmse

        a = np.full((2, 2, 3), 10, dtype=np.uint8)
        b = np.full((2, 2, 3), 13, dtype=np.uint8)
        assert compute_rmse(a, b) == pytest.approx(3.0)

    def test_shape_mismatch(self):
        from raykernel.preview.export import compute_rmse

        with pytest.raises(ValueError, match="don't match"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))
