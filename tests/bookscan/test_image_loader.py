"""Unit tests for image loading and pixel buffer conversion."""

from pathlib import Path
from unittest.mock import patch

import cv2
import numpy as np
import pytest

from src.bookscan.errors import InvalidImageError
from src.bookscan.image_loader import load_image


@pytest.fixture
def png_bytes():
    """Provide a small encoded PNG image."""
    image = np.full((20, 40, 3), 255, dtype=np.uint8)
    ok, encoded = cv2.imencode(".png", image)
    assert ok
    return encoded.tobytes()


class TestArrayInput:
    """Test numpy array inputs."""

    def test_grayscale(self):
        image = np.zeros((50, 200), dtype=np.uint8)
        assert load_image(image).shape == (50, 200)

    def test_single_channel(self):
        image = np.zeros((50, 200, 1), dtype=np.uint8)
        assert load_image(image).shape == (50, 200)

    def test_bgr(self):
        image = np.zeros((50, 200, 3), dtype=np.uint8)
        assert load_image(image).shape == (50, 200, 3)

    def test_bgra(self):
        image = np.zeros((50, 200, 4), dtype=np.uint8)
        assert load_image(image).shape == (50, 200, 3)

    def test_float_image_scaled(self):
        image = np.ones((10, 10), dtype=np.float32)
        pixels = load_image(image)

        assert pixels.dtype == np.uint8
        assert pixels.max() == 255

    def test_array_like(self):
        """Test objects exposing the array protocol (e.g. PIL images)."""

        class ArrayLike:
            def __array__(self, dtype=None, copy=None):
                return np.zeros((8, 8, 3), dtype=np.uint8)

        assert load_image(ArrayLike()).shape == (8, 8, 3)

    def test_array_like_rgb_reordered(self):
        """Test array-protocol images are read as RGB and returned as BGR."""

        class RGBImage:
            def __array__(self, dtype=None, copy=None):
                image = np.zeros((4, 4, 3), dtype=np.uint8)
                image[:, :, 0] = 255  # Red
                return image

        pixels = load_image(RGBImage())

        assert pixels[0, 0].tolist() == [0, 0, 255]

    def test_array_like_rgba_reordered(self):
        class RGBAImage:
            def __array__(self, dtype=None, copy=None):
                image = np.zeros((4, 4, 4), dtype=np.uint8)
                image[:, :, 2] = 255  # Blue
                image[:, :, 3] = 255
                return image

        pixels = load_image(RGBAImage())

        assert pixels.shape == (4, 4, 3)
        assert pixels[0, 0].tolist() == [255, 0, 0]

    def test_ndarray_kept_in_bgr_order(self):
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        image[:, :, 0] = 255

        assert load_image(image)[0, 0].tolist() == [255, 0, 0]

    def test_uint16_rescaled(self):
        """Test 16-bit scans keep their contrast after conversion."""
        image = np.full((20, 40), 60000, dtype=np.uint16)
        image[5:15, 10:30] = 8000

        pixels = load_image(image)

        assert pixels.dtype == np.uint8
        assert pixels[0, 0] == 60000 >> 8
        assert pixels[10, 20] == 8000 >> 8
        assert len(np.unique(pixels)) == 2

    def test_wide_integer_normalized(self):
        image = np.full((10, 10), 100000, dtype=np.int32)
        image[2:8, 2:8] = -5000

        pixels = load_image(image)

        assert pixels.dtype == np.uint8
        assert pixels.max() == 255
        assert pixels.min() == 0

    def test_small_integer_values_kept(self):
        image = np.full((10, 10), 200, dtype=np.int64)

        assert load_image(image).max() == 200


class TestFileInput:
    """Test path and bytes inputs."""

    def test_path(self, tmp_path, png_bytes):
        path = tmp_path / "奥付.png"
        path.write_bytes(png_bytes)

        assert load_image(path).shape == (20, 40, 3)
        assert load_image(str(path)).shape == (20, 40, 3)

    def test_bytes(self, png_bytes):
        assert load_image(png_bytes).shape == (20, 40, 3)


class TestInvalidInput:
    """Test inputs that cannot become a pixel buffer."""

    def test_none(self):
        with pytest.raises(InvalidImageError):
            load_image(None)

    def test_empty_array(self):
        with pytest.raises(InvalidImageError, match="empty"):
            load_image(np.array([]))

    def test_invalid_shape(self):
        with pytest.raises(InvalidImageError, match="shape"):
            load_image(np.zeros((1, 50, 200, 3), dtype=np.uint8))

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidImageError, match="not found"):
            load_image(tmp_path / "missing.jpg")

    def test_unreadable_file(self, tmp_path, png_bytes):
        path = tmp_path / "locked.png"
        path.write_bytes(png_bytes)

        with patch.object(Path, "read_bytes", side_effect=PermissionError("denied")):
            with pytest.raises(InvalidImageError, match="Could not read") as exc_info:
                load_image(path)

        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_corrupt_bytes(self):
        with pytest.raises(InvalidImageError, match="decode"):
            load_image(b"not an image")

    def test_empty_bytes(self):
        with pytest.raises(InvalidImageError):
            load_image(b"")

    def test_unsupported_object(self):
        with pytest.raises(InvalidImageError):
            load_image(object())

    def test_error_code(self):
        with pytest.raises(InvalidImageError) as exc_info:
            load_image(None)

        assert exc_info.value.code == "OCR-E001"
        assert str(exc_info.value).startswith("OCR-E001")


class TestSamplePage:
    """Test the shared synthetic colophon fixtures."""

    def test_array(self, sample_page_image):
        assert load_image(sample_page_image).shape == (200, 600, 3)

    def test_file(self, sample_page_file):
        pixels = load_image(sample_page_file)

        assert pixels.shape == (200, 600, 3)
        assert pixels.min() == 0  # Text pixels survived encoding
