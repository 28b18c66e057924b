"""Conversion of caller-supplied images into pixel buffers.

The pipeline accepts several image handles (numpy arrays, objects exposing
the array protocol such as PIL images, file paths and encoded bytes) and
turns each into a ``uint8`` numpy array the OCR engines accept:

- (H, W) grayscale
- (H, W, 3) BGR

numpy arrays are taken to be in OpenCV (BGR/BGRA) channel order. Other
array-protocol objects are taken to be RGB/RGBA, as PIL images are, and are
reordered. Integer buffers wider than 8 bits are rescaled to 0..255.

Anything else raises ``InvalidImageError``.
"""

import logging
from pathlib import Path
from typing import Any, Union

import cv2
import numpy as np

from .errors import InvalidImageError

logger = logging.getLogger(__name__)

ImageInput = Union[np.ndarray, str, Path, bytes, bytearray, Any]


def load_image(image: ImageInput) -> np.ndarray:
    """Convert an image handle to a grayscale or BGR pixel buffer.

    Args:
        image: numpy array, array-like image, file path or encoded bytes.

    Returns:
        uint8 array of shape (H, W) or (H, W, 3).

    Raises:
        InvalidImageError: If the input cannot be converted.
    """
    if image is None:
        raise InvalidImageError("Image is None")

    if isinstance(image, (str, Path)):
        pixels = _read_file(Path(image))
    elif isinstance(image, (bytes, bytearray)):
        pixels = _decode_bytes(bytes(image))
    elif isinstance(image, np.ndarray):
        pixels = image
    else:
        try:
            pixels = np.asarray(image)
        except Exception as e:
            raise InvalidImageError(
                f"Unsupported image type: {type(image).__name__}"
            ) from e
        pixels = _rgb_to_bgr(pixels)

    return _to_pixel_buffer(pixels)


def _read_file(path: Path) -> np.ndarray:
    if not path.is_file():
        raise InvalidImageError(f"Image file not found: {path}")

    try:
        # cv2.imread cannot open non-ASCII paths on some platforms
        data = path.read_bytes()
    except OSError as e:
        raise InvalidImageError(f"Could not read image file: {path}: {e}") from e

    return _decode_bytes(data, source=str(path))


def _decode_bytes(data: bytes, source: str = "<bytes>") -> np.ndarray:
    if not data:
        raise InvalidImageError(f"Empty image data: {source}")

    buffer = np.frombuffer(data, dtype=np.uint8)
    decoded = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if decoded is None:
        raise InvalidImageError(f"Could not decode image data: {source}")

    logger.debug(f"Decoded image {source}: shape={decoded.shape}")
    return decoded


def _to_pixel_buffer(pixels: np.ndarray) -> np.ndarray:
    """Validate array shape and normalize dtype/channels."""
    if pixels.size == 0:
        raise InvalidImageError("Invalid image: empty")

    if pixels.ndim == 3 and pixels.shape[2] == 1:
        pixels = pixels[:, :, 0]
    elif pixels.ndim == 3 and pixels.shape[2] == 4:
        pixels = cv2.cvtColor(_as_uint8(pixels), cv2.COLOR_BGRA2BGR)
    elif pixels.ndim == 3 and pixels.shape[2] == 3:
        pass
    elif pixels.ndim != 2:
        raise InvalidImageError(f"Invalid image shape: {pixels.shape}")

    return _as_uint8(pixels)


def _as_uint8(pixels: np.ndarray) -> np.ndarray:
    if pixels.dtype == np.uint8:
        return pixels
    if pixels.dtype == np.bool_:
        return pixels.astype(np.uint8) * 255
    if np.issubdtype(pixels.dtype, np.floating):
        # Float images are expected in [0, 1]
        return (np.clip(pixels, 0.0, 1.0) * 255).astype(np.uint8)
    if np.issubdtype(pixels.dtype, np.integer):
        if pixels.min() >= 0 and pixels.max() <= 255:
            return pixels.astype(np.uint8)
        if pixels.dtype == np.uint16:
            return (pixels >> 8).astype(np.uint8)
        return cv2.normalize(
            pixels.astype(np.float32), None, 0, 255, cv2.NORM_MINMAX
        ).astype(np.uint8)
    raise InvalidImageError(f"Unsupported pixel dtype: {pixels.dtype}")


def _rgb_to_bgr(pixels: np.ndarray) -> np.ndarray:
    """Reorder RGB/RGBA channels to OpenCV's BGR/BGRA order."""
    if pixels.size == 0 or pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        return pixels
    code = cv2.COLOR_RGB2BGR if pixels.shape[2] == 3 else cv2.COLOR_RGBA2BGRA
    return cv2.cvtColor(_as_uint8(pixels), code)
