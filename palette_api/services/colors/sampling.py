"""Pixel sampling from decoded RGBA bitmaps."""

from typing import Sequence, Union

import numpy as np

from .errors import InvalidInputError

PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray, Sequence[int]]

CHANNELS = 4


def sample_pixels(buffer: PixelBuffer) -> np.ndarray:
    """
    Flatten an RGBA-interleaved byte buffer into RGB color samples.

    Args:
        buffer: Flat RGBA bytes, 4 per pixel in row-major order

    Returns:
        Float64 array (N, 3) of red, green, blue values; alpha is dropped

    Raises:
        InvalidInputError: If the buffer length is not a multiple of 4
    """
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(buffer, dtype=np.uint8)
    else:
        flat = np.asarray(buffer, dtype=np.uint8).ravel()

    if flat.size % CHANNELS != 0:
        raise InvalidInputError(
            f"Pixel buffer length must be a multiple of {CHANNELS}, got {flat.size}"
        )

    rgba = flat.reshape(-1, CHANNELS)
    return rgba[:, :3].astype(np.float64)
