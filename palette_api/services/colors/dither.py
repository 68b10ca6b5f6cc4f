"""
Dither injection for color samples.

Clustering exact pixel values lets large flat regions swallow the palette.
Uniform noise softens the boundaries between near-equal colors so minority
colors still win a slot. Fewer clusters or higher variance means more noise.
"""

import math

import numpy as np

from palette_api.config import Config


def dither_magnitude(k: int, variance: int) -> float:
    """Total noise span for palette size ``k`` and ``variance``."""
    max_dither = Config.MAX_DITHER / math.ceil(k / 2)
    return (max_dither / 10) * variance


def apply_dither(samples: np.ndarray, k: int, variance: int,
                 rng: np.random.Generator) -> np.ndarray:
    """
    Add uniform noise in ``[-m/2, m/2)`` to every channel, in place.

    The draw is half-open: ``-m/2`` itself is reachable, with probability 2**-53.

    Args:
        samples: Float array (N, 3), modified in place
        k: Normalized palette size
        variance: Normalized variance
        rng: Noise source

    Returns:
        The same ``samples`` array
    """
    magnitude = dither_magnitude(k, variance)
    if magnitude == 0 or samples.size == 0:
        return samples

    samples += (rng.random(samples.shape) - 0.5) * magnitude
    return samples
