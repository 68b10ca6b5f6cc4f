"""
Palette extraction service.

This module implements the core palette pipeline: parameter normalization,
pixel sampling, dithering, k-means clustering and conversion of the resulting
centroids to RGB, hex and HSL.
"""

import time
from typing import Any, Dict, List, Optional, Union

import numpy as np
from loguru import logger

from palette_api.config import config
from .conversion import convert_rgb_to_hex, convert_rgb_to_hsl
from .dither import apply_dither, dither_magnitude
from .errors import InvalidInputError
from .kmeans import KMeansConfig, cluster_colors
from .params import normalize_palette_size, normalize_variance
from .sampling import PixelBuffer, sample_pixels

RandomSource = Union[None, int, np.random.Generator]


def round_centroids(centroids: np.ndarray, clamp: bool = True) -> List[Dict[str, int]]:
    """
    Round real-valued centroids to integer RGB dicts.

    Halves round up. With ``clamp`` the channels are limited to [0, 255],
    which dithering can otherwise push them out of.
    """
    rounded = np.floor(centroids + 0.5)
    if clamp:
        rounded = np.clip(rounded, 0, 255)
    return [{"r": int(r), "g": int(g), "b": int(b)} for r, g, b in rounded]


def extract_palette(
    pixel_buffer: PixelBuffer,
    palette_size: Any = None,
    variance: Any = None,
    rng: RandomSource = None,
    kmeans_config: Optional[KMeansConfig] = None,
    clamp_output: Optional[bool] = None
) -> Dict[str, Any]:
    """
    Extract a dominant color palette from an RGBA pixel buffer.

    Args:
        pixel_buffer: RGBA-interleaved bytes, length divisible by 4
        palette_size: Raw palette size; normalized into [1, 16], default 4
        variance: Raw color variance; normalized into [0, 10], default 5
        rng: Seed or generator for dithering and clustering. Falls back to
            ``config.RNG_SEED`` and then to fresh entropy.
        kmeans_config: Iteration and initialization bounds
        clamp_output: Clamp rounded channels into [0, 255]
            (default from ``config.CLAMP_OUTPUT``)

    Returns:
        Dict with ``rgb``, ``hex`` and ``hsl`` lists, each with exactly
        ``palette_size`` entries in matching order

    Raises:
        InvalidInputError: If the buffer is empty or malformed
        ClusteringDidNotConvergeError: If clustering hits its iteration bound
        InsufficientDistinctColorsError: If duplicates are disallowed and the
            image has too few distinct colors
    """
    k = normalize_palette_size(palette_size)
    var = normalize_variance(variance)

    if rng is None:
        rng = config.RNG_SEED
    generator = np.random.default_rng(rng)

    if clamp_output is None:
        clamp_output = config.CLAMP_OUTPUT

    samples = sample_pixels(pixel_buffer)
    if len(samples) == 0:
        raise InvalidInputError("Cannot extract a palette from an empty image")

    logger.info(f"Extracting palette: k={k}, variance={var}, {len(samples)} samples, "
                f"dither={dither_magnitude(k, var):.2f}")

    start_time = time.time()
    apply_dither(samples, k, var, generator)
    result = cluster_colors(samples, k, rng=generator, kmeans_config=kmeans_config)
    cluster_ms = (time.time() - start_time) * 1000

    rgb = round_centroids(result.centroids, clamp=clamp_output)
    logger.info(f"Palette extracted in {result.iterations} iterations "
                f"({cluster_ms:.1f} ms)")

    return {
        "rgb": rgb,
        "hex": convert_rgb_to_hex(rgb),
        "hsl": convert_rgb_to_hsl(rgb),
    }
