"""
Palette Colors Module

Provides parameter normalization, pixel sampling, dithering, k-means
clustering and color space conversion for palette extraction.
"""

from .errors import (
    ClusteringDidNotConvergeError,
    InsufficientDistinctColorsError,
    InvalidInputError,
    PaletteError,
)
from .extraction import extract_palette

__all__ = [
    'extract_palette',
    'PaletteError',
    'InvalidInputError',
    'ClusteringDidNotConvergeError',
    'InsufficientDistinctColorsError',
]
