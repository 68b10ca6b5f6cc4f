"""
Palette API

Extracts representative color palettes from images using dithered k-means
clustering, and serves them over HTTP.
"""

__version__ = "1.0.0"
