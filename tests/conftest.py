"""
Test configuration and fixtures for the palette API tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Import the main app
from main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from palette_api.utils.metrics import reset_metrics
    reset_metrics()


def make_rgba_buffer(colors, pixels_per_color):
    """Build an RGBA buffer of solid color runs, opaque alpha."""
    rows = []
    for r, g, b in colors:
        rows.append(np.tile(np.array([r, g, b, 255], dtype=np.uint8), (pixels_per_color, 1)))
    return np.concatenate(rows).tobytes()


def make_png_bytes(colors, size=(64, 64), fmt="PNG"):
    """Create an image split into equal vertical stripes of ``colors``."""
    width, height = size
    image = Image.new("RGB", size)
    stripe = width // len(colors)
    for i, color in enumerate(colors):
        right = width if i == len(colors) - 1 else (i + 1) * stripe
        image.paste(color, (i * stripe, 0, right, height))
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def four_color_buffer():
    """RGBA buffer with four equally sized solid color regions."""
    colors = [(220, 20, 60), (30, 144, 255), (50, 205, 50), (255, 215, 0)]
    return colors, make_rgba_buffer(colors, 100)


@pytest.fixture
def random_buffer():
    """Seeded random 20x20 RGBA buffer."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=20 * 20 * 4, dtype=np.uint8).tobytes()
