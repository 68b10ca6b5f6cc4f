"""
Palette API Configuration
Manages environment variables and defaults for the palette extraction service.
"""
import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return None
    return int(value)


class Config:
    """Configuration class for the palette service."""

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTE_LOG_LEVEL", "INFO")

    # Image acquisition
    MAX_FILE_MB: int = int(os.environ.get("PALETTE_MAX_FILE_MB", "10"))
    SAMPLE_EDGE: int = int(os.environ.get("PALETTE_SAMPLE_EDGE", "200"))
    FETCH_TIMEOUT_S: float = float(os.environ.get("PALETTE_FETCH_TIMEOUT_S", "10"))

    # Clustering
    KMEANS_MAX_ITER: int = int(os.environ.get("PALETTE_KMEANS_MAX_ITER", "1000"))
    KMEANS_INIT_MAX_ATTEMPTS: int = int(os.environ.get("PALETTE_KMEANS_INIT_MAX_ATTEMPTS", "100"))
    ALLOW_DUPLICATE_CENTROIDS: bool = bool(int(os.environ.get("PALETTE_ALLOW_DUPLICATE_CENTROIDS", "1")))
    CLAMP_OUTPUT: bool = bool(int(os.environ.get("PALETTE_CLAMP_OUTPUT", "1")))
    RNG_SEED: Optional[int] = _optional_int("PALETTE_RNG_SEED")

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("PALETTE_ALLOWED_ORIGINS", "*")

    # Parameter domains
    PALETTE_SIZE_MIN: int = 1
    PALETTE_SIZE_MAX: int = 16
    PALETTE_SIZE_DEFAULT: int = 4
    VARIANCE_MIN: int = 0
    VARIANCE_MAX: int = 10
    VARIANCE_DEFAULT: int = 5

    # Dither ceiling shared across palette slots
    MAX_DITHER: float = 400.0

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/bmp", "image/gif", "image/tiff"]

    @classmethod
    def validate_palette_size(cls, size: int) -> bool:
        """Validate palette size parameter."""
        return cls.PALETTE_SIZE_MIN <= size <= cls.PALETTE_SIZE_MAX

    @classmethod
    def validate_variance(cls, variance: int) -> bool:
        """Validate variance parameter."""
        return cls.VARIANCE_MIN <= variance <= cls.VARIANCE_MAX

    @classmethod
    def allowed_origins(cls) -> list:
        """Parse the comma separated CORS origin list."""
        return [origin.strip() for origin in cls.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Global config instance
config = Config()
