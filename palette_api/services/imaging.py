"""
Palette API Imaging Utilities
Handles image fetching, upload validation, decoding and resampling to the
fixed RGBA sample bitmap consumed by palette extraction.
"""
import io
from urllib.parse import urlparse

import requests
from fastapi import HTTPException, UploadFile
from PIL import Image

from palette_api.config import config


def _max_bytes() -> int:
    return config.MAX_FILE_MB * 1024 * 1024


def validate_image_url(url: str) -> None:
    """
    Validate that an image URL is fetchable over HTTP(S).

    Raises:
        HTTPException: 400 for non-HTTP schemes or missing host
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise HTTPException(status_code=400, detail="Invalid image URL. Use http or https.")


def fetch_image_bytes(url: str) -> bytes:
    """
    Download image bytes from a URL.

    Args:
        url: HTTP(S) image URL

    Returns:
        Raw response body

    Raises:
        HTTPException: 400 if the request fails or the body is too large
    """
    validate_image_url(url)

    try:
        response = requests.get(url, timeout=config.FETCH_TIMEOUT_S)
        response.raise_for_status()
    except requests.RequestException as e:
        raise HTTPException(status_code=400, detail=f"Failed to fetch image: {str(e)}")

    if len(response.content) > _max_bytes():
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    return response.content


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file size and format.

    Args:
        file: FastAPI UploadFile object

    Raises:
        HTTPException: 400 for oversized files, 415 for unsupported formats
    """
    # Check file size (file.size might be None for some clients)
    if file.size and file.size > _max_bytes():
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    # Generic binary uploads are accepted and left to the decoder
    if file.content_type and file.content_type != "application/octet-stream":
        if file.content_type not in config.SUPPORTED_MIME_TYPES:
            raise HTTPException(
                status_code=415,
                detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
            )


async def read_upload(file: UploadFile) -> bytes:
    """
    Read uploaded file bytes into memory.

    Raises:
        HTTPException: 400 for read errors or oversized files
    """
    validate_file_upload(file)

    try:
        file_bytes = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    if len(file_bytes) > _max_bytes():
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    return file_bytes


def decode_image(data: bytes) -> Image.Image:
    """
    Decode raw image bytes with Pillow.

    Raises:
        HTTPException: 400 if the bytes are not a readable image
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to decode image: {str(e)}")

    return image


def to_rgba_buffer(image: Image.Image, edge: int = None) -> bytes:
    """
    Resample an image to an ``edge`` x ``edge`` RGBA bitmap.

    The aspect ratio is not preserved; every image is sampled on the same grid.

    Args:
        image: Decoded PIL image
        edge: Square edge length (default from config)

    Returns:
        Row-major RGBA bytes, ``edge * edge * 4`` long
    """
    if edge is None:
        edge = config.SAMPLE_EDGE

    rgba = image.convert("RGBA")
    resized = rgba.resize((edge, edge), Image.BILINEAR)
    return resized.tobytes()
