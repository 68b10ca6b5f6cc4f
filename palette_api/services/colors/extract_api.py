"""
Palette Extraction API Orchestrator

Handles the URL and file upload modes. Coordinates image acquisition,
resampling and the palette pipeline for a single request, with logging,
timings and metrics.
"""

import json
import time
from typing import Any, Dict

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from palette_api.config import config
from palette_api.services.colors.extraction import extract_palette
from palette_api.services.imaging import decode_image, fetch_image_bytes, read_upload, to_rgba_buffer
from palette_api.utils.ids import generate_request_id
from palette_api.utils.logging import get_logger
from palette_api.utils.metrics import get_metrics


def _bytes_to_palette(image_bytes: bytes, palette_size: Any, variance: Any) -> Dict[str, Any]:
    """Decode, resample and cluster; runs off the event loop."""
    decode_start = time.time()
    image = decode_image(image_bytes)
    buffer = to_rgba_buffer(image, config.SAMPLE_EDGE)
    decode_ms = (time.time() - decode_start) * 1000

    extract_start = time.time()
    palette = extract_palette(buffer, palette_size, variance)
    extract_ms = (time.time() - extract_start) * 1000

    return {
        "palette": palette,
        "width": image.width,
        "height": image.height,
        "ms_decode": decode_ms,
        "ms_extract": extract_ms,
    }


async def _run(source: str, load_bytes, palette_size: Any, variance: Any) -> Dict[str, Any]:
    request_id = generate_request_id(source)
    logger = get_logger()
    metrics = get_metrics()
    start_time = time.time()

    metrics.increment_request_count(source)
    logger.info("Starting palette extraction", extra={"request_id": request_id, "source": source})

    try:
        fetch_start = time.time()
        image_bytes = await load_bytes()
        fetch_ms = (time.time() - fetch_start) * 1000

        outcome = await run_in_threadpool(_bytes_to_palette, image_bytes, palette_size, variance)
    except Exception as e:
        error_ms = (time.time() - start_time) * 1000
        logger.error(f"Palette extraction failed: {str(e)}",
                     extra={
                         "request_id": request_id,
                         "ms_total": error_ms,
                         "result": "error",
                         "error_type": type(e).__name__
                     })
        metrics.increment_failure_count(type(e).__name__.lower())
        raise

    palette = outcome["palette"]
    total_ms = (time.time() - start_time) * 1000

    logger.info(json.dumps(palette["rgb"]), extra={"request_id": request_id})
    logger.info("Palette extraction completed successfully",
                extra={
                    "request_id": request_id,
                    "source": source,
                    "dims": f"{outcome['width']}x{outcome['height']}",
                    "k": len(palette["rgb"]),
                    "ms_fetch": fetch_ms,
                    "ms_decode": outcome["ms_decode"],
                    "ms_extract": outcome["ms_extract"],
                    "ms_total": total_ms,
                    "result": "ok"
                })

    metrics.record_timing("palette_fetch", fetch_ms)
    metrics.record_timing("palette_extract", outcome["ms_extract"])
    metrics.record_timing("palette_total", total_ms)

    return palette


async def handle_url(image_url: str, palette_size: Any = None, variance: Any = None) -> Dict[str, Any]:
    """
    Extract a palette from an image at ``image_url``.

    Returns:
        Dict with ``rgb``, ``hex`` and ``hsl`` lists

    Raises:
        HTTPException: For fetch or decode failures
        PaletteError: For clustering failures
    """
    async def load_bytes() -> bytes:
        return await run_in_threadpool(fetch_image_bytes, image_url)

    return await _run("url", load_bytes, palette_size, variance)


async def handle_file(file: UploadFile, palette_size: Any = None, variance: Any = None) -> Dict[str, Any]:
    """
    Extract a palette from an uploaded image file.

    The upload is read into memory; nothing is written to disk.
    """
    async def load_bytes() -> bytes:
        return await read_upload(file)

    return await _run("file", load_bytes, palette_size, variance)
