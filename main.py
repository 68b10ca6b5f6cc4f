from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from palette_api import __version__
from palette_api.config import config
from palette_api.schemas import HealthResponse, PaletteResponse, PaletteUrlRequest
from palette_api.services.colors.errors import InvalidInputError, PaletteError
from palette_api.services.colors.extract_api import handle_file, handle_url
from palette_api.utils.logging import get_logger
from palette_api.utils.metrics import get_metrics

# Configure loguru sinks before the first request
get_logger()

app = FastAPI(
    title="Palette API",
    description="Dominant color palette extraction with dithered k-means",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"]
)


def _palette_http_error(e: PaletteError) -> HTTPException:
    if isinstance(e, InvalidInputError):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=422, detail=str(e))


@app.get("/", response_class=PlainTextResponse)
def home():
    """Root endpoint"""
    return "Palette API Home"


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Palette service health check."""
    return HealthResponse(ok=True, version=__version__, service="palette-api")


@app.get("/metrics")
def metrics_summary():
    """Get in-process request counters and timings."""
    return get_metrics().get_summary()


@app.post("/url", response_model=PaletteResponse)
async def image_by_link(body: Optional[PaletteUrlRequest] = None):
    """
    Extract a palette from an image URL.

    - **image**: http(s) URL of a JPG, PNG, BMP, GIF or TIFF image
    - **size**: palette size (1-16, default 4)
    - **variance**: color variance (0-10, default 5)
    """
    if body is None or not body.image:
        raise HTTPException(status_code=400, detail="No Image Url Passed")

    try:
        return await handle_url(body.image, body.size, body.variance)
    except PaletteError as e:
        raise _palette_http_error(e)


@app.post("/file", response_model=PaletteResponse)
async def image_by_file(
    image: Optional[UploadFile] = File(None),
    size: Optional[str] = Form(None),
    variance: Optional[str] = Form(None)
):
    """
    Extract a palette from an uploaded image file.

    - **image**: image file (multipart field)
    - **size**: palette size (1-16, default 4)
    - **variance**: color variance (0-10, default 5)
    """
    if image is None or not image.filename:
        raise HTTPException(status_code=400, detail="No Image File Passed")

    try:
        return await handle_file(image, size, variance)
    except PaletteError as e:
        raise _palette_http_error(e)
