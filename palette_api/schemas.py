"""
Palette API Schemas
Pydantic models for palette extraction request/response validation.
"""
from typing import Any, List, Optional
from pydantic import BaseModel, Field


class RGBColor(BaseModel):
    """Rounded palette centroid."""
    r: int = Field(..., description="Red channel")
    g: int = Field(..., description="Green channel")
    b: int = Field(..., description="Blue channel")


class HSLColor(BaseModel):
    """HSL triple, each component in [0, 1] formatted with two decimals."""
    h: str = Field(..., description="Hue as a fraction of the color circle")
    s: str = Field(..., description="Saturation")
    l: str = Field(..., description="Lightness")


class PaletteResponse(BaseModel):
    """Extracted palette; all lists share centroid order."""
    rgb: List[RGBColor] = Field(..., description="Palette colors as RGB")
    hex: List[str] = Field(..., description="Palette colors as #RRGGBB")
    hsl: List[HSLColor] = Field(..., description="Palette colors as HSL")


class PaletteUrlRequest(BaseModel):
    """Request body for extracting a palette from an image URL."""
    image: Optional[str] = Field(None, description="Image URL (http or https)")
    size: Optional[Any] = Field(
        None,
        description="Palette size 1-16; invalid or missing values default to 4"
    )
    variance: Optional[Any] = Field(
        None,
        description="Color variance 0-10; invalid or missing values default to 5"
    )


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("palette-api", description="Service name")
