"""
Color space conversion for palette output.

Colors are plain ``{"r", "g", "b"}`` dicts of integer channels, the shape the
API returns them in.
"""

from typing import Dict, List, Mapping

RGB = Mapping[str, int]


def rgb_to_hex(color: RGB) -> str:
    """Convert an RGB color to an uppercase ``#RRGGBB`` string."""
    return f"#{color['r']:02x}{color['g']:02x}{color['b']:02x}".upper()


def hex_to_rgb(hex_color: str) -> Dict[str, int]:
    """Convert hex color string to an RGB dict."""
    hex_color = hex_color.lstrip('#')
    r, g, b = (int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    return {"r": r, "g": g, "b": b}


def rgb_to_hsl(color: RGB) -> Dict[str, str]:
    """
    Convert an RGB color to HSL.

    All three components are in [0, 1] (hue as a fraction of the circle) and
    formatted with two decimals, e.g. ``{"h": "0.00", "s": "0.00", "l": "0.50"}``.
    """
    r, g, b = color['r'] / 255, color['g'] / 255, color['b'] / 255
    max_c = max(r, g, b)
    min_c = min(r, g, b)
    l = (max_c + min_c) / 2

    if max_c == min_c:
        h = s = 0.0  # achromatic
    else:
        d = max_c - min_c
        s = d / (2 - max_c - min_c) if l > 0.5 else d / (max_c + min_c)
        if max_c == r:
            h = (g - b) / d + (6 if g < b else 0)
        elif max_c == g:
            h = (b - r) / d + 2
        else:
            h = (r - g) / d + 4
        h /= 6

    return {"h": f"{h:.2f}", "s": f"{s:.2f}", "l": f"{l:.2f}"}


def convert_rgb_to_hex(colors: List[RGB]) -> List[str]:
    """Map a list of RGB colors to hex strings."""
    return [rgb_to_hex(color) for color in colors]


def convert_rgb_to_hsl(colors: List[RGB]) -> List[Dict[str, str]]:
    """Map a list of RGB colors to HSL triples."""
    return [rgb_to_hsl(color) for color in colors]
