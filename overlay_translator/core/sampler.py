"""
Background colour sampling for OCR text regions.

Only the top-left pixel of the region is read. Histogram sampling would be
more accurate over busy backgrounds but changes the visual output, so masks
over complex backgrounds may show artifacts.
"""
import logging
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

WHITE: RGB = (255, 255, 255)
BRIGHTNESS_THRESHOLD = 128


def sample_background(pixels: np.ndarray, x: float, y: float, w: float, h: float) -> RGB:
    """
    Representative background colour of the box ``(x, y, w, h)``.

    Degenerate boxes and coordinates outside the buffer give white.
    """
    if w <= 0 or h <= 0:
        return WHITE

    px, py = int(x), int(y)
    height, width = pixels.shape[:2]
    if px < 0 or py < 0 or px >= width or py >= height:
        logger.debug(f"Sample point ({px}, {py}) outside {width}x{height} raster")
        return WHITE

    value = pixels[py, px]
    if np.ndim(value) == 0:
        # Greyscale raster
        g = int(value)
        return (g, g, g)
    return (int(value[0]), int(value[1]), int(value[2]))


def classify_brightness(rgb: RGB) -> str:
    """``"dark"`` when the channel average is below 128, otherwise ``"light"``."""
    average = (rgb[0] + rgb[1] + rgb[2]) / 3
    return "dark" if average < BRIGHTNESS_THRESHOLD else "light"


def text_color_for(rgb: RGB) -> str:
    """Foreground colour that stays readable over ``rgb``."""
    return "white" if classify_brightness(rgb) == "dark" else "black"


def rgb_string(rgb: RGB) -> str:
    return f"rgb({rgb[0]}, {rgb[1]}, {rgb[2]})"
