"""
Text fitting - shrinks replacement text so it stays inside the original footprint.

The shrink is a single linear step: width grows almost linearly with font size
for a fixed string, so one measurement at the base size is enough. No minimum
size is enforced.
"""
import logging
from typing import Callable

from overlay_translator.core.text_layer import TextElement

logger = logging.getLogger(__name__)

WIDTH_TOLERANCE = 1.05

Measurer = Callable[[TextElement], float]


def fitted_font_size(measured_width: float, max_width: float, base_font_size: float) -> float:
    """Font size that brings ``measured_width`` (taken at the base size) within tolerance."""
    allowed = max_width * WIDTH_TOLERANCE
    if measured_width > allowed:
        return base_font_size * (allowed / measured_width)
    return base_font_size


class TextFitter:
    """Applies the fitting rule to text elements using a width measurer."""

    def __init__(self, measure: Measurer):
        self.measure = measure

    def fit(self, element: TextElement, max_width: float, base_font_size: float) -> TextElement:
        element.font_size = base_font_size
        natural = self.measure(element)
        element.font_size = fitted_font_size(natural, max_width, base_font_size)
        if element.font_size != base_font_size:
            logger.debug(
                f"Shrunk '{element.text[:20]}' {base_font_size:.1f}px -> {element.font_size:.1f}px"
            )
        return element
