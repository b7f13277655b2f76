"""
Overlay rendering - masks original text and lays replacement text over a page raster.

OCR items are masked on the raster itself (a filled rectangle in the sampled
background colour with a 1px bleed), then drawn transparently. Native items
cannot be erased from the raster the same way, so their element is drawn on an
opaque cover instead.

Masking writes into the caller's pixel buffer; re-rendering from scratch needs
a fresh raster of the page.
"""
import logging
import math
from typing import List, Optional

import cv2
import numpy as np
from PIL import Image, ImageColor, ImageDraw

from overlay_translator.core.fitter import TextFitter
from overlay_translator.core.fonts import FontProvider
from overlay_translator.core.models import Page, TextItem
from overlay_translator.core.text_layer import TextElement, TextLayer

logger = logging.getLogger(__name__)

MASK_BLEED = 1
NATIVE_COVER = "white"
TEXT_PADDING = 1
LINE_HEIGHT = 1.0


class OverlayRenderer:
    """Builds, fits and draws text elements for TextItems."""

    def __init__(self, fonts: Optional[FontProvider] = None):
        self.fonts = fonts or FontProvider()
        self.fitter = TextFitter(self._measure_element)

    def _measure_element(self, element: TextElement) -> float:
        return self.fonts.measure(element.text, element.font_family, element.font_size)

    def mask(self, pixels: np.ndarray, item: TextItem):
        """Paint ``item``'s background over ``(x-1, y-1, w+2, h+2)`` on the raster."""
        color = ImageColor.getrgb(item.background_color)[:3]
        x0 = math.floor(item.x - MASK_BLEED)
        y0 = math.floor(item.y - MASK_BLEED)
        # cv2 end points are inclusive
        x1 = math.ceil(item.x + item.w + MASK_BLEED) - 1
        y1 = math.ceil(item.y + item.h + MASK_BLEED) - 1
        cv2.rectangle(pixels, (x0, y0), (x1, y1), tuple(int(c) for c in color), thickness=-1)

    def build_element(self, item: TextItem) -> TextElement:
        element = TextElement(
            text=item.display_text,
            x=item.x,
            y=item.y,
            font_size=item.font_size,
            font_family=item.font_family,
            color=item.color,
            background="transparent" if item.is_ocr else NATIVE_COVER,
            translated=item.translated is not None,
            cover_width=0.0 if item.is_ocr else item.w,
            cover_height=0.0 if item.is_ocr else item.h,
        )
        if element.translated:
            self.fitter.fit(element, item.w, item.font_size)
        return element

    def update_element(self, element: TextElement, item: TextItem) -> TextElement:
        """Re-sync an existing element after its item's text changed."""
        element.text = item.display_text
        element.translated = item.translated is not None
        element.font_size = item.font_size
        if element.translated:
            self.fitter.fit(element, item.w, item.font_size)
        return element

    def render_page(
        self,
        page: Page,
        pixels: np.ndarray,
        layer: Optional[TextLayer] = None,
    ) -> List[TextElement]:
        """
        Mask OCR items on ``pixels`` and build one element per item.

        When ``layer`` is given the elements are bound to it by
        ``(page.index, item_index)`` for later in-place edits.
        """
        if layer is not None:
            layer.clear_page(page.index)

        elements = []
        for index, item in enumerate(page.items):
            if item.is_ocr:
                self.mask(pixels, item)
            element = self.build_element(item)
            if layer is not None:
                layer.bind(page.index, index, element)
            elements.append(element)
        return elements

    def draw_element(self, draw: ImageDraw.ImageDraw, element: TextElement):
        font = self.fonts.get_font(element.font_family, element.font_size)
        if element.is_opaque:
            width = max(self._measure_element(element), element.cover_width)
            height = max(element.font_size * LINE_HEIGHT, element.cover_height)
            draw.rectangle(
                [
                    element.x - TEXT_PADDING,
                    element.y - TEXT_PADDING,
                    element.x + width + 2 * TEXT_PADDING,
                    element.y + height + TEXT_PADDING,
                ],
                fill=element.background,
            )
        draw.text((element.x + TEXT_PADDING, element.y), element.text, fill=element.color, font=font)

    def composite(self, pixels: np.ndarray, elements: List[TextElement]) -> Image.Image:
        """Draw ``elements`` over the (already masked) raster."""
        image = Image.fromarray(pixels).convert("RGB")
        draw = ImageDraw.Draw(image)
        for element in elements:
            self.draw_element(draw, element)
        return image
