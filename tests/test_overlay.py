"""
Tests for overlay_translator.core.overlay and text_layer - masking and text elements.
"""
import numpy as np
import pytest
from PIL import Image

from overlay_translator.core.models import Page, TextItem
from overlay_translator.core.overlay import NATIVE_COVER, OverlayRenderer
from overlay_translator.core.text_layer import TextLayer


def _ocr_item(**kwargs):
    values = dict(
        original="Hello", x=5, y=5, w=4, h=3, font_size=2.7,
        color="white", background_color="rgb(0, 0, 0)", is_ocr=True,
    )
    values.update(kwargs)
    return TextItem(**values)


def _native_item(**kwargs):
    values = dict(original="Hello world", x=10, y=10, w=60, h=12, font_size=12, raw_width=40)
    values.update(kwargs)
    return TextItem(**values)


class FixedWidthFonts:
    """Font provider stand-in whose text is always ``width`` pixels wide at size 12."""

    def __init__(self, width):
        self.width = width

    def measure(self, text, family, size):
        return self.width * size / 12.0

    def get_font(self, family, size):
        from PIL import ImageFont
        return ImageFont.load_default()


@pytest.fixture
def white():
    return np.full((20, 20, 3), 255, dtype=np.uint8)


class TestMask:
    def test_covers_box_with_one_pixel_bleed(self, white):
        OverlayRenderer().mask(white, _ocr_item())

        painted = np.argwhere((white == 0).all(axis=2))
        assert painted[:, 0].min() == 4 and painted[:, 0].max() == 8   # rows y-1 .. y+h
        assert painted[:, 1].min() == 4 and painted[:, 1].max() == 9   # cols x-1 .. x+w
        assert len(painted) == 5 * 6

    def test_only_ocr_items_are_masked(self, white):
        page = Page(index=0, items=[_native_item(x=2, y=2, w=5, h=5)])
        OverlayRenderer(FixedWidthFonts(10)).render_page(page, white)
        assert (white == 255).all()


class TestElements:
    def test_ocr_element_is_transparent(self):
        element = OverlayRenderer(FixedWidthFonts(1)).build_element(_ocr_item())
        assert element.background == "transparent"
        assert not element.is_opaque
        assert element.text == "Hello"

    def test_native_element_is_opaque_and_covers_run(self):
        element = OverlayRenderer(FixedWidthFonts(1)).build_element(_native_item())
        assert element.background == NATIVE_COVER
        assert element.cover_width == 60
        assert element.cover_height == 12

    def test_ocr_element_has_no_cover(self):
        element = OverlayRenderer(FixedWidthFonts(1)).build_element(_ocr_item())
        assert (element.cover_width, element.cover_height) == (0.0, 0.0)

    def test_untranslated_text_is_not_fitted(self):
        element = OverlayRenderer(FixedWidthFonts(500)).build_element(_native_item())
        assert element.font_size == 12

    def test_translated_text_is_fitted(self):
        item = _native_item().with_translation("Hola mundo, largo")
        element = OverlayRenderer(FixedWidthFonts(120)).build_element(item)

        assert element.text == "Hola mundo, largo"
        assert element.translated
        assert element.font_size == pytest.approx(12 * (60 * 1.05) / 120)

    def test_update_element_refits(self):
        renderer = OverlayRenderer(FixedWidthFonts(120))
        item = _native_item()
        element = renderer.build_element(item)

        renderer.update_element(element, item.with_translation("Hola"))
        assert element.text == "Hola"
        assert element.font_size < 12

        renderer.update_element(element, item)
        assert element.text == "Hello world"
        assert element.font_size == 12


class TestRenderPage:
    def test_binds_elements_to_layer(self, white):
        layer = TextLayer()
        page = Page(index=3, items=[_ocr_item(), _ocr_item(original="again", x=12)])

        elements = OverlayRenderer(FixedWidthFonts(1)).render_page(page, white, layer)

        assert len(layer) == 2
        assert layer.get(3, 0) is elements[0]
        assert layer.get(3, 1) is elements[1]
        assert [index for index, _ in layer.page(3)] == [0, 1]

    def test_rerender_replaces_page_elements(self, white):
        layer = TextLayer()
        renderer = OverlayRenderer(FixedWidthFonts(1))
        renderer.render_page(Page(index=0, items=[_ocr_item(), _ocr_item()]), white, layer)
        renderer.render_page(Page(index=0, items=[_ocr_item()]), white, layer)
        assert len(layer) == 1

    def test_composite_returns_rgb_image(self, white):
        renderer = OverlayRenderer(FixedWidthFonts(8))
        page = Page(index=0, items=[_native_item(x=1, y=1, w=10, h=6, font_size=6)])
        image = renderer.composite(white, renderer.render_page(page, white))

        assert isinstance(image, Image.Image)
        assert image.mode == "RGB"
        assert image.size == (20, 20)

    def test_cover_spans_item_height(self):
        """The cover reaches the bottom of a run taller than its font size"""
        renderer = OverlayRenderer(FixedWidthFonts(1))
        item = _native_item(x=2, y=2, w=10, h=14, font_size=6).with_translation(" ")
        pixels = np.zeros((20, 20, 3), dtype=np.uint8)
        image = np.asarray(renderer.composite(pixels, renderer.render_page(Page(index=0, items=[item]), pixels)))

        assert (image[2:16, 2:12] == 255).all()
        assert (image[18:, :] == 0).all()

    def test_composite_is_deterministic(self):
        renderer = OverlayRenderer()
        page = Page(index=0, items=[_ocr_item(x=2, y=2, w=12, h=8, font_size=7)])

        def draw():
            pixels = np.full((20, 20, 3), 200, dtype=np.uint8)
            return renderer.composite(pixels, renderer.render_page(page, pixels)).tobytes()

        assert draw() == draw()
