"""
Page extraction - turns a source page into ordered TextItems.

Two strategies, selected per document:
- native: structured text runs placed with the viewport transform
- OCR: render, recognize words, group them and sample each group's background

Item order is stream order (native) or group-scan order (OCR). Translations
are later zipped back onto items by position, so the order must not change
between extractions of the same page.
"""
import logging
from typing import Callable, List, Optional

from overlay_translator.core.errors import ExtractionFailure
from overlay_translator.core.geometry import run_geometry
from overlay_translator.core.grouping import MIN_CONFIDENCE, group_bbox, group_text, group_words
from overlay_translator.core.models import Page, TextItem
from overlay_translator.core.ocr import ProgressCallback, Recognizer
from overlay_translator.core.sampler import rgb_string, sample_background, text_color_for
from overlay_translator.core.source import FontStyle, PageSource

logger = logging.getLogger(__name__)

OCR_FONT_RATIO = 0.9


class PageExtractor:
    """Builds the TextItems of one page at a fixed render scale."""

    def __init__(
        self,
        recognizer: Optional[Recognizer] = None,
        scale: float = 1.5,
        ocr_language: str = "eng",
        min_confidence: float = MIN_CONFIDENCE,
    ):
        self.recognizer = recognizer
        self.scale = scale
        self.ocr_language = ocr_language
        self.min_confidence = min_confidence

    def extract(
        self,
        source: PageSource,
        page_index: int,
        use_ocr: bool,
        progress: Optional[ProgressCallback] = None,
    ) -> Page:
        """
        Extract one page.

        Raises:
            ExtractionFailure: rendering, text content or OCR failed
        """
        try:
            if use_ocr:
                return self._extract_ocr(source, page_index, progress)
            return self._extract_native(source, page_index)
        except ExtractionFailure:
            raise
        except Exception as e:
            raise ExtractionFailure(
                f"Page {page_index + 1}: {type(e).__name__}: {e}", page_index
            ) from e

    def _extract_native(self, source: PageSource, page_index: int) -> Page:
        viewport = source.get_viewport(page_index, self.scale)
        content = source.get_text_content(page_index)
        items: List[TextItem] = []

        for run in content.runs:
            if not run.text.strip():
                continue
            style = content.font_styles.get(run.font_name, FontStyle())
            geo = run_geometry(
                viewport.transform, run.transform, self.scale, style.ascent, style.descent
            )
            items.append(TextItem(
                original=run.text,
                x=geo.x,
                y=geo.y,
                w=run.raw_width * self.scale,
                h=geo.height,
                font_size=geo.font_size,
                font_family=style.font_family,
                color="black",
                background_color="transparent",
                is_ocr=False,
                raw_width=run.raw_width,
            ))

        logger.debug(f"Page {page_index + 1}: {len(items)} native items")
        return Page(
            index=page_index,
            items=items,
            scale=self.scale,
            width=viewport.width,
            height=viewport.height,
        )

    def _extract_ocr(
        self,
        source: PageSource,
        page_index: int,
        progress: Optional[ProgressCallback],
    ) -> Page:
        if self.recognizer is None:
            raise ExtractionFailure("OCR requested but no recognizer is configured", page_index)
        if not self.recognizer.is_available():
            raise ExtractionFailure("OCR requested but the recognizer is not available", page_index)

        rendered = source.render_page(page_index, self.scale)
        words = self.recognizer.recognize(rendered.pixels, self.ocr_language, progress)
        items: List[TextItem] = []

        # Nothing is masked during extraction, so every group samples the pristine raster
        for group in group_words(words, self.min_confidence):
            box = group_bbox(group)
            bg = sample_background(rendered.pixels, box.x0, box.y0, box.width, box.height)
            items.append(TextItem(
                original=group_text(group),
                x=box.x0,
                y=box.y0,
                w=box.width,
                h=box.height,
                font_size=box.height * OCR_FONT_RATIO,
                font_family="sans-serif",
                color=text_color_for(bg),
                background_color=rgb_string(bg),
                is_ocr=True,
            ))

        logger.debug(f"Page {page_index + 1}: {len(words)} words -> {len(items)} OCR items")
        return Page(
            index=page_index,
            items=items,
            scale=self.scale,
            width=rendered.width,
            height=rendered.height,
        )


def extract_document(
    extractor: PageExtractor,
    source: PageSource,
    use_ocr: bool,
    on_page: Optional[Callable[[int, int], None]] = None,
) -> List[Page]:
    """Extract every page in order; ``on_page(current, total)`` fires before each page."""
    pages = []
    total = source.page_count
    for index in range(total):
        if on_page:
            on_page(index + 1, total)
        pages.append(extractor.extract(source, index, use_ocr))
    return pages
