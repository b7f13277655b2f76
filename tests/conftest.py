"""
Shared fixtures: in-memory fakes for the render / text / OCR / translate /
sink capabilities, plus real PDFs built with PyMuPDF.
"""
import sys
from pathlib import Path
from typing import Dict, List, Optional

import fitz
import numpy as np
import pytest

# Ensure the project root is importable when pytest runs from elsewhere
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from overlay_translator.core.errors import LoadFailure
from overlay_translator.core.models import BBox, Word
from overlay_translator.core.source import FontStyle, RenderedPage, TextContent, TextRun, Viewport
from overlay_translator.utils.logger import EventLog


class FakePage:
    def __init__(self, width=300, height=200, runs=None, font_styles=None, background=(255, 255, 255)):
        self.width = width
        self.height = height
        self.runs = runs or []
        self.font_styles = font_styles or {}
        self.background = background


class FakeSource:
    """PageSource over hand-built pages; PDF space is y-up like a real page."""

    def __init__(self, pages: List[FakePage]):
        self.pages = pages
        self.render_calls = 0
        self.closed = False

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def _viewport(self, page: FakePage, scale: float):
        return (scale, 0.0, 0.0, -scale, 0.0, page.height * scale)

    def get_viewport(self, page_index: int, scale: float) -> Viewport:
        page = self.pages[page_index]
        return Viewport(
            transform=self._viewport(page, scale),
            width=int(round(page.width * scale)),
            height=int(round(page.height * scale)),
        )

    def render_page(self, page_index: int, scale: float) -> RenderedPage:
        self.render_calls += 1
        page = self.pages[page_index]
        width, height = int(round(page.width * scale)), int(round(page.height * scale))
        pixels = np.empty((height, width, 3), dtype=np.uint8)
        pixels[:, :] = page.background
        return RenderedPage(pixels, self._viewport(page, scale), width, height)

    def get_text_content(self, page_index: int) -> TextContent:
        page = self.pages[page_index]
        return TextContent(runs=list(page.runs), font_styles=dict(page.font_styles))

    def close(self):
        self.closed = True


class FakeRecognizer:
    def __init__(
        self,
        words: Optional[List[Word]] = None,
        error: Optional[Exception] = None,
        available: bool = True,
    ):
        self.words = words or []
        self.error = error
        self.available = available
        self.calls = []

    def is_available(self):
        return self.available

    def recognize(self, pixels, language, progress=None):
        self.calls.append((pixels.shape, language))
        if progress:
            progress(0.0)
        if self.error:
            raise self.error
        if progress:
            progress(1.0)
        return list(self.words)


class FakeSink:
    def __init__(self):
        self.pages: Dict[str, List[int]] = {}
        self.rasters: Dict[str, List[bytes]] = {}
        self.finalized: List[str] = []

    def emit_page(self, document_id, page_index, raster):
        self.pages.setdefault(document_id, []).append(page_index)
        self.rasters.setdefault(document_id, []).append(raster)

    def finalize_document(self, document_id):
        self.finalized.append(document_id)
        return b"artifact:" + document_id.encode()


def make_run(text: str, x: float, baseline: float, size: float = 12, font: str = "Helv") -> TextRun:
    """Horizontal run at ``(x, baseline)`` in y-up page space."""
    return TextRun(
        text=text,
        transform=(size, 0.0, 0.0, size, x, baseline),
        font_name=font,
        raw_width=len(text) * size * 0.5,
    )


def make_word(text, x0, y0, x1, y1, confidence=90.0) -> Word:
    return Word(text=text, bbox=BBox(x0, y0, x1, y1), confidence=confidence)


def uppercase_translate(texts, target_lang):
    return [t.upper() for t in texts]


@pytest.fixture
def two_run_page():
    return FakePage(
        runs=[make_run("Hello world", 50, 140), make_run("Second line", 50, 100)],
        font_styles={"Helv": FontStyle(ascent=0.9, font_family="sans-serif")},
    )


@pytest.fixture
def fake_source(two_run_page):
    return FakeSource([two_run_page])


@pytest.fixture
def event_log():
    return EventLog()


@pytest.fixture
def fake_opener():
    """open_source replacement: every file is a one-page document, ``bad*`` fails."""
    opened = []

    def _open(data: bytes, filename: str):
        if filename.startswith("bad"):
            raise LoadFailure(f"Cannot open {filename}")
        pages = [
            FakePage(runs=[make_run(f"{filename} page {i + 1}", 50, 140)])
            for i in range(int(data or b"1"))
        ]
        source = FakeSource(pages)
        opened.append((filename, source))
        return source

    _open.opened = opened
    return _open


def build_pdf(lines_per_page: List[List[str]], width=300, height=200) -> bytes:
    doc = fitz.open()
    for lines in lines_per_page:
        page = doc.new_page(width=width, height=height)
        for i, line in enumerate(lines):
            page.insert_text((50, 60 + 40 * i), line, fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_bytes():
    return build_pdf([["Hello world", "Second line"]])


@pytest.fixture
def two_page_pdf_bytes():
    return build_pdf([["First page text"], ["Second page text"]])
