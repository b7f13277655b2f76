"""
Document source - PyMuPDF-backed loading, page rendering and text content.

Text runs are reported in PDF user space (origin bottom-left, y up) together
with the page viewport, so the geometry helpers can place them in device
pixels the same way for every page.
"""
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Protocol, Tuple

import fitz  # PyMuPDF
import numpy as np

from overlay_translator.core.errors import LoadFailure
from overlay_translator.core.geometry import DEFAULT_ASCENT, DEFAULT_DESCENT, Matrix

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tif", ".tiff", ".webp"}

# PyMuPDF span flags
FLAG_SERIFED = 4
FLAG_MONOSPACED = 8


@dataclass(frozen=True)
class Viewport:
    """Transform from PDF space to device pixels, and the pixel size of the page."""
    transform: Matrix
    width: int
    height: int


@dataclass
class RenderedPage:
    """A page raster plus the transform from PDF space to its pixels."""
    pixels: np.ndarray
    viewport: Matrix
    width: int
    height: int


@dataclass(frozen=True)
class TextRun:
    text: str
    transform: Matrix
    font_name: str
    raw_width: float


@dataclass(frozen=True)
class FontStyle:
    ascent: float = DEFAULT_ASCENT
    descent: float = DEFAULT_DESCENT
    font_family: str = "sans-serif"


@dataclass
class TextContent:
    runs: List[TextRun] = field(default_factory=list)
    font_styles: Dict[str, FontStyle] = field(default_factory=dict)


class PageSource(Protocol):
    """Render and text-content capabilities for one opened document."""

    page_count: int

    def get_viewport(self, page_index: int, scale: float) -> Viewport:
        ...

    def render_page(self, page_index: int, scale: float) -> RenderedPage:
        ...

    def get_text_content(self, page_index: int) -> TextContent:
        ...


def is_image_file(filename: str) -> bool:
    return Path(filename).suffix.lower() in IMAGE_EXTENSIONS


def _css_family(flags: int) -> str:
    if flags & FLAG_MONOSPACED:
        return "monospace"
    if flags & FLAG_SERIFED:
        return "serif"
    return "sans-serif"


class PdfSource:
    """PageSource over an open PyMuPDF document."""

    def __init__(self, doc: fitz.Document):
        self._doc = doc

    @classmethod
    def from_bytes(cls, data: bytes, filename: str) -> "PdfSource":
        """
        Open PDF bytes, or image bytes converted to a one-page PDF.

        Raises:
            LoadFailure: the bytes are not a readable document
        """
        try:
            if is_image_file(filename):
                image = fitz.open(stream=data, filetype=Path(filename).suffix.lstrip(".").lower())
                pdf_bytes = image.convert_to_pdf()
                image.close()
                doc = fitz.open(stream=pdf_bytes, filetype="pdf")
            else:
                doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise LoadFailure(f"Cannot open {filename}: {e}") from e

        if doc.is_encrypted:
            doc.close()
            raise LoadFailure(f"{filename} is encrypted/password-protected")
        if doc.page_count == 0:
            doc.close()
            raise LoadFailure(f"{filename} has no pages")

        logger.info(f"Opened {filename} ({doc.page_count} pages)")
        return cls(doc)

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def _viewport(self, page: fitz.Page, scale: float) -> fitz.Matrix:
        return page.transformation_matrix * page.rotation_matrix * fitz.Matrix(scale, scale)

    def get_viewport(self, page_index: int, scale: float) -> Viewport:
        page = self._doc[page_index]
        rect = page.rect * fitz.Matrix(scale, scale)
        return Viewport(
            transform=tuple(self._viewport(page, scale)),
            width=int(round(rect.width)),
            height=int(round(rect.height)),
        )

    def render_page(self, page_index: int, scale: float) -> RenderedPage:
        page = self._doc[page_index]
        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
        pixels = np.frombuffer(pix.samples, dtype=np.uint8).reshape(pix.height, pix.width, pix.n)
        if pix.n == 1:
            pixels = np.repeat(pixels, 3, axis=2)
        return RenderedPage(
            # frombuffer is read-only; masking needs a writable copy
            pixels=pixels[:, :, :3].copy(),
            viewport=tuple(self._viewport(page, scale)),
            width=pix.width,
            height=pix.height,
        )

    def get_text_content(self, page_index: int) -> TextContent:
        page = self._doc[page_index]
        to_pdf = ~page.transformation_matrix
        content = TextContent()

        for block in page.get_text("dict")["blocks"]:
            if block.get("type") != 0:
                continue
            for line in block["lines"]:
                dx, dy = line["dir"]
                for span in line["spans"]:
                    size = span["size"]
                    origin = fitz.Point(span["origin"]) * to_pdf
                    # MuPDF space is y-down, PDF space is y-up
                    a, b = size * dx, -size * dy
                    x0, y0, x1, y1 = span["bbox"]
                    content.runs.append(TextRun(
                        text=span["text"],
                        transform=(a, b, -b, a, origin.x, origin.y),
                        font_name=span["font"],
                        raw_width=math.hypot((x1 - x0) * dx, (y1 - y0) * dy),
                    ))
                    if span["font"] not in content.font_styles:
                        content.font_styles[span["font"]] = FontStyle(
                            ascent=span.get("ascender") or DEFAULT_ASCENT,
                            descent=abs(span.get("descender") or DEFAULT_DESCENT),
                            font_family=_css_family(span.get("flags", 0)),
                        )
        return content

    def page_size(self, page_index: int) -> Tuple[float, float]:
        rect = self._doc[page_index].rect
        return rect.width, rect.height

    def close(self):
        self._doc.close()
