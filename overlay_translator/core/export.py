"""
Export - re-renders every page with its overlay and hands the rasters to a sink.

Each page is rendered fresh from the source, so export is deterministic for a
given TextItem state and can be repeated after further edits.
"""
import io
import logging
import zipfile
from typing import Dict, Protocol

import fitz  # PyMuPDF
from PIL import Image

from overlay_translator.core.errors import ExportFailure
from overlay_translator.core.models import Document, Page
from overlay_translator.core.overlay import OverlayRenderer
from overlay_translator.core.source import PageSource

logger = logging.getLogger(__name__)


class OutputSink(Protocol):
    """Receives one finished raster per page and packages a document."""

    def emit_page(self, document_id: str, page_index: int, raster: bytes):
        ...

    def finalize_document(self, document_id: str) -> bytes:
        ...


class PdfSink:
    """
    Builds one image-only PDF per document with PyMuPDF.

    Each page keeps the source page size in points (raster pixels / scale).
    """

    def __init__(self, scale: float = 1.5):
        self.scale = scale
        self._docs: Dict[str, fitz.Document] = {}

    def emit_page(self, document_id: str, page_index: int, raster: bytes):
        doc = self._docs.get(document_id)
        if doc is None:
            doc = self._docs[document_id] = fitz.open()

        with Image.open(io.BytesIO(raster)) as img:
            width, height = img.size
        page = doc.new_page(width=width / self.scale, height=height / self.scale)
        page.insert_image(page.rect, stream=raster)
        logger.debug(f"{document_id}: page {page_index + 1} added ({len(raster)} bytes)")

    def finalize_document(self, document_id: str) -> bytes:
        doc = self._docs.pop(document_id, None)
        if doc is None:
            raise ExportFailure(f"No pages were emitted for document {document_id}")
        try:
            return doc.tobytes(garbage=3, deflate=True)
        finally:
            doc.close()


class ExportCompositor:
    """Recreates the on-screen overlay for every page of a document."""

    def __init__(self, renderer: OverlayRenderer, image_format: str = "PNG"):
        self.renderer = renderer
        self.image_format = image_format

    def compose_page(self, source: PageSource, page: Page) -> Image.Image:
        rendered = source.render_page(page.index, page.scale)
        elements = self.renderer.render_page(page, rendered.pixels)
        return self.renderer.composite(rendered.pixels, elements)

    def encode(self, image: Image.Image) -> bytes:
        buffer = io.BytesIO()
        image.save(buffer, format=self.image_format)
        return buffer.getvalue()

    def export_document(self, doc: Document, source: PageSource, sink: OutputSink) -> bytes:
        """
        Composite every page of ``doc`` into ``sink`` and return the packaged artifact.

        Raises:
            ExportFailure: rendering, encoding or the sink failed
        """
        try:
            for page in doc.pages:
                raster = self.encode(self.compose_page(source, page))
                sink.emit_page(doc.id, page.index, raster)
            artifact = sink.finalize_document(doc.id)
        except ExportFailure:
            raise
        except Exception as e:
            raise ExportFailure(f"Export of {doc.filename} failed: {e}") from e

        logger.info(f"Exported {doc.filename}: {len(doc.pages)} pages, {len(artifact)} bytes")
        return artifact


def package_zip(files: Dict[str, bytes]) -> bytes:
    """Bundle exported documents into one ZIP archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, data in files.items():
            archive.writestr(name, data)
    return buffer.getvalue()
