"""
Core module - extraction, overlay, translation and export engine.
"""
from .errors import (
    ExportFailure,
    ExtractionFailure,
    InvalidTransition,
    LoadFailure,
    OverlayTranslatorError,
    TranslationFailure,
)
from .export import ExportCompositor, OutputSink, PdfSink, package_zip
from .extractor import PageExtractor, extract_document
from .fitter import TextFitter, fitted_font_size
from .models import BBox, Document, DocumentStatus, Page, TextItem, Word
from .overlay import OverlayRenderer
from .queue import DocumentQueue
from .source import PageSource, PdfSource
from .text_layer import TextElement, TextLayer
from .translation import TranslationOrchestrator

__all__ = [
    "BBox",
    "Document",
    "DocumentQueue",
    "DocumentStatus",
    "ExportCompositor",
    "ExportFailure",
    "ExtractionFailure",
    "InvalidTransition",
    "LoadFailure",
    "OutputSink",
    "OverlayRenderer",
    "OverlayTranslatorError",
    "Page",
    "PageExtractor",
    "PageSource",
    "PdfSink",
    "PdfSource",
    "TextElement",
    "TextFitter",
    "TextItem",
    "TextLayer",
    "TranslationFailure",
    "TranslationOrchestrator",
    "Word",
    "extract_document",
    "fitted_font_size",
    "package_zip",
]
