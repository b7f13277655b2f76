"""
Data model: text items, pages, documents and OCR words.
"""
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from overlay_translator.core.errors import InvalidTransition


class DocumentStatus(Enum):
    """Document lifecycle."""
    QUEUED = "queued"
    PROCESSING = "processing"
    READY = "ready"
    TRANSLATING = "translating"
    TRANSLATED = "translated"
    ERROR = "error"


# Toggling OCR sends READY / TRANSLATED / ERROR back to QUEUED.
_TRANSITIONS: Dict[DocumentStatus, FrozenSet[DocumentStatus]] = {
    DocumentStatus.QUEUED: frozenset({DocumentStatus.PROCESSING}),
    DocumentStatus.PROCESSING: frozenset({DocumentStatus.READY, DocumentStatus.ERROR}),
    DocumentStatus.READY: frozenset({DocumentStatus.TRANSLATING, DocumentStatus.QUEUED}),
    DocumentStatus.TRANSLATING: frozenset({DocumentStatus.TRANSLATED, DocumentStatus.ERROR}),
    DocumentStatus.TRANSLATED: frozenset({DocumentStatus.TRANSLATING, DocumentStatus.QUEUED}),
    DocumentStatus.ERROR: frozenset({DocumentStatus.QUEUED}),
}

BUSY_STATUSES = frozenset({DocumentStatus.PROCESSING, DocumentStatus.TRANSLATING})


@dataclass(frozen=True)
class BBox:
    """Axis-aligned box in device pixels."""
    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0


@dataclass(frozen=True)
class Word:
    """A word reported by the OCR capability."""
    text: str
    bbox: BBox
    confidence: float


@dataclass(frozen=True)
class TextItem:
    """
    One visually replaceable unit of text on a page.

    Geometry (x, y, w, h, font_size) is in device pixels at the page's render
    scale. ``raw_width`` keeps the unscaled document-space width for native
    items and is None for OCR items.
    """
    original: str
    x: float
    y: float
    w: float
    h: float
    font_size: float
    font_family: str = "sans-serif"
    color: str = "black"
    background_color: str = "transparent"
    is_ocr: bool = False
    translated: Optional[str] = None
    raw_width: Optional[float] = None

    def __post_init__(self):
        if not self.original or not self.original.strip():
            raise ValueError("TextItem.original must contain visible text")

    @property
    def display_text(self) -> str:
        return self.translated if self.translated is not None else self.original

    def with_translation(self, text: Optional[str]) -> "TextItem":
        return replace(self, translated=text)

    def reset(self) -> "TextItem":
        return replace(self, translated=None)


@dataclass
class Page:
    """Ordered text items of one source page (0-based ``index``)."""
    index: int
    items: List[TextItem] = field(default_factory=list)
    scale: float = 1.0
    width: int = 0
    height: int = 0


@dataclass
class Document:
    """A queued source document and the pages extracted from it."""
    filename: str
    source: bytes
    use_ocr: bool = False
    page_range: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    page_count: int = 0
    status: DocumentStatus = DocumentStatus.QUEUED
    pages: List[Page] = field(default_factory=list)
    handle: Any = field(default=None, repr=False, compare=False)

    @property
    def is_busy(self) -> bool:
        return self.status in BUSY_STATUSES

    def set_status(self, status: DocumentStatus):
        """Move to ``status``, rejecting transitions the lifecycle does not allow."""
        if status not in _TRANSITIONS[self.status]:
            raise InvalidTransition(
                f"{self.filename}: cannot go from {self.status.value} to {status.value}"
            )
        self.status = status

    def requeue(self):
        """Discard extracted pages and send the document back to the queue."""
        self.set_status(DocumentStatus.QUEUED)
        self.pages = []
