"""
Document queue - FIFO extraction under a single busy gate.

Only one document is ever ``processing`` or ``translating``; while one is,
nothing new starts and OCR cannot be toggled. Draining picks the next
``queued`` document after each one settles, so documents are processed in
the order they were added.
"""
import logging
from typing import Callable, Dict, List, Optional

from overlay_translator.core.errors import ExtractionFailure, LoadFailure
from overlay_translator.core.extractor import PageExtractor, extract_document
from overlay_translator.core.models import Document, DocumentStatus
from overlay_translator.core.source import PageSource, PdfSource, is_image_file
from overlay_translator.utils.logger import EventLog

logger = logging.getLogger(__name__)

SourceOpener = Callable[[bytes, str], PageSource]

# Documents in these states are re-extracted when their OCR flag changes
_REPROCESSABLE = {DocumentStatus.READY, DocumentStatus.TRANSLATED, DocumentStatus.ERROR}


class DocumentQueue:
    def __init__(
        self,
        extractor: PageExtractor,
        event_log: Optional[EventLog] = None,
        open_source: SourceOpener = PdfSource.from_bytes,
    ):
        self.extractor = extractor
        self.event_log = event_log if event_log is not None else EventLog()
        self.open_source = open_source
        self.documents: List[Document] = []

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self):
        return iter(self.documents)

    @property
    def is_busy(self) -> bool:
        return any(doc.is_busy for doc in self.documents)

    def get(self, doc_id: str) -> Document:
        for doc in self.documents:
            if doc.id == doc_id:
                return doc
        raise KeyError(f"Unknown document: {doc_id}")

    def add_document(
        self,
        filename: str,
        data: bytes,
        use_ocr: bool = False,
        page_range: str = "",
    ) -> Document:
        """Queue a file. Images have no text layer and always take the OCR path."""
        if is_image_file(filename) and not use_ocr:
            logger.debug(f"{filename} is an image, forcing OCR")
            use_ocr = True
        doc = Document(filename=filename, source=data, use_ocr=use_ocr, page_range=page_range)
        self.documents.append(doc)
        self.event_log.info(f"Queued {filename} (OCR: {use_ocr})")
        return doc

    def remove(self, doc_id: str):
        doc = self.get(doc_id)
        self.documents.remove(doc)
        close = getattr(doc.handle, "close", None)
        if close:
            close()
        doc.handle = None
        doc.pages = []
        self.event_log.info(f"Removed {doc.filename}")

    def toggle_ocr(self, doc_id: str, use_ocr: Optional[bool] = None) -> bool:
        """
        Flip (or set) a document's OCR flag.

        Rejected while any document is busy. A document that was already
        extracted goes back to ``queued`` and loses its pages. Returns
        whether the flag was changed.
        """
        doc = self.get(doc_id)
        if self.is_busy:
            self.event_log.warning(f"Busy, OCR setting of {doc.filename} left unchanged")
            return False

        new_value = (not doc.use_ocr) if use_ocr is None else use_ocr
        if new_value == doc.use_ocr:
            return False
        doc.use_ocr = new_value
        if doc.status in _REPROCESSABLE:
            doc.requeue()
        self.event_log.info(f"{doc.filename}: OCR {'on' if new_value else 'off'}")
        return True

    def set_page_range(self, doc_id: str, page_range: str):
        doc = self.get(doc_id)
        doc.page_range = page_range.strip()
        logger.debug(f"{doc.filename}: page range {doc.page_range!r}")

    def next_queued(self) -> Optional[Document]:
        return next((doc for doc in self.documents if doc.status == DocumentStatus.QUEUED), None)

    def process_next(self, on_page: Optional[Callable[[Document, int, int], None]] = None) -> Optional[Document]:
        """Extract the oldest queued document, if the gate is open."""
        if self.is_busy:
            return None
        doc = self.next_queued()
        if doc is None:
            return None

        doc.set_status(DocumentStatus.PROCESSING)
        self.event_log.info(f"Processing {doc.filename} (OCR: {doc.use_ocr})")
        try:
            if doc.handle is None:
                doc.handle = self.open_source(doc.source, doc.filename)
                doc.page_count = doc.handle.page_count

            progress = (lambda current, total: on_page(doc, current, total)) if on_page else None
            doc.pages = extract_document(self.extractor, doc.handle, doc.use_ocr, progress)
        except Exception as e:
            # anything else would leave the gate closed for good
            if not isinstance(e, (LoadFailure, ExtractionFailure)):
                logger.exception(f"Unexpected failure processing {doc.filename}")
            doc.pages = []
            doc.set_status(DocumentStatus.ERROR)
            self.event_log.error(f"Error processing {doc.filename}: {e}")
            return doc

        doc.set_status(DocumentStatus.READY)
        items = sum(len(page.items) for page in doc.pages)
        self.event_log.info(f"Processed {doc.filename}: {doc.page_count} pages, {items} items")
        return doc

    def process_queue(self, on_page: Optional[Callable[[Document, int, int], None]] = None) -> List[Document]:
        """Drain the queue in FIFO order; returns the documents handled."""
        handled = []
        while True:
            doc = self.process_next(on_page)
            if doc is None:
                return handled
            handled.append(doc)

    def documents_with_status(self, status: DocumentStatus) -> List[Document]:
        return [doc for doc in self.documents if doc.status == status]

    def clear(self):
        for doc in list(self.documents):
            self.remove(doc.id)
