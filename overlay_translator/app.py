"""
Application context - wires configuration, the document queue, translation
and export into one object that front ends (the CLI, tests) drive.

The engine never reads this object; it only receives the values threaded
through from here (OCR flag, target language, page range).
"""
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from PIL import Image

from overlay_translator.config import EngineConfig, Settings, SettingsStore
from overlay_translator.core.errors import ExportFailure, TranslationFailure
from overlay_translator.core.export import ExportCompositor, OutputSink, PdfSink, package_zip
from overlay_translator.core.extractor import PageExtractor
from overlay_translator.core.fonts import FontProvider
from overlay_translator.core.models import Document, DocumentStatus, Page, TextItem
from overlay_translator.core.ocr import Recognizer, TesseractOCR
from overlay_translator.core.overlay import OverlayRenderer
from overlay_translator.core.queue import DocumentQueue, SourceOpener
from overlay_translator.core.source import PdfSource
from overlay_translator.core.text_layer import TextLayer
from overlay_translator.core.translation import TranslateFn, TranslationOrchestrator
from overlay_translator.services import detect_provider, get_translation_service
from overlay_translator.utils.helpers import get_output_filename
from overlay_translator.utils.logger import EventLog

logger = logging.getLogger(__name__)


class TranslatorApp:
    """Explicit application state: documents, active view, settings and services."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        settings_store: Optional[SettingsStore] = None,
        event_log: Optional[EventLog] = None,
        recognizer: Optional[Recognizer] = None,
        translator: Optional[TranslateFn] = None,
        open_source: SourceOpener = PdfSource.from_bytes,
        sink_factory: Optional[Callable[[], OutputSink]] = None,
    ):
        self.config = config or EngineConfig()
        self.settings_store = settings_store
        self.event_log = event_log if event_log is not None else EventLog()
        self.default_ocr = False
        self._translator = translator

        self.renderer = OverlayRenderer(FontProvider(self.config.font_path))
        self.layer = TextLayer()
        self.active_doc_id: Optional[str] = None

        self.extractor = PageExtractor(
            recognizer=recognizer if recognizer is not None else TesseractOCR(),
            scale=self.config.scale,
            ocr_language=self.config.ocr_language,
            min_confidence=self.config.min_ocr_confidence,
        )
        self.queue = DocumentQueue(self.extractor, self.event_log, open_source)
        self.compositor = ExportCompositor(self.renderer, self.config.export_image_format)
        self.sink_factory = sink_factory or (lambda: PdfSink(self.config.scale))

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def load_settings(self) -> Settings:
        if self.settings_store is None:
            return Settings(
                api_key=self.config.api_key or "",
                provider=self.config.provider,
                target_lang=self.config.target_lang,
            )
        settings = self.settings_store.load()
        self.config.apply_settings(settings)
        self.default_ocr = settings.ocr
        return settings

    def save_settings(self):
        if self.settings_store is None:
            return
        self.settings_store.save(Settings(
            api_key=self.config.api_key or "",
            provider=self.config.provider,
            target_lang=self.config.target_lang,
            ocr=self.default_ocr,
        ))

    def translation_service(self) -> TranslateFn:
        if self._translator is not None:
            return self._translator
        provider = detect_provider(self.config.provider, self.config.api_key)
        service = get_translation_service(provider, api_key=self.config.api_key)
        if service is None:
            raise ValueError(f"Unknown translation provider: {provider}")
        self.event_log.info(f"Using {service.name}")
        return service

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def add_file(
        self,
        filename: str,
        data: bytes,
        use_ocr: Optional[bool] = None,
        page_range: str = "",
    ) -> Document:
        return self.queue.add_document(
            filename,
            data,
            use_ocr=self.default_ocr if use_ocr is None else use_ocr,
            page_range=page_range,
        )

    def add_path(self, path, use_ocr: Optional[bool] = None, page_range: str = "") -> Document:
        path = Path(path)
        return self.add_file(path.name, path.read_bytes(), use_ocr, page_range)

    def get_document(self, doc_id: str) -> Document:
        return self.queue.get(doc_id)

    @property
    def documents(self) -> List[Document]:
        return list(self.queue)

    def remove_document(self, doc_id: str):
        self.queue.remove(doc_id)
        if self.active_doc_id == doc_id:
            self.active_doc_id = None
            self.layer.clear()

    def toggle_ocr(self, doc_id: str, use_ocr: Optional[bool] = None) -> bool:
        changed = self.queue.toggle_ocr(doc_id, use_ocr)
        if changed and self.active_doc_id == doc_id:
            self.layer.clear()
        return changed

    def update_page_range(self, doc_id: str, page_range: str):
        self.queue.set_page_range(doc_id, page_range)

    def process_queue(self) -> List[Document]:
        def on_page(doc: Document, current: int, total: int):
            logger.info(f"Processing {doc.filename} (page {current}/{total})")

        return self.queue.process_queue(on_page)

    # ------------------------------------------------------------------
    # View and editing
    # ------------------------------------------------------------------

    def _page(self, doc: Document, page_index: int) -> Page:
        for page in doc.pages:
            if page.index == page_index:
                return page
        raise IndexError(f"{doc.filename} has no extracted page {page_index + 1}")

    def render_page_view(self, doc_id: str, page_index: int) -> Image.Image:
        """Composite one page for display and bind its elements for live edits."""
        doc = self.get_document(doc_id)
        page = self._page(doc, page_index)
        if self.active_doc_id != doc_id:
            self.layer.clear()
            self.active_doc_id = doc_id

        rendered = doc.handle.render_page(page.index, page.scale)
        elements = self.renderer.render_page(page, rendered.pixels, self.layer)
        return self.renderer.composite(rendered.pixels, elements)

    def _set_item(self, doc_id: str, page_index: int, item_index: int, text: Optional[str]) -> TextItem:
        doc = self.get_document(doc_id)
        page = self._page(doc, page_index)
        item = page.items[item_index]
        item = item.with_translation(text) if text is not None else item.reset()
        page.items[item_index] = item

        if self.active_doc_id == doc_id:
            element = self.layer.get(page_index, item_index)
            if element is not None:
                self.renderer.update_element(element, item)
        return item

    def edit_item(self, doc_id: str, page_index: int, item_index: int, text: str) -> TextItem:
        """Replace an item's displayed text by hand; ``original`` is kept."""
        return self._set_item(doc_id, page_index, item_index, text)

    def reset_item(self, doc_id: str, page_index: int, item_index: int) -> TextItem:
        return self._set_item(doc_id, page_index, item_index, None)

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------

    def translate_document(self, doc_id: str, target_lang: Optional[str] = None) -> Document:
        doc = self.get_document(doc_id)
        orchestrator = TranslationOrchestrator(
            self.translation_service(),
            self.event_log,
            renderer=self.renderer,
            layer=self.layer if self.active_doc_id == doc_id else None,
        )
        return orchestrator.translate_document(doc, target_lang or self.config.target_lang)

    def translate_all(self, target_lang: Optional[str] = None) -> List[Document]:
        """Translate every ``ready`` document in queue order."""
        pending = self.queue.documents_with_status(DocumentStatus.READY)
        if not pending:
            self.event_log.warning("No documents ready for translation")
            return []

        translate = self.translation_service()
        lang = target_lang or self.config.target_lang
        done = []
        for doc in pending:
            orchestrator = TranslationOrchestrator(
                translate,
                self.event_log,
                renderer=self.renderer,
                layer=self.layer if self.active_doc_id == doc.id else None,
            )
            try:
                done.append(orchestrator.translate_document(doc, lang))
            except TranslationFailure as e:
                logger.debug(f"Skipping {doc.filename}: {e}")
        return done

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_document(self, doc_id: str) -> bytes:
        doc = self.get_document(doc_id)
        if not doc.pages or doc.handle is None:
            raise ExportFailure(f"{doc.filename} has not been processed")
        return self.compositor.export_document(doc, doc.handle, self.sink_factory())

    def export_files(self) -> Dict[str, bytes]:
        """Export every ``translated`` document; failures are logged and skipped."""
        files: Dict[str, bytes] = {}
        for doc in self.queue.documents_with_status(DocumentStatus.TRANSLATED):
            name = get_output_filename(doc.filename)
            if name in files:
                name = f"{Path(name).stem}_{doc.id}.pdf"
            try:
                files[name] = self.export_document(doc.id)
            except ExportFailure as e:
                self.event_log.error(str(e))
        return files

    def export_all(self) -> bytes:
        """ZIP archive of all translated documents."""
        files = self.export_files()
        if not files:
            raise ExportFailure("No translated documents to export")
        self.event_log.info(f"Exported {len(files)} document(s)")
        return package_zip(files)
