"""
Translation orchestration - one translate call per selected page.

Best effort: a page whose call fails keeps showing its original text and the
remaining pages still run. Only a failure outside the per-page batches moves
the document to ``error``.
"""
import logging
from typing import Callable, List, Optional

from overlay_translator.core.errors import TranslationFailure
from overlay_translator.core.models import Document, DocumentStatus, Page
from overlay_translator.core.overlay import OverlayRenderer
from overlay_translator.core.text_layer import TextLayer
from overlay_translator.utils.helpers import parse_page_range
from overlay_translator.utils.logger import EventLog

logger = logging.getLogger(__name__)

TranslateFn = Callable[[List[str], str], List[str]]


def apply_translations(page: Page, results: List[Optional[str]]) -> List[int]:
    """
    Zip ``results`` back onto ``page.items`` by position.

    Missing, empty or non-string entries leave the item untouched. Returns the
    indices of the items that changed.
    """
    changed = []
    for index, item in enumerate(page.items):
        if index >= len(results):
            break
        result = results[index]
        if not isinstance(result, str) or not result:
            if result:
                logger.warning(f"Ignoring non-text translation for item {index}: {result!r}")
            continue
        page.items[index] = item.with_translation(result)
        changed.append(index)
    return changed


class TranslationOrchestrator:
    """Runs the translate capability over a document's pages."""

    def __init__(
        self,
        translate: TranslateFn,
        event_log: Optional[EventLog] = None,
        renderer: Optional[OverlayRenderer] = None,
        layer: Optional[TextLayer] = None,
    ):
        self.translate = translate
        self.event_log = event_log if event_log is not None else EventLog()
        self.renderer = renderer
        self.layer = layer

    def selected_pages(self, doc: Document) -> List[Page]:
        allowed = set(parse_page_range(doc.page_range, len(doc.pages)))
        return [page for page in doc.pages if page.index + 1 in allowed]

    def translate_page(self, page: Page, target_lang: str) -> int:
        """
        Translate one page in a single batch.

        Raises:
            TranslationFailure: the capability failed or returned something
                other than a list
        """
        texts = [item.original for item in page.items]
        if not texts:
            return 0

        try:
            results = self.translate(texts, target_lang)
        except TranslationFailure:
            raise
        except Exception as e:
            raise TranslationFailure(f"{type(e).__name__}: {e}") from e
        if not isinstance(results, list):
            raise TranslationFailure(f"expected a list of strings, got {type(results).__name__}")
        if len(results) != len(texts):
            logger.warning(
                f"Page {page.index + 1}: {len(results)} results for {len(texts)} texts"
            )

        changed = apply_translations(page, results)
        self._sync_layer(page, changed)
        return len(changed)

    def _sync_layer(self, page: Page, changed: List[int]):
        if self.layer is None or self.renderer is None:
            return
        for index in changed:
            element = self.layer.get(page.index, index)
            if element is not None:
                self.renderer.update_element(element, page.items[index])

    def translate_document(self, doc: Document, target_lang: str) -> Document:
        """
        Translate the pages of ``doc`` selected by its page range.

        The document must be ``ready`` (or already ``translated``); it ends
        ``translated`` even when some page batches failed.
        """
        doc.set_status(DocumentStatus.TRANSLATING)
        self.event_log.info(f"Translating {doc.filename} to {target_lang}")

        try:
            pages = self.selected_pages(doc)
            translated = 0
            for page in pages:
                try:
                    translated += self.translate_page(page, target_lang)
                except Exception as e:
                    self.event_log.error(
                        f"{doc.filename}: page {page.index + 1} translation failed: {e}"
                    )
        except Exception as e:
            doc.set_status(DocumentStatus.ERROR)
            self.event_log.error(f"{doc.filename}: translation aborted: {e}")
            raise TranslationFailure(f"{doc.filename}: {e}") from e

        doc.set_status(DocumentStatus.TRANSLATED)
        self.event_log.info(
            f"{doc.filename}: {translated} items translated on {len(pages)} pages"
        )
        return doc
