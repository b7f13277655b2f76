"""
Error taxonomy for the extraction / overlay engine.
"""


class OverlayTranslatorError(Exception):
    """Base class for all engine errors."""


class LoadFailure(OverlayTranslatorError):
    """Source bytes could not be read or parsed as a document."""


class ExtractionFailure(OverlayTranslatorError):
    """Rendering or OCR of a page failed."""

    def __init__(self, message: str, page_index: int = -1):
        super().__init__(message)
        self.page_index = page_index


class TranslationFailure(OverlayTranslatorError):
    """A translate call raised or returned unusable data."""


class ExportFailure(OverlayTranslatorError):
    """The compositor or the output sink failed."""


class InvalidTransition(OverlayTranslatorError):
    """A document was moved to a status it cannot reach from its current one."""
