"""
OCR capability - Tesseract via pytesseract.

Recognition returns raw words with pixel boxes and 0-100 confidence; grouping
and filtering happen in the engine, not here.
"""
import logging
import os
import sys
from typing import Callable, List, Optional, Protocol

import numpy as np
from PIL import Image

from overlay_translator.core.models import BBox, Word

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

# ISO 639-1 codes and common names to Tesseract language packs
LANG_MAP = {
    "en": "eng", "eng": "eng", "english": "eng",
    "ko": "kor", "kor": "kor", "korean": "kor",
    "ja": "jpn", "jpn": "jpn", "japanese": "jpn",
    "zh": "chi_sim", "chi_sim": "chi_sim", "chinese": "chi_sim",
    "zh-tw": "chi_tra", "chi_tra": "chi_tra",
    "fr": "fra", "fra": "fra", "french": "fra",
    "de": "deu", "deu": "deu", "german": "deu",
    "es": "spa", "spa": "spa", "spanish": "spa",
    "it": "ita", "ita": "ita", "italian": "ita",
    "pt": "por", "por": "por", "portuguese": "por",
    "ru": "rus", "rus": "rus", "russian": "rus",
    "vi": "vie", "vie": "vie", "vietnamese": "vie",
    "ar": "ara", "ara": "ara", "arabic": "ara",
}


class Recognizer(Protocol):
    """Anything that turns a page raster into words."""

    def is_available(self) -> bool:
        ...

    def recognize(
        self,
        pixels: np.ndarray,
        language: str,
        progress: Optional[ProgressCallback] = None,
    ) -> List[Word]:
        ...


class TesseractOCR:
    """Tesseract word recognizer."""

    def __init__(self, tesseract_cmd: Optional[str] = None):
        import pytesseract

        self._pytesseract = pytesseract
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        elif sys.platform == "win32":
            self._setup_windows_path()

    def _setup_windows_path(self):
        candidates = [
            r"C:\Program Files\Tesseract-OCR\tesseract.exe",
            r"C:\Program Files (x86)\Tesseract-OCR\tesseract.exe",
            os.path.expanduser(r"~\AppData\Local\Tesseract-OCR\tesseract.exe"),
        ]
        for path in candidates:
            if os.path.exists(path):
                self._pytesseract.pytesseract.tesseract_cmd = path
                logger.info(f"Using Tesseract at {path}")
                return

    def is_available(self) -> bool:
        try:
            self._pytesseract.get_tesseract_version()
            return True
        except Exception as e:
            logger.warning(f"Tesseract is not available: {e}")
            return False

    def recognize(
        self,
        pixels: np.ndarray,
        language: str = "eng",
        progress: Optional[ProgressCallback] = None,
    ) -> List[Word]:
        """
        Recognize words on a raster.

        Args:
            pixels: RGB page raster (H x W x 3)
            language: ISO code or Tesseract language pack name
            progress: optional callback receiving values in [0, 1]

        Returns:
            Words in Tesseract output order
        """
        lang = LANG_MAP.get(language.lower(), language)
        if progress:
            progress(0.0)

        data = self._pytesseract.image_to_data(
            Image.fromarray(pixels),
            lang=lang,
            output_type=self._pytesseract.Output.DICT,
        )

        words = []
        for i in range(len(data["text"])):
            text = str(data["text"][i]).strip()
            conf = float(data["conf"][i])
            # Tesseract reports -1 for layout rows (blocks, paragraphs, lines)
            if not text or conf < 0:
                continue
            left, top = data["left"][i], data["top"][i]
            words.append(Word(
                text=text,
                bbox=BBox(left, top, left + data["width"][i], top + data["height"][i]),
                confidence=conf,
            ))

        if progress:
            progress(1.0)
        logger.info(f"OCR found {len(words)} words ({lang})")
        return words
