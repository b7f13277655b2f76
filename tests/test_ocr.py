"""
Tests for overlay_translator.core.ocr - Tesseract output parsing and availability.
"""
from unittest.mock import patch

import numpy as np
import pytest

from overlay_translator.core.ocr import TesseractOCR


@pytest.fixture
def ocr():
    return TesseractOCR(tesseract_cmd="tesseract")


class TestTesseractOCR:
    def test_available_when_version_is_reported(self, ocr):
        with patch.object(ocr._pytesseract, "get_tesseract_version", return_value="5.3.0"):
            assert ocr.is_available() is True

    def test_unavailable_when_binary_is_missing(self, ocr):
        with patch.object(ocr._pytesseract, "get_tesseract_version", side_effect=OSError("not found")):
            assert ocr.is_available() is False

    def test_layout_rows_and_blanks_are_skipped(self, ocr):
        data = {
            "text": ["", "Hello", "  ", "world"],
            "conf": [-1, 91.5, 80, "88"],
            "left": [0, 10, 30, 50],
            "top": [0, 5, 5, 6],
            "width": [100, 30, 5, 35],
            "height": [20, 12, 12, 11],
        }
        pixels = np.full((20, 100, 3), 255, dtype=np.uint8)

        with patch.object(ocr._pytesseract, "image_to_data", return_value=data) as image_to_data:
            words = ocr.recognize(pixels, "fr")

        assert image_to_data.call_args.kwargs["lang"] == "fra"
        assert [w.text for w in words] == ["Hello", "world"]
        assert (words[1].bbox.x0, words[1].bbox.y1) == (50, 17)
        assert words[1].confidence == 88.0
