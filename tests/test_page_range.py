"""
Tests for overlay_translator.utils.helpers - page ranges and file names.
"""
import pytest

from overlay_translator.utils.helpers import (
    format_file_size,
    get_output_filename,
    parse_page_range,
    sanitize_filename,
)


class TestParsePageRange:
    @pytest.mark.parametrize("value,expected", [
        ("1-3,5", [1, 2, 3, 5]),
        ("", [1, 2, 3, 4, 5, 6]),
        (None, [1, 2, 3, 4, 5, 6]),
        ("   ", [1, 2, 3, 4, 5, 6]),
        ("9", []),
        ("2-1", []),
        ("5,1,5,2-3", [1, 2, 3, 5]),
        ("4-9", [4, 5, 6]),
        ("0,1", [1]),
        ("a,2,x-y,3-", [2]),
        (" 1 - 2 , 6 ", [1, 2, 6]),
        ("1-2-3,4", [4]),
        ("3abc,5", [5]),
    ])
    def test_cases(self, value, expected):
        assert parse_page_range(value, 6) == expected


class TestFilenames:
    def test_output_filename(self):
        assert get_output_filename("report.pdf") == "report_translated.pdf"
        assert get_output_filename("scan.PNG") == "scan_translated.pdf"

    def test_sanitize(self):
        assert sanitize_filename('a<b>:c.pdf') == "a_b__c.pdf"
        assert sanitize_filename("...") == "untitled"

    def test_file_size(self):
        assert format_file_size(512) == "512 B"
        assert format_file_size(2048) == "2.0 KB"
