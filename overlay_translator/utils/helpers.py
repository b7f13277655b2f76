"""
Helper utilities for the overlay translator.
"""
import os
import re
from pathlib import Path
from typing import List


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def parse_page_range(page_string: str, max_pages: int) -> List[int]:
    """
    Parse a page range string into a sorted list of 1-based page numbers.

    Examples (max_pages=6):
        "1-3,5" -> [1, 2, 3, 5]
        "" or None -> [1, 2, 3, 4, 5, 6]
        "9" -> []
        "2-1" -> []

    Unparseable tokens are skipped and pages outside ``[1, max_pages]`` are
    dropped, so a range reaching past the end is clamped. Tokens must be whole
    integers: "1-2-3" and "3abc" are skipped rather than read as "1-2" and "3"
    by a lenient leading-digits parse.
    """
    if not page_string or not page_string.strip():
        return list(range(1, max_pages + 1))

    pages = set()
    for part in page_string.replace(" ", "").split(","):
        if "-" in part:
            try:
                start, end = (int(n) for n in part.split("-", 1))
            except ValueError:
                continue
            pages.update(range(max(start, 1), min(end, max_pages) + 1))
        else:
            try:
                page = int(part)
            except ValueError:
                continue
            if 1 <= page <= max_pages:
                pages.add(page)

    return sorted(pages)


def sanitize_filename(filename: str) -> str:
    """Sanitize filename by removing/replacing invalid characters."""
    invalid_chars = r'[<>:"/\\|?*\x00-\x1f]'
    sanitized = re.sub(invalid_chars, "_", filename)

    # Remove leading/trailing spaces and dots
    sanitized = sanitized.strip(". ")

    max_length = 200
    if len(sanitized) > max_length:
        base, ext = os.path.splitext(sanitized)
        base = base[:max_length - len(ext)]
        sanitized = base + ext

    return sanitized or "untitled"


def get_output_filename(input_filename: str) -> str:
    """``report.pdf`` -> ``report_translated.pdf``; image inputs also export as PDF."""
    base_name = sanitize_filename(Path(input_filename).stem)
    return f"{base_name}_translated.pdf"
