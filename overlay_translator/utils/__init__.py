"""
Utils module - page ranges, filenames and the event log.
"""
from .helpers import (
    format_file_size,
    get_output_filename,
    parse_page_range,
    sanitize_filename,
)
from .logger import EventLog

__all__ = [
    "EventLog",
    "format_file_size",
    "get_output_filename",
    "parse_page_range",
    "sanitize_filename",
]
