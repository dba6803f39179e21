"""Common infrastructure utilities."""

from __future__ import annotations

from .converters import to_int, to_size_bytes
from .extractors import FileRecord, extract_file_record, find_file_record
from .formatting import describe_descriptor, format_duration, format_file_size

__all__ = [
    "FileRecord",
    "describe_descriptor",
    "extract_file_record",
    "find_file_record",
    "format_duration",
    "format_file_size",
    "to_int",
    "to_size_bytes",
]
