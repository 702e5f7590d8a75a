"""Spreadsheet decoding and export."""

from .export import export_failed_rows, export_rows, output_filename, timestamped_filename
from .reader import DecodeError, UnsupportedFormatError, decode_rows

__all__ = [
    "DecodeError",
    "UnsupportedFormatError",
    "decode_rows",
    "export_failed_rows",
    "export_rows",
    "output_filename",
    "timestamped_filename",
]
