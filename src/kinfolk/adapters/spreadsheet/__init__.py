"""CSV/JSON spreadsheet adapter for member import and export."""

from __future__ import annotations

from .reader import (
    SpreadsheetError,
    SpreadsheetFormat,
    detect_format,
    parse_csv,
    parse_json,
    read_document,
)
from .schema import ExportDocument, ImportDocument
from .writer import render_csv, render_json, write_export

__all__ = [
    "ExportDocument",
    "ImportDocument",
    "SpreadsheetError",
    "SpreadsheetFormat",
    "detect_format",
    "parse_csv",
    "parse_json",
    "read_document",
    "render_csv",
    "render_json",
    "write_export",
]
