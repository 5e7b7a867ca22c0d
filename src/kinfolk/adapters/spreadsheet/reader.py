"""Read CSV and JSON member spreadsheets into raw rows."""

from __future__ import annotations

import csv
import io
import logging
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from kinfolk.domain.errors import ValidationError

from .schema import ImportDocument

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)


class SpreadsheetFormat(StrEnum):
    CSV = "csv"
    JSON = "json"


class SpreadsheetError(ValidationError):
    """Raised when a file cannot be read as a member spreadsheet."""


def detect_format(path: Path) -> SpreadsheetFormat:
    suffix = path.suffix.lower().lstrip(".")
    try:
        return SpreadsheetFormat(suffix)
    except ValueError as exc:
        raise SpreadsheetError(f"unsupported spreadsheet type {path.suffix!r} for {path}") from exc


def read_document(path: Path, *, fmt: SpreadsheetFormat | None = None) -> ImportDocument:
    """Read ``path`` into an import document (CSV files carry rows only)."""

    resolved = fmt or detect_format(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise SpreadsheetError(f"cannot read {path}: {exc}") from exc

    if resolved is SpreadsheetFormat.CSV:
        document = ImportDocument(members=parse_csv(text))
    else:
        document = parse_json(text)
    log.info("Read %d row(s) from %s", len(document.members), path)
    return document


def parse_csv(text: str) -> list[dict[str, str]]:
    reader = csv.DictReader(io.StringIO(text))
    return [row for row in _strip_rows(reader) if any(value for value in row.values())]


def parse_json(text: str) -> ImportDocument:
    try:
        return ImportDocument.model_validate_json(text)
    except PydanticValidationError as exc:
        raise SpreadsheetError(f"invalid import document: {exc}") from exc


def _strip_rows(rows: Iterable[dict[str | None, str | None]]) -> Iterable[dict[str, str]]:
    for row in rows:
        # DictReader files surplus cells under None
        yield {
            key.strip(): (value or "").strip()
            for key, value in row.items()
            if key is not None and isinstance(value, str | None)
        }
