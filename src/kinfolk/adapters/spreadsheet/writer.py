"""Write exported member rows as CSV or JSON."""

from __future__ import annotations

import csv
import io
import logging
from typing import TYPE_CHECKING

from kinfolk.domain.export import EXPORT_COLUMNS

from .reader import SpreadsheetFormat
from .schema import ExportDocument

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from kinfolk.domain.export import ExportRow
    from kinfolk.domain.model import Family

log = logging.getLogger(__name__)


def render_csv(rows: Sequence[ExportRow]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        record = row.as_record()
        writer.writerow({key: "" if value is None else value for key, value in record.items()})
    return buffer.getvalue()


def render_json(family: Family, rows: Sequence[ExportRow]) -> str:
    document = ExportDocument(
        family_name=family.name,
        description=family.description,
        is_public=family.is_public,
        members=[row.as_record() for row in rows],
    )
    return document.model_dump_json(indent=2, by_alias=True)


def write_export(
    path: Path,
    family: Family,
    rows: Sequence[ExportRow],
    *,
    fmt: SpreadsheetFormat = SpreadsheetFormat.CSV,
) -> None:
    text = render_csv(rows) if fmt is SpreadsheetFormat.CSV else render_json(family, rows)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    log.info("Wrote %d row(s) to %s", len(rows), path)
