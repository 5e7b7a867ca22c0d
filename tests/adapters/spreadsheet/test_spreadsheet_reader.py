from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from kinfolk.adapters.spreadsheet import (
    SpreadsheetError,
    SpreadsheetFormat,
    detect_format,
    parse_csv,
    parse_json,
    read_document,
)
from kinfolk.domain.errors import ValidationError

if TYPE_CHECKING:
    from pathlib import Path


def test_detect_format_from_suffix(tmp_path: Path) -> None:
    assert detect_format(tmp_path / "family.CSV") is SpreadsheetFormat.CSV
    assert detect_format(tmp_path / "family.json") is SpreadsheetFormat.JSON
    with pytest.raises(SpreadsheetError):
        detect_format(tmp_path / "family.xlsx")


def test_parse_csv_strips_cells_and_skips_blank_rows() -> None:
    text = "Full Name , Year of Birth,Parents\n Ann ,1950,\n,,\nBob,1975,\"Ann, Carl\"\n"

    rows = parse_csv(text)

    assert rows == [
        {"Full Name": "Ann", "Year of Birth": "1950", "Parents": ""},
        {"Full Name": "Bob", "Year of Birth": "1975", "Parents": "Ann, Carl"},
    ]


def test_read_csv_document_handles_byte_order_mark(tmp_path: Path) -> None:
    path = tmp_path / "family.csv"
    path.write_text("Full Name,Year of Birth\nAnn,1950\n", encoding="utf-8-sig")

    document = read_document(path)

    assert document.family_name is None
    assert document.members == [{"Full Name": "Ann", "Year of Birth": "1950"}]


def test_parse_json_envelope() -> None:
    text = json.dumps(
        {
            "familyName": " Doe ",
            "description": "",
            "isPublic": True,
            "members": [{"Full Name": "Ann"}, "junk"],
        }
    )

    document = parse_json(text)

    assert document.family_name == "Doe"
    assert document.description is None
    assert document.is_public is True
    assert document.members == [{"Full Name": "Ann"}, "junk"]


@pytest.mark.parametrize(
    "payload",
    [
        [{"Full Name": "Ann"}],
        {"rows": [{"Full Name": "Ann"}]},
        {"data": [{"Full Name": "Ann"}]},
    ],
)
def test_parse_json_accepts_row_shapes(payload: object) -> None:
    assert parse_json(json.dumps(payload)).members == [{"Full Name": "Ann"}]


def test_parse_json_rejects_malformed_documents() -> None:
    with pytest.raises(SpreadsheetError):
        parse_json("{not json")
    with pytest.raises(ValidationError):
        parse_json(json.dumps({"members": "Ann"}))


def test_read_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SpreadsheetError):
        read_document(tmp_path / "missing.csv")
