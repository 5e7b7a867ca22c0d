from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from uuid import uuid4

import pytest

from kinfolk.adapters.spreadsheet import SpreadsheetFormat
from kinfolk.domain.errors import NotFoundError
from kinfolk.domain.tree import TreeBuildResult
from kinfolk.ui import cli


def test_import_command_passes_options(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}
    family_id = uuid4()

    def fake_import(path: Path, **kwargs: object) -> SimpleNamespace:
        captured["path"] = path
        captured.update(kwargs)
        return SimpleNamespace(
            family_id=family_id,
            created_members=2,
            reused_members=0,
            edges_written=2,
            warnings=[],
        )

    monkeypatch.setattr(cli, "import_spreadsheet", fake_import)

    cli.main(["import", "family.csv", "--family-name", "Doe", "--public"])

    assert captured["path"] == Path("family.csv")
    assert captured["family_name"] == "Doe"
    assert captured["is_public"] is True
    assert captured["description"] is None
    assert captured["family_id"] is None
    assert captured["fmt"] is None
    output = capsys.readouterr().out
    assert f"family {family_id}" in output
    assert "edges written: 2" in output


def test_import_command_leaves_visibility_to_document(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    family_id = uuid4()

    def fake_import(_path: Path, **kwargs: object) -> SimpleNamespace:
        captured.update(kwargs)
        return SimpleNamespace(
            family_id=family_id,
            created_members=0,
            reused_members=0,
            edges_written=0,
            warnings=[],
        )

    monkeypatch.setattr(cli, "import_spreadsheet", fake_import)

    cli.main(["import", "family.json", "--family-id", str(family_id), "--format", "json"])

    assert captured["is_public"] is None
    assert captured["family_id"] == family_id
    assert captured["fmt"] is SpreadsheetFormat.JSON


def test_tree_command_prints_family(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    family_id = uuid4()
    requested: list[object] = []

    def fake_tree(requested_id: object) -> tuple[SimpleNamespace, TreeBuildResult]:
        requested.append(requested_id)
        return SimpleNamespace(family=SimpleNamespace(name="Doe")), TreeBuildResult(roots=[])

    monkeypatch.setattr(cli, "family_tree", fake_tree)

    cli.main(["tree", "--family-id", str(family_id)])

    assert requested == [family_id]
    assert capsys.readouterr().out.startswith("Doe")


def test_export_command_defaults_to_csv(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_export(family_id: object, output: Path, **kwargs: object) -> int:
        captured.update(kwargs, family_id=family_id, output=output)
        return 3

    monkeypatch.setattr(cli, "export_family", fake_export)
    family_id = uuid4()

    cli.main(["export", "--family-id", str(family_id), "--output", "out.csv"])

    assert captured == {
        "fmt": SpreadsheetFormat.CSV,
        "family_id": family_id,
        "output": Path("out.csv"),
    }


def test_member_update_parses_assignments(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    member_id = uuid4()

    def fake_edit(requested_id: object, changes: dict[str, object]) -> SimpleNamespace:
        captured["id"] = requested_id
        captured["changes"] = changes
        return SimpleNamespace(full_name="Ann", id=requested_id)

    monkeypatch.setattr(cli, "edit_family_member", fake_edit)

    cli.main(
        [
            "member",
            "update",
            "--member-id",
            str(member_id),
            "--set",
            "death_year=2001",
            "--set",
            "occupation=none",
            "--set",
            "deceased=yes",
            "--set",
            "living_place= Lisbon ",
        ]
    )

    assert captured["id"] == member_id
    assert captured["changes"] == {
        "death_year": 2001,
        "occupation": None,
        "deceased": True,
        "living_place": "Lisbon",
    }


@pytest.mark.parametrize(
    "argv",
    [
        ["tree", "--family-id", "not-a-uuid"],
        ["member", "update", "--member-id", "00000000-0000-0000-0000-000000000001"],
        [
            "member",
            "update",
            "--member-id",
            "00000000-0000-0000-0000-000000000001",
            "--set",
            "birth_year=soon",
        ],
    ],
)
def test_invalid_input_exits_with_code_two(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)

    assert excinfo.value.code == 2


def test_unexpected_errors_exit_with_code_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_delete(_member_id: object) -> int:
        raise NotFoundError("member does not exist")

    monkeypatch.setattr(cli, "delete_family_member", fake_delete)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["member", "delete", "--member-id", str(uuid4())])

    assert excinfo.value.code == 1


def test_missing_subcommand_is_rejected() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2
