# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from kinfolk.adapters.spreadsheet import SpreadsheetFormat
from kinfolk.app import (
    audit_family,
    delete_family_member,
    edit_family_member,
    export_family,
    family_tree,
    import_spreadsheet,
    infer_family_siblings,
    remove_family_placeholders,
)
from kinfolk.config import configure_logging
from kinfolk.domain.tree import render_tree

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_YEAR_FIELDS = frozenset({"birth_year", "death_year"})
_NULLABLE_FIELDS = frozenset({"birth_year", "death_year", "occupation"})


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain family relationship graphs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_cmd = subparsers.add_parser("import", help="Import members from a CSV or JSON file")
    import_cmd.add_argument("file", type=Path, help="Spreadsheet to import")
    import_cmd.add_argument(
        "--family-name",
        type=str,
        help="Create a new family with this name (JSON files may carry familyName)",
    )
    import_cmd.add_argument(
        "--family-id",
        type=str,
        help="Import into an existing family instead of creating one",
    )
    import_cmd.add_argument("--description", type=str, help="Description of the new family")
    import_cmd.add_argument(
        "--public",
        action="store_true",
        default=None,
        help="Mark the new family as public",
    )
    import_cmd.add_argument(
        "--format",
        choices=[fmt.value for fmt in SpreadsheetFormat],
        help="File format (defaults to the file extension)",
    )

    for name, help_text in (
        ("infer-siblings", "Group parentless members under inferred placeholder parents"),
        ("remove-placeholders", "Delete every inferred placeholder parent"),
        ("tree", "Print the family tree"),
        ("audit", "Report inconsistent relationship edges"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("--family-id", type=str, required=True, help="Family to operate on")

    export_cmd = subparsers.add_parser("export", help="Export members and relationships")
    export_cmd.add_argument("--family-id", type=str, required=True, help="Family to export")
    export_cmd.add_argument("--output", type=Path, required=True, help="Destination file")
    export_cmd.add_argument(
        "--format",
        choices=[fmt.value for fmt in SpreadsheetFormat],
        default=SpreadsheetFormat.CSV.value,
        help="Output format",
    )

    member = subparsers.add_parser("member", help="Member maintenance commands")
    member_sub = member.add_subparsers(dest="member_command", required=True)
    member_delete = member_sub.add_parser("delete", help="Delete a member and its relationships")
    member_delete.add_argument("--member-id", type=str, required=True, help="Member to delete")
    member_update = member_sub.add_parser("update", help="Edit scalar fields of a member")
    member_update.add_argument("--member-id", type=str, required=True, help="Member to edit")
    member_update.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Field assignment, repeatable (e.g. --set living_place=Lisbon)",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _parse_assignments(assignments: Sequence[str]) -> dict[str, object]:
    if not assignments:
        raise ValueError("Nothing to update (use --set FIELD=VALUE)")
    changes: dict[str, object] = {}
    for assignment in assignments:
        field, separator, raw = assignment.partition("=")
        field = field.strip()
        if not separator or not field:
            raise ValueError(f"Invalid assignment: {assignment!r}")
        value = raw.strip()
        if field in _NULLABLE_FIELDS and value.lower() in {"", "none", "null"}:
            changes[field] = None
        elif field in _YEAR_FIELDS:
            try:
                changes[field] = int(value)
            except ValueError as exc:
                raise ValueError(f"Invalid year for {field}: {value!r}") from exc
        elif field == "deceased":
            changes[field] = value.lower() in {"yes", "y", "true", "t", "1"}
        else:
            changes[field] = value
    return changes


def _run(parsed_args: argparse.Namespace) -> None:
    command = parsed_args.command
    if command == "import":
        result = import_spreadsheet(
            parsed_args.file,
            family_name=parsed_args.family_name,
            description=parsed_args.description,
            is_public=parsed_args.public,
            family_id=_parse_uuid(parsed_args.family_id) if parsed_args.family_id else None,
            fmt=SpreadsheetFormat(parsed_args.format) if parsed_args.format else None,
        )
        print(f"family {result.family_id}")
        print(
            f"members: {result.created_members} created, {result.reused_members} reused; "
            f"edges written: {result.edges_written}"
        )
        for issue in result.warnings:
            print(f"row {issue.row}: {issue.kind}: {issue.message}")
    elif command == "infer-siblings":
        inferred = infer_family_siblings(_parse_uuid(parsed_args.family_id))
        for item in inferred:
            state = "created" if item.created else "reused"
            print(
                f"{item.synthetic_parent.full_name} ({state}): {len(item.child_ids)} child(ren)"
            )
    elif command == "remove-placeholders":
        removed = remove_family_placeholders(_parse_uuid(parsed_args.family_id))
        print(f"removed {removed} placeholder(s)")
    elif command == "tree":
        graph, result = family_tree(_parse_uuid(parsed_args.family_id))
        print(graph.family.name)
        print(render_tree(result))
    elif command == "audit":
        diagnostics = audit_family(_parse_uuid(parsed_args.family_id))
        for diagnostic in diagnostics:
            print(f"{diagnostic.kind}: {diagnostic.message}")
        if not diagnostics:
            print("no issues found")
    elif command == "export":
        count = export_family(
            _parse_uuid(parsed_args.family_id),
            parsed_args.output,
            fmt=SpreadsheetFormat(parsed_args.format),
        )
        log.info("Exported %d member(s) to %s", count, parsed_args.output)
    elif command == "member" and parsed_args.member_command == "delete":
        removed = delete_family_member(_parse_uuid(parsed_args.member_id))
        print(f"deleted member and {removed} edge(s)")
    elif command == "member" and parsed_args.member_command == "update":
        member = edit_family_member(
            _parse_uuid(parsed_args.member_id),
            _parse_assignments(parsed_args.assignments),
        )
        print(f"updated {member.full_name} ({member.id})")
    else:
        raise ValueError(f"Unsupported command: {command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else None)

    try:
        _run(parsed_args)
    except ValueError:
        log.exception("Invalid input")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
