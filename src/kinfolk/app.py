"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from kinfolk.adapters.spreadsheet import SpreadsheetFormat, read_document, write_export
from kinfolk.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyFamilyUnitOfWork,
    is_started,
    startup,
)
from kinfolk.config import get_import_config
from kinfolk.domain.consistency import audit_edges
from kinfolk.domain.errors import ValidationError
from kinfolk.domain.export import export_rows
from kinfolk.domain.importing import import_family, import_rows
from kinfolk.domain.members import delete_member, load_family_graph, update_member
from kinfolk.domain.sibling_inference import infer_siblings, remove_placeholders
from kinfolk.domain.tree import build_tree

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path
    from uuid import UUID

    from kinfolk.config import ImportConfig
    from kinfolk.domain.consistency import Diagnostic
    from kinfolk.domain.importing import ImportResult
    from kinfolk.domain.members import FamilyGraph
    from kinfolk.domain.model import Member
    from kinfolk.domain.ports import FamilyUnitOfWorkFactory
    from kinfolk.domain.sibling_inference import InferredParent
    from kinfolk.domain.tree import TreeBuildResult


log = getLogger(__name__)


def _unit_of_work_factory(
    unit_of_work_factory: FamilyUnitOfWorkFactory | None,
) -> FamilyUnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyFamilyUnitOfWork


def import_spreadsheet(
    path: Path,
    *,
    family_name: str | None = None,
    description: str | None = None,
    is_public: bool | None = None,
    family_id: UUID | None = None,
    fmt: SpreadsheetFormat | None = None,
    config: ImportConfig | None = None,
    unit_of_work_factory: FamilyUnitOfWorkFactory | None = None,
) -> ImportResult:
    """Import a CSV/JSON file into a new family, or into ``family_id`` when given."""

    document = read_document(path, fmt=fmt)
    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    effective_config = config or get_import_config()
    log.info("Starting import of %s (%d row(s))", path, len(document.members))

    if family_id is not None:
        return import_rows(
            document.members,
            family_id,
            uow_factory=effective_uow,
            config=effective_config,
        )

    name = family_name or document.family_name
    if not name:
        raise ValidationError("A family name is required (--family-name or familyName in JSON)")
    return import_family(
        name,
        document.members,
        uow_factory=effective_uow,
        description=description if description is not None else document.description,
        is_public=is_public if is_public is not None else document.is_public,
        config=effective_config,
    )


def infer_family_siblings(
    family_id: UUID,
    *,
    unit_of_work_factory: FamilyUnitOfWorkFactory | None = None,
) -> list[InferredParent]:
    return infer_siblings(family_id, uow_factory=_unit_of_work_factory(unit_of_work_factory))


def remove_family_placeholders(
    family_id: UUID,
    *,
    unit_of_work_factory: FamilyUnitOfWorkFactory | None = None,
) -> int:
    return remove_placeholders(family_id, uow_factory=_unit_of_work_factory(unit_of_work_factory))


def family_tree(
    family_id: UUID,
    *,
    unit_of_work_factory: FamilyUnitOfWorkFactory | None = None,
) -> tuple[FamilyGraph, TreeBuildResult]:
    graph = load_family_graph(family_id, uow_factory=_unit_of_work_factory(unit_of_work_factory))
    result = build_tree(graph.members, graph.edges)
    for diagnostic in result.diagnostics:
        log.warning("%s: %s", diagnostic.kind, diagnostic.message)
    return graph, result


def audit_family(
    family_id: UUID,
    *,
    unit_of_work_factory: FamilyUnitOfWorkFactory | None = None,
) -> list[Diagnostic]:
    graph = load_family_graph(family_id, uow_factory=_unit_of_work_factory(unit_of_work_factory))
    diagnostics = audit_edges(graph.members, graph.edges)
    log.info(
        "Audited family %s: %d member(s), %d edge(s), %d issue(s)",
        family_id,
        len(graph.members),
        len(graph.edges),
        len(diagnostics),
    )
    return diagnostics


def export_family(
    family_id: UUID,
    output: Path,
    *,
    fmt: SpreadsheetFormat = SpreadsheetFormat.CSV,
    unit_of_work_factory: FamilyUnitOfWorkFactory | None = None,
) -> int:
    graph = load_family_graph(family_id, uow_factory=_unit_of_work_factory(unit_of_work_factory))
    rows = export_rows(graph.members, graph.edges)
    write_export(output, graph.family, rows, fmt=fmt)
    return len(rows)


def edit_family_member(
    member_id: UUID,
    changes: Mapping[str, object],
    *,
    unit_of_work_factory: FamilyUnitOfWorkFactory | None = None,
) -> Member:
    return update_member(
        member_id, changes, uow_factory=_unit_of_work_factory(unit_of_work_factory)
    )


def delete_family_member(
    member_id: UUID,
    *,
    unit_of_work_factory: FamilyUnitOfWorkFactory | None = None,
) -> int:
    return delete_member(member_id, uow_factory=_unit_of_work_factory(unit_of_work_factory))
