"""Bulk import: normalize rows, create members, then write their edges."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kinfolk.config import ImportConfig
from kinfolk.domain.errors import NotFoundError
from kinfolk.domain.model import Family, Relationship, specs_for, with_reciprocals
from kinfolk.domain.reconciliation import DEFAULT_MEMBER_LOCKS, RelationshipReconciler

from .context import ResolutionContext
from .normalization import ImportIssue, IssueKind, normalize

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from kinfolk.domain.model import RelationshipSpec, RelationshipType
    from kinfolk.domain.ports import FamilyUnitOfWorkFactory, RelationshipRepository
    from kinfolk.domain.reconciliation import MemberLocks

    from .normalization import RelationshipIntent

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SkippedRelationship:
    row: int
    member_name: str
    related_name: str
    type: RelationshipType
    reason: str


@dataclass(slots=True, kw_only=True)
class ImportResult:
    family_id: UUID
    created_members: int = 0
    reused_members: int = 0
    edges_written: int = 0
    warnings: list[ImportIssue] = field(default_factory=list[ImportIssue])
    duplicate_names: list[str] = field(default_factory=list[str])
    skipped_relationships: list[SkippedRelationship] = field(
        default_factory=list[SkippedRelationship]
    )
    member_ids: dict[str, UUID] = field(default_factory=dict)

    @property
    def imported_members(self) -> int:
        return self.created_members + self.reused_members


def import_rows(
    rows: Sequence[object],
    family_id: UUID,
    *,
    uow_factory: FamilyUnitOfWorkFactory,
    config: ImportConfig | None = None,
    locks: MemberLocks = DEFAULT_MEMBER_LOCKS,
) -> ImportResult:
    """Import ``rows`` into an existing family.

    Members are created (or reused by natural key) first; names are resolved to
    ids only afterwards so rows may reference rows further down. Import is
    additive: each affected member keeps its existing edges.
    """

    import_config = config or ImportConfig()
    normalized = normalize(rows)
    result = ImportResult(
        family_id=family_id,
        warnings=list(normalized.warnings),
        duplicate_names=list(normalized.duplicate_names),
    )

    with uow_factory() as uow:
        repositories = uow.repositories
        if repositories.families.get(family_id) is None:
            raise NotFoundError(f"family {family_id} does not exist")

        reconciler = RelationshipReconciler(
            repositories, locks=locks, batch_size=import_config.edge_batch_size
        )
        context = ResolutionContext(family_id)
        context.seed(repositories.members.list_for_family(family_id))

        for member_row in normalized.members:
            member, created = reconciler.ensure_member(member_row.to_draft(family_id))
            context.register(member_row.full_name, member.id)
            if created:
                result.created_members += 1
            else:
                result.reused_members += 1

        edges = _resolve_intents(normalized.relationship_intents, context, result)
        with locks.hold(edge.source_id for edge in edges):
            plan = _additive_plan(edges, repositories.relationships)
            if plan:
                reconciled = reconciler.reconcile_many(plan)
                result.edges_written = reconciled.added
            uow.commit()

    result.member_ids = context.as_mapping()
    for skipped in result.skipped_relationships:
        log.warning(
            "Row %d: skipped %s relationship %r -> %r (%s)",
            skipped.row,
            skipped.type,
            skipped.member_name,
            skipped.related_name,
            skipped.reason,
        )
    log.info(
        "Imported %d member(s) (%d new, %d reused), %d new edge(s), %d warning(s)",
        result.imported_members,
        result.created_members,
        result.reused_members,
        result.edges_written,
        len(result.warnings),
    )
    return result


def import_family(
    name: str,
    rows: Sequence[object],
    *,
    uow_factory: FamilyUnitOfWorkFactory,
    description: str | None = None,
    is_public: bool = False,
    config: ImportConfig | None = None,
    locks: MemberLocks = DEFAULT_MEMBER_LOCKS,
) -> ImportResult:
    """Create a family and import ``rows`` into it."""

    family = Family(name=name, description=description, is_public=is_public)
    with uow_factory() as uow:
        uow.repositories.families.add(family)
        uow.commit()
    log.info("Created family %s (%s)", family.id, name)
    return import_rows(rows, family.id, uow_factory=uow_factory, config=config, locks=locks)


def _resolve_intents(
    intents: Sequence[RelationshipIntent],
    context: ResolutionContext,
    result: ImportResult,
) -> set[Relationship]:
    edges: list[Relationship] = []
    for intent in intents:
        member_id = context.resolve(intent.member_name)
        related_id = context.resolve(intent.related_name)
        if member_id is None or related_id is None:
            _skip(result, intent, IssueKind.UNRESOLVED_RELATIONSHIP, "name not found in family")
            continue
        if member_id == related_id:
            _skip(result, intent, IssueKind.SELF_RELATIONSHIP, "member cannot relate to itself")
            continue
        edges.append(Relationship(source_id=member_id, target_id=related_id, type=intent.type))
    return with_reciprocals(edges)


def _skip(
    result: ImportResult, intent: RelationshipIntent, kind: IssueKind, reason: str
) -> None:
    result.skipped_relationships.append(
        SkippedRelationship(
            row=intent.row,
            member_name=intent.member_name,
            related_name=intent.related_name,
            type=intent.type,
            reason=reason,
        )
    )
    result.warnings.append(
        ImportIssue(
            intent.row,
            kind,
            f"{intent.type} relationship to {intent.related_name!r} skipped: {reason}",
        )
    )


def _additive_plan(
    edges: set[Relationship], relationships: RelationshipRepository
) -> dict[UUID, list[RelationshipSpec]]:
    affected = sorted({edge.source_id for edge in edges})
    plan: dict[UUID, list[RelationshipSpec]] = {}
    for member_id in affected:
        existing = relationships.list_for_member(member_id)
        imported = sorted(
            (edge for edge in edges if edge.source_id == member_id),
            key=lambda edge: (str(edge.target_id), str(edge.type)),
        )
        plan[member_id] = specs_for(member_id, [*existing, *imported])
    return plan
