"""Sibling inference: group parentless members and give each group a placeholder parent.

Members without a recorded parent are sorted by birth year and swept
oldest-first. Each unprocessed seed gathers every other unprocessed candidate
born within ``GENERATION_SPAN_YEARS`` of the seed; groups of two or more get an
``Unknown Parent (<min year>)`` placeholder wired in through the reconciler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from kinfolk.domain.errors import NotFoundError
from kinfolk.domain.model import (
    UNKNOWN_LIVING_PLACE,
    MaritalStatus,
    MemberDraft,
    RelationshipSpec,
    RelationshipType,
    is_valid_year,
    specs_for,
)
from kinfolk.domain.reconciliation import DEFAULT_MEMBER_LOCKS, RelationshipReconciler

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from kinfolk.domain.model import Member, Relationship
    from kinfolk.domain.ports import FamilyRepositories, FamilyUnitOfWorkFactory
    from kinfolk.domain.reconciliation import MemberLocks

log = logging.getLogger(__name__)

GENERATION_SPAN_YEARS: Final[int] = 30


@dataclass(frozen=True, slots=True)
class SiblingCluster:
    members: tuple[Member, ...]

    @property
    def min_birth_year(self) -> int:
        return min(member.birth_year for member in self.members if member.birth_year is not None)

    @property
    def member_ids(self) -> tuple[UUID, ...]:
        return tuple(member.id for member in self.members)


@dataclass(frozen=True, slots=True)
class InferredParent:
    synthetic_parent: Member
    child_ids: tuple[UUID, ...]
    created: bool


def placeholder_name(min_birth_year: int) -> str:
    return f"Unknown Parent ({min_birth_year})"


def parentless_candidates(members: Iterable[Member], edges: Iterable[Relationship]) -> list[Member]:
    """Members with a birth year, not placeholders, and without a recorded parent."""

    with_parent = {edge.source_id for edge in edges if edge.type is RelationshipType.CHILD}
    with_parent.update(edge.target_id for edge in edges if edge.type is RelationshipType.PARENT)
    return [
        member
        for member in members
        if member.id not in with_parent
        and member.birth_year is not None
        and not member.is_placeholder
    ]


def cluster_siblings(
    members: Iterable[Member], edges: Iterable[Relationship]
) -> list[SiblingCluster]:
    """Group parentless members by birth-year proximity to each cluster's seed."""

    edge_list = list(edges)
    candidates = sorted(
        parentless_candidates(members, edge_list),
        key=lambda member: member.birth_year or 0,
    )
    processed: set[UUID] = set()
    clusters: list[SiblingCluster] = []

    for seed in candidates:
        if seed.id in processed:
            continue
        processed.add(seed.id)
        seed_year = seed.birth_year or 0
        group = [seed]
        for other in candidates:
            if other.id in processed:
                continue
            if abs((other.birth_year or 0) - seed_year) <= GENERATION_SPAN_YEARS:
                group.append(other)
                processed.add(other.id)
        if len(group) > 1:
            clusters.append(SiblingCluster(members=tuple(group)))

    return clusters


def infer_siblings(
    family_id: UUID,
    *,
    uow_factory: FamilyUnitOfWorkFactory,
    locks: MemberLocks = DEFAULT_MEMBER_LOCKS,
) -> list[InferredParent]:
    """Cluster the family's parentless members and attach a placeholder parent per cluster."""

    inferred: list[InferredParent] = []
    with uow_factory() as uow:
        repositories = uow.repositories
        if repositories.families.get(family_id) is None:
            raise NotFoundError(f"family {family_id} does not exist")

        members = repositories.members.list_for_family(family_id)
        edges = repositories.relationships.list_for_family(family_id)
        clusters = cluster_siblings(members, edges)
        reconciler = RelationshipReconciler(repositories, locks=locks)
        for cluster in clusters:
            parent, created = _placeholder_for(repositories, reconciler, family_id, cluster)
            inferred.append(
                InferredParent(
                    synthetic_parent=parent, child_ids=cluster.member_ids, created=created
                )
            )

        with locks.hold(item.synthetic_parent.id for item in inferred):
            for item in inferred:
                parent = item.synthetic_parent
                existing = repositories.relationships.list_for_member(parent.id)
                desired = specs_for(parent.id, existing)
                desired.extend(
                    RelationshipSpec(type=RelationshipType.PARENT, related_id=child_id)
                    for child_id in item.child_ids
                )
                reconciler.reconcile(parent.id, desired)
                log.debug(
                    "Cluster of %d under %r (%s)",
                    len(item.child_ids),
                    parent.full_name,
                    "created" if item.created else "reused",
                )
            uow.commit()

    log.info(
        "Inferred %d sibling cluster(s) in family %s (%d new placeholder(s))",
        len(inferred),
        family_id,
        sum(1 for item in inferred if item.created),
    )
    return inferred


def remove_placeholders(
    family_id: UUID,
    *,
    uow_factory: FamilyUnitOfWorkFactory,
    locks: MemberLocks = DEFAULT_MEMBER_LOCKS,
) -> int:
    """Delete every placeholder member of the family together with its edges."""

    with uow_factory() as uow:
        repositories = uow.repositories
        if repositories.families.get(family_id) is None:
            raise NotFoundError(f"family {family_id} does not exist")
        placeholders = [
            member
            for member in repositories.members.list_for_family(family_id)
            if member.is_placeholder
        ]
        with locks.hold(member.id for member in placeholders):
            for member in placeholders:
                repositories.relationships.delete_for_member(member.id)
                repositories.members.remove(member)
            uow.commit()

    log.info("Removed %d placeholder(s) from family %s", len(placeholders), family_id)
    return len(placeholders)


def _placeholder_for(
    repositories: FamilyRepositories,
    reconciler: RelationshipReconciler,
    family_id: UUID,
    cluster: SiblingCluster,
) -> tuple[Member, bool]:
    min_year = cluster.min_birth_year
    name = placeholder_name(min_year)
    matches = repositories.members.find_by_name(name, family_id)
    if matches:
        flagged = [member for member in matches if member.is_placeholder]
        return (flagged or matches)[0], False
    return reconciler.ensure_member(
        MemberDraft(
            family_id=family_id,
            full_name=name,
            birth_year=_placeholder_birth_year(min_year),
            living_place=UNKNOWN_LIVING_PLACE,
            marital_status=MaritalStatus.UNKNOWN,
            is_placeholder=True,
        )
    )


def _placeholder_birth_year(min_year: int) -> int | None:
    year = min_year - GENERATION_SPAN_YEARS
    return year if is_valid_year(year) else None
