"""Relationship reconciler.

Keeps the edge store symmetric: every write goes through a full replace of a
member's edge set (both directions) followed by an upsert of the desired
edges and their reciprocals. The reconciler works against the repositories of
an open unit of work; callers own the transaction and commit once, so a
failure between delete and insert rolls back to the previous edge set.
Callers hold the affected members' locks until that commit; the reconciler
re-enters them for the rewrite itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import batched
from typing import TYPE_CHECKING

from kinfolk.config.importing import DEFAULT_EDGE_BATCH_SIZE
from kinfolk.domain.errors import EdgeWriteError, NotFoundError, ValidationError
from kinfolk.domain.model import with_reciprocals

from .locks import DEFAULT_MEMBER_LOCKS, MemberLocks
from .plan import ReconcileResult

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from uuid import UUID

    from kinfolk.domain.model import Member, MemberDraft, Relationship, RelationshipSpec
    from kinfolk.domain.ports import FamilyRepositories

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RelationshipReconciler:
    repositories: FamilyRepositories
    locks: MemberLocks = field(default=DEFAULT_MEMBER_LOCKS)
    batch_size: int = DEFAULT_EDGE_BATCH_SIZE

    def ensure_member(self, draft: MemberDraft) -> tuple[Member, bool]:
        """Return the member with ``draft``'s natural key, creating it when absent."""

        members = self.repositories.members
        existing = members.find_by_natural_key(draft.natural_key)
        if existing is not None:
            log.debug("Reusing member %s for %r", existing.id, draft.full_name)
            return existing, False
        member = draft.build()
        members.add(member)
        log.debug("Created member %s for %r", member.id, draft.full_name)
        return member, True

    def reconcile(self, member_id: UUID, desired: Sequence[RelationshipSpec]) -> ReconcileResult:
        """Replace every edge touching ``member_id`` with ``desired`` plus reciprocals."""

        return self.reconcile_many({member_id: desired})

    def reconcile_many(
        self, plan: Mapping[UUID, Sequence[RelationshipSpec]]
    ) -> ReconcileResult:
        """Reconcile several members at once.

        All deletes run first, then one upsert of the union of every member's
        desired edges. Validation happens before anything is written.
        """

        desired_edges = self._validated_edges(plan)
        member_ids = tuple(sorted(plan))
        relationships = self.repositories.relationships

        with self.locks.hold(member_ids):
            previous: set[Relationship] = set()
            for member_id in member_ids:
                previous.update(relationships.list_for_member(member_id))
            for member_id in member_ids:
                relationships.delete_for_member(member_id)
            try:
                for chunk in batched(sorted(desired_edges, key=_edge_sort_key), self.batch_size):
                    relationships.upsert(chunk)
            except EdgeWriteError:
                log.exception("Edge upsert failed while reconciling %d member(s)", len(member_ids))
                raise

        result = ReconcileResult(
            member_ids=member_ids,
            added=len(desired_edges - previous),
            removed=len(previous - desired_edges),
            written=len(desired_edges),
        )
        log.debug(
            "Reconciled %d member(s): +%d -%d edges",
            len(member_ids),
            result.added,
            result.removed,
        )
        return result

    def _validated_edges(
        self, plan: Mapping[UUID, Sequence[RelationshipSpec]]
    ) -> set[Relationship]:
        members = self.repositories.members
        cache: dict[UUID, Member] = {}

        def load(member_id: UUID) -> Member:
            member = cache.get(member_id)
            if member is None:
                member = members.get(member_id)
                if member is None:
                    raise NotFoundError(f"member {member_id} does not exist")
                cache[member_id] = member
            return member

        edges: list[Relationship] = []
        for member_id, specs in plan.items():
            member = load(member_id)
            for spec in specs:
                edge = spec.edge_from(member_id)
                related = load(spec.related_id)
                if related.family_id != member.family_id:
                    raise ValidationError(
                        f"member {member_id} and {spec.related_id} belong to different families"
                    )
                edges.append(edge)
        return with_reciprocals(edges)


def _edge_sort_key(edge: Relationship) -> tuple[str, str, str]:
    return (str(edge.source_id), str(edge.target_id), str(edge.type))

