"""Single-member maintenance: create, edit, delete and graph loading."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kinfolk.domain.errors import NotFoundError, ValidationError
from kinfolk.domain.model import Gender, MaritalStatus
from kinfolk.domain.reconciliation import DEFAULT_MEMBER_LOCKS, RelationshipReconciler

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from uuid import UUID

    from kinfolk.domain.model import Family, Member, MemberDraft, Relationship, RelationshipSpec
    from kinfolk.domain.ports import FamilyUnitOfWorkFactory
    from kinfolk.domain.reconciliation import MemberLocks, ReconcileResult

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FamilyGraph:
    family: Family
    members: list[Member]
    edges: list[Relationship]


def create_member(
    draft: MemberDraft,
    relationships: Sequence[RelationshipSpec] = (),
    *,
    uow_factory: FamilyUnitOfWorkFactory,
    locks: MemberLocks = DEFAULT_MEMBER_LOCKS,
) -> tuple[Member, bool]:
    """Create (or reuse by natural key) a member and attach its relationships.

    Relationships are only written for newly created members or when given
    explicitly; the member's edge set becomes exactly ``relationships``.
    """

    with uow_factory() as uow:
        repositories = uow.repositories
        if repositories.families.get(draft.family_id) is None:
            raise NotFoundError(f"family {draft.family_id} does not exist")
        reconciler = RelationshipReconciler(repositories, locks=locks)
        member, created = reconciler.ensure_member(draft)
        with locks.hold([member.id]):
            if relationships:
                reconciler.reconcile(member.id, relationships)
            uow.commit()
    log.info("%s member %s (%s)", "Created" if created else "Reused", member.id, member.full_name)
    return member, created


def reconcile(
    member_id: UUID,
    desired: Sequence[RelationshipSpec],
    *,
    uow_factory: FamilyUnitOfWorkFactory,
    locks: MemberLocks = DEFAULT_MEMBER_LOCKS,
) -> ReconcileResult:
    """Replace a member's relationships in its own transaction.

    The member stays locked until the transaction is committed.
    """

    with uow_factory() as uow, locks.hold([member_id]):
        result = RelationshipReconciler(uow.repositories, locks=locks).reconcile(member_id, desired)
        uow.commit()
    log.info("Reconciled member %s: +%d -%d edges", member_id, result.added, result.removed)
    return result


def update_member(
    member_id: UUID,
    changes: Mapping[str, object],
    *,
    uow_factory: FamilyUnitOfWorkFactory,
) -> Member:
    """Edit scalar fields of a member; relationships are left untouched."""

    coerced = {name: _coerce(name, value) for name, value in changes.items()}
    with uow_factory() as uow:
        member = uow.repositories.members.get(member_id)
        if member is None:
            raise NotFoundError(f"member {member_id} does not exist")
        member.apply_changes(coerced)
        uow.commit()
    log.info("Updated member %s: %s", member_id, ", ".join(sorted(coerced)))
    return member


def delete_member(
    member_id: UUID,
    *,
    uow_factory: FamilyUnitOfWorkFactory,
    locks: MemberLocks = DEFAULT_MEMBER_LOCKS,
) -> int:
    """Delete a member after removing every edge where it is source or target.

    Returns the number of edges removed.
    """

    with uow_factory() as uow:
        repositories = uow.repositories
        member = repositories.members.get(member_id)
        if member is None:
            raise NotFoundError(f"member {member_id} does not exist")
        with locks.hold([member_id]):
            removed = repositories.relationships.delete_for_member(member_id)
            repositories.members.remove(member)
            uow.commit()
    log.info("Deleted member %s and %d edge(s)", member_id, removed)
    return removed


def load_family_graph(family_id: UUID, *, uow_factory: FamilyUnitOfWorkFactory) -> FamilyGraph:
    with uow_factory() as uow:
        repositories = uow.repositories
        family = repositories.families.get(family_id)
        if family is None:
            raise NotFoundError(f"family {family_id} does not exist")
        graph = FamilyGraph(
            family=family,
            members=repositories.members.list_for_family(family_id),
            edges=repositories.relationships.list_for_family(family_id),
        )
    return graph


def _coerce(name: str, value: object) -> object:
    try:
        if name == "marital_status" and not isinstance(value, MaritalStatus):
            return MaritalStatus(str(value).strip().lower())
        if name == "gender" and not isinstance(value, Gender):
            return Gender(str(value).strip().lower())
    except ValueError as exc:
        raise ValidationError(f"invalid {name}: {value!r}") from exc
    return value
