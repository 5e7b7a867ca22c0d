"""Ports for persisting families, members and their edges."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from kinfolk.domain.model import Family, Member

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from kinfolk.domain.model import NaturalKey, Relationship


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class FamilyRepository(Repository[Family], Protocol):
    """Repository contract for families."""


@runtime_checkable
class MemberRepository(Repository[Member], Protocol):
    """Repository contract for family members."""

    def remove(self, member: Member) -> None: ...

    def find_by_natural_key(self, key: NaturalKey) -> Member | None: ...

    def find_by_name(self, full_name: str, family_id: UUID) -> list[Member]: ...

    def list_for_family(self, family_id: UUID) -> list[Member]: ...


@runtime_checkable
class RelationshipRepository(Protocol):
    """Edge store contract.

    Edges are unique by ``(source_id, target_id, type)``; ``upsert`` ignores
    edges that already exist. Implementations wrap store failures in
    ``EdgeWriteError``.
    """

    def upsert(self, edges: Iterable[Relationship]) -> int: ...

    def delete_for_member(self, member_id: UUID) -> int: ...

    def list_for_member(self, member_id: UUID) -> list[Relationship]: ...

    def list_for_family(self, family_id: UUID) -> list[Relationship]: ...
