"""Typed, directed edges between members.

The edge type states the *source's* role relative to the target:
``Relationship(a, b, PARENT)`` reads "a is a parent of b" and its reciprocal is
``Relationship(b, a, CHILD)``. Spouse edges are symmetric.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from kinfolk.domain.errors import ValidationError
from kinfolk.domain.model.enums import RelationshipType

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class Relationship:
    source_id: UUID
    target_id: UUID
    type: RelationshipType

    @property
    def key(self) -> tuple[UUID, UUID, RelationshipType]:
        return (self.source_id, self.target_id, self.type)

    def reciprocal(self) -> Relationship:
        return Relationship(
            source_id=self.target_id,
            target_id=self.source_id,
            type=self.type.reciprocal,
        )

    def involves(self, member_id: UUID) -> bool:
        return member_id in (self.source_id, self.target_id)

    @property
    def is_self_edge(self) -> bool:
        return self.source_id == self.target_id


@dataclass(frozen=True, slots=True)
class RelationshipSpec:
    """Desired relationship from one member's point of view: member is ``type`` of related."""

    type: RelationshipType
    related_id: UUID

    def edge_from(self, member_id: UUID) -> Relationship:
        if member_id == self.related_id:
            raise ValidationError(f"member {member_id} cannot relate to itself")
        return Relationship(source_id=member_id, target_id=self.related_id, type=self.type)


def with_reciprocals(edges: Iterable[Relationship]) -> set[Relationship]:
    """Close an edge set under reciprocity."""
    closed: set[Relationship] = set()
    for edge in edges:
        closed.add(edge)
        closed.add(edge.reciprocal())
    return closed


def specs_for(member_id: UUID, edges: Iterable[Relationship]) -> list[RelationshipSpec]:
    """Express the edges touching ``member_id`` as specs from its point of view.

    Incoming edges are read through their reciprocal, so a one-sided edge still
    yields the relationship it implies. Order is preserved, duplicates dropped.
    """
    specs: dict[RelationshipSpec, None] = {}
    for edge in edges:
        if edge.is_self_edge:
            continue
        if edge.source_id == member_id:
            specs.setdefault(RelationshipSpec(type=edge.type, related_id=edge.target_id))
        elif edge.target_id == member_id:
            specs.setdefault(
                RelationshipSpec(type=edge.type.reciprocal, related_id=edge.source_id)
            )
    return list(specs)
