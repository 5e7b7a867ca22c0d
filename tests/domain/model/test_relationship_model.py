from __future__ import annotations

import pytest

from kinfolk.domain.errors import ValidationError
from kinfolk.domain.model import (
    Relationship,
    RelationshipSpec,
    RelationshipType,
    specs_for,
    with_reciprocals,
)
from tests.helpers.family import edge, make_family, make_member


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (RelationshipType.PARENT, RelationshipType.CHILD),
        (RelationshipType.CHILD, RelationshipType.PARENT),
        (RelationshipType.SPOUSE, RelationshipType.SPOUSE),
    ],
)
def test_reciprocal_types(kind: RelationshipType, expected: RelationshipType) -> None:
    family = make_family()
    a = make_member(family, "A")
    b = make_member(family, "B")

    reciprocal = edge(a, b, kind).reciprocal()

    assert reciprocal == Relationship(source_id=b.id, target_id=a.id, type=expected)


def test_with_reciprocals_closes_and_deduplicates() -> None:
    family = make_family()
    a = make_member(family, "A")
    b = make_member(family, "B")
    forward = edge(a, b, RelationshipType.PARENT)

    closed = with_reciprocals([forward, forward, forward.reciprocal()])

    assert closed == {forward, forward.reciprocal()}


def test_spec_rejects_self_relationship() -> None:
    member = make_member(make_family(), "Solo")

    with pytest.raises(ValidationError):
        RelationshipSpec(type=RelationshipType.SPOUSE, related_id=member.id).edge_from(member.id)


def test_specs_for_reads_incoming_edges_through_reciprocal() -> None:
    family = make_family()
    parent = make_member(family, "Parent")
    child = make_member(family, "Child")
    spouse = make_member(family, "Spouse")
    edges = [
        edge(parent, child, RelationshipType.PARENT),
        edge(child, parent, RelationshipType.CHILD),
        edge(spouse, parent, RelationshipType.SPOUSE),
        edge(parent, parent, RelationshipType.SPOUSE),
    ]

    specs = specs_for(parent.id, edges)

    assert specs == [
        RelationshipSpec(type=RelationshipType.PARENT, related_id=child.id),
        RelationshipSpec(type=RelationshipType.SPOUSE, related_id=spouse.id),
    ]
