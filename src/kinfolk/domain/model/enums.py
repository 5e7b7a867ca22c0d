"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    FAMILY = "family"
    MEMBER = "member"


class RelationshipType(StrEnum):
    """Role of an edge's source relative to its target."""

    PARENT = "parent"
    CHILD = "child"
    SPOUSE = "spouse"

    @property
    def reciprocal(self) -> RelationshipType:
        return _RECIPROCALS[self]


_RECIPROCALS: dict[RelationshipType, RelationshipType] = {
    RelationshipType.PARENT: RelationshipType.CHILD,
    RelationshipType.CHILD: RelationshipType.PARENT,
    RelationshipType.SPOUSE: RelationshipType.SPOUSE,
}


class MaritalStatus(StrEnum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"
    # only synthesized placeholders carry this
    UNKNOWN = "unknown"


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    UNKNOWN = "unknown"
