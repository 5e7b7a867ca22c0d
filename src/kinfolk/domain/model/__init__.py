"""Public domain model surface."""

from __future__ import annotations

from kinfolk.domain.model.entity import Entity, new_id
from kinfolk.domain.model.enums import EntityType, Gender, MaritalStatus, RelationshipType
from kinfolk.domain.model.family import Family
from kinfolk.domain.model.member import Member, MemberDraft, NaturalKey
from kinfolk.domain.model.primitives import (
    FALLBACK_BIRTH_YEAR_BASE,
    MAX_YEAR,
    MIN_YEAR,
    UNKNOWN_LIVING_PLACE,
    FamilyId,
    MemberId,
    Year,
    is_valid_year,
    normalize_name,
)
from kinfolk.domain.model.relationship import (
    Relationship,
    RelationshipSpec,
    specs_for,
    with_reciprocals,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    # enums
    "EntityType",
    "Gender",
    "MaritalStatus",
    "RelationshipType",
    # aggregates
    "Family",
    "Member",
    "MemberDraft",
    "NaturalKey",
    # edges
    "Relationship",
    "RelationshipSpec",
    "specs_for",
    "with_reciprocals",
    # primitives
    "FALLBACK_BIRTH_YEAR_BASE",
    "MAX_YEAR",
    "MIN_YEAR",
    "UNKNOWN_LIVING_PLACE",
    "FamilyId",
    "MemberId",
    "Year",
    "is_valid_year",
    "normalize_name",
]
