"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    FamilyRepository,
    MemberRepository,
    RelationshipRepository,
    Repository,
)
from .unit_of_work import (
    FamilyRepositories,
    FamilyUnitOfWork,
    FamilyUnitOfWorkFactory,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "FamilyRepositories",
    "FamilyRepository",
    "FamilyUnitOfWork",
    "FamilyUnitOfWorkFactory",
    "MemberRepository",
    "RelationshipRepository",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
