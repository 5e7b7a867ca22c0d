"""SQLAlchemy adapter package for kinfolk."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    family_member_table,
    family_table,
    mapper_registry,
    relationship_table,
    start_mappers,
)
from .repositories import (
    SqlAlchemyFamilyRepository,
    SqlAlchemyMemberRepository,
    SqlAlchemyRelationshipRepository,
)
from .unit_of_work import (
    SqlAlchemyFamilyUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyFamilyRepository",
    "SqlAlchemyFamilyUnitOfWork",
    "SqlAlchemyMemberRepository",
    "SqlAlchemyRelationshipRepository",
    "StartupError",
    "create_all_tables",
    "family_member_table",
    "family_table",
    "is_started",
    "mapper_registry",
    "relationship_table",
    "shutdown",
    "start_mappers",
    "startup",
]
