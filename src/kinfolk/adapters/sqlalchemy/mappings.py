"""SQLAlchemy mapping metadata for the kinfolk domain model.

Families and members are mapped imperatively onto the domain dataclasses.
Edges are immutable value objects and live in a plain Core table that the
relationship repository reads and writes directly.
"""

from __future__ import annotations

import logging
import uuid
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from kinfolk.domain.model import Family, Gender, MaritalStatus, Member, RelationshipType

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

family_table = Table(
    "family",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("description", String, nullable=True),
    Column("is_public", Boolean, nullable=False, default=False),
)

family_member_table = Table(
    "family_member",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "family_id",
        UUIDColumnType,
        ForeignKey("family.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("full_name", String, nullable=False),
    Column("birth_year", Integer, nullable=True),
    Column("death_year", Integer, nullable=True),
    Column("deceased", Boolean, nullable=False, default=False),
    Column("living_place", String, nullable=False),
    Column("marital_status", Enum(MaritalStatus, native_enum=False), nullable=False),
    Column("occupation", String, nullable=True),
    Column("gender", Enum(Gender, native_enum=False), nullable=False),
    Column("is_placeholder", Boolean, nullable=False, default=False),
    Index("ix_family_member_natural_key", "family_id", "full_name", "birth_year", "living_place"),
)

relationship_table = Table(
    "relationship",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "source_id",
        UUIDColumnType,
        ForeignKey("family_member.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "target_id",
        UUIDColumnType,
        ForeignKey("family_member.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("type", Enum(RelationshipType, native_enum=False), nullable=False),
    UniqueConstraint("source_id", "target_id", "type"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Family, family_table)
    mapper_registry.map_imperatively(Member, family_member_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
