"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from kinfolk.adapters.sqlalchemy.mappings import family_member_table, relationship_table
from kinfolk.domain.errors import EdgeWriteError
from kinfolk.domain.model import Family, Member, Relationship

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from kinfolk.domain.model import NaturalKey


class SqlAlchemyFamilyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Family) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> Family | None:
        return self.session.get(Family, entity_id)


class SqlAlchemyMemberRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Member) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> Member | None:
        return self.session.get(Member, entity_id)

    def remove(self, member: Member) -> None:
        self.session.delete(member)

    def find_by_natural_key(self, key: NaturalKey) -> Member | None:
        columns = family_member_table.c
        birth_year = (
            columns.birth_year.is_(None)
            if key.birth_year is None
            else columns.birth_year == key.birth_year
        )
        stmt = (
            select(Member)
            .where(columns.family_id == key.family_id)
            .where(columns.full_name == key.full_name)
            .where(birth_year)
            .where(columns.living_place == key.living_place)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_by_name(self, full_name: str, family_id: UUID) -> list[Member]:
        columns = family_member_table.c
        stmt = (
            select(Member)
            .where(columns.family_id == family_id)
            .where(columns.full_name == full_name)
            .order_by(columns.birth_year, columns.id)
        )
        return list(self.session.execute(stmt).scalars())

    def list_for_family(self, family_id: UUID) -> list[Member]:
        columns = family_member_table.c
        stmt = (
            select(Member)
            .where(columns.family_id == family_id)
            .order_by(columns.birth_year, columns.full_name, columns.id)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyRelationshipRepository:
    """Edge store on the ``relationship`` table.

    Pending ORM changes are flushed before every statement so edges can
    reference members created earlier in the same unit of work.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, edges: Iterable[Relationship]) -> int:
        rows = [
            {"source_id": edge.source_id, "target_id": edge.target_id, "type": edge.type}
            for edge in dict.fromkeys(edges)
        ]
        if not rows:
            return 0
        try:
            self.session.flush()
            dialect = self.session.get_bind().dialect.name
            if dialect == "sqlite":
                stmt = sqlite.insert(relationship_table).on_conflict_do_nothing(
                    index_elements=["source_id", "target_id", "type"]
                )
                self.session.execute(stmt, rows)
            elif dialect == "postgresql":
                stmt = postgresql.insert(relationship_table).on_conflict_do_nothing(
                    index_elements=["source_id", "target_id", "type"]
                )
                self.session.execute(stmt, rows)
            else:
                self._insert_missing(rows)
        except SQLAlchemyError as exc:
            raise EdgeWriteError(f"failed to upsert {len(rows)} edge(s)") from exc
        return len(rows)

    def delete_for_member(self, member_id: UUID) -> int:
        columns = relationship_table.c
        stmt = delete(relationship_table).where(
            or_(columns.source_id == member_id, columns.target_id == member_id)
        )
        try:
            self.session.flush()
            result = self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise EdgeWriteError(f"failed to delete edges of member {member_id}") from exc
        return int(result.rowcount or 0)  # pyright: ignore[reportAttributeAccessIssue, reportUnknownArgumentType]

    def list_for_member(self, member_id: UUID) -> list[Relationship]:
        columns = relationship_table.c
        stmt = (
            select(columns.source_id, columns.target_id, columns.type)
            .where(or_(columns.source_id == member_id, columns.target_id == member_id))
            .order_by(columns.id)
        )
        self.session.flush()
        return [_to_edge(row) for row in self.session.execute(stmt)]

    def list_for_family(self, family_id: UUID) -> list[Relationship]:
        columns = relationship_table.c
        stmt = (
            select(columns.source_id, columns.target_id, columns.type)
            .join(family_member_table, family_member_table.c.id == columns.source_id)
            .where(family_member_table.c.family_id == family_id)
            .order_by(columns.id)
        )
        self.session.flush()
        return [_to_edge(row) for row in self.session.execute(stmt)]

    def _insert_missing(self, rows: Sequence[dict[str, Any]]) -> None:
        columns = relationship_table.c
        for row in rows:
            exists = self.session.execute(
                select(columns.id)
                .where(columns.source_id == row["source_id"])
                .where(columns.target_id == row["target_id"])
                .where(columns.type == row["type"])
                .limit(1)
            ).scalar_one_or_none()
            if exists is None:
                self.session.execute(relationship_table.insert(), [row])


def _to_edge(row: Row[Any]) -> Relationship:
    source_id, target_id, edge_type = row
    return Relationship(source_id=source_id, target_id=target_id, type=edge_type)


if TYPE_CHECKING:
    from kinfolk.domain.ports import FamilyRepository, MemberRepository, RelationshipRepository

    _session_stub = cast("Session", object())
    _family_repo: FamilyRepository = SqlAlchemyFamilyRepository(_session_stub)
    _member_repo: MemberRepository = SqlAlchemyMemberRepository(_session_stub)
    _edge_repo: RelationshipRepository = SqlAlchemyRelationshipRepository(_session_stub)
