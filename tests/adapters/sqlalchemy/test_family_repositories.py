from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from kinfolk.adapters.sqlalchemy import (
    SqlAlchemyFamilyRepository,
    SqlAlchemyMemberRepository,
    SqlAlchemyRelationshipRepository,
    relationship_table,
)
from kinfolk.domain.errors import EdgeWriteError
from kinfolk.domain.model import Family, Gender, MaritalStatus, Relationship, RelationshipType
from tests.helpers.family import make_member, pair

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from kinfolk.domain.model import Member


@pytest.fixture
def seeded(sqlite_session: Session) -> tuple[Family, list[Member]]:
    family = Family(name="Doe", description="Test family", is_public=True)
    members = [
        make_member(family, "Ann", 1950, gender=Gender.FEMALE),
        make_member(family, "Ben", 1948, marital_status=MaritalStatus.MARRIED),
        make_member(family, "Cid", 1975, living_place="Porto"),
    ]
    SqlAlchemyFamilyRepository(sqlite_session).add(family)
    repo = SqlAlchemyMemberRepository(sqlite_session)
    for member in members:
        repo.add(member)
    sqlite_session.commit()
    return family, members


def _edge_count(session: Session) -> int:
    return session.execute(select(func.count()).select_from(relationship_table)).scalar_one()


def test_family_round_trip(sqlite_session: Session, seeded: tuple[Family, list[Member]]) -> None:
    family, _ = seeded
    sqlite_session.expunge_all()

    loaded = SqlAlchemyFamilyRepository(sqlite_session).get(family.id)

    assert loaded is not None
    assert loaded.name == "Doe"
    assert loaded.description == "Test family"
    assert loaded.is_public is True


def test_member_queries(sqlite_session: Session, seeded: tuple[Family, list[Member]]) -> None:
    family, (ann, ben, cid) = seeded
    repo = SqlAlchemyMemberRepository(sqlite_session)

    assert repo.find_by_natural_key(ann.natural_key) is ann
    assert repo.find_by_natural_key(make_member(family, "Cid", 1975).natural_key) is None
    assert repo.find_by_name("Ben", family.id) == [ben]
    assert repo.list_for_family(family.id) == [ben, ann, cid]

    loaded = repo.get(ann.id)
    assert loaded is not None
    assert loaded.gender is Gender.FEMALE


def test_member_natural_key_without_birth_year(
    sqlite_session: Session, seeded: tuple[Family, list[Member]]
) -> None:
    family, _ = seeded
    repo = SqlAlchemyMemberRepository(sqlite_session)
    yearless = make_member(family, "Dee", None)
    repo.add(yearless)
    sqlite_session.commit()

    assert repo.find_by_natural_key(yearless.natural_key) is yearless


def test_upsert_is_idempotent(sqlite_session: Session, seeded: tuple[Family, list[Member]]) -> None:
    _, (ann, ben, _cid) = seeded
    repo = SqlAlchemyRelationshipRepository(sqlite_session)
    edges = pair(ann, ben, RelationshipType.SPOUSE)

    assert repo.upsert(edges) == 2
    repo.upsert(edges)
    repo.upsert([])
    sqlite_session.commit()

    assert _edge_count(sqlite_session) == 2
    assert set(repo.list_for_member(ann.id)) == edges


def test_delete_for_member_removes_both_directions(
    sqlite_session: Session, seeded: tuple[Family, list[Member]]
) -> None:
    family, (ann, ben, cid) = seeded
    repo = SqlAlchemyRelationshipRepository(sqlite_session)
    kept = pair(ben, cid, RelationshipType.PARENT)
    repo.upsert(
        pair(ann, cid, RelationshipType.PARENT) | pair(ann, ben, RelationshipType.SPOUSE) | kept
    )

    removed = repo.delete_for_member(ann.id)
    sqlite_session.commit()

    assert removed == 4
    assert repo.list_for_member(ann.id) == []
    assert set(repo.list_for_family(family.id)) == kept


def test_list_for_family_ignores_other_families(
    sqlite_session: Session, seeded: tuple[Family, list[Member]]
) -> None:
    family, (ann, ben, _cid) = seeded
    other = Family(name="Other")
    SqlAlchemyFamilyRepository(sqlite_session).add(other)
    x = make_member(other, "X")
    y = make_member(other, "Y")
    members = SqlAlchemyMemberRepository(sqlite_session)
    members.add(x)
    members.add(y)
    repo = SqlAlchemyRelationshipRepository(sqlite_session)
    repo.upsert(pair(ann, ben, RelationshipType.SPOUSE) | pair(x, y, RelationshipType.SPOUSE))

    assert set(repo.list_for_family(family.id)) == pair(ann, ben, RelationshipType.SPOUSE)
    assert set(repo.list_for_family(other.id)) == pair(x, y, RelationshipType.SPOUSE)


def test_upsert_wraps_database_errors(
    sqlite_session: Session, seeded: tuple[Family, list[Member]]
) -> None:
    _, (ann, ben, _cid) = seeded
    sqlite_session.execute(relationship_table.delete())
    sqlite_session.commit()
    sqlite_session.connection().exec_driver_sql("DROP TABLE relationship")
    repo = SqlAlchemyRelationshipRepository(sqlite_session)

    with pytest.raises(EdgeWriteError):
        repo.upsert(
            [Relationship(source_id=ann.id, target_id=ben.id, type=RelationshipType.SPOUSE)]
        )
