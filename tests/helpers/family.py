"""Reusable fakes and factories for family graph tests."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Literal

from kinfolk.domain.errors import EdgeWriteError
from kinfolk.domain.model import Family, Member, Relationship, RelationshipType
from kinfolk.domain.ports import FamilyRepositories

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from types import TracebackType
    from uuid import UUID

    from kinfolk.domain.model import NaturalKey


def make_family(name: str = "Doe") -> Family:
    return Family(name=name)


def make_member(
    family: Family,
    full_name: str,
    birth_year: int | None = 1950,
    **kwargs: object,
) -> Member:
    return Member(
        family_id=family.id,
        full_name=full_name,
        birth_year=birth_year,
        **kwargs,  # pyright: ignore[reportArgumentType]
    )


def edge(source: Member, target: Member, kind: RelationshipType) -> Relationship:
    return Relationship(source_id=source.id, target_id=target.id, type=kind)


def pair(source: Member, target: Member, kind: RelationshipType) -> set[Relationship]:
    forward = edge(source, target, kind)
    return {forward, forward.reciprocal()}


@dataclass
class FamilyStore:
    """State shared by every fake unit of work created from one factory."""

    families: dict[UUID, Family] = field(default_factory=dict)
    members: dict[UUID, Member] = field(default_factory=dict)
    edges: dict[Relationship, None] = field(default_factory=dict)

    def seed(self, *entities: Family | Member) -> None:
        for entity in entities:
            if isinstance(entity, Family):
                self.families[entity.id] = entity
            else:
                self.members[entity.id] = entity

    def seed_edges(self, edges: Iterable[Relationship]) -> None:
        for item in edges:
            self.edges[item] = None

    def edge_set(self) -> set[Relationship]:
        return set(self.edges)


class FakeFamilyRepository:
    def __init__(self, store: FamilyStore) -> None:
        self.store = store

    def add(self, entity: Family) -> None:
        self.store.families[entity.id] = entity

    def get(self, entity_id: UUID) -> Family | None:
        return self.store.families.get(entity_id)


class FakeMemberRepository:
    def __init__(self, store: FamilyStore) -> None:
        self.store = store

    def add(self, entity: Member) -> None:
        self.store.members[entity.id] = entity

    def get(self, entity_id: UUID) -> Member | None:
        return self.store.members.get(entity_id)

    def remove(self, member: Member) -> None:
        self.store.members.pop(member.id, None)

    def find_by_natural_key(self, key: NaturalKey) -> Member | None:
        for member in self.store.members.values():
            if member.natural_key == key:
                return member
        return None

    def find_by_name(self, full_name: str, family_id: UUID) -> list[Member]:
        return [
            member
            for member in self.store.members.values()
            if member.family_id == family_id and member.full_name == full_name
        ]

    def list_for_family(self, family_id: UUID) -> list[Member]:
        return [member for member in self.store.members.values() if member.family_id == family_id]


class FakeRelationshipRepository:
    def __init__(self, store: FamilyStore, *, fail_on_upsert: bool = False) -> None:
        self.store = store
        self.fail_on_upsert = fail_on_upsert
        self.upsert_calls: list[int] = []

    def upsert(self, edges: Iterable[Relationship]) -> int:
        batch = list(edges)
        if self.fail_on_upsert:
            raise EdgeWriteError("simulated write failure")
        self.upsert_calls.append(len(batch))
        for item in batch:
            self.store.edges[item] = None
        return len(batch)

    def delete_for_member(self, member_id: UUID) -> int:
        doomed = [item for item in self.store.edges if item.involves(member_id)]
        for item in doomed:
            del self.store.edges[item]
        return len(doomed)

    def list_for_member(self, member_id: UUID) -> list[Relationship]:
        return [item for item in self.store.edges if item.involves(member_id)]

    def list_for_family(self, family_id: UUID) -> list[Relationship]:
        return [
            item
            for item in self.store.edges
            if (source := self.store.members.get(item.source_id)) is not None
            and source.family_id == family_id
        ]


@dataclass
class _Snapshot:
    families: dict[UUID, Family]
    members: dict[UUID, Member]
    member_values: dict[UUID, dict[str, object]]
    edges: dict[Relationship, None]

    @classmethod
    def take(cls, store: FamilyStore) -> _Snapshot:
        return cls(
            families=dict(store.families),
            members=dict(store.members),
            member_values={
                member_id: {f.name: getattr(member, f.name) for f in fields(member)}
                for member_id, member in store.members.items()
            },
            edges=dict(store.edges),
        )

    def restore(self, store: FamilyStore) -> None:
        store.families = dict(self.families)
        store.members = dict(self.members)
        store.edges = dict(self.edges)
        for member_id, values in self.member_values.items():
            member = self.members[member_id]
            for name, value in values.items():
                setattr(member, name, value)


class FakeFamilyUnitOfWork:
    """Snapshot-based unit of work: uncommitted changes are discarded on exit."""

    def __init__(
        self,
        store: FamilyStore,
        *,
        fail_on_upsert: bool = False,
        on_commit: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.committed = False
        self._on_commit = on_commit
        self.rolled_back = False
        self._snapshot: _Snapshot | None = None
        self._repositories = FamilyRepositories(
            families=FakeFamilyRepository(store),
            members=FakeMemberRepository(store),
            relationships=FakeRelationshipRepository(store, fail_on_upsert=fail_on_upsert),
        )

    @property
    def repositories(self) -> FamilyRepositories:
        return self._repositories

    def __enter__(self) -> FakeFamilyUnitOfWork:
        self._snapshot = _Snapshot.take(self.store)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None or not self.committed:
            self.rollback()
        return False

    def commit(self) -> None:
        if self._on_commit is not None:
            self._on_commit()
        self.committed = True
        self._snapshot = _Snapshot.take(self.store)

    def rollback(self) -> None:
        self.rolled_back = True
        if self._snapshot is not None:
            self._snapshot.restore(self.store)


@dataclass
class FakeUnitOfWorkFactory:
    store: FamilyStore = field(default_factory=FamilyStore)
    fail_on_upsert: bool = False
    on_commit: Callable[[], None] | None = None
    created: list[FakeFamilyUnitOfWork] = field(default_factory=list)

    def __call__(self) -> FakeFamilyUnitOfWork:
        uow = FakeFamilyUnitOfWork(
            self.store, fail_on_upsert=self.fail_on_upsert, on_commit=self.on_commit
        )
        self.created.append(uow)
        return uow

