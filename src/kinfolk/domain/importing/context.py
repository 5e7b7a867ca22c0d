"""Name -> member id resolution for one import batch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kinfolk.domain.model import normalize_name

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from kinfolk.domain.model import Member


@dataclass(slots=True)
class ResolutionContext:
    """Explicit name registry filled while members are created.

    Existing family members are seeded first; members of the batch registered
    afterwards win over existing members with the same normalized name.
    """

    family_id: UUID
    _ids_by_name: dict[str, UUID] = field(default_factory=dict)

    def seed(self, members: Iterable[Member]) -> None:
        for member in members:
            if member.family_id == self.family_id:
                self._ids_by_name.setdefault(member.normalized_name, member.id)

    def register(self, full_name: str, member_id: UUID) -> None:
        self._ids_by_name[normalize_name(full_name)] = member_id

    def resolve(self, full_name: str) -> UUID | None:
        return self._ids_by_name.get(normalize_name(full_name))

    def __contains__(self, full_name: object) -> bool:
        return isinstance(full_name, str) and normalize_name(full_name) in self._ids_by_name

    def __len__(self) -> int:
        return len(self._ids_by_name)

    def as_mapping(self) -> dict[str, UUID]:
        return dict(self._ids_by_name)
