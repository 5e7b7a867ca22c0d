"""Flatten members and their relationships back into import-compatible rows."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Final

from kinfolk.domain.importing.headers import ImportField
from kinfolk.domain.model import RelationshipType, specs_for

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from kinfolk.domain.model import Member, Relationship

EXPORT_COLUMNS: Final[tuple[str, ...]] = tuple(str(field) for field in ImportField)
NAME_SEPARATOR: Final[str] = ", "


@dataclass(frozen=True, slots=True, kw_only=True)
class ExportRow:
    full_name: str
    year_of_birth: int | None
    year_of_death: int | None
    living_place: str
    is_deceased: str
    marital_status: str
    occupation: str | None
    gender: str
    parents: str
    spouses: str
    children: str

    def as_record(self) -> dict[str, object]:
        return asdict(self)


def export_rows(members: Iterable[Member], edges: Iterable[Relationship]) -> list[ExportRow]:
    """One row per member in input order; relationship columns hold comma-joined names."""

    member_list = list(members)
    members_by_id = {member.id: member for member in member_list}
    edges_by_member: dict[UUID, list[Relationship]] = {}
    for edge in edges:
        edges_by_member.setdefault(edge.source_id, []).append(edge)
        edges_by_member.setdefault(edge.target_id, []).append(edge)

    rows: list[ExportRow] = []
    for member in member_list:
        related: dict[RelationshipType, list[str]] = {kind: [] for kind in RelationshipType}
        for spec in specs_for(member.id, edges_by_member.get(member.id, [])):
            other = members_by_id.get(spec.related_id)
            if other is None or other.family_id != member.family_id:
                continue
            related[spec.type].append(other.full_name)
        rows.append(
            ExportRow(
                full_name=member.full_name,
                year_of_birth=member.birth_year,
                year_of_death=member.death_year,
                living_place=member.living_place,
                is_deceased="Yes" if member.is_deceased else "No",
                marital_status=str(member.marital_status),
                occupation=member.occupation,
                gender=str(member.gender),
                # member is CHILD of its parents, PARENT of its children
                parents=NAME_SEPARATOR.join(related[RelationshipType.CHILD]),
                spouses=NAME_SEPARATOR.join(related[RelationshipType.SPOUSE]),
                children=NAME_SEPARATOR.join(related[RelationshipType.PARENT]),
            )
        )
    return rows
