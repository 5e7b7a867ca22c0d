"""Family members, their drafts and the natural key used for dedup."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, ClassVar

from kinfolk.domain.errors import ValidationError
from kinfolk.domain.model.entity import Entity
from kinfolk.domain.model.enums import EntityType, Gender, MaritalStatus
from kinfolk.domain.model.primitives import UNKNOWN_LIVING_PLACE, is_valid_year, normalize_name

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class NaturalKey:
    """Identity of a person as seen by import: who, when, where and in which family."""

    full_name: str
    birth_year: int | None
    living_place: str
    family_id: UUID


def _validate_years(full_name: str, birth_year: int | None, death_year: int | None) -> None:
    if not full_name.strip():
        raise ValidationError("full_name must not be blank")
    if birth_year is not None and not is_valid_year(birth_year):
        raise ValidationError(f"birth_year out of range: {birth_year}")
    if death_year is not None and not is_valid_year(death_year):
        raise ValidationError(f"death_year out of range: {death_year}")
    if birth_year is not None and death_year is not None and death_year < birth_year:
        raise ValidationError(
            f"death_year {death_year} precedes birth_year {birth_year} for {full_name!r}"
        )


@dataclass(frozen=True, kw_only=True)
class MemberDraft:
    """Member fields without an identity; input to member creation."""

    family_id: UUID
    full_name: str
    birth_year: int | None = None
    death_year: int | None = None
    deceased: bool = False
    living_place: str = UNKNOWN_LIVING_PLACE
    marital_status: MaritalStatus = MaritalStatus.SINGLE
    occupation: str | None = None
    gender: Gender = Gender.UNKNOWN
    is_placeholder: bool = False

    def __post_init__(self) -> None:
        _validate_years(self.full_name, self.birth_year, self.death_year)

    @property
    def natural_key(self) -> NaturalKey:
        return NaturalKey(
            full_name=self.full_name,
            birth_year=self.birth_year,
            living_place=self.living_place,
            family_id=self.family_id,
        )

    def build(self) -> Member:
        return Member(**{f.name: getattr(self, f.name) for f in fields(self)})


@dataclass(eq=False, kw_only=True)
class Member(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.MEMBER
    EDITABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "full_name",
            "birth_year",
            "death_year",
            "deceased",
            "living_place",
            "marital_status",
            "occupation",
            "gender",
        }
    )

    family_id: UUID
    full_name: str
    birth_year: int | None = None
    death_year: int | None = None
    deceased: bool = False
    living_place: str = UNKNOWN_LIVING_PLACE
    marital_status: MaritalStatus = MaritalStatus.SINGLE
    occupation: str | None = None
    gender: Gender = Gender.UNKNOWN
    is_placeholder: bool = False

    def __post_init__(self) -> None:
        _validate_years(self.full_name, self.birth_year, self.death_year)

    @property
    def is_deceased(self) -> bool:
        return self.deceased or self.death_year is not None

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.full_name)

    @property
    def natural_key(self) -> NaturalKey:
        return NaturalKey(
            full_name=self.full_name,
            birth_year=self.birth_year,
            living_place=self.living_place,
            family_id=self.family_id,
        )

    def apply_changes(self, changes: dict[str, object]) -> None:
        """Assign editable scalar fields, validating the result before mutating."""
        unknown = set(changes) - self.EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"fields not editable: {', '.join(sorted(unknown))}")
        merged = {name: getattr(self, name) for name in self.EDITABLE_FIELDS} | changes
        _validate_years(
            str(merged["full_name"]),
            merged["birth_year"],  # pyright: ignore[reportArgumentType]
            merged["death_year"],  # pyright: ignore[reportArgumentType]
        )
        for name, value in changes.items():
            setattr(self, name, value)
