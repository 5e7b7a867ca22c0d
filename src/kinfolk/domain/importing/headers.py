"""Declarative header alias table for tabular member imports."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from kinfolk.domain.model import RelationshipType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

log = logging.getLogger(__name__)


class ImportField(StrEnum):
    FULL_NAME = "full_name"
    YEAR_OF_BIRTH = "year_of_birth"
    YEAR_OF_DEATH = "year_of_death"
    LIVING_PLACE = "living_place"
    IS_DECEASED = "is_deceased"
    MARITAL_STATUS = "marital_status"
    OCCUPATION = "occupation"
    GENDER = "gender"
    PARENTS = "parents"
    SPOUSES = "spouses"
    CHILDREN = "children"


# Canonical field -> accepted spellings. Spellings are compared by header_token().
HEADER_ALIASES: Final[dict[ImportField, tuple[str, ...]]] = {
    ImportField.FULL_NAME: ("Full Name", "full_name", "fullName", "name", "Member Name"),
    ImportField.YEAR_OF_BIRTH: (
        "Year of Birth",
        "year_of_birth",
        "yearOfBirth",
        "birth_year",
        "birthYear",
        "born",
    ),
    ImportField.YEAR_OF_DEATH: (
        "Year of Death",
        "year_of_death",
        "yearOfDeath",
        "death_year",
        "deathYear",
        "died",
    ),
    ImportField.LIVING_PLACE: ("Living Place", "livingPlace", "location", "residence", "place"),
    ImportField.IS_DECEASED: ("Is Deceased", "isDeceased", "deceased"),
    ImportField.MARITAL_STATUS: ("Marital Status", "maritalStatus", "marital"),
    ImportField.OCCUPATION: ("Occupation", "job", "profession"),
    ImportField.GENDER: ("Gender", "sex"),
    ImportField.PARENTS: ("Parents", "parent"),
    ImportField.SPOUSES: ("Spouses", "Spouse(s)", "spouse"),
    ImportField.CHILDREN: ("Children", "child"),
}

# Relationship columns hold names of related rows; the edge type is the row's role.
RELATIONSHIP_FIELDS: Final[dict[ImportField, RelationshipType]] = {
    ImportField.PARENTS: RelationshipType.CHILD,
    ImportField.CHILDREN: RelationshipType.PARENT,
    ImportField.SPOUSES: RelationshipType.SPOUSE,
}

_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def header_token(header: str) -> str:
    """Comparison form of a header: lowercase, letters and digits only."""
    return _NON_ALNUM.sub("", header.lower())


_FIELD_BY_TOKEN: Final[dict[str, ImportField]] = {
    header_token(alias): field for field, aliases in HEADER_ALIASES.items() for alias in aliases
}


@dataclass(frozen=True, slots=True)
class HeaderMap:
    """Raw header -> canonical field, resolved once per import."""

    columns: dict[str, ImportField]

    def extract(self, row: Mapping[str, object]) -> dict[ImportField, object]:
        values: dict[ImportField, object] = {}
        for header, value in row.items():
            field = self.columns.get(header)
            if field is not None and field not in values:
                values[field] = value
        return values

    @property
    def fields(self) -> frozenset[ImportField]:
        return frozenset(self.columns.values())


def resolve_headers(headers: Iterable[str]) -> HeaderMap:
    """Map every recognised header to its canonical field; the first match per field wins."""

    columns: dict[str, ImportField] = {}
    claimed: set[ImportField] = set()
    for header in headers:
        if header in columns:
            continue
        field = _FIELD_BY_TOKEN.get(header_token(str(header)))
        if field is None:
            log.debug("Ignoring unrecognised column %r", header)
            continue
        if field in claimed:
            log.debug("Ignoring column %r; %s is already mapped", header, field)
            continue
        columns[header] = field
        claimed.add(field)
    return HeaderMap(columns=columns)
