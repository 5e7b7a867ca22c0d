"""Tolerant row parsing for bulk member imports.

Rows are raw mappings as they come out of a spreadsheet or JSON document.
Nothing in here raises for bad data: every problem becomes an ``ImportIssue``
attached to its (1-based) row and a usable default is substituted.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from kinfolk.domain.model import (
    FALLBACK_BIRTH_YEAR_BASE,
    UNKNOWN_LIVING_PLACE,
    Gender,
    MaritalStatus,
    MemberDraft,
    RelationshipType,
    is_valid_year,
    normalize_name,
)

from .headers import RELATIONSHIP_FIELDS, HeaderMap, ImportField, resolve_headers

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

log = logging.getLogger(__name__)

TRUE_TOKENS: Final[frozenset[str]] = frozenset({"yes", "y", "true", "t", "1"})
FALSE_TOKENS: Final[frozenset[str]] = frozenset({"no", "n", "false", "f", "0"})
IMPORTABLE_MARITAL_STATUSES: Final[frozenset[MaritalStatus]] = frozenset(
    {MaritalStatus.SINGLE, MaritalStatus.MARRIED, MaritalStatus.DIVORCED, MaritalStatus.WIDOWED}
)


class IssueKind(StrEnum):
    INVALID_ROW = "invalid_row"
    MISSING_NAME = "missing_name"
    INVALID_BIRTH_YEAR = "invalid_birth_year"
    INVALID_DEATH_YEAR = "invalid_death_year"
    INVALID_DECEASED = "invalid_deceased"
    INVALID_GENDER = "invalid_gender"
    INVALID_MARITAL_STATUS = "invalid_marital_status"
    DUPLICATE_NAME = "duplicate_name"
    UNRESOLVED_RELATIONSHIP = "unresolved_relationship"
    SELF_RELATIONSHIP = "self_relationship"


@dataclass(frozen=True, slots=True)
class ImportIssue:
    row: int
    kind: IssueKind
    message: str


@dataclass(frozen=True, slots=True, kw_only=True)
class MemberRow:
    """One parsed member row, always complete enough to create a member."""

    row: int
    full_name: str
    birth_year: int
    death_year: int | None = None
    deceased: bool = False
    living_place: str = UNKNOWN_LIVING_PLACE
    marital_status: MaritalStatus = MaritalStatus.SINGLE
    occupation: str | None = None
    gender: Gender = Gender.UNKNOWN

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.full_name)

    def to_draft(self, family_id: UUID) -> MemberDraft:
        return MemberDraft(
            family_id=family_id,
            full_name=self.full_name,
            birth_year=self.birth_year,
            death_year=self.death_year,
            deceased=self.deceased,
            living_place=self.living_place,
            marital_status=self.marital_status,
            occupation=self.occupation,
            gender=self.gender,
        )


@dataclass(frozen=True, slots=True)
class RelationshipIntent:
    """Name-based edge request: ``member_name`` is ``type`` of ``related_name``."""

    row: int
    member_name: str
    related_name: str
    type: RelationshipType


@dataclass(slots=True)
class NormalizedImport:
    members: list[MemberRow] = field(default_factory=list[MemberRow])
    relationship_intents: list[RelationshipIntent] = field(
        default_factory=list[RelationshipIntent]
    )
    warnings: list[ImportIssue] = field(default_factory=list[ImportIssue])
    duplicate_names: list[str] = field(default_factory=list[str])

    def warnings_by_row(self) -> dict[int, list[ImportIssue]]:
        grouped: dict[int, list[ImportIssue]] = {}
        for issue in self.warnings:
            grouped.setdefault(issue.row, []).append(issue)
        return grouped


def normalize(rows: Sequence[object]) -> NormalizedImport:
    """Parse raw rows into member rows, relationship intents and warnings."""

    result = NormalizedImport()
    header_map = resolve_headers(_collect_headers(rows))
    seen: dict[str, int] = {}

    for index, raw in enumerate(rows, start=1):
        if not isinstance(raw, Mapping):
            result.warnings.append(
                ImportIssue(index, IssueKind.INVALID_ROW, f"row is not a mapping: {raw!r}")
            )
            continue
        issues: list[ImportIssue] = []
        values = header_map.extract(raw)  # pyright: ignore[reportUnknownArgumentType]
        member = _parse_member(index, values, issues)

        name_key = member.normalized_name
        first_row = seen.get(name_key)
        if first_row is not None:
            issues.append(
                ImportIssue(
                    index,
                    IssueKind.DUPLICATE_NAME,
                    f"{member.full_name!r} already appears in row {first_row}; row dropped",
                )
            )
            result.duplicate_names.append(member.full_name)
            result.warnings.extend(issues)
            continue
        seen[name_key] = index

        result.members.append(member)
        result.relationship_intents.extend(_parse_intents(member, values))
        result.warnings.extend(issues)

    log.debug(
        "Normalized %d row(s) into %d member(s), %d intent(s), %d warning(s)",
        len(rows),
        len(result.members),
        len(result.relationship_intents),
        len(result.warnings),
    )
    return result


def _collect_headers(rows: Sequence[object]) -> list[str]:
    headers: dict[str, None] = {}
    for raw in rows:
        if isinstance(raw, Mapping):
            for key in raw:  # pyright: ignore[reportUnknownVariableType]
                headers.setdefault(str(key))  # pyright: ignore[reportUnknownArgumentType]
    return list(headers)


def _parse_member(
    row: int, values: dict[ImportField, object], issues: list[ImportIssue]
) -> MemberRow:
    full_name = _text(values.get(ImportField.FULL_NAME))
    if full_name is None:
        full_name = f"Unknown {row}"
        issues.append(
            ImportIssue(row, IssueKind.MISSING_NAME, f"missing full name; using {full_name!r}")
        )

    birth_year = _parse_year(values.get(ImportField.YEAR_OF_BIRTH))
    if birth_year is None:
        fallback = FALLBACK_BIRTH_YEAR_BASE + row
        issues.append(
            ImportIssue(
                row,
                IssueKind.INVALID_BIRTH_YEAR,
                f"missing or invalid year of birth "
                f"{values.get(ImportField.YEAR_OF_BIRTH)!r}; using {fallback}",
            )
        )
        birth_year = fallback

    raw_death = values.get(ImportField.YEAR_OF_DEATH)
    death_year = _parse_year(raw_death)
    if death_year is None and _text(raw_death) is not None:
        issues.append(
            ImportIssue(row, IssueKind.INVALID_DEATH_YEAR, f"ignoring year of death {raw_death!r}")
        )
    elif death_year is not None and death_year < birth_year:
        issues.append(
            ImportIssue(
                row,
                IssueKind.INVALID_DEATH_YEAR,
                f"year of death {death_year} precedes year of birth {birth_year}; ignored",
            )
        )
        death_year = None

    raw_deceased = values.get(ImportField.IS_DECEASED)
    deceased = _parse_flag(raw_deceased)
    if deceased is None:
        if _text(raw_deceased) is not None:
            issues.append(
                ImportIssue(
                    row, IssueKind.INVALID_DECEASED, f"unrecognised deceased flag {raw_deceased!r}"
                )
            )
        deceased = False

    return MemberRow(
        row=row,
        full_name=full_name,
        birth_year=birth_year,
        death_year=death_year,
        deceased=deceased,
        living_place=_text(values.get(ImportField.LIVING_PLACE)) or UNKNOWN_LIVING_PLACE,
        marital_status=_parse_marital_status(row, values, issues),
        occupation=_text(values.get(ImportField.OCCUPATION)),
        gender=_parse_gender(row, values, issues),
    )


def _parse_gender(
    row: int, values: dict[ImportField, object], issues: list[ImportIssue]
) -> Gender:
    raw = _text(values.get(ImportField.GENDER))
    if raw is None:
        return Gender.UNKNOWN
    try:
        return Gender(raw.lower())
    except ValueError:
        issues.append(ImportIssue(row, IssueKind.INVALID_GENDER, f"unrecognised gender {raw!r}"))
        return Gender.UNKNOWN


def _parse_marital_status(
    row: int, values: dict[ImportField, object], issues: list[ImportIssue]
) -> MaritalStatus:
    raw = _text(values.get(ImportField.MARITAL_STATUS))
    if raw is None:
        return MaritalStatus.SINGLE
    try:
        status = MaritalStatus(raw.lower())
    except ValueError:
        status = None
    if status not in IMPORTABLE_MARITAL_STATUSES:
        issues.append(
            ImportIssue(
                row, IssueKind.INVALID_MARITAL_STATUS, f"unrecognised marital status {raw!r}"
            )
        )
        return MaritalStatus.SINGLE
    return status


def _parse_intents(
    member: MemberRow, values: dict[ImportField, object]
) -> list[RelationshipIntent]:
    intents: list[RelationshipIntent] = []
    for column, relationship_type in RELATIONSHIP_FIELDS.items():
        for related_name in split_names(values.get(column)):
            intents.append(
                RelationshipIntent(
                    row=member.row,
                    member_name=member.full_name,
                    related_name=related_name,
                    type=relationship_type,
                )
            )
    return intents


def split_names(value: object) -> list[str]:
    """Comma-separated (or listed) names, trimmed, blanks discarded."""

    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        parts = [str(item) for item in value]  # pyright: ignore[reportUnknownVariableType, reportUnknownArgumentType]
    else:
        parts = str(value).split(",")
    return [part.strip() for part in parts if part.strip()]


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_year(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        year = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        year = int(value)
    else:
        text = str(value).strip()
        try:
            number = float(text)
        except ValueError:
            return None
        if not number.is_integer():
            return None
        year = int(number)
    return year if is_valid_year(year) else None


def _parse_flag(value: object) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    token = str(value).strip().lower()
    if token in TRUE_TOKENS:
        return True
    if token in FALSE_TOKENS:
        return False
    return None
