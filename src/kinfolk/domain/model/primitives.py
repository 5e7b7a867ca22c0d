"""Domain primitives: scalar aliases and year bounds."""

from __future__ import annotations

from typing import Final
from uuid import UUID

type MemberId = UUID
type FamilyId = UUID
type Year = int

MIN_YEAR: Final[int] = 1000
MAX_YEAR: Final[int] = 2100
FALLBACK_BIRTH_YEAR_BASE: Final[int] = 1970
UNKNOWN_LIVING_PLACE: Final[str] = "Unknown"


def is_valid_year(year: int) -> bool:
    return MIN_YEAR <= year <= MAX_YEAR


def normalize_name(name: str) -> str:
    """Comparison form of a person's name (trimmed, lowercased)."""
    return name.strip().lower()
