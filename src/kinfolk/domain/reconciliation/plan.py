"""Result types shared by reconciliation callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(slots=True, frozen=True)
class ReconcileResult:
    """Edge diff produced by one reconciliation call (reciprocals included)."""

    member_ids: tuple[UUID, ...]
    added: int
    removed: int
    written: int

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)
