"""Exception taxonomy for family graph operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kinfolk.domain.consistency import Diagnostic


class FamilyTreeError(Exception):
    """Base class for domain failures."""


class ValidationError(FamilyTreeError, ValueError):
    """Input violates a domain constraint (self edge, cross-family edge, bad field)."""


class NotFoundError(FamilyTreeError, LookupError):
    """A referenced member or family does not exist."""


class EdgeWriteError(FamilyTreeError):
    """The edge store rejected a write; the surrounding unit of work is rolled back."""


class ConsistencyError(FamilyTreeError):
    """Raised on request when a built tree carries diagnostics."""

    def __init__(self, diagnostics: Sequence[Diagnostic]) -> None:
        self.diagnostics = tuple(diagnostics)
        kinds = ", ".join(sorted({str(diagnostic.kind) for diagnostic in self.diagnostics}))
        super().__init__(f"{len(self.diagnostics)} consistency issue(s): {kinds}")
