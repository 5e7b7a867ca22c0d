"""Bulk import of members and name-based relationships."""

from __future__ import annotations

from .context import ResolutionContext
from .headers import HEADER_ALIASES, HeaderMap, ImportField, header_token, resolve_headers
from .normalization import (
    ImportIssue,
    IssueKind,
    MemberRow,
    NormalizedImport,
    RelationshipIntent,
    normalize,
    split_names,
)
from .runner import ImportResult, SkippedRelationship, import_family, import_rows

__all__ = [
    "HEADER_ALIASES",
    "HeaderMap",
    "ImportField",
    "ImportIssue",
    "ImportResult",
    "IssueKind",
    "MemberRow",
    "NormalizedImport",
    "RelationshipIntent",
    "ResolutionContext",
    "SkippedRelationship",
    "header_token",
    "import_family",
    "import_rows",
    "normalize",
    "resolve_headers",
    "split_names",
]
