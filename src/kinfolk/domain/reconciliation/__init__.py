"""Relationship reconciliation: symmetric full-replace writes of member edges."""

from __future__ import annotations

from .engine import RelationshipReconciler
from .locks import DEFAULT_MEMBER_LOCKS, MemberLocks
from .plan import ReconcileResult

__all__ = [
    "DEFAULT_MEMBER_LOCKS",
    "MemberLocks",
    "ReconcileResult",
    "RelationshipReconciler",
]
