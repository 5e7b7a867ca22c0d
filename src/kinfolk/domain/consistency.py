"""Edge-set audit: reports graph problems without raising."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from kinfolk.domain.model import Member, Relationship


class DiagnosticKind(StrEnum):
    MISSING_RECIPROCAL = "missing_reciprocal"
    CROSS_FAMILY_EDGE = "cross_family_edge"
    DANGLING_EDGE = "dangling_edge"
    SELF_EDGE = "self_edge"
    CYCLE = "cycle"


# edges carrying one of these are unusable for traversal
BLOCKING_KINDS = frozenset(
    {DiagnosticKind.CROSS_FAMILY_EDGE, DiagnosticKind.DANGLING_EDGE, DiagnosticKind.SELF_EDGE}
)


@dataclass(frozen=True, slots=True, kw_only=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    edge: Relationship | None = None
    member_id: UUID | None = None


def audit_edges(members: Iterable[Member], edges: Iterable[Relationship]) -> list[Diagnostic]:
    """Report self, dangling, cross-family and one-sided edges, one diagnostic per edge."""

    members_by_id = {member.id: member for member in members}
    edge_list = list(edges)
    edge_set = set(edge_list)
    diagnostics: list[Diagnostic] = []

    for edge in edge_list:
        if edge.is_self_edge:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.SELF_EDGE,
                    message=f"{edge.source_id} is recorded as {edge.type} of itself",
                    edge=edge,
                    member_id=edge.source_id,
                )
            )
            continue

        source = members_by_id.get(edge.source_id)
        target = members_by_id.get(edge.target_id)
        if source is None or target is None:
            missing = edge.source_id if source is None else edge.target_id
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.DANGLING_EDGE,
                    message=f"{edge.type} edge references unknown member {missing}",
                    edge=edge,
                    member_id=missing,
                )
            )
            continue

        if source.family_id != target.family_id:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.CROSS_FAMILY_EDGE,
                    message=(
                        f"{source.full_name!r} and {target.full_name!r} "
                        "belong to different families"
                    ),
                    edge=edge,
                    member_id=source.id,
                )
            )
            continue

        if edge.reciprocal() not in edge_set:
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.MISSING_RECIPROCAL,
                    message=(
                        f"{source.full_name!r} is {edge.type} of {target.full_name!r} "
                        f"but the {edge.type.reciprocal} edge is missing"
                    ),
                    edge=edge,
                    member_id=target.id,
                )
            )

    return diagnostics
