"""Tree builder: flat edge list to nested generations.

Roots are members without a recorded parent (no ``child`` edge sourced at
them). Children hang below the parent their ``child`` edge points at; a child
of two parents is placed under the first parent reached. Nothing here raises:
unusable edges and cycles end up in ``TreeBuildResult.diagnostics``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kinfolk.domain.consistency import BLOCKING_KINDS, Diagnostic, DiagnosticKind, audit_edges
from kinfolk.domain.errors import ConsistencyError
from kinfolk.domain.model import RelationshipType

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from uuid import UUID

    from kinfolk.domain.model import Member, Relationship


@dataclass(slots=True, kw_only=True)
class TreeNode:
    member: Member
    spouse: Member | None = None
    spouses: list[Member] = field(default_factory=list["Member"])
    children: list[TreeNode] = field(default_factory=list["TreeNode"])
    generation: int = 0

    def walk(self) -> Iterator[TreeNode]:
        """Pre-order traversal of this node and its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(slots=True)
class TreeBuildResult:
    roots: list[TreeNode]
    diagnostics: list[Diagnostic] = field(default_factory=list[Diagnostic])

    def walk(self) -> Iterator[TreeNode]:
        for root in self.roots:
            yield from root.walk()

    def raise_for_diagnostics(self, *, kinds: Iterable[DiagnosticKind] | None = None) -> None:
        selected = set(kinds) if kinds is not None else None
        relevant = [d for d in self.diagnostics if selected is None or d.kind in selected]
        if relevant:
            raise ConsistencyError(relevant)


@dataclass(slots=True)
class _Frame:
    node: TreeNode
    pending: Iterator[UUID]


@dataclass(slots=True)
class _TreeAssembly:
    members_by_id: dict[UUID, Member]
    children_of: dict[UUID, list[UUID]]
    spouses_of: dict[UUID, list[UUID]]
    diagnostics: list[Diagnostic]
    placed: set[UUID] = field(default_factory=set)

    def build(self, root: Member) -> TreeNode:
        """Depth-first descent from ``root`` on an explicit stack.

        The stack is the current path from ``root``; a child already on it is
        reported as a cycle and not descended into.
        """
        root_node = self._node(root, 0)
        stack = [self._frame(root_node)]
        on_path = {root.id}
        while stack:
            frame = stack[-1]
            child_id = next(frame.pending, None)
            if child_id is None:
                stack.pop()
                on_path.discard(frame.node.member.id)
                continue
            if child_id in on_path:
                self._report_cycle(child_id, frame.node.member)
                continue
            if child_id in self.placed:
                continue
            child = self._node(self.members_by_id[child_id], frame.node.generation + 1)
            frame.node.children.append(child)
            stack.append(self._frame(child))
            on_path.add(child_id)
        return root_node

    def _node(self, member: Member, generation: int) -> TreeNode:
        self.placed.add(member.id)
        spouse_ids = self.spouses_of.get(member.id, [])
        spouses = [self.members_by_id[spouse_id] for spouse_id in spouse_ids]
        return TreeNode(
            member=member,
            spouse=spouses[0] if spouses else None,
            spouses=spouses,
            generation=generation,
        )

    def _frame(self, node: TreeNode) -> _Frame:
        return _Frame(node=node, pending=iter(self.children_of.get(node.member.id, [])))

    def _report_cycle(self, child_id: UUID, member: Member) -> None:
        child = self.members_by_id[child_id]
        self.diagnostics.append(
            Diagnostic(
                kind=DiagnosticKind.CYCLE,
                message=(
                    f"{child.full_name!r} is both ancestor and descendant "
                    f"of {member.full_name!r}"
                ),
                member_id=child_id,
            )
        )


def build_tree(members: Iterable[Member], edges: Iterable[Relationship]) -> TreeBuildResult:
    member_list = list(members)
    edge_list = list(edges)
    members_by_id = {member.id: member for member in member_list}

    diagnostics = audit_edges(member_list, edge_list)
    blocked = {d.edge for d in diagnostics if d.kind in BLOCKING_KINDS and d.edge is not None}
    usable = [edge for edge in edge_list if edge not in blocked]

    parent_ids_of: dict[UUID, list[UUID]] = {}
    spouses_of: dict[UUID, list[UUID]] = {}
    for edge in usable:
        if edge.type is RelationshipType.CHILD:
            parent_ids_of.setdefault(edge.source_id, []).append(edge.target_id)
        elif edge.type is RelationshipType.SPOUSE:
            _append_unique(spouses_of, edge.source_id, edge.target_id)
            _append_unique(spouses_of, edge.target_id, edge.source_id)

    children_of: dict[UUID, list[UUID]] = {}
    for member in member_list:
        for parent_id in parent_ids_of.get(member.id, []):
            _append_unique(children_of, parent_id, member.id)

    assembly = _TreeAssembly(
        members_by_id=members_by_id,
        children_of=children_of,
        spouses_of=spouses_of,
        diagnostics=diagnostics,
    )
    roots = [
        assembly.build(member)
        for member in member_list
        if member.id not in parent_ids_of
    ]
    # pure cycles have no root; surface whatever was never reached
    for member in member_list:
        if member.id not in assembly.placed:
            roots.append(assembly.build(member))

    return TreeBuildResult(roots=roots, diagnostics=assembly.diagnostics)


def _append_unique(index: dict[UUID, list[UUID]], key: UUID, value: UUID) -> None:
    values = index.setdefault(key, [])
    if value not in values:
        values.append(value)


def render_tree(result: TreeBuildResult, *, indent: str = "  ") -> str:
    """Plain-text rendering, one member per line, indented by generation."""

    lines: list[str] = []
    for node in result.walk():
        label = _label(node.member)
        if node.spouses:
            label += " + " + ", ".join(_label(spouse) for spouse in node.spouses)
        lines.append(f"{indent * node.generation}{label}")
    return "\n".join(lines)


def _label(member: Member) -> str:
    born = str(member.birth_year) if member.birth_year is not None else "?"
    if member.death_year is not None:
        years = f"{born}-{member.death_year}"
    elif member.is_deceased:
        years = f"{born}-?"
    else:
        years = born
    suffix = " [inferred]" if member.is_placeholder else ""
    return f"{member.full_name} ({years}){suffix}"
