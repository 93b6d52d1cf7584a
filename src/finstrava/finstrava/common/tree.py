"""Parent/child hierarchy helpers.

Departments and product categories come from the database as flat lists with
``parent_id`` links; these functions rebuild the hierarchy without touching
the database. Items only need ``id``, ``parent_id``, ``name`` and
``is_active``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterable, Optional, Protocol, Sequence, TypeVar


class Hierarchical(Protocol):
    id: str
    parent_id: Optional[str]
    name: str
    is_active: bool


T = TypeVar("T", bound=Hierarchical)


@dataclass
class TreeNode(Generic[T]):
    item: T
    level: int = 0
    children: list["TreeNode[T]"] = field(default_factory=list)


@dataclass(frozen=True)
class TreePath(Generic[T]):
    item: T
    level: int
    path: str


def build_tree(items: Sequence[T]) -> list[TreeNode[T]]:
    """Nest items under their parents.

    An item whose parent is missing from the list becomes a root, as does
    any item whose chain of parents loops back on itself.
    Input order is kept among siblings.
    """
    nodes = {i.id: TreeNode(item=i) for i in items}
    top: list[TreeNode[T]] = []
    for i in items:
        node = nodes[i.id]
        parent = nodes.get(i.parent_id) if i.parent_id else None
        if parent is None or _in_cycle(i.id, items):
            top.append(node)
        else:
            parent.children.append(node)

    def assign(level_nodes: Iterable[TreeNode[T]], level: int) -> None:
        for node in level_nodes:
            node.level = level
            assign(node.children, level + 1)

    assign(top, 0)
    return top


def _in_cycle(item_id: str, items: Sequence[Hierarchical]) -> bool:
    parents = {i.id: i.parent_id for i in items}
    seen = {item_id}
    current = parents.get(item_id)
    while current and current in parents:
        if current in seen:
            return True
        seen.add(current)
        current = parents.get(current)
    return False


def flatten(items: Sequence[T]) -> list[TreePath[T]]:
    """Depth-first list with "Parent > Child" paths, for select boxes."""
    result: list[TreePath[T]] = []

    def walk(nodes: Iterable[TreeNode[T]], prefix: str) -> None:
        for node in nodes:
            path = f"{prefix} > {node.item.name}" if prefix else node.item.name
            result.append(TreePath(item=node.item, level=node.level, path=path))
            walk(node.children, path)

    walk(build_tree(items), "")
    return result


def roots(items: Iterable[T]) -> list[T]:
    return [i for i in items if not i.parent_id and i.is_active]


def children_of(items: Iterable[T], parent_id: str) -> list[T]:
    return [i for i in items if i.parent_id == parent_id]


def active(items: Iterable[T]) -> list[T]:
    return [i for i in items if i.is_active]


def descendants_of(items: Sequence[Hierarchical], item_id: str) -> set[str]:
    found: set[str] = set()
    pending = [item_id]
    while pending:
        current = pending.pop()
        for i in items:
            if i.parent_id == current and i.id not in found:
                found.add(i.id)
                pending.append(i.id)
    return found


def can_be_parent(items: Sequence[Hierarchical], item_id: str, candidate_id: Optional[str]) -> bool:
    """Whether ``candidate_id`` may become the parent of ``item_id`` without a cycle."""
    if not candidate_id:
        return True
    if candidate_id == item_id:
        return False
    return candidate_id not in descendants_of(items, item_id)
