"""
Incremental bookkeeping of parent/child edge types.

The frequency of an edge type is the number of parents having at least one
eligible child of that type: a parent with three children of type `A`
contributes one to its `(parent, A)` count, since a single merge sweep can
consume at most one of them. Every such child is still queued as an `Edge`, so
a sweep visits all of them and the first valid one wins.

The ledger never looks at the forest by itself; `add_parent` and
`remove_parent` are the only ways its state changes.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from tree_bpe.interning import EdgeType
from tree_bpe.nodes import LightNode

type NodePredicate = Callable[[LightNode], bool]


@dataclass(frozen=True, slots=True)
class Edge:
    """A parent and one of its children, as queued for a merge sweep."""

    up_node: LightNode
    bottom_node: LightNode

    @property
    def edge_type(self) -> EdgeType:
        return edge_type_of(self.up_node, self.bottom_node)

    def is_live(self) -> bool:
        """False once either end has been merged or the child moved elsewhere."""
        return (
            not self.up_node.consumed
            and not self.bottom_node.consumed
            and self.bottom_node.parent is self.up_node
        )


def edge_type_of(up_node: LightNode, bottom_node: LightNode) -> EdgeType:
    if up_node.type_id is None or bottom_node.type_id is None:
        raise ValueError(
            f"Edge {up_node!r} -> {bottom_node!r} has not been interned"
        )
    return up_node.type_id, bottom_node.type_id


class EdgeLedger:
    """
    Edge type counts and queued edges for the current state of a forest.

    Args:
        can_merge: Optional predicate; an edge is eligible only if it accepts
            both the parent and the child. Nodes flagged `can_merge=False` are
            never eligible.
    """

    def __init__(self, can_merge: NodePredicate | None = None) -> None:
        self._can_merge = can_merge
        # edge type -> parent -> children of that type, in registration order
        self._parents_by_type: dict[EdgeType, dict[LightNode, list[LightNode]]] = {}
        # parent -> edge types it is currently counted in
        self._types_by_parent: dict[LightNode, list[EdgeType]] = {}

    def is_eligible(self, up_node: LightNode, bottom_node: LightNode) -> bool:
        if not (up_node.can_merge and bottom_node.can_merge):
            return False
        if self._can_merge is None:
            return True
        return self._can_merge(up_node) and self._can_merge(bottom_node)

    def add_parent(self, node: LightNode) -> None:
        """Counts `node` once for every edge type among its eligible children."""
        if node in self._types_by_parent:
            self.remove_parent(node)
        if not node.children or not node.can_merge:
            return

        groups: dict[EdgeType, list[LightNode]] = {}
        for child in node.children:
            if self.is_eligible(node, child):
                groups.setdefault(edge_type_of(node, child), []).append(child)
        if not groups:
            return

        for edge_type, children in groups.items():
            self._parents_by_type.setdefault(edge_type, {})[node] = children
        self._types_by_parent[node] = list(groups)

    def remove_parent(self, node: LightNode) -> None:
        """Withdraws everything `add_parent(node)` registered."""
        for edge_type in self._types_by_parent.pop(node, ()):
            parents = self._parents_by_type.get(edge_type)
            if parents is None:
                continue
            parents.pop(node, None)
            if not parents:
                del self._parents_by_type[edge_type]

    def add_tree(self, root: LightNode) -> None:
        for node in root.preorder():
            self.add_parent(node)

    def add_forest(self, roots: Iterable[LightNode]) -> None:
        for root in roots:
            self.add_tree(root)

    def take(self, edge_type: EdgeType) -> list[Edge]:
        """
        Removes `edge_type` from the ledger and returns its queued edges,
        parent by parent in registration order.
        """
        parents = self._parents_by_type.pop(edge_type, {})
        edges = []
        for parent, children in parents.items():
            registered = self._types_by_parent.get(parent)
            if registered is not None:
                registered.remove(edge_type)
                if not registered:
                    del self._types_by_parent[parent]
            edges.extend(Edge(parent, child) for child in children)
        return edges

    def count(self, edge_type: EdgeType) -> int:
        return len(self._parents_by_type.get(edge_type, ()))

    def counts(self) -> Iterator[tuple[EdgeType, int]]:
        for edge_type, parents in self._parents_by_type.items():
            yield edge_type, len(parents)

    def max_entry(
        self, tie_break: Callable[[EdgeType], object] | None = None
    ) -> tuple[EdgeType, int] | None:
        """
        The most frequent edge type and its count, or None if nothing is
        mergeable. Among equal counts the smallest `tie_break(edge_type)` wins,
        by default the smallest pair of type ids.
        """
        if not self._parents_by_type:
            return None
        key = tie_break or (lambda edge_type: edge_type)
        best = min(
            self._parents_by_type.items(),
            key=lambda item: (-len(item[1]), key(item[0])),
        )
        return best[0], len(best[1])

    def clear(self) -> None:
        self._parents_by_type.clear()
        self._types_by_parent.clear()

    def __contains__(self, edge_type: object) -> bool:
        return edge_type in self._parents_by_type

    def __len__(self) -> int:
        return len(self._parents_by_type)


__all__ = ["Edge", "EdgeLedger", "NodePredicate", "edge_type_of"]
