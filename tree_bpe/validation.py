"""
Fail-fast checks of the forest contract: finite, acyclic, parent-consistent.
"""

from collections.abc import Sequence

from tree_bpe.nodes import LightNode


def validate_tree(root: LightNode, seen: set[int] | None = None) -> int:
    """
    Raises ValueError if `root` is not a proper tree, or shares nodes with
    trees already recorded in `seen`. Returns the number of nodes.
    """
    if root.parent is not None:
        raise ValueError(f"Root {root!r} has a parent ({root.parent!r})")
    seen = set() if seen is None else seen
    size = 0
    stack = [root]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            raise ValueError(f"{node!r} is reachable twice (cycle or shared subtree)")
        seen.add(id(node))
        size += 1
        for child in node.children:
            if child.parent is not node:
                raise ValueError(
                    f"{child!r} is a child of {node!r} but its parent is {child.parent!r}"
                )
            stack.append(child)
    return size


def validate_forest(roots: Sequence[LightNode], labels: Sequence | None = None) -> int:
    """Checks every tree of a forest and the label count; returns the node count."""
    if labels and len(labels) != len(roots):
        raise ValueError(f"Got {len(labels)} labels for {len(roots)} roots")
    seen: set[int] = set()
    return sum(validate_tree(root, seen) for root in roots)


__all__ = ["validate_forest", "validate_tree"]
