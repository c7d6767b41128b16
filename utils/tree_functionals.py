"""
Functionals for tree structures. Children are supplied through an `after` function,
so the same traversals serve any node representation.
"""

from collections import deque
from typing import Callable, Iterable, Iterator, TypeVar

T = TypeVar("T")


# Traversals
def breadth_first_preorder(
    after: Callable[[T], Iterable[T]], root: T | None
) -> Iterator[T]:
    """
    Performs a breadth-first preorder traversal of an object, yielding all instances level by level.

    Args:
        after: The function which returns the children of the current object
        root: The root object to traverse.

    Yields:
        T: Each instance in breadth-first preorder.
    """
    if root is None:
        return
    queue = deque([root])
    while queue:
        current = queue.popleft()
        yield current
        queue.extend(after(current))


def depth_first_preorder(
    after: Callable[[T], Iterable[T]], root: T | None
) -> Iterator[T]:
    """
    Performs a depth-first preorder traversal of an object, yielding the
    current object before its children.

    Args:
        after: The function which returns the children of the current object
        root: The root object to traverse.

    Yields:
        T: Each instance in depth-first preorder.
    """
    if root is None:
        return
    stack = [root]
    while stack:
        current = stack.pop()
        yield current
        # Push in reverse to process left-to-right
        stack.extend(reversed(list(after(current))))


def depth_first_postorder(
    after: Callable[[T], Iterable[T]], root: T | None
) -> Iterator[T]:
    """
    Performs a depth-first postorder traversal of an object, yielding
    children before the current object.

    The children of a node are read when the node is first reached, so the
    caller may mutate an already yielded subtree.
    """
    if root is None:
        return
    stack: list[tuple[T, bool]] = [(root, False)]
    while stack:
        current, expanded = stack.pop()
        if expanded:
            yield current
            continue
        stack.append((current, True))
        stack.extend((child, False) for child in reversed(list(after(current))))


def depth_first_preorder_with_depth(
    after: Callable[[T], Iterable[T]], root: T | None
) -> Iterator[tuple[T, int]]:
    """Depth-first preorder yielding `(node, depth)` pairs, the root at depth 0."""
    if root is None:
        return
    stack = [(root, 0)]
    while stack:
        current, level = stack.pop()
        yield current, level
        stack.extend((child, level + 1) for child in reversed(list(after(current))))
