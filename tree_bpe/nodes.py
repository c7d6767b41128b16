"""
Mutable labeled ordered trees compressed by Tree-BPE.

A `LightNode` owns its children; the `parent` attribute is a plain back-reference
kept consistent by every attaching method. Any parser output exposing the
`SyntaxNode` capabilities can be converted with `LightNode.from_syntax_node`.

Functions:
    tree_size(root)              - Number of nodes in a tree
    move_tokens_to_leaves(root)  - Push every token into a dedicated leaf
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from typing import IO, Any, Protocol, runtime_checkable

from constants import INDENT_SYMBOL, TOKEN_NODE_TYPE
from utils.tree_functionals import (
    depth_first_postorder,
    depth_first_preorder,
    depth_first_preorder_with_depth,
)


@runtime_checkable
class SyntaxNode(Protocol):
    """Capabilities a parser's node must offer to be fed to Tree-BPE."""

    @property
    def type_label(self) -> str: ...

    @property
    def token(self) -> str: ...

    @property
    def children(self) -> Sequence[SyntaxNode]: ...

    @property
    def parent(self) -> SyntaxNode | None: ...

    @property
    def metadata(self) -> dict[str, Any]: ...


class LightNode:
    """
    One syntax tree element.

    `type_id` and `token_id` are filled by the interning store when a tree is
    ingested. `can_merge` excludes the node from every merge, `consumed` is set
    once the node has been fused into another one and the node is discarded.
    """

    __slots__ = (
        "token",
        "node_type",
        "parent",
        "children",
        "can_merge",
        "consumed",
        "type_id",
        "token_id",
        "metadata",
    )

    def __init__(
        self,
        token: str,
        node_type: str,
        parent: LightNode | None = None,
        children: Iterable[LightNode] | None = None,
        can_merge: bool = True,
    ) -> None:
        self.token = token
        self.node_type = node_type
        self.parent = parent
        self.children: list[LightNode] = []
        self.can_merge = can_merge
        self.consumed = False
        self.type_id: int | None = None
        self.token_id: int | None = None
        self.metadata: dict[str, Any] = {}
        if children is not None:
            self.add_children(children)

    def __repr__(self) -> str:
        if self.token:
            return f"LightNode({self.node_type!r}, token={self.token!r}, children={len(self.children)})"
        return f"LightNode({self.node_type!r}, children={len(self.children)})"

    @property
    def type_label(self) -> str:
        return self.node_type

    def is_root(self) -> bool:
        return self.parent is None

    def add_child(self, node: LightNode) -> None:
        self.children.append(node)
        node.parent = self

    def add_children(self, nodes: Iterable[LightNode]) -> None:
        for node in nodes:
            self.add_child(node)

    def set_children(self, nodes: Iterable[LightNode]) -> None:
        """Replaces the child list; the old children keep their stale parent."""
        self.children = []
        self.add_children(nodes)

    def remove_child(self, node: LightNode) -> None:
        self.children = [child for child in self.children if child is not node]
        if node.parent is self:
            node.parent = None

    def replace_child(self, old: LightNode, new: LightNode) -> None:
        """Puts `new` at the position of `old`, which is detached."""
        for i, child in enumerate(self.children):
            if child is old:
                self.children[i] = new
                new.parent = self
                old.parent = None
                return
        raise ValueError(f"{old!r} is not a child of {self!r}")

    def preorder(self) -> Iterable[LightNode]:
        return depth_first_preorder(_children, self)

    def pretty_format(self, indent: int = 0, indent_symbol: str = INDENT_SYMBOL) -> str:
        lines = []
        for node, level in depth_first_preorder_with_depth(_children, self):
            line = indent_symbol * (indent + level) + node.node_type
            if node.token:
                line += f" : {node.token}"
            lines.append(line)
        return "\n".join(lines)

    def pretty_print(
        self,
        indent: int = 0,
        indent_symbol: str = INDENT_SYMBOL,
        file: IO[str] | None = None,
    ) -> None:
        print(self.pretty_format(indent, indent_symbol), file=file or sys.stdout)

    # Conversions

    @classmethod
    def from_syntax_node(
        cls, source: SyntaxNode, parent: LightNode | None = None
    ) -> LightNode:
        """Copies any `SyntaxNode` tree; metadata dicts are shallow-copied."""
        root = cls(source.token, source.type_label, parent)
        root.metadata = dict(source.metadata)
        stack = [(root, source)]
        while stack:
            node, origin = stack.pop()
            for child_origin in origin.children:
                child = cls(child_origin.token, child_origin.type_label)
                child.metadata = dict(child_origin.metadata)
                node.add_child(child)
                stack.append((child, child_origin))
        return root

    def to_dict(self) -> dict:
        """Convert a tree to the `{"type", "string", "children"}` representation."""
        return {
            "type": self.node_type,
            "string": self.token,
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, data: dict, parent: LightNode | None = None) -> LightNode:
        """Create a tree from the `{"type", "string", "children"}` representation."""
        node = cls(data.get("string") or "", data["type"], parent)
        for child in data.get("children") or ():
            node.add_child(cls.from_dict(child, node))
        return node


def _children(node: LightNode) -> list[LightNode]:
    return node.children


def tree_size(root: LightNode | None) -> int:
    return sum(1 for _ in depth_first_preorder(_children, root))


def move_tokens_to_leaves(root: LightNode) -> None:
    """
    Gives every node carrying a token a new first child of type TOKEN_NODE
    holding the same token, so path extractors find all tokens at the leaves.
    """
    for node in list(depth_first_postorder(_children, root)):
        if node.token:
            leaf = LightNode(node.token, TOKEN_NODE_TYPE, node)
            node.children.insert(0, leaf)


__all__ = [
    "SyntaxNode",
    "LightNode",
    "tree_size",
    "move_tokens_to_leaves",
]
