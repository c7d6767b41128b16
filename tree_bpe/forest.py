"""
Ordered collection of labeled roots under compression.

Labels are opaque; when a root is merged away its successor takes its
position and its label.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Generic, TypeVar

from tree_bpe.nodes import LightNode, tree_size

Label = TypeVar("Label")

type LabeledTree[Label] = tuple[LightNode, Label | None]


class Forest(Generic[Label]):
    def __init__(
        self, roots: Sequence[LightNode], labels: Sequence[Label | None] | None = None
    ) -> None:
        if labels is None or len(labels) == 0:
            labels = [None] * len(roots)
        if len(labels) != len(roots):
            raise ValueError(
                f"Got {len(labels)} labels for {len(roots)} roots"
            )
        self._roots: list[LightNode] = list(roots)
        self._labels: list[Label | None] = list(labels)
        self._position: dict[LightNode, int] = {}
        for i, root in enumerate(self._roots):
            if root in self._position:
                raise ValueError(f"Root {root!r} appears twice in the forest")
            self._position[root] = i

    @property
    def roots(self) -> list[LightNode]:
        return list(self._roots)

    def label_of(self, root: LightNode) -> Label | None:
        return self._labels[self._position[root]]

    def replace_root(self, old: LightNode, new: LightNode) -> None:
        try:
            i = self._position.pop(old)
        except KeyError:
            raise ValueError(f"{old!r} is not a root of this forest") from None
        self._roots[i] = new
        self._position[new] = i
        new.parent = None

    def size(self) -> int:
        return sum(tree_size(root) for root in self._roots)

    def labeled_trees(self) -> list[LabeledTree[Label]]:
        return list(zip(self._roots, self._labels))

    def __iter__(self) -> Iterator[LabeledTree[Label]]:
        return iter(zip(self._roots, self._labels))

    def __len__(self) -> int:
        return len(self._roots)


__all__ = ["Forest", "Label", "LabeledTree"]
