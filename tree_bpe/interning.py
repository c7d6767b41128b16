"""
Interning of tokens, type labels and merged types.

Identifiers are handed out in first-seen order and never reused, so a merge
sequence recorded as identifiers stays valid for as long as its store lives.
Base types and merged types share one identifier space: a node's `type_id`
designates a single type whichever table recorded it.

Classes:
    Interner[K]     - Append-only key <-> id table
    InterningStore  - Tokens, base types and (parent, child) type pairs
"""

from __future__ import annotations

from collections.abc import Iterator
from itertools import count
from typing import Generic, Hashable, TypeVar

from constants import TYPE_CLOSE, TYPE_OPEN

K = TypeVar("K", bound=Hashable)

type EdgeType = tuple[int, int]
type TypeExpression = str | list[TypeExpression]


class Interner(Generic[K]):
    """
    Append-only mapping between keys and small integer identifiers.

    Example:
        >>> tokens = Interner[str]()
        >>> tokens.record("foo"), tokens.record("bar"), tokens.record("foo")
        (0, 1, 0)
        >>> tokens.lookup(1)
        'bar'
    """

    def __init__(self, ids: Iterator[int] | None = None) -> None:
        self._ids = ids if ids is not None else count()
        self._id_by_key: dict[K, int] = {}
        self._key_by_id: dict[int, K] = {}

    def record(self, key: K) -> int:
        """Returns the id of `key`, allocating the next one on first sight."""
        found = self._id_by_key.get(key)
        if found is not None:
            return found
        new_id = next(self._ids)
        self._id_by_key[key] = new_id
        self._key_by_id[new_id] = key
        return new_id

    def lookup(self, identifier: int) -> K | None:
        return self._key_by_id.get(identifier)

    def get_id(self, key: K) -> int | None:
        return self._id_by_key.get(key)

    def items(self) -> Iterator[tuple[int, K]]:
        """Yields `(id, key)` pairs in allocation order."""
        return iter(self._key_by_id.items())

    def __contains__(self, key: object) -> bool:
        return key in self._id_by_key

    def __len__(self) -> int:
        return len(self._id_by_key)


class InterningStore:
    """Interning tables for one Tree-BPE model."""

    def __init__(self) -> None:
        type_ids = count()
        self.tokens: Interner[str] = Interner()
        self.types: Interner[str] = Interner(type_ids)
        self.type_pairs: Interner[EdgeType] = Interner(type_ids)
        self._labels: dict[int, str] = {}

    def record_token(self, token: str) -> int:
        return self.tokens.record(token)

    def record_type(self, label: str) -> int:
        type_id = self.types.record(label)
        self._labels.setdefault(type_id, label)
        return type_id

    def record_pair(self, parent_type: int, child_type: int) -> int:
        """Returns the id of the type obtained by merging `child_type` into `parent_type`."""
        for type_id in (parent_type, child_type):
            if type_id not in self._labels:
                raise ValueError(f"Unknown type id {type_id}")
        type_id = self.type_pairs.record((parent_type, child_type))
        if type_id not in self._labels:
            self._labels[type_id] = self.describe_edge((parent_type, child_type))
        return type_id

    def is_composite(self, type_id: int) -> bool:
        return self.type_pairs.lookup(type_id) is not None

    def decode_type(self, type_id: int) -> str | None:
        """
        Human readable label of a type: base labels as recorded, merged types
        as "Parent (Child)" with the constituents decoded the same way.
        """
        return self._labels.get(type_id)

    def describe_edge(self, edge_type: EdgeType) -> str:
        parent_type, child_type = edge_type
        return f"{self._labels[parent_type]}{TYPE_OPEN}{self._labels[child_type]}{TYPE_CLOSE}"

    def expand_type(self, type_id: int) -> TypeExpression:
        """
        Store independent form of a type: the base label, or a
        `[parent, child]` list of expanded constituents.
        """
        pair = self.type_pairs.lookup(type_id)
        if pair is None:
            label = self.types.lookup(type_id)
            if label is None:
                raise ValueError(f"Unknown type id {type_id}")
            return label
        return [self.expand_type(pair[0]), self.expand_type(pair[1])]

    def intern_expression(self, expression: TypeExpression) -> int:
        """Inverse of `expand_type`, recording whatever is missing."""
        if isinstance(expression, str):
            return self.record_type(expression)
        if isinstance(expression, (list, tuple)) and len(expression) == 2:
            parent, child = expression
            return self.record_pair(
                self.intern_expression(parent), self.intern_expression(child)
            )
        raise ValueError(f"Malformed type expression: {expression!r}")

    def __repr__(self) -> str:
        return (
            f"InterningStore(tokens={len(self.tokens)}, types={len(self.types)}, "
            f"merged_types={len(self.type_pairs)})"
        )


__all__ = ["EdgeType", "TypeExpression", "Interner", "InterningStore"]
