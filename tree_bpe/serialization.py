"""
Persistence of merge sequences.

A merge is stored through the expanded forms of its two types (base labels,
or nested `[parent, child]` lists for merged types), so a sequence saved by one
process can be loaded into the interning store of another. The decoded label
is written alongside for readability only.

    {"version": 1,
     "merges": [{"parent": "Root", "child": "A", "label": "Root (A)"}, ...]}
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence

from constants import SEQUENCE_FORMAT_VERSION
from tree_bpe.interning import EdgeType, InterningStore


def dump_merge_sequence(sequence: Sequence[EdgeType], store: InterningStore) -> dict:
    return {
        "version": SEQUENCE_FORMAT_VERSION,
        "merges": [
            {
                "parent": store.expand_type(parent_type),
                "child": store.expand_type(child_type),
                "label": store.describe_edge((parent_type, child_type)),
            }
            for parent_type, child_type in sequence
        ],
    }


def load_merge_sequence(data: dict, store: InterningStore) -> list[EdgeType]:
    """Interns every merge of `data` into `store` and returns the sequence."""
    if not isinstance(data, dict) or "merges" not in data:
        raise ValueError("Not a merge sequence: missing 'merges'")
    version = data.get("version")
    if version != SEQUENCE_FORMAT_VERSION:
        raise ValueError(f"Unsupported merge sequence version: {version!r}")

    sequence = []
    for i, merge in enumerate(data["merges"]):
        try:
            parent, child = merge["parent"], merge["child"]
        except (KeyError, TypeError):
            raise ValueError(f"Malformed merge n°{i}: {merge!r}") from None
        sequence.append((store.intern_expression(parent), store.intern_expression(child)))
    return sequence


def save_merge_sequence(
    path: str | os.PathLike, sequence: Sequence[EdgeType], store: InterningStore
) -> None:
    with open(path, "w", encoding="utf-8") as file:
        json.dump(dump_merge_sequence(sequence, store), file, indent=2)


def read_merge_sequence(path: str | os.PathLike, store: InterningStore) -> list[EdgeType]:
    with open(path, "r", encoding="utf-8") as file:
        data = json.load(file)
    return load_merge_sequence(data, store)


__all__ = [
    "dump_merge_sequence",
    "load_merge_sequence",
    "save_merge_sequence",
    "read_merge_sequence",
]
