"""
Collapsing of parent/child edges into single nodes.

Merging `up -> bottom` creates a node of the merged type `up (bottom)` that
takes the place of `up`; the children of `bottom` are spliced in at the
position `bottom` had among the children of `up`. Both original nodes are
discarded.
"""

from __future__ import annotations

import logging

from constants import TOKEN_DELIMITER
from tree_bpe.edges import Edge, EdgeLedger
from tree_bpe.forest import Forest
from tree_bpe.interning import EdgeType, InterningStore
from tree_bpe.nodes import LightNode

logger = logging.getLogger(__name__)


def fuse_tokens(up_token: str, bottom_token: str, delimiter: str = TOKEN_DELIMITER) -> str:
    """Token of a merged node: the non-empty one, or both joined parent first."""
    if not up_token:
        return bottom_token
    if not bottom_token:
        return up_token
    return f"{up_token}{delimiter}{bottom_token}"


class MergeEngine:
    """Applies merges to a forest while keeping its edge ledger up to date."""

    def __init__(
        self,
        forest: Forest,
        ledger: EdgeLedger,
        store: InterningStore,
        token_delimiter: str = TOKEN_DELIMITER,
    ) -> None:
        self.forest = forest
        self.ledger = ledger
        self.store = store
        self.token_delimiter = token_delimiter

    def merge(self, edge: Edge) -> bool:
        """
        Fuses the two ends of `edge`. Returns False, leaving the forest
        untouched, when one of them was already consumed by an earlier merge.
        """
        if not edge.is_live():
            return False
        up_node, bottom_node = edge.up_node, edge.bottom_node
        up_node.consumed = True
        bottom_node.consumed = True

        type_id = self.store.record_pair(up_node.type_id, bottom_node.type_id)
        token = fuse_tokens(up_node.token, bottom_node.token, self.token_delimiter)
        merged = LightNode(token, self.store.decode_type(type_id))
        merged.type_id = type_id
        merged.token_id = self.store.record_token(token)
        merged.metadata = {**bottom_node.metadata, **up_node.metadata}

        self.ledger.remove_parent(up_node)
        self.ledger.remove_parent(bottom_node)

        children: list[LightNode] = []
        for child in up_node.children:
            if child is bottom_node:
                children.extend(bottom_node.children)
            else:
                children.append(child)

        grandparent = up_node.parent
        if grandparent is not None:
            self.ledger.remove_parent(grandparent)
            grandparent.replace_child(up_node, merged)
            self.ledger.add_parent(grandparent)
        else:
            self.forest.replace_root(up_node, merged)

        merged.set_children(children)
        self.ledger.add_parent(merged)

        up_node.children = []
        bottom_node.children = []
        bottom_node.parent = None
        return True

    def merge_edge_type(self, edge_type: EdgeType) -> int:
        """Sweeps every queued edge of `edge_type` once; returns the number of merges."""
        edges = self.ledger.take(edge_type)
        merged = sum(1 for edge in edges if self.merge(edge))
        logger.debug(f"Merged {merged} of {len(edges)} queued edges")
        return merged


__all__ = ["MergeEngine", "fuse_tokens"]
