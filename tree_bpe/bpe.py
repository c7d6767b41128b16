"""
Tree-BPE: byte-pair encoding over tree topology.

`fit` greedily merges the most frequent parent/child edge type, `num_merges`
times at most, and records the chosen edge types. `transform` replays a
recorded sequence on another forest without looking at its statistics, so
every pattern of the sequence gets exactly the same treatment.

Example:
    >>> bpe = TreeBPE(num_merges=50)
    >>> compressed, sequence = bpe.fit(train_roots, train_labels)
    >>> compressed_test = bpe.transform(test_roots, test_labels)

Roots are mutated in place; a root merged away is replaced in the returned
forest by the node it was merged into, keeping its label.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from typing import Generic

from constants import NON_MERGEABLE_TYPES, NUM_MERGES, TOKEN_DELIMITER
from tree_bpe.edges import EdgeLedger, NodePredicate
from tree_bpe.forest import Forest, Label, LabeledTree
from tree_bpe.interning import EdgeType, InterningStore
from tree_bpe.merging import MergeEngine
from tree_bpe.nodes import LightNode
from tree_bpe.serialization import read_merge_sequence, save_merge_sequence
from tree_bpe.validation import validate_forest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeRecord:
    """Diagnostics of one iteration of a fit or transform run."""

    iteration: int
    edge_type: EdgeType
    label: str
    count: int  # parents with the edge type when the sweep started
    merged: int  # merges actually performed


class TreeBPE(Generic[Label]):
    """
    Args:
        num_merges: Merge budget of `fit`.
        non_mergeable_types: Node types never merged, e.g. block statements.
        can_merge: Optional predicate a node must satisfy to be merged.
        token_delimiter: Joins the tokens of two merged nodes.
        validate: Check that inputs are proper forests before compressing.
    """

    def __init__(
        self,
        num_merges: int = NUM_MERGES,
        *,
        non_mergeable_types: Collection[str] = NON_MERGEABLE_TYPES,
        can_merge: NodePredicate | None = None,
        token_delimiter: str = TOKEN_DELIMITER,
        validate: bool = True,
    ) -> None:
        if num_merges < 0:
            raise ValueError("num_merges must be non-negative")
        self.num_merges = num_merges
        self.non_mergeable_types = frozenset(non_mergeable_types)
        self.token_delimiter = token_delimiter
        self.validate = validate
        self.interning = InterningStore()
        self.merge_sequence: list[EdgeType] = []
        self.history: list[MergeRecord] = []
        self._ledger = EdgeLedger(can_merge)
        self._fitted = False

    @property
    def merge_labels(self) -> list[str]:
        """The merge sequence as decoded "Parent (Child)" labels."""
        return [self.interning.describe_edge(edge_type) for edge_type in self.merge_sequence]

    @property
    def num_merged_edges(self) -> int:
        return sum(record.merged for record in self.history)

    def fit(
        self, roots: Sequence[LightNode], labels: Sequence[Label | None] | None = None
    ) -> tuple[list[LabeledTree[Label]], list[EdgeType]]:
        """Learns a merge sequence on `roots` and returns the compressed forest with it."""
        logger.info(f"Fitting TreeBPE with {self.num_merges} merges")
        self.interning = InterningStore()
        self.merge_sequence = []
        forest, engine = self._prepare(roots, labels)
        self._fitted = True

        for iteration in range(self.num_merges):
            entry = self._ledger.max_entry(self.interning.describe_edge)
            if entry is None:
                logger.info(f"Stopped at {iteration} because merged everything")
                break
            edge_type, count = entry
            label = self.interning.describe_edge(edge_type)
            logger.debug(f"Iteration {iteration}: merging {label} with count {count}")
            self.merge_sequence.append(edge_type)
            merged = engine.merge_edge_type(edge_type)
            self.history.append(MergeRecord(iteration, edge_type, label, count, merged))
            logger.debug(f"Actually merged {merged}")

        logger.info(
            f"Performed {len(self.merge_sequence)} of {self.num_merges} requested merges "
            f"({self.num_merged_edges} edges collapsed)"
        )
        return forest.labeled_trees(), list(self.merge_sequence)

    def fit_transform(
        self, roots: Sequence[LightNode], labels: Sequence[Label | None] | None = None
    ) -> list[LabeledTree[Label]]:
        return self.fit(roots, labels)[0]

    def transform(
        self,
        roots: Sequence[LightNode],
        labels: Sequence[Label | None] | None = None,
        merge_sequence: Sequence[EdgeType] | None = None,
    ) -> list[LabeledTree[Label]]:
        """
        Replays `merge_sequence` (by default the one learnt by `fit`) on `roots`.
        Edge types absent from the forest are no-ops. Identifiers must come
        from this model's interning store.
        """
        if merge_sequence is None:
            if not self._fitted:
                raise ValueError("TreeBPE is not fitted and no merge sequence was given")
            merge_sequence = self.merge_sequence
        for edge_type in merge_sequence:
            if any(self.interning.decode_type(type_id) is None for type_id in edge_type):
                raise ValueError(f"Edge type {edge_type} is unknown to the interning store")

        logger.info(f"Transforming with {len(merge_sequence)} merges")
        forest, engine = self._prepare(roots, labels)
        for iteration, edge_type in enumerate(merge_sequence):
            label = self.interning.describe_edge(edge_type)
            count = self._ledger.count(edge_type)
            merged = engine.merge_edge_type(edge_type)
            self.history.append(MergeRecord(iteration, edge_type, label, count, merged))
            logger.debug(
                f"Iteration {iteration} of {len(merge_sequence)}: merged {merged} edges of {label}"
            )
        return forest.labeled_trees()

    def save_sequence(self, path: str | os.PathLike) -> None:
        save_merge_sequence(path, self.merge_sequence, self.interning)

    def load_sequence(self, path: str | os.PathLike) -> list[EdgeType]:
        """Replaces the merge sequence by one saved with `save_sequence`."""
        self.merge_sequence = read_merge_sequence(path, self.interning)
        self._fitted = True
        logger.info(f"Loaded {len(self.merge_sequence)} merges from {path}")
        return list(self.merge_sequence)

    def _prepare(
        self, roots: Sequence[LightNode], labels: Sequence[Label | None] | None
    ) -> tuple[Forest[Label], MergeEngine]:
        if self.validate:
            validate_forest(roots, labels)
        self._ledger.clear()
        self.history = []
        forest: Forest[Label] = Forest(roots, labels)
        for root in forest.roots:
            self._ingest(root)
        self._ledger.add_forest(forest.roots)
        logger.debug(f"Collected {len(self._ledger)} edge types over {len(forest)} trees")
        engine = MergeEngine(forest, self._ledger, self.interning, self.token_delimiter)
        return forest, engine

    def _ingest(self, root: LightNode) -> None:
        for node in root.preorder():
            node.type_id = self.interning.record_type(node.node_type)
            node.token_id = self.interning.record_token(node.token)
            node.consumed = False
            if node.node_type in self.non_mergeable_types:
                node.can_merge = False


__all__ = ["MergeRecord", "TreeBPE"]
