"""
Tree-BPE: byte-pair encoding over syntax trees.

This package compresses forests of parsed source code into smaller trees with a
consistent vocabulary of merged node types, to be used as features for code
embedding models. Like BPE over token streams, the most frequent parent/child
pattern is repeatedly collapsed into a single node; the sequence of collapsed
patterns is recorded so that it can be replayed on other corpora.

The package consists of:
- LightNode, the mutable tree every stage works on
- InterningStore, integer identifiers for tokens and (merged) types
- EdgeLedger, incremental counts of parent/child edge types
- MergeEngine, collapsing of edges in place
- TreeBPE, the fit/transform loop

Example Usage:
    >>> from tree_bpe import LightNode, TreeBPE
    >>> root = LightNode("", "Root", children=[LightNode("x", "A"), LightNode("y", "A")])
    >>> (tree, label), = TreeBPE(num_merges=1).fit_transform([root])
    >>> tree.node_type, tree.token
    ('Root (A)', 'x')
"""

from __future__ import annotations

# Tree model
from tree_bpe.nodes import (
    LightNode,
    SyntaxNode,
    move_tokens_to_leaves,
    tree_size,
)

# Interning
from tree_bpe.interning import (
    EdgeType,
    Interner,
    InterningStore,
    TypeExpression,
)

# Edge bookkeeping and merging
from tree_bpe.edges import Edge, EdgeLedger, edge_type_of
from tree_bpe.forest import Forest, LabeledTree
from tree_bpe.merging import MergeEngine, fuse_tokens

# Fit / transform
from tree_bpe.bpe import MergeRecord, TreeBPE

# Persistence and checks
from tree_bpe.serialization import (
    dump_merge_sequence,
    load_merge_sequence,
    read_merge_sequence,
    save_merge_sequence,
)
from tree_bpe.validation import validate_forest, validate_tree

__all__ = [
    "LightNode",
    "SyntaxNode",
    "move_tokens_to_leaves",
    "tree_size",
    "EdgeType",
    "Interner",
    "InterningStore",
    "TypeExpression",
    "Edge",
    "EdgeLedger",
    "edge_type_of",
    "Forest",
    "LabeledTree",
    "MergeEngine",
    "fuse_tokens",
    "MergeRecord",
    "TreeBPE",
    "dump_merge_sequence",
    "load_merge_sequence",
    "read_merge_sequence",
    "save_merge_sequence",
    "validate_forest",
    "validate_tree",
]
