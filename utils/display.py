from collections.abc import Sequence

import numpy as np

from tree_bpe import LabeledTree, MergeRecord, tree_size


def display_compressed_trees(
    compressed_trees: Sequence[LabeledTree], limit: int = 100, indent_symbol: str = "|   "
):
    for root, label in compressed_trees[:limit]:
        print("-------------------------------")
        print(f"label: {label}")
        root.pretty_print(indent_symbol=indent_symbol)
        print("-------------------------------")


def compression_ratios(
    original_sizes: Sequence[int], compressed_trees: Sequence[LabeledTree]
) -> np.ndarray:
    """Per tree ratio between the original and the compressed node counts."""
    if len(original_sizes) != len(compressed_trees):
        raise ValueError(
            f"Got {len(original_sizes)} sizes for {len(compressed_trees)} trees"
        )
    before = np.asarray(original_sizes, dtype=float)
    after = np.array([tree_size(root) for root, _ in compressed_trees], dtype=float)
    return before / after


def display_compression_info(
    original_sizes: Sequence[int], compressed_trees: Sequence[LabeledTree]
):
    if not compressed_trees:
        print("No trees to compress")
        return
    ratios = compression_ratios(original_sizes, compressed_trees)
    total_before = int(np.sum(original_sizes))
    total_after = sum(tree_size(root) for root, _ in compressed_trees)
    print(f"Nodes: {total_before} -> {total_after}")
    print(
        f"Compression ratio: mean {ratios.mean():.3f}, median {np.median(ratios):.3f}, "
        f"max {ratios.max():.3f}"
    )


def display_merge_history(history: Sequence[MergeRecord]):
    for record in history:
        print(f"Iteration {record.iteration}: {record.label} (count {record.count}, merged {record.merged})")
