"""
Compress raw syntax trees with Tree-BPE.

The first `--input` is used to fit the merges (unless `--load-sequence` is
given), every following input is transformed with the same merges:

    python main.py --input train/ --input valid/ --num-merges 200 --save-sequence merges.json
"""

import argparse
import logging
import os

from constants import NUM_MERGES, TOKEN_DELIMITER
from tree_bpe import TreeBPE, move_tokens_to_leaves, tree_size
from utils.display import (
    display_compressed_trees,
    display_compression_info,
    display_merge_history,
)
from utils.loader import load_forest, write_json_trees

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compress syntax trees with Tree-BPE")
    parser.add_argument(
        "--input",
        action="append",
        required=True,
        help="File or directory of JSON lines trees; can be repeated",
    )
    parser.add_argument("--output", help="Directory where compressed trees are written")
    parser.add_argument(
        "--num-merges", type=int, default=NUM_MERGES, help="Number of merges to perform"
    )
    parser.add_argument(
        "--token-delimiter", default=TOKEN_DELIMITER, help="Joins merged tokens"
    )
    parser.add_argument("--save-sequence", help="Write the learnt merges to this JSON file")
    parser.add_argument(
        "--load-sequence", help="Replay merges from this JSON file instead of fitting"
    )
    parser.add_argument(
        "--move-tokens", action="store_true", help="Move tokens to leaves after compression"
    )
    parser.add_argument("--show", type=int, default=0, help="Number of trees to print")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> TreeBPE:
    tree_bpe: TreeBPE[str] = TreeBPE(args.num_merges, token_delimiter=args.token_delimiter)
    if args.load_sequence:
        tree_bpe.load_sequence(args.load_sequence)

    for i, path in enumerate(args.input):
        logger.info(f"Parsing trees in {path}")
        roots, labels = load_forest(path)
        logger.info(f"Parsed {len(roots)} trees")
        sizes = [tree_size(root) for root in roots]

        if i == 0 and not args.load_sequence:
            compressed, _ = tree_bpe.fit(roots, labels)
            display_merge_history(tree_bpe.history)
        else:
            compressed = tree_bpe.transform(roots, labels)
        logger.info("Compressed trees")
        display_compression_info(sizes, compressed)

        if args.move_tokens:
            for root, _ in compressed:
                move_tokens_to_leaves(root)
        if args.show:
            display_compressed_trees(compressed, args.show)
        if args.output:
            os.makedirs(args.output, exist_ok=True)
            name = os.path.basename(os.path.normpath(path)).split(".")[0] or f"input_{i}"
            target = os.path.join(args.output, f"{name}.jsonl.gz")
            write_json_trees(target, [root for root, _ in compressed])
            logger.info(f"Wrote {len(compressed)} trees to {target}")

    if args.save_sequence:
        tree_bpe.save_sequence(args.save_sequence)
        logger.info(f"Saved {len(tree_bpe.merge_sequence)} merges to {args.save_sequence}")
    return tree_bpe


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s | %(message)s",
    )
    run(args)


if __name__ == "__main__":
    main()
