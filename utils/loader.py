"""
Module used to import raw syntax trees

Trees are stored as JSON lines, optionally gzipped, one tree per line:
    {"type": "module", "string": "", "children": [...]}
"""

import gzip
import json
import logging
import os
from collections.abc import Iterator

from constants import NON_MERGEABLE_TYPES, TYPE_FILTER
from localtypes import JsonTree
from tree_bpe import LightNode

logger = logging.getLogger(__name__)

TREE_FILE_SUFFIXES = (".jsonl.gz", ".jsonl", ".json.gz")


def is_docstring(raw: JsonTree, parent: LightNode | None) -> bool:
    """An expression statement made of a string, first level of a function body."""
    children = raw.get("children") or []
    return (
        raw["type"] == "expression_statement"
        and parent is not None
        and parent.node_type == "block"
        and parent.parent is not None
        and parent.parent.node_type == "function_definition"
        and bool(children)
        and children[0]["type"] == "string"
    )


def should_filter(raw: JsonTree, parent: LightNode | None) -> bool:
    return TYPE_FILTER.fullmatch(raw["type"]) is None or is_docstring(raw, parent)


def json_to_light_tree(raw: JsonTree, parent: LightNode | None = None) -> LightNode | None:
    """
    Converts a raw tree, dropping filtered subtrees. Returns None if the
    root itself is filtered.
    """
    if should_filter(raw, parent):
        return None
    node_type = raw["type"]
    root = LightNode(
        raw.get("string") or "",
        node_type,
        parent,
        can_merge=node_type not in NON_MERGEABLE_TYPES,
    )
    stack = [(root, raw)]
    while stack:
        node, origin = stack.pop()
        for child_raw in origin.get("children") or ():
            if should_filter(child_raw, node):
                continue
            child_type = child_raw["type"]
            child = LightNode(
                child_raw.get("string") or "",
                child_type,
                can_merge=child_type not in NON_MERGEABLE_TYPES,
            )
            node.add_child(child)
            stack.append((child, child_raw))
    return root


def open_tree_file(path: str, mode: str = "r"):
    if path.endswith(".gz"):
        return gzip.open(path, mode + "t", encoding="utf-8")
    return open(path, mode, encoding="utf-8")


def read_json_trees(path: str) -> Iterator[LightNode]:
    """Yields the non-filtered trees of a JSON lines file."""
    logger.info(f"Reading {os.path.basename(path)}")
    with open_tree_file(path) as file:
        for line_number, line in enumerate(file, start=1):
            if not line.strip():
                continue
            try:
                raw = json.loads(line)
            except json.JSONDecodeError as error:
                raise ValueError(f"{path}:{line_number}: invalid JSON ({error.msg})") from error
            if raw is None:
                continue
            tree = json_to_light_tree(raw)
            if tree is not None:
                yield tree


def collect_tree_files(path: str) -> list[str]:
    """`path` itself if it is a file, else the tree files below it, sorted."""
    if os.path.isfile(path):
        return [path]
    if not os.path.isdir(path):
        raise FileNotFoundError(path)
    files = []
    for directory, _, names in os.walk(path):
        files.extend(
            os.path.join(directory, name)
            for name in names
            if name.endswith(TREE_FILE_SUFFIXES)
        )
    return sorted(files)


def load_forest(path: str) -> tuple[list[LightNode], list[str]]:
    """Reads every tree below `path`; each tree is labeled with its file and line rank."""
    roots: list[LightNode] = []
    labels: list[str] = []
    for file_path in collect_tree_files(path):
        for i, tree in enumerate(read_json_trees(file_path)):
            roots.append(tree)
            labels.append(f"{file_path}:{i}")
    return roots, labels


def write_json_trees(path: str, roots: list[LightNode]) -> None:
    """Writes trees in the format read by `read_json_trees`."""
    with open_tree_file(path, "w") as file:
        for root in roots:
            file.write(json.dumps(root.to_dict()) + "\n")
