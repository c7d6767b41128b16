"""Tests for utils/loader.py"""

import gzip
import json

import pytest

from utils.loader import (
    collect_tree_files,
    json_to_light_tree,
    load_forest,
    read_json_trees,
    write_json_trees,
)


def raw(node_type: str, *children: dict, string: str = "") -> dict:
    return {"type": node_type, "string": string, "children": list(children)}


def function_with_docstring() -> dict:
    return raw(
        "function_definition",
        raw("identifier", string="f"),
        raw(
            "block",
            raw("expression_statement", raw("string", string='"""doc"""')),
            raw("return_statement", raw("identifier", string="x")),
        ),
    )


def write_lines(path, trees, compress=True):
    opener = gzip.open if compress else open
    with opener(path, "wt", encoding="utf-8") as file:
        for tree in trees:
            file.write(json.dumps(tree) + "\n")


class TestConversion:
    def test_docstring_is_dropped(self):
        tree = json_to_light_tree(function_with_docstring())
        block = tree.children[1]
        assert [c.node_type for c in block.children] == ["return_statement"]

    def test_expression_statement_elsewhere_is_kept(self):
        tree = json_to_light_tree(
            raw("module", raw("expression_statement", raw("string", string="'s'")))
        )
        assert [c.node_type for c in tree.children] == ["expression_statement"]

    def test_non_identifier_types_are_dropped(self):
        tree = json_to_light_tree(
            raw("binary_operator", raw("identifier", string="a"), raw("+"), raw("integer", string="1"))
        )
        assert [c.node_type for c in tree.children] == ["identifier", "integer"]
        assert json_to_light_tree(raw("(")) is None

    def test_block_is_not_mergeable(self):
        tree = json_to_light_tree(function_with_docstring())
        assert tree.can_merge
        assert not tree.children[1].can_merge

    def test_missing_fields(self):
        tree = json_to_light_tree({"type": "module", "string": None})
        assert tree.token == ""
        assert tree.children == []


class TestFiles:
    def test_read_gzip(self, tmp_path):
        path = tmp_path / "trees.jsonl.gz"
        write_lines(path, [function_with_docstring(), raw("("), raw("module")])
        trees = list(read_json_trees(str(path)))
        assert [t.node_type for t in trees] == ["function_definition", "module"]

    def test_read_plain(self, tmp_path):
        path = tmp_path / "trees.jsonl"
        write_lines(path, [raw("module")], compress=False)
        with open(path, "a") as file:
            file.write("\n")
        assert len(list(read_json_trees(str(path)))) == 1

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "trees.jsonl"
        path.write_text('{"type": "module"}\n{not json\n')
        with pytest.raises(ValueError, match="trees.jsonl:2"):
            list(read_json_trees(str(path)))

    def test_collect_tree_files(self, tmp_path):
        (tmp_path / "sub").mkdir()
        for name in ["b.jsonl.gz", "sub/a.jsonl", "notes.txt"]:
            (tmp_path / name).write_bytes(b"")
        assert collect_tree_files(str(tmp_path)) == [
            str(tmp_path / "b.jsonl.gz"),
            str(tmp_path / "sub" / "a.jsonl"),
        ]
        assert collect_tree_files(str(tmp_path / "notes.txt")) == [str(tmp_path / "notes.txt")]
        with pytest.raises(FileNotFoundError):
            collect_tree_files(str(tmp_path / "missing"))

    def test_load_forest_labels(self, tmp_path):
        path = tmp_path / "trees.jsonl.gz"
        write_lines(path, [raw("module"), raw("module")])
        roots, labels = load_forest(str(tmp_path))
        assert len(roots) == 2
        assert labels == [f"{path}:0", f"{path}:1"]

    def test_write_then_read(self, tmp_path):
        tree = json_to_light_tree(function_with_docstring())
        path = tmp_path / "out.jsonl.gz"
        write_json_trees(str(path), [tree])
        (restored,) = read_json_trees(str(path))
        assert restored.to_dict() == tree.to_dict()
