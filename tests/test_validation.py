"""Tests for tree_bpe/validation.py"""

import pytest

from tree_bpe import LightNode, validate_forest, validate_tree


class TestValidation:
    def test_valid_forest(self):
        roots = [
            LightNode("", "A", children=[LightNode("", "B"), LightNode("", "C")]),
            LightNode("", "D"),
        ]
        assert validate_forest(roots, ["a", "d"]) == 4
        assert validate_forest(roots) == 4

    def test_label_count(self):
        with pytest.raises(ValueError, match="labels"):
            validate_forest([LightNode("", "A")], ["a", "b"])

    def test_root_with_parent(self):
        parent = LightNode("", "A", children=[LightNode("", "B")])
        with pytest.raises(ValueError, match="has a parent"):
            validate_tree(parent.children[0])

    def test_inconsistent_parent(self):
        root = LightNode("", "A")
        child = LightNode("", "B")
        root.children.append(child)
        with pytest.raises(ValueError, match="its parent"):
            validate_tree(root)

    def test_cycle(self):
        root = LightNode("", "A")
        child = LightNode("", "B", root)
        root.children.append(child)
        child.children.append(root)
        with pytest.raises(ValueError):
            validate_tree(root)

    def test_shared_subtree_across_trees(self):
        shared = LightNode("", "S")
        first = LightNode("", "A", children=[shared])
        second = LightNode("", "B")
        second.children.append(shared)
        with pytest.raises(ValueError):
            validate_forest([first, second])
