"""Tests for tree_bpe/nodes.py"""

from dataclasses import dataclass, field
from typing import Any

import pytest

from constants import TOKEN_NODE_TYPE
from tree_bpe import LightNode, SyntaxNode, move_tokens_to_leaves, tree_size


def sample_tree() -> LightNode:
    """
    method
    | name : foo
    | body
    | | return : x
    """
    return LightNode(
        "",
        "method",
        children=[
            LightNode("foo", "name"),
            LightNode("", "body", children=[LightNode("x", "return")]),
        ],
    )


@dataclass
class ForeignNode:
    """Node of another parser, only exposing the SyntaxNode capabilities."""

    type_label: str
    token: str = ""
    children: list["ForeignNode"] = field(default_factory=list)
    parent: "ForeignNode | None" = None
    metadata: dict[str, Any] = field(default_factory=dict)


class TestStructure:
    def test_add_child_sets_parent(self):
        parent = LightNode("", "A")
        child = LightNode("", "B")
        parent.add_child(child)
        assert parent.children == [child]
        assert child.parent is parent

    def test_add_child_overwrites_parent(self):
        first = LightNode("", "A")
        second = LightNode("", "A")
        child = LightNode("", "B", first)
        second.add_child(child)
        assert child.parent is second

    def test_constructor_children(self):
        root = sample_tree()
        assert all(child.parent is root for child in root.children)
        assert root.is_root()
        assert not root.children[0].is_root()

    def test_set_children(self):
        root = LightNode("", "A")
        nodes = [LightNode("", "B"), LightNode("", "C")]
        root.set_children(nodes)
        assert root.children == nodes
        assert all(node.parent is root for node in nodes)

    def test_replace_child(self):
        root = sample_tree()
        old = root.children[1]
        new = LightNode("", "new")
        root.replace_child(old, new)
        assert [c.node_type for c in root.children] == ["name", "new"]
        assert new.parent is root
        assert old.parent is None

    def test_remove_child(self):
        root = sample_tree()
        name = root.children[0]
        root.remove_child(name)
        assert [c.node_type for c in root.children] == ["body"]
        assert name.parent is None

    def test_replace_missing_child(self):
        with pytest.raises(ValueError):
            LightNode("", "A").replace_child(LightNode("", "B"), LightNode("", "C"))

    def test_preorder(self):
        assert [n.node_type for n in sample_tree().preorder()] == [
            "method",
            "name",
            "body",
            "return",
        ]

    def test_tree_size(self):
        assert tree_size(sample_tree()) == 4
        assert tree_size(LightNode("", "A")) == 1
        assert tree_size(None) == 0


class TestPrettyPrint:
    def test_format(self):
        assert sample_tree().pretty_format() == (
            "method\n| name : foo\n| body\n| | return : x"
        )

    def test_custom_indent(self):
        text = sample_tree().pretty_format(indent=1, indent_symbol="  ")
        assert text.splitlines()[0] == "  method"
        assert text.splitlines()[-1] == "      return : x"

    def test_print(self, capsys):
        sample_tree().pretty_print()
        assert capsys.readouterr().out == sample_tree().pretty_format() + "\n"


class TestConversions:
    def test_dict_round_trip(self):
        data = sample_tree().to_dict()
        assert data["children"][0] == {"type": "name", "string": "foo", "children": []}
        restored = LightNode.from_dict(data)
        assert restored.to_dict() == data
        assert restored.children[1].children[0].parent is restored.children[1]

    def test_from_dict_missing_fields(self):
        node = LightNode.from_dict({"type": "A", "string": None})
        assert node.token == ""
        assert node.children == []

    def test_from_syntax_node(self):
        leaf = ForeignNode("identifier", "x", metadata={"line": 3})
        foreign = ForeignNode("call", children=[leaf])
        leaf.parent = foreign
        assert isinstance(foreign, SyntaxNode)

        node = LightNode.from_syntax_node(foreign)
        assert node.node_type == "call"
        assert node.children[0].token == "x"
        assert node.children[0].metadata == {"line": 3}
        assert node.children[0].parent is node

    def test_light_node_is_a_syntax_node(self):
        root = sample_tree()
        assert isinstance(root, SyntaxNode)
        assert LightNode.from_syntax_node(root).to_dict() == root.to_dict()


class TestMoveTokensToLeaves:
    def test_tokens_become_first_children(self):
        root = sample_tree()
        move_tokens_to_leaves(root)
        name, body = root.children
        assert [(c.node_type, c.token) for c in name.children] == [(TOKEN_NODE_TYPE, "foo")]
        ret = body.children[0]
        assert ret.children[0].node_type == TOKEN_NODE_TYPE
        assert ret.children[0].parent is ret
        # Token nodes are not expanded again
        assert ret.children[0].children == []
        assert tree_size(root) == 6

    def test_token_goes_before_existing_children(self):
        root = LightNode("t", "A", children=[LightNode("", "B")])
        move_tokens_to_leaves(root)
        assert [c.node_type for c in root.children] == [TOKEN_NODE_TYPE, "B"]
