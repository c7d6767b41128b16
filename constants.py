"""
Global constants used throughout the project
"""

import re

# Default number of merges performed by a fit run
NUM_MERGES = 100

# Joins the tokens of two merged nodes: "foo" + "bar" -> "foo_bar"
TOKEN_DELIMITER = "_"

# Decoded composite type: "Parent (Child)"
TYPE_OPEN = " ("
TYPE_CLOSE = ")"

# Types that never take part in a merge
NON_MERGEABLE_TYPES = frozenset({"block"})

# Raw tree nodes whose type does not match are dropped with their subtree
TYPE_FILTER = re.compile(r"[_a-zA-Z]+")

# Type of the leaves created by `move_tokens_to_leaves`
TOKEN_NODE_TYPE = "TOKEN_NODE"

# Indentation used when pretty printing trees
INDENT_SYMBOL = "| "

# Version of the persisted merge sequence format
SEQUENCE_FORMAT_VERSION = 1

DEBUG = False
