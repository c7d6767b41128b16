"""
Type definitions shared by the loaders and scripts.
"""

from __future__ import annotations

from typing import NotRequired, TypedDict


class JsonTree(TypedDict):
    """Raw syntax tree as produced by the external parser."""

    type: str
    string: NotRequired[str | None]
    children: NotRequired[list[JsonTree]]
