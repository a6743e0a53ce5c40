"""Outline shapes produced by parsing generated content.

An outline is a list of titled entries. Each entry is either a leaf
carrying plain content strings or a branch carrying further entries:

    Node = Leaf(content) | Branch(children: [(title, Node), ...])

Entries are immutable; parsers build them bottom-up.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

# Nesting deeper than this is flattened into a single leaf
MAX_OUTLINE_DEPTH = 64


@dataclass(frozen=True, slots=True)
class OutlineLeaf:
    """A leaf entry, optionally carrying content strings."""

    content: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class OutlineBranch:
    """An entry with ordered child entries."""

    children: tuple["OutlineEntry", ...]


OutlineNode = Union[OutlineLeaf, OutlineBranch]  # noqa: UP007


@dataclass(frozen=True, slots=True)
class OutlineEntry:
    """A titled outline node."""

    title: str
    node: OutlineNode

    @property
    def is_leaf(self) -> bool:
        return isinstance(self.node, OutlineLeaf)


class OutlineFormat(str, Enum):
    """Which parser produced an outline."""

    JSON = "json"
    TEXT = "text"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class ParsedOutline:
    """Root entries of a parsed outline and the parser that produced them."""

    format: OutlineFormat
    entries: tuple[OutlineEntry, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.entries


def leaf(title: str, *content: str) -> OutlineEntry:
    """Build a leaf entry."""
    return OutlineEntry(title=title, node=OutlineLeaf(content=tuple(content)))


def branch(title: str, *children: OutlineEntry) -> OutlineEntry:
    """Build a branch entry."""
    return OutlineEntry(title=title, node=OutlineBranch(children=tuple(children)))
