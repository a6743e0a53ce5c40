"""Indentation-based outline parser.

Fallback for generated content that is not JSON. Each non-blank line is
one node; its nesting level is its leading whitespace divided by the
smallest indent used anywhere in the text (tabs count as two spaces).

Line shapes, checked in order after a leading bullet marker is removed:

- ``Title:`` is a heading titled ``Title``
- ``key: value`` is a node titled ``key`` with content ``[value]``
- anything else is a node titled by the whole line

After the tree is built, a heading-like node (its title is one of a
configurable set of words) whose children are all leaves absorbs those
children as plain content strings.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from .models import MAX_OUTLINE_DEPTH, OutlineEntry, OutlineLeaf, branch

DEFAULT_HEADING_WORDS: tuple[str, ...] = (
    "ingredients",
    "steps",
    "instructions",
    "notes",
    "checklist",
)

_ROMAN = r"(?=[ivxlcdm])m{0,3}(?:cm|cd|d?c{0,3})(?:xc|xl|l?x{0,3})(?:ix|iv|v?i{0,3})"
_BULLET_RE = re.compile(rf"^(?:[-*+•]|\d+[.)]|[a-z][.)]|{_ROMAN}[.)])\s+", re.IGNORECASE)
_KEY_VALUE_RE = re.compile(r"^(?P<key>[^:]{1,60}?):\s+(?P<value>\S.*)$")


@dataclass
class _RawItem:
    title: str
    level: int
    value: str | None = None
    content: list[str] = field(default_factory=list)
    children: list["_RawItem"] = field(default_factory=list)

    @property
    def label(self) -> str:
        if self.value is None:
            return self.title
        return f"{self.title}: {self.value}"


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _parse_line(text: str, level: int) -> _RawItem | None:
    stripped = _BULLET_RE.sub("", text.strip(), count=1).strip()
    if not stripped:
        return None
    if stripped.endswith(":") and len(stripped) > 1:
        return _RawItem(title=stripped[:-1].rstrip(), level=level)
    match = _KEY_VALUE_RE.match(stripped)
    if match:
        return _RawItem(
            title=match.group("key").strip(),
            level=level,
            value=match.group("value").strip(),
        )
    return _RawItem(title=stripped, level=level)


def _scan(text: str) -> list[_RawItem]:
    lines = [line.replace("\t", "  ").rstrip() for line in text.splitlines()]
    lines = [line for line in lines if line.strip()]
    indents = [_indent_width(line) for line in lines]
    unit = min((width for width in indents if width > 0), default=1)

    items: list[_RawItem] = []
    for line, width in zip(lines, indents):
        item = _parse_line(line, min(width // unit, MAX_OUTLINE_DEPTH))
        if item is not None:
            items.append(item)
    return items


def _build(items: list[_RawItem]) -> list[_RawItem]:
    roots: list[_RawItem] = []
    stack: list[_RawItem] = []
    for item in items:
        while stack and stack[-1].level >= item.level:
            stack.pop()
        if stack:
            stack[-1].children.append(item)
        else:
            roots.append(item)
        stack.append(item)
    return roots


def _collapse_headings(items: list[_RawItem], heading_words: frozenset[str]) -> None:
    for item in items:
        if (
            item.children
            and item.title.casefold() in heading_words
            and all(not child.children for child in item.children)
        ):
            for child in item.children:
                item.content.append(child.label)
                item.content.extend(child.content)
            item.children = []
        _collapse_headings(item.children, heading_words)


def _to_entry(item: _RawItem) -> OutlineEntry:
    if item.children:
        return branch(item.label, *(_to_entry(child) for child in item.children))
    content = ([item.value] if item.value is not None else []) + item.content
    return OutlineEntry(title=item.title, node=OutlineLeaf(content=tuple(content)))


def parse_text_outline(
    content: str,
    heading_words: Iterable[str] | None = None,
) -> list[OutlineEntry]:
    """Parse indented text into root outline entries.

    Args:
        content: Text with any code fence already stripped
        heading_words: Titles whose leaf children collapse into content;
            defaults to ``DEFAULT_HEADING_WORDS``

    Returns:
        Root entries in document order, empty if there are no usable lines
    """
    words = DEFAULT_HEADING_WORDS if heading_words is None else heading_words
    roots = _build(_scan(content))
    _collapse_headings(roots, frozenset(word.casefold() for word in words))
    return [_to_entry(root) for root in roots]
