"""JSON outline expansion.

Generated content is expected to be one JSON object with exactly one root
key whose value nests objects, arrays and strings. Anything that is
valid JSON of a looser shape is still expanded:

- object entries become child entries titled by their key
- arrays flatten their elements into siblings
- a scalar under a key becomes a leaf titled by the key with the scalar
  as its only content string
- a scalar array element becomes a leaf titled by the scalar
"""

import json
import re

from .models import MAX_OUTLINE_DEPTH, OutlineEntry, branch, leaf

_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?(?P<body>.*?)\n?[ \t]*```$", re.DOTALL)


def strip_fences(content: str) -> str:
    """Remove a fenced code block wrapping the whole content.

    Content that is not entirely wrapped by a fence is returned trimmed
    but otherwise unchanged.
    """
    text = content.strip()
    match = _FENCE_RE.match(text)
    if match is None:
        return text
    return match.group("body").strip()


def load_json(text: str) -> object | None:
    """Parse ``text`` as JSON, falling back to its outermost ``{...}`` span.

    Returns:
        The parsed value, or None if neither attempt succeeds
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return None


def render_scalar(value: object) -> str:
    """Render a JSON scalar as display text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _expand_value(title: str, value: object, depth: int) -> OutlineEntry:
    if value is None:
        return leaf(title)
    if depth >= MAX_OUTLINE_DEPTH and isinstance(value, (dict, list)):
        return leaf(title, json.dumps(value, separators=(",", ":"), ensure_ascii=False))
    if isinstance(value, dict):
        children = _expand_object(value, depth + 1)
    elif isinstance(value, list):
        children = _expand_array(value, depth + 1)
    else:
        return leaf(title, render_scalar(value))
    if not children:
        return leaf(title)
    return branch(title, *children)


def _expand_object(obj: dict, depth: int) -> list[OutlineEntry]:
    return [_expand_value(str(key), value, depth) for key, value in obj.items()]


def _expand_array(items: list, depth: int) -> list[OutlineEntry]:
    entries: list[OutlineEntry] = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, dict):
            entries.extend(_expand_object(item, depth))
        elif isinstance(item, list):
            entries.extend(_expand_array(item, depth + 1))
        else:
            entries.append(leaf(render_scalar(item)))
    return entries


def expand_json(value: object) -> list[OutlineEntry] | None:
    """Expand an already-parsed JSON value into root entries.

    Returns:
        Root entries (possibly empty) for an object or array, or None for
        a top-level scalar, which is not an outline
    """
    if isinstance(value, dict):
        return _expand_object(value, 1)
    if isinstance(value, list):
        return _expand_array(value, 1)
    return None


def parse_json_outline(content: str) -> list[OutlineEntry] | None:
    """Parse generated content as a JSON outline.

    Args:
        content: Text with any code fence already stripped

    Returns:
        Root entries, or None if the content is not a JSON object or array
    """
    value = load_json(content)
    if value is None:
        return None
    return expand_json(value)
