"""Outline domain - parsing generated content into scope subtrees.

Key Types:
    OutlineEntry - Titled node, either OutlineLeaf or OutlineBranch
    ParsedOutline - Root entries plus the format that produced them

Functions:
    strip_fences - Remove a wrapping code fence
    parse_json_outline - JSON object/array expansion
    parse_text_outline - Indentation fallback parser
    parse_outline - JSON first, then indentation
    materialize - Build new tasks from entries
"""

from .json_outline import expand_json, load_json, parse_json_outline, render_scalar, strip_fences
from .materialize import entry_text, materialize
from .models import (
    MAX_OUTLINE_DEPTH,
    OutlineBranch,
    OutlineEntry,
    OutlineFormat,
    OutlineLeaf,
    OutlineNode,
    ParsedOutline,
    branch,
    leaf,
)
from .parser import parse_outline
from .text_outline import DEFAULT_HEADING_WORDS, parse_text_outline

__all__ = [
    # Models
    "MAX_OUTLINE_DEPTH",
    "OutlineLeaf",
    "OutlineBranch",
    "OutlineNode",
    "OutlineEntry",
    "OutlineFormat",
    "ParsedOutline",
    "leaf",
    "branch",
    # Parsing
    "strip_fences",
    "load_json",
    "expand_json",
    "render_scalar",
    "parse_json_outline",
    "parse_text_outline",
    "parse_outline",
    "DEFAULT_HEADING_WORDS",
    # Materialization
    "entry_text",
    "materialize",
]
