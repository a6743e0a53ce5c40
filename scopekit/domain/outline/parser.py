"""Outline parsing entry point: JSON first, indented text as fallback."""

import logging
from collections.abc import Iterable

from .json_outline import parse_json_outline, strip_fences
from .models import OutlineFormat, ParsedOutline
from .text_outline import parse_text_outline

logger = logging.getLogger(__name__)


def parse_outline(
    content: str,
    heading_words: Iterable[str] | None = None,
) -> ParsedOutline:
    """Parse generated content into an outline.

    A JSON object or array is authoritative even when it expands to
    nothing. Anything else goes through the indentation parser.

    Args:
        content: Raw text returned by the generator
        heading_words: Heading titles for the indentation parser

    Returns:
        ParsedOutline; its format is EMPTY when no entries were found
    """
    text = strip_fences(content)
    if not text:
        return ParsedOutline(format=OutlineFormat.EMPTY)

    entries = parse_json_outline(text)
    if entries is not None:
        if not entries:
            logger.debug("JSON outline expanded to no entries")
            return ParsedOutline(format=OutlineFormat.EMPTY)
        return ParsedOutline(format=OutlineFormat.JSON, entries=tuple(entries))

    logger.debug("Content is not a JSON outline, using indentation parser")
    entries = parse_text_outline(text, heading_words)
    if not entries:
        return ParsedOutline(format=OutlineFormat.EMPTY)
    return ParsedOutline(format=OutlineFormat.TEXT, entries=tuple(entries))
