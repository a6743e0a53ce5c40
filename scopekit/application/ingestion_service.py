"""Outline ingestion service.

Turns one blob of generated content into new tasks and inserts them into
the forest. Ingestion never raises for bad content: content that yields
no outline entries is reported as an empty result and nothing is
inserted.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from scopekit.application.task_service import add_root_tasks, add_subtasks
from scopekit.domain.outline import (
    OutlineBranch,
    OutlineEntry,
    OutlineFormat,
    materialize,
    parse_outline,
)
from scopekit.domain.project import Forest
from scopekit.domain.shared import Err, Ok, Result
from scopekit.domain.task import Task

logger = logging.getLogger(__name__)

EMPTY_OUTLINE_ERROR = "The AI response did not contain any outline items"


@dataclass(frozen=True)
class IngestedOutline:
    """Parsed entries and the tasks materialized from them."""

    format: OutlineFormat
    entries: tuple[OutlineEntry, ...] = ()
    tasks: list[Task] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tasks


def ingest_outline(
    content: str,
    parent_id: str | None = None,
    *,
    heading_words: Iterable[str] | None = None,
    unwrap_single_root: bool = False,
) -> IngestedOutline:
    """Parse generated content and materialize it as new tasks.

    Args:
        content: Raw generator output
        parent_id: Id the new root tasks will point back to
        heading_words: Heading titles for the indentation parser
        unwrap_single_root: When the outline is a single branch, return
            its children instead (used when the root key merely restates
            the scope being expanded)

    Returns:
        IngestedOutline; ``is_empty`` when nothing usable was found
    """
    parsed = parse_outline(content, heading_words)
    entries = parsed.entries
    if unwrap_single_root and len(entries) == 1 and isinstance(entries[0].node, OutlineBranch):
        entries = entries[0].node.children

    tasks = materialize(entries, parent_id=parent_id)
    logger.debug(f"Ingested {len(tasks)} root item(s) from {parsed.format.value} outline")
    return IngestedOutline(format=parsed.format, entries=tuple(entries), tasks=tasks)


def insert_outline(
    forest: Forest,
    content: str,
    *,
    project_id: str | None = None,
    anchor_id: str | None = None,
    heading_words: Iterable[str] | None = None,
    unwrap_single_root: bool = False,
) -> Result[tuple[Forest, IngestedOutline], str]:
    """Ingest content and insert the result into the forest.

    With ``anchor_id`` the new tasks are appended under that task;
    otherwise they become new roots of ``project_id``.

    Returns:
        Ok((new_forest, ingested)) or Err(str) with a readable reason; on
        Err the forest is untouched

    Raises:
        ValueError: If neither ``project_id`` nor ``anchor_id`` is given
    """
    if project_id is None and anchor_id is None:
        raise ValueError("insert_outline needs a project_id or an anchor_id")

    ingested = ingest_outline(
        content,
        parent_id=anchor_id,
        heading_words=heading_words,
        unwrap_single_root=unwrap_single_root,
    )
    if ingested.is_empty:
        return Err(EMPTY_OUTLINE_ERROR)

    if anchor_id is not None:
        updated, ok = add_subtasks(forest, anchor_id, ingested.tasks)
        if not ok:
            return Err(f"Scope not found: {anchor_id}")
    else:
        updated, ok = add_root_tasks(forest, project_id, ingested.tasks)
        if not ok:
            return Err(f"Folder not found: {project_id}")
    return Ok((updated, ingested))
