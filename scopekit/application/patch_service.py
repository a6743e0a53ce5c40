"""Alternative-scope patch applier.

A structured generator response proposes a replacement outline for one
existing task, plus minimal edits to other tasks that mention it:

    {
      "New Task Outline": {"Root Title": {...}},
      "Updates": [
        {"Target Id": "...", "Changes": [
          {"Path": "/text", "Op": "replace", "Value": "...", "Reason": "..."}
        ]}
      ],
      "Changes Summary": {"Replaced Node Title": "...",
                          "Updated Targets": ["..."], "Notes": ["..."]}
    }

Only ``/text`` and ``/description`` can ever be changed by an update.
Status, ordering and structure of other tasks are out of reach of the
generator.
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from scopekit.domain.outline import (
    OutlineBranch,
    OutlineEntry,
    expand_json,
    load_json,
    materialize,
    parse_outline,
    render_scalar,
    strip_fences,
)
from scopekit.domain.project import Forest, copy_forest
from scopekit.domain.shared import Err, Ok, Result
from scopekit.domain.task import Provenance, iter_tasks, locate, propagate

logger = logging.getLogger(__name__)

ALLOWED_PATHS = frozenset({"/text", "/description"})
ALLOWED_OPS = frozenset({"replace", "update"})


class PatchChange(BaseModel):
    """One field-level edit. ``replace`` and ``update`` both overwrite."""

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(alias="Path")
    op: str = Field(default="replace", alias="Op")
    value: Any = Field(default=None, alias="Value")
    reason: str | None = Field(default=None, alias="Reason")


class PatchUpdate(BaseModel):
    """Edits aimed at one existing task."""

    model_config = ConfigDict(populate_by_name=True)

    target_id: str = Field(alias="Target Id")
    changes: list[PatchChange] = Field(default_factory=list, alias="Changes")


class ChangesSummary(BaseModel):
    """The generator's own account of what it changed."""

    model_config = ConfigDict(populate_by_name=True)

    replaced_node_title: str = Field(default="", alias="Replaced Node Title")
    updated_targets: list[str] = Field(default_factory=list, alias="Updated Targets")
    notes: list[str] = Field(default_factory=list, alias="Notes")

    @field_validator("notes", mode="before")
    @classmethod
    def _single_note(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value or []


class AlternativeProposal(BaseModel):
    """A parsed alternative-scope response."""

    model_config = ConfigDict(populate_by_name=True)

    new_task_outline: Any = Field(alias="New Task Outline")
    updates: list[PatchUpdate] = Field(default_factory=list, alias="Updates")
    changes_summary: ChangesSummary = Field(
        default_factory=ChangesSummary, alias="Changes Summary"
    )

    @classmethod
    def from_json(cls, text: str) -> Result["AlternativeProposal", str]:
        """Parse a generator response, skipping malformed update entries.

        Returns:
            Ok(AlternativeProposal) or Err(str) if the response is not a
            JSON object with a "New Task Outline" key
        """
        raw = load_json(strip_fences(text))
        if not isinstance(raw, dict):
            return Err("The AI response was not a JSON object")
        outline = raw.get("New Task Outline", raw.get("NewTaskOutline"))
        if outline is None:
            return Err("Missing key: New Task Outline")

        try:
            summary = ChangesSummary.model_validate(raw.get("Changes Summary") or {})
        except ValidationError:
            logger.debug("Ignoring malformed Changes Summary")
            summary = ChangesSummary()

        return Ok(
            cls(
                new_task_outline=outline,
                updates=_parse_updates(raw.get("Updates")),
                changes_summary=summary,
            )
        )


def _parse_updates(raw: Any) -> list[PatchUpdate]:
    if not isinstance(raw, list):
        return []
    updates: list[PatchUpdate] = []
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("Target Id"), str):
            logger.debug(f"Skipping malformed update entry: {entry!r}")
            continue
        changes: list[PatchChange] = []
        for change in entry.get("Changes") or []:
            try:
                changes.append(PatchChange.model_validate(change))
            except ValidationError:
                logger.debug(f"Skipping malformed change: {change!r}")
        updates.append(PatchUpdate(target_id=entry["Target Id"], changes=changes))
    return updates


@dataclass(frozen=True)
class PatchOutcome:
    """Result of applying an alternative proposal.

    ``replaced_title`` is the text the node had before it was replaced.
    """

    forest: Forest
    replaced_id: str
    replaced_title: str
    updated_ids: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


def _outline_root(
    outline: Any,
    heading_words: Iterable[str] | None = None,
) -> Result[OutlineEntry, str]:
    if isinstance(outline, dict):
        if len(outline) != 1:
            return Err(f"The new outline must have exactly one root item, got {len(outline)}")
        entries = expand_json(outline) or []
    elif isinstance(outline, str):
        entries = list(parse_outline(outline, heading_words).entries)
    else:
        return Err("The new outline is not an object")

    if len(entries) != 1:
        return Err(f"The new outline must have exactly one root item, got {len(entries)}")
    return Ok(entries[0])


def _value_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return render_scalar(value)
    return json.dumps(value, ensure_ascii=False)


def apply_alternative(
    forest: Forest,
    node_id: str,
    proposal: AlternativeProposal,
    heading_words: Iterable[str] | None = None,
) -> Result[PatchOutcome, str]:
    """Replace one task with a proposed outline and apply whitelisted edits.

    The replaced task keeps its id, parent and position; its text,
    description and children come from the outline and it is marked as
    AI-generated. Update targets that do not exist are skipped, and any
    change to a path other than ``/text`` or ``/description`` is dropped.

    Args:
        forest: Current forest (not modified)
        node_id: Id of the task being replaced
        proposal: Parsed generator response
        heading_words: Heading titles used if the outline is plain text

    Returns:
        Ok(PatchOutcome) or Err(str); nothing is applied on Err
    """
    root = _outline_root(proposal.new_task_outline, heading_words)
    if isinstance(root, Err):
        return root
    entry = root.value

    updated = copy_forest(forest)
    found = locate(updated, node_id)
    if found is None:
        return Err(f"Scope not found: {node_id}")
    project, path = found
    node = path[-1]
    replaced_title = node.text

    node.text = entry.title
    if isinstance(entry.node, OutlineBranch):
        node.subtasks = materialize(entry.node.children, parent_id=node.id)
    else:
        node.subtasks = []
        if entry.node.content:
            node.description = "\n".join(entry.node.content)
    node.source = Provenance.AI
    node.touch()
    project.touch()

    by_id = {task.id: task for p in updated for task in iter_tasks(p.tasks)}
    updated_ids: list[str] = []
    for update in proposal.updates:
        target = by_id.get(update.target_id)
        if target is None:
            logger.debug(f"Skipping update for unknown target {update.target_id}")
            continue
        touched = False
        for change in update.changes:
            if change.path not in ALLOWED_PATHS or change.op.lower() not in ALLOWED_OPS:
                logger.debug(f"Dropping change {change.op} {change.path} on {update.target_id}")
                continue
            if change.path == "/text":
                target.text = _value_text(change.value)
            else:
                target.description = _value_text(change.value)
            touched = True
        if touched:
            target.touch()
            if target.id not in updated_ids:
                updated_ids.append(target.id)

    propagate(updated, node_id)
    for task_id in updated_ids:
        propagate(updated, task_id)

    return Ok(
        PatchOutcome(
            forest=updated,
            replaced_id=node_id,
            replaced_title=replaced_title,
            updated_ids=updated_ids,
            notes=list(proposal.changes_summary.notes),
        )
    )
