"""Repair stored workspace data on load.

Stored data may come from older versions or have been edited by hand.
Loading never rejects a forest for missing fields; it fills them in and
restores the structural invariants:

- exactly one Unassigned folder, with its fixed name, order and pin
- every task has an id (unique across the forest), text, status and order
- ``completed`` mirrors ``status`` and ``parentId`` matches the owner
- branch statuses agree with their children
- comments have ids, timestamps and a valid status

Each repair that changes meaningful data is reported as a warning string.
"""

import math
from typing import Any

from scopekit.domain.project.models import (
    UNASSIGNED_DESCRIPTION,
    UNASSIGNED_ID,
    UNASSIGNED_NAME,
    UNASSIGNED_ORDER,
    Forest,
    Project,
    make_unassigned_project,
)
from scopekit.domain.shared.clock import new_id, now_ms
from scopekit.domain.task.models import CommentStatus, Provenance, TaskStatus
from scopekit.domain.task.propagation import recompute_tree
from scopekit.domain.task.traversal import find_task

from .models import ActiveItem

_TASK_STATUSES = {status.value for status in TaskStatus}
_COMMENT_STATUSES = {status.value for status in CommentStatus}
_SOURCES = {source.value for source in Provenance}


def _dicts(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _int_or(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(value)


def _sanitize_comments(raw: Any) -> list[dict]:
    return [
        {
            "id": comment.get("id") or new_id(),
            "text": comment.get("text") or "",
            "timestamp": _int_or(comment.get("timestamp"), now_ms()),
            "status": comment.get("status")
            if comment.get("status") in _COMMENT_STATUSES
            else CommentStatus.ACTIVE.value,
            "edited": bool(comment.get("edited", False)),
            "replies": _sanitize_comments(comment.get("replies")),
        }
        for comment in _dicts(raw)
    ]


def _sanitize_records(raw: Any, text_key: str) -> list[dict]:
    return [
        {text_key: str(item[text_key]), "timestamp": _int_or(item.get("timestamp"), now_ms())}
        for item in _dicts(raw)
        if item.get(text_key) is not None
    ]


class _Sanitizer:
    def __init__(self) -> None:
        self.seen_ids: set[str] = set()
        self.warnings: list[str] = []

    def task(self, raw: dict, index: int, parent_id: str | None) -> dict:
        task_id = raw.get("id")
        if not isinstance(task_id, str) or not task_id:
            task_id = new_id()
        elif task_id in self.seen_ids:
            self.warnings.append(f"Duplicate scope id {task_id} replaced with a new id")
            task_id = new_id()
        self.seen_ids.add(task_id)

        status = raw.get("status")
        if status not in _TASK_STATUSES:
            status = TaskStatus.DONE.value if raw.get("completed") else TaskStatus.TODO.value

        return {
            "id": task_id,
            "text": str(raw.get("text") or ""),
            "description": str(raw.get("description") or ""),
            "completed": status == TaskStatus.DONE.value,
            "status": status,
            "subtasks": [
                self.task(child, child_index, task_id)
                for child_index, child in enumerate(_dicts(raw.get("subtasks")))
            ],
            "order": _int_or(raw.get("order"), index),
            "lastEdited": _int_or(raw.get("lastEdited"), now_ms()),
            "parentId": parent_id,
            "comments": _sanitize_comments(raw.get("comments")),
            "executionResults": _sanitize_records(raw.get("executionResults"), "resultText"),
            "summaries": _sanitize_records(raw.get("summaries"), "text"),
            "source": raw.get("source") if raw.get("source") in _SOURCES else Provenance.MANUAL.value,
        }

    def project(self, raw: dict, index: int) -> Project:
        project_id = raw.get("id") or new_id()
        unassigned = project_id == UNASSIGNED_ID
        return Project.model_validate(
            {
                "id": project_id,
                "name": UNASSIGNED_NAME if unassigned else str(raw.get("name") or "Untitled Folder"),
                "description": str(raw.get("description") or ""),
                "tasks": [self.task(task, i, None) for i, task in enumerate(_dicts(raw.get("tasks")))],
                "order": UNASSIGNED_ORDER if unassigned else _int_or(raw.get("order"), index),
                "lastEdited": _int_or(raw.get("lastEdited"), now_ms()),
                "summaries": _sanitize_records(raw.get("summaries"), "text"),
                "pinned": True if unassigned else bool(raw.get("pinned", False)),
            }
        )


def sanitize_projects(raw: Any) -> tuple[Forest, list[str]]:
    """Build a valid forest from stored project data.

    Args:
        raw: Decoded JSON (expected to be a list of folder objects)

    Returns:
        (forest, warnings); the Unassigned folder is always first

    Raises:
        pydantic.ValidationError: If a value has a type no repair covers
    """
    warnings: list[str] = []
    if raw is None:
        return [make_unassigned_project()], warnings
    if not isinstance(raw, list):
        warnings.append("Stored folders were not a list, starting fresh")
        return [make_unassigned_project()], warnings

    items = _dicts(raw)
    unassigned = [item for item in items if item.get("id") == UNASSIGNED_ID]
    others = [item for item in items if item.get("id") != UNASSIGNED_ID]

    if not unassigned:
        merged: dict = {"id": UNASSIGNED_ID, "description": UNASSIGNED_DESCRIPTION}
    elif len(unassigned) == 1:
        merged = unassigned[0]
    else:
        warnings.append(f"Merged {len(unassigned)} Unassigned folders into one")
        merged = {
            "id": UNASSIGNED_ID,
            "description": UNASSIGNED_DESCRIPTION,
            "tasks": [task for item in unassigned for task in _dicts(item.get("tasks"))],
        }

    sanitizer = _Sanitizer()
    forest = [sanitizer.project(merged, 0)]
    forest.extend(sanitizer.project(item, index) for index, item in enumerate(others))
    warnings.extend(sanitizer.warnings)

    repaired = sum(recompute_tree(project.tasks) for project in forest)
    if repaired:
        warnings.append(f"Repaired derived status of {repaired} scope(s)")
    return forest, warnings


def sanitize_active_item(raw: Any, forest: Forest) -> ActiveItem:
    """Validate a stored active item against the loaded forest.

    An unknown or missing folder falls back to the first real folder (or
    Unassigned); a scope that is not in the active folder is dropped.
    """
    fallback = next((p.id for p in forest if p.id != UNASSIGNED_ID), None)
    if fallback is None and forest:
        fallback = forest[0].id

    item = raw if isinstance(raw, dict) else {}
    project_id = item.get("projectId")
    task_id = item.get("taskId")

    project = next((p for p in forest if p.id == project_id), None)
    if project is None:
        return ActiveItem(project_id=fallback, task_id=None)
    if task_id is not None and find_task(project.tasks, task_id) is None:
        task_id = None
    return ActiveItem(project_id=project.id, task_id=task_id)
