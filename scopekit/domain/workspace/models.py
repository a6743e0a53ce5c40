"""Workspace models: navigation context and history entries.

These are what gets persisted next to the forest and what undo/redo
restores along with it.
"""

from pydantic import BaseModel, ConfigDict, Field

from scopekit.domain.project.models import Forest, Project
from scopekit.domain.shared.clock import now_ms


class ActiveItem(BaseModel):
    """The folder and (optionally) scope the user is looking at."""

    model_config = ConfigDict(populate_by_name=True)

    project_id: str | None = Field(default=None, alias="projectId")
    task_id: str | None = Field(default=None, alias="taskId")


class HistoryEntry(BaseModel):
    """A whole-forest snapshot plus the navigation context at that moment."""

    model_config = ConfigDict(populate_by_name=True)

    projects: list[Project]
    active_item: ActiveItem = Field(default_factory=ActiveItem, alias="activeItem")
    selected_task_ids: list[str] = Field(default_factory=list, alias="selectedTaskIds")
    label: str = ""
    timestamp: int = Field(default_factory=now_ms)


class HistoryState(BaseModel):
    """Both history stacks, as persisted. ``past`` is oldest first."""

    past: list[HistoryEntry] = Field(default_factory=list)
    future: list[HistoryEntry] = Field(default_factory=list)


class Workspace(BaseModel):
    """Everything loaded for one user."""

    model_config = ConfigDict(populate_by_name=True)

    projects: Forest
    active_item: ActiveItem = Field(default_factory=ActiveItem, alias="activeItem")
    history: HistoryState = Field(default_factory=HistoryState)
    warnings: list[str] = Field(default_factory=list)
