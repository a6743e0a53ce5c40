"""The scope store: owner of the current forest.

``ScopeStore`` holds the forest, the active item, the current selection
and the undo/redo history for one user. Every accepted change goes
through the same path:

1. the pure service computes a new forest from the current one
2. the state from before the change is recorded in history
3. the new forest becomes current and is saved

A failed save never raises. The in-memory forest stays authoritative and
the failure is exposed through ``save_warning``.
"""

import logging
from collections.abc import Collection, Iterable, Sequence

from scopekit.application import comment_service, project_service, task_service
from scopekit.application.history import DEFAULT_HISTORY_LIMIT, HistoryManager
from scopekit.application.ingestion_service import IngestedOutline, insert_outline
from scopekit.application.patch_service import AlternativeProposal, PatchOutcome, apply_alternative
from scopekit.application.ports import WorkspaceStorage
from scopekit.domain.outline import DEFAULT_HEADING_WORDS
from scopekit.domain.project import UNASSIGNED_ID, Forest, Project, ProjectSummary
from scopekit.domain.shared import Err, Ok, Result
from scopekit.domain.task import (
    CommentStatus,
    SortKey,
    Task,
    TaskStatus,
    find_node,
    find_owner,
    find_path,
    find_project,
    sort_projects,
)
from scopekit.domain.workspace import ActiveItem, HistoryEntry

logger = logging.getLogger(__name__)


class ScopeStore:
    """Stateful facade over the scope services.

    Example:
        store = ScopeStore(WorkspaceRepository(FileBlobStorage(data_dir)))
        task_id = store.create_task(UNASSIGNED_ID, "Plan the trip")
        store.update_task(task_id, status=TaskStatus.DONE)
        store.undo()
    """

    def __init__(
        self,
        repository: WorkspaceStorage,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        heading_words: Iterable[str] | None = None,
    ) -> None:
        self._repository = repository
        workspace = repository.load()
        self._projects: Forest = workspace.projects
        self._active_item = workspace.active_item
        self._selected: list[str] = []
        self.history = HistoryManager(limit=history_limit, state=workspace.history)
        self.heading_words = tuple(heading_words or DEFAULT_HEADING_WORDS)
        self.load_warnings: list[str] = list(workspace.warnings)
        self.save_warning: str | None = None

    # =========================================================================
    # State access
    # =========================================================================

    @property
    def projects(self) -> Forest:
        """The current forest. Treat it as read-only."""
        return self._projects

    @property
    def active_item(self) -> ActiveItem:
        return self._active_item

    @property
    def selected_task_ids(self) -> list[str]:
        return list(self._selected)

    def find_task(self, task_id: str) -> Task | None:
        return find_node(self._projects, task_id)

    def find_project(self, project_id: str) -> Project | None:
        return find_project(self._projects, project_id)

    def breadcrumb(self, task_id: str) -> list[str]:
        """Texts of the tasks from a root down to ``task_id``."""
        return [task.text for task in find_path(self._projects, task_id)]

    def project_summaries(
        self,
        key: SortKey = SortKey.ORDER,
        descending: bool = False,
    ) -> list[ProjectSummary]:
        """Listing summaries of all folders in display order."""
        return [
            project_service.get_project_summary(project)
            for project in sort_projects(self._projects, key, descending)
        ]

    # =========================================================================
    # Navigation
    # =========================================================================

    def set_active_item(self, project_id: str | None, task_id: str | None = None) -> bool:
        """Navigate to a folder and optionally a scope in it.

        Navigation clears the selection. Unknown ids are refused.
        """
        if project_id is not None and self.find_project(project_id) is None:
            return False
        if task_id is not None:
            owner = find_owner(self._projects, task_id)
            if owner is None or (project_id is not None and owner.id != project_id):
                return False
            project_id = owner.id
        self._active_item = ActiveItem(project_id=project_id, task_id=task_id)
        self._selected = []
        self._save_active_item()
        return True

    def set_selected_task_ids(self, task_ids: Sequence[str]) -> None:
        self._selected = list(task_ids)

    # =========================================================================
    # Folders
    # =========================================================================

    def create_project(self, name: str, description: str = "") -> Result[Project, str]:
        result = project_service.create_project(self._projects, name, description)
        if isinstance(result, Err):
            return result
        forest, project = result.value
        self._commit(f"Create folder '{project.name}'", forest)
        return Ok(project)

    def update_project(
        self,
        project_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        pinned: bool | None = None,
    ) -> bool:
        forest, ok = project_service.update_project(
            self._projects, project_id, name=name, description=description, pinned=pinned
        )
        return self._apply("Update folder", forest, ok)

    def delete_project(self, project_id: str) -> bool:
        """Delete a folder; the active item moves to another folder if needed."""
        forest, ok = project_service.delete_project(self._projects, project_id)
        if not ok:
            return False
        active = self._active_item
        if active.project_id == project_id:
            fallback = next((p.id for p in forest if p.id != UNASSIGNED_ID), UNASSIGNED_ID)
            active = ActiveItem(project_id=fallback, task_id=None)
        self._commit("Delete folder", forest, active_item=active)
        return True

    def add_summary_to_project(self, project_id: str, text: str) -> bool:
        forest, ok = project_service.add_summary_to_project(self._projects, project_id, text)
        return self._apply("Add folder summary", forest, ok)

    # =========================================================================
    # Scopes
    # =========================================================================

    def create_task(self, project_id: str, text: str, description: str = "") -> str | None:
        """Create a root scope and return its id (None if the folder is missing)."""
        forest, ok = task_service.create_task(self._projects, project_id, text, description)
        if not ok:
            return None
        self._commit(f"Create scope '{text}'", forest)
        return find_project(forest, project_id).tasks[-1].id

    def add_root_tasks(
        self,
        project_id: str,
        tasks: Sequence[Task],
        label: str = "Add scopes",
    ) -> bool:
        forest, ok = task_service.add_root_tasks(self._projects, project_id, tasks)
        return self._apply(label, forest, ok)

    def add_subtasks(self, anchor_id: str, tasks: Sequence[Task]) -> bool:
        forest, ok = task_service.add_subtasks(self._projects, anchor_id, tasks)
        return self._apply(f"Add {len(tasks)} sub-scope(s)", forest, ok)

    def replace_subtasks(self, anchor_id: str, tasks: Sequence[Task]) -> bool:
        forest, ok = task_service.replace_subtasks(self._projects, anchor_id, tasks)
        return self._apply("Replace sub-scopes", forest, ok)

    def delete_task(self, task_id: str) -> bool:
        """Delete a scope and its subtree.

        If the active scope was inside the deleted subtree it is cleared.
        """
        task = self.find_task(task_id)
        if task is None:
            return False
        forest, ok = task_service.delete_task(self._projects, task_id)
        if not ok:
            return False
        active = self._active_item
        if active.task_id is not None and find_node(forest, active.task_id) is None:
            active = ActiveItem(project_id=active.project_id, task_id=None)
        self._selected = [i for i in self._selected if find_node(forest, i) is not None]
        self._commit(f"Delete scope '{task.text}'", forest, active_item=active)
        return True

    def delete_selected(
        self,
        task_ids: Collection[str] | None = None,
        project_id: str | None = None,
    ) -> bool:
        """Delete the given scopes (default: the current selection)."""
        ids = list(self._selected if task_ids is None else task_ids)
        forest, ok = task_service.delete_selected(self._projects, ids, project_id)
        if not ok:
            return False
        active = self._active_item
        if active.task_id is not None and find_node(forest, active.task_id) is None:
            active = ActiveItem(project_id=active.project_id, task_id=None)
        self._selected = []
        self._commit(f"Delete {len(ids)} scope(s)", forest, active_item=active)
        return True

    def move_task_to_project(
        self,
        task_id: str,
        target_project_id: str,
        source_project_id: str | None = None,
    ) -> bool:
        """Move a scope to another folder; an active scope inside it stays active there."""
        if source_project_id is None:
            owner = find_owner(self._projects, task_id)
            if owner is None:
                return False
            source_project_id = owner.id
        forest, ok = task_service.move_task_to_project(
            self._projects, task_id, source_project_id, target_project_id
        )
        if not ok:
            return False
        active = self._active_item
        if active.task_id is not None:
            owner = find_owner(forest, active.task_id)
            if owner is not None and owner.id != active.project_id:
                active = ActiveItem(project_id=owner.id, task_id=active.task_id)
        self._commit("Move scope", forest, active_item=active)
        return True

    def promote_subtask(self, task_id: str) -> bool:
        owner = find_owner(self._projects, task_id)
        if owner is None:
            return False
        forest, ok = task_service.promote_subtask(self._projects, owner.id, task_id)
        return self._apply("Promote scope", forest, ok)

    def update_task(
        self,
        task_id: str,
        *,
        text: str | None = None,
        description: str | None = None,
        status: TaskStatus | None = None,
    ) -> bool:
        forest, ok = task_service.update_task(
            self._projects, task_id, text=text, description=description, status=status
        )
        return self._apply("Update scope", forest, ok)

    def reorder_task(self, task_id: str, position: int) -> bool:
        forest, ok = task_service.reorder_task(self._projects, task_id, position)
        return self._apply("Reorder scope", forest, ok)

    # =========================================================================
    # Comments, summaries and results
    # =========================================================================

    def add_comment(self, task_id: str, text: str) -> bool:
        forest, ok = comment_service.add_comment(self._projects, task_id, text)
        return self._apply("Add comment", forest, ok)

    def add_reply(self, task_id: str, parent_comment_id: str, text: str) -> bool:
        forest, ok = comment_service.add_reply(self._projects, task_id, parent_comment_id, text)
        return self._apply("Reply to comment", forest, ok)

    def update_comment(
        self,
        task_id: str,
        comment_id: str,
        *,
        text: str | None = None,
        status: CommentStatus | None = None,
    ) -> bool:
        forest, ok = comment_service.update_comment(
            self._projects, task_id, comment_id, text=text, status=status
        )
        return self._apply("Update comment", forest, ok)

    def delete_comment(self, task_id: str, comment_id: str) -> bool:
        forest, ok = comment_service.delete_comment(self._projects, task_id, comment_id)
        return self._apply("Delete comment", forest, ok)

    def add_summary_to_task(self, task_id: str, text: str) -> bool:
        forest, ok = comment_service.add_summary_to_task(self._projects, task_id, text)
        return self._apply("Add scope summary", forest, ok)

    def add_execution_result(self, task_id: str, result_text: str) -> bool:
        forest, ok = comment_service.add_execution_result(self._projects, task_id, result_text)
        return self._apply("Add execution result", forest, ok)

    # =========================================================================
    # Generated content
    # =========================================================================

    def insert_outline(
        self,
        content: str,
        *,
        project_id: str | None = None,
        anchor_id: str | None = None,
        unwrap_single_root: bool = False,
        label: str = "Insert outline",
    ) -> Result[IngestedOutline, str]:
        """Ingest generated content under a scope or as new folder roots."""
        result = insert_outline(
            self._projects,
            content,
            project_id=project_id,
            anchor_id=anchor_id,
            heading_words=self.heading_words,
            unwrap_single_root=unwrap_single_root,
        )
        if isinstance(result, Err):
            return result
        forest, ingested = result.value
        self._commit(label, forest)
        return Ok(ingested)

    def apply_alternative(
        self,
        node_id: str,
        proposal: AlternativeProposal,
    ) -> Result[PatchOutcome, str]:
        """Replace a scope with an alternative and apply its dependent edits."""
        result = apply_alternative(self._projects, node_id, proposal, self.heading_words)
        if isinstance(result, Err):
            return result
        self._commit(f"Alternative for '{result.value.replaced_title}'", result.value.forest)
        return result

    # =========================================================================
    # History
    # =========================================================================

    def undo(self) -> bool:
        entry = self.history.undo(self._snapshot(""))
        if entry is None:
            return False
        self._restore(entry)
        logger.info(f"Undo: {entry.label}")
        return True

    def redo(self) -> bool:
        entry = self.history.redo(self._snapshot(""))
        if entry is None:
            return False
        self._restore(entry)
        logger.info(f"Redo: {entry.label}")
        return True

    # =========================================================================
    # Internals
    # =========================================================================

    def _snapshot(self, label: str) -> HistoryEntry:
        return HistoryEntry(
            projects=self._projects,
            active_item=self._active_item,
            selected_task_ids=list(self._selected),
            label=label,
        )

    def _restore(self, entry: HistoryEntry) -> None:
        self._projects = entry.projects
        self._active_item = entry.active_item
        self._selected = list(entry.selected_task_ids)
        self._save()

    def _apply(self, label: str, forest: Forest, ok: bool) -> bool:
        if ok:
            self._commit(label, forest)
        return ok

    def _commit(self, label: str, forest: Forest, active_item: ActiveItem | None = None) -> None:
        self.history.record(self._snapshot(label))
        self._projects = forest
        if active_item is not None:
            self._active_item = active_item
        logger.info(label)
        self._save()

    def _save(self) -> None:
        results = (
            self._repository.save_projects(self._projects),
            self._repository.save_active_item(self._active_item),
            self._repository.save_history(self.history.to_state()),
        )
        errors = [result.error for result in results if isinstance(result, Err)]
        if errors:
            self.save_warning = f"Could not save changes: {errors[0]}"
            logger.warning(self.save_warning)
        else:
            self.save_warning = None

    def _save_active_item(self) -> None:
        result = self._repository.save_active_item(self._active_item)
        if isinstance(result, Err):
            self.save_warning = f"Could not save changes: {result.error}"
            logger.warning(self.save_warning)
