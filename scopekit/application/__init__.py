"""Application service layer for scopekit.

Services are pure functions that combine domain logic without performing
I/O; each takes a forest and returns a new one. ``ScopeStore`` owns the
current forest, history and persistence, and the generation flows connect
it to a text generator.

Services:
    task_service - Structural scope operations (create, move, promote, ...)
    project_service - Folder operations and summaries
    comment_service - Comments, summaries and execution results
    ingestion_service - Generated outline to new scopes
    patch_service - Alternative-scope replacement with whitelisted edits
    history - Undo/redo stacks
    generation_service - Async flows calling the text generator

Example usage:
    >>> from scopekit.application import create_task, update_task
    >>> from scopekit.domain.task import TaskStatus
    >>>
    >>> forest, ok = create_task(forest, "unassigned", "Plan the trip")
    >>> task_id = forest[0].tasks[-1].id
    >>> forest, ok = update_task(forest, task_id, status=TaskStatus.DONE)
"""

from scopekit.application.comment_service import (
    add_comment,
    add_execution_result,
    add_reply,
    add_summary_to_task,
    delete_comment,
    update_comment,
)
from scopekit.application.history import HistoryManager
from scopekit.application.ingestion_service import (
    IngestedOutline,
    ingest_outline,
    insert_outline,
)
from scopekit.application.patch_service import (
    AlternativeProposal,
    PatchOutcome,
    apply_alternative,
)
from scopekit.application.project_service import (
    add_summary_to_project,
    create_project,
    delete_project,
    get_project_summary,
    update_project,
)
from scopekit.application.store import ScopeStore
from scopekit.application.task_service import (
    add_root_tasks,
    add_subtasks,
    create_task,
    delete_selected,
    delete_task,
    move_task_to_project,
    promote_subtask,
    reorder_task,
    replace_subtasks,
    update_task,
)

__all__ = [
    # Task service
    "create_task",
    "add_root_tasks",
    "add_subtasks",
    "replace_subtasks",
    "delete_task",
    "delete_selected",
    "move_task_to_project",
    "promote_subtask",
    "update_task",
    "reorder_task",
    # Project service
    "create_project",
    "update_project",
    "delete_project",
    "add_summary_to_project",
    "get_project_summary",
    # Comment service
    "add_comment",
    "add_reply",
    "update_comment",
    "delete_comment",
    "add_summary_to_task",
    "add_execution_result",
    # Ingestion and patching
    "IngestedOutline",
    "ingest_outline",
    "insert_outline",
    "AlternativeProposal",
    "PatchOutcome",
    "apply_alternative",
    # State
    "HistoryManager",
    "ScopeStore",
]
