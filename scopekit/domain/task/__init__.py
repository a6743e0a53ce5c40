"""Task domain - the scope tree.

All exports are pure (no I/O). Propagation functions mutate only the
forest copy they are handed.

Key Types:
    TaskStatus - Scope state enumeration
    Task - Tree node owning its subtasks
    Comment - Threaded comment owning its replies
    ExecutionResult, Summary - Append-only records on a scope
    CompletionCount - Completed/total pair
    DependencyCandidate - Match returned by a dependency scan

Traversal Functions:
    fold_tasks - Fundamental fold operation
    find_path / find_node / find_owner - Forest-wide lookups
    count_direct_children / count_leaves_recursive - Completion counts
    sort_tasks / sort_projects - Display ordering
    scan_dependencies - Phrase search across scope content

Propagation Functions:
    derive_status - Status a parent gets from its children
    propagate - Recompute ancestors of a change, or everything
"""

from .models import (
    Comment,
    CommentStatus,
    CompletionCount,
    DependencyCandidate,
    ExecutionResult,
    Provenance,
    Summary,
    Task,
    TaskStatus,
)
from .propagation import derive_status, propagate, recompute, recompute_tree
from .traversal import (
    SortKey,
    calculate_project_progress,
    calculate_task_progress,
    count_comments,
    count_comments_recursive,
    count_direct_children,
    count_leaves_recursive,
    count_tasks,
    find_node,
    find_owner,
    find_path,
    find_project,
    find_task,
    find_task_path,
    fold_tasks,
    iter_tasks,
    locate,
    next_order,
    scan_dependencies,
    sort_projects,
    sort_tasks,
    task_complexity,
)

__all__ = [
    # Models
    "TaskStatus",
    "CommentStatus",
    "Provenance",
    "Comment",
    "ExecutionResult",
    "Summary",
    "Task",
    "CompletionCount",
    "DependencyCandidate",
    # Traversal
    "SortKey",
    "fold_tasks",
    "iter_tasks",
    "count_tasks",
    "find_task_path",
    "find_task",
    "find_path",
    "find_node",
    "find_owner",
    "find_project",
    "locate",
    "next_order",
    "count_direct_children",
    "count_leaves_recursive",
    "calculate_task_progress",
    "calculate_project_progress",
    "count_comments",
    "count_comments_recursive",
    "task_complexity",
    "sort_tasks",
    "sort_projects",
    "scan_dependencies",
    # Propagation
    "derive_status",
    "recompute",
    "recompute_tree",
    "propagate",
]
