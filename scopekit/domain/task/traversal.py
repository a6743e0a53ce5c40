"""Pure tree traversal and query functions.

All functions in this module are pure - no I/O, no side effects.
They take data in, return data out. Nothing here mutates the forest it
is given, so every query is safe to call on a history snapshot.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

from .models import Comment, CompletionCount, DependencyCandidate, Task, TaskStatus

if TYPE_CHECKING:
    from scopekit.domain.project.models import Forest, Project

T = TypeVar("T")


class SortKey(str, Enum):
    """Keys scopes and folders can be sorted by."""

    ORDER = "order"
    NAME = "name"
    COMPLETION = "completion"
    COMPLEXITY = "complexity"
    EDIT_DATE = "edit-date"


_STATUS_RANK = {TaskStatus.TODO: 0, TaskStatus.IN_PROGRESS: 1, TaskStatus.DONE: 2}


# =============================================================================
# Fundamental Operations
# =============================================================================


def fold_tasks(
    tasks: Sequence[Task],
    initial: T,
    f: Callable[[T, Task, list[Task]], T],
) -> T:
    """Fold over every task in a forest of root tasks.

    Visits tasks depth-first in stored order. ``f`` receives the
    accumulator, the task and its ancestor chain (root first, the task
    itself excluded).

    Args:
        tasks: Root tasks to fold over
        initial: Starting accumulator value
        f: Function (accumulator, task, ancestors) -> new_accumulator

    Returns:
        Final accumulated value after visiting all tasks
    """

    def fold_node(acc: T, task: Task, ancestors: list[Task]) -> T:
        acc = f(acc, task, ancestors)
        child_ancestors = ancestors + [task]
        for child in task.subtasks:
            acc = fold_node(acc, child, child_ancestors)
        return acc

    result = initial
    for task in tasks:
        result = fold_node(result, task, [])
    return result


def iter_tasks(tasks: Sequence[Task]) -> Iterator[Task]:
    """Yield every task in pre-order."""
    for task in tasks:
        yield task
        yield from iter_tasks(task.subtasks)


def count_tasks(tasks: Sequence[Task]) -> int:
    """Count all tasks, branches included."""
    return fold_tasks(tasks, 0, lambda acc, _task, _ancestors: acc + 1)


def find_task_path(tasks: Sequence[Task], task_id: str) -> list[Task]:
    """Find the chain of tasks from a root down to ``task_id``.

    Returns:
        Tasks from the root to the match (inclusive), or an empty list
    """
    for task in tasks:
        if task.id == task_id:
            return [task]
        path = find_task_path(task.subtasks, task_id)
        if path:
            return [task] + path
    return []


def find_task(tasks: Sequence[Task], task_id: str) -> Task | None:
    """Find a task anywhere below ``tasks`` by id."""
    for task in tasks:
        if task.id == task_id:
            return task
        found = find_task(task.subtasks, task_id)
        if found is not None:
            return found
    return None


def find_path(forest: Forest, task_id: str) -> list[Task]:
    """Find the chain of tasks from a folder root to ``task_id``.

    Ids are unique across the forest, so at most one folder matches.
    Used for breadcrumbs and ancestor lookups.
    """
    for project in forest:
        path = find_task_path(project.tasks, task_id)
        if path:
            return path
    return []


def find_node(forest: Forest, task_id: str) -> Task | None:
    """Find a task anywhere in the forest by id."""
    for project in forest:
        found = find_task(project.tasks, task_id)
        if found is not None:
            return found
    return None


def find_owner(forest: Forest, task_id: str) -> Project | None:
    """Find the folder whose tree contains ``task_id``."""
    for project in forest:
        if find_task(project.tasks, task_id) is not None:
            return project
    return None


def find_project(forest: Forest, project_id: str) -> Project | None:
    """Find a folder by id."""
    for project in forest:
        if project.id == project_id:
            return project
    return None


def locate(forest: Forest, task_id: str) -> tuple[Project, list[Task]] | None:
    """Find a task together with its folder and root-to-task path."""
    for project in forest:
        path = find_task_path(project.tasks, task_id)
        if path:
            return project, path
    return None


def next_order(tasks: Sequence[Task]) -> int:
    """Return the order value for a task appended after ``tasks``."""
    if not tasks:
        return 0
    return max(task.order for task in tasks) + 1


# =============================================================================
# Counting and Progress
# =============================================================================


def count_direct_children(children: Sequence[Task]) -> CompletionCount:
    """Count direct children and how many of them are done."""
    completed = sum(1 for child in children if child.status == TaskStatus.DONE)
    return CompletionCount(completed=completed, total=len(children))


def count_leaves_recursive(tasks: Sequence[Task]) -> CompletionCount:
    """Count leaves below ``tasks`` and how many of them are done.

    Only leaves are units of completion; branches are recursed through
    but never counted themselves.
    """

    def count(acc: tuple[int, int], task: Task, _ancestors: list[Task]) -> tuple[int, int]:
        if not task.is_leaf():
            return acc
        completed, total = acc
        return completed + (task.status == TaskStatus.DONE), total + 1

    completed, total = fold_tasks(tasks, (0, 0), count)
    return CompletionCount(completed=completed, total=total)


def calculate_task_progress(task: Task) -> float:
    """Progress of one task in percent.

    A leaf is 0 or 100; a branch is the share of its direct children
    that are done.
    """
    if task.is_leaf():
        return 100.0 if task.status == TaskStatus.DONE else 0.0
    counts = count_direct_children(task.subtasks)
    return counts.completed / counts.total * 100


def calculate_project_progress(tasks: Sequence[Task]) -> float:
    """Progress of a folder in percent, measured over its leaves."""
    counts = count_leaves_recursive(tasks)
    if counts.total == 0:
        return 0.0
    return counts.completed / counts.total * 100


def count_comments(comments: Sequence[Comment]) -> int:
    """Count comments including all nested replies."""
    return sum(1 + count_comments(comment.replies) for comment in comments)


def count_comments_recursive(tasks: Sequence[Task]) -> int:
    """Count every comment and reply on every task below ``tasks``."""
    return fold_tasks(
        tasks, 0, lambda acc, task, _ancestors: acc + count_comments(task.comments)
    )


def task_complexity(task: Task) -> int:
    """Size of the subtree rooted at ``task``, the task included."""
    return 1 + sum(task_complexity(child) for child in task.subtasks)


# =============================================================================
# Sorting
# =============================================================================


def sort_tasks(
    tasks: Sequence[Task],
    key: SortKey = SortKey.ORDER,
    descending: bool = False,
    recursive: bool = False,
) -> list[Task]:
    """Return ``tasks`` sorted for display.

    Sorting is stable, so ties keep their stored position. With
    ``recursive`` the subtasks of every returned task are sorted too; the
    returned tasks are then copies and the input is left untouched.
    """
    key_funcs: dict[SortKey, Callable[[Task], object]] = {
        SortKey.ORDER: lambda task: task.order,
        SortKey.NAME: lambda task: task.text.casefold(),
        SortKey.COMPLETION: lambda task: _STATUS_RANK[task.status],
        SortKey.COMPLEXITY: task_complexity,
        SortKey.EDIT_DATE: lambda task: task.last_edited,
    }
    ordered = sorted(tasks, key=key_funcs[key], reverse=descending)
    if not recursive:
        return ordered
    return [
        task.model_copy(
            update={"subtasks": sort_tasks(task.subtasks, key, descending, recursive)}
        )
        for task in ordered
    ]


def sort_projects(
    forest: Forest,
    key: SortKey = SortKey.ORDER,
    descending: bool = False,
) -> list[Project]:
    """Return folders sorted for display.

    Pinned folders come first, then the rest; the Unassigned folder is
    always last regardless of key or direction.
    """
    key_funcs: dict[SortKey, Callable[[Project], object]] = {
        SortKey.ORDER: lambda project: project.order,
        SortKey.NAME: lambda project: project.name.casefold(),
        SortKey.COMPLETION: lambda project: calculate_project_progress(project.tasks),
        SortKey.COMPLEXITY: lambda project: sum(task_complexity(t) for t in project.tasks),
        SortKey.EDIT_DATE: lambda project: project.last_edited,
    }
    others = [project for project in forest if not project.is_unassigned]
    unassigned = [project for project in forest if project.is_unassigned]
    ordered = sorted(others, key=key_funcs[key], reverse=descending)
    pinned = [project for project in ordered if project.pinned]
    unpinned = [project for project in ordered if not project.pinned]
    return pinned + unpinned + unassigned


# =============================================================================
# Dependency Scan
# =============================================================================


def _comments_mention(comments: Sequence[Comment], needle: str) -> bool:
    return any(
        needle in comment.text.lower() or _comments_mention(comment.replies, needle)
        for comment in comments
    )


def _mentions(task: Task, needle: str) -> bool:
    return (
        needle in task.text.lower()
        or needle in task.description.lower()
        or any(needle in r.result_text.lower() for r in task.execution_results)
        or any(needle in s.text.lower() for s in task.summaries)
        or _comments_mention(task.comments, needle)
    )


def scan_dependencies(tasks: Sequence[Task], phrase: str) -> list[DependencyCandidate]:
    """Find tasks whose content mentions ``phrase`` (case-insensitive).

    Searches text, description, execution results, summaries and the
    full comment threads. Each match carries its breadcrumb path joined
    with `` > ``.
    """
    needle = phrase.strip().lower()
    if not needle:
        return []

    def collect(
        acc: list[DependencyCandidate], task: Task, ancestors: list[Task]
    ) -> list[DependencyCandidate]:
        if _mentions(task, needle):
            path = " > ".join(t.text for t in ancestors + [task])
            acc.append(
                DependencyCandidate(
                    id=task.id, path=path, text=task.text, description=task.description
                )
            )
        return acc

    return fold_tasks(tasks, [], collect)
