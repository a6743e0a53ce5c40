"""Comment, summary and execution-result operations on a task.

Comments form a small tree per task (replies are owned by their parent
comment) but take no part in status rollup. Summaries and execution
results are append-only and kept newest first.
"""

from collections.abc import Callable

from scopekit.domain.project import Forest, copy_forest
from scopekit.domain.shared import now_ms
from scopekit.domain.task import (
    Comment,
    CommentStatus,
    ExecutionResult,
    Summary,
    Task,
    locate,
)

Outcome = tuple[Forest, bool]


def _with_task(forest: Forest, task_id: str, action: Callable[[Task], bool]) -> Outcome:
    """Run ``action`` on a copy of the task and stamp it if it reports a change."""
    updated = copy_forest(forest)
    found = locate(updated, task_id)
    if found is None:
        return forest, False
    project, path = found
    task = path[-1]
    if not action(task):
        return forest, False
    task.touch()
    project.touch()
    return updated, True


def _find_comment(comments: list[Comment], comment_id: str) -> Comment | None:
    for comment in comments:
        if comment.id == comment_id:
            return comment
        found = _find_comment(comment.replies, comment_id)
        if found is not None:
            return found
    return None


def _remove_comment(comments: list[Comment], comment_id: str) -> tuple[list[Comment], bool]:
    remaining: list[Comment] = []
    removed = False
    for comment in comments:
        if comment.id == comment_id:
            removed = True
            continue
        comment.replies, below = _remove_comment(comment.replies, comment_id)
        removed = removed or below
        remaining.append(comment)
    return remaining, removed


def add_comment(forest: Forest, task_id: str, text: str) -> Outcome:
    """Append a top-level comment to a task."""

    def action(task: Task) -> bool:
        task.comments.append(Comment(text=text))
        return True

    return _with_task(forest, task_id, action)


def add_reply(forest: Forest, task_id: str, parent_comment_id: str, text: str) -> Outcome:
    """Append a reply to any comment in a task's thread."""

    def action(task: Task) -> bool:
        parent = _find_comment(task.comments, parent_comment_id)
        if parent is None:
            return False
        parent.replies.append(Comment(text=text))
        return True

    return _with_task(forest, task_id, action)


def update_comment(
    forest: Forest,
    task_id: str,
    comment_id: str,
    *,
    text: str | None = None,
    status: CommentStatus | None = None,
) -> Outcome:
    """Edit a comment's text and/or review status.

    Editing text marks the comment as edited. Any update refreshes the
    comment's timestamp.
    """

    def action(task: Task) -> bool:
        comment = _find_comment(task.comments, comment_id)
        if comment is None:
            return False
        if text is not None:
            comment.text = text
            comment.edited = True
        if status is not None:
            comment.status = status
        comment.timestamp = now_ms()
        return True

    return _with_task(forest, task_id, action)


def delete_comment(forest: Forest, task_id: str, comment_id: str) -> Outcome:
    """Delete a comment together with all of its replies."""

    def action(task: Task) -> bool:
        task.comments, removed = _remove_comment(task.comments, comment_id)
        return removed

    return _with_task(forest, task_id, action)


def add_summary_to_task(forest: Forest, task_id: str, text: str) -> Outcome:
    """Prepend a summary to a task."""

    def action(task: Task) -> bool:
        task.summaries = [Summary(text=text)] + task.summaries
        return True

    return _with_task(forest, task_id, action)


def add_execution_result(forest: Forest, task_id: str, result_text: str) -> Outcome:
    """Prepend an execution result to a task."""

    def action(task: Task) -> bool:
        task.execution_results = [ExecutionResult(result_text=result_text)] + task.execution_results
        return True

    return _with_task(forest, task_id, action)
