"""Status rollup from children to parents.

A task with subtasks never carries a user-chosen status; its status is
derived from its direct children:

- ``done`` if every child is done
- ``inprogress`` if any child is in progress or done
- ``todo`` otherwise

Recomputation mutates the forest it is given. Callers pass a copy they own
(see ``scopekit.domain.project.copy_forest``).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .models import Task, TaskStatus
from .traversal import find_path

if TYPE_CHECKING:
    from scopekit.domain.project.models import Forest

logger = logging.getLogger(__name__)


def derive_status(children: Sequence[Task]) -> TaskStatus:
    """Compute the status a parent gets from its direct children."""
    if all(child.status == TaskStatus.DONE for child in children):
        return TaskStatus.DONE
    if any(child.status in (TaskStatus.IN_PROGRESS, TaskStatus.DONE) for child in children):
        return TaskStatus.IN_PROGRESS
    return TaskStatus.TODO


def recompute(task: Task) -> bool:
    """Recompute one task's derived status in place.

    Leaves are left alone. ``last_edited`` is only stamped when the status
    actually changes.

    Returns:
        True if the status changed
    """
    if task.is_leaf():
        return False
    status = derive_status(task.subtasks)
    if status == task.status:
        task.completed = status == TaskStatus.DONE
        return False
    task.set_status(status)
    task.touch()
    return True


def recompute_tree(tasks: Sequence[Task]) -> int:
    """Recompute every branch below ``tasks`` in post-order.

    Children are settled before their parent, so nested branches see
    fresh statuses in a single pass.

    Returns:
        Number of tasks whose status changed
    """
    changed = 0
    for task in tasks:
        changed += recompute_tree(task.subtasks)
        if recompute(task):
            changed += 1
    return changed


def propagate(forest: Forest, changed_id: str | None) -> Forest:
    """Bring derived statuses up to date after a change.

    With a task id, the task itself (if it has children) and then each of
    its ancestors are recomputed bottom-up. With ``None`` every branch in
    every folder is recomputed, which is what bulk topology changes need.
    An id that no longer exists is a no-op.

    Args:
        forest: Folders to update in place
        changed_id: Id of the task that changed, or None for a full pass

    Returns:
        The same forest, for chaining
    """
    if changed_id is None:
        changed = sum(recompute_tree(project.tasks) for project in forest)
        logger.debug(f"Full status pass changed {changed} task(s)")
        return forest

    path = find_path(forest, changed_id)
    if not path:
        logger.debug(f"Propagation skipped, task {changed_id} not found")
        return forest

    changed = 0
    for task in reversed(path):
        if recompute(task):
            changed += 1
    logger.debug(f"Propagation from {changed_id} changed {changed} task(s)")
    return forest
