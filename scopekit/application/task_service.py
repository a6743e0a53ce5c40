"""Task application service.

Structural operations on the scope forest. Every function takes a forest,
works on a deep copy and returns ``(new_forest, True)`` when it changed
something, or ``(original_forest, False)`` when there was nothing to do
(id not found, source equals target, ...). The forest passed in is never
mutated, so history snapshots that still reference it stay valid.
"""

import logging
from collections.abc import Collection, Sequence

from scopekit.domain.project import Forest, Project, copy_forest
from scopekit.domain.task import (
    Provenance,
    Task,
    TaskStatus,
    find_project,
    iter_tasks,
    locate,
    next_order,
    propagate,
    recompute_tree,
)

logger = logging.getLogger(__name__)

Outcome = tuple[Forest, bool]


def _detach(tasks: list[Task], ids: Collection[str]) -> tuple[list[Task], list[Task]]:
    """Remove every task whose id is in ``ids`` from a tree, in one pass.

    Removed tasks take their whole subtree with them; descendants of a
    removed task are not visited.

    Returns:
        (remaining root tasks, removed tasks in visit order)
    """
    remaining: list[Task] = []
    removed: list[Task] = []
    for task in tasks:
        if task.id in ids:
            removed.append(task)
            continue
        if task.subtasks:
            task.subtasks, below = _detach(task.subtasks, ids)
            removed.extend(below)
        remaining.append(task)
    return remaining, removed


def _sibling_list(project: Project, path: list[Task]) -> list[Task]:
    """Return the list that owns the last task of ``path``."""
    if len(path) == 1:
        return project.tasks
    return path[-2].subtasks


def _forest_ids(forest: Forest) -> set[str]:
    return {task.id for project in forest for task in iter_tasks(project.tasks)}


def create_task(
    forest: Forest,
    project_id: str,
    text: str,
    description: str = "",
) -> Outcome:
    """Append a new leaf task to the end of a folder's roots.

    The created task is the folder's last root in the returned forest.
    """
    updated = copy_forest(forest)
    project = find_project(updated, project_id)
    if project is None:
        return forest, False

    task = Task(
        text=text,
        description=description,
        status=TaskStatus.TODO,
        order=next_order(project.tasks),
        parent_id=None,
        source=Provenance.MANUAL,
    )
    project.tasks.append(task)
    project.touch()
    return updated, True


def _check_new_ids(forest: Forest, new_tasks: Sequence[Task]) -> None:
    incoming = [task.id for task in iter_tasks(new_tasks)]
    if len(set(incoming)) != len(incoming):
        raise ValueError("New tasks contain duplicate ids")
    clashes = _forest_ids(forest).intersection(incoming)
    if clashes:
        raise ValueError(f"Task ids already in use: {', '.join(sorted(clashes))}")


def add_root_tasks(forest: Forest, project_id: str, new_tasks: Sequence[Task]) -> Outcome:
    """Append tasks (with their subtrees) as new roots of a folder.

    Raises:
        ValueError: If any new task (or descendant) reuses an existing id
    """
    _check_new_ids(forest, new_tasks)
    updated = copy_forest(forest)
    project = find_project(updated, project_id)
    if project is None:
        return forest, False

    order = next_order(project.tasks)
    for index, task in enumerate(new_tasks):
        project.tasks.append(
            task.model_copy(deep=True, update={"parent_id": None, "order": order + index})
        )
    project.touch()
    recompute_tree(project.tasks)
    return updated, True


def add_subtasks(forest: Forest, anchor_id: str, new_tasks: Sequence[Task]) -> Outcome:
    """Append tasks to the children of ``anchor_id``.

    New tasks get ``order`` values continuing after the anchor's current
    children and point back at the anchor. Propagation runs from the
    anchor, which becomes a derived-status branch if it was a leaf.

    Raises:
        ValueError: If any new task (or descendant) reuses an existing id
    """
    _check_new_ids(forest, new_tasks)
    updated = copy_forest(forest)
    found = locate(updated, anchor_id)
    if found is None:
        return forest, False
    project, path = found
    anchor = path[-1]

    order = next_order(anchor.subtasks)
    for index, task in enumerate(new_tasks):
        anchor.subtasks.append(
            task.model_copy(deep=True, update={"parent_id": anchor.id, "order": order + index})
        )
    anchor.touch()
    project.touch()
    propagate(updated, anchor_id)
    return updated, True


def replace_subtasks(forest: Forest, anchor_id: str, new_tasks: Sequence[Task]) -> Outcome:
    """Replace all children of ``anchor_id`` with ``new_tasks``.

    Old children and their subtrees are discarded. New tasks are ordered
    by position. Replacing with an empty list turns the anchor back into
    a leaf, which keeps its last status.
    """
    updated = copy_forest(forest)
    found = locate(updated, anchor_id)
    if found is None:
        return forest, False
    project, path = found
    anchor = path[-1]

    discarded = {task.id for task in iter_tasks(anchor.subtasks)}
    incoming = {task.id for task in iter_tasks(new_tasks)}
    if (_forest_ids(updated) - discarded) & incoming:
        raise ValueError("Replacement subtasks reuse ids that are still in the forest")

    anchor.subtasks = [
        task.model_copy(deep=True, update={"parent_id": anchor.id, "order": index})
        for index, task in enumerate(new_tasks)
    ]
    anchor.touch()
    project.touch()
    propagate(updated, anchor_id)
    return updated, True


def delete_task(forest: Forest, task_id: str) -> Outcome:
    """Delete a task with its subtree, comments and results."""
    updated = copy_forest(forest)
    found = locate(updated, task_id)
    if found is None:
        return forest, False
    project, _path = found

    project.tasks, removed = _detach(project.tasks, {task_id})
    project.touch()
    propagate(updated, None)
    logger.debug(f"Deleted task {task_id} from folder {project.id}")
    return updated, bool(removed)


def delete_selected(
    forest: Forest,
    task_ids: Collection[str],
    project_id: str | None = None,
) -> Outcome:
    """Delete several tasks in one pass per folder.

    Args:
        forest: Current forest
        task_ids: Ids to remove; unknown ids are ignored
        project_id: Restrict the removal to one folder

    Returns:
        (new_forest, True) if at least one task was removed
    """
    ids = set(task_ids)
    if not ids:
        return forest, False

    updated = copy_forest(forest)
    removed_count = 0
    for project in updated:
        if project_id is not None and project.id != project_id:
            continue
        project.tasks, removed = _detach(project.tasks, ids)
        if removed:
            removed_count += len(removed)
            project.touch()

    if removed_count == 0:
        return forest, False
    propagate(updated, None)
    logger.debug(f"Deleted {removed_count} selected task(s)")
    return updated, True


def move_task_to_project(
    forest: Forest,
    task_id: str,
    source_project_id: str,
    target_project_id: str,
) -> Outcome:
    """Move a task and its subtree to the end of another folder's roots.

    The moved task always becomes a root in the target folder.
    """
    if source_project_id == target_project_id:
        return forest, False

    updated = copy_forest(forest)
    source = find_project(updated, source_project_id)
    target = find_project(updated, target_project_id)
    if source is None or target is None:
        return forest, False

    source.tasks, removed = _detach(source.tasks, {task_id})
    if not removed:
        return forest, False

    moved = removed[0]
    moved.parent_id = None
    moved.order = next_order(target.tasks)
    moved.touch()
    target.tasks.append(moved)
    source.touch()
    target.touch()

    recompute_tree(source.tasks)
    recompute_tree(target.tasks)
    return updated, True


def promote_subtask(forest: Forest, project_id: str, task_id: str) -> Outcome:
    """Detach a subtask from its parent and append it as a folder root."""
    updated = copy_forest(forest)
    project = find_project(updated, project_id)
    if project is None:
        return forest, False
    found = locate([project], task_id)
    if found is None:
        return forest, False
    _project, path = found
    if len(path) < 2:
        return forest, False

    parent, task = path[-2], path[-1]
    parent.subtasks = [child for child in parent.subtasks if child.id != task_id]
    parent.touch()
    task.parent_id = None
    task.order = next_order(project.tasks)
    task.touch()
    project.tasks.append(task)
    project.touch()

    propagate(updated, parent.id)
    return updated, True


def update_task(
    forest: Forest,
    task_id: str,
    *,
    text: str | None = None,
    description: str | None = None,
    status: TaskStatus | None = None,
) -> Outcome:
    """Merge field changes into a task and stamp ``last_edited``.

    Status can only be set on a leaf; on a branch it is derived from the
    children and a requested status is ignored.
    """
    updated = copy_forest(forest)
    found = locate(updated, task_id)
    if found is None:
        return forest, False
    project, path = found
    task = path[-1]

    if text is not None:
        task.text = text
    if description is not None:
        task.description = description

    status_changed = False
    if status is not None:
        if task.is_leaf():
            status_changed = status != task.status
            task.set_status(status)
        else:
            logger.debug(f"Ignoring status {status.value} on branch task {task_id}")

    task.touch()
    project.touch()
    if status_changed:
        propagate(updated, task_id)
    return updated, True


def reorder_task(forest: Forest, task_id: str, position: int) -> Outcome:
    """Move a task to ``position`` among its siblings.

    Siblings are renumbered ``0..n-1`` in their new sequence. Positions
    outside the list are clamped.
    """
    updated = copy_forest(forest)
    found = locate(updated, task_id)
    if found is None:
        return forest, False
    project, path = found

    siblings = sorted(_sibling_list(project, path), key=lambda t: t.order)
    task = path[-1]
    siblings = [sibling for sibling in siblings if sibling.id != task_id]
    position = max(0, min(position, len(siblings)))
    siblings.insert(position, task)
    for index, sibling in enumerate(siblings):
        sibling.order = index

    if len(path) == 1:
        project.tasks = siblings
    else:
        path[-2].subtasks = siblings
        path[-2].touch()
    task.touch()
    project.touch()
    return updated, True
