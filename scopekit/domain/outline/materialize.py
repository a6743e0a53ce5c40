"""Turn outline entries into new scope tasks.

Every materialized task gets a fresh id, ``todo`` status, provenance
``ai`` and an ``order`` equal to its position among its siblings.
"""

from collections.abc import Sequence

from scopekit.domain.task.models import Provenance, Task, TaskStatus

from .models import OutlineBranch, OutlineEntry


def entry_text(entry: OutlineEntry) -> tuple[str, str]:
    """Return the (text, description) a task built from ``entry`` gets.

    - a leaf without content is titled by the entry
    - a leaf with one content string reads ``title: value``
    - a leaf with several content strings keeps the title and lists the
      content as ``- item`` lines in the description
    - a branch is titled by the entry
    """
    if isinstance(entry.node, OutlineBranch):
        return entry.title, ""
    content = entry.node.content
    if not content:
        return entry.title, ""
    if len(content) == 1:
        return f"{entry.title}: {content[0]}", ""
    return entry.title, "\n".join(f"- {item}" for item in content)


def materialize(
    entries: Sequence[OutlineEntry],
    parent_id: str | None = None,
    start_order: int = 0,
) -> list[Task]:
    """Build tasks for ``entries`` and all their descendants.

    Args:
        entries: Outline entries to convert, in sibling order
        parent_id: Id the returned tasks point back to
        start_order: Order value of the first returned task

    Returns:
        New tasks; their subtasks are linked to them by ``parent_id``
    """
    tasks: list[Task] = []
    for index, entry in enumerate(entries):
        text, description = entry_text(entry)
        task = Task(
            text=text,
            description=description,
            status=TaskStatus.TODO,
            order=start_order + index,
            parent_id=parent_id,
            source=Provenance.AI,
        )
        if isinstance(entry.node, OutlineBranch):
            task.subtasks = materialize(entry.node.children, parent_id=task.id)
        tasks.append(task)
    return tasks
