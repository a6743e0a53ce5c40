"""Project application service.

Folder-level operations. Like the task service, every function is pure:
it takes a forest and returns a new one without touching its input.
"""

from scopekit.domain.project import Forest, Project, ProjectSummary, copy_forest
from scopekit.domain.shared import Err, Ok, Result
from scopekit.domain.task import (
    Summary,
    calculate_project_progress,
    count_leaves_recursive,
    count_tasks,
    find_project,
)

Outcome = tuple[Forest, bool]


def get_project_summary(project: Project) -> ProjectSummary:
    """Create a listing summary for one folder.

    Progress is measured over leaves, the same way folder progress is
    shown everywhere else.

    Args:
        project: The folder to summarize.

    Returns:
        ProjectSummary with progress information.
    """
    counts = count_leaves_recursive(project.tasks)
    return ProjectSummary(
        id=project.id,
        name=project.name,
        pinned=project.pinned,
        root_tasks=len(project.tasks),
        total_tasks=count_tasks(project.tasks),
        completed_tasks=counts.completed,
        progress_percent=round(calculate_project_progress(project.tasks), 1),
    )


def create_project(
    forest: Forest,
    name: str,
    description: str = "",
) -> Result[tuple[Forest, Project], str]:
    """Create a new, empty folder.

    The folder is ordered after every existing folder except Unassigned.

    Args:
        forest: Current forest.
        name: Human-readable folder name.
        description: Optional folder description.

    Returns:
        Ok((new_forest, Project)) on success, or
        Err(str) with validation error message.
    """
    if not name:
        return Err("Folder name cannot be empty")

    if not name.strip():
        return Err("Folder name cannot be whitespace only")

    project = Project(
        name=name.strip(),
        description=description,
        order=sum(1 for p in forest if not p.is_unassigned),
    )
    updated = copy_forest(forest)
    updated.append(project)
    return Ok((updated, project))


def update_project(
    forest: Forest,
    project_id: str,
    *,
    name: str | None = None,
    description: str | None = None,
    pinned: bool | None = None,
) -> Outcome:
    """Rename, describe, pin or unpin a folder.

    The Unassigned folder keeps its name and pin; only its description
    can change. A blank name is refused.
    """
    updated = copy_forest(forest)
    project = find_project(updated, project_id)
    if project is None:
        return forest, False
    if project.is_unassigned and (name is not None or pinned is not None):
        return forest, False
    if name is not None and not name.strip():
        return forest, False

    if name is not None:
        project.name = name.strip()
    if description is not None:
        project.description = description
    if pinned is not None:
        project.pinned = pinned
    project.touch()
    return updated, True


def delete_project(forest: Forest, project_id: str) -> Outcome:
    """Delete a folder and every task in it. Unassigned cannot be deleted."""
    if not any(p.id == project_id and not p.is_unassigned for p in forest):
        return forest, False
    return [p.model_copy(deep=True) for p in forest if p.id != project_id], True


def add_summary_to_project(forest: Forest, project_id: str, text: str) -> Outcome:
    """Prepend a summary to a folder (summaries are newest first)."""
    updated = copy_forest(forest)
    project = find_project(updated, project_id)
    if project is None:
        return forest, False
    project.summaries = [Summary(text=text)] + project.summaries
    project.touch()
    return updated, True
