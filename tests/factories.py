"""Builders for scope trees used across the test suite."""

from scopekit.domain.project import Forest, Project, make_unassigned_project
from scopekit.domain.shared import new_id
from scopekit.domain.task import Task, TaskStatus, recompute_tree


def make_task(
    text: str,
    *subtasks: Task,
    status: TaskStatus = TaskStatus.TODO,
    task_id: str | None = None,
    description: str = "",
) -> Task:
    """Build a task whose children point back at it in the given order."""
    task = Task(
        id=task_id or new_id(),
        text=text,
        description=description,
        status=status,
        completed=status == TaskStatus.DONE,
    )
    task.subtasks = [
        child.model_copy(update={"parent_id": task.id, "order": index})
        for index, child in enumerate(subtasks)
    ]
    return task


def make_project(name: str, *tasks: Task, project_id: str | None = None) -> Project:
    """Build a folder with settled branch statuses."""
    project = Project(
        id=project_id or new_id(),
        name=name,
        tasks=[task.model_copy(update={"order": index}) for index, task in enumerate(tasks)],
    )
    recompute_tree(project.tasks)
    return project


def make_forest(*projects: Project) -> Forest:
    return [make_unassigned_project(), *projects]
