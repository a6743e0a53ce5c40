"""Folder (project) domain models.

A folder owns an ordered list of root scopes. The whole set of folders is
the forest every structural operation works on. These are pure data
structures with no I/O or side effects.
"""

from pydantic import BaseModel, ConfigDict, Field

from scopekit.domain.shared.clock import new_id, now_ms
from scopekit.domain.task.models import Summary, Task

UNASSIGNED_ID = "unassigned"
UNASSIGNED_NAME = "Unassigned"
UNASSIGNED_ORDER = 9999
UNASSIGNED_DESCRIPTION = "Scopes that have not been assigned to a specific folder."


class Project(BaseModel):
    """A named folder owning a forest of root scopes."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    tasks: list[Task] = Field(default_factory=list)
    order: int = 0
    last_edited: int = Field(default_factory=now_ms, alias="lastEdited")
    summaries: list[Summary] = Field(default_factory=list)
    pinned: bool = False

    @property
    def is_unassigned(self) -> bool:
        """True for the reserved folder that can never be deleted."""
        return self.id == UNASSIGNED_ID

    def touch(self) -> None:
        """Stamp ``last_edited`` with the current time."""
        self.last_edited = now_ms()


class ProjectSummary(BaseModel):
    """Summary of a folder for listing.

    A lightweight view suitable for listing folders without walking
    their scope trees again.
    """

    id: str
    name: str
    pinned: bool = False
    root_tasks: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    progress_percent: float = 0.0


# The forest: every folder with its scope trees
Forest = list[Project]


def make_unassigned_project() -> Project:
    """Create a fresh, empty Unassigned folder."""
    return Project(
        id=UNASSIGNED_ID,
        name=UNASSIGNED_NAME,
        description=UNASSIGNED_DESCRIPTION,
        order=UNASSIGNED_ORDER,
        pinned=True,
    )


def copy_forest(forest: Forest) -> Forest:
    """Deep-copy a forest so the copy can be mutated freely.

    Every structural operation works on a copy; the forest it was given
    may still be referenced by history snapshots.
    """
    return [project.model_copy(deep=True) for project in forest]
