"""Scope (task) domain models.

Pure domain models for the scope tree. Uses Pydantic for serialization
compatibility with the stored workspace format, which uses camelCase
field names (``lastEdited``, ``parentId``, ...).
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from scopekit.domain.shared.clock import new_id, now_ms


class TaskStatus(str, Enum):
    """Status of a scope in the tree."""

    TODO = "todo"
    IN_PROGRESS = "inprogress"
    DONE = "done"


class CommentStatus(str, Enum):
    """Review state of a comment."""

    ACTIVE = "active"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Provenance(str, Enum):
    """Where a scope came from."""

    AI = "ai"
    MANUAL = "manual"


class Comment(BaseModel):
    """A threaded comment on a scope.

    Replies are owned by their parent comment, the same way subtasks are
    owned by their parent scope. Comments never take part in status rollup.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id)
    text: str = ""
    timestamp: int = Field(default_factory=now_ms)
    status: CommentStatus = CommentStatus.ACTIVE
    edited: bool = False
    replies: list["Comment"] = Field(default_factory=list)


class ExecutionResult(BaseModel):
    """Output of one AI execution of a scope. Immutable once appended."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: int = Field(default_factory=now_ms)
    result_text: str = Field(default="", alias="resultText")


class Summary(BaseModel):
    """A generated summary. Immutable once appended; lists are newest-first."""

    model_config = ConfigDict(frozen=True)

    text: str
    timestamp: int = Field(default_factory=now_ms)


class Task(BaseModel):
    """A node in the scope tree.

    Leaf nodes (those without subtasks) have a freely settable status.
    Nodes with subtasks have a status derived from their children, see
    ``scopekit.domain.task.propagation``. ``completed`` mirrors
    ``status == done`` and is kept for older stored data.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id)
    text: str
    description: str = ""
    completed: bool = False
    status: TaskStatus = TaskStatus.TODO
    subtasks: list["Task"] = Field(default_factory=list)
    last_edited: int = Field(default_factory=now_ms, alias="lastEdited")
    order: int = 0
    parent_id: str | None = Field(default=None, alias="parentId")
    comments: list[Comment] = Field(default_factory=list)
    execution_results: list[ExecutionResult] = Field(
        default_factory=list, alias="executionResults"
    )
    summaries: list[Summary] = Field(default_factory=list)
    source: Provenance = Provenance.MANUAL

    def is_leaf(self) -> bool:
        """Check if this node is a leaf (no subtasks).

        A parent whose last subtask was removed is a leaf again and
        follows the leaf rules.
        """
        return len(self.subtasks) == 0

    def set_status(self, status: TaskStatus) -> None:
        """Set status and keep ``completed`` in step with it."""
        self.status = status
        self.completed = status == TaskStatus.DONE

    def touch(self) -> None:
        """Stamp ``last_edited`` with the current time."""
        self.last_edited = now_ms()


class CompletionCount(BaseModel):
    """Completed/total pair used for progress display."""

    model_config = ConfigDict(frozen=True)

    completed: int = 0
    total: int = 0


class DependencyCandidate(BaseModel):
    """A scope whose content mentions a phrase, with its breadcrumb path.

    Handed to the generation collaborator so it can propose minimal edits
    to scopes that depend on one being replaced.
    """

    id: str
    path: str
    text: str = ""
    description: str = ""
