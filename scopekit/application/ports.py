"""Boundaries the application layer depends on.

Concrete adapters live in ``scopekit.infrastructure``; tests pass simple
in-memory fakes.
"""

from typing import Protocol

from scopekit.domain.project import Forest
from scopekit.domain.shared import Result
from scopekit.domain.workspace import ActiveItem, HistoryState, Workspace

DEFAULT_MAX_OUTPUT_TOKENS = 4000


class BlobStorage(Protocol):
    """Key/value byte storage.

    Both methods are synchronous. ``save_blob`` raises ``OSError`` when the
    data cannot be written (full disk, quota exceeded, ...).
    """

    def load_blob(self, key: str) -> bytes | None:
        """Return the stored bytes, or None if the key was never saved."""
        ...

    def save_blob(self, key: str, data: bytes) -> None:
        """Store bytes under a key, replacing any previous value."""
        ...


class TextGenerator(Protocol):
    """An external text-generation model.

    Provider and transport failures come back as ``Err`` with a readable
    message; implementations never retry.
    """

    def generate(
        self,
        prompt: str,
        system_instructions: str | None = None,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> Result[str, str]:
        """Generate free-form text (ideally an outline)."""
        ...

    def generate_structured(
        self,
        prompt: str,
        system_instructions: str | None = None,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> Result[str, str]:
        """Generate a response that should be one JSON object."""
        ...


class WorkspaceStorage(Protocol):
    """Loads and saves one user's workspace.

    ``load`` never fails: unreadable data yields a fresh workspace with
    warnings. Save methods report failures as ``Err``.
    """

    def load(self) -> Workspace:
        ...

    def save_projects(self, forest: Forest) -> Result[None, str]:
        ...

    def save_active_item(self, item: ActiveItem) -> Result[None, str]:
        ...

    def save_history(self, state: HistoryState) -> Result[None, str]:
        ...
