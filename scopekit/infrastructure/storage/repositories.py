"""Workspace persistence on top of a blob storage.

Each user has three keys:

- ``projects_<user>``: the forest
- ``activeItem_<user>``: the active folder and scope
- ``history_<user>``: the undo/redo stacks

Values are UTF-8 JSON using the camelCase field names of the models.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from scopekit.application.ports import BlobStorage
from scopekit.domain.project import Forest, make_unassigned_project
from scopekit.domain.shared.result import Err, Ok, Result
from scopekit.domain.workspace import (
    ActiveItem,
    HistoryState,
    Workspace,
    sanitize_active_item,
    sanitize_projects,
)
from scopekit.infrastructure.storage.blob_storage import InMemoryBlobStorage

logger = logging.getLogger(__name__)

DEFAULT_USER = "anonymous"


class WorkspaceRepository:
    """Loads and saves one user's workspace.

    Implements ``scopekit.application.ports.WorkspaceStorage``. Loading
    repairs whatever it can and never fails; saving converts storage
    errors into ``Err``.

    Example:
        repo = WorkspaceRepository(FileBlobStorage(data_dir), user="alice")
        workspace = repo.load()
        for warning in workspace.warnings:
            print(warning)
    """

    def __init__(self, storage: BlobStorage | None = None, user: str = DEFAULT_USER) -> None:
        """Initialize the repository.

        Args:
            storage: Blob storage to use. Creates an in-memory one if not provided.
            user: Name used to build the storage keys.
        """
        self._storage = storage if storage is not None else InMemoryBlobStorage()
        self._user = user or DEFAULT_USER

    @property
    def projects_key(self) -> str:
        return f"projects_{self._user}"

    @property
    def active_item_key(self) -> str:
        return f"activeItem_{self._user}"

    @property
    def history_key(self) -> str:
        return f"history_{self._user}"

    # =========================================================================
    # Raw JSON access
    # =========================================================================

    def _load_json(self, key: str) -> Result[Any, str]:
        """Load and decode one key. A missing key is ``Ok(None)``."""
        try:
            data = self._storage.load_blob(key)
            if data is None:
                return Ok(None)
            return Ok(json.loads(data.decode("utf-8")))

        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(f"Invalid JSON in {key}: {e}")
        except OSError as e:
            return Err(f"Error reading {key}: {e}")

    def _save_json(self, key: str, data: Any) -> Result[None, str]:
        try:
            self._storage.save_blob(key, json.dumps(data).encode("utf-8"))
            return Ok(None)

        except TypeError as e:
            return Err(f"Data not JSON serializable: {e}")
        except OSError as e:
            return Err(f"Error writing {key}: {e}")

    # =========================================================================
    # Workspace
    # =========================================================================

    def load(self) -> Workspace:
        """Load the workspace, repairing or discarding bad data.

        Returns:
            The loaded workspace. Unreadable folders start a fresh forest,
            and an unreadable active item or history is dropped; each case
            adds a message to ``warnings``.
        """
        warnings: list[str] = []
        projects = self._load_projects(warnings)
        active_item = self._load_active_item(projects, warnings)
        history = self._load_history(warnings)
        for warning in warnings:
            logger.warning(warning)
        return Workspace(
            projects=projects,
            active_item=active_item,
            history=history,
            warnings=warnings,
        )

    def _load_projects(self, warnings: list[str]) -> Forest:
        raw = self._load_json(self.projects_key)
        if isinstance(raw, Err):
            warnings.append(f"Could not read saved folders, starting fresh: {raw.error}")
            return [make_unassigned_project()]
        try:
            forest, repairs = sanitize_projects(raw.value)
        except ValidationError as e:
            warnings.append(f"Saved folders are invalid, starting fresh: {e.error_count()} error(s)")
            return [make_unassigned_project()]
        warnings.extend(repairs)
        return forest

    def _load_active_item(self, forest: Forest, warnings: list[str]) -> ActiveItem:
        raw = self._load_json(self.active_item_key)
        if isinstance(raw, Err):
            warnings.append(f"Could not read the active item: {raw.error}")
            return sanitize_active_item(None, forest)
        return sanitize_active_item(raw.value, forest)

    def _load_history(self, warnings: list[str]) -> HistoryState:
        raw = self._load_json(self.history_key)
        if isinstance(raw, Err):
            warnings.append(f"Discarded unreadable history: {raw.error}")
            return HistoryState()
        if raw.value is None:
            return HistoryState()
        try:
            return HistoryState.model_validate(raw.value)
        except ValidationError:
            warnings.append("Discarded malformed history")
            return HistoryState()

    def save_projects(self, forest: Forest) -> Result[None, str]:
        data = [project.model_dump(by_alias=True, mode="json") for project in forest]
        return self._save_json(self.projects_key, data)

    def save_active_item(self, item: ActiveItem) -> Result[None, str]:
        return self._save_json(self.active_item_key, item.model_dump(by_alias=True, mode="json"))

    def save_history(self, state: HistoryState) -> Result[None, str]:
        return self._save_json(self.history_key, state.model_dump(by_alias=True, mode="json"))
