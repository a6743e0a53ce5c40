"""Storage infrastructure for scopekit.

Provides blob storage backends and the workspace repository that turns
stored bytes into a sanitized workspace.
"""

from scopekit.infrastructure.storage.blob_storage import (
    FileBlobStorage,
    InMemoryBlobStorage,
)
from scopekit.infrastructure.storage.repositories import (
    DEFAULT_USER,
    WorkspaceRepository,
)

__all__ = [
    "FileBlobStorage",
    "InMemoryBlobStorage",
    "WorkspaceRepository",
    "DEFAULT_USER",
]
