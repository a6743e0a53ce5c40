"""Infrastructure layer for scopekit.

This module provides the I/O adapters behind the application ports,
with Result monads for explicit error handling.

Exports:
    Storage:
        - FileBlobStorage: One JSON file per key
        - InMemoryBlobStorage: Dictionary storage with an optional quota
        - WorkspaceRepository: Folder, active item and history persistence

    AI:
        - OllamaClient: Local text generation
        - ClaudeClient: Hosted text generation
        - create_generator: Pick a client from the user settings
"""

from scopekit.infrastructure.storage import (
    FileBlobStorage,
    InMemoryBlobStorage,
    WorkspaceRepository,
)
from scopekit.infrastructure.ai import (
    ClaudeClient,
    OllamaClient,
    create_generator,
)

__all__ = [
    # Storage
    "FileBlobStorage",
    "InMemoryBlobStorage",
    "WorkspaceRepository",
    # AI
    "OllamaClient",
    "ClaudeClient",
    "create_generator",
]
