"""Shared domain utilities for scopekit.

This package provides common building blocks used across domain modules:

- Result monad for explicit error handling
- Clock and identity helpers

Example usage:
    >>> from scopekit.domain.shared import Ok, Err, Result
    >>>
    >>> def find_folder(folder_id: str) -> Result[dict, str]:
    ...     if folder_id == "missing":
    ...         return Err("Folder not found")
    ...     return Ok({"id": folder_id, "name": "Example"})
"""

from scopekit.domain.shared.clock import new_id, now_ms
from scopekit.domain.shared.result import Err, Ok, Result

__all__ = [
    # Result monad
    "Ok",
    "Err",
    "Result",
    # Clock
    "now_ms",
    "new_id",
]
