"""Workspace domain - navigation context, history snapshots and load repair."""

from .models import ActiveItem, HistoryEntry, HistoryState, Workspace
from .sanitize import sanitize_active_item, sanitize_projects

__all__ = [
    "ActiveItem",
    "HistoryEntry",
    "HistoryState",
    "Workspace",
    "sanitize_projects",
    "sanitize_active_item",
]
