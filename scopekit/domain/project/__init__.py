"""Project domain - folders that own scope trees.

Key Types:
    Project - A folder owning root scopes
    ProjectSummary - Lightweight listing view
    Forest - Every folder with its trees

The Unassigned folder (``UNASSIGNED_ID``) always exists and is never
deleted.
"""

from .models import (
    UNASSIGNED_DESCRIPTION,
    UNASSIGNED_ID,
    UNASSIGNED_NAME,
    UNASSIGNED_ORDER,
    Forest,
    Project,
    ProjectSummary,
    copy_forest,
    make_unassigned_project,
)

__all__ = [
    "Project",
    "ProjectSummary",
    "Forest",
    "UNASSIGNED_ID",
    "UNASSIGNED_NAME",
    "UNASSIGNED_ORDER",
    "UNASSIGNED_DESCRIPTION",
    "make_unassigned_project",
    "copy_forest",
]
