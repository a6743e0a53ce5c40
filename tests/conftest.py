"""Shared fixtures.

The sample forest looks like this (ids in brackets):

    Unassigned [unassigned]
    Garden [garden]
      Plan beds [plan]          inprogress (derived)
        Measure [measure]       done
        Sketch [sketch]         todo
      Buy seeds [seeds]         todo
    Kitchen [kitchen]
      Fix tap [tap]             todo
"""

import pytest

from scopekit.application import ScopeStore
from scopekit.domain.task import TaskStatus
from scopekit.infrastructure.storage import InMemoryBlobStorage, WorkspaceRepository
from tests.factories import make_forest, make_project, make_task


@pytest.fixture
def forest():
    garden = make_project(
        "Garden",
        make_task(
            "Plan beds",
            make_task("Measure", status=TaskStatus.DONE, task_id="measure"),
            make_task("Sketch", task_id="sketch"),
            task_id="plan",
        ),
        make_task("Buy seeds", task_id="seeds"),
        project_id="garden",
    )
    kitchen = make_project("Kitchen", make_task("Fix tap", task_id="tap"), project_id="kitchen")
    return make_forest(garden, kitchen)


@pytest.fixture
def storage():
    return InMemoryBlobStorage()


@pytest.fixture
def repository(storage):
    return WorkspaceRepository(storage)


@pytest.fixture
def store(repository, forest):
    """A store seeded with the sample forest and an empty history."""
    repository.save_projects(forest)
    return ScopeStore(repository)
