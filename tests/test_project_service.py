"""Tests for folder operations."""

from scopekit.application.project_service import (
    add_summary_to_project,
    create_project,
    delete_project,
    get_project_summary,
    update_project,
)
from scopekit.domain.project import UNASSIGNED_ID, UNASSIGNED_NAME
from scopekit.domain.shared import Err, Ok
from scopekit.domain.task import find_node, find_project


class TestCreateProject:
    def test_creates_empty_folder_after_existing_ones(self, forest):
        result = create_project(forest, "  Garage  ", "Tools")
        assert isinstance(result, Ok)
        updated, project = result.value
        assert project.name == "Garage"
        assert project.description == "Tools"
        assert project.tasks == []
        assert project.order == 2
        assert updated[-1].id == project.id
        assert len(forest) == 3

    def test_empty_name(self, forest):
        assert create_project(forest, "") == Err("Folder name cannot be empty")

    def test_whitespace_name(self, forest):
        assert create_project(forest, "   ") == Err("Folder name cannot be whitespace only")


class TestUpdateProject:
    def test_rename_and_pin(self, forest):
        updated, ok = update_project(forest, "garden", name="Yard", pinned=True)
        assert ok
        garden = find_project(updated, "garden")
        assert garden.name == "Yard"
        assert garden.pinned is True
        assert find_project(forest, "garden").name == "Garden"

    def test_unassigned_cannot_be_renamed_or_unpinned(self, forest):
        assert update_project(forest, UNASSIGNED_ID, name="Inbox") == (forest, False)
        assert update_project(forest, UNASSIGNED_ID, pinned=False) == (forest, False)

    def test_unassigned_description_can_change(self, forest):
        updated, ok = update_project(forest, UNASSIGNED_ID, description="Loose ends")
        assert ok
        unassigned = find_project(updated, UNASSIGNED_ID)
        assert unassigned.description == "Loose ends"
        assert unassigned.name == UNASSIGNED_NAME

    def test_blank_name_is_refused(self, forest):
        _, ok = update_project(forest, "garden", name="  ")
        assert not ok

    def test_unknown(self, forest):
        assert update_project(forest, "nope", name="x") == (forest, False)


class TestDeleteProject:
    def test_deletes_folder_with_its_scopes(self, forest):
        updated, ok = delete_project(forest, "garden")
        assert ok
        assert find_project(updated, "garden") is None
        assert find_node(updated, "plan") is None

    def test_unassigned_cannot_be_deleted(self, forest):
        assert delete_project(forest, UNASSIGNED_ID) == (forest, False)

    def test_unknown(self, forest):
        assert delete_project(forest, "nope") == (forest, False)


def test_summary_counts(forest):
    summary = get_project_summary(find_project(forest, "garden"))
    assert summary.root_tasks == 2
    assert summary.total_tasks == 4
    assert summary.completed_tasks == 1
    assert summary.progress_percent == 33.3


def test_summaries_are_newest_first(forest):
    updated, _ = add_summary_to_project(forest, "garden", "first")
    updated, _ = add_summary_to_project(updated, "garden", "second")
    assert [s.text for s in find_project(updated, "garden").summaries] == ["second", "first"]
