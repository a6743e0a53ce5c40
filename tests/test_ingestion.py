"""Tests for turning generated outlines into scopes."""

import pytest

from scopekit.application.ingestion_service import (
    EMPTY_OUTLINE_ERROR,
    ingest_outline,
    insert_outline,
)
from scopekit.domain.outline import OutlineFormat
from scopekit.domain.project import UNASSIGNED_ID
from scopekit.domain.shared import Err, Ok
from scopekit.domain.task import Provenance, TaskStatus, find_node, find_project

TRIP = '{"Trip": {"Day 1": ["Pack", "Drive"], "Budget": "500"}}'


class TestIngestOutline:
    def test_keeps_single_root_by_default(self):
        ingested = ingest_outline(TRIP)
        assert ingested.format == OutlineFormat.JSON
        assert [t.text for t in ingested.tasks] == ["Trip"]

    def test_unwraps_single_branch_root(self):
        ingested = ingest_outline(TRIP, parent_id="p", unwrap_single_root=True)
        assert [t.text for t in ingested.tasks] == ["Day 1", "Budget: 500"]
        assert all(t.parent_id == "p" for t in ingested.tasks)

    def test_single_leaf_root_is_not_unwrapped(self):
        ingested = ingest_outline('{"Only": "one"}', unwrap_single_root=True)
        assert [t.text for t in ingested.tasks] == ["Only: one"]

    def test_text_outline(self):
        ingested = ingest_outline("- Pack\n- Drive")
        assert ingested.format == OutlineFormat.TEXT
        assert [t.text for t in ingested.tasks] == ["Pack", "Drive"]

    def test_empty(self):
        assert ingest_outline("").is_empty


class TestInsertOutline:
    def test_inserts_as_folder_roots(self, forest):
        result = insert_outline(forest, TRIP, project_id=UNASSIGNED_ID)
        assert isinstance(result, Ok)
        updated, ingested = result.value
        roots = find_project(updated, UNASSIGNED_ID).tasks
        assert [t.text for t in roots] == ["Trip"]
        assert roots[0].parent_id is None
        assert roots[0].source == Provenance.AI
        assert ingested.tasks[0].id == roots[0].id

    def test_inserts_under_anchor_and_propagates(self, forest):
        result = insert_outline(forest, "- Width\n- Length", anchor_id="measure")
        updated, _ = result.value
        measure = find_node(updated, "measure")
        assert [t.text for t in measure.subtasks] == ["Width", "Length"]
        assert all(t.parent_id == "measure" for t in measure.subtasks)
        assert measure.status == TaskStatus.TODO
        assert find_node(updated, "plan").status == TaskStatus.TODO

    def test_anchor_children_continue_order(self, forest):
        updated, _ = insert_outline(forest, "- Dig", anchor_id="plan").value
        assert [t.order for t in find_node(updated, "plan").subtasks] == [0, 1, 2]

    def test_empty_outline_inserts_nothing(self, forest):
        assert insert_outline(forest, "```json\n{}\n```", project_id="garden") == Err(
            EMPTY_OUTLINE_ERROR
        )
        assert len(find_project(forest, "garden").tasks) == 2

    def test_unknown_anchor(self, forest):
        assert insert_outline(forest, "- a", anchor_id="gone") == Err("Scope not found: gone")

    def test_unknown_folder(self, forest):
        assert insert_outline(forest, "- a", project_id="gone") == Err("Folder not found: gone")

    def test_needs_a_target(self, forest):
        with pytest.raises(ValueError):
            insert_outline(forest, "- a")
