"""Tests for structural scope operations."""

import pytest

from scopekit.application.task_service import (
    add_root_tasks,
    add_subtasks,
    create_task,
    delete_selected,
    delete_task,
    move_task_to_project,
    promote_subtask,
    reorder_task,
    replace_subtasks,
    update_task,
)
from scopekit.domain.project import UNASSIGNED_ID
from scopekit.domain.task import (
    Comment,
    Provenance,
    Task,
    TaskStatus,
    count_comments_recursive,
    count_tasks,
    find_node,
    find_owner,
    find_project,
    iter_tasks,
)
from tests.factories import make_task


def forest_size(forest):
    return sum(count_tasks(project.tasks) for project in forest)


def ids(tasks):
    return [t.id for t in tasks]


class TestCreateTask:
    def test_appends_manual_todo_root(self, forest):
        updated, ok = create_task(forest, "garden", "Water", "Every morning")
        assert ok
        task = find_project(updated, "garden").tasks[-1]
        assert task.text == "Water"
        assert task.description == "Every morning"
        assert task.status == TaskStatus.TODO
        assert task.source == Provenance.MANUAL
        assert task.parent_id is None
        assert task.order == 2

    def test_input_forest_is_not_mutated(self, forest):
        create_task(forest, "garden", "Water")
        assert len(find_project(forest, "garden").tasks) == 2

    def test_unknown_folder_returns_original(self, forest):
        updated, ok = create_task(forest, "nope", "Water")
        assert not ok
        assert updated is forest


class TestAddTasks:
    def test_add_root_tasks_keeps_subtrees(self, forest):
        new = make_task("Compost", make_task("Build bin"))
        updated, ok = add_root_tasks(forest, UNASSIGNED_ID, [new])
        assert ok
        added = find_project(updated, UNASSIGNED_ID).tasks[0]
        assert added.parent_id is None
        assert added.order == 0
        assert added.subtasks[0].text == "Build bin"

    def test_add_subtasks_turns_leaf_into_branch(self, forest):
        updated, ok = add_subtasks(forest, "seeds", [Task(text="Tomato"), Task(text="Basil")])
        assert ok
        seeds = find_node(updated, "seeds")
        assert [t.text for t in seeds.subtasks] == ["Tomato", "Basil"]
        assert [t.order for t in seeds.subtasks] == [0, 1]
        assert all(t.parent_id == "seeds" for t in seeds.subtasks)

    def test_add_subtasks_propagates_to_ancestors(self, forest):
        updated, _ = add_subtasks(forest, "measure", [Task(text="Width")])
        # Measure was done; its only child is todo now
        assert find_node(updated, "measure").status == TaskStatus.TODO
        assert find_node(updated, "plan").status == TaskStatus.TODO

    def test_add_subtasks_continues_order(self, forest):
        updated, _ = add_subtasks(forest, "plan", [Task(text="Dig")])
        assert find_node(updated, "plan").subtasks[-1].order == 2

    def test_add_subtasks_unknown_anchor(self, forest):
        updated, ok = add_subtasks(forest, "nope", [Task(text="x")])
        assert not ok
        assert updated is forest

    def test_reused_id_raises(self, forest):
        with pytest.raises(ValueError):
            add_subtasks(forest, "seeds", [Task(id="tap", text="clash")])

    def test_duplicate_new_ids_raise(self, forest):
        with pytest.raises(ValueError):
            add_root_tasks(forest, "garden", [Task(id="x", text="a"), Task(id="x", text="b")])


class TestReplaceSubtasks:
    def test_old_children_are_discarded(self, forest):
        updated, ok = replace_subtasks(forest, "plan", [Task(text="New")])
        assert ok
        plan = find_node(updated, "plan")
        assert [t.text for t in plan.subtasks] == ["New"]
        assert find_node(updated, "measure") is None
        assert plan.status == TaskStatus.TODO

    def test_replacing_with_nothing_makes_a_leaf(self, forest):
        updated, _ = replace_subtasks(forest, "plan", [])
        assert find_node(updated, "plan").is_leaf()

    def test_may_reuse_ids_of_discarded_children(self, forest):
        updated, ok = replace_subtasks(forest, "plan", [Task(id="measure", text="Again")])
        assert ok
        assert find_node(updated, "measure").text == "Again"

    def test_rejects_ids_still_in_forest(self, forest):
        with pytest.raises(ValueError):
            replace_subtasks(forest, "plan", [Task(id="seeds", text="clash")])


class TestDelete:
    def test_delete_cascades(self, forest):
        updated, ok = delete_task(forest, "plan")
        assert ok
        for task_id in ("plan", "measure", "sketch"):
            assert find_node(updated, task_id) is None
        assert find_node(forest, "measure") is not None

    def test_delete_removes_subtree_count_and_comments(self, forest):
        find_node(forest, "measure").comments.append(Comment(text="Use a tape"))
        find_node(forest, "sketch").comments.append(Comment(text="Graph paper"))
        find_node(forest, "seeds").comments.append(Comment(text="Heirloom"))
        before = forest_size(forest)

        updated, _ = delete_task(forest, "plan")

        assert forest_size(updated) == before - 3
        assert count_comments_recursive(find_project(updated, "garden").tasks) == 1

    def test_delete_child_recomputes_parent(self, forest):
        updated, _ = delete_task(forest, "sketch")
        assert find_node(updated, "plan").status == TaskStatus.DONE

    def test_delete_unknown(self, forest):
        updated, ok = delete_task(forest, "nope")
        assert not ok
        assert updated is forest

    def test_delete_selected_across_folders(self, forest):
        updated, ok = delete_selected(forest, ["sketch", "tap", "nope"])
        assert ok
        assert find_node(updated, "sketch") is None
        assert find_node(updated, "tap") is None
        assert find_node(updated, "plan").status == TaskStatus.DONE

    def test_delete_selected_with_ancestor_and_descendant(self, forest):
        updated, ok = delete_selected(forest, ["plan", "measure"])
        assert ok
        assert ids(find_project(updated, "garden").tasks) == ["seeds"]

    def test_delete_selected_limited_to_folder(self, forest):
        updated, ok = delete_selected(forest, ["seeds", "tap"], project_id="kitchen")
        assert ok
        assert find_node(updated, "seeds") is not None
        assert find_node(updated, "tap") is None

    def test_delete_selected_nothing_matched(self, forest):
        updated, ok = delete_selected(forest, ["nope"])
        assert not ok
        assert updated is forest


class TestMove:
    def test_moved_task_becomes_last_root(self, forest):
        updated, ok = move_task_to_project(forest, "sketch", "garden", "kitchen")
        assert ok
        kitchen = find_project(updated, "kitchen")
        assert ids(kitchen.tasks) == ["tap", "sketch"]
        moved = kitchen.tasks[-1]
        assert moved.parent_id is None
        assert moved.order == 1

    def test_source_is_recomputed(self, forest):
        updated, _ = move_task_to_project(forest, "sketch", "garden", "kitchen")
        assert find_node(updated, "plan").status == TaskStatus.DONE

    def test_subtree_moves_along(self, forest):
        updated, _ = move_task_to_project(forest, "plan", "garden", UNASSIGNED_ID)
        assert find_owner(updated, "measure").id == UNASSIGNED_ID

    def test_total_count_is_preserved(self, forest):
        def pair_size(f):
            return count_tasks(find_project(f, "garden").tasks) + count_tasks(
                find_project(f, "kitchen").tasks
            )

        updated, ok = move_task_to_project(forest, "plan", "garden", "kitchen")
        assert ok
        assert pair_size(updated) == pair_size(forest)
        assert forest_size(updated) == forest_size(forest)

    def test_same_folder_is_a_no_op(self, forest):
        updated, ok = move_task_to_project(forest, "seeds", "garden", "garden")
        assert not ok
        assert updated is forest

    def test_unknown_target(self, forest):
        updated, ok = move_task_to_project(forest, "seeds", "garden", "nope")
        assert not ok
        assert updated is forest

    def test_task_not_in_source(self, forest):
        _, ok = move_task_to_project(forest, "tap", "garden", UNASSIGNED_ID)
        assert not ok


class TestPromote:
    def test_promoted_subtask_becomes_root(self, forest):
        updated, ok = promote_subtask(forest, "garden", "sketch")
        assert ok
        garden = find_project(updated, "garden")
        assert ids(garden.tasks) == ["plan", "seeds", "sketch"]
        assert garden.tasks[-1].parent_id is None
        assert find_node(updated, "plan").status == TaskStatus.DONE

    def test_root_cannot_be_promoted(self, forest):
        updated, ok = promote_subtask(forest, "garden", "seeds")
        assert not ok
        assert updated is forest

    def test_wrong_folder(self, forest):
        _, ok = promote_subtask(forest, "kitchen", "sketch")
        assert not ok


class TestUpdate:
    def test_leaf_status_propagates(self, forest):
        updated, ok = update_task(forest, "sketch", status=TaskStatus.DONE)
        assert ok
        assert find_node(updated, "sketch").completed is True
        assert find_node(updated, "plan").status == TaskStatus.DONE

    def test_branch_status_is_ignored(self, forest):
        updated, ok = update_task(forest, "plan", status=TaskStatus.DONE)
        assert ok
        assert find_node(updated, "plan").status == TaskStatus.IN_PROGRESS

    def test_text_change_stamps_last_edited(self, forest):
        find_node(forest, "seeds").last_edited = 1
        updated, _ = update_task(forest, "seeds", text="Buy seedlings", description="Local shop")
        seeds = find_node(updated, "seeds")
        assert seeds.text == "Buy seedlings"
        assert seeds.description == "Local shop"
        assert seeds.last_edited > 1

    def test_unknown(self, forest):
        updated, ok = update_task(forest, "nope", text="x")
        assert not ok
        assert updated is forest


class TestReorder:
    def test_renumbers_siblings(self, forest):
        updated, ok = reorder_task(forest, "seeds", 0)
        assert ok
        tasks = find_project(updated, "garden").tasks
        assert ids(tasks) == ["seeds", "plan"]
        assert [t.order for t in tasks] == [0, 1]

    def test_position_is_clamped(self, forest):
        updated, _ = reorder_task(forest, "measure", 99)
        assert ids(find_node(updated, "plan").subtasks) == ["sketch", "measure"]

    def test_negative_position_moves_to_front(self, forest):
        updated, _ = reorder_task(forest, "sketch", -3)
        assert ids(find_node(updated, "plan").subtasks) == ["sketch", "measure"]


def test_ids_stay_unique_after_mixed_operations(forest):
    updated, _ = add_subtasks(forest, "seeds", [Task(text="Tomato")])
    updated, _ = promote_subtask(updated, "garden", "sketch")
    updated, _ = move_task_to_project(updated, "plan", "garden", "kitchen")
    all_ids = [t.id for p in updated for t in iter_tasks(p.tasks)]
    assert len(all_ids) == len(set(all_ids))
