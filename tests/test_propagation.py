"""Tests for derived status rollup."""

from scopekit.domain.project import Project
from scopekit.domain.task import (
    Task,
    TaskStatus,
    derive_status,
    find_node,
    propagate,
    recompute,
    recompute_tree,
)
from tests.factories import make_forest, make_task

DONE = TaskStatus.DONE
TODO = TaskStatus.TODO
IN_PROGRESS = TaskStatus.IN_PROGRESS


class TestDeriveStatus:
    def test_all_done(self):
        assert derive_status([make_task("a", status=DONE), make_task("b", status=DONE)]) == DONE

    def test_some_done_is_in_progress(self):
        assert derive_status([make_task("a", status=DONE), make_task("b")]) == IN_PROGRESS

    def test_any_in_progress(self):
        assert derive_status([make_task("a", status=IN_PROGRESS), make_task("b")]) == IN_PROGRESS

    def test_all_todo(self):
        assert derive_status([make_task("a"), make_task("b")]) == TODO


class TestRecompute:
    def test_leaf_is_left_alone(self):
        leaf = make_task("leaf", status=IN_PROGRESS)
        assert recompute(leaf) is False
        assert leaf.status == IN_PROGRESS

    def test_changed_branch_is_stamped(self):
        parent = make_task("parent", make_task("child", status=DONE))
        parent.last_edited = 1
        assert recompute(parent) is True
        assert parent.status == DONE
        assert parent.completed is True
        assert parent.last_edited > 1

    def test_unchanged_branch_keeps_timestamp(self):
        parent = make_task("parent", make_task("child"))
        parent.last_edited = 1
        assert recompute(parent) is False
        assert parent.last_edited == 1

    def test_completed_repair_keeps_timestamp(self):
        parent = make_task("parent", make_task("child", status=DONE), status=DONE)
        parent.completed = False
        parent.last_edited = 1
        assert recompute(parent) is False
        assert parent.completed is True
        assert parent.last_edited == 1

    def test_recompute_tree_settles_children_first(self):
        root = make_task(
            "root",
            make_task("mid", make_task("a", status=DONE), make_task("b", status=DONE)),
            make_task("other", status=DONE),
        )
        changed = recompute_tree([root])
        assert root.subtasks[0].status == DONE
        assert root.status == DONE
        assert changed == 2


class TestPropagate:
    def build(self):
        grandchild = make_task("grandchild", task_id="gc")
        child = make_task("child", grandchild, make_task("sibling", status=DONE), task_id="child")
        root = make_task("root", child, task_id="root")
        # A stale branch elsewhere; targeted propagation must not touch it
        stale = make_task("stale", make_task("x", status=DONE), task_id="stale")
        forest = make_forest(
            Project(id="p1", name="One", tasks=[root]),
            Project(id="p2", name="Two", tasks=[stale]),
        )
        return forest

    def test_walks_ancestors_bottom_up(self):
        forest = self.build()
        find_node(forest, "gc").set_status(DONE)
        propagate(forest, "gc")
        assert find_node(forest, "child").status == DONE
        assert find_node(forest, "root").status == DONE
        assert find_node(forest, "stale").status == TODO

    def test_recomputes_changed_branch_itself(self):
        forest = self.build()
        propagate(forest, "child")
        assert find_node(forest, "child").status == IN_PROGRESS
        assert find_node(forest, "root").status == IN_PROGRESS

    def test_full_pass_fixes_every_folder(self):
        forest = self.build()
        propagate(forest, None)
        assert find_node(forest, "stale").status == DONE
        assert find_node(forest, "root").status == IN_PROGRESS

    def test_unknown_id_is_a_no_op(self):
        forest = self.build()
        assert propagate(forest, "missing") is forest
        assert find_node(forest, "root").status == TODO

    def test_second_pass_changes_nothing(self):
        forest = self.build()
        find_node(forest, "gc").set_status(DONE)
        once = [p.model_copy(deep=True) for p in propagate(forest, "gc")]
        assert propagate(forest, "gc") == once

    def test_full_pass_is_idempotent(self):
        forest = self.build()
        once = [p.model_copy(deep=True) for p in propagate(forest, None)]
        assert propagate(forest, None) == once

    def test_completed_mirrors_status(self):
        forest = self.build()
        find_node(forest, "gc").set_status(DONE)
        propagate(forest, "gc")
        for task_id in ("gc", "child", "root"):
            task = find_node(forest, task_id)
            assert task.completed == (task.status == DONE)


def test_set_status_keeps_completed_in_step():
    task = Task(text="t")
    task.set_status(DONE)
    assert task.completed is True
    task.set_status(IN_PROGRESS)
    assert task.completed is False
