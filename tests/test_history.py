"""Tests for the undo/redo stacks."""

import pytest

from scopekit.application.history import HistoryManager
from scopekit.domain.project import Project
from scopekit.domain.workspace import ActiveItem, HistoryEntry


def entry(name: str, label: str = "") -> HistoryEntry:
    return HistoryEntry(
        projects=[Project(id="p", name=name)],
        active_item=ActiveItem(project_id="p"),
        label=label,
    )


def name_of(history_entry: HistoryEntry) -> str:
    return history_entry.projects[0].name


class TestHistoryManager:
    def test_undo_then_redo_is_symmetric(self):
        history = HistoryManager()
        history.record(entry("v1", "Rename to v2"))
        restored = history.undo(entry("v2"))
        assert name_of(restored) == "v1"
        assert restored.label == "Rename to v2"
        assert history.future[-1].label == "Rename to v2"

        again = history.redo(entry("v1"))
        assert name_of(again) == "v2"
        assert history.can_undo()
        assert not history.can_redo()

    def test_empty_stacks_are_no_ops(self):
        history = HistoryManager()
        assert history.undo(entry("now")) is None
        assert history.redo(entry("now")) is None

    def test_record_clears_redo(self):
        history = HistoryManager()
        history.record(entry("v1"))
        history.undo(entry("v2"))
        history.record(entry("v1b"))
        assert not history.can_redo()

    def test_limit_drops_oldest(self):
        history = HistoryManager(limit=2)
        for name in ("a", "b", "c"):
            history.record(entry(name))
        assert [name_of(e) for e in history.past] == ["b", "c"]

    def test_snapshots_are_isolated_from_later_changes(self):
        history = HistoryManager()
        snapshot = entry("before")
        history.record(snapshot)
        snapshot.projects[0].name = "mutated"
        assert name_of(history.past[0]) == "before"

    def test_state_round_trip(self):
        history = HistoryManager()
        history.record(entry("a", "first"))
        history.record(entry("b", "second"))
        history.undo(entry("c"))
        restored = HistoryManager(state=history.to_state())
        assert [e.label for e in restored.past] == ["first"]
        assert [e.label for e in restored.future] == ["second"]

    def test_loaded_state_is_trimmed_to_limit(self):
        history = HistoryManager()
        for name in "abcd":
            history.record(entry(name))
        restored = HistoryManager(limit=2, state=history.to_state())
        assert [name_of(e) for e in restored.past] == ["c", "d"]

    def test_clear(self):
        history = HistoryManager()
        history.record(entry("a"))
        history.clear()
        assert not history.can_undo()

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            HistoryManager(limit=0)
