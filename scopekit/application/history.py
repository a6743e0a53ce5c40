"""Linear undo/redo over whole-forest snapshots.

Each accepted mutation records the state from *before* it ran. Undo swaps
the current state for the most recent recorded one; redo swaps it back.
Recording a new mutation discards the redo stack.
"""

import logging

from scopekit.domain.workspace import HistoryEntry, HistoryState

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


class HistoryManager:
    """Bounded past/future stacks of history entries.

    Entries are deep-copied on the way in, so later changes to a forest
    cannot leak into a snapshot that undo may restore.

    Example:
        history = HistoryManager(limit=50)
        history.record(entry_before_change)
        previous = history.undo(current_entry)
        if previous is not None:
            restore(previous)
    """

    def __init__(
        self,
        limit: int = DEFAULT_HISTORY_LIMIT,
        state: HistoryState | None = None,
    ) -> None:
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = limit
        self._past: list[HistoryEntry] = []
        self._future: list[HistoryEntry] = []
        if state is not None:
            self._past = [entry.model_copy(deep=True) for entry in state.past[-limit:]]
            self._future = [entry.model_copy(deep=True) for entry in state.future[-limit:]]

    @property
    def past(self) -> list[HistoryEntry]:
        return list(self._past)

    @property
    def future(self) -> list[HistoryEntry]:
        return list(self._future)

    def can_undo(self) -> bool:
        return bool(self._past)

    def can_redo(self) -> bool:
        return bool(self._future)

    def record(self, entry: HistoryEntry) -> None:
        """Push the pre-mutation state and clear the redo stack."""
        self._past.append(entry.model_copy(deep=True))
        if len(self._past) > self.limit:
            dropped = self._past.pop(0)
            logger.debug(f"History full, dropped oldest entry '{dropped.label}'")
        self._future.clear()

    def undo(self, current: HistoryEntry) -> HistoryEntry | None:
        """Step back one entry.

        Args:
            current: The state being left, pushed onto the redo stack
                under the label of the change being undone

        Returns:
            The entry to restore, or None if there is nothing to undo
        """
        if not self._past:
            return None
        entry = self._past.pop()
        self._push_bounded(self._future, current.model_copy(update={"label": entry.label}))
        return entry

    def redo(self, current: HistoryEntry) -> HistoryEntry | None:
        """Step forward one entry; the mirror of ``undo``."""
        if not self._future:
            return None
        entry = self._future.pop()
        self._push_bounded(self._past, current.model_copy(update={"label": entry.label}))
        return entry

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()

    def to_state(self) -> HistoryState:
        """Snapshot both stacks for persistence."""
        return HistoryState(past=list(self._past), future=list(self._future))

    def _push_bounded(self, stack: list[HistoryEntry], entry: HistoryEntry) -> None:
        stack.append(entry.model_copy(deep=True))
        if len(stack) > self.limit:
            stack.pop(0)
