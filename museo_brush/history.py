"""Bounded undo/redo history of surface snapshots."""

import logging
from dataclasses import dataclass

from museo_brush.config import settings
from museo_brush.surface import Surface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryStats:
    total: int
    current: int  # Index of the current snapshot, -1 when empty
    can_undo: bool
    can_redo: bool
    memory_usage: int  # Bytes held by snapshots


class SnapshotHistory:
    """Undo/redo stack of PNG snapshots.

    Saving after an undo discards the redo states. When full, the oldest
    snapshot is dropped.
    """

    def __init__(self, max_size: int | None = None) -> None:
        self.max_size = max(1, max_size if max_size is not None else settings.max_history_size)
        self._states: list[bytes] = []
        self._index = -1

    def __len__(self) -> int:
        return len(self._states)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._states) - 1

    def save(self, surface: Surface) -> bool:
        """Push the surface's current pixels. Returns False if capture failed."""
        try:
            snapshot = surface.snapshot()
        except (OSError, ValueError) as e:
            logger.error(f"Failed to snapshot surface {surface.surface_id}: {e}")
            return False

        # Drop redo states
        del self._states[self._index + 1 :]
        self._states.append(snapshot)
        if len(self._states) > self.max_size:
            self._states.pop(0)
        self._index = len(self._states) - 1
        return True

    def undo(self, surface: Surface) -> bool:
        if not self.can_undo:
            return False
        self._index -= 1
        return self._restore(surface)

    def redo(self, surface: Surface) -> bool:
        if not self.can_redo:
            return False
        self._index += 1
        return self._restore(surface)

    def _restore(self, surface: Surface) -> bool:
        try:
            surface.restore(self._states[self._index])
        except (OSError, ValueError) as e:
            logger.error(
                f"Failed to restore snapshot {self._index} on surface {surface.surface_id}: {e}"
            )
            return False
        return True

    def clear(self) -> None:
        self._states.clear()
        self._index = -1

    def stats(self) -> HistoryStats:
        return HistoryStats(
            total=len(self._states),
            current=self._index,
            can_undo=self.can_undo,
            can_redo=self.can_redo,
            memory_usage=sum(len(state) for state in self._states),
        )
