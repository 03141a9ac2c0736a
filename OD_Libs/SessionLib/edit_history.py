"""
Linear undo log of settings snapshots.

Entries are kept in order with a cursor on the current one. Pushing after
the cursor was moved back discards the forward entries.
"""

import logging
from typing import List, Optional, Tuple

from OD_Libs.ImageEditingLib.image_models import HistoryEntry, ImageSettings

logger = logging.getLogger(__name__)


class EditHistory:
    """
    Ordered settings snapshots plus a cursor.

    Example:
        >>> history = EditHistory()
        >>> history.push(settings, "Image loaded")
        >>> history.push(brighter, "Adjusted brightness")
        >>> history.undo().description
        'Image loaded'
    """

    def __init__(self):
        self._entries: List[HistoryEntry] = []
        self._index = -1

    def push(self, settings: ImageSettings, description: str) -> HistoryEntry:
        """Append a snapshot after the cursor, dropping any redo entries."""
        entry = HistoryEntry.create(settings, description)
        dropped = len(self._entries) - (self._index + 1)
        del self._entries[self._index + 1:]
        self._entries.append(entry)
        self._index = len(self._entries) - 1
        if dropped:
            logger.debug(f"History push discarded {dropped} forward entries")
        return entry

    def undo(self) -> Optional[HistoryEntry]:
        """Move the cursor back; returns the new current entry or None at the start."""
        if not self.can_undo:
            return None
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> Optional[HistoryEntry]:
        """Move the cursor forward; returns the new current entry or None at the end."""
        if not self.can_redo:
            return None
        self._index += 1
        return self._entries[self._index]

    def clear(self) -> None:
        self._entries = []
        self._index = -1

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Optional[HistoryEntry]:
        if self._index < 0:
            return None
        return self._entries[self._index]

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
