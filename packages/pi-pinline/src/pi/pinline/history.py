"""Submitted-line history with shell-style Up/Down browsing."""

from __future__ import annotations

HISTORY_MAX = 50


class History:
    """Most-recent-first list of submitted lines.

    Only adjacent duplicates are suppressed: submitting ``a``, ``b``, ``a``
    keeps three entries, while ``a``, ``a`` keeps one. The oldest entry is
    evicted once *capacity* is exceeded.

    Browsing state lives alongside the entries. ``index`` is ``-1`` while
    the user edits the live buffer; the live buffer is snapshotted the
    moment browsing starts and handed back when browsing returns to it.
    """

    def __init__(self, capacity: int = HISTORY_MAX) -> None:
        self._entries: list[str] = []
        self._capacity = capacity
        self.index: int = -1
        self.saved_buffer: str = ""

    def push(self, line: str) -> None:
        """Record a submitted line at the front."""
        if not line:
            return
        if self._entries and self._entries[0] == line:
            return
        self._entries.insert(0, line)
        if len(self._entries) > self._capacity:
            self._entries.pop()

    def up(self, live: str) -> str | None:
        """Step to the next older entry.

        Returns the text to load into the buffer, or ``None`` when there is
        nothing older.
        """
        if not self._entries:
            return None
        if self.index == -1:
            self.saved_buffer = live
        if self.index < len(self._entries) - 1:
            self.index += 1
            return self._entries[self.index]
        return None

    def down(self) -> str | None:
        """Step to the next newer entry, ending at the saved live buffer."""
        if self.index <= -1:
            return None
        self.index -= 1
        if self.index == -1:
            return self.saved_buffer
        return self._entries[self.index]

    def reset(self) -> None:
        """Leave browsing mode and forget the saved live buffer."""
        self.index = -1
        self.saved_buffer = ""

    @property
    def browsing(self) -> bool:
        return self.index != -1

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)
