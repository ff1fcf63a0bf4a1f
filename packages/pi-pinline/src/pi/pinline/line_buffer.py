"""Editable single-line buffer with a cursor."""

from __future__ import annotations


class LineBuffer:
    """Text plus an insertion point, kept within ``0..len(text)``.

    Every edit is a no-op when it has nothing to act on (backspace at the
    start, forward delete at the end, and so on).
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._cursor = len(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._text)

    def __bool__(self) -> bool:
        return bool(self._text)

    # -- replacement --------------------------------------------------------

    def set(self, text: str) -> None:
        """Replace the whole buffer and move the cursor to the end."""
        self._text = text
        self._cursor = len(text)

    def clear(self) -> None:
        self._text = ""
        self._cursor = 0

    # -- insertion ----------------------------------------------------------

    def insert(self, chars: str) -> None:
        self._text = self._text[: self._cursor] + chars + self._text[self._cursor :]
        self._cursor += len(chars)

    # -- movement -----------------------------------------------------------

    def move_left(self) -> bool:
        if self._cursor > 0:
            self._cursor -= 1
            return True
        return False

    def move_right(self) -> bool:
        if self._cursor < len(self._text):
            self._cursor += 1
            return True
        return False

    def home(self) -> None:
        self._cursor = 0

    def end(self) -> None:
        self._cursor = len(self._text)

    # -- deletion -----------------------------------------------------------

    def backspace(self) -> bool:
        if self._cursor == 0:
            return False
        self._text = self._text[: self._cursor - 1] + self._text[self._cursor :]
        self._cursor -= 1
        return True

    def delete_forward(self) -> bool:
        if self._cursor >= len(self._text):
            return False
        self._text = self._text[: self._cursor] + self._text[self._cursor + 1 :]
        return True

    def kill_line(self) -> None:
        self.clear()

    def kill_to_end(self) -> None:
        self._text = self._text[: self._cursor]

    def delete_word_backward(self) -> None:
        """Delete the word before the cursor along with trailing blanks.

        ``"foo bar  "`` with the cursor at the end becomes ``"foo "``.
        """
        trimmed = self._text[: self._cursor].rstrip()
        last_space = trimmed.rfind(" ")
        new_end = last_space + 1 if last_space >= 0 else 0
        self._text = self._text[:new_end] + self._text[self._cursor :]
        self._cursor = new_end
