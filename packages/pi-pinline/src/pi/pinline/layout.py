"""Screen layout for the pinned input line.

Layout::

    rows 1..N-2   scroll region (streamed output)
    row  N-1      dim separator
    row  N        input prompt

The chrome rows sit outside the scroll region, so native scrolling never
disturbs them. They are painted on init, resize and resume only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

CursorStyle = Literal["dec", "sco"]

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

ESC = "\x1b"

CLEAR_LINE = "\x1b[2K"
RESET_SCROLL_REGION = "\x1b[r"
_SCROLL_REGION_FMT = "\x1b[1;{}r"
_MOVE_TO_FMT = "\x1b[{};{}H"

DIM = "\x1b[2m"
BOLD = "\x1b[1m"
PURPLE = "\x1b[38;5;141m"
RESET = "\x1b[0m"

# Save / restore cursor position pairs
_SAVE_CURSOR = {"dec": "\x1b7", "sco": "\x1b[s"}
_RESTORE_CURSOR = {"dec": "\x1b8", "sco": "\x1b[u"}


@dataclass(frozen=True)
class Layout:
    """Row assignments derived from the terminal size."""

    rows: int
    cols: int
    scroll_start: int
    scroll_end: int
    separator_row: int
    input_row: int

    @property
    def scroll_region(self) -> tuple[int, int]:
        return (self.scroll_start, self.scroll_end)


def compute_layout(rows: int, cols: int) -> Layout:
    """Derive the layout for a *rows* x *cols* terminal.

    With two rows or fewer the scroll region collapses onto row 1 instead
    of becoming empty or inverted.
    """
    return Layout(
        rows=rows,
        cols=cols,
        scroll_start=1,
        scroll_end=max(1, rows - 2),
        separator_row=rows - 1,
        input_row=rows,
    )


def move_to(row: int, col: int) -> str:
    """Absolute cursor position (1-based)."""
    return _MOVE_TO_FMT.format(row, col)


def save_cursor(style: CursorStyle = "dec") -> str:
    return _SAVE_CURSOR[style]


def restore_cursor(style: CursorStyle = "dec") -> str:
    return _RESTORE_CURSOR[style]


def scroll_region(layout: Layout) -> str:
    """Confine native scrolling to rows ``1..scroll_end``."""
    return _SCROLL_REGION_FMT.format(layout.scroll_end)


def chrome(layout: Layout, separator_char: str = "─") -> str:
    """Clear and paint the separator row, then clear the input row."""
    return (
        move_to(layout.separator_row, 1)
        + CLEAR_LINE
        + f"{DIM}{separator_char * layout.cols}{RESET}"
        + move_to(layout.input_row, 1)
        + CLEAR_LINE
    )


def anchor(layout: Layout, style: CursorStyle = "dec") -> str:
    """Establish the output cursor at the bottom-left of the scroll region."""
    return move_to(layout.scroll_end, 1) + save_cursor(style)
