"""Bottom-pinned input line.

``InputLine`` keeps an editable prompt on the last terminal row while other
code keeps printing above it. Output is confined to a scroll region; the
separator and input rows below it are never scrolled.

Cursor discipline: the terminal's saved-cursor register belongs to the
output stream. Each intercepted write restores it, writes, saves it again
and then parks the visible cursor back on the input row. Rendering the
input row never touches the register.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from dataclasses import dataclass
from typing import Callable, Iterator

from pi.pinline.config import Config
from pi.pinline.events import Event, KeyInput, Output, Resize
from pi.pinline.history import History
from pi.pinline.keys import Command, KeyDecoder
from pi.pinline.layout import (
    CLEAR_LINE,
    RESET_SCROLL_REGION,
    Layout,
    anchor,
    chrome,
    compute_layout,
    move_to,
    restore_cursor,
    save_cursor,
    scroll_region,
)
from pi.pinline.line_buffer import LineBuffer
from pi.pinline.terminal import Terminal
from pi.pinline.utils import take_columns, visible_width
from pi.pinline.writer import Lease, OwnedWriter

logger = logging.getLogger(__name__)

_BUFFER_EDITS: dict[str, Callable[[LineBuffer], object]] = {
    "home": LineBuffer.home,
    "end": LineBuffer.end,
    "left": LineBuffer.move_left,
    "right": LineBuffer.move_right,
    "backspace": LineBuffer.backspace,
    "delete_forward": LineBuffer.delete_forward,
    "kill_line": LineBuffer.kill_line,
    "kill_to_end": LineBuffer.kill_to_end,
    "delete_word_backward": LineBuffer.delete_word_backward,
}


@dataclass(frozen=True)
class EngineState:
    """Snapshot of the lifecycle flags and the last known terminal size."""

    active: bool
    paused: bool
    rows: int
    cols: int


class InputLine:
    """An input prompt pinned to the bottom row of the terminal.

    Lifecycle: created inactive, ``init()`` takes over the terminal,
    ``pause()``/``resume()`` lend it out temporarily and ``destroy()``
    hands it back for good. Calls in the wrong state are ignored.

    If the terminal is not interactive the engine never emits escape
    sequences: output passes through untouched and submitted lines are
    still delivered.
    """

    def __init__(
        self,
        terminal: Terminal,
        config: Config | None = None,
        *,
        writer: OwnedWriter | None = None,
        exit_handler: Callable[[int], object] = sys.exit,
    ) -> None:
        self._terminal = terminal
        self._config = config if config is not None else Config()
        self.writer = writer if writer is not None else OwnedWriter(terminal)
        self._exit = exit_handler

        self._buffer = LineBuffer()
        self._history = History(self._config.history_size)
        self._decoder = KeyDecoder()
        self._submit_cb: Callable[[str], None] | None = None

        self._active = False
        self._paused = False
        self._destroyed = False
        self._rows = 0
        self._cols = 0
        self._layout: Layout | None = None
        self._lease: Lease | None = None

        self._interactive = terminal.is_interactive
        if not self._interactive:
            logger.info("Terminal is not interactive; input line runs in pass-through mode")

        self._prompt = self._config.prompt
        self._prompt_len = visible_width(self._prompt)
        self._cursor_col = self._prompt_len + 1

    # -- properties ---------------------------------------------------------

    @property
    def state(self) -> EngineState:
        return EngineState(
            active=self._active,
            paused=self._paused,
            rows=self._rows,
            cols=self._cols,
        )

    @property
    def layout(self) -> Layout | None:
        return self._layout

    @property
    def history(self) -> list[str]:
        return self._history.entries

    @property
    def cursor(self) -> int:
        return self._buffer.cursor

    @property
    def prompt_len(self) -> int:
        return self._prompt_len

    @property
    def intercepting(self) -> bool:
        """True while writes through :attr:`writer` are confined above the prompt."""
        return self._active and not self._paused and self._interactive

    # -- public API ---------------------------------------------------------

    def init(self) -> None:
        """Take over the terminal: scroll region, chrome, raw keystrokes."""
        if self._destroyed:
            logger.debug("init() on a destroyed input line ignored")
            return
        if self._active:
            logger.debug("init() while active ignored")
            return

        self._lease = self.writer.acquire(self)
        self._active = True
        self._paused = False
        self._read_size()
        self._terminal.start(
            on_input=lambda data: self.dispatch(KeyInput(data)),
            on_resize=lambda: self.dispatch(Resize()),
        )
        self._apply_layout()
        self._render()
        logger.info("Input line started (%dx%d)", self._cols, self._rows)

    def destroy(self) -> None:
        """Restore the full-screen scroll region and release the terminal.

        A destroyed input line cannot be initialised again.
        """
        if not self._active:
            logger.debug("destroy() while inactive ignored")
            return

        self._active = False
        self._paused = False
        self._destroyed = True

        self._terminal.stop()
        self._emit(RESET_SCROLL_REGION + move_to(self._rows, 1) + "\n")

        if self._lease is not None:
            self._lease.release()
            self._lease = None
        logger.info("Input line destroyed")

    def on_submit(self, callback: Callable[[str], None]) -> None:
        """Register the callback that receives each submitted line."""
        self._submit_cb = callback

    def prompt(self) -> None:
        """Redraw the input row."""
        if not self._active or self._paused:
            return
        self._render()

    def pause(self) -> None:
        """Lend the whole terminal to another reader (menus, secret entry).

        Keystrokes stop being read, the terminal returns to line-buffered
        mode and the scroll region is reset. Writes pass straight through
        until :meth:`resume`.
        """
        if not self._active or self._paused:
            logger.debug("pause() ignored (active=%s, paused=%s)", self._active, self._paused)
            return
        self._paused = True
        self._terminal.set_raw_mode(False)
        self._emit(RESET_SCROLL_REGION + restore_cursor(self._config.cursor_style))

    def resume(self) -> None:
        """Take the terminal back after :meth:`pause`."""
        if not self._active or not self._paused:
            logger.debug("resume() ignored (active=%s, paused=%s)", self._active, self._paused)
            return
        self._paused = False
        self._read_size()
        self._apply_layout()
        self._terminal.set_raw_mode(True)
        self._render()

    @contextlib.contextmanager
    def borrow(self) -> Iterator[OwnedWriter]:
        """Pause for the duration of a ``with`` block, then resume."""
        was_paused = self._paused
        self.pause()
        try:
            yield self.writer
        finally:
            if not was_paused:
                self.resume()

    def get_line(self) -> str:
        """Return the current, unsubmitted input."""
        return self._buffer.text

    def close(self) -> None:
        """Destroy the input line and end the process."""
        self.destroy()
        self._exit(0)

    # -- events -------------------------------------------------------------

    def dispatch(self, event: Event) -> None:
        """Handle one event to completion."""
        if isinstance(event, KeyInput):
            self._handle_input(event.data)
        elif isinstance(event, Resize):
            self._handle_resize()
        elif isinstance(event, Output):
            self._handle_output(event.data)
        else:
            raise TypeError(f"unknown event: {event!r}")

    def _handle_input(self, data: str) -> None:
        if not self._active or self._paused:
            logger.debug("Input while inactive or paused dropped")
            return

        for command in self._decoder.feed(data):
            self._apply(command)
            if not self._active or self._paused:
                return
        self._render()

    def _handle_resize(self) -> None:
        if not self._active:
            return
        self._read_size()
        if self._paused:
            # resume() lays out again with whatever size is current then
            return
        logger.debug("Resized to %dx%d", self._cols, self._rows)
        self._apply_layout()
        self._render()

    def _handle_output(self, data: str) -> None:
        if not self.intercepting or self._layout is None:
            self._terminal.write(data)
            return
        style = self._config.cursor_style
        self._emit(
            restore_cursor(style)
            + data
            + save_cursor(style)
            + move_to(self._layout.input_row, self._cursor_col)
        )

    # -- editing ------------------------------------------------------------

    def _apply(self, command: Command) -> None:
        action = command.action

        if action == "insert":
            self._buffer.insert(command.text)
        elif action == "paste":
            self._buffer.set(command.text)
            self._render()
            self._submit()
        elif action == "submit":
            self._submit()
        elif action == "interrupt":
            self._interrupt()
        elif action == "history_up":
            entry = self._history.up(self._buffer.text)
            if entry is not None:
                self._buffer.set(entry)
        elif action == "history_down":
            entry = self._history.down()
            if entry is not None:
                self._buffer.set(entry)
        else:
            _BUFFER_EDITS[action](self._buffer)

    def _interrupt(self) -> None:
        if self._buffer:
            self._buffer.clear()
            self._history.reset()
            return
        logger.info("Interrupt on empty input; exiting")
        self.destroy()
        self._exit(0)

    def _submit(self) -> None:
        line = self._buffer.text.strip()
        self._buffer.clear()
        self._history.reset()
        self._history.push(line)

        self._render()

        if self._submit_cb is not None:
            self._submit_cb(line)

    # -- layout & rendering -------------------------------------------------

    def _read_size(self) -> None:
        self._rows = self._terminal.rows or 24
        self._cols = self._terminal.columns or 80
        self._layout = compute_layout(self._rows, self._cols)

    def _apply_layout(self) -> None:
        """Set the scroll region, paint chrome and re-anchor the output cursor."""
        if self._layout is None:
            return
        self._emit(
            scroll_region(self._layout)
            + chrome(self._layout, self._config.separator_char)
            + anchor(self._layout, self._config.cursor_style)
        )

    def _render(self) -> None:
        if not self._active or self._paused or self._layout is None:
            return

        text = self._buffer.text
        cursor = self._buffer.cursor
        max_len = max(0, self._cols - self._prompt_len - 1)

        display = text
        display_cursor = cursor
        if visible_width(text) > max_len:
            # Slide a window centred on the cursor; the text left of the
            # cursor must leave one column for the cursor itself
            start = max(0, cursor - max_len // 2)
            while start < cursor and visible_width(text[start:cursor]) > max_len - 1:
                start += 1
            display = text[start:]
            display_cursor = cursor - start

        col = self._prompt_len + visible_width(display[:display_cursor]) + 1
        self._cursor_col = min(col, max(1, self._cols))

        row = self._layout.input_row
        self._emit(
            move_to(row, 1)
            + CLEAR_LINE
            + self._prompt
            + take_columns(display, max_len)
            + move_to(row, self._cursor_col)
        )

    def _emit(self, data: str) -> None:
        """Write engine-owned escape sequences through the lease."""
        if not self._interactive or self._lease is None:
            return
        self._lease.write(data)
