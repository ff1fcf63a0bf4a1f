"""Terminal abstraction for the pinned input line.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` backed
by ``sys.stdin``/``sys.stdout``. ``ProcessTerminal`` toggles raw mode with
:mod:`tty` and :mod:`termios`, reads keystrokes through the asyncio event
loop and reports SIGWINCH as a resize. Every callback runs on the loop, so
one handler always finishes before the next starts.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import signal
import sys
import termios
import tty
from typing import IO, Callable, Protocol

logger = logging.getLogger(__name__)

WRITE_LOG_ENV = "PI_PINLINE_WRITE_LOG"

_DEFAULT_COLUMNS = 80
_DEFAULT_ROWS = 24


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface the input line needs from a terminal."""

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None: ...

    def stop(self) -> None: ...

    def set_raw_mode(self, enabled: bool) -> None: ...

    def write(self, data: str) -> None: ...

    def flush(self) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    @property
    def is_interactive(self) -> bool: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal implementation backed by the process's stdio.

    Raw mode here keeps output post-processing enabled, so a ``\\n``
    written by other code still returns the carriage.
    """

    def __init__(
        self,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._input_handler: Callable[[str], None] | None = None
        self._resize_handler: Callable[[], None] | None = None
        self._original_termios: list | None = None
        self._reader_active: bool = False
        self._sigwinch_installed: bool = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._write_log_path: str = os.environ.get(WRITE_LOG_ENV, "")

    # -- properties ---------------------------------------------------------

    @property
    def is_interactive(self) -> bool:
        try:
            return self._stdin.isatty() and self._stdout.isatty()
        except (ValueError, OSError):
            return False

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).columns
        except (ValueError, OSError):
            return _DEFAULT_COLUMNS

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).lines
        except (ValueError, OSError):
            return _DEFAULT_ROWS

    # -- start / stop -------------------------------------------------------

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        """Enter raw mode, begin reading stdin and watch for resizes."""
        self._input_handler = on_input
        self._resize_handler = on_resize

        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; keyboard input is disabled")
            self._loop = None
            return

        try:
            self._loop.add_signal_handler(signal.SIGWINCH, self._on_sigwinch)
            self._sigwinch_installed = True
        except (NotImplementedError, RuntimeError, ValueError):
            logger.debug("SIGWINCH handler unavailable", exc_info=True)

        self.set_raw_mode(True)

    def stop(self) -> None:
        """Restore terminal state and clean up all handlers."""
        self.set_raw_mode(False)

        if self._sigwinch_installed and self._loop is not None:
            self._loop.remove_signal_handler(signal.SIGWINCH)
            self._sigwinch_installed = False

        self._loop = None
        self._input_handler = None
        self._resize_handler = None

    def set_raw_mode(self, enabled: bool) -> None:
        """Switch between raw keystroke input and the line-buffered default.

        Input is only read while raw mode is on, which leaves stdin free for
        other readers while it is off.
        """
        if enabled:
            self._enter_raw_mode()
            self._add_reader()
        else:
            self._remove_reader()
            self._restore_mode()

    # -- write --------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write data to stdout and optionally to the write log."""
        try:
            self._stdout.write(data)
            self._stdout.flush()
        except OSError:
            pass

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                pass

    def flush(self) -> None:
        try:
            self._stdout.flush()
        except OSError:
            pass

    # -- private: termios ---------------------------------------------------

    def _enter_raw_mode(self) -> None:
        if not self.is_interactive:
            return
        fd = self._stdin.fileno()
        if self._original_termios is None:
            self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)
        attrs = termios.tcgetattr(fd)
        attrs[1] = self._original_termios[1]  # c_oflag
        termios.tcsetattr(fd, termios.TCSADRAIN, attrs)

    def _restore_mode(self) -> None:
        if self._original_termios is None:
            return
        try:
            termios.tcsetattr(
                self._stdin.fileno(), termios.TCSADRAIN, self._original_termios
            )
        except (termios.error, ValueError, OSError):
            logger.debug("Could not restore terminal attributes", exc_info=True)
        self._original_termios = None

    # -- private: stdin reading --------------------------------------------

    def _add_reader(self) -> None:
        if self._reader_active or self._loop is None:
            return
        self._loop.add_reader(self._stdin.fileno(), self._on_stdin_readable)
        self._reader_active = True

    def _remove_reader(self) -> None:
        if not self._reader_active or self._loop is None:
            self._reader_active = False
            return
        try:
            self._loop.remove_reader(self._stdin.fileno())
        except (RuntimeError, ValueError):
            pass
        self._reader_active = False

    def _on_stdin_readable(self) -> None:
        """Callback invoked by the event loop when stdin has data."""
        try:
            raw = os.read(self._stdin.fileno(), 4096)
        except OSError:
            return

        if not raw:
            logger.debug("stdin reached end of file")
            self._remove_reader()
            return

        data = self._decoder.decode(raw)
        if data and self._input_handler is not None:
            self._input_handler(data)

    # -- private: SIGWINCH -------------------------------------------------

    def _on_sigwinch(self) -> None:
        if self._resize_handler is not None:
            self._resize_handler()
