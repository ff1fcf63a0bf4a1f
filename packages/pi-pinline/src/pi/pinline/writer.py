"""The owned write channel shared by the input line and everything else.

Components that print while the input line is up get an
:class:`OwnedWriter` instead of the terminal. It behaves like a text
stream, so ``print(..., file=writer)`` and
``contextlib.redirect_stdout(writer)`` both work. While an owner holds the
writer and is intercepting, each write is handed to the owner, which
confines it to the scroll region. Otherwise writes go straight through.

The owner writes its own escape sequences through the :class:`Lease` it
got from :meth:`OwnedWriter.acquire`; there is no other raw path to the
terminal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from pi.pinline.events import Output

if TYPE_CHECKING:
    from pi.pinline.terminal import Terminal

logger = logging.getLogger(__name__)


class PinlineError(RuntimeError):
    """Base class for write-channel ownership errors."""


class WriterBusyError(PinlineError):
    """Raised when acquiring a writer that already has an owner."""


class LeaseReleasedError(PinlineError):
    """Raised when writing through a lease after it was released."""


class WriterOwner(Protocol):
    """What an owner must provide to receive intercepted writes."""

    @property
    def intercepting(self) -> bool: ...

    def dispatch(self, event: Output) -> None: ...


class Lease:
    """Exclusive, raw access to the terminal held by the writer's owner."""

    def __init__(self, writer: OwnedWriter, owner: WriterOwner) -> None:
        self._writer = writer
        self.owner = owner
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def write(self, data: str) -> None:
        """Write *data* to the terminal without interception."""
        if self._released:
            raise LeaseReleasedError("write through a released lease")
        self._writer._terminal.write(data)

    def release(self) -> None:
        """Give ownership back. Releasing twice is a no-op."""
        if self._released:
            return
        self._released = True
        self._writer._release(self)


class OwnedWriter:
    """Text-stream wrapper around a terminal's write channel."""

    encoding = "utf-8"
    errors = "strict"

    def __init__(self, terminal: Terminal) -> None:
        self._terminal = terminal
        self._lease: Lease | None = None

    # -- ownership ----------------------------------------------------------

    def acquire(self, owner: WriterOwner) -> Lease:
        """Take exclusive ownership of the write channel."""
        if self._lease is not None:
            raise WriterBusyError("writer is already owned")
        self._lease = Lease(self, owner)
        logger.debug("Write channel acquired by %r", owner)
        return self._lease

    def _release(self, lease: Lease) -> None:
        if self._lease is lease:
            self._lease = None
            logger.debug("Write channel released by %r", lease.owner)

    @property
    def owned(self) -> bool:
        return self._lease is not None

    # -- text stream --------------------------------------------------------

    def write(self, data: str) -> int:
        """Write *data*, routing it through the owner when intercepting."""
        lease = self._lease
        if lease is not None and lease.owner.intercepting:
            lease.owner.dispatch(Output(data))
        else:
            self._terminal.write(data)
        return len(data)

    def writelines(self, lines: list[str]) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        self._terminal.flush()

    def isatty(self) -> bool:
        return self._terminal.is_interactive

    def writable(self) -> bool:
        return True

    def readable(self) -> bool:
        return False

    def seekable(self) -> bool:
        return False
