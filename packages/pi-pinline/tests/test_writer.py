"""Tests for pi.pinline.writer -- the owned write channel."""

from __future__ import annotations

import contextlib

import pytest

from pi.pinline.events import Output
from pi.pinline.writer import (
    LeaseReleasedError,
    OwnedWriter,
    PinlineError,
    WriterBusyError,
)

from .virtual_terminal import VirtualTerminal


class RecordingOwner:
    """Owner double that records intercepted writes."""

    def __init__(self, intercepting: bool = True) -> None:
        self.intercepting = intercepting
        self.events: list[Output] = []

    def dispatch(self, event: Output) -> None:
        self.events.append(event)


class TestPassThrough:
    def test_unowned_write_goes_to_terminal(self) -> None:
        term = VirtualTerminal()
        writer = OwnedWriter(term)
        assert writer.write("hello") == 5
        assert term.output == "hello"

    def test_owner_not_intercepting_passes_through(self) -> None:
        term = VirtualTerminal()
        writer = OwnedWriter(term)
        owner = RecordingOwner(intercepting=False)
        writer.acquire(owner)
        writer.write("menu")
        assert term.output == "menu"
        assert owner.events == []

    def test_print_works(self) -> None:
        term = VirtualTerminal()
        writer = OwnedWriter(term)
        print("a", "b", file=writer)
        assert term.output == "a b\n"

    def test_redirect_stdout(self) -> None:
        term = VirtualTerminal()
        writer = OwnedWriter(term)
        with contextlib.redirect_stdout(writer):
            print("redirected")
        assert term.output == "redirected\n"

    def test_isatty_follows_terminal(self) -> None:
        assert OwnedWriter(VirtualTerminal()).isatty() is True
        assert OwnedWriter(VirtualTerminal(interactive=False)).isatty() is False


class TestInterception:
    def test_intercepting_owner_receives_output_events(self) -> None:
        term = VirtualTerminal()
        writer = OwnedWriter(term)
        owner = RecordingOwner()
        writer.acquire(owner)
        writer.write("streamed")
        assert owner.events == [Output("streamed")]
        assert term.output == ""

    def test_lease_writes_bypass_interception(self) -> None:
        term = VirtualTerminal()
        writer = OwnedWriter(term)
        owner = RecordingOwner()
        lease = writer.acquire(owner)
        lease.write("\x1b[1;22r")
        assert term.output == "\x1b[1;22r"
        assert owner.events == []


class TestOwnership:
    def test_second_acquire_raises(self) -> None:
        writer = OwnedWriter(VirtualTerminal())
        writer.acquire(RecordingOwner())
        with pytest.raises(WriterBusyError):
            writer.acquire(RecordingOwner())

    def test_errors_share_a_base_class(self) -> None:
        assert issubclass(WriterBusyError, PinlineError)
        assert issubclass(LeaseReleasedError, PinlineError)
        assert issubclass(PinlineError, RuntimeError)

    def test_release_allows_reacquire(self) -> None:
        writer = OwnedWriter(VirtualTerminal())
        lease = writer.acquire(RecordingOwner())
        lease.release()
        assert not writer.owned
        writer.acquire(RecordingOwner())
        assert writer.owned

    def test_released_lease_cannot_write(self) -> None:
        writer = OwnedWriter(VirtualTerminal())
        lease = writer.acquire(RecordingOwner())
        lease.release()
        with pytest.raises(LeaseReleasedError):
            lease.write("late")

    def test_release_twice_is_noop(self) -> None:
        writer = OwnedWriter(VirtualTerminal())
        lease = writer.acquire(RecordingOwner())
        lease.release()
        lease.release()
        assert lease.released

    def test_stale_release_does_not_drop_new_owner(self) -> None:
        writer = OwnedWriter(VirtualTerminal())
        first = writer.acquire(RecordingOwner())
        first.release()
        writer.acquire(RecordingOwner())
        first.release()
        assert writer.owned
