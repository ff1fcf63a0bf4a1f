"""Tests for pi.pinline.terminal.ProcessTerminal over pipes and string streams."""

from __future__ import annotations

import asyncio
import io
import os

import pytest

from pi.pinline.terminal import WRITE_LOG_ENV, ProcessTerminal


async def wait_for(predicate, timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate() and loop.time() < deadline:
        await asyncio.sleep(0.01)


class TestNonInteractiveStreams:
    def test_string_streams_are_not_interactive(self) -> None:
        term = ProcessTerminal(stdin=io.StringIO(), stdout=io.StringIO())
        assert term.is_interactive is False

    def test_size_falls_back_to_defaults(self) -> None:
        term = ProcessTerminal(stdin=io.StringIO(), stdout=io.StringIO())
        assert term.columns == 80
        assert term.rows == 24

    def test_write_goes_to_stdout(self) -> None:
        out = io.StringIO()
        term = ProcessTerminal(stdin=io.StringIO(), stdout=out)
        term.write("hello")
        assert out.getvalue() == "hello"

    def test_write_log_mirrors_output(self, tmp_path, monkeypatch) -> None:
        log_path = tmp_path / "writes.log"
        monkeypatch.setenv(WRITE_LOG_ENV, str(log_path))
        term = ProcessTerminal(stdin=io.StringIO(), stdout=io.StringIO())
        term.write("\x1b[1;22r")
        term.write("data")
        assert log_path.read_text() == "\x1b[1;22rdata"

    def test_start_without_event_loop_does_not_fail(self) -> None:
        term = ProcessTerminal(stdin=io.StringIO(), stdout=io.StringIO())
        term.start(lambda data: None, lambda: None)
        term.set_raw_mode(False)
        term.stop()


class TestInputReading:
    @pytest.mark.asyncio
    async def test_reads_input_through_event_loop(self) -> None:
        read_fd, write_fd = os.pipe()
        stdin = os.fdopen(read_fd, "r")
        received: list[str] = []
        term = ProcessTerminal(stdin=stdin, stdout=io.StringIO())
        term.start(received.append, lambda: None)
        try:
            os.write(write_fd, "héllo".encode())
            await wait_for(lambda: "".join(received) == "héllo")
        finally:
            term.stop()
            os.close(write_fd)
            stdin.close()
        assert "".join(received) == "héllo"

    @pytest.mark.asyncio
    async def test_split_utf8_sequence_is_reassembled(self) -> None:
        read_fd, write_fd = os.pipe()
        stdin = os.fdopen(read_fd, "r")
        received: list[str] = []
        term = ProcessTerminal(stdin=stdin, stdout=io.StringIO())
        term.start(received.append, lambda: None)
        try:
            os.write(write_fd, b"\xc3")
            await asyncio.sleep(0.05)
            os.write(write_fd, b"\xa9")
            await wait_for(lambda: bool(received))
        finally:
            term.stop()
            os.close(write_fd)
            stdin.close()
        assert received == ["é"]

    @pytest.mark.asyncio
    async def test_input_not_read_outside_raw_mode(self) -> None:
        read_fd, write_fd = os.pipe()
        stdin = os.fdopen(read_fd, "r")
        received: list[str] = []
        term = ProcessTerminal(stdin=stdin, stdout=io.StringIO())
        term.start(received.append, lambda: None)
        try:
            term.set_raw_mode(False)
            os.write(write_fd, b"ignored")
            await asyncio.sleep(0.05)
            assert received == []
            term.set_raw_mode(True)
            await wait_for(lambda: bool(received))
        finally:
            term.stop()
            os.close(write_fd)
            stdin.close()
        assert "".join(received) == "ignored"
