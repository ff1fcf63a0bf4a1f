"""Keystroke decoding for the pinned input line.

Turns a raw chunk of terminal input into a list of :class:`Command` values.
Escape sequences are parsed with a small explicit state machine::

    normal --ESC--> esc --[--> csi --final byte--> dispatch --> normal
                     \\--other--> normal (Alt+key, swallowed)

A chunk that contains a line ending and is not a lone Enter is treated as a
paste: all of it becomes one line that is submitted straight away. A fast
burst of typing delivered in one read together with Enter looks exactly
like a paste and is classified as one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

Action = Literal[
    "insert",
    "paste",
    "submit",
    "interrupt",
    "home",
    "end",
    "left",
    "right",
    "backspace",
    "delete_forward",
    "kill_line",
    "kill_to_end",
    "delete_word_backward",
    "history_up",
    "history_down",
]


@dataclass(frozen=True)
class Command:
    """A single edit decoded from input. *text* is set for insert/paste."""

    action: Action
    text: str = ""


# ---------------------------------------------------------------------------
# Byte codes
# ---------------------------------------------------------------------------

CTRL_A = 0x01
CTRL_C = 0x03
CTRL_E = 0x05
CTRL_H = 0x08
CTRL_K = 0x0B
CTRL_U = 0x15
CTRL_W = 0x17
ESC = 0x1B
DEL = 0x7F

_CONTROL_ACTIONS: dict[int, Action] = {
    CTRL_C: "interrupt",
    CTRL_A: "home",
    CTRL_E: "end",
    CTRL_U: "kill_line",
    CTRL_K: "kill_to_end",
    CTRL_W: "delete_word_backward",
    DEL: "backspace",
    CTRL_H: "backspace",
}

_CSI_ACTIONS: dict[str, Action] = {
    "A": "history_up",
    "B": "history_down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

_LONE_ENTER = ("\r", "\n", "\r\n")

# Decoder states
NORMAL = "normal"
ESC_SEEN = "esc"
CSI_PARAMS = "csi"

State = Literal["normal", "esc", "csi"]


def join_pasted_lines(text: str) -> str:
    """Collapse pasted multi-line text into a single line.

    Line endings are normalised, each line is right-trimmed, blank lines
    are dropped and the rest are joined with single spaces.
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [line.rstrip() for line in normalized.split("\n")]
    return " ".join(line for line in lines if line)


def is_paste(chunk: str) -> bool:
    """Return ``True`` if *chunk* holds a line ending and is not a lone Enter."""
    return ("\n" in chunk or "\r" in chunk) and chunk not in _LONE_ENTER


class KeyDecoder:
    """Decode input chunks into edit commands.

    The state machine is reset at every chunk boundary, so an escape
    sequence split across two reads is dropped rather than misread later.
    """

    def __init__(self) -> None:
        self.state: State = NORMAL
        self._params: str = ""

    def feed(self, chunk: str) -> list[Command]:
        """Decode one chunk of input. Never blocks."""
        if chunk in _LONE_ENTER:
            return [Command("submit")]

        if is_paste(chunk):
            joined = join_pasted_lines(chunk)
            return [Command("paste", joined)] if joined else []

        self.reset()
        commands: list[Command] = []
        for ch in chunk:
            command = self.step(ch)
            if command is not None:
                commands.append(command)
        self.reset()
        return commands

    def step(self, ch: str) -> Command | None:
        """Advance the state machine by one character."""
        if self.state == ESC_SEEN:
            if ch == "[":
                self.state = CSI_PARAMS
                self._params = ""
            else:
                # Alt+key and other two-byte sequences are swallowed
                self.state = NORMAL
            return None

        if self.state == CSI_PARAMS:
            if 0x30 <= ord(ch) <= 0x3F:
                self._params += ch
                return None
            params = self._params
            self.reset()
            return self._dispatch_csi(params, ch)

        code = ord(ch)
        if code == ESC:
            self.state = ESC_SEEN
            return None

        action = _CONTROL_ACTIONS.get(code)
        if action is not None:
            return Command(action)

        if code < 0x20:
            return None

        return Command("insert", ch)

    def reset(self) -> None:
        self.state = NORMAL
        self._params = ""

    @staticmethod
    def _dispatch_csi(params: str, final: str) -> Command | None:
        if final == "~":
            return Command("delete_forward") if params == "3" else None
        action = _CSI_ACTIONS.get(final)
        return Command(action) if action is not None else None
