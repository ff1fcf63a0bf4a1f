"""Events handled by :meth:`pi.pinline.engine.InputLine.dispatch`.

Keystrokes, resize notifications and intercepted writes all enter the
engine through one entry point and are handled to completion, one at a
time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class KeyInput:
    """A chunk of decoded keyboard input, exactly as one read returned it."""

    data: str


@dataclass(frozen=True)
class Resize:
    """The terminal changed size. The new size is read from the terminal."""


@dataclass(frozen=True)
class Output:
    """A write made through the owned writer while the engine intercepts."""

    data: str


Event = Union[KeyInput, Resize, Output]
