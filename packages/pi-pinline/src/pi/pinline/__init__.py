"""pi-pinline: an input prompt pinned to the bottom of the terminal."""

import logging

# Config
from pi.pinline.config import DEFAULT_PROMPT, Config

# Engine
from pi.pinline.engine import EngineState, InputLine

# Events
from pi.pinline.events import Event, KeyInput, Output, Resize

# History
from pi.pinline.history import HISTORY_MAX, History

# Keystroke decoding
from pi.pinline.keys import Command, KeyDecoder, join_pasted_lines

# Layout
from pi.pinline.layout import Layout, compute_layout

# Line buffer
from pi.pinline.line_buffer import LineBuffer

# Terminal interface and implementation
from pi.pinline.terminal import ProcessTerminal, Terminal

# Utilities
from pi.pinline.utils import strip_ansi, visible_width

# Write channel
from pi.pinline.writer import (
    Lease,
    LeaseReleasedError,
    OwnedWriter,
    PinlineError,
    WriterBusyError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Config
    "Config",
    "DEFAULT_PROMPT",
    # Engine
    "EngineState",
    "InputLine",
    # Events
    "Event",
    "KeyInput",
    "Output",
    "Resize",
    # History
    "HISTORY_MAX",
    "History",
    # Keys
    "Command",
    "KeyDecoder",
    "join_pasted_lines",
    # Layout
    "Layout",
    "compute_layout",
    # Line buffer
    "LineBuffer",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Utilities
    "strip_ansi",
    "visible_width",
    # Writer
    "Lease",
    "LeaseReleasedError",
    "OwnedWriter",
    "PinlineError",
    "WriterBusyError",
]
