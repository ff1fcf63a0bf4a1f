"""Configuration for the pinned input line."""

from __future__ import annotations

from dataclasses import dataclass

from pi.pinline.history import HISTORY_MAX
from pi.pinline.layout import BOLD, PURPLE, RESET, CursorStyle

DEFAULT_PROMPT = f"{PURPLE}f{RESET} {BOLD}>{RESET} "


@dataclass
class Config:
    """Input line options.

    ``prompt`` may carry color codes; only its visible characters count
    towards the prompt width.
    """

    prompt: str = DEFAULT_PROMPT
    history_size: int = HISTORY_MAX
    cursor_style: CursorStyle = "dec"
    separator_char: str = "─"
