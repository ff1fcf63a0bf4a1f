"""Entry point for the pi-pinline demo.

Streams a ticker above the pinned prompt and echoes whatever is submitted,
so typing can be tried while output keeps arriving.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
from datetime import datetime

from pi.pinline.config import Config
from pi.pinline.engine import InputLine
from pi.pinline.history import HISTORY_MAX
from pi.pinline.layout import DIM, RESET
from pi.pinline.terminal import ProcessTerminal, Terminal

_QUIT_COMMANDS = ("/quit", "/exit")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pi-pinline",
        description="Bottom-pinned input line demo",
    )
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between ticker lines (0 disables)")
    parser.add_argument("--history-size", type=int, default=HISTORY_MAX, help="Number of submitted lines to remember")
    parser.add_argument("--cursor-style", choices=["dec", "sco"], default="dec", help="Save/restore cursor sequences")
    parser.add_argument("--log-file", default=None, help="Write logs to this file")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Level for --log-file; ignored without it",
    )
    return parser.parse_args(argv)


async def _ticker(interval: float) -> None:
    count = 0
    while True:
        await asyncio.sleep(interval)
        count += 1
        print(f"{DIM}[{datetime.now().strftime('%H:%M:%S')}]{RESET} tick {count}")


async def run(config: Config, interval: float, terminal: Terminal | None = None) -> None:
    if terminal is None:
        terminal = ProcessTerminal()
    input_line = InputLine(terminal, config)
    done = asyncio.Event()

    def on_submit(line: str) -> None:
        if line in _QUIT_COMMANDS:
            input_line.destroy()
            done.set()
            return
        if line:
            print(f"you said: {line}")

    input_line.on_submit(on_submit)

    with contextlib.redirect_stdout(input_line.writer):
        input_line.init()
        ticker = asyncio.create_task(_ticker(interval)) if interval > 0 else None
        try:
            await done.wait()
        finally:
            if ticker is not None:
                ticker.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await ticker
            input_line.destroy()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    # Logging must never reach the terminal the input line is drawing on
    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=getattr(logging, args.log_level.upper()),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )

    config = Config(history_size=args.history_size, cursor_style=args.cursor_style)
    asyncio.run(run(config, args.interval))


if __name__ == "__main__":
    main()
