"""Waiting for a single keypress on the controlling terminal."""

import asyncio
import contextlib
import logging
import os
import sys
import termios
import tty
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def cbreak_mode(fd: int) -> Iterator[None]:
    """Put a terminal in cbreak mode, restoring its settings on exit.

    Does nothing if fd is not a terminal.
    """
    if not os.isatty(fd):
        yield
        return

    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        # Also turn off echo so the key doesn't show up in the output
        attrs = termios.tcgetattr(fd)
        attrs[3] &= ~termios.ECHO
        termios.tcsetattr(fd, termios.TCSANOW, attrs)
        yield
    finally:
        # TCSAFLUSH drops the rest of multi-byte keys like arrows
        termios.tcsetattr(fd, termios.TCSAFLUSH, saved)


async def await_keypress(fd: Optional[int] = None) -> str:
    """Wait until one key is read from fd (stdin by default).

    There is no timeout. End of input also returns, with an empty string,
    since no keypress can arrive after it.

    Returns:
        The key that was pressed, or "" on end of input.
    """
    if fd is None:
        fd = sys.stdin.fileno()

    loop = asyncio.get_running_loop()
    keypress: asyncio.Future = loop.create_future()

    def on_readable() -> None:
        if keypress.done():
            return
        try:
            keypress.set_result(os.read(fd, 1))
        except OSError as e:
            keypress.set_exception(e)

    with cbreak_mode(fd):
        try:
            loop.add_reader(fd, on_readable)
        except OSError:
            # Regular files and /dev/null can't be polled, read them directly
            logger.debug(f"fd {fd} is not pollable, reading in executor")
            data = await loop.run_in_executor(None, os.read, fd, 1)
        else:
            try:
                data = await keypress
            finally:
                loop.remove_reader(fd)

    if not data:
        logger.warning("End of input reached while waiting for a keypress")
        return ""

    logger.debug("Keypress received")
    return data.decode("utf-8", errors="replace")
