"""
prompter.py

Responsibility: Interactive questions on the controlling terminal.

The terminal device is opened directly instead of using stdin/stdout, so the
recipe can be written to stdout (`-o -`) while the user still answers prompts.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from genpkgbuild.errors import InputError, TerminalUnavailable

logger = logging.getLogger(__name__)

TTY_DEVICE = "/dev/tty"


class Terminal:
    """Reads answers from `reader` and writes prompts and status text to `writer`."""

    def __init__(self, reader: TextIO, writer: TextIO) -> None:
        self._reader = reader
        self._writer = writer

    def write(self, text: str) -> None:
        self._writer.write(text)
        self._writer.flush()

    def prompt(self, label: str, default: str = "") -> str:
        """
        Ask a question and return the trimmed answer, or `default` for an empty one.
        """
        if default:
            self.write(f"{label}: ({default}) ")
        else:
            self.write(f"{label}: ")

        try:
            line = self._reader.readline()
        except KeyboardInterrupt as e:
            raise InputError("interrupted") from e
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"input error: {e}") from e
        if not line:
            raise InputError("interrupted")

        answer = line.strip()
        return answer or default


@contextmanager
def open_terminal(device: str = TTY_DEVICE) -> Iterator[Terminal]:
    """
    Open the controlling terminal for the duration of the block.
    """
    try:
        reader = open(device, encoding="utf-8")
    except OSError as e:
        raise TerminalUnavailable(f"could not open TTY: {e}") from e
    try:
        writer = open(device, "w", encoding="utf-8")
    except OSError as e:
        reader.close()
        raise TerminalUnavailable(f"could not open TTY: {e}") from e

    logger.debug("opened terminal %s", device)
    with reader, writer:
        yield Terminal(reader, writer)
