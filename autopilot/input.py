"""
Command sources for operator input.
Commands are plain text, e.g. ``on``, ``set pitch 5``, ``add bearing -10``, ``reset all``.
"""

from __future__ import annotations

import math
import queue
import shlex
import sys
import threading
from dataclasses import dataclass
from typing import List, Optional, TextIO, Tuple

from common.interface import CommandSource
from common.logger import get_logger

logger = get_logger("input")

ENABLE_VERBS = ("start", "on")
DISABLE_VERBS = ("stop", "off")
SETPOINT_VERBS = ("set", "add", "sub", "reset")


@dataclass(frozen=True)
class Command:
    """A tokenized command: lower-cased verb plus raw arguments."""

    verb: str
    args: Tuple[str, ...] = ()

    def arg(self, index: int) -> Optional[str]:
        """Argument at ``index`` or None if absent."""
        return self.args[index] if index < len(self.args) else None


def parse_command(text: Optional[str]) -> Optional[Command]:
    """Split a command line shell-style. Returns None for blank or malformed input."""
    if not text:
        return None
    try:
        tokens = shlex.split(text)
    except ValueError as exc:
        logger.debug(f"Ignoring malformed command {text!r}: {exc}")
        return None
    if not tokens:
        return None
    return Command(verb=tokens[0].lower(), args=tuple(tokens[1:]))


def parse_value(text: Optional[str]) -> Optional[float]:
    """Parse a setpoint value; None for missing, unparseable or non-finite input."""
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


class QueueCommandSource(CommandSource):
    """Thread-safe in-memory command queue; other threads push, the loop polls."""

    def __init__(self):
        self._queue: "queue.Queue[str]" = queue.Queue()

    def push(self, text: str) -> None:
        self._queue.put(text)

    def poll(self) -> List[str]:
        pending = []
        while True:
            try:
                pending.append(self._queue.get_nowait())
            except queue.Empty:
                return pending


class StdinCommandSource(QueueCommandSource):
    """Reads one command per line from a stream on a daemon thread."""

    def __init__(self, stream: TextIO = sys.stdin):
        super().__init__()
        self._stream = stream
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._reader, name="command-reader", daemon=True)
        self._thread.start()

    def _reader(self) -> None:
        for line in self._stream:
            if self._stopped.is_set():
                break
            line = line.strip()
            if line:
                self.push(line)
        logger.debug("Command stream closed")

    def close(self) -> None:
        """
        Stop queueing lines. A reader blocked on the stream only notices on
        its next line; the thread is a daemon so it never holds up exit.
        """
        self._stopped.set()
