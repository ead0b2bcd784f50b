"""
ConsoleChannel - Host-side target of console calls made by learner code.

Sandboxed ``console.log`` calls are routed here. Outside a capture the lines
go to the ``pagelab.console`` logger; inside ``capture()`` they are collected
for the preview instead.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional


CONSOLE_LEVELS = {
    "debug": logging.DEBUG,
    "log": logging.INFO,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class ConsoleChannel:
    """Diagnostic channel with a scoped capture."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("pagelab.console")
        self._sink: Optional[list[str]] = None

    @property
    def capturing(self) -> bool:
        return self._sink is not None

    def write(self, line: str, level: str = "log") -> None:
        """Deliver one formatted console line."""
        if self._sink is not None:
            self._sink.append(line)
            return
        self._logger.log(CONSOLE_LEVELS.get(level, logging.INFO), line)

    @contextmanager
    def capture(self) -> Iterator[list[str]]:
        """Collect lines written during the block; forwarding resumes on exit."""
        if self._sink is not None:
            raise RuntimeError("Console capture is already active")
        sink: list[str] = []
        self._sink = sink
        try:
            yield sink
        finally:
            self._sink = None
