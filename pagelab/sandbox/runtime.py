"""
ScriptRuntime - Evaluate learner JavaScript in a fresh QuickJS context.

Each run gets its own ``quickjs.Context`` with the console prelude (and the
DOM prelude for domScript exercises) installed. Console output is handed to
the ConsoleChannel; capturing it is the caller's job.
"""

import json
import logging
from typing import Optional

import quickjs

from .console import ConsoleChannel
from .dom import DomBridge
from .prelude import CONSOLE_PRELUDE, DOM_PRELUDE


logger = logging.getLogger(__name__)

DEFAULT_TIME_LIMIT = 1.0                 # seconds
DEFAULT_MEMORY_LIMIT = 32 * 1024 * 1024  # bytes


def describe_interpreter_error(error: quickjs.JSException) -> str:
    """Fault text for errors raised past the in-sandbox try/catch."""
    text = str(error).strip().splitlines()[0] if str(error).strip() else type(error).__name__
    if "interrupted" in text:
        return "Execution stopped: time limit exceeded (is there an infinite loop?)"
    if "out of memory" in text:
        return "Execution stopped: memory limit exceeded"
    return text


class ScriptRuntime:
    """Runs setup and learner source in one evaluation context."""

    def __init__(
        self,
        console: ConsoleChannel,
        time_limit: float = DEFAULT_TIME_LIMIT,
        memory_limit: int = DEFAULT_MEMORY_LIMIT,
    ):
        self.console = console
        self.time_limit = time_limit
        self.memory_limit = memory_limit

    def _emit(self, level, line) -> None:
        self.console.write("" if line is None else str(line), str(level or "log"))

    def _new_context(self, dom: Optional[DomBridge] = None) -> quickjs.Context:
        context = quickjs.Context()
        context.set_memory_limit(self.memory_limit)
        context.add_callable("__pagelab_console", self._emit)
        context.eval(CONSOLE_PRELUDE)
        if dom is not None:
            context.add_callable("__pagelab_dom", dom.dispatch)
            context.eval(DOM_PRELUDE)
        context.set_time_limit(self.time_limit)
        return context

    def run(
        self,
        source: str,
        setup: Optional[str] = None,
        dom: Optional[DomBridge] = None,
    ) -> Optional[str]:
        """
        Execute source code.

        Args:
            source: Learner source text
            setup: Code evaluated first, in the same context
            dom: Bridge backing ``document`` (domScript only)

        Returns:
            The fault message, or None when the code ran to completion
        """
        program = source if not setup else f"{setup}\n;\n{source}"
        context = self._new_context(dom)
        try:
            fault = context.eval(f"__pagelab_run({json.dumps(program)})")
        except quickjs.JSException as e:
            fault = describe_interpreter_error(e)
        if fault is not None:
            logger.debug(f"Learner code raised: {fault}")
            return str(fault)
        return None
