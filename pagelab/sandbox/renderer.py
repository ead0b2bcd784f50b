"""
PreviewRenderer - Turn (exercise, source) into a preview fragment.

- markup: the source itself
- stylesheet: fixture markup styled by the source
- script: console output or the fault message
- domScript: the fixture container after the source manipulated it

Faults in learner code never propagate out of ``render``.
"""

import html
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from pagelab.schemas import Exercise, ExerciseKind

from .console import ConsoleChannel
from .dom import DomBridge, HostDocument, build_container, confined_lookup
from .runtime import DEFAULT_MEMORY_LIMIT, DEFAULT_TIME_LIMIT, ScriptRuntime


logger = logging.getLogger(__name__)

EMPTY_CONSOLE_TEXT = "No console output yet. Use console.log() to print values."


@dataclass
class PreviewFragment:
    """Rendered preview: markup plus optional style text."""
    kind: ExerciseKind
    markup: str = ""
    stylesheet: Optional[str] = None
    logs: list[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_html(self) -> str:
        if self.stylesheet is None:
            return self.markup
        return f"<style>{self.stylesheet}</style>{self.markup}"


def render_console_block(lines: list[str]) -> str:
    if not lines:
        return f'<pre class="pagelab-console pagelab-console-empty">{html.escape(EMPTY_CONSOLE_TEXT)}</pre>'
    body = "\n".join(html.escape(line) for line in lines)
    return f'<pre class="pagelab-console">{body}</pre>'


def render_error_block(message: str) -> str:
    return f'<pre class="pagelab-error">Error: {html.escape(message)}</pre>'


class PreviewRenderer:
    """Render live previews for every exercise kind."""

    def __init__(
        self,
        console: Optional[ConsoleChannel] = None,
        time_limit: float = DEFAULT_TIME_LIMIT,
        memory_limit: int = DEFAULT_MEMORY_LIMIT,
        host_factory: Callable[[], HostDocument] = HostDocument,
    ):
        self.console = console or ConsoleChannel()
        self.runtime = ScriptRuntime(self.console, time_limit=time_limit, memory_limit=memory_limit)
        self.host_factory = host_factory

    def render(self, exercise: Exercise, source: str) -> PreviewFragment:
        """Render the preview for ``source`` according to the exercise kind."""
        if exercise.kind == ExerciseKind.MARKUP:
            return PreviewFragment(kind=exercise.kind, markup=source)
        if exercise.kind == ExerciseKind.STYLESHEET:
            return PreviewFragment(
                kind=exercise.kind,
                markup=exercise.preview_markup or "",
                stylesheet=source,
            )
        if exercise.kind == ExerciseKind.SCRIPT:
            return self._render_script(exercise, source)
        return self._render_dom_script(exercise, source)

    def _execute(
        self,
        source: str,
        setup: Optional[str] = None,
        dom: Optional[DomBridge] = None,
    ) -> tuple[list[str], Optional[str]]:
        """Run code with console capture; returns (lines, fault)."""
        with self.console.capture() as lines:
            try:
                fault = self.runtime.run(source, setup=setup, dom=dom)
            except Exception as e:
                logger.exception("Sandbox failed outside learner code")
                fault = str(e) or type(e).__name__
        return list(lines), fault

    def _render_script(self, exercise: Exercise, source: str) -> PreviewFragment:
        logs, fault = self._execute(source, setup=exercise.setup_source)
        if fault is not None:
            return PreviewFragment(
                kind=exercise.kind,
                markup=render_error_block(fault),
                logs=logs,
                error=fault,
            )
        return PreviewFragment(kind=exercise.kind, markup=render_console_block(logs), logs=logs)

    def _render_dom_script(self, exercise: Exercise, source: str) -> PreviewFragment:
        host = self.host_factory()
        container = build_container(host, exercise.preview_markup, exercise.preview_stylesheet)
        host.mount_container(container)
        bridge = DomBridge(host, container)

        with confined_lookup(host, container):
            logs, fault = self._execute(source, dom=bridge)

        parts = [str(container)]
        if logs:
            parts.append(render_console_block(logs))
        if fault is not None:
            parts.append(render_error_block(fault))
        return PreviewFragment(kind=exercise.kind, markup="".join(parts), logs=logs, error=fault)
