"""
PageLab Sandbox - Live preview rendering and learner code execution.

This module provides:
- PreviewRenderer: per-kind preview composition
- ScriptRuntime: QuickJS evaluation with console routing
- ConsoleChannel: scoped console capture
- HostDocument / DomBridge: confined DOM for domScript exercises
"""

from .console import ConsoleChannel

from .dom import (
    HostDocument,
    DomBridge,
    build_container,
    confined_lookup,
    PAGE_SHELL,
    MOUNT_ID,
    CONTAINER_ID,
    LOOKUP_PRIMITIVES,
)

from .runtime import (
    ScriptRuntime,
    DEFAULT_TIME_LIMIT,
    DEFAULT_MEMORY_LIMIT,
)

from .renderer import (
    PreviewRenderer,
    PreviewFragment,
    render_console_block,
    render_error_block,
)

__all__ = [
    # Console
    "ConsoleChannel",
    # DOM
    "HostDocument",
    "DomBridge",
    "build_container",
    "confined_lookup",
    "PAGE_SHELL",
    "MOUNT_ID",
    "CONTAINER_ID",
    "LOOKUP_PRIMITIVES",
    # Runtime
    "ScriptRuntime",
    "DEFAULT_TIME_LIMIT",
    "DEFAULT_MEMORY_LIMIT",
    # Renderer
    "PreviewRenderer",
    "PreviewFragment",
    "render_console_block",
    "render_error_block",
]
