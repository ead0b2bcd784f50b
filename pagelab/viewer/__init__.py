"""
PageLab Viewer - Rendering components for exercise display.

This module provides:
- Exercise listing rows, instruction/hint cards, feedback banners
- Preview page composition for the live preview iframe
"""

from .exercise import (
    get_exercise_css,
    format_inline_text,
    render_exercise_row,
    render_instructions,
    render_hint,
    render_feedback,
    render_answer,
    render_progress_summary,
    KIND_LABELS,
    EDITOR_LANGUAGES,
)

from .preview import (
    build_preview_page,
    estimate_preview_height,
)

__all__ = [
    # Exercise rendering
    "get_exercise_css",
    "format_inline_text",
    "render_exercise_row",
    "render_instructions",
    "render_hint",
    "render_feedback",
    "render_answer",
    "render_progress_summary",
    "KIND_LABELS",
    "EDITOR_LANGUAGES",
    # Preview
    "build_preview_page",
    "estimate_preview_height",
]
