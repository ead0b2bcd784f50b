"""
Exercise renderer - HTML snippets for the listing and detail views.

Features:
- Exercise rows with level badges and completion marks
- Instruction and hint cards with inline `code` spans
- Feedback banners for submissions
- Reference answer card
"""

from typing import Optional
import html
import re

from pagelab.classroom import Feedback
from pagelab.schemas import Exercise, ExerciseKind


KIND_LABELS = {
    ExerciseKind.MARKUP: "HTML",
    ExerciseKind.STYLESHEET: "CSS",
    ExerciseKind.SCRIPT: "JavaScript",
    ExerciseKind.DOM_SCRIPT: "DOM",
}

# Editor syntax mode per kind (streamlit-ace language names)
EDITOR_LANGUAGES = {
    ExerciseKind.MARKUP: "html",
    ExerciseKind.STYLESHEET: "css",
    ExerciseKind.SCRIPT: "javascript",
    ExerciseKind.DOM_SCRIPT: "javascript",
}

_CODE_SPAN = re.compile(r"`([^`]+)`")


def get_exercise_css() -> str:
    """Get CSS styles for exercise display."""
    return """
    <style>
    .exercise-row {
        display: flex;
        align-items: center;
        gap: 0.75em;
        padding: 0.5em 0.8em;
        border-bottom: 1px solid #eee;
    }
    .exercise-row.completed {
        background: #f1f8e9;
    }
    .exercise-mark {
        width: 1.4em;
        text-align: center;
        color: #bdbdbd;
    }
    .exercise-row.completed .exercise-mark {
        color: #388E3C;
        font-weight: bold;
    }
    .exercise-label {
        color: #757575;
        font-size: 0.85em;
        min-width: 6.5em;
    }
    .exercise-title {
        flex: 1;
    }
    .level-badge {
        background: #E3F2FD;
        color: #1565C0;
        border-radius: 10px;
        padding: 0.1em 0.6em;
        font-size: 0.8em;
    }
    .kind-badge {
        background: #F3E5F5;
        color: #6A1B9A;
        border-radius: 10px;
        padding: 0.1em 0.6em;
        font-size: 0.8em;
    }
    .instruction-card {
        background: #fafafa;
        border-left: 4px solid #1976D2;
        padding: 1em 1.5em;
        margin: 1em 0;
        border-radius: 0 8px 8px 0;
        line-height: 1.6;
    }
    .hint-card {
        background: #FFFDE7;
        border-left: 4px solid #FBC02D;
        padding: 0.8em 1.2em;
        margin: 0.5em 0;
        border-radius: 0 8px 8px 0;
    }
    .feedback-banner {
        padding: 0.8em 1.2em;
        margin: 0.8em 0;
        border-radius: 8px;
        font-weight: 500;
    }
    .feedback-success {
        background: #E8F5E9;
        color: #1B5E20;
        border: 1px solid #A5D6A7;
    }
    .feedback-failure {
        background: #FFF3E0;
        color: #E65100;
        border: 1px solid #FFCC80;
    }
    .answer-card {
        background: #263238;
        color: #ECEFF1;
        padding: 1em 1.2em;
        border-radius: 8px;
        font-family: Menlo, Consolas, monospace;
        font-size: 0.9em;
        white-space: pre-wrap;
    }
    .progress-summary {
        font-size: 0.9em;
        color: #616161;
    }
    </style>
    """


def format_inline_text(text: str) -> str:
    """Escape text, turning `code` spans into <code> and newlines into <br>."""
    escaped = html.escape(text)
    escaped = _CODE_SPAN.sub(r"<code>\1</code>", escaped)
    return escaped.replace("\n", "<br>")


def render_exercise_row(
    index: int,
    exercise: Exercise,
    completed: bool,
    label: Optional[str] = None,
) -> str:
    """Render one listing row. ``index`` is the unfiltered catalog position."""
    row_class = "exercise-row completed" if completed else "exercise-row"
    mark = "✓" if completed else "○"
    label = label or f"Exercise {index + 1}"
    return f"""
    <div class="{row_class}">
        <span class="exercise-mark">{mark}</span>
        <span class="exercise-label">{html.escape(label)}</span>
        <span class="exercise-title">{html.escape(exercise.display_title)}</span>
        <span class="kind-badge">{KIND_LABELS[exercise.kind]}</span>
        <span class="level-badge">Level {exercise.level}</span>
    </div>
    """


def render_instructions(exercise: Exercise) -> str:
    return f'<div class="instruction-card">{format_inline_text(exercise.instructions)}</div>'


def render_hint(exercise: Exercise) -> str:
    if not exercise.hint_text:
        return '<div class="hint-card">No hint for this exercise.</div>'
    return f'<div class="hint-card">💡 {format_inline_text(exercise.hint_text)}</div>'


def render_feedback(feedback: Feedback) -> str:
    """Render a submission result banner."""
    css_class = "feedback-success" if feedback.passed else "feedback-failure"
    icon = "✅" if feedback.passed else "✏️"
    return f"""
    <div class="feedback-banner {css_class}">{icon} {html.escape(feedback.message)}</div>
    """


def render_answer(exercise: Exercise) -> str:
    if not exercise.reference_answer:
        return '<div class="answer-card">No reference answer available.</div>'
    return f'<div class="answer-card">{html.escape(exercise.reference_answer)}</div>'


def render_progress_summary(summary: dict) -> str:
    """Render overall completion text from ExerciseSession.progress_summary()."""
    levels = " · ".join(
        f"L{level}: {stats['completed']}/{stats['total']}"
        for level, stats in summary.get("by_level", {}).items()
    )
    return f"""
    <div class="progress-summary">
        {summary['completed']} of {summary['total']} complete ({summary['completion_percent']}%)
        <br>{levels}
    </div>
    """
