"""
Viewer tests: HTML snippets and preview page composition.
"""

from pagelab.classroom import Feedback
from pagelab.sandbox import PreviewFragment
from pagelab.schemas import Exercise, ExerciseKind
from pagelab.viewer import (
    EDITOR_LANGUAGES,
    build_preview_page,
    estimate_preview_height,
    format_inline_text,
    get_exercise_css,
    render_answer,
    render_exercise_row,
    render_feedback,
    render_hint,
    render_instructions,
    render_progress_summary,
)


class TestExerciseRendering:
    """Test listing and detail snippets."""

    def test_css(self):
        assert get_exercise_css().strip().startswith("<style>")

    def test_inline_text(self):
        assert format_inline_text("Use `<h1>` here\nthen stop") == "Use <code>&lt;h1&gt;</code> here<br>then stop"

    def test_row_completed(self, markup_exercise):
        html = render_exercise_row(2, markup_exercise, completed=True)
        assert "exercise-row completed" in html
        assert "Exercise 3" in html
        assert "✓" in html
        assert "Level 1" in html

    def test_row_open(self, markup_exercise):
        html = render_exercise_row(0, markup_exercise, completed=False, label="Custom")
        assert "completed" not in html
        assert "Custom" in html

    def test_instructions_escaped(self):
        exercise = Exercise(level=1, kind="markup", instructions="Write <script>")
        assert "&lt;script&gt;" in render_instructions(exercise)

    def test_hint(self, markup_exercise):
        assert "No hint" in render_hint(markup_exercise)
        with_hint = Exercise(level=1, kind="markup", instructions="x", hint_text="Try `<p>`")
        assert "<code>&lt;p&gt;</code>" in render_hint(with_hint)

    def test_feedback(self):
        assert "feedback-success" in render_feedback(Feedback(True, "Nailed it!"))
        failure = render_feedback(Feedback(False, "Your code is missing: <h1>"))
        assert "feedback-failure" in failure
        assert "missing: &lt;h1&gt;" in failure

    def test_answer(self, markup_exercise):
        assert "&lt;h1&gt;Hello World&lt;/h1&gt;" in render_answer(markup_exercise)
        assert "No reference answer" in render_answer(Exercise(level=1, kind="markup", instructions="x"))

    def test_progress_summary(self):
        summary = {
            "total": 4, "completed": 1, "remaining": 3, "completion_percent": 25.0,
            "by_level": {1: {"total": 2, "completed": 1}, 2: {"total": 2, "completed": 0}},
        }
        html = render_progress_summary(summary)
        assert "1 of 4 complete (25.0%)" in html
        assert "L1: 1/2" in html

    def test_editor_languages(self):
        assert set(EDITOR_LANGUAGES) == set(ExerciseKind)


class TestPreviewPage:
    """Test page composition for the preview iframe."""

    def test_fragment_inserted_unparsed(self):
        fragment = PreviewFragment(kind=ExerciseKind.MARKUP, markup="<h1>Hi<p>unclosed")
        page = build_preview_page(fragment)
        assert '<main id="pagelab-mount"><h1>Hi<p>unclosed</main>' in page
        assert page.startswith("<!DOCTYPE html>")
        assert ".pagelab-console" in page

    def test_stylesheet_included(self):
        fragment = PreviewFragment(kind=ExerciseKind.STYLESHEET, markup="<p>x</p>", stylesheet="p{color:red}")
        assert "<style>p{color:red}</style><p>x</p>" in build_preview_page(fragment)

    def test_height_bounds(self):
        small = PreviewFragment(kind=ExerciseKind.MARKUP, markup="x")
        large = PreviewFragment(kind=ExerciseKind.MARKUP, markup="<p>x</p>\n" * 200)
        assert estimate_preview_height(small) == 160
        assert estimate_preview_height(large) == 640
