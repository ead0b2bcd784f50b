"""
ExerciseSession state machine tests.
"""

import pytest

from pagelab.classroom import (
    ALL_LEVELS,
    ENCOURAGEMENT_MESSAGES,
    SUCCESS_MESSAGES,
    ExerciseSession,
    ProgressStore,
    ViewMode,
)
from pagelab.sandbox import PreviewFragment
from pagelab.schemas import CatalogSet, Exercise, ValidatorResult


class RecordingRenderer:
    """Stands in for PreviewRenderer; records each render call."""

    def __init__(self):
        self.calls = []

    def render(self, exercise, source):
        self.calls.append((exercise, source))
        return PreviewFragment(kind=exercise.kind, markup=source)


@pytest.fixture
def recorder():
    return RecordingRenderer()


@pytest.fixture
def session(catalog_set, progress_store, recorder, rng):
    return ExerciseSession(catalog_set, progress_store, recorder, rng)


class TestInitialState:
    """Test session creation."""

    def test_starts_in_listing(self, session):
        assert session.mode == ViewMode.LISTING
        assert session.active_index is None
        assert session.active_exercise is None
        assert session.filter_level == ALL_LEVELS
        assert session.completed == set()

    def test_loads_completed_from_store(self, catalog_set, progress_store, recorder):
        progress_store.save("sample", [1, 3])
        session = ExerciseSession(catalog_set, progress_store, recorder)
        assert session.completed == {1, 3}
        assert session.is_completed(3)
        assert not session.is_completed(0)


class TestNavigation:
    """Test select/back/next/previous transitions."""

    def test_select_opens_detail(self, session, recorder, catalog_set):
        assert session.select(0)
        assert session.mode == ViewMode.DETAIL
        assert session.active_exercise is catalog_set.exercises[0]
        assert session.editor.source == "<h1></h1>"
        assert recorder.calls == [(catalog_set.exercises[0], "<h1></h1>")]
        assert session.editor.preview.markup == "<h1></h1>"

    def test_select_out_of_range(self, session, recorder):
        assert not session.select(99)
        assert not session.select(-1)
        assert session.mode == ViewMode.LISTING
        assert recorder.calls == []

    def test_select_only_from_listing(self, session):
        session.select(0)
        assert not session.select(2)
        assert session.active_index == 0

    def test_back(self, session):
        session.select(1)
        session.toggle_hint()
        assert session.back()
        assert session.mode == ViewMode.LISTING
        assert session.editor.source == ""
        assert not session.editor.hint_visible
        assert not session.back()

    def test_next_and_previous(self, session, catalog_set):
        session.select(3)
        assert session.next()
        assert session.active_index == 4
        assert not session.next()
        assert session.active_index == 4
        assert session.previous()
        assert session.active_index == 3

    def test_previous_at_start(self, session):
        session.select(0)
        assert not session.previous()
        assert session.active_index == 0

    def test_next_in_listing_is_noop(self, session):
        assert not session.next()
        assert not session.previous()
        assert session.mode == ViewMode.LISTING

    def test_navigation_resets_transient_state(self, session):
        session.select(0)
        session.update_source("<h1>edited</h1>")
        session.toggle_hint()
        session.reveal_answer()
        session.submit()
        session.next()
        assert session.editor.feedback is None
        assert not session.editor.hint_visible
        assert not session.editor.answer_revealed
        assert session.editor.source == "p {}"


class TestFiltering:
    """Test level filter."""

    def test_all(self, session):
        assert [index for index, _ in session.visible_exercises()] == [0, 1, 2, 3, 4]

    def test_by_level_keeps_catalog_indices(self, session):
        assert session.set_filter(2)
        assert [index for index, _ in session.visible_exercises()] == [2, 3]
        assert session.exercise_label(2) == "Exercise 3"

    def test_empty_level(self, session):
        assert session.set_filter(6)
        assert session.visible_exercises() == []

    def test_invalid_level(self, session):
        assert not session.set_filter(9)
        assert not session.set_filter("two")
        assert session.filter_level == ALL_LEVELS

    def test_filter_does_not_touch_completion(self, session):
        session.select(2)
        session.update_source("console.log(value);")
        session.submit()
        session.back()
        before = set(session.completed)
        session.set_filter(2)
        assert session.completed == before
        assert session.is_completed(2)
        session.set_filter(ALL_LEVELS)
        assert session.is_completed(2)

    def test_filter_only_in_listing(self, session):
        session.select(0)
        assert not session.set_filter(1)


class TestSubmit:
    """Test submission and completion tracking."""

    def test_success_marks_completed_and_saves(self, session, progress_store):
        session.select(0)
        session.update_source("<h1>Hello World</h1>")
        assert session.submit()
        assert session.editor.feedback.passed
        assert session.editor.feedback.message in SUCCESS_MESSAGES
        assert session.completed == {0}
        assert progress_store.load("sample") == {0}

    def test_failure_does_not_complete(self, session, progress_store):
        session.select(0)
        session.update_source("<h1>Hi</h1>")
        session.submit()
        feedback = session.editor.feedback
        assert not feedback.passed
        assert feedback.message == "Your code is missing: hello world"
        assert session.completed == set()
        assert progress_store.load("sample") == set()

    def test_completion_is_idempotent(self, session, progress_store):
        session.select(0)
        session.update_source("<h1>Hello World</h1>")
        session.submit()
        session.submit()
        assert session.completed == {0}
        assert progress_store.get_record("sample").completed == [0]

    def test_custom_validator_message(self, session):
        session.select(3)
        session.update_source("for (const n of [1, 2]) {}")
        session.submit()
        assert session.editor.feedback.message == "Solve it without a loop."

    def test_no_rules_always_passes(self, session):
        session.select(4)
        session.update_source("")
        session.submit()
        assert session.editor.feedback.passed
        assert session.is_completed(4)

    def test_submit_in_listing(self, session):
        assert not session.submit()

    def test_generic_encouragement(self, catalog_set, progress_store, recorder, rng):
        silent = Exercise(
            level=1, kind="markup", instructions="x",
            custom_validator=lambda source: ValidatorResult(False),
        )
        session = ExerciseSession(CatalogSet(key="silent", title="S", exercises=(silent,)), progress_store, recorder, rng)
        session.select(0)
        session.submit()
        assert session.editor.feedback.message in ENCOURAGEMENT_MESSAGES


class TestEditor:
    """Test editor transitions."""

    def test_update_source_rerenders(self, session, recorder):
        session.select(0)
        assert session.update_source("<h1>a</h1>")
        assert session.update_source("<h1>ab</h1>")
        assert [source for _, source in recorder.calls] == ["<h1></h1>", "<h1>a</h1>", "<h1>ab</h1>"]
        assert session.editor.preview.markup == "<h1>ab</h1>"

    def test_update_source_in_listing(self, session, recorder):
        assert not session.update_source("x")
        assert recorder.calls == []

    def test_reset_editor(self, session, recorder):
        session.select(0)
        session.update_source("<h1>changed</h1>")
        session.submit()
        session.reveal_answer()
        session.toggle_hint()
        assert session.reset_editor()
        assert session.editor.source == "<h1></h1>"
        assert session.editor.feedback is None
        assert not session.editor.answer_revealed
        assert session.editor.hint_visible
        assert recorder.calls[-1][1] == "<h1></h1>"

    def test_reset_editor_in_listing(self, session):
        assert not session.reset_editor()

    def test_reveal_does_not_complete(self, session):
        session.select(0)
        assert session.reveal_answer()
        assert session.editor.answer_revealed
        assert session.completed == set()

    def test_toggle_hint(self, session):
        assert not session.toggle_hint()
        session.select(0)
        assert session.toggle_hint()
        assert session.editor.hint_visible
        session.toggle_hint()
        assert not session.editor.hint_visible


class TestResetProgress:
    """Test progress reset."""

    def test_requires_confirmation(self, session, progress_store):
        progress_store.save("sample", [0])
        session.completed = {0}
        assert not session.reset_progress()
        assert session.completed == {0}

    def test_clears_and_deletes(self, catalog_set, progress_store, recorder):
        progress_store.save("sample", [0, 2])
        session = ExerciseSession(catalog_set, progress_store, recorder)
        assert session.reset_progress(confirmed=True)
        assert session.completed == set()
        assert progress_store.get_record("sample") is None
        assert ExerciseSession(catalog_set, progress_store, recorder).completed == set()

    def test_only_in_listing(self, session):
        session.select(0)
        assert not session.reset_progress(confirmed=True)


class TestProgressSummary:
    """Test aggregate counts."""

    def test_summary(self, catalog_set, progress_store, recorder):
        progress_store.save("sample", [0, 2, 3, 42])
        summary = ExerciseSession(catalog_set, progress_store, recorder).progress_summary()
        assert summary["total"] == 5
        assert summary["completed"] == 3
        assert summary["by_level"] == {
            1: {"total": 2, "completed": 1},
            2: {"total": 2, "completed": 2},
            3: {"total": 1, "completed": 0},
        }


class TestStorageFailure:
    """Sessions keep working when storage is unusable."""

    def test_unavailable_store(self, catalog_set, tmp_path, recorder):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        session = ExerciseSession(catalog_set, ProgressStore(blocker / "progress.db"), recorder)
        session.select(0)
        session.update_source("<h1>Hello World</h1>")
        session.submit()
        assert session.is_completed(0)
