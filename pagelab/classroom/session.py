"""
ExerciseSession - Listing/detail state machine for one catalog set.

Provides:
- Selection and next/previous navigation between exercises
- Level filtering of the listing
- Live preview refresh on every source change
- Submission, feedback and completion tracking

Guarded transitions that do not apply in the current state are no-ops and
return False.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pagelab.sandbox import PreviewFragment, PreviewRenderer
from pagelab.schemas import CatalogSet, Exercise

from .feedback import Feedback, build_feedback
from .progress import ProgressStore, get_completion_stats
from .verifier import verify


logger = logging.getLogger(__name__)

ALL_LEVELS = "all"
LEVEL_CHOICES = (1, 2, 3, 4, 5, 6)


class ViewMode(str, Enum):
    """Which view the session is showing."""
    LISTING = "listing"
    DETAIL = "detail"


@dataclass
class EditorState:
    """Transient UI state for the active exercise."""
    source: str = ""
    preview: Optional[PreviewFragment] = None
    feedback: Optional[Feedback] = None
    hint_visible: bool = False
    answer_revealed: bool = False


class ExerciseSession:
    """
    Drive the listing and detail views of one catalog set.

    Combines the catalog set (content), ProgressStore (completed indices) and
    PreviewRenderer (live preview). Completion is keyed by the exercise's
    position in the unfiltered set.
    """

    def __init__(
        self,
        catalog_set: CatalogSet,
        store: ProgressStore,
        renderer: PreviewRenderer,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the session in the listing view.

        Args:
            catalog_set: Exercises shown by this session
            store: Persistence for completed indices
            renderer: Preview renderer used for live previews
            rng: Random source for feedback messages
        """
        self.catalog_set = catalog_set
        self.store = store
        self.renderer = renderer
        self.rng = rng
        self.active_index: Optional[int] = None
        self.filter_level: Union[str, int] = ALL_LEVELS
        self.completed: set[int] = store.load(catalog_set.key)
        self.editor = EditorState()

    @property
    def mode(self) -> ViewMode:
        return ViewMode.LISTING if self.active_index is None else ViewMode.DETAIL

    @property
    def active_exercise(self) -> Optional[Exercise]:
        if self.active_index is None:
            return None
        return self.catalog_set.get(self.active_index)

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def _open(self, index: int) -> bool:
        exercise = self.catalog_set.get(index)
        if exercise is None:
            return False
        self.active_index = index
        self.editor = EditorState(source=exercise.starter_source)
        self._refresh_preview()
        return True

    def select(self, index: int) -> bool:
        """Open exercise ``index`` from the listing."""
        if self.mode != ViewMode.LISTING:
            return False
        return self._open(index)

    def back(self) -> bool:
        """Return to the listing, discarding the exercise's transient state."""
        if self.mode != ViewMode.DETAIL:
            return False
        self.active_index = None
        self.editor = EditorState()
        return True

    def next(self) -> bool:
        if self.mode != ViewMode.DETAIL or self.active_index + 1 >= self.catalog_set.count:
            return False
        return self._open(self.active_index + 1)

    def previous(self) -> bool:
        if self.mode != ViewMode.DETAIL or self.active_index - 1 < 0:
            return False
        return self._open(self.active_index - 1)

    def set_filter(self, level: Union[str, int]) -> bool:
        """Show all exercises, or only those of one level."""
        if self.mode != ViewMode.LISTING:
            return False
        if level != ALL_LEVELS and level not in LEVEL_CHOICES:
            logger.debug(f"Ignoring invalid level filter: {level!r}")
            return False
        self.filter_level = level
        return True

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def reset_progress(self, confirmed: bool = False) -> bool:
        """Clear completed exercises; requires explicit confirmation."""
        if self.mode != ViewMode.LISTING or not confirmed:
            return False
        self.completed = set()
        self.store.delete(self.catalog_set.key)
        logger.info(f"Progress reset for '{self.catalog_set.key}'")
        return True

    def _mark_completed(self, index: int) -> None:
        self.completed.add(index)
        self.store.save(self.catalog_set.key, self.completed)

    # -------------------------------------------------------------------------
    # Editor
    # -------------------------------------------------------------------------

    def _refresh_preview(self) -> None:
        self.editor.preview = self.renderer.render(self.active_exercise, self.editor.source)

    def reset_editor(self) -> bool:
        """Reload the starter source and clear feedback and the revealed answer."""
        exercise = self.active_exercise
        if exercise is None:
            return False
        self.editor.source = exercise.starter_source
        self.editor.feedback = None
        self.editor.answer_revealed = False
        self._refresh_preview()
        return True

    def update_source(self, text: str) -> bool:
        """Store edited source and re-render the preview."""
        if self.mode != ViewMode.DETAIL:
            return False
        self.editor.source = text
        self._refresh_preview()
        return True

    def toggle_hint(self) -> bool:
        if self.mode != ViewMode.DETAIL:
            return False
        self.editor.hint_visible = not self.editor.hint_visible
        return True

    def reveal_answer(self) -> bool:
        """Show the reference answer. Never marks the exercise complete."""
        if self.mode != ViewMode.DETAIL:
            return False
        self.editor.answer_revealed = True
        return True

    def submit(self) -> bool:
        """Verify the current source and record completion on success."""
        exercise = self.active_exercise
        if exercise is None:
            return False
        verdict = verify(exercise, self.editor.source)
        self.editor.feedback = build_feedback(verdict, self.rng)
        if verdict.passed:
            self._mark_completed(self.active_index)
        return True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def visible_exercises(self) -> list[tuple[int, Exercise]]:
        """Exercises shown in the listing, paired with their catalog index."""
        return [
            (index, exercise)
            for index, exercise in enumerate(self.catalog_set.exercises)
            if self.filter_level == ALL_LEVELS or exercise.level == self.filter_level
        ]

    def is_completed(self, index: int) -> bool:
        return index in self.completed

    def exercise_label(self, index: int) -> str:
        return f"Exercise {index + 1}"

    def progress_summary(self) -> dict:
        """
        Completion counts for the set.

        Returns:
            get_completion_stats() output plus ``by_level``: level -> stats
        """
        total = self.catalog_set.count
        known = {index for index in self.completed if 0 <= index < total}
        summary = get_completion_stats(known, total)

        by_level = {}
        for level in self.catalog_set.levels():
            indices = {
                index for index, exercise in enumerate(self.catalog_set.exercises)
                if exercise.level == level
            }
            done = len(known & indices)
            by_level[level] = {"total": len(indices), "completed": done}
        summary["by_level"] = by_level
        return summary
