"""
Exercise catalog schemas for PageLab.

Defines Pydantic models for:
- Exercise kinds and verification rules
- Catalog sets (ordered, keyed groups of exercises)
- Custom validator results
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ExerciseKind(str, Enum):
    """Execution and preview strategy for an exercise."""
    MARKUP = "markup"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"
    DOM_SCRIPT = "domScript"

    @property
    def runs_code(self) -> bool:
        return self in (ExerciseKind.SCRIPT, ExerciseKind.DOM_SCRIPT)


@dataclass(frozen=True)
class ValidatorResult:
    """Outcome of a custom validator."""
    valid: bool
    message: str = ""


ValidatorFn = Callable[[str], ValidatorResult]


class Exercise(BaseModel):
    """
    One exercise: instructions, starter code and verification rules.

    Identity is the position inside the owning CatalogSet, not a field.
    """
    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1, le=6)
    kind: ExerciseKind
    title: str = ""
    instructions: str
    hint_text: str = ""
    starter_source: str = ""
    placeholder_text: str = ""
    reference_answer: str = ""

    # Fixture markup/styles injected around learner code
    preview_markup: Optional[str] = None
    preview_stylesheet: Optional[str] = None
    setup_source: Optional[str] = None

    # Verification rules
    required_substrings: Optional[tuple[str, ...]] = None
    forbidden_substrings: Optional[tuple[str, ...]] = None
    validator: Optional[str] = None
    custom_validator: Optional[ValidatorFn] = Field(default=None, exclude=True, repr=False)

    @model_validator(mode="after")
    def check_setup_source(self) -> "Exercise":
        if self.setup_source is not None and self.kind != ExerciseKind.SCRIPT:
            raise ValueError(
                f"setup_source is only supported for '{ExerciseKind.SCRIPT.value}' exercises"
            )
        return self

    @property
    def has_rules(self) -> bool:
        """True when at least one verification rule is defined."""
        return bool(
            self.required_substrings is not None
            or self.forbidden_substrings is not None
            or self.custom_validator is not None
        )

    @property
    def display_title(self) -> str:
        """Short label for list rows; falls back to the first instruction line."""
        if self.title:
            return self.title
        first_line = self.instructions.strip().splitlines()[0] if self.instructions.strip() else ""
        return first_line[:60] + "..." if len(first_line) > 60 else first_line


class CatalogSet(BaseModel):
    """Named, ordered group of exercises sharing one progress key."""
    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    title: str
    description: str = ""
    position: int = 0
    exercises: tuple[Exercise, ...] = ()

    @property
    def count(self) -> int:
        return len(self.exercises)

    def get(self, index: int) -> Optional[Exercise]:
        """Exercise at catalog position, or None when out of range."""
        if 0 <= index < len(self.exercises):
            return self.exercises[index]
        return None

    def levels(self) -> list[int]:
        """Sorted distinct levels present in this set."""
        return sorted({exercise.level for exercise in self.exercises})
