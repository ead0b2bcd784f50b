"""
Verifier - Decide whether submitted source satisfies an exercise's rules.

Checks run in order and stop at the first failure:
1. required substrings (case-insensitive, against normalized text)
2. forbidden substrings (same matching)
3. custom validator (against the original text)

An exercise without any rule always passes.
"""

import re
from dataclasses import dataclass
from typing import Optional

from pagelab.schemas import Exercise


RULE_REQUIRED = "required"
RULE_FORBIDDEN = "forbidden"
RULE_CUSTOM = "custom"

_WHITESPACE_RUN = re.compile(r"\s+")
_SPACE_AFTER_TAG = re.compile(r">\s+")
_SPACE_BEFORE_TAG = re.compile(r"\s+<")


@dataclass(frozen=True)
class Verdict:
    """Result of one verification. ``rule`` names the failing check."""
    passed: bool
    message: str = ""
    rule: Optional[str] = None


def normalize_source(text: str) -> str:
    """Lowercase, collapse whitespace and drop whitespace around tag boundaries."""
    normalized = _WHITESPACE_RUN.sub(" ", text.lower())
    normalized = _SPACE_AFTER_TAG.sub(">", normalized)
    normalized = _SPACE_BEFORE_TAG.sub("<", normalized)
    return normalized.strip()


def verify(exercise: Exercise, source: str) -> Verdict:
    """Verify ``source`` against ``exercise``. Has no side effects."""
    normalized = normalize_source(source)

    if exercise.required_substrings is not None:
        for entry in exercise.required_substrings:
            if entry.lower() not in normalized:
                return Verdict(False, f"contains-missing: {entry}", RULE_REQUIRED)

    if exercise.forbidden_substrings is not None:
        for entry in exercise.forbidden_substrings:
            if entry.lower() in normalized:
                return Verdict(False, f"contains-forbidden: {entry}", RULE_FORBIDDEN)

    if exercise.custom_validator is not None:
        result = exercise.custom_validator(source)
        if not result.valid:
            return Verdict(False, result.message, RULE_CUSTOM)

    return Verdict(True)
