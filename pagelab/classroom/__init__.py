"""
PageLab Classroom - Runtime components for running exercise sessions.

This module provides:
- CatalogLoader: Load catalog sets from YAML
- verify: Check submissions against exercise rules
- build_feedback: Learner-facing messages for verdicts
- ProgressStore: Persist completed exercise indices
- ExerciseSession: Listing/detail state machine
"""

from .loader import (
    CatalogLoader,
    CatalogError,
    DEFAULT_CATALOG_DIR,
    parse_catalog_set,
)

from .validators import (
    register,
    get_validator,
    available_validators,
)

from .verifier import (
    Verdict,
    verify,
    normalize_source,
    RULE_REQUIRED,
    RULE_FORBIDDEN,
    RULE_CUSTOM,
)

from .feedback import (
    Feedback,
    build_feedback,
    describe_failure,
    SUCCESS_MESSAGES,
    ENCOURAGEMENT_MESSAGES,
)

from .progress import (
    ProgressStore,
    DEFAULT_PROGRESS_DIR,
    DEFAULT_PROGRESS_DB,
    get_completion_stats,
)

from .session import (
    ExerciseSession,
    EditorState,
    ViewMode,
    ALL_LEVELS,
    LEVEL_CHOICES,
)

__all__ = [
    # Loader
    "CatalogLoader",
    "CatalogError",
    "DEFAULT_CATALOG_DIR",
    "parse_catalog_set",
    # Validators
    "register",
    "get_validator",
    "available_validators",
    # Verifier
    "Verdict",
    "verify",
    "normalize_source",
    "RULE_REQUIRED",
    "RULE_FORBIDDEN",
    "RULE_CUSTOM",
    # Feedback
    "Feedback",
    "build_feedback",
    "describe_failure",
    "SUCCESS_MESSAGES",
    "ENCOURAGEMENT_MESSAGES",
    # Progress
    "ProgressStore",
    "DEFAULT_PROGRESS_DIR",
    "DEFAULT_PROGRESS_DB",
    "get_completion_stats",
    # Session
    "ExerciseSession",
    "EditorState",
    "ViewMode",
    "ALL_LEVELS",
    "LEVEL_CHOICES",
]
