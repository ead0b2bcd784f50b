"""
PageLab Schemas - Pydantic models for the exercise platform.

This module exports all schema classes for:
- Exercise: exercise kinds, rules, catalog sets
- Progress: persisted completion records
"""

# Exercise schemas
from .exercise import (
    ExerciseKind,
    Exercise,
    CatalogSet,
    ValidatorResult,
    ValidatorFn,
)

# Progress schemas
from .progress import (
    ProgressRecord,
)

__all__ = [
    # Exercise
    'ExerciseKind',
    'Exercise',
    'CatalogSet',
    'ValidatorResult',
    'ValidatorFn',
    # Progress
    'ProgressRecord',
]
