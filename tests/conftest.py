"""Shared fixtures for PageLab tests."""

import random

import pytest

from pagelab.classroom import ProgressStore
from pagelab.sandbox import ConsoleChannel, PreviewRenderer
from pagelab.schemas import CatalogSet, Exercise, ExerciseKind, ValidatorResult


def no_loops(source: str) -> ValidatorResult:
    if "for" in source:
        return ValidatorResult(False, "Solve it without a loop.")
    return ValidatorResult(True)


@pytest.fixture
def progress_store(tmp_path):
    return ProgressStore(tmp_path / "progress.db")


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def console():
    return ConsoleChannel()


@pytest.fixture
def renderer(console):
    return PreviewRenderer(console=console)


@pytest.fixture
def markup_exercise():
    return Exercise(
        level=1,
        kind=ExerciseKind.MARKUP,
        instructions="Write a heading that says Hello World.",
        starter_source="<h1></h1>",
        reference_answer="<h1>Hello World</h1>",
        required_substrings=("<h1>", "</h1>", "hello world"),
    )


@pytest.fixture
def catalog_set(markup_exercise):
    """Five exercises over three levels."""
    return CatalogSet(
        key="sample",
        title="Sample",
        exercises=(
            markup_exercise,
            Exercise(
                level=1,
                kind=ExerciseKind.STYLESHEET,
                instructions="Make paragraphs red.",
                preview_markup="<p>Text</p>",
                starter_source="p {}",
                reference_answer="p { color: red; }",
                required_substrings=("color: red",),
            ),
            Exercise(
                level=2,
                kind=ExerciseKind.SCRIPT,
                instructions="Log the value.",
                setup_source="const value = 7;",
                starter_source="// log it",
                reference_answer="console.log(value);",
                required_substrings=("console.log(",),
                forbidden_substrings=("alert(",),
            ),
            Exercise(
                level=2,
                kind=ExerciseKind.SCRIPT,
                instructions="Sum the array without a loop.",
                reference_answer="console.log([1, 2].reduce((a, b) => a + b));",
                custom_validator=no_loops,
            ),
            Exercise(
                level=3,
                kind=ExerciseKind.DOM_SCRIPT,
                instructions="Change the heading.",
                preview_markup='<h1 id="title">Old</h1>',
                reference_answer='document.getElementById("title").textContent = "New";',
            ),
        ),
    )
