"""
Catalog loader tests, including the bundled catalog.
"""

import textwrap

import pytest

from pagelab.classroom import CatalogError, CatalogLoader, DEFAULT_CATALOG_DIR, verify
from pagelab.schemas import ExerciseKind


def write_set(directory, name, body):
    path = directory / name
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


class TestCatalogLoader:
    """Test loading YAML catalog files."""

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CatalogLoader(tmp_path / "nope")

    def test_load_and_order(self, tmp_path):
        write_set(tmp_path, "b.yaml", """
            key: second
            title: Second
            position: 2
            exercises:
              - level: 1
                kind: markup
                instructions: Write a paragraph.
                required_substrings: ["<p>"]
        """)
        write_set(tmp_path, "a.yaml", """
            key: first
            title: First
            position: 1
            exercises: []
        """)
        loader = CatalogLoader(tmp_path)
        assert loader.get_set_keys() == ["first", "second"]
        second = loader.load_set("second")
        assert second.count == 1
        assert second.exercises[0].required_substrings == ("<p>",)

    def test_key_defaults_to_file_stem(self, tmp_path):
        write_set(tmp_path, "forms.yaml", """
            title: Forms
            exercises: []
        """)
        assert CatalogLoader(tmp_path).get_set_keys() == ["forms"]

    def test_unknown_set(self, tmp_path):
        with pytest.raises(KeyError):
            CatalogLoader(tmp_path).load_set("html")

    def test_validator_resolved(self, tmp_path):
        write_set(tmp_path, "js.yaml", """
            key: js
            title: JS
            exercises:
              - level: 1
                kind: script
                instructions: Use an arrow function.
                validator: uses_arrow_function
        """)
        exercise = CatalogLoader(tmp_path).load_set("js").exercises[0]
        assert exercise.custom_validator is not None
        assert not verify(exercise, "function f() {}").passed
        assert verify(exercise, "const f = () => 1;").passed

    def test_unknown_validator(self, tmp_path):
        write_set(tmp_path, "js.yaml", """
            key: js
            title: JS
            exercises:
              - level: 1
                kind: script
                instructions: x
                validator: does_not_exist
        """)
        with pytest.raises(CatalogError, match="does_not_exist"):
            CatalogLoader(tmp_path).load_all()

    def test_invalid_exercise(self, tmp_path):
        write_set(tmp_path, "bad.yaml", """
            key: bad
            title: Bad
            exercises:
              - level: 9
                kind: markup
                instructions: x
        """)
        with pytest.raises(CatalogError, match="exercise 1"):
            CatalogLoader(tmp_path).load_all()

    def test_invalid_yaml(self, tmp_path):
        write_set(tmp_path, "broken.yaml", "key: [unclosed\n")
        with pytest.raises(CatalogError):
            CatalogLoader(tmp_path).load_all()

    def test_duplicate_keys(self, tmp_path):
        write_set(tmp_path, "a.yaml", "key: same\ntitle: A\n")
        write_set(tmp_path, "b.yaml", "key: same\ntitle: B\n")
        with pytest.raises(CatalogError, match="Duplicate"):
            CatalogLoader(tmp_path).load_all()

    def test_top_level_must_be_mapping(self, tmp_path):
        write_set(tmp_path, "list.yaml", "- a\n- b\n")
        with pytest.raises(CatalogError):
            CatalogLoader(tmp_path).load_all()


class TestBundledCatalog:
    """The shipped catalog loads and its reference answers pass."""

    @pytest.fixture(scope="class")
    def loader(self):
        return CatalogLoader(DEFAULT_CATALOG_DIR)

    def test_sets(self, loader):
        assert loader.get_set_keys() == ["html", "css", "javascript", "dom"]

    def test_every_kind_present(self, loader):
        kinds = {exercise.kind for catalog_set in loader.load_all() for exercise in catalog_set.exercises}
        assert kinds == set(ExerciseKind)

    def test_reference_answers_pass(self, loader):
        for catalog_set in loader.load_all():
            for index, exercise in enumerate(catalog_set.exercises):
                verdict = verify(exercise, exercise.reference_answer)
                assert verdict.passed, f"{catalog_set.key} #{index + 1}: {verdict.message}"

    def test_forbidden_entries_fail(self, loader):
        for catalog_set in loader.load_all():
            for exercise in catalog_set.exercises:
                for entry in exercise.forbidden_substrings or ():
                    submission = f"{entry}\n{exercise.reference_answer}"
                    verdict = verify(exercise, submission)
                    assert not verdict.passed
                    assert entry in verdict.message
