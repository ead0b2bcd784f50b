"""
CatalogLoader - Load exercise catalog sets from YAML files.

Each ``*.yaml`` file in the catalog directory holds one set:

    key: html
    title: HTML Basics
    position: 1
    exercises:
      - level: 1
        kind: markup
        instructions: ...
        required_substrings: ["<h1>", "</h1>"]

Custom validators are referenced by name and resolved through the
validator registry.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from pagelab.schemas import CatalogSet, Exercise

from .validators import get_validator


logger = logging.getLogger(__name__)

DEFAULT_CATALOG_DIR = Path(__file__).resolve().parent.parent / "catalog"


class CatalogError(ValueError):
    """Raised when a catalog file cannot be turned into a CatalogSet."""


def _exercise_from_dict(raw: dict[str, Any], source: Path, position: int) -> Exercise:
    """Build an exercise, resolving its named validator."""
    data = dict(raw)
    validator_name = data.get("validator")
    if validator_name:
        try:
            data["custom_validator"] = get_validator(validator_name)
        except KeyError as e:
            raise CatalogError(f"{source.name}: exercise {position + 1}: {e.args[0]}") from None
    try:
        return Exercise(**data)
    except ValidationError as e:
        raise CatalogError(f"{source.name}: exercise {position + 1}: {e}") from e


def parse_catalog_set(raw: Any, source: Path) -> CatalogSet:
    """Build a CatalogSet from parsed YAML."""
    if not isinstance(raw, dict):
        raise CatalogError(f"{source.name}: expected a mapping at top level")

    raw_exercises = raw.get("exercises") or []
    if not isinstance(raw_exercises, list):
        raise CatalogError(f"{source.name}: 'exercises' must be a list")

    exercises = []
    for position, item in enumerate(raw_exercises):
        if not isinstance(item, dict):
            raise CatalogError(f"{source.name}: exercise {position + 1} must be a mapping")
        exercises.append(_exercise_from_dict(item, source, position))

    try:
        return CatalogSet(
            key=str(raw.get("key") or source.stem),
            title=str(raw.get("title") or source.stem),
            description=str(raw.get("description", "")),
            position=int(raw.get("position", 0)),
            exercises=tuple(exercises),
        )
    except (ValidationError, ValueError, TypeError) as e:
        raise CatalogError(f"{source.name}: {e}") from e


class CatalogLoader:
    """
    Load catalog sets from a directory of YAML files.

    Sets are parsed once and cached; the catalog is static for the
    lifetime of the loader.
    """

    def __init__(self, catalog_dir: Optional[str | Path] = None):
        """
        Initialize loader.

        Args:
            catalog_dir: Directory containing set files (default: bundled catalog)
        """
        self.catalog_dir = Path(catalog_dir) if catalog_dir else DEFAULT_CATALOG_DIR
        if not self.catalog_dir.is_dir():
            raise FileNotFoundError(f"Catalog directory not found: {self.catalog_dir}")
        self._sets: Optional[dict[str, CatalogSet]] = None

    def _load(self) -> dict[str, CatalogSet]:
        if self._sets is not None:
            return self._sets

        sets: dict[str, CatalogSet] = {}
        for path in sorted(self.catalog_dir.glob("*.yaml")):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    raw = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise CatalogError(f"{path.name}: invalid YAML: {e}") from e

            catalog_set = parse_catalog_set(raw, path)
            if catalog_set.key in sets:
                raise CatalogError(f"Duplicate catalog set key: {catalog_set.key} ({path.name})")
            sets[catalog_set.key] = catalog_set
            logger.debug(f"Loaded catalog set '{catalog_set.key}' with {catalog_set.count} exercises")

        ordered = sorted(sets.values(), key=lambda s: (s.position, s.key))
        self._sets = {catalog_set.key: catalog_set for catalog_set in ordered}
        logger.info(f"Loaded {len(self._sets)} catalog sets from {self.catalog_dir}")
        return self._sets

    def get_set_keys(self) -> list[str]:
        """Set keys in display order."""
        return list(self._load())

    def load_set(self, key: str) -> CatalogSet:
        """Get one set by key. Raises KeyError if unknown."""
        sets = self._load()
        if key not in sets:
            raise KeyError(f"Unknown catalog set: {key}")
        return sets[key]

    def load_all(self) -> list[CatalogSet]:
        """All sets in display order."""
        return list(self._load().values())
