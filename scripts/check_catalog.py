#!/usr/bin/env python3
"""
check_catalog.py - Sanity-check the exercise catalog.

For every exercise:
- the reference answer must pass the exercise's own rules
- script and domScript reference answers must run without a fault
- exercises without any rule are reported (they accept every submission)

Usage:
  python scripts/check_catalog.py
  python scripts/check_catalog.py --catalog pagelab/catalog --set dom
"""

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pagelab.classroom import CatalogError, CatalogLoader, verify
from pagelab.config import get_settings
from pagelab.sandbox import PreviewRenderer
from pagelab.schemas import CatalogSet

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def check_set(catalog_set: CatalogSet, renderer: PreviewRenderer) -> list[str]:
    """Return a list of problems found in one set."""
    problems = []
    for index, exercise in enumerate(catalog_set.exercises):
        label = f"{catalog_set.key} #{index + 1} ({exercise.display_title})"

        if not exercise.has_rules:
            logger.warning(f"{label}: no verification rules, every submission passes")

        if not exercise.reference_answer:
            logger.warning(f"{label}: no reference answer")
            continue

        verdict = verify(exercise, exercise.reference_answer)
        if not verdict.passed:
            problems.append(f"{label}: reference answer fails its rules ({verdict.message})")

        if exercise.kind.runs_code:
            fragment = renderer.render(exercise, exercise.reference_answer)
            if fragment.failed:
                problems.append(f"{label}: reference answer raised: {fragment.error}")
    return problems


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Check that every reference answer passes and runs",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=settings.catalog_dir,
        help="Path to catalog directory"
    )
    parser.add_argument(
        "--set",
        dest="set_key",
        default=None,
        help="Only check one set key"
    )

    args = parser.parse_args()

    try:
        loader = CatalogLoader(args.catalog)
        sets = [loader.load_set(args.set_key)] if args.set_key else loader.load_all()
    except (FileNotFoundError, KeyError, CatalogError) as e:
        logger.error(f"Could not load catalog: {e}")
        sys.exit(1)

    renderer = PreviewRenderer(
        time_limit=settings.exec_time_limit,
        memory_limit=settings.exec_memory_limit,
    )

    problems = []
    for catalog_set in sets:
        logger.info(f"Checking '{catalog_set.key}' ({catalog_set.count} exercises)...")
        problems.extend(check_set(catalog_set, renderer))

    for problem in problems:
        logger.error(problem)

    total = sum(catalog_set.count for catalog_set in sets)
    if problems:
        logger.error(f"{len(problems)} problem(s) in {total} exercises")
        sys.exit(1)
    logger.info(f"All {total} exercises OK")


if __name__ == "__main__":
    main()
