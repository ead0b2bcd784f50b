"""
Runtime settings for PageLab.

Values come from environment variables, optionally provided by a ``.env``
file in the project root:

    PAGELAB_PROGRESS_DB        path to the progress database
    PAGELAB_CATALOG_DIR        directory of catalog YAML files
    PAGELAB_EXEC_TIME_LIMIT    seconds a preview may run (default 1.0)
    PAGELAB_EXEC_MEMORY_LIMIT  bytes a preview may allocate (default 32 MiB)
    PAGELAB_LOG_LEVEL          logging level name (default INFO)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, TypeVar

from dotenv import load_dotenv

from pagelab.classroom import DEFAULT_CATALOG_DIR, DEFAULT_PROGRESS_DB
from pagelab.sandbox import DEFAULT_MEMORY_LIMIT, DEFAULT_TIME_LIMIT


logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

T = TypeVar("T")


@dataclass(frozen=True)
class Settings:
    progress_db: Path = DEFAULT_PROGRESS_DB
    catalog_dir: Path = DEFAULT_CATALOG_DIR
    exec_time_limit: float = DEFAULT_TIME_LIMIT
    exec_memory_limit: int = DEFAULT_MEMORY_LIMIT
    log_level: str = "INFO"


def _read_number(env: Mapping[str, str], name: str, cast: Callable[[str], T], default: T) -> T:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using default {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive, using default {default}")
        return default
    return value


def get_settings(env: Optional[Mapping[str, str]] = None, dotenv_path: Optional[Path] = None) -> Settings:
    """
    Build settings from the environment.

    Args:
        env: Mapping to read instead of ``os.environ`` (no .env loading)
        dotenv_path: .env file to load; defaults to the project root

    Returns:
        Settings with defaults for anything unset or invalid
    """
    if env is None:
        load_dotenv(dotenv_path or PROJECT_ROOT / ".env")
        env = os.environ

    progress_db = env.get("PAGELAB_PROGRESS_DB")
    catalog_dir = env.get("PAGELAB_CATALOG_DIR")
    return Settings(
        progress_db=Path(progress_db).expanduser() if progress_db else DEFAULT_PROGRESS_DB,
        catalog_dir=Path(catalog_dir).expanduser() if catalog_dir else DEFAULT_CATALOG_DIR,
        exec_time_limit=_read_number(env, "PAGELAB_EXEC_TIME_LIMIT", float, DEFAULT_TIME_LIMIT),
        exec_memory_limit=_read_number(env, "PAGELAB_EXEC_MEMORY_LIMIT", int, DEFAULT_MEMORY_LIMIT),
        log_level=(env.get("PAGELAB_LOG_LEVEL") or "INFO").upper(),
    )
