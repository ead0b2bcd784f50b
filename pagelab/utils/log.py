"""
Logging setup shared by the app and scripts.
"""

import logging
from typing import Union


LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure the root logger once.

    Args:
        level: Logging level name ("DEBUG", "INFO", ...) or number.
            Unknown names fall back to INFO.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
