"""PageLab utilities."""

from .log import configure_logging, LOG_FORMAT

__all__ = [
    "configure_logging",
    "LOG_FORMAT",
]
