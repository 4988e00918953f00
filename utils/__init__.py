"""
Small helpers shared by the server modules.

All utilities are stateless and lightweight with minimal dependencies.
"""

import logging
import re
import sys

__all__ = [
    "clean_domain",
    "configure_logging",
    "LOG_FORMAT",
]

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_SCHEME_PREFIX = re.compile(r"^https?://", re.IGNORECASE)


def clean_domain(raw: str) -> str:
    """Reduce user input like ``https://wikipedia.org/wiki/Foo`` to ``wikipedia.org``."""
    without_scheme = _SCHEME_PREFIX.sub("", raw.strip())
    return without_scheme.split("/")[0].strip()


def configure_logging(level: str = "WARNING") -> None:
    """Send log records to stderr; stdout carries the MCP stdio stream."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
