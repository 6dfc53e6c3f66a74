"""Logging for CI runs.

Levels (inclusive): ERROR, WARNING, INFO (default), DEBUG. DEBUG also dumps the
raw event payload. Set via log_level in the config file or CHALLENGE_BOT_LOG_LEVEL.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(name)s: %(message)s"


def resolve_level(level: str) -> int:
    """Map a level name to its logging constant, falling back to INFO."""
    return LEVELS.get(level.upper().strip(), logging.INFO)


def setup_logging(level: str = "INFO") -> None:
    # Actions logs are not a tty; keep lines wide enough for JSON dumps
    console = Console(stderr=True, width=160)
    logging.basicConfig(
        level=resolve_level(level),
        format=DEFAULT_FORMAT,
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )
