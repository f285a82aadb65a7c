"""Logger factory and verbosity levels."""

import logging
from enum import IntEnum

from rich.logging import RichHandler

from . import console_styles as cs

LOGGER_ROOT = "baseline_nudges"


class Verbosity(IntEnum):
    BRIEF = 0
    VERBOSE = 1
    DEBUG = 2

    @classmethod
    def from_count(cls, count: int) -> "Verbosity":
        # 0=BRIEF, 1=VERBOSE, 2+=DEBUG
        if count >= 2:
            return cls.DEBUG
        if count >= 1:
            return cls.VERBOSE
        return cls.BRIEF


_LEVELS = {
    Verbosity.BRIEF: logging.WARNING,
    Verbosity.VERBOSE: logging.INFO,
    Verbosity.DEBUG: logging.DEBUG,
}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(verbosity: Verbosity = Verbosity.BRIEF) -> logging.Logger:
    """Attach a single RichHandler to the package logger at the given verbosity."""
    root = logging.getLogger(LOGGER_ROOT)
    root.setLevel(_LEVELS[verbosity])
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    handler = RichHandler(
        console=cs.get_console(),
        show_time=verbosity >= Verbosity.DEBUG,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False
    return root
