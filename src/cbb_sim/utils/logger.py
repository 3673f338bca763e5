"""Structured logging with configurable verbosity levels.

Every simulation phase (scheduling, season play, tournaments, bracket
advancement) reports through loggers in the ``cbb_sim`` hierarchy.  Four
project verbosity levels map onto Python log levels:

    ========  ==============  =====
    Project   Python level    Value
    ========  ==============  =====
    QUIET     WARNING          30
    NORMAL    INFO             20
    VERBOSE   VERBOSE (custom) 15
    DEBUG     DEBUG            10
    ========  ==============  =====

Usage:
    Configure once when the CLI starts, then obtain named loggers anywhere::

        >>> from cbb_sim.utils.logger import configure_logging, get_logger
        >>> configure_logging("VERBOSE")
        >>> log = get_logger("sim.schedule")
        >>> log.info("Scheduling season...")

    The verbosity can also be set through the ``CBB_SIM_LOG_LEVEL``
    environment variable (case-insensitive).  An explicit ``level`` argument
    wins over the environment variable, which wins over ``NORMAL``.
"""

from __future__ import annotations

import logging
import os
import sys

# ---------------------------------------------------------------------------
# Custom VERBOSE level (between INFO=20 and DEBUG=10)
# ---------------------------------------------------------------------------

VERBOSE: int = 15
"""Per-game detail: individual results, pairings, rejected draws."""

logging.addLevelName(VERBOSE, "VERBOSE")

QUIET: int = logging.WARNING
"""Only precondition warnings and errors."""

NORMAL: int = logging.INFO
"""One summary line per simulation phase (the default)."""

DEBUG: int = logging.DEBUG
"""Full diagnostic output."""

_LEVEL_MAP: dict[str, int] = {
    "QUIET": QUIET,
    "NORMAL": NORMAL,
    "VERBOSE": VERBOSE,
    "DEBUG": DEBUG,
}

_ROOT_LOGGER_NAME: str = "cbb_sim"
_ENV_VAR: str = "CBB_SIM_LOG_LEVEL"
_LOG_FORMAT: str = "%(asctime)s | %(name)s | %(levelname)-8s | %(message)s"


def resolve_level(level: str | None = None) -> int:
    """Translate a project level name into a numeric Python log level.

    Args:
        level: ``"QUIET"``, ``"NORMAL"``, ``"VERBOSE"`` or ``"DEBUG"``
            (case-insensitive).  ``None`` falls through to the
            ``CBB_SIM_LOG_LEVEL`` environment variable, then ``"NORMAL"``.

    Raises:
        ValueError: If the resolved level name is not recognised.
    """
    resolved: str = level if level is not None else os.environ.get(_ENV_VAR, "NORMAL")
    resolved_upper = resolved.upper()
    if resolved_upper not in _LEVEL_MAP:
        msg = f"Unknown log level {resolved!r}. Valid levels: {', '.join(sorted(_LEVEL_MAP))}"
        raise ValueError(msg)
    return _LEVEL_MAP[resolved_upper]


def configure_logging(level: str | None = None) -> None:
    """Configure the ``cbb_sim`` logger hierarchy.

    Installs a single stderr handler on the ``cbb_sim`` root logger.
    Calling it again replaces the handler instead of stacking another one.

    Args:
        level: Project level name; see :func:`resolve_level`.

    Raises:
        ValueError: If the resolved level name is not recognised.
    """
    numeric_level = resolve_level(level)

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(numeric_level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)

    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``cbb_sim`` hierarchy.

    Args:
        name: Dot-separated suffix, e.g. ``"sim.bracket"`` yields
            ``cbb_sim.sim.bracket``.
    """
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
