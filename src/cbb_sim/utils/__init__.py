"""Shared utilities module."""

from __future__ import annotations

from cbb_sim.utils.assertions import (
    assert_columns,
    assert_no_nulls,
    assert_unique,
    assert_value_range,
)
from cbb_sim.utils.logger import (
    DEBUG,
    NORMAL,
    QUIET,
    VERBOSE,
    configure_logging,
    get_logger,
    resolve_level,
)

__all__ = [
    "DEBUG",
    "NORMAL",
    "QUIET",
    "VERBOSE",
    "assert_columns",
    "assert_no_nulls",
    "assert_unique",
    "assert_value_range",
    "configure_logging",
    "get_logger",
    "resolve_level",
]
