"""DataFrame validation helpers backed by Pandera.

Used wherever a roster or standings table crosses a boundary: roster CSVs
and scraped tables on the way in, standings and ranking frames on the way
out.  Every helper delegates to Pandera and propagates
``pandera.errors.SchemaError`` on failure.

Usage:
    >>> import pandas as pd
    >>> from cbb_sim.utils.assertions import assert_columns, assert_unique
    >>> df = pd.DataFrame({"team_id": [0, 1], "rating": [70, 85]})
    >>> assert_columns(df, ["team_id", "rating"])
    >>> assert_unique(df, "team_id")
"""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd  # type: ignore[import-untyped]
import pandera.pandas as pa


def assert_columns(df: pd.DataFrame, required: Sequence[str]) -> None:
    """Validate that all required columns exist in the DataFrame.

    Args:
        df: DataFrame to check.
        required: Column names that must be present.

    Raises:
        pa.errors.SchemaError: If any required columns are missing.
    """
    if not required:
        return
    pa.DataFrameSchema(
        {col: pa.Column() for col in required},
        strict=False,
    ).validate(df)


def assert_no_nulls(
    df: pd.DataFrame,
    columns: Sequence[str] | None = None,
) -> None:
    """Validate no null values in specified or all columns.

    Args:
        df: DataFrame to check.
        columns: Specific columns to check.  ``None`` checks all columns.

    Raises:
        pa.errors.SchemaError: If null values are found, or a specified
            column is not present.
    """
    cols = list(df.columns) if columns is None else list(columns)
    if not cols:
        return
    pa.DataFrameSchema(
        {col: pa.Column(nullable=False) for col in cols},
        strict=False,
    ).validate(df)


def assert_unique(df: pd.DataFrame, column: str) -> None:
    """Validate that *column* holds no duplicate values (e.g. team ids).

    Raises:
        pa.errors.SchemaError: If duplicates exist or the column is absent.
    """
    pa.DataFrameSchema(
        {column: pa.Column(unique=True)},
        strict=False,
    ).validate(df)


def assert_value_range(
    df: pd.DataFrame,
    column: str,
    *,
    min_val: float | None = None,
    max_val: float | None = None,
) -> None:
    """Validate that column values fall within the given bounds.

    Args:
        df: DataFrame to check.
        column: Column whose values to validate.
        min_val: Minimum allowed value (inclusive).  ``None`` to skip.
        max_val: Maximum allowed value (inclusive).  ``None`` to skip.

    Raises:
        pa.errors.SchemaError: If any values fall outside the specified range,
            or the column is not present.

    Example:
        >>> import pandas as pd
        >>> from cbb_sim.utils.assertions import assert_value_range
        >>> df = pd.DataFrame({"rating": [30, 74, 95]})
        >>> assert_value_range(df, "rating", min_val=30, max_val=95)
    """
    checks: list[pa.Check] = []
    if min_val is not None:
        checks.append(pa.Check.ge(min_val))
    if max_val is not None:
        checks.append(pa.Check.le(max_val))
    pa.DataFrameSchema(
        {column: pa.Column(checks=checks or None)},
        strict=False,
    ).validate(df)
