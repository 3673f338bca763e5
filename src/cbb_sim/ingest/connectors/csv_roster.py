"""CSV roster connector.

Reads a team list with the columns ``School,Nickname,Conference,Rating``
(``Nickname`` and ``Rating`` optional).  Team ids are the zero-based data
row positions, so ids stay stable when a malformed row is dropped.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

import pandas as pd  # type: ignore[import-untyped]
from pandera.errors import SchemaError

from cbb_sim.ingest.connectors.base import Connector, ConnectorError, DataFormatError
from cbb_sim.ingest.schema import RosterEntry, Team, clamp_rating
from cbb_sim.utils.assertions import assert_columns

logger = logging.getLogger(__name__)

ROSTER_COLUMNS: tuple[str, ...] = ("School", "Nickname", "Conference", "Rating")
_REQUIRED_COLUMNS: tuple[str, ...] = ("School", "Conference")

#: Rating given to rows whose rating is blank, zero or not a number.
DEFAULT_RATING: float = 50.0


class CsvRosterConnector(Connector):
    """Connector for a local roster CSV file.

    Args:
        path: Path to the CSV file.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    def fetch_roster(self) -> list[RosterEntry]:
        """Parse the CSV into roster entries.

        Rows without both a school and a conference are dropped.

        Raises:
            ConnectorError: If the file does not exist.
            DataFormatError: If a required column is missing.
        """
        if not self._path.exists():
            msg = f"csv: roster file not found: {self._path}"
            raise ConnectorError(msg)

        df = pd.read_csv(self._path, dtype=str, keep_default_na=False, skipinitialspace=True)
        df.columns = [str(c).strip() for c in df.columns]
        return roster_from_frame(df, source=self._path.name)


def roster_from_frame(df: pd.DataFrame, *, source: str = "frame") -> list[RosterEntry]:
    """Build roster entries from a DataFrame with roster columns.

    Raises:
        DataFormatError: If ``School`` or ``Conference`` is missing.
    """
    try:
        assert_columns(df, _REQUIRED_COLUMNS)
    except SchemaError as exc:
        missing = sorted(set(_REQUIRED_COLUMNS) - set(df.columns))
        msg = f"csv: {source} missing columns: {missing}"
        raise DataFormatError(msg) from exc

    df = df.fillna("")
    nicknames = df["Nickname"] if "Nickname" in df.columns else pd.Series("", index=df.index)
    raw_ratings = df["Rating"] if "Rating" in df.columns else pd.Series("", index=df.index)
    ratings = pd.to_numeric(raw_ratings, errors="coerce").fillna(0.0)

    entries: list[RosterEntry] = []
    for pos, (school, nickname, conference, rating) in enumerate(
        zip(df["School"], nicknames, df["Conference"], ratings)
    ):
        school = str(school).strip()
        conference = str(conference).strip()
        if not school or not conference:
            continue
        entries.append(
            RosterEntry(
                team_id=pos,
                school=school,
                nickname=str(nickname).strip(),
                conference=conference,
                rating=clamp_rating(float(rating) or DEFAULT_RATING),
            )
        )

    dropped = len(df) - len(entries)
    if dropped:
        logger.info("csv: %s: dropped %d incomplete rows", source, dropped)
    logger.info("csv: %s: loaded %d teams", source, len(entries))
    return entries


def write_roster_csv(teams: Iterable[RosterEntry | Team], path: Path) -> int:
    """Write a roster CSV readable by :class:`CsvRosterConnector`.

    Returns:
        Number of rows written.
    """
    rows = [
        {
            "School": t.school,
            "Nickname": t.nickname,
            "Conference": t.conference or "",
            "Rating": t.rating,
        }
        for t in teams
    ]
    df = pd.DataFrame(rows, columns=list(ROSTER_COLUMNS))
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, quoting=csv.QUOTE_NONNUMERIC)
    return len(df)
