"""Roster source connectors."""

from __future__ import annotations

from cbb_sim.ingest.connectors.base import (
    Connector,
    ConnectorError,
    DataFormatError,
    NetworkError,
)
from cbb_sim.ingest.connectors.csv_roster import CsvRosterConnector, roster_from_frame, write_roster_csv
from cbb_sim.ingest.connectors.wikipedia import WikipediaConnector

__all__ = [
    "Connector",
    "ConnectorError",
    "CsvRosterConnector",
    "DataFormatError",
    "NetworkError",
    "WikipediaConnector",
    "roster_from_frame",
    "write_roster_csv",
]
