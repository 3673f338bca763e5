"""Roster ingestion, league schema and universe persistence."""

from __future__ import annotations

from cbb_sim.ingest.connectors import (
    Connector,
    ConnectorError,
    CsvRosterConnector,
    DataFormatError,
    NetworkError,
    WikipediaConnector,
    write_roster_csv,
)
from cbb_sim.ingest.repository import ParquetUniverseRepository, UniverseRepository
from cbb_sim.ingest.schema import Game, RosterEntry, Team

__all__ = [
    "Connector",
    "ConnectorError",
    "CsvRosterConnector",
    "DataFormatError",
    "Game",
    "NetworkError",
    "ParquetUniverseRepository",
    "RosterEntry",
    "Team",
    "UniverseRepository",
    "WikipediaConnector",
    "write_roster_csv",
]
