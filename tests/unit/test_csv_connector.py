"""Unit tests for the CSV roster connector."""

from __future__ import annotations

from pathlib import Path

import pandas as pd  # type: ignore[import-untyped]
import pytest

from cbb_sim.ingest.connectors import (
    ConnectorError,
    CsvRosterConnector,
    DataFormatError,
    roster_from_frame,
    write_roster_csv,
)
from cbb_sim.ingest.schema import Team


def _write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


class TestCsvRosterConnector:
    @pytest.mark.smoke
    def test_bundled_roster(self, roster_csv: Path) -> None:
        entries = CsvRosterConnector(roster_csv).fetch_roster()
        assert len(entries) == 40
        assert entries[0].school == "Connecticut"
        assert entries[0].nickname == "Huskies"
        assert entries[0].conference == "Big East"
        assert entries[0].rating == 91.0
        assert [e.team_id for e in entries] == list(range(40))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConnectorError, match="not found"):
            CsvRosterConnector(tmp_path / "nope.csv").fetch_roster()

    def test_missing_conference_column(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "t.csv", "School,Rating\nDuke,90\n")
        with pytest.raises(DataFormatError, match="Conference"):
            CsvRosterConnector(path).fetch_roster()

    def test_optional_columns(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "t.csv", "School,Conference\nDuke,ACC\n")
        (entry,) = CsvRosterConnector(path).fetch_roster()
        assert entry.nickname == ""
        assert entry.rating == 50.0

    @pytest.mark.parametrize(("raw", "expected"), [("", 50.0), ("0", 50.0), ("abc", 50.0), ("120", 95.0), ("12", 30.0)])
    def test_rating_defaults_and_clamping(self, tmp_path: Path, raw: str, expected: float) -> None:
        path = _write(tmp_path / "t.csv", f"School,Nickname,Conference,Rating\nDuke,Blue Devils,ACC,{raw}\n")
        (entry,) = CsvRosterConnector(path).fetch_roster()
        assert entry.rating == expected

    def test_incomplete_rows_dropped_ids_stable(self, tmp_path: Path) -> None:
        text = "School,Nickname,Conference,Rating\nDuke,Blue Devils,ACC,90\n,Nobody,ACC,70\nYale,Bulldogs,,74\nPenn,Quakers,Ivy,66\n"
        entries = CsvRosterConnector(_write(tmp_path / "t.csv", text)).fetch_roster()
        assert [(e.team_id, e.school) for e in entries] == [(0, "Duke"), (3, "Penn")]

    def test_whitespace_stripped(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "t.csv", "School , Conference\n  Duke ,  ACC \n")
        (entry,) = CsvRosterConnector(path).fetch_roster()
        assert (entry.school, entry.conference) == ("Duke", "ACC")


class TestRosterFromFrame:
    def test_frame_input(self) -> None:
        df = pd.DataFrame({"School": ["A", "B"], "Conference": ["X", "Y"], "Rating": ["80", "70"]})
        entries = roster_from_frame(df)
        assert [e.rating for e in entries] == [80.0, 70.0]


class TestWriteRosterCsv:
    def test_round_trip(self, roster_csv: Path, tmp_path: Path) -> None:
        roster = CsvRosterConnector(roster_csv).fetch_roster()
        out = tmp_path / "nested" / "out.csv"
        assert write_roster_csv(roster, out) == 40
        assert CsvRosterConnector(out).fetch_roster() == roster

    def test_accepts_teams(self, tmp_path: Path) -> None:
        teams = [Team(team_id=0, school="St. John's", nickname="Red Storm", conference="Big East", rating=83, wins=9)]
        out = tmp_path / "teams.csv"
        write_roster_csv(teams, out)
        (entry,) = CsvRosterConnector(out).fetch_roster()
        assert entry.school == "St. John's"
        assert entry.rating == 83.0
