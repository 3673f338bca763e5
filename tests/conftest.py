"""Shared pytest fixtures for the cbb_sim test suite.

Fixtures defined here are available to all tests without explicit imports.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from cbb_sim.ingest.schema import RosterEntry
from cbb_sim.sim.universe import Universe, create_universe

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _reset_cbb_sim_logger() -> Iterator[None]:
    """Undo ``configure_logging`` (called by every CLI invocation) after each test.

    ``configure_logging`` disables propagation, which would hide records
    from ``caplog`` in later tests.
    """
    yield
    root = logging.getLogger("cbb_sim")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Provide an isolated temporary directory for a saved universe."""
    data_dir = tmp_path / "universe"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def roster_csv() -> Path:
    """Path to the bundled 40-team, five-conference example roster."""
    return FIXTURES_DIR / "teams.csv"


def make_roster(sizes: dict[str, int], *, independents: int = 0, base_rating: float = 60.0) -> list[RosterEntry]:
    """Build a synthetic roster with the given conference sizes.

    Ratings rise by one point per team so every team is distinct.
    """
    entries: list[RosterEntry] = []
    for conf, size in sizes.items():
        for i in range(size):
            team_id = len(entries)
            entries.append(
                RosterEntry(
                    team_id=team_id,
                    school=f"{conf} School {i}",
                    nickname="Team",
                    conference=conf,
                    rating=min(95.0, base_rating + team_id),
                )
            )
    for i in range(independents):
        team_id = len(entries)
        entries.append(RosterEntry(team_id=team_id, school=f"Independent {i}", rating=base_rating))
    return entries


@pytest.fixture
def roster_factory() -> Callable[..., list[RosterEntry]]:
    """Expose :func:`make_roster` to tests that need custom conference sizes."""
    return make_roster


@pytest.fixture
def small_roster() -> list[RosterEntry]:
    """24 teams: conferences of 8, 7, 6 and 1, plus two independents."""
    return make_roster({"Alpha": 8, "Beta": 7, "Gamma": 6, "Solo": 1}, independents=2)


@pytest.fixture
def small_universe(small_roster: list[RosterEntry]) -> Universe:
    return create_universe(small_roster, "fixture-seed", year=2025)
