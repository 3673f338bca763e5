"""Repository pattern for universe persistence.

Defines an abstract ``UniverseRepository`` interface and a concrete
``ParquetUniverseRepository`` backed by Apache Parquet files plus a small
JSON metadata document.  Simulation code never touches storage; the CLI
loads a universe, runs one phase, and saves it back.

Every Team and Game field round-trips.  The random stream's position does
not: a loaded universe is reseeded from its year (see
:meth:`cbb_sim.sim.universe.Universe.restore`).
"""

from __future__ import annotations

import abc
from pathlib import Path
from typing import Any

import pyarrow as pa  # type: ignore[import-untyped]
import pyarrow.parquet as pq  # type: ignore[import-untyped]
from pydantic import BaseModel

from cbb_sim.config import LeagueConfig
from cbb_sim.ingest.schema import Game, Team
from cbb_sim.sim.universe import Bracket, BracketState, Universe

# ---------------------------------------------------------------------------
# Abstract Repository
# ---------------------------------------------------------------------------


class UniverseRepository(abc.ABC):
    """Abstract base class for universe persistence."""

    @abc.abstractmethod
    def exists(self) -> bool:
        """Return ``True`` if a saved universe is present."""

    @abc.abstractmethod
    def save(self, universe: Universe, config: LeagueConfig | None = None) -> None:
        """Persist *universe* (overwriting any previous save)."""

    @abc.abstractmethod
    def load(self) -> tuple[Universe, LeagueConfig]:
        """Load the saved universe and the configuration it was created with."""


# ---------------------------------------------------------------------------
# Metadata document
# ---------------------------------------------------------------------------

#: Bracket key used for the national bracket in ``games.parquet``.
NATIONAL_KEY: str = "__national__"
#: Bracket key for regular-season games.
SEASON_KEY: str = ""


class BracketMeta(BaseModel):
    """Persisted shape of a bracket (its games live in ``games.parquet``)."""

    name: str
    entrants: list[int]
    byes: list[int | None]
    state: BracketState


class UniverseMeta(BaseModel):
    """Contents of ``meta.json``."""

    year: int
    week: int
    seed_phrase: str
    conf_tournament_state: BracketState
    conf_tournaments: dict[str, BracketMeta]
    bracket: BracketMeta
    config: LeagueConfig


# ---------------------------------------------------------------------------
# Parquet Repository
# ---------------------------------------------------------------------------

_TEAM_SCHEMA = pa.schema([
    ("team_id", pa.int64()),
    ("school", pa.string()),
    ("nickname", pa.string()),
    ("conference", pa.string()),
    ("rating", pa.float64()),
    ("wins", pa.int64()),
    ("losses", pa.int64()),
    ("conf_wins", pa.int64()),
    ("conf_losses", pa.int64()),
    ("sos", pa.float64()),
    ("resume", pa.int64()),
    ("seed_note", pa.string()),
])

_GAME_SCHEMA = pa.schema([
    ("bracket", pa.string()),
    ("home_id", pa.int64()),
    ("away_id", pa.int64()),
    ("conference", pa.string()),
    ("week", pa.int64()),
    ("neutral", pa.bool_()),
    ("played", pa.bool_()),
    ("home_score", pa.int64()),
    ("away_score", pa.int64()),
    ("kind", pa.string()),
    ("round_index", pa.int64()),
])


class ParquetUniverseRepository(UniverseRepository):
    """Repository implementation backed by Parquet files.

    Directory layout::

        {base_path}/
            meta.json        # year, week, seed phrase, bracket shapes, config
            teams.parquet    # one row per team, season state included
            games.parquet    # season + tournament games, tagged by bracket
    """

    def __init__(self, base_path: Path) -> None:
        self._base_path = base_path

    @property
    def base_path(self) -> Path:
        return self._base_path

    def exists(self) -> bool:
        return (self._base_path / "meta.json").exists()

    # -- writes --------------------------------------------------------------

    def save(self, universe: Universe, config: LeagueConfig | None = None) -> None:
        self._base_path.mkdir(parents=True, exist_ok=True)
        cfg = config or LeagueConfig(year=universe.year, seed_phrase=universe.seed_phrase)

        teams = list(universe.teams.values())
        team_table = pa.Table.from_pydict(
            {name: [getattr(t, name) for t in teams] for name in _TEAM_SCHEMA.names},
            schema=_TEAM_SCHEMA,
        )
        pq.write_table(team_table, self._base_path / "teams.parquet")

        rows: list[dict[str, Any]] = [_game_row(g, SEASON_KEY) for g in universe.games]
        for conf, bracket in universe.conf_tournaments.items():
            rows.extend(_game_row(g, conf) for g in bracket.games)
        rows.extend(_game_row(g, NATIONAL_KEY) for g in universe.bracket.games)
        game_table = pa.Table.from_pylist(rows, schema=_GAME_SCHEMA)
        pq.write_table(game_table, self._base_path / "games.parquet")

        meta = UniverseMeta(
            year=universe.year,
            week=universe.week,
            seed_phrase=universe.seed_phrase,
            conf_tournament_state=universe.conf_tournament_state,
            conf_tournaments={k: _bracket_meta(b) for k, b in universe.conf_tournaments.items()},
            bracket=_bracket_meta(universe.bracket),
            config=cfg,
        )
        (self._base_path / "meta.json").write_text(meta.model_dump_json(indent=2))

    # -- reads ---------------------------------------------------------------

    def load(self) -> tuple[Universe, LeagueConfig]:
        """Load the saved universe.

        Raises:
            FileNotFoundError: If no save exists under ``base_path``.
            UnknownTeamError: If a saved game references a missing team.
        """
        meta_path = self._base_path / "meta.json"
        if not meta_path.exists():
            msg = f"No saved universe at {meta_path}"
            raise FileNotFoundError(msg)
        meta = UniverseMeta.model_validate_json(meta_path.read_text())

        team_rows = pq.read_table(self._base_path / "teams.parquet").to_pylist()
        teams = [Team(**_drop_nulls(row)) for row in team_rows]

        games_by_key: dict[str, list[Game]] = {}
        games_path = self._base_path / "games.parquet"
        if games_path.exists():
            for row in pq.read_table(games_path).to_pylist():
                key = row.pop("bracket")
                games_by_key.setdefault(key, []).append(Game(**row))

        conf_tournaments = {
            conf: _rebuild_bracket(bm, games_by_key.get(conf, [])) for conf, bm in meta.conf_tournaments.items()
        }
        universe = Universe.restore(
            teams,
            year=meta.year,
            week=meta.week,
            games=games_by_key.get(SEASON_KEY, []),
            conf_tournaments=conf_tournaments,
            conf_tournament_state=meta.conf_tournament_state,
            bracket=_rebuild_bracket(meta.bracket, games_by_key.get(NATIONAL_KEY, [])),
            seed_phrase=meta.seed_phrase,
            outcome=meta.config.outcome(),
        )
        return universe, meta.config


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _game_row(game: Game, key: str) -> dict[str, Any]:
    return {"bracket": key, **game.model_dump()}


def _bracket_meta(bracket: Bracket) -> BracketMeta:
    return BracketMeta(
        name=bracket.name,
        entrants=list(bracket.entrants),
        byes=list(bracket.byes),
        state=bracket.state,
    )


def _rebuild_bracket(meta: BracketMeta, games: list[Game]) -> Bracket:
    """Regroup a bracket's games into rounds by ``round_index``."""
    n_rounds = len(meta.byes)
    rounds: list[list[Game]] = [[] for _ in range(n_rounds)]
    for game in games:
        if game.round_index is None or game.round_index >= n_rounds:
            msg = f"bracket {meta.name!r}: game has round_index {game.round_index}, expected < {n_rounds}"
            raise ValueError(msg)
        rounds[game.round_index].append(game)
    return Bracket(
        name=meta.name,
        entrants=list(meta.entrants),
        rounds=rounds,
        byes=list(meta.byes),
        state=meta.state,
    )


def _drop_nulls(row: dict[str, Any]) -> dict[str, Any]:
    # Null columns fall back to the model defaults.
    return {k: v for k, v in row.items() if v is not None}


__all__ = [
    "NATIONAL_KEY",
    "SEASON_KEY",
    "BracketMeta",
    "ParquetUniverseRepository",
    "UniverseMeta",
    "UniverseRepository",
]
