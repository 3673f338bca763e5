"""Universe aggregate root: team store, schedule, brackets and random stream.

A :class:`Universe` owns everything one simulated league needs:

* an indexed team store (``team_id → Team``) that every phase reads and
  that only :func:`cbb_sim.sim.outcome.simulate_game` mutates;
* the season schedule (``games``) and week counter;
* one :class:`Bracket` per conference tournament plus the national bracket;
* a single :class:`~cbb_sim.sim.rng.SeededStream` from which every random
  decision is drawn, in call order.

Bracket progress is tracked with an explicit :class:`BracketState`, so a
caller can tell "not built yet" apart from "built, but empty".
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from cbb_sim.ingest.schema import Game, RosterEntry, Team
from cbb_sim.sim.outcome import OutcomeConfig
from cbb_sim.sim.rng import SeededStream, hash_seed, seed_from_phrase

logger = logging.getLogger(__name__)

DEFAULT_YEAR: int = 2025


class UnknownTeamError(KeyError):
    """Raised when a game or bracket references a team id missing from the roster."""


class BracketState(enum.Enum):
    """Lifecycle of a tournament bracket."""

    NOT_BUILT = "not_built"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass
class Bracket:
    """Single-elimination bracket.

    Attributes:
        name: Display name (conference label or ``"National"``).
        entrants: Seeded team ids, best seed first.
        rounds: Games per round; round ``k + 1`` is paired only from the
            winners (and bye) of round ``k``.
        byes: Per round, the team id that advanced without playing, or
            ``None``.  Same length as ``rounds``.
        state: Lifecycle marker.
    """

    name: str
    entrants: list[int] = field(default_factory=list)
    rounds: list[list[Game]] = field(default_factory=list)
    byes: list[int | None] = field(default_factory=list)
    state: BracketState = BracketState.NOT_BUILT

    def survivors(self) -> list[int]:
        """Team ids still alive after the latest round, in pairing order.

        Before any round exists this is the full seeded field.  Unplayed
        games contribute nothing.
        """
        if not self.rounds:
            return list(self.entrants)
        alive: list[int] = []
        bye = self.byes[-1] if self.byes else None
        if bye is not None:
            alive.append(bye)
        for game in self.rounds[-1]:
            if game.winner_id is not None:
                alive.append(game.winner_id)
        return alive

    @property
    def current_round_played(self) -> bool:
        return all(g.played for g in self.rounds[-1]) if self.rounds else True

    @property
    def champion_id(self) -> int | None:
        """Champion's team id once the bracket is complete, else ``None``."""
        if self.state is not BracketState.COMPLETE:
            return None
        alive = self.survivors()
        return alive[0] if len(alive) == 1 else None

    @property
    def games(self) -> list[Game]:
        return [g for rnd in self.rounds for g in rnd]


class Universe:
    """The full simulated league.

    Args:
        teams: Teams in roster order.  Ids must be unique.
        seed_phrase: Human-readable seed; empty selects a clock seed.
        year: Season year (feeds non-conference home/away hashing).
        outcome: Outcome-model constants.
        seed: Explicit 32-bit seed, overriding *seed_phrase*.

    Raises:
        ValueError: If two teams share an id.
    """

    def __init__(
        self,
        teams: Iterable[Team],
        *,
        seed_phrase: str = "",
        year: int = DEFAULT_YEAR,
        outcome: OutcomeConfig | None = None,
        seed: int | None = None,
    ) -> None:
        self.teams: dict[int, Team] = {}
        for team in teams:
            if team.team_id in self.teams:
                msg = f"duplicate team id {team.team_id} ({self.teams[team.team_id].name!r} and {team.name!r})"
                raise ValueError(msg)
            self.teams[team.team_id] = team

        self.year = year
        self.week = 1
        self.games: list[Game] = []
        self.conf_tournaments: dict[str, Bracket] = {}
        self.conf_tournament_state = BracketState.NOT_BUILT
        self.bracket = Bracket(name="National")
        self.outcome = outcome or OutcomeConfig()
        self.seed_phrase = seed_phrase
        self.stream = SeededStream(seed if seed is not None else seed_from_phrase(seed_phrase))

    # ── Team store ─────────────────────────────────────────────────────

    def team(self, team_id: int) -> Team:
        """Return the team with *team_id*.

        Raises:
            UnknownTeamError: If the id is not in the roster.
        """
        try:
            return self.teams[team_id]
        except KeyError:
            msg = f"team id {team_id} is not in the roster"
            raise UnknownTeamError(msg) from None

    def conferences(self) -> dict[str, list[Team]]:
        """Group affiliated teams by conference, in roster order.

        Unaffiliated teams (``conference is None``) are not grouped.
        """
        by_conf: dict[str, list[Team]] = {}
        for team in self.teams.values():
            if team.conference is not None:
                by_conf.setdefault(team.conference, []).append(team)
        return by_conf

    def conference_labels(self) -> list[str]:
        """Conference labels in stable (sorted) order."""
        return sorted(self.conferences())

    def check_references(self) -> None:
        """Verify that every game and bracket entry names a rostered team.

        Raises:
            UnknownTeamError: On the first dangling reference.
        """
        brackets = [*self.conf_tournaments.values(), self.bracket]
        for game in [*self.games, *(g for b in brackets for g in b.games)]:
            self.team(game.home_id)
            self.team(game.away_id)
        for bracket in brackets:
            for team_id in bracket.entrants:
                self.team(team_id)

    # ── Restoration ────────────────────────────────────────────────────

    @classmethod
    def restore(  # noqa: PLR0913
        cls,
        teams: Iterable[Team],
        *,
        year: int,
        week: int,
        games: list[Game],
        conf_tournaments: dict[str, Bracket],
        conf_tournament_state: BracketState,
        bracket: Bracket,
        seed_phrase: str = "",
        outcome: OutcomeConfig | None = None,
    ) -> Universe:
        """Rebuild a universe from persisted entities.

        The random stream's position is not persisted.  The restored stream
        is reseeded from ``hash_seed(str(year))``, so results simulated after
        a save/load differ from an uninterrupted run with the same seed.

        Raises:
            UnknownTeamError: If a persisted game references a missing team.
        """
        universe = cls(
            teams,
            seed_phrase=seed_phrase,
            year=year,
            outcome=outcome,
            seed=hash_seed(str(year)),
        )
        universe.week = week
        universe.games = games
        universe.conf_tournaments = conf_tournaments
        universe.conf_tournament_state = conf_tournament_state
        universe.bracket = bracket
        universe.check_references()
        return universe


def create_universe(
    entries: Iterable[RosterEntry],
    seed_phrase: str = "",
    *,
    year: int = DEFAULT_YEAR,
    outcome: OutcomeConfig | None = None,
) -> Universe:
    """Create a fresh universe from roster entries.

    Args:
        entries: Roster records (from any connector).
        seed_phrase: Human-readable seed such as ``"2025-season"``.
        year: Season year.
        outcome: Outcome-model constants (defaults when ``None``).

    Raises:
        ValueError: If two entries share a team id.
    """
    universe = Universe(
        (Team.from_entry(e) for e in entries),
        seed_phrase=seed_phrase,
        year=year,
        outcome=outcome,
    )
    logger.info(
        "created universe: %d teams, %d conferences, year %d, seed %d",
        len(universe.teams),
        len(universe.conferences()),
        year,
        universe.stream.seed,
    )
    return universe
