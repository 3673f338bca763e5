"""Season schedule generation.

Builds the regular-season game list in two passes:

1. **Conference play**: a circle-method round robin per conference (single
   or double).  Every rotation of the circle is one week.
2. **Non-conference play**: each team draws opponents from outside its
   conference by bounded rejection sampling.  Every added game is one week.

Opponent draws come from the universe's random stream.  Home/away for a
non-conference pairing does not: it is derived from a hash of the two ids,
the season year and the pairing index, so a rerun with the same roster gets
the same home/away split however much of the stream was consumed before.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Literal

from cbb_sim.ingest.schema import Game, Team
from cbb_sim.sim.rng import hash_seed
from cbb_sim.sim.universe import Bracket, BracketState, Universe
from cbb_sim.utils.logger import VERBOSE

logger = logging.getLogger(__name__)

RoundRobinMode = Literal["single", "double"]

#: Draw budget per requested non-conference game.
ATTEMPTS_PER_GAME: int = 20

_VALID_MODES: tuple[str, ...] = ("single", "double")


def round_robin_pairings(
    team_ids: Sequence[int],
    *,
    double: bool = False,
) -> list[list[tuple[int, int]]]:
    """Pair teams with the circle method.

    The first id stays fixed while the others rotate one slot per round.  An
    odd field is padded with a bye, and pairings against the bye are
    dropped.  Home/away flips with the parity of the rotation index, so in a
    double round robin the second pass mirrors the first.

    Args:
        team_ids: Ids of the teams in one conference.
        double: Run the rotation twice.

    Returns:
        One list of ``(home_id, away_id)`` pairs per rotation.
    """
    slots: list[int | None] = list(team_ids)
    if len(slots) < 2:
        return []
    if len(slots) % 2 == 1:
        slots.append(None)

    n = len(slots)
    n_rounds = (n - 1) * 2 if double else n - 1
    rounds: list[list[tuple[int, int]]] = []
    for r in range(n_rounds):
        home_first = r % 2 == 0
        pairs: list[tuple[int, int]] = []
        for i in range(n // 2):
            a = slots[i]
            b = slots[n - 1 - i]
            if a is None or b is None:
                continue
            pairs.append((a, b) if home_first else (b, a))
        rounds.append(pairs)
        slots = [slots[0], *slots[2:], slots[1]]
    return rounds


def generate_schedule(
    universe: Universe,
    mode: RoundRobinMode = "single",
    non_conf_games: int = 8,
) -> int:
    """Replace the universe's schedule with a freshly generated season.

    Resets the week counter to 1.  Any conference tournaments or national
    bracket from a previous schedule are discarded.

    Args:
        universe: Universe to schedule.
        mode: ``"single"`` or ``"double"`` conference round robin.
        non_conf_games: Target number of non-conference opponents each team
            tries to add.  Small or homogeneous pools may fall short.

    Returns:
        Number of games scheduled.

    Raises:
        ValueError: If *mode* is not recognised or *non_conf_games* < 0.
    """
    if mode not in _VALID_MODES:
        msg = f"Unknown round-robin mode {mode!r}. Valid modes: {', '.join(_VALID_MODES)}"
        raise ValueError(msg)
    if non_conf_games < 0:
        msg = f"non_conf_games must be >= 0, got {non_conf_games}"
        raise ValueError(msg)

    universe.games = []
    universe.week = 1
    universe.conf_tournaments = {}
    universe.conf_tournament_state = BracketState.NOT_BUILT
    universe.bracket = Bracket(name="National")

    week = _schedule_conference_play(universe, double=mode == "double", week=1)
    n_conf = len(universe.games)
    week = _schedule_non_conference_play(universe, target=non_conf_games, week=week)

    logger.info(
        "scheduled %d games (%d conference, %d non-conference) over %d weeks",
        len(universe.games),
        n_conf,
        len(universe.games) - n_conf,
        week - 1,
    )
    return len(universe.games)


# ── Private helpers ──────────────────────────────────────────────────────────


def _schedule_conference_play(universe: Universe, *, double: bool, week: int) -> int:
    """Append every conference's round robin; return the next free week."""
    for conf, teams in universe.conferences().items():
        rounds = round_robin_pairings([t.team_id for t in teams], double=double)
        for pairs in rounds:
            universe.games.extend(
                Game(home_id=home, away_id=away, conference=conf, week=week) for home, away in pairs
            )
            week += 1
        logger.debug("%s: %d teams, %d rotations", conf, len(teams), len(rounds))
    return week


def _schedule_non_conference_play(universe: Universe, *, target: int, week: int) -> int:
    """Append non-conference games by bounded rejection sampling."""
    all_ids = list(universe.teams)
    scheduled: set[frozenset[int]] = {frozenset((g.home_id, g.away_id)) for g in universe.games}

    for team in universe.teams.values():
        added = 0
        tries = 0
        while added < target and tries < target * ATTEMPTS_PER_GAME:
            tries += 1
            opp_id = universe.stream.pick(all_ids)
            if opp_id == team.team_id:
                continue
            if _same_conference(team, universe.team(opp_id)):
                continue
            pair = frozenset((team.team_id, opp_id))
            if pair in scheduled:
                continue

            home_id, away_id = _non_conference_sides(team.team_id, opp_id, universe.year, added)
            universe.games.append(Game(home_id=home_id, away_id=away_id, conference=None, week=week))
            scheduled.add(pair)
            added += 1
            week += 1

        if added < target:
            logger.log(VERBOSE, "%s: only %d of %d non-conference games found", team.name, added, target)
    return week


def _same_conference(a: Team, b: Team) -> bool:
    # Independents never share a conference, so they may face each other.
    return a.conference is not None and a.conference == b.conference


def _non_conference_sides(team_id: int, opp_id: int, year: int, index: int) -> tuple[int, int]:
    """Return ``(home_id, away_id)`` from a hash of the pairing."""
    h = hash_seed(f"{team_id}-{opp_id}-{year}-{index}")
    if h % 2 == 0:
        return team_id, opp_id
    return opp_id, team_id
