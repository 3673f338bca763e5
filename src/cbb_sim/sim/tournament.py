"""Conference tournaments.

Each conference gets a single-elimination bracket seeded from its final
standings.  Every round pairs the best remaining seed with the worst, on a
neutral court, and each game is simulated as soon as it is paired: round
``k + 1`` is only known once round ``k`` has been played.

A round with an odd number of teams gives the best remaining seed a bye.
A one-team conference crowns that team without playing; an empty
conference has no champion.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from cbb_sim.ingest.schema import Game, GameKind
from cbb_sim.sim.outcome import simulate_game
from cbb_sim.sim.season import is_season_complete
from cbb_sim.sim.standings import rank
from cbb_sim.sim.universe import Bracket, BracketState, Universe

logger = logging.getLogger(__name__)


def pair_round(
    team_ids: Sequence[int],
    *,
    kind: GameKind,
    round_index: int,
    conference: str | None = None,
) -> tuple[list[Game], int | None]:
    """Pair a round best-versus-worst.

    *team_ids* must be in seed (or bracket-slot) order, best first.  The
    better seed of each pairing is listed as the home side, but every game
    is on a neutral site.

    Returns:
        ``(games, bye_id)`` where ``bye_id`` is the best seed when the field
        is odd, else ``None``.
    """
    ids = list(team_ids)
    bye: int | None = None
    if len(ids) % 2 == 1:
        bye = ids.pop(0)
    games = [
        Game(
            home_id=ids[i],
            away_id=ids[len(ids) - 1 - i],
            conference=conference,
            week=0,
            neutral=True,
            kind=kind,
            round_index=round_index,
        )
        for i in range(len(ids) // 2)
    ]
    return games, bye


def build_conference_tournaments(universe: Universe) -> dict[str, Bracket]:
    """Seed, pair and play every conference tournament.

    Conferences are processed in label order.  The call is a no-op (with a
    warning) while regular-season games remain unplayed, and a no-op once
    the tournaments have been played, so records are never counted twice.

    Returns:
        The universe's conference-tournament mapping.
    """
    if universe.conf_tournament_state is BracketState.COMPLETE:
        logger.info("conference tournaments already played; nothing to do")
        return universe.conf_tournaments
    if not is_season_complete(universe):
        logger.warning("regular season is not finished; conference tournaments not built")
        return universe.conf_tournaments

    universe.conf_tournaments = {}
    for conf in universe.conference_labels():
        seeds = [t.team_id for t in rank(universe, conf)]
        universe.conf_tournaments[conf] = _play_tournament(universe, conf, seeds)

    universe.conf_tournament_state = BracketState.COMPLETE
    logger.info("played %d conference tournaments", len(universe.conf_tournaments))
    return universe.conf_tournaments


def conference_champions(universe: Universe) -> dict[str, int]:
    """Map conference label to champion id, in label order.

    Conferences without a champion (no teams) are omitted; so is everything
    when the tournaments have not been built.
    """
    champions: dict[str, int] = {}
    for conf in sorted(universe.conf_tournaments):
        champ = universe.conf_tournaments[conf].champion_id
        if champ is not None:
            champions[conf] = champ
    return champions


# ── Private helpers ──────────────────────────────────────────────────────────


def _play_tournament(universe: Universe, conf: str, seeds: list[int]) -> Bracket:
    bracket = Bracket(name=conf, entrants=seeds, state=BracketState.IN_PROGRESS)
    alive = seeds
    while len(alive) > 1:
        games, bye = pair_round(
            alive,
            kind="conference_tournament",
            round_index=len(bracket.rounds),
            conference=conf,
        )
        bracket.rounds.append(games)
        bracket.byes.append(bye)
        for game in games:
            simulate_game(universe, game)
        alive = bracket.survivors()

    bracket.state = BracketState.COMPLETE
    champ = bracket.champion_id
    if champ is not None:
        logger.debug("%s champion: %s (%d rounds)", conf, universe.team(champ).name, len(bracket.rounds))
    return bracket
