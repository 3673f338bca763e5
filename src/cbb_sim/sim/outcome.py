"""Rating-based game outcome model.

Turns two team strength ratings into a home win probability and a final
score pair, then applies the result to both teams' records.

Key design points:

* Logistic win probability on the rating differential (home rating plus
  home-court advantage minus away rating), scaled by ``steepness``.
* Each side's raw score is the mean of three uniform draws mapped around a
  baseline (a cheap central-limit approximation of a normal), floored at a
  plausible minimum.
* Both scores are then nudged toward the probabilistic favourite so that the
  score gap tracks the win probability.
* A level score is broken by a coin flip worth exactly one point, so a
  played game always has a winner.
* :func:`simulate_game` is the only code path that changes win/loss records.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cbb_sim.utils.logger import VERBOSE

if TYPE_CHECKING:
    from cbb_sim.ingest.schema import Game, Team
    from cbb_sim.sim.rng import SeededStream
    from cbb_sim.sim.universe import Universe

logger = logging.getLogger(__name__)


# ── Configuration ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class OutcomeConfig:
    """Frozen constants of the outcome model.

    Ratings live on a 30–95 scale, so a ``steepness`` of 6 makes a
    six-point rating edge worth roughly a 73% win probability.
    """

    home_advantage: float = 2.5
    steepness: float = 6.0
    score_baseline: float = 71.0
    score_variance: float = 11.0
    score_floor: int = 40
    margin_scale: float = 12.0
    quality_threshold: float = 75.0
    sos_factor: float = 0.02


# ── Core math ────────────────────────────────────────────────────────────────


def win_probability(
    rating_home: float,
    rating_away: float,
    home_advantage: float = 0.0,
    steepness: float = 6.0,
) -> float:
    """Return P(home team wins).

    ``p = 1 / (1 + exp(-(rating_home + home_advantage - rating_away) / steepness))``
    """
    diff = (rating_home + home_advantage) - rating_away
    return 1.0 / (1.0 + math.exp(-diff / steepness))


def simulate_score(
    stream: SeededStream,
    baseline: float = 71.0,
    variance: float = 11.0,
    floor: int = 40,
) -> int:
    """Draw one team's raw score.

    Consumes exactly three draws from *stream*.  The result lies within
    ``baseline ± variance`` and never below *floor*.
    """
    g = (stream.random() + stream.random() + stream.random()) / 3.0
    return max(floor, _round_half_up(baseline + (g - 0.5) * 2.0 * variance))


def simulate_game(universe: Universe, game: Game) -> bool:
    """Play *game* and record the result on both teams.

    A game that has already been played is left untouched, so repeated calls
    never re-roll a result.

    Args:
        universe: Owner of the team store and of the random stream.
        game: The game to play.

    Returns:
        ``True`` if the game was simulated by this call, ``False`` if it had
        already been played.

    Raises:
        UnknownTeamError: If either team id is not in the roster.
    """
    if game.played:
        return False

    cfg = universe.outcome
    home = universe.team(game.home_id)
    away = universe.team(game.away_id)
    stream = universe.stream

    home_adv = 0.0 if game.neutral else cfg.home_advantage
    p_home = win_probability(home.rating, away.rating, home_adv, cfg.steepness)

    home_score = simulate_score(stream, cfg.score_baseline, cfg.score_variance, cfg.score_floor)
    away_score = simulate_score(stream, cfg.score_baseline, cfg.score_variance, cfg.score_floor)

    margin = math.floor((p_home - 0.5) * cfg.margin_scale)
    home_score = max(0, home_score + margin)
    away_score = max(0, away_score - margin)

    if home_score == away_score:
        if stream.coin():
            home_score += 1
        else:
            away_score += 1

    game.played = True
    game.home_score = home_score
    game.away_score = away_score

    if home_score > away_score:
        _apply_result(game, winner=home, loser=away, threshold=cfg.quality_threshold)
    else:
        _apply_result(game, winner=away, loser=home, threshold=cfg.quality_threshold)

    home.sos += away.rating * cfg.sos_factor
    away.sos += home.rating * cfg.sos_factor

    logger.log(
        VERBOSE,
        "%s %d @ %s %d (p_home=%.3f)",
        away.name,
        away_score,
        home.name,
        home_score,
        p_home,
    )
    return True


# ── Private helpers ──────────────────────────────────────────────────────────


def _apply_result(game: Game, *, winner: Team, loser: Team, threshold: float) -> None:
    winner.wins += 1
    loser.losses += 1
    if game.conference:
        winner.conf_wins += 1
        loser.conf_losses += 1
    if loser.rating >= threshold:
        winner.resume += 1


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
