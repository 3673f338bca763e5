"""Regular-season simulation.

Plays scheduled games in list order through
:func:`cbb_sim.sim.outcome.simulate_game`.  Already-played games are
skipped, so every entry point here is safe to call again.
"""

from __future__ import annotations

import logging

from cbb_sim.sim.outcome import simulate_game
from cbb_sim.sim.universe import Universe

logger = logging.getLogger(__name__)


def simulate_season(universe: Universe) -> int:
    """Simulate every unplayed game of the schedule, in list order.

    Returns:
        Number of games simulated by this call.
    """
    played = sum(simulate_game(universe, g) for g in universe.games if not g.played)
    logger.info("simulated %d regular-season games", played)
    return played


def simulate_week(universe: Universe) -> int:
    """Simulate the unplayed games of ``universe.week`` and advance the week.

    Games are played in schedule order.  Once the schedule is exhausted the
    counter stops advancing.

    Returns:
        Number of games simulated by this call.
    """
    if is_season_complete(universe):
        return 0
    week = universe.week
    played = sum(simulate_game(universe, g) for g in universe.games if g.week == week and not g.played)
    universe.week = week + 1
    logger.debug("week %d: %d games", week, played)
    return played


def simulate_through_week(universe: Universe, week: int) -> int:
    """Simulate week by week until ``universe.week`` passes *week*.

    Returns:
        Number of games simulated by this call.
    """
    played = 0
    while universe.week <= week and not is_season_complete(universe):
        played += simulate_week(universe)
    logger.info("simulated %d games through week %d", played, week)
    return played


def is_season_complete(universe: Universe) -> bool:
    """Return ``True`` when no scheduled game is left unplayed."""
    return all(g.played for g in universe.games)
