"""Conference standings and selection ranking.

Standings order teams within a conference by, in turn:

1. conference win-loss differential (descending),
2. overall win-loss differential (descending),
3. rating + strength of schedule (descending),
4. team id (ascending), so identical records never depend on list order.

The selection score ranks teams league-wide for national-bracket selection
and seeding.
"""

from __future__ import annotations

import pandas as pd  # type: ignore[import-untyped]

from cbb_sim.ingest.schema import MAX_RATING, MIN_RATING, Team
from cbb_sim.sim.universe import Universe
from cbb_sim.utils.assertions import assert_no_nulls, assert_unique, assert_value_range

STANDINGS_COLUMNS: tuple[str, ...] = (
    "rank",
    "team_id",
    "team",
    "conf_wins",
    "conf_losses",
    "wins",
    "losses",
    "sos",
    "rating",
)

RANKING_COLUMNS: tuple[str, ...] = (
    "rank",
    "team_id",
    "team",
    "conference",
    "wins",
    "losses",
    "resume",
    "sos",
    "rating",
    "score",
)


def standings_key(team: Team) -> tuple[int, int, float, int]:
    """Sort key implementing the standings tie-break order."""
    return (
        -(team.conf_wins - team.conf_losses),
        -(team.wins - team.losses),
        -(team.rating + team.sos),
        team.team_id,
    )


def rank(universe: Universe, conference: str) -> list[Team]:
    """Return *conference*'s teams, best first.

    An unknown conference yields an empty list.
    """
    teams = [t for t in universe.teams.values() if t.conference == conference]
    return sorted(teams, key=standings_key)


def selection_score(team: Team) -> float:
    """Composite metric used for at-large selection and national seeding.

    ``rating*0.6 + sos*0.3 + resume*4 + (wins - losses)*0.5``
    """
    return team.rating * 0.6 + team.sos * 0.3 + team.resume * 4 + (team.wins - team.losses) * 0.5


def rank_by_selection(teams: list[Team]) -> list[Team]:
    """Sort *teams* by selection score (descending), then team id."""
    return sorted(teams, key=lambda t: (-selection_score(t), t.team_id))


def standings_frame(universe: Universe, conference: str) -> pd.DataFrame:
    """Return *conference*'s standings as a DataFrame.

    Columns are :data:`STANDINGS_COLUMNS`; ``rank`` starts at 1.
    """
    rows = [
        {
            "rank": i,
            "team_id": t.team_id,
            "team": t.name,
            "conf_wins": t.conf_wins,
            "conf_losses": t.conf_losses,
            "wins": t.wins,
            "losses": t.losses,
            "sos": round(t.sos, 2),
            "rating": t.rating,
        }
        for i, t in enumerate(rank(universe, conference), start=1)
    ]
    df = pd.DataFrame(rows, columns=list(STANDINGS_COLUMNS))
    if not df.empty:
        assert_unique(df, "team_id")
        assert_no_nulls(df)
        _check_ranges(df)
    return df


def power_rankings(universe: Universe, top: int | None = None) -> pd.DataFrame:
    """Return every team ranked by :func:`selection_score`.

    Args:
        universe: Universe to rank.
        top: Keep only the first *top* rows (``None`` keeps all).
    """
    ranked = rank_by_selection(list(universe.teams.values()))
    if top is not None:
        ranked = ranked[:top]
    rows = [
        {
            "rank": i,
            "team_id": t.team_id,
            "team": t.name,
            "conference": t.conference or "Independent",
            "wins": t.wins,
            "losses": t.losses,
            "resume": t.resume,
            "sos": round(t.sos, 2),
            "rating": t.rating,
            "score": round(selection_score(t), 2),
        }
        for i, t in enumerate(ranked, start=1)
    ]
    df = pd.DataFrame(rows, columns=list(RANKING_COLUMNS))
    if not df.empty:
        assert_unique(df, "team_id")
        _check_ranges(df)
    return df


def _check_ranges(df: pd.DataFrame) -> None:
    assert_value_range(df, "rating", min_val=MIN_RATING, max_val=MAX_RATING)
    assert_value_range(df, "wins", min_val=0)
    assert_value_range(df, "losses", min_val=0)
