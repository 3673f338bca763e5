"""Unit tests for cbb_sim.sim.season."""

from __future__ import annotations

import pytest

from cbb_sim.sim.schedule import generate_schedule
from cbb_sim.sim.season import is_season_complete, simulate_season, simulate_through_week, simulate_week
from cbb_sim.sim.universe import Universe


@pytest.fixture
def scheduled(small_universe: Universe) -> Universe:
    generate_schedule(small_universe, mode="single", non_conf_games=4)
    return small_universe


class TestSimulateSeason:
    @pytest.mark.smoke
    def test_plays_every_game(self, scheduled: Universe) -> None:
        played = simulate_season(scheduled)
        assert played == len(scheduled.games)
        assert is_season_complete(scheduled)

    def test_records_balance(self, scheduled: Universe) -> None:
        simulate_season(scheduled)
        teams = scheduled.teams.values()
        assert sum(t.wins for t in teams) == sum(t.losses for t in teams) == len(scheduled.games)
        assert sum(t.conf_wins for t in teams) == sum(t.conf_losses for t in teams)

    def test_second_call_is_noop(self, scheduled: Universe) -> None:
        simulate_season(scheduled)
        records = {tid: (t.wins, t.losses) for tid, t in scheduled.teams.items()}
        draws = scheduled.stream.draws
        assert simulate_season(scheduled) == 0
        assert {tid: (t.wins, t.losses) for tid, t in scheduled.teams.items()} == records
        assert scheduled.stream.draws == draws

    def test_empty_schedule_is_complete(self, small_universe: Universe) -> None:
        assert simulate_season(small_universe) == 0
        assert is_season_complete(small_universe)


class TestSimulateWeek:
    def test_plays_only_current_week(self, scheduled: Universe) -> None:
        played = simulate_week(scheduled)
        assert played == sum(1 for g in scheduled.games if g.week == 1)
        assert all(g.played == (g.week == 1) for g in scheduled.games)
        assert scheduled.week == 2

    def test_through_week(self, scheduled: Universe) -> None:
        simulate_through_week(scheduled, 5)
        assert scheduled.week == 6
        assert all(g.played == (g.week <= 5) for g in scheduled.games)

    def test_week_by_week_matches_whole_season(self, small_universe: Universe) -> None:
        other = Universe(
            [t.model_copy() for t in small_universe.teams.values()],
            seed_phrase=small_universe.seed_phrase,
        )
        generate_schedule(small_universe, non_conf_games=4)
        generate_schedule(other, non_conf_games=4)

        simulate_season(small_universe)
        while not is_season_complete(other):
            simulate_week(other)

        assert [(g.home_score, g.away_score) for g in small_universe.games] == [
            (g.home_score, g.away_score) for g in other.games
        ]

    def test_week_stops_after_season(self, scheduled: Universe) -> None:
        simulate_season(scheduled)
        week = scheduled.week
        assert simulate_week(scheduled) == 0
        assert scheduled.week == week
