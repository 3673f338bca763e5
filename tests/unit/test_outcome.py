"""Unit tests for cbb_sim.sim.outcome (win probability, scores, game results)."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from cbb_sim.ingest.schema import Game, Team
from cbb_sim.sim.outcome import OutcomeConfig, simulate_game, simulate_score, win_probability
from cbb_sim.sim.rng import SeededStream
from cbb_sim.sim.universe import UnknownTeamError, Universe


def _pair(
    home_rating: float = 80.0,
    away_rating: float = 70.0,
    *,
    seed: int = 1,
    conference: str | None = None,
) -> Universe:
    teams = [
        Team(team_id=0, school="Home", conference=conference, rating=home_rating),
        Team(team_id=1, school="Away", conference=conference, rating=away_rating),
    ]
    return Universe(teams, seed=seed)


# ---------------------------------------------------------------------------
# win_probability
# ---------------------------------------------------------------------------


@pytest.mark.smoke
class TestWinProbability:
    def test_equal_ratings_neutral_is_half(self) -> None:
        assert win_probability(70, 70) == pytest.approx(0.5)

    def test_home_advantage_raises_probability(self) -> None:
        assert win_probability(70, 70, home_advantage=2.5) > 0.5

    def test_six_point_edge(self) -> None:
        assert win_probability(76, 70) == pytest.approx(1 / (1 + 2.718281828 ** -1), rel=1e-6)

    def test_90_vs_30_with_home_court_exceeds_095(self) -> None:
        assert win_probability(90, 30, home_advantage=2.5) > 0.95

    @pytest.mark.property
    @given(
        a=st.floats(min_value=30, max_value=95),
        b=st.floats(min_value=30, max_value=95),
    )
    def test_complementary(self, a: float, b: float) -> None:
        assert win_probability(a, b) + win_probability(b, a) == pytest.approx(1.0)


# ---------------------------------------------------------------------------
# simulate_score
# ---------------------------------------------------------------------------


class TestSimulateScore:
    def test_consumes_three_draws(self) -> None:
        stream = SeededStream(5)
        simulate_score(stream)
        assert stream.draws == 3

    @pytest.mark.property
    @given(seed=st.integers(min_value=0, max_value=0xFFFFFFFF))
    @settings(max_examples=200, deadline=None)
    def test_within_band(self, seed: int) -> None:
        score = simulate_score(SeededStream(seed), baseline=71, variance=11, floor=40)
        assert 60 <= score <= 82

    def test_floor_applies(self) -> None:
        assert simulate_score(SeededStream(3), baseline=10, variance=5, floor=40) == 40


# ---------------------------------------------------------------------------
# simulate_game
# ---------------------------------------------------------------------------


class TestSimulateGame:
    @pytest.mark.smoke
    def test_records_result_on_both_teams(self) -> None:
        universe = _pair()
        game = Game(home_id=0, away_id=1, week=1)
        assert simulate_game(universe, game) is True
        assert game.played
        assert game.home_score != game.away_score
        home, away = universe.team(0), universe.team(1)
        assert home.wins + home.losses == 1
        assert away.wins + away.losses == 1
        assert home.wins == away.losses
        assert (home.conf_wins, away.conf_wins, home.conf_losses, away.conf_losses) == (0, 0, 0, 0)

    def test_idempotent(self) -> None:
        universe = _pair()
        game = Game(home_id=0, away_id=1)
        simulate_game(universe, game)
        snapshot = (game.home_score, game.away_score, universe.team(0).wins, universe.stream.draws)
        assert simulate_game(universe, game) is False
        assert (game.home_score, game.away_score, universe.team(0).wins, universe.stream.draws) == snapshot

    def test_conference_game_updates_conference_record(self) -> None:
        universe = _pair(conference="ACC")
        game = Game(home_id=0, away_id=1, conference="ACC")
        simulate_game(universe, game)
        home, away = universe.team(0), universe.team(1)
        assert home.conf_wins + home.conf_losses == 1
        assert home.conf_wins == away.conf_losses

    def test_sos_accumulates_opponent_rating(self) -> None:
        universe = _pair(80, 70)
        simulate_game(universe, Game(home_id=0, away_id=1))
        assert universe.team(0).sos == pytest.approx(70 * 0.02)
        assert universe.team(1).sos == pytest.approx(80 * 0.02)

    def test_resume_for_quality_win(self) -> None:
        universe = _pair(80, 80)
        game = Game(home_id=0, away_id=1)
        simulate_game(universe, game)
        winner = universe.team(game.winner_id or 0)
        loser = universe.team(game.loser_id or 0)
        assert winner.resume == 1
        assert loser.resume == 0

    def test_no_resume_for_weak_opponent(self) -> None:
        universe = _pair(60, 60)
        simulate_game(universe, Game(home_id=0, away_id=1))
        assert universe.team(0).resume == universe.team(1).resume == 0

    def test_unknown_team_raises(self) -> None:
        universe = _pair()
        with pytest.raises(UnknownTeamError):
            simulate_game(universe, Game(home_id=0, away_id=9))

    def test_custom_config_is_used(self) -> None:
        universe = _pair(80, 70)
        universe.outcome = OutcomeConfig(sos_factor=0.0)
        simulate_game(universe, Game(home_id=0, away_id=1))
        assert universe.team(0).sos == 0.0

    @pytest.mark.slow
    def test_heavy_favourite_wins_at_least_900_of_1000(self) -> None:
        wins = 0
        for seed in range(1000):
            universe = _pair(90, 30, seed=seed)
            game = Game(home_id=0, away_id=1, neutral=False)
            simulate_game(universe, game)
            wins += game.winner_id == 0
        assert wins >= 900

    @pytest.mark.property
    @given(
        seed=st.integers(min_value=0, max_value=0xFFFFFFFF),
        home=st.floats(min_value=30, max_value=95),
        away=st.floats(min_value=30, max_value=95),
        neutral=st.booleans(),
    )
    @settings(max_examples=200, deadline=None)
    def test_never_tied(self, seed: int, home: float, away: float, neutral: bool) -> None:
        universe = _pair(home, away, seed=seed)
        game = Game(home_id=0, away_id=1, neutral=neutral)
        simulate_game(universe, game)
        assert game.home_score != game.away_score

    @pytest.mark.parametrize("seed", range(50))
    def test_low_scoring_config_keeps_scores_non_negative(self, seed: int) -> None:
        universe = _pair(95, 30, seed=seed)
        universe.outcome = OutcomeConfig(score_baseline=3.0, score_variance=2.0, score_floor=0)
        game = Game(home_id=0, away_id=1)
        simulate_game(universe, game)
        assert game.home_score >= 0
        assert game.away_score >= 0
        assert game.home_score != game.away_score
