"""Season and tournament simulation engine."""

from __future__ import annotations

from cbb_sim.sim.bracket import (
    advance_bracket,
    advance_round,
    build_national_bracket,
    field_size,
    round_label,
    select_field,
)
from cbb_sim.sim.outcome import OutcomeConfig, simulate_game, simulate_score, win_probability
from cbb_sim.sim.rng import SeededStream, hash_seed, seed_from_phrase
from cbb_sim.sim.schedule import generate_schedule, round_robin_pairings
from cbb_sim.sim.season import is_season_complete, simulate_season, simulate_through_week, simulate_week
from cbb_sim.sim.standings import power_rankings, rank, rank_by_selection, selection_score, standings_frame
from cbb_sim.sim.tournament import build_conference_tournaments, conference_champions, pair_round
from cbb_sim.sim.universe import Bracket, BracketState, UnknownTeamError, Universe, create_universe

__all__ = [
    "Bracket",
    "BracketState",
    "OutcomeConfig",
    "SeededStream",
    "UnknownTeamError",
    "Universe",
    "advance_bracket",
    "advance_round",
    "build_conference_tournaments",
    "build_national_bracket",
    "conference_champions",
    "create_universe",
    "field_size",
    "generate_schedule",
    "hash_seed",
    "is_season_complete",
    "pair_round",
    "power_rankings",
    "rank",
    "rank_by_selection",
    "round_label",
    "round_robin_pairings",
    "seed_from_phrase",
    "select_field",
    "selection_score",
    "simulate_game",
    "simulate_score",
    "simulate_season",
    "simulate_through_week",
    "simulate_week",
    "standings_frame",
    "win_probability",
]
