"""Unit tests for cbb_sim.config."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from cbb_sim.config import LeagueConfig
from cbb_sim.sim.outcome import OutcomeConfig


class TestLeagueConfig:
    @pytest.mark.smoke
    def test_defaults_match_outcome_config(self) -> None:
        assert LeagueConfig().outcome() == OutcomeConfig()

    def test_outcome_carries_overrides(self) -> None:
        cfg = LeagueConfig(home_advantage=4.0, sos_factor=0.05)
        outcome = cfg.outcome()
        assert outcome.home_advantage == 4.0
        assert outcome.sos_factor == 0.05

    def test_from_json(self, tmp_path: Path) -> None:
        path = tmp_path / "league.json"
        path.write_text(json.dumps({"year": 2030, "round_robin": "double", "steepness": 8}))
        cfg = LeagueConfig.from_json(path)
        assert cfg.year == 2030
        assert cfg.round_robin == "double"
        assert cfg.outcome().steepness == 8.0

    def test_from_json_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            LeagueConfig.from_json(tmp_path / "missing.json")

    @pytest.mark.parametrize(
        "override",
        [{"round_robin": "triple"}, {"non_conference_games": -1}, {"steepness": 0}, {"year": 1066}],
    )
    def test_invalid_values_rejected(self, override: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            LeagueConfig.model_validate(override)
