"""User-facing league configuration.

:class:`LeagueConfig` is the Pydantic-validated set of knobs a user can
override from a JSON file (``cbb-sim new --config league.json``).  The
engine itself works with the frozen :class:`~cbb_sim.sim.outcome.OutcomeConfig`
returned by :meth:`LeagueConfig.outcome`.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from cbb_sim.sim.outcome import OutcomeConfig


class LeagueConfig(BaseModel):
    """League settings and outcome-model constants.

    Outcome fields and defaults mirror :class:`OutcomeConfig`.
    """

    year: int = Field(default=2025, ge=1900)
    seed_phrase: str = "default"
    round_robin: Literal["single", "double"] = "single"
    non_conference_games: int = Field(default=8, ge=0)

    home_advantage: float = 2.5
    steepness: float = Field(default=6.0, gt=0.0)
    score_baseline: float = Field(default=71.0, gt=0.0)
    score_variance: float = Field(default=11.0, ge=0.0)
    score_floor: int = Field(default=40, ge=0)
    margin_scale: float = Field(default=12.0, ge=0.0)
    quality_threshold: float = 75.0
    sos_factor: float = Field(default=0.02, ge=0.0)

    def outcome(self) -> OutcomeConfig:
        """Return the engine's frozen outcome constants."""
        names = {f.name for f in dataclasses.fields(OutcomeConfig)}
        return OutcomeConfig(**self.model_dump(include=names))

    @classmethod
    def from_json(cls, path: Path) -> LeagueConfig:
        """Load and validate a JSON override file.

        Raises:
            FileNotFoundError: If *path* does not exist.
            pydantic.ValidationError: If a value is out of range.
        """
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        return cls.model_validate_json(path.read_text())
