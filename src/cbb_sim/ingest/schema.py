"""Pydantic v2 schema models for league entities.

Defines the core data structures (RosterEntry, Team and Game) that form
the internal representation layer.  Roster connectors (CSV, Wikipedia)
produce :class:`RosterEntry` records; the simulation core turns them into
:class:`Team` objects and mutates those in place as games are played; the
repository persists both teams and games.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MIN_RATING: float = 30.0
MAX_RATING: float = 95.0

GameKind = Literal["regular", "conference_tournament", "national"]


def clamp_rating(rating: float) -> float:
    """Clamp a raw rating into the supported ``[30, 95]`` band."""
    return max(MIN_RATING, min(MAX_RATING, rating))


class RosterEntry(BaseModel):
    """One roster row as supplied by a data source."""

    model_config = ConfigDict(populate_by_name=True)

    team_id: int = Field(..., ge=0, alias="TeamID")
    school: str = Field(..., min_length=1, alias="School")
    nickname: str = Field(default="", alias="Nickname")
    conference: str | None = Field(default=None, alias="Conference")
    rating: float = Field(default=50.0, ge=MIN_RATING, le=MAX_RATING, alias="Rating")

    @field_validator("conference", mode="before")
    @classmethod
    def _blank_conference_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Team(BaseModel):
    """A college basketball team and its accumulated season state.

    Season counters are only ever changed by
    :func:`cbb_sim.sim.outcome.simulate_game`.
    """

    team_id: int = Field(..., ge=0)
    school: str = Field(..., min_length=1)
    nickname: str = ""
    conference: str | None = None
    rating: float = Field(..., ge=MIN_RATING, le=MAX_RATING)

    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    conf_wins: int = Field(default=0, ge=0)
    conf_losses: int = Field(default=0, ge=0)
    sos: float = 0.0
    resume: int = Field(default=0, ge=0)
    seed_note: str = ""

    @classmethod
    def from_entry(cls, entry: RosterEntry) -> Team:
        """Create a fresh (zero-record) team from a roster entry."""
        return cls(
            team_id=entry.team_id,
            school=entry.school,
            nickname=entry.nickname,
            conference=entry.conference,
            rating=entry.rating,
        )

    @property
    def name(self) -> str:
        """Display name: school followed by nickname."""
        return f"{self.school} {self.nickname}".strip()

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}"

    @property
    def conf_record(self) -> str:
        return f"{self.conf_wins}-{self.conf_losses}"


class Game(BaseModel):
    """A scheduled (and possibly played) game.

    ``conference`` is ``None`` for non-conference and national-bracket games.
    ``round_index`` is ``None`` for regular-season games and the zero-based
    round for tournament games.
    """

    home_id: int = Field(..., ge=0)
    away_id: int = Field(..., ge=0)
    conference: str | None = None
    week: int = Field(default=0, ge=0)
    neutral: bool = False
    played: bool = False
    home_score: int = Field(default=0, ge=0)
    away_score: int = Field(default=0, ge=0)
    kind: GameKind = "regular"
    round_index: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_game_integrity(self) -> Game:
        if self.home_id == self.away_id:
            msg = f"home_id and away_id must differ (both are {self.home_id})"
            raise ValueError(msg)
        if self.played and self.home_score == self.away_score:
            msg = f"a played game cannot end tied ({self.home_score}-{self.away_score})"
            raise ValueError(msg)
        return self

    @property
    def winner_id(self) -> int | None:
        """Id of the winning team, or ``None`` if the game is unplayed."""
        if not self.played:
            return None
        return self.home_id if self.home_score > self.away_score else self.away_id

    @property
    def loser_id(self) -> int | None:
        """Id of the losing team, or ``None`` if the game is unplayed."""
        if not self.played:
            return None
        return self.away_id if self.home_score > self.away_score else self.home_id

    def involves(self, team_id: int) -> bool:
        return team_id in (self.home_id, self.away_id)
