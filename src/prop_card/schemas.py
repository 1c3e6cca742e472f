"""Pydantic schemas describing game data, queries and the computed prop card."""

from __future__ import annotations

import datetime as dt
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

StatType = Literal["PTS", "REB", "AST"]
Side = Literal["OVER", "UNDER"]
Outcome = Literal["WIN", "LOSS", "PUSH"]
TrendDirection = Literal["UP", "DOWN", "FLAT"]
HomeAway = Literal["home", "away"]

_STAT_FIELDS: dict[str, str] = {"PTS": "pts", "REB": "reb", "AST": "ast"}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Boundary records supplied by the storage layer
# ---------------------------------------------------------------------------


class GameLog(_Frozen):
    """Box-score line for one player in one game."""

    player_id: str = Field(..., description="Identifier of the player the line belongs to.")
    game_id: Optional[str] = Field(None, description="Source-specific game identifier.")
    date: dt.date = Field(..., description="Calendar day the game was played.")
    team_id: str = Field("", description="Team the player suited up for.")
    opponent_id: str = Field(..., description="Opponent team identifier or abbreviation.")
    home_away: HomeAway = Field(..., description="Whether the player's team was home or away.")
    minutes: float = Field(..., ge=0.0, description="Minutes played.")
    pts: int = Field(..., ge=0, description="Points scored.")
    reb: int = Field(..., ge=0, description="Total rebounds.")
    ast: int = Field(..., ge=0, description="Assists.")

    @field_validator("player_id", "team_id", "opponent_id")
    @classmethod
    def _strip_strings(cls, value: str) -> str:
        """Trim whitespace from string-based fields."""

        return value.strip()

    @field_validator("home_away", mode="before")
    @classmethod
    def _lower_home_away(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def stat(self, stat_type: str) -> int:
        """Return the counting stat selected by ``stat_type``."""

        return getattr(self, _STAT_FIELDS[stat_type])


class EnrichedGameLog(GameLog):
    """Game log annotated with the per-query outcome and rest days."""

    stat_value: float = Field(..., description="Counting stat selected by the query.")
    outcome: Outcome = Field(..., description="Result of the stat against the query line.")
    rest_days: int = Field(..., ge=0, description="Days off before this game.")


class Player(_Frozen):
    id: str
    name: str
    team_id: str
    position: str = ""

    @field_validator("id", "name", "team_id", "position")
    @classmethod
    def _strip_strings(cls, value: str) -> str:
        return value.strip()


class Team(_Frozen):
    id: str
    name: str
    abbreviation: str


class InjuryEntry(_Frozen):
    """A single line of an injury report."""

    player_name: str = Field(..., description="Player name as listed on the report.")
    player_id: Optional[str] = Field(None, description="Resolved player identifier, if known.")
    team_id: Optional[str] = Field(None, description="Team the listed player belongs to.")
    status: str = Field(..., description="Designation such as OUT or QUESTIONABLE.")
    injury_type: str = Field("", description="Body part or reason.")
    notes: Optional[str] = Field(None, description="Free-form report notes.")

    @field_validator("status", mode="before")
    @classmethod
    def _upper_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class InjurySnapshot(_Frozen):
    """Most recent injury report across the league."""

    snapshot_at: dt.datetime
    entries: tuple[InjuryEntry, ...] = ()


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class PropQuery(_Frozen):
    """Structured request for a prop card."""

    player_id: str = Field(..., min_length=1, description="Resolved player identifier.")
    stat_type: StatType = Field(..., description="Stat category compared with the line.")
    line: float = Field(..., gt=0.0, description="Posted line; must be positive.")
    side: Side = Field(..., description="OVER or UNDER.")
    game_date: Optional[dt.date] = Field(
        None, description="Target game date; defaults to the as-of date of the request."
    )

    @field_validator("stat_type", "side", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class ParsedQuery(_Frozen):
    """Result of parsing free text; unvalidated by design."""

    player_name: str
    stat_type: str
    line: float
    side: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    game_date: Optional[dt.date] = None


class ValidationResult(_Frozen):
    valid: bool
    errors: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Card sub-reports
# ---------------------------------------------------------------------------


class HitRateSummary(_Frozen):
    """Record of a window of games against the line."""

    sample_size: int = Field(0, ge=0)
    wins: int = Field(0, ge=0)
    losses: int = Field(0, ge=0)
    pushes: int = Field(0, ge=0)
    hit_rate: float = Field(0.0, ge=0.0, le=1.0, description="wins / (wins + losses).")
    avg: float = 0.0
    median: float = 0.0


class GameLogRow(_Frozen):
    date: dt.date
    opponent: str
    home_away: HomeAway
    minutes: float
    stat_value: float
    outcome: Outcome
    rest_days: int


class ChartPoint(_Frozen):
    x: str
    y: float
    label: Optional[str] = None


class MinutesTrend(_Frozen):
    last5_avg: float = 0.0
    season_avg: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0


class TrendBlock(_Frozen):
    last5_game_logs: tuple[GameLogRow, ...] = ()
    rolling_avg_last10: tuple[ChartPoint, ...] = ()
    minutes_last5: tuple[ChartPoint, ...] = ()
    trend_slope_last10: float = 0.0
    trend_direction: TrendDirection = "FLAT"
    minutes_trend: MinutesTrend = Field(default_factory=MinutesTrend)


class SplitsBlock(_Frozen):
    home: HitRateSummary
    away: HitRateSummary
    rest0: HitRateSummary
    rest1: HitRateSummary
    rest2plus: HitRateSummary


class DistributionBucket(_Frozen):
    label: str
    min: float
    max: float
    count: int = Field(0, ge=0)


class DistributionBlock(_Frozen):
    buckets: tuple[DistributionBucket, ...] = ()
    mean: float = 0.0
    std_dev: float = 0.0
    volatility_score: int = Field(0, ge=0, le=100)


class SensitivityBlock(_Frozen):
    near_line_rate: float = Field(0.0, ge=0.0, le=1.0)
    push_rate: float = Field(0.0, ge=0.0, le=1.0)
    line_sensitivity_score: int = Field(0, ge=0, le=100)


class StabilityBlock(_Frozen):
    minutes_std_dev_last10: float = 0.0
    minutes_stability_score: int = Field(0, ge=0, le=100)
    reliability_notes: tuple[str, ...] = ()


class ProBlock(_Frozen):
    splits: SplitsBlock
    distribution: DistributionBlock
    sensitivity: SensitivityBlock
    stability: StabilityBlock


class TeammateOut(_Frozen):
    player_id: str = ""
    name: str
    status: str


class InjuryContext(_Frozen):
    player_status: Optional[str] = None
    player_notes: Optional[str] = None
    teammates_out: tuple[TeammateOut, ...] = ()
    last_updated_at: Optional[dt.datetime] = None


class ScheduleContext(_Frozen):
    back_to_back: bool
    rest_days: int = Field(..., ge=0)
    last_game_date: Optional[dt.date] = None


class ContextBlock(_Frozen):
    injury_status: Optional[InjuryContext] = None
    schedule_context: Optional[ScheduleContext] = None


class CardMeta(_Frozen):
    player_id: str
    player_name: str
    team_abbr: str
    opponent_abbr: Optional[str] = None
    stat_type: StatType
    line: float
    side: Side
    generated_at: dt.datetime
    game_date: dt.date
    disclaimer: str


class CardSummary(_Frozen):
    last10: HitRateSummary
    last20: HitRateSummary
    season: HitRateSummary
    pushes_included: bool = True
    recent_outcomes: tuple[Outcome, ...] = Field((), description="Last-10 outcomes, most recent first.")
    quick_insights: tuple[str, ...] = ()

    @field_validator("quick_insights")
    @classmethod
    def _three_or_none(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(value) not in (0, 3):
            raise ValueError("quick_insights must hold exactly 3 entries once generated")
        return value


class DebugNotes(_Frozen):
    sample_size_notes: tuple[str, ...] = ()
    data_quality_warnings: tuple[str, ...] = ()


class PropCard(_Frozen):
    """Complete research card for one query."""

    meta: CardMeta
    summary: CardSummary
    trend: TrendBlock
    pro: ProBlock
    context: ContextBlock = Field(default_factory=ContextBlock)
    debug: Optional[DebugNotes] = None

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible form with absent optional blocks omitted."""

        return self.model_dump(mode="json", exclude_none=True)
