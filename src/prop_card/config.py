"""Static configuration and tunable thresholds for the prop card engine."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Final

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)

# Load .env if present (non-fatal if missing)
load_dotenv(dotenv_path=Path(".env"), override=False)

# Stat categories tracked on every game log.
STAT_TYPES: Final[tuple[str, ...]] = ("PTS", "REB", "AST")
# Sides of a line.
SIDES: Final[tuple[str, ...]] = ("OVER", "UNDER")

# Terms that may never appear in generated insight text (case-insensitive substring).
BANNED_TERMS: Final[tuple[str, ...]] = (
    "lock",
    "best bet",
    "guaranteed",
    "free money",
    "profit",
    "roi",
    "cash",
    "bankroll",
    "max bet",
    "smash",
    "hammer",
    "play",
    "fade",
    "tail",
)

STANDARD_DISCLAIMER: Final[str] = (
    "This is a research tool for informational purposes only. Not betting advice. "
    "PropPulse does not recommend, endorse, or guarantee outcomes. "
    "Past performance does not predict future results."
)

# Free-text synonyms recognised by the query parser.
STAT_SYNONYMS: Final[dict[str, str]] = {
    "pts": "PTS",
    "pt": "PTS",
    "point": "PTS",
    "points": "PTS",
    "reb": "REB",
    "rebound": "REB",
    "rebounds": "REB",
    "board": "REB",
    "boards": "REB",
    "ast": "AST",
    "assist": "AST",
    "assists": "AST",
    "dime": "AST",
    "dimes": "AST",
}
OVER_TOKENS: Final[tuple[str, ...]] = ("over", "o", "above", ">")
UNDER_TOKENS: Final[tuple[str, ...]] = ("under", "u", "below", "<")

# Nicknames mapped to canonical player names.
PLAYER_ALIASES: Final[dict[str, str]] = {
    "lebron": "LeBron James",
    "curry": "Stephen Curry",
    "steph": "Stephen Curry",
    "durant": "Kevin Durant",
    "kd": "Kevin Durant",
    "giannis": "Giannis Antetokounmpo",
    "jokic": "Nikola Jokic",
    "luka": "Luka Doncic",
    "embiid": "Joel Embiid",
    "tatum": "Jayson Tatum",
    "booker": "Devin Booker",
    "ad": "Anthony Davis",
    "dame": "Damian Lillard",
    "ant": "Anthony Edwards",
    "ja": "Ja Morant",
}

# Injury designation that removes a teammate from the rotation.
INJURY_OUT_STATUS: Final[str] = "OUT"

# Window sizes used throughout the card.
LAST_10: Final[int] = 10
LAST_20: Final[int] = 20
LAST_5: Final[int] = 5


class Settings(BaseSettings):
    """Runtime thresholds loaded from env with defaults taken from the card rules."""

    model_config = SettingsConfigDict(
        env_prefix="PROP_CARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    LOG_LEVEL: str = Field(default="INFO")

    # Schedule
    FIRST_GAME_REST_DAYS: int = Field(default=3, ge=0)

    # Trend
    ROLLING_WINDOW: int = Field(default=3, ge=1)
    TREND_SLOPE_THRESHOLD: float = Field(default=0.3, ge=0.0)
    STRONG_TREND_SLOPE: float = Field(default=1.0, ge=0.0)
    MINUTES_SWING_THRESHOLD: float = Field(default=8.0, ge=0.0)

    # Distribution
    HISTOGRAM_BUCKETS: int = Field(default=8, ge=2)
    MIN_BUCKET_WIDTH: float = Field(default=2.0, gt=0.0)
    VOLATILITY_MULTIPLIER: float = Field(default=300.0, gt=0.0)

    # Line sensitivity
    NEAR_LINE_TOLERANCE: float = Field(default=1.0, ge=0.0)
    NEAR_LINE_WEIGHT: float = Field(default=0.7, ge=0.0)
    PUSH_WEIGHT: float = Field(default=0.3, ge=0.0)

    # Minutes stability
    MINUTES_STD_HIGH: float = Field(default=6.0)
    MINUTES_STD_MODERATE: float = Field(default=3.0)
    LIMITED_MINUTES_AVG: float = Field(default=20.0)
    REDUCED_MINUTES_GAP: float = Field(default=5.0)
    REDUCED_MINUTES_MIN_GAMES: int = Field(default=3, ge=1)

    # Insights
    LIMITED_SAMPLE_SIZE: int = Field(default=10, ge=1)
    STREAK_MIN_LENGTH: int = Field(default=3, ge=2)
    SPLIT_DIFF_THRESHOLD: float = Field(default=0.2, ge=0.0)
    SPLIT_MIN_GAMES: int = Field(default=3, ge=1)
    REST_SPLIT_MIN_GAMES: int = Field(default=2, ge=1)
    HIGH_SENSITIVITY_SCORE: int = Field(default=50, ge=0, le=100)
    HIGH_VOLATILITY_SCORE: int = Field(default=70, ge=0, le=100)

    # Cache / directory
    CACHE_TTL_SECONDS: float = Field(default=1800.0, gt=0.0)
    CACHE_MAX_ENTRIES: int = Field(default=512, ge=1)
    MATCH_SCORE_CUTOFF: float = Field(default=85.0, ge=0.0, le=100.0)

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return str(v).strip().upper()


@lru_cache()
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
