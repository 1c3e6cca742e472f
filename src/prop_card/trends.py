"""Recent-form trend analysis over the last ten games."""

from __future__ import annotations

from typing import Optional, Sequence

from .config import LAST_5, LAST_10, get_settings
from .schemas import (
    ChartPoint,
    EnrichedGameLog,
    GameLogRow,
    MinutesTrend,
    StatType,
    TrendBlock,
    TrendDirection,
)
from .stats import linear_regression_slope, mean, round_half_up


def classify_trend_direction(slope: float, threshold: Optional[float] = None) -> TrendDirection:
    """Map a per-game slope onto UP, DOWN or FLAT."""

    limit = get_settings().TREND_SLOPE_THRESHOLD if threshold is None else threshold
    if slope > limit:
        return "UP"
    if slope < -limit:
        return "DOWN"
    return "FLAT"


def rolling_average(values: Sequence[float], window: int) -> list[float]:
    """Trailing mean over ``window`` values; early points use what is available."""

    averages: list[float] = []
    for index in range(len(values)):
        start = max(0, index - window + 1)
        averages.append(mean(values[start : index + 1]))
    return averages


def compute_minutes_trend(
    recent_logs: Sequence[EnrichedGameLog],
    season_logs: Sequence[EnrichedGameLog],
) -> MinutesTrend:
    """Compare last-five minutes with the season average (both most-recent-first)."""

    last5_avg = mean([log.minutes for log in recent_logs[:LAST_5]])
    season_avg = mean([log.minutes for log in season_logs])
    change = last5_avg - season_avg
    change_percent = (change / season_avg) * 100 if season_avg > 0 else 0.0

    return MinutesTrend(
        last5_avg=round_half_up(last5_avg, 1),
        season_avg=round_half_up(season_avg, 1),
        change=round_half_up(change, 1),
        change_percent=round_half_up(change_percent, 1),
    )


def _row(log: EnrichedGameLog) -> GameLogRow:
    return GameLogRow(
        date=log.date,
        opponent=log.opponent_id,
        home_away=log.home_away,
        minutes=log.minutes,
        stat_value=log.stat_value,
        outcome=log.outcome,
        rest_days=log.rest_days,
    )


def analyze_trend(
    logs: Sequence[EnrichedGameLog],
    stat_type: StatType,
    season_logs: Optional[Sequence[EnrichedGameLog]] = None,
    *,
    slope_threshold: Optional[float] = None,
    rolling_window: Optional[int] = None,
) -> TrendBlock:
    """Build the trend block from most-recent-first logs.

    Only the ten most recent games are considered. Chart series and the
    regression run oldest to newest; the display rows stay newest first.
    ``stat_type`` is accepted for parity with the card query; the enriched logs
    already carry the selected stat.
    """

    settings = get_settings()
    window = settings.ROLLING_WINDOW if rolling_window is None else rolling_window

    last10 = list(logs[:LAST_10])
    last5 = last10[:LAST_5]
    chronological = list(reversed(last10))
    values = [log.stat_value for log in chronological]

    rolling = [
        ChartPoint(x=log.date.isoformat(), y=round_half_up(avg, 1), label=f"Game {index + 1}")
        for index, (log, avg) in enumerate(zip(chronological, rolling_average(values, window)))
    ]
    minutes_points = [
        ChartPoint(x=log.date.isoformat(), y=log.minutes, label=f"Game {index + 1}")
        for index, log in enumerate(reversed(last5))
    ]

    slope = linear_regression_slope(values)
    season = list(season_logs) if season_logs is not None else list(logs)

    return TrendBlock(
        last5_game_logs=tuple(_row(log) for log in last5),
        rolling_avg_last10=tuple(rolling),
        minutes_last5=tuple(minutes_points),
        trend_slope_last10=slope,
        trend_direction=classify_trend_direction(slope, slope_threshold),
        minutes_trend=compute_minutes_trend(last10, season),
    )
