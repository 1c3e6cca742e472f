"""Tests for trend analysis."""

from __future__ import annotations

import pytest

from prop_card.trends import analyze_trend, classify_trend_direction, compute_minutes_trend, rolling_average


def test_classify_trend_direction_uses_strict_threshold() -> None:
    assert classify_trend_direction(0.3) == "FLAT"
    assert classify_trend_direction(-0.3) == "FLAT"
    assert classify_trend_direction(0.31) == "UP"
    assert classify_trend_direction(-0.31) == "DOWN"
    assert classify_trend_direction(0.5, threshold=1.0) == "FLAT"


def test_rolling_average_uses_available_points_at_start() -> None:
    assert rolling_average([3, 6, 9, 12], 3) == pytest.approx([3.0, 4.5, 6.0, 9.0])


def test_rising_scoring_trends_up(make_logs, enrich) -> None:
    logs = enrich(make_logs(list(range(10, 20))), line=14.5)

    trend = analyze_trend(logs, "PTS")

    assert trend.trend_slope_last10 == pytest.approx(1.0)
    assert trend.trend_direction == "UP"
    assert [row.stat_value for row in trend.last5_game_logs] == [19, 18, 17, 16, 15]
    assert [point.y for point in trend.rolling_avg_last10][:3] == pytest.approx([10.0, 10.5, 11.0])
    assert trend.rolling_avg_last10[0].label == "Game 1"
    assert trend.rolling_avg_last10[0].x == "2024-01-01"
    assert len(trend.minutes_last5) == 5


def test_only_last_ten_games_are_charted(make_logs, enrich) -> None:
    logs = enrich(make_logs([40] * 5 + [20] * 10), line=25.5)

    trend = analyze_trend(logs, "PTS")

    assert len(trend.rolling_avg_last10) == 10
    assert trend.trend_direction == "FLAT"


def test_empty_logs_give_flat_defaults() -> None:
    trend = analyze_trend([], "PTS")
    assert trend.trend_direction == "FLAT"
    assert trend.trend_slope_last10 == 0
    assert trend.last5_game_logs == ()
    assert trend.minutes_trend.change == 0


def test_minutes_trend_compares_last_five_to_season(make_logs, enrich) -> None:
    logs = enrich(make_logs([20] * 20, minutes=[20.0] * 15 + [36.0] * 5), line=19.5)

    trend = compute_minutes_trend(logs[:10], logs)

    assert trend.last5_avg == pytest.approx(36.0)
    assert trend.season_avg == pytest.approx(24.0)
    assert trend.change == pytest.approx(12.0)
    assert trend.change_percent == pytest.approx(50.0)
