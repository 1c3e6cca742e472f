"""Plain-text rendering of prop cards and batch results."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import pandas as pd

from .pipeline import BatchResult
from .schemas import HitRateSummary, PropCard

BATCH_COLUMNS: tuple[str, ...] = (
    "query",
    "player",
    "stat",
    "side",
    "line",
    "l10_hit_rate",
    "l20_hit_rate",
    "season_hit_rate",
    "l10_avg",
    "trend",
    "volatility",
    "error",
)

__all__ = ["format_card_text", "batch_frame", "format_batch_table"]


def _normalize_string(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _format_float(value: float) -> str:
    if math.isfinite(value) and math.isclose(value, round(value)):
        return f"{int(round(value))}"
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def _format_numeric(value: object) -> str:
    if value is None:
        return "-"
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        text = _normalize_string(value)
        return text or "-"
    if math.isnan(numeric):
        return "-"
    return _format_float(numeric)


def _format_percent(value: object) -> str:
    if value is None:
        return "-"
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        text = _normalize_string(value)
        return text or "-"
    if math.isnan(numeric):
        return "-"
    return f"{numeric * 100:.1f}"


def _compute_widths(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> list[int]:
    widths = [len(header) for header in headers]
    for row in rows:
        for index, value in enumerate(row):
            widths[index] = max(widths[index], len(value))
    return widths


def _render(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    widths = _compute_widths(headers, rows)
    header_line = " ".join(header.ljust(width) for header, width in zip(headers, widths))
    separator_line = " ".join("-" * width for width in widths)
    body_lines = [" ".join(value.ljust(width) for value, width in zip(row, widths)) for row in rows]
    return "\n".join([header_line, separator_line, *body_lines])


def _window_row(name: str, summary: HitRateSummary) -> list[str]:
    return [
        name,
        str(summary.sample_size),
        f"{summary.wins}-{summary.losses}-{summary.pushes}",
        _format_percent(summary.hit_rate),
        _format_numeric(summary.avg),
        _format_numeric(summary.median),
    ]


def format_card_text(card: PropCard) -> str:
    """Render a card as a compact fixed-width text summary."""

    meta = card.meta
    matchup = f" vs {meta.opponent_abbr}" if meta.opponent_abbr else ""
    lines = [
        f"{meta.player_name} ({meta.team_abbr}{matchup}) {meta.side} {_format_float(meta.line)} {meta.stat_type}",
        f"Game date: {meta.game_date.isoformat()}",
        "",
        _render(
            ["Window", "Games", "W-L-P", "Hit%", "Avg", "Median"],
            [
                _window_row("Last 10", card.summary.last10),
                _window_row("Last 20", card.summary.last20),
                _window_row("Season", card.summary.season),
            ],
        ),
        "",
        f"Trend: {card.trend.trend_direction} (slope {card.trend.trend_slope_last10:+.2f})",
        f"Volatility: {card.pro.distribution.volatility_score}/100  "
        f"Line sensitivity: {card.pro.sensitivity.line_sensitivity_score}/100  "
        f"Minutes stability: {card.pro.stability.minutes_stability_score}/100",
    ]

    schedule = card.context.schedule_context
    if schedule is not None:
        tag = " (back-to-back)" if schedule.back_to_back else ""
        lines.append(f"Rest days: {schedule.rest_days}{tag}")

    if card.summary.quick_insights:
        lines.append("")
        lines.extend(f"- {insight}" for insight in card.summary.quick_insights)

    lines.extend(["", meta.disclaimer])
    return "\n".join(lines)


def batch_frame(results: Iterable[BatchResult]) -> pd.DataFrame:
    """One row per batch result; failed queries carry only ``query`` and ``error``."""

    rows: list[dict[str, object]] = []
    for result in results:
        if result.card is None:
            rows.append({"query": result.query, "error": result.error})
            continue
        card = result.card
        rows.append(
            {
                "query": result.query,
                "player": card.meta.player_name,
                "stat": card.meta.stat_type,
                "side": card.meta.side,
                "line": card.meta.line,
                "l10_hit_rate": card.summary.last10.hit_rate,
                "l20_hit_rate": card.summary.last20.hit_rate,
                "season_hit_rate": card.summary.season.hit_rate,
                "l10_avg": card.summary.last10.avg,
                "trend": card.trend.trend_direction,
                "volatility": card.pro.distribution.volatility_score,
                "error": None,
            }
        )
    return pd.DataFrame(rows, columns=list(BATCH_COLUMNS))


def format_batch_table(df: pd.DataFrame) -> str:
    """Return a fixed-width table summarising a batch frame."""

    if df is None or df.empty:
        return "No results available."

    missing = [column for column in BATCH_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"DataFrame missing required columns: {', '.join(missing)}")

    headers = ["Player", "Stat", "Side", "Line", "L10%", "L20%", "Szn%", "L10 Avg", "Trend", "Vol"]
    rows: list[list[str]] = []
    for _, row in df.iterrows():
        error = row["error"]
        if isinstance(error, str) and error:
            rows.append([_normalize_string(row["query"]), "-", "-", "-", "-", "-", "-", "-", "ERROR", "-"])
            continue
        rows.append(
            [
                _normalize_string(row["player"]),
                _normalize_string(row["stat"]),
                _normalize_string(row["side"]).upper(),
                _format_numeric(row["line"]),
                _format_percent(row["l10_hit_rate"]),
                _format_percent(row["l20_hit_rate"]),
                _format_percent(row["season_hit_rate"]),
                _format_numeric(row["l10_avg"]),
                _normalize_string(row["trend"]),
                _format_numeric(row["volatility"]),
            ]
        )
    return _render(headers, rows)
