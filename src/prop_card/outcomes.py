"""Per-game outcome classification and game log enrichment."""

from __future__ import annotations

import datetime as dt
from typing import Iterable, Optional

from .config import get_settings
from .schemas import EnrichedGameLog, GameLog, Outcome, PropQuery, Side


def evaluate_outcome(stat_value: float, line: float, side: Side) -> Outcome:
    """Classify ``stat_value`` against ``line`` for the given side.

    Equality is exact, so a half-point line can never push on an integer stat.
    """

    if stat_value == line:
        return "PUSH"
    if side == "OVER":
        return "WIN" if stat_value > line else "LOSS"
    return "WIN" if stat_value < line else "LOSS"


def compute_rest_days(
    current: dt.date,
    previous: Optional[dt.date],
    *,
    first_game_rest_days: Optional[int] = None,
) -> int:
    """Full days off between ``previous`` and ``current`` (game days excluded)."""

    if previous is None:
        if first_game_rest_days is None:
            return get_settings().FIRST_GAME_REST_DAYS
        return first_game_rest_days
    return max(0, (current - previous).days - 1)


def enrich_game_logs(
    game_logs: Iterable[GameLog],
    query: PropQuery,
    *,
    first_game_rest_days: Optional[int] = None,
) -> list[EnrichedGameLog]:
    """Attach stat value, outcome and rest days; result is oldest first."""

    ordered = sorted(game_logs, key=lambda log: log.date)
    enriched: list[EnrichedGameLog] = []
    previous_date: Optional[dt.date] = None
    for log in ordered:
        stat_value = log.stat(query.stat_type)
        enriched.append(
            EnrichedGameLog(
                **log.model_dump(),
                stat_value=stat_value,
                outcome=evaluate_outcome(stat_value, query.line, query.side),
                rest_days=compute_rest_days(
                    log.date, previous_date, first_game_rest_days=first_game_rest_days
                ),
            )
        )
        previous_date = log.date
    return enriched
