"""Home/away and rest-day splits."""

from __future__ import annotations

from typing import Sequence

from .hit_rate import summarize_hit_rate
from .schemas import EnrichedGameLog, SplitsBlock


def rest_bucket(rest_days: int) -> str:
    """Name of the rest split a game belongs to."""

    if rest_days <= 0:
        return "rest0"
    if rest_days == 1:
        return "rest1"
    return "rest2plus"


def compute_splits(logs: Sequence[EnrichedGameLog]) -> SplitsBlock:
    """Summarize each home/away and rest partition of ``logs`` independently."""

    partitions: dict[str, list[EnrichedGameLog]] = {
        "home": [],
        "away": [],
        "rest0": [],
        "rest1": [],
        "rest2plus": [],
    }
    for log in logs:
        partitions[log.home_away].append(log)
        partitions[rest_bucket(log.rest_days)].append(log)

    return SplitsBlock(**{name: summarize_hit_rate(games) for name, games in partitions.items()})
