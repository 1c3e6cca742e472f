"""Window selection and hit-rate summaries."""

from __future__ import annotations

import datetime as dt
from typing import Iterable, Optional, Sequence

from .schemas import EnrichedGameLog, HitRateSummary
from .stats import mean, median, rate


def summarize_hit_rate(logs: Iterable[EnrichedGameLog]) -> HitRateSummary:
    """Reduce a window of enriched logs to its record against the line.

    Pushes count toward the sample but not toward the hit-rate denominator.
    An empty window yields an all-zero summary.
    """

    sample = list(logs)
    if not sample:
        return HitRateSummary()

    wins = sum(1 for log in sample if log.outcome == "WIN")
    losses = sum(1 for log in sample if log.outcome == "LOSS")
    pushes = len(sample) - wins - losses
    values = [log.stat_value for log in sample]

    return HitRateSummary(
        sample_size=len(sample),
        wins=wins,
        losses=losses,
        pushes=pushes,
        hit_rate=rate(wins, wins + losses),
        avg=mean(values),
        median=median(values),
    )


def logs_before(logs: Iterable[EnrichedGameLog], game_date: dt.date) -> list[EnrichedGameLog]:
    """Logs strictly before ``game_date``, most recent first."""

    eligible = [log for log in logs if log.date < game_date]
    return sorted(eligible, key=lambda log: log.date, reverse=True)


def select_window(logs: Sequence[EnrichedGameLog], size: Optional[int]) -> list[EnrichedGameLog]:
    """First ``size`` entries of a most-recent-first sequence; ``None`` keeps all."""

    if size is None:
        return list(logs)
    return list(logs[:size])
