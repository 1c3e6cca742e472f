"""Distribution, line sensitivity and minutes stability scoring."""

from __future__ import annotations

from typing import Optional, Sequence

from .config import Settings, get_settings
from .schemas import (
    DistributionBlock,
    DistributionBucket,
    EnrichedGameLog,
    SensitivityBlock,
    StabilityBlock,
)
from .stats import mean, rate, round_half_up, standard_deviation


def volatility_score(std_dev: float, avg: float, multiplier: Optional[float] = None) -> int:
    """Coefficient of variation scaled onto 0-100; ``0`` when the mean is zero."""

    if avg <= 0:
        return 0
    factor = get_settings().VOLATILITY_MULTIPLIER if multiplier is None else multiplier
    return int(min(100, round_half_up((std_dev / avg) * factor)))


def build_buckets(
    values: Sequence[float],
    line: float,
    std_dev: float,
    *,
    bucket_count: Optional[int] = None,
    min_width: Optional[float] = None,
) -> list[DistributionBucket]:
    """Histogram centred on ``line``: half the buckets below it, half at or above.

    Buckets are half-open ``[min, max)``. Values outside every bucket, including
    ties to the top edge, land in the last bucket.
    """

    if not values:
        return []

    settings = get_settings()
    count = settings.HISTOGRAM_BUCKETS if bucket_count is None else bucket_count
    width = max(settings.MIN_BUCKET_WIDTH if min_width is None else min_width, std_dev / 2)
    half = count // 2

    edges = [(line + offset * width, line + (offset + 1) * width) for offset in range(-half, count - half)]
    counts = [0] * len(edges)
    for value in values:
        for index, (low, high) in enumerate(edges):
            if low <= value < high:
                counts[index] += 1
                break
        else:
            counts[-1] += 1

    return [
        DistributionBucket(label=f"{low:.1f}-{high:.1f}", min=low, max=high, count=counts[index])
        for index, (low, high) in enumerate(edges)
    ]


def compute_distribution(logs: Sequence[EnrichedGameLog], line: float) -> DistributionBlock:
    """Mean, spread, histogram and volatility of the stat over ``logs``."""

    if not logs:
        return DistributionBlock()

    values = [log.stat_value for log in logs]
    avg = mean(values)
    std_dev = standard_deviation(values, avg)

    return DistributionBlock(
        buckets=tuple(build_buckets(values, line, std_dev)),
        mean=round_half_up(avg, 1),
        std_dev=round_half_up(std_dev, 1),
        volatility_score=volatility_score(std_dev, avg),
    )


def compute_sensitivity(
    logs: Sequence[EnrichedGameLog],
    line: float,
    settings: Optional[Settings] = None,
) -> SensitivityBlock:
    """How often results finish near the line or exactly on it."""

    if not logs:
        return SensitivityBlock()

    cfg = settings or get_settings()
    near = sum(1 for log in logs if abs(log.stat_value - line) <= cfg.NEAR_LINE_TOLERANCE)
    pushes = sum(1 for log in logs if log.outcome == "PUSH")
    near_rate = rate(near, len(logs))
    push_rate = rate(pushes, len(logs))
    score = round_half_up((near_rate * cfg.NEAR_LINE_WEIGHT + push_rate * cfg.PUSH_WEIGHT) * 100)

    return SensitivityBlock(
        near_line_rate=round_half_up(near_rate, 3),
        push_rate=round_half_up(push_rate, 3),
        line_sensitivity_score=int(min(100, score)),
    )


def reliability_notes(
    minutes: Sequence[float],
    avg_minutes: float,
    std_dev: float,
    settings: Optional[Settings] = None,
) -> list[str]:
    """Threshold notes about minutes usage, in rule order."""

    cfg = settings or get_settings()
    notes: list[str] = []

    if std_dev > cfg.MINUTES_STD_HIGH:
        notes.append("Minutes highly volatile recently")
    elif std_dev > cfg.MINUTES_STD_MODERATE:
        notes.append("Minutes moderately volatile")

    if avg_minutes < cfg.LIMITED_MINUTES_AVG:
        notes.append("Limited minutes per game")

    reduced = sum(1 for value in minutes if value < avg_minutes - cfg.REDUCED_MINUTES_GAP)
    if reduced >= cfg.REDUCED_MINUTES_MIN_GAMES:
        notes.append(f"{reduced} games with significantly reduced minutes")

    return notes


def compute_stability(
    logs: Sequence[EnrichedGameLog],
    settings: Optional[Settings] = None,
) -> StabilityBlock:
    """Consistency of minutes over ``logs`` (normally the last ten games)."""

    if not logs:
        return StabilityBlock()

    minutes = [log.minutes for log in logs]
    avg_minutes = mean(minutes)
    std_dev = standard_deviation(minutes, avg_minutes)
    score = max(0, round_half_up(100 - std_dev * 10))

    return StabilityBlock(
        minutes_std_dev_last10=round_half_up(std_dev, 1),
        minutes_stability_score=int(score),
        reliability_notes=tuple(reliability_notes(minutes, avg_minutes, std_dev, settings)),
    )
