"""Deterministic, rule-based insight text for a prop card.

Three insights are always produced, in a fixed order: hit rate, trend, then
context/volatility. Each slot is filled by the first candidate sentence that
passes the banned-term screen; a neutral fallback closes every slot so the
output length never changes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .config import BANNED_TERMS, Settings, get_settings
from .schemas import HitRateSummary, PropCard
from .stats import round_half_up

INSIGHT_COUNT = 3

_STAT_LABELS = {"PTS": "points", "REB": "rebounds", "AST": "assists"}

_FALLBACKS = (
    "Hit rate data for this line is limited.",
    "Recent performance shows no clear trend.",
    "Distribution data for this line is limited.",
)

DEFAULT_CONTEXT_ORDER: tuple[str, ...] = (
    "injury",
    "back_to_back",
    "home_away",
    "line_sensitivity",
    "volatility",
)


def get_banned_terms() -> tuple[str, ...]:
    """Terms that may never appear in an insight."""

    return BANNED_TERMS


def contains_banned_terms(text: str) -> bool:
    """Case-insensitive substring check against the banned-term list."""

    lowered = text.lower()
    return any(term in lowered for term in BANNED_TERMS)


@dataclass(frozen=True)
class InsightPolicy:
    """Thresholds and context precedence used by the generator."""

    context_order: tuple[str, ...] = DEFAULT_CONTEXT_ORDER
    limited_sample_size: int = 10
    streak_min_length: int = 3
    minutes_swing_threshold: float = 8.0
    strong_trend_slope: float = 1.0
    split_diff_threshold: float = 0.2
    split_min_games: int = 3
    rest_split_min_games: int = 2
    high_sensitivity_score: int = 50
    high_volatility_score: int = 70
    near_line_tolerance: float = 1.0
    extra_rules: dict[str, Callable[[PropCard, "InsightPolicy"], list[str]]] = field(
        default_factory=dict, compare=False
    )

    def __post_init__(self) -> None:
        known = set(_CONTEXT_RULES) | set(self.extra_rules)
        unknown = [name for name in self.context_order if name not in known]
        if unknown:
            raise ValueError(f"Unknown context insight rules: {', '.join(unknown)}")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides: object) -> "InsightPolicy":
        cfg = settings or get_settings()
        values: dict[str, object] = {
            "limited_sample_size": cfg.LIMITED_SAMPLE_SIZE,
            "streak_min_length": cfg.STREAK_MIN_LENGTH,
            "minutes_swing_threshold": cfg.MINUTES_SWING_THRESHOLD,
            "strong_trend_slope": cfg.STRONG_TREND_SLOPE,
            "split_diff_threshold": cfg.SPLIT_DIFF_THRESHOLD,
            "split_min_games": cfg.SPLIT_MIN_GAMES,
            "rest_split_min_games": cfg.REST_SPLIT_MIN_GAMES,
            "high_sensitivity_score": cfg.HIGH_SENSITIVITY_SCORE,
            "high_volatility_score": cfg.HIGH_VOLATILITY_SCORE,
            "near_line_tolerance": cfg.NEAR_LINE_TOLERANCE,
        }
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


def _fmt(value: float) -> str:
    if math.isfinite(value) and math.isclose(value, round(value)):
        return f"{int(round(value))}"
    return f"{round_half_up(value, 1):.1f}"


def _pct(value: float) -> str:
    return f"{int(round_half_up(value * 100))}%"


def _record(summary: HitRateSummary) -> str:
    return f"{summary.wins}/{summary.wins + summary.losses}"


def _first_clean(candidates: Iterable[Optional[str]], fallback: str) -> str:
    for candidate in candidates:
        if candidate and not contains_banned_terms(candidate):
            return candidate
    return fallback


# ---------------------------------------------------------------------------
# Slot 1: hit rate
# ---------------------------------------------------------------------------


def _streak(card: PropCard) -> tuple[str, int]:
    outcomes = card.summary.recent_outcomes
    if not outcomes or outcomes[0] == "PUSH":
        return "", 0
    first = outcomes[0]
    length = 0
    for outcome in outcomes:
        if outcome != first:
            break
        length += 1
    return first, length


def _hit_rate_candidates(card: PropCard, policy: InsightPolicy) -> list[str]:
    summary = card.summary.last10
    side = card.meta.side
    line = _fmt(card.meta.line)
    stat = _STAT_LABELS[card.meta.stat_type]

    if summary.sample_size == 0:
        return [f"No games yet to measure the {side} {line} {stat}: limited sample."]

    decisive = summary.wins + summary.losses
    games = "game" if summary.sample_size == 1 else "games"
    if decisive:
        lead = (
            f"The {side} {line} {stat} hit {_record(summary)} ({_pct(summary.hit_rate)}) "
            f"over the last {summary.sample_size} {games}"
        )
    else:
        lead = (
            f"The {side} {line} {stat} hit 0/0 with no decisive results "
            f"over the last {summary.sample_size} {games}"
        )

    extras: list[str] = []
    if summary.pushes:
        noun = "push" if summary.pushes == 1 else "pushes"
        extras.append(f"{summary.pushes} {noun} excluded")
    if summary.sample_size < policy.limited_sample_size:
        extras.append("limited sample")
    base = f"{lead} ({', '.join(extras)})." if extras else f"{lead}."

    outcome, length = _streak(card)
    if length >= policy.streak_min_length:
        kind = "hit" if outcome == "WIN" else "miss"
        return [f"{base} Currently on a {length}-game {kind} streak.", base]
    return [base]


# ---------------------------------------------------------------------------
# Slot 2: trend
# ---------------------------------------------------------------------------


def _trend_candidates(card: PropCard, policy: InsightPolicy) -> list[str]:
    trend = card.trend
    minutes = trend.minutes_trend
    stat = _STAT_LABELS[card.meta.stat_type]
    candidates: list[str] = []

    if minutes.season_avg > 0 and abs(minutes.change) >= policy.minutes_swing_threshold:
        direction = "up" if minutes.change > 0 else "down"
        candidates.append(
            f"Minutes trending {direction}: {_fmt(minutes.last5_avg)} per game over the last 5 "
            f"vs {_fmt(minutes.season_avg)} season average "
            f"({minutes.change:+.1f} min, {minutes.change_percent:+.1f}%)."
        )

    if trend.trend_direction != "FLAT":
        slope = trend.trend_slope_last10
        strength = "strong" if abs(slope) >= policy.strong_trend_slope else "moderate"
        direction = "upward" if trend.trend_direction == "UP" else "downward"
        candidates.append(
            f"{stat.capitalize()} show a {strength} {direction} trend over the last "
            f"{len(trend.rolling_avg_last10)} games (slope {slope:+.2f} per game)."
        )

    last10 = card.summary.last10
    if last10.sample_size:
        candidates.append(
            f"Recent performance is steady with no strong trend: {_fmt(last10.avg)} {stat} "
            f"per game over the last {last10.sample_size} against a {_fmt(card.meta.line)} line."
        )
    else:
        candidates.append("No recent performance data to establish a trend.")
    return candidates


# ---------------------------------------------------------------------------
# Slot 3: context / volatility
# ---------------------------------------------------------------------------


def _injury_rule(card: PropCard, policy: InsightPolicy) -> list[str]:
    injury = card.context.injury_status
    if injury is None:
        return []
    out = injury.teammates_out
    status = injury.player_status
    own = f"{card.meta.player_name} listed as {status}" if status else ""
    own_noted = f"{own} ({injury.player_notes})" if own and injury.player_notes else own
    mates = ""
    if out:
        names = ", ".join(mate.name for mate in out[:2])
        mates = f"{len(out)} teammate(s) listed OUT ({names})"

    # Richest first, then variants without notes, names and finally without any free text.
    variants = [
        "; ".join(part for part in (own_noted, mates) if part),
        "; ".join(part for part in (own, mates) if part),
        own,
        f"status {status}" if status else "",
        f"{len(out)} teammate(s) listed OUT" if out else "",
    ]
    return [f"Injury report: {text}." for text in variants if text]


def _back_to_back_rule(card: PropCard, policy: InsightPolicy) -> list[str]:
    schedule = card.context.schedule_context
    splits = card.pro.splits
    side = card.meta.side
    rest0, rested = splits.rest0, splits.rest2plus

    if schedule is not None and schedule.back_to_back:
        if rest0.wins + rest0.losses:
            return [
                f"Back-to-back: no rest before this game; the {side} hit {_record(rest0)} "
                f"on zero days of rest over the last {card.summary.last20.sample_size} games."
            ]
        return ["Back-to-back: no rest before this game."]

    if (
        rest0.sample_size >= policy.rest_split_min_games
        and rested.sample_size >= policy.rest_split_min_games
        and abs(rest0.hit_rate - rested.hit_rate) >= policy.split_diff_threshold
    ):
        return [
            f"Rest split: the {side} hit {_pct(rest0.hit_rate)} on back-to-backs "
            f"({_record(rest0)}) vs {_pct(rested.hit_rate)} with 2+ days of rest ({_record(rested)})."
        ]
    return []


def _home_away_rule(card: PropCard, policy: InsightPolicy) -> list[str]:
    home, away = card.pro.splits.home, card.pro.splits.away
    if home.sample_size < policy.split_min_games or away.sample_size < policy.split_min_games:
        return []
    if abs(home.hit_rate - away.hit_rate) < policy.split_diff_threshold:
        return []
    return [
        f"Home/away split: the {card.meta.side} hit {_pct(home.hit_rate)} at home "
        f"({_record(home)}) vs {_pct(away.hit_rate)} away ({_record(away)})."
    ]


def _line_sensitivity_rule(card: PropCard, policy: InsightPolicy) -> list[str]:
    sensitivity = card.pro.sensitivity
    if sensitivity.line_sensitivity_score < policy.high_sensitivity_score:
        return []
    text = (
        f"High line sensitivity: {_pct(sensitivity.near_line_rate)} of the last "
        f"{card.summary.last20.sample_size} games "
        f"finished within {_fmt(policy.near_line_tolerance)} of {_fmt(card.meta.line)}"
    )
    if sensitivity.push_rate > 0:
        text = f"{text}, {_pct(sensitivity.push_rate)} exactly on it"
    return [f"{text}."]


def _volatility_rule(card: PropCard, policy: InsightPolicy) -> list[str]:
    distribution = card.pro.distribution
    if distribution.volatility_score < policy.high_volatility_score:
        return []
    return [
        f"High volatility: standard deviation of {_fmt(distribution.std_dev)} around a "
        f"{_fmt(distribution.mean)} average; results vary widely game to game."
    ]


def _distribution_statement(card: PropCard) -> str:
    distribution = card.pro.distribution
    if not distribution.buckets:
        return "No distribution yet: standard deviation and volatility need more games."
    return (
        f"Distribution: the last {card.summary.last20.sample_size} games average "
        f"{_fmt(distribution.mean)} with a standard deviation of {_fmt(distribution.std_dev)} "
        f"(volatility score {distribution.volatility_score}/100)."
    )


_CONTEXT_RULES: dict[str, Callable[[PropCard, InsightPolicy], list[str]]] = {
    "injury": _injury_rule,
    "back_to_back": _back_to_back_rule,
    "home_away": _home_away_rule,
    "line_sensitivity": _line_sensitivity_rule,
    "volatility": _volatility_rule,
}


def _context_candidates(card: PropCard, policy: InsightPolicy) -> list[str]:
    candidates: list[str] = []
    for name in policy.context_order:
        rule = policy.extra_rules.get(name) or _CONTEXT_RULES[name]
        candidates.extend(rule(card, policy))
    candidates.append(_distribution_statement(card))
    return candidates


def generate_insights(card: PropCard, policy: Optional[InsightPolicy] = None) -> list[str]:
    """Return exactly three screened insight strings for ``card``."""

    rules = policy or InsightPolicy.from_settings()
    slots = (
        _hit_rate_candidates(card, rules),
        _trend_candidates(card, rules),
        _context_candidates(card, rules),
    )
    return [_first_clean(candidates, fallback) for candidates, fallback in zip(slots, _FALLBACKS)]
