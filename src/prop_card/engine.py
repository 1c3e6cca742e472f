"""Assemble a complete prop card from raw game logs."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, Optional, Sequence

from .config import LAST_10, LAST_20, STANDARD_DISCLAIMER
from .context import resolve_context
from .distribution import compute_distribution, compute_sensitivity, compute_stability
from .hit_rate import logs_before, select_window, summarize_hit_rate
from .insights import InsightPolicy, generate_insights
from .outcomes import enrich_game_logs
from .schemas import (
    CardMeta,
    CardSummary,
    DebugNotes,
    EnrichedGameLog,
    GameLog,
    InjurySnapshot,
    Player,
    ProBlock,
    PropCard,
    PropQuery,
    Team,
)
from .splits import compute_splits
from .trends import analyze_trend

LOGGER = logging.getLogger(__name__)

LIMITED_SAMPLE_GAMES = 10
VERY_SMALL_SAMPLE_GAMES = 5
LOW_MINUTES = 10
LOW_MINUTES_MIN_GAMES = 3


def build_debug_notes(logs: Sequence[EnrichedGameLog]) -> DebugNotes:
    """Sample-size notes and data-quality warnings for the season sample."""

    sample_notes: list[str] = []
    warnings: list[str] = []
    if len(logs) < LIMITED_SAMPLE_GAMES:
        sample_notes.append(f"Limited sample: only {len(logs)} games available")
    if len(logs) < VERY_SMALL_SAMPLE_GAMES:
        warnings.append("Very small sample size - results may not be reliable")

    zero_minutes = sum(1 for log in logs if log.minutes == 0)
    if zero_minutes:
        warnings.append(f"{zero_minutes} games with 0 minutes played")
    low_minutes = sum(1 for log in logs if log.minutes < LOW_MINUTES)
    if low_minutes >= LOW_MINUTES_MIN_GAMES:
        warnings.append(f"{low_minutes} games with < {LOW_MINUTES} minutes played")

    return DebugNotes(sample_size_notes=tuple(sample_notes), data_quality_warnings=tuple(warnings))


def generate_prop_card(
    query: PropQuery,
    game_logs: Iterable[GameLog],
    player: Player,
    team: Team,
    *,
    as_of: dt.datetime,
    opponent: Optional[Team] = None,
    injury_snapshot: Optional[InjurySnapshot] = None,
    policy: Optional[InsightPolicy] = None,
) -> PropCard:
    """Compute every card section for ``query`` as of ``as_of``.

    Only games strictly before the target date (``query.game_date`` or the
    as-of day) contribute. Logs belonging to other players are ignored.
    """

    game_date = query.game_date or as_of.date()
    own_logs = [log for log in game_logs if log.player_id == query.player_id]
    enriched = enrich_game_logs(own_logs, query)
    season = logs_before(enriched, game_date)
    last10 = select_window(season, LAST_10)
    last20 = select_window(season, LAST_20)

    LOGGER.debug(
        "Building %s %s %s card for %s on %s from %s prior games",
        query.side,
        query.line,
        query.stat_type,
        player.name,
        game_date,
        len(season),
    )

    meta = CardMeta(
        player_id=player.id,
        player_name=player.name,
        team_abbr=team.abbreviation,
        opponent_abbr=opponent.abbreviation if opponent else None,
        stat_type=query.stat_type,
        line=query.line,
        side=query.side,
        generated_at=as_of,
        game_date=game_date,
        disclaimer=STANDARD_DISCLAIMER,
    )
    pro = ProBlock(
        splits=compute_splits(last20),
        distribution=compute_distribution(last20, query.line),
        sensitivity=compute_sensitivity(last20, query.line),
        stability=compute_stability(last10),
    )
    draft = PropCard(
        meta=meta,
        summary=CardSummary(
            last10=summarize_hit_rate(last10),
            last20=summarize_hit_rate(last20),
            season=summarize_hit_rate(season),
            recent_outcomes=tuple(log.outcome for log in last10),
        ),
        trend=analyze_trend(last10, query.stat_type, season_logs=season),
        pro=pro,
        context=resolve_context(player, season, game_date, injury_snapshot),
        debug=build_debug_notes(season),
    )

    insights = generate_insights(draft, policy)
    summary = draft.summary.model_copy(update={"quick_insights": tuple(insights)})
    return draft.model_copy(update={"summary": summary})
