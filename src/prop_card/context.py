"""Situational context: injury report and schedule spacing."""

from __future__ import annotations

import datetime as dt
from typing import Optional, Sequence

from .config import INJURY_OUT_STATUS
from .mapping import normalize_name
from .outcomes import compute_rest_days
from .schemas import (
    ContextBlock,
    EnrichedGameLog,
    InjuryContext,
    InjuryEntry,
    InjurySnapshot,
    Player,
    ScheduleContext,
    TeammateOut,
)


def _is_player(entry: InjuryEntry, player: Player) -> bool:
    if entry.player_id and entry.player_id == player.id:
        return True
    return normalize_name(entry.player_name) == normalize_name(player.name)


def resolve_injury_context(
    player: Player,
    snapshot: Optional[InjurySnapshot],
) -> Optional[InjuryContext]:
    """Player's own listing plus teammates ruled out, or ``None`` when nothing applies."""

    if snapshot is None:
        return None

    own: Optional[InjuryEntry] = None
    teammates: list[TeammateOut] = []
    for entry in snapshot.entries:
        if _is_player(entry, player):
            own = own or entry
            continue
        if entry.team_id == player.team_id and entry.status == INJURY_OUT_STATUS:
            teammates.append(
                TeammateOut(player_id=entry.player_id or "", name=entry.player_name, status=entry.status)
            )

    if own is None and not teammates:
        return None

    return InjuryContext(
        player_status=own.status if own else None,
        player_notes=own.notes if own else None,
        teammates_out=tuple(teammates),
        last_updated_at=snapshot.snapshot_at,
    )


def resolve_schedule_context(
    logs: Sequence[EnrichedGameLog],
    game_date: dt.date,
) -> Optional[ScheduleContext]:
    """Rest before ``game_date`` based on the latest prior game, if any."""

    prior = [log.date for log in logs if log.date < game_date]
    if not prior:
        return None

    last_game = max(prior)
    rest_days = compute_rest_days(game_date, last_game)
    return ScheduleContext(back_to_back=rest_days == 0, rest_days=rest_days, last_game_date=last_game)


def resolve_context(
    player: Player,
    logs: Sequence[EnrichedGameLog],
    game_date: dt.date,
    snapshot: Optional[InjurySnapshot] = None,
) -> ContextBlock:
    return ContextBlock(
        injury_status=resolve_injury_context(player, snapshot),
        schedule_context=resolve_schedule_context(logs, game_date),
    )
