"""Shared fixtures building synthetic game logs and cards."""

from __future__ import annotations

import datetime as dt
from typing import Callable, Optional, Sequence, Union

import pytest

from prop_card.engine import generate_prop_card
from prop_card.hit_rate import logs_before
from prop_card.outcomes import enrich_game_logs
from prop_card.schemas import EnrichedGameLog, GameLog, InjurySnapshot, Player, PropCard, PropQuery, Team

START = dt.date(2024, 1, 1)
AS_OF = dt.datetime(2024, 3, 1, 12, 0, tzinfo=dt.timezone.utc)

LAKERS = Team(id="LAL", name="Los Angeles Lakers", abbreviation="LAL")
CELTICS = Team(id="BOS", name="Boston Celtics", abbreviation="BOS")
LEBRON = Player(id="2544", name="LeBron James", team_id="LAL", position="F")


def build_logs(
    values: Sequence[int],
    *,
    stat: str = "pts",
    start: dt.date = START,
    step_days: int = 2,
    minutes: Union[float, Sequence[float]] = 34.0,
    home_away: Optional[Sequence[str]] = None,
    player_id: str = LEBRON.id,
) -> list[GameLog]:
    """Game logs oldest first, one every ``step_days`` days from ``start``."""

    logs: list[GameLog] = []
    for index, value in enumerate(values):
        played = minutes if isinstance(minutes, (int, float)) else minutes[index]
        location = home_away[index] if home_away is not None else ("home" if index % 2 == 0 else "away")
        counting = {"pts": 0, "reb": 0, "ast": 0}
        counting[stat] = value
        logs.append(
            GameLog(
                player_id=player_id,
                game_id=f"g{index}",
                date=start + dt.timedelta(days=index * step_days),
                team_id="LAL",
                opponent_id="BOS",
                home_away=location,
                minutes=played,
                **counting,
            )
        )
    return logs


def enriched_newest_first(
    logs: Sequence[GameLog],
    line: float,
    side: str = "OVER",
    stat_type: str = "PTS",
) -> list[EnrichedGameLog]:
    query = PropQuery(player_id=LEBRON.id, stat_type=stat_type, line=line, side=side)
    return logs_before(enrich_game_logs(logs, query), dt.date.max)


def card_for(
    logs: Sequence[GameLog],
    line: float,
    side: str = "OVER",
    *,
    stat_type: str = "PTS",
    game_date: Optional[dt.date] = None,
    player: Player = LEBRON,
    snapshot: Optional[InjurySnapshot] = None,
    **kwargs: object,
) -> PropCard:
    query = PropQuery(player_id=player.id, stat_type=stat_type, line=line, side=side, game_date=game_date)
    return generate_prop_card(
        query, logs, player, LAKERS, as_of=AS_OF, injury_snapshot=snapshot, **kwargs
    )


@pytest.fixture
def make_logs() -> Callable[..., list[GameLog]]:
    return build_logs


@pytest.fixture
def enrich() -> Callable[..., list[EnrichedGameLog]]:
    return enriched_newest_first


@pytest.fixture
def make_card() -> Callable[..., PropCard]:
    return card_for


@pytest.fixture
def lebron() -> Player:
    return LEBRON


@pytest.fixture
def lakers() -> Team:
    return LAKERS


@pytest.fixture
def as_of() -> dt.datetime:
    return AS_OF
