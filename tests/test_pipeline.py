"""Tests for the card service and batch orchestration."""

from __future__ import annotations

import pytest

from prop_card.cache import PropCardCache
from prop_card.exceptions import InvalidQueryError, PlayerNotFoundError, TeamNotFoundError
from prop_card.pipeline import InMemoryDataSource, PropCardService
from prop_card.schemas import Player, PropQuery, Team

CELTICS = Team(id="BOS", name="Boston Celtics", abbreviation="BOS")
WARRIORS = Team(id="GSW", name="Golden State Warriors", abbreviation="GSW")
FREE_AGENT = Player(id="999", name="Free Agent", team_id="NONE")


@pytest.fixture
def source(make_logs, lebron, lakers) -> InMemoryDataSource:
    return InMemoryDataSource(
        players=[lebron, FREE_AGENT],
        teams=[lakers, CELTICS, WARRIORS],
        game_logs=make_logs([30, 25, 28, 31, 22, 27, 29, 33, 24, 26]),
    )


def test_card_for_text_resolves_alias_and_roster(source, as_of) -> None:
    service = PropCardService(source)

    card = service.card_for_text("LeBron over 27.5 points", as_of=as_of)

    assert card.meta.player_id == "2544"
    assert card.meta.player_name == "LeBron James"
    assert card.meta.side == "OVER"
    assert card.summary.last10.sample_size == 10


def test_opponent_lookup_accepts_abbreviation(source, as_of) -> None:
    service = PropCardService(source)
    query = PropQuery(player_id="2544", stat_type="PTS", line=27.5, side="OVER")

    card = service.card_for_query(query, as_of=as_of, opponent_id="BOS")

    assert card.meta.opponent_abbr == "BOS"


def test_cached_cards_are_reused(source, as_of) -> None:
    cache = PropCardCache(ttl_seconds=60, max_entries=8)
    service = PropCardService(source, cache=cache)
    query = PropQuery(player_id="2544", stat_type="PTS", line=27.5, side="OVER")

    first = service.card_for_query(query, as_of=as_of)
    second = service.card_for_query(query, as_of=as_of)

    assert second is first
    assert cache.stats()["hits"] == 1


def test_cached_cards_are_kept_per_opponent(source, as_of) -> None:
    cache = PropCardCache(ttl_seconds=60, max_entries=8)
    service = PropCardService(source, cache=cache)
    query = PropQuery(player_id="2544", stat_type="PTS", line=27.5, side="OVER")

    boston = service.card_for_query(query, as_of=as_of, opponent_id="BOS")
    golden_state = service.card_for_query(query, as_of=as_of, opponent_id="GSW")

    assert boston.meta.opponent_abbr == "BOS"
    assert golden_state.meta.opponent_abbr == "GSW"
    assert service.card_for_query(query, as_of=as_of, opponent_id="BOS") is boston
    assert cache.stats()["size"] == 2


def test_use_cache_false_recomputes_without_storing(source, as_of) -> None:
    cache = PropCardCache(ttl_seconds=60, max_entries=8)
    service = PropCardService(source, cache=cache)
    query = PropQuery(player_id="2544", stat_type="PTS", line=27.5, side="OVER")

    cached = service.card_for_query(query, as_of=as_of)
    fresh = service.card_for_query(query, as_of=as_of, use_cache=False)

    assert fresh is not cached
    assert fresh == cached
    assert cache.stats() == {"size": 1, "hits": 0, "misses": 1}


def test_clock_supplies_default_as_of(source, as_of) -> None:
    service = PropCardService(source, clock=lambda: as_of)
    query = PropQuery(player_id="2544", stat_type="AST", line=4.5, side="UNDER")

    card = service.card_for_query(query)

    assert card.meta.generated_at == as_of


def test_lookup_errors(source, as_of) -> None:
    service = PropCardService(source)

    with pytest.raises(PlayerNotFoundError):
        service.card_for_query(PropQuery(player_id="404", stat_type="PTS", line=1.5, side="OVER"), as_of=as_of)
    with pytest.raises(TeamNotFoundError):
        service.card_for_query(PropQuery(player_id="999", stat_type="PTS", line=1.5, side="OVER"), as_of=as_of)
    with pytest.raises(PlayerNotFoundError):
        service.card_for_text("Zzyzx Qwerty over 10.5 points", as_of=as_of)


def test_invalid_text_reports_every_error(source, as_of) -> None:
    service = PropCardService(source)

    with pytest.raises(InvalidQueryError) as excinfo:
        service.card_for_text("", as_of=as_of)

    assert "Line must be a positive number" in excinfo.value.errors
    assert len(excinfo.value.errors) == 3


def test_batch_isolates_failures(source, as_of) -> None:
    service = PropCardService(source)

    results = service.batch(
        [
            "LeBron over 27.5 points",
            "",
            PropQuery(player_id="404", stat_type="PTS", line=10.5, side="OVER"),
            PropQuery(player_id="2544", stat_type="REB", line=0.5, side="UNDER"),
        ],
        as_of=as_of,
    )

    assert [result.ok for result in results] == [True, False, False, True]
    assert results[1].error is not None
    assert "404" in results[2].error
    assert results[3].card.meta.stat_type == "REB"
