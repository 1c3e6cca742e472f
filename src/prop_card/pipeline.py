"""High-level orchestration: resolve entities, compute cards and run batches."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol, Sequence, Union

from .cache import PropCardCache, cache_key
from .engine import generate_prop_card
from .exceptions import InvalidQueryError, PlayerNotFoundError, PropCardError, TeamNotFoundError
from .insights import InsightPolicy
from .logging_utils import configure_logging
from .mapping import PlayerDirectory
from .parser import parse_query_from_text, validate_parsed_query
from .schemas import GameLog, InjurySnapshot, Player, PropCard, PropQuery, Team

LOGGER = configure_logging(__name__)


class GameDataSource(Protocol):
    """Read access to players, teams, game logs and the latest injury report."""

    def player(self, player_id: str) -> Optional[Player]: ...

    def team(self, team_id: str) -> Optional[Team]: ...

    def players(self) -> Sequence[Player]: ...

    def game_logs(self, player_id: str) -> Sequence[GameLog]: ...

    def latest_injury_snapshot(self) -> Optional[InjurySnapshot]: ...


class InMemoryDataSource:
    """``GameDataSource`` backed by plain collections, used by the CLI and tests."""

    def __init__(
        self,
        players: Iterable[Player],
        teams: Iterable[Team],
        game_logs: Iterable[GameLog],
        injury_snapshot: Optional[InjurySnapshot] = None,
    ) -> None:
        self._players = {player.id: player for player in players}
        teams = list(teams)
        self._teams = {team.id: team for team in teams}
        # Game logs reference opponents by abbreviation as often as by id.
        self._teams.update({team.abbreviation: team for team in teams if team.abbreviation not in self._teams})
        self._logs: dict[str, list[GameLog]] = {}
        for log in game_logs:
            self._logs.setdefault(log.player_id, []).append(log)
        self._snapshot = injury_snapshot

    def player(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def team(self, team_id: str) -> Optional[Team]:
        return self._teams.get(team_id)

    def players(self) -> Sequence[Player]:
        return list(self._players.values())

    def game_logs(self, player_id: str) -> Sequence[GameLog]:
        return list(self._logs.get(player_id, []))

    def latest_injury_snapshot(self) -> Optional[InjurySnapshot]:
        return self._snapshot


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one query in a batch: a card or an error message."""

    query: str
    card: Optional[PropCard] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.card is not None


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _describe(query: Union[PropQuery, str]) -> str:
    if isinstance(query, str):
        return query
    return f"{query.player_id} {query.side} {query.line} {query.stat_type}"


class PropCardService:
    """Compute prop cards against a data source, with optional caching."""

    def __init__(
        self,
        source: GameDataSource,
        *,
        cache: Optional[PropCardCache] = None,
        clock: Callable[[], dt.datetime] = _utc_now,
        policy: Optional[InsightPolicy] = None,
        score_cutoff: Optional[float] = None,
    ) -> None:
        self._source = source
        self._cache = cache
        self._clock = clock
        self._policy = policy
        self._score_cutoff = score_cutoff

    def card_for_query(
        self,
        query: PropQuery,
        *,
        as_of: Optional[dt.datetime] = None,
        opponent_id: Optional[str] = None,
        use_cache: bool = True,
    ) -> PropCard:
        """Return the card for ``query``, reusing a cached one when still fresh.

        ``use_cache=False`` always recomputes and leaves the cache untouched.
        """

        moment = as_of or self._clock()
        game_date = query.game_date or moment.date()
        cache = self._cache if use_cache else None
        key = cache_key(query, game_date, opponent_id)
        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                LOGGER.debug("Cache hit for %s", _describe(query))
                return cached

        player = self._source.player(query.player_id)
        if player is None:
            raise PlayerNotFoundError(f"Unknown player id '{query.player_id}'")
        team = self._source.team(player.team_id)
        if team is None:
            raise TeamNotFoundError(f"Unknown team id '{player.team_id}' for {player.name}")
        opponent = self._source.team(opponent_id) if opponent_id else None

        card = generate_prop_card(
            query,
            self._source.game_logs(player.id),
            player,
            team,
            as_of=moment,
            opponent=opponent,
            injury_snapshot=self._source.latest_injury_snapshot(),
            policy=self._policy,
        )
        LOGGER.info(
            "Built %s %s %s card for %s (%s games)",
            query.side,
            query.line,
            query.stat_type,
            player.name,
            card.summary.season.sample_size,
        )
        if cache is not None:
            cache.set(key, card)
        return card

    def resolve_query(self, text: str) -> PropQuery:
        """Parse, validate and resolve a free-text query into a ``PropQuery``."""

        parsed = parse_query_from_text(text)
        validation = validate_parsed_query(parsed)
        if not validation.valid:
            LOGGER.info("Rejected query %r: %s", text, "; ".join(validation.errors))
            raise InvalidQueryError(validation.errors)

        directory = PlayerDirectory(self._source.players(), score_cutoff=self._score_cutoff)
        player = directory.resolve(parsed.player_name)
        return PropQuery(
            player_id=player.id,
            stat_type=parsed.stat_type,
            line=parsed.line,
            side=parsed.side,
            game_date=parsed.game_date,
        )

    def card_for_text(self, text: str, *, as_of: Optional[dt.datetime] = None) -> PropCard:
        return self.card_for_query(self.resolve_query(text), as_of=as_of)

    def batch(
        self,
        queries: Iterable[Union[PropQuery, str]],
        *,
        as_of: Optional[dt.datetime] = None,
    ) -> list[BatchResult]:
        """Compute a card per query; a failing query is reported, not raised."""

        moment = as_of or self._clock()
        results: list[BatchResult] = []
        for query in queries:
            label = _describe(query)
            try:
                if isinstance(query, str):
                    card = self.card_for_text(query, as_of=moment)
                else:
                    card = self.card_for_query(query, as_of=moment)
            except (PropCardError, ValueError) as exc:
                LOGGER.warning("Query %r failed: %s", label, exc)
                results.append(BatchResult(query=label, error=str(exc)))
                continue
            results.append(BatchResult(query=label, card=card))
        LOGGER.info(
            "Batch finished: %s of %s queries succeeded",
            sum(1 for result in results if result.ok),
            len(results),
        )
        return results
