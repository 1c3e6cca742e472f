"""Bounded time-to-live cache for computed prop cards."""

from __future__ import annotations

import datetime as dt
import hashlib
import logging
import time
from collections import OrderedDict
from typing import Callable, Optional

from .config import get_settings
from .schemas import PropCard, PropQuery

LOGGER = logging.getLogger(__name__)


def cache_key(query: PropQuery, game_date: dt.date, opponent_id: Optional[str] = None) -> str:
    """Stable short key for a query on a given game date against an optional opponent."""

    raw = (
        f"{query.player_id}|{query.stat_type}|{query.line:.1f}|{query.side}"
        f"|{game_date.isoformat()}|{opponent_id or ''}"
    )
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]


class PropCardCache:
    """In-memory card cache with per-entry expiry and a size bound.

    The oldest entry is evicted once ``max_entries`` is reached. ``clock``
    returns seconds and is injectable so expiry can be tested without waiting.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = get_settings()
        self.ttl_seconds = settings.CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.max_entries = settings.CACHE_MAX_ENTRIES if max_entries is None else max_entries
        if self.ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if self.max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, PropCard]] = OrderedDict()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[PropCard]:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None
        expires_at, card = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            self._misses += 1
            return None
        self._hits += 1
        return card

    def set(self, key: str, card: PropCard) -> None:
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            LOGGER.debug("Evicted cached card %s", evicted)
        self._entries[key] = (self._clock() + self.ttl_seconds, card)

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one entry, or everything when ``key`` is omitted."""

        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Remove expired entries and return how many were dropped."""

        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def stats(self) -> dict[str, int]:
        return {"size": len(self._entries), "hits": self._hits, "misses": self._misses}
