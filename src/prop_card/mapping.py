"""Player name normalisation and fuzzy name-to-identifier resolution."""
from __future__ import annotations

import re
import unicodedata
from typing import Iterable, List, Optional, Tuple

from rapidfuzz import fuzz, process

from .config import get_settings
from .exceptions import PlayerNotFoundError
from .schemas import Player

_SUFFIXES = {"jr", "sr", "ii", "iii", "iv"}
_WHITESPACE_RE = re.compile(r"\s+")
_PUNCT_RE = re.compile(r"[^a-z0-9\s]")


def normalize_name(value: Optional[str]) -> str:
    """Return a normalized representation of a player's name."""
    if value is None:
        return ""
    text = str(value)
    if not text or text.lower() == "nan":
        return ""
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = _PUNCT_RE.sub(" ", text)
    tokens: List[str] = [token for token in text.split() if token]
    while tokens and tokens[-1] in _SUFFIXES:
        tokens.pop()
    normalized = " ".join(tokens)
    return _WHITESPACE_RE.sub(" ", normalized).strip()


class PlayerDirectory:
    """In-memory roster used to turn a free-text name into a player id."""

    def __init__(self, players: Iterable[Player], score_cutoff: Optional[float] = None) -> None:
        self._players = list(players)
        self._score_cutoff = (
            score_cutoff if score_cutoff is not None else get_settings().MATCH_SCORE_CUTOFF
        )
        self._by_norm = {normalize_name(player.name): player for player in self._players}

    def __len__(self) -> int:
        return len(self._players)

    def match(self, name: str) -> Optional[Tuple[Player, float]]:
        """Best roster match for ``name`` with its score, or ``None``."""
        key = normalize_name(name)
        if not key:
            return None
        exact = self._by_norm.get(key)
        if exact is not None:
            return exact, 100.0

        choices = {index: normalize_name(player.name) for index, player in enumerate(self._players)}
        if not choices:
            return None
        best = process.extractOne(
            key,
            choices,
            scorer=fuzz.token_sort_ratio,
            score_cutoff=self._score_cutoff,
        )
        if not best:
            # Single surnames ("Jokic") score poorly on token_sort_ratio.
            best = process.extractOne(
                key,
                choices,
                scorer=fuzz.partial_token_set_ratio,
                score_cutoff=max(self._score_cutoff, 95.0),
            )
        if not best:
            return None
        _, score, index = best
        return self._players[int(index)], float(score)

    def resolve(self, name: str) -> Player:
        """Return the player matching ``name`` or raise ``PlayerNotFoundError``."""
        matched = self.match(name)
        if matched is None:
            raise PlayerNotFoundError(f"No player matched '{name}'")
        return matched[0]
