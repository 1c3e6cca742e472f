"""Custom exception types for the prop card engine."""

from __future__ import annotations

from typing import Sequence


class PropCardError(Exception):
    """Base class for errors raised around the card computation."""


class DataSourceError(PropCardError, RuntimeError):
    """Raised when an external data source cannot be reached or parsed."""


class PlayerNotFoundError(PropCardError, LookupError):
    """Raised when no player matches a name or identifier."""


class TeamNotFoundError(PropCardError, LookupError):
    """Raised when a player's team cannot be resolved."""


class InvalidQueryError(PropCardError, ValueError):
    """Raised when a parsed free-text query fails validation."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid query")
