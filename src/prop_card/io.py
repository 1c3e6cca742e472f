"""Utilities for reading game data and writing computed cards."""

from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import pandas as pd
from pydantic import ValidationError

from .exceptions import DataSourceError
from .schemas import GameLog, InjurySnapshot, Player, PropCard, Team

LOGGER = logging.getLogger(__name__)


def _strip_string(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _to_float(value: Any) -> float:
    text = _strip_string(value)
    if text == "":
        raise ValueError("Empty string cannot be converted to float")
    return float(text)


def _to_int(value: Any) -> int:
    text = _strip_string(value)
    if text == "":
        raise ValueError("Empty string cannot be converted to int")
    return int(float(text))


def _to_identifier(value: Any) -> str:
    # Numeric ids come back from pandas as floats ("2544.0").
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return _strip_string(value)


def _to_date(value: Any) -> dt.date:
    return pd.to_datetime(value).date()


REQUIRED_GAME_LOG_COLUMNS: tuple[str, ...] = (
    "player_id",
    "date",
    "opponent_id",
    "home_away",
    "minutes",
    "pts",
    "reb",
    "ast",
)

REQUIRED_ROSTER_COLUMNS: tuple[str, ...] = (
    "player_id",
    "name",
    "team_id",
    "team_abbr",
)

# Header spellings seen in common box-score exports.
COLUMN_ALIASES: dict[str, str] = {
    "game_date": "date",
    "opponent": "opponent_id",
    "opp": "opponent_id",
    "min": "minutes",
    "points": "pts",
    "rebounds": "reb",
    "trb": "reb",
    "assists": "ast",
    "location": "home_away",
    "team": "team_id",
    "player_name": "name",
    "abbreviation": "team_abbr",
}

CASTERS: dict[str, Callable[[Any], Any]] = {
    "player_id": _to_identifier,
    "game_id": _to_identifier,
    "team_id": _to_identifier,
    "opponent_id": _to_identifier,
    "date": _to_date,
    "minutes": _to_float,
    "pts": _to_int,
    "reb": _to_int,
    "ast": _to_int,
}


def load_game_logs(path: str) -> list[GameLog]:
    """Load box-score lines from a CSV or XLSX file into validated ``GameLog`` records.

    Headers are standardised to ``snake_case`` and common aliases (``PTS``,
    ``Opponent``, ``MIN``...) are mapped onto the model's field names.
    """

    rows = _load_rows(path, "Game log")
    _ensure_required_columns(rows, REQUIRED_GAME_LOG_COLUMNS, "game log")

    logs: list[GameLog] = []
    for index, row in enumerate(rows):
        try:
            logs.append(GameLog(**row))
        except ValidationError as error:
            msg = f"Invalid game log row {index + 1}: {error.errors()[0]['msg']}"
            LOGGER.error(msg)
            raise ValueError(msg) from error
    LOGGER.debug("Loaded %s game logs from %s", len(logs), path)
    return logs


def load_roster(path: str) -> tuple[list[Player], list[Team]]:
    """Load players and their teams from a roster CSV/XLSX file."""

    rows = _load_rows(path, "Roster")
    _ensure_required_columns(rows, REQUIRED_ROSTER_COLUMNS, "roster")

    players: list[Player] = []
    teams: dict[str, Team] = {}
    for row in rows:
        players.append(
            Player(
                id=row["player_id"],
                name=_strip_string(row["name"]),
                team_id=row["team_id"],
                position=_strip_string(row.get("position", "")),
            )
        )
        abbreviation = _strip_string(row["team_abbr"]).upper()
        teams.setdefault(
            row["team_id"],
            Team(
                id=row["team_id"],
                name=_strip_string(row.get("team_name", abbreviation)),
                abbreviation=abbreviation,
            ),
        )
    return players, list(teams.values())


def load_injury_snapshot(path: str) -> InjurySnapshot:
    """Load an injury report JSON document (``snapshot_at`` plus ``entries``)."""

    source = Path(path)
    if not source.exists():
        msg = f"Injury report not found: {source}"
        LOGGER.error(msg)
        raise FileNotFoundError(msg)

    try:
        snapshot = InjurySnapshot.model_validate_json(source.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as error:
        msg = f"Could not read injury report {source}: {error}"
        LOGGER.error(msg)
        raise DataSourceError(msg) from error
    except ValidationError as error:
        msg = f"Invalid injury report {source}: {error.errors()[0]['msg']}"
        LOGGER.error(msg)
        raise ValueError(msg) from error
    LOGGER.debug("Loaded %s injury entries from %s", len(snapshot.entries), source)
    return snapshot


def export_card_json(card: PropCard, path: str) -> None:
    """Write ``card`` to ``path`` as indented JSON."""

    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    LOGGER.debug("Writing %s card to %s", card.meta.player_name, destination)
    destination.write_text(json.dumps(card.to_dict(), indent=2), encoding="utf-8")


def export_csv(df: pd.DataFrame, path: str) -> None:
    """Export ``df`` to ``path`` as CSV."""

    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    LOGGER.debug("Writing %s rows to %s", len(df), destination)
    df.to_csv(destination, index=False)


def timestamped_path(
    directory: str,
    stem: str,
    suffix: str = ".json",
    moment: Optional[dt.datetime] = None,
) -> str:
    """Return a path with a timestamped name inside ``directory``."""

    folder = Path(directory)
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = (moment or dt.datetime.now(dt.timezone.utc)).strftime("%Y%m%d_%H%M")
    return str(folder / f"{stem}_{timestamp}{suffix}")


def _load_rows(path: str, label: str) -> list[dict[str, Any]]:
    source = Path(path)
    if not source.exists():
        msg = f"{label} file not found: {source}"
        LOGGER.error(msg)
        raise FileNotFoundError(msg)

    LOGGER.debug("Loading %s rows from %s", label.lower(), source)
    dataframe = _read_tabular_file(source)

    column_map = {column: _canonical_column(column) for column in dataframe.columns}
    rows: list[dict[str, Any]] = []
    for raw_row in dataframe.to_dict(orient="records"):
        normalized = {
            column_map[column]: value for column, value in raw_row.items() if not _is_missing(value)
        }
        rows.append(_coerce_row(normalized))
    return rows


def _read_tabular_file(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        reader: Callable[[Path], pd.DataFrame] = pd.read_csv
    elif suffix in {".xlsx", ".xls"}:
        reader = pd.read_excel
    else:
        msg = f"Unsupported file format: {path.suffix}"
        LOGGER.error(msg)
        raise ValueError(msg)

    try:
        return reader(path)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError, OSError) as error:
        msg = f"Could not read {path}: {error}"
        LOGGER.error(msg)
        raise DataSourceError(msg) from error


def _ensure_required_columns(rows: list[dict[str, Any]], required: tuple[str, ...], label: str) -> None:
    if not rows:
        raise ValueError(f"No {label} records found; expected columns: {', '.join(required)}")

    available_columns = set().union(*(row.keys() for row in rows))
    missing_columns = [column for column in required if column not in available_columns]
    if missing_columns:
        raise ValueError(f"Missing required {label} columns: {', '.join(sorted(missing_columns))}")

    for index, row in enumerate(rows):
        for column in required:
            if column not in row:
                raise ValueError(f"Row {index + 1} missing required column '{column}'")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _coerce_row(row: dict[str, Any]) -> dict[str, Any]:
    coerced: dict[str, Any] = {}
    for key, value in row.items():
        if key in CASTERS:
            coerced[key] = _coerce_value(key, value, CASTERS[key])
        elif isinstance(value, str):
            coerced[key] = value.strip()
        else:
            coerced[key] = value
    return coerced


def _coerce_value(column: str, value: Any, caster: Callable[[Any], Any]) -> Any:
    try:
        return caster(value)
    except (TypeError, ValueError) as error:
        msg = f"Could not coerce column '{column}' with value {value!r}"
        LOGGER.error(msg)
        raise ValueError(msg) from error


def _canonical_column(value: Any) -> str:
    snake = _to_snake_case(_strip_string(value))
    return COLUMN_ALIASES.get(snake, snake)


def _to_snake_case(value: str) -> str:
    result = []
    for character in value:
        if character.isalnum():
            result.append(character.lower())
        else:
            result.append("_")
    snake = "".join(result)
    while "__" in snake:
        snake = snake.replace("__", "_")
    return snake.strip("_")
