"""Command-line interface for building prop cards from local files."""

from __future__ import annotations

import argparse
import datetime as dt
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from .exceptions import InvalidQueryError, PropCardError
from .io import (
    export_card_json,
    export_csv,
    load_game_logs,
    load_injury_snapshot,
    load_roster,
    timestamped_path,
)
from .parser import parse_query_from_text, validate_parsed_query
from .pipeline import InMemoryDataSource, PropCardService
from .report import batch_frame, format_batch_table, format_card_text


def _log_level_from_env() -> int:
    level_name = os.getenv("PROP_CARD_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


logging.basicConfig(
    level=_log_level_from_env(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

LOGGER = logging.getLogger(__name__)

_DEFAULT_OUTPUT_DIR = "out"


def _as_of(value: str) -> dt.datetime:
    """Parse ``YYYY-MM-DD`` or a full ISO timestamp; naive values are taken as UTC."""

    try:
        parsed = dt.datetime.fromisoformat(value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"Invalid --as-of value: {value!r}") from error
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def _add_data_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--logs", required=True, help="Path to the game log CSV/XLSX file.")
    parser.add_argument("--roster", required=True, help="Path to the roster CSV/XLSX file.")
    parser.add_argument("--injuries", default=None, help="Optional injury report JSON file.")
    parser.add_argument(
        "--as-of",
        type=_as_of,
        default=None,
        help="Reference time (ISO date or timestamp); only earlier games are used. Defaults to now.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help=f"Write results into this directory (e.g. {_DEFAULT_OUTPUT_DIR}).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build research prop cards from game logs.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser("parse", help="Parse a free-text query and validate it.")
    parse_parser.add_argument("text", help='Query such as "LeBron over 27.5 points".')

    card_parser = subparsers.add_parser("card", help="Compute and print one prop card.")
    card_parser.add_argument("query", help='Query such as "Edwards U 5.5 assists".')
    card_parser.add_argument("--opponent", default=None, help="Opponent team id or abbreviation.")
    _add_data_arguments(card_parser)

    batch_parser = subparsers.add_parser("batch", help="Compute cards for a file of queries.")
    batch_parser.add_argument("queries", help="Text file with one query per line.")
    _add_data_arguments(batch_parser)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def _build_service(args: argparse.Namespace) -> PropCardService:
    LOGGER.info("Loading game logs from %s", args.logs)
    logs = load_game_logs(args.logs)
    players, teams = load_roster(args.roster)
    snapshot = load_injury_snapshot(args.injuries) if args.injuries else None
    LOGGER.info("Loaded %s game logs for %s rostered players.", len(logs), len(players))
    return PropCardService(InMemoryDataSource(players, teams, logs, snapshot))


def run_parse(args: argparse.Namespace) -> int:
    parsed = parse_query_from_text(args.text)
    validation = validate_parsed_query(parsed)
    print(f"Player:     {parsed.player_name or '-'}")
    print(f"Stat:       {parsed.stat_type}")
    print(f"Line:       {parsed.line}")
    print(f"Side:       {parsed.side}")
    print(f"Confidence: {parsed.confidence:.2f}")
    if validation.valid:
        print("Valid:      yes")
        return 0
    print("Valid:      no")
    for error in validation.errors:
        print(f"  - {error}")
    return 1


def run_card(args: argparse.Namespace) -> int:
    service = _build_service(args)
    try:
        query = service.resolve_query(args.query)
        card = service.card_for_query(query, as_of=args.as_of, opponent_id=args.opponent)
    except InvalidQueryError as exc:
        LOGGER.error("Invalid query: %s", "; ".join(exc.errors))
        return 2
    except PropCardError as exc:
        LOGGER.error("%s", exc)
        return 1

    print(format_card_text(card))
    if args.output_dir:
        stem = card.meta.player_name.lower().replace(" ", "_")
        output_path = timestamped_path(args.output_dir, stem, ".json", args.as_of)
        export_card_json(card, output_path)
        LOGGER.info("Card saved to %s", output_path)
    return 0


def run_batch(args: argparse.Namespace) -> int:
    service = _build_service(args)
    lines = Path(args.queries).read_text(encoding="utf-8").splitlines()
    queries = [line.strip() for line in lines if line.strip() and not line.lstrip().startswith("#")]
    LOGGER.info("Running %s queries from %s", len(queries), args.queries)

    results = service.batch(queries, as_of=args.as_of)
    frame = batch_frame(results)
    print(format_batch_table(frame))

    if args.output_dir:
        output_path = timestamped_path(args.output_dir, "prop_cards", ".csv", args.as_of)
        export_csv(frame, output_path)
        LOGGER.info("Batch summary saved to %s", output_path)
    return 0 if all(result.ok for result in results) else 1


_COMMANDS = {"parse": run_parse, "card": run_card, "batch": run_batch}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    return _COMMANDS[args.command](args)


if __name__ == "__main__":  # pragma: no cover - entry point for manual execution
    raise SystemExit(main())
