"""Tests for free-text query parsing and validation."""

from __future__ import annotations

import pytest

from prop_card.parser import parse_query_from_text, resolve_player_alias, validate_parsed_query
from prop_card.schemas import ParsedQuery


def test_parse_full_query() -> None:
    parsed = parse_query_from_text("Anthony Edwards over 26.5 points")

    assert parsed.player_name == "Anthony Edwards"
    assert parsed.stat_type == "PTS"
    assert parsed.line == pytest.approx(26.5)
    assert parsed.side == "OVER"
    assert parsed.confidence == pytest.approx(1.0)


def test_parse_shorthand_side_and_alias() -> None:
    parsed = parse_query_from_text("LeBron O27.5 PTS")

    assert parsed.player_name == "LeBron James"
    assert parsed.line == pytest.approx(27.5)
    assert parsed.side == "OVER"
    assert parsed.stat_type == "PTS"


def test_parse_compact_query() -> None:
    parsed = parse_query_from_text("LeBronO27.5PTS")

    assert "LeBron" in parsed.player_name
    assert parsed.line == pytest.approx(27.5)
    assert parsed.stat_type == "PTS"


def test_parse_under_assists() -> None:
    parsed = parse_query_from_text("Edwards U 5.5 assists")

    assert parsed.player_name == "Edwards"
    assert parsed.stat_type == "AST"
    assert parsed.line == pytest.approx(5.5)
    assert parsed.side == "UNDER"


@pytest.mark.parametrize(
    ("text", "stat"),
    [
        ("Jokic over 12.5 boards", "REB"),
        ("Ja Morant over 7.5 dimes", "AST"),
        ("Tatum under 8.5 rebounds", "REB"),
        ("Booker over 25 pts", "PTS"),
    ],
)
def test_stat_synonyms(text: str, stat: str) -> None:
    assert parse_query_from_text(text).stat_type == stat


def test_stat_words_inside_names_are_ignored() -> None:
    parsed = parse_query_from_text("Stephon Castle over 14.5")
    assert parsed.player_name == "Stephon Castle"
    assert parsed.stat_type == "PTS"
    assert parsed.confidence == pytest.approx(1.0)


def test_symbol_sides_and_integer_lines() -> None:
    over = parse_query_from_text("Curry > 30 points")
    under = parse_query_from_text("Durant < 6 rebounds")

    assert (over.player_name, over.side, over.line) == ("Stephen Curry", "OVER", 30.0)
    assert (under.player_name, under.side, under.line) == ("Kevin Durant", "UNDER", 6.0)


def test_missing_parts_use_defaults_and_lower_confidence() -> None:
    parsed = parse_query_from_text("Giannis")

    assert parsed.player_name == "Giannis Antetokounmpo"
    assert parsed.stat_type == "PTS"
    assert parsed.side == "OVER"
    assert parsed.line == 0
    assert parsed.confidence == pytest.approx(0.7)


def test_resolve_player_alias() -> None:
    assert resolve_player_alias("KD") == "Kevin Durant"
    assert resolve_player_alias(" luka ") == "Luka Doncic"
    assert resolve_player_alias("Austin Reaves") is None


def test_validation_accepts_complete_query() -> None:
    result = validate_parsed_query(parse_query_from_text("Anthony Edwards over 26.5 points"))
    assert result.valid is True
    assert result.errors == ()


def test_validation_collects_every_error() -> None:
    result = validate_parsed_query(parse_query_from_text(""))

    assert result.valid is False
    assert result.errors == (
        "Player name is required and must be at least 2 characters",
        "Line must be a positive number",
        "Low parsing confidence - please clarify the query",
    )


def test_validation_rejects_unknown_stat_and_side() -> None:
    parsed = ParsedQuery(player_name="Anthony Edwards", stat_type="BLK", line=1.5, side="MAYBE", confidence=0.9)

    result = validate_parsed_query(parsed)

    assert "Stat type must be PTS, REB, or AST" in result.errors
    assert "Side must be OVER or UNDER" in result.errors
    assert len(result.errors) == 2
