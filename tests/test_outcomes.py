"""Tests for outcome classification, rest days and log enrichment."""

from __future__ import annotations

import datetime as dt

import pytest

from prop_card.outcomes import compute_rest_days, enrich_game_logs, evaluate_outcome
from prop_card.schemas import PropQuery


@pytest.mark.parametrize(
    ("value", "line", "side", "expected"),
    [
        (28, 27.5, "OVER", "WIN"),
        (27, 27.5, "OVER", "LOSS"),
        (20, 27.5, "UNDER", "WIN"),
        (30, 27.5, "UNDER", "LOSS"),
        (27, 27.0, "OVER", "PUSH"),
        (27, 27.0, "UNDER", "PUSH"),
    ],
)
def test_evaluate_outcome(value: float, line: float, side: str, expected: str) -> None:
    assert evaluate_outcome(value, line, side) == expected


def test_half_point_line_never_pushes() -> None:
    outcomes = {evaluate_outcome(value, 5.5, "OVER") for value in range(0, 12)}
    assert "PUSH" not in outcomes


def test_compute_rest_days() -> None:
    assert compute_rest_days(dt.date(2024, 1, 2), dt.date(2024, 1, 1)) == 0
    assert compute_rest_days(dt.date(2024, 1, 3), dt.date(2024, 1, 1)) == 1
    assert compute_rest_days(dt.date(2024, 1, 10), dt.date(2024, 1, 1)) == 8
    assert compute_rest_days(dt.date(2024, 1, 1), dt.date(2024, 1, 1)) == 0


def test_first_game_uses_default_rest() -> None:
    assert compute_rest_days(dt.date(2024, 1, 1), None) == 3
    assert compute_rest_days(dt.date(2024, 1, 1), None, first_game_rest_days=5) == 5


def test_enrich_sorts_and_annotates(make_logs) -> None:
    logs = make_logs([30, 20, 25], step_days=1)
    query = PropQuery(player_id="2544", stat_type="pts", line=24.5, side="over")

    enriched = enrich_game_logs(list(reversed(logs)), query)

    assert [log.date for log in enriched] == sorted(log.date for log in logs)
    assert [log.stat_value for log in enriched] == [30, 20, 25]
    assert [log.outcome for log in enriched] == ["WIN", "LOSS", "WIN"]
    assert [log.rest_days for log in enriched] == [3, 0, 0]


def test_enrich_selects_requested_stat(make_logs) -> None:
    logs = make_logs([7, 9], stat="ast")
    query = PropQuery(player_id="2544", stat_type="AST", line=8.5, side="UNDER")

    enriched = enrich_game_logs(logs, query)

    assert [log.outcome for log in enriched] == ["WIN", "LOSS"]
    assert enriched[1].rest_days == 1
