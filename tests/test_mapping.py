"""Tests for name normalisation and roster matching."""

from __future__ import annotations

import pytest

from prop_card.exceptions import PlayerNotFoundError
from prop_card.mapping import PlayerDirectory, normalize_name
from prop_card.schemas import Player

ROSTER = [
    Player(id="2544", name="LeBron James", team_id="LAL"),
    Player(id="203999", name="Nikola Jokić", team_id="DEN"),
    Player(id="1630162", name="Anthony Edwards", team_id="MIN"),
    Player(id="1628991", name="Jaren Jackson Jr.", team_id="MEM"),
]


def test_normalize_name() -> None:
    assert normalize_name("  Nikola Jokić ") == "nikola jokic"
    assert normalize_name("Jaren Jackson Jr.") == "jaren jackson"
    assert normalize_name("D'Angelo Russell") == "d angelo russell"
    assert normalize_name(None) == ""
    assert normalize_name("nan") == ""


def test_exact_match_scores_100() -> None:
    directory = PlayerDirectory(ROSTER)
    player, score = directory.match("lebron james")
    assert player.id == "2544"
    assert score == 100.0


def test_fuzzy_and_surname_matches() -> None:
    directory = PlayerDirectory(ROSTER)

    assert directory.resolve("Lebron Jame").id == "2544"
    assert directory.resolve("Jokic").id == "203999"
    assert directory.resolve("Jaren Jackson").id == "1628991"
    assert len(directory) == 4


def test_unknown_name_raises() -> None:
    directory = PlayerDirectory(ROSTER)

    assert directory.match("Zzyzx Qwerty") is None
    assert directory.match("") is None
    with pytest.raises(PlayerNotFoundError):
        directory.resolve("Zzyzx Qwerty")
