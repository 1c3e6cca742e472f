"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from prop_card import cli


@pytest.fixture
def data_files(tmp_path: Path) -> dict[str, str]:
    logs = tmp_path / "logs.csv"
    rows = ["player_id,date,opponent_id,home_away,minutes,pts,reb,ast"]
    for day, points in enumerate([30, 25, 28, 31, 22, 27], start=1):
        location = "home" if day % 2 else "away"
        rows.append(f"2544,2024-02-{day * 2:02d},BOS,{location},35,{points},8,7")
    logs.write_text("\n".join(rows) + "\n", encoding="utf-8")

    roster = tmp_path / "roster.csv"
    roster.write_text(
        "player_id,name,team_id,team_abbr,team_name\n2544,LeBron James,LAL,LAL,Los Angeles Lakers\n",
        encoding="utf-8",
    )

    queries = tmp_path / "queries.txt"
    queries.write_text("# tonight\nLeBron over 27.5 points\nNobody over 3.5 assists\n", encoding="utf-8")
    return {"logs": str(logs), "roster": str(roster), "queries": str(queries), "dir": str(tmp_path)}


def test_parse_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["parse", "Edwards U 5.5 assists"]) == 0
    output = capsys.readouterr().out
    assert "Edwards" in output
    assert "UNDER" in output
    assert "Valid:      yes" in output


def test_parse_command_reports_errors(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["parse", "x"]) == 1
    assert "Line must be a positive number" in capsys.readouterr().out


def test_card_command_prints_and_exports(data_files: dict[str, str], capsys: pytest.CaptureFixture[str]) -> None:
    out_dir = Path(data_files["dir"]) / "out"
    code = cli.main(
        [
            "card",
            "LeBron over 27.5 points",
            "--logs",
            data_files["logs"],
            "--roster",
            data_files["roster"],
            "--as-of",
            "2024-03-01",
            "--output-dir",
            str(out_dir),
        ]
    )

    assert code == 0
    assert capsys.readouterr().out.startswith("LeBron James (LAL) OVER 27.5 PTS")
    exported = list(out_dir.glob("lebron_james_*.json"))
    assert len(exported) == 1
    payload = json.loads(exported[0].read_text(encoding="utf-8"))
    assert payload["summary"]["season"]["sample_size"] == 6


def test_card_command_invalid_query(data_files: dict[str, str]) -> None:
    code = cli.main(["card", "", "--logs", data_files["logs"], "--roster", data_files["roster"]])
    assert code == 2


def test_batch_command(data_files: dict[str, str], capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(
        [
            "batch",
            data_files["queries"],
            "--logs",
            data_files["logs"],
            "--roster",
            data_files["roster"],
            "--as-of",
            "2024-03-01T10:00:00",
        ]
    )

    output = capsys.readouterr().out
    assert code == 1
    assert "LeBron James" in output
    assert "ERROR" in output
