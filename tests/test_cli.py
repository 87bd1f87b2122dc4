"""Tests for the python -m snakes_ladders entry point."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from snakes_ladders.__main__ import main
from snakes_ladders.persistence import GameStore


def _run(monkeypatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["snakes_ladders", *argv])
    main()


def test_run_records_games(monkeypatch, tmp_path: Path, capsys):
    db = tmp_path / "games.db"
    _run(monkeypatch, "--db", str(db), "run", "--games", "3", "--seed", "1")

    store = GameStore(db)
    games = store.list_games()
    assert len(games) == 3
    assert [g.seed for g in games] == [1, 2, 3]
    for game in games:
        assert len(store.list_moves(game.id)) == game.turns
    store.close()
    assert "[3/3]" in capsys.readouterr().out


def test_stats_without_db_exits(monkeypatch, tmp_path: Path, capsys):
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, "--db", str(tmp_path / "missing.db"), "stats")
    assert exc.value.code == 1
    assert "No database found" in capsys.readouterr().err


def test_stats_prints_summary(monkeypatch, tmp_path: Path, capsys):
    db = tmp_path / "games.db"
    _run(monkeypatch, "--db", str(db), "run", "--games", "5", "--seed", "3")
    capsys.readouterr()
    _run(monkeypatch, "--db", str(db), "stats")
    out = capsys.readouterr().out
    assert "Games" in out
    assert "Ladders climbed" in out


def test_chart_writes_png(monkeypatch, tmp_path: Path):
    db = tmp_path / "games.db"
    out = tmp_path / "lengths.png"
    _run(monkeypatch, "--db", str(db), "run", "--games", "4", "--seed", "9")
    _run(monkeypatch, "--db", str(db), "chart", "--output", str(out))
    assert out.exists()


def test_export_writes_files(monkeypatch, tmp_path: Path):
    db = tmp_path / "games.db"
    out = tmp_path / "export"
    _run(monkeypatch, "--db", str(db), "run", "--games", "2", "--seed", "4")
    _run(monkeypatch, "--db", str(db), "export", "--output", str(out))
    assert (out / "games.json").exists()
    assert (out / "games" / "2.json").exists()


def test_roll_persists_between_calls(monkeypatch, tmp_path: Path, capsys):
    db = tmp_path / "games.db"
    _run(monkeypatch, "--db", str(db), "roll", "--value", "4")
    _run(monkeypatch, "--db", str(db), "roll", "--value", "5")
    out = capsys.readouterr().out
    assert "Climbed ladder from 4 to 14!" in out
    assert "Player 2 (Blue) moved to 5" in out

    store = GameStore(db)
    snapshot = store.load_snapshot()
    store.close()
    assert [p["position"] for p in snapshot["players"]] == [14, 5]
    assert snapshot["current_player_index"] == 0


def test_roll_rejects_bad_value(monkeypatch, tmp_path: Path, capsys):
    db = tmp_path / "games.db"
    with pytest.raises(SystemExit):
        _run(monkeypatch, "--db", str(db), "roll", "--value", "9")
    assert "Die value" in capsys.readouterr().err


def test_reset_forgets_saved_game(monkeypatch, tmp_path: Path):
    db = tmp_path / "games.db"
    _run(monkeypatch, "--db", str(db), "roll", "--value", "4")
    _run(monkeypatch, "--db", str(db), "reset")
    store = GameStore(db)
    assert store.load_snapshot() is None
    store.close()


def test_db_path_from_env(monkeypatch, tmp_path: Path):
    db = tmp_path / "env.db"
    monkeypatch.setenv("SNAKES_LADDERS_DB", str(db))
    _run(monkeypatch, "roll", "--value", "2")
    assert db.exists()
