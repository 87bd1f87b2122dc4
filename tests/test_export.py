"""Tests for game export."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from snakes_ladders.dice import ScriptedDie
from snakes_ladders.engine import GameEngine
from snakes_ladders.game import GameRunner
from snakes_ladders.persistence import GameStore, persist_game_log


@pytest.fixture
def populated_db(tmp_path: Path) -> Path:
    """A DB holding one three-roll game: ladder, plain, snake."""
    db_path = tmp_path / "test.db"
    store = GameStore(db_path)
    engine = GameEngine(die=ScriptedDie([4, 5, 2]))
    result = GameRunner(engine, max_turns=3).play()
    game_id = store.record_game(None, None, result.reason, result.turns, seed=11)
    persist_game_log(store, game_id, result.log)
    store.close()
    return db_path


def test_export_games_list(populated_db: Path) -> None:
    from snakes_ladders.export import export_games_list

    games = export_games_list(populated_db)
    assert len(games) == 1
    game = games[0]
    assert game["id"] == 1
    assert game["seed"] == 11
    assert game["reason"] == "max_turns"
    assert game["turns"] == 3
    assert game["winner_id"] is None


def test_export_games_list_empty(tmp_path: Path) -> None:
    from snakes_ladders.export import export_games_list

    db_path = tmp_path / "empty.db"
    GameStore(db_path).close()
    assert export_games_list(db_path) == []


def test_export_game_events_rebuilds_boards(populated_db: Path) -> None:
    from snakes_ladders.export import export_game_events

    result = export_game_events(populated_db, game_id=1)
    assert result is not None
    moves = result["moves"]
    assert [m["kind"] for m in moves] == ["ladder", "plain", "snake"]
    assert moves[0]["board_before"] == [0, 0]
    assert moves[0]["board_after"] == [14, 0]
    assert moves[1]["board_after"] == [14, 5]
    assert moves[2]["board_after"] == [6, 5]
    assert moves[2]["is_win"] is False
    assert result["final_positions"] == [6, 5]


def test_export_game_events_nonexistent(populated_db: Path) -> None:
    from snakes_ladders.export import export_game_events

    assert export_game_events(populated_db, game_id=999) is None


def test_export_game_events_json_serializable(populated_db: Path) -> None:
    from snakes_ladders.export import export_game_events

    result = export_game_events(populated_db, game_id=1)
    roundtripped = json.loads(json.dumps(result))
    assert roundtripped["game"]["id"] == 1
    assert len(roundtripped["moves"]) == 3


def test_generate_all(populated_db: Path, tmp_path: Path) -> None:
    from snakes_ladders.export import generate_all

    out_dir = tmp_path / "out"
    generated = generate_all(populated_db, out_dir)
    assert out_dir / "games.json" in generated
    assert out_dir / "games" / "1.json" in generated
    assert json.loads((out_dir / "games.json").read_text())[0]["id"] == 1


def test_upload_to_s3_puts_every_file() -> None:
    from snakes_ladders.export import upload_to_s3

    client = MagicMock()
    fake_boto3 = MagicMock()
    fake_boto3.client.return_value = client

    with patch.dict("sys.modules", {"boto3": fake_boto3}):
        upload_to_s3(
            files={"data/games.json": b"[]", "data/games/1.json": b"{}"},
            bucket_name="bucket",
            endpoint_url="https://s3.example.com",
            key_id="id",
            app_key="secret",
        )

    fake_boto3.client.assert_called_once_with(
        "s3",
        endpoint_url="https://s3.example.com",
        aws_access_key_id="id",
        aws_secret_access_key="secret",
    )
    keys = [c.kwargs["Key"] for c in client.put_object.call_args_list]
    assert keys == ["data/games.json", "data/games/1.json"]


def test_export_game_events_uses_recorded_player_count(tmp_path: Path) -> None:
    from snakes_ladders.engine import Player
    from snakes_ladders.export import export_game_events

    db_path = tmp_path / "three.db"
    store = GameStore(db_path)
    players = [Player(1, "A"), Player(2, "B"), Player(3, "C")]
    engine = GameEngine(players=players, die=ScriptedDie([1, 1]))
    result = GameRunner(engine, max_turns=2).play()
    game_id = store.record_game(None, None, result.reason, result.turns, player_count=3)
    persist_game_log(store, game_id, result.log)
    store.close()

    data = export_game_events(db_path, game_id)
    assert data["game"]["player_count"] == 3
    assert data["final_positions"] == [1, 1, 0]
    assert all(len(m["board_after"]) == 3 for m in data["moves"])
