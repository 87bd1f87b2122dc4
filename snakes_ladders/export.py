"""Export recorded games to JSON, with optional S3-compatible upload."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path


def export_games_list(db_path: Path | str) -> list[dict]:
    """Read all games from the DB and return as a list of dicts."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    rows = conn.execute(
        "SELECT id, seed, winner_id, winner_label, reason, turns, player_count, created_at "
        "FROM games ORDER BY id"
    ).fetchall()
    conn.close()
    return [dict(r) for r in rows]


def export_game_events(db_path: Path | str, game_id: int) -> dict | None:
    """Export one game and its rolls as a structured dict.

    Returns ``None`` if the game does not exist. Each move carries
    ``board_before``/``board_after`` position lists rebuilt from the
    recorded rolls, so a viewer can replay the game without the engine.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row

    game_row = conn.execute(
        "SELECT id, seed, winner_id, winner_label, reason, turns, player_count, created_at "
        "FROM games WHERE id = ?",
        (game_id,),
    ).fetchone()
    if game_row is None:
        conn.close()
        return None

    move_rows = conn.execute(
        "SELECT turn_number, player_idx, previous_position, rolled_value, "
        "landing_position, final_position, kind, is_win "
        "FROM moves WHERE game_id = ? ORDER BY turn_number",
        (game_id,),
    ).fetchall()
    conn.close()

    board = [0] * game_row["player_count"]

    moves: list[dict] = []
    for row in move_rows:
        move = dict(row)
        move["is_win"] = bool(move["is_win"])
        move["board_before"] = list(board)
        board[move["player_idx"]] = move["final_position"]
        move["board_after"] = list(board)
        moves.append(move)

    return {"game": dict(game_row), "moves": moves, "final_positions": board}


def generate_all(db_path: Path | str, output_dir: Path) -> list[Path]:
    """Generate games.json and per-game move files.

    Returns a list of all generated file paths.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    games_dir = output_dir / "games"
    games_dir.mkdir(exist_ok=True)

    generated: list[Path] = []

    games = export_games_list(db_path)
    games_path = output_dir / "games.json"
    games_path.write_text(json.dumps(games, indent=2))
    generated.append(games_path)

    for game in games:
        game_id = game["id"]
        data = export_game_events(db_path, game_id)
        if data is None:
            continue
        game_path = games_dir / f"{game_id}.json"
        game_path.write_text(json.dumps(data, indent=2))
        generated.append(game_path)

    return generated


def upload_to_s3(
    files: dict[str, bytes],
    bucket_name: str,
    endpoint_url: str,
    key_id: str,
    app_key: str,
) -> None:
    """Upload files to any S3-compatible bucket.

    ``files`` maps object keys (e.g. ``"data/games.json"``) to content bytes.
    """
    import boto3  # type: ignore[import-untyped]

    s3 = boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=key_id,
        aws_secret_access_key=app_key,
    )

    for key, content in files.items():
        s3.put_object(
            Bucket=bucket_name,
            Key=key,
            Body=content,
            ContentType="application/json",
        )
