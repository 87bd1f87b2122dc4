"""SQLite persistence for saved games and simulation results.

Two concerns share one database file: named snapshots of an in-progress
game (save on every move, load on start, delete on reset), and a log of
finished simulated games with one row per roll.
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from snakes_ladders.engine import GameEngine, SnapshotError

if TYPE_CHECKING:
    from snakes_ladders.game import LogEntry

DEFAULT_SNAPSHOT_KEY = "snakeLaddersGameState"


@dataclass
class GameRecord:
    id: int
    seed: int | None
    winner_id: int | None
    winner_label: str | None
    reason: str
    turns: int
    player_count: int = 2


@dataclass
class MoveRecord:
    game_id: int
    turn_number: int
    player_idx: int
    previous_position: int
    rolled_value: int
    landing_position: int
    final_position: int
    kind: str
    is_win: bool


class GameStore:
    """Thin wrapper around a SQLite database for snapshots and game logs."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.path)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()

    def _create_tables(self) -> None:
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS snapshots (
                key         TEXT PRIMARY KEY,
                data        TEXT NOT NULL,
                updated_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            CREATE TABLE IF NOT EXISTS games (
                id              INTEGER PRIMARY KEY AUTOINCREMENT,
                seed            INTEGER,
                winner_id       INTEGER,
                winner_label    TEXT,
                reason          TEXT NOT NULL,
                turns           INTEGER NOT NULL,
                player_count    INTEGER NOT NULL DEFAULT 2,
                created_at      TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            CREATE TABLE IF NOT EXISTS moves (
                id                  INTEGER PRIMARY KEY AUTOINCREMENT,
                game_id             INTEGER NOT NULL REFERENCES games(id),
                turn_number         INTEGER NOT NULL,
                player_idx          INTEGER NOT NULL,
                previous_position   INTEGER NOT NULL,
                rolled_value        INTEGER NOT NULL,
                landing_position    INTEGER NOT NULL,
                final_position      INTEGER NOT NULL,
                kind                TEXT NOT NULL,
                is_win              INTEGER NOT NULL DEFAULT 0,
                UNIQUE(game_id, turn_number)
            );
        """)
        # Databases written before player_count existed.
        columns = {r[1] for r in self._conn.execute("PRAGMA table_info(games)")}
        if "player_count" not in columns:
            self._conn.execute(
                "ALTER TABLE games ADD COLUMN player_count INTEGER NOT NULL DEFAULT 2"
            )
        self._conn.commit()

    # ── Snapshots ───────────────────────────────────────────────────

    def save_snapshot(self, engine: GameEngine, key: str = DEFAULT_SNAPSHOT_KEY) -> None:
        """Store the engine's current state under *key*, replacing any previous one."""
        self._conn.execute(
            "INSERT INTO snapshots (key, data) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET data = excluded.data, "
            "updated_at = CURRENT_TIMESTAMP",
            (key, json.dumps(engine.to_dict())),
        )
        self._conn.commit()

    def load_snapshot(self, key: str = DEFAULT_SNAPSHOT_KEY) -> dict[str, Any] | None:
        row = self._conn.execute(
            "SELECT data FROM snapshots WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Snapshot {key!r} is not valid JSON.") from exc

    def restore_into(self, engine: GameEngine, key: str = DEFAULT_SNAPSHOT_KEY) -> bool:
        """Load *key* into *engine*. Returns False when nothing was saved."""
        data = self.load_snapshot(key)
        if data is None:
            return False
        engine.restore(data)
        return True

    def delete_snapshot(self, key: str = DEFAULT_SNAPSHOT_KEY) -> None:
        self._conn.execute("DELETE FROM snapshots WHERE key = ?", (key,))
        self._conn.commit()

    # ── Game log ────────────────────────────────────────────────────

    def record_game(
        self,
        winner_id: int | None,
        winner_label: str | None,
        reason: str,
        turns: int,
        seed: int | None = None,
        player_count: int = 2,
    ) -> int:
        """Record a finished game. Returns the new game id."""
        cur = self._conn.execute(
            "INSERT INTO games (seed, winner_id, winner_label, reason, turns, player_count) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (seed, winner_id, winner_label, reason, turns, player_count),
        )
        self._conn.commit()
        return cur.lastrowid  # type: ignore[return-value]

    def record_move(
        self,
        game_id: int,
        turn_number: int,
        player_idx: int,
        previous_position: int,
        rolled_value: int,
        landing_position: int,
        final_position: int,
        kind: str,
        is_win: bool = False,
        commit: bool = True,
    ) -> int:
        cur = self._conn.execute(
            "INSERT INTO moves (game_id, turn_number, player_idx, previous_position, "
            "rolled_value, landing_position, final_position, kind, is_win) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (game_id, turn_number, player_idx, previous_position, rolled_value,
             landing_position, final_position, kind, int(is_win)),
        )
        if commit:
            self._conn.commit()
        return cur.lastrowid  # type: ignore[return-value]

    def list_games(self) -> list[GameRecord]:
        rows = self._conn.execute(
            "SELECT id, seed, winner_id, winner_label, reason, turns, player_count "
            "FROM games ORDER BY id"
        ).fetchall()
        return [
            GameRecord(id=r[0], seed=r[1], winner_id=r[2], winner_label=r[3],
                       reason=r[4], turns=r[5], player_count=r[6])
            for r in rows
        ]

    def list_moves(self, game_id: int | None = None) -> list[MoveRecord]:
        sql = (
            "SELECT game_id, turn_number, player_idx, previous_position, rolled_value, "
            "landing_position, final_position, kind, is_win FROM moves"
        )
        params: tuple = ()
        if game_id is not None:
            sql += " WHERE game_id = ?"
            params = (game_id,)
        rows = self._conn.execute(sql + " ORDER BY game_id, turn_number", params).fetchall()
        return [
            MoveRecord(game_id=r[0], turn_number=r[1], player_idx=r[2],
                       previous_position=r[3], rolled_value=r[4], landing_position=r[5],
                       final_position=r[6], kind=r[7], is_win=bool(r[8]))
            for r in rows
        ]

    def commit(self) -> None:
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()


# ── Game log persistence ─────────────────────────────────────────────

def persist_game_log(store: GameStore, game_id: int, entries: list[LogEntry]) -> None:
    """Write every roll of a finished game to the moves table in one commit."""
    for entry in entries:
        outcome = entry.outcome
        store.record_move(
            game_id=game_id,
            turn_number=entry.turn_number,
            player_idx=entry.player,
            previous_position=outcome.previous_position,
            rolled_value=outcome.rolled_value,
            landing_position=outcome.landing_position,
            final_position=outcome.final_position,
            kind=outcome.kind.value,
            is_win=outcome.is_win,
            commit=False,
        )
    store.commit()
