"""CLI entry point: python -m snakes_ladders {run,stats,chart,export,roll,reset}."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from snakes_ladders.chart import make_length_chart
from snakes_ladders.dice import RandomDie
from snakes_ladders.engine import GameEngine, SnakesLaddersError
from snakes_ladders.game import GameResult, GameRunner, describe_outcome
from snakes_ladders.persistence import DEFAULT_SNAPSHOT_KEY, GameStore, persist_game_log
from snakes_ladders.stats import compute_stats


RESULTS_DIR = Path("results")
DB_PATH = RESULTS_DIR / "games.db"


def _db_path(args: argparse.Namespace) -> Path:
    if getattr(args, "db", None):
        return Path(args.db)
    return Path(os.environ.get("SNAKES_LADDERS_DB", DB_PATH))


def _open_db(args: argparse.Namespace) -> GameStore:
    return GameStore(_db_path(args))


def _open_existing_db(args: argparse.Namespace) -> GameStore:
    path = _db_path(args)
    if not path.exists():
        print(f"No database found at {path}. Run some games first.", file=sys.stderr)
        sys.exit(1)
    return GameStore(path)


def _record_result(
    store: GameStore, engine: GameEngine, result: GameResult, seed: int | None,
) -> int:
    winner = engine.winner()
    game_id = store.record_game(
        winner_id=winner.id if winner else None,
        winner_label=winner.label if winner else None,
        reason=result.reason,
        turns=result.turns,
        seed=seed,
        player_count=len(engine.state.players),
    )
    persist_game_log(store, game_id, result.log)
    return game_id


# ── run ──────────────────────────────────────────────────────────────

def cmd_run(args: argparse.Namespace) -> None:
    """Simulate games with a random die and record every roll."""
    store = _open_db(args)

    for i in range(args.games):
        seed = args.seed + i if args.seed is not None else None
        engine = GameEngine(
            die=RandomDie(seed=seed),
            overshoot_passes_turn=not args.keep_turn_on_overshoot,
        )
        result = GameRunner(engine, max_turns=args.max_turns).play()
        game_id = _record_result(store, engine, result, seed)

        if args.verbose:
            for entry in result.log:
                print(f"  [{entry.turn_number:3d}] rolled {entry.outcome.rolled_value}: {entry.message}")

        winner = engine.winner()
        label = f"[{i + 1}/{args.games}] game {game_id}"
        print(f"{label}: {result.reason} → {winner.label if winner else 'no winner'} "
              f"after {result.turns} rolls", flush=True)

    store.close()


# ── stats ────────────────────────────────────────────────────────────

def cmd_stats(args: argparse.Namespace) -> None:
    """Print aggregate statistics from the database."""
    store = _open_existing_db(args)
    games = store.list_games()
    moves = store.list_moves()
    labels = {g.winner_id: g.winner_label for g in games if g.winner_id is not None}
    store.close()

    if not games:
        print("No completed games yet.", file=sys.stderr)
        sys.exit(1)

    stats = compute_stats(games, moves)
    print("\nSnakes & Ladders Statistics")
    print("=" * 40)
    print(f"  {'Games':30s} {stats.games:7d}")
    for player_id, wins in stats.wins_by_player.items():
        name = labels.get(player_id) or f"Player {player_id}"
        print(f"  {name:30s} {wins:7d}  ({stats.win_rate(player_id):.1%})")
    print(f"  {'Unfinished':30s} {stats.unfinished:7d}")
    print(f"  {'Rolls per game (mean)':30s} {stats.mean_turns:7.1f}")
    print(f"  {'Rolls per game (min / max)':30s} {stats.min_turns:3d} / {stats.max_turns}")
    print(f"  {'Ladders climbed':30s} {stats.ladder_climbs:7d}")
    print(f"  {'Snakes slid':30s} {stats.snake_slides:7d}")
    print(f"  {'Overshoots':30s} {stats.overshoots:7d}")


# ── chart ────────────────────────────────────────────────────────────

def cmd_chart(args: argparse.Namespace) -> None:
    """Generate a game-length histogram from the database."""
    store = _open_existing_db(args)
    games = store.list_games()
    store.close()

    if not games:
        print("No completed games yet.", file=sys.stderr)
        sys.exit(1)

    out = args.output or "game_lengths.png"
    make_length_chart([g.turns for g in games], output_path=out)
    print(f"Chart saved to {out}")


# ── export ───────────────────────────────────────────────────────────

def cmd_export(args: argparse.Namespace) -> None:
    """Write games.json and one file per game."""
    from snakes_ladders.export import generate_all

    path = _db_path(args)
    if not path.exists():
        print(f"No database found at {path}. Run some games first.", file=sys.stderr)
        sys.exit(1)

    out_dir = Path(args.output or RESULTS_DIR / "export")
    generated = generate_all(path, out_dir)
    print(f"Generated {len(generated)} JSON files in {out_dir}")


# ── roll / reset (saved game) ───────────────────────────────────────

def cmd_roll(args: argparse.Namespace) -> None:
    """Roll once for the saved game, creating it on first use."""
    store = _open_db(args)
    engine = GameEngine()
    try:
        store.restore_into(engine, key=args.key)
        player = engine.current_player()
        if args.value is not None:
            outcome = engine.roll(args.value)
        else:
            outcome = engine.roll_die()
    except SnakesLaddersError as exc:
        store.close()
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    store.save_snapshot(engine, key=args.key)
    store.close()

    print(f"{player.label} rolled {outcome.rolled_value}. {describe_outcome(outcome, player.label)}")
    print("Positions: " + ", ".join(f"{p.label} {p.position}" for p in engine.state.players))
    if not outcome.is_win:
        print(f"Next: {engine.current_player().label}")


def cmd_reset(args: argparse.Namespace) -> None:
    """Forget the saved game."""
    store = _open_db(args)
    store.delete_snapshot(key=args.key)
    store.close()
    print("Game reset.")


# ── main ─────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(
        prog="snakes_ladders",
        description="Snakes & Ladders simulator",
    )
    parser.add_argument("--db", help=f"SQLite path (default $SNAKES_LADDERS_DB or {DB_PATH})")
    sub = parser.add_subparsers(dest="command")

    p_run = sub.add_parser("run", help="Simulate games and record them")
    p_run.add_argument("--games", type=int, default=100, help="Games to simulate (default 100)")
    p_run.add_argument("--seed", type=int, help="Base seed; game i uses seed + i")
    p_run.add_argument("--max-turns", type=int, default=500, help="Max rolls per game")
    p_run.add_argument("--keep-turn-on-overshoot", action="store_true",
                       help="Let a player who overshoots 100 keep the turn")
    p_run.add_argument("--verbose", "-v", action="store_true", help="Print every roll")

    sub.add_parser("stats", help="Print win rates and move statistics")

    p_chart = sub.add_parser("chart", help="Generate game-length histogram")
    p_chart.add_argument("--output", "-o", help="Output PNG path")

    p_export = sub.add_parser("export", help="Export games to JSON")
    p_export.add_argument("--output", "-o", help="Output directory")

    p_roll = sub.add_parser("roll", help="Roll once for the saved game")
    p_roll.add_argument("--value", type=int, help="Use this die value instead of a random one")
    p_roll.add_argument("--key", default=DEFAULT_SNAPSHOT_KEY, help="Snapshot key")

    p_reset = sub.add_parser("reset", help="Reset the saved game")
    p_reset.add_argument("--key", default=DEFAULT_SNAPSHOT_KEY, help="Snapshot key")

    args = parser.parse_args()
    if args.command == "run":
        cmd_run(args)
    elif args.command == "stats":
        cmd_stats(args)
    elif args.command == "chart":
        cmd_chart(args)
    elif args.command == "export":
        cmd_export(args)
    elif args.command == "roll":
        cmd_roll(args)
    elif args.command == "reset":
        cmd_reset(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
