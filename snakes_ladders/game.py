"""Game runner — plays a whole Snakes & Ladders game with a die."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from snakes_ladders.engine import GameEngine, MoveKind, MoveOutcome


# ── Structured types ────────────────────────────────────────────────

@dataclass
class LogEntry:
    """Record of a single roll during a game."""

    turn_number: int
    player: int
    outcome: MoveOutcome
    board_before: list[int]
    board_after: list[int]
    message: str = ""

    @property
    def is_winning_move(self) -> bool:
        return self.outcome.is_win


@dataclass
class GameResult:
    winner: int | None  # player index, or None when the turn cap was hit
    reason: str  # "win" | "max_turns" | "game_over" (engine was already finished)
    turns: int = 0
    log: list[LogEntry] = field(default_factory=list)


# ── Observer ────────────────────────────────────────────────────────

class GameObserver(Protocol):
    """Receives structured events as a game is played."""

    def on_action(self, entry: LogEntry) -> None: ...


@dataclass
class ListObserver:
    """Default observer — collects entries into a list."""

    entries: list[LogEntry] = field(default_factory=list)

    def on_action(self, entry: LogEntry) -> None:
        self.entries.append(entry)


# ── Status text ─────────────────────────────────────────────────────

def describe_outcome(outcome: MoveOutcome, label: str) -> str:
    """One-line status message for a move, as a scoreboard would show it."""
    if outcome.is_win:
        return f"{label} wins!"
    if outcome.kind is MoveKind.OVERSHOOT:
        return f"{label} needs exactly {outcome.required} to win!"
    if outcome.kind is MoveKind.LADDER:
        return f"Climbed ladder from {outcome.landing_position} to {outcome.final_position}!"
    if outcome.kind is MoveKind.SNAKE:
        return f"Slid down snake from {outcome.landing_position} to {outcome.final_position}!"
    return f"{label} moved to {outcome.final_position}"


# ── Runner ───────────────────────────────────────────────────────────

class GameRunner:
    """Roll the engine's die until someone wins or the turn cap is hit."""

    def __init__(
        self,
        engine: GameEngine | None = None,
        max_turns: int = 500,
        observer: GameObserver | None = None,
    ):
        self.engine = engine or GameEngine()
        self.max_turns = max_turns
        self.observer = observer or ListObserver()

    def play(self) -> GameResult:
        engine = self.engine
        log: list[LogEntry] = []
        turn_number = 0

        if engine.state.game_over:
            winner = engine.winner()
            if winner is None:
                return GameResult(winner=None, reason="game_over", turns=0, log=log)
            return GameResult(
                winner=next(i for i, p in enumerate(engine.state.players) if p is winner),
                reason="win",
                turns=0, log=log,
            )

        while turn_number < self.max_turns:
            player = engine.current_player()
            board_before = engine.positions()
            outcome = engine.roll_die()
            turn_number += 1

            entry = LogEntry(
                turn_number=turn_number,
                player=outcome.player_index,
                outcome=outcome,
                board_before=board_before,
                board_after=engine.positions(),
                message=describe_outcome(outcome, player.label),
            )
            log.append(entry)
            self.observer.on_action(entry)

            if outcome.is_win:
                return GameResult(
                    winner=outcome.player_index, reason="win",
                    turns=turn_number, log=log,
                )

        return GameResult(winner=None, reason="max_turns", turns=turn_number, log=log)
