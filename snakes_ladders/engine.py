"""Game engine — turns die values into canonical board positions.

The engine owns all game state and nothing else: it never renders,
animates or sleeps. Each call to :meth:`GameEngine.roll` resolves a move
completely and returns a :class:`MoveOutcome` describing it, which a
presentation layer can replay at whatever pace it likes.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Sequence

from snakes_ladders.board import BOARD_SIZE, STANDARD_BOARD, Board, LadderTo, SnakeTo
from snakes_ladders.dice import Die, RandomDie

DIE_FACES = 6


# ── Errors ───────────────────────────────────────────────────────────

class SnakesLaddersError(Exception):
    """Base class for every error the engine reports."""


class GameOverError(SnakesLaddersError):
    """A roll was attempted after somebody already won."""


class InvalidDieValue(SnakesLaddersError, ValueError):
    """A die value outside 1..6 (or not an integer at all)."""


class SnapshotError(SnakesLaddersError, ValueError):
    """Persisted state is malformed or out of bounds."""


# ── State ────────────────────────────────────────────────────────────

@dataclass
class Player:
    id: int
    label: str
    position: int = 0  # 0 = not on the board yet


def default_players() -> list[Player]:
    return [
        Player(id=1, label="Player 1 (Red)"),
        Player(id=2, label="Player 2 (Blue)"),
    ]


@dataclass
class GameState:
    """Mutable state for one game. Turn order is list order."""

    players: list[Player] = field(default_factory=default_players)
    current_player_index: int = 0
    game_over: bool = False
    last_roll: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "players": [
                {"id": p.id, "label": p.label, "position": p.position}
                for p in self.players
            ],
            "current_player_index": self.current_player_index,
            "game_over": self.game_over,
            "last_roll": self.last_roll,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], board_size: int = BOARD_SIZE) -> GameState:
        """Rebuild state from :meth:`to_dict` output.

        Only bounds are checked; a snapshot that is in range but could not
        have arisen from real play is accepted as-is.
        """
        try:
            raw_players = data["players"]
            index = data["current_player_index"]
            game_over = data["game_over"]
        except (KeyError, TypeError) as exc:
            raise SnapshotError(f"Snapshot is missing a required field: {exc}") from exc

        if not isinstance(raw_players, list) or not raw_players:
            raise SnapshotError("Snapshot must contain at least one player.")

        players = []
        for i, raw in enumerate(raw_players):
            try:
                pid = raw["id"]
                position = raw["position"]
            except (KeyError, TypeError) as exc:
                raise SnapshotError(f"Player {i} is missing a field: {exc}") from exc
            if not _is_int(pid):
                raise SnapshotError(f"Player {i} has a non-integer id: {pid!r}")
            if not _is_int(position) or not 0 <= position <= board_size:
                raise SnapshotError(
                    f"Player {i} position {position!r} is outside 0..{board_size}."
                )
            label = raw.get("label") or f"Player {pid}"
            players.append(Player(id=pid, label=str(label), position=position))

        if not _is_int(index) or not 0 <= index < len(players):
            raise SnapshotError(f"Current player index {index!r} is out of range.")
        if not isinstance(game_over, bool):
            raise SnapshotError(f"game_over must be a bool, got {game_over!r}.")
        # A player sitting on the last cell has already won.
        if any(p.position == board_size for p in players):
            game_over = True

        last_roll = data.get("last_roll", 0)
        if not _is_int(last_roll) or not 0 <= last_roll <= DIE_FACES:
            raise SnapshotError(f"last_roll {last_roll!r} is outside 0..{DIE_FACES}.")

        return cls(
            players=players,
            current_player_index=index,
            game_over=game_over,
            last_roll=last_roll,
        )


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ── Outcomes ─────────────────────────────────────────────────────────

class MoveKind(str, Enum):
    PLAIN = "plain"
    LADDER = "ladder"
    SNAKE = "snake"
    OVERSHOOT = "overshoot"


@dataclass(frozen=True)
class MoveOutcome:
    """Everything that happened during one roll."""

    player_index: int
    player_id: int
    previous_position: int
    rolled_value: int
    landing_position: int  # equals previous_position on overshoot
    final_position: int
    kind: MoveKind
    is_win: bool = False
    next_player_index: int | None = None  # None once the game is won
    required: int | None = None  # exact roll needed, set on overshoot

    @property
    def hazard_triggered(self) -> bool:
        return self.kind in (MoveKind.LADDER, MoveKind.SNAKE)


class MoveObserver(Protocol):
    """Receives every resolved move, e.g. to drive a renderer."""

    def on_move(self, outcome: MoveOutcome) -> None: ...


# ── Engine ───────────────────────────────────────────────────────────

class GameEngine:
    """Owns a board and the state of one game played on it."""

    def __init__(
        self,
        board: Board = STANDARD_BOARD,
        players: Sequence[Player] | None = None,
        die: Die | None = None,
        observer: MoveObserver | None = None,
        overshoot_passes_turn: bool = True,
    ):
        if players is not None and not players:
            raise ValueError("A game needs at least one player.")
        self.board = board
        self.state = GameState(
            players=[copy.copy(p) for p in players] if players else default_players()
        )
        self.die = die or RandomDie(faces=DIE_FACES)
        self.observer = observer
        self.overshoot_passes_turn = overshoot_passes_turn
        self.reset()

    # ── Queries ──

    def current_player(self) -> Player:
        return self.state.players[self.state.current_player_index]

    def snapshot(self) -> GameState:
        """Deep copy of the current state, safe to hand to a renderer."""
        return copy.deepcopy(self.state)

    def winner(self) -> Player | None:
        if not self.state.game_over:
            return None
        for player in self.state.players:
            if player.position == self.board.size:
                return player
        return None

    def positions(self) -> list[int]:
        return [p.position for p in self.state.players]

    # ── Commands ──

    def roll(self, die_value: int) -> MoveOutcome:
        """Advance the game by one roll of *die_value*.

        Raises :class:`GameOverError` once someone has won and
        :class:`InvalidDieValue` for anything but an int in 1..6. Neither
        error changes state.
        """
        state = self.state
        if state.game_over:
            raise GameOverError("The game is over; reset to play again.")
        if not _is_int(die_value) or not 1 <= die_value <= DIE_FACES:
            raise InvalidDieValue(f"Die value must be 1..{DIE_FACES}, got {die_value!r}.")

        index = state.current_player_index
        player = state.players[index]
        size = self.board.size
        current = player.position
        target = current + die_value
        state.last_roll = die_value

        # Overshoot → stay put
        if target > size:
            next_index = index
            if self.overshoot_passes_turn:
                next_index = self._rotate()
            outcome = MoveOutcome(
                player_index=index,
                player_id=player.id,
                previous_position=current,
                rolled_value=die_value,
                landing_position=current,
                final_position=current,
                kind=MoveKind.OVERSHOOT,
                next_player_index=next_index,
                required=size - current,
            )
            return self._emit(outcome)

        effect = self.board.effect_at(target)
        if isinstance(effect, LadderTo):
            final, kind = effect.target, MoveKind.LADDER
        elif isinstance(effect, SnakeTo):
            final, kind = effect.target, MoveKind.SNAKE
        else:
            final, kind = target, MoveKind.PLAIN

        player.position = final

        if final == size:
            state.game_over = True
            next_index = None
        else:
            next_index = self._rotate()

        outcome = MoveOutcome(
            player_index=index,
            player_id=player.id,
            previous_position=current,
            rolled_value=die_value,
            landing_position=target,
            final_position=final,
            kind=kind,
            is_win=state.game_over,
            next_player_index=next_index,
        )
        return self._emit(outcome)

    def roll_die(self) -> MoveOutcome:
        """Draw a value from the configured die and :meth:`roll` it."""
        if self.state.game_over:
            raise GameOverError("The game is over; reset to play again.")
        return self.roll(self.die.roll())

    def reset(self) -> None:
        for player in self.state.players:
            player.position = 0
        self.state.current_player_index = 0
        self.state.game_over = False
        self.state.last_roll = 0

    # ── Persistence ──

    def to_dict(self) -> dict[str, Any]:
        return self.state.to_dict()

    def restore(self, data: dict[str, Any]) -> None:
        """Replace the current state with a persisted snapshot.

        The snapshot is validated before anything is replaced, so a bad
        snapshot leaves the running game untouched.
        """
        self.state = GameState.from_dict(data, board_size=self.board.size)

    # ── Internals ──

    def _rotate(self) -> int:
        state = self.state
        state.current_player_index = (state.current_player_index + 1) % len(state.players)
        return state.current_player_index

    def _emit(self, outcome: MoveOutcome) -> MoveOutcome:
        if self.observer is not None:
            self.observer.on_move(outcome)
        return outcome
