"""Aggregate statistics over recorded games."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from snakes_ladders.persistence import GameRecord, MoveRecord


@dataclass
class GameStats:
    games: int = 0
    wins_by_player: dict[int, int] = field(default_factory=dict)  # keyed by player id
    unfinished: int = 0
    mean_turns: float = 0.0
    min_turns: int = 0
    max_turns: int = 0
    ladder_climbs: int = 0
    snake_slides: int = 0
    overshoots: int = 0

    def win_rate(self, player_id: int) -> float:
        finished = self.games - self.unfinished
        if finished == 0:
            return 0.0
        return self.wins_by_player.get(player_id, 0) / finished


def compute_stats(games: list[GameRecord], moves: list[MoveRecord]) -> GameStats:
    """Summarize games and their moves.

    Games that hit the turn cap count toward ``games`` and the turn
    figures but not toward any player's wins.
    """
    if not games:
        return GameStats()

    wins: Counter[int] = Counter()
    unfinished = 0
    for game in games:
        if game.reason == "win" and game.winner_id is not None:
            wins[game.winner_id] += 1
        else:
            unfinished += 1

    kinds = Counter(m.kind for m in moves)
    turns = [g.turns for g in games]

    return GameStats(
        games=len(games),
        wins_by_player=dict(sorted(wins.items())),
        unfinished=unfinished,
        mean_turns=sum(turns) / len(turns),
        min_turns=min(turns),
        max_turns=max(turns),
        ladder_climbs=kinds["ladder"],
        snake_slides=kinds["snake"],
        overshoots=kinds["overshoot"],
    )
