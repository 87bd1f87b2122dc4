"""Board layout and cell effects for Snakes & Ladders."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union

BOARD_SIZE = 100

# fmt: off
LADDERS: dict[int, int] = {
     4: 14,   9: 31,  21: 42,  28: 84,  51: 67,  72: 91,
}
SNAKES: dict[int, int] = {
    16:  6,  47: 26,  49: 11,  56: 53,  62: 19,
    64: 60,  87: 24,  93: 73,  95: 75,  98: 78,
}
# fmt: on


class BoardError(ValueError):
    """Raised when hazard tables describe an impossible board."""


@dataclass(frozen=True)
class LadderTo:
    target: int


@dataclass(frozen=True)
class SnakeTo:
    target: int


CellEffect = Union[LadderTo, SnakeTo]


@dataclass(frozen=True)
class Board:
    """Immutable board: a cell count plus one effect per hazard cell.

    Cells without an entry in ``effects`` are plain. Holding a single
    effect per cell means a square can never be both a ladder and a snake.
    Prefer :meth:`from_hazards` when starting from ladder and snake tables;
    boards built directly are checked the same way.
    """

    size: int = BOARD_SIZE
    effects: Mapping[int, CellEffect] = field(default_factory=dict)
    allow_chains: bool = False

    def __post_init__(self) -> None:
        if self.size < 2:
            raise BoardError(f"Board needs at least 2 cells, got {self.size}.")

        effects = dict(self.effects)
        for start, effect in effects.items():
            _check_cells(start, effect.target, self.size)
            if isinstance(effect, LadderTo):
                if effect.target <= start:
                    raise BoardError(f"Ladder {start} → {effect.target} must go up.")
            elif isinstance(effect, SnakeTo):
                if effect.target >= start:
                    raise BoardError(f"Snake {start} → {effect.target} must go down.")
            else:
                raise BoardError(f"Unknown cell effect at {start}: {effect!r}")

        if not self.allow_chains:
            for start, effect in effects.items():
                if effect.target in effects:
                    raise BoardError(
                        f"Hazard at {start} ends on another hazard at {effect.target}."
                    )

        # Own a private read-only copy so callers can't mutate the board later.
        object.__setattr__(self, "effects", MappingProxyType(effects))

    @classmethod
    def from_hazards(
        cls,
        ladders: Mapping[int, int],
        snakes: Mapping[int, int],
        size: int = BOARD_SIZE,
        allow_chains: bool = False,
    ) -> Board:
        overlap = set(ladders) & set(snakes)
        if overlap:
            raise BoardError(f"Cells are both ladder and snake: {sorted(overlap)}")

        effects: dict[int, CellEffect] = {}
        for start, end in ladders.items():
            effects[start] = LadderTo(end)
        for start, end in snakes.items():
            effects[start] = SnakeTo(end)
        return cls(size=size, effects=effects, allow_chains=allow_chains)

    def effect_at(self, cell: int) -> CellEffect | None:
        return self.effects.get(cell)

    def destination(self, cell: int) -> int | None:
        effect = self.effects.get(cell)
        return effect.target if effect is not None else None

    def is_ladder(self, cell: int) -> bool:
        return isinstance(self.effects.get(cell), LadderTo)

    def is_snake(self, cell: int) -> bool:
        return isinstance(self.effects.get(cell), SnakeTo)

    def ladders(self) -> dict[int, int]:
        return {c: e.target for c, e in sorted(self.effects.items()) if isinstance(e, LadderTo)}

    def snakes(self) -> dict[int, int]:
        return {c: e.target for c, e in sorted(self.effects.items()) if isinstance(e, SnakeTo)}


def _check_cells(start: int, end: int, size: int) -> None:
    # The last cell ends the game, so nothing may start there.
    if not 1 <= start < size:
        raise BoardError(f"Hazard start {start} is outside 1..{size - 1}.")
    if not 1 <= end <= size:
        raise BoardError(f"Hazard end {end} is outside 1..{size}.")


STANDARD_BOARD = Board.from_hazards(LADDERS, SNAKES)
