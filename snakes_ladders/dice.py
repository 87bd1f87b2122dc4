"""Die sources — the engine takes values, these produce them."""

from __future__ import annotations

import random
from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class Die(Protocol):
    """Structural interface — anything with ``faces`` and ``roll()`` works."""

    faces: int

    def roll(self) -> int: ...


class RandomDie:
    """Uniform die over 1..faces. Pass *seed* for reproducible games."""

    def __init__(self, faces: int = 6, seed: int | None = None):
        self.faces = faces
        self.seed = seed
        self._rng = random.Random(seed)

    def roll(self) -> int:
        return self._rng.randint(1, self.faces)


class ScriptedDie:
    """Replays a fixed sequence of values, for tests and replays."""

    def __init__(self, values: Iterable[int], faces: int = 6):
        self.faces = faces
        self.values = list(values)
        self._idx = 0

    @property
    def remaining(self) -> int:
        return len(self.values) - self._idx

    def roll(self) -> int:
        if self._idx >= len(self.values):
            raise IndexError("ScriptedDie has no values left.")
        value = self.values[self._idx]
        self._idx += 1
        return value
