"""
Number pool for one round.

The pool holds the numbers not yet called, in draw order: draw() pops from
the end, so the last element is the next number called.
"""

from __future__ import annotations

from housie.logic.exceptions import PoolExhaustedError
from housie.logic.rng import generate_seed, shuffled_number_range
from housie.logic.settings import NUMBERS_RANGE_MAX, NUMBERS_RANGE_MIN


class NumberPool:
    """Shuffled, exhaustible sequence of the game numbers for one round."""

    def __init__(self, remaining: list[int] | None = None) -> None:
        self._remaining: list[int] = list(remaining) if remaining is not None else []

    @classmethod
    def initialize(
        cls,
        seed: str | None = None,
        round_number: int = 0,
        low: int = NUMBERS_RANGE_MIN,
        high: int = NUMBERS_RANGE_MAX,
    ) -> NumberPool:
        """Build a full pool covering [low, high] in uniformly random order."""
        if seed is None:
            seed = generate_seed()
        return cls(shuffled_number_range(seed, round_number, low, high))

    @property
    def remaining(self) -> tuple[int, ...]:
        return tuple(self._remaining)

    @property
    def is_exhausted(self) -> bool:
        return not self._remaining

    def __len__(self) -> int:
        return len(self._remaining)

    def __contains__(self, number: object) -> bool:
        return number in self._remaining

    def draw(self) -> int:
        """Remove and return the next number.

        Raises PoolExhaustedError when every number has been drawn.
        """
        if not self._remaining:
            raise PoolExhaustedError("Number pool is exhausted")
        return self._remaining.pop()
