"""
Seeded random source shared by all generators of a session.
"""

from __future__ import annotations

import random
import string
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

_SEED_BOUND = 2**63


class RandomSource:
    """
    Random number source with helpers used by generators.

    A source is created from a seed; two sources with the same seed produce
    the same sequence of values. Not safe for concurrent use.
    """

    def __init__(self, seed: int | None = None):
        if seed is None:
            seed = random.SystemRandom().randrange(_SEED_BOUND)
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        """The seed this source was created with."""
        return self._seed

    def int_range(self, min_value: int, max_value: int) -> int:
        """Random integer between ``min_value`` and ``max_value``, both inclusive."""
        return self._random.randint(min_value, max_value)

    def float_range(self, min_value: float, max_value: float) -> float:
        """Random float between ``min_value`` and ``max_value``."""
        return self._random.uniform(min_value, max_value)

    def true_or_false(self) -> bool:
        return self._random.random() < 0.5

    def probability(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self._random.random() < probability

    def dice_roll(self, precondition: bool = True) -> bool:
        """Return True with probability 1/6 when ``precondition`` holds."""
        return precondition and self._random.randint(1, 6) == 1

    def one_of(self, values: Sequence[T]) -> T:
        """Pick a random element of a non-empty sequence."""
        return values[self._random.randrange(len(values))]

    def get_random_bits(self, bits: int) -> int:
        return self._random.getrandbits(bits)

    def chars(self, alphabet: str, length: int) -> str:
        return "".join(self._random.choice(alphabet) for _ in range(length))

    def upper_case_alphabetic(self, length: int) -> str:
        return self.chars(string.ascii_uppercase, length)

    def lower_case_alphabetic(self, length: int) -> str:
        return self.chars(string.ascii_lowercase, length)

    def alphabetic(self, length: int) -> str:
        return self.chars(string.ascii_letters, length)

    def alphanumeric(self, length: int) -> str:
        return self.chars(string.ascii_uppercase + string.digits, length)

    def digits(self, length: int) -> str:
        return self.chars(string.digits, length)
