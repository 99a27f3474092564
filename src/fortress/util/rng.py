"""Random source used by every engine service.

Any object with ``randint(a, b)`` (inclusive on both ends) works;
``random.Random`` is the default. Tests inject a scripted source.
"""

from __future__ import annotations

import random
from typing import Optional, Protocol


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Create the default random source, seeded for reproducible runs."""
    return random.Random(seed)


def rand_int(rng: RandomSource, lo: int, hi: int) -> int:
    """Uniform integer in [lo, hi]."""
    return int(rng.randint(int(lo), int(hi)))
