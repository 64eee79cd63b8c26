#!/usr/bin/env python3
"""
Entropy Source
==============
The one place word generation gets its randomness from.

By default draws come from secrets.SystemRandom (the OS entropy pool), so
generated words are not predictable from earlier output. Pass a seed to get
a reproducible random.Random instead, which is what the tests do.

Anything with ``randrange(n)`` and ``choice(seq)`` can stand in for a
RandomSource, including a plain ``random.Random``.
"""

import random
import secrets
from typing import Any, Optional, Sequence


class RandomSource:
    """
    Uniform integer and uniform choice, nothing more.

    Usage:
        rng = RandomSource()          # secure, non-reproducible
        rng = RandomSource(seed=42)   # deterministic
        rng.randrange(10)             # 0 <= n < 10
        rng.choice(['a', 'b'])
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        if seed is None:
            self._rng = secrets.SystemRandom()
        else:
            self._rng = random.Random(seed)

    @property
    def deterministic(self) -> bool:
        return self.seed is not None

    def randrange(self, stop: int) -> int:
        """Return a random integer N such that 0 <= N < stop."""
        if stop <= 0:
            raise ValueError(f"randrange() needs a positive bound, got {stop}")
        return self._rng.randrange(stop)

    def choice(self, seq: Sequence) -> Any:
        """Return a random element from non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from empty sequence")
        return self._rng.choice(seq)

    def __repr__(self) -> str:
        kind = f"seed={self.seed}" if self.deterministic else "system"
        return f"RandomSource({kind})"


__all__ = ['RandomSource']
