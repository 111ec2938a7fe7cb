"""
Randomness sources.

Every function that samples a secret takes an explicit RandomSource.
SecureRandom reads the OS CSPRNG and is the default; DeterministicRandom
is a seeded PRNG for reproducible tests and must never back a real auction.
"""

import random
import secrets
from typing import Optional, Protocol

from sbrac.core.errors import RandomSourceError


class RandomSource(Protocol):
    """Anything that can draw a uniform integer in [0, n)."""

    def randbelow(self, n: int) -> int:
        ...


class SecureRandom:
    """OS-backed cryptographic randomness."""

    def randbelow(self, n: int) -> int:
        if n <= 0:
            raise ValueError(f"Upper bound must be positive, got {n}")
        try:
            return secrets.randbelow(n)
        except (OSError, NotImplementedError) as exc:
            raise RandomSourceError(f"Secure random source unavailable: {exc}") from exc


class DeterministicRandom:
    """Seeded PRNG. Reproducible, not secure."""

    def __init__(self, seed: int):
        self.seed = seed
        self._rng = random.Random(seed)

    def randbelow(self, n: int) -> int:
        if n <= 0:
            raise ValueError(f"Upper bound must be positive, got {n}")
        return self._rng.randrange(n)

    def __repr__(self) -> str:
        return f"DeterministicRandom(seed={self.seed})"


def default_rng(rng: Optional[RandomSource] = None) -> RandomSource:
    """Return rng, or a fresh SecureRandom when None."""
    return rng if rng is not None else SecureRandom()


def random_scalar(params, rng: Optional[RandomSource] = None) -> int:
    """Sample uniformly from [0, q)."""
    return default_rng(rng).randbelow(params.q)
