"""Stream-separated deterministic RNG using xxhash.

A draw depends ONLY on (seed, stream, key, counter), never on the order in
which processes happen to ask for numbers. Two runs with the same seed and
the same client code therefore produce the same timings.

Formula: RNG_Value = Hash(Seed, Stream, Key, Counter)
"""

from __future__ import annotations

import math
import struct

import xxhash

from dessim.core.enums import Stream


class DeterministicRNG:
    """Stateless stream-separated pseudo-random number generator.

    Each call is a pure function of (seed, stream, key, counter) —
    no internal mutable state.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, stream: Stream, key: int, counter: int) -> int:
        payload = struct.pack("<qiqq", self._seed, int(stream), key, counter)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, stream: Stream, key: int, counter: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(stream, key, counter) / (self._MAX_UINT64 + 1)

    def next_int(self, stream: Stream, key: int, counter: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(stream, key, counter)
        return low + int(f * (high - low + 1))

    def next_bool(self, stream: Stream, key: int, counter: int, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float(stream, key, counter) < probability

    def exponential(self, stream: Stream, key: int, counter: int, mean: float) -> float:
        """Exponentially distributed value with the given *mean* (inverse transform)."""
        if mean <= 0:
            raise ValueError(f"mean must be > 0, got {mean}")
        u = self.next_float(stream, key, counter)
        return -mean * math.log(1.0 - u)

    def normal(self, stream: Stream, key: int, counter: int, mu: float, sigma: float) -> float:
        """Normally distributed value (Box-Muller over two decorrelated draws)."""
        if sigma < 0:
            raise ValueError(f"sigma must be >= 0, got {sigma}")
        # 2*counter and 2*counter+1 keep consecutive counters disjoint.
        u1 = self.next_float(stream, key, 2 * counter)
        u2 = self.next_float(stream, key, 2 * counter + 1)
        z = math.sqrt(-2.0 * math.log(1.0 - u1)) * math.cos(2.0 * math.pi * u2)
        return mu + sigma * z
