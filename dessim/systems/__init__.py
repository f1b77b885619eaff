"""Engine systems: deterministic randomness."""

from dessim.systems.rng import DeterministicRNG

__all__ = ["DeterministicRNG"]
