"""Engine layer: the virtual-time environment."""

from dessim.engine.environment import Environment

__all__ = ["Environment"]
