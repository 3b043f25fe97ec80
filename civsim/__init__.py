"""
civsim - a deterministic, turn-based civilization simulation engine.
"""

__version__ = "1.0.0"
