"""
Civilization simulation engine.
Core rules only: no network front end, no persistence, no rendering.
"""
