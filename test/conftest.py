"""
Shared fixtures: rule definitions, an all-AI config, a seeded random source and
a builder for small hand-made worlds.
"""

import random

import pytest

from civsim.config import make_config
from civsim.engine.definitions import load_static_definitions
from civsim.engine.state import GameState, Player, Terrain, Tile

SEED = 7


class FixedRoll:
    """Stand-in random source whose randrange always returns the same value."""

    def __init__(self, value: int):
        self.value = value

    def randrange(self, *args):
        return self.value


def build_state(width: int = 5, height: int = 5, num_players: int = 2, terrain: Terrain = Terrain.PLAINS) -> GameState:
    tiles = [[Tile(terrain=terrain) for _ in range(width)] for _ in range(height)]
    players = [
        Player(
            id=i,
            name=f"Player {i}",
            civilization=f"civ{i}",
            is_ai=True,
            techs={"agriculture"},
            researching="pottery",
            relations={j: 0 for j in range(num_players) if j != i},
        )
        for i in range(num_players)
    ]
    return GameState(year=-4000, tiles=tiles, players=players)


@pytest.fixture
def defs():
    return load_static_definitions()


@pytest.fixture
def config():
    return make_config(human_players=[])


@pytest.fixture
def rng():
    return random.Random(SEED)


@pytest.fixture
def make_state():
    return build_state


@pytest.fixture
def fixed_roll():
    return FixedRoll
