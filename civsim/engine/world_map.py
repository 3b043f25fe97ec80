"""
World map generation and tile predicates.
The map is a torus for movement: adjacency wraps modulo width/height.
"""

import random

from civsim.engine.state import GameState, Terrain, Tile, UNBUILDABLE_TERRAIN

# (dx, dy) for the four orthogonal neighbours
DIRECTIONS: list[tuple[int, int]] = [(1, 0), (-1, 0), (0, 1), (0, -1)]

TERRAIN_ORDER = list(Terrain)


def generate_tiles(
    width: int,
    height: int,
    resources: list[str],
    rng: random.Random,
    resource_chance: int = 10,
) -> list[list[Tile]]:
    """
    Generate a width x height grid, indexed [y][x].

    Terrain is drawn uniformly from the eight categories. Each tile independently
    has a 1-in-resource_chance chance of carrying one of the named resources.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Map dimensions must be positive, got {width}x{height}")

    tiles: list[list[Tile]] = []
    for _ in range(height):
        row = []
        for _ in range(width):
            terrain = TERRAIN_ORDER[rng.randrange(len(TERRAIN_ORDER))]
            resource = None
            if resources and rng.randrange(resource_chance) == 0:
                resource = resources[rng.randrange(len(resources))]
            row.append(Tile(terrain=terrain, resource=resource))
        tiles.append(row)
    return tiles


def is_buildable(state: GameState, x: int, y: int) -> bool:
    """True iff (x, y) is in bounds and neither ocean nor mountains."""
    if not state.in_bounds(x, y):
        return False
    return state.tile(x, y).terrain not in UNBUILDABLE_TERRAIN


def wrap(state: GameState, x: int, y: int) -> tuple[int, int]:
    return x % state.width, y % state.height


def step(state: GameState, x: int, y: int, direction: tuple[int, int]) -> tuple[int, int]:
    """Coordinates one step from (x, y) in direction, wrapping around the edges."""
    dx, dy = direction
    return wrap(state, x + dx, y + dy)


def adjacent(state: GameState, x: int, y: int) -> list[tuple[int, int]]:
    """The four orthogonal neighbours of (x, y) with toroidal wraparound."""
    return [step(state, x, y, d) for d in DIRECTIONS]


def owned_tiles(state: GameState, player_id: int) -> list[tuple[int, int]]:
    return [
        (x, y)
        for y, row in enumerate(state.tiles)
        for x, tile in enumerate(row)
        if tile.owner_id == player_id
    ]
