"""
Entity registry: id allocation, lookup, placement and removal of cities and units.
Every mutating function validates first, so a failure leaves the state untouched.
"""

import logging
import random

from civsim.engine.definitions import UnitDefinition
from civsim.engine.errors import (
    CityNotFound,
    InvalidMove,
    NoValidPlacement,
    StartingPositionExhausted,
    UnitNotFound,
)
from civsim.engine.state import City, GameState, Player, Unit
from civsim.engine.world_map import DIRECTIONS, is_buildable, step

logger = logging.getLogger(__name__)


# ===== Lookup =====

def get_unit(state: GameState, unit_id: int) -> Unit:
    for player in state.players:
        unit = player.units.get(unit_id)
        if unit is not None:
            return unit
    raise UnitNotFound(f"Unit {unit_id} not found")


def get_city(state: GameState, city_id: int) -> City:
    for player in state.players:
        city = player.cities.get(city_id)
        if city is not None:
            return city
    raise CityNotFound(f"City {city_id} not found")


def get_unit_at(state: GameState, x: int, y: int) -> Unit | None:
    unit_id = state.tile(x, y).unit_id
    if unit_id is None:
        return None
    return get_unit(state, unit_id)


def get_city_at(state: GameState, x: int, y: int) -> City | None:
    city_id = state.tile(x, y).city_id
    if city_id is None:
        return None
    return get_city(state, city_id)


# ===== Creation =====

def create_unit(
    state: GameState,
    player: Player,
    unit_def: UnitDefinition,
    x: int,
    y: int,
) -> Unit:
    """
    Create a unit of unit_def's kind at (x, y) for player.
    Fails with NoValidPlacement if the tile is not buildable or already holds a unit.
    """
    if not is_buildable(state, x, y):
        raise NoValidPlacement(f"Cannot place {unit_def.id} on unbuildable tile ({x},{y})")
    tile = state.tile(x, y)
    if tile.unit_id is not None:
        raise NoValidPlacement(f"Cannot place {unit_def.id}: tile ({x},{y}) already has a unit")

    unit = Unit(
        id=state.generate_unit_id(),
        kind=unit_def.id,
        owner_id=player.id,
        x=x,
        y=y,
        health=unit_def.health,
        movement=unit_def.movement,
        base_movement=unit_def.movement,
        strength=unit_def.strength,
    )
    tile.unit_id = unit.id
    player.units[unit.id] = unit
    logger.debug("Created %s #%d for player %d at (%d,%d)", unit.kind, unit.id, player.id, x, y)
    return unit


def create_city(
    state: GameState,
    player: Player,
    name: str,
    x: int,
    y: int,
    population: int = 1,
) -> City:
    """
    Create a city at (x, y) and give the tile to player.
    Fails with InvalidMove on ocean/mountains or a tile that already hosts a city.
    """
    if not is_buildable(state, x, y):
        raise InvalidMove(f"Cannot found a city on ({x},{y}): terrain is not buildable")
    tile = state.tile(x, y)
    if tile.city_id is not None:
        raise InvalidMove(f"Tile ({x},{y}) already hosts a city")

    city = City(
        id=state.generate_city_id(),
        name=name,
        owner_id=player.id,
        x=x,
        y=y,
        population=population,
    )
    tile.city_id = city.id
    tile.owner_id = player.id
    player.cities[city.id] = city
    logger.debug("Founded city %s #%d for player %d at (%d,%d)", name, city.id, player.id, x, y)
    return city


# ===== Movement & Removal =====

def move_unit(state: GameState, unit: Unit, x: int, y: int) -> None:
    """
    Relocate unit to (x, y): clears the old tile's unit reference and sets the new
    tile's unit and owner references.
    Fails with InvalidMove if the destination is not buildable or already holds a unit.
    """
    if not is_buildable(state, x, y):
        raise InvalidMove(f"Cannot move to ({x},{y}): terrain is not passable")
    dest = state.tile(x, y)
    if dest.unit_id is not None:
        raise InvalidMove(f"Cannot move to ({x},{y}): tile occupied by another unit")

    state.tile(unit.x, unit.y).unit_id = None
    unit.x, unit.y = x, y
    dest.unit_id = unit.id
    dest.owner_id = unit.owner_id


def remove_unit(state: GameState, unit: Unit) -> None:
    """Remove unit from its owner's registry and its tile together."""
    owner = state.get_player(unit.owner_id)
    owner.units.pop(unit.id, None)
    tile = state.tile(unit.x, unit.y)
    if tile.unit_id == unit.id:
        tile.unit_id = None


def remove_city(state: GameState, city: City) -> None:
    owner = state.get_player(city.owner_id)
    owner.cities.pop(city.id, None)
    tile = state.tile(city.x, city.y)
    if tile.city_id == city.id:
        tile.city_id = None


# ===== Placement Searches =====

def _city_centers(state: GameState) -> list[tuple[int, int]]:
    return [(c.x, c.y) for p in state.players for c in p.cities.values()]


def find_starting_position(
    state: GameState,
    rng: random.Random,
    min_distance: int = 25,
    max_attempts: int = 100,
) -> tuple[int, int]:
    """
    Sample random buildable, unit-free tiles until one is at least min_distance
    (squared Euclidean) away from every existing city centre.
    Raises StartingPositionExhausted once max_attempts samples have been rejected.
    """
    centers = _city_centers(state)
    for _ in range(max_attempts):
        x, y = rng.randrange(state.width), rng.randrange(state.height)
        if not is_buildable(state, x, y) or state.tile(x, y).unit_id is not None:
            continue
        if all((cx - x) ** 2 + (cy - y) ** 2 >= min_distance for cx, cy in centers):
            return x, y
    raise StartingPositionExhausted(
        f"No starting position found after {max_attempts} attempts "
        f"(min distance {min_distance}, {len(centers)} existing cities)"
    )


def find_adjacent_free_tile(
    state: GameState,
    x: int,
    y: int,
    rng: random.Random,
) -> tuple[int, int]:
    """First buildable, unit-free orthogonal neighbour of (x, y), directions tried in random order."""
    directions = list(DIRECTIONS)
    rng.shuffle(directions)
    for direction in directions:
        nx, ny = step(state, x, y, direction)
        if is_buildable(state, nx, ny) and state.tile(nx, ny).unit_id is None:
            return nx, ny
    raise NoValidPlacement(f"No free tile adjacent to ({x},{y})")
