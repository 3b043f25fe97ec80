"""
Unit movement.
A unit may move to any passable tile on the map in one go (there is no pathfinding
and terrain has no cost); a successful move spends all of its remaining movement.
Entering a tile held by another player's unit is an attack; entering an undefended
foreign city razes it.
"""

import logging
import random

from civsim.engine.combat import resolve_attack
from civsim.engine.errors import InvalidInput, InvalidMove
from civsim.engine.events import GameEvent, city_destroyed, unit_moved
from civsim.engine.registry import get_city_at, get_unit_at, move_unit, remove_city
from civsim.engine.state import GameState, Unit
from civsim.engine.world_map import is_buildable

logger = logging.getLogger(__name__)


def attempt_move(
    state: GameState,
    unit: Unit,
    x: int,
    y: int,
    rng: random.Random,
    combat_success_chance: int = 70,
) -> list[GameEvent]:
    """
    Move unit to (x, y), attacking if a foreign unit holds the tile.

    Validates:
    - Coordinates are on the map (InvalidInput)
    - Unit has movement left this turn (InvalidMove)
    - Destination is buildable and not held by a friendly unit (InvalidMove)
    """
    if not state.in_bounds(x, y):
        raise InvalidInput(f"Coordinates ({x},{y}) are off the {state.width}x{state.height} map")
    if (x, y) == (unit.x, unit.y):
        raise InvalidMove(f"Unit {unit.id} is already at ({x},{y})")
    if unit.movement <= 0:
        raise InvalidMove(f"Unit {unit.id} has no movement left this turn")
    if not is_buildable(state, x, y):
        raise InvalidMove(f"Cannot move to ({x},{y}): terrain is not passable")

    occupant = get_unit_at(state, x, y)
    if occupant is not None:
        if occupant.owner_id == unit.owner_id:
            raise InvalidMove(f"Cannot move to ({x},{y}): tile occupied by a friendly unit")
        return resolve_attack(state, unit, occupant, rng, combat_success_chance).events

    from_xy = (unit.x, unit.y)
    move_unit(state, unit, x, y)
    unit.movement = 0
    events = [unit_moved(unit.owner_id, unit.id, from_xy, (x, y))]
    logger.debug("Player %d moved %s #%d %s -> (%d,%d)", unit.owner_id, unit.kind, unit.id, from_xy, x, y)

    city = get_city_at(state, x, y)
    if city is not None and city.owner_id != unit.owner_id:
        remove_city(state, city)
        events.append(city_destroyed(city.id, city.name, city.owner_id, unit.owner_id))
        logger.info("Player %d razed %s (player %d)", unit.owner_id, city.name, city.owner_id)

    return events


def restore_movement(state: GameState, player_id: int) -> None:
    """Reset every unit of player_id to its base movement (start of that player's turn)."""
    for unit in state.get_player(player_id).units.values():
        unit.movement = unit.base_movement
