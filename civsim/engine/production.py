"""
City production queues.
Only the head item of a queue advances each year; a completed item is popped and
fires exactly one side effect (a unit is spawned or a building is added).
"""

import logging

from civsim.config import GameConfig
from civsim.engine.definitions import Definitions
from civsim.engine.errors import InvalidInput, NoValidPlacement, ProductionQueueFull
from civsim.engine.events import (
    GameEvent,
    production_completed,
    production_enqueued,
    production_failed,
)
from civsim.engine.registry import create_unit
from civsim.engine.state import (
    City,
    GameState,
    Player,
    ProductionItem,
    PRODUCTION_BUILDING,
    PRODUCTION_ITEM_TYPES,
    PRODUCTION_UNIT,
)
from civsim.engine.world_map import DIRECTIONS, is_buildable, step

logger = logging.getLogger(__name__)


def enqueue_production(
    city: City,
    item_type: str,
    kind: str,
    defs: Definitions,
    config: GameConfig,
) -> GameEvent:
    """
    Append a unit or building to the city's queue with progress 0.
    Raises InvalidInput for unknown types/kinds and ProductionQueueFull at capacity.
    """
    if item_type not in PRODUCTION_ITEM_TYPES:
        raise InvalidInput(f"Unknown production item type: {item_type}")
    try:
        cost = defs.production_cost(item_type, kind)
    except KeyError:
        raise InvalidInput(f"Unknown {item_type} kind: {kind}") from None
    if len(city.production_queue) >= config.max_production_queue:
        raise ProductionQueueFull(
            f"{city.name} production queue is full ({config.max_production_queue} items)"
        )

    city.production_queue.append(ProductionItem(item_type=item_type, kind=kind, total_cost=cost))
    return production_enqueued(city.id, item_type, kind, cost, len(city.production_queue))


def find_unit_placement(state: GameState, city: City, player_id: int) -> tuple[int, int]:
    """
    Tile for a freshly produced unit: an orthogonal neighbour of the city owned by
    player_id with no unit, else any such tile on the map (row-major scan).
    """
    for direction in DIRECTIONS:
        x, y = step(state, city.x, city.y, direction)
        tile = state.tile(x, y)
        if tile.owner_id == player_id and tile.unit_id is None and is_buildable(state, x, y):
            return x, y

    for y, row in enumerate(state.tiles):
        for x, tile in enumerate(row):
            if tile.owner_id == player_id and tile.unit_id is None and is_buildable(state, x, y):
                return x, y

    raise NoValidPlacement(f"No free owned tile to place a unit from {city.name}")


def complete_production(
    state: GameState,
    city: City,
    player: Player,
    item: ProductionItem,
    defs: Definitions,
) -> GameEvent:
    """
    Apply a completed item's effect. The item has already been removed from the queue,
    so a failed unit placement still consumes it.
    """
    if item.item_type == PRODUCTION_UNIT:
        try:
            x, y = find_unit_placement(state, city, player.id)
            unit = create_unit(state, player, defs.units[item.kind], x, y)
        except NoValidPlacement as e:
            logger.info("%s could not place a %s: %s", city.name, item.kind, e)
            return production_failed(city.id, item.item_type, item.kind, str(e))
        logger.info("%s produced a %s", city.name, item.kind)
        return production_completed(city.id, item.item_type, item.kind, unit.id, (x, y))

    elif item.item_type == PRODUCTION_BUILDING:
        city.buildings.append(item.kind)
        logger.info("%s built a %s", city.name, item.kind)
        return production_completed(city.id, item.item_type, item.kind)

    raise ValueError(f"Unknown production item type: {item.item_type}")


def advance_production(
    state: GameState,
    city: City,
    player: Player,
    defs: Definitions,
    config: GameConfig,
) -> list[GameEvent]:
    """Year-end tick for one city: advance the head item, complete it if paid for."""
    if not city.production_queue:
        return []

    head = city.production_queue[0]
    head.progress += city.production_per_year(config.base_production)
    if not head.is_complete:
        return []

    city.production_queue.pop(0)
    return [complete_production(state, city, player, head, defs)]
