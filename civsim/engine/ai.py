"""
AI policy: one pass per turn, uniformly random choices.
- every unit with movement left tries one step in a random orthogonal direction
- every city with an empty queue gets a random unit or building
- sometimes retarget research to the next unknown technology
Mutates the state it is given.
"""

import logging
import random

from civsim.config import GameConfig
from civsim.engine.definitions import Definitions
from civsim.engine.errors import GameError
from civsim.engine.events import GameEvent
from civsim.engine.movement import attempt_move
from civsim.engine.production import enqueue_production
from civsim.engine.research import ai_pick_research
from civsim.engine.state import GameState, Player, PRODUCTION_BUILDING, PRODUCTION_UNIT
from civsim.engine.world_map import DIRECTIONS, step

logger = logging.getLogger(__name__)


def _move_units(
    state: GameState,
    player: Player,
    config: GameConfig,
    rng: random.Random,
) -> list[GameEvent]:
    events: list[GameEvent] = []
    for unit_id in list(player.units):
        unit = player.units.get(unit_id)
        if unit is None or unit.movement <= 0:
            continue
        direction = DIRECTIONS[rng.randrange(len(DIRECTIONS))]
        x, y = step(state, unit.x, unit.y, direction)
        try:
            events.extend(attempt_move(state, unit, x, y, rng, config.combat_success_chance))
        except GameError as e:
            # No retry and no alternate direction
            logger.debug("AI player %d: %s #%d stays put (%s)", player.id, unit.kind, unit.id, e.code)
    return events


def _manage_cities(
    player: Player,
    defs: Definitions,
    config: GameConfig,
    rng: random.Random,
) -> list[GameEvent]:
    events: list[GameEvent] = []
    unit_kinds = list(defs.units)
    building_kinds = list(defs.buildings)
    for city in player.cities.values():
        if city.production_queue:
            continue
        if rng.randrange(2) == 0:
            item_type, kind = PRODUCTION_UNIT, unit_kinds[rng.randrange(len(unit_kinds))]
        else:
            item_type, kind = PRODUCTION_BUILDING, building_kinds[rng.randrange(len(building_kinds))]
        events.append(enqueue_production(city, item_type, kind, defs, config))
    return events


def run_ai_turn(
    state: GameState,
    defs: Definitions,
    config: GameConfig,
    rng: random.Random,
) -> list[GameEvent]:
    """Play the active player's turn in a single pass and return the events."""
    player = state.current_player
    logger.debug("%s (AI) is thinking...", player.name)

    events = _move_units(state, player, config, rng)
    events.extend(_manage_cities(player, defs, config, rng))
    events.extend(ai_pick_research(player, rng, defs, config.ai_research_switch_chance))
    return events
