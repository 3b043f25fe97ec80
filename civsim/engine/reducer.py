"""
Main game reducer.
Applies commands to a copy of the state, enforcing rules.
Returns (new_state, events) where events describe what happened; a failed command
raises a GameError and the state passed in is left untouched.

The turn primitives (begin_turn, advance_turn, run_year_end, evaluate_victory) are
shared with the TurnScheduler.
"""

import logging
import random

from civsim.config import GameConfig
from civsim.engine.actions import (
    Action,
    END_TURN,
    ENQUEUE_PRODUCTION,
    FOUND_CITY,
    MOVE_UNIT,
    SET_RELATION,
    SET_RESEARCH,
)
from civsim.engine.definitions import Definitions
from civsim.engine.diplomacy import set_relation
from civsim.engine.errors import CityNotFound, InvalidInput, UnitNotFound
from civsim.engine.events import (
    GameEvent,
    city_founded,
    city_grew,
    turn_ended,
    turn_started,
    unit_destroyed,
    victory,
    year_advanced,
)
from civsim.engine.movement import attempt_move, restore_movement
from civsim.engine.production import advance_production, enqueue_production
from civsim.engine.registry import create_city, remove_unit
from civsim.engine.research import roll_research, set_research
from civsim.engine.state import GameState, Player, Unit
from civsim.engine.utils import format_year
from civsim.engine.victory import check_victory

logger = logging.getLogger(__name__)

CITY_NAME_MIN_LENGTH = 3
CITY_NAME_MAX_LENGTH = 20


def _int_arg(payload: dict, key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"'{key}' must be an integer, got {value!r}")
    return value


def _str_arg(payload: dict, key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"'{key}' must be a non-empty string, got {value!r}")
    return value.strip()


def apply_action(
    state: GameState,
    action: Action,
    defs: Definitions,
    config: GameConfig,
    rng: random.Random,
) -> tuple[GameState, list[GameEvent]]:
    """
    Apply a single command to the current state, returning new state and events.

    Validates:
    - The game is still running
    - Action player matches the active player

    Args:
        state: Current game state
        action: Command to apply
        defs: Rule definitions
        config: Game configuration
        rng: The game's random source (combat, year-end rolls)

    Returns:
        Tuple of (new_state, events) where events describe what happened
    """
    if not state.running or state.winner is not None:
        raise InvalidInput(f"Game is over. Player {state.winner} has won.")

    if action.player != state.current_player.id:
        raise InvalidInput(
            f"Action player {action.player} does not match current player {state.current_player.id}"
        )

    new_state = state.copy()
    player = new_state.current_player

    if action.type == MOVE_UNIT:
        events = _handle_move_unit(new_state, player, action, config, rng)

    elif action.type == FOUND_CITY:
        events = _handle_found_city(new_state, player, action, defs, config)

    elif action.type == ENQUEUE_PRODUCTION:
        events = _handle_enqueue_production(player, action, defs, config)

    elif action.type == SET_RESEARCH:
        events = [set_research(player, _str_arg(action.payload, "tech"), defs)]

    elif action.type == SET_RELATION:
        events = [set_relation(
            new_state,
            player,
            _int_arg(action.payload, "target"),
            _str_arg(action.payload, "action"),
        )]

    elif action.type == END_TURN:
        events = _handle_end_turn(new_state, defs, config, rng)

    else:
        raise InvalidInput(f"Unknown action type: {action.type}")

    return new_state, events


# ===== Command Handlers =====

def _handle_move_unit(
    state: GameState,
    player: Player,
    action: Action,
    config: GameConfig,
    rng: random.Random,
) -> list[GameEvent]:
    unit_id = _int_arg(action.payload, "unit_id")
    x = _int_arg(action.payload, "x")
    y = _int_arg(action.payload, "y")

    unit = player.units.get(unit_id)
    if unit is None:
        raise UnitNotFound(f"Unit {unit_id} not found for player {player.id}")
    return attempt_move(state, unit, x, y, rng, config.combat_success_chance)


def _find_settler(player: Player, defs: Definitions, unit_id: int | None) -> Unit:
    if unit_id is not None:
        unit = player.units.get(unit_id)
        if unit is None:
            raise UnitNotFound(f"Unit {unit_id} not found for player {player.id}")
        unit_def = defs.units.get(unit.kind)
        if not unit_def or not unit_def.founds_cities:
            raise InvalidInput(f"Unit {unit_id} ({unit.kind}) cannot found cities")
        return unit

    for uid in sorted(player.units):
        unit = player.units[uid]
        unit_def = defs.units.get(unit.kind)
        if unit_def and unit_def.founds_cities:
            return unit
    raise UnitNotFound(f"Player {player.id} has no settler available")


def _handle_found_city(
    state: GameState,
    player: Player,
    action: Action,
    defs: Definitions,
    config: GameConfig,
) -> list[GameEvent]:
    """
    Consume a settler to found a city on its tile.
    Validates:
    - City name is 3-20 characters
    - The settler exists and belongs to the player
    - The tile is buildable and has no city yet
    """
    name = _str_arg(action.payload, "name")
    if not CITY_NAME_MIN_LENGTH <= len(name) <= CITY_NAME_MAX_LENGTH:
        raise InvalidInput(
            f"City name must be {CITY_NAME_MIN_LENGTH}-{CITY_NAME_MAX_LENGTH} characters"
        )
    unit_id = action.payload.get("unit_id")
    if unit_id is not None:
        unit_id = _int_arg(action.payload, "unit_id")

    settler = _find_settler(player, defs, unit_id)
    tile_xy = (settler.x, settler.y)
    city = create_city(state, player, name, settler.x, settler.y, config.base_city_population)
    remove_unit(state, settler)
    logger.info("Player %d founded %s at (%d,%d)", player.id, name, *tile_xy)
    return [
        city_founded(player.id, city.id, city.name, tile_xy),
        unit_destroyed(settler.id, settler.kind, player.id, tile_xy, "founding"),
    ]


def _handle_enqueue_production(
    player: Player,
    action: Action,
    defs: Definitions,
    config: GameConfig,
) -> list[GameEvent]:
    city_id = _int_arg(action.payload, "city_id")
    city = player.cities.get(city_id)
    if city is None:
        raise CityNotFound(f"City {city_id} not found for player {player.id}")
    return [enqueue_production(
        city,
        _str_arg(action.payload, "item_type"),
        _str_arg(action.payload, "kind"),
        defs,
        config,
    )]


def _handle_end_turn(
    state: GameState,
    defs: Definitions,
    config: GameConfig,
    rng: random.Random,
) -> list[GameEvent]:
    """
    End the current player's turn.

    - Advance to the next player
    - On wraparound to the first player, run the year-end update
    - Check victory; if the game continues, start the next player's turn
    """
    wrapped, events = advance_turn(state)
    if wrapped:
        events.extend(run_year_end(state, defs, config, rng))
    events.extend(evaluate_victory(state, config))
    if state.running:
        events.extend(begin_turn(state))
    return events


# ===== Turn Primitives =====

def begin_turn(state: GameState) -> list[GameEvent]:
    """Start the active player's turn: restore their units' movement."""
    player = state.current_player
    restore_movement(state, player.id)
    return [turn_started(state.year, player.id)]


def advance_turn(state: GameState) -> tuple[bool, list[GameEvent]]:
    """
    Pass control to the next player in seating order.
    Returns (wrapped, events); wrapped is True when control returns to the first player.
    """
    events = [turn_ended(state.year, state.current_player.id)]
    state.current_player_index = (state.current_player_index + 1) % len(state.players)
    return state.current_player_index == 0, events


def run_year_end(
    state: GameState,
    defs: Definitions,
    config: GameConfig,
    rng: random.Random,
) -> list[GameEvent]:
    """
    Once per full round: every city grows and advances its production,
    every player rolls for research, then the calendar moves forward.
    """
    events: list[GameEvent] = []

    for player in state.players:
        for city in list(player.cities.values()):
            city.population += rng.randrange(2)
            city.food += city.population * 2
            events.append(city_grew(city.id, city.population, city.food))
            events.extend(advance_production(state, city, player, defs, config))

        events.extend(roll_research(player, rng, defs, config.research_success_chance))

    old_year = state.year
    state.year += config.year_step
    state.turn_count += 1
    events.append(year_advanced(old_year, state.year))
    logger.info("Year advanced to %s", format_year(state.year))
    return events


def evaluate_victory(state: GameState, config: GameConfig) -> list[GameEvent]:
    """Ask the victory evaluator; on a result, stop the game and record the winner."""
    result = check_victory(state, config.end_year)
    if result is None:
        return []
    state.winner = result.winner
    state.running = False
    logger.info(
        "Player %s wins by %s in %s", result.winner, result.condition, format_year(state.year)
    )
    return [victory(result.winner, result.condition, result.scores, state.year)]
