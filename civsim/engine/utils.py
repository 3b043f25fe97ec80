"""
Utility functions for the game engine: new-game setup and console printing.
"""

import logging
import random
from collections import Counter

from civsim.config import GameConfig
from civsim.engine.definitions import Definitions
from civsim.engine.errors import InvalidInput
from civsim.engine.registry import (
    create_city,
    create_unit,
    find_adjacent_free_tile,
    find_starting_position,
)
from civsim.engine.state import GameState, Player
from civsim.engine.victory import scoreboard
from civsim.engine.world_map import generate_tiles

logger = logging.getLogger(__name__)

STARTING_UNIT = "settler"
ESCORT_UNIT = "warrior"


def format_year(year: int) -> str:
    """-4000 -> "4000 BC", 2050 -> "AD 2050"."""
    if year < 0:
        return f"{-year} BC"
    return f"AD {year}"


def initialize_game_state(
    config: GameConfig,
    defs: Definitions,
    rng: random.Random,
) -> GameState:
    """
    Create a new game: generate the map, then seat every player with a capital,
    a settler on the capital and a warrior on a free adjacent tile.

    Args:
        config: Game configuration (map size, player count, calendar, ...)
        defs: Rule definitions
        rng: The game's random source; the same seed yields the same world

    Raises:
        InvalidInput: more players than civilizations
        StartingPositionExhausted: no capital site found within the attempt budget
        NoValidPlacement: no free tile next to a capital for the warrior
    """
    civs = list(defs.civilizations.values())
    if config.num_players > len(civs):
        raise InvalidInput(
            f"Too many players: only {len(civs)} civilizations available"
        )

    state = GameState(
        year=config.start_year,
        tiles=generate_tiles(
            config.map_width,
            config.map_height,
            defs.resources,
            rng,
            config.resource_chance,
        ),
    )

    for i in range(config.num_players):
        civ = civs[i]
        player = Player(
            id=i,
            name=civ.display_name,
            civilization=civ.id,
            is_ai=not config.is_human(i),
            techs={defs.starting_tech},
            researching=defs.starting_research,
            gold=config.starting_gold,
            happiness=config.starting_happiness,
            relations={j: 0 for j in range(config.num_players) if j != i},
        )
        state.players.append(player)

        x, y = find_starting_position(
            state, rng, config.min_city_distance, config.start_position_attempts
        )
        create_city(state, player, f"{player.name} Capital", x, y, config.base_city_population)
        create_unit(state, player, defs.units[STARTING_UNIT], x, y)
        wx, wy = find_adjacent_free_tile(state, x, y, rng)
        create_unit(state, player, defs.units[ESCORT_UNIT], wx, wy)
        logger.info("%s founded its capital at (%d,%d)", player.name, x, y)

    return state


def print_game_state(state: GameState, defs: Definitions, verbose: bool = False):
    """
    Pretty-print the current game state.

    Args:
        state: Current game state
        defs: Rule definitions (for display names)
        verbose: If True, show individual unit details and production queues
    """
    print(f"\n{'='*60}")
    print(f"{format_year(state.year)} | Active player: {state.current_player.name}")
    print(f"{'='*60}")

    for player in state.players:
        kind = "AI" if player.is_ai else "Human"
        print(f"\n{player.name} ({kind}) - gold {player.gold}, happiness {player.happiness}")
        researching = defs.technologies[player.researching].display_name if player.researching else "-"
        print(f"  Techs: {len(player.techs)} | Researching: {researching}")

        for city in player.cities.values():
            print(f"  City {city.name} #{city.id} at ({city.x},{city.y}) pop {city.population}")
            if verbose:
                for item in city.production_queue:
                    print(f"    - {item.kind} {item.progress}/{item.total_cost}")
                if city.buildings:
                    print(f"    buildings: {', '.join(city.buildings)}")

        if verbose:
            for unit in player.units.values():
                print(f"  - {unit.kind} #{unit.id} at ({unit.x},{unit.y}) "
                      f"mv={unit.movement}/{unit.base_movement}")
        else:
            unit_counts = Counter(u.kind for u in player.units.values())
            for kind_id, count in sorted(unit_counts.items()):
                print(f"  - {kind_id}: {count}")
    print()


def print_scoreboard(state: GameState):
    print("\nFinal Scores:")
    for player, score in scoreboard(state):
        marker = " (winner)" if player.id == state.winner else ""
        print(f"  {player.name}: {score}{marker}")
