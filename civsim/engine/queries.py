"""
Query functions for front-end integration.
These functions help a UI read the world and check commands
without mutating game state.
"""

import random
from dataclasses import dataclass
from typing import Any

from civsim.config import GameConfig
from civsim.engine.actions import Action
from civsim.engine.definitions import Definitions
from civsim.engine.diplomacy import relation_status
from civsim.engine.errors import GameError
from civsim.engine.reducer import apply_action
from civsim.engine.research import available_techs
from civsim.engine.state import GameState
from civsim.engine.utils import format_year
from civsim.engine.victory import calculate_score


@dataclass
class ValidationResult:
    """Result of action validation."""
    valid: bool
    error: str | None = None
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error, "code": self.code}


def validate_action(
    state: GameState,
    action: Action,
    defs: Definitions,
    config: GameConfig,
    rng: random.Random,
) -> ValidationResult:
    """
    Dry-run an action against a copy of the state.
    The caller's rng is not advanced.
    """
    probe = random.Random()
    probe.setstate(rng.getstate())
    try:
        apply_action(state, action, defs, config, probe)
    except GameError as e:
        return ValidationResult(False, str(e), e.code)
    return ValidationResult(True)


# ===== World Queries =====

def get_map_tiles(state: GameState) -> list[list[dict[str, Any]]]:
    """All tiles as dicts, indexed [y][x]."""
    return [[tile.to_dict() for tile in row] for row in state.tiles]


def get_tile(state: GameState, x: int, y: int) -> dict[str, Any] | None:
    if not state.in_bounds(x, y):
        return None
    return state.tile(x, y).to_dict()


def get_game_summary(state: GameState) -> dict[str, Any]:
    """
    Get a summary of the current game state for UI display.
    """
    return {
        "year": state.year,
        "year_label": format_year(state.year),
        "turn_count": state.turn_count,
        "current_player": state.current_player.id,
        "running": state.running,
        "winner": state.winner,
        "scores": {p.id: calculate_score(state, p) for p in state.players},
        "cities": {p.id: len(p.cities) for p in state.players},
        "units": {p.id: len(p.units) for p in state.players},
    }


# ===== Player Queries =====

def get_player_summary(
    state: GameState,
    player_id: int,
    defs: Definitions,
) -> dict[str, Any]:
    """Cities, units, score, gold, happiness and research of one player."""
    player = state.get_player(player_id)
    return {
        "id": player.id,
        "name": player.name,
        "civilization": player.civilization,
        "is_ai": player.is_ai,
        "score": calculate_score(state, player),
        "gold": player.gold,
        "happiness": player.happiness,
        "techs": [t for t in defs.tech_order() if t in player.techs],
        "researching": player.researching,
        "cities": [
            {
                "id": c.id,
                "name": c.name,
                "x": c.x,
                "y": c.y,
                "population": c.population,
                "food": c.food,
                "buildings": list(c.buildings),
            }
            for c in player.cities.values()
        ],
        "units": [u.to_dict() for u in player.units.values()],
    }


def get_production_queues(state: GameState, player_id: int) -> dict[int, list[dict[str, Any]]]:
    """city_id -> queued items (head first) for every city of the player."""
    player = state.get_player(player_id)
    return {
        city.id: [item.to_dict() for item in city.production_queue]
        for city in player.cities.values()
    }


def get_relations(state: GameState, player_id: int) -> dict[int, dict[str, Any]]:
    """other player id -> {"value", "status"}."""
    player = state.get_player(player_id)
    return {
        other_id: {"value": value, "status": relation_status(value)}
        for other_id, value in player.relations.items()
    }


def get_movable_units(state: GameState, player_id: int) -> list[dict[str, Any]]:
    """Units of the player that still have movement this turn."""
    player = state.get_player(player_id)
    return [u.to_dict() for u in player.units.values() if u.movement > 0]


def get_available_research(state: GameState, player_id: int, defs: Definitions) -> list[str]:
    """Technologies the player could switch research to."""
    return available_techs(state.get_player(player_id), defs)
