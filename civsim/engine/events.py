"""
Game events for UI hooks and logging.
Events describe what happened during command processing and year-end updates.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}


# ===== Event Type Constants =====

# Turn/calendar events
TURN_STARTED = "turn_started"
TURN_ENDED = "turn_ended"
YEAR_ADVANCED = "year_advanced"

# Movement events
UNIT_MOVED = "unit_moved"

# Combat events
COMBAT_RESOLVED = "combat_resolved"
UNIT_DESTROYED = "unit_destroyed"
TILE_CAPTURED = "tile_captured"

# City events
CITY_FOUNDED = "city_founded"
CITY_DESTROYED = "city_destroyed"
CITY_GREW = "city_grew"

# Production events
PRODUCTION_ENQUEUED = "production_enqueued"
PRODUCTION_COMPLETED = "production_completed"
PRODUCTION_FAILED = "production_failed"

# Research events
RESEARCH_COMPLETED = "research_completed"
RESEARCH_CHANGED = "research_changed"

# Diplomacy events
RELATION_CHANGED = "relation_changed"

# Victory events
VICTORY = "victory"


# ===== Event Factory Functions =====

def turn_started(year: int, player_id: int) -> GameEvent:
    return GameEvent(TURN_STARTED, {"year": year, "player_id": player_id})


def turn_ended(year: int, player_id: int) -> GameEvent:
    return GameEvent(TURN_ENDED, {"year": year, "player_id": player_id})


def year_advanced(old_year: int, new_year: int) -> GameEvent:
    return GameEvent(YEAR_ADVANCED, {"old_year": old_year, "new_year": new_year})


def unit_moved(
    player_id: int,
    unit_id: int,
    from_xy: tuple[int, int],
    to_xy: tuple[int, int],
) -> GameEvent:
    return GameEvent(UNIT_MOVED, {
        "player_id": player_id,
        "unit_id": unit_id,
        "from": list(from_xy),
        "to": list(to_xy),
    })


def combat_resolved(
    attacker_id: int,
    defender_id: int,
    attacker_unit_id: int,
    defender_unit_id: int,
    tile: tuple[int, int],
    winner: str,  # "attacker" or "defender"
) -> GameEvent:
    return GameEvent(COMBAT_RESOLVED, {
        "attacker_id": attacker_id,
        "defender_id": defender_id,
        "attacker_unit_id": attacker_unit_id,
        "defender_unit_id": defender_unit_id,
        "tile": list(tile),
        "winner": winner,
    })


def unit_destroyed(
    unit_id: int,
    unit_kind: str,
    owner_id: int,
    tile: tuple[int, int],
    cause: str,  # "combat", "founding"
) -> GameEvent:
    return GameEvent(UNIT_DESTROYED, {
        "unit_id": unit_id,
        "unit_kind": unit_kind,
        "owner_id": owner_id,
        "tile": list(tile),
        "cause": cause,
    })


def tile_captured(tile: tuple[int, int], old_owner: int | None, new_owner: int) -> GameEvent:
    return GameEvent(TILE_CAPTURED, {
        "tile": list(tile),
        "old_owner": old_owner,
        "new_owner": new_owner,
    })


def city_founded(player_id: int, city_id: int, name: str, tile: tuple[int, int]) -> GameEvent:
    return GameEvent(CITY_FOUNDED, {
        "player_id": player_id,
        "city_id": city_id,
        "name": name,
        "tile": list(tile),
    })


def city_destroyed(city_id: int, name: str, owner_id: int, destroyed_by: int) -> GameEvent:
    return GameEvent(CITY_DESTROYED, {
        "city_id": city_id,
        "name": name,
        "owner_id": owner_id,
        "destroyed_by": destroyed_by,
    })


def city_grew(city_id: int, population: int, food: int) -> GameEvent:
    return GameEvent(CITY_GREW, {"city_id": city_id, "population": population, "food": food})


def production_enqueued(
    city_id: int,
    item_type: str,
    kind: str,
    total_cost: int,
    queue_length: int,
) -> GameEvent:
    return GameEvent(PRODUCTION_ENQUEUED, {
        "city_id": city_id,
        "item_type": item_type,
        "kind": kind,
        "total_cost": total_cost,
        "queue_length": queue_length,
    })


def production_completed(
    city_id: int,
    item_type: str,
    kind: str,
    unit_id: int | None = None,
    tile: tuple[int, int] | None = None,
) -> GameEvent:
    """unit_id/tile are set for unit items only."""
    payload: dict[str, Any] = {"city_id": city_id, "item_type": item_type, "kind": kind}
    if unit_id is not None:
        payload["unit_id"] = unit_id
    if tile is not None:
        payload["tile"] = list(tile)
    return GameEvent(PRODUCTION_COMPLETED, payload)


def production_failed(city_id: int, item_type: str, kind: str, reason: str) -> GameEvent:
    """The item was consumed but produced nothing (e.g. no tile to place a unit)."""
    return GameEvent(PRODUCTION_FAILED, {
        "city_id": city_id,
        "item_type": item_type,
        "kind": kind,
        "reason": reason,
    })


def research_completed(player_id: int, tech: str, next_tech: str | None) -> GameEvent:
    return GameEvent(RESEARCH_COMPLETED, {
        "player_id": player_id,
        "tech": tech,
        "next_tech": next_tech,
    })


def research_changed(player_id: int, old_tech: str | None, new_tech: str | None) -> GameEvent:
    return GameEvent(RESEARCH_CHANGED, {
        "player_id": player_id,
        "old_tech": old_tech,
        "new_tech": new_tech,
    })


def relation_changed(
    player_id: int,
    target_id: int,
    action: str,
    old_value: int,
    new_value: int,
) -> GameEvent:
    return GameEvent(RELATION_CHANGED, {
        "player_id": player_id,
        "target_id": target_id,
        "action": action,
        "old_value": old_value,
        "new_value": new_value,
    })


def victory(
    winner: int,
    condition: str,  # "time" or "conquest"
    scores: dict[int, int],
    year: int,
) -> GameEvent:
    """
    Emitted when the game ends.

    Args:
        winner: Winning player id
        condition: "time" when the calendar reached the end year, "conquest" otherwise
        scores: {player_id: score} for all players
        year: Calendar year at which the game ended
    """
    return GameEvent(VICTORY, {
        "winner": winner,
        "condition": condition,
        "scores": scores,
        "year": year,
    })
