"""
Command definitions for the game.
Commands are plain, deterministic instructions issued by a front end (or the AI)
on behalf of the active player.
"""

from dataclasses import dataclass

MOVE_UNIT = "move_unit"
FOUND_CITY = "found_city"
ENQUEUE_PRODUCTION = "enqueue_production"
SET_RESEARCH = "set_research"
SET_RELATION = "set_relation"
END_TURN = "end_turn"

ACTION_TYPES = (MOVE_UNIT, FOUND_CITY, ENQUEUE_PRODUCTION, SET_RESEARCH, SET_RELATION, END_TURN)


@dataclass
class Action:
    """Base action class. All actions have a type, the acting player, and a payload."""
    type: str
    player: int  # id of the player issuing the command
    payload: dict


def move_unit(player: int, unit_id: int, x: int, y: int) -> Action:
    """
    Move a unit to (x, y).
    If another player's unit holds the destination, the move is an attack.
    Example: move_unit(0, 3, 5, 7)
    """
    return Action(
        type=MOVE_UNIT,
        player=player,
        payload={"unit_id": unit_id, "x": x, "y": y},
    )


def found_city(player: int, name: str, unit_id: int | None = None) -> Action:
    """
    Consume a settler to found a city on its tile.
    unit_id picks the settler; omitted = the player's lowest-id settler.
    """
    payload: dict = {"name": name}
    if unit_id is not None:
        payload["unit_id"] = unit_id
    return Action(type=FOUND_CITY, player=player, payload=payload)


def enqueue_production(player: int, city_id: int, item_type: str, kind: str) -> Action:
    """
    Add a unit or building to a city's production queue.
    Example: enqueue_production(0, 1, "unit", "warrior")
    """
    return Action(
        type=ENQUEUE_PRODUCTION,
        player=player,
        payload={"city_id": city_id, "item_type": item_type, "kind": kind},
    )


def set_research(player: int, tech: str) -> Action:
    return Action(type=SET_RESEARCH, player=player, payload={"tech": tech})


def set_relation(player: int, target: int, action: str) -> Action:
    """
    Diplomatic action towards another player.
    action is one of "declare_war", "make_peace", "trade_agreement".
    """
    return Action(
        type=SET_RELATION,
        player=player,
        payload={"target": target, "action": action},
    )


def end_turn(player: int) -> Action:
    """End the current turn and advance to the next player."""
    return Action(type=END_TURN, player=player, payload={})
