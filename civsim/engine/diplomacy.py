"""
Diplomatic relations between players.
A relation is a score in [-100, 100] that each player keeps towards every other player.
"""

from civsim.engine.errors import InvalidInput
from civsim.engine.events import GameEvent, relation_changed
from civsim.engine.state import GameState, Player

MIN_RELATION = -100
MAX_RELATION = 100

DECLARE_WAR = "declare_war"
MAKE_PEACE = "make_peace"
TRADE_AGREEMENT = "trade_agreement"
RELATION_ACTIONS = (DECLARE_WAR, MAKE_PEACE, TRADE_AGREEMENT)

PEACE_VALUE = 50
TRADE_BONUS = 20


def relation_status(value: int) -> str:
    if value > 50:
        return "friendly"
    if value < -50:
        return "hostile"
    return "neutral"


def set_relation(state: GameState, player: Player, target_id: int, action: str) -> GameEvent:
    """
    Apply a diplomatic action from player towards target_id.
    declare_war sets -100, make_peace sets 50, trade_agreement adds 20 (capped at 100).
    """
    target = state.get_player(target_id)
    if target.id == player.id:
        raise InvalidInput("A player cannot set relations with itself")
    if action not in RELATION_ACTIONS:
        raise InvalidInput(f"Unknown diplomatic action: {action}")

    old = player.relations.get(target.id, 0)
    if action == DECLARE_WAR:
        new = MIN_RELATION
    elif action == MAKE_PEACE:
        new = PEACE_VALUE
    else:
        new = old + TRADE_BONUS
    new = max(MIN_RELATION, min(MAX_RELATION, new))
    player.relations[target.id] = new
    return relation_changed(player.id, target.id, action, old, new)
