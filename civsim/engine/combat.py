"""
Combat resolution.
An attack is a single weighted coin flip. The winner's unit stays where it is:
on a win the defender is destroyed and the defender's tile changes owner, but the
attacking unit does not move onto it.
"""

import logging
import random
from dataclasses import dataclass

from civsim.engine.events import GameEvent, combat_resolved, tile_captured, unit_destroyed
from civsim.engine.registry import remove_unit
from civsim.engine.state import GameState, Unit

logger = logging.getLogger(__name__)

ATTACKER = "attacker"
DEFENDER = "defender"


@dataclass
class CombatResult:
    winner: str  # "attacker" or "defender"
    destroyed_unit_id: int
    events: list[GameEvent]

    @property
    def attacker_won(self) -> bool:
        return self.winner == ATTACKER


def roll_attack(rng: random.Random, success_chance: int) -> bool:
    """True with success_chance percent probability."""
    return rng.randrange(100) < success_chance


def resolve_attack(
    state: GameState,
    attacker: Unit,
    defender: Unit,
    rng: random.Random,
    success_chance: int = 70,
) -> CombatResult:
    """
    Resolve attacker's attempt to enter defender's tile.

    Win: defender removed from tile and registry, tile owner becomes the attacker's owner.
    Loss: attacker removed, defender untouched.
    Either way the attacker's remaining movement is spent.
    """
    if attacker.owner_id == defender.owner_id:
        raise ValueError("A unit cannot attack a unit of its own player")

    attacker.movement = 0
    tile_xy = (defender.x, defender.y)
    events: list[GameEvent] = []

    if roll_attack(rng, success_chance):
        tile = state.tile(defender.x, defender.y)
        old_owner = tile.owner_id
        remove_unit(state, defender)
        tile.owner_id = attacker.owner_id
        events.append(combat_resolved(
            attacker.owner_id, defender.owner_id, attacker.id, defender.id, tile_xy, ATTACKER
        ))
        events.append(unit_destroyed(defender.id, defender.kind, defender.owner_id, tile_xy, "combat"))
        events.append(tile_captured(tile_xy, old_owner, attacker.owner_id))
        logger.info(
            "Player %d's %s #%d defeated player %d's %s #%d at (%d,%d)",
            attacker.owner_id, attacker.kind, attacker.id,
            defender.owner_id, defender.kind, defender.id, *tile_xy,
        )
        return CombatResult(ATTACKER, defender.id, events)

    remove_unit(state, attacker)
    events.append(combat_resolved(
        attacker.owner_id, defender.owner_id, attacker.id, defender.id, tile_xy, DEFENDER
    ))
    events.append(unit_destroyed(attacker.id, attacker.kind, attacker.owner_id, (attacker.x, attacker.y), "combat"))
    logger.info(
        "Player %d's %s #%d was destroyed attacking (%d,%d)",
        attacker.owner_id, attacker.kind, attacker.id, *tile_xy,
    )
    return CombatResult(DEFENDER, attacker.id, events)
