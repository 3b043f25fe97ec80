"""
Technology research.
Each year-end every player has a fixed chance to finish the technology in progress;
the next target is always the first technology (in rules order) not yet known, so
research never targets a known technology and eventually covers the whole tree.
"""

import logging
import random

from civsim.engine.definitions import Definitions
from civsim.engine.errors import InvalidInput
from civsim.engine.events import GameEvent, research_changed, research_completed
from civsim.engine.state import Player

logger = logging.getLogger(__name__)


def choose_next_tech(player: Player, defs: Definitions) -> str | None:
    """First technology in rules order the player does not know, or None."""
    for tech_id in defs.tech_order():
        if tech_id not in player.techs:
            return tech_id
    return None


def available_techs(player: Player, defs: Definitions) -> list[str]:
    return [t for t in defs.tech_order() if t not in player.techs]


def roll_research(
    player: Player,
    rng: random.Random,
    defs: Definitions,
    success_chance: int = 30,
) -> list[GameEvent]:
    """Year-end research roll for one player."""
    if player.researching is None:
        return []
    if rng.randrange(100) >= success_chance:
        return []

    finished = player.researching
    player.techs.add(finished)
    player.researching = choose_next_tech(player, defs)
    logger.info("Player %d researched %s", player.id, finished)
    return [research_completed(player.id, finished, player.researching)]


def set_research(player: Player, tech_id: str, defs: Definitions) -> GameEvent:
    """Choose the technology to research. It must exist and not be known yet."""
    if tech_id not in defs.technologies:
        raise InvalidInput(f"Unknown technology: {tech_id}")
    if tech_id in player.techs:
        raise InvalidInput(f"Technology {tech_id} is already known")
    old = player.researching
    player.researching = tech_id
    return research_changed(player.id, old, tech_id)


def ai_pick_research(
    player: Player,
    rng: random.Random,
    defs: Definitions,
    switch_chance: int = 50,
) -> list[GameEvent]:
    """AI research choice: with switch_chance percent, retarget to the next unknown technology."""
    if rng.randrange(100) >= switch_chance:
        return []
    new_tech = choose_next_tech(player, defs)
    if new_tech == player.researching:
        return []
    old = player.researching
    player.researching = new_tech
    return [research_changed(player.id, old, new_tech)]
