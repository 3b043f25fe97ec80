"""
Research rolls, manual research choice and the AI research policy.
"""

import random

import pytest

from civsim.engine.errors import InvalidInput
from civsim.engine.events import RESEARCH_CHANGED, RESEARCH_COMPLETED
from civsim.engine.research import (
    ai_pick_research,
    available_techs,
    choose_next_tech,
    roll_research,
    set_research,
)


def test_successful_roll_learns_tech_and_picks_next(make_state, defs, fixed_roll):
    player = make_state().players[0]

    events = roll_research(player, fixed_roll(0), defs, success_chance=30)

    assert [e.type for e in events] == [RESEARCH_COMPLETED]
    assert player.techs == {"agriculture", "pottery"}
    assert player.researching == "writing"


def test_failed_roll_changes_nothing(make_state, defs, fixed_roll):
    player = make_state().players[0]
    assert roll_research(player, fixed_roll(30), defs, success_chance=30) == []
    assert player.techs == {"agriculture"}
    assert player.researching == "pottery"


def test_next_tech_skips_known_techs(make_state, defs):
    player = make_state().players[0]
    player.techs |= {"pottery", "writing", "construction"}
    assert choose_next_tech(player, defs) == "mathematics"
    assert "construction" not in available_techs(player, defs)


def test_research_stops_when_tree_is_complete(make_state, defs, fixed_roll):
    player = make_state().players[0]
    player.techs = set(defs.tech_order()[:-1])
    player.researching = "industrialization"

    roll_research(player, fixed_roll(0), defs)

    assert len(player.techs) == 10
    assert player.researching is None
    assert choose_next_tech(player, defs) is None
    assert roll_research(player, fixed_roll(0), defs) == []


def test_research_eventually_covers_the_tree(make_state, defs):
    player = make_state().players[0]
    rng = random.Random(11)
    for _ in range(605):
        roll_research(player, rng, defs, success_chance=30)
    assert player.techs == set(defs.tech_order())


def test_set_research(make_state, defs):
    player = make_state().players[0]
    event = set_research(player, "philosophy", defs)
    assert event.type == RESEARCH_CHANGED
    assert event.payload == {"player_id": 0, "old_tech": "pottery", "new_tech": "philosophy"}
    assert player.researching == "philosophy"


def test_set_research_rejects_unknown_or_known_tech(make_state, defs):
    player = make_state().players[0]
    with pytest.raises(InvalidInput):
        set_research(player, "alchemy", defs)
    with pytest.raises(InvalidInput):
        set_research(player, "agriculture", defs)
    assert player.researching == "pottery"


def test_ai_retargets_to_first_unknown_tech(make_state, defs, fixed_roll):
    player = make_state().players[0]
    player.researching = "gunpowder"

    events = ai_pick_research(player, fixed_roll(0), defs, switch_chance=50)
    assert [e.type for e in events] == [RESEARCH_CHANGED]
    assert player.researching == "pottery"

    player.researching = "gunpowder"
    assert ai_pick_research(player, fixed_roll(50), defs, switch_chance=50) == []
    assert player.researching == "gunpowder"
