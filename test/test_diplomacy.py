"""
Diplomatic actions and relation status thresholds.
"""

import pytest

from civsim.engine.diplomacy import relation_status, set_relation
from civsim.engine.errors import InvalidInput, PlayerNotFound


def test_war_and_peace_set_fixed_values(make_state):
    state = make_state(num_players=3)
    player = state.players[0]

    event = set_relation(state, player, 1, "declare_war")
    assert player.relations[1] == -100
    assert event.payload["old_value"] == 0 and event.payload["new_value"] == -100

    set_relation(state, player, 1, "make_peace")
    assert player.relations[1] == 50
    # the other side's view is unchanged
    assert state.players[1].relations[0] == 0


def test_trade_agreement_adds_and_caps(make_state):
    state = make_state()
    player = state.players[0]
    for _ in range(3):
        set_relation(state, player, 1, "trade_agreement")
    assert player.relations[1] == 60

    for _ in range(5):
        set_relation(state, player, 1, "trade_agreement")
    assert player.relations[1] == 100


def test_invalid_relation_targets(make_state):
    state = make_state()
    player = state.players[0]
    with pytest.raises(InvalidInput):
        set_relation(state, player, 0, "make_peace")
    with pytest.raises(PlayerNotFound):
        set_relation(state, player, 7, "make_peace")
    with pytest.raises(InvalidInput):
        set_relation(state, player, 1, "insult")
    assert player.relations == {1: 0}


def test_relation_status():
    assert relation_status(51) == "friendly"
    assert relation_status(50) == "neutral"
    assert relation_status(0) == "neutral"
    assert relation_status(-50) == "neutral"
    assert relation_status(-51) == "hostile"
