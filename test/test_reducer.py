"""
Commands applied through the reducer.
"""

import random

import pytest

from civsim.engine.actions import (
    Action,
    end_turn,
    enqueue_production,
    found_city,
    move_unit,
    set_relation,
    set_research,
)
from civsim.engine.errors import CityNotFound, InvalidInput, InvalidMove, UnitNotFound
from civsim.engine.events import (
    CITY_FOUNDED,
    CITY_GREW,
    PRODUCTION_ENQUEUED,
    TURN_ENDED,
    TURN_STARTED,
    UNIT_DESTROYED,
    VICTORY,
    YEAR_ADVANCED,
)
from civsim.engine.reducer import apply_action
from civsim.engine.registry import create_city, create_unit, remove_city


def setup_game(make_state, defs):
    """
    6x6 plains. Player 0: capital at (0,0), settler at (1,1), warrior at (2,1).
    Player 1: capital at (4,4), warrior at (4,3).
    """
    state = make_state(6, 6)
    p0, p1 = state.players
    create_city(state, p0, "Thebes", 0, 0)
    create_unit(state, p0, defs.units["settler"], 1, 1)
    create_unit(state, p0, defs.units["warrior"], 2, 1)
    create_city(state, p1, "Athens", 4, 4)
    create_unit(state, p1, defs.units["warrior"], 4, 3)
    return state


def apply(state, action, defs, config, rng=None):
    return apply_action(state, action, defs, config, rng or random.Random(0))


def test_found_city_consumes_settler(make_state, defs, config):
    state = setup_game(make_state, defs)

    new_state, events = apply(state, found_city(0, "Memphis"), defs, config)

    assert [e.type for e in events] == [CITY_FOUNDED, UNIT_DESTROYED]
    player = new_state.players[0]
    city = next(c for c in player.cities.values() if c.name == "Memphis")
    assert (city.x, city.y, city.population) == (1, 1, 1)
    assert new_state.tile(1, 1).owner_id == 0
    assert new_state.tile(1, 1).unit_id is None
    assert [u.kind for u in player.units.values()] == ["warrior"]
    # the input state is untouched
    assert len(state.players[0].cities) == 1
    assert len(state.players[0].units) == 2


def test_found_city_validation(make_state, defs, config):
    state = setup_game(make_state, defs)

    with pytest.raises(InvalidInput):
        apply(state, found_city(0, "Ur"), defs, config)
    with pytest.raises(InvalidInput):
        apply(state, found_city(0, "A" * 21), defs, config)
    with pytest.raises(InvalidInput):
        apply(state, found_city(0, "Memphis", unit_id=2), defs, config)  # warrior
    with pytest.raises(UnitNotFound):
        apply(state, found_city(0, "Memphis", unit_id=99), defs, config)

    create_city(state, state.players[0], "Karnak", 1, 1)
    with pytest.raises(InvalidMove):
        apply(state, found_city(0, "Memphis"), defs, config)


def test_found_city_without_settler(make_state, defs, config):
    state = setup_game(make_state, defs)
    state, _ = apply(state, found_city(0, "Memphis"), defs, config)
    with pytest.raises(UnitNotFound):
        apply(state, found_city(0, "Luxor"), defs, config)


def test_only_current_player_may_act(make_state, defs, config):
    state = setup_game(make_state, defs)
    with pytest.raises(InvalidInput):
        apply(state, end_turn(1), defs, config)


def test_unknown_action_and_bad_payload(make_state, defs, config):
    state = setup_game(make_state, defs)
    with pytest.raises(InvalidInput):
        apply(state, Action(type="build_wonder", player=0, payload={}), defs, config)
    with pytest.raises(InvalidInput):
        apply(state, Action(type="move_unit", player=0, payload={"unit_id": 2, "x": "3", "y": 1}), defs, config)


def test_move_unit_command(make_state, defs, config):
    state = setup_game(make_state, defs)
    new_state, _ = apply(state, move_unit(0, 2, 3, 1), defs, config)
    assert (new_state.players[0].units[2].x, new_state.players[0].units[2].y) == (3, 1)

    with pytest.raises(UnitNotFound):
        apply(state, move_unit(0, 3, 4, 2), defs, config)  # player 1's warrior


def test_enqueue_production_command(make_state, defs, config):
    state = setup_game(make_state, defs)
    new_state, events = apply(state, enqueue_production(0, 1, "building", "library"), defs, config)
    assert events[0].type == PRODUCTION_ENQUEUED
    assert new_state.players[0].cities[1].production_queue[0].kind == "library"

    with pytest.raises(CityNotFound):
        apply(state, enqueue_production(0, 2, "unit", "warrior"), defs, config)  # player 1's city


def test_research_and_relation_commands(make_state, defs, config):
    state = setup_game(make_state, defs)
    state, _ = apply(state, set_research(0, "writing"), defs, config)
    state, _ = apply(state, set_relation(0, 1, "declare_war"), defs, config)
    assert state.players[0].researching == "writing"
    assert state.players[0].relations[1] == -100


def test_end_turn_rotates_and_year_end_fires_on_wrap(make_state, defs, config, rng):
    state = setup_game(make_state, defs)
    state.players[1].units[3].movement = 0

    state, events = apply_action(state, end_turn(0), defs, config, rng)
    assert [e.type for e in events] == [TURN_ENDED, TURN_STARTED]
    assert state.current_player_index == 1
    assert state.players[1].units[3].movement == 2
    assert state.year == -4000

    state, events = apply_action(state, end_turn(1), defs, config, rng)
    types = [e.type for e in events]
    assert types[0] == TURN_ENDED
    assert types.count(CITY_GREW) == 2
    assert YEAR_ADVANCED in types
    assert types[-1] == TURN_STARTED
    assert state.current_player_index == 0
    assert state.year == -3990
    assert state.turn_count == 1
    assert all(c.food >= 2 for p in state.players for c in p.cities.values())


def test_end_turn_detects_conquest(make_state, defs, config, rng):
    state = setup_game(make_state, defs)
    remove_city(state, state.players[1].cities[2])

    state, events = apply_action(state, end_turn(0), defs, config, rng)

    assert events[-1].type == VICTORY
    assert events[-1].payload["condition"] == "conquest"
    assert state.winner == 0
    assert not state.running
    with pytest.raises(InvalidInput):
        apply_action(state, end_turn(1), defs, config, rng)
