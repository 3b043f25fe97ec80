"""
Scoring, time victory and conquest.
"""

from civsim.engine.registry import create_city, create_unit
from civsim.engine.victory import (
    CONQUEST_VICTORY,
    TIME_VICTORY,
    calculate_score,
    check_victory,
    scoreboard,
)

END_YEAR = 2050


def give_city(state, player_id, x, y):
    return create_city(state, state.players[player_id], f"City{x}{y}", x, y)


def test_score_formula(make_state, defs):
    state = make_state()
    player = state.players[0]
    give_city(state, 0, 0, 0)
    create_unit(state, player, defs.units["warrior"], 1, 1)
    create_unit(state, player, defs.units["archer"], 2, 2)
    state.tile(3, 3).owner_id = 0
    state.tile(4, 4).owner_id = 0

    # 1 city, 1 tech, 2 units, 3 owned tiles
    assert calculate_score(state, player) == 100 + 50 + 20 + 15


def test_no_victory_while_two_players_have_cities(make_state):
    state = make_state()
    give_city(state, 0, 0, 0)
    give_city(state, 1, 3, 3)
    assert check_victory(state, END_YEAR) is None


def test_no_victory_when_nobody_has_cities(make_state):
    state = make_state()
    assert check_victory(state, END_YEAR) is None


def test_last_player_with_cities_wins_by_conquest(make_state):
    state = make_state(num_players=3)
    give_city(state, 1, 2, 2)
    result = check_victory(state, END_YEAR)
    assert result.winner == 1
    assert result.condition == CONQUEST_VICTORY


def test_time_victory_highest_score(make_state):
    state = make_state()
    give_city(state, 0, 0, 0)
    give_city(state, 1, 2, 2)
    give_city(state, 1, 4, 4)
    state.year = END_YEAR

    result = check_victory(state, END_YEAR)
    assert result.condition == TIME_VICTORY
    assert result.winner == 1
    assert result.scores == {0: 155, 1: 260}
    assert state.players[1].score == 260


def test_time_victory_tie_goes_to_first_player(make_state):
    state = make_state()
    give_city(state, 0, 0, 0)
    give_city(state, 1, 2, 2)
    state.year = END_YEAR + 10
    assert check_victory(state, END_YEAR).winner == 0


def test_time_limit_checked_before_conquest(make_state):
    state = make_state()
    give_city(state, 0, 0, 0)
    state.players[1].techs = {"agriculture", "pottery", "writing", "mathematics"}
    state.year = END_YEAR

    result = check_victory(state, END_YEAR)
    assert result.condition == TIME_VICTORY
    # player 0 is the only one with a city, but the score decides
    assert result.winner == 1
    assert result.scores == {0: 155, 1: 200}


def test_scoreboard_orders_best_first(make_state):
    state = make_state(num_players=3)
    give_city(state, 2, 0, 0)
    board = scoreboard(state)
    assert [p.id for p, _ in board] == [2, 0, 1]
    assert [score for _, score in board] == [155, 50, 50]
