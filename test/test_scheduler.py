"""
Turn scheduler: phase sequence, human input sub-loop and complete AI games.
"""

import random

import pytest

from civsim.config import make_config
from civsim.engine.actions import end_turn, enqueue_production, move_unit
from civsim.engine.errors import InvalidInput, UnitNotFound
from civsim.engine.events import VICTORY
from civsim.engine.registry import create_city, create_unit
from civsim.engine.scheduler import InputProvider, Phase, TurnScheduler


class ScriptedInput(InputProvider):
    """Plays a fixed list of actions; exception instances in the script are raised."""

    def __init__(self, script):
        self.script = list(script)
        self.results = []

    def next_action(self, state, player_id):
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def on_result(self, result):
        self.results.append(result)


def build_world(make_state, defs):
    state = make_state(8, 8)
    for player, (x, y) in zip(state.players, [(1, 1), (5, 5)]):
        create_city(state, player, f"{player.name} Capital", x, y)
        create_unit(state, player, defs.units["settler"], x, y)
        create_unit(state, player, defs.units["warrior"], x + 1, y)
    return state


def make_scheduler(make_state, defs, config, seed=3, **kwargs):
    return TurnScheduler(build_world(make_state, defs), defs, config, random.Random(seed), **kwargs)


def test_phase_sequence_for_one_round(make_state, defs, config):
    scheduler = make_scheduler(make_state, defs, config)
    phases = [scheduler.step() for _ in range(9)]
    assert phases == [
        Phase.ACTIVE_PLAYER_TURN,
        Phase.AI_TURN,
        Phase.ADVANCE,
        Phase.AWAITING_VICTORY_CHECK,
        Phase.ACTIVE_PLAYER_TURN,
        Phase.AI_TURN,
        Phase.ADVANCE,
        Phase.YEAR_END,
        Phase.AWAITING_VICTORY_CHECK,
    ]
    assert scheduler.state.year == -3990
    assert scheduler.state.current_player_index == 0


def test_ai_game_runs_to_completion(make_state, defs):
    config = make_config(human_players=[], end_year=-3800)
    scheduler = make_scheduler(make_state, defs, config)

    state = scheduler.run()

    assert scheduler.is_over
    assert scheduler.phase == Phase.GAME_OVER
    assert not state.running
    assert state.winner in (0, 1)
    assert state.year <= -3800
    assert scheduler.history[-1].type == VICTORY
    board = scheduler.final_scoreboard()
    assert sum(row["winner"] for row in board) == 1
    # GAME_OVER is terminal
    assert scheduler.step() == Phase.GAME_OVER


def test_same_seed_same_game(make_state, defs):
    config = make_config(human_players=[], end_year=-3700)
    first = make_scheduler(make_state, defs, config, seed=21)
    second = make_scheduler(make_state, defs, config, seed=21)

    assert first.run().to_dict() == second.run().to_dict()
    assert [e.to_dict() for e in first.history] == [e.to_dict() for e in second.history]


def test_run_stops_after_max_rounds(make_state, defs, config):
    scheduler = make_scheduler(make_state, defs, config)
    state = scheduler.run(max_rounds=3)
    assert state.turn_count == 3
    assert state.year == -3970
    assert state.running
    assert state.winner is None


def test_event_sink_receives_events(make_state, defs, config):
    received = []
    scheduler = make_scheduler(make_state, defs, config, event_sink=received.extend)
    scheduler.run(max_rounds=1)
    assert received
    assert [e.type for e in received] == [e.type for e in scheduler.history]


def test_human_turn_collects_commands_until_end_turn(make_state, defs, config):
    world = build_world(make_state, defs)
    world.players[0].is_ai = False
    provider = ScriptedInput([
        move_unit(0, 99, 2, 2),
        InvalidInput("could not parse command"),
        enqueue_production(0, 1, "unit", "warrior"),
        end_turn(0),
    ])
    scheduler = TurnScheduler(world, defs, config, random.Random(3), input_provider=provider)

    assert scheduler.step() == Phase.ACTIVE_PLAYER_TURN
    assert scheduler.step() == Phase.EXTERNAL_INPUT
    assert scheduler.step() == Phase.ADVANCE

    assert [r.ok for r in provider.results] == [False, False, True, True]
    assert isinstance(provider.results[0].error, UnitNotFound)
    assert provider.results[1].error.code == "INVALID_INPUT"
    assert provider.results[2].events[0].payload["kind"] == "warrior"
    assert scheduler.state.players[0].cities[1].production_queue[0].kind == "warrior"
    assert provider.script == []


def test_submit_outside_human_turn_is_rejected(make_state, defs, config):
    scheduler = make_scheduler(make_state, defs, config)
    result = scheduler.submit(end_turn(0))
    assert not result.ok
    assert result.error.code == "INVALID_INPUT"
    assert result.to_dict()["error"]["code"] == "INVALID_INPUT"


def test_human_player_requires_input_provider(make_state, defs, config):
    world = build_world(make_state, defs)
    world.players[1].is_ai = False
    with pytest.raises(InvalidInput):
        TurnScheduler(world, defs, config, random.Random(1))
