"""
Turn scheduler: the top-level state machine.

    AWAITING_VICTORY_CHECK -> ACTIVE_PLAYER_TURN -> (AI_TURN | EXTERNAL_INPUT)
        -> ADVANCE -> [wraparound] YEAR_END -> AWAITING_VICTORY_CHECK

GAME_OVER is terminal and is entered whenever the victory check fires.
Human turns are a sub-loop of commands pulled from an InputProvider until the
player ends the turn; AI turns are a single pass.
"""

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from civsim.config import GameConfig
from civsim.engine.actions import Action, END_TURN
from civsim.engine.ai import run_ai_turn
from civsim.engine.definitions import Definitions, load_static_definitions
from civsim.engine.errors import GameError, InvalidInput
from civsim.engine.events import GameEvent
from civsim.engine.reducer import (
    advance_turn,
    apply_action,
    begin_turn,
    evaluate_victory,
    run_year_end,
)
from civsim.engine.state import GameState
from civsim.engine.utils import format_year, initialize_game_state
from civsim.engine.victory import scoreboard

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    AWAITING_VICTORY_CHECK = "awaiting_victory_check"
    ACTIVE_PLAYER_TURN = "active_player_turn"
    AI_TURN = "ai_turn"
    EXTERNAL_INPUT = "external_input"
    ADVANCE = "advance"
    YEAR_END = "year_end"
    GAME_OVER = "game_over"


@dataclass
class CommandResult:
    """Outcome of a submitted command: events on success, the typed error on failure."""
    ok: bool
    events: list[GameEvent] = field(default_factory=list)
    error: GameError | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "events": [e.to_dict() for e in self.events],
            "error": self.error.to_dict() if self.error else None,
        }


class InputProvider(ABC):
    """
    The external collaborator that plays human turns.
    next_action blocks until the player has chosen a command; it may raise a
    GameError (e.g. InvalidInput for unparseable input), which is reported back
    through on_result like any other failed command.
    """

    @abstractmethod
    def next_action(self, state: GameState, player_id: int) -> Action:
        ...

    def on_result(self, result: CommandResult) -> None:
        """Called after every command so the front end can show events or errors."""


class TurnScheduler:
    """Drives a game from setup to GAME_OVER."""

    def __init__(
        self,
        state: GameState,
        defs: Definitions,
        config: GameConfig,
        rng: random.Random,
        input_provider: InputProvider | None = None,
        event_sink: Callable[[list[GameEvent]], None] | None = None,
    ):
        if input_provider is None and any(not p.is_ai for p in state.players):
            raise InvalidInput("Human players need an input provider")
        self.state = state
        self.defs = defs
        self.config = config
        self.rng = rng
        self.input_provider = input_provider
        self.event_sink = event_sink
        self.phase = Phase.AWAITING_VICTORY_CHECK if state.running else Phase.GAME_OVER
        self.history: list[GameEvent] = []

    @classmethod
    def new_game(
        cls,
        config: GameConfig,
        seed: int | None = None,
        defs: Definitions | None = None,
        input_provider: InputProvider | None = None,
        event_sink: Callable[[list[GameEvent]], None] | None = None,
    ) -> "TurnScheduler":
        """
        Seed the random source once and build a fresh world.
        Setup failures (StartingPositionExhausted, NoValidPlacement) propagate: the
        caller has to retry with different parameters.
        """
        rng = random.Random(seed)
        defs = defs or load_static_definitions()
        state = initialize_game_state(config, defs, rng)
        logger.info("=== New game: %d players, seed=%s ===", len(state.players), seed)
        return cls(state, defs, config, rng, input_provider, event_sink)

    @property
    def is_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    def _emit(self, events: list[GameEvent]) -> None:
        if not events:
            return
        self.history.extend(events)
        if self.event_sink is not None:
            self.event_sink(events)

    # ===== Commands =====

    def submit(self, action: Action) -> CommandResult:
        """
        Apply a command for the active human player. Failures come back as values
        and leave the state unchanged. end_turn only closes the input sub-loop;
        the scheduler performs the advance itself.
        """
        if self.phase != Phase.EXTERNAL_INPUT:
            return CommandResult(False, error=InvalidInput(f"Not accepting commands in phase {self.phase.value}"))
        if action.player != self.state.current_player.id:
            return CommandResult(False, error=InvalidInput(
                f"Action player {action.player} does not match current player {self.state.current_player.id}"
            ))
        if action.type == END_TURN:
            return CommandResult(True)

        try:
            new_state, events = apply_action(self.state, action, self.defs, self.config, self.rng)
        except GameError as e:
            logger.debug("Command %s rejected: %s", action.type, e)
            return CommandResult(False, error=e)
        self.state = new_state
        self._emit(events)
        return CommandResult(True, events)

    # ===== State Machine =====

    def step(self) -> Phase:
        """Perform one transition and return the new phase."""
        if self.phase == Phase.AWAITING_VICTORY_CHECK:
            self._emit(evaluate_victory(self.state, self.config))
            self.phase = Phase.GAME_OVER if not self.state.running else Phase.ACTIVE_PLAYER_TURN

        elif self.phase == Phase.ACTIVE_PLAYER_TURN:
            player = self.state.current_player
            logger.info("======= %s's turn (%s) =======", player.name, format_year(self.state.year))
            self._emit(begin_turn(self.state))
            self.phase = Phase.AI_TURN if player.is_ai else Phase.EXTERNAL_INPUT

        elif self.phase == Phase.AI_TURN:
            self._emit(run_ai_turn(self.state, self.defs, self.config, self.rng))
            self.phase = Phase.ADVANCE

        elif self.phase == Phase.EXTERNAL_INPUT:
            self._run_human_turn()
            self.phase = Phase.ADVANCE

        elif self.phase == Phase.ADVANCE:
            wrapped, events = advance_turn(self.state)
            self._emit(events)
            self.phase = Phase.YEAR_END if wrapped else Phase.AWAITING_VICTORY_CHECK

        elif self.phase == Phase.YEAR_END:
            self._emit(run_year_end(self.state, self.defs, self.config, self.rng))
            self.phase = Phase.AWAITING_VICTORY_CHECK

        return self.phase

    def _run_human_turn(self) -> None:
        player_id = self.state.current_player.id
        while True:
            try:
                action = self.input_provider.next_action(self.state, player_id)
            except GameError as e:
                self.input_provider.on_result(CommandResult(False, error=e))
                continue
            result = self.submit(action)
            self.input_provider.on_result(result)
            if result.ok and action.type == END_TURN:
                return

    def run(self, max_rounds: int | None = None) -> GameState:
        """
        Step until GAME_OVER. max_rounds caps the number of year-end updates
        (the game is then left running without a winner).
        """
        start_rounds = self.state.turn_count
        while not self.is_over:
            if max_rounds is not None and self.state.turn_count - start_rounds >= max_rounds:
                break
            self.step()
        return self.state

    def final_scoreboard(self) -> list[dict[str, Any]]:
        return [
            {"player_id": p.id, "name": p.name, "score": score, "winner": p.id == self.state.winner}
            for p, score in scoreboard(self.state)
        ]
