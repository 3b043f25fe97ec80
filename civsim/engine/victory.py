"""
Scoring and victory evaluation.
The time limit takes precedence over conquest.
"""

from dataclasses import dataclass

from civsim.engine.state import GameState, Player
from civsim.engine.world_map import owned_tiles

CITY_POINTS = 100
TECH_POINTS = 50
UNIT_POINTS = 10
TILE_POINTS = 5

TIME_VICTORY = "time"
CONQUEST_VICTORY = "conquest"


@dataclass
class VictoryResult:
    winner: int  # player id
    condition: str  # "time" or "conquest"
    scores: dict[int, int]


def calculate_score(state: GameState, player: Player) -> int:
    """100 per city, 50 per known technology, 10 per unit, 5 per owned tile."""
    return (
        len(player.cities) * CITY_POINTS
        + len(player.techs) * TECH_POINTS
        + len(player.units) * UNIT_POINTS
        + len(owned_tiles(state, player.id)) * TILE_POINTS
    )


def update_scores(state: GameState) -> dict[int, int]:
    """Recompute and cache every player's score. Returns {player_id: score}."""
    scores = {}
    for player in state.players:
        player.score = calculate_score(state, player)
        scores[player.id] = player.score
    return scores


def check_victory(state: GameState, end_year: int) -> VictoryResult | None:
    """
    Returns the result if the game is over, else None.

    - year >= end_year: highest score wins; on a tie the earlier player keeps the lead
    - otherwise, if exactly one player still has a city, that player wins by conquest
    """
    scores = update_scores(state)

    if state.year >= end_year:
        winner = None
        highest = -1
        for player in state.players:
            if scores[player.id] > highest:
                highest = scores[player.id]
                winner = player.id
        return VictoryResult(winner=winner, condition=TIME_VICTORY, scores=scores)

    alive = [p for p in state.players if p.is_alive]
    if len(alive) == 1:
        return VictoryResult(winner=alive[0].id, condition=CONQUEST_VICTORY, scores=scores)
    return None


def scoreboard(state: GameState) -> list[tuple[Player, int]]:
    """Players with their current scores, best first (stable for ties)."""
    scores = update_scores(state)
    return sorted(
        ((p, scores[p.id]) for p in state.players),
        key=lambda pair: pair[1],
        reverse=True,
    )
