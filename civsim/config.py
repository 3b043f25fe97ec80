"""
Single place for default game configuration.
GameConfig validates overrides; every engine function reads its tunables from a GameConfig.
"""

from pydantic import BaseModel, Field, ValidationError, model_validator

from civsim.engine.errors import InvalidInput

# Map
MAP_WIDTH = 20
MAP_HEIGHT = 15
RESOURCE_CHANCE = 10  # 1-in-N tiles carries a resource

# Players
MIN_PLAYERS = 2
MAX_PLAYERS = 8
STARTING_GOLD = 100
STARTING_HAPPINESS = 100
BASE_CITY_POPULATION = 1

# Calendar. Years are signed: -4000 is 4000 BC.
START_YEAR = -4000
END_YEAR = 2050
YEAR_STEP = 10

# Starting positions
MIN_CITY_DISTANCE = 25  # squared distance
START_POSITION_ATTEMPTS = 100

# Production
MAX_PRODUCTION_QUEUE = 5
BASE_PRODUCTION = 10  # production per year = BASE_PRODUCTION + population

# Percent chances (0-100)
RESEARCH_SUCCESS_CHANCE = 30
AI_RESEARCH_SWITCH_CHANCE = 50
COMBAT_SUCCESS_CHANCE = 70


class GameConfig(BaseModel):
    """Tunables for one game. Defaults mirror the module constants above."""

    map_width: int = Field(default=MAP_WIDTH, ge=1)
    map_height: int = Field(default=MAP_HEIGHT, ge=1)
    resource_chance: int = Field(default=RESOURCE_CHANCE, ge=1)

    num_players: int = Field(default=2, ge=MIN_PLAYERS, le=MAX_PLAYERS)
    # Player indices controlled by the external input collaborator. None = player 0 only.
    human_players: list[int] | None = None
    starting_gold: int = STARTING_GOLD
    starting_happiness: int = STARTING_HAPPINESS
    base_city_population: int = Field(default=BASE_CITY_POPULATION, ge=1)

    start_year: int = START_YEAR
    end_year: int = END_YEAR
    year_step: int = Field(default=YEAR_STEP, ge=1)

    min_city_distance: int = Field(default=MIN_CITY_DISTANCE, ge=0)
    start_position_attempts: int = Field(default=START_POSITION_ATTEMPTS, ge=1)

    max_production_queue: int = Field(default=MAX_PRODUCTION_QUEUE, ge=1)
    base_production: int = Field(default=BASE_PRODUCTION, ge=0)

    research_success_chance: int = Field(default=RESEARCH_SUCCESS_CHANCE, ge=0, le=100)
    ai_research_switch_chance: int = Field(default=AI_RESEARCH_SWITCH_CHANCE, ge=0, le=100)
    combat_success_chance: int = Field(default=COMBAT_SUCCESS_CHANCE, ge=0, le=100)

    @model_validator(mode="after")
    def _check_human_players(self) -> "GameConfig":
        if self.human_players is not None:
            for idx in self.human_players:
                if idx < 0 or idx >= self.num_players:
                    raise ValueError(
                        f"human player index {idx} out of range for {self.num_players} players"
                    )
        return self

    def is_human(self, player_index: int) -> bool:
        if self.human_players is None:
            return player_index == 0
        return player_index in self.human_players


def make_config(**overrides) -> GameConfig:
    """
    Build a GameConfig, turning pydantic validation failures into InvalidInput
    so callers only deal with the engine's error taxonomy.
    """
    try:
        return GameConfig(**overrides)
    except ValidationError as e:
        raise InvalidInput(f"Invalid game configuration: {e.errors()[0].get('msg', e)}") from e
