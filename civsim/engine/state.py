"""
Game state representation.
The reducer works on copies (GameState.copy()); other engine modules mutate the
state they are handed in place and validate before mutating.
to_dict() gives front ends a plain snapshot for display.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from civsim.engine.errors import PlayerNotFound


class Terrain(str, Enum):
    OCEAN = "ocean"
    PLAINS = "plains"
    DESERT = "desert"
    MOUNTAINS = "mountains"
    FOREST = "forest"
    HILLS = "hills"
    TUNDRA = "tundra"
    JUNGLE = "jungle"


# Terrain that can never host a city, a starting unit or a moving unit
UNBUILDABLE_TERRAIN = frozenset({Terrain.OCEAN, Terrain.MOUNTAINS})

PRODUCTION_UNIT = "unit"
PRODUCTION_BUILDING = "building"
PRODUCTION_ITEM_TYPES = (PRODUCTION_UNIT, PRODUCTION_BUILDING)


@dataclass
class Tile:
    """One grid cell: terrain, optional resource and occupancy references by id."""
    terrain: Terrain
    resource: str | None = None
    improved: bool = False
    city_id: int | None = None
    unit_id: int | None = None
    owner_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "terrain": self.terrain.value,
            "resource": self.resource,
            "improved": self.improved,
            "city_id": self.city_id,
            "unit_id": self.unit_id,
            "owner_id": self.owner_id,
        }


@dataclass
class ProductionItem:
    """
    A queued unit or building.
    item_type is the tag ("unit" or "building"); kind is the unit/building definition id.
    """
    item_type: str
    kind: str
    total_cost: int
    progress: int = 0

    @property
    def is_complete(self) -> bool:
        return self.progress >= self.total_cost

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_type": self.item_type,
            "kind": self.kind,
            "progress": self.progress,
            "total_cost": self.total_cost,
        }


@dataclass
class City:
    id: int
    name: str
    owner_id: int
    x: int
    y: int
    population: int = 1
    food: int = 0
    production_queue: list[ProductionItem] = field(default_factory=list)
    buildings: list[str] = field(default_factory=list)  # duplicates permitted

    def production_per_year(self, base_production: int) -> int:
        return base_production + self.population

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "owner_id": self.owner_id,
            "x": self.x,
            "y": self.y,
            "population": self.population,
            "food": self.food,
            "production_queue": [item.to_dict() for item in self.production_queue],
            "buildings": list(self.buildings),
        }


@dataclass
class Unit:
    """Individual unit instance with movement tracking."""
    id: int
    kind: str  # unit definition id, e.g. "warrior"
    owner_id: int
    x: int
    y: int
    health: int
    movement: int  # movement available this turn
    base_movement: int  # restored at the start of the owner's turn
    strength: int
    experience: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "owner_id": self.owner_id,
            "x": self.x,
            "y": self.y,
            "health": self.health,
            "movement": self.movement,
            "base_movement": self.base_movement,
            "strength": self.strength,
            "experience": self.experience,
        }


@dataclass
class Player:
    id: int
    name: str
    civilization: str
    is_ai: bool
    cities: dict[int, City] = field(default_factory=dict)
    units: dict[int, Unit] = field(default_factory=dict)
    techs: set[str] = field(default_factory=set)
    researching: str | None = None  # None once every technology is known
    gold: int = 0
    happiness: int = 0
    # other player id -> relation score (-100..100)
    relations: dict[int, int] = field(default_factory=dict)
    score: int = 0

    @property
    def is_alive(self) -> bool:
        return len(self.cities) > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "civilization": self.civilization,
            "is_ai": self.is_ai,
            "cities": {str(cid): c.to_dict() for cid, c in self.cities.items()},
            "units": {str(uid): u.to_dict() for uid, u in self.units.items()},
            "techs": sorted(self.techs),
            "researching": self.researching,
            "gold": self.gold,
            "happiness": self.happiness,
            "relations": {str(pid): r for pid, r in self.relations.items()},
            "score": self.score,
        }


@dataclass
class GameState:
    """Complete game state."""
    year: int
    tiles: list[list[Tile]]  # indexed [y][x]
    players: list[Player] = field(default_factory=list)
    current_player_index: int = 0
    running: bool = True
    winner: int | None = None  # player id, None while the game continues
    next_city_id: int = 1
    next_unit_id: int = 1
    turn_count: int = 0  # completed rounds (year-end ticks)

    @property
    def width(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    @property
    def height(self) -> int:
        return len(self.tiles)

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    def copy(self) -> "GameState":
        """Return a deep copy of this game state."""
        return deepcopy(self)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, x: int, y: int) -> Tile:
        return self.tiles[y][x]

    def get_player(self, player_id: int) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise PlayerNotFound(f"Player {player_id} not found")

    def generate_city_id(self) -> int:
        city_id = self.next_city_id
        self.next_city_id += 1
        return city_id

    def generate_unit_id(self) -> int:
        unit_id = self.next_unit_id
        self.next_unit_id += 1
        return unit_id

    def to_dict(self) -> dict[str, Any]:
        """Snapshot for display. Not a save format."""
        return {
            "year": self.year,
            "width": self.width,
            "height": self.height,
            "tiles": [[t.to_dict() for t in row] for row in self.tiles],
            "players": [p.to_dict() for p in self.players],
            "current_player_index": self.current_player_index,
            "running": self.running,
            "winner": self.winner,
            "next_city_id": self.next_city_id,
            "next_unit_id": self.next_unit_id,
            "turn_count": self.turn_count,
        }
