"""
Static rule definitions for units, buildings, technologies and civilizations.
All rule data lives in data/rules.json; load_static_definitions() turns it into dataclasses.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

DATA_DIR = Path(__file__).parent.parent / "data"
RULES_PATH = DATA_DIR / "rules.json"


@dataclass
class UnitDefinition:
    """Defines immutable properties of a unit kind."""
    id: str
    display_name: str
    cost: int  # production points
    movement: int
    strength: int
    health: int = 100
    founds_cities: bool = False


@dataclass
class BuildingDefinition:
    """Defines immutable properties of a building kind."""
    id: str
    display_name: str
    cost: int


@dataclass
class TechDefinition:
    id: str
    display_name: str


@dataclass
class CivilizationDefinition:
    id: str
    display_name: str


@dataclass
class Definitions:
    """
    Everything the engine needs to know about the rules.
    Dict order is meaningful: technologies are researched in declaration order,
    civilizations are handed out to players in declaration order.
    """
    units: dict[str, UnitDefinition]
    buildings: dict[str, BuildingDefinition]
    technologies: dict[str, TechDefinition]
    civilizations: dict[str, CivilizationDefinition]
    resources: list[str] = field(default_factory=list)
    starting_tech: str = "agriculture"
    starting_research: str = "pottery"

    def tech_order(self) -> list[str]:
        return list(self.technologies.keys())

    def production_cost(self, item_type: str, kind: str) -> int:
        """Cost of a production item. Raises KeyError for unknown kinds."""
        if item_type == "unit":
            return self.units[kind].cost
        if item_type == "building":
            return self.buildings[kind].cost
        raise KeyError(item_type)


def definitions_from_dict(data: dict) -> Definitions:
    """Build Definitions from a rules dict (same shape as rules.json)."""
    units = {
        uid: UnitDefinition(
            id=uid,
            display_name=u.get("display_name", uid),
            cost=int(u["cost"]),
            movement=int(u["movement"]),
            strength=int(u["strength"]),
            health=int(u.get("health", 100)),
            founds_cities=bool(u.get("founds_cities", False)),
        )
        for uid, u in data.get("units", {}).items()
    }
    buildings = {
        bid: BuildingDefinition(
            id=bid,
            display_name=b.get("display_name", bid),
            cost=int(b["cost"]),
        )
        for bid, b in data.get("buildings", {}).items()
    }
    technologies = {
        t["id"]: TechDefinition(id=t["id"], display_name=t.get("display_name", t["id"]))
        for t in data.get("technologies", [])
    }
    civilizations = {
        c["id"]: CivilizationDefinition(id=c["id"], display_name=c.get("display_name", c["id"]))
        for c in data.get("civilizations", [])
    }
    defs = Definitions(
        units=units,
        buildings=buildings,
        technologies=technologies,
        civilizations=civilizations,
        resources=[str(r) for r in data.get("resources", [])],
        starting_tech=data.get("starting_tech", "agriculture"),
        starting_research=data.get("starting_research", "pottery"),
    )
    if defs.starting_tech not in technologies:
        raise ValueError(f"Unknown starting tech: {defs.starting_tech}")
    if defs.starting_research not in technologies or defs.starting_research == defs.starting_tech:
        raise ValueError(f"Invalid starting research: {defs.starting_research}")
    return defs


def load_static_definitions(path: Path | str | None = None) -> Definitions:
    """Load rule definitions from rules.json (or a custom path)."""
    rules_path = Path(path) if path is not None else RULES_PATH
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules file not found: {rules_path}")
    with open(rules_path, "r") as f:
        return definitions_from_dict(json.load(f))
