"""
Typed failures raised by the engine.
Every rule violation is a GameError (a ValueError), carrying a stable code for front ends.
A failed command leaves the state it was applied to unchanged.
"""


class GameError(ValueError):
    """Base class for all engine failures."""
    code = "GAME_ERROR"

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": str(self)}


class InvalidInput(GameError):
    """Malformed or out-of-range command argument. The caller should re-prompt."""
    code = "INVALID_INPUT"


class NotFound(GameError):
    """Referenced identifier does not exist in the current world."""
    code = "NOT_FOUND"


class CityNotFound(NotFound):
    code = "CITY_NOT_FOUND"


class UnitNotFound(NotFound):
    code = "UNIT_NOT_FOUND"


class PlayerNotFound(NotFound):
    code = "PLAYER_NOT_FOUND"


class InvalidMove(GameError):
    """Destination is not buildable or already holds a friendly unit."""
    code = "INVALID_MOVE"


class ProductionQueueFull(GameError):
    code = "PRODUCTION_QUEUE_FULL"


class NoValidPlacement(GameError):
    """No legal tile for a new unit (production completion or game setup)."""
    code = "NO_VALID_PLACEMENT"


class StartingPositionExhausted(GameError):
    """Map too crowded or small for the requested player count. Fatal for game creation."""
    code = "STARTING_POSITION_EXHAUSTED"
