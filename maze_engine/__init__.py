"""
Maze Event Engine.

Rules engine for a room-by-room maze adventure: event distribution over
rooms, choice resolution, effects on player state and item use.
"""

from maze_engine.errors import (
    DataInconsistencyError,
    InvalidArgumentError,
    MazeEngineError,
    RequirementsNotMetError,
)
from maze_engine.data_models import (
    Choice,
    ChoiceEffects,
    DiceRoller,
    Event,
    GameState,
    Inventory,
    InventoryItem,
    Persistence,
    PlayerStats,
    Stat,
    StatusEffect,
    StatusType,
)

__version__ = "0.1.0"

__all__ = [
    "DataInconsistencyError",
    "InvalidArgumentError",
    "MazeEngineError",
    "RequirementsNotMetError",
    "Choice",
    "ChoiceEffects",
    "DiceRoller",
    "Event",
    "GameState",
    "Inventory",
    "InventoryItem",
    "Persistence",
    "PlayerStats",
    "Stat",
    "StatusEffect",
    "StatusType",
]
