"""
Observability for the maze event engine.

Per-session logging of random draws, event selections and choice resolutions.
"""

from maze_engine.observability.run_log import (
    RunLog,
    LogEvent,
    EventType,
    RollEvent,
    SelectionEvent,
    ChoiceEvent,
    TurnEvent,
)

__all__ = [
    "RunLog",
    "LogEvent",
    "EventType",
    "RollEvent",
    "SelectionEvent",
    "ChoiceEvent",
    "TurnEvent",
]
