"""
Exception taxonomy for the maze event engine.

Fatal conditions are raised and distinguishable by kind. Non-fatal anomalies
found while resolving effects are reported in EffectsApplied instead.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from maze_engine.conditions.requirement_evaluator import RequirementCheck


class MazeEngineError(Exception):
    """Base class for all engine errors."""


class InvalidArgumentError(MazeEngineError, ValueError):
    """
    Raised for programming or data errors in the arguments.

    Covers out-of-range choice indices, unknown comparison operators,
    unknown stat names and malformed requirement/condition structures.
    """


class RequirementsNotMetError(MazeEngineError):
    """Raised when a choice is processed whose requirements do not hold."""

    def __init__(self, message: str, check: Optional["RequirementCheck"] = None):
        super().__init__(message)
        self.check = check

    @property
    def failure_reasons(self) -> list[str]:
        if self.check is None:
            return []
        return list(self.check.failure_reasons)


class DataInconsistencyError(MazeEngineError, LookupError):
    """Raised when an event id cannot be found in the event catalog."""

    def __init__(self, event_id: str, message: Optional[str] = None):
        super().__init__(message or f'Event with ID "{event_id}" not found in catalog')
        self.event_id = event_id
