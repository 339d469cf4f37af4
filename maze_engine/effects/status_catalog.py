"""
Status effect catalog.

Maps status ids to their display name, type and duration. The resolver and
the inventory manager receive a catalog instance, so narrative content can
be swapped without touching the rules.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional
import logging

from maze_engine.data_models import StatusEffect, StatusType

logger = logging.getLogger(__name__)

UNKNOWN_STATUS_TYPE = StatusType.DEBUFF
UNKNOWN_STATUS_DURATION = 3


@dataclass(frozen=True)
class StatusDefinition:
    """Template for building a StatusEffect."""
    id: str
    name: str
    type: StatusType
    duration: int
    icon: Optional[str] = None

    def create(self) -> StatusEffect:
        return StatusEffect(
            id=self.id,
            name=self.name,
            type=self.type,
            remaining_duration=self.duration,
            icon=self.icon,
        )

    @classmethod
    def from_dict(cls, status_id: str, data: Mapping[str, Any]) -> "StatusDefinition":
        return cls(
            id=status_id,
            name=data.get("name") or default_status_name(status_id),
            type=StatusType.parse(data.get("type", UNKNOWN_STATUS_TYPE.value)),
            duration=int(data.get("duration", UNKNOWN_STATUS_DURATION)),
            icon=data.get("icon"),
        )


def default_status_name(status_id: str) -> str:
    """Display name used for ids the catalog does not know."""
    return status_id.replace("_", " ").upper()


# Event outcomes and item use draw from the same table
DEFAULT_STATUS_TABLE: dict[str, dict[str, Any]] = {
    "curse": {"name": "Cursed", "type": "DEBUFF", "duration": 5},
    "blessing": {"name": "Blessed", "type": "BUFF", "duration": 3},
    "weakness": {"name": "Weakness", "type": "DEBUFF", "duration": 3},
    "strength": {"name": "Strength", "type": "BUFF", "duration": 4},
    "poison": {"name": "Poisoned", "type": "DEBUFF", "duration": 4},
    "healing": {"name": "Regeneration", "type": "BUFF", "duration": 2},
    "bleeding": {"name": "Bleeding", "type": "DEBUFF", "duration": 3},
    "sprain": {"name": "Sprained", "type": "DEBUFF", "duration": 4},
    "fatigue": {"name": "Fatigued", "type": "DEBUFF", "duration": 5},
    "dizziness": {"name": "Dizzy", "type": "DEBUFF", "duration": 2},
    "claustrophobia": {"name": "Claustrophobic", "type": "DEBUFF", "duration": 6},
    "energized": {"name": "Energized", "type": "BUFF", "duration": 3},
    "focused": {"name": "Focused", "type": "BUFF", "duration": 4},
}


class StatusCatalog:
    """Lookup of status definitions by id."""

    def __init__(self, definitions: Optional[Mapping[str, StatusDefinition]] = None):
        self._definitions: dict[str, StatusDefinition] = dict(definitions or {})

    @classmethod
    def from_table(cls, table: Mapping[str, Mapping[str, Any]]) -> "StatusCatalog":
        return cls({status_id: StatusDefinition.from_dict(status_id, data) for status_id, data in table.items()})

    @classmethod
    def default(cls) -> "StatusCatalog":
        return cls.from_table(DEFAULT_STATUS_TABLE)

    def __contains__(self, status_id: str) -> bool:
        return status_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def get(self, status_id: str) -> Optional[StatusDefinition]:
        return self._definitions.get(status_id)

    def register(self, definition: StatusDefinition) -> None:
        self._definitions[definition.id] = definition

    def create(self, status_id: str) -> tuple[StatusEffect, bool]:
        """
        Build a fresh StatusEffect for an id.

        Unknown ids fall back to a DEBUFF lasting UNKNOWN_STATUS_DURATION
        turns with a name derived from the id.

        Returns:
            Tuple of (status effect, whether the id was known)
        """
        definition = self._definitions.get(status_id)
        if definition is not None:
            return definition.create(), True

        logger.debug(f"Status {status_id} not in catalog, using default DEBUFF")
        fallback = StatusDefinition(
            id=status_id,
            name=default_status_name(status_id),
            type=UNKNOWN_STATUS_TYPE,
            duration=UNKNOWN_STATUS_DURATION,
        )
        return fallback.create(), False

    def ids(self) -> list[str]:
        return list(self._definitions)
