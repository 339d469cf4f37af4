"""
Event selection for a room visit.
"""

from typing import Mapping, Optional, Sequence
import logging

from maze_engine.data_models import DiceRoller, Event
from maze_engine.errors import DataInconsistencyError

logger = logging.getLogger(__name__)


class EventSelector:
    """
    Picks one event uniformly from a room's candidate ids.

    Every candidate must be in the catalog; a missing id is a data error and
    is never skipped or replaced with a placeholder.
    """

    def __init__(self, catalog: Mapping[str, Event], dice: DiceRoller):
        self.catalog = catalog
        self.dice = dice

    def get_event(self, event_id: str) -> Event:
        event = self.catalog.get(event_id)
        if event is None:
            logger.error(f'Event with ID "{event_id}" not found in catalog')
            raise DataInconsistencyError(event_id)
        return event

    def select(self, candidate_ids: Sequence[str]) -> Optional[Event]:
        """
        Select an event.

        Returns:
            The chosen Event, or None when there are no candidates

        Raises:
            DataInconsistencyError: If any candidate id is not in the catalog
        """
        if not candidate_ids:
            return None

        for candidate_id in candidate_ids:
            if candidate_id not in self.catalog:
                self.get_event(candidate_id)

        event_id = self.dice.choice(list(candidate_ids), reason="room event pick")
        event = self.get_event(event_id)
        logger.debug(f"Selected event {event_id} from {len(candidate_ids)} candidates")
        return event
