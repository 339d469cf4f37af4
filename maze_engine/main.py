"""
Maze Event Engine - Main Entry Point

Rules engine for a room-by-room maze adventure. This module provides the
session configuration, the MazeEventEngine facade that wires the engine's
parts together, and a small command-line demo.
"""

import argparse
import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from maze_engine.data_models import DEFAULT_MAX_SLOTS, DiceRoller, Event, GameState, Inventory
from maze_engine.effects import InventoryManager, ItemCatalog, ItemUseResult, StatusCatalog
from maze_engine.errors import InvalidArgumentError, MazeEngineError
from maze_engine.events import ChoiceResult, EventProcessor, RoomEntry
from maze_engine.observability import RunLog
from maze_engine.rooms import EventDistributor, RoomEventData
from maze_engine.validation import ValidationService


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)

SAVE_VERSION = "1.0.0"


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class EngineConfig:
    """Configuration for an engine session."""

    seed: Optional[int] = None
    max_inventory_slots: int = DEFAULT_MAX_SLOTS

    # Optional JSON event catalog for the CLI ({"events": [...]} or a list)
    catalog_path: Optional[Path] = None

    # Demo options
    rounds: int = 8
    grid_size: int = 4

    verbose: bool = False

    def __post_init__(self):
        if isinstance(self.catalog_path, str):
            self.catalog_path = Path(self.catalog_path)
        if self.max_inventory_slots < 1:
            raise InvalidArgumentError(f"max_inventory_slots must be positive: {self.max_inventory_slots}")
        if self.rounds < 0:
            raise InvalidArgumentError(f"rounds cannot be negative: {self.rounds}")
        if self.grid_size < 2:
            raise InvalidArgumentError(f"grid_size must be at least 2: {self.grid_size}")


def load_catalog(path: Path) -> dict[str, Event]:
    """Read an event catalog file, skipping events that fail validation."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    entries = data.get("events", []) if isinstance(data, dict) else data
    return build_catalog(entries)


def build_catalog(entries: Sequence[Mapping[str, Any]]) -> dict[str, Event]:
    validator = ValidationService()
    catalog: dict[str, Event] = {}
    for entry in entries:
        try:
            event = Event.from_dict(entry)
        except MazeEngineError as e:
            logger.error(f"Failed to parse event {entry.get('id', '?')}: {e} - skipping")
            continue

        result = validator.validate_event(event)
        if not result.is_valid:
            logger.warning(f"Invalid event {event.id or '?'}: {result.error_summary} - skipping")
            continue
        catalog[event.id] = event

    logger.info(f"Loaded {len(catalog)} events")
    return catalog


# =============================================================================
# ENGINE FACADE
# =============================================================================

class MazeEventEngine:
    """
    One game session.

    Owns the session's dice roller, run log, player state and room ledgers,
    and routes room entries, choices and item use through the engine. Two
    engines never share any of these.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        catalog: Optional[Mapping[str, Event]] = None,
        item_catalog: Optional[ItemCatalog] = None,
        status_catalog: Optional[StatusCatalog] = None,
    ):
        self.config = config or EngineConfig()
        logger.info("Initializing maze event engine...")

        self.run_log = RunLog(seed=self.config.seed)
        self.dice = DiceRoller(seed=self.config.seed, run_log=self.run_log)

        if catalog is None and self.config.catalog_path is not None:
            catalog = load_catalog(self.config.catalog_path)
        self.catalog: dict[str, Event] = dict(catalog or {})

        self.status_catalog = status_catalog or StatusCatalog.default()
        self.item_catalog = item_catalog or ItemCatalog.default()
        self.processor = EventProcessor(
            self.catalog,
            self.dice,
            status_catalog=self.status_catalog,
            item_catalog=self.item_catalog,
            run_log=self.run_log,
        )
        self.inventory_manager = InventoryManager(self.item_catalog, self.status_catalog)
        self.distributor = EventDistributor(self.dice)
        self.validator = ValidationService()

        self.game_state = GameState(inventory=Inventory(max_slots=self.config.max_inventory_slots))
        self.rooms: dict[str, RoomEventData] = {}
        self.current_room_id: Optional[str] = None
        self.current_event: Optional[Event] = None

        logger.info(f"Engine ready with {len(self.catalog)} events (seed: {self.config.seed})")

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def events_by_category(self, *categories: str) -> dict[str, Event]:
        return {event_id: e for event_id, e in self.catalog.items() if e.category in categories}

    def distribute_events(
        self,
        room_ids: Sequence[str],
        trap_count: int = 10,
        item_count: int = 15,
        max_per_room: int = 20,
    ) -> None:
        """
        Fill the room ledgers from the catalog.

        Counts are capped at what the catalog and rooms can supply.
        """
        if not room_ids:
            logger.warning("No rooms to distribute events over")
            self.rooms = {}
            return

        traps = self.events_by_category("trap")
        items = self.events_by_category("item")
        others = self.events_by_category("character", "monster")

        rooms: Mapping[str, RoomEventData] = {room_id: RoomEventData.empty(room_id) for room_id in room_ids}
        if traps:
            rooms = self.distributor.assign_trap_events(
                room_ids, traps, max(0, min(trap_count, len(traps), len(room_ids) - 1))
            )
        if items:
            rooms = self.distributor.assign_item_events(rooms, items, min(item_count, len(items)))
        if others:
            rooms = self.distributor.assign_character_monster_events(rooms, others, max_per_room)

        self.rooms = dict(rooms)
        result = self.validator.validate_event_assignment(self.rooms, self.catalog)
        for warning in result.warnings:
            logger.debug(f"Assignment: {warning}")

    # -------------------------------------------------------------------------
    # Play
    # -------------------------------------------------------------------------

    def enter_room(self, room_id: str) -> RoomEntry:
        room = self.rooms.get(room_id) or RoomEventData.empty(room_id)
        entry = self.processor.process_room_entry(room, self.game_state)

        self.rooms[room_id] = entry.room_event_data
        self.current_room_id = room_id
        self.current_event = entry.event
        self.game_state = self.game_state.with_current_event(entry.event)
        return entry

    def choose(self, choice_index: int) -> ChoiceResult:
        """Resolve a choice for the event in the current room."""
        if self.current_event is None or self.current_room_id is None:
            raise InvalidArgumentError("No active event; enter a room first")

        result = self.processor.process_choice_selection(
            self.current_event,
            choice_index,
            self.game_state,
            self.rooms[self.current_room_id],
        )
        self.game_state = result.game_state.with_current_event(None)
        self.rooms[self.current_room_id] = result.room_event_data
        self.current_event = None
        return result

    def use_item(self, item_id: str, quantity: int = 1) -> ItemUseResult:
        result = self.inventory_manager.use_item(item_id, self.game_state, quantity)
        if result.success:
            self.game_state = result.game_state
        return result

    def end_turn(self) -> GameState:
        self.game_state = self.processor.process_turn(self.game_state)
        return self.game_state

    def restore_room(self, room_id: str) -> RoomEventData:
        """Bring back the consumed persistent events of a room."""
        room = self.processor.restore_persistent_events(self.rooms[room_id])
        self.rooms[room_id] = room
        return room

    # -------------------------------------------------------------------------
    # Save / load
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Snapshot the session: player state, room ledgers and position."""
        return {
            "version": SAVE_VERSION,
            "gameState": self.game_state.to_dict(),
            "rooms": {room_id: room.to_dict() for room_id, room in self.rooms.items()},
            "currentRoomId": self.current_room_id,
        }

    def restore(self, data: Mapping[str, Any]) -> None:
        """
        Replace this session's state with a snapshot from to_dict().

        The snapshot is checked before anything is replaced: a bad game state,
        or a room holding an event this engine's catalog does not know, raises
        InvalidArgumentError and leaves the session untouched.
        """
        state_check = self.validator.validate_game_state(
            data.get("gameState") or {}, max_slots=self.config.max_inventory_slots
        )
        if not state_check.is_valid:
            message = f"Saved game state is invalid: {state_check.error_summary}"
            logger.error(message)
            raise InvalidArgumentError(message)

        rooms = {
            room_id: RoomEventData.from_dict(room_data)
            for room_id, room_data in (data.get("rooms") or {}).items()
        }
        errors = []
        for room in rooms.values():
            errors.extend(self.validator.validate_room_event_data(room).errors)
        errors.extend(self.validator.validate_event_assignment(rooms, self.catalog).errors)
        if errors:
            message = f"Saved room assignments are invalid: {'; '.join(errors)}"
            logger.error(message)
            raise InvalidArgumentError(message)

        game_state = GameState.from_dict(data.get("gameState") or {}, max_slots=self.config.max_inventory_slots)
        current_event = None
        if game_state.current_event is not None:
            current_event = Event.from_dict(game_state.current_event)

        self.game_state = game_state
        self.rooms = rooms
        self.current_room_id = data.get("currentRoomId")
        self.current_event = current_event
        logger.info(f"Restored session at turn {game_state.turn_count} with {len(rooms)} rooms")

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        config: Optional[EngineConfig] = None,
        catalog: Optional[Mapping[str, Event]] = None,
        item_catalog: Optional[ItemCatalog] = None,
        status_catalog: Optional[StatusCatalog] = None,
    ) -> "MazeEventEngine":
        """Build an engine over the given catalogs and load a snapshot into it."""
        engine = cls(config, catalog=catalog, item_catalog=item_catalog, status_catalog=status_catalog)
        engine.restore(data)
        return engine

    # -------------------------------------------------------------------------
    # Info
    # -------------------------------------------------------------------------

    def first_available_choice(self) -> Optional[int]:
        if self.current_event is None:
            return None
        for index, choice in enumerate(self.current_event.choices):
            if self.processor.check_requirements(choice, self.game_state).is_available:
                return index
        return None

    def status(self) -> str:
        """Formatted status for display."""
        state = self.game_state
        stats = state.stats
        lines = [
            "=" * 60,
            "MAZE STATUS",
            "=" * 60,
            f"Turn: {state.turn_count}",
            f"Room: {self.current_room_id or '-'}",
            f"HP {stats.hp}  SAN {stats.san}  FIT {stats.fit}  HUNGER {stats.hunger}",
        ]

        if state.inventory.items:
            lines.append("Inventory:")
            for item in state.inventory.items:
                lines.append(f"  {item.name} x{item.quantity}")
        if state.status_effects:
            lines.append("Status:")
            for effect in state.status_effects:
                lines.append(f"  {effect.name} ({effect.type.value}, {effect.remaining_duration} turns)")
        if state.is_game_over:
            lines.append(f"GAME OVER: {state.game_over_reason}")

        lines.append("=" * 60)
        return "\n".join(lines)


# =============================================================================
# DEMO SESSION CREATION
# =============================================================================

def _choice(text: str, description: str, **extra: Any) -> dict[str, Any]:
    effects = {"description": description}
    for key in ("statChanges", "itemsGained", "itemsLost", "applyStatus"):
        if key in extra:
            effects[key] = extra.pop(key)
    return {"text": text, "successEffects": effects, **extra}


DEMO_EVENTS: list[dict[str, Any]] = [
    {
        "id": "spike_pit",
        "name": "Spike Pit",
        "description": "The floor gives way to a pit lined with rusted spikes.",
        "image": "spike_pit.png",
        "category": "trap",
        "weight": 10,
        "persistence": "persistent",
        "choices": [
            _choice(
                "Leap across",
                "You clear the pit with room to spare.",
                successConditions={"stats": {"FITNESS": {"operator": ">=", "value": 50}}},
                failureEffects={"description": "You clip the edge and fall.", "statChanges": {"HP": -20}},
            ),
            _choice("Climb down carefully", "Slow going, but you make it.", statChanges={"FIT": -10, "HUNGER": -5}),
        ],
    },
    {
        "id": "whispering_wall",
        "name": "Whispering Wall",
        "description": "Voices seep from the stones, repeating your name.",
        "image": "whispering_wall.png",
        "category": "trap",
        "weight": 8,
        "persistence": "persistent",
        "choices": [
            _choice("Cover your ears", "The voices fade, but not entirely.", statChanges={"SAN": -10}),
            _choice(
                "Listen closely",
                "The voices reveal a secret.",
                successConditions={"probability": 0.4},
                statChanges={"SAN": 5},
                failureEffects={"description": "The whispers claw at your mind.", "statChanges": {"SAN": -25}, "applyStatus": ["curse"]},
            ),
        ],
    },
    {
        "id": "abandoned_pack",
        "name": "Abandoned Pack",
        "description": "A traveller's pack lies against the wall.",
        "image": "abandoned_pack.png",
        "category": "item",
        "weight": 12,
        "persistence": "oneTime",
        "choices": [
            _choice("Search it", "You find a health potion.", itemsGained=["health_potion"]),
            _choice("Leave it", "You move on."),
        ],
    },
    {
        "id": "rusted_rack",
        "name": "Rusted Weapon Rack",
        "description": "One blade on the rack still holds an edge.",
        "image": "weapon_rack.png",
        "category": "item",
        "weight": 10,
        "persistence": "oneTime",
        "choices": [
            _choice("Take the sword", "The iron sword is heavy but sound.", itemsGained=["sword"]),
        ],
    },
    {
        "id": "lost_scholar",
        "name": "Lost Scholar",
        "description": "A scholar clutches a map, muttering about exits.",
        "image": "scholar.png",
        "category": "character",
        "weight": 10,
        "persistence": "oneTime",
        "choices": [
            _choice("Share your food", "The scholar blesses you.", statChanges={"HUNGER": -10}, applyStatus=["blessing"]),
            _choice(
                "Trade your sword for the map",
                "The scholar's map steadies your nerves.",
                requirements={"items": ["sword"]},
                itemsLost=["sword"],
                statChanges={"SAN": 15},
            ),
        ],
    },
    {
        "id": "cave_rat",
        "name": "Giant Rat",
        "description": "A rat the size of a dog bares its teeth.",
        "image": "rat.png",
        "category": "monster",
        "weight": 15,
        "persistence": "persistent",
        "choices": [
            _choice(
                "Fight",
                "You drive the rat off.",
                successConditions={"probability": 0.6},
                statChanges={"FIT": -5},
                failureEffects={"description": "The rat bites deep.", "statChanges": {"HP": -15}, "applyStatus": ["poison"]},
            ),
            _choice("Run", "You escape, winded.", statChanges={"FIT": -10}),
        ],
    },
]


def create_demo_session(config: Optional[EngineConfig] = None) -> MazeEventEngine:
    """
    Create a demo session on a small square grid.

    The first and last cells are the start and exit and receive no events.

    Returns:
        Initialized MazeEventEngine with events distributed over the grid
    """
    config = config or EngineConfig(seed=42)
    catalog = build_catalog(DEMO_EVENTS) if config.catalog_path is None else None
    engine = MazeEventEngine(config=config, catalog=catalog)

    size = config.grid_size
    cells = [f"room_{x}_{y}" for y in range(size) for x in range(size)]
    engine.distribute_events(cells[1:-1], trap_count=2, item_count=2, max_per_room=3)
    return engine


def run_demo_walk(engine: MazeEventEngine, rounds: int) -> list[ChoiceResult]:
    """Walk through rooms at random, taking the first available choice each time."""
    results = []
    room_ids = sorted(engine.rooms)
    for round_number in range(1, rounds + 1):
        if engine.game_state.is_game_over:
            print(f"\nThe journey ends: {engine.game_state.game_over_reason}")
            break

        room_id = engine.dice.choice(room_ids, reason="demo room pick")
        entry = engine.enter_room(room_id)
        print(f"\n[{round_number}] {room_id}: {entry.event.name}")
        print(f"    {entry.event.description}")

        choice_index = engine.first_available_choice()
        if choice_index is None:
            print("    No choice is available.")
            engine.end_turn()
            continue

        result = engine.choose(choice_index)
        outcome = "success" if result.success else "failure"
        print(f"    > {result.choice_text} ({outcome})")
        print(f"    {result.description}")
        for name, change in result.effects_applied.stat_changes.items():
            print(f"      {name} {change.old_value} -> {change.new_value}")
        for warning in result.effects_applied.warnings:
            print(f"      ! {warning}")

        engine.end_turn()
        results.append(result)

    return results


# =============================================================================
# ENTRY POINT
# =============================================================================

def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Maze Event Engine - seeded demo walk through a maze",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  maze-engine                         # Demo walk with seed 42
  maze-engine --seed 7 --rounds 20    # Longer walk, different seed
  maze-engine --catalog events.json   # Use your own event catalog
  maze-engine --show-log              # Print the run log afterwards
        """
    )
    parser.add_argument("--seed", type=int, default=42, help="RNG seed (default: 42)")
    parser.add_argument("--rounds", type=int, default=8, help="Rooms to visit (default: 8)")
    parser.add_argument("--grid-size", type=int, default=4, help="Maze side length (default: 4)")
    parser.add_argument(
        "--max-slots",
        type=int,
        default=DEFAULT_MAX_SLOTS,
        help=f"Inventory slots (default: {DEFAULT_MAX_SLOTS})",
    )
    parser.add_argument("--catalog", type=Path, help="JSON event catalog to use instead of the demo events")
    parser.add_argument("--show-log", action="store_true", help="Print the run log after the walk")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> EngineConfig:
    """Create an EngineConfig from parsed arguments."""
    return EngineConfig(
        seed=args.seed,
        max_inventory_slots=args.max_slots,
        catalog_path=args.catalog,
        rounds=args.rounds,
        grid_size=args.grid_size,
        verbose=args.verbose,
    )


def main(argv: Optional[Sequence[str]] = None) -> MazeEventEngine:
    """Main entry point for CLI usage."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    print("=" * 60)
    print("MAZE EVENT ENGINE v0.1.0")
    print("=" * 60)

    config = create_config_from_args(args)
    engine = create_demo_session(config)

    run_demo_walk(engine, config.rounds)
    print()
    print(engine.status())

    if args.show_log:
        print(engine.run_log.format_log(max_events=50))

    return engine


if __name__ == "__main__":
    main()
