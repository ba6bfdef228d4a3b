"""
Move validation and application for the selected unit.

The validator keeps a small selection state (selected unit plus cached
destinations) and applies accepted moves to the grid and the unit's
movement budget in one step. Every rejection is returned as a result
value and leaves both the grid and the unit untouched.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .hexgrid import Coordinate
from .map import find_unit_position
from .pathfinding import Grid, PathfindingEngine, is_reachable_cost
from .units import Unit

logger = logging.getLogger(__name__)


class SelectionState(Enum):
    IDLE = "idle"
    AWAITING_DESTINATION = "awaiting_destination"
    DESTINATIONS_KNOWN = "destinations_known"


class MoveFailure(Enum):
    NO_UNIT_SELECTED = "no_unit_selected"
    INVALID_POSITION = "invalid_position"
    NOT_A_VALID_DESTINATION = "not_a_valid_destination"
    TILE_OCCUPIED = "tile_occupied"
    INSUFFICIENT_MOVEMENT = "insufficient_movement"
    UNREACHABLE = "unreachable"


FAILURE_MESSAGES = {
    MoveFailure.NO_UNIT_SELECTED: "No unit selected",
    MoveFailure.INVALID_POSITION: "Invalid position",
    MoveFailure.NOT_A_VALID_DESTINATION: "Destination is not a valid move for this unit",
    MoveFailure.TILE_OCCUPIED: "Tile is occupied",
    MoveFailure.INSUFFICIENT_MOVEMENT: "Not enough movement points",
    MoveFailure.UNREACHABLE: "No path to destination",
}


@dataclass
class MoveResult:
    """Outcome of a move attempt."""
    success: bool
    new_position: Optional[Coordinate] = None
    cost: int = 0
    reason: Optional[MoveFailure] = None

    @property
    def message(self) -> str:
        if self.success:
            return f"Moved to {self.new_position}"
        return FAILURE_MESSAGES[self.reason]

    @classmethod
    def succeeded(cls, position: Coordinate, cost: int) -> "MoveResult":
        return cls(success=True, new_position=position, cost=cost)

    @classmethod
    def failed(cls, reason: MoveFailure) -> "MoveResult":
        return cls(success=False, reason=reason)


@dataclass
class TileClickResult:
    """Outcome of clicking a tile while a unit is selected."""
    is_movement_attempt: bool
    destination: Optional[Coordinate] = None
    reason: Optional[MoveFailure] = None

    @property
    def message(self) -> str:
        if self.is_movement_attempt:
            return f"Move to {self.destination}"
        return FAILURE_MESSAGES[self.reason]

    @classmethod
    def movement_attempt(cls, destination: Coordinate) -> "TileClickResult":
        return cls(is_movement_attempt=True, destination=destination)

    @classmethod
    def error(cls, reason: MoveFailure) -> "TileClickResult":
        return cls(is_movement_attempt=False, reason=reason)


class MovementValidator:
    """
    Validates and applies moves for one selected unit at a time.

    By default destinations are single-hex steps. With multi_hop=True every
    coordinate in the unit's budgeted reachable set is a destination and the
    optimal path cost is charged.
    """

    def __init__(self, engine: Optional[PathfindingEngine] = None, multi_hop: bool = False):
        self.engine = engine or PathfindingEngine()
        self.multi_hop = multi_hop
        self.selected_unit: Optional[Unit] = None
        self.valid_destinations: list[Coordinate] = []
        self._destinations_known = False
        self._destinations_origin: Optional[Coordinate] = None

    @property
    def state(self) -> SelectionState:
        if self.selected_unit is None:
            return SelectionState.IDLE
        if self._destinations_known:
            return SelectionState.DESTINATIONS_KNOWN
        return SelectionState.AWAITING_DESTINATION

    def select_unit(self, unit: Unit):
        """Select a unit; permission to select is the caller's concern."""
        self.selected_unit = unit
        self._clear_destinations()

    def deselect(self):
        self.selected_unit = None
        self._clear_destinations()

    def _clear_destinations(self):
        self.valid_destinations = []
        self._destinations_known = False
        self._destinations_origin = None

    def compute_destinations(self, current_position: Coordinate, grid: Grid) -> list[Coordinate]:
        """Legal destinations for the selected unit from current_position."""
        if self.selected_unit is None:
            return []

        budget = self.selected_unit.current_movement
        if self.multi_hop:
            reachable = self.engine.path_costs_from(current_position, budget, grid)
            destinations = sorted(reachable)
        else:
            destinations = self.engine.adjacent_destinations(current_position, budget, grid)

        self.valid_destinations = destinations
        self._destinations_known = True
        self._destinations_origin = current_position
        return destinations

    def _move_cost(self, start: Coordinate, goal: Coordinate, grid: Grid) -> int:
        cost = self.engine.path_cost(start, goal, grid)
        if not is_reachable_cost(cost):
            cost = grid[goal].movement_cost
        return int(cost)

    def attempt_move(self, start: Coordinate, goal: Coordinate, grid: Grid) -> MoveResult:
        """Validate a move and, if legal, apply it to the grid and the unit."""
        unit = self.selected_unit
        if unit is None:
            return MoveResult.failed(MoveFailure.NO_UNIT_SELECTED)

        if start not in grid or goal not in grid:
            return MoveResult.failed(MoveFailure.INVALID_POSITION)

        if grid[start].occupant is not unit:
            logger.debug(f"{unit.name}: not standing on {start}")
            return MoveResult.failed(MoveFailure.INVALID_POSITION)

        if not self._destinations_known or self._destinations_origin != start:
            self.compute_destinations(start, grid)

        goal_tile = grid[goal]
        if goal_tile.is_occupied() and goal_tile.occupant is not unit:
            logger.debug(f"{unit.name}: {goal} is occupied by {goal_tile.occupant.name}")
            return MoveResult.failed(MoveFailure.TILE_OCCUPIED)

        if goal not in self.valid_destinations:
            logger.debug(f"{unit.name}: {goal} not among {len(self.valid_destinations)} destinations")
            return MoveResult.failed(MoveFailure.NOT_A_VALID_DESTINATION)

        cost = self._move_cost(start, goal, grid)
        if cost > unit.current_movement:
            return MoveResult.failed(MoveFailure.INSUFFICIENT_MOVEMENT)

        # Commit: occupancy and budget change together.
        grid[start].occupant = None
        goal_tile.occupant = unit
        unit.spend_movement(cost)

        logger.debug(f"{unit.name} moved {start} -> {goal} for {cost} MP, "
                     f"{unit.current_movement} left")

        if unit.current_movement <= 0:
            self.deselect()
        else:
            self._clear_destinations()

        return MoveResult.succeeded(goal, cost)

    def handle_destination_query(self, clicked: Coordinate, grid: Grid) -> TileClickResult:
        """Decide whether a clicked tile should become a move attempt."""
        unit = self.selected_unit
        if unit is None:
            return TileClickResult.error(MoveFailure.NO_UNIT_SELECTED)

        tile = grid.get(clicked)
        if tile is None:
            return TileClickResult.error(MoveFailure.INVALID_POSITION)

        if tile.is_occupied():
            return TileClickResult.error(MoveFailure.TILE_OCCUPIED)

        position = find_unit_position(grid, unit)
        if position is None:
            return TileClickResult.error(MoveFailure.INVALID_POSITION)

        if not self._destinations_known or self._destinations_origin != position:
            self.compute_destinations(position, grid)

        if clicked not in self.valid_destinations:
            return TileClickResult.error(MoveFailure.NOT_A_VALID_DESTINATION)

        return TileClickResult.movement_attempt(clicked)
