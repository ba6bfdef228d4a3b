"""
Weighted pathfinding over a hex tile grid.

Nodes are tile coordinates, edges join hex-adjacent coordinates and the
weight of an edge is the movement cost of the tile being entered. Costs
therefore depend only on the destination tile, which is what lets the
budgeted reachability search settle each coordinate the first time it is
reached.
"""

import heapq
import itertools
import logging
from typing import Any, Generic, Optional, TypeVar

from .hexgrid import Coordinate, adjacent_coordinates, is_adjacent
from .map import Tile

logger = logging.getLogger(__name__)

UNREACHABLE = float("inf")

Grid = dict[Coordinate, Tile]
T = TypeVar("T")


class MinHeap(Generic[T]):
    """Binary min-heap keyed by cost; equal costs pop in insertion order."""

    def __init__(self):
        self._heap: list[tuple[float, int, T]] = []
        self._counter = itertools.count()

    def push(self, cost: float, item: T):
        heapq.heappush(self._heap, (cost, next(self._counter), item))

    def pop(self) -> tuple[float, T]:
        cost, _, item = heapq.heappop(self._heap)
        return cost, item

    def __len__(self):
        return len(self._heap)

    def __bool__(self):
        return bool(self._heap)


class PathGraph:
    """Adjacency lists derived from a grid; rebuilt per generated map."""

    def __init__(self, edges: dict[Coordinate, list[Coordinate]]):
        self.edges = edges

    @classmethod
    def build(cls, grid: Grid) -> "PathGraph":
        edges = {
            coord: [n for n in adjacent_coordinates(coord) if n in grid]
            for coord in grid
        }
        return cls(edges)

    def neighbors(self, coord: Coordinate) -> list[Coordinate]:
        return self.edges.get(coord, [])

    def __contains__(self, coord: Coordinate) -> bool:
        return coord in self.edges

    def __len__(self):
        return len(self.edges)


def is_reachable_cost(cost: float) -> bool:
    return cost != UNREACHABLE


class PathfindingEngine:
    """Shortest path, path cost and budgeted reachability queries."""

    def __init__(self, grid: Optional[Grid] = None):
        self._graph: Optional[PathGraph] = None
        self._graph_source: Any = None
        if grid is not None:
            self.graph_for(grid)

    def invalidate(self):
        """Drop the cached graph; the next query rebuilds it."""
        self._graph = None
        self._graph_source = None

    def graph_for(self, grid: Grid) -> PathGraph:
        """Return the graph for this grid, building it if the grid changed."""
        if self._graph is None or self._graph_source is not grid or len(self._graph) != len(grid):
            self._graph = PathGraph.build(grid)
            self._graph_source = grid
            logger.debug(f"Built path graph over {len(grid)} tiles")
        return self._graph

    def shortest_path(self, start: Coordinate, goal: Coordinate, grid: Grid) -> list[Coordinate]:
        """Dijkstra from start to goal; [] if either end is missing or no path exists."""
        if start not in grid or goal not in grid:
            return []
        if start == goal:
            return [start]

        graph = self.graph_for(grid)
        best = {start: 0}
        came_from: dict[Coordinate, Coordinate] = {}
        frontier: MinHeap[Coordinate] = MinHeap()
        frontier.push(0, start)

        while frontier:
            cost, current = frontier.pop()
            if current == goal:
                path = [current]
                while current in came_from:
                    current = came_from[current]
                    path.append(current)
                return list(reversed(path))
            if cost > best[current]:
                continue  # stale entry

            for neighbor in graph.neighbors(current):
                new_cost = cost + grid[neighbor].movement_cost
                if neighbor not in best or new_cost < best[neighbor]:
                    best[neighbor] = new_cost
                    came_from[neighbor] = current
                    frontier.push(new_cost, neighbor)

        return []  # No path found

    def path_cost(self, start: Coordinate, goal: Coordinate, grid: Grid) -> float:
        """Total cost of tiles entered on the best path, UNREACHABLE if none."""
        if start not in grid or goal not in grid:
            return UNREACHABLE
        if start == goal:
            return 0
        if is_adjacent(start, goal):
            return grid[goal].movement_cost

        path = self.shortest_path(start, goal, grid)
        if len(path) < 2:
            return UNREACHABLE
        return sum(grid[c].movement_cost for c in path[1:])

    def path_costs_from(self, start: Coordinate, budget: int, grid: Grid) -> dict[Coordinate, int]:
        """Accumulated cost of every coordinate reachable within budget, origin excluded."""
        costs = self._expand(start, budget, grid)
        costs.pop(start, None)
        return costs

    def reachable_positions(self, start: Coordinate, budget: int, grid: Grid) -> set[Coordinate]:
        """Coordinates enterable without exceeding budget; empty when budget <= 0."""
        return set(self._expand(start, budget, grid))

    def _expand(self, start: Coordinate, budget: int, grid: Grid) -> dict[Coordinate, int]:
        if budget <= 0 or start not in grid:
            return {}

        graph = self.graph_for(grid)
        settled = {start: 0}
        frontier: MinHeap[Coordinate] = MinHeap()
        frontier.push(0, start)

        while frontier:
            cost, current = frontier.pop()
            for neighbor in graph.neighbors(current):
                if neighbor in settled:
                    continue
                tile = grid[neighbor]
                if tile.is_occupied():
                    continue
                new_cost = cost + tile.movement_cost
                if new_cost <= budget:
                    settled[neighbor] = new_cost
                    frontier.push(new_cost, neighbor)

        return settled

    # Single-hex validation
    def can_enter_adjacent(self, budget: int, start: Coordinate, goal: Coordinate, grid: Grid) -> bool:
        """Legal single-hex step: on the grid, adjacent, empty and affordable."""
        tile = grid.get(goal)
        if tile is None or start not in grid:
            return False
        if not is_adjacent(start, goal):
            return False
        if tile.is_occupied():
            return False
        return budget >= tile.movement_cost

    def adjacent_destinations(self, start: Coordinate, budget: int, grid: Grid) -> list[Coordinate]:
        """All legal single-hex steps from start, in neighbour order."""
        if start not in grid:
            return []
        return [
            c for c in self.graph_for(grid).neighbors(start)
            if self.can_enter_adjacent(budget, start, c, grid)
        ]
