"""
Hex coordinate geometry for the strategy map.

Offset coordinates (column, row) on a flat-top grid where odd columns sit
half a hex lower than even columns. Distances go through cube coordinates
(q, r, s) with q + r + s = 0.
"""

from dataclasses import dataclass
from typing import Iterator

Coordinate = tuple[int, int]

# (d_col, d_row) per column parity, ordered NW, W/SW, S, SE, NE, N.
EVEN_COLUMN_OFFSETS = [(-1, -1), (-1, 0), (0, 1), (1, 0), (1, -1), (0, -1)]
ODD_COLUMN_OFFSETS = [(-1, 0), (-1, 1), (0, 1), (1, 1), (1, 0), (0, -1)]


@dataclass(frozen=True)
class MapBounds:
    """Rectangular extent of a map, in tiles."""
    width: int
    height: int

    def contains(self, coord: Coordinate) -> bool:
        col, row = coord
        return 0 <= col < self.width and 0 <= row < self.height

    def coordinates(self) -> Iterator[Coordinate]:
        """Iterate column-major: all rows of column 0, then column 1, ..."""
        for col in range(self.width):
            for row in range(self.height):
                yield (col, row)

    def is_interior(self, coord: Coordinate) -> bool:
        """True when the coordinate is not on the outer ring."""
        col, row = coord
        return 0 < col < self.width - 1 and 0 < row < self.height - 1

    @property
    def tile_count(self) -> int:
        return self.width * self.height


def adjacent_coordinates(coord: Coordinate) -> list[Coordinate]:
    """Return the six neighbours of a coordinate, ignoring map bounds."""
    col, row = coord
    offsets = ODD_COLUMN_OFFSETS if col & 1 else EVEN_COLUMN_OFFSETS
    return [(col + dc, row + dr) for dc, dr in offsets]


def neighbors_in_bounds(coord: Coordinate, bounds: MapBounds) -> list[Coordinate]:
    """Return the neighbours of a coordinate that lie inside the map."""
    return [c for c in adjacent_coordinates(coord) if bounds.contains(c)]


def is_adjacent(a: Coordinate, b: Coordinate) -> bool:
    """Check whether two coordinates share a hex edge."""
    return b in adjacent_coordinates(a)


def offset_to_cube(coord: Coordinate) -> tuple[int, int, int]:
    """Convert offset coordinates to cube coordinates (q, r, s)."""
    col, row = coord
    q = col
    r = row - (col - (col & 1)) // 2
    return (q, r, -q - r)


def cube_to_offset(q: int, r: int) -> Coordinate:
    """Convert cube coordinates back to offset coordinates."""
    return (q, r + (q - (q & 1)) // 2)


def distance(a: Coordinate, b: Coordinate) -> int:
    """Calculate distance in hexes between two coordinates."""
    q1, r1, s1 = offset_to_cube(a)
    q2, r2, s2 = offset_to_cube(b)
    return (abs(q1 - q2) + abs(r1 - r2) + abs(s1 - s2)) // 2


def coordinates_in_range(center: Coordinate, radius: int, bounds: MapBounds) -> list[Coordinate]:
    """Get all in-bounds coordinates within radius hexes of center."""
    if radius < 0:
        return []
    return [c for c in bounds.coordinates() if distance(center, c) <= radius]
