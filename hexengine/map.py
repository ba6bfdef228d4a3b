"""
Hex tile map for the strategy game.

Terrain kinds carry fixed movement/defense values and the elevation band
they are generated from. A map is a plain dict of Coordinate -> Tile plus
a few helpers; it is produced once by the synthesizer and afterwards only
tile occupancy and settlements change.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .hexgrid import Coordinate, MapBounds, neighbors_in_bounds
from .units import Unit

logger = logging.getLogger(__name__)


class TerrainKind(Enum):
    WATER = "water"
    LAGOON = "lagoon"
    SHORELINE = "shoreline"
    RIVER = "river"
    DESERT = "desert"
    GRASSLAND = "grassland"
    HILL = "hill"
    MOUNTAIN = "mountain"

    @classmethod
    def from_name(cls, name: str) -> Optional["TerrainKind"]:
        """Look up a kind by value or member name, case-insensitive."""
        key = str(name).strip().lower()
        for kind in cls:
            if kind.value == key or kind.name.lower() == key:
                return kind
        return None


@dataclass(frozen=True)
class TerrainInfo:
    """Fixed properties of a terrain kind."""
    kind: TerrainKind
    movement_cost: int  # cost to enter, >= 1
    defense_bonus: int
    elevation_range: tuple[int, int]  # closed interval
    symbol: str  # ascii rendering

    def covers(self, elevation: int) -> bool:
        low, high = self.elevation_range
        return low <= elevation <= high


TERRAIN_INFO: dict[TerrainKind, TerrainInfo] = {
    TerrainKind.WATER: TerrainInfo(TerrainKind.WATER, 5, 0, (0, 15), "~"),
    TerrainKind.LAGOON: TerrainInfo(TerrainKind.LAGOON, 4, 0, (16, 20), "="),
    TerrainKind.SHORELINE: TerrainInfo(TerrainKind.SHORELINE, 1, 0, (21, 35), "."),
    TerrainKind.RIVER: TerrainInfo(TerrainKind.RIVER, 3, 1, (21, 40), "-"),
    TerrainKind.DESERT: TerrainInfo(TerrainKind.DESERT, 2, 0, (41, 70), ":"),
    TerrainKind.GRASSLAND: TerrainInfo(TerrainKind.GRASSLAND, 1, 0, (36, 70), '"'),
    TerrainKind.HILL: TerrainInfo(TerrainKind.HILL, 2, 2, (71, 90), "n"),
    TerrainKind.MOUNTAIN: TerrainInfo(TerrainKind.MOUNTAIN, 4, 3, (91, 100), "^"),
}

# Kinds allowed to border each kind. Order matters: relaxation takes the
# first entry that also fits the cell's elevation band. Each kind lists
# itself (last) so uniform regions are consistent, and the table is kept
# symmetric, which is why Lagoon and River list each other.
ADJACENCY_RULES: dict[TerrainKind, tuple[TerrainKind, ...]] = {
    TerrainKind.WATER: (TerrainKind.LAGOON, TerrainKind.SHORELINE, TerrainKind.WATER),
    TerrainKind.LAGOON: (TerrainKind.WATER, TerrainKind.SHORELINE, TerrainKind.RIVER,
                         TerrainKind.LAGOON),
    TerrainKind.SHORELINE: (TerrainKind.WATER, TerrainKind.LAGOON, TerrainKind.DESERT,
                            TerrainKind.GRASSLAND, TerrainKind.RIVER, TerrainKind.SHORELINE),
    TerrainKind.RIVER: (TerrainKind.SHORELINE, TerrainKind.DESERT, TerrainKind.GRASSLAND,
                        TerrainKind.LAGOON, TerrainKind.RIVER),
    TerrainKind.DESERT: (TerrainKind.SHORELINE, TerrainKind.RIVER, TerrainKind.GRASSLAND,
                         TerrainKind.HILL, TerrainKind.DESERT),
    TerrainKind.GRASSLAND: (TerrainKind.SHORELINE, TerrainKind.RIVER, TerrainKind.DESERT,
                            TerrainKind.HILL, TerrainKind.GRASSLAND),
    TerrainKind.HILL: (TerrainKind.DESERT, TerrainKind.GRASSLAND, TerrainKind.MOUNTAIN,
                       TerrainKind.HILL),
    TerrainKind.MOUNTAIN: (TerrainKind.HILL, TerrainKind.MOUNTAIN),
}


def terrains_for_elevation(elevation: float) -> list[TerrainKind]:
    """Kinds whose elevation band contains the rounded elevation, Desert if none."""
    level = round(elevation)
    kinds = [kind for kind, info in TERRAIN_INFO.items() if info.covers(level)]
    return kinds or [TerrainKind.DESERT]


def is_valid_adjacency(kind: TerrainKind, neighbor_kinds: list[TerrainKind]) -> bool:
    """A tile is consistent when any neighbour is in its allowed set."""
    if not neighbor_kinds:
        return True
    allowed = ADJACENCY_RULES[kind]
    return any(n in allowed for n in neighbor_kinds)


@dataclass(eq=False)
class Tile:
    """Single hex tile."""
    coordinate: Coordinate
    terrain: TerrainKind
    occupant: Optional[Unit] = None
    settlement: Optional[str] = None

    @property
    def info(self) -> TerrainInfo:
        return TERRAIN_INFO[self.terrain]

    @property
    def movement_cost(self) -> int:
        return TERRAIN_INFO[self.terrain].movement_cost

    @property
    def defense_bonus(self) -> int:
        return TERRAIN_INFO[self.terrain].defense_bonus

    def is_occupied(self) -> bool:
        return self.occupant is not None

    def has_settlement(self) -> bool:
        return self.settlement is not None

    def describe(self) -> str:
        col, row = self.coordinate
        text = f"{self.terrain.value.title()} at ({col}, {row})"
        if self.settlement:
            text += f" - Settlement: {self.settlement}"
        if self.occupant is not None:
            text += f" - Unit: {self.occupant.name}"
        return text


@dataclass
class HexMap:
    """
    Generated terrain map.

    `cells` is the Coordinate -> Tile dict every query works on; the
    remaining fields record how the map was produced.
    """
    width: int
    height: int
    seed: int = 0
    profile_name: str = ""
    cells: dict[Coordinate, Tile] = field(default_factory=dict)

    @property
    def bounds(self) -> MapBounds:
        return MapBounds(self.width, self.height)

    def in_bounds(self, coord: Coordinate) -> bool:
        return self.bounds.contains(coord)

    def get_tile(self, coord: Coordinate) -> Optional[Tile]:
        return self.cells.get(coord)

    def neighbors(self, coord: Coordinate) -> list[Tile]:
        """Get all adjacent tiles present on the map."""
        return [self.cells[c] for c in neighbors_in_bounds(coord, self.bounds) if c in self.cells]

    # Occupancy
    def place_unit(self, unit: Unit, coord: Coordinate) -> bool:
        """Put a unit on an empty tile. Returns False if missing or occupied."""
        tile = self.cells.get(coord)
        if tile is None or tile.is_occupied():
            return False
        tile.occupant = unit
        return True

    def remove_unit(self, coord: Coordinate) -> Optional[Unit]:
        tile = self.cells.get(coord)
        if tile is None:
            return None
        unit, tile.occupant = tile.occupant, None
        return unit

    def find_unit_position(self, unit: Unit) -> Optional[Coordinate]:
        return find_unit_position(self.cells, unit)

    def units(self) -> list[Unit]:
        return [t.occupant for t in self.cells.values() if t.occupant is not None]

    # Reporting
    def terrain_distribution(self) -> dict[TerrainKind, int]:
        """Count tiles per terrain kind, most common first."""
        counts = Counter(tile.terrain for tile in self.cells.values())
        return dict(counts.most_common())

    def count(self, *kinds: TerrainKind) -> int:
        return sum(1 for tile in self.cells.values() if tile.terrain in kinds)

    def log_distribution(self):
        """Log terrain share per kind."""
        total = len(self.cells) or 1
        logger.info(f"Terrain distribution ({self.profile_name or 'custom'}, seed {self.seed}):")
        for kind, count in self.terrain_distribution().items():
            logger.info(f"  {kind.value}: {count} tiles ({count * 100.0 / total:.1f}%)")

    def render_ascii(self) -> str:
        """Render rows of terrain symbols; occupied tiles show '@'."""
        lines = []
        for row in range(self.height):
            symbols = []
            for col in range(self.width):
                tile = self.cells.get((col, row))
                if tile is None:
                    symbols.append(" ")
                elif tile.is_occupied():
                    symbols.append("@")
                else:
                    symbols.append(tile.info.symbol)
            lines.append(" ".join(symbols))
        return "\n".join(lines)


def find_unit_position(grid: dict[Coordinate, Tile], unit: Unit) -> Optional[Coordinate]:
    """Scan the grid for the tile holding this exact unit."""
    for coord, tile in grid.items():
        if tile.occupant is unit:
            return coord
    return None
