"""
Terrain synthesis and movement engine for a turn-based hex strategy game.

Core modules:
- hexgrid: Offset hex coordinates, adjacency and distance
- map: Terrain kinds, tiles and the generated map
- profiles: Named map generation profiles
- synthesis: Seeded terrain generation pipeline
- pathfinding: Shortest path, path cost and budgeted reachability
- movement: Move validation and application for a selected unit
"""

__version__ = "0.1.0"

from .hexgrid import (
    Coordinate, MapBounds, adjacent_coordinates, neighbors_in_bounds,
    is_adjacent, distance, coordinates_in_range,
)
from .map import HexMap, Tile, TerrainKind, TerrainInfo, TERRAIN_INFO, ADJACENCY_RULES
from .units import Unit
from .profiles import GenerationProfile, ProfileRegistry, ProfileError, get_profile
from .synthesis import TerrainSynthesizer, SynthesisResult, synthesize, adjacency_violations
from .pathfinding import PathfindingEngine, PathGraph, MinHeap, UNREACHABLE
from .movement import (
    MovementValidator, MoveResult, TileClickResult, MoveFailure, SelectionState
)
from .config import Settings, load_settings, configure_logging

__all__ = [
    # Geometry
    "Coordinate", "MapBounds", "adjacent_coordinates", "neighbors_in_bounds",
    "is_adjacent", "distance", "coordinates_in_range",
    # Map
    "HexMap", "Tile", "TerrainKind", "TerrainInfo", "TERRAIN_INFO", "ADJACENCY_RULES",
    "Unit",
    # Generation
    "GenerationProfile", "ProfileRegistry", "ProfileError", "get_profile",
    "TerrainSynthesizer", "SynthesisResult", "synthesize", "adjacency_violations",
    # Movement
    "PathfindingEngine", "PathGraph", "MinHeap", "UNREACHABLE",
    "MovementValidator", "MoveResult", "TileClickResult", "MoveFailure", "SelectionState",
    # Config
    "Settings", "load_settings", "configure_logging",
]
