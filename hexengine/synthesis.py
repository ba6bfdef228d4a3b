"""
Terrain synthesis: seed + profile -> consistent hex terrain map.

Pipeline:
    1. elevation  - OpenSimplex noise, rescaled and hex-smoothed
    2. classify   - weighted random pick among kinds covering the elevation
    3. water flow - flood fill from cells at or below sea level
    4. rivers     - valleys between sea level and 60 may become rivers
    5. relaxation - bounded passes fixing adjacency-rule violations

Every random draw comes from a random.Random created from the map seed plus
a fixed per-step offset, so (seed, width, height, profile) fully determines
the output.
"""

import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Optional

import numpy as np
from opensimplex import OpenSimplex

from .hexgrid import Coordinate, MapBounds, neighbors_in_bounds
from .map import (
    ADJACENCY_RULES, HexMap, Tile, TerrainKind,
    is_valid_adjacency, terrains_for_elevation,
)
from .profiles import GenerationProfile, ProfileRegistry, get_registry

logger = logging.getLogger(__name__)

ELEVATION_SEED_OFFSET = 0
TERRAIN_SEED_OFFSET = 1000
RIVER_SEED_OFFSET = 2000

BASE_SEA_LEVEL = 20
DEEP_WATER_DEPTH = 5  # below sea level by at least this much -> water, else lagoon
RIVER_MAX_ELEVATION = 60
VALLEY_RISE = 5
VALLEY_MIN_HIGHER_NEIGHBORS = 3
BIAS_REPLICATION = 10  # bias 1.0 -> 10 entries in the weighted pool

SMOOTH_PASSES = 2
MAX_RELAXATION_PASSES = 5
MAX_TILES = 1000


@dataclass
class SynthesisResult:
    """Generated map plus by-products useful for inspection."""
    hex_map: HexMap
    elevation: np.ndarray  # shape (width, height), indexed [col, row]
    seed: int
    profile: GenerationProfile
    relaxation_passes: int = 0
    remaining_violations: int = 0


class TerrainSynthesizer:
    """Builds terrain maps from a seed and a generation profile."""

    def __init__(
        self,
        registry: Optional[ProfileRegistry] = None,
        smooth_passes: int = SMOOTH_PASSES,
        max_relaxation_passes: int = MAX_RELAXATION_PASSES,
    ):
        self.registry = registry
        self.smooth_passes = smooth_passes
        self.max_relaxation_passes = max_relaxation_passes

    def _resolve_profile(self, profile: GenerationProfile | str | None) -> GenerationProfile:
        if isinstance(profile, GenerationProfile):
            return profile
        registry = self.registry or get_registry()
        return registry.get(profile)

    def synthesize(
        self,
        seed: Optional[int],
        width: int,
        height: int,
        profile: GenerationProfile | str | None = None,
    ) -> SynthesisResult:
        """Run the full pipeline and return the map with its elevation grid."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Map dimensions must be positive, got {width}x{height}")
        if width * height > MAX_TILES:
            raise ValueError(f"Map of {width}x{height} exceeds {MAX_TILES} tiles")

        profile = self._resolve_profile(profile)
        if seed is None:
            seed = random.SystemRandom().randrange(0, 2**31 - 1)
        bounds = MapBounds(width, height)

        logger.info(f"Generating {profile.name} map {width}x{height} with seed {seed}")

        elevation = self.generate_elevation(seed, bounds, profile)
        terrain = self.classify(elevation, bounds, profile, random.Random(seed + TERRAIN_SEED_OFFSET))
        self.flow_water(terrain, elevation, bounds, profile)
        self.create_rivers(terrain, elevation, bounds, profile, random.Random(seed + RIVER_SEED_OFFSET))
        passes = self.relax_adjacency(terrain, elevation, bounds)

        hex_map = HexMap(width=width, height=height, seed=seed, profile_name=profile.name)
        for coord in bounds.coordinates():
            hex_map.cells[coord] = Tile(coordinate=coord, terrain=terrain[coord])

        remaining = len(adjacency_violations(hex_map))
        if remaining:
            logger.warning(f"{remaining} tiles still violate adjacency rules after {passes} passes")

        logger.info(f"{profile.name} map generation complete: {len(hex_map.cells)} tiles")
        hex_map.log_distribution()

        return SynthesisResult(
            hex_map=hex_map,
            elevation=elevation,
            seed=seed,
            profile=profile,
            relaxation_passes=passes,
            remaining_violations=remaining,
        )

    # Elevation
    def generate_elevation(self, seed: int, bounds: MapBounds, profile: GenerationProfile) -> np.ndarray:
        """Sample noise at each cell, rescale to [0, 100 * multiplier] and smooth."""
        noise = OpenSimplex(seed=seed + ELEVATION_SEED_OFFSET)
        frequency = profile.noise_frequency
        elevation = np.zeros((bounds.width, bounds.height), dtype=float)

        for col, row in bounds.coordinates():
            value = noise.noise2(col * frequency, row * frequency)
            elevation[col, row] = (value + 1.0) * 50.0 * profile.elevation_multiplier

        for _ in range(self.smooth_passes):
            elevation = smooth_elevation(elevation, bounds)
        return elevation

    # Classification
    def classify(
        self,
        elevation: np.ndarray,
        bounds: MapBounds,
        profile: GenerationProfile,
        rng: random.Random,
    ) -> dict[Coordinate, TerrainKind]:
        return {
            coord: self.pick_terrain(float(elevation[coord]), profile, rng)
            for coord in bounds.coordinates()
        }

    def pick_terrain(self, elevation: float, profile: GenerationProfile, rng: random.Random) -> TerrainKind:
        """Weighted random pick among kinds whose band covers the elevation."""
        candidates = terrains_for_elevation(elevation)
        pool = []
        for kind in candidates:
            weight = max(1, round(profile.bias_for(kind) * BIAS_REPLICATION))
            pool.extend([kind] * weight)
        return pool[rng.randrange(len(pool))]

    # Hydrology
    def sea_level(self, profile: GenerationProfile) -> int:
        return BASE_SEA_LEVEL + profile.sea_level_adjustment

    def flow_water(
        self,
        terrain: dict[Coordinate, TerrainKind],
        elevation: np.ndarray,
        bounds: MapBounds,
        profile: GenerationProfile,
    ):
        """Flood from every cell at or below sea level, turning low cells wet."""
        sea_level = self.sea_level(profile)
        flow_threshold = 2.0 * profile.water_flow_intensity

        queue = deque(c for c in bounds.coordinates() if elevation[c] <= sea_level)
        visited = set(queue)

        while queue:
            current = queue.popleft()
            height = float(elevation[current])

            if height <= sea_level - DEEP_WATER_DEPTH:
                terrain[current] = TerrainKind.WATER
            elif height <= sea_level:
                terrain[current] = TerrainKind.LAGOON

            for neighbor in neighbors_in_bounds(current, bounds):
                if neighbor not in visited and elevation[neighbor] <= height + flow_threshold:
                    visited.add(neighbor)
                    queue.append(neighbor)

    def create_rivers(
        self,
        terrain: dict[Coordinate, TerrainKind],
        elevation: np.ndarray,
        bounds: MapBounds,
        profile: GenerationProfile,
        rng: random.Random,
    ):
        sea_level = self.sea_level(profile)
        for coord in bounds.coordinates():
            if not bounds.is_interior(coord):
                continue
            height = float(elevation[coord])
            if (sea_level < height < RIVER_MAX_ELEVATION
                    and is_valley(elevation, coord, bounds)
                    and rng.random() < profile.river_generation_rate):
                terrain[coord] = TerrainKind.RIVER

    # Adjacency
    def relax_adjacency(
        self,
        terrain: dict[Coordinate, TerrainKind],
        elevation: np.ndarray,
        bounds: MapBounds,
    ) -> int:
        """Replace inconsistent cells until a pass changes nothing or the cap is hit."""
        passes = 0
        changed = True
        while changed and passes < self.max_relaxation_passes:
            changed = False
            passes += 1
            for coord in bounds.coordinates():
                current = terrain[coord]
                neighbor_kinds = [terrain[n] for n in neighbors_in_bounds(coord, bounds)]
                if is_valid_adjacency(current, neighbor_kinds):
                    continue
                replacement = best_adjacent_terrain(neighbor_kinds, float(elevation[coord]))
                if replacement is not None and replacement != current:
                    terrain[coord] = replacement
                    changed = True
        return passes


def smooth_elevation(elevation: np.ndarray, bounds: MapBounds) -> np.ndarray:
    """One pass: each cell becomes the mean of itself and its hex neighbours."""
    smoothed = np.empty_like(elevation)
    for coord in bounds.coordinates():
        neighbors = neighbors_in_bounds(coord, bounds)
        total = elevation[coord] + sum(elevation[n] for n in neighbors)
        smoothed[coord] = total / (len(neighbors) + 1)
    return smoothed


def is_valley(elevation: np.ndarray, coord: Coordinate, bounds: MapBounds) -> bool:
    """At least three neighbours rise VALLEY_RISE or more above the cell."""
    floor = elevation[coord] + VALLEY_RISE
    higher = sum(1 for n in neighbors_in_bounds(coord, bounds) if elevation[n] >= floor)
    return higher >= VALLEY_MIN_HIGHER_NEIGHBORS


def best_adjacent_terrain(neighbor_kinds: list[TerrainKind], elevation: float) -> Optional[TerrainKind]:
    """First kind a neighbour accepts that also fits this elevation band."""
    possible = terrains_for_elevation(elevation)
    for neighbor in neighbor_kinds:
        for kind in ADJACENCY_RULES[neighbor]:
            if kind in possible:
                return kind
    return None


def adjacency_violations(hex_map: HexMap) -> list[Coordinate]:
    """Coordinates whose terrain has no allowed neighbour."""
    violations = []
    for coord, tile in hex_map.cells.items():
        neighbor_kinds = [t.terrain for t in hex_map.neighbors(coord)]
        if not is_valid_adjacency(tile.terrain, neighbor_kinds):
            violations.append(coord)
    return violations


def synthesize(
    seed: Optional[int],
    width: int,
    height: int,
    profile: GenerationProfile | str | None = None,
) -> HexMap:
    """Generate a map with default synthesizer settings."""
    return TerrainSynthesizer().synthesize(seed, width, height, profile).hex_map
