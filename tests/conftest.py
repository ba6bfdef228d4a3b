"""Shared fixtures for hexengine tests."""

import pytest

from hexengine import (
    HexMap, MovementValidator, PathfindingEngine, TerrainKind, TerrainSynthesizer, Tile, Unit,
)


def build_grid(width, height, default=TerrainKind.GRASSLAND, overrides=None):
    """Build a Coordinate -> Tile dict with uniform terrain plus overrides."""
    overrides = overrides or {}
    return {
        (col, row): Tile(coordinate=(col, row), terrain=overrides.get((col, row), default))
        for col in range(width)
        for row in range(height)
    }


def build_sparse_grid(layout):
    """Build a grid holding only the given coordinates."""
    return {coord: Tile(coordinate=coord, terrain=kind) for coord, kind in layout.items()}


@pytest.fixture
def make_grid():
    """Factory for uniform grids with per-coordinate overrides."""
    return build_grid


@pytest.fixture
def make_sparse_grid():
    return build_sparse_grid


@pytest.fixture
def grassland_grid():
    """8x6 grid of cost-1 grassland."""
    return build_grid(8, 6)


@pytest.fixture
def engine():
    return PathfindingEngine()


@pytest.fixture
def validator(engine):
    return MovementValidator(engine)


@pytest.fixture
def scout():
    return Unit(name="Scout", max_movement=4)


@pytest.fixture
def synthesizer():
    return TerrainSynthesizer()


@pytest.fixture(scope="module")
def continental_map() -> HexMap:
    """Continental 20x10 map, seed 42."""
    return TerrainSynthesizer().synthesize(42, 20, 10, "Continental").hex_map
