"""Tests for terrain kinds, tiles and the map container."""

from hexengine import ADJACENCY_RULES, TERRAIN_INFO, HexMap, TerrainKind, Tile, Unit
from hexengine.map import is_valid_adjacency, terrains_for_elevation


def test_every_kind_has_info_and_rules():
    for kind in TerrainKind:
        info = TERRAIN_INFO[kind]
        assert info.movement_cost >= 1
        assert info.defense_bonus >= 0
        assert kind in ADJACENCY_RULES


def test_adjacency_rules_are_symmetric():
    for kind, allowed in ADJACENCY_RULES.items():
        for other in allowed:
            assert kind in ADJACENCY_RULES[other], (kind, other)


def test_known_costs():
    assert TERRAIN_INFO[TerrainKind.HILL].movement_cost == 2
    assert TERRAIN_INFO[TerrainKind.LAGOON].movement_cost == 4
    assert TERRAIN_INFO[TerrainKind.RIVER].movement_cost == 3
    assert TERRAIN_INFO[TerrainKind.SHORELINE].movement_cost == 1


def test_terrains_for_elevation_overlapping_band():
    assert terrains_for_elevation(50) == [TerrainKind.DESERT, TerrainKind.GRASSLAND]
    assert terrains_for_elevation(38.4) == [TerrainKind.RIVER, TerrainKind.GRASSLAND]


def test_terrains_for_elevation_falls_back_to_desert():
    assert terrains_for_elevation(140) == [TerrainKind.DESERT]
    assert terrains_for_elevation(-3) == [TerrainKind.DESERT]


def test_terrain_from_name():
    assert TerrainKind.from_name("Lagoon") is TerrainKind.LAGOON
    assert TerrainKind.from_name("MOUNTAIN") is TerrainKind.MOUNTAIN
    assert TerrainKind.from_name("swamp") is None


def test_tile_with_no_neighbors_is_consistent():
    assert is_valid_adjacency(TerrainKind.MOUNTAIN, [])
    assert not is_valid_adjacency(TerrainKind.MOUNTAIN, [TerrainKind.WATER])


def test_tile_description():
    unit = Unit(name="Archer", max_movement=4)
    tile = Tile(coordinate=(2, 3), terrain=TerrainKind.HILL, occupant=unit, settlement="Thebes")
    assert tile.defense_bonus == 2
    assert tile.describe() == "Hill at (2, 3) - Settlement: Thebes - Unit: Archer"


def test_place_and_find_unit():
    hex_map = HexMap(width=2, height=2)
    for coord in hex_map.bounds.coordinates():
        hex_map.cells[coord] = Tile(coordinate=coord, terrain=TerrainKind.DESERT)

    unit = Unit(name="Medjay", max_movement=6)
    assert hex_map.place_unit(unit, (1, 1))
    assert not hex_map.place_unit(Unit(name="Other", max_movement=4), (1, 1))
    assert not hex_map.place_unit(unit, (5, 5))
    assert hex_map.find_unit_position(unit) == (1, 1)
    assert hex_map.units() == [unit]

    assert hex_map.remove_unit((1, 1)) is unit
    assert hex_map.find_unit_position(unit) is None


def test_distribution_and_render():
    hex_map = HexMap(width=3, height=1)
    kinds = [TerrainKind.WATER, TerrainKind.WATER, TerrainKind.HILL]
    for col, kind in enumerate(kinds):
        hex_map.cells[(col, 0)] = Tile(coordinate=(col, 0), terrain=kind)

    assert hex_map.terrain_distribution() == {TerrainKind.WATER: 2, TerrainKind.HILL: 1}
    assert hex_map.count(TerrainKind.WATER, TerrainKind.LAGOON) == 2
    assert hex_map.render_ascii() == "~ ~ n"


def test_units_compare_by_identity():
    a = Unit(name="Nakhtu", max_movement=4)
    b = Unit(name="Nakhtu", max_movement=4)
    assert a != b
    assert a == a
