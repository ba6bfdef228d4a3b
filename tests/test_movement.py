"""Tests for move validation and application."""

import pytest

from hexengine import MoveFailure, MovementValidator, SelectionState, TerrainKind, Unit


@pytest.fixture
def placed(grassland_grid, scout, validator):
    """Scout standing on (2, 2) and selected."""
    grassland_grid[(2, 2)].occupant = scout
    validator.select_unit(scout)
    return grassland_grid


def snapshot(grid, unit):
    occupants = {c: t.occupant for c, t in grid.items()}
    return occupants, unit.current_movement, unit.has_moved


class TestSelection:

    def test_state_transitions(self, validator, scout, grassland_grid):
        assert validator.state == SelectionState.IDLE
        grassland_grid[(2, 2)].occupant = scout

        validator.select_unit(scout)
        assert validator.state == SelectionState.AWAITING_DESTINATION

        validator.compute_destinations((2, 2), grassland_grid)
        assert validator.state == SelectionState.DESTINATIONS_KNOWN

        validator.deselect()
        assert validator.state == SelectionState.IDLE
        assert validator.valid_destinations == []

    def test_reselect_clears_cache(self, validator, scout, placed):
        validator.compute_destinations((2, 2), placed)
        validator.select_unit(Unit(name="Runner", max_movement=2))
        assert validator.state == SelectionState.AWAITING_DESTINATION
        assert validator.valid_destinations == []

    def test_compute_without_selection(self, validator, grassland_grid):
        assert validator.compute_destinations((2, 2), grassland_grid) == []

    def test_destinations_are_adjacent(self, validator, placed):
        destinations = validator.compute_destinations((2, 2), placed)
        assert set(destinations) == {(1, 1), (1, 2), (2, 3), (3, 2), (3, 1), (2, 1)}


class TestAttemptMove:

    def test_successful_move(self, validator, scout, placed):
        result = validator.attempt_move((2, 2), (2, 3), placed)

        assert result.success
        assert result.new_position == (2, 3)
        assert result.cost == 1
        assert result.message == "Moved to (2, 3)"
        assert scout.current_movement == 3
        assert scout.has_moved
        assert placed[(2, 3)].occupant is scout
        assert placed[(2, 2)].occupant is None
        assert validator.selected_unit is scout
        assert validator.state == SelectionState.AWAITING_DESTINATION

    def test_terrain_cost_charged(self, validator, scout, make_grid):
        grid = make_grid(4, 4, overrides={(2, 3): TerrainKind.HILL})
        grid[(2, 2)].occupant = scout
        validator.select_unit(scout)

        result = validator.attempt_move((2, 2), (2, 3), grid)
        assert result.cost == 2
        assert scout.current_movement == 2

    def test_backtrack_after_move(self, validator, scout, placed):
        assert validator.attempt_move((2, 2), (2, 3), placed).success
        result = validator.attempt_move((2, 3), (2, 2), placed)
        assert result.success
        assert scout.current_movement == 2
        assert placed[(2, 2)].occupant is scout

    def test_deselects_when_budget_spent(self, validator, grassland_grid):
        runner = Unit(name="Runner", max_movement=1)
        grassland_grid[(2, 2)].occupant = runner
        validator.select_unit(runner)

        assert validator.attempt_move((2, 2), (2, 3), grassland_grid).success
        assert runner.current_movement == 0
        assert validator.selected_unit is None
        assert validator.state == SelectionState.IDLE

    def test_no_unit_selected(self, validator, grassland_grid):
        result = validator.attempt_move((2, 2), (2, 3), grassland_grid)
        assert not result.success
        assert result.reason == MoveFailure.NO_UNIT_SELECTED
        assert result.message == "No unit selected"

    @pytest.mark.parametrize("start, goal", [((2, 2), (20, 20)), ((-1, 0), (2, 3))])
    def test_off_map(self, validator, placed, start, goal):
        result = validator.attempt_move(start, goal, placed)
        assert result.reason == MoveFailure.INVALID_POSITION

    def test_occupied_goal(self, validator, scout, placed):
        placed[(2, 3)].occupant = Unit(name="Guard", max_movement=4)
        before = snapshot(placed, scout)

        result = validator.attempt_move((2, 2), (2, 3), placed)

        assert result.reason == MoveFailure.TILE_OCCUPIED
        assert snapshot(placed, scout) == before

    def test_too_far_is_rejected_atomically(self, validator, scout, placed):
        before = snapshot(placed, scout)

        result = validator.attempt_move((2, 2), (6, 5), placed)

        assert not result.success
        assert result.reason == MoveFailure.NOT_A_VALID_DESTINATION
        assert snapshot(placed, scout) == before
        assert validator.selected_unit is scout

    def test_insufficient_movement(self, validator, scout, make_grid):
        grid = make_grid(4, 4, overrides={(2, 3): TerrainKind.HILL})
        grid[(2, 2)].occupant = scout
        validator.select_unit(scout)
        validator.compute_destinations((2, 2), grid)
        scout.current_movement = 1
        before = snapshot(grid, scout)

        result = validator.attempt_move((2, 2), (2, 3), grid)

        assert result.reason == MoveFailure.INSUFFICIENT_MOVEMENT
        assert snapshot(grid, scout) == before

    def test_unaffordable_neighbor_not_a_destination(self, validator, make_grid):
        grid = make_grid(4, 4, overrides={(2, 3): TerrainKind.MOUNTAIN})
        runner = Unit(name="Runner", max_movement=3)
        grid[(2, 2)].occupant = runner
        validator.select_unit(runner)

        result = validator.attempt_move((2, 2), (2, 3), grid)
        assert result.reason == MoveFailure.NOT_A_VALID_DESTINATION

    def test_origin_without_selected_unit(self, validator, scout, placed):
        before = snapshot(placed, scout)

        result = validator.attempt_move((5, 3), (5, 4), placed)

        assert result.reason == MoveFailure.INVALID_POSITION
        assert snapshot(placed, scout) == before
        assert [c for c, t in placed.items() if t.occupant is scout] == [(2, 2)]

    def test_origin_held_by_another_unit(self, validator, scout, placed):
        guard = Unit(name="Guard", max_movement=4)
        placed[(5, 3)].occupant = guard
        before = snapshot(placed, scout)

        result = validator.attempt_move((5, 3), (5, 4), placed)

        assert result.reason == MoveFailure.INVALID_POSITION
        assert snapshot(placed, scout) == before
        assert placed[(5, 3)].occupant is guard
        assert guard.current_movement == 4

    def test_destinations_from_other_origin_are_recomputed(self, validator, scout, placed):
        assert (5, 4) in validator.compute_destinations((5, 3), placed)
        before = snapshot(placed, scout)

        result = validator.attempt_move((2, 2), (5, 4), placed)

        assert result.reason == MoveFailure.NOT_A_VALID_DESTINATION
        assert snapshot(placed, scout) == before
        assert (5, 4) not in validator.valid_destinations
        assert (2, 3) in validator.valid_destinations


class TestMultiHop:

    def test_reaches_beyond_adjacent(self, scout, grassland_grid):
        validator = MovementValidator(multi_hop=True)
        grassland_grid[(0, 0)].occupant = scout
        validator.select_unit(scout)

        result = validator.attempt_move((0, 0), (0, 3), grassland_grid)

        assert result.success
        assert result.cost == 3
        assert scout.current_movement == 1
        assert grassland_grid[(0, 3)].occupant is scout

    def test_destinations_within_budget(self, scout, grassland_grid):
        validator = MovementValidator(multi_hop=True)
        grassland_grid[(0, 0)].occupant = scout
        validator.select_unit(scout)

        destinations = validator.compute_destinations((0, 0), grassland_grid)

        assert (0, 0) not in destinations
        assert (0, 4) in destinations
        assert (0, 5) not in destinations


class TestDestinationQuery:

    def test_no_unit(self, validator, grassland_grid):
        result = validator.handle_destination_query((2, 3), grassland_grid)
        assert not result.is_movement_attempt
        assert result.reason == MoveFailure.NO_UNIT_SELECTED

    def test_valid_click(self, validator, placed):
        result = validator.handle_destination_query((2, 3), placed)
        assert result.is_movement_attempt
        assert result.destination == (2, 3)
        assert result.message == "Move to (2, 3)"
        assert validator.state == SelectionState.DESTINATIONS_KNOWN

    def test_off_map_click(self, validator, placed):
        assert validator.handle_destination_query((9, 9), placed).reason == MoveFailure.INVALID_POSITION

    def test_occupied_click(self, validator, placed):
        result = validator.handle_destination_query((2, 2), placed)
        assert result.reason == MoveFailure.TILE_OCCUPIED

    def test_distant_click(self, validator, placed):
        result = validator.handle_destination_query((6, 5), placed)
        assert result.reason == MoveFailure.NOT_A_VALID_DESTINATION

    def test_unit_not_on_grid(self, validator, grassland_grid):
        validator.select_unit(Unit(name="Lost", max_movement=4))
        result = validator.handle_destination_query((2, 3), grassland_grid)
        assert result.reason == MoveFailure.INVALID_POSITION

    def test_query_ignores_destinations_from_other_origin(self, validator, placed):
        validator.compute_destinations((5, 3), placed)
        result = validator.handle_destination_query((5, 4), placed)
        assert result.reason == MoveFailure.NOT_A_VALID_DESTINATION

    def test_query_does_not_move(self, validator, scout, placed):
        before = snapshot(placed, scout)
        validator.handle_destination_query((2, 3), placed)
        assert snapshot(placed, scout) == before


def test_reset_movement_restores_budget(validator, scout, placed):
    validator.attempt_move((2, 2), (2, 3), placed)
    scout.reset_movement()
    assert scout.current_movement == 4
    assert not scout.has_moved
    assert scout.can_move()
