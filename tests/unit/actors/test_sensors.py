"""
Unit tests for the agent's sensor model.
"""

import pytest
import numpy as np

from evomaze.actors import SENSOR_SIZE, sense_state
from evomaze.world  import Direction, Grid


def features(state, direction):
    """The (wall, dot, bonus, pursuer) features of one direction."""
    offset = int(direction) * 4
    return tuple(state[offset:offset + 4])


class TestSenseState:

    def test_vector_length(self):
        state = sense_state(1, 1, Grid(5, 5), [], 5)
        assert SENSOR_SIZE == 16
        assert state.shape == (16,)

    def test_features_along_corridor(self):
        grid = Grid.from_rows(["#######",
                               "# .o  #",
                               "#######"])
        state = sense_state(1, 1, grid, [(4, 1)], 10)

        assert features(state, Direction.RIGHT) == pytest.approx((0.5, 0.9, 0.8, 0.7))
        assert features(state, Direction.UP)    == pytest.approx((0.9, 0.0, 0.0, 0.0))
        assert features(state, Direction.DOWN)  == pytest.approx((0.9, 0.0, 0.0, 0.0))
        assert features(state, Direction.LEFT)  == pytest.approx((0.9, 0.0, 0.0, 0.0))

    def test_first_item_only(self):
        grid = Grid.from_rows(["#######",
                               "#  . .#",
                               "#######"])
        state = sense_state(1, 1, grid, [], 10)
        assert features(state, Direction.RIGHT)[1] == pytest.approx(0.8)

    def test_wall_stops_scan(self):
        grid = Grid.from_rows(["######",
                               "# #.o#",
                               "######"])
        state = sense_state(1, 1, grid, [(3, 1)], 5)
        assert features(state, Direction.RIGHT) == pytest.approx((0.8, 0.0, 0.0, 0.0))

    def test_edge_of_grid_is_wall(self):
        grid  = Grid(5, 5)
        state = sense_state(0, 0, grid, [], 5)
        assert features(state, Direction.UP)[0]   == pytest.approx(0.8)
        assert features(state, Direction.LEFT)[0] == pytest.approx(0.8)

    def test_nothing_in_range_gives_zero(self):
        grid  = Grid(20, 3)
        state = sense_state(0, 1, grid, [], 5)
        assert features(state, Direction.RIGHT) == (0.0, 0.0, 0.0, 0.0)

    def test_object_at_range_limit(self):
        """An object exactly at the vision range is seen, with feature value 0."""
        grid = Grid.from_rows(["#######",
                               "#    .#",
                               "#######"])
        state = sense_state(1, 1, grid, [], 4)
        assert features(state, Direction.RIGHT)[1] == 0.0

    def test_own_cell_ignored(self):
        grid  = Grid.from_rows(["###", "#.#", "###"])
        state = sense_state(1, 1, grid, [(1, 1)], 5)
        for direction in Direction:
            assert features(state, direction)[1:] == (0.0, 0.0, 0.0)

    def test_values_in_unit_interval(self, config, rng):
        grid  = Grid.generate(20, 20, config, rng)
        state = sense_state(*grid.spawn_cell, grid, [(1, 1), (18, 18)], config.vision_range)
        assert np.all(state >= 0.0)
        assert np.all(state < 1.0)
