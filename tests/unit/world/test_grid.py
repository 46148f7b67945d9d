"""
Unit tests for the Grid class (maze generation and queries).
"""

import pytest
import numpy as np

from evomaze.run.config import Config
from evomaze.world      import Cell, Grid


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def maze(config, rng):
    return Grid.generate(20, 20, config, rng)


# ============================================================================
# Test Construction
# ============================================================================

class TestGridInit:

    def test_all_open(self):
        grid = Grid(5, 4)
        assert grid.width == 5
        assert grid.height == 4
        assert grid.walls() == []
        assert grid.dots() == []
        assert len(grid.open_cells()) == 20

    @pytest.mark.parametrize("width, height", [(2, 5), (5, 2), (0, 0)])
    def test_too_small(self, width, height):
        with pytest.raises(ValueError, match="at least 3x3"):
            Grid(width, height)

    def test_spawn_cell_is_centre(self):
        assert Grid(20, 15).spawn_cell == (10, 7)
        assert Grid(3, 3).spawn_cell == (1, 1)


class TestGridFromRows:

    def test_characters(self):
        grid = Grid.from_rows(["#####",
                               "#.o #",
                               "#####"])
        assert grid.get_cell(1, 1) == Cell(1, 1, wall=False, has_dot=True,  has_bonus=False)
        assert grid.get_cell(2, 1) == Cell(2, 1, wall=False, has_dot=False, has_bonus=True)
        assert grid.get_cell(3, 1) == Cell(3, 1, wall=False, has_dot=False, has_bonus=False)
        assert grid.get_cell(0, 0).wall

    def test_short_rows_padded_with_walls(self):
        grid = Grid.from_rows(["#####",
                               "#  ",
                               "#####"])
        assert grid.is_wall(3, 1)
        assert grid.is_wall(4, 1)

    def test_unknown_character(self):
        with pytest.raises(ValueError, match="Unknown cell character"):
            Grid.from_rows(["###", "#X#", "###"])

    def test_str_round_trip(self):
        rows = ["#####",
                "#.o #",
                "# # #",
                "#####"]
        assert str(Grid.from_rows(rows)) == "\n".join(rows)


# ============================================================================
# Test Queries
# ============================================================================

class TestGridQueries:

    def test_out_of_bounds_cell_is_none(self):
        grid = Grid(5, 5)
        assert grid.get_cell(-1, 0) is None
        assert grid.get_cell(0, 5) is None
        assert grid.get_cell(5, 2) is None

    def test_out_of_bounds_is_wall(self):
        grid = Grid(5, 5)
        assert grid.is_wall(-1, 2)
        assert grid.is_wall(2, 5)
        assert not grid.is_wall(2, 2)

    def test_out_of_bounds_has_nothing(self):
        grid = Grid(5, 5)
        assert not grid.has_dot(-1, 0)
        assert not grid.has_bonus(9, 9)
        assert not grid.collect_dot(-1, 0)

    def test_collect_dot(self):
        grid = Grid.from_rows(["###", "#.#", "###"])
        assert grid.collect_dot(1, 1)
        assert not grid.has_dot(1, 1)
        assert not grid.collect_dot(1, 1)

    def test_collect_bonus(self):
        grid = Grid.from_rows(["###", "#o#", "###"])
        assert grid.collect_bonus(1, 1)
        assert not grid.has_bonus(1, 1)
        assert not grid.collect_bonus(1, 1)

    def test_cell_is_snapshot(self):
        grid = Grid.from_rows(["###", "#.#", "###"])
        cell = grid.get_cell(1, 1)
        grid.collect_dot(1, 1)
        assert cell.has_dot
        assert not grid.get_cell(1, 1).has_dot

    def test_nearest_goal_distance(self):
        grid = Grid.from_rows(["#######",
                               "#.    #",
                               "#    o#",
                               "#######"])
        assert grid.nearest_goal_distance(2, 1) == 1.0
        assert grid.nearest_goal_distance(5, 1) == 1.0
        assert grid.nearest_goal_distance(3, 2) == 2.0

    def test_nearest_goal_distance_when_empty(self):
        assert Grid(5, 5).nearest_goal_distance(2, 2) == float('inf')

    def test_reachable_from(self):
        grid = Grid.from_rows(["#####",
                               "# # #",
                               "#####"])
        assert grid.reachable_from((1, 1)) == {(1, 1)}
        assert grid.reachable_from((0, 0)) == set()
        assert not grid.is_connected()

    def test_lists(self):
        grid = Grid.from_rows(["####",
                               "#.o#",
                               "####"])
        assert grid.dots() == [(1, 1)]
        assert grid.bonuses() == [(2, 1)]
        assert sorted(grid.open_cells()) == [(1, 1), (2, 1)]
        assert len(grid.walls()) == 10

    def test_repr(self):
        grid = Grid.from_rows(["####", "#.o#", "####"])
        assert repr(grid) == "Grid(4x3, walls=10, dots=1, bonuses=1)"


# ============================================================================
# Test Generation
# ============================================================================

class TestGridGenerate:

    @pytest.mark.parametrize("seed", range(25))
    def test_every_open_cell_reachable(self, config, seed):
        grid = Grid.generate(20, 20, config, np.random.default_rng(seed))
        assert grid.is_connected()

    @pytest.mark.parametrize("width, height", [(3, 3), (4, 7), (9, 5), (31, 17)])
    def test_connected_for_any_size(self, config, rng, width, height):
        grid = Grid.generate(width, height, config, rng)
        assert grid.is_connected()

    def test_connected_with_dense_walls(self, config, rng):
        config.wall_probability = 1.0
        config.anchor_spacing = 1
        for _ in range(10):
            assert Grid.generate(15, 12, config, rng).is_connected()

    def test_border_is_wall(self, maze):
        for x in range(maze.width):
            assert maze.is_wall(x, 0)
            assert maze.is_wall(x, maze.height - 1)
        for y in range(maze.height):
            assert maze.is_wall(0, y)
            assert maze.is_wall(maze.width - 1, y)

    def test_spawn_area_open(self, config, maze):
        spawn_x, spawn_y = maze.spawn_cell
        radius = config.spawn_clear_radius
        for y in range(spawn_y - radius, spawn_y + radius + 1):
            for x in range(spawn_x - radius, spawn_x + radius + 1):
                assert not maze.is_wall(x, y)

    def test_ring_inside_border_open(self, maze):
        """Anchor walls never touch the cells next to the border, where pursuers spawn."""
        for x in range(1, maze.width - 1):
            assert not maze.is_wall(x, 1)
            assert not maze.is_wall(x, maze.height - 2)
        for y in range(1, maze.height - 1):
            assert not maze.is_wall(1, y)
            assert not maze.is_wall(maze.width - 2, y)

    def test_no_wall_free_generation(self, config, rng):
        config.wall_probability = 0.0
        grid = Grid.generate(10, 10, config, rng)
        assert len(grid.walls()) == 2 * 10 + 2 * 8

    def test_items_only_on_open_cells(self, maze):
        for x, y in maze.dots() + maze.bonuses():
            assert not maze.is_wall(x, y)

    def test_bonus_count_and_no_dot_underneath(self, config, maze):
        bonuses = maze.bonuses()
        assert len(bonuses) == config.bonus_count
        for x, y in bonuses:
            assert not maze.has_dot(x, y)

    def test_bonus_cells_have_open_neighbour(self, maze):
        for x, y in maze.bonuses():
            neighbours = [(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)]
            assert any(not maze.is_wall(*n) for n in neighbours)

    def test_bonus_count_capped_by_open_cells(self, config, rng):
        config.bonus_count = 100
        grid = Grid.generate(4, 4, config, rng)
        assert len(grid.bonuses()) == len(grid.open_cells())

    def test_dot_density(self, config, rng):
        config.bonus_count = 0
        grid = Grid.generate(40, 40, config, rng)
        ratio = len(grid.dots()) / len(grid.open_cells())
        assert 0.8 < ratio < 0.97

    def test_dot_probability_zero(self, config, rng):
        config.dot_probability = 0.0
        assert Grid.generate(20, 20, config, rng).dots() == []

    def test_same_seed_same_maze(self, config):
        grid1 = Grid.generate(20, 20, config, np.random.default_rng(5))
        grid2 = Grid.generate(20, 20, config, np.random.default_rng(5))
        assert str(grid1) == str(grid2)

    def test_different_seeds_differ(self, config):
        grid1 = Grid.generate(20, 20, config, np.random.default_rng(5))
        grid2 = Grid.generate(20, 20, config, np.random.default_rng(6))
        assert str(grid1) != str(grid2)

    def test_collecting_keeps_connectivity(self, maze):
        for x, y in maze.dots():
            maze.collect_dot(x, y)
        assert maze.is_connected()
        assert maze.dots() == []
