"""
Unit tests for the Episode class.
"""

import pytest
import numpy as np
from unittest import mock

from evomaze.actors      import PursuerKind
from evomaze.phenotype   import Brain
from evomaze.run.episode import Episode, grid_dimensions
from evomaze.world       import Grid


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def brain(rng):
    return Brain([16, 12, 4], rng)

@pytest.fixture
def isolated_grid():
    """The spawn cell and the four pursuer corners are separate single-cell rooms."""
    return Grid.from_rows(["#######",
                           "# ### #",
                           "#######",
                           "### ###",
                           "#######",
                           "# ### #",
                           "#######"])


# ============================================================================
# Test Sizing
# ============================================================================

class TestGridDimensions:

    @pytest.mark.parametrize("surface, expected", [
        ((400, 400), (20.0, 20, 20)),
        ((100, 100), (10.0, 20, 20)),
        ((600, 300), (15.0, 40, 20)),
        ((200, 250), (10.0, 20, 25)),
    ])
    def test_dimensions(self, config, surface, expected):
        assert grid_dimensions(*surface, config) == pytest.approx(expected)

    def test_minimum_three_cells(self, config):
        config.cells_across = 1
        config.min_cell_size = 1000
        _, width, height = grid_dimensions(400, 400, config)
        assert (width, height) == (3, 3)


# ============================================================================
# Test Construction
# ============================================================================

class TestEpisodeInit:

    def test_generates_grid_from_surface(self, config, brain, rng):
        episode = Episode(brain, config, rng)
        assert (episode.grid.width, episode.grid.height) == (20, 20)
        assert episode.cell_size == 20.0
        assert episode.grid.is_connected()

    def test_agent_at_spawn(self, config, brain, rng):
        episode = Episode(brain, config, rng)
        assert episode.agent.cell == episode.grid.spawn_cell
        assert episode.brain is brain
        assert episode.is_alive()
        assert not episode.is_game_over()
        assert episode.get_score() == 0.0

    def test_pursuers_in_corners(self, config, brain, rng):
        episode = Episode(brain, config, rng)
        w, h = episode.grid.width, episode.grid.height
        placement = {p.kind: p.cell for p in episode.pursuers}
        assert placement == {
            PursuerKind.DIRECT:    (1, 1),
            PursuerKind.INTERCEPT: (w - 2, 1),
            PursuerKind.NOISY:     (1, h - 2),
            PursuerKind.MIXED:     (w - 2, h - 2),
        }

    def test_explicit_grid(self, config, brain, rng, isolated_grid):
        episode = Episode(brain, config, rng, grid=isolated_grid)
        assert episode.grid is isolated_grid
        assert episode.agent.cell == (3, 3)

    def test_same_seed_same_maze(self, config, brain):
        episode1 = Episode(brain, config, np.random.default_rng(4))
        episode2 = Episode(brain.clone(), config, np.random.default_rng(4))
        assert str(episode1.grid) == str(episode2.grid)


# ============================================================================
# Test Update
# ============================================================================

class TestEpisodeUpdate:

    def test_timeout_ends_episode(self, config, brain, rng, isolated_grid):
        config.time_budget = 0.5
        config.step_seconds = 1.0 / 30.0
        episode = Episode(brain, config, rng, grid=isolated_grid)

        episode.update(0.2)
        assert not episode.is_game_over()
        assert episode.time_left() > 0.0

        episode.update(1.0)
        assert episode.is_game_over()
        assert episode.timed_out()
        assert not episode.is_alive()
        assert config.time_budget <= episode.elapsed_time < config.time_budget + config.step_seconds
        assert episode.time_left() == 0.0

    def test_timeout_after_exact_step_count(self, config, brain, rng, isolated_grid):
        """Ten steps of 0.1 s fill a 1 s budget even though their float sum is below 1."""
        config.time_budget = 1.0
        config.step_seconds = 0.1
        episode = Episode(brain, config, rng, grid=isolated_grid)

        with mock.patch.object(episode.agent, "update", wraps=episode.agent.update) as update:
            episode.update(5.0)

        assert episode.timed_out()
        assert update.call_count == 9
        assert episode.elapsed_time == pytest.approx(config.time_budget)

    def test_timeout_has_no_penalty(self, config, brain, rng, isolated_grid):
        config.time_budget = 0.1
        config.death_penalty = 1e9
        episode = Episode(brain, config, rng, grid=isolated_grid)
        episode.update(1.0)
        assert episode.timed_out()
        assert episode.get_score() > -1e6

    def test_caught_by_pursuer(self, config, brain, rng):
        """In a 3x3 maze every pursuer spawns on the agent."""
        grid = Grid.from_rows(["###", "#.#", "###"])
        episode = Episode(brain, config, rng, grid=grid)

        episode.update(config.step_seconds)

        assert episode.is_game_over()
        assert not episode.timed_out()
        assert not episode.is_alive()
        assert episode.get_score() < 0.0

    def test_update_after_game_over_is_noop(self, config, brain, rng, isolated_grid):
        config.time_budget = 0.1
        episode = Episode(brain, config, rng, grid=isolated_grid)
        episode.update(1.0)
        elapsed, score = episode.elapsed_time, episode.get_score()

        episode.update(1.0)

        assert episode.elapsed_time == elapsed
        assert episode.get_score() == score

    def test_partial_steps_accumulate(self, config, brain, rng, isolated_grid):
        config.step_seconds = 0.1
        episode = Episode(brain, config, rng, grid=isolated_grid)

        episode.update(0.06)
        assert episode.elapsed_time == 0.0
        episode.update(0.06)
        assert episode.elapsed_time == pytest.approx(0.1)

    def test_time_scale(self, config, brain):
        config.step_seconds = 0.05
        fast = Episode(brain, config, np.random.default_rng(2), time_scale=2.0)
        slow = Episode(brain.clone(), config, np.random.default_rng(2))

        fast.update(0.25)
        slow.update(0.5)

        assert fast.elapsed_time == pytest.approx(slow.elapsed_time)
        assert fast.get_score() == pytest.approx(slow.get_score())
        assert fast.agent.cell == slow.agent.cell

    def test_time_scale_zero_freezes(self, config, brain, rng):
        episode = Episode(brain, config, rng)
        episode.set_time_scale(0.0)
        episode.update(1.0)
        assert episode.elapsed_time == 0.0

    def test_negative_time_scale(self, config, brain, rng):
        episode = Episode(brain, config, rng)
        with pytest.raises(ValueError, match="negative"):
            episode.set_time_scale(-1.0)

    def test_repr(self, config, brain, rng):
        assert repr(Episode(brain, config, rng)).startswith("Episode(score=0.00, alive=True")
