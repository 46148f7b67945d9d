"""Pytest configuration and shared fixtures."""

import pytest
import sys
import numpy as np
from pathlib import Path

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_dir))


@pytest.fixture
def rng():
    """A seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def config():
    """A default configuration."""
    from evomaze.run.config import Config
    return Config()


@pytest.fixture
def fast_config():
    """A configuration with small generations and short Episodes, for driving the loop in tests."""
    from evomaze.run.config import Config
    config = Config()
    config.population_size = 4
    config.elitism = 1
    config.surface_width = 200
    config.surface_height = 200
    config.time_budget = 0.5
    config.step_seconds = 1.0 / 30.0
    config.frame_seconds = 1.0 / 30.0
    config.max_generations = 3
    config.seed = 7
    return config


@pytest.fixture
def open_rows():
    """A 5x5 picture: border walls around an empty 3x3 interior."""
    return ["#####",
            "#   #",
            "#   #",
            "#   #",
            "#####"]
