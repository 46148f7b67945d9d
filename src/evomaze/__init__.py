"""
evomaze - Neuroevolution of maze-running agents.

This package evolves populations of small feed-forward neural networks that
steer an agent through procedurally generated mazes, collecting dots and bonus
items while four non-learning pursuers chase it. A genetic algorithm (elitism,
tournament selection, single-point crossover, mutation) breeds every new
generation from the scores of the previous one.

Main components:
- world: The maze (generation with a connectivity guarantee) and directions
- actors: Agent, pursuers and the agent's sensor model
- phenotype: The Brain, a fixed-topology feed-forward network
- pool: The Evolver (genetic algorithm)
- run: Configuration, Episode, GenerationController, Trial and Experiment
- activations: Activation functions for the Brain

Example:
    >>> from evomaze import Config, GenerationController
    >>> config = Config("config_maze.ini")
    >>> controller = GenerationController(config)
    >>> controller.start()
    >>> while controller.generation < 10:
    ...     controller.tick(1 / 60)
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from evomaze.run.config     import Config
from evomaze.run.episode    import Episode
from evomaze.run.controller import GenerationController
from evomaze.run.trial      import GenerationRecord, Trial
from evomaze.run.experiment import Experiment
from evomaze.phenotype      import Brain
from evomaze.pool           import Evolver
from evomaze.world          import Cell, Direction, Grid
from evomaze.actors         import Agent, Pursuer, PursuerKind
from evomaze.errors         import (InputSizeMismatchError,
                                    PopulationSizeMismatchError,
                                    StructureMismatchError)

__all__ = [
    "Config",
    "Episode",
    "GenerationController",
    "GenerationRecord",
    "Trial",
    "Experiment",
    "Brain",
    "Evolver",
    "Cell",
    "Direction",
    "Grid",
    "Agent",
    "Pursuer",
    "PursuerKind",
    "InputSizeMismatchError",
    "PopulationSizeMismatchError",
    "StructureMismatchError",
]
