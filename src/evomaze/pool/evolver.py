"""
Evolver Module

This module implements the genetic algorithm that turns one generation of
scored Brains into the next. The Evolver holds the population handed to it
by the caller together with the fitness of each member, and produces a new
population of the same size through:

- elitism:              the fittest Brains are cloned unchanged
- tournament selection: parents are the fittest of a small random sample
- crossover:            with a given probability two parents are recombined,
                        otherwise one of them is cloned
- mutation:             every offspring (but never an elite) is mutated

Classes:
    Evolver: Generational genetic algorithm operating on Brains
"""

import numpy as np
from typing import Sequence, TYPE_CHECKING

from evomaze.errors    import PopulationSizeMismatchError
from evomaze.phenotype import Brain
if TYPE_CHECKING:
    from evomaze.run.config import Config

class Evolver:
    """
    Generational genetic algorithm for fixed-topology Brains.

    The population is handed over from the outside: the caller evaluates the
    Brains (plays one Episode with each), then passes the Brains and their
    scores to 'set_population()' and calls 'evolve()' to obtain the next
    generation. When no population has been set, 'evolve()' creates a fresh
    random generation 0.

    Public Properties:
        population:     The Brains of the population currently held
        fitness_scores: The fitness of each Brain in 'population'

    Public Methods:
        set_population(brains, scores): Replace the held population
        evolve():                       Create the next generation
        reset():                        Forget the held population
    """

    def __init__(self, config: 'Config', rng: np.random.Generator | None = None):
        """
        Initialize the Evolver.

        Parameters:
            config: Stores configuration parameters (mutation rate and amount,
                    crossover rate, elitism, tournament size, layer sizes,
                    size of generation 0)
            rng:    Source of randomness; a fresh unseeded Generator if None
        """
        self._config        : 'Config'            = config
        self._rng           : np.random.Generator = rng if rng is not None else np.random.default_rng()
        self._population    : list[Brain]         = []
        self._fitness_scores: list[float]         = []

    @property
    def population(self) -> list[Brain]:
        return self._population

    @property
    def fitness_scores(self) -> list[float]:
        return self._fitness_scores

    def set_population(self, brains: Sequence[Brain], scores: Sequence[float]) -> None:
        """
        Replace the held population and its fitness scores.

        Parameters:
            brains: The Brains of the generation that has just been evaluated
            scores: The fitness of each Brain, in the same order
        """
        if len(brains) != len(scores):
            raise PopulationSizeMismatchError(
                f"Networks and scores must have the same length, got {len(brains)} and {len(scores)}")

        self._population     = list(brains)
        self._fitness_scores = [float(score) for score in scores]

    def reset(self) -> None:
        """
        Forget the held population; the next 'evolve()' creates generation 0.
        """
        self._population     = []
        self._fitness_scores = []

    def evolve(self) -> list[Brain]:
        """
        Create the next generation.

        If no population is held, a generation 0 of 'population_size' random
        Brains is returned. Otherwise:

        Step 1: rank the population by descending fitness
        Step 2: clone the top min(elitism, population size) Brains unchanged
        Step 3: until the new generation is as large as the old one,
                select two parents by tournament, create an offspring by
                crossover (with probability 'crossover_rate') or by cloning
                one of the parents, then mutate the offspring

        Returns:
            The Brains of the next generation
        """
        population_size = len(self._population)
        if population_size == 0:
            return self._create_initial_population(self._config.population_size)

        next_generation: list[Brain] = []

        # Elitism: the best individuals survive unchanged
        ranked = self._ranked_indices()
        for index in ranked[:min(self._config.elitism, population_size)]:
            next_generation.append(self._population[index].clone())

        # Fill the rest of the generation with offspring
        while len(next_generation) < population_size:
            parent1 = self._tournament_selection()
            parent2 = self._tournament_selection()

            if self._rng.random() < self._config.crossover_rate:
                offspring = Brain.crossover(parent1, parent2, self._rng)
            else:
                offspring = (parent1 if self._rng.random() < 0.5 else parent2).clone()

            offspring.mutate(self._config.mutation_rate, self._config.mutation_amount, self._rng)
            next_generation.append(offspring)

        return next_generation

    def _create_initial_population(self, size: int) -> list[Brain]:
        return [Brain(self._config.layer_sizes,
                      self._rng,
                      self._config.hidden_activation,
                      self._config.output_activation) for _ in range(size)]

    def _ranked_indices(self) -> list[int]:
        """
        Indices of the population sorted by descending fitness.
        Ties keep their original order.
        """
        scores = np.asarray(self._fitness_scores, dtype=np.float64)
        return [int(i) for i in np.argsort(-scores, kind='stable')]

    def _tournament_selection(self) -> Brain:
        """
        Sample 'tournament_size' members uniformly at random (with replacement)
        and return the fittest of them; the first one sampled wins ties.
        """
        best_index = int(self._rng.integers(len(self._population)))
        for _ in range(1, self._config.tournament_size):
            index = int(self._rng.integers(len(self._population)))
            if self._fitness_scores[index] > self._fitness_scores[best_index]:
                best_index = index
        return self._population[best_index]
