"""
Generation Controller Module

This module implements the orchestrator of the evolutionary loop. The
GenerationController plays one Episode per Brain of the current generation,
all of them advanced together by the host through 'tick(delta)'. Once every
Episode has ended it hands the Brains and their scores to the Evolver, which
breeds the next generation, and starts a new batch of Episodes.

The controller is driven from the outside: it has no clock or thread of its
own. 'start()' and 'pause()' only toggle a flag that 'tick' checks, so a host
can keep calling 'tick' at its frame rate and let the flag decide whether the
simulation advances.

Classes:
    GenerationController: Runs generations of Episodes and evolves their Brains
"""

import math
import numpy as np
from typing import Callable, TYPE_CHECKING

from evomaze.phenotype   import Brain
from evomaze.pool        import Evolver
from evomaze.run.episode import Episode
if TYPE_CHECKING:
    from evomaze.run.config import Config

class GenerationController:
    """
    Runs one batch of Episodes per generation and evolves their Brains.

    Callbacks (all optional):
        on_agent_death():                            an Episode has just ended
        on_score_update(best_live_score):            the best score among the
                                                     Episodes still running has increased
        on_generation_complete(generation, best):    a generation turnover has
                                                     happened; 'best' is the best-ever score

    Public Properties:
        running:           Whether 'tick' currently advances the simulation
        generation:        Number of completed generation turnovers
        best_score:        Best final Episode score seen since the last reset
        time_scale:        Multiplier applied to simulated time
        episodes:          The Episodes of the current generation
        finished_episodes: The Episodes of the last completed generation
        evolver:           The genetic algorithm breeding the Brains

    Public Methods:
        tick(delta):                  Advance all running Episodes by 'delta' seconds
        start():                      Let 'tick' advance the simulation
        pause():                      Make 'tick' a no-op
        reset():                      Pause and restart from a random generation 0
        set_speed(multiplier):        Change the time scale of current and future Episodes
        resize(width, height):        Change the surface size used for future Episodes
        alive_count():                Number of Episodes still running
        is_generation_over():         Whether every Episode has ended
    """

    def __init__(self,
                 config                : 'Config',
                 rng                   : np.random.Generator | None = None,
                 on_agent_death        : Callable[[], None] | None = None,
                 on_score_update       : Callable[[float], None] | None = None,
                 on_generation_complete: Callable[[int, float], None] | None = None,
                 surface_width         : float | None = None,
                 surface_height        : float | None = None):
        """
        Initialize the controller and spawn generation 0.

        Parameters:
            config:                 Stores configuration parameters
            rng:                    Source of randomness; seeded from 'config.seed' if None
            on_agent_death:         Called once for every Episode that ends
            on_score_update:        Called with the best live score when it increases
            on_generation_complete: Called after every generation turnover
            surface_width:          Width of the playing surface (pixels); from config if None
            surface_height:         Height of the playing surface (pixels); from config if None
        """
        self._config: 'Config'            = config
        self._rng   : np.random.Generator = rng if rng is not None else np.random.default_rng(config.seed)

        self._on_agent_death         = on_agent_death
        self._on_score_update        = on_score_update
        self._on_generation_complete = on_generation_complete

        self._surface_width : float = surface_width  if surface_width  is not None else config.surface_width
        self._surface_height: float = surface_height if surface_height is not None else config.surface_height

        self._evolver   : Evolver       = Evolver(config, self._rng)
        self._episodes  : list[Episode] = []
        self._finished  : list[Episode] = []
        self._running   : bool          = False
        self._generation: int           = 0
        self._best_score: float         = 0.0
        self._time_scale: float         = 1.0
        self._best_live : float         = -math.inf

        self._spawn_episodes(self._evolver.evolve())

    @property
    def running(self) -> bool:
        return self._running

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def best_score(self) -> float:
        return self._best_score

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @property
    def episodes(self) -> tuple[Episode, ...]:
        return tuple(self._episodes)

    @property
    def finished_episodes(self) -> tuple[Episode, ...]:
        return tuple(self._finished)

    @property
    def evolver(self) -> Evolver:
        return self._evolver

    def start(self) -> None:
        self._running = True

    def pause(self) -> None:
        self._running = False

    def reset(self) -> None:
        """
        Pause, discard all Episodes and Brains, and spawn a new random generation 0.
        """
        self.pause()
        self._generation = 0
        self._best_score = 0.0
        self._evolver.reset()
        self._finished   = []
        self._spawn_episodes(self._evolver.evolve())

    def set_speed(self, multiplier: float) -> None:
        if multiplier < 0:
            raise ValueError(f"Speed multiplier cannot be negative, got {multiplier}")
        self._time_scale = multiplier
        for episode in self._episodes:
            episode.set_time_scale(multiplier)

    def resize(self, surface_width: float, surface_height: float) -> None:
        """
        Change the surface size; the Episodes of the next generation are sized from it.
        """
        self._surface_width  = surface_width
        self._surface_height = surface_height

    def alive_count(self) -> int:
        return sum(1 for episode in self._episodes if not episode.is_game_over())

    def is_generation_over(self) -> bool:
        return all(episode.is_game_over() for episode in self._episodes)

    def tick(self, delta: float) -> None:
        """
        Advance the simulation by one host frame.

        Every Episode still running is advanced by 'delta' seconds (each one
        scales it by the time scale). When the last Episode of the generation
        ends, the generation turnover happens within the same call.

        Parameters:
            delta: Elapsed host time, in seconds
        """
        if not self._running:
            return

        best_live = -math.inf
        for episode in self._episodes:
            if episode.is_game_over():
                continue

            episode.update(delta)
            if episode.is_game_over():
                if self._on_agent_death is not None:
                    self._on_agent_death()
            else:
                best_live = max(best_live, episode.get_score())

        if best_live > self._best_live and self._on_score_update is not None:
            self._on_score_update(best_live)
        self._best_live = best_live

        if self.is_generation_over():
            self._next_generation()

    def _next_generation(self) -> None:
        """
        Turn the finished generation into the next one.

        Step 1: collect the Brain and final score of every Episode
        Step 2: update the best-ever score
        Step 3: let the Evolver breed the next generation
        Step 4: spawn a fresh batch of Episodes from the new Brains
        Step 5: notify the host
        """
        brains = [episode.brain       for episode in self._episodes]
        scores = [episode.get_score() for episode in self._episodes]

        self._best_score = max(self._best_score, max(scores))

        self._evolver.set_population(brains, scores)
        next_brains = self._evolver.evolve()
        self._generation += 1

        self._finished = self._episodes
        self._spawn_episodes(next_brains)

        if self._on_generation_complete is not None:
            self._on_generation_complete(self._generation, self._best_score)

    def _spawn_episodes(self, brains: list[Brain]) -> None:
        streams = self._rng.spawn(len(brains))
        self._episodes = [Episode(brain, self._config, stream,
                                  self._surface_width, self._surface_height,
                                  time_scale=self._time_scale)
                          for brain, stream in zip(brains, streams)]
        self._best_live = -math.inf

    def __repr__(self):
        return (f"GenerationController(generation={self._generation}, best_score={self._best_score:.2f}, "
                f"alive={self.alive_count()}/{len(self._episodes)}, running={self._running})")
