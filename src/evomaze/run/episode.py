"""
Episode Module

This module implements one bounded play-through: a freshly generated maze,
one agent driven by a Brain, and four pursuers, played until the agent dies or
the time budget runs out. The Episode owns all of them; the agent and the
pursuers only hold references to the maze (and the agent to the pursuers).

Simulated time is advanced in fixed steps: the (time-scaled) delta passed to
'update' is accumulated and consumed in steps of 'step_seconds', so a faster
time scale runs more steps per call and the outcome does not depend on how
the host slices time into frames.

Classes:
    Episode: One play-through of the maze

Functions:
    grid_dimensions: Cell size and maze size for a surface of a given size
"""

import math
import numpy as np
from typing import TYPE_CHECKING

from evomaze.actors    import Agent, Pursuer, PursuerKind, build_profiles
from evomaze.phenotype import Brain
from evomaze.world     import Grid
if TYPE_CHECKING:
    from evomaze.run.config import Config

def grid_dimensions(surface_width: float, surface_height: float, config: 'Config') -> tuple[float, int, int]:
    """
    Compute the cell size (pixels) and the number of columns and rows of the
    maze fitting a surface of the given size.

    The surface is at least 'min_surface' pixels on each side, cells are at
    least 'min_cell_size' pixels, and the maze has at least 3x3 cells.

    Returns:
        (cell_size, width, height)
    """
    surface_width  = max(config.min_surface, surface_width)
    surface_height = max(config.min_surface, surface_height)

    cell_size = max(config.min_cell_size, min(surface_width, surface_height) / config.cells_across)
    width     = max(3, math.floor(surface_width  / cell_size))
    height    = max(3, math.floor(surface_height / cell_size))
    return cell_size, width, height

class Episode:
    """
    One play-through of a maze by a single agent chased by four pursuers.

    The Episode is over once its agent is dead or its elapsed (scaled) time
    reaches the time budget; from then on 'update' does nothing.

    Public Properties:
        grid:         The maze
        agent:        The agent
        pursuers:     The pursuers (one of each kind)
        brain:        The Brain driving the agent
        elapsed_time: Simulated seconds played so far
        time_scale:   Multiplier applied to every delta passed to 'update'
        cell_size:    Side of a cell, in pixels

    Public Methods:
        update(delta):         Advance the Episode by 'delta' seconds of host time
        set_time_scale(scale): Change the time scale
        is_alive():            Whether the agent is alive
        is_game_over():        Whether the Episode has ended
        get_score():           The agent's score
        timed_out():           Whether the Episode ended by running out of time
        time_left():           Simulated seconds left before the time budget runs out
    """

    # Pursuer kind and spawn corner, as offsets from the maze border
    PURSUER_SPAWNS = ((PursuerKind.DIRECT,    ( 1,  1)),
                      (PursuerKind.INTERCEPT, (-2,  1)),
                      (PursuerKind.NOISY,     ( 1, -2)),
                      (PursuerKind.MIXED,     (-2, -2)))

    # Slack (seconds) when comparing the elapsed time against the time budget
    TIME_TOLERANCE = 1e-9

    def __init__(self,
                 brain         : Brain,
                 config        : 'Config',
                 rng           : np.random.Generator,
                 surface_width : float | None = None,
                 surface_height: float | None = None,
                 time_scale    : float = 1.0,
                 grid          : Grid | None = None):
        """
        Set up a new Episode.

        Parameters:
            brain:          The Brain that will drive the agent
            config:         Stores configuration parameters
            rng:            Source of randomness for the maze and the pursuers
            surface_width:  Width of the playing surface (pixels); 'surface_width' from config if None
            surface_height: Height of the playing surface (pixels); 'surface_height' from config if None
            time_scale:     Initial time scale
            grid:           Use this maze instead of generating one (its size then
                            overrides the surface-derived maze size)
        """
        if surface_width is None:
            surface_width = config.surface_width
        if surface_height is None:
            surface_height = config.surface_height

        self._config    : 'Config' = config
        self._time_scale: float    = time_scale
        self._elapsed   : float    = 0.0
        self._steps     : int      = 0
        self._pending   : float    = 0.0
        self._game_over : bool     = False
        self._timed_out : bool     = False

        cell_size, width, height = grid_dimensions(surface_width, surface_height, config)
        if grid is None:
            grid = Grid.generate(width, height, config, rng)
        self._cell_size: float = cell_size
        self._grid     : Grid  = grid

        profiles = build_profiles(config)
        self._pursuers: list[Pursuer] = []
        for kind, (offset_x, offset_y) in Episode.PURSUER_SPAWNS:
            cell_x = offset_x if offset_x > 0 else grid.width  + offset_x
            cell_y = offset_y if offset_y > 0 else grid.height + offset_y
            self._pursuers.append(Pursuer(kind, cell_x, cell_y, cell_size, grid, config, rng, profiles[kind]))

        spawn_x, spawn_y = grid.spawn_cell
        self._agent: Agent = Agent(spawn_x, spawn_y, cell_size, grid, self._pursuers, brain, config)

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def agent(self) -> Agent:
        return self._agent

    @property
    def pursuers(self) -> tuple[Pursuer, ...]:
        return tuple(self._pursuers)

    @property
    def brain(self) -> Brain:
        return self._agent.brain

    @property
    def elapsed_time(self) -> float:
        return self._elapsed

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @property
    def cell_size(self) -> float:
        return self._cell_size

    def set_time_scale(self, scale: float) -> None:
        if scale < 0:
            raise ValueError(f"Time scale cannot be negative, got {scale}")
        self._time_scale = scale

    def is_alive(self) -> bool:
        return self._agent.is_alive()

    def is_game_over(self) -> bool:
        return self._game_over

    def get_score(self) -> float:
        return self._agent.get_score()

    def timed_out(self) -> bool:
        """
        Whether the Episode ended because its time budget ran out
        (rather than because a pursuer caught the agent).
        """
        return self._timed_out

    def time_left(self) -> float:
        if self._timed_out:
            return 0.0
        return max(0.0, self._config.time_budget - self._elapsed)

    def update(self, delta: float) -> None:
        """
        Advance the Episode.

        Parameters:
            delta: Elapsed host time, in seconds; it is multiplied by the time scale
        """
        if self._game_over:
            return

        step = self._config.step_seconds
        self._pending += delta * self._time_scale

        while self._pending >= step and not self._game_over:
            self._pending -= step
            self._step(step)

    def _step(self, step: float) -> None:
        self._steps  += 1
        self._elapsed = self._steps * step
        if self._elapsed >= self._config.time_budget - Episode.TIME_TOLERANCE:
            self._agent.expire()
            self._game_over = True
            self._timed_out = True
            return

        self._agent.update(step)
        for pursuer in self._pursuers:
            pursuer.update(step, self._agent.x, self._agent.y)

        if not self._agent.is_alive():
            self._game_over = True

    def __repr__(self):
        return (f"Episode(score={self.get_score():.2f}, alive={self.is_alive()}, "
                f"elapsed={self._elapsed:.2f}/{self._config.time_budget:.2f})")
