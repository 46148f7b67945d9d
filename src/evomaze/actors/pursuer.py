"""
Pursuer Module

This module implements the non-learning opponents that chase the agent.
There are four kinds of pursuer; each kind is described by a profile holding
its speed, the probability that it ignores its target and moves at random,
and the function that picks the cell it steers towards:

    DIRECT:    steers towards the agent's cell
    INTERCEPT: steers towards a point a few cells away from the agent, in a
               randomly chosen direction, to get "ahead" of it
    NOISY:     like DIRECT, but occasionally moves at random
    MIXED:     like NOISY, with more randomness

All pursuers move the same way. They keep going in their current direction
and only decide on a new one when they reach the centre of a cell: reversing
is not allowed (unless the cell is a dead end), and among the open directions
they take the one that brings them closest, in Manhattan distance, to their
target cell. In scatter mode, entered for 5-10 seconds at spawn and then at
random, the choice is uniformly random instead.

Classes:
    PursuerKind:    Enumeration of the kinds of pursuer
    PursuerProfile: Speed, noise and targeting function of a kind
    Pursuer:        A single opponent

Functions:
    build_profiles: Build the profile table for all kinds from a Config
"""

import numpy as np
from enum   import Enum
from typing import Callable, NamedTuple, TYPE_CHECKING

from evomaze.world import Direction, Grid
if TYPE_CHECKING:
    from evomaze.run.config import Config

class PursuerKind(Enum):
    """
    The four behaviour profiles of pursuers.
    """
    DIRECT    = "direct"
    INTERCEPT = "intercept"
    NOISY     = "noisy"
    MIXED     = "mixed"

# (agent cell, grid, rng, lookahead) => target cell
TargetingFunction = Callable[[tuple[int, int], Grid, np.random.Generator, int], tuple[int, int]]

def target_agent(agent_cell: tuple[int, int], grid: Grid, rng: np.random.Generator, lookahead: int) -> tuple[int, int]:
    return agent_cell

def target_ahead(agent_cell: tuple[int, int], grid: Grid, rng: np.random.Generator, lookahead: int) -> tuple[int, int]:
    """
    Aim 'lookahead' cells away from the agent in a random direction,
    clamped to the grid.
    """
    direction = Direction(int(rng.integers(4)))
    target_x  = min(max(agent_cell[0] + direction.dx * lookahead, 0), grid.width  - 1)
    target_y  = min(max(agent_cell[1] + direction.dy * lookahead, 0), grid.height - 1)
    return target_x, target_y

class PursuerProfile(NamedTuple):
    speed    : float              # distance covered per move, as a fraction of a cell
    noise    : float              # probability of a random choice outside scatter mode
    targeting: TargetingFunction  # picks the cell to steer towards

def build_profiles(config: 'Config') -> dict[PursuerKind, PursuerProfile]:
    """
    Build the profile of every kind of pursuer from the configuration.
    """
    return {
        PursuerKind.DIRECT   : PursuerProfile(config.speed_direct,    0.0,                target_agent),
        PursuerKind.INTERCEPT: PursuerProfile(config.speed_intercept, 0.0,                target_ahead),
        PursuerKind.NOISY    : PursuerProfile(config.speed_noisy,     config.chase_noise, target_agent),
        PursuerKind.MIXED    : PursuerProfile(config.speed_mixed,     config.mixed_noise, target_agent),
        }

class Pursuer:
    """
    A non-learning opponent moving on the grid.

    Positions are continuous, in pixels; the cell containing a position is
    (floor(x / cell_size), floor(y / cell_size)). The pursuer does not own the
    grid it moves on; it belongs to the Episode.

    Public Properties:
        kind:         The behaviour profile of this pursuer
        x, y:         Current position (pixels)
        cell:         The cell containing the current position
        direction:    Current direction of movement
        scatter_mode: Whether the pursuer currently moves at random

    Public Methods:
        update(delta, agent_x, agent_y): Advance the pursuer by 'delta' seconds
        reset():                         Send the pursuer back to where it spawned
    """

    def __init__(self,
                 kind     : PursuerKind,
                 cell_x   : int,
                 cell_y   : int,
                 cell_size: float,
                 grid     : Grid,
                 config   : 'Config',
                 rng      : np.random.Generator,
                 profile  : PursuerProfile | None = None):
        """
        Create a pursuer at the centre of cell (cell_x, cell_y), in scatter mode.

        Parameters:
            kind:      Behaviour profile of the pursuer
            cell_x:    Column of the spawn cell
            cell_y:    Row of the spawn cell
            cell_size: Side of a cell, in pixels
            grid:      The maze the pursuer moves on
            config:    Stores configuration parameters
            rng:       Source of randomness
            profile:   Explicit profile; looked up from the configuration if None
        """
        if profile is None:
            profile = build_profiles(config)[kind]

        self._kind     : PursuerKind         = kind
        self._profile  : PursuerProfile      = profile
        self._grid     : Grid                = grid
        self._config   : 'Config'            = config
        self._rng      : np.random.Generator = rng
        self._cell_size: float               = cell_size

        self._spawn_x  : float = (cell_x + 0.5) * cell_size
        self._spawn_y  : float = (cell_y + 0.5) * cell_size
        self._x        : float = self._spawn_x
        self._y        : float = self._spawn_y
        self._direction: Direction = Direction(int(rng.integers(4)))

        self._movement_timer: float = 0.0
        self._scatter_mode  : bool  = False
        self._scatter_timer : float = 0.0

        # the cell in which the last direction decision was made
        self._decision_cell: tuple[int, int] | None = None

        self._enter_scatter_mode()

    @property
    def kind(self) -> PursuerKind:
        return self._kind

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def cell(self) -> tuple[int, int]:
        return int(self._x // self._cell_size), int(self._y // self._cell_size)

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def scatter_mode(self) -> bool:
        return self._scatter_mode

    def update(self, delta: float, agent_x: float, agent_y: float) -> None:
        """
        Advance the pursuer by 'delta' seconds.

        The scatter timer runs down continuously; the pursuer itself moves one
        step every 'move_interval' seconds.

        Parameters:
            delta:            Elapsed time, in seconds
            agent_x, agent_y: Position of the agent, in pixels
        """
        self._movement_timer += delta

        if self._scatter_mode:
            self._scatter_timer -= delta
            if self._scatter_timer <= 0:
                self._scatter_mode = False
        elif self._rng.random() < self._config.scatter_probability:
            self._enter_scatter_mode()

        if self._movement_timer >= self._config.move_interval:
            self._movement_timer = 0.0
            agent_cell = (int(agent_x // self._cell_size), int(agent_y // self._cell_size))
            self._move(agent_cell)

    def reset(self) -> None:
        """
        Return to the spawn cell with a random direction, in scatter mode.
        """
        self._x = self._spawn_x
        self._y = self._spawn_y
        self._direction      = Direction(int(self._rng.integers(4)))
        self._movement_timer = 0.0
        self._decision_cell  = None
        self._enter_scatter_mode()

    def _enter_scatter_mode(self) -> None:
        self._scatter_mode  = True
        self._scatter_timer = self._rng.uniform(self._config.scatter_min, self._config.scatter_max)

    def _center_of(self, cell: tuple[int, int]) -> tuple[float, float]:
        return (cell[0] + 0.5) * self._cell_size, (cell[1] + 0.5) * self._cell_size

    def _at_cell_center(self, cell: tuple[int, int]) -> bool:
        center_x, center_y = self._center_of(cell)
        tolerance = self._config.center_tolerance * self._cell_size
        return abs(self._x - center_x) < tolerance and abs(self._y - center_y) < tolerance

    def _move(self, agent_cell: tuple[int, int]) -> None:
        cell = self.cell

        # Decide once per cell, on arriving near its centre
        if cell != self._decision_cell and self._at_cell_center(cell):
            self._decision_cell = cell
            self._choose_direction(cell, agent_cell)

        step = self._profile.speed * self._cell_size
        self._x += self._direction.dx * step
        self._y += self._direction.dy * step

        self._handle_wall_contact()

    def _choose_direction(self, cell: tuple[int, int], agent_cell: tuple[int, int]) -> None:
        cell_x, cell_y = cell
        open_directions = [d for d in Direction if not self._grid.is_wall(cell_x + d.dx, cell_y + d.dy)]
        if not open_directions:
            return

        # No instant reversal, unless the cell is a dead end
        candidates = [d for d in open_directions if d != self._direction.opposite] or open_directions

        noise = self._profile.noise
        if self._scatter_mode or (noise > 0 and self._rng.random() < noise):
            new_direction = candidates[int(self._rng.integers(len(candidates)))]
        else:
            target_x, target_y = self._profile.targeting(agent_cell, self._grid, self._rng,
                                                         self._config.intercept_lookahead)
            new_direction = min(candidates,
                                key=lambda d: abs(cell_x + d.dx - target_x) + abs(cell_y + d.dy - target_y))

        if new_direction != self._direction:
            # turn exactly on the centre so the pursuer stays aligned with the corridor
            self._x, self._y = self._center_of(cell)
            self._direction  = new_direction

    def _handle_wall_contact(self) -> None:
        """
        If the cell ahead is a wall, snap to the centre of the current cell
        along the axis of movement and pick one of the other three directions.
        """
        cell_x, cell_y = self.cell
        if not self._grid.is_wall(cell_x + self._direction.dx, cell_y + self._direction.dy):
            return

        center_x, center_y = self._center_of((cell_x, cell_y))
        if self._direction in (Direction.LEFT, Direction.RIGHT):
            self._x = center_x
        else:
            self._y = center_y

        self._direction = Direction((self._direction + 1 + int(self._rng.integers(3))) % 4)

    def __repr__(self):
        return (f"Pursuer(kind={self._kind.value}, cell={self.cell}, "
                f"direction={self._direction.name}, scatter={self._scatter_mode})")
