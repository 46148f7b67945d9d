"""
Agent Module

This module implements the learning-controlled character of an Episode. At
every simulation step the agent senses its surroundings, feeds the sensor
vector to its Brain, moves in the direction of the strongest output, and
updates its score.

Scoring rules, applied every step in this order:
    1. standing still for longer than a grace period costs a penalty
       proportional to time; moving earns a small reward proportional to time
    2. revisiting the same cell too often within a short window of visited
       cells costs a fixed penalty
    3. getting closer to the nearest dot or bonus item earns a reward, moving
       away from it costs a penalty
    4. collecting a dot earns a fixed reward
    5. collecting a bonus item earns a larger reward and powers the agent up
    6. meeting a pursuer while powered up sends the pursuer home and earns a
       large reward; meeting one otherwise kills the agent, at a large penalty

Bumping into a wall also costs a small fixed penalty.

Classes:
    Agent: The character controlled by a Brain
"""

import math
import numpy as np
from collections import deque
from typing      import Sequence, TYPE_CHECKING

from evomaze.actors.pursuer import Pursuer
from evomaze.actors.sensors import sense_state
from evomaze.phenotype      import Brain
from evomaze.world          import Direction, Grid
if TYPE_CHECKING:
    from evomaze.run.config import Config

class Agent:
    """
    The character controlled by a Brain.

    Positions are continuous, in pixels; the cell containing a position is
    (floor(x / cell_size), floor(y / cell_size)). The agent owns its Brain
    exclusively, but only borrows the grid and the pursuers, which belong
    to the Episode.

    The agent is alive until it meets a pursuer while not powered up ('die')
    or the Episode runs out of time ('expire'); both are final.

    Public Properties:
        x, y:        Current position (pixels)
        cell:        The cell containing the current position
        direction:   Direction chosen at the last step (None before the first step)
        brain:       The Brain controlling the agent
        powered_up:  Whether the agent currently defeats pursuers on contact
        power_timer: Seconds of powered-up time left

    Public Methods:
        update(delta): Advance the agent by one simulation step of 'delta' seconds
        get_score():   Cumulative score (may be negative)
        is_alive():    Whether the agent is still alive
        die():         Kill the agent, applying the death penalty
        expire():      End the agent's life without penalty (time ran out)
    """

    def __init__(self,
                 cell_x   : int,
                 cell_y   : int,
                 cell_size: float,
                 grid     : Grid,
                 pursuers : Sequence[Pursuer],
                 brain    : Brain,
                 config   : 'Config'):
        """
        Create an agent at the centre of cell (cell_x, cell_y).

        Parameters:
            cell_x:    Column of the spawn cell
            cell_y:    Row of the spawn cell
            cell_size: Side of a cell, in pixels
            grid:      The maze the agent moves on
            pursuers:  The opponents sharing the maze
            brain:     The Brain controlling the agent
            config:    Stores configuration parameters
        """
        if brain.layer_sizes[-1] != len(Direction):
            raise ValueError(f"The Brain must have {len(Direction)} outputs, "
                             f"got {brain.layer_sizes[-1]}")

        self._grid     : Grid              = grid
        self._pursuers : Sequence[Pursuer] = pursuers
        self._brain    : Brain             = brain
        self._config   : 'Config'          = config
        self._cell_size: float             = cell_size

        self._x        : float            = (cell_x + 0.5) * cell_size
        self._y        : float            = (cell_y + 0.5) * cell_size
        self._direction: Direction | None = None

        self._score: float = 0.0
        self._alive: bool  = True

        self._powered_up : bool  = False
        self._power_timer: float = 0.0

        self._stationary_time      : float                  = 0.0
        self._visited              : deque[tuple[int, int]] = deque(maxlen=config.loop_window)
        self._last_distance_to_goal: float                  = math.inf

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def cell(self) -> tuple[int, int]:
        return self._cell_of(self._x, self._y)

    @property
    def direction(self) -> Direction | None:
        return self._direction

    @property
    def brain(self) -> Brain:
        return self._brain

    @property
    def powered_up(self) -> bool:
        return self._powered_up

    @property
    def power_timer(self) -> float:
        return self._power_timer

    def get_score(self) -> float:
        return self._score

    def is_alive(self) -> bool:
        return self._alive

    def sense(self) -> np.ndarray:
        """
        Return the current sensor vector (see 'evomaze.actors.sensors').
        """
        cell_x, cell_y = self.cell
        pursuer_cells  = [pursuer.cell for pursuer in self._pursuers]
        return sense_state(cell_x, cell_y, self._grid, pursuer_cells, self._config.vision_range)

    def decide(self, state: np.ndarray) -> Direction:
        """
        Run the Brain on a sensor vector and return the direction of the
        strongest output (the first one wins ties).
        """
        outputs = self._brain.infer(state)
        return Direction(int(np.argmax(outputs)))

    def update(self, delta: float) -> None:
        """
        Advance the agent by one simulation step.

        Parameters:
            delta: Length of the step, in seconds
        """
        if not self._alive:
            return

        previous_x, previous_y = self._x, self._y

        if self._powered_up:
            self._power_timer -= delta
            if self._power_timer <= 0:
                self._powered_up  = False
                self._power_timer = 0.0

        self._direction = self.decide(self.sense())
        self._move(self._direction)

        self._score_motion(previous_x, previous_y, delta)
        self._score_loops()
        self._score_goal_distance()
        self._collect_items()
        self._check_pursuer_collisions()

    def die(self) -> None:
        """
        Kill the agent. The death penalty is applied only once.
        """
        if self._alive:
            self._alive  = False
            self._score -= self._config.death_penalty

    def expire(self) -> None:
        """
        End the agent's life because its Episode ran out of time.
        """
        self._alive = False

    def _cell_of(self, x: float, y: float) -> tuple[int, int]:
        return int(x // self._cell_size), int(y // self._cell_size)

    def _snap_to_cell_center(self, cell: tuple[int, int]) -> None:
        self._x = (cell[0] + 0.5) * self._cell_size
        self._y = (cell[1] + 0.5) * self._cell_size

    def _move(self, direction: Direction) -> None:
        """
        Try to move one step in 'direction'.

        The move is rejected, and the agent snapped back to the centre of its
        cell, if the destination cell is a wall (which also costs a penalty) or
        if any corner of the agent's square footprint would overlap a wall.
        """
        current_cell = self.cell
        speed = self._config.agent_speed * self._cell_size
        new_x = self._x + direction.dx * speed
        new_y = self._y + direction.dy * speed

        if self._grid.is_wall(*self._cell_of(new_x, new_y)):
            self._snap_to_cell_center(current_cell)
            self._score -= self._config.wall_bump_penalty
            return

        radius  = self._config.collision_radius * self._cell_size
        corners = ((new_x - radius, new_y - radius),
                   (new_x + radius, new_y - radius),
                   (new_x - radius, new_y + radius),
                   (new_x + radius, new_y + radius))
        if any(self._grid.is_wall(*self._cell_of(cx, cy)) for cx, cy in corners):
            self._snap_to_cell_center(current_cell)
            return

        self._x, self._y = new_x, new_y

    def _score_motion(self, previous_x: float, previous_y: float, delta: float) -> None:
        epsilon = self._config.stationary_epsilon
        if abs(self._x - previous_x) < epsilon and abs(self._y - previous_y) < epsilon:
            self._stationary_time += delta
            if self._stationary_time > self._config.idle_grace_period:
                self._score -= self._config.idle_penalty_rate * delta
        else:
            self._stationary_time = 0.0
            self._score += self._config.movement_reward_rate * delta

    def _score_loops(self) -> None:
        cell = self.cell
        self._visited.append(cell)
        if self._visited.count(cell) >= self._config.loop_threshold:
            self._score -= self._config.loop_penalty

    def _score_goal_distance(self) -> None:
        distance = self._grid.nearest_goal_distance(*self.cell)
        if distance < self._last_distance_to_goal:
            self._score += self._config.approach_reward
        elif distance > self._last_distance_to_goal + self._config.distance_tolerance:
            self._score -= self._config.retreat_penalty
        self._last_distance_to_goal = distance

    def _collect_items(self) -> None:
        cell_x, cell_y = self.cell
        if self._grid.collect_dot(cell_x, cell_y):
            self._score += self._config.dot_reward
        if self._grid.collect_bonus(cell_x, cell_y):
            self._score += self._config.bonus_reward
            self._powered_up  = True
            self._power_timer = self._config.power_duration

    def _check_pursuer_collisions(self) -> None:
        cell = self.cell
        for pursuer in self._pursuers:
            if pursuer.cell != cell:
                continue
            if self._powered_up:
                pursuer.reset()
                self._score += self._config.pursuer_reward
            else:
                self.die()
                break

    def __repr__(self):
        return (f"Agent(cell={self.cell}, score={self._score:.2f}, "
                f"alive={self._alive}, powered_up={self._powered_up})")
