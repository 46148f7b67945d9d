"""
Sensor Module

This module computes what an Agent sees. Looking along each of the four
cardinal directions, up to a fixed vision range, the agent records how far away
the first wall, the first dot, the first bonus item and the first pursuer are.
A distance d (1 <= d <= range) becomes the feature 1 - d/range, so an object in
the adjacent cell gives a value close to 1 and nothing in sight gives 0.

The scan along a direction stops at the first wall (or at the edge of the grid);
dots, bonus items and pursuers behind a wall are not seen.

Functions:
    sense_state: Build the sensor vector for an agent position
"""

import numpy as np
from typing import Iterable

from evomaze.world import Direction, Grid

# Features recorded for each direction, in sensor vector order
FEATURES_PER_DIRECTION = 4
SENSOR_SIZE            = FEATURES_PER_DIRECTION * len(Direction)

def sense_state(cell_x       : int,
                cell_y       : int,
                grid         : Grid,
                pursuer_cells: Iterable[tuple[int, int]],
                vision_range : int) -> np.ndarray:
    """
    Build the sensor vector of an agent standing in cell (cell_x, cell_y).

    Parameters:
        cell_x, cell_y: The cell the agent is in
        grid:           The maze
        pursuer_cells:  The cells currently occupied by pursuers
        vision_range:   How many cells the agent sees in each direction

    Returns:
        Array of 16 values in [0, 1): for each direction in the order
        up, right, down, left the features (wall, dot, bonus, pursuer)
    """
    occupied = set(pursuer_cells)
    state    = np.zeros(SENSOR_SIZE, dtype=np.float64)

    for direction in Direction:
        wall_distance = dot_distance = bonus_distance = pursuer_distance = None

        for step in range(1, vision_range + 1):
            x = cell_x + direction.dx * step
            y = cell_y + direction.dy * step

            # The edge of the grid is seen as a wall
            if grid.is_wall(x, y):
                wall_distance = step
                break

            if dot_distance is None and grid.has_dot(x, y):
                dot_distance = step
            if bonus_distance is None and grid.has_bonus(x, y):
                bonus_distance = step
            if pursuer_distance is None and (x, y) in occupied:
                pursuer_distance = step

        offset = direction * FEATURES_PER_DIRECTION
        for i, distance in enumerate((wall_distance, dot_distance, bonus_distance, pursuer_distance)):
            if distance is not None:
                state[offset + i] = 1.0 - distance / vision_range

    return state
