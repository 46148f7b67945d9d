"""
World Package

This package provides the maze an Episode is played on.

Exported:
    Direction: The four cardinal directions (up, right, down, left)
    Cell:      Snapshot of one cell of the maze
    Grid:      The maze, with generation and connectivity guarantees
"""

from evomaze.world.direction import Direction
from evomaze.world.grid      import Cell, Grid

__all__ = [
    'Direction',
    'Cell',
    'Grid',
]
