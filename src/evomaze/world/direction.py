"""
Direction Module

The four cardinal directions in which agents and pursuers move and sense.
Their integer values are the indices of the Brain's output neurons and of the
per-direction groups of the sensor vector, in the order up, right, down, left.
Screen coordinates are used: y grows downwards.

Classes:
    Direction: Enumeration of the cardinal directions
"""

from enum import IntEnum

class Direction(IntEnum):
    """
    Cardinal directions, in clockwise order starting from up.
    """
    UP    = 0
    RIGHT = 1
    DOWN  = 2
    LEFT  = 3

    @property
    def dx(self) -> int:
        return _OFFSETS[self][0]

    @property
    def dy(self) -> int:
        return _OFFSETS[self][1]

    @property
    def opposite(self) -> 'Direction':
        return Direction((self + 2) % 4)

_OFFSETS = {
    Direction.UP   : ( 0, -1),
    Direction.RIGHT: ( 1,  0),
    Direction.DOWN : ( 0,  1),
    Direction.LEFT : (-1,  0),
    }
