"""
Grid Module

This module implements the maze on which an Episode is played: a rectangular
array of cells, each of which is a wall or open, and open cells may hold a dot
or a bonus item. The Grid generates itself from an explicit random generator
and guarantees that every open cell is reachable from the spawn cell.

Generation proceeds in the following steps:
    1. start from an all-open grid and wall off the outer ring
    2. place interior walls around anchor points sampled on a lattice, each
       anchor extended by one cell in a random direction
    3. open interior walls that are surrounded by too many other walls
    4. flood-fill from the spawn cell (the centre of the grid)
    5. carve a straight, axis-by-axis path from every unreached open cell back
       to the spawn cell
    6. open the neighbourhood of the spawn cell
    7. scatter dots on open cells
    8. place a few bonus items on open cells that have an open neighbour

Walls are never added after generation, so the reachability established by
steps 4-6 holds for the lifetime of the Grid.

Classes:
    Cell: Immutable snapshot of one cell (coordinates and flags)
    Grid: The maze
"""

import numpy as np
from collections import deque
from typing      import Iterable, NamedTuple, TYPE_CHECKING

from evomaze.world.direction import Direction
if TYPE_CHECKING:
    from evomaze.run.config import Config

class Cell(NamedTuple):
    """
    Coordinates and content of a single cell at the time it was queried.
    """
    x        : int
    y        : int
    wall     : bool
    has_dot  : bool
    has_bonus: bool

class Grid:
    """
    A rectangular maze of wall and open cells holding dots and bonus items.

    Cells are addressed by integer coordinates (x, y) with 0 <= x < width and
    0 <= y < height; y grows downwards. Queries outside the grid do not raise:
    'get_cell' returns None and 'is_wall' returns True.

    Public Properties:
        width:      Number of columns
        height:     Number of rows
        spawn_cell: The cell (x, y) where the agent starts; always open

    Public Methods:
        generate(width, height, config, rng): Create a random maze (class method)
        from_rows(rows):                      Create a maze from a text picture (class method)
        in_bounds(x, y):                      Whether (x, y) lies inside the grid
        get_cell(x, y):                       Snapshot of a cell, or None when out of bounds
        is_wall(x, y), has_dot(x, y), has_bonus(x, y)
        collect_dot(x, y), collect_bonus(x, y)
        walls(), dots(), bonuses(), open_cells()
        reachable_from(start):                Cells connected to 'start' through open cells
        is_connected():                       Whether every open cell is reachable from the spawn cell
        nearest_goal_distance(x, y):          Manhattan distance to the closest dot or bonus item
    """

    # Characters used by 'from_rows' and '__str__'
    WALL_CHAR  = '#'
    DOT_CHAR   = '.'
    BONUS_CHAR = 'o'
    OPEN_CHAR  = ' '

    def __init__(self, width: int, height: int):
        """
        Create an all-open grid with no dots and no bonus items.

        Parameters:
            width:  Number of columns (at least 3)
            height: Number of rows (at least 3)
        """
        if width < 3 or height < 3:
            raise ValueError(f"Grid must be at least 3x3, got {width}x{height}")

        self._width  : int        = width
        self._height : int        = height
        self._walls  : np.ndarray = np.zeros((height, width), dtype=bool)
        self._dots   : np.ndarray = np.zeros((height, width), dtype=bool)
        self._bonuses: np.ndarray = np.zeros((height, width), dtype=bool)

    @classmethod
    def generate(cls, width: int, height: int, config: 'Config', rng: np.random.Generator) -> 'Grid':
        """
        Generate a random maze in which every open cell is reachable from the spawn cell.

        Parameters:
            width:  Number of columns (at least 3)
            height: Number of rows (at least 3)
            config: Stores configuration parameters (wall probability, anchor
                    spacing, spawn clearing radius, dot probability, bonus count)
            rng:    Source of randomness; the same seed reproduces the same maze

        Returns:
            The new Grid
        """
        grid = cls(width, height)
        grid._add_border_walls()
        grid._place_anchor_walls(config.wall_probability, config.anchor_spacing, rng)
        grid._open_crowded_walls()
        grid._connect_to_spawn()
        grid._clear_spawn_area(config.spawn_clear_radius)
        grid._scatter_dots(config.dot_probability, rng)
        grid._place_bonuses(config.bonus_count, rng)
        return grid

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> 'Grid':
        """
        Build a grid from a text picture, one string per row.
        '#' is a wall, '.' a dot, 'o' a bonus item, ' ' an empty open cell.
        Rows shorter than the longest one are padded with walls.
        """
        rows = list(rows)
        width  = max((len(row) for row in rows), default=0)
        height = len(rows)
        grid = cls(width, height)
        for y, row in enumerate(rows):
            for x in range(width):
                char = row[x] if x < len(row) else cls.WALL_CHAR
                if char == cls.WALL_CHAR:
                    grid._walls[y, x] = True
                elif char == cls.DOT_CHAR:
                    grid._dots[y, x] = True
                elif char == cls.BONUS_CHAR:
                    grid._bonuses[y, x] = True
                elif char != cls.OPEN_CHAR:
                    raise ValueError(f"Unknown cell character '{char}' at ({x}, {y})")
        return grid

    # ------------------------------------------------------------------
    # Generation steps
    # ------------------------------------------------------------------

    def _add_border_walls(self) -> None:
        self._walls[0, :]  = True
        self._walls[-1, :] = True
        self._walls[:, 0]  = True
        self._walls[:, -1] = True

    def _place_anchor_walls(self, probability: float, spacing: int, rng: np.random.Generator) -> None:
        """
        Sample anchor points on a lattice two cells away from the border; each
        becomes a wall with the given probability and is extended by one cell in
        a random direction, as long as the extension stays off the cells next to
        the border.
        """
        spacing = max(1, spacing)
        for y in range(2, self._height - 2, spacing):
            for x in range(2, self._width - 2, spacing):
                if rng.random() >= probability:
                    continue
                self._walls[y, x] = True

                direction = Direction(int(rng.integers(4)))
                ext_x, ext_y = x + direction.dx, y + direction.dy
                if 2 <= ext_x <= self._width - 3 and 2 <= ext_y <= self._height - 3:
                    self._walls[ext_y, ext_x] = True

    def _open_crowded_walls(self) -> None:
        """
        Open interior walls with more than two orthogonal wall neighbours,
        which would otherwise grow into solid blocks.
        """
        for y in range(2, self._height - 2):
            for x in range(2, self._width - 2):
                if not self._walls[y, x]:
                    continue
                wall_count = sum(int(self._walls[y + d.dy, x + d.dx]) for d in Direction)
                if wall_count > 2:
                    self._walls[y, x] = False

    def _connect_to_spawn(self) -> None:
        """
        Flood-fill from the spawn cell, then carve a path back to the spawn
        cell from every open cell the flood did not reach. Carving clears cells
        horizontally first, then vertically; the carved cells join the reached set.
        """
        spawn_x, spawn_y = self.spawn_cell
        self._walls[spawn_y, spawn_x] = False

        reached = self.reachable_from(self.spawn_cell)
        for y in range(1, self._height - 1):
            for x in range(1, self._width - 1):
                if self._walls[y, x] or (x, y) in reached:
                    continue
                reached.update(self._carve_path(x, y, spawn_x, spawn_y))

    def _carve_path(self, x: int, y: int, target_x: int, target_y: int) -> list[tuple[int, int]]:
        carved = [(x, y)]
        self._walls[y, x] = False
        while x != target_x:
            x += 1 if x < target_x else -1
            self._walls[y, x] = False
            carved.append((x, y))
        while y != target_y:
            y += 1 if y < target_y else -1
            self._walls[y, x] = False
            carved.append((x, y))
        return carved

    def _clear_spawn_area(self, radius: int) -> None:
        spawn_x, spawn_y = self.spawn_cell
        x_lo, x_hi = max(1, spawn_x - radius), min(self._width  - 2, spawn_x + radius)
        y_lo, y_hi = max(1, spawn_y - radius), min(self._height - 2, spawn_y + radius)
        self._walls[y_lo:y_hi + 1, x_lo:x_hi + 1] = False

    def _scatter_dots(self, probability: float, rng: np.random.Generator) -> None:
        draws = rng.random((self._height, self._width))
        self._dots = ~self._walls & (draws < probability)

    def _place_bonuses(self, count: int, rng: np.random.Generator) -> None:
        """
        Place up to 'count' bonus items on distinct open cells that have at
        least one open neighbour inside the grid. A dot under a bonus item is removed.
        """
        candidates = [(x, y) for x, y in self.open_cells()
                      if any(not self.is_wall(x + d.dx, y + d.dy) for d in Direction)]
        if not candidates or count <= 0:
            return

        chosen = rng.choice(len(candidates), size=min(count, len(candidates)), replace=False)
        for index in chosen:
            x, y = candidates[int(index)]
            self._bonuses[y, x] = True
            self._dots[y, x]    = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def spawn_cell(self) -> tuple[int, int]:
        return self._width // 2, self._height // 2

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def get_cell(self, x: int, y: int) -> Cell | None:
        """
        Return a snapshot of the cell at (x, y), or None if (x, y) is outside the grid.
        """
        if not self.in_bounds(x, y):
            return None
        return Cell(x, y, bool(self._walls[y, x]), bool(self._dots[y, x]), bool(self._bonuses[y, x]))

    def is_wall(self, x: int, y: int) -> bool:
        """
        Whether (x, y) is a wall; cells outside the grid count as walls.
        """
        return not self.in_bounds(x, y) or bool(self._walls[y, x])

    def has_dot(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self._dots[y, x])

    def has_bonus(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self._bonuses[y, x])

    def collect_dot(self, x: int, y: int) -> bool:
        """
        Remove the dot at (x, y). Returns whether there was one.
        """
        if not self.has_dot(x, y):
            return False
        self._dots[y, x] = False
        return True

    def collect_bonus(self, x: int, y: int) -> bool:
        """
        Remove the bonus item at (x, y). Returns whether there was one.
        """
        if not self.has_bonus(x, y):
            return False
        self._bonuses[y, x] = False
        return True

    def _cells_where(self, mask: np.ndarray) -> list[tuple[int, int]]:
        ys, xs = np.nonzero(mask)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def walls(self) -> list[tuple[int, int]]:
        return self._cells_where(self._walls)

    def dots(self) -> list[tuple[int, int]]:
        return self._cells_where(self._dots)

    def bonuses(self) -> list[tuple[int, int]]:
        return self._cells_where(self._bonuses)

    def open_cells(self) -> list[tuple[int, int]]:
        return self._cells_where(~self._walls)

    def reachable_from(self, start: tuple[int, int]) -> set[tuple[int, int]]:
        """
        Return the set of open cells connected to 'start' through orthogonal
        moves between open cells (empty if 'start' is a wall).
        """
        if self.is_wall(*start):
            return set()

        visited = {start}
        queue   = deque([start])
        while queue:
            x, y = queue.popleft()
            for d in Direction:
                neighbour = (x + d.dx, y + d.dy)
                if neighbour not in visited and not self.is_wall(*neighbour):
                    visited.add(neighbour)
                    queue.append(neighbour)
        return visited

    def is_connected(self) -> bool:
        """
        Whether every open cell is reachable from the spawn cell.
        """
        return len(self.reachable_from(self.spawn_cell)) == int(np.count_nonzero(~self._walls))

    def nearest_goal_distance(self, x: int, y: int) -> float:
        """
        Manhattan distance from (x, y) to the nearest cell holding a dot or a
        bonus item; infinity once everything has been collected.
        """
        ys, xs = np.nonzero(self._dots | self._bonuses)
        if xs.size == 0:
            return float('inf')
        return float(np.min(np.abs(xs - x) + np.abs(ys - y)))

    def __str__(self):
        rows = []
        for y in range(self._height):
            row = []
            for x in range(self._width):
                if self._walls[y, x]:
                    row.append(self.WALL_CHAR)
                elif self._bonuses[y, x]:
                    row.append(self.BONUS_CHAR)
                elif self._dots[y, x]:
                    row.append(self.DOT_CHAR)
                else:
                    row.append(self.OPEN_CHAR)
            rows.append(''.join(row))
        return '\n'.join(rows)

    def __repr__(self):
        return (f"Grid({self._width}x{self._height}, "
                f"walls={int(self._walls.sum())}, dots={int(self._dots.sum())}, "
                f"bonuses={int(self._bonuses.sum())})")
