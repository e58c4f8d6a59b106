"""TunnelMap — the dirt/tunnel grid beneath the arena.

The grid is a fixed-size NumPy array of ``uint8`` where ``1`` is solid
dirt and ``0`` is a dug tunnel.  ``cell_size`` maps grid cells to world
(pixel) coordinates so entities can ask which tile they stand on.
Tunnels are only ever added; nothing fills them back in.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from numpy.random import Generator

DIRT = 1
TUNNEL = 0
TUNNEL_LENGTH = 5


@dataclass
class TunnelMap:
    """A ``width`` x ``height`` grid of dirt and tunnel cells.

    Attributes:
        width: Number of grid columns.
        height: Number of grid rows.
        cell_size: World units per grid cell.
        grid: Cell values indexed as ``grid[y, x]``.
    """

    width: int
    height: int
    cell_size: float = 16.0
    grid: NDArray[np.uint8] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Start with every cell solid dirt."""
        self.grid = np.full((self.height, self.width), DIRT, dtype=np.uint8)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> int:
        """Return the value of grid cell ``(x, y)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.in_bounds(x, y):
            msg = f"({x}, {y}) out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        return int(self.grid[y, x])

    def world_to_grid(self, wx: float, wy: float) -> tuple[int, int]:
        """Convert world coordinates to the containing grid cell."""
        return math.floor(wx / self.cell_size), math.floor(wy / self.cell_size)

    def is_tunnel_at(self, wx: float, wy: float) -> bool:
        """Return True if the world point lies on a tunnel cell.

        Points outside the grid are never tunnels.
        """
        gx, gy = self.world_to_grid(wx, wy)
        return self.in_bounds(gx, gy) and self.grid[gy, gx] == TUNNEL

    @property
    def tunnel_count(self) -> int:
        """Number of dug cells."""
        return int(np.count_nonzero(self.grid == TUNNEL))

    def dig_tunnel(self, x: int, y: int, length: int, rng: Generator) -> None:
        """Carve a short random walk starting at ``(x, y)``.

        Each in-bounds step marks the current cell as tunnel, then
        drifts by an independent delta in ``{-1, 0, 1}`` per axis.
        Revisiting a cell is harmless.  Once the walk leaves the grid
        the remaining steps are skipped: the coordinate no longer
        drifts, so nothing further is carved.

        Args:
            x: Starting column.
            y: Starting row.
            length: Number of walk steps.
            rng: Seeded random generator.
        """
        for _ in range(length):
            if self.in_bounds(x, y):
                self.grid[y, x] = TUNNEL
                x += int(rng.integers(-1, 2))
                y += int(rng.integers(-1, 2))

    def dig_random_tunnel(self, rng: Generator) -> None:
        """Dig a tunnel of fixed length from a uniform-random cell.

        The caller enforces any limit on how many tunnels may be dug.
        """
        x = int(rng.integers(0, self.width))
        y = int(rng.integers(0, self.height))
        self.dig_tunnel(x, y, TUNNEL_LENGTH, rng)
