"""Snapshot — read-only view of the game for a presentation layer.

A renderer draws from a ``Snapshot`` alone; it never needs to reach
into live simulation objects.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class EntityView:
    """Position and look of one ant, enemy or particle."""

    x: float
    y: float
    color: str
    radius: float
    rarity: str | None = None
    health_ratio: float = 1.0
    shiny: bool = False
    boss: str | None = None


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer or HUD may show for the current tick.

    Attributes:
        resources: Resource counters by name.
        upgrades: Upgrade levels by kind name.
        ants: Visible ants.
        enemies: Enemies in the arena.
        particles: Live effect particles.
        grid: Copy of the tunnel grid (1 dirt, 0 tunnel).
        cell_size: World units per grid cell.
        level: Player level.
        enemies_killed: Total kills.
        game_time: Elapsed seconds.
        paused: Whether the simulation is paused.
        tunnels_dug: Dig actions used so far.
        max_tunnels: Dig actions allowed.
        max_ants: Current population cap.
        messages: Most recent player messages, oldest first.
    """

    resources: dict[str, float]
    upgrades: dict[str, int]
    ants: tuple[EntityView, ...]
    enemies: tuple[EntityView, ...]
    particles: tuple[EntityView, ...]
    grid: NDArray[np.uint8]
    cell_size: float
    level: int
    enemies_killed: int
    game_time: float
    paused: bool
    tunnels_dug: int
    max_tunnels: int
    max_ants: int
    messages: tuple[str, ...]

    def __post_init__(self) -> None:
        self.grid.setflags(write=False)
