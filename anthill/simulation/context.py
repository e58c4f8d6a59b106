"""SimulationContext — the shared state handed to per-tick updates.

Entities never look up a global game object.  The engine builds one
context and passes it explicitly to every update that needs to see the
colony, enemies, map or resource pool.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from anthill.colony.colony import Colony
    from anthill.effects.particles import ParticleSystem
    from anthill.enemies.enemy import Enemy
    from anthill.progression.resources import Resources, Upgrades
    from anthill.world.tunnel_map import TunnelMap


@dataclass
class SimulationContext:
    """Mutable world state shared by all subsystems for one game.

    Attributes:
        resources: The resource pool.
        upgrades: Current upgrade levels.
        colony: The player's ants.
        tunnel_map: Dirt/tunnel grid.
        particles: Visual effects.
        arena_width: Arena width in world units.
        arena_height: Arena height in world units.
        enemies: Enemies currently in the arena.
    """

    resources: Resources
    upgrades: Upgrades
    colony: Colony
    tunnel_map: TunnelMap
    particles: ParticleSystem
    arena_width: float
    arena_height: float
    enemies: list[Enemy] = field(default_factory=list)

    def sync_ant_count(self) -> None:
        """Force the ant counter to match the colony population."""
        self.resources.ants = len(self.colony.ants)
