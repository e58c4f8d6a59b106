"""Colony — the player's collection of ants.

The colony owns the ant list.  Every new ant goes through it (the
founding ant, food-paid spawns, auto-spawns and code rewards) and dead
ants are taken out through it, so the population count stays in one
place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from anthill.colony.ant import Ant
from anthill.colony.rarity import Rarity, random_ant_rarity

if TYPE_CHECKING:
    from numpy.random import Generator

    from anthill.progression.resources import Upgrades
    from anthill.simulation.context import SimulationContext

SPAWN_SCATTER = 50.0


@dataclass
class Colony:
    """The set of living ants around a nest point.

    Attributes:
        nest_x: X coordinate new ants gather around.
        nest_y: Y coordinate new ants gather around.
        ants: Living ant population, in spawn order.
    """

    nest_x: float
    nest_y: float
    ants: list[Ant] = field(default_factory=list)

    @classmethod
    def founded(cls, nest_x: float, nest_y: float) -> Colony:
        """Create a colony holding a single common ant at the nest."""
        colony = cls(nest_x=nest_x, nest_y=nest_y)
        colony.ants.append(Ant(x=nest_x, y=nest_y))
        return colony

    def __len__(self) -> int:
        return len(self.ants)

    def spawn_ant(
        self,
        rng: Generator,
        upgrades: Upgrades | None = None,
        rarity: Rarity | None = None,
    ) -> Ant:
        """Create a new ant scattered around the nest.

        Args:
            rng: Seeded random generator.
            upgrades: If given, the new ant's stats are derived from
                these levels straight away.
            rarity: Fixed rarity; rolled from the spawn table if None.

        Returns:
            The newly created Ant (also appended to ``self.ants``).
        """
        if rarity is None:
            rarity = random_ant_rarity(rng)
        ant = Ant(
            x=self.nest_x + float(rng.uniform(-SPAWN_SCATTER, SPAWN_SCATTER)),
            y=self.nest_y + float(rng.uniform(-SPAWN_SCATTER, SPAWN_SCATTER)),
            rarity=rarity,
        )
        if upgrades is not None:
            ant.recompute_stats(upgrades)
        self.ants.append(ant)
        return ant

    def add_ant(self, ant: Ant) -> Ant:
        """Adopt an ant built elsewhere (e.g. a special code reward)."""
        self.ants.append(ant)
        return ant

    def remove_ant(self, ant: Ant) -> bool:
        """Remove an ant; returns False if it was not a member."""
        if ant not in self.ants:
            return False
        self.ants.remove(ant)
        return True

    def update(self, ctx: SimulationContext, rng: Generator) -> int:
        """Advance every ant one tick.

        Returns:
            Total food found by the colony this tick.
        """
        return sum(ant.update(ctx, rng) for ant in self.ants)

    def recompute_stats(self, upgrades: Upgrades) -> None:
        """Re-derive every ant's stats after an upgrade change."""
        for ant in self.ants:
            ant.recompute_stats(upgrades)

