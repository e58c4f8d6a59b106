"""ProgressionEngine — achievements, upgrade purchases, passive bonuses.

The economy that gates and rewards everything else:

1. Kill-driven counters and leveling (one level per 10 kills).
2. One-shot achievements that pay a coin bonus exactly once.
3. Upgrade purchases with exponentially growing costs; every purchase
   re-derives the stats of the whole colony.
4. Passive "auto" bonuses from owned upgrades, rolled every tick.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from anthill.progression.resources import UpgradeKind

if TYPE_CHECKING:
    from numpy.random import Generator

    from anthill.colony.ant import Ant
    from anthill.simulation.context import SimulationContext
    from anthill.simulation.messages import MessageLog

logger = logging.getLogger(__name__)

KILLS_PER_LEVEL = 10
AUTO_FOOD_CHANCE_PER_LEVEL = 0.01
AUTO_FOOD_PER_LEVEL = 0.2
AUTO_SPAWN_CHANCE_PER_LEVEL = 0.005
AUTO_SPAWN_FOOD_COST = 5


@dataclass
class Progress:
    """Monotonic progression scalars plus unlocked achievements.

    Attributes:
        level: Player level, starts at 1.
        enemies_killed: Total kills.
        total_coins_earned: Coins ever earned from kills (spending
            does not reduce it).
        game_time: Elapsed unpaused seconds.
        achievements: Unlocked achievement ids mapped to True.
    """

    level: int = 1
    enemies_killed: int = 0
    total_coins_earned: int = 0
    game_time: float = 0.0
    achievements: dict[str, bool] = field(default_factory=dict)

    def record_kill(self, coins: int) -> bool:
        """Count a kill and its coins.

        Returns:
            True if this kill pushed the player up a level.
        """
        self.enemies_killed += 1
        self.total_coins_earned += coins
        if self.enemies_killed % KILLS_PER_LEVEL == 0:
            self.level += 1
            return True
        return False

    def is_unlocked(self, achievement_id: str) -> bool:
        return self.achievements.get(achievement_id, False)


@dataclass(frozen=True)
class Achievement:
    """A one-shot award for a counter crossing a threshold."""

    id: str
    title: str
    bonus: int
    threshold: float
    metric: Callable[[Progress], float]

    def is_met(self, progress: Progress) -> bool:
        return self.metric(progress) >= self.threshold


# hydratedColony is awarded for elapsed time alone, whatever the water level.
ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement("firstKill", "First Blood", 100, 1, lambda p: p.enemies_killed),
    Achievement("centurion", "Centurion", 500, 100, lambda p: p.enemies_killed),
    Achievement(
        "millionaire",
        "Millionaire",
        10_000,
        1_000_000,
        lambda p: p.total_coins_earned,
    ),
    Achievement("hydratedColony", "Hydrated Colony", 2000, 300, lambda p: p.game_time),
    Achievement("hourPlayed", "Dedicated Player", 1000, 3600, lambda p: p.game_time),
)


class ProgressionEngine:
    """Applies economy rules to a simulation context.

    Attributes:
        progress: Counters and achievements for the current game.
        messages: Player message feed, if any.
    """

    def __init__(
        self,
        progress: Progress | None = None,
        messages: MessageLog | None = None,
    ) -> None:
        self.progress = progress if progress is not None else Progress()
        self.messages = messages

    # -- Achievements --

    def check_achievements(self, ctx: SimulationContext) -> list[Achievement]:
        """Unlock every achievement whose threshold is now met.

        Already-unlocked achievements are skipped, so each bonus is
        paid at most once per game.

        Returns:
            Achievements unlocked by this call.
        """
        unlocked = []
        for achievement in ACHIEVEMENTS:
            if self.progress.is_unlocked(achievement.id):
                continue
            if achievement.is_met(self.progress):
                self.progress.achievements[achievement.id] = True
                ctx.resources.coins += achievement.bonus
                self._post(
                    f"Achievement Unlocked: {achievement.title}! "
                    f"+{achievement.bonus} coins",
                )
                unlocked.append(achievement)
        return unlocked

    def unlock(self, achievement_id: str) -> bool:
        """Set an achievement flag directly (no bonus).

        Returns:
            False if it was already unlocked.
        """
        if self.progress.is_unlocked(achievement_id):
            return False
        self.progress.achievements[achievement_id] = True
        return True

    # -- Upgrades --

    def cost(self, ctx: SimulationContext, kind: UpgradeKind) -> float:
        return ctx.upgrades.cost(kind)

    def purchase(self, ctx: SimulationContext, kind: UpgradeKind) -> bool:
        """Buy one level of ``kind`` if the player can afford it.

        Returns:
            True if the level was bought.
        """
        cost = self.cost(ctx, kind)
        if not ctx.resources.spend("coins", cost):
            return False
        level = ctx.upgrades.increment(kind)
        ctx.colony.recompute_stats(ctx.upgrades)
        self._post(f"{kind.value} upgraded to level {level}!")
        return True

    def purchase_all_affordable(self, ctx: SimulationContext) -> list[UpgradeKind]:
        """Try one level of every upgrade kind, in declaration order.

        Returns:
            The kinds that were bought.
        """
        bought = [kind for kind in UpgradeKind if self.purchase(ctx, kind)]
        if not bought:
            self._post("Not enough coins for any upgrade.")
        return bought

    def grant_upgrade(
        self,
        ctx: SimulationContext,
        kind: UpgradeKind,
        levels: int = 1,
    ) -> int:
        """Add free levels of ``kind`` and re-derive colony stats."""
        level = ctx.upgrades.increment(kind, levels)
        ctx.colony.recompute_stats(ctx.upgrades)
        return level

    def max_ants(self, ctx: SimulationContext) -> int:
        """Population cap: ``5 + 2 * level + 3 * colonySize``."""
        return 5 + 2 * self.progress.level + 3 * ctx.upgrades[UpgradeKind.COLONY_SIZE]

    # -- Passive bonuses --

    def apply_passive(self, ctx: SimulationContext, rng: Generator) -> Ant | None:
        """Roll the auto-gather and auto-spawn bonuses for this tick.

        Auto-gather: with ``1% * gatherEfficiency`` chance, add
        ``floor(0.2 * gatherEfficiency)`` food.  Auto-spawn: with
        ``0.5% * colonySize`` chance and at least 5 food, pay 5 food
        for one new ant of rolled rarity.

        Returns:
            The auto-spawned ant, if any.
        """
        gather = ctx.upgrades[UpgradeKind.GATHER_EFFICIENCY]
        if gather > 0 and rng.random() < AUTO_FOOD_CHANCE_PER_LEVEL * gather:
            ctx.resources.food += math.floor(gather * AUTO_FOOD_PER_LEVEL)

        size = ctx.upgrades[UpgradeKind.COLONY_SIZE]
        if (
            size > 0
            and rng.random() < AUTO_SPAWN_CHANCE_PER_LEVEL * size
            and ctx.resources.spend("food", AUTO_SPAWN_FOOD_COST)
        ):
            ant = ctx.colony.spawn_ant(rng, ctx.upgrades)
            ctx.resources.ants += 1
            self._post(
                f"Auto-spawned {ant.rarity.value} ant! "
                f"({ctx.resources.ants} total)",
            )
            return ant
        return None

    def _post(self, message: str) -> None:
        if self.messages is not None:
            self.messages.post(message)
        else:
            logger.debug(message)
