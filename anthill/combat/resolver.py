"""CombatResolver — ant/enemy collisions, deaths, kill rewards.

Runs once per tick after everything has moved.  Every (ant, enemy)
pair inside a 20-unit box trades damage simultaneously; the dead are
removed on the spot and enemy kills pay out food, dirt and coins.
A separate dehydration pass hurts every vulnerable ant while the
water supply is empty.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from anthill.colony.rarity import Specialty
from anthill.effects.particles import COIN_COLOR
from anthill.progression.resources import UpgradeKind

if TYPE_CHECKING:
    from numpy.random import Generator

    from anthill.colony.ant import Ant
    from anthill.enemies.enemy import Enemy
    from anthill.progression.engine import Progress
    from anthill.simulation.context import SimulationContext
    from anthill.simulation.messages import MessageLog

logger = logging.getLogger(__name__)

COLLISION_RANGE = 20.0
WARRIOR_DAMAGE_FACTOR = 1.5
REDUCTION_PER_DAMAGE_LEVEL = 0.1
MAX_DAMAGE_REDUCTION = 0.8
COIN_BONUS_PER_SPEED_LEVEL = 0.2
KILL_FOOD = 2
KILL_DIRT = 3
DEHYDRATION_DAMAGE = 1.0


def is_colliding(ax: float, ay: float, bx: float, by: float) -> bool:
    """Axis-aligned proximity test used as the collision check."""
    return abs(ax - bx) < COLLISION_RANGE and abs(ay - by) < COLLISION_RANGE


def damage_reduction(damage_level: int) -> float:
    """Fraction of enemy damage absorbed: ``min(0.8, 0.1 * level)``."""
    return min(MAX_DAMAGE_REDUCTION, damage_level * REDUCTION_PER_DAMAGE_LEVEL)


def kill_reward(enemy: Enemy, ant: Ant, speed_level: int) -> int:
    """Coins for ``ant`` killing ``enemy``, floored to an integer."""
    bonus = 1 + speed_level * COIN_BONUS_PER_SPEED_LEVEL
    return math.floor(enemy.base_coins() * ant.coin_multiplier * bonus)


@dataclass
class Kill:
    """Record of one enemy death."""

    enemy: Enemy
    ant: Ant
    coins: int


@dataclass
class CombatReport:
    """What happened during one resolution pass.

    Attributes:
        kills: Enemies killed, with the ant credited and coins paid.
        ant_deaths: Ants killed in combat.
        dehydrated: Ants killed by dehydration.
        levels_gained: Levels gained from kills this pass.
    """

    kills: list[Kill] = field(default_factory=list)
    ant_deaths: list[Ant] = field(default_factory=list)
    dehydrated: list[Ant] = field(default_factory=list)
    levels_gained: int = 0


class CombatResolver:
    """Resolves collisions and dehydration for one tick."""

    def __init__(self, messages: MessageLog | None = None) -> None:
        self.messages = messages

    def resolve(
        self,
        ctx: SimulationContext,
        progress: Progress,
        rng: Generator,
    ) -> CombatReport:
        """Run the collision pass, then the dehydration pass.

        Args:
            ctx: Shared simulation state.
            progress: Level and kill counters, updated in place.
            rng: Seeded random generator (for effect particles).

        Returns:
            A report of kills and deaths.
        """
        report = CombatReport()
        self._resolve_collisions(ctx, progress, rng, report)
        self._dehydrate(ctx, report)
        return report

    def _resolve_collisions(
        self,
        ctx: SimulationContext,
        progress: Progress,
        rng: Generator,
        report: CombatReport,
    ) -> None:
        upgrades = ctx.upgrades
        reduction = damage_reduction(upgrades[UpgradeKind.ANT_DAMAGE])
        speed_level = upgrades[UpgradeKind.ANT_SPEED]

        for ant in list(ctx.colony.ants):
            for enemy in list(ctx.enemies):
                if not is_colliding(ant.x, ant.y, enemy.x, enemy.y):
                    continue

                ant_damage = ant.damage
                if ant.specialty is Specialty.WARRIOR:
                    ant_damage *= WARRIOR_DAMAGE_FACTOR
                ant.take_damage(enemy.damage * (1 - reduction))
                enemy.health -= ant_damage

                if not ant.is_alive and ctx.colony.remove_ant(ant):
                    ctx.resources.ants -= 1
                    report.ant_deaths.append(ant)
                if not enemy.is_alive:
                    self._reward_kill(
                        ctx,
                        progress,
                        ant,
                        enemy,
                        speed_level,
                        rng,
                        report,
                    )
                if not ant.is_alive:
                    break

    def _reward_kill(
        self,
        ctx: SimulationContext,
        progress: Progress,
        ant: Ant,
        enemy: Enemy,
        speed_level: int,
        rng: Generator,
        report: CombatReport,
    ) -> None:
        ctx.enemies.remove(enemy)
        resources = ctx.resources
        resources.food += KILL_FOOD
        resources.dirt += KILL_DIRT

        coins = kill_reward(enemy, ant, speed_level)
        resources.coins += coins
        ctx.particles.emit(enemy.x, enemy.y, COIN_COLOR, rng)
        report.kills.append(Kill(enemy=enemy, ant=ant, coins=coins))
        self._post(f"Earned {coins} coins from defeating {enemy.label} enemy!")

        if progress.record_kill(coins):
            report.levels_gained += 1
            self._post(f"Level up! Now level {progress.level}!")

    def _dehydrate(self, ctx: SimulationContext, report: CombatReport) -> None:
        """Hurt every vulnerable ant by 1 while water is at or below zero."""
        if ctx.resources.water > 0:
            return
        for ant in list(ctx.colony.ants):
            if ant.invincible:
                continue
            ant.take_damage(DEHYDRATION_DAMAGE)
            if not ant.is_alive and ctx.colony.remove_ant(ant):
                ctx.resources.ants -= 1
                report.dehydrated.append(ant)
                self._post("An ant died from dehydration!")

    def _post(self, message: str) -> None:
        if self.messages is not None:
            self.messages.post(message)
        else:
            logger.debug(message)
