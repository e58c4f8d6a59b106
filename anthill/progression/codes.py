"""Redeemable codes — fixed rewards keyed by a case-insensitive string.

Each code maps to an effect that mutates the simulation context and
returns the message shown to the player.  Unknown codes change nothing.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from anthill.colony.ant import Ant
from anthill.colony.rarity import Rarity
from anthill.progression.resources import UpgradeKind

if TYPE_CHECKING:
    from numpy.random import Generator

    from anthill.progression.engine import ProgressionEngine
    from anthill.simulation.context import SimulationContext

CodeEffect = Callable[["SimulationContext", "ProgressionEngine", "Generator"], str]

PINK = "#FF1493"


def normalise(code: str) -> str:
    """Trim and lower-case a code as typed by the player."""
    return code.strip().lower()


def _grant(
    coins: int = 0,
    food: int = 0,
    water: float = 0,
    dirt: int = 0,
) -> CodeEffect:
    def effect(
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> str:
        ctx.resources.coins += coins
        ctx.resources.food += food
        ctx.resources.water += water
        ctx.resources.dirt += dirt
        gained = [
            f"+{amount} {name}"
            for name, amount in (
                ("coins", coins),
                ("food", food),
                ("water", water),
                ("dirt", dirt),
            )
            if amount
        ]
        return f"Code redeemed! {', '.join(gained)}!"

    return effect


def _upgrade(kind: UpgradeKind) -> CodeEffect:
    def effect(
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> str:
        level = progression.grant_upgrade(ctx, kind)
        return f"Code redeemed! {kind.value} upgraded to level {level}!"

    return effect


def _special_ant(ctx: SimulationContext, ant: Ant) -> Ant:
    ant.recompute_stats(ctx.upgrades)
    ctx.colony.add_ant(ant)
    ctx.resources.ants += 1
    return ant


def _rarity_ant(rarity: Rarity) -> CodeEffect:
    def effect(
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> str:
        colony = ctx.colony
        _special_ant(ctx, Ant(x=colony.nest_x, y=colony.nest_y, rarity=rarity))
        return f"Code redeemed! {rarity.value.capitalize()} ant spawned!"

    return effect


def _pink(
    ctx: SimulationContext,
    progression: ProgressionEngine,
    rng: Generator,
) -> str:
    colony = ctx.colony
    _special_ant(
        ctx,
        Ant(
            x=colony.nest_x,
            y=colony.nest_y,
            color=PINK,
            invincible=True,
            shiny=True,
        ),
    )
    return "Code redeemed! Special bright pink invincible ant spawned!"


def _ant_army(
    ctx: SimulationContext,
    progression: ProgressionEngine,
    rng: Generator,
) -> str:
    spawned: list[str] = []
    for _ in range(5):
        ant = ctx.colony.spawn_ant(rng, ctx.upgrades)
        ctx.resources.ants += 1
        spawned.append(ant.rarity.value)
    return f"Code redeemed! Ants spawned: {', '.join(spawned)}!"


def _invincible_army(
    ctx: SimulationContext,
    progression: ProgressionEngine,
    rng: Generator,
) -> str:
    for ant in ctx.colony.ants:
        ant.invincible = True
    return "Code redeemed! All ants are now invincible!"


def _level_up(
    ctx: SimulationContext,
    progression: ProgressionEngine,
    rng: Generator,
) -> str:
    progression.progress.level += 5
    return f"Code redeemed! Level increased to {progression.progress.level}!"


def _achievement_hunter(
    ctx: SimulationContext,
    progression: ProgressionEngine,
    rng: Generator,
) -> str:
    ctx.resources.coins += 5000
    progression.unlock("achievementHunter")
    return "Code redeemed! Achievement Hunter unlocked! +5000 coins!"


def _ultimate(
    ctx: SimulationContext,
    progression: ProgressionEngine,
    rng: Generator,
) -> str:
    _grant(coins=10_000, food=1000, water=500, dirt=200)(ctx, progression, rng)
    for kind in UpgradeKind:
        ctx.upgrades.increment(kind, 2)
    ctx.colony.recompute_stats(ctx.upgrades)
    return "Code redeemed! Ultimate reward: resources and upgrades!"


CODES: dict[str, CodeEffect] = {
    "pink": _pink,
    "bonuscoins": _grant(coins=1000),
    "foodboost": _grant(food=100),
    "waterwell": _grant(water=50),
    "antarmy": _ant_army,
    "dirtbag": _grant(dirt=50),
    "speedup": _upgrade(UpgradeKind.ANT_SPEED),
    "healthboost": _upgrade(UpgradeKind.ANT_HEALTH),
    "damageup": _upgrade(UpgradeKind.ANT_DAMAGE),
    "mythicant": _rarity_ant(Rarity.MYTHIC),
    "bosskiller": _grant(coins=1000),
    "colonyboost": _upgrade(UpgradeKind.COLONY_SIZE),
    "gatherefficiency": _upgrade(UpgradeKind.GATHER_EFFICIENCY),
    "waterboost": _upgrade(UpgradeKind.WATER_EFFICIENCY),
    "legendaryspawn": _rarity_ant(Rarity.LEGENDARY),
    "maxresources": _grant(coins=5000, food=500, water=200, dirt=100),
    "invinciblearmy": _invincible_army,
    "levelup": _level_up,
    "achievementhunter": _achievement_hunter,
    "ultimatecode": _ultimate,
}


def redeem(
    code: str,
    ctx: SimulationContext,
    progression: ProgressionEngine,
    rng: Generator,
) -> str | None:
    """Apply the reward for ``code``.

    Args:
        code: Code as typed; surrounding whitespace and case are ignored.
        ctx: Shared simulation state.
        progression: Progression engine (levels, achievements, upgrades).
        rng: Seeded random generator.

    Returns:
        The player message, or None if the code is unknown.
    """
    effect = CODES.get(normalise(code))
    if effect is None:
        return None
    return effect(ctx, progression, rng)
