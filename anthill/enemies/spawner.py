"""Enemy spawning and descent.

Each tick at most one enemy appears.  Regular enemies are rolled first;
only if that roll misses is a small boss tried, and only if that misses
a large boss.  Spawn chances grow slowly with the player level.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from anthill.colony.rarity import random_enemy_rarity
from anthill.enemies.enemy import BossSize, Enemy

if TYPE_CHECKING:
    from numpy.random import Generator


def enemy_chance(level: int) -> float:
    """Per-tick chance of a regular enemy: ``0.005 * ln(level + 1)``."""
    return 0.005 * math.log(level + 1)


def small_boss_chance(level: int) -> float:
    """Per-tick chance of a small boss: ``0.0008 * sqrt(level)``."""
    return 0.0008 * math.sqrt(level)


def large_boss_chance(level: int) -> float:
    """Per-tick chance of a large boss: ``0.00015 * ln(level + 1)``."""
    return 0.00015 * math.log(level + 1)


def roll_spawn(level: int, arena_width: float, rng: Generator) -> Enemy | None:
    """Roll for a new enemy at the top edge of the arena.

    Args:
        level: Current player level.
        arena_width: Arena width; the spawn column is uniform over it.
        rng: Seeded random generator.

    Returns:
        The spawned enemy, or None if every roll missed.
    """
    if rng.random() < enemy_chance(level):
        rarity = random_enemy_rarity(level, rng)
        return Enemy.of_rarity(float(rng.random() * arena_width), 0.0, rarity)
    if rng.random() < small_boss_chance(level):
        return Enemy.boss_of_size(
            float(rng.random() * arena_width),
            0.0,
            BossSize.SMALL,
        )
    if rng.random() < large_boss_chance(level):
        return Enemy.boss_of_size(
            float(rng.random() * arena_width),
            0.0,
            BossSize.LARGE,
        )
    return None


def advance_enemies(enemies: list[Enemy], arena_height: float) -> list[Enemy]:
    """Move every enemy down and drop those past the bottom edge.

    Enemies leaving the arena vanish without penalty.

    Returns:
        The enemies still inside the arena.
    """
    for enemy in enemies:
        enemy.update()
    return [e for e in enemies if e.y < arena_height]
