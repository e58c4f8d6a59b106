"""Enemy — hostile insects that descend from the top of the arena.

Regular enemies take their stats from a rarity table.  Bosses are
enemies of fixed mythic rarity that carry a ``BossSize`` tag; the size
selects a separate stat table and visual radius.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from anthill.colony.rarity import Rarity


class BossSize(Enum):
    """Boss size class."""

    SMALL = "small"
    LARGE = "large"


@dataclass(frozen=True)
class EnemyStats:
    """Immutable stat row for an enemy kind."""

    health: float
    speed: float
    damage: float
    color: str
    radius: float = 8.0


ENEMY_STATS: dict[Rarity, EnemyStats] = {
    Rarity.COMMON: EnemyStats(50, 0.5, 10, "#FF0000"),
    Rarity.RARE: EnemyStats(75, 0.7, 15, "#FFA500"),
    Rarity.EPIC: EnemyStats(100, 0.9, 20, "#FFFF00"),
    Rarity.LEGENDARY: EnemyStats(150, 1.1, 30, "#00FF00"),
    Rarity.MYTHIC: EnemyStats(250, 1.5, 50, "#0000FF"),
}

BOSS_STATS: dict[BossSize, EnemyStats] = {
    BossSize.SMALL: EnemyStats(500, 0.3, 40, "#800080", radius=12.0),
    BossSize.LARGE: EnemyStats(1000, 0.2, 80, "#000000", radius=16.0),
}

# Coins paid out for a kill, before the ant and upgrade multipliers.
BASE_COINS: dict[Rarity, int] = {
    Rarity.COMMON: 5,
    Rarity.RARE: 10,
    Rarity.EPIC: 20,
    Rarity.LEGENDARY: 50,
    Rarity.MYTHIC: 100,
}

BOSS_COINS: dict[BossSize, int] = {
    BossSize.SMALL: 200,
    BossSize.LARGE: 500,
}


@dataclass(eq=False)
class Enemy:
    """A single enemy or boss.

    Identity is the object itself; two enemies with equal stats are
    still distinct targets.

    Attributes:
        x: Horizontal position, fixed at spawn.
        y: Vertical position, grows by ``speed`` every tick.
        rarity: Rarity tier (always mythic for bosses).
        health: Remaining hit points.
        max_health: Hit points at spawn.
        speed: Downward movement per tick.
        damage: Damage dealt to a colliding ant per tick.
        color: Display colour.
        radius: Display radius.
        boss: Size class for bosses, None for regular enemies.
    """

    x: float
    y: float
    rarity: Rarity
    health: float
    max_health: float
    speed: float
    damage: float
    color: str
    radius: float = 8.0
    boss: BossSize | None = None

    @classmethod
    def of_rarity(cls, x: float, y: float, rarity: Rarity) -> Enemy:
        """Create a regular enemy with the stats of ``rarity``."""
        return cls._from_stats(x, y, rarity, ENEMY_STATS[rarity], None)

    @classmethod
    def boss_of_size(cls, x: float, y: float, size: BossSize) -> Enemy:
        """Create a mythic boss of the given size class."""
        return cls._from_stats(x, y, Rarity.MYTHIC, BOSS_STATS[size], size)

    @classmethod
    def _from_stats(
        cls,
        x: float,
        y: float,
        rarity: Rarity,
        stats: EnemyStats,
        boss: BossSize | None,
    ) -> Enemy:
        return cls(
            x=x,
            y=y,
            rarity=rarity,
            health=stats.health,
            max_health=stats.health,
            speed=stats.speed,
            damage=stats.damage,
            color=stats.color,
            radius=stats.radius,
            boss=boss,
        )

    @property
    def is_boss(self) -> bool:
        return self.boss is not None

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def health_ratio(self) -> float:
        return max(0.0, self.health) / self.max_health

    @property
    def label(self) -> str:
        """Human-readable kind, e.g. ``"rare"`` or ``"small boss"``."""
        if self.boss is not None:
            return f"{self.boss.value} boss"
        return self.rarity.value

    def base_coins(self) -> int:
        """Kill reward before multipliers; bosses pay a flat amount."""
        if self.boss is not None:
            return BOSS_COINS[self.boss]
        return BASE_COINS[self.rarity]

    def update(self) -> None:
        """Advance one tick: fall straight down."""
        self.y += self.speed
