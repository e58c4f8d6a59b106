"""Ant -- a single colony member moving in continuous arena space.

Each tick a live ant:

- **Tunnel buff**: steps through an explicit ``TunnelState`` machine.
  Standing on a tunnel tile while IDLE halts the ant for a while
  (STOPPED); once it sets off again it hits twice as hard for a long
  stretch (BUFFED) before returning to IDLE.
- **Specialty**: Gatherers and Mythic ants occasionally turn up a
  unit of food.
- **Auto-targeting**: the nearest enemy within detection range takes
  over the movement target, overriding any player-set target.
- **Movement**: steps toward its target without overshooting, and
  picks a new wander point now and then once it has arrived.

Stats derived from upgrades are recomputed only when upgrades change
(``recompute_stats``); they never drift on their own.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from anthill.colony.rarity import SPECIALTY_BY_RARITY, Rarity, Specialty
from anthill.progression.resources import UpgradeKind

if TYPE_CHECKING:
    from numpy.random import Generator

    from anthill.enemies.enemy import Enemy
    from anthill.progression.resources import Upgrades
    from anthill.simulation.context import SimulationContext

# -- Constants ---------------------------------------------------------------

BASE_DAMAGE = 10.0
STOP_TICKS = 120  # 2 s at 60 Hz
BUFF_TICKS = 3600  # 60 s at 60 Hz
BUFF_DAMAGE_FACTOR = 2.0
DETECTION_RADIUS = 150.0
ARRIVAL_THRESHOLD = 5.0
WANDER_CHANCE = 0.01
WANDER_RANGE = 100.0
EDGE_MARGIN = 5.0
FORAGE_CHANCE = 0.02
ANT_RADIUS = 5.0

SPEED_GROWTH = 1.25
DAMAGE_GROWTH = 1.35
STAT_CAP = 100.0
REGEN_PER_LEVEL = 0.5


@dataclass(frozen=True)
class AntStats:
    """Base stats for one rarity tier."""

    speed: float
    health: float
    color: str


ANT_STATS: dict[Rarity, AntStats] = {
    Rarity.COMMON: AntStats(1.0, 100.0, "#000000"),
    Rarity.RARE: AntStats(1.5, 150.0, "#C0C0C0"),
    Rarity.EPIC: AntStats(2.0, 200.0, "#8A2BE2"),
    Rarity.LEGENDARY: AntStats(2.5, 300.0, "#FFD700"),
    Rarity.MYTHIC: AntStats(3.0, 500.0, "#FF0000"),
}

# Coin multiplier for kills, by the rarity of the ant landing the blow.
COIN_MULTIPLIER: dict[Rarity, float] = {
    Rarity.COMMON: 1.0,
    Rarity.RARE: 1.5,
    Rarity.EPIC: 2.0,
    Rarity.LEGENDARY: 3.0,
    Rarity.MYTHIC: 5.0,
}


class TunnelState(Enum):
    """Phase of the tunnel-buff cycle."""

    IDLE = auto()
    STOPPED = auto()
    BUFFED = auto()


@dataclass
class TunnelBuff:
    """Tunnel-buff phase plus ticks remaining in it (0 while IDLE)."""

    state: TunnelState = TunnelState.IDLE
    ticks_left: int = 0

    def enter(self, state: TunnelState, ticks: int = 0) -> None:
        self.state = state
        self.ticks_left = ticks


def upgrade_multiplier(growth: float, level: int) -> float:
    """Return ``min(100, growth ** level)``.

    Levels at or past the cap saturate without evaluating the power.
    """
    if level >= math.log(STAT_CAP) / math.log(growth):
        return STAT_CAP
    return min(STAT_CAP, growth**level)


@dataclass(eq=False)
class Ant:
    """A single ant.

    Identity is the object itself; the colony tracks ants by reference.

    Attributes:
        x: Horizontal position in world units.
        y: Vertical position in world units.
        rarity: Rarity tier; fixes base stats, colour and specialty.
        target_x: Horizontal movement target.
        target_y: Vertical movement target.
        target_enemy: Enemy this ant is chasing, if any.
        invincible: Immune to combat and dehydration damage.
        invisible: Hidden from the renderer.
        shiny: Drawn with an extra glow.
        color: Display colour (defaults to the rarity colour).
        health: Current hit points, never above ``max_health``.
        max_health: Hit point ceiling.
        base_health: Hit points at spawn.
        speed: Movement per tick after upgrades.
        base_speed: Movement per tick before upgrades.
        damage: Damage per tick of contact, after upgrades and buffs.
        base_damage: Damage before upgrades and buffs.
        damage_multiplier: Upgrade factor applied to ``base_damage``.
        specialty: Behavioural role derived from rarity.
        tunnel: Tunnel-buff state machine.
    """

    x: float
    y: float
    rarity: Rarity = Rarity.COMMON
    target_x: float | None = None
    target_y: float | None = None
    target_enemy: Enemy | None = None
    invincible: bool = False
    invisible: bool = False
    shiny: bool = False
    color: str | None = None
    health: float = field(init=False)
    max_health: float = field(init=False)
    base_health: float = field(init=False)
    speed: float = field(init=False)
    base_speed: float = field(init=False)
    damage: float = field(init=False)
    base_damage: float = field(init=False, default=BASE_DAMAGE)
    damage_multiplier: float = field(init=False, default=1.0)
    specialty: Specialty = field(init=False)
    tunnel: TunnelBuff = field(init=False, default_factory=TunnelBuff)

    def __post_init__(self) -> None:
        """Apply the rarity's base stats."""
        stats = ANT_STATS[self.rarity]
        self.base_health = self.max_health = self.health = stats.health
        self.base_speed = self.speed = stats.speed
        self.damage = self.base_damage
        self.specialty = SPECIALTY_BY_RARITY[self.rarity]
        if self.color is None:
            self.color = stats.color
        if self.target_x is None:
            self.target_x = self.x
        if self.target_y is None:
            self.target_y = self.y

    @property
    def is_alive(self) -> bool:
        """Return True if this ant is still alive."""
        return self.health > 0

    @property
    def health_ratio(self) -> float:
        return max(0.0, self.health) / self.max_health

    @property
    def is_stopped(self) -> bool:
        return self.tunnel.state is TunnelState.STOPPED

    @property
    def is_buffed(self) -> bool:
        return self.tunnel.state is TunnelState.BUFFED

    @property
    def coin_multiplier(self) -> float:
        return COIN_MULTIPLIER[self.rarity]

    def set_target(self, x: float, y: float) -> None:
        """Point the ant at a position and stop chasing any enemy."""
        self.target_x = x
        self.target_y = y
        self.target_enemy = None

    def chase(self, enemy: Enemy) -> None:
        """Point the ant at an enemy and keep following it."""
        self.target_x = enemy.x
        self.target_y = enemy.y
        self.target_enemy = enemy

    def take_damage(self, amount: float) -> None:
        """Lose health unless invincible."""
        if not self.invincible:
            self.health -= amount

    def recompute_stats(self, upgrades: Upgrades) -> None:
        """Re-derive speed, damage and health from upgrade levels.

        Speed and damage scale exponentially with their upgrade level,
        each capped at 100x base.  The health upgrade does not raise
        the health ceiling; instead each recompute heals
        ``0.5 * level`` hit points, clamped to ``max_health``.

        Args:
            upgrades: Current upgrade levels.
        """
        self.speed = self.base_speed * upgrade_multiplier(
            SPEED_GROWTH,
            upgrades[UpgradeKind.ANT_SPEED],
        )
        self.damage_multiplier = upgrade_multiplier(
            DAMAGE_GROWTH,
            upgrades[UpgradeKind.ANT_DAMAGE],
        )
        self._apply_damage()
        regen = REGEN_PER_LEVEL * upgrades[UpgradeKind.ANT_HEALTH]
        self.health = min(self.max_health, self.health + regen)

    def update(self, ctx: SimulationContext, rng: Generator) -> int:
        """Perform one tick of buff bookkeeping, foraging and movement.

        Args:
            ctx: Shared simulation state (enemies, map, arena bounds).
            rng: Seeded random generator.

        Returns:
            Food found by this ant this tick.
        """
        food = 0
        if self._advance_tunnel(ctx):
            food = self._forage(rng)
            self._acquire_target(ctx.enemies)
            self._move(rng)
        self._clamp(ctx.arena_width, ctx.arena_height)
        return food

    # -- Private behaviour methods --

    def _apply_damage(self) -> None:
        factor = BUFF_DAMAGE_FACTOR if self.is_buffed else 1.0
        self.damage = self.base_damage * self.damage_multiplier * factor

    def _advance_tunnel(self, ctx: SimulationContext) -> bool:
        """Step the tunnel-buff machine.

        IDLE -> STOPPED when standing on a tunnel tile; STOPPED ->
        BUFFED once the stop runs out; BUFFED -> IDLE when the buff
        runs out.

        Returns:
            True if the ant may act and move this tick.
        """
        buff = self.tunnel
        if buff.state is TunnelState.IDLE:
            if ctx.tunnel_map.is_tunnel_at(self.x, self.y):
                buff.enter(TunnelState.STOPPED, STOP_TICKS)
                return False
            return True

        buff.ticks_left -= 1
        if buff.state is TunnelState.STOPPED:
            if buff.ticks_left > 0:
                return False
            buff.enter(TunnelState.BUFFED, BUFF_TICKS)
            self._apply_damage()
        elif buff.ticks_left <= 0:
            buff.enter(TunnelState.IDLE)
            self._apply_damage()
        return True

    def _forage(self, rng: Generator) -> int:
        if self.specialty in (Specialty.GATHERER, Specialty.MYTHIC):
            return 1 if rng.random() < FORAGE_CHANCE else 0
        return 0

    def _acquire_target(self, enemies: list[Enemy]) -> None:
        """Follow the chased enemy, then let the nearest one in range win."""
        if self.target_enemy is not None:
            if self.target_enemy.is_alive and self.target_enemy in enemies:
                self.target_x = self.target_enemy.x
                self.target_y = self.target_enemy.y
            else:
                self.target_enemy = None

        nearest: Enemy | None = None
        nearest_dist = math.inf
        for enemy in enemies:
            dist = math.hypot(enemy.x - self.x, enemy.y - self.y)
            if dist < nearest_dist:
                nearest, nearest_dist = enemy, dist

        if nearest is not None and nearest_dist < DETECTION_RADIUS:
            self.chase(nearest)

    def _move(self, rng: Generator) -> None:
        dx = self.target_x - self.x
        dy = self.target_y - self.y
        dist = math.hypot(dx, dy)
        if dist > ARRIVAL_THRESHOLD:
            step = min(self.speed, dist)
            self.x += dx / dist * step
            self.y += dy / dist * step
        elif rng.random() < WANDER_CHANCE:
            self.target_x = self.x + float(rng.uniform(-WANDER_RANGE, WANDER_RANGE))
            self.target_y = self.y + float(rng.uniform(-WANDER_RANGE, WANDER_RANGE))

    def _clamp(self, width: float, height: float) -> None:
        self.x = max(EDGE_MARGIN, min(width - EDGE_MARGIN, self.x))
        self.y = max(EDGE_MARGIN, min(height - EDGE_MARGIN, self.y))
