"""SimulationEngine — the main tick loop and the player's input surface.

Owns all game state and advances it exactly once per tick in a fixed
order:

1. Clock (elapsed game time)
2. Colony (tunnel buffs, foraging, targeting, movement)
3. Water drain
4. Enemies (spawn roll, descent, off-screen removal)
5. Particles
6. Combat (collisions, kill rewards, dehydration)
7. Progression (achievements, passive upgrade bonuses)
8. Auto-save

Player actions (dig, gather, spawn, upgrade, codes, targeting) mutate
the same state directly between ticks.  While paused, ``step`` changes
nothing, but ``snapshot`` still works for rendering.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields

import numpy as np
from numpy.random import Generator

from anthill.colony.ant import ANT_RADIUS, Ant
from anthill.colony.colony import Colony
from anthill.combat.resolver import CombatResolver, is_colliding
from anthill.effects.particles import ParticleSystem
from anthill.enemies.enemy import Enemy
from anthill.enemies.spawner import advance_enemies, roll_spawn
from anthill.progression import codes
from anthill.progression.engine import Progress, ProgressionEngine
from anthill.progression.resources import Resources, UpgradeKind, Upgrades
from anthill.simulation.config import SimulationConfig
from anthill.simulation.context import SimulationContext
from anthill.simulation.messages import MessageLog
from anthill.simulation.persistence import PersistenceCodec, SaveStore
from anthill.simulation.snapshot import EntityView, Snapshot
from anthill.world.tunnel_map import TunnelMap

logger = logging.getLogger(__name__)

WATER_PER_ANT_PER_SECOND = 0.1
BASE_GATHER_CHANCE = 0.3
GATHER_CHANCE_PER_LEVEL = 0.1
MAX_GATHER_CHANCE = 0.95
BASE_WATER_YIELD = 10
WATER_YIELD_PER_LEVEL = 2.5
NUDGE_STEP = 5.0
MAX_RESTORED_ANTS = 1000


@dataclass
class SimulationEngine:
    """Drives the game forward tick by tick.

    Attributes:
        config: Loaded game configuration.
        store: Save file; defaults to ``config.save_path``.
        rng: Master seeded random generator.
        messages: Player message feed.
        ctx: Shared state (resources, colony, map, enemies, particles).
        progression: Economy rules and progression counters.
        combat: Collision and dehydration resolver.
        codec: Save-game encoder/decoder.
        paused: When True, ``step`` is a no-op.
        tunnels_dug: Dig actions used this game.
        tick: Ticks simulated this game.
    """

    config: SimulationConfig
    store: SaveStore | None = None
    rng: Generator = field(init=False)
    messages: MessageLog = field(init=False)
    ctx: SimulationContext = field(init=False)
    progression: ProgressionEngine = field(init=False)
    combat: CombatResolver = field(init=False)
    codec: PersistenceCodec = field(init=False)
    paused: bool = field(init=False, default=False)
    tunnels_dug: int = field(init=False, default=0)
    tick: int = field(init=False, default=0)
    _saved_minute: int = field(init=False, default=0, repr=False)

    def __post_init__(self) -> None:
        """Build RNG, collaborators and a fresh game from config."""
        self.rng = np.random.default_rng(self.config.seed)
        self.messages = MessageLog(maxlen=self.config.message_history)
        self.combat = CombatResolver(self.messages)
        self.codec = PersistenceCodec(defaults=self._starting_resources())
        if self.store is None:
            self.store = SaveStore(self.config.save_path)
        self._new_game()

    # -- Convenience accessors --

    @property
    def resources(self) -> Resources:
        return self.ctx.resources

    @property
    def upgrades(self) -> Upgrades:
        return self.ctx.upgrades

    @property
    def colony(self) -> Colony:
        return self.ctx.colony

    @property
    def enemies(self) -> list[Enemy]:
        return self.ctx.enemies

    @property
    def tunnel_map(self) -> TunnelMap:
        return self.ctx.tunnel_map

    @property
    def progress(self) -> Progress:
        return self.progression.progress

    # -- Tick loop --

    def step(self) -> None:
        """Advance the game by one tick, unless paused."""
        if self.paused:
            return

        ctx = self.ctx
        self.progress.game_time += 1.0 / self.config.tick_rate

        ctx.resources.food += ctx.colony.update(ctx, self.rng)

        ctx.resources.drain_water(
            ctx.resources.ants * WATER_PER_ANT_PER_SECOND / self.config.tick_rate,
        )

        enemy = roll_spawn(self.progress.level, ctx.arena_width, self.rng)
        if enemy is not None:
            ctx.enemies.append(enemy)
        ctx.enemies = advance_enemies(ctx.enemies, ctx.arena_height)

        ctx.particles.update()

        self.combat.resolve(ctx, self.progress, self.rng)

        self.progression.check_achievements(ctx)
        self.progression.apply_passive(ctx, self.rng)

        self._auto_save()
        self.tick += 1

    def run(self, ticks: int) -> None:
        """Run the game for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.step()

    # -- Player actions --

    def set_ant_target(self, index: int, x: float, y: float) -> bool:
        """Send ant number ``index`` toward ``(x, y)``.

        Returns:
            False if there is no such ant.
        """
        if not 0 <= index < len(self.colony.ants):
            return False
        self.colony.ants[index].set_target(x, y)
        return True

    def nudge_ant_target(self, dx: float, dy: float, index: int = 0) -> bool:
        """Shift an ant's target by ``(dx, dy)`` steps of 5 units."""
        if not 0 <= index < len(self.colony.ants):
            return False
        ant = self.colony.ants[index]
        ant.target_x += dx * NUDGE_STEP
        ant.target_y += dy * NUDGE_STEP
        return True

    def set_target_enemy(self, enemy: Enemy) -> bool:
        """Send every ant after ``enemy``.

        Returns:
            False if the enemy is no longer in the arena.
        """
        if enemy not in self.enemies:
            return False
        for ant in self.colony.ants:
            ant.chase(enemy)
        return True

    def enemy_at(self, x: float, y: float) -> Enemy | None:
        """Return the first enemy within collision range of a point."""
        for enemy in self.enemies:
            if is_colliding(x, y, enemy.x, enemy.y):
                return enemy
        return None

    def command_at(self, x: float, y: float) -> None:
        """Handle a click: attack the enemy there, or move the first ant."""
        enemy = self.enemy_at(x, y)
        if enemy is not None:
            self.set_target_enemy(enemy)
        else:
            self.set_ant_target(0, x, y)

    def dig(self) -> bool:
        """Spend dirt to dig a random tunnel, up to ``max_tunnels`` times."""
        limit = self.config.max_tunnels
        if self.tunnels_dug >= limit:
            self._post(f"Maximum tunnel limit reached! ({limit} tunnels max)")
            return False
        if not self.resources.spend("dirt", self.config.dig_cost):
            self._post("Not enough dirt to dig a tunnel.")
            return False
        self.tunnel_map.dig_random_tunnel(self.rng)
        self.tunnels_dug += 1
        self._post(
            f"Tunnel dug! Colony expanded. ({self.tunnels_dug}/{limit} tunnels)",
        )
        return True

    def gather_food(self) -> int:
        """Try to forage by hand.

        Returns:
            Food gained (0 on a miss).
        """
        level = self.upgrades[UpgradeKind.GATHER_EFFICIENCY]
        chance = min(
            MAX_GATHER_CHANCE,
            BASE_GATHER_CHANCE + level * GATHER_CHANCE_PER_LEVEL,
        )
        if self.rng.random() >= chance:
            self._post("No food found this time.")
            return 0
        amount = 1 + math.floor(level * 0.5)
        self.resources.food += amount
        self._post(f"Food gathered! (+{amount})")
        return amount

    def gather_water(self) -> int:
        """Fetch water; always succeeds."""
        level = self.upgrades[UpgradeKind.WATER_EFFICIENCY]
        amount = BASE_WATER_YIELD + math.floor(level * WATER_YIELD_PER_LEVEL)
        self.resources.water += amount
        self._post(f"Water gathered! (+{amount})")
        return amount

    def spawn_ant(self) -> Ant | None:
        """Pay food for a new ant of rolled rarity, within the population cap."""
        max_ants = self.progression.max_ants(self.ctx)
        cost = self.config.spawn_food_cost
        if self.resources.ants >= max_ants:
            self._post(
                f"Maximum ant limit reached for level {self.progress.level}! "
                f"({max_ants} ants max)",
            )
            return None
        if not self.resources.spend("food", cost):
            self._post(f"Not enough food to spawn an ant. Need {cost} food.")
            return None
        ant = self.colony.spawn_ant(self.rng, self.upgrades)
        self.resources.ants += 1
        self._post(
            f"New {ant.rarity.value} ant spawned for {cost} food! "
            f"({self.resources.ants}/{max_ants} ants)",
        )
        return ant

    def purchase_upgrades(self) -> list[UpgradeKind]:
        """Buy one level of every upgrade the player can afford."""
        return self.progression.purchase_all_affordable(self.ctx)

    def toggle_pause(self) -> bool:
        """Flip the pause flag; returns the new state."""
        self.paused = not self.paused
        self._post("Game paused" if self.paused else "Game resumed")
        return self.paused

    def redeem_code(self, code: str) -> bool:
        """Apply a redeemable code; unknown codes change nothing."""
        message = codes.redeem(code, self.ctx, self.progression, self.rng)
        if message is None:
            self._post("Invalid code. Try again!")
            return False
        self._post(message)
        return True

    def reset(self) -> None:
        """Delete the save and start a brand-new game."""
        self.store.delete()
        self._new_game()
        self._post("Game reset! Starting fresh.")

    # -- Persistence --

    def save_game(self) -> bool:
        """Write the persisted state to the save store."""
        payload = self.codec.encode(self.resources, self.upgrades, self.progress)
        ok = self.store.write(self.codec.dumps(payload))
        if ok:
            logger.debug("Saved game to %s", self.store.path)
        return ok

    def load_game(self) -> bool:
        """Restore persisted state from the save store, if there is one.

        The colony is grown or shrunk to the saved ant count, at most
        ``MAX_RESTORED_ANTS``, so the counter and the population agree.

        Returns:
            False if there was nothing to load.
        """
        text = self.store.read()
        if text is None:
            return False
        state = self.codec.loads(text)
        self.ctx.resources = state.resources
        self.ctx.upgrades = state.upgrades
        self.progression.progress = state.progress
        self._saved_minute = math.floor(state.progress.game_time) // 60

        colony = self.colony
        target = int(state.resources.ants)
        if target > MAX_RESTORED_ANTS:
            logger.warning(
                "Saved ant count %d exceeds the restore limit of %d",
                target,
                MAX_RESTORED_ANTS,
            )
            target = MAX_RESTORED_ANTS
        while len(colony.ants) < target:
            colony.spawn_ant(self.rng)
        del colony.ants[target:]
        colony.recompute_stats(self.upgrades)
        self.ctx.sync_ant_count()

        self._post("Game loaded successfully!")
        return True

    # -- Rendering --

    def snapshot(self) -> Snapshot:
        """Return a read-only view of the current state."""
        ants = tuple(
            EntityView(
                x=ant.x,
                y=ant.y,
                color=ant.color,
                radius=ANT_RADIUS,
                rarity=ant.rarity.value,
                health_ratio=ant.health_ratio,
                shiny=ant.shiny,
            )
            for ant in self.colony.ants
            if not ant.invisible
        )
        enemies = tuple(
            EntityView(
                x=enemy.x,
                y=enemy.y,
                color=enemy.color,
                radius=enemy.radius,
                rarity=enemy.rarity.value,
                health_ratio=enemy.health_ratio,
                boss=enemy.boss.value if enemy.boss is not None else None,
            )
            for enemy in self.enemies
        )
        particles = tuple(
            EntityView(x=p.x, y=p.y, color=p.color, radius=p.size)
            for p in self.ctx.particles.particles
        )
        return Snapshot(
            resources=self.resources.to_dict(),
            upgrades=self.upgrades.to_dict(),
            ants=ants,
            enemies=enemies,
            particles=particles,
            grid=self.tunnel_map.grid.copy(),
            cell_size=self.tunnel_map.cell_size,
            level=self.progress.level,
            enemies_killed=self.progress.enemies_killed,
            game_time=self.progress.game_time,
            paused=self.paused,
            tunnels_dug=self.tunnels_dug,
            max_tunnels=self.config.max_tunnels,
            max_ants=self.progression.max_ants(self.ctx),
            messages=tuple(self.messages.recent(8)),
        )

    # -- Internals --

    def _starting_resources(self) -> Resources:
        known = {f.name for f in fields(Resources)}
        return Resources(
            **{
                key: value
                for key, value in self.config.starting_resources.items()
                if key in known
            },
        )

    def _new_game(self) -> None:
        cfg = self.config
        self.ctx = SimulationContext(
            resources=self._starting_resources(),
            upgrades=Upgrades(),
            colony=Colony.founded(cfg.arena_width / 2, cfg.arena_height / 2),
            tunnel_map=TunnelMap(
                width=cfg.map_width,
                height=cfg.map_height,
                cell_size=cfg.cell_size,
            ),
            particles=ParticleSystem(enabled=cfg.particles_enabled),
            arena_width=cfg.arena_width,
            arena_height=cfg.arena_height,
        )
        self.ctx.sync_ant_count()
        self.progression = ProgressionEngine(Progress(), self.messages)
        self.paused = False
        self.tunnels_dug = 0
        self.tick = 0
        self._saved_minute = 0

    def _auto_save(self) -> None:
        """Save once each time game time enters a new minute."""
        if not self.config.auto_save:
            return
        minute = math.floor(self.progress.game_time) // 60
        if minute > self._saved_minute:
            self._saved_minute = minute
            self.save_game()

    def _post(self, message: str) -> None:
        self.messages.post(message)
