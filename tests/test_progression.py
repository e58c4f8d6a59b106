"""Tests for anthill.progression - achievements, upgrades, passives, codes."""

import math

import pytest
from numpy.random import Generator

from anthill.colony.rarity import Rarity
from anthill.progression.codes import CODES, normalise, redeem
from anthill.progression.engine import Progress, ProgressionEngine
from anthill.progression.resources import (
    MAX_UPGRADE_LEVEL,
    Resources,
    UpgradeKind,
    Upgrades,
)
from anthill.simulation.context import SimulationContext
from anthill.simulation.messages import MessageLog


@pytest.fixture
def progression() -> ProgressionEngine:
    return ProgressionEngine(messages=MessageLog())


class TestResources:
    """Tests for the resource pool and upgrade levels."""

    def test_defaults(self) -> None:
        res = Resources()
        assert res.to_dict() == {
            "coins": 1000,
            "food": 500,
            "water": 100.0,
            "ants": 1,
            "dirt": 0,
        }

    def test_spend_refuses_overdraft(self) -> None:
        res = Resources(food=3)
        assert not res.spend("food", 5)
        assert res.food == 3
        assert res.spend("food", 3)
        assert res.food == 0

    def test_water_saturates_at_zero(self) -> None:
        res = Resources(water=0.05)
        res.drain_water(0.1)
        assert res.water == 0.0

    @pytest.mark.parametrize(("level", "cost"), [(0, 100), (1, 150), (2, 225), (5, 759)])
    def test_upgrade_cost(self, level: int, cost: int) -> None:
        upgrades = Upgrades()
        upgrades.levels[UpgradeKind.ANT_SPEED] = level
        assert upgrades.cost(UpgradeKind.ANT_SPEED) == cost

    def test_upgrades_dict_roundtrip_keys(self) -> None:
        upgrades = Upgrades.from_dict({"antSpeed": 2, "bogus": 9})
        assert upgrades[UpgradeKind.ANT_SPEED] == 2
        assert upgrades[UpgradeKind.WATER_EFFICIENCY] == 0
        assert set(upgrades.to_dict()) == {kind.value for kind in UpgradeKind}

    def test_cost_past_float_range_is_unaffordable(self) -> None:
        upgrades = Upgrades()
        upgrades.levels[UpgradeKind.COLONY_SIZE] = 2000
        assert upgrades.cost(UpgradeKind.COLONY_SIZE) == math.inf
        assert not Resources(coins=10**18).can_afford("coins", math.inf)

    def test_increment_capped(self) -> None:
        upgrades = Upgrades()
        upgrades.levels[UpgradeKind.ANT_SPEED] = MAX_UPGRADE_LEVEL - 1
        assert upgrades.increment(UpgradeKind.ANT_SPEED, 5) == MAX_UPGRADE_LEVEL

    def test_from_dict_sanitises(self) -> None:
        upgrades = Upgrades.from_dict(
            {
                "antSpeed": 2.7,
                "antHealth": -1,
                "antDamage": "3",
                "colonySize": True,
                "gatherEfficiency": float("nan"),
                "waterEfficiency": 10**400,
            },
        )
        assert upgrades.to_dict() == {
            "antSpeed": 2,
            "antHealth": 0,
            "antDamage": 0,
            "colonySize": 0,
            "gatherEfficiency": 0,
            "waterEfficiency": MAX_UPGRADE_LEVEL,
        }


class TestLeveling:
    """Tests for kill counting."""

    def test_level_every_ten_kills(self) -> None:
        progress = Progress()
        gained = [progress.record_kill(5) for _ in range(25)]
        assert gained.count(True) == 2
        assert progress.level == 3
        assert progress.total_coins_earned == 125


class TestAchievements:
    """Tests for one-shot achievements."""

    def test_first_kill(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        progression.progress.enemies_killed = 1
        unlocked = progression.check_achievements(ctx)
        assert [a.id for a in unlocked] == ["firstKill"]
        assert ctx.resources.coins == 1100
        assert progression.messages.last == (
            "Achievement Unlocked: First Blood! +100 coins"
        )

    def test_bonus_paid_once(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        progression.progress.enemies_killed = 100
        progression.check_achievements(ctx)
        assert ctx.resources.coins == 1600
        assert progression.check_achievements(ctx) == []
        assert ctx.resources.coins == 1600

    def test_time_achievements(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        progression.progress.game_time = 3600.0
        ids = {a.id for a in progression.check_achievements(ctx)}
        assert ids == {"hydratedColony", "hourPlayed"}
        assert ctx.resources.coins == 1000 + 2000 + 1000

    def test_hydrated_ignores_water(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        ctx.resources.water = 0.0
        progression.progress.game_time = 300.0
        ids = {a.id for a in progression.check_achievements(ctx)}
        assert ids == {"hydratedColony"}

    def test_millionaire(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        progression.progress.total_coins_earned = 999_999
        assert progression.check_achievements(ctx) == []
        progression.progress.total_coins_earned = 1_000_000
        assert [a.id for a in progression.check_achievements(ctx)] == ["millionaire"]

    def test_unlock_without_bonus(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        assert progression.unlock("firstKill")
        assert not progression.unlock("firstKill")
        progression.progress.enemies_killed = 5
        assert progression.check_achievements(ctx) == []
        assert ctx.resources.coins == 1000


class TestPurchases:
    """Tests for upgrade purchases."""

    def test_purchase_spends_and_recomputes(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        assert progression.purchase(ctx, UpgradeKind.ANT_SPEED)
        assert ctx.resources.coins == 900
        assert ctx.upgrades[UpgradeKind.ANT_SPEED] == 1
        assert ctx.colony.ants[0].speed == pytest.approx(1.25)
        assert progression.cost(ctx, UpgradeKind.ANT_SPEED) == 150

    def test_purchase_refused_when_poor(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        ctx.resources.coins = 99
        assert not progression.purchase(ctx, UpgradeKind.ANT_DAMAGE)
        assert ctx.resources.coins == 99
        assert ctx.upgrades[UpgradeKind.ANT_DAMAGE] == 0

    def test_purchase_all_in_declaration_order(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        bought = progression.purchase_all_affordable(ctx)
        assert len(bought) == 6
        assert ctx.resources.coins == 400

    def test_purchase_all_stops_short(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        ctx.resources.coins = 250
        bought = progression.purchase_all_affordable(ctx)
        assert bought == [UpgradeKind.ANT_SPEED, UpgradeKind.ANT_HEALTH]
        assert ctx.resources.coins == 50

    def test_purchase_all_nothing_affordable(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        ctx.resources.coins = 0
        assert progression.purchase_all_affordable(ctx) == []
        assert progression.messages.last == "Not enough coins for any upgrade."

    def test_purchase_past_float_range_declined(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        ctx.upgrades.levels[UpgradeKind.COLONY_SIZE] = 2000
        ctx.resources.coins = 10**9
        bought = progression.purchase_all_affordable(ctx)
        assert UpgradeKind.COLONY_SIZE not in bought
        assert ctx.upgrades[UpgradeKind.COLONY_SIZE] == 2000

    def test_messages_logged_without_feed(
        self,
        ctx: SimulationContext,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        ctx.resources.coins = 0
        with caplog.at_level("DEBUG", logger="anthill.progression.engine"):
            ProgressionEngine().purchase_all_affordable(ctx)
        assert "Not enough coins for any upgrade." in caplog.messages

    def test_max_ants(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
    ) -> None:
        assert progression.max_ants(ctx) == 7
        ctx.upgrades.levels[UpgradeKind.COLONY_SIZE] = 2
        progression.progress.level = 3
        assert progression.max_ants(ctx) == 17


class TestPassives:
    """Tests for auto-food and auto-spawn."""

    def test_no_rolls_without_upgrades(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        scripted,
    ) -> None:
        rng = scripted(randoms=[0.0, 0.0])
        assert progression.apply_passive(ctx, rng) is None
        assert rng.randoms == [0.0, 0.0]

    def test_auto_food(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        scripted,
    ) -> None:
        ctx.upgrades.levels[UpgradeKind.GATHER_EFFICIENCY] = 5
        progression.apply_passive(ctx, scripted(randoms=[0.0]))
        assert ctx.resources.food == 501

    def test_auto_food_rounds_down_to_nothing(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        scripted,
    ) -> None:
        ctx.upgrades.levels[UpgradeKind.GATHER_EFFICIENCY] = 4
        progression.apply_passive(ctx, scripted(randoms=[0.0]))
        assert ctx.resources.food == 500

    def test_auto_spawn(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        scripted,
    ) -> None:
        ctx.upgrades.levels[UpgradeKind.COLONY_SIZE] = 1
        ant = progression.apply_passive(ctx, scripted(randoms=[0.0]))
        assert ant is not None
        assert ant.rarity is Rarity.MYTHIC
        assert ctx.resources.food == 495
        assert ctx.resources.ants == len(ctx.colony) == 2

    def test_auto_spawn_needs_food(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        scripted,
    ) -> None:
        ctx.upgrades.levels[UpgradeKind.COLONY_SIZE] = 1
        ctx.resources.food = 4
        assert progression.apply_passive(ctx, scripted(randoms=[0.0])) is None
        assert ctx.resources.food == 4
        assert len(ctx.colony) == 1


class TestCodes:
    """Tests for code redemption."""

    def test_normalise(self) -> None:
        assert normalise("  PiNk \n") == "pink"

    def test_all_codes_registered(self) -> None:
        assert len(CODES) == 20
        assert all(code == normalise(code) for code in CODES)

    def test_unknown_code(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        before = ctx.resources.to_dict()
        assert redeem("nope", ctx, progression, rng) is None
        assert ctx.resources.to_dict() == before

    def test_resource_code(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        message = redeem("MaxResources", ctx, progression, rng)
        assert message == (
            "Code redeemed! +5000 coins, +500 food, +200 water, +100 dirt!"
        )
        assert ctx.resources.coins == 6000
        assert ctx.resources.water == 300.0

    def test_codes_are_repeatable(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        redeem("bonuscoins", ctx, progression, rng)
        redeem("bonuscoins", ctx, progression, rng)
        assert ctx.resources.coins == 3000

    def test_pink_ant(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        redeem("pink", ctx, progression, rng)
        ant = ctx.colony.ants[-1]
        assert ant.color == "#FF1493"
        assert ant.invincible
        assert ant.shiny
        assert ctx.resources.ants == len(ctx.colony) == 2

    def test_ant_army(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        redeem("antarmy", ctx, progression, rng)
        assert ctx.resources.ants == len(ctx.colony) == 6

    def test_upgrade_code_recomputes(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        redeem("speedup", ctx, progression, rng)
        assert ctx.upgrades[UpgradeKind.ANT_SPEED] == 1
        assert ctx.colony.ants[0].speed == pytest.approx(1.25)
        assert ctx.resources.coins == 1000

    def test_rarity_ant_code(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        redeem("legendaryspawn", ctx, progression, rng)
        assert ctx.colony.ants[-1].rarity is Rarity.LEGENDARY

    def test_invincible_army(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        redeem("antarmy", ctx, progression, rng)
        redeem("invinciblearmy", ctx, progression, rng)
        assert all(ant.invincible for ant in ctx.colony.ants)

    def test_level_up(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        assert redeem("levelup", ctx, progression, rng) == (
            "Code redeemed! Level increased to 6!"
        )

    def test_achievement_hunter(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        redeem("achievementhunter", ctx, progression, rng)
        assert ctx.resources.coins == 6000
        assert progression.progress.is_unlocked("achievementHunter")

    def test_ultimate(
        self,
        ctx: SimulationContext,
        progression: ProgressionEngine,
        rng: Generator,
    ) -> None:
        redeem("ultimatecode", ctx, progression, rng)
        assert all(ctx.upgrades[kind] == 2 for kind in UpgradeKind)
        assert ctx.resources.dirt == 200
        assert ctx.colony.ants[0].speed == pytest.approx(1.25**2)
