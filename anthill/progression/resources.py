"""Resources and upgrade levels — the player's economy state.

Five counters make up the resource pool.  Coins, food and dirt are
earned and spent; water drains continuously and gates survival; the
ant counter mirrors the colony population.  None of them may go
negative: spends are validated against the balance first.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

UPGRADE_BASE_COST = 100
UPGRADE_COST_GROWTH = 1.5
MAX_UPGRADE_LEVEL = 10_000


class UpgradeKind(Enum):
    """Purchasable upgrade tracks, in purchase order."""

    ANT_SPEED = "antSpeed"
    ANT_HEALTH = "antHealth"
    ANT_DAMAGE = "antDamage"
    COLONY_SIZE = "colonySize"
    GATHER_EFFICIENCY = "gatherEfficiency"
    WATER_EFFICIENCY = "waterEfficiency"


@dataclass
class Resources:
    """The shared resource pool.

    Attributes:
        coins: Spendable currency, earned from kills and achievements.
        food: Spent to spawn ants.
        water: Drains each tick; ants dehydrate at zero.
        ants: Living ant count, kept equal to ``len(colony.ants)``.
        dirt: Earned from kills, spent to dig tunnels.
    """

    coins: int = 1000
    food: int = 500
    water: float = 100.0
    ants: int = 1
    dirt: int = 0

    def can_afford(self, name: str, amount: float) -> bool:
        """Return True if the named counter holds at least ``amount``."""
        return getattr(self, name) >= amount

    def spend(self, name: str, amount: float) -> bool:
        """Deduct ``amount`` from the named counter if the balance allows.

        Returns:
            True if the spend went through, False (and no change)
            when the balance is too low.
        """
        if not self.can_afford(name, amount):
            return False
        setattr(self, name, getattr(self, name) - amount)
        return True

    def drain_water(self, amount: float) -> None:
        """Remove water, saturating at zero."""
        self.water = max(0.0, self.water - amount)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass
class Upgrades:
    """Integer level per upgrade kind; levels only ever go up."""

    levels: dict[UpgradeKind, int] = field(
        default_factory=lambda: {kind: 0 for kind in UpgradeKind},
    )

    def __getitem__(self, kind: UpgradeKind) -> int:
        return self.levels.get(kind, 0)

    def increment(self, kind: UpgradeKind, amount: int = 1) -> int:
        """Raise a level by ``amount`` (negative amounts are ignored).

        Returns:
            The new level.
        """
        self.levels[kind] = min(MAX_UPGRADE_LEVEL, self[kind] + max(0, amount))
        return self.levels[kind]

    def cost(self, kind: UpgradeKind) -> float:
        """Coin cost of the next level: ``floor(100 * 1.5 ** level)``.

        Once the cost no longer fits in a float it is ``inf``, which no
        balance can afford.
        """
        try:
            return math.floor(UPGRADE_BASE_COST * UPGRADE_COST_GROWTH ** self[kind])
        except OverflowError:
            return math.inf

    def to_dict(self) -> dict[str, int]:
        return {kind.value: self[kind] for kind in UpgradeKind}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Upgrades:
        """Build levels from a mapping keyed by upgrade name.

        Missing, non-numeric or negative entries become 0; levels are
        truncated to integers and capped at ``MAX_UPGRADE_LEVEL``.
        """
        upgrades = cls()
        for kind in UpgradeKind:
            value = data.get(kind.value)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            if value >= 0:
                upgrades.levels[kind] = int(min(value, MAX_UPGRADE_LEVEL))
        return upgrades
