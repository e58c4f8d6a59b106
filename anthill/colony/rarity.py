"""Rarity tables — map a single random draw to a rarity tier.

Ants and enemies share the same five tiers.  A draw in ``[0, 100)`` is
tested against per-tier thresholds from rarest to most common; the
first threshold the draw falls under wins.  Thresholds are *not*
normalised: each tier is capped independently, and whatever is left
above the ``rare`` threshold is ``common``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator


class Rarity(Enum):
    """Rarity tier shared by ants and enemies."""

    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"


class Specialty(Enum):
    """Behavioural role of an ant, derived 1:1 from its rarity."""

    WORKER = "Worker"
    GATHERER = "Gatherer"
    WARRIOR = "Warrior"
    QUEEN = "Queen"
    MYTHIC = "Mythic"


SPECIALTY_BY_RARITY: dict[Rarity, Specialty] = {
    Rarity.COMMON: Specialty.WORKER,
    Rarity.RARE: Specialty.GATHERER,
    Rarity.EPIC: Specialty.WARRIOR,
    Rarity.LEGENDARY: Specialty.QUEEN,
    Rarity.MYTHIC: Specialty.MYTHIC,
}

# Checked rarest first.  Each entry: (tier, base threshold, step per shift, cap)
_ENEMY_TABLE: tuple[tuple[Rarity, int, int, int], ...] = (
    (Rarity.MYTHIC, 1, 2, 10),
    (Rarity.LEGENDARY, 5, 3, 20),
    (Rarity.EPIC, 20, 5, 40),
    (Rarity.RARE, 50, 5, 70),
)

# Ant spawns do not scale with level.
_ANT_TABLE: tuple[tuple[Rarity, int], ...] = (
    (Rarity.MYTHIC, 1),
    (Rarity.LEGENDARY, 5),
    (Rarity.EPIC, 20),
    (Rarity.RARE, 50),
)


def level_shift(level: int) -> int:
    """Return the rarity shift for a level: +1 every 10 levels."""
    return max(0, (level - 1) // 10)


def enemy_thresholds(shift: int) -> list[tuple[Rarity, int]]:
    """Return the capped enemy thresholds for a given level shift.

    Args:
        shift: Level-derived shift (see ``level_shift``).

    Returns:
        ``(rarity, threshold)`` pairs ordered rarest first.
    """
    return [
        (rarity, min(cap, base + shift * step))
        for rarity, base, step, cap in _ENEMY_TABLE
    ]


def _match(thresholds: list[tuple[Rarity, int]], roll: int) -> Rarity:
    for rarity, threshold in thresholds:
        if roll < threshold:
            return rarity
    return Rarity.COMMON


def roll_percent(rng: Generator) -> int:
    """Draw a uniform integer in ``[0, 100)``."""
    return int(rng.integers(0, 100))


def pick_enemy_rarity(shift: int, roll: int) -> Rarity:
    """Resolve an enemy rarity from a level shift and a draw in [0, 100).

    >>> pick_enemy_rarity(0, 0)
    <Rarity.MYTHIC: 'mythic'>
    """
    return _match(enemy_thresholds(shift), roll)


def pick_ant_rarity(roll: int) -> Rarity:
    """Resolve an ant spawn rarity from a draw in [0, 100)."""
    return _match(list(_ANT_TABLE), roll)


def random_enemy_rarity(level: int, rng: Generator) -> Rarity:
    """Roll an enemy rarity for the given player level."""
    return pick_enemy_rarity(level_shift(level), roll_percent(rng))


def random_ant_rarity(rng: Generator) -> Rarity:
    """Roll a rarity for a newly spawned ant."""
    return pick_ant_rarity(roll_percent(rng))
